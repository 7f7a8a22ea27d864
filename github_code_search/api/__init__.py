"""GitHub API access: search, raw-file line resolution, and team listing."""

from .client import (
    GitHubAPIError,
    GitHubClient,
    compute_fragment_start_line,
    parse_code_item,
    segment_line_col,
    to_raw_url,
)
from .retry import fetch_with_retry, paginated_fetch, retry_delay

__all__ = [
    "GitHubAPIError",
    "GitHubClient",
    "compute_fragment_start_line",
    "fetch_with_retry",
    "paginated_fetch",
    "parse_code_item",
    "retry_delay",
    "segment_line_col",
    "to_raw_url",
]
