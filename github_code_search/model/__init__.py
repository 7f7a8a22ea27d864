"""Search-result model: datatypes, aggregation, and team sectioning."""

from .aggregate import (
    aggregate,
    extract_ref,
    normalise_extract_ref,
    normalise_repo,
    parse_csv_list,
)
from .grouping import OTHER_SECTION_LABEL, attach_teams, flatten_team_sections, group_by_team_prefix
from .types import (
    CodeMatch,
    OutputFormat,
    OutputType,
    RepoGroup,
    Row,
    Segment,
    TeamSection,
    TextMatch,
    count_label,
    primary_segment,
)

__all__ = [
    "CodeMatch",
    "OTHER_SECTION_LABEL",
    "OutputFormat",
    "OutputType",
    "RepoGroup",
    "Row",
    "Segment",
    "TeamSection",
    "TextMatch",
    "aggregate",
    "attach_teams",
    "count_label",
    "extract_ref",
    "flatten_team_sections",
    "group_by_team_prefix",
    "normalise_extract_ref",
    "normalise_repo",
    "parse_csv_list",
    "primary_segment",
]
