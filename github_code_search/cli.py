"""Command-line front door for github-code-search.

Parses CLI options, fetches and aggregates search results, optionally groups
them by team, then either prints them directly or opens the interactive picker.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

import requests

from . import __version__
from .api import GitHubAPIError, GitHubClient
from .cache import get_cache_key, read_cache, write_cache
from .config import (
    FORMAT_CHOICES,
    OUTPUT_TYPE_CHOICES,
    load_default_format,
    load_default_org,
    load_default_output_type,
    load_theme_name,
)
from .model import (
    RepoGroup,
    aggregate,
    attach_teams,
    flatten_team_sections,
    group_by_team_prefix,
    normalise_extract_ref,
    normalise_repo,
    parse_csv_list,
)
from .output import build_output
from .render.summary import build_summary
from .runtime import run_interactive
from .ui_theme import available_theme_names, resolve_theme

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="github-code-search",
        description="Interactive GitHub code search with per-repo aggregation.",
    )
    parser.add_argument("query", help="Search query.")
    parser.add_argument("--org", default=None, help="GitHub organization to search in.")
    parser.add_argument(
        "--exclude-repositories",
        default="",
        metavar="REPOS",
        help="Comma-separated repositories to exclude, short (repoA) or full (myorg/repoA) form.",
    )
    parser.add_argument(
        "--exclude-extracts",
        default="",
        metavar="REFS",
        help="Comma-separated extract refs to exclude, as repoName:path:matchIndex (org prefix optional).",
    )
    parser.add_argument(
        "--no-interactive",
        action="store_true",
        help="Print results without the picker. Also triggered by CI=true.",
    )
    parser.add_argument("--format", choices=FORMAT_CHOICES, default=None, help="Output format (default: markdown).")
    parser.add_argument(
        "--output-type",
        choices=OUTPUT_TYPE_CHOICES,
        default=None,
        help="Output type (default: repo-and-matches).",
    )
    parser.add_argument("--include-archived", action="store_true", help="Include archived repositories.")
    parser.add_argument(
        "--group-by-team-prefix",
        default="",
        metavar="PREFIXES",
        help=(
            "Comma-separated team-name prefixes used to group repos by GitHub team, e.g. squad-,chapter-. "
            "Repos matching no prefix go into 'other'."
        ),
    )
    parser.add_argument("--no-cache", action="store_true", help="Ignore the cached team list and refetch it.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--verbose", action="store_true", help="Log debug details to stderr.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )


def load_team_map(client: GitHubClient, org: str, prefixes: list[str], use_cache: bool = True) -> dict[str, list[str]]:
    """Team membership per repo, served from the on-disk cache when fresh."""
    key = get_cache_key(org, prefixes)
    if use_cache:
        cached = read_cache(key)
        if isinstance(cached, dict):
            logger.debug("using cached team list %s", key)
            return {repo: list(teams) for repo, teams in cached.items()}
    team_map = client.fetch_repo_teams(org, prefixes)
    write_cache(key, team_map)
    return team_map


def fetch_groups(
    client: GitHubClient,
    query: str,
    org: str,
    excluded_repos: list[str],
    excluded_extracts: list[str],
    include_archived: bool,
    prefixes: list[str],
    use_cache: bool = True,
) -> list[RepoGroup]:
    """Search, aggregate per repo, and apply team sectioning when prefixes are given."""
    matches = client.fetch_all_results(query, org)
    groups = aggregate(matches, set(excluded_repos), set(excluded_extracts), include_archived)
    if groups:
        logger.info("Found %s", build_summary(groups))
    if prefixes:
        attach_teams(groups, load_team_map(client, org, prefixes, use_cache))
        groups = flatten_team_sections(group_by_team_prefix(groups, prefixes))
    return groups


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments, run the search, and emit the selection."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    org = args.org or load_default_org()
    if not org:
        parser.error("--org is required (or set a default org in the config file)")
    token = os.environ.get("GITHUB_TOKEN", "").strip()
    if not token:
        raise SystemExit("Error: GITHUB_TOKEN environment variable is not set.")

    output_format = args.format or load_default_format() or "markdown"
    output_type = args.output_type or load_default_output_type() or "repo-and-matches"
    excluded_repos = list(dict.fromkeys(normalise_repo(org, r) for r in parse_csv_list(args.exclude_repositories)))
    excluded_extracts = list(
        dict.fromkeys(normalise_extract_ref(org, r) for r in parse_csv_list(args.exclude_extracts))
    )
    prefixes = parse_csv_list(args.group_by_team_prefix)
    non_interactive = args.no_interactive or os.environ.get("CI") == "true" or not sys.stdin.isatty()
    theme = resolve_theme(
        args.theme or load_theme_name(),
        no_color=args.no_color or bool(os.environ.get("NO_COLOR")),
    )

    client = GitHubClient(token)
    try:
        groups = fetch_groups(
            client,
            args.query,
            org,
            excluded_repos,
            excluded_extracts,
            args.include_archived,
            prefixes,
            use_cache=not args.no_cache,
        )
    except GitHubAPIError as exc:
        raise SystemExit(f"Error: {exc}") from exc
    except requests.RequestException as exc:
        raise SystemExit(f"Error: could not reach GitHub: {exc}") from exc
    finally:
        client.close()

    def emit(selection: list[RepoGroup]) -> None:
        output = build_output(
            selection,
            args.query,
            org,
            excluded_repos,
            excluded_extracts,
            output_format,
            output_type,
            include_archived=args.include_archived,
            group_by_team_prefix=",".join(prefixes),
        )
        sys.stdout.write(output + "\n")

    if non_interactive:
        emit(groups)
        return
    if not groups:
        sys.stdout.write("No results found.\n")
        return

    selection = run_interactive(groups, args.query, org, theme=theme)
    if selection is not None:
        emit(selection)


if __name__ == "__main__":
    main()
