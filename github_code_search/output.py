"""Markdown/JSON serialization of the final selection and its replay command.

The replay command is a non-interactive invocation that reproduces the
selection: every deselected repo or extract becomes an exclusion flag.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .model.aggregate import extract_ref
from .model.types import CodeMatch, OutputFormat, OutputType, RepoGroup, count_label, primary_segment
from .render.summary import build_selection_summary

PROGRAM_NAME = "github-code-search"
DEFAULT_FORMAT: OutputFormat = "markdown"
DEFAULT_OUTPUT_TYPE: OutputType = "repo-and-matches"


@dataclass(frozen=True)
class ReplayOptions:
    format: OutputFormat = DEFAULT_FORMAT
    output_type: OutputType = DEFAULT_OUTPUT_TYPE
    include_archived: bool = False
    group_by_team_prefix: str = ""


def short_repo(full: str, org: str) -> str:
    """Strip the ``org/`` prefix for compact replay flags."""
    prefix = f"{org}/"
    return full[len(prefix) :] if full.startswith(prefix) else full


def short_extract_ref(full: str, org: str) -> str:
    repo_part, sep, rest = full.partition(":")
    if not sep:
        return full
    return f"{short_repo(repo_part, org)}:{rest}"


def _selected_matches(group: RepoGroup) -> list[CodeMatch]:
    return [m for m, flag in zip(group.matches, group.extract_selected) if flag]


def _excluded_repo_list(groups: list[RepoGroup], org: str, excluded_repos: Iterable[str]) -> list[str]:
    refs = [short_repo(repo, org) for repo in excluded_repos]
    refs.extend(short_repo(g.repo_full_name, org) for g in groups if not g.repo_selected)
    return list(dict.fromkeys(refs))


def _excluded_extract_list(groups: list[RepoGroup], org: str, excluded_extract_refs: Iterable[str]) -> list[str]:
    refs = [short_extract_ref(ref, org) for ref in excluded_extract_refs]
    for group in groups:
        if not group.repo_selected:
            continue
        for position, (match, flag) in enumerate(zip(group.matches, group.extract_selected)):
            if not flag:
                ref = extract_ref(group.repo_full_name, match.path, group.source_index(position))
                refs.append(short_extract_ref(ref, org))
    return list(dict.fromkeys(refs))


def build_replay_command(
    groups: list[RepoGroup],
    query: str,
    org: str,
    excluded_repos: Iterable[str] = (),
    excluded_extract_refs: Iterable[str] = (),
    options: ReplayOptions | None = None,
) -> str:
    """Return ``# Replay:`` followed by a backslash-continued shell command."""
    options = options if options is not None else ReplayOptions()
    parts = [f"{PROGRAM_NAME} {json.dumps(query, ensure_ascii=False)} --org {org} --no-interactive"]

    repos = _excluded_repo_list(groups, org, excluded_repos)
    if repos:
        parts.append(f"--exclude-repositories {','.join(repos)}")
    extracts = _excluded_extract_list(groups, org, excluded_extract_refs)
    if extracts:
        parts.append(f"--exclude-extracts {','.join(extracts)}")

    if options.format != DEFAULT_FORMAT:
        parts.append(f"--format {options.format}")
    if options.output_type != DEFAULT_OUTPUT_TYPE:
        parts.append(f"--output-type {options.output_type}")
    if options.include_archived:
        parts.append("--include-archived")
    if options.group_by_team_prefix:
        parts.append(f"--group-by-team-prefix {options.group_by_team_prefix}")

    return "# Replay:\n" + " \\\n  ".join(parts)


def build_replay_details(
    groups: list[RepoGroup],
    query: str,
    org: str,
    excluded_repos: Iterable[str] = (),
    excluded_extract_refs: Iterable[str] = (),
    options: ReplayOptions | None = None,
) -> str:
    """Wrap the replay command in a collapsible markdown ``<details>`` block."""
    command = build_replay_command(groups, query, org, excluded_repos, excluded_extract_refs, options)
    command = command.removeprefix("# Replay:\n")
    return "\n".join(
        [
            "<details>",
            "<summary>replay command</summary>",
            "",
            "```bash",
            command,
            "```",
            "",
            "</details>",
        ]
    )


def _markdown_match_line(match: CodeMatch) -> str:
    segment = primary_segment(match)
    if segment is None:
        return f"  - [ ] [{match.path}]({match.html_url})"
    return f"  - [ ] [{match.path}:{segment.line}:{segment.col}]({match.html_url}#L{segment.line})"


def build_markdown_output(
    groups: list[RepoGroup],
    query: str,
    org: str,
    excluded_repos: Iterable[str] = (),
    excluded_extract_refs: Iterable[str] = (),
    output_type: OutputType = DEFAULT_OUTPUT_TYPE,
    options: ReplayOptions | None = None,
) -> str:
    """Render the selection as a markdown task list plus replay block.

    ``repo-only`` prints just the selected repository names. Section
    headers precede the first printed repository of each team section.
    """
    excluded_repos = list(excluded_repos)
    excluded_extract_refs = list(excluded_extract_refs)
    details = build_replay_details(groups, query, org, excluded_repos, excluded_extract_refs, options)

    if output_type == "repo-only":
        repos = [g.repo_full_name for g in groups if g.repo_selected and _selected_matches(g)]
        if not repos:
            return ""
        return "\n".join(repos) + "\n\n" + details + "\n"

    lines = [build_selection_summary(groups), ""]
    current_section: str | None = None
    printed_section: str | None = None
    for group in groups:
        if group.section_label is not None:
            current_section = group.section_label
        if not group.repo_selected:
            continue
        matches = _selected_matches(group)
        if not matches:
            continue
        if current_section is not None and current_section != printed_section:
            lines.extend([f"## {current_section}", ""])
            printed_section = current_section
        lines.append(f"- **{group.repo_full_name}** ({count_label(len(matches), 'match', 'matches')})")
        lines.extend(_markdown_match_line(m) for m in matches)

    lines.extend(["", details])
    return "\n".join(lines)


def build_json_output(
    groups: list[RepoGroup],
    query: str,
    org: str,
    excluded_repos: Iterable[str] = (),
    excluded_extract_refs: Iterable[str] = (),
    output_type: OutputType = DEFAULT_OUTPUT_TYPE,
    options: ReplayOptions | None = None,
) -> str:
    results: list[dict[str, Any]] = []
    for group in groups:
        if not group.repo_selected:
            continue
        if output_type == "repo-only":
            results.append({"repo": group.repo_full_name})
            continue
        matches: list[dict[str, Any]] = []
        for match in _selected_matches(group):
            entry: dict[str, Any] = {"path": match.path, "url": match.html_url}
            segment = primary_segment(match)
            if segment is not None:
                entry["line"] = segment.line
                entry["col"] = segment.col
            matches.append(entry)
        if matches:
            results.append({"repo": group.repo_full_name, "matches": matches})

    payload = {
        "query": query,
        "org": org,
        "selection": {
            "repos": sum(1 for g in groups if g.repo_selected),
            "matches": sum(1 for g in groups for flag in g.extract_selected if flag),
        },
        "results": results,
        "replayCommand": build_replay_command(groups, query, org, excluded_repos, excluded_extract_refs, options),
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def build_output(
    groups: list[RepoGroup],
    query: str,
    org: str,
    excluded_repos: Iterable[str],
    excluded_extract_refs: Iterable[str],
    format: OutputFormat,
    output_type: OutputType = DEFAULT_OUTPUT_TYPE,
    *,
    include_archived: bool = False,
    group_by_team_prefix: str = "",
) -> str:
    """Serialize the selection in ``format``, forwarding options into the replay command."""
    options = ReplayOptions(
        format=format,
        output_type=output_type,
        include_archived=include_archived,
        group_by_team_prefix=group_by_team_prefix,
    )
    builder = build_json_output if format == "json" else build_markdown_output
    return builder(
        groups,
        query,
        org,
        list(excluded_repos),
        list(excluded_extract_refs),
        output_type,
        options,
    )
