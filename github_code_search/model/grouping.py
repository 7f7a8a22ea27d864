"""Team-prefix sectioning of repository groups.

Partitions groups into labelled sections by matching team names, then
flattens the sections back into one list with section labels stamped on.
"""

from __future__ import annotations

from dataclasses import replace

from .types import RepoGroup, TeamSection

OTHER_SECTION_LABEL = "other"


def _matching_teams(group: RepoGroup, prefix: str) -> list[str]:
    folded_prefix = prefix.lower()
    return [team for team in (group.teams or []) if team.lower().startswith(folded_prefix)]


def attach_teams(groups: list[RepoGroup], team_map: dict[str, list[str]]) -> None:
    """Copy team membership onto each group; unknown repos get no teams."""
    for group in groups:
        group.teams = list(team_map.get(group.repo_full_name, []))


def group_by_team_prefix(groups: list[RepoGroup], prefixes: list[str]) -> list[TeamSection]:
    """Partition ``groups`` into sections, one prefix at a time.

    For each prefix the still-unassigned groups with at least one matching
    team are bucketed by how many of their teams match (ascending), and
    each bucket is split by the sorted ``" + "``-joined team combination,
    emitted alphabetically. A group is assigned to the first prefix it
    matches. Leftovers form a trailing ``"other"`` section.
    """
    sections: list[TeamSection] = []
    remaining = list(groups)

    for prefix in prefixes:
        by_count: dict[int, list[RepoGroup]] = {}
        still_remaining: list[RepoGroup] = []
        for group in remaining:
            matching = _matching_teams(group, prefix)
            if not matching:
                still_remaining.append(group)
                continue
            by_count.setdefault(len(matching), []).append(group)
        remaining = still_remaining

        for count in sorted(by_count):
            by_label: dict[str, list[RepoGroup]] = {}
            for group in by_count[count]:
                label = " + ".join(sorted(_matching_teams(group, prefix)))
                by_label.setdefault(label, []).append(group)
            for label in sorted(by_label):
                sections.append(TeamSection(label=label, groups=by_label[label]))

    if remaining:
        sections.append(TeamSection(label=OTHER_SECTION_LABEL, groups=remaining))
    return sections


def flatten_team_sections(sections: list[TeamSection]) -> list[RepoGroup]:
    """Concatenate sections into new group objects.

    Only the first group of each section carries ``section_label``; the
    input groups are left untouched.
    """
    flattened: list[RepoGroup] = []
    for section in sections:
        for idx, group in enumerate(section.groups):
            flattened.append(
                replace(
                    group,
                    matches=list(group.matches),
                    extract_selected=list(group.extract_selected),
                    teams=list(group.teams) if group.teams is not None else None,
                    section_label=section.label if idx == 0 else None,
                )
            )
    return flattened
