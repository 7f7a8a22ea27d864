"""Search-result datatypes shared by aggregation, rendering, and output."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

OutputFormat = Literal["markdown", "json"]
OutputType = Literal["repo-only", "repo-and-matches"]
RowKind = Literal["repo", "extract", "section"]


@dataclass(frozen=True)
class Segment:
    """One matched substring inside a fragment.

    ``indices`` are ``[start, end)`` character offsets within the fragment.
    ``line``/``col`` are 1-based; absolute file positions when the raw file
    could be fetched, fragment-relative otherwise.
    """

    text: str
    indices: tuple[int, int]
    line: int
    col: int


@dataclass(frozen=True)
class TextMatch:
    """Verbatim snippet returned by the search backend plus its segments."""

    fragment: str
    matches: list[Segment] = field(default_factory=list)


@dataclass(frozen=True)
class CodeMatch:
    """One file hit in one repository."""

    path: str
    repo_full_name: str
    html_url: str
    text_matches: list[TextMatch] = field(default_factory=list)
    archived: bool = False


@dataclass
class RepoGroup:
    """All matches of one repository plus fold and selection state.

    ``extract_selected`` is parallel to ``matches``; ``repo_selected`` is
    kept equal to ``any(extract_selected)`` after every mutation.
    ``match_indices`` holds each kept match's position among all matches
    of the repository before extract exclusion; empty means unfiltered.
    """

    repo_full_name: str
    matches: list[CodeMatch]
    folded: bool = True
    repo_selected: bool = True
    extract_selected: list[bool] = field(default_factory=list)
    teams: list[str] | None = None
    section_label: str | None = None
    match_indices: list[int] = field(default_factory=list)

    def source_index(self, position: int) -> int:
        """Index of ``matches[position]`` within the unfiltered repo match list."""
        return self.match_indices[position] if self.match_indices else position


@dataclass(frozen=True)
class TeamSection:
    """One labelled run of repositories produced by team-prefix grouping."""

    label: str
    groups: list[RepoGroup]


@dataclass(frozen=True)
class Row:
    """One entry of the flattened list; indexes into the ``RepoGroup`` list."""

    kind: RowKind
    repo_index: int = -1
    extract_index: int | None = None
    section_label: str | None = None


def primary_segment(match: CodeMatch) -> Segment | None:
    """Return the earliest segment of the first fragment, if any."""
    if not match.text_matches:
        return None
    segments = match.text_matches[0].matches
    if not segments:
        return None
    return min(segments, key=lambda seg: seg.indices[0])


def count_label(count: int, singular: str, plural: str | None = None) -> str:
    """Format ``count`` with a singular/plural noun."""
    noun = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {noun}"
