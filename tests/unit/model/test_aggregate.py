"""Per-repository aggregation tests.

Covers first-seen ordering, exclusion refs, and archived-repo handling.
"""

from __future__ import annotations

import unittest

from github_code_search.model import (
    CodeMatch,
    aggregate,
    extract_ref,
    normalise_extract_ref,
    normalise_repo,
    parse_csv_list,
)


def _match(repo: str, path: str, archived: bool = False) -> CodeMatch:
    return CodeMatch(
        path=path,
        repo_full_name=repo,
        html_url=f"https://github.com/{repo}/blob/main/{path}",
        archived=archived,
    )


class AggregateTests(unittest.TestCase):
    def test_groups_keep_first_seen_repo_order(self) -> None:
        matches = [_match("org/b", "x.py"), _match("org/a", "y.py"), _match("org/b", "z.py")]

        groups = aggregate(matches, set(), set())

        self.assertEqual([g.repo_full_name for g in groups], ["org/b", "org/a"])
        self.assertEqual([m.path for m in groups[0].matches], ["x.py", "z.py"])

    def test_new_groups_are_folded_and_fully_selected(self) -> None:
        groups = aggregate([_match("org/a", "x.py"), _match("org/a", "y.py")], set(), set())

        group = groups[0]
        self.assertTrue(group.folded)
        self.assertTrue(group.repo_selected)
        self.assertEqual(group.extract_selected, [True, True])

    def test_aggregating_twice_yields_equal_groups(self) -> None:
        matches = [_match("org/a", "x.py"), _match("org/b", "y.py"), _match("org/a", "z.py")]

        first = aggregate(matches, set(), {"org/a:z.py:1"})
        second = aggregate(matches, set(), {"org/a:z.py:1"})

        self.assertEqual(first, second)

    def test_excluded_extract_ref_uses_index_within_repo(self) -> None:
        matches = [_match("r", "a"), _match("r", "b")]

        groups = aggregate(matches, set(), {"r:b:1"})

        self.assertEqual(len(groups), 1)
        self.assertEqual([m.path for m in groups[0].matches], ["a"])
        self.assertEqual(groups[0].extract_selected, [True])

    def test_kept_matches_remember_their_unfiltered_index(self) -> None:
        matches = [_match("r", "a"), _match("r", "b"), _match("r", "c")]

        group = aggregate(matches, set(), {"r:a:0"})[0]

        self.assertEqual([m.path for m in group.matches], ["b", "c"])
        self.assertEqual(group.match_indices, [1, 2])
        self.assertEqual(group.source_index(0), 1)

    def test_excluded_repo_is_dropped(self) -> None:
        matches = [_match("org/a", "x.py"), _match("org/b", "y.py")]

        groups = aggregate(matches, {"org/a"}, set())

        self.assertEqual([g.repo_full_name for g in groups], ["org/b"])

    def test_fully_archived_repo_depends_on_include_flag(self) -> None:
        matches = [_match("org/old", "x.py", archived=True), _match("org/new", "y.py")]

        without = aggregate(matches, set(), set(), include_archived=False)
        with_archived = aggregate(matches, set(), set(), include_archived=True)

        self.assertEqual([g.repo_full_name for g in without], ["org/new"])
        self.assertEqual([g.repo_full_name for g in with_archived], ["org/old", "org/new"])

    def test_mixed_archived_repo_keeps_every_match_either_way(self) -> None:
        matches = [_match("org/mixed", "a.py", archived=True), _match("org/mixed", "b.py")]

        for include in (False, True):
            with self.subTest(include_archived=include):
                groups = aggregate(matches, set(), set(), include_archived=include)
                self.assertEqual([m.path for m in groups[0].matches], ["a.py", "b.py"])


class ReferenceNormalisationTests(unittest.TestCase):
    def test_short_repo_names_get_org_prefix(self) -> None:
        self.assertEqual(normalise_repo("acme", " api "), "acme/api")
        self.assertEqual(normalise_repo("acme", "other/api"), "other/api")

    def test_extract_refs_normalise_only_repo_component(self) -> None:
        self.assertEqual(normalise_extract_ref("acme", "api:src/a.ts:0"), "acme/api:src/a.ts:0")
        self.assertEqual(normalise_extract_ref("acme", "x/api:src/a.ts:2"), "x/api:src/a.ts:2")
        self.assertEqual(normalise_extract_ref("acme", "no-colon"), "no-colon")

    def test_extract_ref_format(self) -> None:
        self.assertEqual(extract_ref("acme/api", "src/a.ts", 3), "acme/api:src/a.ts:3")

    def test_parse_csv_list_drops_blank_entries(self) -> None:
        self.assertEqual(parse_csv_list(" a, ,b ,"), ["a", "b"])
        self.assertEqual(parse_csv_list(""), [])
        self.assertEqual(parse_csv_list(None), [])


if __name__ == "__main__":
    unittest.main()
