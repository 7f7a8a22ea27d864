"""Team-map cache tests: keys, TTL expiry, and best-effort writes."""

from __future__ import annotations

import os
import tempfile
import time
import unittest
from pathlib import Path
from unittest import mock

from github_code_search import cache


class TeamCacheTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.cache_dir = Path(tmp.name) / "nested"
        patcher = mock.patch.dict(os.environ, {cache.CACHE_DIR_ENV: str(self.cache_dir)})
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_cache_dir_honours_environment_override(self) -> None:
        self.assertEqual(cache.get_cache_dir(), self.cache_dir)

    def test_key_is_order_independent_and_filename_safe(self) -> None:
        key = cache.get_cache_key("acme", ["squad-", "chapter/x"])

        self.assertEqual(key, cache.get_cache_key("acme", ["chapter/x", "squad-"]))
        self.assertEqual(key, "teams__acme__chapter_x__squad-.json")

    def test_round_trip_creates_directory(self) -> None:
        cache.write_cache("k.json", {"acme/a": ["squad-a"]})

        self.assertTrue((self.cache_dir / "k.json").is_file())
        self.assertEqual(cache.read_cache("k.json"), {"acme/a": ["squad-a"]})

    def test_missing_entry_reads_as_none(self) -> None:
        self.assertIsNone(cache.read_cache("absent.json"))

    def test_stale_entry_reads_as_none(self) -> None:
        cache.write_cache("k.json", {"x": []})
        stale = time.time() - cache.CACHE_TTL_SECONDS - 60
        os.utime(self.cache_dir / "k.json", (stale, stale))

        self.assertIsNone(cache.read_cache("k.json"))

    def test_corrupt_entry_reads_as_none(self) -> None:
        self.cache_dir.mkdir(parents=True)
        (self.cache_dir / "k.json").write_text("{oops", encoding="utf-8")

        self.assertIsNone(cache.read_cache("k.json"))

    def test_unserializable_data_is_not_written(self) -> None:
        with self.assertLogs("github_code_search.cache", level="DEBUG") as logs:
            cache.write_cache("k.json", {"x": object()})

        self.assertIn("could not write cache entry", logs.output[0])


if __name__ == "__main__":
    unittest.main()
