from __future__ import annotations

import tempfile
import unittest
from datetime import timedelta
from pathlib import Path

from profile_readme.cache import DEFAULT_TTL, CacheStore


class FakeClock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class CacheStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.directory = Path(self._tmp.name) / "cache"
        self.clock = FakeClock(1_700_000_000.0)
        self.store = CacheStore(self.directory, clock=self.clock)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_entry_is_absent(self) -> None:
        self.assertIsNone(self.store.get_if_fresh("topics"))

    def test_round_trip_within_ttl(self) -> None:
        self.store.put("topics", {"python": 3, "git": 5})
        self.clock.now += 60
        self.assertEqual(self.store.get_if_fresh("topics"), {"python": 3, "git": 5})

    def test_freshness_boundary(self) -> None:
        ttl = timedelta(days=7)
        self.store.put("topics", {"git": 1})
        written = self.clock.now

        self.clock.now = written + ttl.total_seconds() - 1
        self.assertEqual(self.store.get_if_fresh("topics", ttl), {"git": 1})

        self.clock.now = written + ttl.total_seconds() + 1
        self.assertIsNone(self.store.get_if_fresh("topics", ttl))

    def test_default_ttl_is_seven_days(self) -> None:
        self.assertEqual(DEFAULT_TTL, timedelta(days=7))

    def test_corrupt_entry_is_absent(self) -> None:
        self.directory.mkdir(parents=True)
        self.store.path_for("pinned").write_text("{not json", encoding="utf-8")
        self.assertIsNone(self.store.get_if_fresh("pinned"))

    def test_put_replaces_stale_entry_and_leaves_no_temp_files(self) -> None:
        self.store.put("pinned", [{"name": "old"}])
        self.clock.now += timedelta(days=10).total_seconds()
        self.assertIsNone(self.store.get_if_fresh("pinned"))

        self.store.put("pinned", [{"name": "new"}])
        self.assertEqual(self.store.get_if_fresh("pinned"), [{"name": "new"}])
        self.assertEqual(sorted(path.name for path in self.directory.iterdir()), ["pinned.json"])

    def test_keys_are_independent(self) -> None:
        self.store.put("topics", {"git": 2})
        self.store.put("pinned", [])
        self.assertEqual(self.store.get_if_fresh("topics"), {"git": 2})
        self.assertEqual(self.store.get_if_fresh("pinned"), [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
