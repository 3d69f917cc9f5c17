from __future__ import annotations

import itertools
import unittest

from profile_readme.aggregate import aggregate_topics, sorted_topics


class AggregateTests(unittest.TestCase):
    def test_counts_with_default_topic(self) -> None:
        counts = aggregate_topics([["a", "b"], ["b"]])
        self.assertEqual(counts, {"a": 1, "b": 2, "git": 2})

    def test_order_independent(self) -> None:
        items = [["python", "cli"], ["python"], [], ["rust", "cli"]]
        expected = aggregate_topics([list(item) for item in items])
        for permutation in itertools.permutations(items):
            self.assertEqual(aggregate_topics([list(item) for item in permutation]), expected)

    def test_git_counts_every_repository(self) -> None:
        items = [["git"], [], ["docker", "git"], ["x"]]
        counts = aggregate_topics(items)
        self.assertEqual(counts["git"], len(items))

    def test_empty_input(self) -> None:
        self.assertEqual(aggregate_topics([]), {})

    def test_sorted_topics_by_count_then_name(self) -> None:
        self.assertEqual(
            sorted_topics({"b": 2, "a": 2, "git": 5, "c": 1}),
            [("git", 5), ("a", 2), ("b", 2), ("c", 1)],
        )


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
