from __future__ import annotations

from collections import Counter
from typing import Iterable

from .models import TopicCounts, TopicSet

DEFAULT_TOPIC = "git"


def aggregate_topics(items: Iterable[TopicSet]) -> TopicCounts:
    """Count how many repositories carry each topic.

    Every repository also counts toward ``DEFAULT_TOPIC``, so its count equals
    the number of repositories.
    """
    counter: Counter[str] = Counter()
    for topics in items:
        topics.append(DEFAULT_TOPIC)
        counter.update(set(topics))
    return dict(counter)


def sorted_topics(counts: TopicCounts) -> list[tuple[str, int]]:
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))
