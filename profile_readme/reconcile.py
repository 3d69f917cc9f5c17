from __future__ import annotations

from dataclasses import replace
from typing import List, Set, Tuple

from .models import BadgeElement, BadgeSection, BadgeSpec, ReconcileReport, TopicCounts


def format_repo_count(count: int) -> str:
    return f"{count} Repos"


def reconcile(spec: BadgeSpec, counts: TopicCounts) -> Tuple[BadgeSpec, ReconcileReport]:
    """Fill topic-bound badge messages from ``counts``.

    Returns the annotated spec together with a coverage report: topics that
    badges ask for but no repository carries (``missing``) and counted topics
    that no badge shows (``unused``). The input spec is left untouched.
    """
    unused: Set[str] = set(counts)
    missing: Set[str] = set()
    sections: List[BadgeSection] = []

    for section in spec:
        elements: List[BadgeElement] = []
        for element in section.elements:
            topic = element.topic
            if topic is None:
                elements.append(element)
            elif topic in counts:
                unused.discard(topic)
                elements.append(replace(element, message=format_repo_count(counts[topic])))
            else:
                missing.add(topic)
                if element.message:
                    elements.append(element)
                else:
                    elements.append(replace(element, message=format_repo_count(0)))
        sections.append(replace(section, elements=tuple(elements)))

    report = ReconcileReport(missing=tuple(sorted(missing)), unused=tuple(sorted(unused)))
    return tuple(sections), report
