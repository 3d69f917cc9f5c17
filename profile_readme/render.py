from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment, StrictUndefined, TemplateError

from .aggregate import sorted_topics
from .config import ConfigError
from .models import BadgeManifest, PinnedRepo, TopicCounts


def build_template_data(
    manifest: BadgeManifest,
    counts: TopicCounts,
    pinned: List[PinnedRepo],
    highlights: List[PinnedRepo],
) -> Dict[str, Any]:
    return {
        "sections": manifest,
        "topics": [{"name": name, "count": count} for name, count in sorted_topics(counts)],
        "repo_count": counts.get("git", 0),
        "pinned": [repo.to_dict() for repo in pinned],
        "highlights": [repo.to_dict() for repo in highlights],
    }


def render_markdown(template: str, data: Dict[str, Any]) -> str:
    environment = Environment(undefined=StrictUndefined, keep_trailing_newline=True, autoescape=False)
    try:
        return environment.from_string(template).render(**data)
    except TemplateError as exc:
        raise ConfigError(f"Failed to render README template: {exc}") from exc


def write_readme(template_path: Path, output_path: Path, data: Dict[str, Any]) -> Path:
    try:
        template = template_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read README template {template_path}: {exc}") from exc
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_markdown(template, data), encoding="utf-8")
    return output_path
