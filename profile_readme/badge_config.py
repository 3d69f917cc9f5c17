"""Loading of the declarative badge document (data/badges.yaml)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .assets import element_badge_name, section_badge_name
from .config import ConfigError
from .models import BadgeElement, BadgeSection, BadgeSpec


def load_badge_spec(path: Path) -> BadgeSpec:
    """Parse the badge document; JSON files load too since JSON is valid YAML."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read badge configuration {path}: {exc}") from exc
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    return parse_badge_spec(raw, source=str(path))


def parse_badge_spec(raw: Any, source: str = "badge configuration") -> BadgeSpec:
    if not isinstance(raw, dict):
        raise ConfigError(f"{source} must contain a mapping of sections")

    sections: List[BadgeSection] = []
    badge_files: Dict[str, str] = {}
    for name, section_raw in raw.items():
        name = _file_safe(name, "Section", source)
        _claim(badge_files, section_badge_name(name), name, source)
        if not isinstance(section_raw, dict):
            raise ConfigError(f"Section '{name}' in {source} must be a mapping")
        elements_raw = section_raw.get("elements")
        if not isinstance(elements_raw, dict):
            raise ConfigError(f"Section '{name}' in {source} needs an 'elements' mapping")

        elements: List[BadgeElement] = []
        for key, element_raw in elements_raw.items():
            key = _file_safe(key, f"Element key in section '{name}'", source)
            _claim(badge_files, element_badge_name(name, key), f"{name}.{key}", source)
            if not isinstance(element_raw, dict) or not element_raw.get("label"):
                raise ConfigError(f"Element '{name}.{key}' in {source} needs a label")
            elements.append(
                BadgeElement(
                    key=key,
                    label=str(element_raw["label"]),
                    message=_opt(element_raw, "message"),
                    color=_opt(element_raw, "color"),
                    label_color=_opt(element_raw, "labelColor", "label_color"),
                    logo=_opt(element_raw, "logo"),
                    logo_color=_opt(element_raw, "logoColor", "logo_color"),
                    url=_opt(element_raw, "url"),
                    topic=_opt(element_raw, "topic"),
                )
            )

        sections.append(
            BadgeSection(
                name=name,
                message=str(section_raw.get("message") or name),
                color=_opt(section_raw, "color"),
                logo=_opt(section_raw, "logo"),
                logo_color=_opt(section_raw, "logoColor", "logo_color"),
                elements=tuple(elements),
            )
        )
    return tuple(sections)


def _file_safe(value: Any, what: str, source: str) -> str:
    """Names become badge file names, so they must stay inside the output directory."""
    text = "" if value is None else str(value)
    if not text.strip() or text in (".", "..") or "/" in text or "\\" in text:
        raise ConfigError(f"{what} {text!r} in {source} cannot be used as a file name")
    return text


def _claim(claimed: Dict[str, str], filename: str, owner: str, source: str) -> None:
    if filename in claimed:
        raise ConfigError(
            f"'{owner}' and '{claimed[filename]}' in {source} would both write {filename}"
        )
    claimed[filename] = owner


def _opt(raw: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return str(value)
    return None
