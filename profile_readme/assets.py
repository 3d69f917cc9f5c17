from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .logging import get_logger
from .logos import LogoResolver, normalize_color
from .models import BadgeManifest, BadgeSpec, RenderDefaults, ResolvedLogo

_logger = get_logger("assets")

BADGE_NAME_SEPARATOR = "_"


class BadgeRenderer(Protocol):
    def __call__(
        self,
        *,
        label: str,
        message: str,
        color: str,
        label_color: str,
        logo: Optional[str] = None,
    ) -> str:
        ...


class PyBadgesRenderer:
    """Draws flat SVG badges with ``pybadges``.

    An empty ``label`` yields a single-sided badge showing only the message;
    an empty ``message`` yields one showing only the label.
    """

    def __call__(
        self,
        *,
        label: str,
        message: str,
        color: str,
        label_color: str,
        logo: Optional[str] = None,
    ) -> str:
        import pybadges

        if not label:
            return pybadges.badge(left_text=message, left_color=color, logo=logo)
        if not message:
            return pybadges.badge(left_text=label, left_color=color, logo=logo)
        return pybadges.badge(
            left_text=label,
            right_text=message,
            left_color=label_color,
            right_color=color,
            logo=logo,
        )


def section_badge_name(section: str) -> str:
    return f"{section}.svg"


def element_badge_name(section: str, key: str) -> str:
    return f"{section}{BADGE_NAME_SEPARATOR}{key}.svg"


def clear_badges(output_dir: Path) -> int:
    output_dir.mkdir(parents=True, exist_ok=True)
    removed = 0
    for stale in sorted(output_dir.glob("*.svg")):
        stale.unlink()
        removed += 1
    return removed


def generate_badges(
    spec: BadgeSpec,
    output_dir: Path,
    resolver: LogoResolver,
    defaults: RenderDefaults,
    renderer: Optional[BadgeRenderer] = None,
) -> BadgeManifest:
    """Write one SVG per section and per element, and describe them in a manifest.

    Badges from a previous run are removed first so the directory only holds
    what the current configuration describes.
    """
    renderer = renderer or PyBadgesRenderer()
    removed = clear_badges(output_dir)
    if removed:
        _logger.debug("Removed %d stale badges from %s", removed, output_dir)

    manifest: BadgeManifest = {}
    for section in spec:
        section_logo = resolver.resolve(section.logo, section.logo_color)
        section_path = output_dir / section_badge_name(section.name)
        _write(
            section_path,
            renderer(
                label="",
                message=section.message,
                color=_badge_color(section.color, section_logo, defaults),
                label_color=normalize_color(defaults.label_color),
                logo=section_logo.data_uri if section_logo else None,
            ),
        )

        elements: Dict[str, Dict[str, Any]] = {}
        for element in section.elements:
            logo = resolver.resolve(element.logo, element.logo_color)
            element_path = output_dir / element_badge_name(section.name, element.key)
            _write(
                element_path,
                renderer(
                    label=element.label,
                    message=element.message or "",
                    color=_badge_color(element.color, logo, defaults),
                    label_color=normalize_color(element.label_color or defaults.label_color),
                    logo=logo.data_uri if logo else None,
                ),
            )
            elements[element.key] = {
                "badge": element_path.as_posix(),
                "label": element.label,
                "url": element.url,
            }

        manifest[section.name] = {
            "label": section.message,
            "badge": section_path.as_posix(),
            "elements": elements,
        }
        _logger.info("Rendered section %s with %d badges", section.name, len(elements))

    return manifest


def _badge_color(explicit: Optional[str], logo: Optional[ResolvedLogo], defaults: RenderDefaults) -> str:
    if explicit:
        return normalize_color(explicit)
    if logo is not None and logo.background:
        return logo.background
    return normalize_color(defaults.color)


def _write(path: Path, svg: str) -> None:
    path.write_text(svg, encoding="utf-8")
