"""Logo lookup across icon packs.

Each provider owns a namespace of logo identifiers. ``local:<name>`` maps to
an SVG file in the icons directory, ``si:<slug>`` (or a bare slug) to the
Simple Icons pack. The resolver asks providers in order and embeds the
first hit as a recoloured ``data:`` URI.
"""

from __future__ import annotations

import base64
import re
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Sequence

from .logging import get_logger
from .models import IconSource, RenderDefaults, ResolvedLogo

LOCAL_PREFIX = "local:"
SIMPLE_ICONS_PREFIX = "si:"

_HEX_COLOR = re.compile(r"^(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_FILL_ATTR = re.compile(r"""fill=(["'])[^"']*\1""")
_SVG_OPEN = re.compile(r"<svg\b")
_FILL_VALUE = re.compile(r"""fill=(["'])([^"']*)\1""")
_NON_COLORS = {"none", "currentcolor", "inherit", "transparent"}

_logger = get_logger("logos")


class IconProvider(Protocol):
    def recognizes(self, logo_id: str) -> bool:
        ...

    def resolve(self, logo_id: str) -> IconSource:
        ...


def normalize_color(value: str) -> str:
    """Prefix bare hex values with ``#``; named colours pass through."""
    value = value.strip()
    if _HEX_COLOR.match(value):
        return f"#{value}"
    return value


def recolor_svg(svg: str, color: str) -> str:
    if _FILL_ATTR.search(svg):
        return _FILL_ATTR.sub(f'fill="{color}"', svg)
    return _SVG_OPEN.sub(f'<svg fill="{color}"', svg, count=1)


def intrinsic_fill(svg: str) -> Optional[str]:
    for match in _FILL_VALUE.finditer(svg):
        value = match.group(2).strip()
        if value and value.lower() not in _NON_COLORS and not value.startswith("url("):
            return normalize_color(value)
    return None


def to_data_uri(svg: str) -> str:
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


def slugify(name: str) -> str:
    lowered = name.strip().lower()
    lowered = lowered.replace("+", "plus").replace(".", "dot").replace("&", "and")
    return re.sub(r"[^a-z0-9]", "", lowered)


class LocalIconProvider:
    """Icons shipped with the profile, e.g. ``local:my-logo`` -> icons/my-logo.svg.

    The first concrete ``fill`` in the file is the icon's own colour; files
    without one have none.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path(self, logo_id: str) -> Optional[Path]:
        if not logo_id.startswith(LOCAL_PREFIX):
            return None
        name = logo_id[len(LOCAL_PREFIX):].strip()
        if not name or "/" in name or "\\" in name:
            return None
        return self.directory / f"{name}.svg"

    def recognizes(self, logo_id: str) -> bool:
        path = self._path(logo_id)
        return path is not None and path.is_file()

    def resolve(self, logo_id: str) -> IconSource:
        path = self._path(logo_id)
        if path is None:
            raise KeyError(logo_id)
        svg = path.read_text(encoding="utf-8")
        return IconSource(svg=svg, color=intrinsic_fill(svg))


class SimpleIconsProvider:
    """Brand icons from the ``simpleicons`` package, coloured with the brand hex."""

    def __init__(self, icons: Optional[Dict[str, Any]] = None) -> None:
        self._icons = icons

    def _catalog(self) -> Dict[str, Any]:
        if self._icons is None:
            from simpleicons.all import icons  # builds the whole catalog

            self._icons = icons
        return self._icons

    @staticmethod
    def _slug(logo_id: str) -> Optional[str]:
        if logo_id.startswith(SIMPLE_ICONS_PREFIX):
            logo_id = logo_id[len(SIMPLE_ICONS_PREFIX):]
        elif ":" in logo_id:
            return None
        slug = slugify(logo_id)
        return slug or None

    def _lookup(self, logo_id: str) -> Optional[Any]:
        slug = self._slug(logo_id)
        if slug is None:
            return None
        return self._catalog().get(slug)

    def recognizes(self, logo_id: str) -> bool:
        return self._lookup(logo_id) is not None

    def resolve(self, logo_id: str) -> IconSource:
        icon = self._lookup(logo_id)
        if icon is None:
            raise KeyError(logo_id)
        return IconSource(svg=icon.svg, color=normalize_color(icon.hex))


class LogoResolver:
    def __init__(self, providers: Sequence[IconProvider], defaults: RenderDefaults) -> None:
        self.providers = tuple(providers)
        self.defaults = defaults

    @classmethod
    def default(cls, icons_dir: Path, defaults: RenderDefaults) -> "LogoResolver":
        return cls([LocalIconProvider(icons_dir), SimpleIconsProvider()], defaults)

    def resolve(self, logo_id: Optional[str], override_color: Optional[str] = None) -> Optional[ResolvedLogo]:
        """First provider owning ``logo_id`` wins; ``None`` means render without a logo."""
        if not logo_id:
            return None
        for provider in self.providers:
            if not provider.recognizes(logo_id):
                continue
            source = provider.resolve(logo_id)
            chosen = override_color or source.color
            color = normalize_color(chosen or self.defaults.logo_color)
            return ResolvedLogo(
                data_uri=to_data_uri(recolor_svg(source.svg, color)),
                color=color,
                background=color if chosen else None,
            )
        _logger.debug("No icon provider recognizes logo %r", logo_id)
        return None
