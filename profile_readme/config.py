from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import RenderDefaults


DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


class ConfigError(RuntimeError):
    """Raised when a settings, badge or template file cannot be used."""


@dataclass(slots=True)
class GitHubConfig:
    token_env: str = "GITHUB_TOKEN"
    visibility: str = "all"
    concurrency: int = 100
    pinned_limit: int = 6
    search_query: Optional[str] = None
    search_max_pages: int = 1


@dataclass(slots=True)
class CacheConfig:
    directory: Path = Path(".cache")
    ttl_days: float = 7


@dataclass(slots=True)
class BadgeConfig:
    config: Path = Path("data/badges.yaml")
    output_dir: Path = Path("assets/badges")
    icons_dir: Path = Path("assets/icons")
    default_color: str = "#555"
    default_label_color: str = "#555"
    default_logo_color: str = "whitesmoke"

    def defaults(self) -> RenderDefaults:
        return RenderDefaults(
            color=self.default_color,
            label_color=self.default_label_color,
            logo_color=self.default_logo_color,
        )


@dataclass(slots=True)
class OutputConfig:
    template: Path = Path("templates/readme.md.j2")
    path: Path = Path("README.md")


@dataclass(slots=True)
class AppConfig:
    github: GitHubConfig = field(default_factory=GitHubConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    badges: BadgeConfig = field(default_factory=BadgeConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(path: Optional[Path] = None) -> AppConfig:
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        return AppConfig()

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {config_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the root")

    github_raw = _section(raw, "github", config_path)
    cache_raw = _section(raw, "cache", config_path)
    badges_raw = _section(raw, "badges", config_path)
    output_raw = _section(raw, "output", config_path)

    search_query = github_raw.get("search_query")
    try:
        config = AppConfig(
            github=GitHubConfig(
                token_env=str(github_raw.get("token_env", "GITHUB_TOKEN")),
                visibility=str(github_raw.get("visibility", "all")),
                concurrency=int(github_raw.get("concurrency", 100)),
                pinned_limit=int(github_raw.get("pinned_limit", 6)),
                search_query=str(search_query) if search_query else None,
                search_max_pages=int(github_raw.get("search_max_pages", 1)),
            ),
            cache=CacheConfig(
                directory=Path(cache_raw.get("directory", ".cache")),
                ttl_days=float(cache_raw.get("ttl_days", 7)),
            ),
            badges=BadgeConfig(
                config=Path(badges_raw.get("config", "data/badges.yaml")),
                output_dir=Path(badges_raw.get("output_dir", "assets/badges")),
                icons_dir=Path(badges_raw.get("icons_dir", "assets/icons")),
                default_color=str(badges_raw.get("default_color", "#555")),
                default_label_color=str(badges_raw.get("default_label_color", "#555")),
                default_logo_color=str(badges_raw.get("default_logo_color", "whitesmoke")),
            ),
            output=OutputConfig(
                template=Path(output_raw.get("template", "templates/readme.md.j2")),
                path=Path(output_raw.get("path", "README.md")),
            ),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value in {config_path}: {exc}") from exc

    if config.github.concurrency < 1:
        raise ConfigError("github.concurrency must be at least 1")

    return config


def _section(raw: Dict[str, Any], name: str, config_path: Path) -> Dict[str, Any]:
    value = raw.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' in {config_path} must be a mapping")
    return value
