from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .assets import BadgeRenderer, generate_badges
from .badge_config import load_badge_spec
from .cache import CacheStore
from .collector import TopicLookup, collect_pinned, collect_search, collect_topic_counts
from .config import AppConfig, ConfigError
from .github_api import GitHubSession
from .logging import get_logger
from .logos import LogoResolver
from .models import PinnedRepo, ReconcileReport
from .reconcile import reconcile
from .render import build_template_data, write_readme

_logger = get_logger("pipeline")


def run_pipeline(
    config: AppConfig,
    *,
    refresh: bool = False,
    include_pinned: bool = True,
    session: Optional[GitHubSession] = None,
    get_topics: Optional[TopicLookup] = None,
    resolver: Optional[LogoResolver] = None,
    renderer: Optional[BadgeRenderer] = None,
) -> Path:
    """Collect, reconcile, draw badges and write the README; returns its path."""
    spec = load_badge_spec(config.badges.config)
    if not config.output.template.is_file():
        raise ConfigError(f"README template not found: {config.output.template}")

    cache = CacheStore(config.cache.directory)
    owns_session = session is None
    if session is None:
        session = GitHubSession.create(config.github.token_env)
    try:
        counts = collect_topic_counts(config, cache, session=session, refresh=refresh, get_topics=get_topics)
        pinned: List[PinnedRepo] = []
        if include_pinned:
            pinned = collect_pinned(config, cache, session=session, refresh=refresh)
        highlights = collect_search(config, cache, session=session, refresh=refresh)
    finally:
        if owns_session:
            session.close()

    annotated, report = reconcile(spec, counts)
    log_coverage(report)

    defaults = config.badges.defaults()
    if resolver is None:
        resolver = LogoResolver.default(config.badges.icons_dir, defaults)
    manifest = generate_badges(annotated, config.badges.output_dir, resolver, defaults, renderer)

    data = build_template_data(manifest, counts, pinned, highlights)
    return write_readme(config.output.template, config.output.path, data)


def log_coverage(report: ReconcileReport) -> None:
    if report.missing:
        _logger.warning("Topics configured on badges but not found on any repository: %s", ", ".join(report.missing))
    if report.unused:
        _logger.warning("Topics found on repositories but not shown by any badge: %s", ", ".join(report.unused))
