from __future__ import annotations

import asyncio
import hashlib
from datetime import timedelta
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from .aggregate import aggregate_topics
from .cache import CacheStore
from .config import AppConfig
from .fetcher import bounded_map
from .github_api import (
    GitHubSession,
    TopicClient,
    fetch_pinned_repos,
    list_authenticated_repos,
    repo_to_pinned,
    search_repositories,
)
from .logging import get_logger
from .models import PinnedRepo, RepositoryRef, TopicCounts

TOPICS_KEY = "topics"
PINNED_KEY = "pinned"

TopicLookup = Callable[[RepositoryRef], Awaitable[List[str]]]

_logger = get_logger("collector")


def collect_topic_counts(
    config: AppConfig,
    cache: CacheStore,
    *,
    session: GitHubSession,
    refresh: bool = False,
    get_topics: Optional[TopicLookup] = None,
) -> TopicCounts:
    """Topic counts across every visible repository, served from cache while fresh.

    The cache is only written after every lookup succeeded; a failed batch
    leaves the previous entry in place.
    """
    ttl = _ttl(config)
    if not refresh:
        cached = cache.get_if_fresh(TOPICS_KEY, ttl)
        if _is_counts(cached):
            return cached

    repos = list_authenticated_repos(session, visibility=config.github.visibility)
    full_names = [str(repo["full_name"]) for repo in repos]
    _logger.info("Fetching topics for %d repositories", len(full_names))

    counts = asyncio.run(_fetch_counts(full_names, config, get_topics))
    cache.put(TOPICS_KEY, counts)
    return counts


async def fetch_topic_counts(full_names: Sequence[str], get_topics: TopicLookup, limit: int) -> TopicCounts:
    refs = [RepositoryRef.from_full_name(name) for name in full_names]
    topic_sets = await bounded_map(refs, get_topics, limit)
    return aggregate_topics(topic_sets)


async def _fetch_counts(full_names: Sequence[str], config: AppConfig, get_topics: Optional[TopicLookup]) -> TopicCounts:
    limit = config.github.concurrency
    if get_topics is not None:
        return await fetch_topic_counts(full_names, get_topics, limit)
    async with TopicClient.create(config.github.token_env) as client:
        return await fetch_topic_counts(full_names, client.get_topics, limit)


def collect_pinned(config: AppConfig, cache: CacheStore, *, session: GitHubSession, refresh: bool = False) -> List[PinnedRepo]:
    ttl = _ttl(config)
    if not refresh:
        cached = cache.get_if_fresh(PINNED_KEY, ttl)
        if isinstance(cached, list):
            return [PinnedRepo.from_dict(item) for item in cached if isinstance(item, dict)]

    pinned = fetch_pinned_repos(session, limit=config.github.pinned_limit)
    cache.put(PINNED_KEY, [repo.to_dict() for repo in pinned])
    return pinned


def collect_search(config: AppConfig, cache: CacheStore, *, session: GitHubSession, refresh: bool = False) -> List[PinnedRepo]:
    query = config.github.search_query
    if not query:
        return []
    key = search_cache_key(query)
    ttl = _ttl(config)
    if not refresh:
        cached = cache.get_if_fresh(key, ttl)
        if isinstance(cached, list):
            return [PinnedRepo.from_dict(item) for item in cached if isinstance(item, dict)]

    results = [repo_to_pinned(item) for item in search_repositories(session, query, max_pages=config.github.search_max_pages)]
    cache.put(key, [repo.to_dict() for repo in results])
    return results


def search_cache_key(query: str) -> str:
    digest = hashlib.sha1(query.encode("utf-8")).hexdigest()[:12]
    return f"search-{digest}"


def _ttl(config: AppConfig) -> timedelta:
    return timedelta(days=config.cache.ttl_days)


def _is_counts(payload: Any) -> bool:
    if not isinstance(payload, dict):
        return False
    return all(isinstance(key, str) and isinstance(value, int) for key, value in payload.items())
