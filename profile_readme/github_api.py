from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import aiohttp
import requests
from requests import Response
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .models import PinnedRepo, RepositoryRef

API_ROOT = "https://api.github.com"
GRAPHQL_URL = f"{API_ROOT}/graphql"
_USER_AGENT = "profile-readme/0.1"
_ACCEPT = "application/vnd.github+json"

_PINNED_QUERY = """
query($limit: Int!) {
  viewer {
    pinnedItems(first: $limit, types: REPOSITORY) {
      nodes {
        ... on Repository {
          name
          nameWithOwner
          url
          description
          stargazerCount
          primaryLanguage { name }
          repositoryTopics(first: 20) { nodes { topic { name } } }
        }
      }
    }
  }
}
"""


class GitHubAPIError(RuntimeError):
    """Raised when GitHub answers with an error status or an error payload."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


def _headers(token: Optional[str]) -> Dict[str, str]:
    headers = {
        "Accept": _ACCEPT,
        "User-Agent": _USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


@dataclass(slots=True)
class GitHubSession:
    http: requests.Session

    @classmethod
    def create(cls, token_env: str = "GITHUB_TOKEN") -> "GitHubSession":
        session = requests.Session()
        session.headers.update(_headers(os.getenv(token_env)))
        return cls(http=session)

    def close(self) -> None:
        self.http.close()


def _raise_for_status(response: Response) -> None:
    if response.ok:
        return
    if response.headers.get("Content-Type", "").startswith("application/json"):
        message = response.json().get("message")
    else:
        message = response.text
    raise GitHubAPIError(f"GitHub API request failed: {response.status_code} {message}", status=response.status_code)


_transient = retry(
    retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    reraise=True,
)


@_transient
def _get(session: GitHubSession, path: str, params: Optional[Dict[str, str]] = None) -> Response:
    response = session.http.get(f"{API_ROOT}{path}", params=params, timeout=30)
    _raise_for_status(response)
    return response


@_transient
def _graphql(session: GitHubSession, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
    response = session.http.post(GRAPHQL_URL, json={"query": query, "variables": variables}, timeout=30)
    _raise_for_status(response)
    body = response.json()
    if body.get("errors"):
        messages = "; ".join(str(error.get("message")) for error in body["errors"])
        raise GitHubAPIError(f"GitHub GraphQL query failed: {messages}")
    return body.get("data") or {}


def list_authenticated_repos(session: GitHubSession, visibility: str = "all") -> List[Dict[str, Any]]:
    """Every repository visible to the token owner, all pages."""
    repos: List[Dict[str, Any]] = []
    page = 1
    while True:
        params = {"per_page": "100", "visibility": visibility, "page": str(page)}
        page_items = _get(session, "/user/repos", params=params).json()
        if not page_items:
            break
        repos.extend(page_items)
        if len(page_items) < 100:
            break
        page += 1
    return repos


def search_repositories(session: GitHubSession, query: str, max_pages: int = 1) -> List[Dict[str, Any]]:
    repos: List[Dict[str, Any]] = []
    for page in range(1, max_pages + 1):
        params = {"q": query, "per_page": "100", "page": str(page)}
        items = _get(session, "/search/repositories", params=params).json().get("items", [])
        repos.extend(items)
        if len(items) < 100:
            break
    return repos


def fetch_pinned_repos(session: GitHubSession, limit: int = 6) -> List[PinnedRepo]:
    data = _graphql(session, _PINNED_QUERY, {"limit": limit})
    nodes = ((data.get("viewer") or {}).get("pinnedItems") or {}).get("nodes") or []
    pinned: List[PinnedRepo] = []
    for node in nodes:
        if not node:
            continue
        language = node.get("primaryLanguage") or {}
        topic_nodes = (node.get("repositoryTopics") or {}).get("nodes") or []
        pinned.append(
            PinnedRepo(
                name=node.get("name", ""),
                full_name=node.get("nameWithOwner", ""),
                url=node.get("url", ""),
                description=node.get("description"),
                stars=int(node.get("stargazerCount", 0)),
                language=language.get("name"),
                topics=[item["topic"]["name"] for item in topic_nodes if item and item.get("topic")],
            )
        )
    return pinned


def repo_to_pinned(payload: Dict[str, Any]) -> PinnedRepo:
    """Shape a REST repository payload like a pinned item for templates."""
    return PinnedRepo(
        name=payload.get("name", ""),
        full_name=payload.get("full_name", ""),
        url=payload.get("html_url", ""),
        description=payload.get("description"),
        stars=int(payload.get("stargazers_count", 0)),
        language=payload.get("language"),
        topics=list(payload.get("topics") or []),
    )


class TopicClient:
    """Async topic lookups; one request per repository."""

    def __init__(self, http: aiohttp.ClientSession) -> None:
        self.http = http

    @classmethod
    def create(cls, token_env: str = "GITHUB_TOKEN", timeout: float = 30) -> "TopicClient":
        http = aiohttp.ClientSession(
            headers=_headers(os.getenv(token_env)),
            timeout=aiohttp.ClientTimeout(total=timeout),
        )
        return cls(http)

    async def get_topics(self, ref: RepositoryRef) -> List[str]:
        url = f"{API_ROOT}/repos/{ref.owner}/{ref.name}/topics"
        async with self.http.get(url) as response:
            if response.status >= 400:
                text = await response.text()
                raise GitHubAPIError(
                    f"Topic lookup for {ref.full_name} failed: {response.status} {text[:200]}",
                    status=response.status,
                )
            body = await response.json()
        return [str(name) for name in body.get("names", [])]

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "TopicClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
