from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

TopicSet = List[str]
TopicCounts = Dict[str, int]
BadgeManifest = Dict[str, Dict[str, Any]]


@dataclass(frozen=True, slots=True)
class RepositoryRef:
    owner: str
    name: str

    @classmethod
    def from_full_name(cls, full_name: str) -> "RepositoryRef":
        owner, sep, name = full_name.strip().partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"Repository full name must look like 'owner/name', got {full_name!r}")
        return cls(owner=owner, name=name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True, slots=True)
class BadgeElement:
    key: str
    label: str
    message: Optional[str] = None
    color: Optional[str] = None
    label_color: Optional[str] = None
    logo: Optional[str] = None
    logo_color: Optional[str] = None
    url: Optional[str] = None
    topic: Optional[str] = None


@dataclass(frozen=True, slots=True)
class BadgeSection:
    name: str
    message: str
    color: Optional[str] = None
    logo: Optional[str] = None
    logo_color: Optional[str] = None
    elements: Tuple[BadgeElement, ...] = ()


BadgeSpec = Tuple[BadgeSection, ...]


@dataclass(frozen=True, slots=True)
class RenderDefaults:
    """Fallback colours for badges, built once from settings."""

    color: str = "#555"
    label_color: str = "#555"
    logo_color: str = "whitesmoke"


@dataclass(frozen=True, slots=True)
class IconSource:
    svg: str
    color: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ResolvedLogo:
    """Embedded logo; ``background`` is set only when the colour came from the icon or the caller."""

    data_uri: str
    color: str
    background: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ReconcileReport:
    missing: Tuple[str, ...] = ()
    unused: Tuple[str, ...] = ()


@dataclass(slots=True)
class PinnedRepo:
    name: str
    full_name: str
    url: str
    description: Optional[str] = None
    stars: int = 0
    language: Optional[str] = None
    topics: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "full_name": self.full_name,
            "url": self.url,
            "description": self.description,
            "stars": self.stars,
            "language": self.language,
            "topics": list(self.topics),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PinnedRepo":
        return cls(
            name=str(payload.get("name", "")),
            full_name=str(payload.get("full_name", "")),
            url=str(payload.get("url", "")),
            description=payload.get("description"),
            stars=int(payload.get("stars", 0) or 0),
            language=payload.get("language"),
            topics=[str(topic) for topic in payload.get("topics", []) or []],
        )
