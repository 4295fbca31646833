"""Immutable dataclasses shared by the clients and the tools.

SpicaRequest describes one outbound call to the Spica REST API;
SearchChunk/StoredFile are provider-neutral views of vector-store data;
RankedDocument and DocumentResult are what the documentation tools work
with and return.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Literal, Mapping, Optional, Tuple


HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

SUPPORTED_METHODS: FrozenSet[str] = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})


@dataclass(frozen=True)
class SpicaRequest:
    """Request descriptor for a single Spica API call.

    `path` is relative to the API prefix (e.g. "/bucket/abc/data").
    """

    method: str
    path: str
    body: Any = None
    params: Optional[Mapping[str, Any]] = None
    authenticated: bool = True


@dataclass(frozen=True)
class SearchChunk:
    # One vector-store hit; a file may appear in several chunks
    file_id: str
    filename: Optional[str] = None
    score: float = 0.0
    texts: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        return "\n".join(t for t in self.texts if t)


@dataclass(frozen=True)
class StoredFile:
    id: str
    filename: str


@dataclass(frozen=True)
class RankedDocument:
    file_id: str
    filename: Optional[str]
    score: float
    chunks: Tuple[str, ...]

    @property
    def text(self) -> str:
        return "\n".join(self.chunks)


@dataclass(frozen=True)
class DocumentResult:
    """Documentation search result returned to the caller."""

    id: str
    title: str
    text: str
    url: str
    score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id, "title": self.title, "text": self.text, "url": self.url}
        if self.score is not None:
            out["score"] = self.score
        return out
