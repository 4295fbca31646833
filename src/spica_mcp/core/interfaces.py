"""Core protocol and interface definitions.

Defines the collaborator contracts the tools depend on: the Spica request
adapter and the documentation provider. Tests substitute fakes that
satisfy the same protocols.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Protocol

from spica_mcp.core.models import SearchChunk, StoredFile


class SpicaRequester(Protocol):
    """Contract for anything that can issue a Spica API request."""
    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
        authenticated: bool = True,
    ) -> Any:
        ...


class DocsProvider(Protocol):
    """Contract for the vector-store + chat-completion backend."""
    async def search(self, query: str) -> List[SearchChunk]:
        ...

    async def list_files(self) -> List[StoredFile]:
        ...

    async def file_name(self, file_id: str) -> str:
        ...

    async def file_content(self, file_id: str) -> str:
        ...

    async def complete(self, prompt: str) -> str:
        ...
