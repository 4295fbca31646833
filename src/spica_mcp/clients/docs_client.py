"""OpenAI-backed documentation provider.

Wraps the vector-store search/list/content endpoints and one chat
completion behind the DocsProvider protocol. Every OpenAI failure is
re-raised as DocumentationError so tools only handle project errors.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from openai import AsyncOpenAI, OpenAIError

from spica_mcp.config import DEFAULT_OPENAI_MODEL, Settings
from spica_mcp.core.errors import DocumentationError
from spica_mcp.core.logging import get_logger
from spica_mcp.core.models import SearchChunk, StoredFile

logger = get_logger(__name__)

FILE_URL_TEMPLATE = "https://platform.openai.com/storage/files/{file_id}"


def file_url(file_id: str) -> str:
    return FILE_URL_TEMPLATE.format(file_id=file_id)


def _texts(content: Any) -> Tuple[str, ...]:
    parts = content or []
    return tuple(getattr(c, "text", None) for c in parts if getattr(c, "text", None))


class OpenAIDocsClient:
    def __init__(
        self,
        *,
        api_key: str,
        vector_store_id: str,
        model: str = DEFAULT_OPENAI_MODEL,
        temperature: float = 0.2,
        max_tokens: int = 1000,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self._vector_store_id = vector_store_id
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._client = client or AsyncOpenAI(api_key=api_key)

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["OpenAIDocsClient"]:
        """Build a client, or None when the key or vector store id is missing."""
        if not settings.docs_enabled:
            return None
        return cls(
            api_key=settings.openai_api_key,
            vector_store_id=settings.vector_store_id,
            model=settings.openai_model,
        )

    @property
    def vector_store_id(self) -> str:
        return self._vector_store_id

    async def search(self, query: str) -> List[SearchChunk]:
        try:
            page = await self._client.vector_stores.search(self._vector_store_id, query=query)
        except OpenAIError as e:
            raise DocumentationError(f"Vector store search failed: {e}") from e

        chunks = [
            SearchChunk(
                file_id=item.file_id,
                filename=getattr(item, "filename", None),
                score=float(getattr(item, "score", 0.0) or 0.0),
                texts=_texts(getattr(item, "content", None)),
            )
            for item in (page.data or [])
        ]
        logger.debug("vector_store_search", hits=len(chunks))
        return chunks

    async def list_files(self) -> List[StoredFile]:
        try:
            page = await self._client.vector_stores.files.list(vector_store_id=self._vector_store_id)
            out: List[StoredFile] = []
            for f in page.data or []:
                out.append(StoredFile(id=f.id, filename=await self.file_name(f.id)))
            return out
        except OpenAIError as e:
            raise DocumentationError(f"Listing vector store files failed: {e}") from e

    async def file_name(self, file_id: str) -> str:
        try:
            info = await self._client.files.retrieve(file_id)
        except OpenAIError as e:
            raise DocumentationError(f"Retrieving file {file_id} failed: {e}") from e
        return getattr(info, "filename", None) or f"Document {file_id}"

    async def file_content(self, file_id: str) -> str:
        try:
            page = await self._client.vector_stores.files.content(file_id, vector_store_id=self._vector_store_id)
        except OpenAIError as e:
            raise DocumentationError(f"Reading file {file_id} from the vector store failed: {e}") from e
        return "\n".join(_texts(page.data))

    async def complete(self, prompt: str) -> str:
        try:
            resp = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except OpenAIError as e:
            raise DocumentationError(f"Chat completion failed: {e}") from e

        if not resp.choices:
            return ""
        return (resp.choices[0].message.content or "").strip()
