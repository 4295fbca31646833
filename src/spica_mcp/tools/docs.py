"""MCP tools for the Spica documentation collection.

Registers:
  - search: semantic search over the OpenAI vector store (falls back to
    listing every stored file when the search returns nothing),
  - fetch: full text of one document by file id,
  - answer_question: search, pick the single most relevant document and
    answer from it with one chat completion.

When the OpenAI key or vector store id is missing the tools still
register and answer with an explicit configuration error.
"""

from __future__ import annotations

from typing import List, Optional

from spica_mcp.clients.docs_client import file_url
from spica_mcp.core.errors import DocumentationError, SpicaMCPError
from spica_mcp.core.interfaces import DocsProvider
from spica_mcp.core.logging import get_logger
from spica_mcp.core.models import DocumentResult
from spica_mcp.core.ranking import best_document
from spica_mcp.core.registry import ToolRegistry
from spica_mcp.tools.formatting import FAILURE, failure, to_json

logger = get_logger(__name__)

SNIPPET_CHARS = 200

NOT_CONFIGURED = (
    f"{FAILURE} Documentation tools are not configured: "
    "set OPENAI_API_KEY and VECTOR_STORE_ID to enable search, fetch and answer_question."
)

ANSWER_PROMPT_TEMPLATE = """Based on the document content below, provide a comprehensive answer to the user's question.
Be specific and cite relevant details from the document.

Document Content:
{document}

User Question:
{query}

Please provide a detailed, helpful answer based on the document content.
If the document doesn't contain enough information to fully answer the question, mention what information is available and what might be missing."""


def _snippet(text: str) -> str:
    if not text:
        return "Content preview not available"
    if len(text) > SNIPPET_CHARS:
        return text[:SNIPPET_CHARS] + "..."
    return text


def build_answer_prompt(document: str, query: str) -> str:
    return ANSWER_PROMPT_TEMPLATE.format(document=document, query=query)


def register(registry: ToolRegistry, *, docs: Optional[DocsProvider] = None) -> None:
    @registry.tool(
        name="search",
        description=(
            "ALWAYS USE THIS FIRST! Search the Spica documentation vector store to understand "
            "available APIs, endpoints and functionality. Default to calling this even if you "
            "think you already know the answer, since the documentation is always being updated."
        ),
    )
    async def search(query: str) -> str:
        if not query or not query.strip():
            return f"{FAILURE} Query cannot be empty"
        if docs is None:
            return NOT_CONFIGURED

        try:
            chunks = await docs.search(query.strip())
            results: List[DocumentResult] = [
                DocumentResult(
                    id=c.file_id,
                    title=c.filename or f"Document {c.file_id}",
                    text=_snippet(c.text),
                    url=file_url(c.file_id),
                    score=c.score,
                )
                for c in chunks
            ]
            if not results:
                logger.info("docs_search_empty_fallback_to_listing")
                results = [
                    DocumentResult(
                        id=f.id,
                        title=f.filename,
                        text="Content preview not available - use fetch or answer_question tool",
                        url=file_url(f.id),
                    )
                    for f in await docs.list_files()
                ]
        except SpicaMCPError as e:
            return failure("Error searching vector store", e)

        return (
            f"Found {len(results)} relevant documents:\n"
            f"{to_json({'results': [r.to_dict() for r in results]})}\n\n"
            "Next step: use fetch with a document id, or answer_question with your specific question."
        )

    @registry.tool(
        name="fetch",
        description=(
            "Retrieve complete document content by ID from the documentation collection. "
            "Use this after search to read the full text of a specific document."
        ),
    )
    async def fetch(id: str) -> str:
        if not id or not id.strip():
            return f"{FAILURE} Document ID is required"
        if docs is None:
            return NOT_CONFIGURED

        file_id = id.strip()
        try:
            text = await docs.file_content(file_id)
        except DocumentationError as e:
            logger.warning("document_content_unavailable", file_id=file_id, error=str(e))
            text = f"Content not available via vector store API. Error: {e}"

        try:
            title = await docs.file_name(file_id)
        except SpicaMCPError as e:
            return failure(f"Could not fetch document with ID {file_id}", e)

        result = {
            "id": file_id,
            "title": title,
            "text": text or "Full content not available - use answer_question for semantic search",
            "url": file_url(file_id),
            "metadata": {"file_id": file_id, "filename": title, "content_length": len(text)},
        }
        return f"Document content retrieved:\n{to_json(result)}"

    @registry.tool(
        name="answer_question",
        description=(
            "Get AI-powered answers from the documentation collection about Spica APIs, endpoints, "
            "parameters, examples and best practices. Consult it before performing Spica operations."
        ),
    )
    async def answer_question(query: str) -> str:
        if not query or not query.strip():
            return f"{FAILURE} Query cannot be empty"
        if docs is None:
            return NOT_CONFIGURED

        question = query.strip()
        try:
            chunks = await docs.search(question)
            if not chunks:
                return (
                    "No relevant documents found for your query. Try rephrasing or ensure your "
                    "vector store contains relevant content."
                )

            best = best_document(chunks)
            if best is None:
                return (
                    "No relevant document chunks found for your query. The search returned results "
                    "but no readable content was available."
                )

            answer = await docs.complete(build_answer_prompt(best.text, question))
        except SpicaMCPError as e:
            return failure("An error occurred while processing your question", e)

        result = {
            "query": question,
            "answer": answer or "No answer generated",
            "source_title": best.filename or f"Document {best.file_id}",
            "source_url": file_url(best.file_id),
            "relevance_score": best.score,
            "success": True,
        }
        return f"Question answered:\n{to_json(result)}"
