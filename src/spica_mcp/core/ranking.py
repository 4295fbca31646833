"""Pick the most relevant document from vector-store search chunks.

Chunk scores are summed per file id; the highest total wins and ties keep
the file seen first in provider order. The winner's chunk texts are
concatenated in the order they were returned.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from spica_mcp.core.models import RankedDocument, SearchChunk


def rank_documents(chunks: Sequence[SearchChunk]) -> List[RankedDocument]:
    scores: Dict[str, float] = {}
    texts: Dict[str, List[str]] = {}
    names: Dict[str, Optional[str]] = {}

    # dicts keep insertion order, i.e. first appearance in the results
    for chunk in chunks:
        if not chunk.file_id:
            continue
        scores[chunk.file_id] = scores.get(chunk.file_id, 0.0) + (chunk.score or 0.0)
        texts.setdefault(chunk.file_id, []).extend(t for t in chunk.texts if t)
        if names.get(chunk.file_id) is None:
            names[chunk.file_id] = chunk.filename

    ranked = [
        RankedDocument(file_id=fid, filename=names.get(fid), score=scores[fid], chunks=tuple(texts[fid]))
        for fid in scores
    ]
    # sorted() is stable, so equal scores stay in first-seen order
    return sorted(ranked, key=lambda d: d.score, reverse=True)


def best_document(chunks: Sequence[SearchChunk]) -> Optional[RankedDocument]:
    ranked = rank_documents(chunks)
    return ranked[0] if ranked else None
