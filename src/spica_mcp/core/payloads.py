"""Helpers for building Spica request payloads.

- `jsonable` turns pydantic argument models into plain JSON values.
- `compact` drops unset (None) fields from a tool's keyword arguments.
- `merge_update` implements the read-merge-write step of update tools.
- `path_segment` validates and escapes an identifier used in a URL path.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

from pydantic import BaseModel

from spica_mcp.core.errors import ValidationError


ID_FIELD = "_id"


def jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_none=True)
    if isinstance(value, Mapping):
        return {k: jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(v) for v in value]
    return value


def compact(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Return `fields` without None values, converted to JSON-ready data."""
    return {k: jsonable(v) for k, v in fields.items() if v is not None}


def merge_update(
    current: Any,
    update: Mapping[str, Any],
    *,
    resource_id: Optional[str] = None,
    id_field: str = ID_FIELD,
) -> Dict[str, Any]:
    """Shallow-merge `update` over the fetched document.

    Top-level keys in `update` overwrite; nested objects are replaced, not
    merged; keys cannot be removed. The identifier is re-asserted last.
    There is no version check: a write between the GET and the PUT is lost.
    """
    base: Dict[str, Any] = dict(current) if isinstance(current, Mapping) else {}
    base.update(compact(update))
    if resource_id is not None:
        base[id_field] = resource_id
    return base


def path_segment(value: str, *, name: str = "id") -> str:
    raw = (value or "").strip()
    if not raw:
        raise ValidationError(f"{name} must be non-empty")
    return quote(raw, safe="")
