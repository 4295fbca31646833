"""Text rendering for tool results.

Tool output is a single text block: a status marker, a short message and,
when there is one, the pretty-printed JSON payload or error message.
"""

from __future__ import annotations

import json
from typing import Any

SUCCESS = "✅"
FAILURE = "❌"
PARTIAL = "⚠️"


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def success(message: str, data: Any = None) -> str:
    if data is None:
        return f"{SUCCESS} {message}"
    return f"{SUCCESS} {message}:\n{to_json(data)}"


def failure(message: str, err: BaseException) -> str:
    return f"{FAILURE} {message}:\n{err}"
