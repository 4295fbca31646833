import copy
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest

from spica_mcp.core.models import SpicaRequest
from spica_mcp.core.registry import ToolRegistry


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool and prompt registration."""

    def __init__(self) -> None:
        self.tools = {}
        self.prompts = {}

    def add_tool(self, fn, *, name: str, description: str = ""):
        self.tools[name] = {"fn": fn, "description": description}

    def prompt(self, *, name: str, description: str = ""):
        def _decorator(fn):
            self.prompts[name] = fn
            return fn
        return _decorator


class Replies(list):
    """Successive replies for one route, consumed one per call."""


class FakeSpica:
    """Records every request; replies from a (METHOD, path) -> value map.

    A value may be an exception (raised), Replies (consumed one item per
    call) or any JSON value (returned). Unmapped requests return {}.
    """

    def __init__(self, responses: Optional[Dict[Tuple[str, str], Any]] = None) -> None:
        self.calls: List[SpicaRequest] = []
        self.responses: Dict[Tuple[str, str], Any] = dict(responses or {})

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
        authenticated: bool = True,
    ) -> Any:
        req = SpicaRequest(
            method=method.upper(),
            path=path,
            body=copy.deepcopy(body),
            params=dict(params) if params is not None else None,
            authenticated=authenticated,
        )
        self.calls.append(req)

        value = self.responses.get((req.method, path), {})
        if isinstance(value, Replies):
            value = value.pop(0)
        if isinstance(value, BaseException):
            raise value
        return value

    def methods(self) -> List[Tuple[str, str]]:
        return [(c.method, c.path) for c in self.calls]


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture
def registry():
    return ToolRegistry()


@pytest.fixture
def spica():
    return FakeSpica()
