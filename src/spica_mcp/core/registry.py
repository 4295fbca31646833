"""Process-wide registry of named, schema-validated MCP tools.

Tool modules expose `register(registry, *, ...)` and declare their tools
with the `@registry.tool(name=...)` decorator, the same way they would
against FastMCP directly. The registry:

- rejects duplicate names (DuplicateToolError),
- derives a pydantic argument model (the tool's input schema) from the
  handler signature,
- wraps every handler in a catch-all so an unexpected exception becomes a
  failure text instead of tearing down the server,
- forwards each tool to the bound FastMCP instance, if any.

`invoke` validates raw arguments and runs the guarded handler; it is the
programmatic entry point used by tests and by anything driving tools
without going through the MCP transport.
"""

from __future__ import annotations

import functools
import inspect
import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, create_model
from pydantic import ValidationError as PydanticValidationError

from spica_mcp.core.errors import DuplicateToolError
from spica_mcp.core.logging import get_logger

logger = get_logger(__name__)

ToolHandler = Callable[..., Awaitable[str]]


@dataclass(frozen=True)
class ToolResult:
    text: str
    is_error: bool = False
    errors: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ToolDefinition:
    """A registered tool: name, description, argument model and guarded handler."""

    name: str
    description: str
    arguments: Type[BaseModel]
    handler: ToolHandler

    @property
    def input_schema(self) -> Dict[str, Any]:
        return self.arguments.model_json_schema()


def _argument_model(name: str, signature: inspect.Signature) -> Type[BaseModel]:
    fields: Dict[str, Any] = {}
    for param in signature.parameters.values():
        annotation = Any if param.annotation is inspect.Parameter.empty else param.annotation
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[param.name] = (annotation, default)

    model_name = "".join(part.capitalize() for part in name.replace("_", "-").split("-")) + "Arguments"
    return create_model(model_name, __config__=ConfigDict(arbitrary_types_allowed=True), **fields)


def _guard(name: str, fn: ToolHandler, signature: inspect.Signature) -> ToolHandler:
    @functools.wraps(fn)
    async def guarded(**kwargs: Any) -> str:
        logger.info("tool_invoked", tool=name)
        try:
            return await fn(**kwargs)
        except Exception as e:
            logger.exception("tool_crashed", tool=name)
            return f"❌ Tool {name} failed unexpectedly:\n{e}"

    # FastMCP reads the signature to build its schema; hand it resolved
    # annotations so string annotations need no module globals.
    guarded.__signature__ = signature  # type: ignore[attr-defined]
    guarded.__annotations__ = {p.name: p.annotation for p in signature.parameters.values()}
    guarded.__annotations__["return"] = signature.return_annotation
    return guarded


class ToolRegistry:
    def __init__(self, mcp: Optional[Any] = None) -> None:
        self._mcp = mcp
        self._tools: Dict[str, ToolDefinition] = {}

    def tool(self, *, name: str, description: Optional[str] = None) -> Callable[[ToolHandler], ToolHandler]:
        def _decorator(fn: ToolHandler) -> ToolHandler:
            self.register(self.define(fn, name=name, description=description))
            return fn
        return _decorator

    def define(self, fn: ToolHandler, *, name: str, description: Optional[str] = None) -> ToolDefinition:
        if not inspect.iscoroutinefunction(fn):
            raise TypeError(f"Tool handler for {name!r} must be an async function")

        signature = inspect.signature(fn, eval_str=True)
        return ToolDefinition(
            name=name,
            description=description or inspect.getdoc(fn) or "",
            arguments=_argument_model(name, signature),
            handler=_guard(name, fn, signature),
        )

    def register(self, definition: ToolDefinition) -> None:
        if definition.name in self._tools:
            raise DuplicateToolError(f"Tool already registered: {definition.name}")

        self._tools[definition.name] = definition
        if self._mcp is not None:
            self._mcp.add_tool(definition.handler, name=definition.name, description=definition.description)
        logger.debug("tool_registered", tool=definition.name)

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return sorted(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._tools.values())

    async def invoke(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        definition = self._tools.get(name)
        if definition is None:
            return ToolResult(text=f"❌ Unknown tool: {name}", is_error=True)

        try:
            parsed = definition.arguments.model_validate(dict(arguments or {}))
        except PydanticValidationError as e:
            errors = tuple(
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in e.errors(include_url=False)
            )
            logger.info("tool_arguments_rejected", tool=name, error_count=len(errors))
            return ToolResult(
                text=f"❌ Invalid arguments for {name}:\n{json.dumps(list(errors), indent=2)}",
                is_error=True,
                errors=errors,
            )

        kwargs = {key: getattr(parsed, key) for key in definition.arguments.model_fields}
        return ToolResult(text=await definition.handler(**kwargs))
