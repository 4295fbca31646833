"""MCP tools for Spica serverless functions.

Covers the function documents themselves, their source code (the
`index` sub-resource), npm dependencies and the function log query.
Function documents (triggers, env, timeout, language...) are passed
through as open maps.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from spica_mcp.core.errors import SpicaMCPError, ValidationError
from spica_mcp.core.interfaces import SpicaRequester
from spica_mcp.core.payloads import merge_update, path_segment
from spica_mcp.core.registry import ToolRegistry
from spica_mcp.tools.formatting import failure, success


def _function_path(function_id: str, *rest: str) -> str:
    return "/".join([f"/function/{path_segment(function_id, name='function_id')}", *rest])


def register(registry: ToolRegistry, *, spica: SpicaRequester) -> None:
    @registry.tool(name="function-list", description="Get all functions from Spica")
    async def function_list() -> str:
        try:
            data = await spica.request("GET", "/function")
        except SpicaMCPError as e:
            return failure("Failed to list functions", e)
        return success("Functions retrieved successfully", data)

    @registry.tool(name="function-get", description="Get a single function by id")
    async def function_get(function_id: str) -> str:
        try:
            data = await spica.request("GET", _function_path(function_id))
        except SpicaMCPError as e:
            return failure("Failed to get function", e)
        return success("Function retrieved successfully", data)

    @registry.tool(name="function-create")
    async def function_create(function: Dict[str, Any]) -> str:
        """Create a new function in Spica.

        `function` is the full Spica function document, e.g.
        {"name": ..., "description": ..., "language": "javascript",
         "timeout": 120, "triggers": {...}}. Use search + answer_question
        first to learn the trigger schema.
        """
        try:
            data = await spica.request("POST", "/function", function)
        except SpicaMCPError as e:
            return failure("Failed to create function", e)
        return success("Function created successfully", data)

    @registry.tool(name="function-update")
    async def function_update(function_id: str, function: Dict[str, Any]) -> str:
        """Update a function.

        Fetches the current function, overwrites the given top-level fields
        and sends the merged document with PATCH.
        """
        try:
            path = _function_path(function_id)
            current = await spica.request("GET", path)
            data = await spica.request("PATCH", path, merge_update(current, function, resource_id=function_id))
        except SpicaMCPError as e:
            return failure("Failed to update function", e)
        return success("Function updated successfully", data)

    @registry.tool(name="function-delete", description="Delete a function")
    async def function_delete(function_id: str) -> str:
        try:
            await spica.request("DELETE", _function_path(function_id))
        except SpicaMCPError as e:
            return failure("Failed to delete function", e)
        return success("Function deleted successfully")

    @registry.tool(name="function-code-get", description="Get the source code (index) of a function")
    async def function_code_get(function_id: str) -> str:
        try:
            data = await spica.request("GET", _function_path(function_id, "index"))
        except SpicaMCPError as e:
            return failure("Failed to get function code", e)
        return success("Function code retrieved successfully", data)

    @registry.tool(name="function-code-update", description="Replace the source code (index) of a function")
    async def function_code_update(function_id: str, code: str) -> str:
        try:
            data = await spica.request("POST", _function_path(function_id, "index"), {"index": code})
        except SpicaMCPError as e:
            return failure("Failed to update function code", e)
        return success("Function code updated successfully", data)

    @registry.tool(name="function-dependencies-list", description="List npm dependencies of a function")
    async def function_dependencies_list(function_id: str) -> str:
        try:
            data = await spica.request("GET", _function_path(function_id, "dependencies"))
        except SpicaMCPError as e:
            return failure("Failed to list function dependencies", e)
        return success("Function dependencies retrieved successfully", data)

    @registry.tool(
        name="function-dependencies-add",
        description='Install npm dependencies for a function, e.g. ["axios", "lodash@4"]',
    )
    async def function_dependencies_add(function_id: str, dependencies: List[str]) -> str:
        try:
            names = [d.strip() for d in dependencies if d and d.strip()]
            if not names:
                raise ValidationError("dependencies must contain at least one package name")
            data = await spica.request("POST", _function_path(function_id, "dependencies"), {"name": names})
        except SpicaMCPError as e:
            return failure("Failed to add function dependencies", e)
        return success("Function dependencies added successfully", data)

    @registry.tool(name="function-dependencies-remove", description="Remove an npm dependency from a function")
    async def function_dependencies_remove(function_id: str, dependency: str) -> str:
        try:
            path = _function_path(function_id, "dependencies", path_segment(dependency, name="dependency"))
            await spica.request("DELETE", path)
        except SpicaMCPError as e:
            return failure("Failed to remove function dependency", e)
        return success("Function dependency removed successfully")

    @registry.tool(name="function-logs")
    async def function_logs(
        functions: Optional[List[str]] = None,
        levels: Optional[List[int]] = None,
        begin: Optional[str] = None,
        end: Optional[str] = None,
        content: Optional[str] = None,
        limit: Optional[int] = None,
        skip: Optional[int] = None,
    ) -> str:
        """Query function logs.

        Params:
          - functions: function ids to include (default: all).
          - levels: numeric log levels (0 debug, 1 log, 2 info, 3 warn, 4 error).
          - begin, end: ISO-8601 time range.
          - content: free-text filter on the log message.
          - limit, skip: pagination.
        """
        params = {
            "functions": functions or None,
            "levels": levels or None,
            "begin": begin,
            "end": end,
            "content": content,
            "limit": limit,
            "skip": skip,
        }
        try:
            data = await spica.request("GET", "/function-logs", params=params)
        except SpicaMCPError as e:
            return failure("Failed to query function logs", e)
        return success("Function logs retrieved successfully", data)
