"""MCP tools for Spica passport policies.

Registers passport-policy-list/get/create/update/delete. Statements are
validated against PolicyStatement before they are sent.
"""

from __future__ import annotations

from typing import List, Optional

from spica_mcp.core.errors import SpicaMCPError
from spica_mcp.core.interfaces import SpicaRequester
from spica_mcp.core.payloads import jsonable, merge_update, path_segment
from spica_mcp.core.registry import ToolRegistry
from spica_mcp.core.schemas import PolicyStatement
from spica_mcp.tools.formatting import failure, success


def _policy_path(policy_id: str) -> str:
    return f"/passport/policy/{path_segment(policy_id)}"


def register(registry: ToolRegistry, *, spica: SpicaRequester) -> None:
    @registry.tool(name="passport-policy-list", description="Get all policies")
    async def policy_list() -> str:
        try:
            data = await spica.request("GET", "/passport/policy")
        except SpicaMCPError as e:
            return failure("Failed to list policies", e)
        return success("Policies", data)

    @registry.tool(name="passport-policy-get", description="Get a single policy by id")
    async def policy_get(id: str) -> str:
        try:
            data = await spica.request("GET", _policy_path(id))
        except SpicaMCPError as e:
            return failure("Failed to get policy", e)
        return success("Policy", data)

    @registry.tool(name="passport-policy-create")
    async def policy_create(name: str, description: str, statement: List[PolicyStatement]) -> str:
        """Create a new policy.

        Each statement grants one `action` (e.g. "bucket:index") on a
        `module`, optionally narrowed by resource include/exclude lists.
        """
        body = {"name": name, "description": description, "statement": jsonable(statement)}
        try:
            data = await spica.request("POST", "/passport/policy", body)
        except SpicaMCPError as e:
            return failure("Failed to create policy", e)
        return success("Policy created", data)

    @registry.tool(name="passport-policy-update", description="Update an existing policy")
    async def policy_update(
        id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        statement: Optional[List[PolicyStatement]] = None,
    ) -> str:
        update = {"name": name, "description": description, "statement": statement}
        try:
            path = _policy_path(id)
            current = await spica.request("GET", path)
            data = await spica.request("PUT", path, merge_update(current, update, resource_id=id))
        except SpicaMCPError as e:
            return failure("Failed to update policy", e)
        return success("Policy updated", data)

    @registry.tool(name="passport-policy-delete", description="Delete a policy")
    async def policy_delete(id: str) -> str:
        try:
            await spica.request("DELETE", _policy_path(id))
        except SpicaMCPError as e:
            return failure("Failed to delete policy", e)
        return success("Policy deleted")
