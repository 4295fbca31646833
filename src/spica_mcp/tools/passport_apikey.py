"""MCP tools for Spica passport API keys and their policy attachments.

`passport-apikey-create` can attach policies right after creating the
key. Attachments run one by one and stop at the first failure; the key
and any policies already attached are left in place and the tool reports
a partial success naming the policy that failed.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from spica_mcp.core.errors import SpicaMCPError
from spica_mcp.core.interfaces import SpicaRequester
from spica_mcp.core.payloads import compact, merge_update, path_segment
from spica_mcp.core.registry import ToolRegistry
from spica_mcp.tools.formatting import PARTIAL, failure, success, to_json


def _apikey_path(apikey_id: str) -> str:
    return f"/passport/apikey/{path_segment(apikey_id, name='apikey_id')}"


def _policy_path(apikey_id: str, policy_id: str) -> str:
    return f"{_apikey_path(apikey_id)}/policy/{path_segment(policy_id, name='policy_id')}"


def _partial_report(policy_id: str, err: BaseException, attached: List[str], created: Any) -> str:
    return (
        f"{PARTIAL} API key created but failed to assign policy {policy_id}:\n{err}\n"
        f"Policies assigned before the failure: {', '.join(attached) if attached else 'none'}\n"
        f"API key:\n{to_json(created)}"
    )


def register(registry: ToolRegistry, *, spica: SpicaRequester) -> None:
    @registry.tool(name="passport-apikey-list", description="Get all API keys")
    async def apikey_list(limit: Optional[int] = None, skip: Optional[int] = None) -> str:
        try:
            data = await spica.request("GET", "/passport/apikey", params={"limit": limit, "skip": skip})
        except SpicaMCPError as e:
            return failure("Failed to list apikeys", e)
        return success("API keys", data)

    @registry.tool(name="passport-apikey-get", description="Get a single API key by id")
    async def apikey_get(id: str) -> str:
        try:
            data = await spica.request("GET", _apikey_path(id))
        except SpicaMCPError as e:
            return failure("Failed to get apikey", e)
        return success("API key", data)

    @registry.tool(name="passport-apikey-create")
    async def apikey_create(
        name: str,
        description: Optional[str] = None,
        active: bool = True,
        policies: Optional[List[str]] = None,
    ) -> str:
        """Create a new API key, optionally attaching policies to it.

        Params:
          - name: API key name (required).
          - description: optional description.
          - active: whether the key is usable (default: true).
          - policies: policy ids to attach after creation, in order.

        If attaching a policy fails, the remaining policies are skipped and
        the key is kept; the result names the failing policy.
        """
        body = compact({"name": name, "description": description, "active": active})
        try:
            created = await spica.request("POST", "/passport/apikey", body)
        except SpicaMCPError as e:
            return failure("Failed to create apikey", e)

        attached: List[str] = []
        key_id = created.get("_id") if isinstance(created, Mapping) else None
        for policy_id in policies or []:
            try:
                if not key_id:
                    raise SpicaMCPError("Spica did not return an _id for the created API key")
                await spica.request("PUT", _policy_path(key_id, policy_id))
            except SpicaMCPError as e:
                return _partial_report(policy_id, e, attached, created)
            attached.append(policy_id)

        return success("API key created successfully", created)

    @registry.tool(name="passport-apikey-update", description="Update an API key (name/description/active)")
    async def apikey_update(
        id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        active: Optional[bool] = None,
    ) -> str:
        update = {"name": name, "description": description, "active": active}
        try:
            path = _apikey_path(id)
            current = await spica.request("GET", path)
            data = await spica.request("PUT", path, merge_update(current, update, resource_id=id))
        except SpicaMCPError as e:
            return failure("Failed to update apikey", e)
        return success("API key updated", data)

    @registry.tool(name="passport-apikey-delete", description="Delete an API key")
    async def apikey_delete(id: str) -> str:
        try:
            await spica.request("DELETE", _apikey_path(id))
        except SpicaMCPError as e:
            return failure("Failed to delete apikey", e)
        return success("API key deleted")

    @registry.tool(name="passport-apikey-assign-policy", description="Assign a policy to an existing API key")
    async def apikey_assign_policy(apikey_id: str, policy_id: str) -> str:
        try:
            data = await spica.request("PUT", _policy_path(apikey_id, policy_id))
        except SpicaMCPError as e:
            return failure("Failed to assign policy to apikey", e)
        return success("Policy assigned to API key", data)

    @registry.tool(name="passport-apikey-remove-policy", description="Remove a policy from an API key")
    async def apikey_remove_policy(apikey_id: str, policy_id: str) -> str:
        try:
            await spica.request("DELETE", _policy_path(apikey_id, policy_id))
        except SpicaMCPError as e:
            return failure("Failed to remove policy from apikey", e)
        return success("Policy removed from API key")
