"""MCP tools for Spica passport identities.

Registers identity CRUD plus `passport-identity-verify` (checks the
configured credential) and `passport-login` (exchanges identifier and
password for tokens on the unauthenticated identify endpoint).
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from spica_mcp.core.errors import SpicaMCPError
from spica_mcp.core.interfaces import SpicaRequester
from spica_mcp.core.payloads import compact, merge_update, path_segment
from spica_mcp.core.registry import ToolRegistry
from spica_mcp.tools.formatting import failure, success


def _identity_path(identity_id: str) -> str:
    return f"/passport/identity/{path_segment(identity_id)}"


def register(registry: ToolRegistry, *, spica: SpicaRequester) -> None:
    @registry.tool(
        name="passport-identity-list",
        description=(
            "Get all identities from Spica. Tip: use the search tool first to understand "
            "identity structure and available attributes."
        ),
    )
    async def identity_list(
        limit: Optional[int] = None,
        skip: Optional[int] = None,
        sort: Optional[Union[str, Dict[str, Any]]] = None,
    ) -> str:
        try:
            data = await spica.request("GET", "/passport/identity", params={"limit": limit, "skip": skip, "sort": sort})
        except SpicaMCPError as e:
            return failure("Failed to list identities", e)
        return success("Identities retrieved successfully", data)

    @registry.tool(name="passport-identity-get", description="Get a single identity by id")
    async def identity_get(id: str) -> str:
        try:
            data = await spica.request("GET", _identity_path(id))
        except SpicaMCPError as e:
            return failure("Failed to get identity", e)
        return success("Identity retrieved successfully", data)

    @registry.tool(
        name="passport-identity-create",
        description=(
            "Create a new identity in Spica. Use search + answer_question first to understand "
            "the identity schema, required fields and attribute structure."
        ),
    )
    async def identity_create(identifier: str, password: str, attributes: Optional[Dict[str, Any]] = None) -> str:
        body = compact({"identifier": identifier, "password": password, "attributes": attributes})
        try:
            data = await spica.request("POST", "/passport/identity", body)
        except SpicaMCPError as e:
            return failure("Failed to create identity", e)
        return success("Identity created successfully", data)

    @registry.tool(name="passport-identity-update", description="Update an existing identity")
    async def identity_update(
        id: str,
        identifier: Optional[str] = None,
        password: Optional[str] = None,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> str:
        update = {"identifier": identifier, "password": password, "attributes": attributes}
        try:
            path = _identity_path(id)
            current = await spica.request("GET", path)
            data = await spica.request("PUT", path, merge_update(current, update, resource_id=id))
        except SpicaMCPError as e:
            return failure("Failed to update identity", e)
        return success("Identity updated successfully", data)

    @registry.tool(name="passport-identity-delete", description="Delete an identity")
    async def identity_delete(id: str) -> str:
        try:
            await spica.request("DELETE", _identity_path(id))
        except SpicaMCPError as e:
            return failure("Failed to delete identity", e)
        return success("Identity deleted successfully")

    @registry.tool(name="passport-identity-verify", description="Verify the current identity token")
    async def identity_verify() -> str:
        try:
            data = await spica.request("GET", "/passport/identity/verify")
        except SpicaMCPError as e:
            return failure("Token verify failed", e)
        return success("Token verified", data)

    @registry.tool(
        name="passport-login",
        description="Obtain access and refresh tokens by identifier/password",
    )
    async def login(identifier: str, password: str) -> str:
        # The token payload is returned as-is; it is never stored or refreshed here
        try:
            data = await spica.request(
                "POST",
                "/passport/identify",
                {"identifier": identifier, "password": password},
                authenticated=False,
            )
        except SpicaMCPError as e:
            return failure("Login failed", e)
        return success("Login successful", data)
