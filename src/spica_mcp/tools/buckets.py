"""MCP tools for Spica bucket (collection) management.

Registers bucket-list/get/create/update/delete. Creation fills in the
Spica defaults for optional fields; update re-reads the bucket and
writes back the merged document.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from spica_mcp.core.errors import SpicaMCPError
from spica_mcp.core.interfaces import SpicaRequester
from spica_mcp.core.payloads import jsonable, merge_update, path_segment
from spica_mcp.core.registry import ToolRegistry
from spica_mcp.core.schemas import BucketAcl
from spica_mcp.tools.formatting import failure, success

DEFAULT_ICON = "view_stream"
DEFAULT_PRIMARY = "title"
DEFAULT_ACL = {"read": "true==true", "write": "true==true"}


def register(registry: ToolRegistry, *, spica: SpicaRequester) -> None:
    @registry.tool(name="bucket-list", description="Get all buckets from Spica.")
    async def bucket_list() -> str:
        try:
            data = await spica.request("GET", "/bucket")
        except SpicaMCPError as e:
            return failure("Failed to list buckets", e)
        return success("Buckets retrieved successfully", data)

    @registry.tool(name="bucket-get", description="Get a single bucket (schema and settings) by id.")
    async def bucket_get(bucket_id: str) -> str:
        try:
            data = await spica.request("GET", f"/bucket/{path_segment(bucket_id, name='bucket_id')}")
        except SpicaMCPError as e:
            return failure("Failed to get bucket", e)
        return success("Bucket retrieved successfully", data)

    @registry.tool(name="bucket-create")
    async def bucket_create(
        title: str,
        description: str,
        properties: Dict[str, Any],
        icon: str = DEFAULT_ICON,
        primary: str = DEFAULT_PRIMARY,
        read_only: bool = False,
        history: bool = False,
        acl: Optional[BucketAcl] = None,
    ) -> str:
        """Create a new bucket in Spica.

        Params:
          - title, description: bucket title and description (required).
          - properties: Spica property definitions keyed by field name (required).
          - icon: material icon name (default: "view_stream").
          - primary: property shown as the record title (default: "title").
          - read_only, history: bucket flags (default: false).
          - acl: {read, write} rule expressions (default: allow all).

        Tip: use search + answer_question first to learn the property schema.
        """
        payload = {
            "title": title,
            "description": description,
            "icon": icon,
            "primary": primary,
            "readOnly": read_only,
            "history": history,
            "properties": properties,
            "acl": jsonable(acl) if acl is not None else dict(DEFAULT_ACL),
            "order": 0,
        }
        try:
            data = await spica.request("POST", "/bucket", payload)
        except SpicaMCPError as e:
            return failure("Failed to create bucket", e)
        return success("Bucket created successfully", data)

    @registry.tool(name="bucket-update")
    async def bucket_update(
        bucket_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        properties: Optional[Dict[str, Any]] = None,
        icon: Optional[str] = None,
        primary: Optional[str] = None,
        read_only: Optional[bool] = None,
        history: Optional[bool] = None,
        acl: Optional[BucketAcl] = None,
    ) -> str:
        """Update an existing bucket in Spica.

        Fetches the current bucket, overwrites only the fields given here
        (top-level keys; `properties` is replaced as a whole) and writes the
        merged bucket back with PUT.
        """
        update = {
            "title": title,
            "description": description,
            "properties": properties,
            "icon": icon,
            "primary": primary,
            "readOnly": read_only,
            "history": history,
            "acl": acl,
        }
        try:
            path = f"/bucket/{path_segment(bucket_id, name='bucket_id')}"
            current = await spica.request("GET", path)
            merged = merge_update(current, update, resource_id=bucket_id)
            data = await spica.request("PUT", path, merged)
        except SpicaMCPError as e:
            return failure("Failed to update bucket", e)
        return success("Bucket updated successfully", data)

    @registry.tool(name="bucket-delete", description="Delete a bucket (and its data) from Spica.")
    async def bucket_delete(bucket_id: str) -> str:
        try:
            await spica.request("DELETE", f"/bucket/{path_segment(bucket_id, name='bucket_id')}")
        except SpicaMCPError as e:
            return failure("Failed to delete bucket", e)
        return success("Bucket deleted successfully")
