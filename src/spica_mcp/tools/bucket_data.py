"""MCP tools for records stored inside a Spica bucket.

Registers bucket-data-list/get/create/update/delete, all scoped under
/bucket/{bucket_id}/data.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from spica_mcp.core.errors import SpicaMCPError
from spica_mcp.core.interfaces import SpicaRequester
from spica_mcp.core.payloads import merge_update, path_segment
from spica_mcp.core.registry import ToolRegistry
from spica_mcp.tools.formatting import failure, success


def _data_path(bucket_id: str, data_id: Optional[str] = None) -> str:
    base = f"/bucket/{path_segment(bucket_id, name='bucket_id')}/data"
    if data_id is None:
        return base
    return f"{base}/{path_segment(data_id, name='data_id')}"


def register(registry: ToolRegistry, *, spica: SpicaRequester) -> None:
    @registry.tool(name="bucket-data-list")
    async def bucket_data_list(
        bucket_id: str,
        limit: Optional[int] = None,
        skip: Optional[int] = None,
        sort: Optional[Union[str, Dict[str, Any]]] = None,
        filter: Optional[Union[str, Dict[str, Any]]] = None,
    ) -> str:
        """Get data from a specific bucket.

        limit/skip paginate; sort and filter are passed to Spica as JSON,
        either as objects (sort={"title": 1}) or as JSON strings.
        """
        params = {"limit": limit, "skip": skip, "sort": sort, "filter": filter}
        try:
            data = await spica.request("GET", _data_path(bucket_id), params=params)
        except SpicaMCPError as e:
            return failure("Failed to list bucket data", e)
        return success("Bucket data retrieved successfully", data)

    @registry.tool(name="bucket-data-get", description="Get a single record from a bucket")
    async def bucket_data_get(bucket_id: str, data_id: str) -> str:
        try:
            data = await spica.request("GET", _data_path(bucket_id, data_id))
        except SpicaMCPError as e:
            return failure("Failed to get bucket data", e)
        return success("Bucket data retrieved successfully", data)

    @registry.tool(
        name="bucket-data-create",
        description=(
            "Add new data to a bucket. Tip: use search + answer_question first to understand "
            "the bucket schema and required data structure before adding data."
        ),
    )
    async def bucket_data_create(bucket_id: str, data: Dict[str, Any]) -> str:
        try:
            created = await spica.request("POST", _data_path(bucket_id), data)
        except SpicaMCPError as e:
            return failure("Failed to create bucket data", e)
        return success("Bucket data created successfully", created)

    @registry.tool(
        name="bucket-data-update",
        description="Update existing data in a bucket. Only the given top-level fields change.",
    )
    async def bucket_data_update(bucket_id: str, data_id: str, data: Dict[str, Any]) -> str:
        try:
            path = _data_path(bucket_id, data_id)
            current = await spica.request("GET", path)
            merged = merge_update(current, data, resource_id=data_id)
            updated = await spica.request("PUT", path, merged)
        except SpicaMCPError as e:
            return failure("Failed to update bucket data", e)
        return success("Bucket data updated successfully", updated)

    @registry.tool(name="bucket-data-delete", description="Delete specific data from a bucket")
    async def bucket_data_delete(bucket_id: str, data_id: str) -> str:
        try:
            await spica.request("DELETE", _data_path(bucket_id, data_id))
        except SpicaMCPError as e:
            return failure("Failed to delete bucket data", e)
        return success("Bucket data deleted successfully")
