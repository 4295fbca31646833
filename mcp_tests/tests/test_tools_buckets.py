import json

import pytest

from conftest import Replies
from spica_mcp.core.errors import RequestError
from spica_mcp.tools import buckets as buckets_tool


@pytest.fixture
def tools(registry, spica):
    buckets_tool.register(registry, spica=spica)
    return registry


@pytest.mark.asyncio
async def test_bucket_list(tools, spica):
    spica.responses[("GET", "/bucket")] = [{"_id": "b1", "title": "Posts"}]

    result = await tools.invoke("bucket-list")

    assert result.text.startswith("✅ Buckets retrieved successfully:\n")
    assert json.loads(result.text.split("\n", 1)[1]) == [{"_id": "b1", "title": "Posts"}]
    assert spica.methods() == [("GET", "/bucket")]


@pytest.mark.asyncio
async def test_bucket_create_applies_defaults(tools, spica):
    properties = {"title": {"type": "string"}}

    await tools.invoke("bucket-create", {"title": "Posts", "description": "Blog posts", "properties": properties})

    call = spica.calls[0]
    assert (call.method, call.path) == ("POST", "/bucket")
    assert call.body == {
        "title": "Posts",
        "description": "Blog posts",
        "icon": "view_stream",
        "primary": "title",
        "readOnly": False,
        "history": False,
        "properties": properties,
        "acl": {"read": "true==true", "write": "true==true"},
        "order": 0,
    }


@pytest.mark.asyncio
async def test_bucket_create_uses_given_options(tools, spica):
    await tools.invoke(
        "bucket-create",
        {
            "title": "Posts",
            "description": "d",
            "properties": {},
            "icon": "article",
            "read_only": True,
            "acl": {"read": "auth.identifier=='admin'", "write": "false"},
        },
    )

    body = spica.calls[0].body
    assert body["icon"] == "article"
    assert body["readOnly"] is True
    assert body["acl"] == {"read": "auth.identifier=='admin'", "write": "false"}


@pytest.mark.asyncio
async def test_bucket_create_missing_required_field_makes_no_request(tools, spica):
    result = await tools.invoke("bucket-create", {"title": "Posts", "description": "d"})

    assert result.is_error is True
    assert spica.calls == []


@pytest.mark.asyncio
async def test_bucket_update_merges_over_current(tools, spica):
    spica.responses[("GET", "/bucket/b1")] = {"_id": "b1", "title": "Old", "icon": "view_stream", "history": False}

    result = await tools.invoke("bucket-update", {"bucket_id": "b1", "title": "New", "history": True})

    assert result.text.startswith("✅ Bucket updated successfully")
    assert spica.methods() == [("GET", "/bucket/b1"), ("PUT", "/bucket/b1")]
    assert spica.calls[1].body == {"_id": "b1", "title": "New", "icon": "view_stream", "history": True}


@pytest.mark.asyncio
async def test_bucket_update_stops_when_fetch_fails(tools, spica):
    spica.responses[("GET", "/bucket/b1")] = RequestError('{\n  "message": "Not Found"\n}')

    result = await tools.invoke("bucket-update", {"bucket_id": "b1", "title": "New"})

    assert result.text.startswith("❌ Failed to update bucket:")
    assert spica.methods() == [("GET", "/bucket/b1")]


@pytest.mark.asyncio
async def test_bucket_delete_twice_reports_remote_error(tools, spica):
    spica.responses[("DELETE", "/bucket/b1")] = Replies([None, RequestError('{\n  "statusCode": 404\n}')])

    first = await tools.invoke("bucket-delete", {"bucket_id": "b1"})
    second = await tools.invoke("bucket-delete", {"bucket_id": "b1"})

    assert first.text == "✅ Bucket deleted successfully"
    assert second.text == '❌ Failed to delete bucket:\n{\n  "statusCode": 404\n}'


@pytest.mark.asyncio
async def test_blank_id_is_reported_without_request(tools, spica):
    result = await tools.invoke("bucket-get", {"bucket_id": "  "})

    assert result.text.startswith("❌ Failed to get bucket:")
    assert spica.calls == []
