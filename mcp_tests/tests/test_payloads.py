import pytest

from spica_mcp.core.errors import ValidationError
from spica_mcp.core.payloads import compact, jsonable, merge_update, path_segment
from spica_mcp.core.schemas import PolicyResource, PolicyStatement


def test_merge_update_overwrites_and_reasserts_id():
    merged = merge_update({"a": 1, "b": 2}, {"b": 3}, resource_id="x1")
    assert merged == {"a": 1, "b": 3, "_id": "x1"}


def test_merge_update_skips_unset_fields():
    merged = merge_update({"a": 1, "b": 2}, {"a": None, "b": 5}, resource_id="x1")
    assert merged == {"a": 1, "b": 5, "_id": "x1"}


def test_merge_update_is_shallow():
    current = {"acl": {"read": "r", "write": "w"}, "properties": {"title": {"type": "string"}}}
    merged = merge_update(current, {"properties": {"body": {"type": "textarea"}}}, resource_id="b")
    assert merged["properties"] == {"body": {"type": "textarea"}}
    assert merged["acl"] == {"read": "r", "write": "w"}


def test_merge_update_does_not_mutate_inputs():
    current = {"a": 1}
    merge_update(current, {"a": 2}, resource_id="i")
    assert current == {"a": 1}


def test_merge_update_tolerates_non_object_current():
    assert merge_update(None, {"a": 1}, resource_id="i") == {"a": 1, "_id": "i"}


def test_jsonable_converts_models():
    statement = [PolicyStatement(action="bucket:index", module="bucket", resource=PolicyResource(include=["*"]))]
    assert jsonable(statement) == [{"action": "bucket:index", "module": "bucket", "resource": {"include": ["*"]}}]


def test_compact_drops_none():
    assert compact({"a": None, "b": False, "c": 0}) == {"b": False, "c": 0}


def test_path_segment_escapes_and_validates():
    assert path_segment("@scope/pkg", name="dependency") == "%40scope%2Fpkg"
    with pytest.raises(ValidationError):
        path_segment("  ")
