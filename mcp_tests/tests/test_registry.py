import pytest

from spica_mcp.core.errors import DuplicateToolError
from spica_mcp.core.registry import ToolRegistry


def _register_echo(registry: ToolRegistry, calls: list) -> None:
    @registry.tool(name="echo", description="Echo a message")
    async def echo(message: str, times: int = 1) -> str:
        calls.append((message, times))
        return message * times


@pytest.mark.asyncio
async def test_invoke_runs_handler_with_validated_arguments(registry):
    calls = []
    _register_echo(registry, calls)

    result = await registry.invoke("echo", {"message": "hi", "times": 2})

    assert result.text == "hihi"
    assert result.is_error is False
    assert calls == [("hi", 2)]


@pytest.mark.asyncio
async def test_missing_required_argument_is_rejected_without_calling_handler(registry):
    calls = []
    _register_echo(registry, calls)

    result = await registry.invoke("echo", {"times": 2})

    assert result.is_error is True
    assert calls == []
    assert result.errors[0]["loc"] == ["message"]
    assert "Invalid arguments for echo" in result.text


@pytest.mark.asyncio
async def test_wrong_type_is_rejected(registry):
    calls = []
    _register_echo(registry, calls)

    result = await registry.invoke("echo", {"message": "hi", "times": "many"})

    assert result.is_error is True
    assert calls == []


@pytest.mark.asyncio
async def test_unknown_tool(registry):
    result = await registry.invoke("nope", {})
    assert result.is_error is True
    assert "Unknown tool" in result.text


def test_duplicate_names_are_rejected(registry):
    _register_echo(registry, [])
    with pytest.raises(DuplicateToolError):
        _register_echo(registry, [])
    assert len(registry) == 1


def test_sync_handlers_are_rejected(registry):
    with pytest.raises(TypeError):
        @registry.tool(name="sync")
        def sync() -> str:
            return "x"


@pytest.mark.asyncio
async def test_handler_crash_becomes_failure_text(registry):
    @registry.tool(name="boom")
    async def boom() -> str:
        raise RuntimeError("kaput")

    result = await registry.invoke("boom")

    assert result.text.startswith("❌ Tool boom failed unexpectedly")
    assert "kaput" in result.text


def test_definition_exposes_schema_and_docstring_description(registry):
    @registry.tool(name="documented")
    async def documented(bucket_id: str, limit: int = 10) -> str:
        """List things in a bucket."""
        return ""

    definition = registry.get("documented")
    assert definition.description == "List things in a bucket."
    schema = definition.input_schema
    assert schema["required"] == ["bucket_id"]
    assert set(schema["properties"]) == {"bucket_id", "limit"}
    assert registry.names() == ["documented"]
    assert "documented" in registry


@pytest.mark.asyncio
async def test_binding_forwards_guarded_handler_to_mcp(dummy_mcp):
    registry = ToolRegistry(dummy_mcp)

    @registry.tool(name="boom", description="Always fails")
    async def boom(reason: str) -> str:
        raise ValueError(reason)

    entry = dummy_mcp.tools["boom"]
    assert entry["description"] == "Always fails"
    # FastMCP would call the guarded handler directly
    text = await entry["fn"](reason="bad")
    assert text.startswith("❌")
