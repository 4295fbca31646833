import pytest

from spica_mcp.config import Settings
from spica_mcp.core.errors import DuplicateToolError
from spica_mcp.core.registry import ToolRegistry
from spica_mcp.prompts.spica_prompt import WORKFLOW_GUIDE, register_prompts
from spica_mcp.server import server as server_module


EXPECTED_TOOLS = {
    "bucket-list", "bucket-get", "bucket-create", "bucket-update", "bucket-delete",
    "bucket-data-list", "bucket-data-get", "bucket-data-create", "bucket-data-update", "bucket-data-delete",
    "passport-identity-list", "passport-identity-get", "passport-identity-create", "passport-identity-update",
    "passport-identity-delete", "passport-identity-verify", "passport-login",
    "passport-apikey-list", "passport-apikey-get", "passport-apikey-create", "passport-apikey-update",
    "passport-apikey-delete", "passport-apikey-assign-policy", "passport-apikey-remove-policy",
    "passport-policy-list", "passport-policy-get", "passport-policy-create", "passport-policy-update",
    "passport-policy-delete",
    "function-list", "function-get", "function-create", "function-update", "function-delete",
    "function-code-get", "function-code-update", "function-dependencies-list", "function-dependencies-add",
    "function-dependencies-remove", "function-logs",
    "search", "fetch", "answer_question",
    "help", "workflow-guide",
}


def test_module_registers_every_tool():
    assert set(server_module.registry.names()) == EXPECTED_TOOLS


def test_register_tools_binds_mcp(dummy_mcp):
    registry = ToolRegistry(dummy_mcp)
    server_module.register_tools(registry, Settings(spica_url="http://localhost:4500", api_key="k"))

    assert set(dummy_mcp.tools) == EXPECTED_TOOLS


def test_registering_twice_is_rejected():
    registry = ToolRegistry()
    settings = Settings()
    server_module.register_tools(registry, settings)

    with pytest.raises(DuplicateToolError):
        server_module.register_tools(registry, settings)


@pytest.mark.asyncio
async def test_unconfigured_server_reports_per_call_errors():
    registry = ToolRegistry()
    server_module.register_tools(registry, Settings())

    bucket = await registry.invoke("bucket-list")
    docs = await registry.invoke("search", {"query": "buckets"})

    assert bucket.text.startswith("❌ Failed to list buckets:\nSpica URL and API key must be configured")
    assert docs.text.startswith("❌ Documentation tools are not configured")


@pytest.mark.asyncio
async def test_help_reports_configuration_status():
    registry = ToolRegistry()
    server_module.register_tools(registry, Settings(spica_url="http://localhost:4500"))

    text = (await registry.invoke("help")).text

    assert "Spica URL configured: yes" in text
    assert "Spica API key configured: no" in text
    assert (await registry.invoke("workflow-guide")).text == WORKFLOW_GUIDE


def test_prompts_registered(dummy_mcp):
    register_prompts(dummy_mcp)
    assert dummy_mcp.prompts["spica-docs-first"]() == WORKFLOW_GUIDE


def test_main_runs_stdio(monkeypatch):
    calls = []
    monkeypatch.setattr(server_module.mcp, "run", lambda *, transport: calls.append(transport))

    server_module.main()

    assert calls == ["stdio"]


def test_tool_modules_are_documented():
    from spica_mcp.tools import bucket_data, buckets, docs, functions, helper
    from spica_mcp.tools import passport_apikey, passport_identity, passport_policy

    for module in (buckets, bucket_data, docs, functions, helper, passport_apikey, passport_identity, passport_policy):
        assert module.__doc__ and module.__doc__.strip(), module.__name__
