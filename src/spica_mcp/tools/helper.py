"""Static guidance tools: setup help and the documentation-first workflow."""

from __future__ import annotations

from spica_mcp.config import Settings
from spica_mcp.core.registry import ToolRegistry
from spica_mcp.prompts.spica_prompt import WORKFLOW_GUIDE

SETUP_GUIDE = """**Spica MCP Server - Setup & Workflow Guide**

**REQUIRED CONFIGURATION:**
Add these environment variables to your MCP host config:
```json
"spica-mcp-server": {{
  "command": "spica-mcp-server",
  "env": {{
    "SPICA_URL": "http://localhost:4500",
    "SPICA_API_KEY": "YOUR_SPICA_API_KEY_HERE",
    "OPENAI_API_KEY": "OPTIONAL_FOR_DOCUMENTATION_TOOLS",
    "VECTOR_STORE_ID": "OPTIONAL_FOR_DOCUMENTATION_TOOLS"
  }}
}}
```
SPICA_URL and SPICA_API_KEY may also come from a config.json
(`{{"spicaUrl": ..., "apiKey": ...}}`) in the working directory;
environment variables win.

**CURRENT STATUS:**
- Spica URL configured: {spica}
- Spica API key configured: {api_key}
- Documentation tools enabled: {docs}

Call "workflow-guide" next."""


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


def register(registry: ToolRegistry, *, settings: Settings) -> None:
    @registry.tool(
        name="help",
        description="Get guidance on how to configure and use this MCP server.",
    )
    async def help() -> str:
        return SETUP_GUIDE.format(
            spica=_yes_no(bool(settings.spica_url)),
            api_key=_yes_no(bool(settings.api_key)),
            docs=_yes_no(settings.docs_enabled),
        )

    @registry.tool(
        name="workflow-guide",
        description=(
            "MANDATORY FIRST STEP: explains the documentation-first workflow to follow before "
            "performing ANY Spica operations."
        ),
    )
    async def workflow_guide() -> str:
        return WORKFLOW_GUIDE
