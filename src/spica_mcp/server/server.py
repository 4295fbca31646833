"""Server bootstrap for the Spica MCP service.

Configures logging, loads settings, creates the FastMCP instance and the
tool registry, wires the Spica and documentation clients into every tool
group, registers prompts and starts the MCP server (stdio transport).
"""

from typing import Optional

from mcp.server.fastmcp import FastMCP

from spica_mcp.clients.docs_client import OpenAIDocsClient
from spica_mcp.clients.spica_client import SpicaClient
from spica_mcp.config import LOG_JSON, LOG_LEVEL, Settings, load_settings
from spica_mcp.core.logging import get_logger, setup_logging
from spica_mcp.core.registry import ToolRegistry

from spica_mcp.tools.bucket_data import register as register_bucket_data
from spica_mcp.tools.buckets import register as register_buckets
from spica_mcp.tools.docs import register as register_docs
from spica_mcp.tools.functions import register as register_functions
from spica_mcp.tools.helper import register as register_helper
from spica_mcp.tools.passport_apikey import register as register_passport_apikey
from spica_mcp.tools.passport_identity import register as register_passport_identity
from spica_mcp.tools.passport_policy import register as register_passport_policy

from spica_mcp.prompts.spica_prompt import register_prompts

setup_logging(level=LOG_LEVEL, json_logs=LOG_JSON)
logger = get_logger(__name__)

mcp = FastMCP("spica-mcp-server")
registry = ToolRegistry(mcp)


def register_tools(
    target: ToolRegistry,
    settings: Settings,
    *,
    spica: Optional[SpicaClient] = None,
    docs: Optional[OpenAIDocsClient] = None,
) -> None:
    spica_client = spica or SpicaClient.from_settings(settings)
    docs_client = docs or OpenAIDocsClient.from_settings(settings)

    register_buckets(target, spica=spica_client)
    register_bucket_data(target, spica=spica_client)
    register_passport_identity(target, spica=spica_client)
    register_passport_apikey(target, spica=spica_client)
    register_passport_policy(target, spica=spica_client)
    register_functions(target, spica=spica_client)
    register_docs(target, docs=docs_client)
    register_helper(target, settings=settings)


def register_all() -> None:
    settings = load_settings()
    register_tools(registry, settings)
    register_prompts(mcp)
    logger.info("server_ready", tools=len(registry))


register_all()


def main() -> None:
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
