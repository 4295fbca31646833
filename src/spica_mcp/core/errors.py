from __future__ import annotations


class SpicaMCPError(Exception):
    """Base error for the Spica MCP server."""


class ValidationError(SpicaMCPError):
    """Raised when user input is invalid."""


class ConfigurationError(SpicaMCPError):
    """Raised when the Spica URL or API key is not configured."""


class UnsupportedMethodError(SpicaMCPError):
    """Raised when a request uses an HTTP verb the adapter does not dispatch."""


class RequestError(SpicaMCPError):
    """Raised when a Spica request fails (transport error or non-2xx status)."""


class DocumentationError(SpicaMCPError):
    """Raised when the documentation provider (OpenAI) fails."""


class DuplicateToolError(SpicaMCPError):
    """Raised when a tool name is registered twice."""
