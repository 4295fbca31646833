"""Spica REST client: the single request adapter used by every domain tool.

One attempt per call, no caching, no retries. Every transport failure or
non-2xx response is normalized into a RequestError whose message is the
remote body (pretty-printed when it is JSON) or the transport error text.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

import httpx

from spica_mcp.config import Settings
from spica_mcp.core.errors import ConfigurationError, RequestError, UnsupportedMethodError
from spica_mcp.core.logging import get_logger
from spica_mcp.core.models import SUPPORTED_METHODS, SpicaRequest

logger = get_logger(__name__)


def _describe_error(err: httpx.HTTPStatusError) -> str:
    resp = err.response
    if resp is None or not resp.content:
        return str(err)
    try:
        return json.dumps(resp.json(), indent=2, ensure_ascii=False)
    except ValueError:
        return resp.text or str(err)


def _decode(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            out[key] = "true" if value else "false"
        elif isinstance(value, Mapping):
            # sort/filter objects travel as compact JSON strings
            out[key] = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        elif isinstance(value, (list, tuple)):
            out[key] = [str(v) for v in value]
        else:
            out[key] = str(value)
    return out


class SpicaClient:
    """Async adapter for the Spica REST API.

    Usage:
      await client.request("GET", "/bucket")
      await client.request("PUT", f"/bucket/{bucket_id}", merged)
      await client.request("POST", "/passport/identify", creds, authenticated=False)
    """

    API_PREFIX = "/api"

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        verify: bool = True,
    ) -> None:
        self._base_url = (base_url or "").strip().rstrip("/")
        self._api_key = (api_key or "").strip()
        self._timeout = float(timeout)
        self._verify = bool(verify)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SpicaClient":
        return cls(
            base_url=settings.spica_url,
            api_key=settings.api_key,
            timeout=settings.http_timeout,
            verify=settings.http_verify,
        )

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
        authenticated: bool = True,
    ) -> Any:
        """Send one request and return the decoded response body."""
        req = self._describe(method, path, body, params=params, authenticated=authenticated)

        try:
            async with self._create_client(authenticated=req.authenticated) as client:
                resp = await client.request(
                    req.method,
                    self._url(req.path),
                    json=req.body,
                    params=_clean_params(req.params),
                )
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("spica_request_failed", method=req.method, path=req.path, status=e.response.status_code)
            raise RequestError(_describe_error(e)) from e
        except httpx.HTTPError as e:
            logger.warning("spica_request_failed", method=req.method, path=req.path, error=str(e))
            raise RequestError(str(e) or e.__class__.__name__) from e

        logger.debug("spica_request", method=req.method, path=req.path, status=resp.status_code)
        return _decode(resp)

    # --- helpers ---

    def _describe(
        self,
        method: str,
        path: str,
        body: Any,
        *,
        params: Optional[Mapping[str, Any]],
        authenticated: bool,
    ) -> SpicaRequest:
        # Configuration is checked before anything else so no call goes out half-configured
        if not self._base_url or (authenticated and not self._api_key):
            raise ConfigurationError(
                "Spica URL and API key must be configured. Set SPICA_URL and SPICA_API_KEY "
                "environment variables or provide them in config.json."
            )

        verb = (method or "").strip().upper()
        if verb not in SUPPORTED_METHODS:
            raise UnsupportedMethodError(f"Unsupported HTTP method: {method}")

        clean_path = "/" + (path or "").lstrip("/")
        return SpicaRequest(method=verb, path=clean_path, body=body, params=params, authenticated=authenticated)

    def _url(self, path: str) -> str:
        return f"{self._base_url}{self.API_PREFIX}{path}"

    def _headers(self, *, authenticated: bool) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if authenticated:
            # Spica expects the raw key value, no "Bearer" scheme
            headers["Authorization"] = self._api_key
        return headers

    def _create_client(self, *, authenticated: bool = True) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self._headers(authenticated=authenticated),
            timeout=self._timeout,
            verify=self._verify,
        )
