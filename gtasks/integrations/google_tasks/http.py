"""
HTTP helpers for the Tasks client

- JsonTransport: one JSON request/response cycle over httpx
- bearer(): Authorization header for an OAuth access token
- encode_query(): URL query-string encoding
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import httpx

from ...utils.config import ConfigDefaults
from ...utils.logger import setup_logger

logger = setup_logger(__name__)


def bearer(token: str) -> Dict[str, str]:
    """Authorization header for a bearer token."""
    return {"Authorization": f"Bearer {token}"}


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_query(mapping: Mapping[str, Any]) -> str:
    """Standard URL query encoding. Booleans render as ``true``/``false``."""
    return urlencode([(key, _query_value(value)) for key, value in mapping.items()])


@dataclass(frozen=True)
class TransportResponse:
    """
    Outcome of a single request.

    ``json`` holds the parsed body when the payload is JSON, ``raw`` the text
    otherwise. ``error`` is set (and ``status`` is None) when no HTTP response
    was received at all.
    """
    status: Optional[int] = None
    json: Any = None
    raw: Optional[str] = None
    error: Optional[str] = None


class JsonTransport:
    """
    JSON request/response transport backed by ``httpx.AsyncClient``.

    The client is created lazily and reused between calls. Pass ``client`` to
    share an existing ``httpx.AsyncClient`` (its lifecycle stays with the caller).
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = ConfigDefaults.HTTP_TIMEOUT_SECONDS
    ):
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "JsonTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def json(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body_obj: Any = None,
        debug: bool = False
    ) -> TransportResponse:
        """
        Send one request and read the response.

        Args:
            url: Absolute URL including any query string
            method: HTTP verb
            headers: Request headers
            body_obj: JSON-serializable body; omitted when None
            debug: Log request and response details

        Returns:
            TransportResponse; network errors are reported, not raised
        """
        client = await self._get_client()
        content = None if body_obj is None else json.dumps(body_obj)

        if debug:
            logger.info("http_request", method=method, url=url, body=body_obj)

        try:
            response = await client.request(method, url, headers=headers, content=content)
        except httpx.HTTPError as e:
            logger.warning("http_request_failed", method=method, url=url, error=str(e))
            return TransportResponse(error=f"request failed: {e}")

        raw = response.text
        parsed = None
        if raw:
            try:
                parsed = response.json()
            except ValueError:
                parsed = None

        if debug:
            logger.info("http_response", method=method, url=url, status=response.status_code, body=parsed if parsed is not None else raw)

        return TransportResponse(status=response.status_code, json=parsed, raw=raw or None)
