"""JSON-over-HTTP transport to the storefront backend."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

import aiohttp

from unicart._constants import USER_AGENT
from unicart._redact import redact_for_log
from unicart.exceptions import ApiError, AuthenticationError, TransportError

_logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


def normalize_base_url(url: str | None) -> str:
    """Strip whitespace and trailing slashes; ``None`` becomes ``""``."""
    if not url:
        return ""
    return url.strip().rstrip("/")


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Tests pass hand-written doubles; production uses :class:`HttpTransport`.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        payload: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]: ...


class HttpTransport:
    """aiohttp transport adding JSON headers and the bearer token."""

    def __init__(
        self,
        base_url: str,
        http_session: aiohttp.ClientSession,
        *,
        token_provider: TokenProvider | None = None,
        timeout: float = 15.0,
    ) -> None:
        self._base_url = normalize_base_url(base_url)
        self._http = http_session
        self._token_provider = token_provider
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    def url_for(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self._base_url}/{endpoint.lstrip('/')}"

    def _headers(self) -> dict[str, str]:
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        token = self._token_provider() if self._token_provider is not None else None
        if token:
            headers["authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        payload: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON object.

        Raises
        ------
        AuthenticationError
            On HTTP 401.
        ApiError
            On any other non-2xx status; the message is the body's ``error``
            field when present.
        TransportError
            On network failure or a body that is not a JSON object.
        """
        url = self.url_for(endpoint)
        body = json.dumps(payload, separators=(",", ":")) if payload is not None else None

        _logger.debug("%s %s %s", method, url, redact_for_log(payload))

        try:
            async with self._http.request(
                method,
                url,
                data=body,
                headers=self._headers(),
                timeout=self._timeout,
            ) as resp:
                status = resp.status
                text = await resp.text()
        except aiohttp.ClientError as exc:
            raise TransportError(f"Request to {endpoint} failed: {exc}", endpoint=endpoint) from exc
        except TimeoutError as exc:
            raise TransportError(f"Request to {endpoint} timed out", endpoint=endpoint) from exc

        try:
            decoded: Any = json.loads(text) if text else {}
        except json.JSONDecodeError as exc:
            if not 200 <= status < 300:
                decoded = {}
            else:
                raise TransportError(
                    f"Invalid JSON from {endpoint}: {text[:200]}",
                    status_code=status,
                    endpoint=endpoint,
                ) from exc

        if not 200 <= status < 300:
            message = f"HTTP {status}"
            if isinstance(decoded, dict) and isinstance(decoded.get("error"), str):
                message = decoded["error"]
            error_cls = AuthenticationError if status == 401 else ApiError
            raise error_cls(message, status_code=status, endpoint=endpoint)

        if not isinstance(decoded, dict):
            raise TransportError(
                f"Expected a JSON object from {endpoint}",
                status_code=status,
                endpoint=endpoint,
            )

        _logger.debug("%s %s -> %d %s", method, url, status, redact_for_log(decoded, max_string=128))
        return decoded
