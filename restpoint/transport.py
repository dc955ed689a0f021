"""HTTP transport backed by httpx.

The transport knows nothing about resources: it takes a verb, an absolute
URL, a query mapping and a JSON body, and either returns the parsed
response body or raises :class:`~restpoint.errors.TransportError`.
"""

from __future__ import annotations

import logging
from json import JSONDecodeError
from typing import Any, Mapping, Protocol

import httpx

from . import query as query_encoder
from .errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class Transport(Protocol):
    async def request(
        self,
        method: str,
        url: str,
        *,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> Any: ...

    async def aclose(self) -> None: ...


def _parse_body(response: httpx.Response) -> Any:
    """Parse a response body as JSON, falling back to text."""
    if not response.content:
        return None
    try:
        return response.json()
    except (JSONDecodeError, UnicodeDecodeError):
        return response.text


class HttpxTransport:
    """Send requests through an ``httpx.AsyncClient``.

    An injected client is used as-is and left open on :meth:`aclose`; a
    client created here is owned and closed by the transport.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Mapping[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json", **(headers or {})},
        )

    async def request(
        self,
        method: str,
        url: str,
        *,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> Any:
        qs = query_encoder.encode(query)
        if qs:
            url = f"{url}{'&' if '?' in url else '?'}{qs}"

        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.debug("%s %s raised %s", method, url, exc)
            raise TransportError(
                {"error": str(exc) or exc.__class__.__name__},
                method=method,
                url=url,
            ) from exc

        payload = _parse_body(response)
        if not response.is_success:
            raise TransportError(
                payload,
                status_code=response.status_code,
                method=method,
                url=url,
            )
        return payload

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
