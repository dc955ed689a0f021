"""Exception hierarchy.

Configuration and missing-identifier errors are programmer errors raised at
generation or call time. Transport failures only surface from awaiting a
request, as :class:`RequestError`.
"""

from __future__ import annotations

from typing import Any


class RestpointError(Exception):
    """Base class for every error raised by restpoint."""


class ConfigurationError(RestpointError, ValueError):
    """A client, resource or custom action was declared incorrectly."""


class MissingIdentifierError(RestpointError, ValueError):
    """A member or nested action was invoked without a required id."""

    def __init__(self, field: str, resource: str | None = None):
        self.field = field
        self.resource = resource
        super().__init__(f'You must provide "{field}" in params')


class _HTTPFailure(RestpointError):
    def __init__(
        self,
        payload: Any,
        status_code: int | None = None,
        method: str | None = None,
        url: str | None = None,
    ):
        self.payload = payload
        self.status_code = status_code
        self.method = method
        self.url = url
        super().__init__(payload)

    def __str__(self) -> str:
        status = self.status_code if self.status_code is not None else "no response"
        return f"{self.method} {self.url} failed ({status}): {self.payload!r}"


class TransportError(_HTTPFailure):
    """Raised by a transport for non-2xx responses and network failures."""


class RequestError(_HTTPFailure):
    """Raised to callers when a request fails.

    ``payload`` is the parsed error body, after ``before_error`` when the
    client configures one.
    """
