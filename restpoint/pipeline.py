"""The request pipeline every generated method funnels through.

prepare() runs eagerly when a method is called:
  1. check the caller supplied the ids the URL needs
  2. apply params_transform once
  3. split the transformed params into path ids, query and body
  4. assemble the URL, one encoded segment at a time

send() is the awaitable half:
  5. hand the request to the transport
  6. pass a success body through before_success
  7. pass a failure payload through before_error and raise RequestError
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .actions import BODY, QUERY, Action
from .descriptor import ResourceDescriptor
from .errors import MissingIdentifierError, RequestError, TransportError
from .naming import encode_segment

if TYPE_CHECKING:
    from .client import ClientConfig
    from .transport import Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedRequest:
    method: str
    url: str
    query: dict[str, Any] = field(default_factory=dict)
    body: dict[str, Any] | None = None


def _is_missing(params: Mapping[str, Any], key: str) -> bool:
    return params.get(key) in (None, "")


def required_keys(descriptor: ResourceDescriptor, action: Action) -> list[str]:
    """Params keys an action cannot be invoked without, parent first."""
    keys = []
    if descriptor.parent_key is not None:
        keys.append(descriptor.parent_key)
    if action.on_member:
        keys.append(descriptor.id_attribute)
    return keys


def check_identifiers(
    descriptor: ResourceDescriptor, action: Action, params: Mapping[str, Any]
) -> None:
    for key in required_keys(descriptor, action):
        if _is_missing(params, key):
            raise MissingIdentifierError(key, descriptor.name)


def build_url(
    host: str,
    descriptor: ResourceDescriptor,
    action: Action,
    parent_id: Any = None,
    own_id: Any = None,
) -> str:
    """Join host, parent segment, resource name, id and action name."""
    segments: list[Any] = []
    if descriptor.nest_under is not None:
        segments += [descriptor.nest_under.name, parent_id]
    segments.append(descriptor.name)
    if action.on_member:
        segments.append(own_id)
    if action.name_segment:
        segments.append(action.name_segment)
    return host.rstrip("/") + "/" + "/".join(encode_segment(s) for s in segments)


def partition(
    descriptor: ResourceDescriptor, action: Action, params: Mapping[str, Any]
) -> tuple[Any, Any, dict[str, Any], dict[str, Any] | None]:
    """Split params into ``(parent_id, own_id, query, body)``.

    Path-bound keys are consumed so they never reach the query or body.
    """
    remaining = dict(params)

    parent_id = None
    if descriptor.parent_key is not None:
        parent_id = remaining.pop(descriptor.parent_key, None)

    own_id = None
    if action.on_member:
        own_id = remaining.pop(descriptor.id_attribute, None)

    if action.params_to == QUERY:
        return parent_id, own_id, remaining, None
    if action.params_to == BODY:
        return parent_id, own_id, {}, remaining
    return parent_id, own_id, {}, None


def prepare(
    config: ClientConfig,
    descriptor: ResourceDescriptor,
    action: Action,
    params: Mapping[str, Any] | None,
) -> PreparedRequest:
    """Validate, transform and partition params into a request."""
    if params is None:
        params = {}
    if not isinstance(params, Mapping):
        raise TypeError(f"params must be a mapping, got {type(params).__name__}")

    check_identifiers(descriptor, action, params)

    if config.params_transform is not None:
        params = config.params_transform(dict(params))
        if not isinstance(params, Mapping):
            raise TypeError(
                f"params_transform must return a mapping, got {type(params).__name__}"
            )
        # A transform may drop the ids it was given
        check_identifiers(descriptor, action, params)

    parent_id, own_id, query, body = partition(descriptor, action, params)
    url = build_url(config.host, descriptor, action, parent_id, own_id)
    return PreparedRequest(method=action.method, url=url, query=query, body=body)


async def send(config: ClientConfig, transport: Transport, request: PreparedRequest) -> Any:
    """Send a prepared request and run the success or error hook on the result."""
    # Query values may carry credentials, only their keys are logged
    logger.debug("%s %s query keys=%s", request.method, request.url, sorted(request.query))
    try:
        payload = await transport.request(
            request.method, request.url, query=request.query, body=request.body
        )
    except TransportError as exc:
        logger.debug(
            "%s %s failed with status %s", request.method, request.url, exc.status_code
        )
        error_payload = exc.payload
        if config.before_error is not None:
            error_payload = config.before_error(error_payload)
        raise RequestError(
            error_payload,
            status_code=exc.status_code,
            method=request.method,
            url=request.url,
        ) from exc

    if config.before_success is not None:
        payload = config.before_success(payload)
    return payload
