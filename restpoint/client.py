"""Client configuration and the resource factory.

Usage::

    client = Client("http://api.example.com/v1")
    rooms = client.generate("rooms")
    users = client.generate(
        "users",
        nest_under=rooms,
        custom_actions=[{"method": "post", "name": "login", "on": "collection"}],
    )

    await users.get_collection({"roomId": 1, "page": 2})   # GET /rooms/1/users?page=2
    await users.update(roomId=1, id=5, email="e@x.com")    # PATCH /rooms/1/users/5
    await users.login(roomId=1, email="e@x.com")           # POST /rooms/1/users/login
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping

from . import pipeline
from .actions import Action, StandardAction
from .descriptor import ResourceDescriptor
from .errors import ConfigurationError
from .transport import HttpxTransport, Transport

ParamsHook = Callable[[dict], Mapping[str, Any]]
ResponseHook = Callable[[Any], Any]

HOST_ENV = "RESTPOINT_HOST"
TIMEOUT_ENV = "RESTPOINT_TIMEOUT"

_OPTION_KEYS = {"id_attribute", "nest_under", "parent_id_key"}


@dataclass(frozen=True)
class ClientConfig:
    host: str
    params_transform: ParamsHook | None = None
    before_success: ResponseHook | None = None
    before_error: ResponseHook | None = None

    def __post_init__(self):
        if not isinstance(self.host, str) or not self.host.strip():
            raise ConfigurationError("Client host is required")
        object.__setattr__(self, "host", self.host.rstrip("/"))
        for hook in ("params_transform", "before_success", "before_error"):
            value = getattr(self, hook)
            if value is not None and not callable(value):
                raise ConfigurationError(f"{hook} must be callable, got {value!r}")


class Resource:
    """The method set generated for one resource descriptor.

    Every method validates and prepares its request when called, raising
    configuration and missing-id errors immediately, and returns an
    awaitable for the network round trip.
    """

    def __init__(self, descriptor: ResourceDescriptor, config: ClientConfig, transport: Transport):
        self.descriptor = descriptor
        self.config = config
        self._transport = transport

    def __repr__(self) -> str:
        return f"<Resource {self.url}>"

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def id_attribute(self) -> str:
        return self.descriptor.id_attribute

    @property
    def nest_under(self) -> ResourceDescriptor | None:
        return self.descriptor.nest_under

    @property
    def parent_key(self) -> str | None:
        return self.descriptor.parent_key

    @property
    def custom_actions(self) -> tuple:
        return self.descriptor.custom_actions

    @property
    def url(self) -> str:
        """Collection URL template, with a placeholder for the parent id."""
        parts = [self.config.host]
        if self.nest_under is not None:
            parts += [self.nest_under.name, "{%s}" % self.parent_key]
        parts.append(self.name)
        return "/".join(parts)

    def actions(self) -> list[str]:
        return [action.method_name for action in self.descriptor.actions()]

    def _dispatch(
        self, action: Action, params: Mapping[str, Any] | None, kwargs: dict[str, Any]
    ) -> Awaitable[Any]:
        if kwargs:
            params = {**(params or {}), **kwargs}
        request = pipeline.prepare(self.config, self.descriptor, action, params)
        return pipeline.send(self.config, self._transport, request)

    def invoke(self, name: str, params: Mapping[str, Any] | None = None, **kwargs: Any) -> Awaitable[Any]:
        """Invoke any standard or custom action by name."""
        action = self.descriptor.find_action(name)
        if action is None:
            raise AttributeError(f"{self.name!r} has no action {name!r}")
        return self._dispatch(action, params, kwargs)

    def get_collection(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> Awaitable[Any]:
        return self._dispatch(StandardAction.GET_COLLECTION, params, kwargs)

    def get(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> Awaitable[Any]:
        return self._dispatch(StandardAction.GET, params, kwargs)

    def create(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> Awaitable[Any]:
        return self._dispatch(StandardAction.CREATE, params, kwargs)

    def update(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> Awaitable[Any]:
        return self._dispatch(StandardAction.UPDATE, params, kwargs)

    def destroy(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> Awaitable[Any]:
        return self._dispatch(StandardAction.DESTROY, params, kwargs)

    def __getattr__(self, name: str) -> Callable[..., Awaitable[Any]]:
        # Only reached for attributes not found normally, i.e. custom actions
        if name.startswith("_"):
            raise AttributeError(name)
        descriptor = self.__dict__.get("descriptor")
        if descriptor is None:
            raise AttributeError(name)
        action = descriptor.find_action(name)
        if action is None:
            raise AttributeError(f"{type(self).__name__} {descriptor.name!r} has no action {name!r}")

        def method(params: Mapping[str, Any] | None = None, **kwargs: Any) -> Awaitable[Any]:
            return self._dispatch(action, params, kwargs)

        method.__name__ = name
        return method

    def __dir__(self):
        return sorted(set(super().__dir__()) | {a.name for a in self.custom_actions})


class Client:
    """Holds the client configuration and generates resources bound to it."""

    def __init__(
        self,
        host: str,
        *,
        params_transform: ParamsHook | None = None,
        before_success: ResponseHook | None = None,
        before_error: ResponseHook | None = None,
        transport: Transport | None = None,
    ):
        self.config = ClientConfig(
            host=host,
            params_transform=params_transform,
            before_success=before_success,
            before_error=before_error,
        )
        self.transport = transport or HttpxTransport()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **kwargs: Any) -> "Client":
        """Build a client from ``RESTPOINT_HOST`` and ``RESTPOINT_TIMEOUT``."""
        environ = os.environ if environ is None else environ
        host = environ.get(HOST_ENV)
        if not host:
            raise ConfigurationError(f"{HOST_ENV} is not set")

        if "transport" not in kwargs and environ.get(TIMEOUT_ENV):
            try:
                timeout = float(environ[TIMEOUT_ENV])
            except ValueError:
                raise ConfigurationError(
                    f"{TIMEOUT_ENV} must be a number, got {environ[TIMEOUT_ENV]!r}"
                ) from None
            kwargs["transport"] = HttpxTransport(timeout=timeout)

        return cls(host, **kwargs)

    def generate(
        self,
        name: str,
        options: Mapping[str, Any] | None = None,
        custom_actions: Any = None,
        **option_kwargs: Any,
    ) -> Resource:
        """Describe a resource and return its generated method set.

        ``options`` (or keyword arguments) accept ``id_attribute``,
        ``nest_under`` and ``parent_id_key``.
        """
        merged = {**(options or {}), **option_kwargs}
        unknown = set(merged) - _OPTION_KEYS
        if unknown:
            raise ConfigurationError(
                f"Unknown option(s) for {name!r}: {', '.join(sorted(unknown))}"
            )
        descriptor = ResourceDescriptor.build(name, custom_actions=custom_actions, **merged)
        return self.bind(descriptor)

    def bind(self, descriptor: ResourceDescriptor) -> Resource:
        """Generate the method set for an existing descriptor."""
        return Resource(descriptor, self.config, self.transport)

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
