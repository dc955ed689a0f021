"""Generate REST resource clients from a name and a few options."""

from .actions import CustomAction, StandardAction
from .client import Client, ClientConfig, Resource
from .descriptor import ResourceDescriptor
from .errors import (
    ConfigurationError,
    MissingIdentifierError,
    RequestError,
    RestpointError,
    TransportError,
)
from .transport import HttpxTransport

__all__ = [
    "Client",
    "ClientConfig",
    "ConfigurationError",
    "CustomAction",
    "HttpxTransport",
    "MissingIdentifierError",
    "RequestError",
    "Resource",
    "ResourceDescriptor",
    "RestpointError",
    "StandardAction",
    "TransportError",
]
