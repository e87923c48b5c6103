"""Shared connector types: the client handle and construction context."""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Protocol, runtime_checkable

import httpx

from chatbridge.core.config import ConnectorType


@dataclass(frozen=True)
class DiscoveredEndpoint:
    """Address and model reported by a local model manager."""

    endpoint: str
    model_id: str
    api_key: Optional[str] = None


@runtime_checkable
class EndpointDiscovery(Protocol):
    """Looks up the endpoint serving a model alias on a local runtime."""

    async def discover(self, alias: str) -> DiscoveredEndpoint:  # pragma: no cover - protocol
        ...


@dataclass(frozen=True)
class ConnectorContext:
    """Collaborators handed to client factories.

    ``http_client`` is used for auxiliary HTTP calls (model pulls); when it is
    None the factory opens and closes its own client.
    """

    discovery: Optional[EndpointDiscovery] = None
    http_client: Optional[httpx.AsyncClient] = None


@dataclass
class ChatClientHandle:
    """A ready-to-use SDK client for the active connector."""

    connector_type: ConnectorType
    model: str
    client: Any = field(repr=False)
    endpoint: Optional[str] = None

    async def aclose(self) -> None:
        """Release the SDK client's connections, if it exposes a close hook."""
        for name in ("aclose", "close"):
            closer = getattr(self.client, name, None)
            if closer is None or not callable(closer):
                continue
            result = closer()
            if inspect.isawaitable(result):
                await result
            return

    async def __aenter__(self) -> "ChatClientHandle":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


ClientFactory = Callable[[Any, ConnectorContext], Awaitable[ChatClientHandle]]


__all__ = [
    "ChatClientHandle",
    "ClientFactory",
    "ConnectorContext",
    "DiscoveredEndpoint",
    "EndpointDiscovery",
]
