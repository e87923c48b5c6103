"""Foundry Local connector.

By default the Foundry Local manager is asked to start the aliased model and
report where it is served. With ``DisableFoundryLocalManager`` the configured
endpoint and model ID are used as-is.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from openai import AsyncOpenAI

from chatbridge.core.connectors.base import (
    ChatClientHandle,
    ConnectorContext,
    DiscoveredEndpoint,
    EndpointDiscovery,
)
from chatbridge.core.settings import FoundryLocalSettings
from chatbridge.utils.log import get_logger


logger = get_logger()

FOUNDRY_LOCAL_API_KEY = "OPENAI_API_KEY"
FOUNDRY_LOCAL_SDK_IMPORT_ERROR = (
    "Foundry Local manager requires the 'foundry-local-sdk' package. "
    "Install with `pip install chatbridge[foundry-local]`, "
    "or set FoundryLocal:DisableFoundryLocalManager and configure the endpoint manually."
)


class FoundryLocalManagerDiscovery:
    """Endpoint discovery backed by ``foundry_local.FoundryLocalManager``.

    The SDK is synchronous (it may download and load the model), so it runs in
    a worker thread.
    """

    def _start(self, alias: str) -> DiscoveredEndpoint:
        try:
            from foundry_local import FoundryLocalManager  # type: ignore
        except (ImportError, ModuleNotFoundError) as exc:
            raise RuntimeError(FOUNDRY_LOCAL_SDK_IMPORT_ERROR) from exc

        manager: Any = FoundryLocalManager(alias)
        model_info = manager.get_model_info(alias)
        model_id = getattr(model_info, "id", None) or alias
        return DiscoveredEndpoint(
            endpoint=str(manager.endpoint),
            model_id=model_id,
            api_key=getattr(manager, "api_key", None),
        )

    async def discover(self, alias: str) -> DiscoveredEndpoint:
        return await asyncio.to_thread(self._start, alias)


async def create_foundry_local_client(
    settings: FoundryLocalSettings, context: ConnectorContext
) -> ChatClientHandle:
    api_key: Optional[str] = None
    if settings.disable_foundry_local_manager:
        endpoint = (settings.endpoint or "").strip()
        model_id = (settings.model_id or "").strip()
    else:
        alias = (settings.alias or "").strip()
        discovery: EndpointDiscovery = context.discovery or FoundryLocalManagerDiscovery()
        logger.debug("[foundry_local] Discovering endpoint", extra={"alias": alias})
        discovered = await discovery.discover(alias)
        endpoint = discovered.endpoint
        model_id = discovered.model_id or alias
        api_key = discovered.api_key

    client = AsyncOpenAI(api_key=api_key or FOUNDRY_LOCAL_API_KEY, base_url=endpoint)
    logger.debug(
        "[foundry_local] Created client",
        extra={"endpoint": endpoint, "model": model_id},
    )
    return ChatClientHandle(
        connector_type=settings.connector_type,
        model=model_id,
        client=client,
        endpoint=endpoint,
    )
