"""Client factory dispatch with lazily imported SDK modules."""

from __future__ import annotations

import asyncio
import importlib
from typing import Dict, Optional, Tuple, cast

import httpx

from chatbridge.core.config import ConnectorType
from chatbridge.core.connectors.base import (
    ChatClientHandle,
    ClientFactory,
    ConnectorContext,
    DiscoveredEndpoint,
    EndpointDiscovery,
)
from chatbridge.core.errors import (
    ConnectorConstructionError,
    ConnectorError,
    UnsupportedConnectorError,
)
from chatbridge.core.validation import ValidatedSettings
from chatbridge.utils.log import get_logger

logger = get_logger()

# connector type -> (module under chatbridge.core.connectors, factory name, pip package)
_FACTORIES: Dict[ConnectorType, Tuple[str, str, str]] = {
    ConnectorType.AMAZON_BEDROCK: ("anthropic", "create_amazon_bedrock_client", "anthropic"),
    ConnectorType.AZURE_AI_FOUNDRY: ("openai", "create_azure_ai_foundry_client", "openai"),
    ConnectorType.GITHUB_MODELS: ("openai", "create_github_models_client", "openai"),
    ConnectorType.GOOGLE_VERTEX_AI: ("gemini", "create_google_vertex_ai_client", "google-genai"),
    ConnectorType.DOCKER_MODEL_RUNNER: (
        "docker_model_runner",
        "create_docker_model_runner_client",
        "httpx",
    ),
    ConnectorType.FOUNDRY_LOCAL: ("foundry_local", "create_foundry_local_client", "openai"),
    ConnectorType.HUGGING_FACE: ("openai", "create_ollama_client", "openai"),
    ConnectorType.OLLAMA: ("openai", "create_ollama_client", "openai"),
    ConnectorType.ANTHROPIC: ("anthropic", "create_anthropic_client", "anthropic"),
    ConnectorType.LG: ("openai", "create_ollama_client", "openai"),
    ConnectorType.OPENAI: ("openai", "create_openai_client", "openai"),
    ConnectorType.UPSTAGE: ("openai", "create_upstage_client", "openai"),
}


def _load_factory(module: str, name: str, package: str) -> ClientFactory:
    """Dynamically import a connector factory, pointing users to the package it needs."""
    try:
        mod = importlib.import_module(f"chatbridge.core.connectors.{module}")
        factory = cast(Optional[ClientFactory], getattr(mod, name, None))
        if factory is None:
            raise ImportError(f"{name} not found in {module}")
        return factory
    except ImportError as exc:
        raise RuntimeError(
            f"{name} requires the '{package}' package. Install with `pip install {package}`."
        ) from exc


def get_client_factory(connector_type: ConnectorType) -> ClientFactory:
    """Return the construction function registered for a connector type."""
    entry = _FACTORIES.get(connector_type)
    if entry is None:
        raise UnsupportedConnectorError(connector_type)
    return _load_factory(*entry)


async def create_chat_client(
    validated: ValidatedSettings,
    *,
    discovery: Optional[EndpointDiscovery] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> ChatClientHandle:
    """Construct the chat client for already-validated settings.

    Factory failures are re-raised as :class:`ConnectorConstructionError`
    chained to the original exception. Cancellation propagates unchanged;
    factories create the SDK client only after their last await, so a
    cancelled call never leaves a handle behind.
    """
    if not isinstance(validated, ValidatedSettings):
        raise TypeError("create_chat_client() requires settings returned by validate_settings()")

    connector_type = validated.connector_type
    context = ConnectorContext(discovery=discovery, http_client=http_client)
    try:
        factory = get_client_factory(connector_type)
        handle = await factory(validated.settings, context)
    except asyncio.CancelledError:
        logger.info(
            "[connectors] Client construction cancelled",
            extra={"connector_type": connector_type.value},
        )
        raise
    except ConnectorError:
        raise
    except Exception as exc:
        logger.warning(
            "[connectors] Client construction failed: %s: %s",
            type(exc).__name__,
            exc,
            extra={"connector_type": connector_type.value},
        )
        raise ConnectorConstructionError(connector_type, f"{type(exc).__name__}: {exc}") from exc

    logger.info(
        "[connectors] Chat client created",
        extra={"connector_type": connector_type.value, "model": handle.model},
    )
    return handle


__all__ = [
    "ChatClientHandle",
    "ConnectorContext",
    "DiscoveredEndpoint",
    "EndpointDiscovery",
    "create_chat_client",
    "get_client_factory",
]
