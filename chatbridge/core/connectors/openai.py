"""Connectors built on the OpenAI Python SDK.

OpenAI, Upstage and GitHub Models speak the OpenAI API directly; Azure AI
Foundry goes through the Azure flavour of the client; Ollama-hosted models
(Ollama, HuggingFace GGUF builds and LG EXAONE) use Ollama's OpenAI-compatible
``/v1`` endpoint.
"""

from __future__ import annotations

from typing import Optional, Union

from openai import AsyncAzureOpenAI, AsyncOpenAI

from chatbridge.core.connectors.base import ChatClientHandle, ConnectorContext
from chatbridge.core.settings import (
    AzureAIFoundrySettings,
    GitHubModelsSettings,
    HuggingFaceSettings,
    LGSettings,
    OllamaSettings,
    OpenAISettings,
    ProviderSettings,
    UpstageSettings,
)
from chatbridge.utils.log import get_logger


logger = get_logger()

AZURE_OPENAI_API_VERSION = "2024-10-21"
# Ollama ignores the key, but the SDK refuses to build a client without one.
OLLAMA_PLACEHOLDER_API_KEY = "ollama"


def join_url(base_url: str, path: str) -> str:
    return f"{base_url.strip().rstrip('/')}/{path.lstrip('/')}"


def _openai_handle(
    settings: ProviderSettings,
    *,
    model: str,
    api_key: str,
    base_url: Optional[str] = None,
) -> ChatClientHandle:
    client = AsyncOpenAI(api_key=api_key, base_url=base_url)
    logger.debug(
        "[openai_connector] Created OpenAI-compatible client",
        extra={
            "connector_type": settings.connector_type.value,
            "model": model,
            "base_url": base_url,
        },
    )
    return ChatClientHandle(
        connector_type=settings.connector_type,
        model=model,
        client=client,
        endpoint=base_url,
    )


async def create_openai_client(settings: OpenAISettings, context: ConnectorContext) -> ChatClientHandle:
    return _openai_handle(settings, model=settings.model or "", api_key=settings.api_key or "")


async def create_upstage_client(settings: UpstageSettings, context: ConnectorContext) -> ChatClientHandle:
    return _openai_handle(
        settings,
        model=settings.model or "",
        api_key=settings.api_key or "",
        base_url=(settings.base_url or "").strip(),
    )


async def create_github_models_client(
    settings: GitHubModelsSettings, context: ConnectorContext
) -> ChatClientHandle:
    return _openai_handle(
        settings,
        model=settings.model or "",
        api_key=settings.token or "",
        base_url=(settings.endpoint or "").strip(),
    )


async def create_azure_ai_foundry_client(
    settings: AzureAIFoundrySettings, context: ConnectorContext
) -> ChatClientHandle:
    endpoint = (settings.endpoint or "").strip()
    client = AsyncAzureOpenAI(
        azure_endpoint=endpoint,
        api_key=settings.api_key,
        api_version=AZURE_OPENAI_API_VERSION,
        azure_deployment=settings.deployment_name,
    )
    logger.debug(
        "[openai_connector] Created Azure OpenAI client",
        extra={"deployment": settings.deployment_name, "endpoint": endpoint},
    )
    return ChatClientHandle(
        connector_type=settings.connector_type,
        model=settings.deployment_name or "",
        client=client,
        endpoint=endpoint,
    )


async def create_ollama_client(
    settings: Union[OllamaSettings, HuggingFaceSettings, LGSettings], context: ConnectorContext
) -> ChatClientHandle:
    """Ollama, HuggingFace and LG all talk to an Ollama server."""
    return _openai_handle(
        settings,
        model=(settings.model or "").strip(),
        api_key=OLLAMA_PLACEHOLDER_API_KEY,
        base_url=join_url(settings.base_url or "", "v1"),
    )
