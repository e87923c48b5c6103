"""Connectors built on the Anthropic Python SDK (direct API and Amazon Bedrock)."""

from __future__ import annotations

from anthropic import AsyncAnthropic, AsyncAnthropicBedrock

from chatbridge.core.connectors.base import ChatClientHandle, ConnectorContext
from chatbridge.core.settings import AmazonBedrockSettings, AnthropicSettings
from chatbridge.utils.log import get_logger


logger = get_logger()


async def create_anthropic_client(
    settings: AnthropicSettings, context: ConnectorContext
) -> ChatClientHandle:
    client = AsyncAnthropic(api_key=settings.api_key)
    logger.debug("[anthropic_connector] Created Anthropic client", extra={"model": settings.model})
    return ChatClientHandle(
        connector_type=settings.connector_type,
        model=settings.model or "",
        client=client,
    )


async def create_amazon_bedrock_client(
    settings: AmazonBedrockSettings, context: ConnectorContext
) -> ChatClientHandle:
    region = (settings.region or "").strip()
    client = AsyncAnthropicBedrock(
        aws_access_key=settings.access_key_id,
        aws_secret_key=settings.secret_access_key,
        aws_region=region,
    )
    logger.debug(
        "[anthropic_connector] Created Bedrock client",
        extra={"model": settings.model_id, "region": region},
    )
    return ChatClientHandle(
        connector_type=settings.connector_type,
        model=settings.model_id or "",
        client=client,
        endpoint=f"https://bedrock-runtime.{region}.amazonaws.com",
    )
