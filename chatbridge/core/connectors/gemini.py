"""Google Vertex AI connector built on the ``google-genai`` SDK."""

from __future__ import annotations

from google import genai

from chatbridge.core.connectors.base import ChatClientHandle, ConnectorContext
from chatbridge.core.settings import GoogleVertexAISettings
from chatbridge.utils.log import get_logger


logger = get_logger()


async def create_google_vertex_ai_client(
    settings: GoogleVertexAISettings, context: ConnectorContext
) -> ChatClientHandle:
    client = genai.Client(api_key=settings.api_key)
    logger.debug("[gemini_connector] Created genai client", extra={"model": settings.model})
    return ChatClientHandle(
        connector_type=settings.connector_type,
        model=settings.model or "",
        client=client,
    )
