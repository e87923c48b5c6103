"""Docker Model Runner connector.

The model is pulled through the runner's Ollama-compatible ``/api/pull``
endpoint before a client is handed out; chat traffic then goes to the
OpenAI-compatible ``/engines/v1`` API.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from openai import AsyncOpenAI

from chatbridge.core.connectors.base import ChatClientHandle, ConnectorContext
from chatbridge.core.connectors.openai import join_url
from chatbridge.core.settings import DockerModelRunnerSettings
from chatbridge.utils.log import get_logger


logger = get_logger()

PULL_TIMEOUT_SECONDS = 600.0
DOCKER_MODEL_RUNNER_API_KEY = "docker"


class ModelPullError(RuntimeError):
    """The runner reported an error while pulling a model."""


@asynccontextmanager
async def _http_client(shared: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    if shared is not None:
        yield shared
        return
    async with httpx.AsyncClient(timeout=PULL_TIMEOUT_SECONDS) as client:
        yield client


async def pull_model(client: httpx.AsyncClient, base_url: str, model: str) -> Optional[str]:
    """Stream a model pull and return the last status reported by the runner."""
    last_status: Optional[str] = None
    url = join_url(base_url, "api/pull")
    async with client.stream("POST", url, json={"model": model}) as response:
        response.raise_for_status()
        async for line in response.aiter_lines():
            if not line.strip():
                continue
            try:
                update = json.loads(line)
            except json.JSONDecodeError:
                logger.debug("[docker_model_runner] Ignoring non-JSON pull line", extra={"line": line[:200]})
                continue
            if update.get("error"):
                raise ModelPullError(str(update["error"]))
            status = update.get("status")
            if status and status != last_status:
                logger.info(
                    "[docker_model_runner] Pull status",
                    extra={"model": model, "status": status},
                )
                last_status = status
    return last_status


async def create_docker_model_runner_client(
    settings: DockerModelRunnerSettings, context: ConnectorContext
) -> ChatClientHandle:
    base_url = (settings.base_url or "").strip()
    model = (settings.model or "").strip()

    async with _http_client(context.http_client) as http_client:
        await pull_model(http_client, base_url, model)

    engines_url = join_url(base_url, "engines/v1")
    client = AsyncOpenAI(api_key=DOCKER_MODEL_RUNNER_API_KEY, base_url=engines_url)
    return ChatClientHandle(
        connector_type=settings.connector_type,
        model=model,
        client=client,
        endpoint=engines_url,
    )
