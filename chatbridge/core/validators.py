"""Per-provider settings validators.

Each validator inspects one settings variant and raises on the first problem
it finds. Required fields are checked in a fixed order per provider; later
fields are not looked at once an earlier one fails. Validators never perform
I/O and never modify the settings.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, TypeVar
from urllib.parse import urlparse

from chatbridge.core.config import ConnectorType
from chatbridge.core.errors import (
    FieldFormatError,
    MissingFieldError,
    MissingProviderConfigurationError,
)
from chatbridge.core.settings import (
    AmazonBedrockSettings,
    AnthropicSettings,
    AzureAIFoundrySettings,
    DockerModelRunnerSettings,
    FoundryLocalSettings,
    GitHubModelsSettings,
    GoogleVertexAISettings,
    HuggingFaceSettings,
    LGSettings,
    OllamaSettings,
    OpenAISettings,
    ProviderSettings,
    UpstageSettings,
)

S = TypeVar("S", bound=ProviderSettings)
Validator = Callable[[ProviderSettings], None]

HF_PREFIX = "hf.co/"


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only strings."""
    return value is None or not value.strip()


def require_fields(settings: ProviderSettings, fields: Sequence[tuple[str, str]]) -> None:
    """Fail on the first blank field; ``fields`` holds (config key, attribute) pairs."""
    for key, attr in fields:
        if is_blank(getattr(settings, attr)):
            raise MissingFieldError(settings.connector_type, key)


def require_http_url(settings: ProviderSettings, key: str, attr: str) -> None:
    value = (getattr(settings, attr) or "").strip()
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise FieldFormatError(
            settings.connector_type,
            key,
            f"'{value}' is not an absolute http(s) URL.",
        )


def _expect(settings: Optional[ProviderSettings], expected: type[S], connector: ConnectorType) -> S:
    if not isinstance(settings, expected):
        raise MissingProviderConfigurationError(connector)
    return settings


def validate_amazon_bedrock(settings: Optional[ProviderSettings]) -> None:
    bedrock = _expect(settings, AmazonBedrockSettings, ConnectorType.AMAZON_BEDROCK)
    require_fields(
        bedrock,
        (
            ("AccessKeyId", "access_key_id"),
            ("SecretAccessKey", "secret_access_key"),
            ("Region", "region"),
            ("ModelId", "model_id"),
        ),
    )


def validate_azure_ai_foundry(settings: Optional[ProviderSettings]) -> None:
    azure = _expect(settings, AzureAIFoundrySettings, ConnectorType.AZURE_AI_FOUNDRY)
    require_fields(
        azure,
        (
            ("Endpoint", "endpoint"),
            ("ApiKey", "api_key"),
            ("DeploymentName", "deployment_name"),
        ),
    )
    require_http_url(azure, "Endpoint", "endpoint")


def validate_github_models(settings: Optional[ProviderSettings]) -> None:
    github = _expect(settings, GitHubModelsSettings, ConnectorType.GITHUB_MODELS)
    require_fields(github, (("Endpoint", "endpoint"), ("Token", "token"), ("Model", "model")))
    require_http_url(github, "Endpoint", "endpoint")


def validate_google_vertex_ai(settings: Optional[ProviderSettings]) -> None:
    google = _expect(settings, GoogleVertexAISettings, ConnectorType.GOOGLE_VERTEX_AI)
    require_fields(google, (("ApiKey", "api_key"), ("Model", "model")))


def validate_docker_model_runner(settings: Optional[ProviderSettings]) -> None:
    docker = _expect(settings, DockerModelRunnerSettings, ConnectorType.DOCKER_MODEL_RUNNER)
    require_fields(docker, (("BaseUrl", "base_url"), ("Model", "model")))
    require_http_url(docker, "BaseUrl", "base_url")


def validate_foundry_local(settings: Optional[ProviderSettings]) -> None:
    foundry = _expect(settings, FoundryLocalSettings, ConnectorType.FOUNDRY_LOCAL)
    if foundry.disable_foundry_local_manager:
        for key, attr in (("Endpoint", "endpoint"), ("ModelId", "model_id")):
            if is_blank(getattr(foundry, attr)):
                raise MissingFieldError(
                    foundry.connector_type,
                    key,
                    "Required when DisableFoundryLocalManager is enabled.",
                )
        require_http_url(foundry, "Endpoint", "endpoint")
    elif is_blank(foundry.alias):
        raise MissingFieldError(
            foundry.connector_type,
            "Alias",
            "Required when DisableFoundryLocalManager is disabled.",
        )


def is_gguf_repository(model: str) -> bool:
    """True for ``hf.co/<org>/<name>`` paths whose name ends in ``gguf``."""
    lowered = model.strip().lower()
    if not lowered.startswith(HF_PREFIX):
        return False
    org, sep, name = lowered[len(HF_PREFIX):].partition("/")
    return bool(org and sep and name) and "/" not in name and name.endswith("gguf")


def validate_hugging_face(settings: Optional[ProviderSettings]) -> None:
    hugging_face = _expect(settings, HuggingFaceSettings, ConnectorType.HUGGING_FACE)
    require_fields(hugging_face, (("BaseUrl", "base_url"), ("Model", "model")))
    require_http_url(hugging_face, "BaseUrl", "base_url")
    if not is_gguf_repository(hugging_face.model or ""):
        raise FieldFormatError(
            hugging_face.connector_type,
            "Model",
            "Model should be a HuggingFace GGUF repository (e.g. 'hf.co/<org>/<name>-gguf').",
        )


def validate_ollama(settings: Optional[ProviderSettings]) -> None:
    ollama = _expect(settings, OllamaSettings, ConnectorType.OLLAMA)
    require_fields(ollama, (("BaseUrl", "base_url"), ("Model", "model")))
    require_http_url(ollama, "BaseUrl", "base_url")


def validate_anthropic(settings: Optional[ProviderSettings]) -> None:
    anthropic = _expect(settings, AnthropicSettings, ConnectorType.ANTHROPIC)
    require_fields(anthropic, (("ApiKey", "api_key"), ("Model", "model")))


def is_lg_model_name(model: str) -> bool:
    """LG models are HuggingFace paths, EXAONE/LG names or GGUF builds."""
    lowered = model.strip().lower()
    is_hugging_face_format = lowered.startswith("hf.co/") or "/" in lowered
    is_lg_model = "exaone" in lowered or "lg" in lowered
    is_gguf_format = "gguf" in lowered
    return is_hugging_face_format or is_lg_model or is_gguf_format


def validate_lg(settings: Optional[ProviderSettings]) -> None:
    lg = _expect(settings, LGSettings, ConnectorType.LG)
    require_fields(lg, (("BaseUrl", "base_url"), ("Model", "model")))
    require_http_url(lg, "BaseUrl", "base_url")
    if not is_lg_model_name(lg.model or ""):
        raise FieldFormatError(
            lg.connector_type,
            "Model",
            "Model should be HuggingFace format (hf.co/...), an LG model "
            "(containing 'exaone' or 'lg'), or GGUF format (containing 'gguf').",
        )


def validate_openai(settings: Optional[ProviderSettings]) -> None:
    openai = _expect(settings, OpenAISettings, ConnectorType.OPENAI)
    require_fields(openai, (("ApiKey", "api_key"), ("Model", "model")))


def validate_upstage(settings: Optional[ProviderSettings]) -> None:
    upstage = _expect(settings, UpstageSettings, ConnectorType.UPSTAGE)
    require_fields(upstage, (("BaseUrl", "base_url"), ("ApiKey", "api_key"), ("Model", "model")))
    require_http_url(upstage, "BaseUrl", "base_url")
