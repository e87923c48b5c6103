"""Provider metadata registry.

One entry per connector type: its settings model, the fields it reads from
each source, and the validator that gates construction. The argument parser,
the help printer and the validation gate all read from this table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Type

from chatbridge.core.config import ConnectorType
from chatbridge.core import validators
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


CONNECTOR_TYPE_FLAGS: Tuple[str, ...] = ("--connector-type", "-c")
HELP_FLAGS: Tuple[str, ...] = ("--help", "-h")
ENV_SECTION_SEPARATOR = "__"


@dataclass(frozen=True)
class FieldSpec:
    """A single provider setting and where it can come from."""

    key: str
    attr: str
    flag: str
    description: str
    env_vars: Tuple[str, ...] = ()
    is_switch: bool = False


@dataclass(frozen=True)
class ProviderSpec:
    """Static description of one connector type."""

    connector_type: ConnectorType
    display_name: str
    settings_type: Type[ProviderSettings]
    fields: Tuple[FieldSpec, ...]
    validator: validators.Validator
    notes: Tuple[str, ...] = field(default=())

    @property
    def section(self) -> str:
        """Configuration section name, e.g. ``OpenAI`` for ``OpenAI:Model``."""
        return self.connector_type.value

    def config_key(self, spec: FieldSpec) -> str:
        return f"{self.section}:{spec.key}"

    def env_candidates(self, spec: FieldSpec) -> Tuple[str, ...]:
        """Environment variable names for a field, most specific SDK name first."""
        hierarchical = f"{self.section}{ENV_SECTION_SEPARATOR}{spec.key}"
        return spec.env_vars + (hierarchical,)

    def default_for(self, spec: FieldSpec) -> Any:
        return self.settings_type.model_fields[spec.attr].default

    def find_field(self, flag: str) -> Optional[FieldSpec]:
        lowered = flag.lower()
        for spec in self.fields:
            if spec.flag == lowered:
                return spec
        return None


def _field(
    key: str,
    attr: str,
    flag: str,
    description: str,
    *env_vars: str,
    is_switch: bool = False,
) -> FieldSpec:
    return FieldSpec(
        key=key,
        attr=attr,
        flag=flag,
        description=description,
        env_vars=tuple(env_vars),
        is_switch=is_switch,
    )


_PROVIDERS: Tuple[ProviderSpec, ...] = (
    ProviderSpec(
        connector_type=ConnectorType.AMAZON_BEDROCK,
        display_name="Amazon Bedrock",
        settings_type=AmazonBedrockSettings,
        fields=(
            _field("AccessKeyId", "access_key_id", "--access-key-id", "AWS access key ID.", "AWS_ACCESS_KEY_ID"),
            _field(
                "SecretAccessKey",
                "secret_access_key",
                "--secret-access-key",
                "AWS secret access key.",
                "AWS_SECRET_ACCESS_KEY",
            ),
            _field("Region", "region", "--region", "AWS region.", "AWS_REGION", "AWS_DEFAULT_REGION"),
            _field("ModelId", "model_id", "--model-id", "Bedrock model ID.", "BEDROCK_MODEL_ID"),
        ),
        validator=validators.validate_amazon_bedrock,
    ),
    ProviderSpec(
        connector_type=ConnectorType.AZURE_AI_FOUNDRY,
        display_name="Azure AI Foundry",
        settings_type=AzureAIFoundrySettings,
        fields=(
            _field("Endpoint", "endpoint", "--endpoint", "Azure AI Foundry endpoint.", "AZURE_OPENAI_ENDPOINT"),
            _field("ApiKey", "api_key", "--api-key", "Azure AI Foundry API key.", "AZURE_OPENAI_API_KEY"),
            _field(
                "DeploymentName",
                "deployment_name",
                "--deployment-name",
                "Model deployment name.",
                "AZURE_OPENAI_DEPLOYMENT_NAME",
            ),
        ),
        validator=validators.validate_azure_ai_foundry,
    ),
    ProviderSpec(
        connector_type=ConnectorType.GITHUB_MODELS,
        display_name="GitHub Models",
        settings_type=GitHubModelsSettings,
        fields=(
            _field("Endpoint", "endpoint", "--endpoint", "GitHub Models inference endpoint.", "GITHUB_MODELS_ENDPOINT"),
            _field("Token", "token", "--token", "GitHub personal access token.", "GITHUB_TOKEN"),
            _field("Model", "model", "--model", "Model name.", "GITHUB_MODELS_MODEL"),
        ),
        validator=validators.validate_github_models,
    ),
    ProviderSpec(
        connector_type=ConnectorType.GOOGLE_VERTEX_AI,
        display_name="Google Vertex AI",
        settings_type=GoogleVertexAISettings,
        fields=(
            _field("ApiKey", "api_key", "--api-key", "Google API key.", "GEMINI_API_KEY", "GOOGLE_API_KEY"),
            _field("Model", "model", "--model", "Model name.", "GEMINI_MODEL"),
        ),
        validator=validators.validate_google_vertex_ai,
    ),
    ProviderSpec(
        connector_type=ConnectorType.DOCKER_MODEL_RUNNER,
        display_name="Docker Model Runner",
        settings_type=DockerModelRunnerSettings,
        fields=(
            _field(
                "BaseUrl",
                "base_url",
                "--base-url",
                "Docker Model Runner base URL.",
                "DOCKER_MODEL_RUNNER_BASE_URL",
            ),
            _field("Model", "model", "--model", "Model name.", "DOCKER_MODEL_RUNNER_MODEL"),
        ),
        validator=validators.validate_docker_model_runner,
        notes=("The model is pulled before the client is created.",),
    ),
    ProviderSpec(
        connector_type=ConnectorType.FOUNDRY_LOCAL,
        display_name="Foundry Local",
        settings_type=FoundryLocalSettings,
        fields=(
            _field("Alias", "alias", "--alias", "Model alias.", "FOUNDRY_LOCAL_ALIAS"),
            _field(
                "Endpoint",
                "endpoint",
                "--endpoint",
                "Endpoint URL. Used with --disable-foundry-local-manager.",
                "FOUNDRY_LOCAL_ENDPOINT",
            ),
            _field(
                "ModelId",
                "model_id",
                "--model-id",
                "Model ID. Used with --disable-foundry-local-manager.",
                "FOUNDRY_LOCAL_MODEL_ID",
            ),
            _field(
                "DisableFoundryLocalManager",
                "disable_foundry_local_manager",
                "--disable-foundry-local-manager",
                "Use the manual endpoint instead of the Foundry Local manager.",
                "FOUNDRY_LOCAL_DISABLE_MANAGER",
                is_switch=True,
            ),
        ),
        validator=validators.validate_foundry_local,
        notes=("The Foundry Local manager needs the optional 'foundry-local' extra.",),
    ),
    ProviderSpec(
        connector_type=ConnectorType.HUGGING_FACE,
        display_name="Hugging Face",
        settings_type=HuggingFaceSettings,
        fields=(
            _field("BaseUrl", "base_url", "--base-url", "Ollama server URL.", "HUGGING_FACE_BASE_URL"),
            _field("Model", "model", "--model", "HuggingFace GGUF model (hf.co/...).", "HUGGING_FACE_MODEL"),
        ),
        validator=validators.validate_hugging_face,
    ),
    ProviderSpec(
        connector_type=ConnectorType.OLLAMA,
        display_name="Ollama",
        settings_type=OllamaSettings,
        fields=(
            _field("BaseUrl", "base_url", "--base-url", "Ollama server URL.", "OLLAMA_BASE_URL"),
            _field("Model", "model", "--model", "Model name.", "OLLAMA_MODEL"),
        ),
        validator=validators.validate_ollama,
    ),
    ProviderSpec(
        connector_type=ConnectorType.ANTHROPIC,
        display_name="Anthropic",
        settings_type=AnthropicSettings,
        fields=(
            _field("ApiKey", "api_key", "--api-key", "Anthropic API key.", "ANTHROPIC_API_KEY"),
            _field("Model", "model", "--model", "Model name.", "ANTHROPIC_MODEL"),
        ),
        validator=validators.validate_anthropic,
    ),
    ProviderSpec(
        connector_type=ConnectorType.LG,
        display_name="LG",
        settings_type=LGSettings,
        fields=(
            _field("BaseUrl", "base_url", "--base-url", "Ollama server URL.", "LG_BASE_URL"),
            _field("Model", "model", "--model", "EXAONE model name.", "LG_MODEL"),
        ),
        validator=validators.validate_lg,
    ),
    ProviderSpec(
        connector_type=ConnectorType.OPENAI,
        display_name="OpenAI",
        settings_type=OpenAISettings,
        fields=(
            _field("ApiKey", "api_key", "--api-key", "OpenAI API key.", "OPENAI_API_KEY"),
            _field("Model", "model", "--model", "Model name.", "OPENAI_MODEL"),
        ),
        validator=validators.validate_openai,
    ),
    ProviderSpec(
        connector_type=ConnectorType.UPSTAGE,
        display_name="Upstage",
        settings_type=UpstageSettings,
        fields=(
            _field("BaseUrl", "base_url", "--base-url", "Upstage API base URL.", "UPSTAGE_BASE_URL"),
            _field("ApiKey", "api_key", "--api-key", "Upstage API key.", "UPSTAGE_API_KEY"),
            _field("Model", "model", "--model", "Model name.", "UPSTAGE_MODEL"),
        ),
        validator=validators.validate_upstage,
    ),
)

REGISTRY: Dict[ConnectorType, ProviderSpec] = {spec.connector_type: spec for spec in _PROVIDERS}


def get_provider_spec(connector_type: ConnectorType) -> Optional[ProviderSpec]:
    """Return registry metadata for a connector type (None for UNKNOWN)."""
    return REGISTRY.get(connector_type)


def iter_provider_specs() -> Tuple[ProviderSpec, ...]:
    return _PROVIDERS


__all__ = [
    "CONNECTOR_TYPE_FLAGS",
    "HELP_FLAGS",
    "FieldSpec",
    "ProviderSpec",
    "REGISTRY",
    "get_provider_spec",
    "iter_provider_specs",
]
