"""Provider settings variants and the application settings aggregate."""

from __future__ import annotations

from typing import Annotated, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from chatbridge.core.config import ConnectorType


class ProviderSettings(BaseModel):
    """Base for every provider settings variant.

    Fields are optional strings: ``None`` means no source supplied a value.
    Instances are frozen once the merge has produced them.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", protected_namespaces=())

    # Name of the field the host application displays as "the model".
    MODEL_FIELD: ClassVar[str] = "model"

    connector_type: ConnectorType

    @property
    def model_name(self) -> Optional[str]:
        return getattr(self, self.MODEL_FIELD, None)


class AmazonBedrockSettings(ProviderSettings):
    MODEL_FIELD: ClassVar[str] = "model_id"

    connector_type: Literal[ConnectorType.AMAZON_BEDROCK] = ConnectorType.AMAZON_BEDROCK
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    region: Optional[str] = None
    model_id: Optional[str] = "anthropic.claude-sonnet-4-20250514-v1:0"


class AzureAIFoundrySettings(ProviderSettings):
    MODEL_FIELD: ClassVar[str] = "deployment_name"

    connector_type: Literal[ConnectorType.AZURE_AI_FOUNDRY] = ConnectorType.AZURE_AI_FOUNDRY
    endpoint: Optional[str] = None
    api_key: Optional[str] = None
    deployment_name: Optional[str] = "gpt-4o-mini"


class GitHubModelsSettings(ProviderSettings):
    connector_type: Literal[ConnectorType.GITHUB_MODELS] = ConnectorType.GITHUB_MODELS
    endpoint: Optional[str] = "https://models.github.ai/inference"
    token: Optional[str] = None
    model: Optional[str] = "openai/gpt-4o-mini"


class GoogleVertexAISettings(ProviderSettings):
    connector_type: Literal[ConnectorType.GOOGLE_VERTEX_AI] = ConnectorType.GOOGLE_VERTEX_AI
    api_key: Optional[str] = None
    model: Optional[str] = "gemini-2.5-flash"


class DockerModelRunnerSettings(ProviderSettings):
    connector_type: Literal[ConnectorType.DOCKER_MODEL_RUNNER] = ConnectorType.DOCKER_MODEL_RUNNER
    base_url: Optional[str] = "http://localhost:12434"
    model: Optional[str] = "ai/smollm2"


class FoundryLocalSettings(ProviderSettings):
    MODEL_FIELD: ClassVar[str] = "alias"

    connector_type: Literal[ConnectorType.FOUNDRY_LOCAL] = ConnectorType.FOUNDRY_LOCAL
    alias: Optional[str] = "phi-4-mini"
    endpoint: Optional[str] = None
    model_id: Optional[str] = None
    # Skip the local manager and talk to a manually configured endpoint.
    disable_foundry_local_manager: bool = False

    @property
    def model_name(self) -> Optional[str]:
        if self.disable_foundry_local_manager:
            return self.model_id
        return self.alias


class HuggingFaceSettings(ProviderSettings):
    connector_type: Literal[ConnectorType.HUGGING_FACE] = ConnectorType.HUGGING_FACE
    base_url: Optional[str] = "http://localhost:11434"
    model: Optional[str] = "hf.co/google/gemma-3-1b-pt-qat-q4_0-gguf"


class OllamaSettings(ProviderSettings):
    connector_type: Literal[ConnectorType.OLLAMA] = ConnectorType.OLLAMA
    base_url: Optional[str] = "http://localhost:11434"
    model: Optional[str] = "llama3.2"


class AnthropicSettings(ProviderSettings):
    connector_type: Literal[ConnectorType.ANTHROPIC] = ConnectorType.ANTHROPIC
    api_key: Optional[str] = None
    model: Optional[str] = "claude-sonnet-4-0"


class LGSettings(ProviderSettings):
    connector_type: Literal[ConnectorType.LG] = ConnectorType.LG
    base_url: Optional[str] = "http://localhost:11434"
    model: Optional[str] = "hf.co/LGAI-EXAONE/EXAONE-4.0-1.2B-GGUF"


class OpenAISettings(ProviderSettings):
    connector_type: Literal[ConnectorType.OPENAI] = ConnectorType.OPENAI
    api_key: Optional[str] = None
    model: Optional[str] = "gpt-4.1-mini"


class UpstageSettings(ProviderSettings):
    connector_type: Literal[ConnectorType.UPSTAGE] = ConnectorType.UPSTAGE
    base_url: Optional[str] = "https://api.upstage.ai/v1/solar"
    api_key: Optional[str] = None
    model: Optional[str] = "solar-mini"


AnyProviderSettings = Annotated[
    Union[
        AmazonBedrockSettings,
        AzureAIFoundrySettings,
        GitHubModelsSettings,
        GoogleVertexAISettings,
        DockerModelRunnerSettings,
        FoundryLocalSettings,
        HuggingFaceSettings,
        OllamaSettings,
        AnthropicSettings,
        LGSettings,
        OpenAISettings,
        UpstageSettings,
    ],
    Field(discriminator="connector_type"),
]


class AppSettings(BaseModel):
    """Root aggregate produced once at startup from config, environment and args."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    connector_type: ConnectorType = ConnectorType.UNKNOWN
    help: bool = False
    provider: Optional[AnyProviderSettings] = None

    @model_validator(mode="after")
    def _check_consistency(self) -> "AppSettings":
        if self.connector_type is ConnectorType.UNKNOWN and not self.help:
            raise ValueError("an unknown connector type always implies help mode")
        if self.provider is not None and self.provider.connector_type != self.connector_type:
            raise ValueError(
                f"provider settings for {self.provider.connector_type.value} "
                f"do not match connector type {self.connector_type.value}"
            )
        return self

    @property
    def model(self) -> Optional[str]:
        """The model/deployment/alias the active provider will serve."""
        return self.provider.model_name if self.provider is not None else None


__all__ = [
    "ProviderSettings",
    "AmazonBedrockSettings",
    "AzureAIFoundrySettings",
    "GitHubModelsSettings",
    "GoogleVertexAISettings",
    "DockerModelRunnerSettings",
    "FoundryLocalSettings",
    "HuggingFaceSettings",
    "OllamaSettings",
    "AnthropicSettings",
    "LGSettings",
    "OpenAISettings",
    "UpstageSettings",
    "AnyProviderSettings",
    "AppSettings",
]
