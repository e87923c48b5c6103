"""Tests for per-provider validators and the validation gate."""

from __future__ import annotations

import pytest

from chatbridge.core.arguments import parse_app_settings
from chatbridge.core.config import ConnectorType
from chatbridge.core.errors import (
    ConnectorConfigurationError,
    ConnectorConstructionError,
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
    UpstageSettings,
)
from chatbridge.core.validation import ValidatedSettings, validate_app_settings, validate_settings
from chatbridge.core.validators import is_blank, is_lg_model_name


def _missing_key(connector_type: ConnectorType, settings) -> str:
    with pytest.raises(MissingFieldError) as exc_info:
        validate_settings(connector_type, settings)
    return exc_info.value.key


@pytest.mark.parametrize(
    "connector_type,settings,expected_key",
    [
        (ConnectorType.AMAZON_BEDROCK, AmazonBedrockSettings(model_id=None), "AmazonBedrock:AccessKeyId"),
        (
            ConnectorType.AZURE_AI_FOUNDRY,
            AzureAIFoundrySettings(deployment_name=None),
            "AzureAIFoundry:Endpoint",
        ),
        (
            ConnectorType.GITHUB_MODELS,
            GitHubModelsSettings(endpoint=None, model=None),
            "GitHubModels:Endpoint",
        ),
        (ConnectorType.GOOGLE_VERTEX_AI, GoogleVertexAISettings(model=None), "GoogleVertexAI:ApiKey"),
        (
            ConnectorType.DOCKER_MODEL_RUNNER,
            DockerModelRunnerSettings(base_url=None, model=None),
            "DockerModelRunner:BaseUrl",
        ),
        (ConnectorType.FOUNDRY_LOCAL, FoundryLocalSettings(alias=None), "FoundryLocal:Alias"),
        (
            ConnectorType.HUGGING_FACE,
            HuggingFaceSettings(base_url=None, model=None),
            "HuggingFace:BaseUrl",
        ),
        (ConnectorType.OLLAMA, OllamaSettings(base_url=None, model=None), "Ollama:BaseUrl"),
        (ConnectorType.ANTHROPIC, AnthropicSettings(model=None), "Anthropic:ApiKey"),
        (ConnectorType.LG, LGSettings(base_url=None, model=None), "LG:BaseUrl"),
        (ConnectorType.OPENAI, OpenAISettings(model=None), "OpenAI:ApiKey"),
        (ConnectorType.UPSTAGE, UpstageSettings(base_url=None, model=None), "Upstage:BaseUrl"),
    ],
)
def test_all_blank_fails_on_first_declared_field(connector_type, settings, expected_key):
    assert _missing_key(connector_type, settings) == expected_key


def test_check_order_is_fixed_per_provider():
    """Each later field is reported only once the earlier ones are filled in."""
    settings = AmazonBedrockSettings(access_key_id="AKIA", model_id=None)
    assert _missing_key(ConnectorType.AMAZON_BEDROCK, settings) == "AmazonBedrock:SecretAccessKey"

    settings = AmazonBedrockSettings(access_key_id="AKIA", secret_access_key="s", model_id=None)
    assert _missing_key(ConnectorType.AMAZON_BEDROCK, settings) == "AmazonBedrock:Region"

    settings = AmazonBedrockSettings(
        access_key_id="AKIA", secret_access_key="s", region="us-east-1", model_id=None
    )
    assert _missing_key(ConnectorType.AMAZON_BEDROCK, settings) == "AmazonBedrock:ModelId"

    azure = AzureAIFoundrySettings(endpoint="https://x.openai.azure.com", deployment_name=None)
    assert _missing_key(ConnectorType.AZURE_AI_FOUNDRY, azure) == "AzureAIFoundry:ApiKey"


def test_whitespace_counts_as_blank():
    assert is_blank(None)
    assert is_blank("")
    assert is_blank(" \t\n")
    assert not is_blank(" x ")
    assert _missing_key(ConnectorType.OPENAI, OpenAISettings(api_key="   ")) == "OpenAI:ApiKey"


def test_missing_field_message_names_provider_and_field():
    with pytest.raises(MissingFieldError) as exc_info:
        validate_settings(ConnectorType.ANTHROPIC, AnthropicSettings(api_key="k", model=" "))

    error = exc_info.value
    assert str(error) == "Missing configuration: Anthropic:Model."
    assert error.error_code == "missing_field"
    assert error.connector_type is ConnectorType.ANTHROPIC
    assert error.field_name == "Model"
    assert isinstance(error, ConnectorConfigurationError)
    assert not isinstance(error, ConnectorConstructionError)


def test_scenario_upstage_without_api_key(make_config):
    app_settings = parse_app_settings(make_config({"ConnectorType": "Upstage"}), [], env={})

    with pytest.raises(ConnectorConfigurationError) as exc_info:
        validate_app_settings(app_settings)

    assert "Upstage:ApiKey" in str(exc_info.value)


def test_absent_settings_fail_at_provider_level():
    with pytest.raises(MissingProviderConfigurationError) as exc_info:
        validate_settings(ConnectorType.OPENAI, None)

    assert str(exc_info.value) == "Missing configuration: OpenAI."
    assert exc_info.value.error_code == "missing_provider_configuration"


def test_settings_for_another_provider_are_treated_as_absent():
    with pytest.raises(MissingProviderConfigurationError):
        validate_settings(ConnectorType.UPSTAGE, OpenAISettings(api_key="k"))


def test_valid_settings_produce_proof_without_mutation():
    settings = UpstageSettings(api_key="up-key")
    before = settings.model_dump()

    proof = validate_settings(ConnectorType.UPSTAGE, settings)

    assert isinstance(proof, ValidatedSettings)
    assert proof.connector_type is ConnectorType.UPSTAGE
    assert proof.settings is settings
    assert settings.model_dump() == before


def test_proof_cannot_be_forged():
    with pytest.raises(TypeError):
        ValidatedSettings(object(), ConnectorType.OPENAI, OpenAISettings(api_key="k"))


@pytest.mark.parametrize(
    "model",
    [
        "hf.co/LGAI-EXAONE/EXAONE-4.0-1.2B-GGUF",
        "LGAI-EXAONE/EXAONE-3.5-2.4B-Instruct",
        "exaone3.5",
        "some-model-gguf",
    ],
)
def test_lg_model_names_accepted(model):
    assert is_lg_model_name(model)
    validate_settings(ConnectorType.LG, LGSettings(model=model))


def test_lg_rejects_unrelated_model():
    with pytest.raises(FieldFormatError) as exc_info:
        validate_settings(ConnectorType.LG, LGSettings(model="qwen3"))

    assert exc_info.value.key == "LG:Model"
    assert exc_info.value.error_code == "invalid_format"


def test_hugging_face_model_must_be_gguf_repository():
    validate_settings(ConnectorType.HUGGING_FACE, HuggingFaceSettings())
    validate_settings(
        ConnectorType.HUGGING_FACE, HuggingFaceSettings(model="hf.co/unsloth/Qwen3-0.6B-GGUF")
    )
    for model in (
        "llama3.2",
        "hf.co/unsloth/Qwen3-0.6B",
        "unsloth/Qwen3-0.6B-GGUF",
        "hf.co//Qwen3-0.6B-GGUF",
        "hf.co/unsloth/",
    ):
        with pytest.raises(FieldFormatError) as exc_info:
            validate_settings(ConnectorType.HUGGING_FACE, HuggingFaceSettings(model=model))
        assert exc_info.value.key == "HuggingFace:Model"


@pytest.mark.parametrize("base_url", ["localhost:11434", "ftp://localhost", "not a url"])
def test_url_fields_must_be_absolute_http(base_url):
    with pytest.raises(FieldFormatError) as exc_info:
        validate_settings(ConnectorType.OLLAMA, OllamaSettings(base_url=base_url))
    assert exc_info.value.key == "Ollama:BaseUrl"


def test_foundry_local_manager_mode_needs_only_alias():
    validate_settings(ConnectorType.FOUNDRY_LOCAL, FoundryLocalSettings())


def test_foundry_local_manual_mode_requires_endpoint_then_model_id():
    settings = FoundryLocalSettings(disable_foundry_local_manager=True)
    with pytest.raises(MissingFieldError) as exc_info:
        validate_settings(ConnectorType.FOUNDRY_LOCAL, settings)
    assert exc_info.value.key == "FoundryLocal:Endpoint"

    settings = FoundryLocalSettings(
        disable_foundry_local_manager=True, endpoint="http://localhost:5273/v1"
    )
    with pytest.raises(MissingFieldError) as exc_info:
        validate_settings(ConnectorType.FOUNDRY_LOCAL, settings)
    assert exc_info.value.key == "FoundryLocal:ModelId"

    settings = FoundryLocalSettings(
        disable_foundry_local_manager=True,
        alias=None,
        endpoint="http://localhost:5273/v1",
        model_id="phi-4-mini",
    )
    validate_settings(ConnectorType.FOUNDRY_LOCAL, settings)


def test_foundry_local_manual_mode_rejects_malformed_endpoint():
    settings = FoundryLocalSettings(
        disable_foundry_local_manager=True, endpoint="localhost", model_id="phi-4-mini"
    )
    with pytest.raises(FieldFormatError) as exc_info:
        validate_settings(ConnectorType.FOUNDRY_LOCAL, settings)
    assert exc_info.value.key == "FoundryLocal:Endpoint"
