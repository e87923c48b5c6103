"""Tests for connector type parsing and the base configuration source."""

import json
from pathlib import Path

import pytest

from chatbridge.core.config import (
    CONFIG_PATH_ENV,
    ConfigSource,
    ConnectorType,
    load_config_source,
    parse_bool,
)


def test_connector_type_parses_case_insensitively():
    """Connector names should match regardless of case and surrounding spaces."""
    assert ConnectorType("openai") is ConnectorType.OPENAI
    assert ConnectorType("  HuggingFace ") is ConnectorType.HUGGING_FACE
    assert ConnectorType("AZUREAIFOUNDRY") is ConnectorType.AZURE_AI_FOUNDRY
    assert ConnectorType("lg") is ConnectorType.LG


def test_connector_type_parse_returns_none_for_garbage():
    assert ConnectorType.parse("definitely-not-a-provider") is None
    assert ConnectorType.parse(None) is None
    assert ConnectorType.parse("") is None
    with pytest.raises(ValueError):
        ConnectorType("definitely-not-a-provider")


def test_known_connector_types_exclude_unknown():
    known = ConnectorType.known()
    assert ConnectorType.UNKNOWN not in known
    assert len(known) == 12
    assert known[0] is ConnectorType.AMAZON_BEDROCK
    assert known[-1] is ConnectorType.UPSTAGE


def test_parse_bool_accepts_common_truthy_strings():
    for value in ("1", "true", "TRUE", "yes", " on "):
        assert parse_bool(value) is True
    for value in ("0", "false", "no", "off", ""):
        assert parse_bool(value) is False
    assert parse_bool(None) is None


def test_from_mapping_flattens_nested_sections():
    source = ConfigSource.from_mapping(
        {
            "ConnectorType": "OpenAI",
            "OpenAI": {"Model": "gpt-4o", "ApiKey": None},
            "FoundryLocal": {"DisableFoundryLocalManager": True},
            "Servers": ["a", {"Name": "b"}],
        }
    )

    assert source["ConnectorType"] == "OpenAI"
    assert source["OpenAI:Model"] == "gpt-4o"
    assert "OpenAI:ApiKey" not in source
    assert source["FoundryLocal:DisableFoundryLocalManager"] == "true"
    assert source["Servers:0"] == "a"
    assert source["Servers:1:Name"] == "b"


def test_config_source_lookup_is_case_insensitive():
    source = ConfigSource({"OpenAI:Model": "gpt-4o"})
    assert source["openai:model"] == "gpt-4o"
    assert source.get("OPENAI:MODEL") == "gpt-4o"
    assert "openAI:Model" in source
    assert list(source) == ["OpenAI:Model"]


def test_layered_sources_last_writer_wins_per_key():
    base = ConfigSource({"OpenAI:Model": "gpt-4o", "OpenAI:ApiKey": "base-key"})
    local = ConfigSource({"openai:model": "gpt-4.1-mini"})

    merged = ConfigSource.layered(base, local)

    assert merged["OpenAI:Model"] == "gpt-4.1-mini"
    assert merged["OpenAI:ApiKey"] == "base-key"
    assert len(merged) == 2


def test_load_config_source_layers_local_over_base(tmp_path: Path):
    (tmp_path / "appsettings.json").write_text(
        json.dumps({"ConnectorType": "Ollama", "Ollama": {"Model": "llama3.2"}}),
        encoding="utf-8",
    )
    (tmp_path / "appsettings.local.yaml").write_text(
        "Ollama:\n  Model: qwen3\n  BaseUrl: http://ollama.internal:11434\n",
        encoding="utf-8",
    )

    source = load_config_source(env={}, cwd=tmp_path)

    assert source["ConnectorType"] == "Ollama"
    assert source["Ollama:Model"] == "qwen3"
    assert source["Ollama:BaseUrl"] == "http://ollama.internal:11434"


def test_load_config_source_reads_explicit_env_path(tmp_path: Path):
    explicit = tmp_path / "elsewhere" / "chatbridge.yml"
    explicit.parent.mkdir()
    explicit.write_text("ConnectorType: Anthropic\n", encoding="utf-8")
    (tmp_path / "appsettings.json").write_text(
        json.dumps({"ConnectorType": "OpenAI"}), encoding="utf-8"
    )

    source = load_config_source(env={CONFIG_PATH_ENV: str(explicit)}, cwd=tmp_path)

    assert source["ConnectorType"] == "Anthropic"


def test_load_config_source_skips_invalid_files(tmp_path: Path):
    """Malformed files are skipped rather than aborting startup."""
    (tmp_path / "appsettings.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "appsettings.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    (tmp_path / "appsettings.local.json").write_text(
        json.dumps({"ConnectorType": "LG"}), encoding="utf-8"
    )

    source = load_config_source(env={}, cwd=tmp_path)

    assert dict(source) == {"ConnectorType": "LG"}


def test_load_config_source_with_no_files_is_empty(tmp_path: Path):
    source = load_config_source(env={}, cwd=tmp_path)
    assert len(source) == 0
    assert source.get("ConnectorType") is None


def test_load_config_source_explicit_paths(tmp_path: Path):
    first = tmp_path / "a.json"
    second = tmp_path / "b.yaml"
    first.write_text(json.dumps({"OpenAI": {"Model": "gpt-4o"}}), encoding="utf-8")
    second.write_text("OpenAI:\n  Model: gpt-4.1\n", encoding="utf-8")

    source = load_config_source([first, tmp_path / "missing.json", second], env={})

    assert source["OpenAI:Model"] == "gpt-4.1"
