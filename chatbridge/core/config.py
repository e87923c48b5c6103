"""Configuration primitives for Chatbridge.

This module defines the closed set of connector types and the base
configuration source: a read-only, case-insensitive key/value view over
``appsettings`` files using colon-joined hierarchical keys such as
``ConnectorType`` or ``OpenAI:Model``.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Optional, Sequence

import yaml

from chatbridge.utils.log import get_logger


logger = get_logger()

CONNECTOR_TYPE_KEY = "ConnectorType"
CONFIG_PATH_ENV = "CHATBRIDGE_CONFIG"
_DEFAULT_CONFIG_FILES: tuple[str, ...] = (
    "appsettings.json",
    "appsettings.yaml",
    "appsettings.yml",
    "appsettings.local.json",
    "appsettings.local.yaml",
    "appsettings.local.yml",
)
_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


class ConnectorType(str, Enum):
    """Supported chat connectors. Exactly one is active per process."""

    UNKNOWN = "Unknown"
    AMAZON_BEDROCK = "AmazonBedrock"
    AZURE_AI_FOUNDRY = "AzureAIFoundry"
    GITHUB_MODELS = "GitHubModels"
    GOOGLE_VERTEX_AI = "GoogleVertexAI"
    DOCKER_MODEL_RUNNER = "DockerModelRunner"
    FOUNDRY_LOCAL = "FoundryLocal"
    HUGGING_FACE = "HuggingFace"
    OLLAMA = "Ollama"
    ANTHROPIC = "Anthropic"
    LG = "LG"
    OPENAI = "OpenAI"
    UPSTAGE = "Upstage"

    @classmethod
    def _missing_(cls, value: object) -> Optional["ConnectorType"]:
        """Match connector names case-insensitively, ignoring surrounding whitespace."""
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value.lower() == normalized:
                    return member
        return None

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ConnectorType"]:
        """Return the matching member, or None when ``value`` is absent or unrecognized."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def known(cls) -> tuple["ConnectorType", ...]:
        """All connector types except UNKNOWN, in declaration order."""
        return tuple(member for member in cls if member is not cls.UNKNOWN)


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """Interpret a config/env string as a boolean; None stays None."""
    if value is None:
        return None
    return value.strip().lower() in _TRUE_STRINGS


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten(data: Mapping[str, Any], prefix: str = "") -> Iterator[tuple[str, str]]:
    for key, value in data.items():
        full_key = f"{prefix}:{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            yield from _flatten(value, full_key)
        elif isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                if isinstance(item, Mapping):
                    yield from _flatten(item, f"{full_key}:{index}")
                elif item is not None:
                    yield f"{full_key}:{index}", _stringify(item)
        elif value is not None:
            yield full_key, _stringify(value)


class ConfigSource(Mapping[str, str]):
    """Read-only, case-insensitive view of hierarchical configuration values."""

    def __init__(self, values: Optional[Mapping[str, str]] = None) -> None:
        self._values: Dict[str, tuple[str, str]] = {}
        for key, value in (values or {}).items():
            self._values[key.lower()] = (key, value)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ConfigSource":
        """Flatten nested dictionaries into ``Section:Field`` keys."""
        return cls(dict(_flatten(data)))

    @classmethod
    def layered(cls, *sources: Mapping[str, str]) -> "ConfigSource":
        """Compose sources in order; later sources win per key."""
        merged: Dict[str, str] = {}
        lowered: Dict[str, str] = {}
        for source in sources:
            for key, value in source.items():
                previous = lowered.get(key.lower())
                if previous is not None:
                    merged.pop(previous, None)
                lowered[key.lower()] = key
                merged[key] = value
        return cls(merged)

    def __getitem__(self, key: str) -> str:
        return self._values[key.lower()][1]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._values.values())

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __repr__(self) -> str:
        return f"ConfigSource(keys={sorted(self)!r})"


def _read_config_file(path: Path) -> Optional[Mapping[str, Any]]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError("top-level configuration must be a mapping")
    return data


def _candidate_paths(
    paths: Optional[Sequence[Path]], env: Mapping[str, str], cwd: Path
) -> Iterable[Path]:
    if paths is not None:
        yield from paths
        return
    for name in _DEFAULT_CONFIG_FILES:
        yield cwd / name
    explicit = env.get(CONFIG_PATH_ENV)
    if explicit:
        yield Path(explicit)


def load_config_source(
    paths: Optional[Sequence[Path]] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
) -> ConfigSource:
    """Load the base configuration from appsettings files.

    Files are layered in order (later files win). Missing files are skipped;
    unreadable or malformed files are logged and skipped.
    """
    env = os.environ if env is None else env
    cwd = cwd or Path.cwd()
    layers: list[ConfigSource] = []
    for candidate in _candidate_paths(paths, env, cwd):
        if not candidate.exists():
            continue
        try:
            data = _read_config_file(candidate)
        except (
            json.JSONDecodeError,
            yaml.YAMLError,
            OSError,
            UnicodeDecodeError,
            ValueError,
        ) as e:
            logger.warning(
                "Error loading configuration file: %s: %s",
                type(e).__name__,
                e,
                extra={"path": str(candidate)},
            )
            continue
        layer = ConfigSource.from_mapping(data or {})
        layers.append(layer)
        logger.debug(
            "[config] Loaded configuration file",
            extra={"path": str(candidate), "key_count": len(layer)},
        )
    return ConfigSource.layered(*layers)


__all__ = [
    "CONNECTOR_TYPE_KEY",
    "CONFIG_PATH_ENV",
    "ConfigSource",
    "ConnectorType",
    "load_config_source",
    "parse_bool",
]
