"""Command-line, environment and configuration merging.

``parse_app_settings`` is the single entry point used at startup. It resolves
the active connector type, merges that provider's settings from the base
configuration, the environment and the command line (later sources win per
field), and decides whether help mode is active. Nothing here raises for bad
input; unrecognized input degrades to help mode.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from chatbridge.core.config import CONNECTOR_TYPE_KEY, ConnectorType, parse_bool
from chatbridge.core.registry import (
    CONNECTOR_TYPE_FLAGS,
    HELP_FLAGS,
    FieldSpec,
    ProviderSpec,
    get_provider_spec,
)
from chatbridge.core.settings import AppSettings, ProviderSettings
from chatbridge.utils.log import get_logger


logger = get_logger()


@dataclass(frozen=True)
class MergeResult:
    """Merged provider settings plus what the argument scan observed."""

    settings: ProviderSettings
    help_requested: bool = False
    unknown_tokens: Tuple[str, ...] = ()
    sources: Tuple[Tuple[str, str], ...] = ()

    @property
    def saw_unknown_flag(self) -> bool:
        return bool(self.unknown_tokens)


def resolve_connector_type(config: Mapping[str, str], args: Sequence[str]) -> ConnectorType:
    """Return the active connector type; the command line overrides configuration.

    Only the first ``--connector-type``/``-c`` occurrence is considered. A value
    that does not parse leaves the configured type (or UNKNOWN) in place.
    """
    connector_type = ConnectorType.parse(config.get(CONNECTOR_TYPE_KEY)) or ConnectorType.UNKNOWN
    for index, token in enumerate(args):
        if token.lower() not in CONNECTOR_TYPE_FLAGS:
            continue
        if index + 1 < len(args):
            parsed = ConnectorType.parse(args[index + 1])
            if parsed is not None:
                connector_type = parsed
        break
    return connector_type


def _coerce(spec: FieldSpec, raw: str) -> Any:
    if spec.is_switch:
        return bool(parse_bool(raw))
    return raw


def _env_value(provider: ProviderSpec, spec: FieldSpec, env: Mapping[str, str]) -> Optional[Tuple[str, str]]:
    for name in provider.env_candidates(spec):
        if name in env:
            return name, env[name]
    return None


def merge_provider_settings(
    connector_type: ConnectorType,
    config: Mapping[str, str],
    args: Sequence[str],
    env: Optional[Mapping[str, str]] = None,
) -> MergeResult:
    """Merge one provider's settings: static default < config < env < command line.

    A later source overrides a field only when it actually defines it. The
    argument scan also records ``--help``/``-h`` and any token that is neither
    a global flag, one of this provider's flags, nor a value consumed by them.
    """
    provider = get_provider_spec(connector_type)
    if provider is None:
        raise ValueError(f"no provider registered for connector type {connector_type.value}")
    env = os.environ if env is None else env

    values: Dict[str, Any] = {}
    sources: Dict[str, str] = {}

    for spec in provider.fields:
        key = provider.config_key(spec)
        if key in config:
            values[spec.attr] = _coerce(spec, config[key])
            sources[spec.key] = "config"
        found = _env_value(provider, spec, env)
        if found is not None:
            name, raw = found
            values[spec.attr] = _coerce(spec, raw)
            sources[spec.key] = f"env:{name}"

    help_requested = False
    unknown: list[str] = []
    index = 0
    while index < len(args):
        token = args[index]
        lowered = token.lower()
        if lowered in CONNECTOR_TYPE_FLAGS:
            # The connector type value is consumed here even when it failed to parse.
            index += 2
            continue
        if lowered in HELP_FLAGS:
            help_requested = True
            index += 1
            continue
        spec = provider.find_field(lowered)
        if spec is None:
            unknown.append(token)
            index += 1
            continue
        if spec.is_switch:
            values[spec.attr] = True
            sources[spec.key] = "args"
            index += 1
        elif index + 1 < len(args):
            values[spec.attr] = args[index + 1]
            sources[spec.key] = "args"
            index += 2
        else:
            index += 1

    settings = provider.settings_type(**values)
    return MergeResult(
        settings=settings,
        help_requested=help_requested,
        unknown_tokens=tuple(unknown),
        sources=tuple(sources.items()),
    )


def should_show_help(connector_type: ConnectorType, explicit_help: bool, saw_unknown_flag: bool) -> bool:
    return connector_type is ConnectorType.UNKNOWN or explicit_help or saw_unknown_flag


def _args_request_help(args: Sequence[str]) -> bool:
    return any(token.lower() in HELP_FLAGS for token in args)


def parse_app_settings(
    config: Mapping[str, str],
    args: Sequence[str],
    env: Optional[Mapping[str, str]] = None,
) -> AppSettings:
    """Build the application settings from the three sources."""
    args = tuple(args)
    connector_type = resolve_connector_type(config, args)
    if connector_type is ConnectorType.UNKNOWN:
        logger.debug(
            "[arguments] No connector type resolved; showing help",
            extra={"explicit_help": _args_request_help(args)},
        )
        return AppSettings(connector_type=connector_type, help=True)

    merged = merge_provider_settings(connector_type, config, args, env)
    show_help = should_show_help(connector_type, merged.help_requested, merged.saw_unknown_flag)
    logger.debug(
        "[arguments] Merged provider settings",
        extra={
            "connector_type": connector_type.value,
            "sources": dict(merged.sources),
            "unknown_token_count": len(merged.unknown_tokens),
            "help": show_help,
        },
    )
    return AppSettings(connector_type=connector_type, help=show_help, provider=merged.settings)


__all__ = [
    "MergeResult",
    "merge_provider_settings",
    "parse_app_settings",
    "resolve_connector_type",
    "should_show_help",
]
