"""Connector error types.

Configuration errors (the settings are wrong, fix your config) and
construction errors (settings were valid but the provider could not be
reached or rejected them) are separate branches so callers can tell them
apart with ``except`` instead of inspecting messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from chatbridge.core.config import ConnectorType


class ConnectorError(Exception):
    """Base error carrying a stable error code and the originating connector."""

    def __init__(
        self,
        error_code: str,
        message: str,
        *,
        connector_type: Optional["ConnectorType"] = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.connector_type = connector_type


class ConnectorConfigurationError(ConnectorError):
    """Merged settings failed validation; raised before any construction attempt."""


class MissingProviderConfigurationError(ConnectorConfigurationError):
    """The provider's settings section was never populated."""

    def __init__(self, connector_type: "ConnectorType") -> None:
        super().__init__(
            "missing_provider_configuration",
            f"Missing configuration: {connector_type.value}.",
            connector_type=connector_type,
        )


class MissingFieldError(ConnectorConfigurationError):
    """A required field is null, empty or whitespace after the merge."""

    def __init__(self, connector_type: "ConnectorType", field_name: str, hint: str = "") -> None:
        self.key = f"{connector_type.value}:{field_name}"
        self.field_name = field_name
        message = f"Missing configuration: {self.key}."
        if hint:
            message = f"{message} {hint}"
        super().__init__("missing_field", message, connector_type=connector_type)


class FieldFormatError(ConnectorConfigurationError):
    """A present field does not satisfy the provider's format constraints."""

    def __init__(self, connector_type: "ConnectorType", field_name: str, message: str) -> None:
        self.key = f"{connector_type.value}:{field_name}"
        self.field_name = field_name
        super().__init__(
            "invalid_format",
            f"Invalid configuration: {self.key}. {message}",
            connector_type=connector_type,
        )


class ConnectorConstructionError(ConnectorError):
    """The provider's client factory failed after validation succeeded."""

    def __init__(self, connector_type: "ConnectorType", message: str) -> None:
        super().__init__(
            "construction_failed",
            f"{connector_type.value} connector failed: {message}",
            connector_type=connector_type,
        )
        self.reason = message


class UnsupportedConnectorError(ConnectorError):
    """No constructor is registered for the requested connector type."""

    def __init__(self, connector_type: "ConnectorType") -> None:
        super().__init__(
            "unsupported_connector",
            f"Connector type '{connector_type.value}' is not supported.",
            connector_type=connector_type,
        )


__all__ = [
    "ConnectorError",
    "ConnectorConfigurationError",
    "MissingProviderConfigurationError",
    "MissingFieldError",
    "FieldFormatError",
    "ConnectorConstructionError",
    "UnsupportedConnectorError",
]
