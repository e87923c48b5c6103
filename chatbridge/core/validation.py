"""Validation gate between merged settings and client construction."""

from __future__ import annotations

from typing import Optional

from chatbridge.core.config import ConnectorType
from chatbridge.core.errors import MissingProviderConfigurationError, UnsupportedConnectorError
from chatbridge.core.registry import get_provider_spec
from chatbridge.core.settings import AppSettings, ProviderSettings
from chatbridge.utils.log import get_logger


logger = get_logger()

_CONSTRUCTION_TOKEN = object()


class ValidatedSettings:
    """Proof that a provider's settings passed its validator.

    Only :func:`validate_settings` can create instances; client construction
    accepts nothing else.
    """

    __slots__ = ("_connector_type", "_settings")

    def __init__(self, token: object, connector_type: ConnectorType, settings: ProviderSettings) -> None:
        if token is not _CONSTRUCTION_TOKEN:
            raise TypeError("ValidatedSettings can only be created by validate_settings()")
        self._connector_type = connector_type
        self._settings = settings

    @property
    def connector_type(self) -> ConnectorType:
        return self._connector_type

    @property
    def settings(self) -> ProviderSettings:
        return self._settings

    def __repr__(self) -> str:
        return f"ValidatedSettings(connector_type={self._connector_type.value!r})"


def validate_settings(
    connector_type: ConnectorType, settings: Optional[ProviderSettings]
) -> ValidatedSettings:
    """Run the provider's validator and return a proof on success.

    Raises a :class:`~chatbridge.core.errors.ConnectorConfigurationError`
    subclass naming the first offending field. Settings are never modified.
    """
    provider = get_provider_spec(connector_type)
    if provider is None:
        raise UnsupportedConnectorError(connector_type)
    if settings is None or settings.connector_type is not connector_type:
        raise MissingProviderConfigurationError(connector_type)

    provider.validator(settings)
    logger.debug(
        "[validation] Settings validated",
        extra={"connector_type": connector_type.value, "model": settings.model_name},
    )
    return ValidatedSettings(_CONSTRUCTION_TOKEN, connector_type, settings)


def validate_app_settings(app_settings: AppSettings) -> ValidatedSettings:
    return validate_settings(app_settings.connector_type, app_settings.provider)


__all__ = ["ValidatedSettings", "validate_app_settings", "validate_settings"]
