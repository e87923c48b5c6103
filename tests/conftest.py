"""Pytest configuration and fixtures for all tests."""

import pytest

from chatbridge.core.config import CONFIG_PATH_ENV, ConfigSource
from chatbridge.core.registry import iter_provider_specs


def _provider_env_names() -> set:
    names = {CONFIG_PATH_ENV}
    for provider in iter_provider_specs():
        for spec in provider.fields:
            names.update(provider.env_candidates(spec))
    return names


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable the settings merge would read.

    Tests that go through ``os.environ`` (the CLI, mostly) use this so that
    credentials on the developer machine cannot leak into assertions.
    """
    for name in _provider_env_names():
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def make_config():
    """Build a ConfigSource from nested dictionaries."""

    def _make(data=None) -> ConfigSource:
        return ConfigSource.from_mapping(data or {})

    return _make
