"""Tests for mapper settings and environment overrides."""

from __future__ import annotations

import logging

import pytest

from fieldmap.settings import (
    ENV_INCLUDE_PROPERTIES,
    ENV_REQUIRE_SOURCE_WRITABLE,
    ENV_SKIP_METADATA_KEY,
    MapperSettings,
    settings_from_env,
)


def test_defaults() -> None:
    """Ensure default settings describe properties and require writable sources."""
    settings = MapperSettings()
    assert settings.include_properties
    assert settings.skip_metadata_key == "skip_mapping"
    assert settings.require_source_writable


def test_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure unset environment variables leave defaults in place."""
    for name in (ENV_INCLUDE_PROPERTIES, ENV_SKIP_METADATA_KEY, ENV_REQUIRE_SOURCE_WRITABLE):
        monkeypatch.delenv(name, raising=False)
    assert settings_from_env() == MapperSettings()


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure environment variables override each setting."""
    monkeypatch.setenv(ENV_INCLUDE_PROPERTIES, "false")
    monkeypatch.setenv(ENV_SKIP_METADATA_KEY, "no_map")
    monkeypatch.setenv(ENV_REQUIRE_SOURCE_WRITABLE, "0")
    assert settings_from_env() == MapperSettings(
        include_properties=False,
        skip_metadata_key="no_map",
        require_source_writable=False,
    )


def test_invalid_env_bool_falls_back(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Ensure unparsable booleans fall back to the default with a warning."""
    monkeypatch.setenv(ENV_INCLUDE_PROPERTIES, "maybe")
    with caplog.at_level(logging.WARNING, logger="fieldmap.utils.env_utils"):
        assert settings_from_env().include_properties
    assert ENV_INCLUDE_PROPERTIES in caplog.text


def test_blank_env_text_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure a blank skip key keeps the default and values are stripped."""
    monkeypatch.setenv(ENV_SKIP_METADATA_KEY, "   ")
    assert settings_from_env().skip_metadata_key == "skip_mapping"
    monkeypatch.setenv(ENV_SKIP_METADATA_KEY, " no_map ")
    assert settings_from_env().skip_metadata_key == "no_map"


def test_fingerprint_tracks_values() -> None:
    """Ensure fingerprints are stable and change with the settings."""
    assert MapperSettings().fingerprint() == MapperSettings().fingerprint()
    assert MapperSettings().fingerprint() != MapperSettings(include_properties=False).fingerprint()


def test_settings_are_immutable() -> None:
    """Ensure settings cannot be mutated after construction."""
    settings = MapperSettings()
    with pytest.raises(AttributeError):
        settings.include_properties = False  # type: ignore[misc]
