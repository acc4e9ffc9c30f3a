"""Configuration for member discovery and mapping."""

from __future__ import annotations

from collections.abc import Mapping

from fieldmap.serde_msgspec import StructBaseStrict
from fieldmap.utils.env_utils import env_bool, env_text
from fieldmap.utils.hashing import hash_json_canonical

DEFAULT_SKIP_METADATA_KEY = "skip_mapping"

ENV_INCLUDE_PROPERTIES = "FIELDMAP_INCLUDE_PROPERTIES"
ENV_SKIP_METADATA_KEY = "FIELDMAP_SKIP_METADATA_KEY"
ENV_REQUIRE_SOURCE_WRITABLE = "FIELDMAP_REQUIRE_SOURCE_WRITABLE"


class MapperSettings(StructBaseStrict, frozen=True):
    """Settings shared by every mapping built in one registry.

    Attributes
    ----------
    include_properties
        Whether ``property`` members take part in discovery.
    skip_metadata_key
        Key looked up in dataclass field metadata and ``msgspec.Meta.extra``
        to mark a member as excluded from mapping.
    require_source_writable
        Whether object mappings only read source members that are also
        writable. Record mappings always accept read-only source members.
    """

    include_properties: bool = True
    skip_metadata_key: str = DEFAULT_SKIP_METADATA_KEY
    require_source_writable: bool = True

    def fingerprint_payload(self) -> Mapping[str, object]:
        """Return canonical payload for settings fingerprinting.

        Returns:
        -------
        Mapping[str, object]
            Payload used for settings fingerprinting.
        """
        return {
            "include_properties": self.include_properties,
            "skip_metadata_key": self.skip_metadata_key,
            "require_source_writable": self.require_source_writable,
        }

    def fingerprint(self) -> str:
        """Return a deterministic fingerprint for these settings.

        Returns:
        -------
        str
            SHA-256 hexdigest of the settings payload.
        """
        return hash_json_canonical(self.fingerprint_payload())


def settings_from_env() -> MapperSettings:
    """Build settings from ``FIELDMAP_*`` environment variables.

    Returns:
    -------
    MapperSettings
        Settings with environment overrides applied to the defaults.
    """
    defaults = MapperSettings()
    return MapperSettings(
        include_properties=env_bool(ENV_INCLUDE_PROPERTIES, default=defaults.include_properties),
        skip_metadata_key=env_text(ENV_SKIP_METADATA_KEY, default=defaults.skip_metadata_key),
        require_source_writable=env_bool(
            ENV_REQUIRE_SOURCE_WRITABLE,
            default=defaults.require_source_writable,
        ),
    )


__all__ = [
    "DEFAULT_SKIP_METADATA_KEY",
    "ENV_INCLUDE_PROPERTIES",
    "ENV_REQUIRE_SOURCE_WRITABLE",
    "ENV_SKIP_METADATA_KEY",
    "MapperSettings",
    "settings_from_env",
]
