"""Tests for mapping payloads and fingerprints."""

from __future__ import annotations

from fieldmap import MappingKey, MappingRegistry, ShapeKind, TypePairMapping
from tests.test_helpers.mapping_subjects import ComplexDestination, ComplexSource, Destination, NameRecord, Source


def test_object_payload_describes_correspondences() -> None:
    """Ensure object payloads list correspondences with qualified type names."""
    mapping = MappingRegistry().resolve_object(ComplexSource, ComplexDestination)
    payload = mapping.payload()
    assert payload["shape"] == "object"
    assert payload["source_type"] == f"{ComplexSource.__module__}.ComplexSource"
    nested = [item for item in payload["correspondences"] if item["is_complex"]]
    assert nested[0]["nested_type"].endswith(".InnerB")


def test_record_payload_describes_slots() -> None:
    """Ensure record payloads name the constructor and its slots."""
    payload = MappingRegistry().resolve_record(Source, NameRecord).payload()
    assert payload["shape"] == "record"
    assert payload["constructor"] == "__init__"
    assert [slot["parameter"] for slot in payload["slots"]] == ["id", "name"]


def test_fingerprint_is_stable_across_registries() -> None:
    """Ensure independently built mappings of one pair share a fingerprint."""
    first = MappingRegistry().resolve_object(Source, Destination)
    second = MappingRegistry().resolve_object(Source, Destination)
    assert first is not second
    assert first.fingerprint() == second.fingerprint()
    assert first.fingerprint() != MappingRegistry().resolve_record(Source, NameRecord).fingerprint()


def test_explicit_mapping_differs_from_discovered() -> None:
    """Ensure explicit renames change the mapping fingerprint."""
    discovered = MappingRegistry().resolve_object(Source, Destination)
    explicit = TypePairMapping.from_pairs(Source, Destination, {"name": "last_name"})
    assert explicit.key == MappingKey(Source, Destination, ShapeKind.OBJECT)
    assert explicit.fingerprint() != discovered.fingerprint()
