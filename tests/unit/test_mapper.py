"""Tests for mapping live objects with Mapper.map."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from fieldmap import Mapper, MappingDefinitionError, MappingRegistry, TypePairMapping
from tests.test_helpers.mapping_subjects import (
    ComplexDestination,
    ComplexSource,
    Destination,
    DestinationWithClassSkip,
    DestinationWithSkip,
    ExampleRecord,
    InnerA,
    InnerB,
    MoreComplexDestination,
    MutableStruct,
    Node,
    OtherNode,
    PlainDestination,
    PlainSource,
    Source,
    SourceWithSkip,
    WrapperA,
    WrapperB,
)


@pytest.fixture
def mapper() -> Mapper:
    """Return a mapper backed by a fresh registry.

    Returns:
    -------
    Mapper
        Mapper isolated from the process-wide registry.
    """
    return Mapper(MappingRegistry())


def _source(name: str | None = "name") -> Source:
    return Source(
        id=uuid4(),
        name=name,
        date_time_nullable=datetime(2024, 1, 2, tzinfo=UTC),
    )


def test_map_copies_shared_members(mapper: Mapper) -> None:
    """Ensure shared members are copied and extra members keep their defaults."""
    source = _source()
    result = mapper.map(source, Destination)
    assert isinstance(result, Destination)
    assert result.id == source.id
    assert result.name == source.name
    assert result.date_time_nullable == source.date_time_nullable
    assert result.last_name is None
    assert result.date_time_nullable2 is None


def test_map_into_existing_instance(mapper: Mapper) -> None:
    """Ensure an existing destination is populated in place and returned."""
    source = _source()
    destination = Destination(last_name="kept")
    result = mapper.map(source, destination)
    assert result is destination
    assert destination.id == source.id
    assert destination.last_name == "kept"


def test_map_with_target_type_keyword(mapper: Mapper) -> None:
    """Ensure target_type default-constructs the destination."""
    source = _source()
    result = mapper.map(source, target_type=Destination)
    assert isinstance(result, Destination)
    assert result.name == source.name


def test_map_without_target_raises(mapper: Mapper) -> None:
    """Ensure a missing target and target type is rejected."""
    with pytest.raises(TypeError):
        mapper.map(_source())


def test_absent_source_returns_none(mapper: Mapper) -> None:
    """Ensure a None source discards the target and returns None."""
    assert mapper.map(None, Destination()) is None
    assert mapper.map(None, Destination) is None


def test_after_map_runs_after_correspondences(mapper: Mapper) -> None:
    """Ensure the hook sees the populated destination and can fill extra members."""
    source = _source()
    seen: list[object] = []

    def _after(src: Source, dst: Destination) -> None:
        seen.append(dst.name)
        dst.last_name = src.last_name_example()

    result = mapper.map(source, Destination, _after)
    assert seen == [source.name]
    assert result.last_name == source.last_name_example()


def test_skipped_destination_member_is_left_untouched(mapper: Mapper) -> None:
    """Ensure skipped members keep their previous values while others copy."""
    source = _source()
    destination = DestinationWithSkip(name="before")
    mapper.map(source, destination)
    assert destination.name == "before"
    assert destination.id == source.id

    class_skip = mapper.map(source, DestinationWithClassSkip)
    assert class_skip.name is None
    assert class_skip.id == source.id


def test_nested_members_are_mapped_recursively(mapper: Mapper) -> None:
    """Ensure complex members are mapped into fresh destination instances."""
    inner = InnerA(id=uuid4(), label="inner")
    result = mapper.map(WrapperA(inner=inner), WrapperB)
    assert isinstance(result.inner, InnerB)
    assert result.inner.id == inner.id


def test_nested_source_is_mapped_into_wider_destination(mapper: Mapper) -> None:
    """Ensure nested mappings apply the full nested pair mapping."""
    nested = _source("nested")
    source = ComplexSource(id=uuid4(), name="outer", some=nested)
    result = mapper.map(source, MoreComplexDestination)
    assert result.id == source.id
    assert isinstance(result.some, Destination)
    assert result.some.name == "nested"
    assert result.some.id == nested.id


def test_absent_nested_source_maps_to_none(mapper: Mapper) -> None:
    """Ensure a None nested member produces None on the destination."""
    destination = ComplexDestination(some=InnerB(id=uuid4()))
    mapper.map(ComplexSource(id=uuid4(), some=None), destination)
    assert destination.some is None


def test_plain_classes_and_properties(mapper: Mapper) -> None:
    """Ensure plain annotated classes and writable properties are mapped."""
    source = PlainSource(id=uuid4(), name="plain")
    source.nickname = "nick"
    result = mapper.map(source, PlainDestination)
    assert (result.id, result.name, result.nickname) == (source.id, "plain", "nick")


def test_msgspec_structs_honor_meta_skip(mapper: Mapper) -> None:
    """Ensure struct members map and Meta-flagged members are left alone."""
    source = MutableStruct(id=uuid4(), name="struct", secret="hidden")
    result = mapper.map(source, MutableStruct)
    assert result.id == source.id
    assert result.name == "struct"
    assert result.secret is None


def test_frozen_destination_gets_nothing(mapper: Mapper) -> None:
    """Ensure object mapping never writes to frozen destinations."""
    mapping = mapper.registry.resolve_object(Source, ExampleRecord)
    assert mapping.correspondences == ()


def test_explicit_mapping_renames_members(mapper: Mapper) -> None:
    """Ensure a registered explicit mapping replaces name matching for the pair."""
    mapper.register_mapping(
        TypePairMapping.from_pairs(Source, Destination, {"name": "last_name", "id": "id"}),
    )
    source = _source("renamed")
    result = mapper.map(source, Destination)
    assert result.last_name == "renamed"
    assert result.name is None
    assert result.id == source.id


def test_explicit_mapping_rejects_unknown_members() -> None:
    """Ensure explicit mappings validate both member names."""
    with pytest.raises(MappingDefinitionError, match="missing"):
        TypePairMapping.from_pairs(Source, Destination, {"missing": "name"})
    with pytest.raises(MappingDefinitionError, match="utc_now"):
        TypePairMapping.from_pairs(Destination, Source, {"name": "utc_now"})


def test_explicit_mapping_honors_skip_flags(mapper: Mapper) -> None:
    """Ensure explicit pairs cannot reach members excluded on either side."""
    with pytest.raises(MappingDefinitionError, match="excluded"):
        TypePairMapping.from_pairs(Source, DestinationWithSkip, {"name": "name", "id": "id"})
    with pytest.raises(MappingDefinitionError, match="excluded"):
        TypePairMapping.from_pairs(SourceWithSkip, Destination, {"name": "name"})
    mapper.register_mapping(TypePairMapping.from_pairs(Source, DestinationWithSkip, {"id": "id"}))
    destination = DestinationWithSkip(name="before")
    mapper.map(_source("after"), destination)
    assert destination.name == "before"


def test_mapper_id_tracks_registry(mapper: Mapper) -> None:
    """Ensure mapper ids are shared through the default registry only."""
    assert Mapper().id == Mapper().id
    assert mapper.id == mapper.registry.registry_id
    assert mapper.id != Mapper().id


def test_self_referential_mapping_raises_recursion_error(mapper: Mapper) -> None:
    """Ensure cyclic type graphs are not guarded."""
    with pytest.raises(RecursionError):
        mapper.map(Node(name="root"), OtherNode)
