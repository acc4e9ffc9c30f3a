"""Build type pair mappings from member and constructor metadata.

Building is a pure computation over type metadata. Object mappings resolve
nested complex pairs through a caller-supplied ``resolve`` callable (normally
``MappingRegistry.resolve_object``) so that nested pairs are cached as well.
There is no cycle guard: a self-referential type graph recurses until Python
raises ``RecursionError``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from fieldmap.constructors import ConstructorCandidate, is_default_constructible, record_constructors
from fieldmap.errors import RecordConstructionError
from fieldmap.members import MemberDescriptor, describe_members, is_complex_type, members_by_name, unwrap_optional
from fieldmap.plans import (
    ConstructorSlot,
    FieldCorrespondence,
    MappingKey,
    RecordTypePairMapping,
    ShapeKind,
    TypePairMapping,
)
from fieldmap.settings import MapperSettings

_LOGGER = logging.getLogger(__name__)

ResolveObject = Callable[[type, type], TypePairMapping]


def build_object_mapping(
    source_type: type,
    destination_type: type,
    *,
    resolve: ResolveObject,
    settings: MapperSettings | None = None,
) -> TypePairMapping:
    """Match source members to destination members by name.

    Parameters
    ----------
    source_type
        Type the values are read from.
    destination_type
        Type the values are written to.
    resolve
        Callable returning the mapping for a nested complex pair.
    settings
        Discovery settings; defaults to ``MapperSettings()``.

    Returns
    -------
    TypePairMapping
        Correspondences in source member name order. Unmatched members are
        omitted without error.
    """
    settings = settings or MapperSettings()
    destinations = members_by_name(destination_type, settings)
    correspondences: list[FieldCorrespondence] = []
    for member in describe_members(source_type, settings):
        if not _is_mappable_source(member, settings):
            continue
        target = destinations.get(member.name)
        if target is None or target.skip or not (target.readable and target.writable):
            continue
        correspondence = _correspond(member, target, resolve)
        if correspondence is not None:
            correspondences.append(correspondence)
    return TypePairMapping(
        key=MappingKey(source_type, destination_type, ShapeKind.OBJECT),
        correspondences=tuple(correspondences),
    )


def build_record_mapping(
    source_type: type,
    record_type: type,
    *,
    settings: MapperSettings | None = None,
) -> RecordTypePairMapping:
    """Bind the first fully satisfiable constructor of a record type.

    Every parameter of a constructor must be matched by a readable, not
    skipped source member with the same name and the same declared type.
    Constructors are tried in declaration order and the first one that
    resolves wins, even when a later one would bind more members.

    Parameters
    ----------
    source_type
        Type the constructor arguments are read from.
    record_type
        Type constructed by the mapping.
    settings
        Discovery settings; defaults to ``MapperSettings()``.

    Returns
    -------
    RecordTypePairMapping
        Chosen constructor and its parameter bindings.

    Raises
    ------
    RecordConstructionError
        When no constructor can be fully satisfied.
    """
    settings = settings or MapperSettings()
    sources = {
        member.name: member
        for member in describe_members(source_type, settings)
        if member.readable and not member.skip
    }
    skipped = {member.name for member in describe_members(record_type, settings) if member.skip}
    for candidate in record_constructors(record_type):
        slots = _bind_constructor(candidate, sources, skipped)
        if slots is None:
            _LOGGER.debug(
                "Constructor %s.%s is not satisfiable from %s",
                record_type.__qualname__,
                candidate.name,
                source_type.__qualname__,
            )
            continue
        return RecordTypePairMapping(
            key=MappingKey(source_type, record_type, ShapeKind.RECORD),
            constructor_name=candidate.name,
            constructor_index=candidate.index,
            factory=candidate.factory,
            slots=slots,
        )
    raise RecordConstructionError(source_type, record_type)


def _is_mappable_source(member: MemberDescriptor, settings: MapperSettings) -> bool:
    if member.skip or not member.readable:
        return False
    return member.writable or not settings.require_source_writable


def _correspond(
    member: MemberDescriptor,
    target: MemberDescriptor,
    resolve: ResolveObject,
) -> FieldCorrespondence | None:
    if member.annotation == target.annotation:
        return FieldCorrespondence(
            source_field=member.name,
            destination_field=target.name,
            annotation=member.annotation,
        )
    if not (is_complex_type(member.annotation) and is_complex_type(target.annotation)):
        return None
    nested_source = unwrap_optional(member.annotation)
    nested_destination = unwrap_optional(target.annotation)
    if not isinstance(nested_source, type) or not isinstance(nested_destination, type):
        return None
    if not is_default_constructible(nested_destination):
        return None
    nested = resolve(nested_source, nested_destination)
    if not nested.correspondences:
        _LOGGER.debug(
            "Dropped member %r: %s and %s share no mappable members",
            member.name,
            nested_source.__qualname__,
            nested_destination.__qualname__,
        )
        return None
    return FieldCorrespondence(
        source_field=member.name,
        destination_field=target.name,
        annotation=member.annotation,
        is_complex=True,
        nested_type=nested_destination,
    )


def _bind_constructor(
    candidate: ConstructorCandidate,
    sources: dict[str, MemberDescriptor],
    skipped: set[str],
) -> tuple[ConstructorSlot, ...] | None:
    slots: list[ConstructorSlot] = []
    for parameter in candidate.parameters:
        member = sources.get(parameter.name)
        if member is None or parameter.name in skipped or member.annotation != parameter.annotation:
            return None
        slots.append(
            ConstructorSlot(
                parameter=parameter.name,
                source_field=member.name,
                annotation=parameter.annotation,
                positional=parameter.positional_only,
            )
        )
    return tuple(slots)


__all__ = ["ResolveObject", "build_object_mapping", "build_record_mapping"]
