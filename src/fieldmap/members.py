"""Member discovery for subject types.

A member is a public attribute a mapping can read from or write to. Annotated
attributes (dataclass fields, ``msgspec.Struct`` fields, ``NamedTuple`` fields
and plain class annotations) and ``property`` objects are described. Methods,
private names, ``ClassVar`` annotations and dataclass ``InitVar`` pseudo-fields
are not.

Members can be excluded from mapping declaratively, on either side of a pair:

- ``Annotated[T, SKIP_MAPPING]``;
- ``dataclasses.field(metadata={"skip_mapping": True})`` (see :func:`skip_field`);
- ``Annotated[T, msgspec.Meta(extra={"skip_mapping": True})]``;
- a ``__mapping_skip__`` collection of member names on the class.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import enum
import inspect
import logging
import types
import typing
import uuid
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from functools import cache
from pathlib import PurePath
from typing import Annotated, Any, ClassVar, Final, Literal, Union, get_args, get_origin

import msgspec

from fieldmap.settings import DEFAULT_SKIP_METADATA_KEY, MapperSettings

_LOGGER = logging.getLogger(__name__)

MemberKind = Literal["field", "property"]

SKIP_ATTRIBUTE: Final[str] = "__mapping_skip__"

_SCALAR_TYPES: Final[tuple[type, ...]] = (
    str,
    bytes,
    bytearray,
    memoryview,
    int,
    float,
    complex,
    Decimal,
    Fraction,
    uuid.UUID,
    dt.date,
    dt.time,
    dt.timedelta,
    dt.tzinfo,
    enum.Enum,
    PurePath,
    type(None),
)


@dataclass(frozen=True)
class SkipMapping:
    """Marker placed in ``typing.Annotated`` metadata to exclude a member."""


SKIP_MAPPING: Final[SkipMapping] = SkipMapping()


@dataclass(frozen=True)
class MemberDescriptor:
    """Read-only view of one public member of a type."""

    name: str
    annotation: object
    readable: bool
    writable: bool
    skip: bool = False
    kind: MemberKind = "field"


def skip_field(*, key: str = DEFAULT_SKIP_METADATA_KEY, **kwargs: Any) -> Any:
    """Return a ``dataclasses.field`` flagged as excluded from mapping.

    Parameters
    ----------
    key
        Metadata key that marks the field; must match the registry settings.
    **kwargs
        Forwarded to ``dataclasses.field``.

    Returns
    -------
    Any
        Dataclass field specification.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[key] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def unwrap_optional(annotation: object) -> object:
    """Return ``X`` for ``X | None`` annotations, otherwise the annotation itself.

    Returns
    -------
    object
        Annotation without a single ``None`` alternative.
    """
    if get_origin(annotation) not in {Union, types.UnionType}:
        return annotation
    args = get_args(annotation)
    remaining = [arg for arg in args if arg is not type(None)]
    if len(remaining) == 1 and len(remaining) < len(args):
        return remaining[0]
    return annotation


def is_complex_type(annotation: object) -> bool:
    """Return whether an annotation names a nested object type.

    Scalars, enums, collections, ``object`` and ``Any`` are not complex.
    ``X | None`` is judged by ``X``.

    Returns
    -------
    bool
        ``True`` when values of the annotation can be mapped member by member.
    """
    candidate = unwrap_optional(annotation)
    if get_origin(candidate) is not None:
        return False
    if candidate is Any or candidate is object or not isinstance(candidate, type):
        return False
    return not issubclass(candidate, _SCALAR_TYPES) and not issubclass(candidate, Collection)


def is_frozen_type(tp: type) -> bool:
    """Return whether instances of a type reject attribute assignment.

    Returns
    -------
    bool
        ``True`` for frozen dataclasses, frozen structs and named tuples.
    """
    if dataclasses.is_dataclass(tp):
        return bool(tp.__dataclass_params__.frozen)  # type: ignore[attr-defined]
    if issubclass(tp, msgspec.Struct):
        return bool(tp.__struct_config__.frozen)
    return issubclass(tp, tuple)


def describe_members(
    tp: type,
    settings: MapperSettings | None = None,
) -> tuple[MemberDescriptor, ...]:
    """Return the public members of a type, sorted by name.

    Parameters
    ----------
    tp
        Type to describe.
    settings
        Discovery settings; defaults to ``MapperSettings()``.

    Returns
    -------
    tuple[MemberDescriptor, ...]
        Member descriptors ordered by name.
    """
    return _describe_members(tp, settings or MapperSettings())


def members_by_name(
    tp: type,
    settings: MapperSettings | None = None,
) -> Mapping[str, MemberDescriptor]:
    """Return the public members of a type keyed by name.

    Returns
    -------
    Mapping[str, MemberDescriptor]
        Member descriptors keyed by member name.
    """
    return {member.name: member for member in describe_members(tp, settings)}


@cache
def _describe_members(tp: type, settings: MapperSettings) -> tuple[MemberDescriptor, ...]:
    hints = typing.get_type_hints(tp)
    extras = typing.get_type_hints(tp, include_extras=True)
    owner_skips = _owner_skips(tp)
    metadata = _dataclass_metadata(tp)
    writable = not is_frozen_type(tp)
    members: dict[str, MemberDescriptor] = {}
    for name in _field_names(tp, hints):
        if name.startswith("_"):
            continue
        skip = (
            name in owner_skips
            or bool(metadata.get(name, {}).get(settings.skip_metadata_key))
            or _annotated_skip(extras.get(name), settings.skip_metadata_key)
        )
        members[name] = MemberDescriptor(
            name=name,
            annotation=hints[name],
            readable=True,
            writable=writable,
            skip=skip,
        )
    if settings.include_properties:
        for name, prop in _properties(tp).items():
            return_hints, return_extras = _getter_return_hints(prop.fget)
            members[name] = MemberDescriptor(
                name=name,
                annotation=return_hints.get("return", Any),
                readable=prop.fget is not None,
                writable=prop.fset is not None,
                skip=name in owner_skips
                or _annotated_skip(return_extras.get("return"), settings.skip_metadata_key),
                kind="property",
            )
    _LOGGER.debug("Described %d members of %s", len(members), tp.__qualname__)
    return tuple(members[name] for name in sorted(members))


def _field_names(tp: type, hints: Mapping[str, object]) -> Iterable[str]:
    if dataclasses.is_dataclass(tp):
        return [field.name for field in dataclasses.fields(tp)]
    if issubclass(tp, msgspec.Struct):
        return list(tp.__struct_fields__)
    if issubclass(tp, tuple) and hasattr(tp, "_fields"):
        return [name for name in tp._fields if name in hints]  # type: ignore[attr-defined]
    return [name for name, hint in hints.items() if get_origin(hint) is not ClassVar and hint is not ClassVar]


def _dataclass_metadata(tp: type) -> Mapping[str, Mapping[str, object]]:
    if not dataclasses.is_dataclass(tp):
        return {}
    return {field.name: field.metadata for field in dataclasses.fields(tp)}


def _owner_skips(tp: type) -> frozenset[str]:
    names: set[str] = set()
    for klass in tp.__mro__:
        names.update(vars(klass).get(SKIP_ATTRIBUTE, ()))
    return frozenset(names)


def _annotated_skip(hint: object, key: str) -> bool:
    if get_origin(hint) is not Annotated:
        return False
    for meta in get_args(hint)[1:]:
        if isinstance(meta, SkipMapping):
            return True
        if isinstance(meta, msgspec.Meta) and (meta.extra or {}).get(key):
            return True
    return False


def _properties(tp: type) -> dict[str, property]:
    found: dict[str, property] = {}
    for klass in reversed(tp.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, property) and not name.startswith("_"):
                found[name] = value
    return found


def _getter_return_hints(
    fget: object,
) -> tuple[Mapping[str, object], Mapping[str, object]]:
    # Getters that are not Python functions (e.g. operator.attrgetter) carry no hints.
    if not (inspect.isfunction(fget) or inspect.ismethod(fget)):
        return {}, {}
    return typing.get_type_hints(fget), typing.get_type_hints(fget, include_extras=True)


__all__ = [
    "SKIP_ATTRIBUTE",
    "SKIP_MAPPING",
    "MemberDescriptor",
    "MemberKind",
    "SkipMapping",
    "describe_members",
    "is_complex_type",
    "is_frozen_type",
    "members_by_name",
    "skip_field",
    "unwrap_optional",
]
