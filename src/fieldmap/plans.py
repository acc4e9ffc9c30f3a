"""Type pair mappings: the cached result of member discovery."""

from __future__ import annotations

import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from fieldmap.errors import MappingDefinitionError, type_label
from fieldmap.members import members_by_name
from fieldmap.settings import MapperSettings
from fieldmap.utils.hashing import hash_json_canonical


class ShapeKind(enum.StrEnum):
    """How a destination type is populated."""

    OBJECT = "object"
    RECORD = "record"


@dataclass(frozen=True)
class MappingKey:
    """Registry key for one (source type, destination type, shape) triple."""

    source_type: type
    destination_type: type
    shape: ShapeKind = ShapeKind.OBJECT

    def payload(self) -> dict[str, object]:
        """Return a builtin description of the key.

        Returns:
        -------
        dict[str, object]
            Qualified type names and shape.
        """
        return {
            "source_type": _qualified(self.source_type),
            "destination_type": _qualified(self.destination_type),
            "shape": self.shape.value,
        }


@dataclass(frozen=True)
class FieldCorrespondence:
    """One resolved source member to destination member binding.

    ``nested_type`` is set for complex correspondences and names the
    destination member's object type that a nested mapping fills.
    """

    source_field: str
    destination_field: str
    annotation: object
    is_complex: bool = False
    nested_type: type | None = None

    def payload(self) -> dict[str, object]:
        """Return a builtin description of the correspondence.

        Returns:
        -------
        dict[str, object]
            Field names, annotation text and complexity flag.
        """
        return {
            "source_field": self.source_field,
            "destination_field": self.destination_field,
            "annotation": _annotation_text(self.annotation),
            "is_complex": self.is_complex,
            "nested_type": None if self.nested_type is None else _qualified(self.nested_type),
        }


@dataclass(frozen=True)
class TypePairMapping:
    """Ordered field correspondences for an object-shaped destination."""

    key: MappingKey
    correspondences: tuple[FieldCorrespondence, ...] = ()

    @property
    def source_type(self) -> type:
        """Source type of the pair."""
        return self.key.source_type

    @property
    def destination_type(self) -> type:
        """Destination type of the pair."""
        return self.key.destination_type

    @property
    def shape(self) -> ShapeKind:
        """Destination shape of the pair."""
        return self.key.shape

    def payload(self) -> dict[str, object]:
        """Return a builtin description of the mapping.

        Returns:
        -------
        dict[str, object]
            Key payload plus correspondence payloads in application order.
        """
        return {
            **self.key.payload(),
            "correspondences": [item.payload() for item in self.correspondences],
        }

    def fingerprint(self) -> str:
        """Return a deterministic fingerprint of the mapping structure.

        Returns:
        -------
        str
            SHA-256 hexdigest of the canonical payload.
        """
        return hash_json_canonical(self.payload())

    @classmethod
    def from_pairs(
        cls,
        source_type: type,
        destination_type: type,
        pairs: Mapping[str, str],
        *,
        settings: MapperSettings | None = None,
    ) -> TypePairMapping:
        """Build an explicit mapping from ``{source_field: destination_field}`` pairs.

        Explicit pairs bypass name matching, so renamed members can be wired
        together. Skip flags still apply. Values are copied as-is.

        Parameters
        ----------
        source_type
            Type the values are read from.
        destination_type
            Type the values are written to.
        pairs
            Source member name to destination member name.
        settings
            Discovery settings used to validate the members.

        Returns:
        -------
        TypePairMapping
            Mapping ready for ``MappingRegistry.register_mapping``.

        Raises:
        ------
        MappingDefinitionError
            When a source member is unknown or unreadable, a destination
            member is unknown or not writable, or either member is skipped.
        """
        sources = members_by_name(source_type, settings)
        destinations = members_by_name(destination_type, settings)
        correspondences: list[FieldCorrespondence] = []
        for source_field, destination_field in pairs.items():
            source_member = sources.get(source_field)
            if source_member is None or not source_member.readable:
                msg = f"{type_label(source_type)} has no readable member {source_field!r}."
                raise MappingDefinitionError(msg)
            destination_member = destinations.get(destination_field)
            if destination_member is None or not destination_member.writable:
                msg = f"{type_label(destination_type)} has no writable member {destination_field!r}."
                raise MappingDefinitionError(msg)
            for member, owner in ((source_member, source_type), (destination_member, destination_type)):
                if member.skip:
                    msg = f"{type_label(owner)} member {member.name!r} is excluded from mapping."
                    raise MappingDefinitionError(msg)
            correspondences.append(
                FieldCorrespondence(
                    source_field=source_field,
                    destination_field=destination_field,
                    annotation=source_member.annotation,
                )
            )
        return cls(
            key=MappingKey(source_type, destination_type, ShapeKind.OBJECT),
            correspondences=tuple(correspondences),
        )


@dataclass(frozen=True)
class ConstructorSlot:
    """Binding of one source member to one constructor parameter."""

    parameter: str
    source_field: str
    annotation: object
    positional: bool = False

    def payload(self) -> dict[str, object]:
        """Return a builtin description of the slot.

        Returns:
        -------
        dict[str, object]
            Parameter name, source member name and annotation text.
        """
        return {
            "parameter": self.parameter,
            "source_field": self.source_field,
            "annotation": _annotation_text(self.annotation),
            "positional": self.positional,
        }


@dataclass(frozen=True)
class RecordTypePairMapping:
    """The chosen constructor of a record type and its parameter bindings."""

    key: MappingKey
    constructor_name: str
    constructor_index: int
    factory: Callable[..., object]
    slots: tuple[ConstructorSlot, ...] = ()

    @property
    def source_type(self) -> type:
        """Source type of the pair."""
        return self.key.source_type

    @property
    def destination_type(self) -> type:
        """Record type of the pair."""
        return self.key.destination_type

    @property
    def shape(self) -> ShapeKind:
        """Destination shape of the pair."""
        return self.key.shape

    def construct(self, source: object) -> object:
        """Evaluate the bound source members and call the constructor.

        Returns:
        -------
        object
            Newly constructed record.
        """
        args: list[object] = []
        kwargs: dict[str, object] = {}
        for slot in self.slots:
            value = getattr(source, slot.source_field)
            if slot.positional:
                args.append(value)
            else:
                kwargs[slot.parameter] = value
        return self.factory(*args, **kwargs)

    def payload(self) -> dict[str, object]:
        """Return a builtin description of the record mapping.

        Returns:
        -------
        dict[str, object]
            Key payload, constructor identity and slot payloads.
        """
        return {
            **self.key.payload(),
            "constructor": self.constructor_name,
            "constructor_index": self.constructor_index,
            "slots": [slot.payload() for slot in self.slots],
        }

    def fingerprint(self) -> str:
        """Return a deterministic fingerprint of the mapping structure.

        Returns:
        -------
        str
            SHA-256 hexdigest of the canonical payload.
        """
        return hash_json_canonical(self.payload())


AnyTypePairMapping = TypePairMapping | RecordTypePairMapping


def _qualified(tp: type) -> str:
    return f"{tp.__module__}.{tp.__qualname__}"


def _annotation_text(annotation: object) -> str:
    if isinstance(annotation, type):
        return _qualified(annotation)
    return repr(annotation)


__all__ = [
    "AnyTypePairMapping",
    "ConstructorSlot",
    "FieldCorrespondence",
    "MappingKey",
    "RecordTypePairMapping",
    "ShapeKind",
    "TypePairMapping",
]
