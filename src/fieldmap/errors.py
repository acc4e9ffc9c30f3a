"""Exception types raised by fieldmap."""

from __future__ import annotations


def type_label(tp: object) -> str:
    """Return a readable label for a type used in error messages.

    Returns:
    -------
    str
        Qualified name for classes, ``repr`` otherwise.
    """
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)


class MappingError(RuntimeError):
    """Base error for mapping discovery and application failures."""


class RecordConstructionError(MappingError):
    """Raised when no constructor of a record type can be satisfied from a source type."""

    def __init__(self, source_type: type, destination_type: type) -> None:
        self.source_type = source_type
        self.destination_type = destination_type
        msg = (
            "Unable to create constructor map for destination record type "
            f"{type_label(destination_type)!r}: no constructor is satisfiable "
            f"from source type {type_label(source_type)!r}."
        )
        super().__init__(msg)


class MappingRegistrationError(MappingError, ValueError):
    """Raised when a mapping is registered for a type pair that already has one."""


class MappingDefinitionError(MappingError, ValueError):
    """Raised when an explicit mapping references members that cannot take part."""


__all__ = [
    "MappingDefinitionError",
    "MappingError",
    "MappingRegistrationError",
    "RecordConstructionError",
    "type_label",
]
