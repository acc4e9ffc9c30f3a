"""Constructor discovery for record targets."""

from __future__ import annotations

import inspect
import sys
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final, TypeVar

import msgspec

RECORD_CONSTRUCTOR_ATTRIBUTE: Final[str] = "__record_constructor__"
PRIMARY_CONSTRUCTOR: Final[str] = "__init__"

_VARIADIC: Final[frozenset[inspect._ParameterKind]] = frozenset(
    {inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD}
)

F = TypeVar("F")


@dataclass(frozen=True)
class ConstructorParameter:
    """One bindable constructor parameter."""

    name: str
    annotation: object
    positional_only: bool = False
    has_default: bool = False


@dataclass(frozen=True)
class ConstructorCandidate:
    """A way to construct a record, in declaration order among its siblings."""

    name: str
    index: int
    factory: Callable[..., object]
    parameters: tuple[ConstructorParameter, ...]


def record_constructor(func: F) -> F:
    """Mark a classmethod as an alternate record constructor.

    Alternate constructors are considered after the type's own signature, in
    the order they appear in the class body. The decorator may be applied
    above or below ``@classmethod``.

    Returns
    -------
    F
        The decorated callable, unchanged apart from the marker.
    """
    target = func.__func__ if isinstance(func, classmethod) else func
    setattr(target, RECORD_CONSTRUCTOR_ATTRIBUTE, True)
    return func


def record_constructors(record_type: type) -> tuple[ConstructorCandidate, ...]:
    """Return the constructors of a record type in declaration order.

    Returns
    -------
    tuple[ConstructorCandidate, ...]
        Primary constructor first, then marked alternate constructors.
    """
    class_hints = typing.get_type_hints(record_type)
    candidates = [
        ConstructorCandidate(
            name=PRIMARY_CONSTRUCTOR,
            index=0,
            factory=record_type,
            parameters=primary_parameters(record_type, class_hints),
        )
    ]
    for name, attr in vars(record_type).items():
        if not isinstance(attr, classmethod):
            continue
        if not getattr(attr.__func__, RECORD_CONSTRUCTOR_ATTRIBUTE, False):
            continue
        factory = getattr(record_type, name)
        hints = typing.get_type_hints(attr.__func__)
        candidates.append(
            ConstructorCandidate(
                name=name,
                index=len(candidates),
                factory=factory,
                parameters=_signature_parameters(factory, hints, class_hints),
            )
        )
    return tuple(candidates)


def primary_parameters(
    record_type: type,
    class_hints: typing.Mapping[str, object] | None = None,
) -> tuple[ConstructorParameter, ...]:
    """Return the parameters of calling a type directly.

    Returns
    -------
    tuple[ConstructorParameter, ...]
        Parameters accepted by ``record_type(...)``.
    """
    hints = class_hints if class_hints is not None else typing.get_type_hints(record_type)
    if issubclass(record_type, msgspec.Struct):
        return tuple(
            ConstructorParameter(
                name=info.name,
                annotation=hints.get(info.name, Any),
                has_default=not info.required,
            )
            for info in msgspec.structs.fields(record_type)
        )
    return _signature_parameters(record_type, _initializer_hints(record_type), hints)


def is_default_constructible(tp: type) -> bool:
    """Return whether a type can be instantiated without arguments.

    Returns
    -------
    bool
        ``True`` when every parameter of the type's constructor has a default.
    """
    try:
        parameters = primary_parameters(tp)
    except (TypeError, ValueError, NameError):
        return False
    return all(parameter.has_default for parameter in parameters)


def _initializer_hints(record_type: type) -> typing.Mapping[str, object]:
    initializer = record_type.__init__ if record_type.__init__ is not object.__init__ else record_type.__new__
    if initializer is object.__new__:
        return {}
    module = sys.modules.get(record_type.__module__)
    globalns = vars(module) if module is not None else None
    return typing.get_type_hints(initializer, globalns=globalns, localns=dict(vars(record_type)))


def _signature_parameters(
    factory: Callable[..., object],
    hints: typing.Mapping[str, object],
    fallback_hints: typing.Mapping[str, object],
) -> tuple[ConstructorParameter, ...]:
    parameters: list[ConstructorParameter] = []
    for parameter in inspect.signature(factory).parameters.values():
        if parameter.kind in _VARIADIC:
            continue
        annotation = hints.get(parameter.name, fallback_hints.get(parameter.name, Any))
        parameters.append(
            ConstructorParameter(
                name=parameter.name,
                annotation=annotation,
                positional_only=parameter.kind is inspect.Parameter.POSITIONAL_ONLY,
                has_default=parameter.default is not inspect.Parameter.empty,
            )
        )
    return tuple(parameters)


__all__ = [
    "PRIMARY_CONSTRUCTOR",
    "RECORD_CONSTRUCTOR_ATTRIBUTE",
    "ConstructorCandidate",
    "ConstructorParameter",
    "is_default_constructible",
    "primary_parameters",
    "record_constructor",
    "record_constructors",
]
