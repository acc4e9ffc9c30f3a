"""Apply cached mappings to live instances."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar, overload

from fieldmap.plans import AnyTypePairMapping
from fieldmap.registry import MappingRegistry, default_registry

T = TypeVar("T")

AfterMap = Callable[[Any, Any], object]


class Mapper:
    """Copy member values between unrelated types using cached mappings.

    Examples
    --------
    >>> mapper = Mapper()
    >>> destination = mapper.map(source, Destination)  # doctest: +SKIP
    >>> mapper.map(source, destination, lambda s, d: setattr(d, "last_name", "x"))  # doctest: +SKIP
    >>> record = mapper.map_to_record(source, ExampleRecord)  # doctest: +SKIP
    """

    def __init__(self, registry: MappingRegistry | None = None) -> None:
        self._registry = registry if registry is not None else default_registry()

    @property
    def registry(self) -> MappingRegistry:
        """Registry backing this mapper."""
        return self._registry

    @property
    def id(self) -> object:
        """Identity token of the backing registry."""
        return self._registry.registry_id

    @overload
    def map(
        self,
        source: None,
        target: object = ...,
        after_map: AfterMap | None = ...,
        *,
        target_type: type | None = ...,
    ) -> None: ...

    @overload
    def map(
        self,
        source: object,
        target: type[T],
        after_map: AfterMap | None = ...,
    ) -> T: ...

    @overload
    def map(
        self,
        source: object,
        target: T,
        after_map: AfterMap | None = ...,
    ) -> T: ...

    @overload
    def map(
        self,
        source: object,
        target: None = ...,
        after_map: AfterMap | None = ...,
        *,
        target_type: type[T],
    ) -> T: ...

    def map(
        self,
        source: object | None,
        target: object | None = None,
        after_map: AfterMap | None = None,
        *,
        target_type: type | None = None,
    ) -> Any:
        """Copy matching members of ``source`` into a destination object.

        Parameters
        ----------
        source
            Object to read from. ``None`` short-circuits to ``None`` and the
            supplied target is discarded.
        target
            Destination instance, or a destination class to default-construct.
        after_map
            Hook invoked as ``after_map(source, target)`` once every
            correspondence is applied. Its return value is ignored.
        target_type
            Destination class used when ``target`` is ``None``.

        Returns
        -------
        Any
            The populated destination, or ``None`` for an absent source.

        Raises
        ------
        TypeError
            When neither a target nor a target type is supplied.
        """
        if source is None:
            return None
        if isinstance(target, type):
            target_type, target = target, None
        if target is None:
            if target_type is None:
                msg = "Mapper.map requires a target instance or a target type."
                raise TypeError(msg)
            target = target_type()
        mapping = self._registry.resolve_object(type(source), type(target))
        for correspondence in mapping.correspondences:
            value = getattr(source, correspondence.source_field)
            if correspondence.is_complex and correspondence.nested_type is not None:
                value = self.map(value, correspondence.nested_type())
            setattr(target, correspondence.destination_field, value)
        if after_map is not None:
            after_map(source, target)
        return target

    @overload
    def map_to_record(self, source: None, record_type: type[T]) -> None: ...

    @overload
    def map_to_record(self, source: object, record_type: type[T]) -> T: ...

    def map_to_record(self, source: object | None, record_type: type[T]) -> T | None:
        """Construct a record from ``source`` through its first satisfiable constructor.

        Returns
        -------
        T | None
            Newly constructed record, or ``None`` for an absent source.

        Raises
        ------
        RecordConstructionError
            When no constructor of ``record_type`` is satisfiable from the
            source type.
        """
        if source is None:
            return None
        mapping = self._registry.resolve_record(type(source), record_type)
        return mapping.construct(source)  # type: ignore[return-value]

    def register_mapping(self, mapping: AnyTypePairMapping) -> AnyTypePairMapping:
        """Seed the backing registry with an explicit mapping.

        Returns
        -------
        AnyTypePairMapping
            The registered mapping.
        """
        return self._registry.register_mapping(mapping)


__all__ = ["AfterMap", "Mapper"]
