"""Process-wide cache of type pair mappings.

Entries are built lazily on first request and never replaced or removed.
Lookups are lock-free; a miss takes a re-entrant lock, re-checks the cache,
builds and inserts, so each key is built at most once even when several
threads race on an unseen pair. The lock is re-entrant because building an
object mapping resolves nested complex pairs through the same registry.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import cast

from fieldmap.builder import build_object_mapping, build_record_mapping
from fieldmap.errors import MappingRegistrationError
from fieldmap.plans import AnyTypePairMapping, MappingKey, RecordTypePairMapping, ShapeKind, TypePairMapping
from fieldmap.settings import MapperSettings, settings_from_env
from fieldmap.utils.registry_protocol import AppendOnlyRegistry, Registry

_LOGGER = logging.getLogger(__name__)


@dataclass
class MappingRegistry(Registry[MappingKey, AnyTypePairMapping]):
    """Append-only registry of built type pair mappings."""

    settings: MapperSettings = field(default_factory=MapperSettings)
    registry_id: uuid.UUID = field(default_factory=uuid.uuid4)
    _entries: AppendOnlyRegistry[MappingKey, AnyTypePairMapping] = field(
        default_factory=AppendOnlyRegistry,
        repr=False,
    )
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def resolve(
        self,
        source_type: type,
        destination_type: type,
        shape: ShapeKind = ShapeKind.OBJECT,
    ) -> AnyTypePairMapping:
        """Return the mapping for a type pair, building it on first request.

        Parameters
        ----------
        source_type
            Runtime type of the source.
        destination_type
            Runtime type of the destination.
        shape
            Destination shape.

        Returns
        -------
        AnyTypePairMapping
            The cached mapping; the same instance on every call for a key.
        """
        key = MappingKey(source_type, destination_type, ShapeKind(shape))
        cached = self._entries.get(key)
        if cached is not None:
            return cached
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                return cached
            mapping = self._build(key)
            stored = self._entries.setdefault(key, mapping)
        _LOGGER.debug(
            "Built %s mapping %s -> %s with %d bindings",
            key.shape.value,
            source_type.__qualname__,
            destination_type.__qualname__,
            _binding_count(stored),
        )
        return stored

    def resolve_object(self, source_type: type, destination_type: type) -> TypePairMapping:
        """Return the object-shaped mapping for a type pair.

        Returns
        -------
        TypePairMapping
            Cached object mapping.
        """
        return cast("TypePairMapping", self.resolve(source_type, destination_type, ShapeKind.OBJECT))

    def resolve_record(self, source_type: type, record_type: type) -> RecordTypePairMapping:
        """Return the record-shaped mapping for a type pair.

        Returns
        -------
        RecordTypePairMapping
            Cached record mapping.

        Raises
        ------
        RecordConstructionError
            When the record type has no constructor satisfiable from the source.
        """
        return cast("RecordTypePairMapping", self.resolve(source_type, record_type, ShapeKind.RECORD))

    def register(self, key: MappingKey, value: AnyTypePairMapping) -> None:
        """Register a mapping under an explicit key.

        Raises
        ------
        MappingRegistrationError
            When the key does not describe the mapping, or already has an entry.
        """
        if key != value.key:
            msg = f"Mapping for {value.key!r} cannot be registered under {key!r}."
            raise MappingRegistrationError(msg)
        if isinstance(value, RecordTypePairMapping) != (key.shape is ShapeKind.RECORD):
            msg = f"Mapping shape does not match {key.shape.value!r} for {key!r}."
            raise MappingRegistrationError(msg)
        with self._lock:
            try:
                self._entries.register(key, value)
            except KeyError as exc:
                msg = f"A mapping for {key!r} is already registered."
                raise MappingRegistrationError(msg) from exc

    def register_mapping(self, mapping: AnyTypePairMapping) -> AnyTypePairMapping:
        """Seed the registry with a caller-built mapping, bypassing discovery.

        Returns
        -------
        AnyTypePairMapping
            The registered mapping.
        """
        self.register(mapping.key, mapping)
        return mapping

    def get(self, key: MappingKey) -> AnyTypePairMapping | None:
        """Return a built mapping without building it.

        Returns
        -------
        AnyTypePairMapping | None
            Mapping when present.
        """
        return self._entries.get(key)

    def __contains__(self, key: MappingKey) -> bool:
        """Return True when a mapping is cached for the key.

        Returns
        -------
        bool
            ``True`` when the key has an entry.
        """
        return key in self._entries

    def __iter__(self) -> Iterator[MappingKey]:
        """Iterate over cached mapping keys.

        Returns
        -------
        Iterator[MappingKey]
            Iterator of cached keys.
        """
        return iter(self._entries)

    def __len__(self) -> int:
        """Return the count of cached mappings.

        Returns
        -------
        int
            Number of cached mappings.
        """
        return len(self._entries)

    def snapshot(self) -> Mapping[MappingKey, AnyTypePairMapping]:
        """Return a read-only snapshot of the cached mappings.

        Returns
        -------
        Mapping[MappingKey, AnyTypePairMapping]
            Snapshot of registry entries.
        """
        return self._entries.snapshot()

    def _build(self, key: MappingKey) -> AnyTypePairMapping:
        if key.shape is ShapeKind.RECORD:
            return build_record_mapping(key.source_type, key.destination_type, settings=self.settings)
        return build_object_mapping(
            key.source_type,
            key.destination_type,
            resolve=self.resolve_object,
            settings=self.settings,
        )


def _binding_count(mapping: AnyTypePairMapping) -> int:
    if isinstance(mapping, RecordTypePairMapping):
        return len(mapping.slots)
    return len(mapping.correspondences)


_DEFAULT_REGISTRY: MappingRegistry | None = None
_DEFAULT_REGISTRY_LOCK = threading.Lock()


def default_registry() -> MappingRegistry:
    """Return the process-wide registry, creating it on first access.

    Returns
    -------
    MappingRegistry
        The same registry instance for the lifetime of the process.
    """
    global _DEFAULT_REGISTRY  # noqa: PLW0603
    if _DEFAULT_REGISTRY is None:
        with _DEFAULT_REGISTRY_LOCK:
            if _DEFAULT_REGISTRY is None:
                _DEFAULT_REGISTRY = MappingRegistry(settings=settings_from_env())
    return _DEFAULT_REGISTRY


__all__ = ["MappingRegistry", "default_registry"]
