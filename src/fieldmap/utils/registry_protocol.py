"""Standard registry protocols and base implementations.

Use these base classes for simple key/value registries with minimal behavior.
Registries that build entries on demand should prefer composition over
inheritance to avoid coupling to the base API.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Generic, Protocol, TypeVar, runtime_checkable

K = TypeVar("K")
V = TypeVar("V")


@runtime_checkable
class Registry(Protocol[K, V]):
    """Protocol for registry implementations."""

    @abstractmethod
    def register(self, key: K, value: V) -> None:
        """Register a value with the given key."""

    @abstractmethod
    def get(self, key: K) -> V | None:
        """Retrieve a value by key, or None if not found."""

    @abstractmethod
    def __contains__(self, key: K) -> bool:
        """Check if key is registered."""

    @abstractmethod
    def __iter__(self) -> Iterator[K]:
        """Iterate over registered keys."""

    @abstractmethod
    def __len__(self) -> int:
        """Return count of registered items."""


@dataclass
class AppendOnlyRegistry(Generic[K, V]):
    """Registry with dict storage whose entries are never replaced or removed."""

    _entries: dict[K, V] = field(default_factory=dict)

    def register(self, key: K, value: V) -> None:
        """Register a value for the provided key.

        Parameters
        ----------
        key
            Key to register.
        value
            Value stored under the key.

        Raises:
        ------
        KeyError
            When the key is already registered.
        """
        if key in self._entries:
            msg = f"Key {key!r} already registered."
            raise KeyError(msg)
        self._entries[key] = value

    def setdefault(self, key: K, value: V) -> V:
        """Insert a value when the key is missing and return the stored value.

        Returns:
        -------
        V
            Value stored under the key after the call.
        """
        return self._entries.setdefault(key, value)

    def get(self, key: K) -> V | None:
        """Retrieve a value by key.

        Returns:
        -------
        V | None
            Registered value, or ``None`` when missing.
        """
        return self._entries.get(key)

    def __contains__(self, key: K) -> bool:
        """Check whether a key is registered.

        Returns:
        -------
        bool
            ``True`` if the key is registered.
        """
        return key in self._entries

    def __iter__(self) -> Iterator[K]:
        """Iterate over registered keys.

        Returns:
        -------
        Iterator[K]
            Iterator over a point-in-time copy of the registered keys.
        """
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        """Return the count of registered entries.

        Returns:
        -------
        int
            Number of registered entries.
        """
        return len(self._entries)

    def snapshot(self) -> Mapping[K, V]:
        """Return an immutable snapshot of current state.

        Returns:
        -------
        Mapping[K, V]
            Read-only copy of registry entries.
        """
        return MappingProxyType(dict(self._entries))


__all__ = ["AppendOnlyRegistry", "Registry"]
