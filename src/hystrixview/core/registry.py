"""Entity registry mapping identities to their live configs."""

from collections.abc import Callable, Iterator
from typing import Generic, Protocol, TypeVar

from hystrixview.core.circuit import CircuitConfig
from hystrixview.core.models import CircuitIdentity, ThreadPoolIdentity
from hystrixview.core.threadpool import ThreadPoolConfig


class _Clearable(Protocol):
    def clear(self) -> None: ...


K = TypeVar("K")
V = TypeVar("V", bound=_Clearable)


class EntityMap(Generic[K, V]):
    """Insertion-ordered mapping from entity identity to config.

    Registration is the only way in: an identity is constructed exactly once
    and later registrations of the same identity return the existing entry.
    """

    def __init__(self) -> None:
        self._entries: dict[K, V] = {}

    def __contains__(self, identity: object) -> bool:
        return identity in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        return iter(self._entries)

    def lookup(self, identity: K) -> V | None:
        """Return the config registered for identity, or None."""
        return self._entries.get(identity)

    def values(self) -> list[V]:
        return list(self._entries.values())

    def register_if_absent(self, identity: K, factory: Callable[[], V]) -> V:
        """Return the entry for identity, creating it with factory if needed."""
        existing = self._entries.get(identity)
        if existing is not None:
            return existing
        entry = factory()
        self._entries[identity] = entry
        return entry

    def clear(self) -> None:
        """Clear every entry and forget all identities."""
        for entry in self._entries.values():
            entry.clear()
        self._entries = {}


class EntityRegistry:
    """Circuit and thread pool configs of one dashboard session."""

    def __init__(self) -> None:
        self.circuits: EntityMap[CircuitIdentity, CircuitConfig] = EntityMap()
        self.thread_pools: EntityMap[ThreadPoolIdentity, ThreadPoolConfig] = (
            EntityMap()
        )

    def clear_all(self) -> None:
        """Discard every entity, releasing its card and history."""
        self.circuits.clear()
        self.thread_pools.clear()
