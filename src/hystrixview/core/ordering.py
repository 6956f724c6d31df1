"""Ordering of entity cards.

Each entity class has its own engine holding the active sort mode and
direction. The engine re-sorts on every explicit sort request and again
whenever entities are added, so late arrivals land where the user's last
choice puts them.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"

    @property
    def opposite(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


# Data attribute each numeric mode sorts on. Alphabetical sorts on the title.
SORT_FIELDS = {
    "volume": "rate_per_second",
    "error": "error_percentage",
    "error_then_volume": "error_then_volume",
    "latency90": "latency_90",
    "latency99": "latency_99",
    "latency995": "latency_995",
    "latency_mean": "latency_mean",
    "latency_median": "latency_median",
}


class SortMode(Enum):
    """Base class of the per-entity-class sort modes."""

    @classmethod
    def parse(cls, name: str) -> "SortMode":
        """Return the mode whose value matches name, case-insensitively.

        Raises:
            ValueError: If no mode of this class has that name.
        """
        normalized = name.strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        valid = ", ".join(mode.value for mode in cls)
        raise ValueError(f"unknown sort mode {name!r}, expected one of: {valid}")

    @property
    def default_direction(self) -> SortDirection:
        if self.value == "alphabetical":
            return SortDirection.ASC
        return SortDirection.DESC

    @property
    def field(self) -> str | None:
        return SORT_FIELDS.get(self.value)


class CircuitSortMode(SortMode):
    ALPHABETICAL = "alphabetical"
    VOLUME = "volume"
    ERROR = "error"
    ERROR_THEN_VOLUME = "error_then_volume"
    LATENCY_90 = "latency90"
    LATENCY_99 = "latency99"
    LATENCY_995 = "latency995"
    LATENCY_MEAN = "latency_mean"
    LATENCY_MEDIAN = "latency_median"


class ThreadPoolSortMode(SortMode):
    ALPHABETICAL = "alphabetical"
    VOLUME = "volume"


@dataclass(frozen=True)
class SortState:
    """Active sort mode and direction."""

    mode: SortMode
    direction: SortDirection

    def __str__(self) -> str:
        return f"{self.mode.value}_{self.direction.value}"


class _Identity(Protocol):
    @property
    def title(self) -> str: ...


class _Sortable(Protocol):
    identity: Any
    data: Any


K = TypeVar("K", bound=_Identity)


class _Entities(Protocol[K]):
    def __iter__(self): ...

    def __contains__(self, identity: object) -> bool: ...

    def lookup(self, identity: K) -> _Sortable | None: ...


class OrderingEngine(Generic[K]):
    """Display order of one entity class.

    Args:
        entities: Registry map holding the entities to order.
        modes: Sort mode enum accepted by this engine.
    """

    def __init__(self, entities: _Entities[K], modes: type[SortMode]) -> None:
        self._entities = entities
        self._modes = modes
        self._state = SortState(modes.parse("alphabetical"), SortDirection.ASC)
        self._order: list[K] = []

    @property
    def state(self) -> SortState:
        return self._state

    def set_sort_mode(self, mode: SortMode) -> SortState:
        """Activate a sort mode, toggling direction on a repeated request.

        Requesting the active mode while it runs in its default direction
        switches to the opposite direction. Any other request activates the
        mode in its default direction.

        Raises:
            ValueError: If mode does not belong to this engine's entity class.
        """
        if not isinstance(mode, self._modes):
            raise ValueError(f"{mode!r} is not a {self._modes.__name__}")
        if (
            self._state.mode is mode
            and self._state.direction is mode.default_direction
        ):
            direction = mode.default_direction.opposite
        else:
            direction = mode.default_direction
        self._state = SortState(mode, direction)
        logger.debug("Sorting %s by %s", self._modes.__name__, self._state)
        self._apply()
        return self._state

    def reapply_last_sort(self) -> list[K]:
        """Re-run the active sort, e.g. after new entities were added."""
        self._apply()
        return list(self._order)

    def ordered(self) -> list[K]:
        """Identities in display order.

        Entities added since the last sort are listed at the end.
        """
        self._sync()
        return list(self._order)

    def _sync(self) -> None:
        self._order = [i for i in self._order if i in self._entities]
        known = set(self._order)
        self._order.extend(i for i in self._entities if i not in known)

    def _sort_key(self, identity: K) -> Any:
        field = self._state.mode.field
        if field is None:
            return identity.title
        entity = self._entities.lookup(identity)
        data = getattr(entity, "data", None)
        if data is None:
            return None
        value = getattr(data, field)
        if not math.isfinite(value):
            return None
        return value

    def _apply(self) -> None:
        self._sync()
        keyed = [(self._sort_key(i), i) for i in self._order]
        known = [(key, i) for key, i in keyed if key is not None]
        unknown = [i for key, i in keyed if key is None]
        known.sort(
            key=lambda pair: pair[0],
            reverse=self._state.direction is SortDirection.DESC,
        )
        self._order = [i for _, i in known] + unknown
