"""Dashboard session: the refresh driver tying all components together.

A session owns everything that was process-wide state in a browser
dashboard (entity registry, naming scheme, sort state), so several
independent dashboards can live in one process.

Example:
    ```python
    from hystrixview import DashboardSession, InMemoryRenderer

    session = DashboardSession(renderer=InMemoryRenderer())
    session.refresh(snapshot)          # once per polling tick
    session.sort_by_volume()
    for view in session.circuit_views():
        print(view.identity.key, view.data.rate_per_second)
    ```
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from hystrixview.core.circuit import CircuitConfig
from hystrixview.core.classifier import KeyClassifier
from hystrixview.core.config import DashboardConfig
from hystrixview.core.models import (
    CircuitIdentity,
    CircuitView,
    Classification,
    ClassificationAction,
    NamingScheme,
    ThreadPoolIdentity,
    ThreadPoolView,
)
from hystrixview.core.ordering import (
    CircuitSortMode,
    OrderingEngine,
    SortMode,
    SortState,
    ThreadPoolSortMode,
)
from hystrixview.core.ports import RendererPort
from hystrixview.core.registry import EntityRegistry
from hystrixview.core.snapshot import gauge_keys
from hystrixview.core.threadpool import ThreadPoolConfig

logger = logging.getLogger(__name__)


class DashboardSession:
    """Live circuit and thread pool view-models built from metric snapshots.

    Args:
        config: Dashboard settings. Defaults to DashboardConfig().
        renderer: Adapter receiving a view after every entity refresh.
        clock: Returns the current Unix time, used to timestamp history.
    """

    def __init__(
        self,
        config: DashboardConfig | None = None,
        renderer: RendererPort | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or DashboardConfig()
        self.renderer = renderer
        self._clock = clock
        self.registry = EntityRegistry()
        self.classifier = KeyClassifier(self.registry)
        self.circuit_ordering: OrderingEngine[CircuitIdentity] = OrderingEngine(
            self.registry.circuits, CircuitSortMode
        )
        self.thread_pool_ordering: OrderingEngine[ThreadPoolIdentity] = (
            OrderingEngine(self.registry.thread_pools, ThreadPoolSortMode)
        )

    @property
    def naming_scheme(self) -> NamingScheme:
        return self.classifier.naming_scheme

    @property
    def circuit_sort_state(self) -> SortState:
        return self.circuit_ordering.state

    @property
    def thread_pool_sort_state(self) -> SortState:
        return self.thread_pool_ordering.state

    def refresh(self, snapshot: Any) -> None:
        """Process one polling tick.

        Every gauge key is classified first, registering new entities; only
        then is each registered entity refreshed from the snapshot. Never
        raises for malformed snapshots.
        """
        new_circuits = new_thread_pools = 0
        for key in gauge_keys(snapshot):
            for classification in self.classifier.classify(key, snapshot):
                if classification.action is ClassificationAction.REGISTER_CIRCUIT:
                    self._register_circuit(classification)
                    new_circuits += 1
                else:
                    self._register_thread_pool(classification)
                    new_thread_pools += 1

        now = self._clock()
        for circuit in self.registry.circuits.values():
            circuit.refresh(snapshot, now)
        for pool in self.registry.thread_pools.values():
            pool.refresh(snapshot)

        # Place new entities using their first computed metrics.
        if new_circuits:
            self.circuit_ordering.reapply_last_sort()
        if new_thread_pools:
            self.thread_pool_ordering.reapply_last_sort()
        logger.debug(
            "Refreshed %d circuits and %d thread pools",
            len(self.registry.circuits),
            len(self.registry.thread_pools),
        )

    def _register_circuit(self, classification: Classification) -> None:
        identity = classification.identity
        prefix = classification.prefix or ""
        if not isinstance(identity, CircuitIdentity):
            raise TypeError(f"expected a circuit identity, got {identity!r}")
        self.registry.circuits.register_if_absent(
            identity,
            lambda: CircuitConfig(identity, prefix, self.config, self.renderer),
        )
        logger.info("Registered circuit %s (prefix %s)", identity.key, prefix)
        self.circuit_ordering.reapply_last_sort()

    def _register_thread_pool(self, classification: Classification) -> None:
        identity = classification.identity
        prefix = classification.prefix or ""
        if not isinstance(identity, ThreadPoolIdentity):
            raise TypeError(f"expected a thread pool identity, got {identity!r}")
        self.registry.thread_pools.register_if_absent(
            identity,
            lambda: ThreadPoolConfig(identity, prefix, self.config, self.renderer),
        )
        logger.info("Registered thread pool %s (prefix %s)", identity.key, prefix)
        self.thread_pool_ordering.reapply_last_sort()

    def clear(self) -> None:
        """Discard every entity and start over as if no snapshot was seen.

        The naming scheme is detected again; the sort choices are kept.
        """
        self.registry.clear_all()
        self.classifier.reset()
        self.circuit_ordering.reapply_last_sort()
        self.thread_pool_ordering.reapply_last_sort()
        logger.info("Dashboard cleared")

    # Views

    def circuit_views(self) -> list[CircuitView]:
        """Views of the refreshed circuits, in display order."""
        views = []
        for identity in self.circuit_ordering.ordered():
            config = self.registry.circuits.lookup(identity)
            if config is not None and config.view is not None:
                views.append(config.view)
        return views

    def thread_pool_views(self) -> list[ThreadPoolView]:
        """Views of the refreshed thread pools, in display order."""
        views = []
        for identity in self.thread_pool_ordering.ordered():
            config = self.registry.thread_pools.lookup(identity)
            if config is not None and config.view is not None:
                views.append(config.view)
        return views

    # Sort commands

    def sort_circuits(self, mode: SortMode | str) -> SortState:
        if isinstance(mode, str):
            mode = CircuitSortMode.parse(mode)
        return self.circuit_ordering.set_sort_mode(mode)

    def sort_thread_pools(self, mode: SortMode | str) -> SortState:
        if isinstance(mode, str):
            mode = ThreadPoolSortMode.parse(mode)
        return self.thread_pool_ordering.set_sort_mode(mode)

    def sort_alphabetically(self) -> SortState:
        return self.sort_circuits(CircuitSortMode.ALPHABETICAL)

    def sort_by_volume(self) -> SortState:
        return self.sort_circuits(CircuitSortMode.VOLUME)

    def sort_by_error(self) -> SortState:
        return self.sort_circuits(CircuitSortMode.ERROR)

    def sort_by_error_then_volume(self) -> SortState:
        return self.sort_circuits(CircuitSortMode.ERROR_THEN_VOLUME)

    def sort_by_latency_90(self) -> SortState:
        return self.sort_circuits(CircuitSortMode.LATENCY_90)

    def sort_by_latency_99(self) -> SortState:
        return self.sort_circuits(CircuitSortMode.LATENCY_99)

    def sort_by_latency_995(self) -> SortState:
        return self.sort_circuits(CircuitSortMode.LATENCY_995)

    def sort_by_latency_mean(self) -> SortState:
        return self.sort_circuits(CircuitSortMode.LATENCY_MEAN)

    def sort_by_latency_median(self) -> SortState:
        return self.sort_circuits(CircuitSortMode.LATENCY_MEDIAN)

    def sort_thread_pools_alphabetically(self) -> SortState:
        return self.sort_thread_pools(ThreadPoolSortMode.ALPHABETICAL)

    def sort_thread_pools_by_volume(self) -> SortState:
        return self.sort_thread_pools(ThreadPoolSortMode.VOLUME)
