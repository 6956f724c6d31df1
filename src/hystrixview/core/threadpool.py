"""Thread pool aggregator: derives a pool's view-model from a snapshot."""

from typing import Any

from hystrixview.core.config import DashboardConfig
from hystrixview.core.models import (
    IndicatorGeometry,
    ThreadPoolData,
    ThreadPoolIdentity,
    ThreadPoolView,
)
from hystrixview.core.ports import RendererPort
from hystrixview.core.scales import IndicatorScales
from hystrixview.core.snapshot import divide, get_metric_value, round_half_up


def compute_thread_pool_data(snapshot: Any, prefix: str) -> ThreadPoolData:
    """Compute the derived metrics of the thread pool whose keys start with prefix.

    Thread pool gauges are summed over the reporting hosts, so the queue
    threshold and the rolling window are divided by the host count. The
    window is divided before it is converted to seconds, unlike the circuit
    computation.
    """

    def value(name: str, default: float = 0) -> float:
        return get_metric_value(snapshot, f"{prefix}.{name}", default)

    reporting_hosts = value("reportingHosts")
    queue_rejection_threshold = round_half_up(
        divide(value("propertyValue_queueSizeRejectionThreshold"), reporting_hosts), 1
    )
    window_millis = round_half_up(
        divide(
            value("propertyValue_metricsRollingStatisticalWindowInMilliseconds"),
            reporting_hosts,
        ),
        1,
    )
    window_seconds = window_millis / 1000
    threads_executed = max(value("rollingCountThreadsExecuted"), 0)

    rate = divide(threads_executed, window_seconds)
    current_queue_size = value("currentQueueSize")

    return ThreadPoolData(
        reporting_hosts=reporting_hosts,
        queue_rejection_threshold=queue_rejection_threshold,
        window_millis=window_millis,
        window_seconds=window_seconds,
        rolling_count_threads_executed=threads_executed,
        rate_per_second=round_half_up(rate, 1),
        rate_per_second_per_host=round_half_up(divide(rate, reporting_hosts), 1),
        current_active_count=value("currentActiveCount"),
        rolling_max_active_threads=value("rollingMaxActiveThreads"),
        current_queue_size=current_queue_size,
        current_pool_size=value("currentPoolSize"),
        error_percentage=divide(current_queue_size, reporting_hosts),
    )


class ThreadPoolConfig:
    """Live state of one thread pool card.

    Args:
        identity: Service owning the pool.
        prefix: Key prefix of the pool's gauges.
        config: Dashboard settings.
        renderer: Optional renderer notified of every refresh.
    """

    def __init__(
        self,
        identity: ThreadPoolIdentity,
        prefix: str,
        config: DashboardConfig | None = None,
        renderer: RendererPort | None = None,
    ) -> None:
        config = config or DashboardConfig()
        self.identity = identity
        self.prefix = prefix
        self.data: ThreadPoolData | None = None
        self.indicator: IndicatorGeometry | None = None
        self.initialized = False
        self._scales = IndicatorScales(config.thread_pool_rate_domain)
        self._renderer = renderer
        self._view: ThreadPoolView | None = None

    @property
    def view(self) -> ThreadPoolView | None:
        return self._view

    def refresh(self, snapshot: Any) -> ThreadPoolView:
        """Recompute the pool from a snapshot and push it to the renderer."""
        self.data = compute_thread_pool_data(snapshot, self.prefix)
        self.indicator = self._scales.geometry(
            self.data.rate_per_second_per_host, self.data.error_percentage
        )
        self._view = ThreadPoolView(self.identity, self.data, self.indicator)
        if not self.initialized:
            if self._renderer is not None:
                self._renderer.mount(self._view)
            self.initialized = True
        if self._renderer is not None:
            self._renderer.update(self._view)
        return self._view

    def clear(self) -> None:
        if self.initialized and self._renderer is not None:
            self._renderer.unmount(self.identity)
        self.data = None
        self.indicator = None
        self._view = None
        self.initialized = False
