"""Circuit aggregator: derives a circuit's view-model from a snapshot."""

import math
import time
from typing import Any

from hystrixview.core.config import DashboardConfig
from hystrixview.core.history import RollingHistory
from hystrixview.core.models import (
    CircuitData,
    CircuitIdentity,
    CircuitView,
    HistorySample,
    IndicatorGeometry,
    RejectionCount,
    RejectionSource,
)
from hystrixview.core.ports import RendererPort
from hystrixview.core.scales import ERROR_TEXT_COLORS, IndicatorScales
from hystrixview.core.snapshot import (
    divide,
    get_metric_value,
    probe_metric,
    round_half_up,
)

ERROR_WEIGHT = 100_000_000


def compute_circuit_data(snapshot: Any, prefix: str) -> CircuitData:
    """Compute the derived metrics of the circuit whose keys start with prefix.

    Args:
        snapshot: Parsed metrics document of one polling tick.
        prefix: Key prefix of the circuit, e.g.
            ``gauge.hystrix.HystrixCommand.serviceA.readAuthors``.

    Returns:
        CircuitData for this tick. Missing metrics take their defaults.
    """

    def value(name: str, default: float = 0) -> float:
        return get_metric_value(snapshot, f"{prefix}.{name}", default)

    def reported(name: str) -> float | None:
        return probe_metric(snapshot, f"{prefix}.{name}")

    window_seconds = (
        value("propertyValue_metricsRollingStatisticalWindowInMilliseconds") / 1000
    )
    total_requests = max(value("requestCount"), 0)
    reporting_hosts = value("reportingHosts")

    rate = divide(total_requests, window_seconds)
    rate_per_second = round_half_up(rate, 1)
    rate_per_second_per_host = round_half_up(divide(rate, reporting_hosts), 1)
    error_percentage = value("errorPercentage")
    if math.isnan(rate_per_second):
        error_then_volume = -1.0
    else:
        error_then_volume = error_percentage * ERROR_WEIGHT + rate_per_second

    thread_pool_rejected = reported("rollingCountThreadPoolRejected")
    if thread_pool_rejected is None:
        rejected = RejectionCount(
            RejectionSource.SEMAPHORE, value("rollingCountSemaphorePoolRejected")
        )
    else:
        rejected = RejectionCount(RejectionSource.THREAD_POOL, thread_pool_rejected)

    return CircuitData(
        window_seconds=window_seconds,
        total_requests=total_requests,
        reporting_hosts=reporting_hosts,
        rate_per_second=rate_per_second,
        rate_per_second_per_host=rate_per_second_per_host,
        error_percentage=error_percentage,
        error_then_volume=error_then_volume,
        rolling_count_timeout=value("rollingCountTimeout"),
        rolling_count_failure=value("rollingCountFailure"),
        rolling_count_success=value("rollingCountSuccess"),
        rolling_count_short_circuited=value("rollingCountShortCircuited"),
        rolling_count_bad_requests=value("rollingCountBadRequests"),
        rejected=rejected,
        latency_90=value("90"),
        latency_median=value("50"),
        latency_99=value("99"),
        latency_995=value("99.5"),
        latency_mean=value("latencyExecute_mean"),
        # Only reported when the metrics publisher is on the classpath.
        circuit_breaker_force_closed=reported("propertyValue_circuitBreakerForceClosed"),
        circuit_breaker_force_open=reported("propertyValue_circuitBreakerForceOpen"),
        is_circuit_breaker_open=reported("isCircuitBreakerOpen"),
    )


class CircuitConfig:
    """Live state of one circuit card.

    Created once when the circuit is first observed and refreshed in place
    on every snapshot afterwards.

    Args:
        identity: Service and method of the circuit.
        prefix: Key prefix of the circuit's gauges.
        config: Dashboard settings (history capacity, scale domains).
        renderer: Optional renderer notified of every refresh.
    """

    def __init__(
        self,
        identity: CircuitIdentity,
        prefix: str,
        config: DashboardConfig | None = None,
        renderer: RendererPort | None = None,
    ) -> None:
        config = config or DashboardConfig()
        self.identity = identity
        self.prefix = prefix
        self.data: CircuitData | None = None
        self.indicator: IndicatorGeometry | None = None
        self.history = RollingHistory(
            config.history_capacity, config.trend_window_seconds
        )
        self.initialized = False
        self._scales = IndicatorScales(config.circuit_rate_domain)
        self._renderer = renderer
        self._view: CircuitView | None = None

    @property
    def view(self) -> CircuitView | None:
        """Latest view, None before the first refresh."""
        return self._view

    def refresh(self, snapshot: Any, now: float | None = None) -> CircuitView:
        """Recompute the circuit from a snapshot and push it to the renderer."""
        now = time.time() if now is None else now
        self.data = compute_circuit_data(snapshot, self.prefix)
        self.indicator = self._scales.geometry(
            self.data.rate_per_second_per_host, self.data.error_percentage
        )
        self.history.append(HistorySample(self.data.rate_per_second, now))
        self._view = CircuitView(
            identity=self.identity,
            data=self.data,
            trend=self.history.trend(now),
            indicator=self.indicator,
            error_color=ERROR_TEXT_COLORS(self.data.error_percentage),
        )
        self._render(self._view)
        return self._view

    def _render(self, view: CircuitView) -> None:
        if not self.initialized:
            if self._renderer is not None:
                self._renderer.mount(view)
            self.initialized = True
        if self._renderer is not None:
            self._renderer.update(view)

    def clear(self) -> None:
        """Remove the card and discard all derived state and history."""
        if self.initialized and self._renderer is not None:
            self._renderer.unmount(self.identity)
        self.data = None
        self.indicator = None
        self._view = None
        self.history.clear()
        self.initialized = False
