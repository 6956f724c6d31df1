"""Core domain models for the circuit and thread pool dashboard."""

from dataclasses import dataclass
from enum import Enum


class MetricCategory(Enum):
    """Top-level categories of a metrics snapshot document."""

    COUNTER = "counters"
    GAUGE = "gauges"
    METER = "meters"
    TIMER = "timers"


class NamingScheme(Enum):
    """Metric key convention observed in the snapshots.

    NATIVE keys look like ``gauge.hystrix.HystrixCommand.svc.method.metric``.
    PUBLISHER keys are written by the codahale metrics publisher and look like
    ``svc.method.metric``.
    """

    NATIVE = "native"
    PUBLISHER = "publisher"


@dataclass(frozen=True)
class CircuitIdentity:
    """Identity of a circuit: a command executed by a service method.

    Attributes:
        service: Owning service name (e.g., serviceA).
        method: Command or method name (e.g., readAuthors).
    """

    service: str
    method: str

    @property
    def key(self) -> str:
        return f"{self.service}.{self.method}"

    @property
    def title(self) -> str:
        """Name shown on the circuit card and used for alphabetical sorting."""
        return self.method


@dataclass(frozen=True)
class ThreadPoolIdentity:
    """Identity of a thread pool.

    Attributes:
        service: Name of the service owning the pool.
    """

    service: str

    @property
    def key(self) -> str:
        return self.service

    @property
    def title(self) -> str:
        return self.service


EntityIdentity = CircuitIdentity | ThreadPoolIdentity


class ClassificationAction(Enum):
    """Outcome of classifying a single metric key."""

    IGNORE = "ignore"
    REGISTER_CIRCUIT = "register_circuit"
    REGISTER_THREAD_POOL = "register_thread_pool"


@dataclass(frozen=True)
class Classification:
    """Result of classifying a metric key.

    Attributes:
        action: What the caller should do with the key.
        identity: Identity of the entity to register (None when ignored).
        prefix: Key prefix used to look up the entity's other metrics.
    """

    action: ClassificationAction
    identity: EntityIdentity | None = None
    prefix: str | None = None


IGNORED = Classification(ClassificationAction.IGNORE)


@dataclass(frozen=True)
class HistorySample:
    """One point of a circuit's rate history.

    Attributes:
        value: Cluster-wide requests per second.
        timestamp: Unix timestamp in seconds.
    """

    value: float
    timestamp: float


@dataclass(frozen=True)
class TrendInstruction:
    """What the renderer should draw as the rate sparkline.

    Attributes:
        samples: Points to plot, oldest first. Empty when suppressed.
        window_start: Left edge of the time axis (Unix seconds).
        window_end: Right edge of the time axis (Unix seconds).
    """

    samples: tuple[HistorySample, ...]
    window_start: float
    window_end: float

    @property
    def suppressed(self) -> bool:
        return not self.samples

    @property
    def y_min(self) -> float | None:
        return min((s.value for s in self.samples), default=None)

    @property
    def y_max(self) -> float | None:
        return max((s.value for s in self.samples), default=None)


@dataclass(frozen=True)
class IndicatorGeometry:
    """Rate-vs-error circle drawn on an entity card.

    Attributes:
        x_percent: Horizontal position as a percentage of the card width.
        y_percent: Vertical position as a percentage of the card height.
        radius: Circle radius in pixels.
        color: Fill colour as ``#rrggbb``, None when unknown.
    """

    x_percent: float
    y_percent: float
    radius: float
    color: str | None


class RejectionSource(Enum):
    """Which rejection counter a circuit reports."""

    THREAD_POOL = "thread_pool"
    SEMAPHORE = "semaphore"


@dataclass(frozen=True)
class RejectionCount:
    """Rolling count of rejected requests.

    A circuit reports thread pool rejections when it runs on a thread pool and
    semaphore rejections otherwise, never both.
    """

    source: RejectionSource
    count: float


class BreakerStatus(Enum):
    """Displayed circuit breaker status."""

    FORCED_CLOSED = "forced_closed"
    FORCED_OPEN = "forced_open"
    OPEN = "open"
    CLOSED = "closed"
    MIXED = "mixed"


@dataclass(frozen=True)
class CircuitData:
    """Derived metrics of a circuit for one snapshot.

    Rates may be NaN or infinite when the window or the number of reporting
    hosts is zero; consumers treat such values as unknown. The three breaker
    flags are None when the metric is not reported at all.
    """

    window_seconds: float
    total_requests: float
    reporting_hosts: float
    rate_per_second: float
    rate_per_second_per_host: float
    error_percentage: float
    error_then_volume: float
    rolling_count_timeout: float
    rolling_count_failure: float
    rolling_count_success: float
    rolling_count_short_circuited: float
    rolling_count_bad_requests: float
    rejected: RejectionCount
    latency_90: float
    latency_median: float
    latency_99: float
    latency_995: float
    latency_mean: float
    circuit_breaker_force_closed: float | None = None
    circuit_breaker_force_open: float | None = None
    is_circuit_breaker_open: float | None = None

    @property
    def breaker_status(self) -> BreakerStatus:
        if self.circuit_breaker_force_closed == 1:
            return BreakerStatus.FORCED_CLOSED
        if self.circuit_breaker_force_open == 1:
            return BreakerStatus.FORCED_OPEN
        if self.is_circuit_breaker_open is None:
            return BreakerStatus.MIXED
        if self.is_circuit_breaker_open == self.reporting_hosts:
            return BreakerStatus.OPEN
        if self.is_circuit_breaker_open == 0:
            return BreakerStatus.CLOSED
        return BreakerStatus.MIXED


@dataclass(frozen=True)
class ThreadPoolData:
    """Derived metrics of a thread pool for one snapshot.

    ``error_percentage`` is the queue size per reporting host. It only drives
    the indicator colour and is not a percentage.
    """

    reporting_hosts: float
    queue_rejection_threshold: float
    window_millis: float
    window_seconds: float
    rolling_count_threads_executed: float
    rate_per_second: float
    rate_per_second_per_host: float
    current_active_count: float
    rolling_max_active_threads: float
    current_queue_size: float
    current_pool_size: float
    error_percentage: float


@dataclass(frozen=True)
class CircuitView:
    """Read-only view of a circuit handed to the renderer."""

    identity: CircuitIdentity
    data: CircuitData
    trend: TrendInstruction
    indicator: IndicatorGeometry
    error_color: str | None = None


@dataclass(frozen=True)
class ThreadPoolView:
    """Read-only view of a thread pool handed to the renderer."""

    identity: ThreadPoolIdentity
    data: ThreadPoolData
    indicator: IndicatorGeometry


EntityView = CircuitView | ThreadPoolView