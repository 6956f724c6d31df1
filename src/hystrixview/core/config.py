"""Dashboard configuration."""

from dataclasses import dataclass

DEFAULT_HISTORY_CAPACITY = 200
DEFAULT_CIRCUIT_RATE_DOMAIN = 400.0
DEFAULT_THREAD_POOL_RATE_DOMAIN = 2000.0
DEFAULT_TREND_WINDOW_SECONDS = 120.0


@dataclass(frozen=True)
class DashboardConfig:
    """Tunable settings of a dashboard session.

    Attributes:
        history_capacity: Maximum rate samples kept per circuit. Oldest
            samples are evicted first.
        circuit_rate_domain: Requests per second per host at which the circuit
            indicator reaches its maximum size and position.
        thread_pool_rate_domain: Same as circuit_rate_domain, for thread pools.
        trend_window_seconds: Time span covered by the rate sparkline.

    Raises:
        ValueError: If any setting is not strictly positive, or
            history_capacity is not an integer.
    """

    history_capacity: int = DEFAULT_HISTORY_CAPACITY
    circuit_rate_domain: float = DEFAULT_CIRCUIT_RATE_DOMAIN
    thread_pool_rate_domain: float = DEFAULT_THREAD_POOL_RATE_DOMAIN
    trend_window_seconds: float = DEFAULT_TREND_WINDOW_SECONDS

    def __post_init__(self) -> None:
        capacity = self.history_capacity
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise ValueError(f"history_capacity must be an integer, got {capacity!r}")
        if capacity <= 0:
            raise ValueError(f"history_capacity must be positive, got {capacity}")
        for name in (
            "circuit_rate_domain",
            "thread_pool_rate_domain",
            "trend_window_seconds",
        ):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} must be positive, got {value}")
