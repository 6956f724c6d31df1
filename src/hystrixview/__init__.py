"""hystrixview - live circuit and thread pool view-models from metric snapshots.

Feed parsed Hystrix metric snapshots into a DashboardSession once per polling
tick and read back ordered, derived view-models for each circuit and thread
pool.
"""

from hystrixview.adapters.rendering.in_memory import InMemoryRenderer
from hystrixview.core.config import DashboardConfig
from hystrixview.core.models import (
    BreakerStatus,
    CircuitData,
    CircuitIdentity,
    CircuitView,
    NamingScheme,
    RejectionSource,
    ThreadPoolData,
    ThreadPoolIdentity,
    ThreadPoolView,
)
from hystrixview.core.ordering import (
    CircuitSortMode,
    SortDirection,
    SortState,
    ThreadPoolSortMode,
)
from hystrixview.core.ports import RendererPort
from hystrixview.core.session import DashboardSession
from hystrixview.core.snapshot import get_metric_value

__all__ = [
    "BreakerStatus",
    "CircuitData",
    "CircuitIdentity",
    "CircuitSortMode",
    "CircuitView",
    "DashboardConfig",
    "DashboardSession",
    "InMemoryRenderer",
    "NamingScheme",
    "RejectionSource",
    "RendererPort",
    "SortDirection",
    "SortState",
    "ThreadPoolData",
    "ThreadPoolIdentity",
    "ThreadPoolSortMode",
    "ThreadPoolView",
    "get_metric_value",
]
