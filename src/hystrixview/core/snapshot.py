"""Safe access to gauge values of a metrics snapshot.

A snapshot is the parsed metrics document of one polling tick::

    {
        "gauges": {
            "gauge.hystrix.HystrixCommand.serviceA.readAuthors.requestCount": {
                "value": 42
            },
            ...
        },
        "counters": {...},
        "meters": {...},
        "timers": {...},
    }

Only the gauges are consulted. Lookups never raise: anything missing or
malformed is reported as absent.
"""

import math
from collections.abc import Mapping
from typing import Any

from hystrixview.core.models import MetricCategory

VALUE_PRECISION = 4


def round_half_up(num: float, digits: int) -> float:
    """Round to the given number of fractional digits, halves rounded upward.

    Non-finite values are returned unchanged.
    """
    factor = 10**digits
    scaled = num * factor
    if not math.isfinite(scaled):
        return num
    return math.floor(scaled + 0.5) / factor


def divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics instead of raising ZeroDivisionError.

    ``x / 0`` is ``+inf`` or ``-inf`` following the sign of x, ``0 / 0`` and
    ``nan / 0`` are NaN.
    """
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _gauges(snapshot: Any) -> Mapping[str, Any]:
    gauges = snapshot.get(MetricCategory.GAUGE.value)
    if not isinstance(gauges, Mapping):
        return {}
    return gauges


def gauge_keys(snapshot: Any) -> list[str]:
    """Return the gauge metric keys of a snapshot, in document order.

    Returns an empty list when the snapshot or its gauges are malformed.
    """
    try:
        return [key for key in _gauges(snapshot) if isinstance(key, str)]
    except (AttributeError, TypeError):
        return []


def has_gauge(snapshot: Any, metric_name: str) -> bool:
    """Return True if the snapshot carries a gauge record for metric_name."""
    try:
        return bool(_gauges(snapshot).get(metric_name))
    except (AttributeError, TypeError):
        return False


def probe_metric(snapshot: Any, metric_name: str) -> float | None:
    """Look up a gauge value, returning None when it is not reported.

    Booleans are mapped to 1 and 0. Numbers, and strings holding numbers,
    are rounded to four fractional digits.
    """
    try:
        record = _gauges(snapshot).get(metric_name)
        if record is None:
            return None
        value = record.get("value")
        if value is None:
            return None
        if isinstance(value, bool):
            return 1 if value else 0
        return round_half_up(float(value), VALUE_PRECISION)
    except (AttributeError, KeyError, TypeError, ValueError, OverflowError):
        return None


def get_metric_value(
    snapshot: Any, metric_name: str, default_value: float
) -> float:
    """Look up a gauge value, falling back to default_value when absent.

    Args:
        snapshot: Parsed metrics document of one polling tick.
        metric_name: Full dotted gauge key.
        default_value: Returned unchanged when the gauge is missing or cannot
            be read as a number.

    Returns:
        The coerced gauge value or default_value.
    """
    value = probe_metric(snapshot, metric_name)
    return default_value if value is None else value
