"""NDJSON encoder for circuit and thread pool views.

Field names follow the camelCase names dashboard front ends expect
(``ratePerSecond``, ``rollingCountSemaphoreRejected``...). Non-finite
numbers are written as null since JSON has no NaN or Infinity.
"""

import json
import math
from collections.abc import Iterable
from typing import Any

from hystrixview.core.models import (
    CircuitView,
    IndicatorGeometry,
    RejectionSource,
    ThreadPoolView,
)


def _number(value: float | None) -> float | None:
    if value is None or not math.isfinite(value):
        return None
    return value


def _indicator(indicator: IndicatorGeometry) -> dict[str, Any]:
    return {
        "x": _number(indicator.x_percent),
        "y": _number(indicator.y_percent),
        "radius": _number(indicator.radius),
        "color": indicator.color,
    }


def circuit_to_dict(view: CircuitView) -> dict[str, Any]:
    """Convert a circuit view to a JSON-ready dict."""
    data = view.data
    obj: dict[str, Any] = {
        "type": "circuit",
        "key": view.identity.key,
        "serviceName": view.identity.service,
        "methodName": view.identity.method,
        "reportingHosts": _number(data.reporting_hosts),
        "ratePerSecond": _number(data.rate_per_second),
        "ratePerSecondPerHost": _number(data.rate_per_second_per_host),
        "errorPercentage": _number(data.error_percentage),
        "errorThenVolume": _number(data.error_then_volume),
        "rollingCountTimeout": _number(data.rolling_count_timeout),
        "rollingCountFailure": _number(data.rolling_count_failure),
        "rollingCountSuccess": _number(data.rolling_count_success),
        "rollingCountShortCircuited": _number(data.rolling_count_short_circuited),
        "rollingCountBadRequests": _number(data.rolling_count_bad_requests),
        "latency90": _number(data.latency_90),
        "latencyMedian": _number(data.latency_median),
        "latency99": _number(data.latency_99),
        "latency995": _number(data.latency_995),
        "latencyMean": _number(data.latency_mean),
    }
    if data.rejected.source is RejectionSource.THREAD_POOL:
        obj["rollingCountThreadPoolRejected"] = _number(data.rejected.count)
    else:
        obj["rollingCountSemaphoreRejected"] = _number(data.rejected.count)

    # Breaker flags are omitted, not nulled, when they are not reported.
    flags = {
        "propertyValue_circuitBreakerForceClosed": data.circuit_breaker_force_closed,
        "propertyValue_circuitBreakerForceOpen": data.circuit_breaker_force_open,
        "isCircuitBreakerOpen": data.is_circuit_breaker_open,
    }
    for name, flag in flags.items():
        if flag is not None:
            obj[name] = _number(flag)

    obj["circuitStatus"] = data.breaker_status.value
    obj["errorColor"] = view.error_color
    obj["indicator"] = _indicator(view.indicator)
    obj["graph"] = [
        {"v": _number(sample.value), "t": _number(sample.timestamp)}
        for sample in view.trend.samples
    ]
    return obj


def thread_pool_to_dict(view: ThreadPoolView) -> dict[str, Any]:
    """Convert a thread pool view to a JSON-ready dict."""
    data = view.data
    return {
        "type": "threadPool",
        "key": view.identity.key,
        "serviceName": view.identity.service,
        "reportingHosts": _number(data.reporting_hosts),
        "propertyValue_queueSizeRejectionThreshold": _number(
            data.queue_rejection_threshold
        ),
        "propertyValue_metricsRollingStatisticalWindowInMilliseconds": _number(
            data.window_millis
        ),
        "ratePerSecond": _number(data.rate_per_second),
        "ratePerSecondPerHost": _number(data.rate_per_second_per_host),
        "currentActiveCount": _number(data.current_active_count),
        "rollingMaxActiveThreads": _number(data.rolling_max_active_threads),
        "currentQueueSize": _number(data.current_queue_size),
        "rollingCountThreadsExecuted": _number(data.rolling_count_threads_executed),
        "currentPoolSize": _number(data.current_pool_size),
        "errorPercentage": _number(data.error_percentage),
        "indicator": _indicator(view.indicator),
    }


def _encode(objects: Iterable[dict[str, Any]]) -> str:
    lines = [json.dumps(obj, allow_nan=False) for obj in objects]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def encode_circuit_views(views: Iterable[CircuitView]) -> str:
    """Encode circuit views to newline-delimited JSON.

    Args:
        views: Circuit views in display order.

    Returns:
        NDJSON string with one JSON object per circuit.
        Empty string if no views.
    """
    return _encode(circuit_to_dict(view) for view in views)


def encode_thread_pool_views(views: Iterable[ThreadPoolView]) -> str:
    """Encode thread pool views to newline-delimited JSON."""
    return _encode(thread_pool_to_dict(view) for view in views)
