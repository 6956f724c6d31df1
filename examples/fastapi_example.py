"""Example FastAPI application serving a live circuit dashboard.

Run with:
    uvicorn examples.fastapi_example:app --reload

Endpoints:
    /hystrix/circuits                    - NDJSON circuit views in display order
    /hystrix/threadpools                 - NDJSON thread pool views
    /hystrix/circuits/sort?mode=<mode>   - POST, sort circuits (repeat to reverse)
    /hystrix/threadpools/sort?mode=<m>   - POST, sort thread pools
    /hystrix/clear                       - POST, forget every entity
    /snapshot                            - POST, push a metrics document

Feeding:
    A background task refreshes the session every two seconds with a
    synthetic document in the native Hystrix key format. Real documents can
    be pushed to /snapshot instead.
"""

import asyncio
import logging
import random
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Body, FastAPI

from hystrixview import DashboardSession, InMemoryRenderer
from hystrixview.adapters.frameworks.fastapi import create_dashboard_router

logging.basicConfig(level=logging.INFO)

COMMANDS = {
    "serviceA": ["readAuthors", "writeBooks"],
    "serviceB": ["listShelves"],
}

session = DashboardSession(renderer=InMemoryRenderer())


def synthetic_snapshot() -> dict[str, Any]:
    """Build a metrics document with random traffic for every command."""
    gauges: dict[str, Any] = {}
    for service, methods in COMMANDS.items():
        for method in methods:
            prefix = f"gauge.hystrix.HystrixCommand.{service}.{method}"
            metrics = {
                "requestCount": random.randint(0, 5000),
                "reportingHosts": 2,
                "errorPercentage": random.choice([0, 0, 0, 5, 30]),
                "propertyValue_metricsRollingStatisticalWindowInMilliseconds": 10000,
                "latencyExecute_mean": random.randint(2, 40),
                "50": random.randint(1, 20),
                "90": random.randint(20, 80),
                "99": random.randint(80, 200),
                "99.5": random.randint(200, 400),
                "isCircuitBreakerOpen": 0,
                "rollingCountThreadPoolRejected": random.randint(0, 3),
            }
            gauges.update({f"{prefix}.{k}": {"value": v} for k, v in metrics.items()})
        pool = f"gauge.hystrix.HystrixThreadPool.{service}"
        gauges.update(
            {
                f"{pool}.rollingCountThreadsExecuted": {"value": random.randint(0, 9000)},
                f"{pool}.reportingHosts": {"value": 2},
                f"{pool}.currentQueueSize": {"value": random.randint(0, 10)},
                f"{pool}.propertyValue_queueSizeRejectionThreshold": {"value": 10},
                f"{pool}.propertyValue_metricsRollingStatisticalWindowInMilliseconds": {
                    "value": 20000
                },
            }
        )
    return {"counters": {}, "gauges": gauges, "meters": {}, "timers": {}}


async def feed_synthetic_snapshots(interval_seconds: float = 2.0) -> None:
    """Refresh the session with a synthetic document at a fixed interval."""
    while True:
        session.refresh(synthetic_snapshot())
        await asyncio.sleep(interval_seconds)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Start feeding snapshots on startup."""
    task = asyncio.create_task(feed_synthetic_snapshots())
    yield
    task.cancel()


# Create FastAPI app
app = FastAPI(title="Hystrix Dashboard Example", lifespan=lifespan)

# Mount dashboard endpoints
app.include_router(create_dashboard_router(session), prefix="/hystrix")


@app.post("/snapshot", status_code=202)
async def push_snapshot(document: dict[str, Any] = Body()) -> dict[str, int]:
    """Refresh the session with a metrics document posted by a poller."""
    session.refresh(document)
    return {
        "circuits": len(session.registry.circuits),
        "threadPools": len(session.registry.thread_pools),
    }
