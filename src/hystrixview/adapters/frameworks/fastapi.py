"""FastAPI adapter for dashboard endpoints."""

from fastapi import APIRouter, HTTPException, Query, Response

from hystrixview.core.encoding.ndjson import (
    encode_circuit_views,
    encode_thread_pool_views,
)
from hystrixview.core.ordering import CircuitSortMode, ThreadPoolSortMode
from hystrixview.core.session import DashboardSession


def create_dashboard_router(session: DashboardSession) -> APIRouter:
    """Create a FastAPI router serving the views and sort commands of a session.

    Args:
        session: Dashboard session whose views are served.

    Returns:
        APIRouter with /circuits, /threadpools, the sort endpoints and /clear.
    """
    router = APIRouter()

    @router.get("/circuits")
    async def get_circuits() -> Response:
        """Return circuit views in display order as NDJSON."""
        body = encode_circuit_views(session.circuit_views())
        return Response(content=body, media_type="application/x-ndjson")

    @router.get("/threadpools")
    async def get_thread_pools() -> Response:
        """Return thread pool views in display order as NDJSON."""
        body = encode_thread_pool_views(session.thread_pool_views())
        return Response(content=body, media_type="application/x-ndjson")

    @router.post("/circuits/sort")
    async def sort_circuits(mode: str = Query()) -> dict[str, str]:
        """Apply a circuit sort mode; repeating a mode flips its direction.

        Args:
            mode: One of alphabetical, volume, error, error_then_volume,
                latency90, latency99, latency995, latency_mean, latency_median.
        """
        try:
            state = session.sort_circuits(CircuitSortMode.parse(mode))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {"mode": state.mode.value, "direction": state.direction.value}

    @router.post("/threadpools/sort")
    async def sort_thread_pools(mode: str = Query()) -> dict[str, str]:
        """Apply a thread pool sort mode (alphabetical or volume)."""
        try:
            state = session.sort_thread_pools(ThreadPoolSortMode.parse(mode))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {"mode": state.mode.value, "direction": state.direction.value}

    @router.post("/clear", status_code=204)
    async def clear() -> Response:
        """Discard every entity of the session."""
        session.clear()
        return Response(status_code=204)

    return router
