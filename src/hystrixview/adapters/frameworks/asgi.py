"""ASGI generic adapter for dashboard endpoints.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne) without requiring FastAPI
as a dependency. It serves the views of a DashboardSession to a front end
and accepts its sort commands; feeding snapshots into the session is left
to the hosting application.
"""

import json
import logging
from collections.abc import Callable, Coroutine
from typing import Any
from urllib.parse import parse_qs

from hystrixview.adapters.frameworks.query_params import _parse_mode_param
from hystrixview.core.encoding.ndjson import (
    encode_circuit_views,
    encode_thread_pool_views,
)
from hystrixview.core.ordering import CircuitSortMode, SortMode, ThreadPoolSortMode
from hystrixview.core.session import DashboardSession

logger = logging.getLogger(__name__)

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

NDJSON = "application/x-ndjson"


def _parse_query_params(scope: Scope) -> dict[str, list[str]]:
    """Parse query string from ASGI scope into parameter dictionary.

    Args:
        scope: ASGI scope dictionary containing request metadata.

    Returns:
        Dictionary mapping parameter names to lists of values.
        Returns empty dict if query_string is missing or empty.
    """
    # @tra: Adapter.ASGI.QueryParameter.Parser
    query_string = scope.get("query_string", b"").decode(errors="replace")
    return parse_qs(query_string)


async def _send_response(send: Send, status: int, content_type: str, body: str) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
    """
    headers = [(b"content-type", content_type.encode())]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body.encode()})


async def _handle_endpoint(
    send: Send,
    endpoint_func: Callable[[], str],
    content_type: str,
    log_message: str,
) -> None:
    """Execute an endpoint function with error handling and send response.

    Args:
        send: ASGI send callable for writing response.
        endpoint_func: Function that returns the response body.
        content_type: Content-Type header for success response.
        log_message: Message to log on error.
    """
    try:
        body = endpoint_func()
    except Exception:
        logger.exception(log_message)
        error_body = json.dumps({"error": "Internal Server Error"})
        await _send_response(send, 500, "application/json", error_body)
        return
    await _send_response(send, 200, content_type, body)


async def _handle_sort(
    send: Send,
    scope: Scope,
    modes: type[SortMode],
    apply: Callable[[SortMode], Any],
) -> None:
    """Parse the requested sort mode, apply it and report the new state."""
    try:
        mode = _parse_mode_param(_parse_query_params(scope), modes)
    except ValueError as e:
        # @tra: Adapter.ASGI.SortEndpointInvalidMode
        await _send_response(send, 400, "application/json", json.dumps({"error": str(e)}))
        return
    state = apply(mode)
    body = json.dumps({"mode": state.mode.value, "direction": state.direction.value})
    await _send_response(send, 200, "application/json", body)


def create_asgi_app(session: DashboardSession) -> ASGIApp:
    """Create an ASGI app serving the views and sort commands of a session.

    Endpoints:
        GET  /circuits                  NDJSON circuit views in display order
        GET  /threadpools               NDJSON thread pool views in display order
        POST /circuits/sort?mode=<m>    apply a circuit sort mode
        POST /threadpools/sort?mode=<m> apply a thread pool sort mode
        POST /clear                     discard every entity

    Args:
        session: Dashboard session whose views are served.

    Returns:
        ASGI application callable.
    """
    routes: dict[str, str] = {
        "/circuits": "GET",
        "/threadpools": "GET",
        "/circuits/sort": "POST",
        "/threadpools/sort": "POST",
        "/clear": "POST",
    }

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        path = scope["path"]
        method = routes.get(path)
        # @tra: Adapter.ASGI.RoutingUnknownPath
        if method is None:
            await _send_response(send, 404, "text/plain", "Not Found")
            return
        # @tra: Adapter.ASGI.RoutingWrongMethod
        if scope.get("method", "GET") != method:
            await _send_response(send, 405, "text/plain", "Method Not Allowed")
            return

        # @tra: Adapter.ASGI.CircuitsEndpointNDJSON
        if path == "/circuits":
            await _handle_endpoint(
                send,
                lambda: encode_circuit_views(session.circuit_views()),
                NDJSON,
                "Error encoding circuits endpoint",
            )
        # @tra: Adapter.ASGI.ThreadPoolsEndpointNDJSON
        elif path == "/threadpools":
            await _handle_endpoint(
                send,
                lambda: encode_thread_pool_views(session.thread_pool_views()),
                NDJSON,
                "Error encoding thread pools endpoint",
            )
        elif path == "/circuits/sort":
            await _handle_sort(send, scope, CircuitSortMode, session.sort_circuits)
        elif path == "/threadpools/sort":
            await _handle_sort(
                send, scope, ThreadPoolSortMode, session.sort_thread_pools
            )
        elif path == "/clear":
            session.clear()
            await send({"type": "http.response.start", "status": 204, "headers": []})
            await send({"type": "http.response.body", "body": b""})

    return app
