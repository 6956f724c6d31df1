"""Shared test fixtures for all test modules."""

import pytest

try:
    import httpx
except ImportError:
    httpx = None

from hystrixview.adapters.rendering.in_memory import InMemoryRenderer
from hystrixview.core.session import DashboardSession


class FakeClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    """Provide a deterministic clock for history timestamps."""
    return FakeClock()


@pytest.fixture
def renderer() -> InMemoryRenderer:
    """Provide an empty recording renderer."""
    return InMemoryRenderer()


@pytest.fixture
def session(renderer: InMemoryRenderer, clock: FakeClock) -> DashboardSession:
    """Fresh dashboard session wired to the recording renderer."""
    return DashboardSession(renderer=renderer, clock=clock)


# === HTTP Test Fixtures ===


@pytest.fixture
def asgi_scope():
    """Factory fixture for creating ASGI scope dicts.

    Used in tests to create scope dicts with customizable method/path/query.
    """
    from hystrixview.adapters.frameworks.asgi import Scope

    def _scope(method: str = "GET", path: str = "/circuits", query: bytes = b"") -> Scope:
        return {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query,
            "headers": [],
        }

    return _scope


@pytest.fixture
def asgi_send_capture():
    """Fixture that returns a send callable and a responses list for capture.

    Returns a tuple of (send_func, responses_list) for recording ASGI messages.
    """

    responses: list[dict[str, object]] = []

    async def send(message: dict[str, object]) -> None:
        """Capture ASGI messages."""
        responses.append(message)

    return send, responses


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Returns a callable that accepts an ASGI app and yields a client
    with ASGITransport configured.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(session)
            async with asgi_test_client(app) as client:
                response = await client.get("/circuits")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
