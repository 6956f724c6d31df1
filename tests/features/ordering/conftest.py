"""BDD step definitions for circuit ordering."""

from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from hystrixview.core.session import DashboardSession
from tests.snapshots import busy_circuit, native_circuit, snapshot


@dataclass
class OrderingContext:
    """State shared by the steps of one scenario."""

    session: DashboardSession = field(default_factory=DashboardSession)
    gauges: dict[str, Any] = field(default_factory=dict)
    error: Exception | None = None


@pytest.fixture
def ctx() -> OrderingContext:
    """Fresh scenario context for each test."""
    return OrderingContext()


@given("a dashboard session")
def step_session(ctx: OrderingContext) -> None:
    ctx.session = DashboardSession()


@given(
    parsers.parse(
        'circuit "{method}" with {requests:d} requests and {errors:d} percent errors'
    )
)
@when(
    parsers.parse(
        'circuit "{method}" with {requests:d} requests and {errors:d} percent errors'
        " appears"
    )
)
def step_circuit(ctx: OrderingContext, method: str, requests: int, errors: int) -> None:
    ctx.gauges.update(
        native_circuit(
            "serviceA", method, busy_circuit(requests=requests, error_percentage=errors)
        )
    )


@given("the dashboard is refreshed")
@when("the dashboard is refreshed")
def step_refresh(ctx: OrderingContext) -> None:
    ctx.session.refresh(snapshot(ctx.gauges))


@given(parsers.parse('circuits are sorted by "{mode}"'))
@when(parsers.parse('circuits are sorted by "{mode}"'))
def step_sort(ctx: OrderingContext, mode: str) -> None:
    try:
        ctx.session.sort_circuits(mode)
    except ValueError as e:
        ctx.error = e


@then(parsers.parse('the circuit order is "{order}"'))
def step_order(ctx: OrderingContext, order: str) -> None:
    methods = [view.identity.method for view in ctx.session.circuit_views()]
    assert methods == order.split(", ")


@then(parsers.parse('the sort state is "{state}"'))
def step_sort_state(ctx: OrderingContext, state: str) -> None:
    assert str(ctx.session.circuit_sort_state) == state


@then("the sort is rejected")
def step_rejected(ctx: OrderingContext) -> None:
    assert isinstance(ctx.error, ValueError)
