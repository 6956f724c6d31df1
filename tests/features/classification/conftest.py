"""BDD step definitions for naming scheme detection."""

from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from hystrixview.core.models import CircuitIdentity, ThreadPoolIdentity
from hystrixview.core.session import DashboardSession
from tests.snapshots import (
    busy_circuit,
    busy_thread_pool,
    native_circuit,
    native_thread_pool,
    publisher_circuit,
    snapshot,
)


@dataclass
class ClassificationContext:
    """State shared by the steps of one scenario."""

    session: DashboardSession = field(default_factory=DashboardSession)
    gauges: dict[str, Any] = field(default_factory=dict)


@pytest.fixture
def ctx() -> ClassificationContext:
    """Fresh scenario context for each test."""
    return ClassificationContext()


def _circuit(name: str) -> tuple[str, str]:
    service, method = name.split(".")
    return service, method


# === Given Steps ===
@given("a fresh dashboard session")
def step_fresh_session(ctx: ClassificationContext) -> None:
    ctx.session = DashboardSession()


@given(parsers.parse('native gauges for circuit "{name}"'))
@when(parsers.parse('native gauges for circuit "{name}" appear'))
def step_native_circuit(ctx: ClassificationContext, name: str) -> None:
    ctx.gauges.update(native_circuit(*_circuit(name), busy_circuit()))


@given(parsers.parse('publisher gauges for circuit "{name}"'))
def step_publisher_circuit(ctx: ClassificationContext, name: str) -> None:
    ctx.gauges.update(publisher_circuit(*_circuit(name), busy_circuit()))


@given(parsers.parse('native gauges for thread pool "{service}"'))
def step_native_thread_pool(ctx: ClassificationContext, service: str) -> None:
    ctx.gauges.update(native_thread_pool(service, busy_thread_pool()))


@given(parsers.parse('a gauge named "{key}"'))
def step_gauge(ctx: ClassificationContext, key: str) -> None:
    ctx.gauges[key] = 1


# === When Steps ===
@when("the dashboard is refreshed")
def step_refresh(ctx: ClassificationContext) -> None:
    ctx.session.refresh(snapshot(ctx.gauges))


@when("the dashboard is cleared")
def step_clear(ctx: ClassificationContext) -> None:
    ctx.session.clear()


# === Then Steps ===
@then(parsers.parse('the naming scheme is "{scheme}"'))
def step_naming_scheme(ctx: ClassificationContext, scheme: str) -> None:
    assert ctx.session.naming_scheme.value == scheme


@then(parsers.parse('circuit "{name}" reads gauges under "{prefix}"'))
def step_circuit_prefix(ctx: ClassificationContext, name: str, prefix: str) -> None:
    config = ctx.session.registry.circuits.lookup(CircuitIdentity(*_circuit(name)))
    assert config is not None
    assert config.prefix == prefix


@then(parsers.parse("the number of registered circuits is {count:d}"))
def step_circuit_count(ctx: ClassificationContext, count: int) -> None:
    assert len(ctx.session.registry.circuits) == count


@then(parsers.parse('thread pool "{service}" is registered'))
def step_thread_pool_registered(ctx: ClassificationContext, service: str) -> None:
    assert ThreadPoolIdentity(service) in ctx.session.registry.thread_pools
