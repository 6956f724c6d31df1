"""Unit tests for the entity registry."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from hystrixview.adapters.rendering.in_memory import InMemoryRenderer
from hystrixview.core.circuit import CircuitConfig
from hystrixview.core.models import CircuitIdentity, ThreadPoolIdentity
from hystrixview.core.registry import EntityMap, EntityRegistry
from hystrixview.core.threadpool import ThreadPoolConfig
from tests.snapshots import busy_circuit, publisher_circuit, snapshot


class TestEntityMap:
    """Tests for EntityMap registration and lookup."""

    @pytest.mark.core
    @pytest.mark.tier(0)
    @pytest.mark.tra("Core.Registry.RegisterIfAbsent")
    def test_factory_called_once_per_identity(self) -> None:
        entities: EntityMap[CircuitIdentity, CircuitConfig] = EntityMap()
        identity = CircuitIdentity("serviceA", "readAuthors")
        calls = []

        def factory() -> CircuitConfig:
            calls.append(identity)
            return CircuitConfig(identity, "serviceA.readAuthors")

        first = entities.register_if_absent(identity, factory)
        second = entities.register_if_absent(identity, factory)

        assert first is second
        assert len(calls) == 1
        assert len(entities) == 1

    @pytest.mark.core
    @pytest.mark.tier(0)
    @pytest.mark.tra("Core.Registry.Order")
    def test_iterates_in_registration_order(self) -> None:
        entities: EntityMap[ThreadPoolIdentity, ThreadPoolConfig] = EntityMap()
        for name in ["zeta", "alpha", "mid"]:
            identity = ThreadPoolIdentity(name)
            entities.register_if_absent(
                identity, lambda identity=identity: ThreadPoolConfig(identity, name)
            )

        assert [i.service for i in entities] == ["zeta", "alpha", "mid"]

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_lookup_unknown_returns_none(self) -> None:
        entities: EntityMap[CircuitIdentity, CircuitConfig] = EntityMap()

        assert entities.lookup(CircuitIdentity("a", "b")) is None
        assert CircuitIdentity("a", "b") not in entities

    @pytest.mark.core
    @pytest.mark.tier(0)
    @pytest.mark.tra("Core.Registry.Unique")
    @given(
        names=st.lists(
            st.tuples(
                st.sampled_from(["serviceA", "serviceB"]),
                st.sampled_from(["read", "write", "list"]),
            ),
            max_size=30,
        )
    )
    def test_one_entry_per_identity(self, names: list[tuple[str, str]]) -> None:
        """Repeated registrations never create duplicate entries."""
        entities: EntityMap[CircuitIdentity, CircuitConfig] = EntityMap()
        for service, method in names:
            identity = CircuitIdentity(service, method)
            entities.register_if_absent(
                identity, lambda identity=identity: CircuitConfig(identity, "p")
            )

        assert len(entities) == len(set(names))


class TestEntityRegistry:
    """Tests for EntityRegistry.clear_all()."""

    @pytest.mark.core
    @pytest.mark.tier(1)
    @pytest.mark.tra("Core.Registry.ClearAll")
    def test_clear_all_unmounts_and_forgets(self) -> None:
        renderer = InMemoryRenderer()
        registry = EntityRegistry()
        circuit_id = CircuitIdentity("serviceA", "readAuthors")
        pool_id = ThreadPoolIdentity("serviceA")
        circuit = registry.circuits.register_if_absent(
            circuit_id,
            lambda: CircuitConfig(circuit_id, "serviceA.readAuthors", renderer=renderer),
        )
        registry.thread_pools.register_if_absent(
            pool_id, lambda: ThreadPoolConfig(pool_id, "pool", renderer=renderer)
        )
        circuit.refresh(
            snapshot(publisher_circuit("serviceA", "readAuthors", busy_circuit())),
            now=1.0,
        )

        registry.clear_all()

        assert len(registry.circuits) == 0
        assert len(registry.thread_pools) == 0
        assert renderer.cards == {}
        assert circuit.view is None

    @pytest.mark.core
    @pytest.mark.tier(1)
    def test_circuits_and_pools_are_separate(self) -> None:
        registry = EntityRegistry()
        circuit_id = CircuitIdentity("serviceA", "readAuthors")
        registry.circuits.register_if_absent(
            circuit_id, lambda: CircuitConfig(circuit_id, "p")
        )

        assert circuit_id in registry.circuits
        assert len(registry.thread_pools) == 0
