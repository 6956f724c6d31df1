"""Classification of raw gauge keys into circuits and thread pools.

Two key conventions exist for circuit metrics:

* native Hystrix gauges,
  ``gauge.hystrix.HystrixCommand.<service>.<method>.<metric>``
* gauges written by hystrix-codahale-metrics-publisher,
  ``<service>.<method>.<metric>``

A document from the publisher also contains native-looking keys, so the
classifier probes for the publisher form and, once found, locks onto it for
the rest of the session. Thread pools are only recognised in the native
form, ``gauge.hystrix.HystrixThreadPool.<service>.<metric>``.
"""

import logging
from dataclasses import dataclass
from typing import Any

from hystrixview.core.models import (
    IGNORED,
    CircuitIdentity,
    Classification,
    ClassificationAction,
    NamingScheme,
    ThreadPoolIdentity,
)
from hystrixview.core.registry import EntityRegistry
from hystrixview.core.snapshot import has_gauge

logger = logging.getLogger(__name__)

# Gauge always present in publisher documents, used to confirm the form.
PUBLISHER_PROBE_METRIC = "countShortCircuited"


@dataclass(frozen=True)
class KeyPattern:
    """A key convention: literal leading tokens and an exact token count."""

    name: str
    prefix: tuple[str, ...]
    token_count: int

    def starts(self, key: str) -> bool:
        return key.startswith(".".join(self.prefix))

    def match(self, tokens: list[str]) -> bool:
        return (
            len(tokens) == self.token_count
            and tuple(tokens[: len(self.prefix)]) == self.prefix
        )


NATIVE_COMMAND = KeyPattern("native-command", ("gauge", "hystrix", "HystrixCommand"), 6)
PUBLISHER_COMMAND = KeyPattern("publisher-command", (), 3)
NATIVE_THREAD_POOL = KeyPattern(
    "native-thread-pool", ("gauge", "hystrix", "HystrixThreadPool"), 5
)


class KeyClassifier:
    """Classifies gauge keys and tracks the naming scheme of a session.

    Args:
        registry: Registry consulted to skip already known entities.
    """

    def __init__(self, registry: EntityRegistry) -> None:
        self._registry = registry
        self.naming_scheme = NamingScheme.NATIVE

    def reset(self) -> None:
        """Forget the detected naming scheme."""
        self.naming_scheme = NamingScheme.NATIVE

    def _switch_to_publisher(self) -> None:
        if self.naming_scheme is NamingScheme.NATIVE:
            logger.info("Publisher metric keys detected, switching naming scheme")
        self.naming_scheme = NamingScheme.PUBLISHER

    def classify(self, key: str, snapshot: Any) -> list[Classification]:
        """Classify a key against both the circuit and thread pool patterns.

        Returns:
            The non-ignored classifications, in circuit then thread pool order.
        """
        results = [self.classify_circuit(key, snapshot), self.classify_thread_pool(key)]
        return [r for r in results if r.action is not ClassificationAction.IGNORE]

    def classify_circuit(self, key: str, snapshot: Any) -> Classification:
        """Classify a key as a circuit metric.

        May switch the session to the publisher naming scheme as a side effect.
        Once switched, only publisher keys are recognised.
        """
        tokens = key.split(".")
        if (
            self.naming_scheme is NamingScheme.NATIVE
            and NATIVE_COMMAND.starts(key)
            and NATIVE_COMMAND.match(tokens)
        ):
            return self._classify_native_command(tokens, snapshot)
        if PUBLISHER_COMMAND.match(tokens):
            return self._classify_publisher_command(tokens, snapshot)
        return IGNORED

    def _classify_native_command(
        self, tokens: list[str], snapshot: Any
    ) -> Classification:
        service, method, metric = tokens[3], tokens[4], tokens[5]
        identity = CircuitIdentity(service, method)
        if identity in self._registry.circuits:
            return IGNORED
        prefix = ".".join(tokens[:5])
        if has_gauge(snapshot, f"{service}.{method}.{metric}"):
            prefix = f"{service}.{method}"
            self._switch_to_publisher()
        return Classification(ClassificationAction.REGISTER_CIRCUIT, identity, prefix)

    def _classify_publisher_command(
        self, tokens: list[str], snapshot: Any
    ) -> Classification:
        # Publisher keys are service.method.metric, so the identity is the
        # first two tokens, the same one the native sibling probe resolves to.
        service, method = tokens[0], tokens[1]
        identity = CircuitIdentity(service, method)
        if identity in self._registry.circuits:
            return IGNORED
        if not has_gauge(snapshot, f"{service}.{method}.{PUBLISHER_PROBE_METRIC}"):
            return IGNORED
        self._switch_to_publisher()
        return Classification(
            ClassificationAction.REGISTER_CIRCUIT, identity, f"{service}.{method}"
        )

    def classify_thread_pool(self, key: str) -> Classification:
        """Classify a key as a thread pool metric, ignoring the naming scheme."""
        if not NATIVE_THREAD_POOL.starts(key):
            return IGNORED
        tokens = key.split(".")
        if not NATIVE_THREAD_POOL.match(tokens):
            return IGNORED
        identity = ThreadPoolIdentity(tokens[3])
        if identity in self._registry.thread_pools:
            return IGNORED
        return Classification(
            ClassificationAction.REGISTER_THREAD_POOL, identity, ".".join(tokens[:4])
        )
