"""Encoders for dashboard views."""

from hystrixview.core.encoding.ndjson import (
    encode_circuit_views,
    encode_thread_pool_views,
)

__all__ = [
    "encode_circuit_views",
    "encode_thread_pool_views",
]
