"""Rendering adapters."""

from hystrixview.adapters.rendering.in_memory import InMemoryRenderer

__all__ = [
    "InMemoryRenderer",
]
