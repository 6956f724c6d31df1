"""Adapters connecting the core to rendering and web frameworks."""
