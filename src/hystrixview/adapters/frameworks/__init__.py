"""Web framework adapters serving dashboard views."""
