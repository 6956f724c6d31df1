"""Shared query parameter parsing utilities for framework adapters.

This module provides utilities for parsing and validating query parameters
that are common across the framework adapters (ASGI, FastAPI).
"""

from hystrixview.core.ordering import SortMode


def _parse_mode_param(
    params: dict[str, list[str]], modes: type[SortMode]
) -> SortMode:
    """Parse and validate the 'mode' query parameter.

    Args:
        params: Parsed query string parameters (as returned by urllib.parse.parse_qs).
        modes: Sort mode enum the value must belong to.

    Returns:
        The requested sort mode.

    Raises:
        ValueError: If the parameter is missing or names no mode of modes.
    """
    # @tra: Adapter.ASGI.QueryParameter.SortMode
    mode_list = params.get("mode", [])
    mode_raw = mode_list[0] if mode_list else None
    if not mode_raw:
        raise ValueError("missing 'mode' query parameter")
    return modes.parse(mode_raw)
