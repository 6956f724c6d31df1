"""Tests for ASGI query parameter parsing helpers.

This module tests the internal helper functions for parsing query parameters
from ASGI scope, including handling of invalid UTF-8 bytes.
"""

from __future__ import annotations

from urllib.parse import parse_qs

import pytest

from hystrixview.adapters.frameworks.asgi import Scope, _parse_query_params
from hystrixview.adapters.frameworks.query_params import _parse_mode_param
from hystrixview.core.ordering import CircuitSortMode, ThreadPoolSortMode


@pytest.mark.tier(1)
@pytest.mark.tra("Adapter.ASGI.QueryParameter.InvalidUTF8")
def test_parse_mode_param_rejects_invalid_utf8_bytes():
    """_parse_mode_param should reject replacement characters with ValueError."""

    # Arrange: Invalid UTF-8 bytes decoded with errors='replace'
    query_string = b"mode=\xff\xfe"
    params = parse_qs(query_string.decode("utf-8", errors="replace"))

    # Act / Assert: No mode matches the placeholder characters
    with pytest.raises(ValueError, match="unknown sort mode"):
        _parse_mode_param(params, CircuitSortMode)


@pytest.mark.tier(1)
@pytest.mark.tra("Adapter.ASGI.QueryParameter.Parser")
def test_parse_query_params_extracts_all_params():
    """_parse_query_params should extract all parameters from scope query_string."""

    # Arrange: Create scope with query string
    scope: Scope = {
        "type": "http",
        "method": "POST",
        "path": "/circuits/sort",
        "query_string": b"mode=volume&other=value",
        "headers": [],
    }

    # Act: Parse query parameters
    result = _parse_query_params(scope)

    # Assert: Should return dict with all parameters
    assert result == {"mode": ["volume"], "other": ["value"]}


@pytest.mark.tier(1)
@pytest.mark.tra("Adapter.ASGI.QueryParameter.Parser")
def test_parse_query_params_handles_missing_query_string():
    """_parse_query_params should handle scope without query_string key."""

    # Arrange: Create scope without query_string key
    scope: Scope = {
        "type": "http",
        "method": "GET",
        "path": "/circuits",
        "headers": [],
    }

    # Act: Parse query parameters
    result = _parse_query_params(scope)

    # Assert: Should return empty dict
    assert result == {}


@pytest.mark.tier(1)
@pytest.mark.tra("Adapter.ASGI.QueryParameter.SortMode")
def test_mode_param_accepts_known_mode():
    """_parse_mode_param should return the matching sort mode."""

    # Arrange: Mode in upper case
    params = {"mode": ["LATENCY_MEAN"]}

    # Act: Parse the 'mode' parameter
    result = _parse_mode_param(params, CircuitSortMode)

    # Assert: Case is ignored
    assert result is CircuitSortMode.LATENCY_MEAN


@pytest.mark.tier(1)
@pytest.mark.tra("Adapter.ASGI.QueryParameter.SortMode")
def test_mode_param_uses_first_value():
    """Repeated 'mode' parameters resolve to the first one."""

    params = {"mode": ["volume", "alphabetical"]}

    assert _parse_mode_param(params, ThreadPoolSortMode) is ThreadPoolSortMode.VOLUME


@pytest.mark.tier(1)
@pytest.mark.tra("Adapter.ASGI.QueryParameter.SortMode")
@pytest.mark.parametrize("params", [{}, {"mode": []}, {"mode": [""]}])
def test_mode_param_is_required(params):
    """_parse_mode_param should reject a missing or empty mode."""

    with pytest.raises(ValueError, match="missing 'mode'"):
        _parse_mode_param(params, CircuitSortMode)


@pytest.mark.tier(1)
@pytest.mark.tra("Adapter.ASGI.QueryParameter.SortMode")
def test_mode_param_rejects_mode_of_other_entity_class():
    """Circuit-only modes are not accepted for thread pools."""

    params = {"mode": ["error"]}

    with pytest.raises(ValueError, match="expected one of: alphabetical, volume"):
        _parse_mode_param(params, ThreadPoolSortMode)
