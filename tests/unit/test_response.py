"""Unit tests for the Response value in bearer_rest.response."""

import dataclasses

import pytest

from bearer_rest.response import Response


def test_accessors_mirror_fields() -> None:
    """get_code and get_raw return the stored fields."""
    response = Response(code=404, raw="not found")

    assert response.get_code() == 404
    assert response.get_raw() == "not found"


def test_response_is_immutable() -> None:
    """Fields cannot be reassigned after construction."""
    response = Response(code=200, raw="ok")

    with pytest.raises(dataclasses.FrozenInstanceError):
        response.code = 500  # type: ignore[misc]


def test_value_equality() -> None:
    """Responses compare by their two fields only."""
    assert Response(200, "ok") == Response(code=200, raw="ok")
    assert Response(200, "ok") != Response(201, "ok")
