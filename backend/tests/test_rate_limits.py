"""Rate limit parsing and route wiring."""

from __future__ import annotations

import pytest
from fastapi.routing import APIRoute

from courtslot.api import deps
from courtslot.main import app


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("20/minute", (20, 60)),
        ("5/second", (5, 1)),
        ("1000 / day", (1000, 86400)),
        ("ten/minute", (1, 1)),
        ("0/minute", (1, 1)),
        ("20/fortnight", (1, 1)),
        ("20", (1, 1)),
    ],
)
def test_parse_rate(value: str, expected: tuple[int, int]) -> None:
    assert deps.parse_rate(value, fallback=(1, 1)) == expected


def _route(path: str, method: str) -> APIRoute:
    for route in app.routes:
        if isinstance(route, APIRoute) and route.path == path and method in route.methods:
            return route
    raise AssertionError(f"{method} {path} is not mounted")


@pytest.mark.parametrize(
    ("path", "method", "limit"),
    [
        ("/api/v1/reservations", "POST", deps.BOOKING_RATE_LIMIT),
        ("/api/v1/courts/{court_id}/price-rules", "POST", deps.DEFAULT_RATE_LIMIT),
        ("/api/v1/courts/{court_id}/price-rules/{rule_id}", "PUT", deps.DEFAULT_RATE_LIMIT),
        ("/api/v1/courts/{court_id}/blocks", "POST", deps.DEFAULT_RATE_LIMIT),
    ],
)
def test_write_routes_are_rate_limited(path: str, method: str, limit) -> None:
    assert any(dependency is limit for dependency in _route(path, method).dependencies)
