"""Reservation API integration tests."""

from __future__ import annotations

import uuid
from typing import Any

import pytest

pytestmark = pytest.mark.asyncio


def _payload(context: dict[str, Any], start: str, end: str, **extra: Any) -> dict[str, Any]:
    return {
        "court_id": str(context["court_id"]),
        "requester_id": str(context["player_id"]),
        "start_at": start,
        "end_at": end,
        **extra,
    }


async def test_reservation_lifecycle(app_context: dict[str, Any]) -> None:
    client = app_context["client"]

    create_resp = await client.post(
        "/api/v1/reservations",
        json=_payload(app_context, "2030-01-07T10:00:00Z", "2030-01-07T11:00:00Z"),
    )
    assert create_resp.status_code == 201, create_resp.text
    reservation = create_resp.json()
    assert reservation["status"] == "PENDING_PAYMENT"
    assert reservation["mode"] == "CUSTOMER_PENDING"
    assert reservation["price_cents"] == 5000
    assert reservation["reservation_expires_at"] is not None
    reservation_id = reservation["id"]

    get_resp = await client.get(f"/api/v1/reservations/{reservation_id}")
    assert get_resp.status_code == 200
    assert get_resp.json()["id"] == reservation_id

    paid_resp = await client.post(f"/api/v1/reservations/{reservation_id}/confirm-payment")
    assert paid_resp.status_code == 200
    assert paid_resp.json()["status"] == "PAID"
    assert paid_resp.json()["paid_at"] is not None

    cancel_resp = await client.post(
        f"/api/v1/reservations/{reservation_id}/cancel", json={"reason": "injury"}
    )
    assert cancel_resp.status_code == 200
    assert cancel_resp.json()["status"] == "CANCELLED"
    assert cancel_resp.json()["cancel_reason"] == "injury"

    again_resp = await client.post(f"/api/v1/reservations/{reservation_id}/cancel")
    assert again_resp.status_code == 400


async def test_overlapping_reservation_returns_conflict(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    first = await client.post(
        "/api/v1/reservations",
        json=_payload(
            app_context,
            "2030-01-07T10:00:00Z",
            "2030-01-07T11:00:00Z",
            mode="ADMIN_DIRECT",
        ),
    )
    assert first.status_code == 201
    assert first.json()["status"] == "RESERVED"
    assert first.json()["reservation_expires_at"] is None

    second = await client.post(
        "/api/v1/reservations",
        json=_payload(app_context, "2030-01-07T10:30:00Z", "2030-01-07T11:30:00Z"),
    )
    assert second.status_code == 409
    detail = second.json()["detail"]
    assert detail["message"] == "Selected time slot is already booked or reserved"
    assert detail["conflicting_reservation_ids"] == [first.json()["id"]]


async def test_reservation_error_statuses(app_context: dict[str, Any]) -> None:
    client = app_context["client"]

    inverted = await client.post(
        "/api/v1/reservations",
        json=_payload(app_context, "2030-01-07T11:00:00Z", "2030-01-07T10:00:00Z"),
    )
    assert inverted.status_code == 400

    past = await client.post(
        "/api/v1/reservations",
        json=_payload(app_context, "2020-01-06T10:00:00Z", "2020-01-06T11:00:00Z"),
    )
    assert past.status_code == 400

    blocked = await client.post(
        "/api/v1/reservations",
        json={
            **_payload(app_context, "2030-01-07T10:00:00Z", "2030-01-07T11:00:00Z"),
            "requester_id": str(app_context["blocked_player_id"]),
        },
    )
    assert blocked.status_code == 403

    unknown_court = await client.post(
        "/api/v1/reservations",
        json={
            **_payload(app_context, "2030-01-07T10:00:00Z", "2030-01-07T11:00:00Z"),
            "court_id": str(uuid.uuid4()),
        },
    )
    assert unknown_court.status_code == 404

    missing = await client.get(f"/api/v1/reservations/{uuid.uuid4()}")
    assert missing.status_code == 404


async def test_no_show_before_start_is_rejected(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    created = await client.post(
        "/api/v1/reservations",
        json=_payload(
            app_context,
            "2030-01-07T10:00:00Z",
            "2030-01-07T11:00:00Z",
            mode="ADMIN_DIRECT",
        ),
    )
    response = await client.post(f"/api/v1/reservations/{created.json()['id']}/no-show")
    assert response.status_code == 400


async def test_list_court_reservations(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    court_id = app_context["court_id"]
    for start, end in (
        ("2030-01-07T10:00:00Z", "2030-01-07T11:00:00Z"),
        ("2030-01-08T10:00:00Z", "2030-01-08T11:00:00Z"),
    ):
        response = await client.post(
            "/api/v1/reservations", json=_payload(app_context, start, end)
        )
        assert response.status_code == 201

    monday = await client.get(
        f"/api/v1/courts/{court_id}/reservations", params={"date": "2030-01-07"}
    )
    assert monday.status_code == 200
    assert len(monday.json()) == 1

    pending = await client.get(
        f"/api/v1/courts/{court_id}/reservations", params={"status": "PENDING_PAYMENT"}
    )
    assert len(pending.json()) == 2

    bad_date = await client.get(
        f"/api/v1/courts/{court_id}/reservations", params={"date": "07-01-2030"}
    )
    assert bad_date.status_code == 400
