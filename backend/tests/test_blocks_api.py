"""Availability block API tests."""

from __future__ import annotations

import uuid
from typing import Any

import pytest

pytestmark = pytest.mark.asyncio


async def test_block_lifecycle(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    court_id = app_context["court_id"]
    base = f"/api/v1/courts/{court_id}/blocks"

    created = await client.post(
        base,
        json={
            "date": "2030-01-07",
            "start_time": "12:00",
            "end_time": "14:00",
            "reason": "net repair",
        },
    )
    assert created.status_code == 201, created.text
    block_id = created.json()["id"]

    availability = await client.get(
        f"/api/v1/courts/{court_id}/availability", params={"date": "2030-01-07"}
    )
    statuses = {slot["start_time"]: slot["status"] for slot in availability.json()["slots"]}
    assert statuses["12:00"] == "booked"
    assert statuses["13:00"] == "booked"

    reservation = await client.post(
        "/api/v1/reservations",
        json={
            "court_id": str(court_id),
            "requester_id": str(app_context["player_id"]),
            "start_at": "2030-01-07T13:00:00Z",
            "end_at": "2030-01-07T14:00:00Z",
        },
    )
    assert reservation.status_code == 409
    assert reservation.json()["detail"]["message"] == "Selected time slot is blocked"

    listed = await client.get(base, params={"from_date": "2030-01-01"})
    assert [block["id"] for block in listed.json()] == [block_id]

    deleted = await client.delete(f"{base}/{block_id}")
    assert deleted.status_code == 204
    missing = await client.delete(f"{base}/{block_id}")
    assert missing.status_code == 404


async def test_block_over_reservation_is_rejected(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    court_id = app_context["court_id"]
    reservation = await client.post(
        "/api/v1/reservations",
        json={
            "court_id": str(court_id),
            "requester_id": str(app_context["player_id"]),
            "start_at": "2030-01-07T10:00:00Z",
            "end_at": "2030-01-07T11:00:00Z",
            "mode": "ADMIN_DIRECT",
        },
    )
    assert reservation.status_code == 201

    response = await client.post(
        f"/api/v1/courts/{court_id}/blocks",
        json={"date": "2030-01-07", "start_time": "09:00", "end_time": "10:30"},
    )
    assert response.status_code == 409
    assert response.json()["detail"]["conflicting_reservation_ids"] == [
        reservation.json()["id"]
    ]


async def test_block_validation(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    inverted = await client.post(
        f"/api/v1/courts/{app_context['court_id']}/blocks",
        json={"date": "2030-01-07", "start_time": "14:00", "end_time": "12:00"},
    )
    assert inverted.status_code == 400

    unknown = await client.post(
        f"/api/v1/courts/{uuid.uuid4()}/blocks",
        json={"date": "2030-01-07", "start_time": "12:00", "end_time": "14:00"},
    )
    assert unknown.status_code == 404
