"""Availability and pricing API tests."""

from __future__ import annotations

import uuid
from typing import Any

import pytest
from sqlalchemy import update

from courtslot.core.errors import InvalidTimezoneError
from courtslot.models import Club

pytestmark = pytest.mark.asyncio


async def test_court_availability_reflects_bookings(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    court_id = app_context["court_id"]

    booked = await client.post(
        "/api/v1/reservations",
        json={
            "court_id": str(court_id),
            "requester_id": str(app_context["player_id"]),
            "start_at": "2030-01-07T10:00:00Z",
            "end_at": "2030-01-07T11:00:00Z",
        },
    )
    assert booked.status_code == 201

    response = await client.get(
        f"/api/v1/courts/{court_id}/availability", params={"date": "2030-01-07"}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["date"] == "2030-01-07"
    assert payload["timezone"] == "UTC"
    statuses = {slot["start_time"]: slot["status"] for slot in payload["slots"]}
    assert statuses["10:00"] == "booked"
    assert statuses["09:00"] == "available"
    assert {slot["price_cents"] for slot in payload["slots"]} == {5000}


async def test_court_availability_errors(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    court_id = app_context["court_id"]

    bad_date = await client.get(
        f"/api/v1/courts/{court_id}/availability", params={"date": "2030-02-31"}
    )
    assert bad_date.status_code == 400

    unknown = await client.get(
        f"/api/v1/courts/{uuid.uuid4()}/availability", params={"date": "2030-01-07"}
    )
    assert unknown.status_code == 404


async def test_club_availability(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    club_id = app_context["club_id"]

    response = await client.get(
        f"/api/v1/clubs/{club_id}/availability",
        params={"start": "2030-01-07", "days": 2},
    )
    assert response.status_code == 200
    days = response.json()["days"]
    assert [day["date"] for day in days] == ["2030-01-07", "2030-01-08"]
    assert days[0]["summary"][0]["status"] == "available"

    too_many = await client.get(
        f"/api/v1/clubs/{club_id}/availability",
        params={"start": "2030-01-07", "days": 45},
    )
    assert too_many.status_code == 400


async def test_available_courts(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    response = await client.get(
        f"/api/v1/clubs/{app_context['club_id']}/available-courts",
        params={"start_at": "2030-01-07T18:00:00Z", "end_at": "2030-01-07T19:30:00Z"},
    )
    assert response.status_code == 200
    courts = response.json()
    assert [court["court_id"] for court in courts] == [str(app_context["court_id"])]
    assert courts[0]["price_cents"] == 7500


async def test_price_rule_crud_and_quote(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    base = f"/api/v1/courts/{app_context['court_id']}"

    created = await client.post(
        f"{base}/price-rules",
        json={
            "rule_type": "WEEKDAYS",
            "start_time": "18:00",
            "end_time": "22:00",
            "price_cents": 8000,
        },
    )
    assert created.status_code == 201, created.text
    rule_id = created.json()["id"]

    conflict = await client.post(
        f"{base}/price-rules",
        json={
            "rule_type": "SPECIFIC_DAY",
            "day_of_week": 1,
            "start_time": "20:00",
            "end_time": "23:00",
            "price_cents": 9000,
        },
    )
    assert conflict.status_code == 409
    assert conflict.json()["detail"]["conflicting_rule"]["id"] == rule_id

    invalid = await client.post(
        f"{base}/price-rules",
        json={
            "rule_type": "SPECIFIC_DAY",
            "start_time": "08:00",
            "end_time": "09:00",
            "price_cents": 9000,
        },
    )
    assert invalid.status_code == 400

    quote = await client.get(
        f"{base}/price",
        params={"start_at": "2030-01-07T18:00:00Z", "end_at": "2030-01-07T18:30:00Z"},
    )
    assert quote.status_code == 200
    assert quote.json()["price_cents"] == 4000
    assert quote.json()["rule_type"] == "WEEKDAYS"

    updated = await client.put(f"{base}/price-rules/{rule_id}", json={"price_cents": 9000})
    assert updated.status_code == 200
    assert updated.json()["price_cents"] == 9000

    timeline = await client.get(f"{base}/price-timeline", params={"date": "2030-01-07"})
    assert timeline.status_code == 200
    assert [segment["price_cents"] for segment in timeline.json()["segments"]] == [
        5000,
        9000,
        5000,
    ]

    listed = await client.get(f"{base}/price-rules")
    assert [rule["id"] for rule in listed.json()] == [rule_id]

    deleted = await client.delete(f"{base}/price-rules/{rule_id}")
    assert deleted.status_code == 204
    missing = await client.get(f"{base}/price-rules/{rule_id}")
    assert missing.status_code == 404


async def test_multi_day_quote_is_rejected(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    response = await client.get(
        f"/api/v1/courts/{app_context['court_id']}/price",
        params={"start_at": "2030-01-07T23:00:00Z", "end_at": "2030-01-08T01:00:00Z"},
    )
    assert response.status_code == 400


async def test_club_with_unknown_timezone_is_rejected(app_context: dict[str, Any]) -> None:
    with pytest.raises(InvalidTimezoneError):
        Club(name="Nowhere Padel", timezone="Mars/Olympus_Mons")

    sessionmaker = app_context["sessionmaker"]
    async with sessionmaker() as session:
        # Rows written around the ORM still surface as a client error.
        await session.execute(
            update(Club)
            .where(Club.id == app_context["club_id"])
            .values(timezone="Mars/Olympus_Mons")
        )
        await session.commit()

    client = app_context["client"]
    response = await client.get(
        f"/api/v1/courts/{app_context['court_id']}/availability",
        params={"date": "2030-01-07"},
    )
    assert response.status_code == 400
    assert response.json()["detail"]["timezone"] == "Mars/Olympus_Mons"

    courts = await client.get(
        f"/api/v1/clubs/{app_context['club_id']}/available-courts",
        params={"start_at": "2030-01-07T18:00:00Z", "end_at": "2030-01-07T19:00:00Z"},
    )
    assert courts.status_code == 400
