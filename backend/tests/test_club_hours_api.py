"""Club hours and holiday calendar API tests."""

from __future__ import annotations

from typing import Any

import pytest

pytestmark = pytest.mark.asyncio


async def _slot_starts(client, court_id, day: str) -> list[str]:
    response = await client.get(
        f"/api/v1/courts/{court_id}/availability", params={"date": day}
    )
    assert response.status_code == 200
    return [slot["start_time"] for slot in response.json()["slots"]]


async def test_weekly_hours_shape_availability(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    club_id = app_context["club_id"]
    court_id = app_context["court_id"]

    upsert = await client.put(
        f"/api/v1/clubs/{club_id}/hours",
        json={"day_of_week": 1, "open_time": "9:00", "close_time": "12:00"},
    )
    assert upsert.status_code == 200, upsert.text
    assert upsert.json()["open_time"] == "09:00"
    hour_id = upsert.json()["id"]

    assert await _slot_starts(client, court_id, "2030-01-07") == ["09:00", "10:00", "11:00"]

    replaced = await client.put(
        f"/api/v1/clubs/{club_id}/hours",
        json={"day_of_week": 1, "open_time": "10:00", "close_time": "12:00"},
    )
    assert replaced.json()["id"] == hour_id

    listed = await client.get(f"/api/v1/clubs/{club_id}/hours")
    assert [item["day_of_week"] for item in listed.json()] == [1]

    deleted = await client.delete(f"/api/v1/clubs/{club_id}/hours/{hour_id}")
    assert deleted.status_code == 204
    assert len(await _slot_starts(client, court_id, "2030-01-07")) == 14


async def test_invalid_hours_are_rejected(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    response = await client.put(
        f"/api/v1/clubs/{app_context['club_id']}/hours",
        json={"day_of_week": 2, "open_time": "18:00", "close_time": "08:00"},
    )
    assert response.status_code == 400


async def test_special_hours_close_a_date(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    club_id = app_context["club_id"]

    special = await client.put(
        f"/api/v1/clubs/{club_id}/special-hours",
        json={"date": "2030-01-07", "is_closed": True, "reason": "maintenance"},
    )
    assert special.status_code == 200, special.text
    special_id = special.json()["id"]

    availability = await client.get(
        f"/api/v1/courts/{app_context['court_id']}/availability",
        params={"date": "2030-01-07"},
    )
    assert availability.json()["is_closed"] is True
    assert availability.json()["slots"] == []

    listed = await client.get(
        f"/api/v1/clubs/{club_id}/special-hours", params={"from_date": "2030-01-01"}
    )
    assert [item["id"] for item in listed.json()] == [special_id]

    deleted = await client.delete(f"/api/v1/clubs/{club_id}/special-hours/{special_id}")
    assert deleted.status_code == 204


async def test_holiday_calendar(app_context: dict[str, Any]) -> None:
    client = app_context["client"]
    club_id = str(app_context["club_id"])

    global_holiday = await client.post(
        "/api/v1/holidays", json={"date": "2030-01-01", "name": "New Year"}
    )
    assert global_holiday.status_code == 201
    club_holiday = await client.post(
        "/api/v1/holidays",
        json={"date": "2030-05-15", "name": "Club Day", "club_id": club_id},
    )
    assert club_holiday.status_code == 201

    listed = await client.get("/api/v1/holidays", params={"year": 2030, "club_id": club_id})
    assert [item["name"] for item in listed.json()] == ["New Year", "Club Day"]

    rule = await client.post(
        f"/api/v1/courts/{app_context['court_id']}/price-rules",
        json={
            "rule_type": "HOLIDAY",
            "holiday_id": global_holiday.json()["id"],
            "start_time": "00:00",
            "end_time": "24:00",
            "price_cents": 7000,
        },
    )
    assert rule.status_code == 201, rule.text

    availability = await client.get(
        f"/api/v1/courts/{app_context['court_id']}/availability",
        params={"date": "2030-01-01"},
    )
    assert {slot["price_cents"] for slot in availability.json()["slots"]} == {7000}
