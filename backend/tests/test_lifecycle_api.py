"""Lifecycle sweep trigger tests."""

from __future__ import annotations

from typing import Any

import pytest

from conftest import LIFECYCLE_SECRET
from courtslot.core.config import get_settings

pytestmark = pytest.mark.asyncio

SWEEP_URL = "/api/v1/internal/lifecycle/sweep"


async def test_sweep_requires_secret(app_context: dict[str, Any]) -> None:
    client = app_context["client"]

    missing = await client.post(SWEEP_URL)
    assert missing.status_code == 403

    wrong = await client.post(SWEEP_URL, headers={"X-Lifecycle-Secret": "nope"})
    assert wrong.status_code == 403

    ok = await client.post(SWEEP_URL, headers={"X-Lifecycle-Secret": LIFECYCLE_SECRET})
    assert ok.status_code == 200
    assert ok.json() == {"cancelled_count": 0, "completed_count": 0}


async def test_sweep_unavailable_without_configured_secret(
    app_context: dict[str, Any], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("LIFECYCLE_TRIGGER_SECRET", raising=False)
    get_settings.cache_clear()
    try:
        response = await app_context["client"].post(
            SWEEP_URL, headers={"X-Lifecycle-Secret": LIFECYCLE_SECRET}
        )
    finally:
        monkeypatch.undo()
        get_settings.cache_clear()
    assert response.status_code == 503
