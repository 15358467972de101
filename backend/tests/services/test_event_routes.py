"""Event routes — catalog, custom events, scramble preview, history and stats."""

from cubetimer.config import Settings
from cubetimer.services import timer_registry
from cubetimer.services.solve_repository import SqlCustomEventRepository


def import_body(*times, penalty="none"):
    return {
        "solves": [
            {
                "scramble": "R U R' U'",
                "elapsed_ms": ms,
                "penalty": penalty,
                "recorded_at": f"2026-03-01T12:00:{i:02d}Z",
            }
            for i, ms in enumerate(times)
        ],
    }


# --- Catalog ------------------------------------------------------------------

async def test_list_events(client):
    resp = await client.get("/api/v1/events")
    assert resp.status_code == 200
    ids = [e["id"] for e in resp.json()]
    assert ids[0] == "333"
    assert {"222", "777", "pyram", "minx", "skewb", "sq1", "clock", "333bf"} <= set(ids)


async def test_get_event(client):
    resp = await client.get("/api/v1/events/333")
    data = resp.json()
    assert data["min_scramble_length"] == 20
    assert data["inspection_policy"] == "wca"
    assert {"R", "R'", "R2"} <= set(data["moves"])


async def test_get_unknown_event(client):
    resp = await client.get("/api/v1/events/888")
    assert resp.status_code == 404


async def test_preview_scramble(client):
    resp = await client.get("/api/v1/events/minx/scramble")
    data = resp.json()
    assert data["event_id"] == "minx"
    assert data["length"] == 70


# --- Custom events ------------------------------------------------------------

async def test_create_custom_event(client):
    resp = await client.post("/api/v1/events", json={
        "name": "Gear Cube", "moves": ["R", "U", "F"], "scramble_length": 15,
    })
    assert resp.status_code == 201
    data = resp.json()
    assert data["id"] == "custom-gear-cube"
    assert data["kind"] == "custom"
    assert data["inspection_policy"] == "none"

    scramble = await client.get("/api/v1/events/custom-gear-cube/scramble")
    assert scramble.json()["length"] == 15


async def test_duplicate_custom_event_conflicts(client):
    body = {"name": "Gear Cube", "moves": ["R", "U"], "scramble_length": 10}
    await client.post("/api/v1/events", json=body)
    resp = await client.post("/api/v1/events", json=body)
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "EVENT_ALREADY_EXISTS"


async def test_single_axis_custom_event_rejected(client):
    resp = await client.post("/api/v1/events", json={
        "name": "Slice Only", "moves": ["R", "L"], "scramble_length": 10,
    })
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "EVENT_MISCONFIGURED"

    listed = await client.get("/api/v1/events")
    assert "custom-slice-only" not in [e["id"] for e in listed.json()]


async def test_custom_events_reload_from_database(client, test_db):
    await client.post("/api/v1/events", json={
        "name": "Two Gen", "moves": ["R", "U"], "scramble_length": 25,
    })
    timer_registry.reset_registry()

    loaded = await timer_registry.load_custom_events(SqlCustomEventRepository(test_db))

    assert loaded == 1
    assert timer_registry.get_catalog().get("custom-two-gen").min_scramble_length == 25


async def test_delete_custom_event(client, test_db):
    await client.post("/api/v1/events", json={
        "name": "Two Gen", "moves": ["R", "U"], "scramble_length": 25,
    })
    await client.get("/api/v1/timer/custom-two-gen")

    resp = await client.delete("/api/v1/events/custom-two-gen")

    assert resp.status_code == 204
    assert (await client.get("/api/v1/events/custom-two-gen")).status_code == 404
    assert (await client.get("/api/v1/timer/custom-two-gen")).status_code == 404
    assert await SqlCustomEventRepository(test_db).list_all() == []


async def test_recreated_custom_event_gets_a_fresh_timer(client):
    body = {"name": "Two Gen", "moves": ["R", "U"], "scramble_length": 25}
    await client.post("/api/v1/events", json=body)
    await client.post("/api/v1/timer/custom-two-gen/press", json={"timestamp_ms": 0})
    await client.delete("/api/v1/events/custom-two-gen")

    await client.post("/api/v1/events", json=body)
    resp = await client.get("/api/v1/timer/custom-two-gen")

    assert resp.json()["phase"] == "idle"


async def test_delete_standard_event_is_refused(client):
    resp = await client.delete("/api/v1/events/333")
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "EVENT_NOT_REMOVABLE"
    assert (await client.get("/api/v1/events/333")).status_code == 200


async def test_delete_unknown_event_returns_404(client):
    resp = await client.delete("/api/v1/events/custom-missing")
    assert resp.status_code == 404


async def test_hold_threshold_override_is_reported_everywhere(client, monkeypatch):
    monkeypatch.setattr(
        timer_registry, "get_settings", lambda: Settings(hold_threshold_ms=800),
    )
    event = await client.get("/api/v1/events/333")
    listed = await client.get("/api/v1/events")
    timer = await client.get("/api/v1/timer/333")

    assert event.json()["hold_threshold_ms"] == 800
    assert listed.json()[0]["hold_threshold_ms"] == 800
    assert timer.json()["hold_threshold_ms"] == 800


# --- History & stats ----------------------------------------------------------

async def test_stats_of_empty_session(client):
    resp = await client.get("/api/v1/events/333/stats")
    data = resp.json()
    assert data["count"] == 0
    assert data["mean"] == {"status": "undefined", "ms": None, "display": "-"}


async def test_import_seeds_session_and_stats(client):
    resp = await client.post(
        "/api/v1/events/333/solves/import",
        json=import_body(10_000, 11_000, 9_000, 12_000, 8_000),
    )
    assert resp.status_code == 201
    assert resp.json()["ao5"]["ms"] == 10_000

    history = await client.get("/api/v1/events/333/solves")
    assert [s["elapsed_ms"] for s in history.json()] == [
        10_000, 11_000, 9_000, 12_000, 8_000,
    ]

    stats = await client.get("/api/v1/events/333/stats")
    assert stats.json()["ao5"]["display"] == "10.000"


async def test_import_rejects_reused_scramble(client):
    body = import_body(10_000, 11_000)
    shared = "9a8f3f6e-4c2b-4f4e-9d7c-0b1a2c3d4e5f"
    for record in body["solves"]:
        record["scramble_id"] = shared
    resp = await client.post("/api/v1/events/333/solves/import", json=body)
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_SOLVE"


async def test_import_rejects_naive_timestamp(client):
    body = import_body(10_000)
    body["solves"][0]["recorded_at"] = "2026-03-01T12:00:00"
    resp = await client.post("/api/v1/events/333/solves/import", json=body)
    assert resp.status_code == 400


async def test_sessions_are_per_event(client):
    await client.post("/api/v1/events/333/solves/import", json=import_body(10_000))
    resp = await client.get("/api/v1/events/222/solves")
    assert resp.json() == []


async def test_import_rejects_scramble_used_in_another_event(client):
    shared = "5b7c1d2e-3f40-4a5b-8c6d-7e8f9a0b1c2d"
    body = import_body(10_000)
    body["solves"][0]["scramble_id"] = shared
    first = await client.post("/api/v1/events/333/solves/import", json=body)
    assert first.status_code == 201

    resp = await client.post("/api/v1/events/222/solves/import", json=body)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_SOLVE"
    assert (await client.get("/api/v1/events/222/solves")).json() == []
