"""Solve routes — retroactive penalties, comments and deletion.

Invariants:
    - Edits are reflected in the next stats read (stats never cached)
    - Missing solves -> 404 RESOURCE_NOT_FOUND
"""

import uuid


async def test_plus_two_updates_stats(client, complete_solve):
    data = await complete_solve(elapsed=10_000)
    solve_id = data["solve"]["id"]

    resp = await client.patch(f"/api/v1/solves/{solve_id}", json={"penalty": "+2"})

    assert resp.status_code == 200
    assert resp.json()["effective_ms"] == 12_000
    assert resp.json()["display"] == "12.000+"
    stats = (await client.get("/api/v1/events/333/stats")).json()
    assert stats["best"]["ms"] == 12_000


async def test_dnf_counts_in_stats(client, complete_solve):
    data = await complete_solve()
    await client.patch(f"/api/v1/solves/{data['solve']['id']}", json={"penalty": "dnf"})

    stats = (await client.get("/api/v1/events/333/stats")).json()

    assert stats["dnf_count"] == 1
    assert stats["mean"]["status"] == "dnf"


async def test_penalty_can_be_cleared(client, complete_solve):
    solve_id = (await complete_solve())["solve"]["id"]
    await client.patch(f"/api/v1/solves/{solve_id}", json={"penalty": "dnf"})
    resp = await client.patch(f"/api/v1/solves/{solve_id}", json={"penalty": "none"})
    assert resp.json()["penalty"] == "none"
    assert resp.json()["effective_ms"] == 10_000


async def test_comment_update(client, complete_solve):
    solve_id = (await complete_solve())["solve"]["id"]
    resp = await client.patch(f"/api/v1/solves/{solve_id}", json={"comment": "pop"})
    assert resp.json()["comment"] == "pop"
    assert resp.json()["penalty"] == "none"


async def test_empty_patch_rejected(client, complete_solve):
    solve_id = (await complete_solve())["solve"]["id"]
    resp = await client.patch(f"/api/v1/solves/{solve_id}", json={})
    assert resp.status_code == 400


async def test_patch_unknown_solve(client):
    resp = await client.patch(f"/api/v1/solves/{uuid.uuid4()}", json={"penalty": "+2"})
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_delete_solve(client, complete_solve):
    solve_id = (await complete_solve())["solve"]["id"]

    resp = await client.delete(f"/api/v1/solves/{solve_id}")

    assert resp.status_code == 204
    assert (await client.get("/api/v1/events/333/solves")).json() == []
    again = await client.delete(f"/api/v1/solves/{solve_id}")
    assert again.status_code == 404
