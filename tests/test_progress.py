import pytest
from httpx import AsyncClient


async def _advance(app_client: AsyncClient, report_id: int, admin_id: int, *steps: str) -> None:
    for status in steps:
        r = await app_client.patch(
            f"/reports/{report_id}/status",
            json={"status": status, "notes": f"to {status}", "admin_id": admin_id},
        )
        assert r.status_code == 200


@pytest.mark.asyncio
async def test_standalone_timeline_is_newest_first_detail_is_oldest_first(
    app_client: AsyncClient, seed, make_report
):
    report_id = await make_report()
    await _advance(app_client, report_id, seed.admin, "proses", "selesai")

    standalone = (await app_client.get(f"/reports/{report_id}/progress")).json()
    detail = (await app_client.get(f"/reports/{report_id}")).json()["progress"]

    assert [e["status"] for e in standalone] == ["selesai", "proses", "baru"]
    assert [e["status"] for e in detail] == ["baru", "proses", "selesai"]
    assert [e["id"] for e in standalone] == [e["id"] for e in reversed(detail)]


@pytest.mark.asyncio
async def test_timeline_of_unknown_report_is_empty(app_client: AsyncClient):
    r = await app_client.get("/reports/4242/progress")
    assert r.status_code == 200
    assert r.json() == []


@pytest.mark.asyncio
async def test_note_on_done_report_keeps_status(app_client: AsyncClient, seed, make_report):
    report_id = await make_report()
    await _advance(app_client, report_id, seed.admin, "selesai")
    before = (await app_client.get(f"/reports/{report_id}")).json()

    r = await app_client.post(
        f"/reports/{report_id}/progress/notes",
        json={"notes": "closed out", "admin_id": seed.admin},
    )
    assert r.status_code == 201
    entry = r.json()
    assert entry["status"] == "selesai"
    assert entry["notes"] == "closed out"
    assert entry["admin_id"] == seed.admin

    after = (await app_client.get(f"/reports/{report_id}")).json()
    assert after["status"] == "selesai"
    assert after["updated_at"] == before["updated_at"]
    assert len(after["progress"]) == len(before["progress"]) + 1


@pytest.mark.asyncio
async def test_note_requires_existing_report_and_active_admin(
    app_client: AsyncClient, seed, make_report
):
    r = await app_client.post(
        "/reports/4242/progress/notes", json={"notes": "halo", "admin_id": seed.admin}
    )
    assert r.status_code == 404
    assert r.json() == {"detail": "Report not found"}

    report_id = await make_report()
    r = await app_client.post(
        f"/reports/{report_id}/progress/notes",
        json={"notes": "bukan admin", "admin_id": seed.reporter},
    )
    assert r.status_code == 404
    assert r.json() == {"detail": "Admin not found"}


@pytest.mark.asyncio
async def test_note_must_not_be_empty(app_client: AsyncClient, seed, make_report):
    report_id = await make_report()
    r = await app_client.post(
        f"/reports/{report_id}/progress/notes", json={"notes": "", "admin_id": seed.admin}
    )
    assert r.status_code == 422
