import math
from datetime import datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient

from helpdesk.models import ReportStatus


def _day(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(hour=10)


@pytest_asyncio.fixture
async def catalog(seed, make_report) -> dict[str, int]:
    return {
        "huda": await make_report(
            school_name="MI Nurul Huda", npsn="11111111", created_at=_day("2026-01-10")
        ),
        "falah": await make_report(
            school_name="MTs Al Falah",
            npsn="22222222",
            category_id=seed.other_category,
            status=ReportStatus.in_progress,
            created_at=_day("2026-02-03"),
        ),
        "hidayah": await make_report(
            school_name="MA Hidayah",
            npsn="33333333",
            issue_description="Akun operator terkunci sejak kemarin",
            reporter_id=seed.other_reporter,
            status=ReportStatus.done,
            created_at=_day("2026-02-20"),
        ),
        "ulum": await make_report(
            school_name="MI Miftahul Ulum",
            npsn="44444444",
            category_id=seed.other_category,
            reporter_id=seed.other_reporter,
            created_at=_day("2026-03-01"),
        ),
    }


def _ids(body: dict) -> list[int]:
    return [item["id"] for item in body["data"]]


@pytest.mark.asyncio
async def test_list_is_newest_first_with_names(app_client: AsyncClient, catalog):
    r = await app_client.get("/reports")
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 4
    assert (body["page"], body["limit"], body["total_pages"]) == (1, 10, 1)
    assert _ids(body) == [catalog["ulum"], catalog["hidayah"], catalog["falah"], catalog["huda"]]
    assert body["data"][0]["category_name"] == "Akun & Login"
    assert body["data"][0]["reporter_name"] == "Budi Santoso"
    assert body["data"][0]["progress"] is None


@pytest.mark.asyncio
async def test_filters_compose_with_and(app_client: AsyncClient, seed, catalog):
    both = (
        await app_client.get(
            "/reports", params={"status": "baru", "category_id": seed.other_category}
        )
    ).json()
    by_status = set(_ids((await app_client.get("/reports", params={"status": "baru"})).json()))
    r = await app_client.get("/reports", params={"category_id": seed.other_category})
    by_category = set(_ids(r.json()))
    assert set(_ids(both)) == by_status & by_category == {catalog["ulum"]}


@pytest.mark.asyncio
async def test_npsn_and_reporter_filters(app_client: AsyncClient, seed, catalog):
    r = await app_client.get("/reports", params={"npsn": "22222222"})
    assert _ids(r.json()) == [catalog["falah"]]

    r = await app_client.get("/reports", params={"reporter_id": seed.other_reporter})
    assert _ids(r.json()) == [catalog["ulum"], catalog["hidayah"]]


@pytest.mark.asyncio
async def test_search_matches_any_text_column_case_insensitively(
    app_client: AsyncClient, catalog
):
    r = await app_client.get("/reports", params={"search": "nurul"})
    assert _ids(r.json()) == [catalog["huda"]]

    r = await app_client.get("/reports", params={"search": "3333"})
    assert _ids(r.json()) == [catalog["hidayah"]]

    r = await app_client.get("/reports", params={"search": "TERKUNCI"})
    assert _ids(r.json()) == [catalog["hidayah"]]

    # 空白だけの search は未指定と同じ
    r = await app_client.get("/reports", params={"search": "   "})
    assert r.json()["total"] == 4


@pytest.mark.asyncio
async def test_date_range_includes_whole_end_day(app_client: AsyncClient, catalog):
    r = await app_client.get(
        "/reports", params={"date_from": "2026-02-03", "date_to": "2026-02-20"}
    )
    assert _ids(r.json()) == [catalog["hidayah"], catalog["falah"]]

    r = await app_client.get("/reports", params={"date_from": "2026-03-02"})
    assert r.json()["total"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [1, 3, 4, 5])
async def test_pages_cover_result_set_once(app_client: AsyncClient, catalog, limit):
    everything = _ids((await app_client.get("/reports", params={"limit": 100})).json())

    first = (await app_client.get("/reports", params={"limit": limit})).json()
    assert first["total_pages"] == math.ceil(4 / limit)

    collected: list[int] = []
    for page in range(1, first["total_pages"] + 1):
        body = (await app_client.get("/reports", params={"limit": limit, "page": page})).json()
        assert body["total"] == 4
        collected.extend(_ids(body))
    assert collected == everything


@pytest.mark.asyncio
async def test_page_past_the_end_is_empty(app_client: AsyncClient, catalog):
    body = (await app_client.get("/reports", params={"limit": 3, "page": 5})).json()
    assert body["data"] == []
    assert body["total"] == 4


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}, {"status": "x"}])
async def test_invalid_list_params_are_rejected(app_client: AsyncClient, params):
    r = await app_client.get("/reports", params=params)
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_by_user_pins_reporter(app_client: AsyncClient, seed, catalog):
    r = await app_client.get(f"/reports/by-user/{seed.reporter}")
    assert _ids(r.json()) == [catalog["falah"], catalog["huda"]]

    # reporter_id を渡しても path の user_id が優先される
    r = await app_client.get(
        f"/reports/by-user/{seed.reporter}",
        params={"reporter_id": seed.other_reporter, "status": "proses"},
    )
    assert _ids(r.json()) == [catalog["falah"]]


@pytest.mark.asyncio
async def test_empty_result_has_zero_pages(app_client: AsyncClient, seed):
    body = (await app_client.get("/reports")).json()
    assert body == {"total": 0, "page": 1, "limit": 10, "total_pages": 0, "data": []}


@pytest.mark.asyncio
async def test_search_wildcards_match_literally(app_client: AsyncClient, make_report, catalog):
    for term in ("%", "_", "MI_"):
        r = await app_client.get("/reports", params={"search": term})
        assert r.json()["total"] == 0

    kuota = await make_report(issue_description="Kuota 100% habis, tidak bisa unggah berkas")
    r = await app_client.get("/reports", params={"search": "100%"})
    assert _ids(r.json()) == [kuota]
    r = await app_client.get("/export/reports.csv", params={"search": "%"})
    assert r.text.count("\n") == 2
