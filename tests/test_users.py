import pytest
from httpx import AsyncClient

from conftest import PASSWORD


def _new_user(**overrides):
    body = {
        "username": "operator3",
        "name": "Rina Wati",
        "email": "rina@example.com",
        "password": "operator-rahasia",
        "role": "pelapor",
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_create_user_hides_password_hash(app_client: AsyncClient, seed):
    r = await app_client.post("/users", json=_new_user())
    assert r.status_code == 201
    body = r.json()
    assert body["username"] == "operator3"
    assert body["role"] == "pelapor"
    assert body["is_active"] is True
    assert "password" not in body and "password_hash" not in body

    login = await app_client.post(
        "/auth/login", json={"username": "operator3", "password": "operator-rahasia"}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("field,value", [("username", "operator1"), ("email", "siti@example.com")])
async def test_duplicate_username_or_email_conflicts(app_client: AsyncClient, seed, field, value):
    r = await app_client.post("/users", json=_new_user(**{field: value}))
    assert r.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [{"username": "ab"}, {"password": "12345"}, {"email": "bukan-email"}, {"role": "guru"}],
)
async def test_create_user_validation(app_client: AsyncClient, seed, overrides):
    r = await app_client.post("/users", json=_new_user(**overrides))
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_list_users_search_and_filters(app_client: AsyncClient, seed):
    body = (await app_client.get("/users")).json()
    assert body["total"] == 4
    assert [u["id"] for u in body["data"]] == sorted(u["id"] for u in body["data"])

    # search は name / username / email の OR
    body = (await app_client.get("/users", params={"search": "SITI"})).json()
    assert [u["username"] for u in body["data"]] == ["operator1"]
    body = (await app_client.get("/users", params={"search": "budi@"})).json()
    assert [u["username"] for u in body["data"]] == ["operator2"]

    body = (await app_client.get("/users", params={"role": "admin", "is_active": True})).json()
    assert [u["username"] for u in body["data"]] == ["admin"]

    body = (await app_client.get("/users", params={"limit": 3, "page": 2})).json()
    assert (body["total"], body["total_pages"], len(body["data"])) == (4, 2, 1)


@pytest.mark.asyncio
async def test_get_user(app_client: AsyncClient, seed):
    r = await app_client.get(f"/users/{seed.reporter}")
    assert r.status_code == 200
    assert r.json()["name"] == "Siti Aminah"
    assert (await app_client.get("/users/9999")).status_code == 404


@pytest.mark.asyncio
async def test_update_changes_only_given_fields(app_client: AsyncClient, seed):
    before = (await app_client.get(f"/users/{seed.reporter}")).json()

    r = await app_client.patch(f"/users/{seed.reporter}", json={"name": "Siti Aminah S.Pd"})
    assert r.status_code == 200
    after = r.json()
    assert after["name"] == "Siti Aminah S.Pd"
    for key in ("username", "email", "role", "is_active", "created_at"):
        assert after[key] == before[key]


@pytest.mark.asyncio
async def test_update_password_and_conflicts(app_client: AsyncClient, seed):
    r = await app_client.patch(f"/users/{seed.reporter}", json={"password": "kata-sandi-baru"})
    assert r.status_code == 200
    login = await app_client.post(
        "/auth/login", json={"username": "operator1", "password": "kata-sandi-baru"}
    )
    assert login.status_code == 200

    r = await app_client.patch(f"/users/{seed.reporter}", json={"username": "operator2"})
    assert r.status_code == 409
    r = await app_client.patch("/users/9999", json={"name": "Tidak Ada"})
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_deactivate_is_soft(app_client: AsyncClient, seed):
    r = await app_client.delete(f"/users/{seed.other_reporter}")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

    user = (await app_client.get(f"/users/{seed.other_reporter}")).json()
    assert user["is_active"] is False

    assert (await app_client.delete("/users/9999")).status_code == 404


@pytest.mark.asyncio
async def test_reset_password(app_client: AsyncClient, seed):
    r = await app_client.post(
        f"/users/{seed.reporter}/reset-password", json={"new_password": "reset-123"}
    )
    assert r.status_code == 200

    old = await app_client.post("/auth/login", json={"username": "operator1", "password": PASSWORD})
    assert old.status_code == 401
    new = await app_client.post(
        "/auth/login", json={"username": "operator1", "password": "reset-123"}
    )
    assert new.status_code == 200

    r = await app_client.post("/users/9999/reset-password", json={"new_password": "reset-123"})
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_password_limit_counts_utf8_bytes(app_client: AsyncClient, seed):
    # 40 文字でも 80 バイトになるので bcrypt に渡す前に 422
    too_long = "é" * 40
    r = await app_client.post("/users", json=_new_user(password=too_long))
    assert r.status_code == 422
    r = await app_client.patch(f"/users/{seed.reporter}", json={"password": too_long})
    assert r.status_code == 422
    r = await app_client.post(
        f"/users/{seed.reporter}/reset-password", json={"new_password": too_long}
    )
    assert r.status_code == 422

    fits = "é" * 36
    r = await app_client.post("/users", json=_new_user(password=fits))
    assert r.status_code == 201
    login = await app_client.post("/auth/login", json={"username": "operator3", "password": fits})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_username_longer_than_column_is_rejected(app_client: AsyncClient, seed):
    r = await app_client.post("/users", json=_new_user(username="u" * 65))
    assert r.status_code == 422
    r = await app_client.patch(f"/users/{seed.reporter}", json={"username": "u" * 65})
    assert r.status_code == 422

    r = await app_client.post("/users", json=_new_user(username="u" * 64))
    assert r.status_code == 201


@pytest.mark.asyncio
async def test_user_search_treats_wildcards_literally(app_client: AsyncClient, seed):
    body = (await app_client.get("/users", params={"search": "%"})).json()
    assert body["total"] == 0

    # "_" は任意の1文字ではなく文字そのもの
    body = (await app_client.get("/users", params={"search": "_"})).json()
    assert [u["username"] for u in body["data"]] == ["admin_lama"]

    await app_client.post("/users", json=_new_user(username="op_baru"))
    body = (await app_client.get("/users", params={"search": "_"})).json()
    assert [u["username"] for u in body["data"]] == ["admin_lama", "op_baru"]
