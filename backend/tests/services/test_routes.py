"""HTTP surface — status codes, camelCase bodies and the error envelope.

Tests cover:
    - Health and readiness checks
    - Slug availability check (400 on malformed slug)
    - Creator signup: 201 with user + tokens, 409 on duplicates, 400 on bad input
    - Login, me, refresh and logout
    - Store builder and product endpoints behind bearer auth, with ownership 403
    - PATCH bodies refuse null for required fields; single-product read is public
    - Users directory: own profile, public listing and lookup, account deletion
    - Database failures surface as the 503 envelope
    - Reorder endpoints answer with the freshly ordered list
    - Public storefront: published content only, 404 for unknown slugs
"""

import pytest
from sqlalchemy.exc import IntegrityError

from app.services.product_catalog import ProductCatalogService


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def _creator_signup(client, slug="acme", email="ada@example.com", username="ada"):
    resp = await client.post("/api/v1/auth/creator-signup", json={
        "email": email,
        "username": username,
        "password": "correct-horse",
        "slug": slug,
        "fullName": "Ada Lovelace",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
async def acme(client):
    body = await _creator_signup(client)
    store = (await client.get(
        "/api/v1/stores/self", headers=bearer(body["accessToken"]),
    )).json()
    return {"token": body["accessToken"], "store_id": store["id"], "auth": body}


# ─── Health & slugs ─────────────────────────────────────────────

async def test_health_and_readiness(client):
    assert (await client.get("/api/v1/health/")).json()["status"] == "healthy"
    ready = await client.get("/api/v1/health/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"]["database"] == "healthy"


@pytest.mark.parametrize("slug", ["ab", "Acme", "acme_shop", "a" * 31])
async def test_slug_check_rejects_malformed(client, slug):
    resp = await client.get("/api/v1/store-slugs/check", params={"slug": slug})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_slug_check_reports_taken_after_signup(client):
    resp = await client.get("/api/v1/store-slugs/check", params={"slug": "acme"})
    assert resp.json()["available"] is True

    await _creator_signup(client)

    resp = await client.get("/api/v1/store-slugs/check", params={"slug": "acme"})
    assert resp.status_code == 200
    assert resp.json() == {"available": False, "message": "Slug is already in use"}


# ─── Auth ───────────────────────────────────────────────────────

async def test_creator_signup_returns_camel_case_body(client, events):
    body = await _creator_signup(client)

    assert body["user"]["role"] == "CREATOR"
    assert body["user"]["storeSlug"] == "acme"
    assert body["user"]["creatorProfile"] == {
        "fullName": "Ada Lovelace", "timezone": "UTC",
    }
    assert body["accessToken"] and body["refreshToken"]
    assert "CREATOR_REGISTERED" in events.types()


@pytest.mark.parametrize("override, field", [
    ({"slug": "other"}, "email"),
    ({"slug": "other", "email": "new@example.com"}, "username"),
    ({"email": "new@example.com", "username": "newbie"}, "slug"),
])
async def test_creator_signup_conflicts(client, override, field):
    await _creator_signup(client)
    payload = {
        "email": "ada@example.com", "username": "ada", "password": "correct-horse",
        "slug": "acme", "fullName": "Ada Lovelace", **override,
    }
    resp = await client.post("/api/v1/auth/creator-signup", json=payload)

    assert resp.status_code == 409
    error = resp.json()["error"]
    assert error["code"] == "CONFLICT"
    assert error["context"]["field"] == field


@pytest.mark.parametrize("override", [
    {"email": "not-an-email"},
    {"password": "short"},
    {"slug": "ACME"},
    {"fullName": "   "},
])
async def test_creator_signup_validation(client, override):
    payload = {
        "email": "ada@example.com", "username": "ada", "password": "correct-horse",
        "slug": "acme", "fullName": "Ada Lovelace", **override,
    }
    resp = await client.post("/api/v1/auth/creator-signup", json=payload)
    assert resp.status_code == 400


async def test_plain_signup(client):
    resp = await client.post("/api/v1/auth/signup", json={
        "email": "Bob@Example.com", "username": "bob", "password": "correct-horse",
    })
    assert resp.status_code == 201
    user = resp.json()["user"]
    assert user["email"] == "bob@example.com"
    assert user["role"] == "USER"
    assert user["storeSlug"] is None


async def test_login_me_refresh_logout(client):
    await _creator_signup(client)
    resp = await client.post("/api/v1/auth/login", json={
        "email": "ada@example.com", "password": "correct-horse",
    })
    assert resp.status_code == 200
    tokens = resp.json()

    me = await client.get("/api/v1/auth/me", headers=bearer(tokens["accessToken"]))
    assert me.json()["username"] == "ada"
    assert me.json()["creatorProfile"]["fullName"] == "Ada Lovelace"

    rotated = await client.post(
        "/api/v1/auth/refresh", json={"refreshToken": tokens["refreshToken"]},
    )
    assert rotated.status_code == 200
    reused = await client.post(
        "/api/v1/auth/refresh", json={"refreshToken": tokens["refreshToken"]},
    )
    assert reused.status_code == 401

    out = await client.post(
        "/api/v1/auth/logout", headers=bearer(tokens["accessToken"]),
    )
    assert out.status_code == 204
    after = await client.post(
        "/api/v1/auth/refresh",
        json={"refreshToken": rotated.json()["refreshToken"]},
    )
    assert after.status_code == 401


async def test_login_wrong_password(client):
    await _creator_signup(client)
    resp = await client.post("/api/v1/auth/login", json={
        "email": "ada@example.com", "password": "wrong-horse",
    })
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.parametrize("password", ["p" * 100, "\u00e9" * 40])
async def test_signup_rejects_passwords_over_72_bytes(client, password):
    creator = await client.post("/api/v1/auth/creator-signup", json={
        "email": "ada@example.com", "username": "ada", "password": password,
        "slug": "acme", "fullName": "Ada Lovelace",
    })
    plain = await client.post("/api/v1/auth/signup", json={
        "email": "bob@example.com", "username": "bob", "password": password,
    })

    for resp in (creator, plain):
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    check = await client.get("/api/v1/store-slugs/check", params={"slug": "acme"})
    assert check.json()["available"] is True


async def test_login_with_overlong_password_is_401(client):
    await _creator_signup(client)
    resp = await client.post("/api/v1/auth/login", json={
        "email": "ada@example.com", "password": "p" * 100,
    })
    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "Invalid credentials"


async def test_missing_and_bad_tokens_are_401(client):
    assert (await client.get("/api/v1/auth/me")).status_code == 401
    resp = await client.get("/api/v1/auth/me", headers=bearer("garbage"))
    assert resp.status_code == 401


# ─── Store builder ──────────────────────────────────────────────

async def test_store_self_and_update(client, acme):
    resp = await client.patch(
        f"/api/v1/stores/{acme['store_id']}",
        json={"name": "Acme Goods", "type": "funnel"},
        headers=bearer(acme["token"]),
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Acme Goods"
    assert resp.json()["type"] == "funnel"
    assert resp.json()["slug"] == "acme"


@pytest.mark.parametrize("body", [{"name": None}, {"type": None}])
async def test_store_update_refuses_null_for_required_fields(client, acme, body):
    resp = await client.patch(
        f"/api/v1/stores/{acme['store_id']}", json=body, headers=bearer(acme["token"]),
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_store_update_clears_description(client, acme):
    headers = bearer(acme["token"])
    url = f"/api/v1/stores/{acme['store_id']}"
    await client.patch(url, json={"description": "Tools"}, headers=headers)
    resp = await client.patch(url, json={"description": None}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["description"] is None
    assert resp.json()["name"]


async def test_sections_crud_and_reorder(client, acme):
    headers = bearer(acme["token"])
    base = f"/api/v1/stores/{acme['store_id']}/sections"
    first = (await client.post(base, json={"type": "title"}, headers=headers)).json()
    second = (await client.post(
        base, json={"type": "external_link", "data": {"url": "https://x.test"}},
        headers=headers,
    )).json()
    assert (first["position"], second["position"]) == (0, 1)
    assert first["storeId"] == acme["store_id"]

    resp = await client.patch(f"{base}/order", json={"sections": [
        {"id": first["id"], "position": 1}, {"id": second["id"], "position": 0},
    ]}, headers=headers)
    assert resp.status_code == 200
    assert [s["id"] for s in resp.json()["sections"]] == [second["id"], first["id"]]

    hidden = await client.patch(
        f"/api/v1/sections/{first['id']}", json={"status": 2}, headers=headers,
    )
    assert hidden.json()["status"] == 2

    gone = await client.delete(f"/api/v1/sections/{first['id']}", headers=headers)
    assert gone.status_code == 204
    listed = (await client.get(base)).json()["sections"]
    assert [s["id"] for s in listed] == [second["id"]]


async def test_section_update_refuses_null_data(client, acme):
    headers = bearer(acme["token"])
    section = (await client.post(
        f"/api/v1/stores/{acme['store_id']}/sections", json={"type": "title"},
        headers=headers,
    )).json()

    resp = await client.patch(
        f"/api/v1/sections/{section['id']}", json={"data": None}, headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_reorder_rejects_bad_batches(client, acme):
    headers = bearer(acme["token"])
    base = f"/api/v1/stores/{acme['store_id']}/sections"
    section = (await client.post(base, json={"type": "title"}, headers=headers)).json()

    duplicate = await client.patch(f"{base}/order", json={"sections": [
        {"id": section["id"], "position": 0}, {"id": section["id"], "position": 1},
    ]}, headers=headers)
    assert duplicate.status_code == 400

    negative = await client.patch(f"{base}/order", json={"sections": [
        {"id": section["id"], "position": -1},
    ]}, headers=headers)
    assert negative.status_code == 400

    empty = await client.patch(f"{base}/order", json={"sections": []}, headers=headers)
    assert empty.status_code == 400

    unknown = await client.patch(f"{base}/order", json={"sections": [
        {"id": "00000000-0000-0000-0000-000000000000", "position": 0},
    ]}, headers=headers)
    assert unknown.status_code == 404


async def test_non_owner_gets_403(client, acme):
    other = await _creator_signup(
        client, slug="rival", email="grace@example.com", username="grace",
    )
    resp = await client.post(
        f"/api/v1/stores/{acme['store_id']}/sections",
        json={"type": "title"}, headers=bearer(other["accessToken"]),
    )
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "FORBIDDEN"


async def test_mutation_without_token_is_401(client, acme):
    resp = await client.post(
        f"/api/v1/stores/{acme['store_id']}/sections", json={"type": "title"},
    )
    assert resp.status_code == 401


async def test_pages_blocks_and_theme(client, acme):
    headers = bearer(acme["token"])
    store_id = acme["store_id"]
    page = (await client.post(
        f"/api/v1/stores/{store_id}/pages",
        json={"slug": "ebook", "type": "digital-download"}, headers=headers,
    )).json()
    dup = await client.post(
        f"/api/v1/stores/{store_id}/pages",
        json={"slug": "ebook", "type": "course"}, headers=headers,
    )
    assert dup.status_code == 409

    hero = (await client.post(
        f"/api/v1/pages/{page['id']}/blocks", json={"type": "hero"}, headers=headers,
    )).json()
    faq = (await client.post(
        f"/api/v1/pages/{page['id']}/blocks", json={"type": "faq"}, headers=headers,
    )).json()
    resp = await client.patch(f"/api/v1/pages/{page['id']}/blocks/order", json={
        "blocks": [{"id": faq["id"], "position": 0}, {"id": hero["id"], "position": 1}],
    }, headers=headers)
    assert [b["type"] for b in resp.json()["blocks"]] == ["faq", "hero"]

    theme = await client.patch(
        f"/api/v1/stores/{store_id}/theme",
        json={"config": {"primaryColor": "#FF0000"}}, headers=headers,
    )
    assert theme.json()["config"]["primaryColor"] == "#FF0000"
    assert theme.json()["config"]["fontFamily"] == "Inter"

    deleted = await client.delete(f"/api/v1/pages/{page['id']}", headers=headers)
    assert deleted.status_code == 204
    blocks = await client.get(f"/api/v1/pages/{page['id']}/blocks")
    assert blocks.status_code == 404


# ─── Products ───────────────────────────────────────────────────

async def test_products_flow(client, acme):
    headers = bearer(acme["token"])
    ebook = (await client.post("/api/v1/products", json={
        "type": "DIGITAL", "title": "E-book", "price": 9.5,
    }, headers=headers))
    assert ebook.status_code == 201
    ebook = ebook.json()
    assert ebook["status"] == "DRAFT"
    assert ebook["currency"] == "USD"

    course = (await client.post("/api/v1/products", json={
        "type": "COURSE", "title": "Course", "price": 99, "thumbnailUrl": "https://x.test/c.png",
    }, headers=headers)).json()
    assert course["position"] == 1
    assert course["thumbnailUrl"] == "https://x.test/c.png"

    reordered = await client.patch("/api/v1/products/reorder", json={"products": [
        {"id": course["id"], "position": 0}, {"id": ebook["id"], "position": 1},
    ]}, headers=headers)
    assert [p["title"] for p in reordered.json()["products"]] == ["Course", "E-book"]

    published = await client.patch(
        f"/api/v1/products/{ebook['id']}/status",
        json={"status": "PUBLISHED"}, headers=headers,
    )
    assert published.json()["status"] == "PUBLISHED"

    listed = await client.get("/api/v1/products", headers=headers)
    assert len(listed.json()["products"]) == 2


async def test_product_read_is_public(client, acme):
    product = (await client.post("/api/v1/products", json={
        "type": "DIGITAL", "title": "E-book", "price": 9.5,
    }, headers=bearer(acme["token"]))).json()

    resp = await client.get(f"/api/v1/products/{product['id']}")
    assert resp.status_code == 200
    assert resp.json()["title"] == "E-book"


@pytest.mark.parametrize("body", [
    {"title": None}, {"price": None}, {"currency": None}, {"status": None},
])
async def test_product_update_refuses_null_for_required_fields(client, acme, body):
    headers = bearer(acme["token"])
    product = (await client.post("/api/v1/products", json={
        "type": "DIGITAL", "title": "E-book", "price": 9.5,
    }, headers=headers)).json()

    resp = await client.patch(
        f"/api/v1/products/{product['id']}", json=body, headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_product_update_clears_optional_fields(client, acme):
    headers = bearer(acme["token"])
    product = (await client.post("/api/v1/products", json={
        "type": "DIGITAL", "title": "E-book", "price": 9.5,
        "description": "Short read", "thumbnailUrl": "https://x.test/e.png",
    }, headers=headers)).json()

    resp = await client.patch(f"/api/v1/products/{product['id']}", json={
        "description": None, "thumbnailUrl": None,
    }, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["description"] is None
    assert resp.json()["thumbnailUrl"] is None
    assert resp.json()["title"] == "E-book"


async def test_products_require_creator_profile(client):
    resp = await client.post("/api/v1/auth/signup", json={
        "email": "bob@example.com", "username": "bob", "password": "correct-horse",
    })
    resp = await client.get(
        "/api/v1/products", headers=bearer(resp.json()["accessToken"]),
    )
    assert resp.status_code == 404
    assert "creator-signup" in resp.json()["error"]["message"]


# ─── Public storefront ──────────────────────────────────────────

async def test_public_store_shows_published_only(client, acme):
    headers = bearer(acme["token"])
    draft = (await client.post("/api/v1/products", json={
        "type": "DIGITAL", "title": "Draft", "price": 1,
    }, headers=headers)).json()
    live = (await client.post("/api/v1/products", json={
        "type": "DIGITAL", "title": "Live", "price": 1,
    }, headers=headers)).json()
    await client.patch(
        f"/api/v1/products/{live['id']}/status",
        json={"status": "PUBLISHED"}, headers=headers,
    )

    resp = await client.get("/public/store/acme")
    assert resp.status_code == 200
    body = resp.json()
    assert body["slug"] == "acme"
    assert body["creatorProfile"]["fullName"] == "Ada Lovelace"
    assert "email" not in body["creatorProfile"]
    assert [p["id"] for p in body["products"]] == [live["id"]]

    preview = await client.get("/api/v1/stores/self/preview", headers=headers)
    assert {p["id"] for p in preview.json()["products"]} == {draft["id"], live["id"]}


async def test_public_store_unknown_slug(client):
    resp = await client.get("/public/store/nobody")
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Store not found or is not active"


# ─── Users ──────────────────────────────────────────────────────

async def test_own_profile_read_and_update(client, acme):
    headers = bearer(acme["token"])
    me = await client.get("/api/v1/users/profile", headers=headers)
    assert me.status_code == 200
    assert me.json()["creatorProfile"]["fullName"] == "Ada Lovelace"

    await client.put("/api/v1/users/profile", json={
        "creatorProfile": {"bio": "Analyst", "socials": {"x": "@ada", "github": "ada"}},
    }, headers=headers)
    resp = await client.put("/api/v1/users/profile", json={
        "creatorProfile": {"socials": {"x": "@countess"}},
    }, headers=headers)

    assert resp.status_code == 200
    profile = resp.json()["creatorProfile"]
    assert profile["bio"] == "Analyst"
    assert profile["socials"] == {"x": "@countess", "github": "ada"}
    assert (await client.get("/api/v1/users/profile")).status_code == 401


@pytest.mark.parametrize("creator_profile", [
    {"fullName": None},
    {"bio": "x" * 501},
    {"profileImage": "not-a-url"},
])
async def test_profile_update_validation(client, acme, creator_profile):
    resp = await client.put(
        "/api/v1/users/profile", json={"creatorProfile": creator_profile},
        headers=bearer(acme["token"]),
    )
    assert resp.status_code == 400


async def test_plain_account_creates_profile(client):
    signup = (await client.post("/api/v1/auth/signup", json={
        "email": "bob@example.com", "username": "bob", "password": "correct-horse",
    })).json()
    headers = bearer(signup["accessToken"])

    missing = await client.put("/api/v1/users/profile", json={
        "creatorProfile": {"bio": "hi"},
    }, headers=headers)
    assert missing.status_code == 400
    assert missing.json()["error"]["code"] == "INVALID_INPUT"

    created = await client.put("/api/v1/users/profile", json={
        "creatorProfile": {"fullName": "Bob Builder"},
    }, headers=headers)
    assert created.status_code == 200
    assert created.json()["creatorProfile"]["fullName"] == "Bob Builder"
    assert created.json()["creatorProfile"]["socials"] == {}


async def test_user_directory_is_public(client, acme):
    await _creator_signup(client, slug="rival", email="grace@example.com", username="grace")
    await client.post("/api/v1/auth/signup", json={
        "email": "bob@example.com", "username": "bob", "password": "correct-horse",
    })

    resp = await client.get("/api/v1/users", params={"page": 1, "limit": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert body["meta"] == {"total": 3, "page": 1, "limit": 2, "totalPages": 2}
    assert [u["username"] for u in body["users"]] == ["bob", "grace"]
    assert body["users"][0]["creatorProfile"] is None

    default = (await client.get("/api/v1/users")).json()
    assert default["meta"]["limit"] == 20
    assert len(default["users"]) == 3

    ada_id = acme["auth"]["user"]["id"]
    one = await client.get(f"/api/v1/users/{ada_id}")
    assert one.status_code == 200
    assert one.json()["username"] == "ada"
    assert "passwordHash" not in one.json()


@pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}])
async def test_user_listing_rejects_bad_paging(client, params):
    resp = await client.get("/api/v1/users", params=params)
    assert resp.status_code == 400


async def test_unknown_user_is_404(client):
    resp = await client.get("/api/v1/users/00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "User not found"


async def test_delete_own_account_frees_slug(client, acme):
    headers = bearer(acme["token"])
    ada_id = acme["auth"]["user"]["id"]

    resp = await client.delete("/api/v1/users/profile", headers=headers)
    assert resp.status_code == 204

    assert (await client.get(f"/api/v1/users/{ada_id}")).status_code == 404
    assert (await client.get("/public/store/acme")).status_code == 404
    check = await client.get("/api/v1/store-slugs/check", params={"slug": "acme"})
    assert check.json()["available"] is True
    login = await client.post("/api/v1/auth/login", json={
        "email": "ada@example.com", "password": "correct-horse",
    })
    assert login.status_code == 401
    await _creator_signup(client)


# ─── Database errors ────────────────────────────────────────────

async def test_database_failure_maps_to_503(client, acme, monkeypatch):
    async def broken(self, account_id):
        raise IntegrityError("INSERT", {}, Exception("constraint failed"))

    monkeypatch.setattr(ProductCatalogService, "list_products", broken)
    resp = await client.get("/api/v1/products", headers=bearer(acme["token"]))

    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "DATABASE_ERROR"
