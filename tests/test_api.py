"""HTTP surface: auth, listings, moderation and swaps."""

import pytest

from helpers import auth_header, reload

pytestmark = pytest.mark.asyncio

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    assert r.headers["X-Request-ID"]


async def test_register_login_profile(client):
    r = await client.post(
        "/v1/auth/register",
        json={"email": " Sarah@Example.com ", "password": "secret123", "name": "  Sarah "},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["user"]["email"] == "sarah@example.com"
    assert body["user"]["name"] == "Sarah"
    assert body["user"]["points"] == 100
    assert body["user"]["role"] == "user"

    r = await client.post("/v1/auth/login", json={"email": "sarah@example.com", "password": "secret123"})
    assert r.status_code == 200
    token = r.json()["token"]

    r = await client.get("/v1/user/profile", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["points"] == 100


async def test_register_duplicate_and_validation(client):
    payload = {"email": "dup@example.com", "password": "secret123", "name": "Dup"}
    assert (await client.post("/v1/auth/register", json=payload)).status_code == 201
    r = await client.post("/v1/auth/register", json=payload)
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "User already exists"

    r = await client.post("/v1/auth/register", json={"email": "x@example.com", "password": "123", "name": "Xy"})
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"
    r = await client.post("/v1/auth/register", json={"email": "not-an-email", "password": "secret123", "name": "Xy"})
    assert r.status_code == 422


@pytest.mark.parametrize("email", ["foo@@bar.com", "foo@bar", "@bar.com", "foo bar@baz.com"])
async def test_register_rejects_malformed_email(client, email):
    r = await client.post("/v1/auth/register", json={"email": email, "password": "secret123", "name": "Xy"})
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_register_password_limit_counts_bytes(client):
    # 40 characters, 80 bytes
    r = await client.post("/v1/auth/register", json={"email": "e@example.com", "password": "é" * 40, "name": "Eve"})
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"

    r = await client.post("/v1/auth/register", json={"email": "e@example.com", "password": "é" * 36, "name": "Eve"})
    assert r.status_code == 201
    r = await client.post("/v1/auth/login", json={"email": "e@example.com", "password": "é" * 36})
    assert r.status_code == 200


async def test_login_bad_password(client):
    await client.post("/v1/auth/register", json={"email": "a@example.com", "password": "secret123", "name": "Al"})
    r = await client.post("/v1/auth/login", json={"email": "a@example.com", "password": "wrong-pass"})
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Invalid credentials"


async def test_protected_routes_need_token(client):
    r = await client.get("/v1/user/swaps")
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "UNAUTHORIZED"
    r = await client.get("/v1/user/profile", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


async def test_item_upload_and_listing(client, make_user, admin, upload_dir):
    owner = await make_user("bob")
    r = await client.post(
        "/v1/items",
        headers=auth_header(owner),
        data={
            "title": "Wool coat",
            "description": "Warm",
            "category": "outerwear",
            "type": "coat",
            "size": "L",
            "condition": "like new",
            "tags": "winter, wool, ,warm",
        },
        files=[("images", ("coat.png", PNG, "image/png"))],
    )
    assert r.status_code == 201
    item = r.json()
    assert item["status"] == "pending"
    assert item["available"] is True
    assert item["tags"] == ["winter", "wool", "warm"]
    assert len(item["images"]) == 1

    image = await client.get(f"/v1/uploads/{item['images'][0]}")
    assert image.status_code == 200
    assert image.content == PNG
    assert image.headers["content-type"] == "image/png"

    # pending items are not listed publicly
    assert (await client.get("/v1/items")).json() == []
    assert [i["id"] for i in (await client.get("/v1/user/items", headers=auth_header(owner))).json()] == [item["id"]]

    pending = (await client.get("/v1/admin/pending-items", headers=auth_header(admin))).json()
    assert [i["id"] for i in pending] == [item["id"]]
    r = await client.put(
        f"/v1/admin/items/{item['id']}/status",
        headers=auth_header(admin),
        json={"status": "approved"},
    )
    assert r.status_code == 200
    assert r.json()["status"] == "approved"

    listed = (await client.get("/v1/items")).json()
    assert [i["id"] for i in listed] == [item["id"]]
    assert (await client.get(f"/v1/items/{item['id']}")).json()["title"] == "Wool coat"


async def test_item_upload_rejects_non_images(client, make_user):
    owner = await make_user("bob")
    r = await client.post(
        "/v1/items",
        headers=auth_header(owner),
        data={
            "title": "Scarf",
            "description": "Red",
            "category": "accessories",
            "type": "scarf",
            "size": "one",
            "condition": "good",
        },
        files=[("images", ("notes.txt", b"hello", "text/plain"))],
    )
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Only image files are allowed!"


async def test_item_not_found(client, db):
    assert (await client.get("/v1/items/000000000000000000000000")).status_code == 404
    assert (await client.get("/v1/items/not-an-id")).status_code == 404


async def test_admin_routes_forbidden_for_users(client, make_user, make_item):
    user = await make_user("eve")
    item = await make_item(user, status="pending")
    r = await client.get("/v1/admin/pending-items", headers=auth_header(user))
    assert r.status_code == 403
    r = await client.delete(f"/v1/admin/items/{item.id}", headers=auth_header(user))
    assert r.status_code == 403


async def test_admin_removes_item_and_images(client, make_user, admin, upload_dir):
    owner = await make_user("bob")
    r = await client.post(
        "/v1/items",
        headers=auth_header(owner),
        data={
            "title": "Boots",
            "description": "Leather",
            "category": "shoes",
            "type": "boots",
            "size": "42",
            "condition": "worn",
        },
        files=[("images", ("boots.png", PNG, "image/png"))],
    )
    item = r.json()
    assert (upload_dir / item["images"][0]).exists()

    r = await client.delete(f"/v1/admin/items/{item['id']}", headers=auth_header(admin))
    assert r.status_code == 200
    assert not (upload_dir / item["images"][0]).exists()
    assert (await client.get(f"/v1/items/{item['id']}")).status_code == 404


async def test_points_swap_flow(client, make_user, make_item, admin):
    a = await make_user("a", points=100)
    b = await make_user("b", points=100)
    item = await make_item(b)

    r = await client.post(
        "/v1/swaps",
        headers=auth_header(a),
        json={"itemId": str(item.id), "swapType": "points"},
    )
    assert r.status_code == 201
    swap = r.json()
    assert swap["status"] == "pending"
    assert swap["requester_id"] == str(a.id)
    assert swap["item_id"] == str(item.id)
    assert swap["swap_type"] == "points"

    mine = (await client.get("/v1/user/swaps", headers=auth_header(a))).json()
    assert [s["id"] for s in mine] == [swap["id"]]
    incoming = (await client.get("/v1/user/swaps/incoming", headers=auth_header(b))).json()
    assert [s["id"] for s in incoming] == [swap["id"]]

    r = await client.put(f"/v1/swaps/{swap['id']}/status", headers=auth_header(a), json={"status": "completed"})
    assert r.status_code == 403

    r = await client.put(f"/v1/swaps/{swap['id']}/status", headers=auth_header(b), json={"status": "completed"})
    assert r.status_code == 200
    assert r.json()["status"] == "completed"

    assert (await client.get("/v1/user/profile", headers=auth_header(a))).json()["points"] == 0
    assert (await client.get("/v1/user/profile", headers=auth_header(b))).json()["points"] == 145
    assert (await client.get("/v1/user/profile", headers=auth_header(admin))).json()["points"] == 1010
    assert (await client.get(f"/v1/items/{item.id}")).json()["available"] is False

    r = await client.put(f"/v1/swaps/{swap['id']}/status", headers=auth_header(b), json={"status": "completed"})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "STATUS_UNCHANGED"


async def test_swap_create_errors(client, make_user, make_item):
    a = await make_user("a", points=10)
    b = await make_user("b")
    gone = await make_item(b, available=False)
    open_item = await make_item(b)

    r = await client.post(
        "/v1/swaps",
        headers=auth_header(a),
        json={"itemId": "000000000000000000000000", "swapType": "direct"},
    )
    assert r.status_code == 404

    r = await client.post("/v1/swaps", headers=auth_header(a), json={"item_id": str(gone.id), "swap_type": "direct"})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "ITEM_UNAVAILABLE"

    r = await client.post("/v1/swaps", headers=auth_header(a), json={"itemId": str(open_item.id), "swapType": "points"})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "INSUFFICIENT_FUNDS"

    r = await client.post("/v1/swaps", headers=auth_header(a), json={"itemId": str(open_item.id), "swapType": "barter"})
    assert r.status_code == 422


async def test_direct_swap_insufficient_funds_over_http(client, make_user, make_item, admin):
    a = await make_user("a", points=15)
    b = await make_user("b", points=5)
    item = await make_item(b)
    r = await client.post("/v1/swaps", headers=auth_header(a), json={"itemId": str(item.id), "swapType": "direct"})
    swap_id = r.json()["id"]

    r = await client.put(f"/v1/swaps/{swap_id}/status", headers=auth_header(admin), json={"status": "completed"})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "INSUFFICIENT_FUNDS"
    assert (await reload(a)).points == 15
    assert (await reload(b)).points == 5
    assert (await reload(item)).available is True


async def test_swap_status_unknown_swap(client, make_user):
    a = await make_user("a")
    r = await client.put("/v1/swaps/not-an-id/status", headers=auth_header(a), json={"status": "accepted"})
    assert r.status_code == 404
    r = await client.put(
        "/v1/swaps/000000000000000000000000/status",
        headers=auth_header(a),
        json={"status": "pending"},
    )
    assert r.status_code == 422
