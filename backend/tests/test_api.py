"""
API tests for albums, photos, stories and share links.
"""
import pytest

from app.core.config import settings


def jpeg_file(name: str = "beach.jpg", size: int = 2048):
    return {"file": (name, b"\xff\xd8" + b"\x00" * size, "image/jpeg")}


async def create_album(client, headers, title: str = "Lisbon") -> dict:
    response = await client.post("/api/v1/albums", json={"title": title}, headers=headers)
    assert response.status_code == 201
    return response.json()


async def upload(client, headers, album_id: str, name: str = "beach.jpg") -> dict:
    response = await client.post(
        "/api/v1/photos", data={"album_id": album_id}, files=jpeg_file(name), headers=headers
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"

    response = await client.get("/")
    assert response.json()["name"] == settings.APP_NAME


@pytest.mark.asyncio
@pytest.mark.parametrize("method,path", [
    ("get", "/api/v1/albums"),
    ("post", "/api/v1/photos"),
    ("delete", "/api/v1/photos/some-id"),
    ("post", "/api/v1/share"),
    ("get", "/api/v1/stories"),
])
async def test_requires_authentication(client, method, path):
    response = await client.request(method.upper(), path)

    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client):
    response = await client.get("/api/v1/albums", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_share_and_view_lifecycle(client, storage, owner_headers):
    """Create, upload, share, view, delete photo, expired link."""
    album = await create_album(client, owner_headers)
    photo = await upload(client, owner_headers, album["id"])

    assert photo["url"].startswith(f"{storage.base_url}/")
    response = await client.get(f"/api/v1/albums/{album['id']}", headers=owner_headers)
    assert response.json()["cover_photo_url"] == photo["url"]

    response = await client.post("/api/v1/share", json={"album_id": album["id"]}, headers=owner_headers)
    assert response.status_code == 201
    link = response.json()
    assert link["expires_at"] is None
    assert link["share_url"].endswith(f"/share/{link['token']}")

    # Anonymous view
    response = await client.get(f"/api/v1/shared/{link['token']}")
    assert response.status_code == 200
    shared = response.json()
    assert shared["album"]["id"] == album["id"]
    assert [p["url"] for p in shared["photos"]] == [photo["url"]]
    assert shared["stories"] == []

    response = await client.delete(f"/api/v1/photos/{photo['id']}", headers=owner_headers)
    assert response.status_code == 204
    assert storage.objects == {}
    response = await client.get(f"/api/v1/albums/{album['id']}", headers=owner_headers)
    assert response.json()["cover_photo_url"] is None

    response = await client.post(
        "/api/v1/share", json={"album_id": album["id"], "expires_in": -1}, headers=owner_headers
    )
    expired = response.json()
    response = await client.get(f"/api/v1/shared/{expired['token']}")
    assert response.status_code == 410
    assert response.json()["code"] == "GONE"


@pytest.mark.asyncio
async def test_unknown_share_token_is_not_found(client):
    response = await client.get("/api/v1/shared/does-not-exist")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_revoke_share_link(client, owner_headers, stranger_headers):
    album = await create_album(client, owner_headers)
    response = await client.post("/api/v1/share", json={"album_id": album["id"]}, headers=owner_headers)
    token = response.json()["token"]

    response = await client.delete(f"/api/v1/share/{token}", headers=stranger_headers)
    assert response.status_code == 404

    response = await client.get(f"/api/v1/share?album_id={album['id']}", headers=owner_headers)
    assert [link["token"] for link in response.json()] == [token]

    response = await client.delete(f"/api/v1/share/{token}", headers=owner_headers)
    assert response.status_code == 204
    response = await client.get(f"/api/v1/shared/{token}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_share_with_huge_ttl_is_rejected(client, owner_headers):
    album = await create_album(client, owner_headers)

    response = await client.post(
        "/api/v1/share", json={"album_id": album["id"], "expires_in": 10**12}, headers=owner_headers
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_INPUT"
    response = await client.get(f"/api/v1/share?album_id={album['id']}", headers=owner_headers)
    assert response.json() == []


@pytest.mark.asyncio
async def test_share_requires_album_id(client, owner_headers):
    response = await client.post("/api/v1/share", json={}, headers=owner_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_upload_requires_file_and_album(client, storage, owner_headers):
    album = await create_album(client, owner_headers)

    response = await client.post("/api/v1/photos", data={"album_id": album["id"]}, headers=owner_headers)
    assert response.status_code == 400

    response = await client.post("/api/v1/photos", files=jpeg_file(), headers=owner_headers)
    assert response.status_code == 400

    assert storage.puts == []


@pytest.mark.asyncio
async def test_oversize_upload_is_rejected(client, storage, owner_headers):
    album = await create_album(client, owner_headers)
    files = {"file": ("huge.jpg", b"\x00" * (settings.max_upload_size_bytes + 1), "image/jpeg")}

    response = await client.post(
        "/api/v1/photos", data={"album_id": album["id"]}, files=files, headers=owner_headers
    )

    assert response.status_code == 413
    assert storage.puts == []


@pytest.mark.asyncio
async def test_unsupported_file_type_is_rejected(client, storage, owner_headers):
    album = await create_album(client, owner_headers)
    files = {"file": ("notes.txt", b"hello", "text/plain")}

    response = await client.post(
        "/api/v1/photos", data={"album_id": album["id"]}, files=files, headers=owner_headers
    )

    assert response.status_code == 400
    assert storage.puts == []


@pytest.mark.asyncio
async def test_storage_outage_returns_bad_gateway(client, storage, owner_headers):
    album = await create_album(client, owner_headers)
    storage.fail_put = True

    response = await client.post(
        "/api/v1/photos", data={"album_id": album["id"]}, files=jpeg_file(), headers=owner_headers
    )

    assert response.status_code == 502
    assert response.json()["code"] == "STORAGE_ERROR"
    response = await client.get(f"/api/v1/photos?album_id={album['id']}", headers=owner_headers)
    assert response.json() == []


@pytest.mark.asyncio
async def test_other_users_cannot_touch_photos(client, owner_headers, stranger_headers):
    album = await create_album(client, owner_headers)
    photo = await upload(client, owner_headers, album["id"])

    response = await client.delete(f"/api/v1/photos/{photo['id']}", headers=stranger_headers)
    assert response.status_code == 403

    response = await client.post(
        "/api/v1/photos", data={"album_id": album["id"]}, files=jpeg_file(), headers=stranger_headers
    )
    assert response.status_code == 404

    response = await client.get(f"/api/v1/albums/{album['id']}", headers=stranger_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_album_list_shows_display_cover(client, owner_headers):
    album = await create_album(client, owner_headers)
    first = await upload(client, owner_headers, album["id"], "one.jpg")
    second = await upload(client, owner_headers, album["id"], "two.jpg")
    await client.delete(f"/api/v1/photos/{first['id']}", headers=owner_headers)

    response = await client.get("/api/v1/albums", headers=owner_headers)

    [item] = response.json()
    assert item["cover_photo_url"] is None
    assert item["display_cover_url"] == second["url"]
    assert item["photo_count"] == 1


@pytest.mark.asyncio
async def test_album_cover_must_belong_to_album(client, owner_headers):
    album = await create_album(client, owner_headers)
    photo = await upload(client, owner_headers, album["id"])
    other = await create_album(client, owner_headers, "Porto")

    response = await client.put(
        f"/api/v1/albums/{other['id']}", json={"cover_photo_url": photo["url"]}, headers=owner_headers
    )
    assert response.status_code == 400

    response = await client.put(
        f"/api/v1/albums/{album['id']}", json={"title": "Lisbon, spring"}, headers=owner_headers
    )
    assert response.status_code == 200
    assert response.json()["title"] == "Lisbon, spring"


@pytest.mark.asyncio
async def test_album_rejects_inverted_dates(client, owner_headers):
    response = await client.post(
        "/api/v1/albums",
        json={"title": "Backwards", "start_date": "2025-04-06T00:00:00", "end_date": "2025-04-02T00:00:00"},
        headers=owner_headers,
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_album_reclaims_storage(client, storage, owner_headers):
    album = await create_album(client, owner_headers)
    await upload(client, owner_headers, album["id"], "one.jpg")
    await upload(client, owner_headers, album["id"], "two.jpg")

    response = await client.delete(f"/api/v1/albums/{album['id']}", headers=owner_headers)

    assert response.status_code == 204
    assert storage.objects == {}
    response = await client.get(f"/api/v1/albums/{album['id']}", headers=owner_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stories_crud_and_shared_view(client, owner_headers, stranger_headers):
    album = await create_album(client, owner_headers)

    response = await client.post(
        "/api/v1/stories",
        json={"album_id": album["id"], "title": "Arrival", "content": "It rained."},
        headers=owner_headers,
    )
    assert response.status_code == 201
    story = response.json()

    response = await client.put(
        f"/api/v1/stories/{story['id']}", json={"content": "It poured."}, headers=stranger_headers
    )
    assert response.status_code == 403

    response = await client.put(
        f"/api/v1/stories/{story['id']}", json={"content": "It poured."}, headers=owner_headers
    )
    assert response.json()["content"] == "It poured."

    response = await client.post("/api/v1/share", json={"album_id": album["id"]}, headers=owner_headers)
    response = await client.get(f"/api/v1/shared/{response.json()['token']}")
    assert [s["title"] for s in response.json()["stories"]] == ["Arrival"]

    response = await client.delete(f"/api/v1/stories/{story['id']}", headers=owner_headers)
    assert response.status_code == 204
    response = await client.get(f"/api/v1/stories?album_id={album['id']}", headers=owner_headers)
    assert response.json() == []
