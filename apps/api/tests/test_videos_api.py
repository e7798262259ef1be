import pytest

from config import settings


@pytest.mark.asyncio
async def test_creator_publishes_video_end_to_end(client, register):
    alice, _ = await register("alice", role="creator", email="alice@x.com")

    login = await client.post("/api/auth/login", json={"username": "alice", "password": "secret123"})
    assert login.status_code == 200
    headers = {"Authorization": f"Bearer {login.json()['token']}"}

    response = await client.post(
        "/api/videos",
        json={
            "title": "Intro",
            "description": "12+ chars description",
            "url": "https://youtube.com/watch?v=abc12345678",
            "embedType": "youtube",
            "thumbnail": "https://x/y.png",
            "duration": "5:00",
            "category": "Frontend Development",
            "difficulty": "beginner",
            "tags": ["react"],
        },
        headers=headers,
    )
    assert response.status_code == 201
    video = response.json()
    assert video["creatorId"] == alice["id"]
    assert video["views"] == 0
    assert video["likes"] == 0
    assert video["dislikes"] == 0
    assert video["status"] == "active"
    assert video["tags"] == ["react"]
    assert video["embedType"] == "youtube"


@pytest.mark.asyncio
async def test_public_listing_only_shows_active_newest_first(client, register, admin, create_video):
    _, headers = await register("alice", role="creator")
    _, admin_headers = admin
    first = await create_video(headers, title="First video")
    second = await create_video(headers, title="Second video")
    third = await create_video(headers, title="Third video")

    removed = await client.patch(
        f"/api/admin/videos/{second['id']}/status",
        json={"status": "removed"},
        headers=admin_headers,
    )
    assert removed.status_code == 200

    response = await client.get("/api/videos")
    assert response.status_code == 200
    assert [video["id"] for video in response.json()] == [third["id"], first["id"]]
    assert all(video["status"] == "active" for video in response.json())


@pytest.mark.asyncio
async def test_listing_filters_by_tag_category_difficulty_and_search(client, register, create_video):
    _, headers = await register("alice", role="creator")
    react = await create_video(headers, title="Hooks in depth", tags=["React", "Hooks"])
    await create_video(headers, title="Kubernetes 101", category="DevOps", difficulty="advanced", tags=["k8s"])
    await create_video(headers, title="Vue basics", description="Not the library you expect", tags=["vue"])

    tagged = await client.get("/api/videos", params={"tag": "react"})
    assert [video["id"] for video in tagged.json()] == [react["id"]]

    devops = await client.get("/api/videos", params={"category": "DevOps", "difficulty": "advanced"})
    assert [video["title"] for video in devops.json()] == ["Kubernetes 101"]

    searched = await client.get("/api/videos", params={"search": "LIBRARY"})
    assert [video["title"] for video in searched.json()] == ["Vue basics"]

    unknown = await client.get("/api/videos", params={"category": "Gardening"})
    assert unknown.status_code == 200
    assert unknown.json() == []


@pytest.mark.asyncio
async def test_listing_paginates(client, register, create_video):
    _, headers = await register("alice", role="creator")
    ids = [(await create_video(headers, title=f"Lesson {n}"))["id"] for n in range(5)]

    page = await client.get("/api/videos", params={"limit": 2, "offset": 1})
    assert [video["id"] for video in page.json()] == [ids[3], ids[2]]

    bad = await client.get("/api/videos", params={"limit": 0})
    assert bad.status_code == 400
    assert bad.json()["detail"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_each_fetch_increments_views_by_one(client, register, create_video):
    _, headers = await register("alice", role="creator")
    video = await create_video(headers)

    for expected in range(1, 4):
        response = await client.get(f"/api/videos/{video['id']}")
        assert response.status_code == 200
        assert response.json()["views"] == expected

    listed = await client.get("/api/videos")
    assert listed.json()[0]["views"] == 3


@pytest.mark.asyncio
async def test_fetch_missing_video_is_not_found(client):
    response = await client.get("/api/videos/9999")
    assert response.status_code == 404
    assert response.json()["detail"] == {"code": "NOT_FOUND", "message": "Video not found"}

    malformed = await client.get("/api/videos/not-a-number")
    assert malformed.status_code == 400


@pytest.mark.asyncio
async def test_non_owner_creator_cannot_modify(client, register, create_video):
    _, owner_headers = await register("alice", role="creator")
    _, other_headers = await register("mallory", role="creator")
    video = await create_video(owner_headers, title="Original title")

    patch = await client.patch(f"/api/videos/{video['id']}", json={"title": "Hijacked"}, headers=other_headers)
    assert patch.status_code == 403
    assert patch.json()["detail"]["code"] == "UNAUTHORIZED"

    delete = await client.delete(f"/api/videos/{video['id']}", headers=other_headers)
    assert delete.status_code == 403

    listed = await client.get("/api/creator/videos", headers=owner_headers)
    assert listed.json()[0]["title"] == "Original title"


@pytest.mark.asyncio
async def test_owner_and_admin_can_update(client, register, admin, create_video):
    _, owner_headers = await register("alice", role="creator")
    _, admin_headers = admin
    video = await create_video(owner_headers)

    owner_patch = await client.patch(
        f"/api/videos/{video['id']}",
        json={"title": "Intro, revised", "tags": ["react", "react", "hooks"], "thumbnail": None},
        headers=owner_headers,
    )
    assert owner_patch.status_code == 200
    body = owner_patch.json()
    assert body["title"] == "Intro, revised"
    assert body["tags"] == ["react", "react", "hooks"]
    assert body["thumbnail"] is None
    assert body["description"] == video["description"]

    admin_patch = await client.patch(
        f"/api/videos/{video['id']}",
        json={"difficulty": "advanced"},
        headers=admin_headers,
    )
    assert admin_patch.status_code == 200
    assert admin_patch.json()["difficulty"] == "advanced"


@pytest.mark.asyncio
async def test_update_cannot_change_status_or_counters(client, register, create_video):
    _, headers = await register("alice", role="creator")
    video = await create_video(headers)

    response = await client.patch(
        f"/api/videos/{video['id']}",
        json={"status": "removed", "views": 1000, "creatorId": 99},
        headers=headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "active"
    assert body["views"] == 0
    assert body["creatorId"] == video["creatorId"]


@pytest.mark.asyncio
async def test_update_rejects_null_required_fields(client, register, create_video):
    _, headers = await register("alice", role="creator")
    video = await create_video(headers)

    response = await client.patch(f"/api/videos/{video['id']}", json={"title": None}, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_create_validates_payload(client, register):
    _, headers = await register("alice", role="creator")

    response = await client.post(
        "/api/videos",
        json={
            "title": "Hi",
            "description": "short",
            "url": "https://youtube.com/watch?v=abc",
            "embedType": "dailymotion",
            "duration": "five minutes",
            "category": "DevOps",
            "difficulty": "expert",
            "tags": ["x"] * 11,
        },
        headers=headers,
    )
    assert response.status_code == 400
    fields = {error["loc"][-1] for error in response.json()["detail"]["errors"]}
    assert {"title", "description", "embedType", "duration", "difficulty", "tags"} <= fields


@pytest.mark.asyncio
async def test_embedded_videos_require_http_url(client, register, create_video):
    _, headers = await register("alice", role="creator")

    response = await client.post(
        "/api/videos",
        json={
            "title": "Local file",
            "description": "Should be rejected for youtube embeds.",
            "url": "uploads/intro.mp4",
            "embedType": "youtube",
            "category": "DevOps",
            "difficulty": "beginner",
        },
        headers=headers,
    )
    assert response.status_code == 400

    upload = await create_video(headers, url="uploads/intro.mp4", embedType="upload", thumbnail=None, duration=None)
    assert upload["url"] == "uploads/intro.mp4"
    assert upload["thumbnail"] is None
    assert upload["duration"] is None


@pytest.mark.asyncio
async def test_delete_removes_video_and_dependents(client, register, create_video):
    _, owner_headers = await register("alice", role="creator")
    _, viewer_headers = await register("viewer1")
    video = await create_video(owner_headers)

    await client.post(f"/api/videos/{video['id']}/comments", json={"content": "Nice"}, headers=viewer_headers)
    await client.post("/api/watch-later", json={"videoId": video["id"]}, headers=viewer_headers)
    await client.post("/api/watch-history", json={"videoId": video["id"], "progress": 10}, headers=viewer_headers)

    response = await client.delete(f"/api/videos/{video['id']}", headers=owner_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Video deleted successfully"

    assert (await client.get(f"/api/videos/{video['id']}")).status_code == 404
    assert (await client.get("/api/watch-later", headers=viewer_headers)).json() == []
    assert (await client.get("/api/watch-history", headers=viewer_headers)).json() == []
    assert (await client.delete(f"/api/videos/{video['id']}", headers=owner_headers)).status_code == 404


@pytest.mark.asyncio
async def test_reactions_increment_without_dedup(client, register, create_video):
    _, owner_headers = await register("alice", role="creator")
    _, viewer_headers = await register("viewer1")
    video = await create_video(owner_headers)

    for _ in range(2):
        liked = await client.post(f"/api/videos/{video['id']}/like", json={"isLike": True}, headers=viewer_headers)
        assert liked.status_code == 200
    disliked = await client.post(f"/api/videos/{video['id']}/like", json={"isLike": False}, headers=viewer_headers)

    assert disliked.json()["likes"] == 2
    assert disliked.json()["dislikes"] == 1


@pytest.mark.asyncio
async def test_reaction_requires_auth_boolean_and_existing_video(client, register, create_video):
    _, owner_headers = await register("alice", role="creator")
    video = await create_video(owner_headers)

    anonymous = await client.post(f"/api/videos/{video['id']}/like", json={"isLike": True})
    assert anonymous.status_code == 401

    not_bool = await client.post(f"/api/videos/{video['id']}/like", json={"isLike": "yes"}, headers=owner_headers)
    assert not_bool.status_code == 400

    missing = await client.post("/api/videos/9999/like", json={"isLike": True}, headers=owner_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_creator_dashboard_is_scoped_to_caller(client, register, admin, create_video, monkeypatch):
    _, alice_headers = await register("alice", role="creator")
    _, bob_headers = await register("bob", role="creator")
    await create_video(alice_headers, title="Alice one")
    await create_video(bob_headers, title="Bob one")

    monkeypatch.setattr(settings, "VIDEO_DEFAULT_STATUS", "pending")
    await create_video(alice_headers, title="Alice draft")

    response = await client.get("/api/creator/videos", headers=alice_headers)
    assert response.status_code == 200
    assert [video["title"] for video in response.json()] == ["Alice draft", "Alice one"]

    pending_only = await client.get("/api/creator/videos", params={"status": "pending"}, headers=alice_headers)
    assert [video["title"] for video in pending_only.json()] == ["Alice draft"]

    _, viewer_headers = await register("viewer1")
    assert (await client.get("/api/creator/videos", headers=viewer_headers)).status_code == 403
