import pytest


@pytest.mark.asyncio
async def test_post_and_list_comments(client, register, create_video):
    _, creator_headers = await register("alice", role="creator")
    bob, viewer_headers = await register("bob")
    video = await create_video(creator_headers)

    created = await client.post(
        f"/api/videos/{video['id']}/comments",
        json={"content": "  Great explanation!  "},
        headers=viewer_headers,
    )
    assert created.status_code == 201
    comment = created.json()
    assert comment["content"] == "Great explanation!"
    assert comment["userId"] == bob["id"]
    assert comment["videoId"] == video["id"]
    assert comment["parentId"] is None
    assert comment["status"] == "active"
    assert comment["likes"] == 0

    listed = await client.get(f"/api/videos/{video['id']}/comments")
    assert listed.status_code == 200
    assert [item["id"] for item in listed.json()] == [comment["id"]]


@pytest.mark.asyncio
async def test_comment_requires_auth_and_content(client, register, create_video):
    _, creator_headers = await register("alice", role="creator")
    video = await create_video(creator_headers)

    anonymous = await client.post(f"/api/videos/{video['id']}/comments", json={"content": "Hi"})
    assert anonymous.status_code == 401

    blank = await client.post(f"/api/videos/{video['id']}/comments", json={"content": "   "}, headers=creator_headers)
    assert blank.status_code == 400
    assert blank.json()["detail"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_comment_on_missing_video_is_not_found(client, register):
    _, headers = await register("bob")

    response = await client.post("/api/videos/9999/comments", json={"content": "Hello?"}, headers=headers)
    assert response.status_code == 404
    assert response.json()["detail"]["message"] == "Video not found"


@pytest.mark.asyncio
async def test_replies_nest_one_level(client, register, create_video):
    _, creator_headers = await register("alice", role="creator")
    _, viewer_headers = await register("bob")
    video = await create_video(creator_headers)
    other = await create_video(creator_headers, title="Another video")

    root = (await client.post(f"/api/videos/{video['id']}/comments", json={"content": "Question"}, headers=viewer_headers)).json()
    reply = await client.post(
        f"/api/videos/{video['id']}/comments",
        json={"content": "Answer", "parentId": root["id"]},
        headers=creator_headers,
    )
    assert reply.status_code == 201
    assert reply.json()["parentId"] == root["id"]

    nested = await client.post(
        f"/api/videos/{video['id']}/comments",
        json={"content": "Follow-up", "parentId": reply.json()["id"]},
        headers=viewer_headers,
    )
    assert nested.status_code == 400

    cross_video = await client.post(
        f"/api/videos/{other['id']}/comments",
        json={"content": "Wrong thread", "parentId": root["id"]},
        headers=viewer_headers,
    )
    assert cross_video.status_code == 400

    dangling = await client.post(
        f"/api/videos/{video['id']}/comments",
        json={"content": "Nobody home", "parentId": 9999},
        headers=viewer_headers,
    )
    assert dangling.status_code == 400

    listed = await client.get(f"/api/videos/{video['id']}/comments")
    assert len(listed.json()) == 2
    assert (await client.get(f"/api/videos/{other['id']}/comments")).json() == []


@pytest.mark.asyncio
async def test_comment_like_counts_every_request(client, register, create_video):
    _, creator_headers = await register("alice", role="creator")
    _, viewer_headers = await register("bob")
    video = await create_video(creator_headers)
    other = await create_video(creator_headers, title="Another video")
    comment = (await client.post(f"/api/videos/{video['id']}/comments", json={"content": "Nice"}, headers=viewer_headers)).json()

    for expected in (1, 2):
        liked = await client.post(f"/api/videos/{video['id']}/comments/{comment['id']}/like", headers=viewer_headers)
        assert liked.status_code == 200
        assert liked.json()["likes"] == expected

    wrong_video = await client.post(f"/api/videos/{other['id']}/comments/{comment['id']}/like", headers=viewer_headers)
    assert wrong_video.status_code == 404

    anonymous = await client.post(f"/api/videos/{video['id']}/comments/{comment['id']}/like")
    assert anonymous.status_code == 401
