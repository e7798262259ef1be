import pytest
import pytest_asyncio

from services.storage import VideoQuery


def _fields(title, **overrides):
    fields = {
        "title": title,
        "description": "A walkthrough for working developers.",
        "url": "https://www.youtube.com/watch?v=abc12345678",
        "embed_type": "youtube",
        "thumbnail": None,
        "duration": None,
        "category": "Frontend Development",
        "difficulty": "beginner",
        "tags": [],
    }
    fields.update(overrides)
    return fields


@pytest_asyncio.fixture
async def catalog(storage):
    alice = await storage.create_user(username="alice", email="alice@x.com", password_hash="x", role="creator")
    bob = await storage.create_user(username="bob", email="bob@x.com", password_hash="x", role="creator")
    videos = {
        "hooks": await storage.create_video(
            creator_id=alice.id,
            status="active",
            fields=_fields("React Hooks", tags=["React", "Hooks"], difficulty="intermediate"),
        ),
        "docker": await storage.create_video(
            creator_id=bob.id,
            status="active",
            fields=_fields(
                "Docker Basics",
                description="Containers 100% explained",
                category="DevOps",
                tags=["docker", "devops"],
            ),
        ),
        "draft": await storage.create_video(
            creator_id=alice.id,
            status="pending",
            fields=_fields("Unreleased React Patterns", tags=["react"]),
        ),
        "gone": await storage.create_video(
            creator_id=bob.id,
            status="removed",
            fields=_fields("Removed Talk", tags=["react", "react"]),
        ),
        "next": await storage.create_video(
            creator_id=alice.id,
            status="active",
            fields=_fields("Next.js Routing", description="Server components with REACT under the hood", tags=["Next.js"]),
        ),
    }
    return storage, alice, bob, videos


def _titles(rows):
    return [row.title for row in rows]


@pytest.mark.asyncio
async def test_default_query_lists_active_newest_first(catalog):
    storage, _, _, _ = catalog
    rows = await storage.list_videos(VideoQuery())
    assert _titles(rows) == ["Next.js Routing", "Docker Basics", "React Hooks"]


@pytest.mark.asyncio
async def test_tag_filter_is_case_insensitive_exact_membership(catalog):
    storage, _, _, _ = catalog
    assert _titles(await storage.list_videos(VideoQuery(tag="REACT"))) == ["React Hooks"]
    assert _titles(await storage.list_videos(VideoQuery(tag="reac"))) == []
    assert _titles(await storage.list_videos(VideoQuery(tag="next.js"))) == ["Next.js Routing"]


@pytest.mark.asyncio
async def test_search_matches_title_or_description(catalog):
    storage, _, _, _ = catalog
    rows = await storage.list_videos(VideoQuery(search="react"))
    assert _titles(rows) == ["Next.js Routing", "React Hooks"]


@pytest.mark.asyncio
async def test_search_treats_like_wildcards_literally(catalog):
    storage, _, _, _ = catalog
    assert _titles(await storage.list_videos(VideoQuery(search="100%"))) == ["Docker Basics"]
    assert _titles(await storage.list_videos(VideoQuery(search="%"))) == ["Docker Basics"]
    assert await storage.list_videos(VideoQuery(search="_")) == []


@pytest.mark.asyncio
async def test_filters_are_combined(catalog):
    storage, alice, _, _ = catalog
    rows = await storage.list_videos(
        VideoQuery(category="Frontend Development", difficulty="beginner", creator_id=alice.id)
    )
    assert _titles(rows) == ["Next.js Routing"]


@pytest.mark.asyncio
async def test_unknown_category_yields_empty_list(catalog):
    storage, _, _, _ = catalog
    assert await storage.list_videos(VideoQuery(category="Cooking")) == []
    assert await storage.list_videos(VideoQuery(difficulty="expert")) == []


@pytest.mark.asyncio
async def test_status_none_returns_every_state(catalog):
    storage, alice, _, _ = catalog
    rows = await storage.list_videos(VideoQuery(status=None, creator_id=alice.id))
    assert _titles(rows) == ["Next.js Routing", "Unreleased React Patterns", "React Hooks"]
    pending = await storage.list_videos(VideoQuery(status="pending"))
    assert _titles(pending) == ["Unreleased React Patterns"]


@pytest.mark.asyncio
async def test_pagination_applies_after_ordering(catalog):
    storage, _, _, _ = catalog
    assert _titles(await storage.list_videos(VideoQuery(limit=2))) == ["Next.js Routing", "Docker Basics"]
    assert _titles(await storage.list_videos(VideoQuery(limit=2, offset=2))) == ["React Hooks"]
    assert _titles(await storage.list_videos(VideoQuery(offset=1))) == ["Docker Basics", "React Hooks"]


def test_blank_filters_are_ignored():
    query = VideoQuery(category="  ", tag="", search=None, offset=-5)
    assert query.category is None
    assert query.tag is None
    assert query.offset == 0


@pytest.mark.asyncio
async def test_non_ascii_tags_and_search_fold_case_on_every_backend(storage):
    author = await storage.create_user(username="zoe", email="zoe@x.com", password_hash="x", role="creator")
    elan = await storage.create_video(
        creator_id=author.id,
        status="active",
        fields=_fields("Élan Vital for Frontends", description="Über die Straße der Komponenten", tags=["Élan"]),
    )
    await storage.create_video(creator_id=author.id, status="active", fields=_fields("Plain ASCII talk", tags=["elan"]))

    assert _titles(await storage.list_videos(VideoQuery(tag="élan"))) == [elan.title]
    assert _titles(await storage.list_videos(VideoQuery(tag="ÉLAN"))) == [elan.title]
    assert _titles(await storage.list_videos(VideoQuery(search="élan vital"))) == [elan.title]
    assert _titles(await storage.list_videos(VideoQuery(search="ÜBER"))) == [elan.title]
    assert _titles(await storage.list_videos(VideoQuery(search="STRASSE"))) == [elan.title]


@pytest.mark.asyncio
async def test_search_follows_updated_title_and_tags(storage):
    author = await storage.create_user(username="zoe", email="zoe@x.com", password_hash="x", role="creator")
    video = await storage.create_video(creator_id=author.id, status="active", fields=_fields("Old name", tags=["old"]))

    await storage.update_video(video.id, {"title": "Ünicode Renamed", "tags": ["Ñandú"]})

    assert _titles(await storage.list_videos(VideoQuery(search="ünicode"))) == ["Ünicode Renamed"]
    assert _titles(await storage.list_videos(VideoQuery(tag="ñandú"))) == ["Ünicode Renamed"]
    assert await storage.list_videos(VideoQuery(search="old name")) == []
    assert await storage.list_videos(VideoQuery(tag="old")) == []
