"""Demo accounts and a starter catalog for local environments."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from config import settings
from services.passwords import hash_password
from services.storage import Storage

logger = logging.getLogger(__name__)


DEMO_VIDEOS: List[Dict[str, Any]] = [
    {
        "title": "React Hooks Deep Dive - useEffect Explained",
        "description": "In this comprehensive tutorial, we dive deep into React's useEffect hook. "
        "You'll learn how the dependency array works, common pitfalls, and advanced patterns.",
        "url": "https://www.youtube.com/watch?v=0ZJgIjIuY7U",
        "embed_type": "youtube",
        "thumbnail": "https://images.unsplash.com/photo-1461749280684-dccba630e2f6",
        "duration": "15:42",
        "category": "Frontend Development",
        "difficulty": "intermediate",
        "tags": ["React", "Hooks", "Frontend"],
    },
    {
        "title": "System Design: Building Scalable Microservices Architecture",
        "description": "Learn how to design scalable microservices architecture for large-scale applications.",
        "url": "https://www.youtube.com/watch?v=sSm2dRarhPo",
        "embed_type": "youtube",
        "thumbnail": "https://images.unsplash.com/photo-1555066931-4365d14bab8c",
        "duration": "42:17",
        "category": "System Design",
        "difficulty": "advanced",
        "tags": ["Microservices", "System Design", "Architecture"],
    },
    {
        "title": "Getting Started with Next.js 13 - Server Components & App Router",
        "description": "A beginner-friendly introduction to Next.js 13's new features including "
        "Server Components and the App Router.",
        "url": "https://www.youtube.com/watch?v=_w0Ikk4JY7U",
        "embed_type": "youtube",
        "thumbnail": "https://images.unsplash.com/photo-1498050108023-c5249f4df085",
        "duration": "22:05",
        "category": "Frontend Development",
        "difficulty": "beginner",
        "tags": ["Next.js", "React", "Web Dev"],
    },
    {
        "title": "Docker for JavaScript Developers - From Zero to Production",
        "description": "Learn how to use Docker for your JavaScript projects, from local development "
        "to production deployment.",
        "url": "https://www.youtube.com/watch?v=gAkwW2tuIqE",
        "embed_type": "youtube",
        "thumbnail": "https://images.unsplash.com/photo-1542831371-29b0f74f9713",
        "duration": "30:47",
        "category": "DevOps",
        "difficulty": "intermediate",
        "tags": ["Docker", "JavaScript", "DevOps"],
    },
]


def _demo_accounts() -> List[Dict[str, str]]:
    return [
        {"username": "admin", "email": "admin@codecast.dev", "role": "admin", "password": settings.DEMO_ADMIN_PASSWORD},
        {"username": "creator", "email": "creator@codecast.dev", "role": "creator", "password": settings.DEMO_CREATOR_PASSWORD},
        {"username": "viewer", "email": "viewer@codecast.dev", "role": "viewer", "password": settings.DEMO_VIEWER_PASSWORD},
    ]


async def seed_demo_data(storage: Storage) -> Dict[str, int]:
    """Create demo accounts and sample videos once; reruns leave existing rows alone."""
    created_users = 0
    created_videos = 0
    creator_id = None

    for account in _demo_accounts():
        user = await storage.get_user_by_username(account["username"])
        if user is None:
            user = await storage.create_user(
                username=account["username"],
                email=account["email"],
                password_hash=hash_password(account["password"]),
                role=account["role"],
            )
            created_users += 1
        if account["role"] == "creator":
            creator_id = user.id

    if created_users and creator_id is not None:
        for fields in DEMO_VIDEOS:
            await storage.create_video(creator_id=creator_id, status="active", fields=fields)
            created_videos += 1

    logger.info("demo_seed users=%s videos=%s", created_users, created_videos)
    return {"users": created_users, "videos": created_videos}
