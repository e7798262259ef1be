"""
Request and response schemas shared across routers.

The JSON wire format is camelCase; attributes stay snake_case on the Python side.
"""

import re
from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StringConstraints, field_validator
from pydantic.alias_generators import to_camel


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

Role = Literal["viewer", "creator", "admin"]
EmbedType = Literal["youtube", "vimeo", "upload"]
Difficulty = Literal["beginner", "intermediate", "advanced"]
VideoStatus = Literal["active", "pending", "removed"]
CommentStatus = Literal["active", "flagged", "removed"]

Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
Duration = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^\d+:\d{2}(:\d{2})?$")]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Auth

class RegisterRequest(CamelModel):
    username: str = Field(min_length=3, max_length=20, pattern=r"^[A-Za-z0-9_.-]+$")
    email: str = Field(max_length=254)
    password: str = Field(min_length=6, max_length=128)
    role: Literal["viewer", "creator"] = "viewer"

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        email = value.strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise ValueError("Invalid email address")
        return email


class LoginRequest(CamelModel):
    username: str = Field(min_length=1, max_length=20)
    password: str = Field(min_length=1, max_length=128)


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    role: Role
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    message: str
    user: UserResponse
    token: str
    expires_at: int


class MessageResponse(CamelModel):
    message: str


# Videos

class VideoCreateRequest(CamelModel):
    title: str = Field(min_length=3, max_length=100)
    description: str = Field(min_length=10, max_length=5000)
    url: str = Field(min_length=1, max_length=2048)
    embed_type: EmbedType = "youtube"
    thumbnail: Optional[str] = Field(default=None, max_length=2048)
    duration: Optional[Duration] = None
    category: str = Field(min_length=1, max_length=100)
    difficulty: Difficulty
    tags: List[Tag] = Field(default_factory=list, max_length=10)


class VideoUpdateRequest(CamelModel):
    title: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, min_length=10, max_length=5000)
    url: Optional[str] = Field(default=None, min_length=1, max_length=2048)
    embed_type: Optional[EmbedType] = None
    thumbnail: Optional[str] = Field(default=None, max_length=2048)
    duration: Optional[Duration] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    difficulty: Optional[Difficulty] = None
    tags: Optional[List[Tag]] = Field(default=None, max_length=10)


class VideoResponse(CamelModel):
    id: int
    creator_id: int
    title: str
    description: str
    url: str
    embed_type: EmbedType
    thumbnail: Optional[str] = None
    duration: Optional[str] = None
    category: str
    difficulty: Difficulty
    tags: List[str] = Field(default_factory=list)
    views: int = 0
    likes: int = 0
    dislikes: int = 0
    status: VideoStatus
    created_at: Optional[datetime] = None


class ReactionRequest(CamelModel):
    is_like: StrictBool


class VideoStatusRequest(CamelModel):
    status: VideoStatus


# Comments

class CommentCreateRequest(CamelModel):
    content: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2000)]
    parent_id: Optional[int] = None


class CommentResponse(CamelModel):
    id: int
    video_id: int
    user_id: int
    content: str
    likes: int = 0
    parent_id: Optional[int] = None
    status: CommentStatus
    created_at: Optional[datetime] = None


class CommentStatusRequest(CamelModel):
    status: CommentStatus


# Watch lists

class WatchHistoryRequest(CamelModel):
    video_id: int = Field(ge=1)
    progress: int = Field(default=0, ge=0, le=100)
    completed: bool = False


class WatchHistoryResponse(CamelModel):
    id: int
    user_id: int
    video_id: int
    progress: int
    completed: bool
    updated_at: Optional[datetime] = None


class ClearHistoryResponse(CamelModel):
    message: str
    removed: int


class WatchLaterRequest(CamelModel):
    video_id: int = Field(ge=1)


class WatchLaterResponse(CamelModel):
    id: int
    user_id: int
    video_id: int
    added_at: Optional[datetime] = None
