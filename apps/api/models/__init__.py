"""Models package."""

from .user import User
from .video import Video
from .comment import Comment
from .watch_history import WatchHistory
from .watch_later import WatchLater
