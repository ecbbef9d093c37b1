"""Data models for saved posts, remote posts and reconstructed threads."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ItemSource(str, Enum):
    STORED = "stored"  # the owner's own saved post
    FETCHED = "fetched"  # remote post by the target's author
    EXTERNAL = "external"  # any post by a different author


@dataclass
class MediaDescriptor:
    id: str
    type: str  # "photo", "video", "animated_gif"
    url: str  # original media URL
    preview_url: str | None = None
    width: int | None = None
    height: int | None = None


@dataclass
class SavedPost:
    owner: str
    id: str
    author: str  # handle without @
    text: str
    author_display_name: str | None = None
    author_avatar_url: str | None = None
    is_reply: bool = False
    in_reply_to_id: str | None = None  # weak reference, may dangle
    created_at: datetime | None = None
    media: list[MediaDescriptor] = field(default_factory=list)

    @property
    def parent_id(self) -> str | None:
        return self.in_reply_to_id


@dataclass
class RemoteNode:
    """A post fetched from a remote source for the duration of one request."""

    id: str
    text: str
    author: str
    author_display_name: str | None = None
    author_avatar_url: str | None = None
    created_at: datetime | None = None
    parent_id: str | None = None
    media: list[MediaDescriptor] = field(default_factory=list)
    origin: str = ""  # name of the source that produced it


@dataclass
class ResolvedMedia:
    id: str
    type: str
    url: str
    thumbnail_url: str
    share_url: str
    width: int | None = None
    height: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "url": self.url,
            "thumbnailUrl": self.thumbnail_url,
            "shareUrl": self.share_url,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class ThreadItem:
    id: str
    text: str
    author: str
    author_display_name: str | None
    author_avatar_url: str | None
    created_at: datetime | None
    media: list[ResolvedMedia]
    source: ItemSource
    position: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "author": self.author,
            "authorDisplayName": self.author_display_name,
            "authorAvatarUrl": self.author_avatar_url,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "media": [m.to_dict() for m in self.media],
            "source": self.source.value,
            "position": self.position,
        }


@dataclass
class ThreadResult:
    thread: list[ThreadItem]
    current_position: int
    is_complete: bool
    is_self_thread: bool

    def to_dict(self) -> dict:
        """Serialize to the JSON payload shape returned to callers."""
        return {
            "thread": [item.to_dict() for item in self.thread],
            "currentPosition": self.current_position,
            "isComplete": self.is_complete,
            "isSelfThread": self.is_self_thread,
        }
