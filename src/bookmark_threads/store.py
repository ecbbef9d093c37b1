"""Local, per-owner store of saved posts backing thread lookups.

Posts are stored in a JSON file as a list of records:
    {
        "posts": [
            {
                "owner": "alice",
                "id": "1234567890",
                "author": "alice",
                "author_display_name": "Alice",
                "author_avatar_url": "https://...",
                "text": "...",
                "is_reply": true,
                "in_reply_to_id": "1234567889",
                "created_at": "2025-02-10T18:30:00+00:00",
                "media": [{"id": "1234567890_0", "type": "photo", "url": "..."}]
            }
        ]
    }

Every lookup is keyed by owner. A post is only ever visible to the account
that saved it.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from .models import MediaDescriptor, SavedPost

logger = logging.getLogger(__name__)


class RecordLookup(Protocol):
    def get_by_owner_and_id(self, owner: str, post_id: str) -> SavedPost | None: ...

    def get_by_owner_and_parent_id(
        self, owner: str, parent_id: str
    ) -> SavedPost | None: ...


class PostStore:
    def __init__(self, posts_file: Path = Path("posts.json")):
        self.posts_file = posts_file
        self._posts: dict[tuple[str, str], SavedPost] = {}
        self._load()

    def _load(self) -> None:
        """Load posts from disk."""
        if not self.posts_file.exists():
            logger.info("No posts file at %s. Starting empty.", self.posts_file)
            return

        data = json.loads(self.posts_file.read_text(encoding="utf-8"))
        for record in data.get("posts", []):
            try:
                post = post_from_dict(record)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed post record %r: %s", record, e)
                continue
            self._posts[(post.owner, post.id)] = post
        logger.info("Loaded %d saved posts from %s", len(self._posts), self.posts_file)

    def save(self) -> None:
        """Persist posts to disk."""
        self.posts_file.parent.mkdir(parents=True, exist_ok=True)
        records = [
            post_to_dict(p)
            for _, p in sorted(self._posts.items(), key=lambda kv: kv[0])
        ]
        self.posts_file.write_text(
            json.dumps({"posts": records}, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    def add(self, post: SavedPost) -> None:
        """Insert or replace a post under its (owner, id) key."""
        self._posts[(post.owner, post.id)] = post

    def get_by_owner_and_id(self, owner: str, post_id: str) -> SavedPost | None:
        return self._posts.get((owner, post_id))

    def get_by_owner_and_parent_id(
        self, owner: str, parent_id: str
    ) -> SavedPost | None:
        """Return the earliest-created reply to ``parent_id`` saved by ``owner``.

        Replies without a timestamp sort after dated ones; ties are broken by
        id so the choice is stable across calls.
        """
        replies = [
            p
            for (post_owner, _), p in self._posts.items()
            if post_owner == owner and p.in_reply_to_id == parent_id
        ]
        if not replies:
            return None
        return min(replies, key=_reply_order)

    def count(self, owner: str | None = None) -> int:
        if owner is None:
            return len(self._posts)
        return sum(1 for post_owner, _ in self._posts if post_owner == owner)


def _reply_order(post: SavedPost) -> tuple:
    if post.created_at is None:
        return (1, datetime.max.replace(tzinfo=timezone.utc), post.id)
    return (0, _as_utc(post.created_at), post.id)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def post_from_dict(record: dict, owner: str | None = None) -> SavedPost:
    """Build a SavedPost from a stored record.

    ``owner`` overrides the record's own owner field (used on import).
    """
    post_owner = owner or record["owner"]
    post_id = str(record["id"])
    if not post_owner or not post_id:
        raise ValueError("owner and id are required")

    parent_id = record.get("in_reply_to_id")
    created_at = record.get("created_at")
    return SavedPost(
        owner=post_owner,
        id=post_id,
        author=record["author"],
        text=record.get("text", ""),
        author_display_name=record.get("author_display_name"),
        author_avatar_url=record.get("author_avatar_url"),
        is_reply=bool(record.get("is_reply", parent_id)),
        in_reply_to_id=str(parent_id) if parent_id else None,
        created_at=datetime.fromisoformat(created_at) if created_at else None,
        media=[
            MediaDescriptor(
                id=m["id"],
                type=m.get("type", "photo"),
                url=m["url"],
                preview_url=m.get("preview_url"),
                width=m.get("width"),
                height=m.get("height"),
            )
            for m in record.get("media", [])
        ],
    )


def post_to_dict(post: SavedPost) -> dict:
    return {
        "owner": post.owner,
        "id": post.id,
        "author": post.author,
        "author_display_name": post.author_display_name,
        "author_avatar_url": post.author_avatar_url,
        "text": post.text,
        "is_reply": post.is_reply,
        "in_reply_to_id": post.in_reply_to_id,
        "created_at": post.created_at.isoformat() if post.created_at else None,
        "media": [
            {
                "id": m.id,
                "type": m.type,
                "url": m.url,
                "preview_url": m.preview_url,
                "width": m.width,
                "height": m.height,
            }
            for m in post.media
        ],
    }
