"""Normalize remote API responses into RemoteNode objects.

Two payload shapes are understood:

Mirror (FxTwitter) responses wrap the post under ``tweet``:
    {"code": 200, "tweet": {"id", "text", "author": {...}, "created_at",
                            "replying_to_status", "media": {"all": [...]}}}

Canonical (API v2) responses put the post under ``data`` and related
objects under ``includes``:
    {"data": {"id", "text", "author_id", "created_at", "referenced_tweets",
              "note_tweet", "attachments": {"media_keys": [...]}},
     "includes": {"users": [...], "media": [...]}}

A payload without an id or author is malformed and raises ValueError.
"""

import logging
from datetime import datetime

from .models import MediaDescriptor, RemoteNode

logger = logging.getLogger(__name__)

# Twitter's legacy date format: "Thu May 14 18:01:35 +0000 2020"
TWITTER_DATE_FORMAT = "%a %b %d %H:%M:%S %z %Y"

MIRROR = "mirror"
CANONICAL = "canonical"


def parse_mirror_post(data: dict) -> RemoteNode:
    """Parse a mirror API response into a RemoteNode."""
    tweet = data.get("tweet")
    if not tweet:
        raise ValueError(f"mirror response has no tweet (code={data.get('code')})")

    post_id = str(tweet.get("id", ""))
    author = tweet.get("author") or {}
    username = author.get("screen_name", "")
    if not post_id or not username:
        raise ValueError("mirror tweet is missing id or author")

    media = [
        MediaDescriptor(
            id=f"{post_id}_{idx}",
            type=m.get("type") or "photo",
            url=m.get("url", ""),
            preview_url=m.get("thumbnail_url"),
            width=m.get("width"),
            height=m.get("height"),
        )
        for idx, m in enumerate((tweet.get("media") or {}).get("all") or [])
    ]

    return RemoteNode(
        id=post_id,
        text=tweet.get("text", ""),
        author=username,
        author_display_name=author.get("name"),
        author_avatar_url=author.get("avatar_url"),
        created_at=_parse_date(tweet.get("created_at"), post_id),
        parent_id=tweet.get("replying_to_status") or None,
        media=media,
        origin=MIRROR,
    )


def parse_canonical_post(data: dict, author_hint: str | None = None) -> RemoteNode:
    """Parse a canonical API v2 single-post response into a RemoteNode.

    When the response carries no expanded user, ``author_hint`` (the author
    the caller expects) is used as the post's author.
    """
    tweet = data.get("data")
    if not tweet:
        errors = data.get("errors", [])
        detail = errors[0].get("detail", "") if errors else ""
        raise ValueError(f"canonical response has no data {detail}".strip())

    post_id = str(tweet.get("id", ""))
    includes = data.get("includes") or {}
    user = _find_user(includes.get("users") or [], tweet.get("author_id"))
    username = user.get("username") or author_hint
    if not post_id or not username:
        raise ValueError("canonical tweet is missing id or author")

    # Long posts carry their full text in note_tweet
    text = (tweet.get("note_tweet") or {}).get("text") or tweet.get("text", "")

    parent_id = None
    for ref in tweet.get("referenced_tweets") or []:
        if ref.get("type") == "replied_to":
            parent_id = ref.get("id")
            break

    media_by_key = {m.get("media_key"): m for m in includes.get("media") or []}
    media = []
    for key in (tweet.get("attachments") or {}).get("media_keys") or []:
        m = media_by_key.get(key)
        if m is None:
            continue
        media.append(
            MediaDescriptor(
                id=f"{post_id}_{key}",
                type=m.get("type", "photo"),
                url=m.get("url") or m.get("preview_image_url", ""),
                preview_url=m.get("preview_image_url"),
                width=m.get("width"),
                height=m.get("height"),
            )
        )

    return RemoteNode(
        id=post_id,
        text=text,
        author=username,
        author_display_name=user.get("name"),
        author_avatar_url=user.get("profile_image_url"),
        created_at=_parse_date(tweet.get("created_at"), post_id),
        parent_id=parent_id,
        media=media,
        origin=CANONICAL,
    )


def _find_user(users: list[dict], author_id: str | None) -> dict:
    """Pick the author from expanded users, matching author_id when possible."""
    for user in users:
        if author_id and user.get("id") == author_id:
            return user
    return users[0] if users else {}


def _parse_date(value: str | None, post_id: str) -> datetime | None:
    """Parse either the legacy Twitter format or ISO-8601."""
    if not value:
        return None
    try:
        return datetime.strptime(value, TWITTER_DATE_FORMAT)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.warning("post %s: unparseable created_at %r", post_id, value)
        return None
