"""Builders and fakes shared by the test modules."""

from datetime import datetime, timedelta, timezone

from bookmark_threads.models import MediaDescriptor, RemoteNode, SavedPost

OWNER = "alice"
BASE_TIME = datetime(2025, 2, 10, 12, 0, 0, tzinfo=timezone.utc)


def make_post(
    post_id: str,
    author: str = "threadauthor",
    parent_id: str | None = None,
    owner: str = OWNER,
    minutes: int = 0,
    media: list[MediaDescriptor] | None = None,
) -> SavedPost:
    return SavedPost(
        owner=owner,
        id=post_id,
        author=author,
        text=f"post {post_id}",
        author_display_name=author.title(),
        author_avatar_url=f"https://pbs.twimg.com/profile_images/{author}.jpg",
        is_reply=parent_id is not None,
        in_reply_to_id=parent_id,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        media=media or [],
    )


def make_node(
    post_id: str, author: str = "threadauthor", parent_id: str | None = None
) -> RemoteNode:
    return RemoteNode(
        id=post_id,
        text=f"remote {post_id}",
        author=author,
        author_display_name=author.title(),
        parent_id=parent_id,
        origin="fake",
    )


class FakeSource:
    """In-memory remote source that records every lookup."""

    def __init__(self, nodes: dict[str, RemoteNode] | None = None, name: str = "fake"):
        self.name = name
        self.nodes = nodes or {}
        self.calls: list[tuple[str, str]] = []

    def fetch(
        self, owner: str, post_id: str, author_hint: str | None = None
    ) -> RemoteNode | None:
        self.calls.append((owner, post_id))
        return self.nodes.get(post_id)
