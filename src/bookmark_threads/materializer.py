"""Convert saved or fetched posts into ThreadItems."""

from .media import MediaContext, MediaUrlResolver
from .models import ItemSource, RemoteNode, SavedPost, ThreadItem


def materialize(
    record: SavedPost | RemoteNode,
    source: ItemSource,
    media_resolver: MediaUrlResolver,
) -> ThreadItem:
    """Build a ThreadItem; ``position`` is filled in by the assembler."""
    media = [
        media_resolver.resolve(
            MediaContext(post_id=record.id, author=record.author, index=index),
            descriptor,
        )
        for index, descriptor in enumerate(record.media, start=1)
    ]
    return ThreadItem(
        id=record.id,
        text=record.text,
        author=record.author,
        author_display_name=record.author_display_name,
        author_avatar_url=record.author_avatar_url,
        created_at=record.created_at,
        media=media,
        source=source,
        position=0,
    )
