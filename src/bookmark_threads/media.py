"""Build display, thumbnail and share URLs for post media.

Media is served through the FxEmbed proxy rather than stored locally:
    Videos: https://d.fxtwitter.com/{author}/status/{post_id}.mp4
    Photos: https://d.fixupx.com/{author}/status/{post_id}/photo/{index}
    Embed:  https://fxtwitter.com/{author}/status/{post_id}
"""

from dataclasses import dataclass

from .models import MediaDescriptor, ResolvedMedia

VIDEO_TYPES = ("video", "animated_gif")


@dataclass
class MediaContext:
    """The post a media item belongs to and its 1-based position in it."""

    post_id: str
    author: str
    index: int = 1


def video_url(author: str, post_id: str) -> str:
    return f"https://d.fxtwitter.com/{author}/status/{post_id}.mp4"


def photo_url(author: str, post_id: str, index: int = 1) -> str:
    return f"https://d.fixupx.com/{author}/status/{post_id}/photo/{index}"


def embed_url(author: str, post_id: str) -> str:
    return f"https://fxtwitter.com/{author}/status/{post_id}"


class MediaUrlResolver:
    def display_url(self, context: MediaContext, media_type: str) -> str:
        if media_type in VIDEO_TYPES:
            return video_url(context.author, context.post_id)
        return photo_url(context.author, context.post_id, context.index)

    def share_url(self, context: MediaContext, media_type: str) -> str:
        if media_type in VIDEO_TYPES:
            return video_url(context.author, context.post_id)
        if media_type == "photo":
            return photo_url(context.author, context.post_id, context.index)
        return embed_url(context.author, context.post_id)

    def thumbnail_url(self, context: MediaContext, media: MediaDescriptor) -> str:
        # Videos have a still preview; photos are resized by the browser
        if media.type in VIDEO_TYPES and media.preview_url:
            return media.preview_url
        return self.display_url(context, media.type)

    def resolve(self, context: MediaContext, media: MediaDescriptor) -> ResolvedMedia:
        return ResolvedMedia(
            id=media.id,
            type=media.type,
            url=self.display_url(context, media.type),
            thumbnail_url=self.thumbnail_url(context, media),
            share_url=self.share_url(context, media.type),
            width=media.width,
            height=media.height,
        )
