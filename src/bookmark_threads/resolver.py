"""Resolve posts that are not in the local store from remote sources.

Sources are tried in order and the first one that returns a post wins.
Callers only ever see a normalized RemoteNode or None: a missing ancestor
is an expected outcome, so failures are reported as data, not raised.
"""

import logging
from typing import Protocol

import httpx

from .auth import TokenRefreshError, TokenStore
from .client import CanonicalClient, MirrorClient
from .config import AppConfig
from .models import RemoteNode
from .parser import CANONICAL, MIRROR, parse_canonical_post, parse_mirror_post

logger = logging.getLogger(__name__)


class RemoteSource(Protocol):
    name: str

    def fetch(
        self, owner: str, post_id: str, author_hint: str | None = None
    ) -> RemoteNode | None: ...


class MirrorSource:
    name = MIRROR

    def __init__(self, client: MirrorClient):
        self._client = client

    def fetch(
        self, owner: str, post_id: str, author_hint: str | None = None
    ) -> RemoteNode | None:
        data = self._client.fetch_post(post_id)
        if data is None:
            return None
        return parse_mirror_post(data)

    def close(self) -> None:
        self._client.close()


class CanonicalSource:
    name = CANONICAL

    def __init__(self, client: CanonicalClient):
        self._client = client

    def fetch(
        self, owner: str, post_id: str, author_hint: str | None = None
    ) -> RemoteNode | None:
        data = self._client.fetch_post(owner, post_id)
        if data is None:
            return None
        return parse_canonical_post(data, author_hint)

    def close(self) -> None:
        self._client.close()


class RemoteResolver:
    def __init__(self, sources: list[RemoteSource]):
        self.sources = list(sources)

    def resolve(
        self, owner: str, post_id: str, author_hint: str | None = None
    ) -> RemoteNode | None:
        """Return the first post a source yields for ``post_id``, else None.

        A post whose id differs from the one asked for counts as a miss.
        """
        for source in self.sources:
            try:
                node = source.fetch(owner, post_id, author_hint)
            except httpx.TimeoutException:
                logger.warning("%s timed out fetching post %s", source.name, post_id)
                continue
            except (httpx.HTTPError, TokenRefreshError) as e:
                logger.warning("%s failed fetching post %s: %s", source.name, post_id, e)
                continue
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("%s returned malformed post %s: %s", source.name, post_id, e)
                continue

            if node is None:
                continue
            if node.id != post_id:
                logger.warning(
                    "%s returned post %s when asked for %s", source.name, node.id, post_id
                )
                continue
            logger.debug("Resolved post %s via %s", post_id, source.name)
            return node

        logger.info("Post %s could not be resolved from any remote source", post_id)
        return None

    def close(self) -> None:
        for source in self.sources:
            close = getattr(source, "close", None)
            if close is not None:
                close()


def build_default_resolver(config: AppConfig, tokens: TokenStore) -> RemoteResolver:
    """Mirror first (no auth, no platform rate limit), then the canonical API."""
    return RemoteResolver(
        [
            MirrorSource(
                MirrorClient(config.remote.mirror_url, timeout=config.remote.timeout)
            ),
            CanonicalSource(
                CanonicalClient(
                    tokens.get_access_token,
                    config.remote.canonical_url,
                    timeout=config.remote.timeout,
                )
            ),
        ]
    )
