"""HTTP clients for the two remote post sources.

MirrorClient talks to an FxTwitter-style mirror. It needs no credentials and
indexes posts by id, so a placeholder author segment ("i") is used when the
author is unknown.

CanonicalClient talks to the platform's v2 API with a per-owner OAuth2
bearer token. It is slower and rate limited, so it is only used after the
mirror misses.

Both clients return raw JSON dicts, or None when the post is not available.
Network errors and timeouts propagate as httpx exceptions.
"""

import logging
import time
from collections.abc import Callable

import httpx

from .config import DEFAULT_CANONICAL_URL, DEFAULT_MIRROR_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

USER_AGENT = "bookmark-threads/1.0"

# Author segment used when the mirror is queried by id alone
PLACEHOLDER_AUTHOR = "i"

CANONICAL_PARAMS = {
    "tweet.fields": "created_at,author_id,referenced_tweets,note_tweet,attachments",
    "expansions": "author_id,attachments.media_keys",
    "user.fields": "username,name,profile_image_url",
    "media.fields": "url,preview_image_url,type,width,height",
}


class MirrorClient:
    """Client for the unauthenticated mirror API."""

    def __init__(
        self,
        base_url: str = DEFAULT_MIRROR_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
            follow_redirects=True,
        )

    def fetch_post(
        self, post_id: str, author: str = PLACEHOLDER_AUTHOR
    ) -> dict | None:
        url = f"{self._base_url}/{author}/status/{post_id}"
        response = self._client.get(url)

        if response.status_code != 200:
            logger.warning(
                "Mirror returned %d for post %s", response.status_code, post_id
            )
            return None

        return response.json()

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class CanonicalClient:
    """Client for the OAuth2-authenticated platform API."""

    def __init__(
        self,
        token_provider: Callable[[str], str | None],
        base_url: str = DEFAULT_CANONICAL_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._token_provider = token_provider
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
            follow_redirects=True,
        )

    def fetch_post(self, owner: str, post_id: str) -> dict | None:
        access_token = self._token_provider(owner)
        if not access_token:
            logger.debug("No access token for %s; skipping canonical API", owner)
            return None

        response = self._client.get(
            f"{self._base_url}/2/tweets/{post_id}",
            params=CANONICAL_PARAMS,
            headers={"authorization": f"Bearer {access_token}"},
        )

        if response.status_code == 429:
            reset_time = response.headers.get("x-rate-limit-reset")
            wait_msg = ""
            if reset_time:
                wait_seconds = int(reset_time) - int(time.time())
                if wait_seconds > 0:
                    wait_msg = f" Resets in {wait_seconds}s."
            logger.warning("Rate limited by canonical API.%s", wait_msg)
            return None

        if response.status_code in (401, 403):
            logger.warning(
                "Canonical API rejected credentials for %s (%d)",
                owner,
                response.status_code,
            )
            return None

        if response.status_code != 200:
            logger.warning(
                "Canonical API returned %d for post %s",
                response.status_code,
                post_id,
            )
            return None

        return response.json()

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
