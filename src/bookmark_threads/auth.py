"""Per-owner OAuth2 tokens for the canonical API.

Tokens are stored in a JSON file keyed by owner:
    {
        "alice": {
            "access_token": "...",
            "refresh_token": "...",
            "expires_at": 1739212200
        }
    }

Expired tokens are refreshed with the refresh_token grant before use and
written back to disk.
"""

import json
import logging
import os
import time
from dataclasses import asdict, dataclass
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

TOKEN_URL = "https://api.twitter.com/2/oauth2/token"

# Refresh tokens this many seconds before they actually expire
EXPIRY_BUFFER = 300


class TokenRefreshError(RuntimeError):
    pass


@dataclass
class OAuthTokens:
    access_token: str
    refresh_token: str
    expires_at: int  # unix timestamp


def is_token_expired(expires_at: int, now: float | None = None) -> bool:
    now = time.time() if now is None else now
    return expires_at < int(now) + EXPIRY_BUFFER


class TokenStore:
    def __init__(
        self,
        tokens_file: Path,
        client_id: str = "",
        client_secret: str = "",
        token_url: str = TOKEN_URL,
        timeout: float = 5.0,
    ):
        self.tokens_file = tokens_file
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = token_url
        self._timeout = timeout
        self._tokens: dict[str, OAuthTokens] = {}
        self._load()

    def _load(self) -> None:
        if not self.tokens_file.exists():
            return
        data = json.loads(self.tokens_file.read_text())
        for owner, record in data.items():
            self._tokens[owner] = OAuthTokens(
                access_token=record["access_token"],
                refresh_token=record["refresh_token"],
                expires_at=int(record["expires_at"]),
            )

    def save(self) -> None:
        self.tokens_file.parent.mkdir(parents=True, exist_ok=True)
        data = {owner: asdict(t) for owner, t in sorted(self._tokens.items())}
        self.tokens_file.write_text(json.dumps(data, indent=2))
        # Restrict permissions: file contains bearer credentials
        os.chmod(self.tokens_file, 0o600)

    def set_tokens(self, owner: str, tokens: OAuthTokens) -> None:
        self._tokens[owner] = tokens

    def get_tokens(self, owner: str) -> OAuthTokens | None:
        return self._tokens.get(owner)

    def get_access_token(self, owner: str) -> str | None:
        """Return a usable access token for owner, refreshing if expired.

        Returns None when the owner has never connected an account.
        """
        tokens = self._tokens.get(owner)
        if tokens is None:
            return None

        if is_token_expired(tokens.expires_at):
            logger.info("Access token for %s expired, refreshing...", owner)
            tokens = self._refresh(tokens)
            self._tokens[owner] = tokens
            self.save()

        return tokens.access_token

    def _refresh(self, tokens: OAuthTokens) -> OAuthTokens:
        try:
            response = httpx.post(
                self._token_url,
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": tokens.refresh_token,
                    "client_id": self._client_id,
                },
                auth=(self._client_id, self._client_secret),
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            raise TokenRefreshError(f"Token refresh failed: {e}") from e

        if response.status_code != 200:
            raise TokenRefreshError(
                f"Token refresh failed ({response.status_code}): {response.text}"
            )

        data = response.json()
        return OAuthTokens(
            access_token=data["access_token"],
            # Some providers omit the refresh token when it does not rotate
            refresh_token=data.get("refresh_token", tokens.refresh_token),
            expires_at=int(time.time()) + int(data.get("expires_in", 7200)),
        )
