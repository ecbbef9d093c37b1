"""Configuration loading and saving.

Config file location: ~/.config/bookmark-threads/config.toml

Schema:
    [auth]
    owner = "..."          # account the CLI acts as
    client_id = "..."      # OAuth2 client for the canonical API
    client_secret = "..."

    [store]
    posts_file = "posts.json"
    tokens_file = ".state/tokens.json"

    [remote]
    mirror_url = "https://api.fxtwitter.com"
    canonical_url = "https://api.twitter.com"
    timeout = 5.0

    [thread]
    max_length = 25

The remote base URLs can be overridden with environment variables:
    BOOKMARK_THREADS_MIRROR_URL
    BOOKMARK_THREADS_CANONICAL_URL
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import tomli_w

CONFIG_DIR = Path.home() / ".config" / "bookmark-threads"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_MIRROR_URL = "https://api.fxtwitter.com"
DEFAULT_CANONICAL_URL = "https://api.twitter.com"
DEFAULT_TIMEOUT = 5.0
DEFAULT_MAX_LENGTH = 25


@dataclass
class AuthConfig:
    owner: str
    client_id: str = ""
    client_secret: str = ""


@dataclass
class RemoteConfig:
    mirror_url: str = DEFAULT_MIRROR_URL
    canonical_url: str = DEFAULT_CANONICAL_URL
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class AppConfig:
    auth: AuthConfig
    posts_file: Path = Path("posts.json")
    tokens_file: Path = Path(".state/tokens.json")
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    max_length: int = DEFAULT_MAX_LENGTH


def load_config(config_path: Path = CONFIG_FILE) -> AppConfig:
    """Load and validate config from TOML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    auth_data = data.get("auth", {})
    owner = auth_data.get("owner", "")
    if not owner:
        raise ValueError("Config missing required auth.owner")

    store_data = data.get("store", {})
    remote_data = data.get("remote", {})
    thread_data = data.get("thread", {})

    max_length = int(thread_data.get("max_length", DEFAULT_MAX_LENGTH))
    if max_length < 1:
        raise ValueError("thread.max_length must be at least 1")

    remote = RemoteConfig(
        mirror_url=os.environ.get(
            "BOOKMARK_THREADS_MIRROR_URL",
            remote_data.get("mirror_url", DEFAULT_MIRROR_URL),
        ),
        canonical_url=os.environ.get(
            "BOOKMARK_THREADS_CANONICAL_URL",
            remote_data.get("canonical_url", DEFAULT_CANONICAL_URL),
        ),
        timeout=float(remote_data.get("timeout", DEFAULT_TIMEOUT)),
    )

    return AppConfig(
        auth=AuthConfig(
            owner=owner,
            client_id=auth_data.get("client_id", ""),
            client_secret=auth_data.get("client_secret", ""),
        ),
        posts_file=Path(store_data.get("posts_file", "posts.json")),
        tokens_file=Path(store_data.get("tokens_file", ".state/tokens.json")),
        remote=remote,
        max_length=max_length,
    )


def save_config(config: AppConfig, config_path: Path = CONFIG_FILE) -> None:
    """Write config to TOML file with restricted permissions."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "auth": {
            "owner": config.auth.owner,
            "client_id": config.auth.client_id,
            "client_secret": config.auth.client_secret,
        },
        "store": {
            "posts_file": str(config.posts_file),
            "tokens_file": str(config.tokens_file),
        },
        "remote": {
            "mirror_url": config.remote.mirror_url,
            "canonical_url": config.remote.canonical_url,
            "timeout": config.remote.timeout,
        },
        "thread": {
            "max_length": config.max_length,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)

    # Restrict permissions: file contains the OAuth client secret
    os.chmod(config_path, 0o600)


def config_exists(config_path: Path = CONFIG_FILE) -> bool:
    """Check if config file exists."""
    return config_path.exists()
