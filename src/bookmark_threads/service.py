"""The one operation exposed to callers: get the thread for a saved post."""

import logging

from .assembler import ThreadAssembler
from .auth import TokenStore
from .config import AppConfig
from .errors import ThreadError, ThreadInternalError, UnauthorizedError
from .media import MediaUrlResolver
from .models import ThreadResult
from .resolver import build_default_resolver
from .store import PostStore

logger = logging.getLogger(__name__)


class ThreadService:
    def __init__(self, assembler: ThreadAssembler):
        self._assembler = assembler

    def get_thread(self, owner: str | None, post_id: str) -> ThreadResult:
        """Return the thread around ``post_id`` as seen by ``owner``.

        Raises:
            UnauthorizedError: no owner is authenticated.
            PostNotFoundError: the owner has not saved ``post_id``.
            ThreadInternalError: the store or a resolver failed unexpectedly.
        """
        if not owner:
            raise UnauthorizedError()

        try:
            return self._assembler.assemble(owner, post_id)
        except ThreadError:
            raise
        except Exception as e:
            logger.exception("Failed to fetch thread for post %s", post_id)
            raise ThreadInternalError("Failed to fetch thread") from e

    def close(self) -> None:
        self._assembler.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def build_service(config: AppConfig) -> tuple[ThreadService, PostStore]:
    """Wire a ThreadService from config.

    Returns the store alongside the service so callers can report on it.

    Raises:
        ThreadInternalError: the posts or tokens file cannot be read.
    """
    try:
        store = PostStore(config.posts_file)
        tokens = TokenStore(
            config.tokens_file,
            client_id=config.auth.client_id,
            client_secret=config.auth.client_secret,
            timeout=config.remote.timeout,
        )
    except (AttributeError, KeyError, OSError, TypeError, ValueError) as e:
        logger.exception("Failed to load local state")
        raise ThreadInternalError("Failed to load local state") from e
    resolver = build_default_resolver(config, tokens)
    assembler = ThreadAssembler(
        store,
        resolver,
        MediaUrlResolver(),
        max_length=config.max_length,
    )
    return ThreadService(assembler), store
