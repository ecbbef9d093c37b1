"""Rebuild the conversation around a saved reply.

The thread is assembled in two walks from the target post:

Upward, through ``in_reply_to_id`` links. Each parent is looked up in the
owner's store first and in the remote sources second. The walk stops at the
root, at the first post by a different author (kept as an ``external``
boundary item), at a cycle, at an unresolvable parent, or after
``max_length`` ancestors.

Downward, through the owner's saved replies only. Remote sources are never
consulted here. A reply by another author marks the thread as not a
self-thread but does not stop the walk.

All traversal state is local to one ``assemble`` call.
"""

import logging

from .errors import PostNotFoundError
from .materializer import materialize
from .media import MediaUrlResolver
from .models import ItemSource, ThreadItem, ThreadResult
from .resolver import RemoteResolver
from .store import RecordLookup

logger = logging.getLogger(__name__)

MAX_THREAD_LENGTH = 25


class ThreadAssembler:
    def __init__(
        self,
        lookup: RecordLookup,
        resolver: RemoteResolver,
        media_resolver: MediaUrlResolver | None = None,
        max_length: int = MAX_THREAD_LENGTH,
    ):
        self._lookup = lookup
        self._resolver = resolver
        self._media = media_resolver or MediaUrlResolver()
        self._max_length = max_length

    def assemble(self, owner: str, target_id: str) -> ThreadResult:
        target = self._lookup.get_by_owner_and_id(owner, target_id)
        if target is None:
            raise PostNotFoundError(owner, target_id)

        target_item = materialize(target, ItemSource.STORED, self._media)

        if not target.is_reply or not target.in_reply_to_id:
            target_item.position = 1
            return ThreadResult(
                thread=[target_item],
                current_position=1,
                is_complete=True,
                is_self_thread=True,
            )

        visited = {target.id}
        chain: list[ThreadItem] = []
        cursor: str | None = target.in_reply_to_id
        is_self_thread = True
        is_complete = False

        while cursor and len(chain) < self._max_length:
            if cursor in visited:
                logger.info("Reply cycle at post %s; stopping upward walk", cursor)
                is_complete = True
                break
            visited.add(cursor)

            stored = self._lookup.get_by_owner_and_id(owner, cursor)
            if stored is not None:
                node, source = stored, ItemSource.STORED
            else:
                node = self._resolver.resolve(owner, cursor, target.author)
                source = ItemSource.FETCHED
            if node is None:
                logger.info("Ancestor %s unavailable; thread is incomplete", cursor)
                break

            if node.author != target.author:
                logger.debug(
                    "Ancestor %s is by @%s, not @%s; stopping at boundary",
                    node.id,
                    node.author,
                    target.author,
                )
                is_self_thread = False
                chain.insert(0, materialize(node, ItemSource.EXTERNAL, self._media))
                is_complete = True
                break

            logger.debug("Ancestor %s resolved (%s)", node.id, source.value)
            chain.insert(0, materialize(node, source, self._media))
            cursor = node.parent_id

        # Ran out of parents: the conversation root was reached
        if not cursor:
            is_complete = True

        if cursor and len(chain) >= self._max_length:
            logger.info(
                "Upward walk for %s capped at %d ancestors", target.id, self._max_length
            )

        chain.append(target_item)
        anchor_index = len(chain)

        descendants: list[ThreadItem] = []
        seen = set(visited)
        child_cursor = target.id

        while len(descendants) < self._max_length:
            child = self._lookup.get_by_owner_and_parent_id(owner, child_cursor)
            if child is None:
                break
            if child.id in seen:
                logger.info("Reply cycle at post %s; stopping downward walk", child.id)
                break
            seen.add(child.id)

            if child.author != target.author:
                is_self_thread = False

            descendants.append(materialize(child, ItemSource.STORED, self._media))
            child_cursor = child.id

        thread = chain + descendants
        for position, item in enumerate(thread, start=1):
            item.position = position

        logger.debug(
            "Assembled thread for %s: %d items, target at %d, complete=%s, self=%s",
            target.id,
            len(thread),
            anchor_index,
            is_complete,
            is_self_thread,
        )

        return ThreadResult(
            thread=thread,
            current_position=anchor_index,
            is_complete=is_complete,
            is_self_thread=is_self_thread,
        )

    def close(self) -> None:
        self._resolver.close()
