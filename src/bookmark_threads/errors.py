"""Errors surfaced by the thread service to its caller.

Resolution misses, remote timeouts and reply cycles are not errors: they
end the relevant walk and are reported through ``ThreadResult.is_complete``.
"""


class ThreadError(Exception):
    """Base class for fatal thread lookup errors."""


class UnauthorizedError(ThreadError):
    def __init__(self, message: str = "No authenticated owner"):
        super().__init__(message)


class PostNotFoundError(ThreadError):
    def __init__(self, owner: str, post_id: str):
        self.owner = owner
        self.post_id = post_id
        super().__init__(f"Post {post_id} not found for owner {owner}")


class ThreadInternalError(ThreadError):
    """Unexpected store or resolver failure."""
