"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from bookmark_threads.resolver import RemoteResolver
from bookmark_threads.store import PostStore

from helpers import FakeSource

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def store(tmp_path) -> PostStore:
    return PostStore(tmp_path / "posts.json")


@pytest.fixture
def remote() -> FakeSource:
    return FakeSource()


@pytest.fixture
def resolver(remote) -> RemoteResolver:
    return RemoteResolver([remote])


@pytest.fixture
def mirror_payload() -> dict:
    with open(FIXTURES_DIR / "mirror_post.json") as f:
        return json.load(f)


@pytest.fixture
def canonical_payload() -> dict:
    with open(FIXTURES_DIR / "canonical_post.json") as f:
        return json.load(f)
