"""Tests for the CLI interface."""

import json

import httpx
import pytest
import respx
from click.testing import CliRunner

from bookmark_threads.cli import main
from bookmark_threads.config import AppConfig, AuthConfig, load_config, save_config
from bookmark_threads.store import PostStore

from helpers import OWNER, make_post


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.toml"


@pytest.fixture
def configured(config_path, tmp_path):
    """Create a valid config file with a small saved thread."""
    config = AppConfig(
        auth=AuthConfig(owner=OWNER),
        posts_file=tmp_path / "posts.json",
        tokens_file=tmp_path / "tokens.json",
    )
    save_config(config, config_path)

    store = PostStore(config.posts_file)
    store.add(make_post("A"))
    store.add(make_post("B", parent_id="A", minutes=1))
    store.add(make_post("C", parent_id="B", minutes=2))
    store.add(make_post("orphan", parent_id="deleted", minutes=3))
    store.save()
    return config_path


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "rebuild the conversation" in result.output

    def test_setup_creates_config(self, runner, config_path):
        result = runner.invoke(
            main,
            ["--config", str(config_path), "setup"],
            input="alice\n\n",
        )
        assert result.exit_code == 0
        assert "Config saved" in result.output
        assert load_config(config_path).auth.owner == "alice"

    def test_setup_with_oauth_client(self, runner, config_path):
        result = runner.invoke(
            main,
            ["--config", str(config_path), "setup"],
            input="alice\ncid\nsecret\n",
        )
        assert result.exit_code == 0
        loaded = load_config(config_path)
        assert loaded.auth.client_id == "cid"
        assert loaded.auth.client_secret == "secret"

    def test_thread_without_config(self, runner, config_path):
        result = runner.invoke(main, ["--config", str(config_path), "thread", "B"])
        assert result.exit_code != 0
        assert "No config found" in result.output

    def test_thread_prints_json(self, runner, configured):
        result = runner.invoke(main, ["--config", str(configured), "thread", "B"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert [item["id"] for item in payload["thread"]] == ["A", "B", "C"]
        assert payload["currentPosition"] == 2
        assert payload["isComplete"] is True
        assert payload["isSelfThread"] is True

    def test_thread_compact(self, runner, configured):
        result = runner.invoke(
            main, ["--config", str(configured), "thread", "A", "--compact"]
        )
        assert result.exit_code == 0
        assert result.stdout.count("\n") == 1

    @respx.mock
    def test_thread_with_unresolvable_parent(self, runner, configured):
        route = respx.get("https://api.fxtwitter.com/i/status/deleted").mock(
            return_value=httpx.Response(404)
        )

        result = runner.invoke(
            main, ["--config", str(configured), "thread", "orphan"]
        )

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["isComplete"] is False
        assert [item["id"] for item in payload["thread"]] == ["orphan"]
        assert route.call_count == 1

    def test_thread_not_found(self, runner, configured):
        result = runner.invoke(main, ["--config", str(configured), "thread", "nope"])
        assert result.exit_code == 3
        assert "not found" in result.output

    def test_thread_other_owner_not_found(self, runner, configured):
        result = runner.invoke(
            main, ["--config", str(configured), "thread", "B", "--owner", "bob"]
        )
        assert result.exit_code == 3

    def test_thread_empty_owner_unauthorized(self, runner, configured):
        result = runner.invoke(
            main, ["--config", str(configured), "thread", "B", "--owner", ""]
        )
        assert result.exit_code == 2
        assert "No authenticated owner" in result.output

    def test_thread_with_corrupt_posts_file(self, runner, configured, tmp_path):
        (tmp_path / "posts.json").write_text("{not json")

        result = runner.invoke(main, ["--config", str(configured), "thread", "B"])

        assert result.exit_code == 1
        assert "Failed to load local state" in result.output

    def test_import(self, runner, configured, tmp_path):
        input_file = tmp_path / "export.json"
        input_file.write_text(
            json.dumps(
                [
                    {"id": "X1", "author": "someone", "text": "imported"},
                    {"id": "X2", "text": "no author"},
                ]
            )
        )

        result = runner.invoke(
            main, ["--config", str(configured), "import", str(input_file)]
        )

        assert result.exit_code == 0
        assert "Imported 1 posts" in result.output
        store = PostStore(tmp_path / "posts.json")
        assert store.get_by_owner_and_id(OWNER, "X1").text == "imported"
        assert store.get_by_owner_and_id(OWNER, "A") is not None

    def test_status_without_config(self, runner, config_path):
        result = runner.invoke(main, ["--config", str(config_path), "status"])
        assert result.exit_code == 0
        assert "Not configured" in result.output

    def test_status_with_config(self, runner, configured):
        result = runner.invoke(main, ["--config", str(configured), "status"])
        assert result.exit_code == 0
        assert "Found" in result.output
        assert "Saved posts: 4" in result.output
        assert "Canonical API fallback: disabled" in result.output
