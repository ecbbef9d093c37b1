"""Tests for the remote HTTP clients."""

import httpx
import pytest
import respx

from bookmark_threads.client import CanonicalClient, MirrorClient

MIRROR_URL = "https://api.fxtwitter.com/i/status/1001"
CANONICAL_URL = "https://api.twitter.com/2/tweets/1001"


def tokens(owner: str) -> str | None:
    return {"alice": "access-abc"}.get(owner)


class TestMirrorClient:
    @respx.mock
    def test_fetch_post(self, mirror_payload):
        route = respx.get(MIRROR_URL).mock(
            return_value=httpx.Response(200, json=mirror_payload)
        )

        with MirrorClient() as client:
            data = client.fetch_post("1001")

        assert data["tweet"]["id"] == "1001"
        assert route.call_count == 1
        request = route.calls.last.request
        assert "authorization" not in request.headers
        assert request.headers["User-Agent"].startswith("bookmark-threads/")

    @respx.mock
    def test_not_found_returns_none(self):
        respx.get(MIRROR_URL).mock(
            return_value=httpx.Response(404, json={"code": 404, "message": "NOT_FOUND"})
        )

        with MirrorClient() as client:
            assert client.fetch_post("1001") is None

    @respx.mock
    def test_server_error_returns_none(self):
        respx.get(MIRROR_URL).mock(return_value=httpx.Response(502))

        with MirrorClient() as client:
            assert client.fetch_post("1001") is None

    @respx.mock
    def test_timeout_propagates(self):
        respx.get(MIRROR_URL).mock(side_effect=httpx.ConnectTimeout("slow"))

        with MirrorClient() as client:
            with pytest.raises(httpx.TimeoutException):
                client.fetch_post("1001")

    @respx.mock
    def test_custom_base_url(self, mirror_payload):
        route = respx.get("https://mirror.example/i/status/1001").mock(
            return_value=httpx.Response(200, json=mirror_payload)
        )

        with MirrorClient("https://mirror.example/") as client:
            client.fetch_post("1001")

        assert route.called


class TestCanonicalClient:
    @respx.mock
    def test_fetch_post_sends_bearer_token(self, canonical_payload):
        route = respx.get(CANONICAL_URL).mock(
            return_value=httpx.Response(200, json=canonical_payload)
        )

        with CanonicalClient(tokens) as client:
            data = client.fetch_post("alice", "1001")

        assert data["data"]["id"] == "1001"
        request = route.calls.last.request
        assert request.headers["authorization"] == "Bearer access-abc"
        assert "referenced_tweets" in request.url.params["tweet.fields"]
        assert "author_id" in request.url.params["expansions"]

    def test_no_token_skips_request(self):
        with respx.mock(assert_all_called=False) as router:
            route = router.get(CANONICAL_URL)

            with CanonicalClient(tokens) as client:
                assert client.fetch_post("bob", "1001") is None

        assert not route.called

    @respx.mock
    def test_rate_limit_returns_none(self):
        respx.get(CANONICAL_URL).mock(
            return_value=httpx.Response(
                429,
                json={"title": "Too Many Requests"},
                headers={"x-rate-limit-reset": "9999999999"},
            )
        )

        with CanonicalClient(tokens) as client:
            assert client.fetch_post("alice", "1001") is None

    @respx.mock
    def test_auth_failure_returns_none(self):
        respx.get(CANONICAL_URL).mock(
            return_value=httpx.Response(401, json={"title": "Unauthorized"})
        )

        with CanonicalClient(tokens) as client:
            assert client.fetch_post("alice", "1001") is None

    @respx.mock
    def test_not_found_returns_none(self):
        respx.get(CANONICAL_URL).mock(return_value=httpx.Response(404))

        with CanonicalClient(tokens) as client:
            assert client.fetch_post("alice", "1001") is None
