"""Tests for the Firebase Realtime Database school store (HTTP is stubbed)."""

from __future__ import annotations

import httpx
import pytest

from edubot.db.base import UpstreamFetchError
from edubot.db.firebase_repo import FirebaseSchoolRepository

DB_URL = "https://edubot-test-default-rtdb.firebasedatabase.app/"


def _repo(handler, auth_token: str | None = None) -> FirebaseSchoolRepository:
    return FirebaseSchoolRepository(DB_URL, auth_token=auth_token, transport=httpx.MockTransport(handler))


class TestFetchAllSchools:
    @pytest.mark.asyncio
    async def test_object_node_returns_values(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "-Nx1": {"name": "Delhi Public School", "fee": 0},
                    "-Nx2": {"name": "Kendriya Vidyalaya", "fee": 400},
                },
            )

        schools = await _repo(handler).fetch_all_schools()

        assert [s["name"] for s in schools] == ["Delhi Public School", "Kendriya Vidyalaya"]
        assert seen[0].method == "GET"
        assert seen[0].url.path == "/schools.json"
        assert "auth" not in seen[0].url.params

    @pytest.mark.asyncio
    async def test_array_node_drops_null_holes(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[None, {"name": "A"}, None, {"name": "B"}])

        schools = await _repo(handler).fetch_all_schools()
        assert schools == [{"name": "A"}, {"name": "B"}]

    @pytest.mark.asyncio
    async def test_empty_node_returns_empty_list(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"null")

        assert await _repo(handler).fetch_all_schools() == []

    @pytest.mark.asyncio
    async def test_non_object_children_are_skipped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"a": {"name": "A"}, "b": "stray", "c": 7})

        assert await _repo(handler).fetch_all_schools() == [{"name": "A"}]

    @pytest.mark.asyncio
    async def test_auth_token_sent_as_query_param(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        await _repo(handler, auth_token="s3cret").fetch_all_schools()
        assert seen[0].url.params["auth"] == "s3cret"


class TestFetchErrors:
    @pytest.mark.asyncio
    async def test_http_error_raises_upstream_fetch_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": "Permission denied"})

        with pytest.raises(UpstreamFetchError, match="401"):
            await _repo(handler).fetch_all_schools()

    @pytest.mark.asyncio
    async def test_network_error_raises_upstream_fetch_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamFetchError, match="Network error"):
            await _repo(handler).fetch_all_schools()

    @pytest.mark.asyncio
    async def test_non_json_body_raises_upstream_fetch_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        with pytest.raises(UpstreamFetchError):
            await _repo(handler).fetch_all_schools()

    @pytest.mark.asyncio
    async def test_scalar_node_raises_upstream_fetch_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json="oops")

        with pytest.raises(UpstreamFetchError, match="str"):
            await _repo(handler).fetch_all_schools()

    @pytest.mark.asyncio
    async def test_empty_body_raises_upstream_fetch_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"")

        with pytest.raises(UpstreamFetchError, match="non-JSON"):
            await _repo(handler).fetch_all_schools()
