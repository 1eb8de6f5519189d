"""Tests for the aiohttp transport against a local test server."""

import asyncio

import aiohttp
import orjson
import pytest
from aiohttp import web
from aiohttp import test_utils

from metasys_py.app.application import ClientConfig
from metasys_py.client import Client
from metasys_py.errors import (
    MetasysHttpError,
    MetasysNotFoundError,
    MetasysTimeoutError,
    MetasysTransportError,
)
from metasys_py.transport import HttpTransport
from metasys_py.transport.http import AiohttpTransport, join_url
from metasys_py.types.values import VariantKind
from tests.helpers import OBJ_A, token_payload


async def _echo(request: web.Request) -> web.Response:
    return web.json_response(
        {
            "method": request.method,
            "query": dict(request.query),
            "authorization": request.headers.get("Authorization"),
            "content_type": request.headers.get("Content-Type"),
            "body": await request.text(),
        }
    )


async def _slow(request: web.Request) -> web.Response:
    await asyncio.sleep(0.5)
    return web.json_response({})


async def _login(request: web.Request) -> web.Response:
    body = await request.json()
    if body != {"username": "user", "password": "pw"}:
        return web.json_response({"message": "bad credentials"}, status=401)
    return web.json_response(token_payload("tok-a"))


async def _attribute(request: web.Request) -> web.Response:
    if request.headers.get("Authorization") != "Bearer tok-a":
        return web.json_response({"message": "unauthorized"}, status=401)
    if request.match_info["attribute"] != "presentValue":
        return web.json_response({"message": "no such attribute"}, status=404)
    return web.json_response(
        {
            "item": {
                "presentValue": {
                    "value": 72.5,
                    "reliability": "reliabilityEnumSet.reliable",
                    "priority": "writePriorityEnumSet.priorityDefault",
                }
            }
        }
    )


@pytest.fixture
async def server():
    app = web.Application()
    app.router.add_route("*", "/api/v2/echo", _echo)
    app.router.add_get("/api/v2/slow", _slow)
    app.router.add_post("/api/v2/login", _login)
    app.router.add_get("/api/v2/objects/{object_id}/attributes/{attribute}", _attribute)
    test_server = test_utils.TestServer(app)
    await test_server.start_server()
    yield test_server
    await test_server.close()


def api_url(server: test_utils.TestServer) -> str:
    return str(server.make_url("/api/v2"))


class TestJoinUrl:
    def test_relative(self):
        assert join_url("https://nae/api/v2", "objects/x") == "https://nae/api/v2/objects/x"

    def test_slashes_collapsed(self):
        assert join_url("https://nae/api/v2/", "/objects/x") == "https://nae/api/v2/objects/x"

    def test_absolute_passthrough(self):
        url = "https://other/api/v2/enumSets/508/members/185"
        assert join_url("https://nae/api/v2", url) == url


class TestAiohttpTransport:
    def test_satisfies_protocol(self):
        assert isinstance(AiohttpTransport("https://nae/api/v2"), HttpTransport)

    async def test_request_round_trip(self, server):
        transport = AiohttpTransport(api_url(server))
        await transport.start()
        try:
            response = await transport.request(
                "PATCH",
                "echo",
                headers={"Authorization": "Bearer x", "Content-Type": "application/json"},
                params={"page": 2},
                body=b'{"item":{}}',
            )
        finally:
            await transport.stop()
        assert response.ok
        assert response.url == f"{api_url(server)}/echo"
        payload = orjson.loads(response.body)
        assert payload["method"] == "PATCH"
        assert payload["query"] == {"page": "2"}
        assert payload["authorization"] == "Bearer x"
        assert payload["body"] == '{"item":{}}'

    async def test_error_status_returned(self, server):
        transport = AiohttpTransport(api_url(server))
        try:
            response = await transport.request("GET", "nowhere")
        finally:
            await transport.stop()
        assert response.status == 404
        assert not response.ok

    async def test_timeout(self, server):
        transport = AiohttpTransport(api_url(server), timeout=0.05)
        await transport.start()
        try:
            with pytest.raises(MetasysTimeoutError):
                await transport.request("GET", "slow")
        finally:
            await transport.stop()

    async def test_connection_refused(self):
        transport = AiohttpTransport("http://127.0.0.1:1/api/v2", timeout=5)
        await transport.start()
        try:
            with pytest.raises(MetasysTransportError):
                await transport.request("GET", "echo")
        finally:
            await transport.stop()

    async def test_supplied_session_not_closed(self, server):
        async with aiohttp.ClientSession() as session:
            transport = AiohttpTransport(api_url(server), session=session)
            await transport.start()
            await transport.request("GET", "echo")
            await transport.stop()
            assert not session.closed


class TestEndToEnd:
    async def test_login_and_read(self, server):
        config = ClientConfig(hostname="unused", auto_refresh=False)
        async with Client(config=config, transport=AiohttpTransport(api_url(server))) as client:
            await client.login("user", "pw")
            value = await client.read_property(str(OBJ_A), "presentValue")
            missing = await client.read_property(OBJ_A, "units")

        assert value.kind is VariantKind.NUMERIC
        assert value.string_value == "72.5"
        assert value.reliability == "Reliable"
        assert value.priority == "16 (Default)"
        assert missing is None

    async def test_bad_login(self, server):
        config = ClientConfig(hostname="unused", auto_refresh=False)
        async with Client(config=config, transport=AiohttpTransport(api_url(server))) as client:
            with pytest.raises(MetasysHttpError) as exc_info:
                await client.login("user", "wrong")
        assert exc_info.value.status == 401
        assert not isinstance(exc_info.value, MetasysNotFoundError)
