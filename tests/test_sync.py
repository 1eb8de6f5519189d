"""Tests for the blocking SyncClient wrapper."""

import threading

import pytest

from metasys_py import SyncClient
from metasys_py.errors import MetasysNotFoundError
from tests.helpers import OBJ_A, FakeTransport, make_resources, token_payload


def make_sync(transport=None):
    transport = transport or FakeTransport()
    client = SyncClient(
        "nae.test", transport=transport, resources=make_resources(), auto_refresh=False
    )
    return client, transport


class TestLifecycle:
    def test_context_manager_runs_loop_thread(self):
        client, transport = make_sync()
        before = threading.active_count()
        with client:
            assert transport.started
            assert threading.active_count() == before + 1
        assert transport.stopped
        assert threading.active_count() == before

    def test_not_open_raises(self):
        client, _ = make_sync()
        with pytest.raises(RuntimeError, match="not open"):
            client.refresh()

    def test_close_twice(self):
        client, _ = make_sync()
        client.open()
        client.close()
        client.close()


class TestCalls:
    def test_login_and_read(self):
        client, transport = make_sync()
        transport.add("POST", "login", token_payload("tok-a"))
        transport.add(
            "GET", f"objects/{OBJ_A}/attributes/presentValue", {"item": {"presentValue": 72.5}}
        )
        with client:
            client.login("user", "pw")
            assert client.access_token.token == "tok-a"
            value = client.read_property(str(OBJ_A), "presentValue")
            [bundle] = client.read_property_multiple([OBJ_A], ["presentValue"])
        assert value.string_value == "72.5"
        assert bundle.get("presentValue") == value
        assert transport.calls[-1].headers["Authorization"] == "Bearer tok-a"

    def test_errors_propagate(self):
        client, _ = make_sync()
        with client, pytest.raises(MetasysNotFoundError):
            client.get_objects(OBJ_A)

    def test_localize_without_loop(self):
        client, _ = make_sync()
        client.locale = "de-DE"
        assert client.localize("reliabilityEnumSet.reliable") == "Zuverlässig"
        assert client.get_command_enumeration("Adjust") == "commandIdEnumSet.adjustCommand"
