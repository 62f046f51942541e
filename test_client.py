"""Transport behaviour: sessions, envelopes and error mapping."""

from __future__ import annotations

import httpx
import pytest

from salt_netapi.auth import AuthModule
from salt_netapi.calls import Client, RunnerCall
from salt_netapi.client import SaltClient, decode_envelope
from salt_netapi.config import configure_settings
from salt_netapi.errors import (
    AuthenticationError,
    ProtocolError,
    SaltError,
    SerializationError,
    TransportError,
)
from salt_netapi.results import Token

LOGIN_REPLY = {
    "return": [
        {
            "token": "6d1b722e",
            "start": 1438344917.221,
            "expire": 1438388117.221,
            "user": "saltdev",
            "eauth": "pam",
            "perms": [".*", "@runner"],
        }
    ]
}


def test_login_stores_token_for_later_calls(master) -> None:
    master.reply(LOGIN_REPLY).reply({"return": [["minion1"]]})

    with master.client() as client:
        token = client.login("saltdev", "secret", AuthModule.PAM)
        RunnerCall("manage.up").call_sync(client)

    assert isinstance(token, Token)
    assert token.token == "6d1b722e"
    assert token.user == "saltdev"
    assert token.perms == [".*", "@runner"]
    assert master.path(0) == "/login"
    assert master.sent(0) == {"username": "saltdev", "password": "secret", "eauth": "pam"}
    assert master.requests[1].headers["X-Auth-Token"] == "6d1b722e"


def test_logout_clears_token(master) -> None:
    master.reply(LOGIN_REPLY).reply({"return": ["Welcome"]})

    with master.client() as client:
        client.login("saltdev", "secret", "pam")
        client.logout()
        assert client.token is None

    assert master.path() == "/logout"
    assert master.requests[-1].headers["X-Auth-Token"] == "6d1b722e"


def test_logout_without_session_is_a_noop(master) -> None:
    with master.client() as client:
        client.logout()
    assert master.requests == []


def test_call_builds_single_chunk_list(master) -> None:
    master.reply({"return": [{"ok": True}]})
    with master.client() as client:
        envelope = client.call(
            RunnerCall("jobs.lookup_jid", kwargs={"jid": "1"}),
            Client.RUNNER,
            "/run",
            {"username": "u", "password": "p", "eauth": "auto"},
        )

    assert envelope.unwrap() == {"ok": True}
    assert master.sent() == [
        {
            "client": "runner",
            "fun": "jobs.lookup_jid",
            "kwargs": {"jid": "1"},
            "username": "u",
            "password": "p",
            "eauth": "auto",
        }
    ]
    assert master.requests[-1].headers["Accept"] == "application/json"


def test_http_error_status_raises_transport_error(master) -> None:
    master.reply("Internal Server Error", status_code=500)
    with master.client() as client:
        with pytest.raises(TransportError) as err:
            RunnerCall("manage.up").call_sync(client)
    assert err.value.status_code == 500
    assert "500" in str(err.value)


def test_unauthorized_raises_authentication_error(master) -> None:
    master.reply({"status": 401}, status_code=401)
    with master.client() as client:
        with pytest.raises(AuthenticationError) as err:
            client.login("saltdev", "wrong", AuthModule.PAM)
    assert err.value.status_code == 401
    assert isinstance(err.value, TransportError)


def test_network_error_raises_transport_error(master) -> None:
    master.reply(httpx.ConnectError("connection refused"))
    with master.client() as client:
        with pytest.raises(TransportError) as err:
            RunnerCall("manage.up").call_sync(client)
    assert err.value.status_code is None
    assert isinstance(err.value.__cause__, httpx.ConnectError)


def test_timeout_raises_transport_error(master) -> None:
    master.reply(httpx.ReadTimeout("too slow"))
    with master.client() as client:
        with pytest.raises(TransportError, match="timeout"):
            RunnerCall("manage.up").call_sync(client)


def test_non_json_body_raises_serialization_error(master) -> None:
    master.reply("<html>ok</html>")
    with master.client() as client:
        with pytest.raises(SerializationError):
            RunnerCall("manage.up").call_sync(client)


@pytest.mark.parametrize("body", [["bare", "list"], {"data": []}, {"return": {"not": "a list"}}])
def test_malformed_envelope_raises_protocol_error(body) -> None:
    with pytest.raises(ProtocolError):
        decode_envelope(body)


def test_all_errors_share_one_category() -> None:
    for error in (TransportError, AuthenticationError, ProtocolError, SerializationError):
        assert issubclass(error, SaltError)


def test_decode_envelope_validates_items() -> None:
    envelope = decode_envelope({"return": [{"token": "t"}]}, Token)
    assert envelope.unwrap() == Token(token="t")


def test_from_settings_uses_configured_url() -> None:
    configure_settings(url="http://master.example:8000/", timeout=5)
    with SaltClient.from_settings() as client:
        assert client.url == "http://master.example:8000"


def test_explicit_options_skip_environment_settings(monkeypatch) -> None:
    monkeypatch.setenv("SALT_API_TIMEOUT", "soon")
    with SaltClient("http://master.example:8000", timeout=5, verify=True) as client:
        assert client.url == "http://master.example:8000"


def test_missing_options_fall_back_to_settings(monkeypatch) -> None:
    monkeypatch.setenv("SALT_API_TIMEOUT", "soon")
    with pytest.raises(ValueError):
        SaltClient("http://master.example:8000", verify=True)
