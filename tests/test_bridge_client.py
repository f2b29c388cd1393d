from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
import requests

from ib_risk_engine.bridge import bridge_client
from ib_risk_engine.bridge.bridge_client import BridgeClient, BridgeError


def _response(status_code=200, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text or json.dumps(payload)
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


@pytest.fixture
def client():
    return BridgeClient(
        url="https://bridge.example/exec",
        folder_id="folder-1",
        api_key="mb-key",
        domain="school.managebac.com",
    )


@pytest.fixture
def post(monkeypatch):
    mock = MagicMock()
    monkeypatch.setattr(bridge_client.requests, "post", mock)
    return mock


def test_is_configured():
    assert not BridgeClient(url=None).is_configured()
    assert not BridgeClient(url="https://bridge.example/exec").is_configured()
    assert BridgeClient(url="https://bridge.example/exec", folder_id="f").is_configured()


def test_fetch_latest(client, post):
    post.return_value = _response(payload={"status": "ok", "students": [{"id": "MB1001"}]})

    assert client.fetch_latest() == [{"id": "MB1001"}]

    args, kwargs = post.call_args
    assert args == ("https://bridge.example/exec",)
    assert json.loads(kwargs["data"]) == {"action": "fetch_latest", "folderId": "folder-1"}
    assert kwargs["timeout"] == 30


def test_sync_sends_credentials(client, post):
    post.return_value = _response(payload={"students": []})

    assert client.sync() == []

    body = json.loads(post.call_args.kwargs["data"])
    assert body == {
        "action": "sync",
        "domain": "school.managebac.com",
        "apiKey": "mb-key",
        "folderId": "folder-1",
    }


def test_sync_requires_api_key(post):
    client = BridgeClient(url="https://bridge.example/exec", folder_id="f", domain="d")
    with pytest.raises(BridgeError, match="BRIDGE_API_KEY"):
        client.sync()
    post.assert_not_called()


def test_unconfigured_client_does_not_call_out(post):
    with pytest.raises(BridgeError, match="not configured"):
        BridgeClient(url=None).fetch_latest()
    post.assert_not_called()


def test_error_status_in_body(client, post):
    post.return_value = _response(payload={"status": "error", "message": "Folder not found"})
    with pytest.raises(BridgeError, match="Folder not found"):
        client.fetch_latest()


def test_http_error(client, post):
    post.return_value = _response(status_code=500, payload=None, text="Internal error")
    with pytest.raises(BridgeError, match="error 500: Internal error"):
        client.fetch_latest()


def test_invalid_json(client, post):
    post.return_value = _response(payload=ValueError("Expecting value"), text="<html>")
    with pytest.raises(BridgeError, match="did not return valid JSON"):
        client.fetch_latest()


def test_transport_error_is_wrapped(client, post):
    post.side_effect = requests.ConnectionError("connection refused")
    with pytest.raises(BridgeError, match="connection refused"):
        client.fetch_latest()


def test_students_must_be_a_list(client, post):
    post.return_value = _response(payload={"students": {"id": "MB1001"}})
    with pytest.raises(BridgeError, match="must be a list"):
        client.fetch_latest()
