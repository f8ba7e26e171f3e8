# ./tests/test_remote_client.py
import json

import httpx

from poolwatch.client.api import RemoteClient


def _client(handler, token=None) -> RemoteClient:
    return RemoteClient(
        base_url="http://remote.test/api/v1/",
        token=token,
        timeout_s=1,
        transport=httpx.MockTransport(handler),
    )


def test_load_daily_readings_success():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/api/v1/daily-readings"
        return httpx.Response(200, json={"success": True, "data": [{"id": 1}]})

    with _client(handler) as rc:
        assert rc.load_daily_readings() == [{"id": 1}]


def test_load_returns_empty_list_when_store_has_no_value():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": True})

    with _client(handler) as rc:
        assert rc.load_daily_readings() == []
        assert rc.load_weekly_readings() == {"sunday": [], "wednesday": []}


def test_save_weekly_sends_only_given_sides_and_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"success": True})

    with _client(handler, token="secret") as rc:
        assert rc.save_weekly_readings(wednesday=[{"id": 11}]) is True

    assert seen["body"] == {"wednesday": [{"id": 11}]}
    assert seen["auth"] == "Bearer secret"


def test_failure_envelope_is_reported_as_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"success": False, "error": "disk full"})

    with _client(handler) as rc:
        assert rc.load_daily_readings() is None
        assert rc.save_daily_readings([]) is False


def test_network_error_and_invalid_json_are_failures():
    def down(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(down) as rc:
        assert rc.load_weekly_readings() is None
        assert rc.save_daily_readings([{"id": 1}]) is False

    def garbage(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>oops</html>")

    with _client(garbage) as rc:
        assert rc.load_daily_readings() is None
