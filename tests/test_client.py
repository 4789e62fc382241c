"""
Tests for the requests-based API client.
"""
import json
from unittest.mock import MagicMock

import requests

from evenza_client import SAMPLE_DATA, EvenzaClient


def _response(status_code=200, payload=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = b"" if payload is None else json.dumps(payload).encode()
    response.url = "http://api.test/api/x"
    return response


def _client(*responses, **kwargs):
    session = MagicMock(spec=requests.Session)
    session.request.side_effect = list(responses)
    return EvenzaClient(base_url="http://api.test/", session=session, **kwargs), session


class TestEvenzaClient:

    def test_list_events_unwraps_envelope(self):
        client, session = _client(_response(payload={"events": [{"id": 5}]}))

        events, error = client.list_events(category="Workshop")

        assert events == [{"id": 5}]
        assert error is None
        kwargs = session.request.call_args.kwargs
        assert kwargs["url"] == "http://api.test/api/events"
        assert kwargs["params"] == {"category": "Workshop"}
        assert kwargs["timeout"] == 15

    def test_login_stores_token(self):
        client, session = _client(
            _response(payload={"message": "Login successful", "user": {"id": 1}, "token": "abc"}),
            _response(payload={"id": 1}),
        )

        client.login("a@example.com", "secret123")
        client.get_profile()

        assert session.request.call_args.kwargs["headers"] == {"Authorization": "Bearer abc"}

    def test_http_error_is_reported(self):
        client, _ = _client(_response(400, {"detail": "Event is full"}))

        data, error = client.register_for_event(3, {"tickets": 1})

        assert data is None
        assert error == {"status_code": 400, "message": "Event is full"}

    def test_http_error_is_not_masked_by_fallback(self):
        client, _ = _client(_response(500, {"detail": "Internal Server Error"}))

        events, error = client.list_events()

        assert events == []
        assert error["status_code"] == 500

    def test_unreachable_server_uses_sample_data(self):
        client, _ = _client(requests.ConnectionError("refused"))

        trips, error = client.list_trips()

        assert error is None
        assert trips == SAMPLE_DATA["trips"]
        trips[0]["title"] = "changed"
        assert SAMPLE_DATA["trips"][0]["title"] != "changed"

    def test_fallback_can_be_disabled(self):
        client, _ = _client(requests.Timeout("slow"), use_fallback=False)

        interviews, error = client.list_interviews()

        assert interviews == []
        assert error["status_code"] is None

    def test_logout_forgets_token(self):
        client, _ = _client(_response(payload={"message": "Logged out successfully"}))
        client.token = "abc"

        client.logout()

        assert client.token is None
