"""
Unit tests for WebArchiveTagClient with a mocked requests session.
"""
import json
from unittest.mock import MagicMock

import pytest
import requests

from web_archive_client import WebArchiveTagClient


def make_response(status_code=200, body=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = b"" if body is None else json.dumps(body).encode()
    response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api(session):
    return WebArchiveTagClient(base_url="http://archive.local/", api_key="secret", session=session)


class TestRequests:

    def test_list_tags_unwraps_envelope(self, api, session):
        tags = [{"id": 1, "name": "research", "color": "#ffffff", "pageIds": [1]}]
        session.request.return_value = make_response(body={"code": 0, "message": "ok", "data": tags})

        data, error = api.list_tags()

        assert error is None
        assert data == tags
        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == "http://archive.local/api/v1/tags/all"
        assert kwargs["headers"] == {"Authorization": "Bearer secret"}

    def test_create_tag_omits_missing_color(self, api, session):
        session.request.return_value = make_response(body={"code": 0, "message": "ok", "data": True})

        ok, error = api.create_tag("research")

        assert ok and error is None
        assert session.request.call_args.kwargs["json"] == {"name": "research"}

    def test_update_tag_payload(self, api, session):
        session.request.return_value = make_response(body={"code": 0, "message": "ok", "data": True})

        api.update_tag(3, color="#000000")

        assert session.request.call_args.kwargs["json"] == {"id": 3, "color": "#000000"}

    def test_delete_uses_query(self, api, session):
        session.request.return_value = make_response(body={"code": 0, "message": "ok", "data": True})

        ok, _ = api.delete_tag(4)

        assert ok
        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "DELETE"
        assert kwargs["params"] == {"id": 4}

    def test_bind_and_unbind_payloads(self, api, session):
        session.request.return_value = make_response(body={"code": 0, "message": "ok", "data": True})

        api.bind_pages(1, (5, 6))
        assert session.request.call_args.kwargs["json"] == {"id": 1, "pageIds": [5, 6]}
        assert session.request.call_args.kwargs["url"].endswith("/bind_page")

        api.unbind_pages(1, [6])
        assert session.request.call_args.kwargs["json"] == {"id": 1, "pageIds": [6]}
        assert session.request.call_args.kwargs["url"].endswith("/unbind_page")


class TestErrors:

    def test_error_envelope_message(self, api, session):
        session.request.return_value = make_response(
            400, {"code": 400, "message": "Name is required", "data": None}
        )

        ok, error = api.create_tag("")

        assert ok is False
        assert error == {"status_code": 400, "message": "Name is required"}

    def test_transport_error(self, api, session):
        session.request.side_effect = requests.ConnectionError("refused")

        tags, error = api.list_tags()

        assert tags == []
        assert error["status_code"] is None
        assert "refused" in error["message"]
