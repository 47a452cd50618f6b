"""Tests for the Conduit client"""
import json
from unittest.mock import Mock

import pytest
import requests

from phab_build_status.exceptions import ConduitError
from phab_build_status.services.conduit_service import ConduitClient

from conftest import PHAB_URI


def make_response(body):
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = body
    return response


@pytest.fixture
def session():
    session = Mock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def client(session):
    return ConduitClient(PHAB_URI + "/", "api-secret", timeout=4.0, session=session)


class TestCall:
    """Test single Conduit calls."""

    def test_posts_to_method_endpoint(self, client, session):
        session.post.return_value = make_response({"result": {"ok": True}, "error_code": None})

        result = client.call("conduit.ping", {"x": 1})

        assert result == {"ok": True}
        url = session.post.call_args[0][0]
        kwargs = session.post.call_args[1]
        assert url == "https://phab.example.com/api/conduit.ping"
        assert kwargs["timeout"] == 4.0
        assert kwargs["data"]["output"] == "json"
        params = json.loads(kwargs["data"]["params"])
        assert params["x"] == 1
        assert params["__conduit__"] == {"token": "api-secret"}

    def test_error_code_raises(self, client, session):
        session.post.return_value = make_response(
            {"result": None, "error_code": "ERR-INVALID-AUTH", "error_info": "API token is bad"}
        )

        with pytest.raises(ConduitError, match="ERR-INVALID-AUTH: API token is bad") as exc_info:
            client.call("user.whoami")
        assert exc_info.value.method == "user.whoami"

    def test_http_error_raises(self, client, session):
        response = make_response({})
        response.raise_for_status.side_effect = requests.HTTPError("502 Bad Gateway")
        session.post.return_value = response

        with pytest.raises(ConduitError, match="502"):
            client.call("user.whoami")

    def test_timeout_raises(self, client, session):
        session.post.side_effect = requests.Timeout("slow")

        with pytest.raises(ConduitError, match="timed out after 4.0s"):
            client.call("user.whoami")

    def test_connection_error_raises(self, client, session):
        session.post.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ConduitError, match="refused"):
            client.call("user.whoami")

    def test_invalid_json_raises(self, client, session):
        response = make_response(None)
        response.json.side_effect = ValueError("no json")
        session.post.return_value = response

        with pytest.raises(ConduitError, match="not valid JSON"):
            client.call("user.whoami")

    def test_whoami(self, client, session):
        session.post.return_value = make_response({"result": {"userName": "alice"}})

        assert client.whoami() == {"userName": "alice"}


class TestSearch:
    """Test *.search calls and paging."""

    def test_single_page(self, client, session):
        session.post.return_value = make_response(
            {"result": {"data": [{"id": 1}, {"id": 2}], "cursor": {"after": None}}}
        )

        records = client.search(
            "differential.revision.search", {"statuses": ["accepted"]}, query_key="authored"
        )

        assert records == [{"id": 1}, {"id": 2}]
        params = json.loads(session.post.call_args[1]["data"]["params"])
        assert params["queryKey"] == "authored"
        assert params["constraints"] == {"statuses": ["accepted"]}
        assert "after" not in params

    def test_follows_cursor(self, client, session):
        session.post.side_effect = [
            make_response({"result": {"data": [{"id": 1}], "cursor": {"after": "1"}}}),
            make_response({"result": {"data": [{"id": 2}], "cursor": {"after": None}}}),
        ]

        records = client.search("harbormaster.buildable.search", {"objectPHIDs": ["PHID-DIFF-1"]})

        assert records == [{"id": 1}, {"id": 2}]
        second = json.loads(session.post.call_args_list[1][1]["data"]["params"])
        assert second["after"] == "1"
        assert "queryKey" not in second

    def test_empty_result(self, client, session):
        session.post.return_value = make_response({"result": {"data": [], "cursor": {}}})

        assert client.search("differential.revision.search") == []
