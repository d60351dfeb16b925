"""Tests for the HTTP query client and its configuration."""

from unittest.mock import MagicMock

import pytest
import requests

from axiomtui.query.client import (
    DEFAULT_URL,
    ClientConfig,
    ClientConfigError,
    QueryClient,
    QueryError,
)


def response(status=200, payload=None, json_error=False):
    resp = MagicMock()
    resp.status_code = status
    if json_error:
        resp.json.side_effect = ValueError("not json")
    else:
        resp.json.return_value = payload
    return resp


@pytest.fixture
def session():
    s = MagicMock()
    s.headers = {}
    return s


@pytest.fixture
def client(session):
    return QueryClient(ClientConfig(token="xaat-123", org_id="acme"), session=session)


class TestClientConfig:
    def test_from_env(self):
        config = ClientConfig.from_env({
            "AXIOM_TOKEN": "xaat-123",
            "AXIOM_ORG_ID": "acme",
            "AXIOM_URL": "https://eu.example.com",
        })
        assert config.token == "xaat-123"
        assert config.org_id == "acme"
        assert config.url == "https://eu.example.com"

    def test_defaults(self):
        config = ClientConfig.from_env({"AXIOM_TOKEN": "xaat-123"})
        assert config.url == DEFAULT_URL
        assert config.org_id is None

    def test_missing_token(self):
        with pytest.raises(ClientConfigError, match="AXIOM_TOKEN"):
            ClientConfig.from_env({})

    def test_personal_token_needs_org(self):
        with pytest.raises(ClientConfigError, match="AXIOM_ORG_ID"):
            ClientConfig.from_env({"AXIOM_TOKEN": "xapt-123"})

    def test_bad_url(self):
        with pytest.raises(ClientConfigError, match="AXIOM_URL"):
            ClientConfig.from_env({"AXIOM_TOKEN": "xaat-1", "AXIOM_URL": "ftp://x"})


class TestQuery:
    def test_posts_query(self, client, session):
        session.post.return_value = response(payload={
            "buckets": {"series": [], "totals": []},
            "matches": [{"_time": "2024-01-15T12:00:00Z", "data": {"a": 1}}],
        })

        result = client.query("['logs'] | count()")

        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == "https://api.axiom.co/v1/datasets/_apl"
        assert kwargs["params"] == {"format": "legacy"}
        assert kwargs["json"] == {"apl": "['logs'] | count()"}
        assert len(result.matches) == 1

    def test_headers(self, client, session):
        assert session.headers["Authorization"] == "Bearer xaat-123"
        assert session.headers["X-Axiom-Org-Id"] == "acme"
        assert session.headers["User-Agent"].startswith("axiomtui/")

    def test_no_org_header_without_org(self, session):
        QueryClient(ClientConfig(token="xaat-1"), session=session)
        assert "X-Axiom-Org-Id" not in session.headers

    def test_trailing_slash_in_url(self, session):
        client = QueryClient(ClientConfig(token="xaat-1", url="https://x.example.com/"),
                             session=session)
        assert client.endpoint == "https://x.example.com/v1/datasets/_apl"

    def test_http_error_uses_body_message(self, client, session):
        session.post.return_value = response(400, {"message": "parse error at 1:3"})
        with pytest.raises(QueryError, match="parse error") as excinfo:
            client.query("bad")
        assert excinfo.value.status_code == 400

    def test_http_error_without_body(self, client, session):
        session.post.return_value = response(502, json_error=True)
        with pytest.raises(QueryError, match="HTTP 502"):
            client.query("x")

    def test_network_error(self, client, session):
        session.post.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(QueryError, match="connection refused"):
            client.query("x")

    def test_invalid_json(self, client, session):
        session.post.return_value = response(200, json_error=True)
        with pytest.raises(QueryError, match="not valid JSON"):
            client.query("x")

    def test_unexpected_shape(self, client, session):
        session.post.return_value = response(200, ["not", "an", "object"])
        with pytest.raises(QueryError, match="unexpected response shape"):
            client.query("x")
