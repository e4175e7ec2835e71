"""Tests for the batch lookup proxy client. The HTTP session is always mocked."""

from unittest.mock import MagicMock

import pytest
import requests

from lookthrough import config
from lookthrough.data import proxy_client as proxy_module
from lookthrough.data.proxy_client import ProxyClient, ProxyEndpoint, build_proxy_client


@pytest.fixture
def client():
    client = ProxyClient("http://proxy.local/", timeout=5)
    client._session = MagicMock()
    return client


def _response(status=200, body=None):
    response = MagicMock()
    response.status_code = status
    response.json.return_value = body
    return response


class TestRequests:
    def test_etf_holdings_posts_symbol_batch(self, client):
        body = {"VTI": {"name": "Vanguard", "holdings": []}}
        client._session.post.return_value = _response(body=body)

        result = client.fetch_etf_holdings(["VTI", "QQQ"])

        client._session.post.assert_called_once_with(
            "http://proxy.local/api/etf-holdings",
            json={"symbols": ["VTI", "QQQ"]},
            timeout=5,
        )
        assert result.success
        assert result.data == body

    def test_company_overview_endpoint(self, client):
        client._session.post.return_value = _response(body={})

        client.fetch_company_overviews(["AAPL"])

        url = client._session.post.call_args[0][0]
        assert url.endswith(ProxyEndpoint.COMPANY_OVERVIEW.value)


class TestFailures:
    def test_http_error_keeps_status_and_message(self, client):
        error_body = MagicMock(status_code=503)
        error_body.json.return_value = {"error": "upstream down"}
        response = _response(status=503)
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            "503 Server Error", response=error_body
        )
        client._session.post.return_value = response

        result = client.fetch_etf_holdings(["VTI"])

        assert not result.success
        assert result.status_code == 503
        assert result.error == "upstream down"

    def test_timeout(self, client):
        client._session.post.side_effect = requests.exceptions.Timeout()

        result = client.fetch_etf_holdings(["VTI"])

        assert not result.success
        assert result.status_code == 408

    def test_connection_error(self, client):
        client._session.post.side_effect = requests.exceptions.ConnectionError("refused")

        result = client.fetch_company_overviews(["AAPL"])

        assert not result.success
        assert result.status_code == 0
        assert "refused" in result.error

    def test_invalid_json(self, client):
        response = _response()
        response.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
        client._session.post.return_value = response

        result = client.fetch_etf_holdings(["VTI"])

        assert not result.success
        assert result.status_code == 502

    def test_non_object_body(self, client):
        client._session.post.return_value = _response(body=["VTI"])

        result = client.fetch_etf_holdings(["VTI"])

        assert not result.success
        assert result.data is None


class TestBuildFromConfig:
    def test_disabled_returns_none(self, monkeypatch):
        monkeypatch.setattr(config, "NETWORK_ENABLED", False)
        monkeypatch.setattr(config, "PROXY_URL", "http://proxy.local")

        assert build_proxy_client() is None

    def test_enabled_without_url_returns_none(self, monkeypatch):
        monkeypatch.setattr(config, "NETWORK_ENABLED", True)
        monkeypatch.setattr(config, "PROXY_URL", None)

        assert build_proxy_client() is None

    def test_enabled_builds_client(self, monkeypatch):
        monkeypatch.setattr(config, "NETWORK_ENABLED", True)
        monkeypatch.setattr(config, "PROXY_URL", "http://proxy.local")
        monkeypatch.setattr(config, "NETWORK_TIMEOUT", 2.5)

        client = proxy_module.build_proxy_client()

        assert isinstance(client, ProxyClient)
        assert client.proxy_url == "http://proxy.local"
        assert client.timeout == 2.5
        client.close()
