"""Tests for WikipediaClient."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from conftest import make_response
from deep_search.config import DeepSearchSettings
from deep_search.infrastructure.sources.wikipedia import WikipediaClient


@pytest.fixture
def client(settings):
    return WikipediaClient(settings)


# ============================================================
# URL building
# ============================================================


class TestSummaryUrl:
    async def test_spaces_become_underscores(self, client):
        assert client.summary_url("Diffusion  model ") == (
            "https://en.wikipedia.org/api/rest_v1/page/summary/Diffusion_model"
        )

    async def test_title_is_percent_encoded(self, client):
        url = client.summary_url("AC/DC")
        assert url.endswith("/page/summary/AC%2FDC")

    async def test_language_edition(self):
        c = WikipediaClient(DeepSearchSettings(wikipedia_language="de"))
        assert c.summary_url("Katze").startswith("https://de.wikipedia.org/")


# ============================================================
# fetch_summary
# ============================================================


class TestFetchSummary:
    async def test_known_topic(self, client, wikipedia_payload):
        with patch.object(WikipediaClient, "_make_request", new=AsyncMock(return_value=wikipedia_payload)):
            summary = await client.fetch_summary("diffusion model")

        assert summary is not None
        assert summary.title == "Diffusion model"
        assert summary.extract.startswith("In machine learning")
        assert summary.source_url.startswith("https://en.wikipedia.org/")

    async def test_not_found_via_http(self, client):
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=make_response(404, json={"type": "not_found"}))
        assert await client.fetch_summary("qwzxv blorptangle") is None

    async def test_disambiguation_is_absent(self, client, wikipedia_payload):
        wikipedia_payload["type"] = "disambiguation"
        with patch.object(WikipediaClient, "_make_request", new=AsyncMock(return_value=wikipedia_payload)):
            assert await client.fetch_summary("Mercury") is None

    async def test_redirect_followed_by_transport(self, client, wikipedia_payload):
        # The API answers a redirect page with the target's summary after a 302
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=make_response(200, json=wikipedia_payload))
        summary = await client.fetch_summary("Diffusion models")
        assert summary is not None
        assert summary.title == "Diffusion model"

    async def test_network_failure_is_absent(self, client):
        client._client = AsyncMock()
        client._client.get = AsyncMock(side_effect=httpx.ConnectError("unreachable", request=MagicMock()))
        assert await client.fetch_summary("diffusion model") is None

    async def test_server_error_is_absent(self, client):
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=make_response(500))
        assert await client.fetch_summary("diffusion model") is None

    async def test_malformed_body_is_absent(self, client):
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=make_response(200, text="not json"))
        assert await client.fetch_summary("diffusion model") is None

    async def test_non_object_body_is_absent(self, client):
        with patch.object(WikipediaClient, "_make_request", new=AsyncMock(return_value=["a", "b"])):
            assert await client.fetch_summary("diffusion model") is None

    async def test_missing_title_is_absent(self, client):
        with patch.object(WikipediaClient, "_make_request", new=AsyncMock(return_value={"extract": "x"})):
            assert await client.fetch_summary("diffusion model") is None

    async def test_blank_topic_skips_request(self, client):
        with patch.object(WikipediaClient, "_make_request", new=AsyncMock()) as mock_req:
            assert await client.fetch_summary("   ") is None
        mock_req.assert_not_awaited()


# ============================================================
# Parsing details
# ============================================================


class TestParseSummary:
    async def test_normalized_title_fallback(self, client, wikipedia_payload):
        del wikipedia_payload["title"]
        summary = client._parse_summary(wikipedia_payload)
        assert summary.title == "Diffusion model"

    async def test_url_fallback_when_content_urls_missing(self, client, wikipedia_payload):
        del wikipedia_payload["content_urls"]
        summary = client._parse_summary(wikipedia_payload)
        assert summary.source_url == "https://en.wikipedia.org/wiki/Diffusion_model"

    async def test_foreign_url_replaced(self, client, wikipedia_payload):
        wikipedia_payload["content_urls"]["desktop"]["page"] = "https://evil.example/wiki/x"
        summary = client._parse_summary(wikipedia_payload)
        assert summary.source_url.startswith("https://en.wikipedia.org/wiki/")

    async def test_missing_extract_is_empty_string(self, client, wikipedia_payload):
        wikipedia_payload["type"] = "no-extract"
        del wikipedia_payload["extract"]
        summary = client._parse_summary(wikipedia_payload)
        assert summary.extract == ""
