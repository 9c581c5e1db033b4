"""
Tests for CrossRef API client.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from conftest import make_response
from deep_search.config import DeepSearchSettings
from deep_search.core.exceptions import ParseError
from deep_search.infrastructure.sources.crossref import CrossRefClient


@pytest.fixture
def client(settings):
    return CrossRefClient(settings)


# =============================================================================
# CrossRefClient - Basic Tests
# =============================================================================


class TestCrossRefClientBasic:
    async def test_init(self, client):
        assert client._email == "test@example.com"
        assert client._timeout == 2.0
        assert client._limit == 8

    async def test_mailto_added(self, client):
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=make_response(200, json={"message": {"items": []}}))

        await client.fetch_works("diffusion")

        args, kwargs = client._client.get.call_args
        assert args[0] == "https://api.crossref.org/works"
        assert kwargs["params"]["mailto"] == "test@example.com"
        assert kwargs["params"]["query"] == "diffusion"
        assert kwargs["params"]["rows"] == "8"


# =============================================================================
# CrossRefClient - parsing
# =============================================================================


class TestParseItems:
    async def test_items_normalized(self, client, crossref_payload):
        works = client.parse_items(crossref_payload["message"])

        assert len(works) == 2
        first, second = works
        assert first.title == "Denoising diffusion in practice"
        assert first.authors == ("Jane Doe", "Diffusion Consortium")
        assert first.source_url == "https://doi.org/10.1000/ddpm.2020"
        assert second.authors == ()
        assert second.year is None
        assert second.source_url == "https://example.org/score"

    async def test_year_from_most_granular_field(self, client, crossref_payload):
        first = client.parse_items(crossref_payload["message"])[0]
        # issued has only [2021]; published-online has a full date
        assert first.year == 2020

    async def test_year_from_issued(self):
        assert CrossRefClient._extract_year({"issued": {"date-parts": [[2019, 4]]}}) == 2019

    async def test_year_null_date_parts(self):
        assert CrossRefClient._extract_year({"issued": {"date-parts": [[None]]}}) is None

    async def test_untitled_dropped(self, client, crossref_payload):
        titles = [w.title for w in client.parse_items(crossref_payload["message"])]
        assert all(titles)
        assert len(titles) == 2

    async def test_whitespace_title_skipped(self, client):
        works = client.parse_items({"items": [{"title": ["  ", "Second\n title"]}]})
        assert works[0].title == "Second title"

    async def test_title_markup_stripped(self, client):
        works = client.parse_items({"items": [{"title": ["Effect of <i>E. coli</i> on H<sub>2</sub>O"]}]})
        assert works[0].title == "Effect of E. coli on H2O"

    async def test_title_entities_unescaped(self, client):
        works = client.parse_items({"items": [{"title": ["R&amp;D of &lt;5 nm <scp>CMOS</scp>"]}]})
        assert works[0].title == "R&D of <5 nm CMOS"

    async def test_markup_only_title_dropped(self, client):
        works = client.parse_items({"items": [{"title": ["<i></i>"]}, {"title": ["Real"]}]})
        assert [w.title for w in works] == ["Real"]

    async def test_no_url(self, client):
        works = client.parse_items({"items": [{"title": ["X"], "URL": "ftp://nope"}]})
        assert works[0].source_url is None

    async def test_missing_items(self, client):
        with pytest.raises(ParseError):
            client.parse_items({"total-results": 0})


# =============================================================================
# CrossRefClient - fetch_works
# =============================================================================


class TestFetchWorks:
    async def test_success_unwraps_message(self, client, crossref_payload):
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=make_response(200, json=crossref_payload))

        works = await client.fetch_works("diffusion models")

        assert isinstance(works, tuple)
        assert [w.title for w in works] == [
            "Denoising diffusion in practice",
            "Score-based generative modeling",
        ]

    async def test_truncates_to_limit(self):
        c = CrossRefClient(DeepSearchSettings(works_limit=3))
        items = [{"title": [f"Work {i}"]} for i in range(10)]
        with patch.object(CrossRefClient, "_make_request", new=AsyncMock(return_value={"items": items})):
            works = await c.fetch_works("x")
        assert [w.title for w in works] == ["Work 0", "Work 1", "Work 2"]

    async def test_rate_limited_returns_empty(self, client):
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=make_response(429))
        assert await client.fetch_works("diffusion") == ()

    async def test_network_failure_returns_empty(self, client):
        client._client = AsyncMock()
        client._client.get = AsyncMock(side_effect=httpx.ConnectError("down", request=MagicMock()))
        assert await client.fetch_works("diffusion") == ()

    async def test_unexpected_shape_returns_empty(self, client):
        with patch.object(CrossRefClient, "_make_request", new=AsyncMock(return_value="garbage")):
            assert await client.fetch_works("diffusion") == ()

    async def test_blank_topic(self, client):
        assert await client.fetch_works(" \t ") == ()
