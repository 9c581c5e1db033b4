"""
Wikipedia REST Summary Integration

Looks up one topic through the page summary endpoint:
    GET https://{lang}.wikipedia.org/api/rest_v1/page/summary/{title}

API Documentation: https://en.wikipedia.org/api/rest_v1/

Behavior:
- 404 (no such page) is a normal outcome and yields None
- Redirect pages are followed by the API itself (HTTP 302 to the target
  summary); httpx follows it
- Disambiguation pages (type == "disambiguation") yield None; we do not
  guess which meaning the caller wanted
- Any transport or parse failure yields None
"""

from __future__ import annotations

import logging
import urllib.parse
from typing import TYPE_CHECKING, Any

from deep_search.config import DeepSearchSettings
from deep_search.core.exceptions import ParseError, SourceEmptyError, SourceError
from deep_search.infrastructure.sources.base_client import _CONTINUE, BaseAPIClient
from deep_search.models import EncyclopediaSummary

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

WIKIPEDIA_SUMMARY_PATH = "/api/rest_v1/page/summary/"

# Summary "type" values that describe a real article
_ARTICLE_TYPES = frozenset({"standard", "no-extract"})


class WikipediaClient(BaseAPIClient):
    """
    Wikipedia page summary client.

    Usage:
        async with WikipediaClient() as client:
            summary = await client.fetch_summary("Diffusion model")
            if summary:
                print(summary.title, summary.source_url)
    """

    _service_name = "Wikipedia"

    def __init__(self, settings: DeepSearchSettings | None = None):
        settings = settings or DeepSearchSettings()
        self._language = settings.wikipedia_language
        self._base_url = f"https://{self._language}.wikipedia.org"
        super().__init__(
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            headers={
                "User-Agent": f"{settings.user_agent} (mailto:{settings.contact_email})",
                "Accept": "application/json",
            },
        )

    def _handle_expected_status(self, response: httpx.Response, url: str) -> Any:
        """Handle 404 (page not found)."""
        if response.status_code == 404:
            logger.debug(f"Wikipedia: page not found - {url}")
            return None
        return _CONTINUE

    def summary_url(self, topic: str) -> str:
        """Build the summary endpoint URL for a topic used as page title."""
        title = "_".join(topic.split())
        return f"{self._base_url}{WIKIPEDIA_SUMMARY_PATH}{urllib.parse.quote(title, safe='')}"

    async def fetch_summary(self, topic: str) -> EncyclopediaSummary | None:
        """
        Fetch the summary of the article named by *topic*.

        Never raises: not-found, disambiguation, network and parse failures
        all return None.
        """
        if not topic or not topic.strip():
            return None

        try:
            data = await self._make_request(self.summary_url(topic))
            if data is None:
                return None
            return self._parse_summary(data)
        except SourceEmptyError as e:
            logger.info(str(e))
            return None
        except SourceError as e:
            logger.warning(f"Wikipedia summary lookup failed for {topic!r}: {e}")
            return None

    def _parse_summary(self, data: Any) -> EncyclopediaSummary:
        """Normalize a summary payload; raises SourceEmptyError / ParseError."""
        if not isinstance(data, dict):
            raise ParseError(f"expected JSON object, got {type(data).__name__}", source=self._service_name)

        page_type = data.get("type", "standard")
        if page_type == "disambiguation":
            raise SourceEmptyError(f"{data.get('title')!r} is a disambiguation page", source=self._service_name)
        if page_type not in _ARTICLE_TYPES:
            raise SourceEmptyError(f"unsupported page type {page_type!r}", source=self._service_name)

        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            titles = data.get("titles") or {}
            title = titles.get("normalized") if isinstance(titles, dict) else None
        if not isinstance(title, str) or not title.strip():
            raise ParseError("summary has no title", source=self._service_name)
        title = title.strip()

        extract = data.get("extract") or ""
        if not isinstance(extract, str):
            raise ParseError("extract is not a string", source=self._service_name)

        return EncyclopediaSummary(
            title=title,
            extract=extract.strip(),
            source_url=self._extract_page_url(data, title),
        )

    def _extract_page_url(self, data: dict[str, Any], title: str) -> str:
        """Canonical desktop URL, falling back to /wiki/<title>."""
        content_urls = data.get("content_urls")
        if isinstance(content_urls, dict):
            desktop = content_urls.get("desktop")
            if isinstance(desktop, dict):
                page = desktop.get("page")
                if isinstance(page, str) and page.startswith(self._base_url):
                    return page
        return f"{self._base_url}/wiki/{urllib.parse.quote('_'.join(title.split()))}"
