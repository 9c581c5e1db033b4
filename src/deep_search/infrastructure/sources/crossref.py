"""
CrossRef API Integration

Searches CrossRef's /works endpoint and normalizes items into WorkEntry
records.

API Documentation: https://api.crossref.org/swagger-ui/index.html

Rate Limits:
- Polite pool (with mailto): ~50 req/sec
- Anonymous: heavily throttled, so we always send mailto

Normalization:
- title: first non-empty string of the `title` array with markup tags
  stripped and entities unescaped; items without one are dropped
- authors: "Given Family" per author, or `name` for organizational authors
- year: from the date field with the most date-parts (ties go to the earlier
  field in _DATE_FIELDS)
- source_url: https://doi.org/<DOI> when a DOI exists, else the item's URL
"""

from __future__ import annotations

import html
import logging
import re
import urllib.parse
from typing import TYPE_CHECKING, Any

from deep_search.config import DeepSearchSettings
from deep_search.core.exceptions import ParseError, SourceError
from deep_search.infrastructure.sources.base_client import BaseAPIClient
from deep_search.models import WorkEntry

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

CROSSREF_API_BASE = "https://api.crossref.org"

# Publication-date fields, most specific meaning first
_DATE_FIELDS = (
    "published-print",
    "published-online",
    "issued",
    "published",
    "created",
)

# JATS/HTML inline markup, e.g. <i>E. coli</i> or H<sub>2</sub>O
_MARKUP_TAG = re.compile(r"<[^>]+>")


class CrossRefClient(BaseAPIClient):
    """
    CrossRef API client for work search.

    Usage:
        async with CrossRefClient(settings) as client:
            works = await client.fetch_works("diffusion models")

    Note:
        The contact email from settings is sent as User-Agent and mailto so
        requests land in the polite pool.
    """

    _service_name = "CrossRef"

    def __init__(self, settings: DeepSearchSettings | None = None):
        settings = settings or DeepSearchSettings()
        self._email = settings.contact_email
        self._limit = settings.works_limit
        super().__init__(
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            headers={
                "User-Agent": f"{settings.user_agent} (mailto:{self._email})",
                "Accept": "application/json",
            },
        )

    async def _execute_request(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Add mailto parameter for polite pool access."""
        params = dict(params or {})
        params.setdefault("mailto", self._email)
        return await super()._execute_request(url, params=params)

    def _parse_response(self, response: httpx.Response, expect_json: bool) -> Any:
        """Extract 'message' key from CrossRef JSON responses."""
        data = super()._parse_response(response, expect_json)
        if isinstance(data, dict):
            return data.get("message", data)
        return data

    async def fetch_works(self, topic: str) -> tuple[WorkEntry, ...]:
        """
        Search CrossRef for *topic*.

        Returns:
            Up to `works_limit` entries in CrossRef's relevance order; empty on any failure.
        """
        if not topic or not topic.strip():
            return ()

        params = {"query": " ".join(topic.split()), "rows": str(self._limit)}
        try:
            data = await self._make_request(f"{CROSSREF_API_BASE}/works", params=params)
            works = self.parse_items(data)
        except SourceError as e:
            logger.warning(f"CrossRef search failed for {topic!r}: {e}")
            return ()

        return tuple(works[: self._limit])

    def parse_items(self, data: Any) -> list[WorkEntry]:
        """Normalize the `items` list of a /works message."""
        if not isinstance(data, dict):
            raise ParseError("expected a message object", source=self._service_name)
        items = data.get("items")
        if not isinstance(items, list):
            raise ParseError("message has no items list", source=self._service_name)

        works = []
        for item in items:
            if not isinstance(item, dict):
                continue
            work = self._parse_item(item)
            if work is not None:
                works.append(work)
        return works

    def _parse_item(self, item: dict[str, Any]) -> WorkEntry | None:
        title = _first_title(item.get("title"))
        if not title:
            logger.debug(f"CrossRef: dropping item without title: {item.get('DOI')}")
            return None

        return WorkEntry(
            title=title,
            authors=tuple(_author_names(item.get("author"))),
            year=self._extract_year(item),
            source_url=self._extract_url(item),
        )

    @staticmethod
    def _extract_year(work: dict[str, Any]) -> int | None:
        """Year from the most granular date field available."""
        best: list[Any] = []
        for field in _DATE_FIELDS:
            value = work.get(field)
            if not isinstance(value, dict):
                continue
            date_parts = value.get("date-parts") or [[]]
            parts = date_parts[0] if isinstance(date_parts, list) and date_parts else []
            if not isinstance(parts, list) or not parts or parts[0] is None:
                continue
            if len(parts) > len(best):
                best = parts
        if not best:
            return None
        try:
            return int(best[0])
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _extract_url(work: dict[str, Any]) -> str | None:
        doi = work.get("DOI")
        if isinstance(doi, str) and doi.strip():
            return f"https://doi.org/{urllib.parse.quote(doi.strip(), safe='/:;()._-')}"
        url = work.get("URL")
        if isinstance(url, str) and url.startswith(("http://", "https://")):
            return url
        return None


def _first_title(value: Any) -> str | None:
    titles = value if isinstance(value, list) else [value]
    for title in titles:
        if isinstance(title, str) and title.strip():
            text = " ".join(html.unescape(_MARKUP_TAG.sub("", title)).split())
            if text:
                return text
    return None


def _author_names(value: Any) -> list[str]:
    """Display names in CrossRef's order."""
    names = []
    for author in value if isinstance(value, list) else []:
        if not isinstance(author, dict):
            continue
        parts = [author.get("given"), author.get("family")]
        name = " ".join(p.strip() for p in parts if isinstance(p, str) and p.strip())
        if not name and isinstance(author.get("name"), str):
            name = author["name"].strip()
        if name:
            names.append(name)
    return names
