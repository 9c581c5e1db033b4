"""
arXiv API Integration

Searches the arXiv export API and normalizes the Atom feed into
ScholarlyEntry records.

API Documentation: https://info.arxiv.org/help/api/user-manual.html

Notes:
- Results keep arXiv's relevance order and are capped at the configured limit
- Entries without a title, an author, a parseable published date or a link
  are dropped
- arXiv reports bad queries as a feed with a single "Error" entry; that
  entry is dropped like any other incomplete one
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import TYPE_CHECKING

import defusedxml.ElementTree as ET  # Security: prevent XML attacks
from defusedxml import DefusedXmlException

from deep_search.config import DeepSearchSettings
from deep_search.core.exceptions import ParseError, SourceError
from deep_search.infrastructure.sources.base_client import BaseAPIClient
from deep_search.models import ScholarlyEntry

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element

logger = logging.getLogger(__name__)

ARXIV_API_URL = "https://export.arxiv.org/api/query"

ATOM_NS = {
    "atom": "http://www.w3.org/2005/Atom",
    "arxiv": "http://arxiv.org/schemas/atom",
}

_WHITESPACE = re.compile(r"\s+")


def _clean(text: str | None) -> str:
    """Collapse the line breaks arXiv leaves inside titles and names."""
    return _WHITESPACE.sub(" ", text or "").strip()


class ArXivClient(BaseAPIClient):
    """Client for the arXiv search API."""

    _service_name = "arXiv"

    def __init__(self, settings: DeepSearchSettings | None = None):
        settings = settings or DeepSearchSettings()
        self._limit = settings.scholarly_limit
        super().__init__(
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            headers={"User-Agent": settings.user_agent},
        )

    @staticmethod
    def build_query(topic: str) -> str:
        """Turn free text into an arXiv `all:` query."""
        # Field and grouping syntax would change the meaning of the search
        escaped = topic.replace(":", " ").replace("(", " ").replace(")", " ")
        return f"all:{' '.join(escaped.split())}"

    async def fetch_entries(self, topic: str) -> tuple[ScholarlyEntry, ...]:
        """
        Search arXiv for *topic*.

        Returns:
            Up to `scholarly_limit` entries in arXiv's order; empty on any failure.
        """
        if not topic or not topic.strip():
            return ()

        params = {
            "search_query": self.build_query(topic),
            "start": 0,
            "max_results": self._limit,
            "sortBy": "relevance",
            "sortOrder": "descending",
        }
        logger.info(f"arXiv search: {params['search_query']}")

        try:
            xml_text = await self._make_request(ARXIV_API_URL, params=params, expect_json=False)
            entries = self.parse_feed(xml_text)
        except SourceError as e:
            logger.warning(f"arXiv search failed for {topic!r}: {e}")
            return ()

        return tuple(entries[: self._limit])

    def parse_feed(self, xml_text: str) -> list[ScholarlyEntry]:
        """Parse an Atom feed; raises ParseError when the document is not XML."""
        try:
            root = ET.fromstring(xml_text)
        except (ET.ParseError, DefusedXmlException) as e:
            raise ParseError(f"invalid Atom XML ({e})", source=self._service_name) from e

        entries = []
        for element in root.findall("atom:entry", ATOM_NS):
            entry = self._parse_entry(element)
            if entry is not None:
                entries.append(entry)
        return entries

    def _parse_entry(self, entry: Element) -> ScholarlyEntry | None:
        entry_id = entry.findtext("atom:id", default="", namespaces=ATOM_NS)
        if "/api/errors" in entry_id:
            message = _clean(entry.findtext("atom:summary", default="", namespaces=ATOM_NS))
            logger.warning(f"arXiv reported a query error: {message}")
            return None

        title = _clean(entry.findtext("atom:title", default="", namespaces=ATOM_NS))
        if not title:
            return None

        authors = []
        for author in entry.findall("atom:author", ATOM_NS):
            name = _clean(author.findtext("atom:name", default="", namespaces=ATOM_NS))
            if name:
                authors.append(name)
        if not authors:
            logger.debug(f"arXiv: dropping entry without authors: {title!r}")
            return None

        published = _parse_date(entry.findtext("atom:published", default="", namespaces=ATOM_NS))
        if published is None:
            logger.debug(f"arXiv: dropping entry without published date: {title!r}")
            return None

        url = _entry_link(entry)
        if not url:
            return None

        return ScholarlyEntry(title=title, authors=tuple(authors), published_date=published, source_url=url)


def _parse_date(text: str | None) -> date | None:
    """Dates look like 2023-01-15T18:00:00Z; only the day matters."""
    text = (text or "").strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def _entry_link(entry: Element) -> str | None:
    """Abstract page link, falling back to the entry id."""
    for link in entry.findall("atom:link", ATOM_NS):
        if link.get("rel", "alternate") == "alternate" and link.get("href"):
            return link.get("href")
    entry_id = _clean(entry.findtext("atom:id", default="", namespaces=ATOM_NS))
    if entry_id.startswith(("http://", "https://")) and "/api/errors" not in entry_id:
        return entry_id
    return None
