"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import io
from datetime import date

import httpx
import pytest

from deep_search.config import DeepSearchSettings
from deep_search.models import DeepSearchResult, EncyclopediaSummary, ScholarlyEntry, WorkEntry

# ============================================================
# Helpers
# ============================================================


def make_response(status_code: int = 200, url: str = "https://example.org/", **kwargs) -> httpx.Response:
    """httpx.Response bound to a request, so raise_for_status() works."""
    return httpx.Response(status_code, request=httpx.Request("GET", url), **kwargs)


def pdf_text(data: bytes) -> str:
    """Extract all text of a PDF with whitespace collapsed."""
    from pypdf import PdfReader

    reader = PdfReader(io.BytesIO(data))
    text = " ".join(page.extract_text() or "" for page in reader.pages)
    return " ".join(text.split())


def pdf_pages(data: bytes) -> int:
    from pypdf import PdfReader

    return len(PdfReader(io.BytesIO(data)).pages)


# ============================================================
# Settings
# ============================================================


@pytest.fixture
def settings():
    """Settings with a short timeout and no retries."""
    return DeepSearchSettings(timeout=2.0, contact_email="test@example.com")


# ============================================================
# Mock Upstream Responses
# ============================================================


@pytest.fixture
def wikipedia_payload():
    """Mock response from the Wikipedia page summary endpoint."""
    return {
        "type": "standard",
        "title": "Diffusion model",
        "titles": {"canonical": "Diffusion_model", "normalized": "Diffusion model"},
        "extract": (
            "In machine learning, diffusion models are a class of latent variable "
            "generative models."
        ),
        "content_urls": {
            "desktop": {"page": "https://en.wikipedia.org/wiki/Diffusion_model"},
            "mobile": {"page": "https://en.m.wikipedia.org/wiki/Diffusion_model"},
        },
    }


@pytest.fixture
def arxiv_feed():
    """Mock Atom feed from the arXiv query API (second entry has no authors)."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom" xmlns:arxiv="http://arxiv.org/schemas/atom">
  <title type="html">ArXiv Query: search_query=all:diffusion models</title>
  <entry>
    <id>http://arxiv.org/abs/2006.11239v2</id>
    <updated>2020-12-16T21:11:26Z</updated>
    <published>2020-06-19T17:24:44Z</published>
    <title>Denoising Diffusion Probabilistic
      Models</title>
    <summary>We present high quality image synthesis results.</summary>
    <author><name>Jonathan Ho</name></author>
    <author><name>Ajay Jain</name></author>
    <author><name>Pieter Abbeel</name></author>
    <link href="http://arxiv.org/abs/2006.11239v2" rel="alternate" type="text/html"/>
    <link title="pdf" href="http://arxiv.org/pdf/2006.11239v2" rel="related" type="application/pdf"/>
  </entry>
  <entry>
    <id>http://arxiv.org/abs/2101.00001v1</id>
    <published>2021-01-01T00:00:00Z</published>
    <title>Orphan Entry</title>
    <link href="http://arxiv.org/abs/2101.00001v1" rel="alternate" type="text/html"/>
  </entry>
  <entry>
    <id>http://arxiv.org/abs/2105.05233v4</id>
    <published>2021-05-11T17:58:40Z</published>
    <title>Diffusion Models Beat GANs on Image Synthesis</title>
    <author><name>Prafulla Dhariwal</name></author>
    <author><name>Alex Nichol</name></author>
    <link href="http://arxiv.org/abs/2105.05233v4" rel="alternate" type="text/html"/>
  </entry>
</feed>
"""


@pytest.fixture
def crossref_payload():
    """Mock response from CrossRef /works (third item has no title)."""
    return {
        "status": "ok",
        "message-type": "work-list",
        "message": {
            "total-results": 3,
            "items": [
                {
                    "DOI": "10.1000/ddpm.2020",
                    "URL": "https://doi.org/10.1000/ddpm.2020",
                    "title": ["Denoising diffusion in practice"],
                    "author": [
                        {"given": "Jane", "family": "Doe"},
                        {"name": "Diffusion Consortium"},
                    ],
                    "issued": {"date-parts": [[2021]]},
                    "published-online": {"date-parts": [[2020, 11, 3]]},
                },
                {
                    "title": ["Score-based generative modeling"],
                    "URL": "https://example.org/score",
                },
                {"DOI": "10.1000/untitled", "title": []},
            ],
        },
    }


# ============================================================
# Results
# ============================================================


@pytest.fixture
def summary():
    return EncyclopediaSummary(
        title="Diffusion model",
        extract="Diffusion models are a class of generative models.",
        source_url="https://en.wikipedia.org/wiki/Diffusion_model",
    )


@pytest.fixture
def scholarly_entry():
    return ScholarlyEntry(
        title="Denoising Diffusion Probabilistic Models",
        authors=("Jonathan Ho", "Ajay Jain", "Pieter Abbeel"),
        published_date=date(2020, 6, 19),
        source_url="http://arxiv.org/abs/2006.11239v2",
    )


@pytest.fixture
def work_entry():
    return WorkEntry(
        title="Denoising diffusion in practice",
        authors=("Jane Doe",),
        year=2020,
        source_url="https://doi.org/10.1000/ddpm.2020",
    )


@pytest.fixture
def full_result(summary, scholarly_entry, work_entry):
    return DeepSearchResult(
        query="diffusion models",
        encyclopedia=summary,
        scholarly=(scholarly_entry,),
        works=(work_entry, WorkEntry(title="Untitled metadata-only work")),
    )
