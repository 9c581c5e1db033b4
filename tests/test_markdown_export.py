"""Tests for the Markdown preview."""

from deep_search.exports import format_result_markdown
from deep_search.models import DeepSearchResult, EncyclopediaSummary, WorkEntry


class TestFormatResultMarkdown:
    def test_full_result(self, full_result):
        md = format_result_markdown(full_result)

        assert md.startswith("# Deep Research: diffusion models")
        assert "## Overview" in md
        assert "**Diffusion model**" in md
        assert "Source: https://en.wikipedia.org/wiki/Diffusion_model" in md
        assert "- **Denoising Diffusion Probabilistic Models** - Jonathan Ho, Ajay Jain, Pieter Abbeel" in md
        assert "2020-06-19 [link](http://arxiv.org/abs/2006.11239v2)" in md
        assert "- **Denoising diffusion in practice** (2020) - Jane Doe [link](https://doi.org/10.1000/ddpm.2020)" in md
        assert "- **Untitled metadata-only work**\n" in md

    def test_section_order(self, full_result):
        md = format_result_markdown(full_result)
        assert md.index("## Overview") < md.index("## Scholarly Papers") < md.index("## Related Works")

    def test_empty_sections_omitted(self):
        md = format_result_markdown(DeepSearchResult(query="q", works=(WorkEntry(title="W"),)))
        assert "## Overview" not in md
        assert "## Scholarly Papers" not in md
        assert "## Related Works" in md
        assert "No source returned results" not in md

    def test_all_empty(self):
        md = format_result_markdown(DeepSearchResult(query="nothing"))
        assert "_No source returned results for this query._" in md
        assert "##" not in md

    def test_long_extract_truncated(self):
        summary = EncyclopediaSummary(title="T", extract="x" * 2000, source_url="https://en.wikipedia.org/wiki/T")
        md = format_result_markdown(DeepSearchResult(query="q", encyclopedia=summary))
        assert "x" * 600 + "..." in md
        assert "x" * 601 not in md
