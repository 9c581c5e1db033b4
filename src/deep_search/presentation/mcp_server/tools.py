"""
Deep Search Tools - MCP tools wrapping the report pipeline.

Provides:
- deep_search_pdf: aggregate sources for a topic and save the PDF report
- deep_search_preview: aggregate sources and return Markdown only
"""

import logging
import os
import tempfile
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from deep_search.application import DeepSearchAggregator, run_deep_search, safe_filename
from deep_search.config import DeepSearchSettings
from deep_search.core.exceptions import DeepSearchError
from deep_search.exports import format_result_markdown

logger = logging.getLogger(__name__)

# Default directory for saved reports
EXPORT_DIR = os.path.join(tempfile.gettempdir(), "deep_search_exports")


def register_deep_search_tools(mcp: FastMCP, settings: DeepSearchSettings) -> list[str]:
    """Register deep search tools; returns the registered tool names."""

    @mcp.tool()
    async def deep_search_pdf(query: str, output_dir: str | None = None) -> str:
        """
        Deep-search a topic and save a citation-rich PDF report.

        Queries Wikipedia (overview), arXiv (scholarly papers) and Crossref
        (related works) in parallel. Sources that fail or have no results
        are left out of the report instead of failing the call.

        Args:
            query: Topic or niche, e.g. "diffusion models in medical imaging"
            output_dir: Directory for the PDF (default: system temp dir)

        Returns:
            Markdown preview of the report followed by the saved file path.
        """
        try:
            report = await run_deep_search(query, settings)
        except DeepSearchError as e:
            logger.warning(f"deep_search_pdf failed: {e}")
            return f"Error: {e}"

        target_dir = Path(output_dir or EXPORT_DIR).resolve()
        path = (target_dir / safe_filename(report.filename)).resolve()
        if path.parent != target_dir:
            logger.warning(f"deep_search_pdf: refusing to write {path} outside {target_dir}")
            return f"Error: report path escapes output directory {target_dir}"

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(report.pdf)
        except OSError as e:
            logger.warning(f"deep_search_pdf: could not save {path}: {e}")
            return f"Error: could not save PDF: {e}"
        logger.info(f"Saved deep research PDF: {path}")

        return f"{format_result_markdown(report.result)}\n---\nPDF saved: `{path}` ({len(report.pdf)} bytes)"

    @mcp.tool()
    async def deep_search_preview(query: str) -> str:
        """
        Deep-search a topic and return the findings as Markdown (no PDF).

        Args:
            query: Topic or niche to research
        """
        try:
            result = await DeepSearchAggregator(settings).run(query)
        except DeepSearchError as e:
            return f"Error: {e}"
        return format_result_markdown(result)

    return ["deep_search_pdf", "deep_search_preview"]
