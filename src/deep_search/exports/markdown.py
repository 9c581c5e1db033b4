"""
Markdown Preview - a text rendering of a DeepSearchResult.

Mirrors the PDF's section order so an agent (or a terminal) can show what
the document contains without opening it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from deep_search.exports.pdf import SECTION_OVERVIEW, SECTION_SCHOLARLY, SECTION_WORKS

if TYPE_CHECKING:
    from deep_search.models import DeepSearchResult

_EXTRACT_MAX_LEN = 600


def format_result_markdown(result: DeepSearchResult) -> str:
    """Render the preview; empty sections are omitted like in the PDF."""
    parts: list[str] = [f"# Deep Research: {result.query}\n"]

    summary = result.encyclopedia
    if summary is not None:
        extract = summary.extract
        if len(extract) > _EXTRACT_MAX_LEN:
            extract = extract[:_EXTRACT_MAX_LEN].rstrip() + "..."
        parts.append(f"## {SECTION_OVERVIEW}\n")
        parts.append(f"**{summary.title}**\n")
        if extract:
            parts.append(f"{extract}\n")
        parts.append(f"Source: {summary.source_url}\n")

    if result.scholarly:
        parts.append(f"## {SECTION_SCHOLARLY}\n")
        for entry in result.scholarly:
            parts.append(
                f"- **{entry.title}** - {', '.join(entry.authors)} · "
                f"{entry.published_date.isoformat()} [link]({entry.source_url})"
            )
        parts.append("")

    if result.works:
        parts.append(f"## {SECTION_WORKS}\n")
        for work in result.works:
            line = f"- **{work.title}**"
            if work.year is not None:
                line += f" ({work.year})"
            if work.authors:
                line += f" - {', '.join(work.authors)}"
            if work.source_url:
                line += f" [link]({work.source_url})"
            parts.append(line)
        parts.append("")

    if result.is_empty:
        parts.append("_No source returned results for this query._\n")

    return "\n".join(parts)
