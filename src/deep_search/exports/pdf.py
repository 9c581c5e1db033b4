"""
PDF Export - render a DeepSearchResult as a citation-annotated PDF.

Layout (fixed order, empty parts omitted):
    Title block      query text + subtitle naming the sources
    Overview         Wikipedia title, extract, source link, license note
    Scholarly Papers one item per arXiv entry
    Related Works    one item per CrossRef work

Built on reportlab platypus:
- Paragraph wraps text to the frame width and splits long extracts across pages
- Each list item is wrapped in KeepTogether so its lines never straddle a page
- <link href> markup produces clickable URI annotations
- invariant=1 drops the creation timestamp and random document id, so the
  same result always yields the same bytes

Text is normalized to what the built-in Helvetica fonts can encode (cp1252);
anything else becomes "?". The only failure this module raises is
CompositionError.
"""

from __future__ import annotations

import io
import logging
import unicodedata
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import KeepTogether, Paragraph, SimpleDocTemplate, Spacer

from deep_search.core.exceptions import CompositionError, ErrorContext

if TYPE_CHECKING:
    from reportlab.pdfgen.canvas import Canvas
    from reportlab.platypus import Flowable

    from deep_search.models import DeepSearchResult, EncyclopediaSummary, ScholarlyEntry, WorkEntry

logger = logging.getLogger(__name__)

SECTION_OVERVIEW = "Overview"
SECTION_SCHOLARLY = "Scholarly Papers"
SECTION_WORKS = "Related Works"

SUBTITLE = "Deep research report · Sources: Wikipedia, arXiv, Crossref"
EMPTY_NOTE = "No source returned results for this query."
WIKIPEDIA_LICENSE_NOTE = "Wikipedia content is licensed under CC BY-SA 4.0."
AUTHOR_SEPARATOR = ", "
META_SEPARATOR = " · "

_FONT_ENCODING = "cp1252"
_LINK_COLOR = "#1a56db"


# =============================================================================
# Text helpers
# =============================================================================


def safe_text(text: str | None) -> str:
    """Best-effort substitution of characters the built-in fonts cannot show."""
    if not text:
        return ""
    normalized = unicodedata.normalize("NFKC", text)
    chars = []
    for ch in normalized:
        if ch in "\t\r\n":
            chars.append(" ")
        elif unicodedata.category(ch) == "Cc":
            continue
        else:
            try:
                ch.encode(_FONT_ENCODING)
            except UnicodeEncodeError:
                ch = "?"
            chars.append(ch)
    return " ".join("".join(chars).split())


def markup(text: str | None) -> str:
    """Sanitized text escaped for Paragraph mini-markup."""
    return escape(safe_text(text))


def link_markup(url: str | None, label: str | None = None) -> str:
    """Clickable link for http(s) URLs, plain text otherwise."""
    cleaned = safe_text(url)
    visible = escape(safe_text(label) if label else cleaned)
    if not cleaned.startswith(("http://", "https://")):
        return visible
    href = escape(cleaned, {'"': "&quot;"})
    return f'<link href="{href}" color="{_LINK_COLOR}"><u>{visible}</u></link>'


# =============================================================================
# Composer
# =============================================================================


class DocumentComposer:
    """
    Deterministic PDF writer for deep search results.

    Usage:
        pdf_bytes = DocumentComposer().compose(result)
    """

    def __init__(self, pagesize: tuple[float, float] = A4, margin: float = 54.0) -> None:
        self._pagesize = pagesize
        self._margin = margin
        self._styles = self._build_styles()

    @staticmethod
    def _build_styles() -> dict[str, ParagraphStyle]:
        base = getSampleStyleSheet()
        return {
            "title": ParagraphStyle(
                "DeepSearchTitle",
                parent=base["Title"],
                fontName="Helvetica-Bold",
                fontSize=20,
                leading=24,
                alignment=TA_CENTER,
                spaceAfter=6,
            ),
            "subtitle": ParagraphStyle(
                "DeepSearchSubtitle",
                parent=base["Normal"],
                fontSize=9,
                leading=12,
                alignment=TA_CENTER,
                textColor=colors.grey,
                spaceAfter=18,
            ),
            "heading": ParagraphStyle(
                "DeepSearchHeading",
                parent=base["Heading2"],
                fontName="Helvetica-Bold",
                fontSize=14,
                leading=18,
                spaceBefore=12,
                spaceAfter=6,
                keepWithNext=1,
            ),
            "item_title": ParagraphStyle(
                "DeepSearchItemTitle",
                parent=base["Normal"],
                fontName="Helvetica-Bold",
                fontSize=10.5,
                leading=13,
            ),
            "body": ParagraphStyle(
                "DeepSearchBody",
                parent=base["Normal"],
                fontSize=10.5,
                leading=14,
                spaceAfter=6,
            ),
            "meta": ParagraphStyle(
                "DeepSearchMeta",
                parent=base["Normal"],
                fontSize=9,
                leading=12,
                textColor=colors.HexColor("#444444"),
            ),
            "note": ParagraphStyle(
                "DeepSearchNote",
                parent=base["Normal"],
                fontName="Helvetica-Oblique",
                fontSize=8,
                leading=10,
                textColor=colors.grey,
            ),
        }

    def compose(self, result: DeepSearchResult) -> bytes:
        """
        Render *result* to PDF bytes.

        Raises:
            CompositionError: the writer could not build the document
        """
        buffer = io.BytesIO()
        try:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=self._pagesize,
                leftMargin=self._margin,
                rightMargin=self._margin,
                topMargin=self._margin,
                bottomMargin=self._margin,
                title=safe_text(result.query),
                author="deep-search-pdf",
                creator="deep-search-pdf",
                subject="Deep research report",
                invariant=1,
            )
            doc.build(self.build_story(result), onFirstPage=_draw_footer, onLaterPages=_draw_footer)
        except Exception as e:
            logger.exception(f"PDF composition failed for {result.query!r}")
            raise CompositionError(
                f"Failed to generate PDF: {e}",
                context=ErrorContext(operation="compose_pdf", input_value=result.query),
            ) from e

        data = buffer.getvalue()
        logger.info(f"Composed PDF for {result.query!r}: {len(data)} bytes")
        return data

    def build_story(self, result: DeepSearchResult) -> list[Flowable]:
        """Flowables for the whole document, in layout order."""
        story: list[Flowable] = [
            Paragraph(markup(result.query), self._styles["title"]),
            Paragraph(escape(SUBTITLE), self._styles["subtitle"]),
        ]

        if result.encyclopedia is not None:
            story.extend(self._overview_section(result.encyclopedia))
        if result.scholarly:
            story.extend(self._scholarly_section(result.scholarly))
        if result.works:
            story.extend(self._works_section(result.works))

        if result.is_empty:
            story.append(Paragraph(escape(EMPTY_NOTE), self._styles["meta"]))
        return story

    def _overview_section(self, summary: EncyclopediaSummary) -> list[Flowable]:
        flowables: list[Flowable] = [
            Paragraph(SECTION_OVERVIEW, self._styles["heading"]),
            Paragraph(markup(summary.title), self._styles["item_title"]),
            Spacer(1, 4),
        ]
        # Separate Paragraphs let reportlab break between them as well as inside them
        for block in summary.extract.split("\n\n"):
            if block.strip():
                flowables.append(Paragraph(markup(block), self._styles["body"]))
        flowables.append(
            KeepTogether(
                [
                    Paragraph(f"Source: {link_markup(summary.source_url)}", self._styles["meta"]),
                    Paragraph(escape(WIKIPEDIA_LICENSE_NOTE), self._styles["note"]),
                ]
            )
        )
        return flowables

    def _scholarly_section(self, entries: tuple[ScholarlyEntry, ...]) -> list[Flowable]:
        flowables: list[Flowable] = [Paragraph(SECTION_SCHOLARLY, self._styles["heading"])]
        for index, entry in enumerate(entries, 1):
            meta = META_SEPARATOR.join([AUTHOR_SEPARATOR.join(entry.authors), entry.published_date.isoformat()])
            flowables.append(
                self._list_item(index, entry.title, meta, f"arXiv: {link_markup(entry.source_url)}")
            )
        return flowables

    def _works_section(self, works: tuple[WorkEntry, ...]) -> list[Flowable]:
        flowables: list[Flowable] = [Paragraph(SECTION_WORKS, self._styles["heading"])]
        for index, work in enumerate(works, 1):
            parts = []
            if work.authors:
                parts.append(AUTHOR_SEPARATOR.join(work.authors))
            if work.year is not None:
                parts.append(str(work.year))
            citation = f"Link: {link_markup(work.source_url)}" if work.source_url else None
            flowables.append(self._list_item(index, work.title, META_SEPARATOR.join(parts), citation))
        return flowables

    def _list_item(self, index: int, title: str, meta: str, citation: str | None) -> KeepTogether:
        """One entry; KeepTogether moves the whole group to the next page if needed."""
        lines: list[Flowable] = [Paragraph(f"{index}. {markup(title)}", self._styles["item_title"])]
        if meta:
            lines.append(Paragraph(markup(meta), self._styles["meta"]))
        if citation:
            lines.append(Paragraph(citation, self._styles["meta"]))
        lines.append(Spacer(1, 8))
        return KeepTogether(lines)


def _draw_footer(canvas: Canvas, doc: SimpleDocTemplate) -> None:
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.setFillColor(colors.grey)
    canvas.drawCentredString(doc.pagesize[0] / 2, doc.bottomMargin / 2, f"Page {doc.page}")
    canvas.restoreState()


def compose_pdf(result: DeepSearchResult) -> bytes:
    """Render *result* with the default A4 layout."""
    return DocumentComposer().compose(result)
