"""
Deep Research Pipeline - query in, PDF out.

    query -> DeepSearchAggregator.run -> DocumentComposer.compose -> bytes

Progress observers receive the three source steps from the aggregator and a
final "pdf" step. CompositionError is the only failure after input
validation; it is reported on the "pdf" step and re-raised.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from deep_search.application.aggregator import DeepSearchAggregator, ProgressCallback, emit
from deep_search.core.exceptions import CompositionError
from deep_search.exports.pdf import DocumentComposer
from deep_search.models import ProgressEvent, SourceStatus

if TYPE_CHECKING:
    from deep_search.config import DeepSearchSettings
    from deep_search.models import DeepSearchResult

logger = logging.getLogger(__name__)

STEP_PDF = "pdf"
FILENAME_SUFFIX = "_deep_research.pdf"

_WHITESPACE_RUN = re.compile(r"\s+")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w\-.]+")
_MAX_STEM_BYTES = 150


def report_filename(query: str) -> str:
    """Download name for a report: whitespace runs become '_'."""
    return f"{_WHITESPACE_RUN.sub('_', query)}{FILENAME_SUFFIX}"


def safe_filename(filename: str) -> str:
    """
    Reduce a report filename to one path component that is safe to write.

    Path separators and other punctuation become '_', leading dots are
    dropped and the stem is capped so the name fits common filesystems.
    """
    name = _UNSAFE_FILENAME_CHARS.sub("_", filename)
    stem = name[: -len(FILENAME_SUFFIX)] if name.endswith(FILENAME_SUFFIX) else name
    stem = stem.lstrip("._").encode("utf-8")[:_MAX_STEM_BYTES].decode("utf-8", "ignore")
    return f"{stem or 'report'}{FILENAME_SUFFIX}"


@dataclass(frozen=True)
class DeepResearchReport:
    """Everything one pipeline run produced."""

    result: DeepSearchResult
    pdf: bytes
    filename: str


async def run_deep_search(
    query: str,
    settings: DeepSearchSettings | None = None,
    on_progress: ProgressCallback | None = None,
    *,
    aggregator: DeepSearchAggregator | None = None,
    composer: DocumentComposer | None = None,
) -> DeepResearchReport:
    """
    Aggregate the sources for *query* and render the PDF.

    Raises:
        InvalidQueryError: query is empty after trimming
        CompositionError: the PDF could not be produced
    """
    aggregator = aggregator or DeepSearchAggregator(settings)
    composer = composer or DocumentComposer()

    result = await aggregator.run(query, on_progress=on_progress)

    emit(on_progress, ProgressEvent(STEP_PDF, SourceStatus.RUNNING))
    try:
        pdf = composer.compose(result)
    except CompositionError as e:
        emit(on_progress, ProgressEvent(STEP_PDF, SourceStatus.ERROR, str(e)))
        raise
    emit(on_progress, ProgressEvent(STEP_PDF, SourceStatus.DONE, f"{len(pdf)} bytes"))

    return DeepResearchReport(result=result, pdf=pdf, filename=report_filename(result.query))
