"""
Deep Search - citation-rich PDF reports from public knowledge sources.

Queries Wikipedia, arXiv and CrossRef concurrently for one topic, tolerates
any of them failing, and renders the combined result as a PDF with clickable
source links.

Usage:
    from deep_search import run_deep_search

    report = await run_deep_search("diffusion models")
    Path(report.filename).write_bytes(report.pdf)

Lower-level pieces:
    DeepSearchAggregator  concurrent fetch + settle-all join
    DocumentComposer      DeepSearchResult -> PDF bytes
"""

from .application import DeepResearchReport, DeepSearchAggregator, report_filename, run_deep_search
from .config import DeepSearchSettings
from .core.exceptions import CompositionError, DeepSearchError, InvalidQueryError
from .exports import DocumentComposer, format_result_markdown
from .models import (
    DeepSearchResult,
    EncyclopediaSummary,
    ProgressEvent,
    ScholarlyEntry,
    SourceStatus,
    WorkEntry,
)

__version__ = "0.1.0"

__all__ = [
    "CompositionError",
    "DeepResearchReport",
    "DeepSearchAggregator",
    "DeepSearchError",
    "DeepSearchResult",
    "DeepSearchSettings",
    "DocumentComposer",
    "EncyclopediaSummary",
    "InvalidQueryError",
    "ProgressEvent",
    "ScholarlyEntry",
    "SourceStatus",
    "WorkEntry",
    "format_result_markdown",
    "report_filename",
    "run_deep_search",
]
