"""
Deep Search Models - normalized records shared by clients, aggregator and composer.
"""

from .results import (
    DeepSearchResult,
    EncyclopediaSummary,
    ProgressEvent,
    ScholarlyEntry,
    SourceStatus,
    WorkEntry,
)

__all__ = [
    "DeepSearchResult",
    "EncyclopediaSummary",
    "ProgressEvent",
    "ScholarlyEntry",
    "SourceStatus",
    "WorkEntry",
]
