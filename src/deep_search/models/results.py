"""
Deep Search Result Model

Normalized records for the three sources and the aggregated, read-only result
that the PDF composer consumes.

Architecture Decision:
    Frozen dataclasses with tuple fields, so a DeepSearchResult cannot be
    mutated after the aggregator builds it.

    encyclopedia is the only optional field. scholarly and works are always
    tuples (possibly empty) and keep the order the upstream source returned.

Example:
    >>> result = DeepSearchResult(query="diffusion models")
    >>> result.is_empty
    True
    >>> result.scholarly
    ()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class EncyclopediaSummary:
    """Summary of one unambiguous Wikipedia article."""

    title: str
    extract: str
    source_url: str

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "extract": self.extract, "source_url": self.source_url}


@dataclass(frozen=True)
class ScholarlyEntry:
    """One arXiv paper. authors is never empty."""

    title: str
    authors: tuple[str, ...]
    published_date: date
    source_url: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "authors", tuple(self.authors))
        if not self.authors:
            msg = "ScholarlyEntry requires at least one author"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "authors": list(self.authors),
            "published_date": self.published_date.isoformat(),
            "source_url": self.source_url,
        }


@dataclass(frozen=True)
class WorkEntry:
    """One Crossref work. authors may be empty; year and source_url may be None."""

    title: str
    authors: tuple[str, ...] = ()
    year: int | None = None
    source_url: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "authors", tuple(self.authors))

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "authors": list(self.authors),
            "year": self.year,
            "source_url": self.source_url,
        }


@dataclass(frozen=True)
class DeepSearchResult:
    """
    Aggregated result of one deep search.

    Created fresh per run and discarded once the PDF is produced.
    """

    query: str
    encyclopedia: EncyclopediaSummary | None = None
    scholarly: tuple[ScholarlyEntry, ...] = field(default_factory=tuple)
    works: tuple[WorkEntry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any iterable but store tuples
        object.__setattr__(self, "scholarly", tuple(self.scholarly))
        object.__setattr__(self, "works", tuple(self.works))

    @property
    def is_empty(self) -> bool:
        """True when no source contributed anything."""
        return self.encyclopedia is None and not self.scholarly and not self.works

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "query": self.query,
            "encyclopedia": self.encyclopedia.to_dict() if self.encyclopedia else None,
            "scholarly": [e.to_dict() for e in self.scholarly],
            "works": [w.to_dict() for w in self.works],
        }


# =============================================================================
# Progress Events
# =============================================================================


class SourceStatus(Enum):
    """Lifecycle of one pipeline step, as shown by a progress observer."""

    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"  # settled with data
    EMPTY = "empty"  # settled without data
    ERROR = "error"


@dataclass(frozen=True)
class ProgressEvent:
    """One status change for a named step ("wiki", "arxiv", "crossref", "pdf")."""

    step: str
    status: SourceStatus
    detail: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (SourceStatus.DONE, SourceStatus.EMPTY, SourceStatus.ERROR)
