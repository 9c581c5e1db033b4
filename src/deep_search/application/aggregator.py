"""
DeepSearchAggregator - concurrent fan-out to the three sources.

Runs the Wikipedia, arXiv and CrossRef lookups as independent tasks and joins
them with settle-all semantics (asyncio.gather with return_exceptions=True):
the join returns only after every task has finished, and one task finishing
early or failing never cancels the others.

Clients already degrade their own failures to None / (). A task that still
raises is a defect; it is logged, reported as SourceStatus.ERROR and degraded
the same way.

Example:
    >>> aggregator = DeepSearchAggregator()
    >>> result = await aggregator.run("diffusion models")
    >>> len(result.scholarly) <= 5
    True
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import AsyncExitStack
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from deep_search.config import DeepSearchSettings
from deep_search.core.exceptions import InvalidQueryError
from deep_search.infrastructure.sources import ArXivClient, CrossRefClient, WikipediaClient
from deep_search.models import DeepSearchResult, ProgressEvent, SourceStatus

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[ProgressEvent], None]

# Step ids shared with progress observers
STEP_WIKIPEDIA = "wiki"
STEP_ARXIV = "arxiv"
STEP_CROSSREF = "crossref"
SOURCE_STEPS = (STEP_WIKIPEDIA, STEP_ARXIV, STEP_CROSSREF)


def normalize_query(query: str | None) -> str:
    """Trim a query; raises InvalidQueryError when nothing is left."""
    if query is None or not isinstance(query, str):
        raise InvalidQueryError(query, "Query must be a string")
    trimmed = query.strip()
    if not trimmed:
        raise InvalidQueryError(query)
    return trimmed


def emit(on_progress: ProgressCallback | None, event: ProgressEvent) -> None:
    """Deliver one event; observer errors are logged and ignored."""
    if on_progress is None:
        return
    try:
        on_progress(event)
    except Exception:
        logger.exception(f"Progress observer failed on {event.step}={event.status.value}")


class DeepSearchAggregator:
    """
    Join point for one deep search.

    Clients may be injected (the caller then owns and closes them); otherwise
    fresh clients are built from settings for each run and closed afterwards.
    """

    def __init__(
        self,
        settings: DeepSearchSettings | None = None,
        *,
        wikipedia: WikipediaClient | None = None,
        arxiv: ArXivClient | None = None,
        crossref: CrossRefClient | None = None,
    ) -> None:
        self._settings = settings or DeepSearchSettings()
        self._wikipedia = wikipedia
        self._arxiv = arxiv
        self._crossref = crossref

    async def run(self, query: str, on_progress: ProgressCallback | None = None) -> DeepSearchResult:
        """
        Query all three sources concurrently and assemble the result.

        Raises:
            InvalidQueryError: query is empty after trimming
        """
        topic = normalize_query(query)
        logger.info(f"Deep search started: {topic!r}")

        async with AsyncExitStack() as stack:
            wikipedia = self._wikipedia or await stack.enter_async_context(WikipediaClient(self._settings))
            arxiv = self._arxiv or await stack.enter_async_context(ArXivClient(self._settings))
            crossref = self._crossref or await stack.enter_async_context(CrossRefClient(self._settings))

            for step in SOURCE_STEPS:
                emit(on_progress, ProgressEvent(step, SourceStatus.RUNNING))

            summary, entries, works = await asyncio.gather(
                self._settle(STEP_WIKIPEDIA, wikipedia.fetch_summary(topic), None, on_progress),
                self._settle(STEP_ARXIV, arxiv.fetch_entries(topic), (), on_progress),
                self._settle(STEP_CROSSREF, crossref.fetch_works(topic), (), on_progress),
                return_exceptions=True,
            )

        result = DeepSearchResult(
            query=topic,
            encyclopedia=None if isinstance(summary, BaseException) else summary,
            scholarly=() if isinstance(entries, BaseException) else entries,
            works=() if isinstance(works, BaseException) else works,
        )
        logger.info(
            f"Deep search finished: {topic!r} "
            f"(wiki={'yes' if result.encyclopedia else 'no'}, "
            f"arxiv={len(result.scholarly)}, crossref={len(result.works)})"
        )
        return result

    async def _settle(
        self,
        step: str,
        fetch: Awaitable[T],
        fallback: T,
        on_progress: ProgressCallback | None,
    ) -> T:
        """Await one source and report its terminal status."""
        try:
            value = await fetch
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception(f"{step}: unexpected failure, degrading to empty")
            emit(on_progress, ProgressEvent(step, SourceStatus.ERROR, str(e) or type(e).__name__))
            return fallback

        status, detail = _describe(step, value)
        emit(on_progress, ProgressEvent(step, status, detail))
        return value


def _describe(step: str, value: Any) -> tuple[SourceStatus, str]:
    if step == STEP_WIKIPEDIA:
        if value is None:
            return SourceStatus.EMPTY, "No result"
        return SourceStatus.DONE, value.title
    count = len(value)
    return (SourceStatus.DONE if count else SourceStatus.EMPTY), f"{count} entries"


async def deep_search(query: str, settings: DeepSearchSettings | None = None) -> DeepSearchResult:
    """Convenience wrapper: one aggregator run with fresh clients."""
    return await DeepSearchAggregator(settings).run(query)
