"""
Deep Search Settings.

The core never reads the environment itself: clients, the aggregator and the
pipeline take a DeepSearchSettings instance. Only the MCP entry point calls
DeepSearchSettings.from_env().

Environment variables:
    DEEP_SEARCH_TIMEOUT          Per-request timeout in seconds (default 8)
    DEEP_SEARCH_MAX_RETRIES      Retries per source before degrading (default 0)
    DEEP_SEARCH_SCHOLARLY_LIMIT  Max arXiv entries (default 5)
    DEEP_SEARCH_WORKS_LIMIT      Max Crossref works (default 8)
    DEEP_SEARCH_WIKI_LANG        Wikipedia language edition (default "en")
    CROSSREF_EMAIL               Contact email for the Crossref polite pool
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

from deep_search.core.exceptions import ConfigurationError

DEFAULT_TIMEOUT = 8.0
DEFAULT_SCHOLARLY_LIMIT = 5
DEFAULT_WORKS_LIMIT = 8
DEFAULT_EMAIL = "deep-search-pdf@example.com"
DEFAULT_USER_AGENT = "deep-search-pdf/0.1"

_LANG_PATTERN = re.compile(r"^[a-z]{2,3}(-[a-z]+)?$")


@dataclass(frozen=True)
class DeepSearchSettings:
    """Tunables for one deep search run."""

    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = 0
    scholarly_limit: int = DEFAULT_SCHOLARLY_LIMIT
    works_limit: int = DEFAULT_WORKS_LIMIT
    wikipedia_language: str = "en"
    contact_email: str = DEFAULT_EMAIL
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout!r}")
        if self.max_retries < 0:
            raise ConfigurationError(f"max_retries must be >= 0, got {self.max_retries!r}")
        if not _LANG_PATTERN.match(self.wikipedia_language):
            raise ConfigurationError(f"Invalid Wikipedia language code: {self.wikipedia_language!r}")
        # Clamp to what the upstream APIs accept
        object.__setattr__(self, "scholarly_limit", max(1, min(self.scholarly_limit, 100)))
        object.__setattr__(self, "works_limit", max(1, min(self.works_limit, 1000)))

    @classmethod
    def from_env(cls) -> DeepSearchSettings:
        """Build settings from DEEP_SEARCH_* environment variables."""
        return cls(
            timeout=_env_float("DEEP_SEARCH_TIMEOUT", DEFAULT_TIMEOUT),
            max_retries=_env_int("DEEP_SEARCH_MAX_RETRIES", 0),
            scholarly_limit=_env_int("DEEP_SEARCH_SCHOLARLY_LIMIT", DEFAULT_SCHOLARLY_LIMIT),
            works_limit=_env_int("DEEP_SEARCH_WORKS_LIMIT", DEFAULT_WORKS_LIMIT),
            wikipedia_language=os.environ.get("DEEP_SEARCH_WIKI_LANG", "").strip().lower() or "en",
            contact_email=os.environ.get("CROSSREF_EMAIL", "").strip() or DEFAULT_EMAIL,
        )


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
