"""
Application layer - aggregation and the end-to-end report pipeline.
"""

from .aggregator import DeepSearchAggregator, deep_search, normalize_query
from .pipeline import DeepResearchReport, report_filename, run_deep_search, safe_filename

__all__ = [
    "DeepResearchReport",
    "DeepSearchAggregator",
    "deep_search",
    "normalize_query",
    "report_filename",
    "run_deep_search",
    "safe_filename",
]
