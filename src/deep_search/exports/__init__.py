"""
Exports - render a DeepSearchResult.

Supported formats:
- PDF: citation-annotated document (DocumentComposer)
- Markdown: preview text
"""

from .markdown import format_result_markdown
from .pdf import DocumentComposer, compose_pdf

__all__ = [
    "DocumentComposer",
    "compose_pdf",
    "format_result_markdown",
]
