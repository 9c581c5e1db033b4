"""
Server instructions shown to MCP clients.
"""

SERVER_INSTRUCTIONS = """\
Deep Search builds citation-rich research reports from public sources.

Tools:
- deep_search_pdf(query, output_dir?): Wikipedia overview + arXiv papers +
  Crossref works, saved as a PDF with clickable source links.
- deep_search_preview(query): same search, Markdown only.

Notes:
- Sources are queried in parallel; a source that fails or finds nothing is
  simply omitted from the report.
- Wikipedia content is licensed under CC BY-SA 4.0; keep the source links
  when reusing the overview text.
"""
