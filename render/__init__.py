"""
render — paginated PDF rendering of content trees and fragment lists.

Public API:
  render_text_ebook(text, title, author, references)       -> bytes
  render_structured_ebook(document, author, references)    -> bytes
  layout_document(document, ...) / layout_text(text, ...)   -> Book
  write_pdf(book, title, author)                           -> bytes
"""

from .styles import DEFAULT_GEOMETRY, PageGeometry, STYLES, StyleName, BlockStyle
from .layout import Line, PlacedRun, measure, wrap_runs
from .blocks import BlockKind, StyledBlock, cover_blocks, document_blocks, fragment_blocks
from .paginator import Book, Page, paginate
from .writer import write_pdf
from .pipeline import (
    layout_document,
    layout_fragments,
    layout_text,
    render_structured_ebook,
    render_text_ebook,
)

__all__ = [
    # geometry / styles
    "DEFAULT_GEOMETRY",
    "PageGeometry",
    "STYLES",
    "StyleName",
    "BlockStyle",
    # layout
    "Line",
    "PlacedRun",
    "measure",
    "wrap_runs",
    # blocks / pages
    "BlockKind",
    "StyledBlock",
    "cover_blocks",
    "document_blocks",
    "fragment_blocks",
    "Book",
    "Page",
    "paginate",
    # output
    "write_pdf",
    "layout_document",
    "layout_fragments",
    "layout_text",
    "render_structured_ebook",
    "render_text_ebook",
]
