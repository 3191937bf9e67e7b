"""
render/pipeline.py — end-to-end rendering.

Two pipelines share the block builder, paginator and writer:

  render_text_ebook(text, title)      heuristic path: normalize → classify
                                      → bind figures → fragment blocks
  render_structured_ebook(document)   structured path: bind figures →
                                      document blocks

Both return PDF bytes. The layout_* functions stop before the writer and
return the paginated Book, which is what the tests inspect.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from data_model.content import Document, Figure, FigureReference
from data_model.errors import MalformedInput
from data_model.fragments import FragmentKind, RawFragment
from figures.binder import bind_figures
from render.blocks import cover_blocks, document_blocks, fragment_blocks
from render.paginator import Book, paginate
from render.styles import DEFAULT_GEOMETRY, PageGeometry
from render.writer import write_pdf
from text_parser.classifier import classify_text
from text_parser.normalizer import normalize_text

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Layout (no PDF output)
# ---------------------------------------------------------------------------

def layout_document(
    document: Document,
    author: str | None = None,
    references: Sequence[FigureReference] = (),
    geometry: PageGeometry = DEFAULT_GEOMETRY,
) -> Book:
    bound = bind_figures(document, references)
    log.debug("bound %d figure images", bound)
    cover = cover_blocks(document.title, document.subtitle, author, geometry)
    return paginate(cover, document_blocks(document, geometry), geometry)


def layout_fragments(
    fragments: Sequence[RawFragment],
    title: str,
    author: str | None = None,
    references: Sequence[FigureReference] = (),
    geometry: PageGeometry = DEFAULT_GEOMETRY,
) -> Book:
    figures = [Figure(caption=f.text) for f in fragments if f.kind is FragmentKind.FIGURE_CAPTION]
    bound = bind_figures(figures, references)
    log.debug("bound %d of %d figure images", bound, len(figures))
    cover = cover_blocks(title, None, author, geometry)
    return paginate(cover, fragment_blocks(fragments, geometry, figures), geometry)


def layout_text(
    text: str,
    title: str,
    author: str | None = None,
    references: Sequence[FigureReference] = (),
    geometry: PageGeometry = DEFAULT_GEOMETRY,
) -> Book:
    """
    Normalizes and classifies raw text, then lays out the fragments.

    Raises:
        MalformedInput: The text is empty after normalization.
    """
    cleaned = normalize_text(text)
    if not cleaned:
        raise MalformedInput("No text provided")
    fragments = classify_text(cleaned)
    log.info("classified %d fragments", len(fragments))
    return layout_fragments(fragments, title, author, references, geometry)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_structured_ebook(
    document: Document,
    author: str | None = None,
    references: Sequence[FigureReference] = (),
    geometry: PageGeometry = DEFAULT_GEOMETRY,
) -> bytes:
    """
    Renders a Document tree to PDF bytes.

    Raises:
        RenderingFailure: The PDF writer failed.
    """
    book = layout_document(document, author, references, geometry)
    return write_pdf(book, title=document.title, author=author)


def render_text_ebook(
    text: str,
    title: str,
    author: str | None = None,
    references: Sequence[FigureReference] = (),
    geometry: PageGeometry = DEFAULT_GEOMETRY,
) -> bytes:
    """
    Renders raw extracted text to PDF bytes using the heuristic classifier.

    Raises:
        MalformedInput:   The text is empty after normalization.
        RenderingFailure: The PDF writer failed.
    """
    book = layout_text(text, title, author, references, geometry)
    return write_pdf(book, title=title, author=author)
