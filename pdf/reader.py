"""
pdf/reader.py — text and figure images from existing PDF files.

Architecture:
  pdf_path → fitz.open() → pages
  → extract_text():    page text joined with blank lines (classifier input)
  → extract_figures(): embedded raster images paired with "Figure N"
                       caption lines on the same page → FigureReference

Scanned documents (images only, no text layer) are rejected: OCR is not
part of this package.

Public API:
  extract_text(path)    -> str
  extract_figures(path) -> list[FigureReference]
  looks_scanned(text)   -> bool
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import fitz  # PyMuPDF

from data_model.content import FigureReference
from data_model.errors import MalformedInput
from text_parser.patterns import FIGURE_CAPTION_RE

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Below these the text layer is considered empty (scanned pages).
_MIN_TEXT_CHARS = 50
_MIN_WORDS = 15
_SPARSE_TEXT_CHARS = 100

_WORD_RE = re.compile(r"\b\w+\b")

# Images smaller than this (pt, either side) are logos, bullets or rules.
_MIN_IMAGE_SIDE = 32


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_text(path: str | Path) -> str:
    """
    Returns the text layer of a PDF, one blank line between pages.

    Raises:
        MalformedInput: The file has no usable text layer.
    """
    doc = fitz.open(str(path))
    try:
        pages = [page.get_text("text") for page in doc]
    finally:
        doc.close()

    text = "\n\n".join(p.strip() for p in pages if p.strip())
    if looks_scanned(text):
        raise MalformedInput(
            f"{path}: no extractable text (scanned document?); OCR is not supported"
        )
    log.debug("extracted %d chars from %d pages", len(text), len(pages))
    return text


def extract_figures(path: str | Path) -> list[FigureReference]:
    """
    Collects embedded images in reading order.

    On each page the k-th image (top to bottom) is paired with the k-th
    "Figure N" caption line of that page. Images without a caption keep
    an empty caption and can still be bound by the single-figure fallback.
    """
    doc = fitz.open(str(path))
    try:
        refs: list[FigureReference] = []
        for page in doc:
            refs.extend(_page_figures(doc, page))
    finally:
        doc.close()
    log.info("extracted %d figure images from %s", len(refs), path)
    return refs


def looks_scanned(text: str) -> bool:
    """True for text that is empty, or too sparse to be a real text layer."""
    stripped = text.strip()
    if len(stripped) < _MIN_TEXT_CHARS:
        return True
    words = len(_WORD_RE.findall(stripped))
    return words < _MIN_WORDS and len(stripped) > _SPARSE_TEXT_CHARS


# ---------------------------------------------------------------------------
# Internal implementation
# ---------------------------------------------------------------------------

def _page_figures(doc: fitz.Document, page: fitz.Page) -> list[FigureReference]:
    captions = _caption_lines(page)
    placed: list[tuple[float, int]] = []
    seen: set[int] = set()
    for info in page.get_images(full=True):
        xref = info[0]
        if xref in seen:
            continue
        seen.add(xref)
        rects = page.get_image_rects(xref)
        if not rects:
            continue
        rect = rects[0]
        if rect.width < _MIN_IMAGE_SIDE or rect.height < _MIN_IMAGE_SIDE:
            continue
        placed.append((rect.y0, xref))

    refs: list[FigureReference] = []
    for index, (_, xref) in enumerate(sorted(placed)):
        extracted = doc.extract_image(xref)
        if not extracted:
            continue
        caption = captions[index] if index < len(captions) else ""
        label = FIGURE_CAPTION_RE.match(caption)
        refs.append(FigureReference(
            caption=caption,
            image=extracted["image"],
            id=label.group() if label else None,
        ))
    return refs


def _caption_lines(page: fitz.Page) -> list[str]:
    lines: list[str] = []
    for line in page.get_text("text").split("\n"):
        stripped = line.strip()
        if FIGURE_CAPTION_RE.match(stripped):
            lines.append(stripped)
    return lines
