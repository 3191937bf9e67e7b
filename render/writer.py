"""
render/writer.py — paginated Book → PDF bytes (PyMuPDF).

Every page of the Book becomes one PDF page of the geometry's size.
Text runs are drawn with insert_text() at their measured positions;
underlined runs get a thin rule below the baseline; images are centred
in the content width. Content pages get the centred "n / N" footer.
"""

from __future__ import annotations

import logging

import fitz  # PyMuPDF

from data_model.errors import RenderingFailure
from render.blocks import StyledBlock
from render.layout import measure
from render.paginator import Book, Page
from render.styles import STYLES, UNDERLINE_OFFSET, UNDERLINE_WIDTH, PageGeometry, StyleName

log = logging.getLogger(__name__)

PRODUCER = "ebookforge"


def write_pdf(book: Book, title: str | None = None, author: str | None = None) -> bytes:
    """
    Serializes a Book to PDF.

    Raises:
        RenderingFailure: The PDF backend failed to draw or serialize a page.
    """
    doc = fitz.open()
    try:
        for page in book.all_pages:
            _draw_page(doc, page, book.geometry)
        doc.set_metadata({
            "title": title or "",
            "author": author or "",
            "creator": PRODUCER,
            "producer": PRODUCER,
        })
        data = doc.tobytes(garbage=3, deflate=True)
    except RenderingFailure:
        raise
    except Exception as exc:  # MuPDF errors have no common public base
        raise RenderingFailure(str(exc)) from exc
    finally:
        doc.close()

    log.info("wrote %d pages (%d bytes)", len(book.all_pages), len(data))
    return data


# ---------------------------------------------------------------------------
# Internal implementation
# ---------------------------------------------------------------------------

def _draw_page(doc: fitz.Document, page: Page, geometry: PageGeometry) -> None:
    pdf_page = doc.new_page(width=geometry.width, height=geometry.height)
    for block in page.blocks:
        if block.image is not None:
            _draw_image(pdf_page, block, geometry)
        else:
            _draw_text(pdf_page, block, geometry)
    if page.footer is not None:
        _draw_footer(pdf_page, page.footer, geometry)


def _draw_image(pdf_page: fitz.Page, block: StyledBlock, geometry: PageGeometry) -> None:
    x0 = geometry.margin_left + (geometry.content_width - block.image_width) / 2
    rect = fitz.Rect(x0, block.y, x0 + block.image_width, block.y + block.image_height)
    pdf_page.insert_image(rect, stream=block.image)


def _draw_text(pdf_page: fitz.Page, block: StyledBlock, geometry: PageGeometry) -> None:
    color = block.style.color
    top = block.y
    for index, line in enumerate(block.lines):
        baseline = top + line.baseline
        if index == 0 and block.marker is not None:
            marker = block.marker
            pdf_page.insert_text(
                fitz.Point(geometry.margin_left + marker.x, baseline),
                marker.text, fontname=marker.font, fontsize=marker.size, color=color,
            )
        for run in line.runs:
            x = geometry.margin_left + run.x
            pdf_page.insert_text(
                fitz.Point(x, baseline),
                run.text, fontname=run.font, fontsize=run.size, color=color,
            )
            if run.underline:
                y = baseline + UNDERLINE_OFFSET
                pdf_page.draw_line(
                    fitz.Point(x, y), fitz.Point(x + run.width, y),
                    color=color, width=UNDERLINE_WIDTH,
                )
        top += line.height


def _draw_footer(pdf_page: fitz.Page, text: str, geometry: PageGeometry) -> None:
    style = STYLES[StyleName.FOOTER]
    font = style.family.regular
    width = measure(text, font, style.size)
    x = (geometry.width - width) / 2
    y = geometry.height - geometry.footer_offset
    pdf_page.insert_text(fitz.Point(x, y), text, fontname=font, fontsize=style.size, color=style.color)
