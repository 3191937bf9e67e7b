"""
render/styles.py — page geometry and the block style table.

Fonts are PDF base-14 faces addressed by their PyMuPDF short names
(helv, hebo, heit, hebi, tiro, tibo, tiit, tibi); they need no embedding
and fitz.get_text_length() measures them without a document.

Sizes follow the e-book templates: section heading 22, subsection 18,
chapter title 24 (centred, new page), term 14, body 12, caption 10.

Heading weight: section > subsection > term by size. The chapter title
is the one exception. It is set larger than a section heading (24 > 22)
and always opens a new page, so it reads as the top of the hierarchy.
The page break is what separates it from a section heading. Relative
sizes alone do not.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from text_parser.inline import RunStyle


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

@dataclass(slots=True, frozen=True)
class PageGeometry:
    """A4 portrait in PDF points, 60 pt margins."""
    width: float = 595.0
    height: float = 842.0
    margin_top: float = 60.0
    margin_bottom: float = 60.0
    margin_left: float = 60.0
    margin_right: float = 60.0
    footer_offset: float = 30.0   # footer baseline above the bottom edge

    @property
    def content_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def content_height(self) -> float:
        return self.height - self.margin_top - self.margin_bottom

    @property
    def content_bottom(self) -> float:
        return self.height - self.margin_bottom


DEFAULT_GEOMETRY = PageGeometry()


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------

@dataclass(slots=True, frozen=True)
class FontFamily:
    regular: str
    bold: str
    italic: str
    bold_italic: str

    def font_for(self, base: RunStyle, run: RunStyle) -> str:
        bold = RunStyle.BOLD in (base, run)
        italic = RunStyle.ITALIC in (base, run)
        if bold and italic:
            return self.bold_italic
        if bold:
            return self.bold
        if italic:
            return self.italic
        return self.regular


HELVETICA = FontFamily("helv", "hebo", "heit", "hebi")
TIMES     = FontFamily("tiro", "tibo", "tiit", "tibi")


# ---------------------------------------------------------------------------
# Block styles
# ---------------------------------------------------------------------------

class Align(StrEnum):
    LEFT   = "left"
    CENTER = "center"


type Color = tuple[float, float, float]

INK   = (0.2, 0.2, 0.2)
NAVY  = (0.17, 0.24, 0.31)
SLATE = (0.34, 0.40, 0.45)
ACCENT = (0.91, 0.30, 0.24)
GREY  = (0.50, 0.55, 0.55)


@dataclass(slots=True, frozen=True)
class BlockStyle:
    family: FontFamily
    size: float
    base: RunStyle = RunStyle.PLAIN     # applied under inline markup
    leading: float = 1.2                # line height / font size
    align: Align = Align.LEFT
    first_indent: float = 0.0
    left_indent: float = 0.0
    margin_top: float = 0.0
    margin_bottom: float = 0.0
    page_break_before: bool = False
    keep_with_next: bool = False
    color: Color = INK


class StyleName(StrEnum):
    COVER_TITLE        = "cover_title"
    COVER_SUBTITLE     = "cover_subtitle"
    COVER_AUTHOR       = "cover_author"
    SECTION_HEADING    = "section_heading"
    SUBSECTION_HEADING = "subsection_heading"
    CHAPTER_TITLE      = "chapter_title"
    TERM_NAME          = "term_name"
    TERM_DEFINITION    = "term_definition"
    PARAGRAPH          = "paragraph"
    PARAGRAPH_FLUSH    = "paragraph_flush"   # no first-line indent
    FIGURE_IMAGE       = "figure_image"
    FIGURE_CAPTION     = "figure_caption"
    LIST_ITEM          = "list_item"
    PLACEHOLDER        = "placeholder"
    FOOTER             = "footer"


STYLES: dict[StyleName, BlockStyle] = {
    StyleName.COVER_TITLE: BlockStyle(
        HELVETICA, 28, base=RunStyle.BOLD, leading=1.3, align=Align.CENTER,
        margin_bottom=16, color=NAVY,
    ),
    StyleName.COVER_SUBTITLE: BlockStyle(
        HELVETICA, 16, base=RunStyle.ITALIC, align=Align.CENTER,
        margin_bottom=24, color=SLATE,
    ),
    StyleName.COVER_AUTHOR: BlockStyle(
        HELVETICA, 14, align=Align.CENTER, margin_top=24, color=SLATE,
    ),
    StyleName.SECTION_HEADING: BlockStyle(
        HELVETICA, 22, base=RunStyle.BOLD, margin_top=24, margin_bottom=12,
        keep_with_next=True, color=NAVY,
    ),
    StyleName.SUBSECTION_HEADING: BlockStyle(
        HELVETICA, 18, base=RunStyle.BOLD, margin_top=16, margin_bottom=10,
        keep_with_next=True, color=NAVY,
    ),
    StyleName.CHAPTER_TITLE: BlockStyle(
        TIMES, 24, base=RunStyle.BOLD, align=Align.CENTER, margin_top=60,
        margin_bottom=40, page_break_before=True, keep_with_next=True, color=ACCENT,
    ),
    StyleName.TERM_NAME: BlockStyle(
        HELVETICA, 14, base=RunStyle.BOLD, margin_top=12, margin_bottom=5,
        keep_with_next=True, color=SLATE,
    ),
    StyleName.TERM_DEFINITION: BlockStyle(
        TIMES, 12, leading=1.5, left_indent=20, margin_bottom=12,
    ),
    StyleName.PARAGRAPH: BlockStyle(
        TIMES, 12, leading=1.5, first_indent=24, margin_bottom=10,
    ),
    StyleName.PARAGRAPH_FLUSH: BlockStyle(
        TIMES, 12, leading=1.5, margin_bottom=10,
    ),
    StyleName.FIGURE_IMAGE: BlockStyle(
        TIMES, 10, margin_top=10, margin_bottom=4, keep_with_next=True,
    ),
    StyleName.FIGURE_CAPTION: BlockStyle(
        TIMES, 10, base=RunStyle.ITALIC, align=Align.CENTER, margin_top=4,
        margin_bottom=14, color=SLATE,
    ),
    StyleName.LIST_ITEM: BlockStyle(
        TIMES, 12, leading=1.4, left_indent=18, margin_bottom=4,
    ),
    StyleName.PLACEHOLDER: BlockStyle(
        TIMES, 12, base=RunStyle.ITALIC, margin_bottom=10, color=GREY,
    ),
    StyleName.FOOTER: BlockStyle(
        HELVETICA, 10, align=Align.CENTER, color=GREY,
    ),
}

# Largest share of the content area a figure image may take.
IMAGE_MAX_WIDTH_RATIO = 0.8
IMAGE_MAX_HEIGHT_RATIO = 0.5

UNDERLINE_OFFSET = 1.5
UNDERLINE_WIDTH = 0.5
