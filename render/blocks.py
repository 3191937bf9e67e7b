"""
render/blocks.py — content → styled, measured blocks.

Two entry points walk the two kinds of input in document order:
  document_blocks(document)   Document tree (structured path)
  fragment_blocks(fragments)  flat fragment list (text path); the list is
                              rendered as one implicit section

Defensive rendering: a node with a missing field (None, empty or only
whitespace), an empty container or an unknown kind produces placeholder
text and rendering continues.

Continuity rule: a paragraph directly after a heading, chapter title or
term gets no first-line indent; every other paragraph is indented.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, replace
from enum import StrEnum

import fitz  # PyMuPDF

from data_model.content import (
    ContentNode,
    Document,
    Figure,
    ListBlock,
    Paragraph,
    Section,
    Subsection,
    Term,
)
from data_model.errors import ErrorKind
from data_model.fragments import FragmentKind, RawFragment
from render.layout import Line, PlacedRun, measure, wrap_runs
from render.styles import (
    IMAGE_MAX_HEIGHT_RATIO,
    IMAGE_MAX_WIDTH_RATIO,
    STYLES,
    BlockStyle,
    PageGeometry,
    StyleName,
)
from text_parser.inline import tokenize_inline

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Placeholders
# ---------------------------------------------------------------------------

UNTITLED_DOCUMENT   = "Untitled Document"
UNTITLED_SECTION    = "Untitled Section"
UNTITLED_SUBSECTION = "Untitled Subsection"
NO_CONTENT          = "No content available"
NO_TEXT             = "No text content"
DEFAULT_CAPTION     = "Figure"
DEFAULT_TERM        = "Term"
NO_DEFINITION       = "No definition"
NO_LIST_ITEMS       = "No list items"
UNKNOWN_CONTENT     = "Unknown content type"

_BULLET = "•"
_MARKER_GAP = 4.0


class BlockKind(StrEnum):
    COVER_TITLE        = "cover_title"
    COVER_SUBTITLE     = "cover_subtitle"
    COVER_AUTHOR       = "cover_author"
    SECTION_HEADING    = "section_heading"
    SUBSECTION_HEADING = "subsection_heading"
    CHAPTER_TITLE      = "chapter_title"
    TERM_NAME          = "term_name"
    TERM_DEFINITION    = "term_definition"
    PARAGRAPH          = "paragraph"
    FIGURE_IMAGE       = "figure_image"
    FIGURE_CAPTION     = "figure_caption"
    LIST_ITEM          = "list_item"
    PLACEHOLDER        = "placeholder"


# Blocks after which a paragraph starts flush left.
_CONTINUITY_KINDS = frozenset({
    BlockKind.SECTION_HEADING,
    BlockKind.SUBSECTION_HEADING,
    BlockKind.CHAPTER_TITLE,
    BlockKind.TERM_NAME,
    BlockKind.TERM_DEFINITION,
})


@dataclass(slots=True, frozen=True)
class StyledBlock:
    """
    One measured unit of output.

    - lines:  wrapped text; empty for image blocks
    - image:  image bytes with their scaled size (points)
    - marker: list bullet / number drawn beside the first line
    - y:      top of the block content on its page, set by the paginator
    """
    kind: BlockKind
    style: BlockStyle
    lines: tuple[Line, ...] = ()
    image: bytes | None = None
    image_width: float = 0.0
    image_height: float = 0.0
    marker: PlacedRun | None = None
    y: float = 0.0

    @property
    def content_height(self) -> float:
        return self.image_height + sum(line.height for line in self.lines)

    @property
    def first_line_height(self) -> float:
        return self.lines[0].height if self.lines else self.content_height

    @property
    def text(self) -> str:
        return "\n".join("".join(run.text for run in line.runs) for line in self.lines)

    def split(self, count: int) -> tuple[StyledBlock, StyledBlock]:
        """Splits a text block after `count` lines; the tail keeps no top margin."""
        head = replace(self, lines=self.lines[:count])
        tail_style = replace(self.style, margin_top=0.0, page_break_before=False)
        tail = replace(self, lines=self.lines[count:], marker=None, style=tail_style)
        return head, tail


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def document_blocks(document: Document, geometry: PageGeometry) -> list[StyledBlock]:
    builder = BlockBuilder(geometry)
    if not document.content:
        builder.placeholder(NO_CONTENT)
    for section in document.content:
        builder.node(section)
    return builder.blocks


def fragment_blocks(
    fragments: Sequence[RawFragment],
    geometry: PageGeometry,
    figures: Iterable[Figure] = (),
) -> list[StyledBlock]:
    """
    Blocks for the text path.

    Args:
        fragments: Classified fragments in document order.
        geometry:  Page geometry.
        figures:   One Figure per FIGURE_CAPTION fragment, in order; their
                   images (if bound) are drawn above the caption.
    """
    builder = BlockBuilder(geometry)
    bound: Iterator[Figure] = iter(figures)
    if not fragments:
        builder.placeholder(NO_CONTENT)
    for fragment in fragments:
        match fragment.kind:
            case FragmentKind.HEADING:
                builder.heading(BlockKind.SECTION_HEADING, StyleName.SECTION_HEADING, fragment.text)
            case FragmentKind.CHAPTER_TITLE:
                builder.heading(BlockKind.CHAPTER_TITLE, StyleName.CHAPTER_TITLE, fragment.text)
            case FragmentKind.FIGURE_CAPTION:
                figure = next(bound, None)
                builder.figure(fragment.text, figure.image if figure is not None else None)
            case FragmentKind.TERM_CANDIDATE:
                builder.heading(BlockKind.TERM_NAME, StyleName.TERM_NAME, fragment.text)
            case _:
                builder.paragraph(fragment.text)
    return builder.blocks


def cover_blocks(
    title: str | None,
    subtitle: str | None,
    author: str | None,
    geometry: PageGeometry,
) -> list[StyledBlock]:
    builder = BlockBuilder(geometry)
    builder.text_block(BlockKind.COVER_TITLE, StyleName.COVER_TITLE, title or UNTITLED_DOCUMENT)
    if subtitle:
        builder.text_block(BlockKind.COVER_SUBTITLE, StyleName.COVER_SUBTITLE, subtitle)
    if author:
        builder.text_block(BlockKind.COVER_AUTHOR, StyleName.COVER_AUTHOR, f"By {author}")
    return builder.blocks


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class BlockBuilder:
    """Appends blocks in order and tracks the previous block for indentation."""

    def __init__(self, geometry: PageGeometry) -> None:
        self.geometry = geometry
        self.blocks: list[StyledBlock] = []

    @property
    def last_kind(self) -> BlockKind | None:
        return self.blocks[-1].kind if self.blocks else None

    # -- tree nodes ---------------------------------------------------------

    def node(self, node: ContentNode) -> None:
        match node:
            case Section(heading=heading, content=content):
                if heading is None:
                    log.debug("section without heading; using placeholder")
                self.heading(BlockKind.SECTION_HEADING, StyleName.SECTION_HEADING,
                             _or_placeholder(heading, UNTITLED_SECTION))
                self.children(content)
            case Subsection(heading=heading, content=content):
                self.heading(BlockKind.SUBSECTION_HEADING, StyleName.SUBSECTION_HEADING,
                             _or_placeholder(heading, UNTITLED_SUBSECTION))
                self.children(content)
            case Paragraph(text=text):
                self.paragraph(_or_placeholder(text, NO_TEXT))
            case Figure(caption=caption, image=image):
                self.figure(_or_placeholder(caption, DEFAULT_CAPTION), image)
            case Term(term=term, definition=definition):
                self.heading(BlockKind.TERM_NAME, StyleName.TERM_NAME,
                             _or_placeholder(term, DEFAULT_TERM))
                self.text_block(BlockKind.TERM_DEFINITION, StyleName.TERM_DEFINITION,
                                _or_placeholder(definition, NO_DEFINITION))
            case ListBlock(items=items, ordered=ordered):
                self.list_items(items, ordered)
            case _:
                log.warning("[%s] cannot render %s; using placeholder",
                            ErrorKind.UNRESOLVABLE_STRUCTURE, type(node).__name__)
                self.placeholder(UNKNOWN_CONTENT)

    def children(self, content: Sequence[ContentNode]) -> None:
        if not content:
            self.placeholder(NO_CONTENT)
            return
        for child in content:
            self.node(child)

    # -- block kinds ----------------------------------------------------------

    def heading(self, kind: BlockKind, style: StyleName, text: str) -> None:
        self.text_block(kind, style, text)

    def paragraph(self, text: str) -> None:
        style = (StyleName.PARAGRAPH_FLUSH if self.last_kind in _CONTINUITY_KINDS
                 else StyleName.PARAGRAPH)
        self.text_block(BlockKind.PARAGRAPH, style, text)

    def figure(self, caption: str, image: bytes | None) -> None:
        if image:
            self.image_block(image)
        self.text_block(BlockKind.FIGURE_CAPTION, StyleName.FIGURE_CAPTION, caption)

    def list_items(self, items: Sequence[str], ordered: bool) -> None:
        if not items:
            self.placeholder(NO_LIST_ITEMS)
            return
        style = STYLES[StyleName.LIST_ITEM]
        font = style.family.font_for(style.base, style.base)
        for index, item in enumerate(items, start=1):
            label = f"{index}." if ordered else _BULLET
            width = measure(label, font, style.size)
            marker = PlacedRun(label, font, style.size,
                               max(style.left_indent - _MARKER_GAP - width, 0.0), width)
            self.text_block(BlockKind.LIST_ITEM, StyleName.LIST_ITEM, item, marker=marker)

    def placeholder(self, text: str) -> None:
        self.text_block(BlockKind.PLACEHOLDER, StyleName.PLACEHOLDER, text)

    # -- primitives -----------------------------------------------------------

    def text_block(
        self,
        kind: BlockKind,
        style_name: StyleName,
        text: str,
        marker: PlacedRun | None = None,
    ) -> None:
        style = STYLES[style_name]
        lines = wrap_runs(tokenize_inline(text), style, self.geometry.content_width)
        if not lines:
            return
        self.blocks.append(StyledBlock(kind, style, tuple(lines), marker=marker))

    def image_block(self, image: bytes) -> None:
        size = _image_size(image)
        if size is None:
            return
        width, height = size
        max_w = self.geometry.content_width * IMAGE_MAX_WIDTH_RATIO
        max_h = self.geometry.content_height * IMAGE_MAX_HEIGHT_RATIO
        scale = min(max_w / width, max_h / height, 1.0)
        self.blocks.append(StyledBlock(
            BlockKind.FIGURE_IMAGE,
            STYLES[StyleName.FIGURE_IMAGE],
            image=image,
            image_width=width * scale,
            image_height=height * scale,
        ))


def _or_placeholder(text: str | None, placeholder: str) -> str:
    """Blank or whitespace-only text counts as missing."""
    return (text or "").strip() or placeholder


def _image_size(image: bytes) -> tuple[float, float] | None:
    """Pixel size of an encoded image; None when the bytes cannot be decoded."""
    try:
        pix = fitz.Pixmap(image)
    except Exception as exc:  # MuPDF raises format-specific error types
        log.warning("figure image cannot be decoded (%s); rendering caption only", exc)
        return None
    if pix.width <= 0 or pix.height <= 0:
        return None
    return float(pix.width), float(pix.height)
