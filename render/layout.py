"""
render/layout.py — text measurement and line wrapping.

Styled runs are split into words and laid out greedily: a word goes on
the current line if it fits, otherwise it starts a new line. A single
word wider than the whole line is broken between characters. Runs of
whitespace collapse to one space and never start or end a line.

Measurement uses fitz.get_text_length() with base-14 fonts, so wrapping
is a pure function of text, style and width.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import fitz  # PyMuPDF

from render.styles import Align, BlockStyle
from text_parser.inline import RunStyle, StyledRun

_PIECE_RE = re.compile(r"\S+|\s+")

# Baseline position inside the em box (base-14 ascender is ~0.72-0.75).
_ASCENT = 0.8


@dataclass(slots=True, frozen=True)
class PlacedRun:
    text: str
    font: str
    size: float
    x: float            # offset from the left content margin
    width: float
    underline: bool = False


@dataclass(slots=True, frozen=True)
class Line:
    runs: tuple[PlacedRun, ...]
    width: float
    height: float
    baseline: float     # offset of the baseline from the line top


def measure(text: str, font: str, size: float) -> float:
    return fitz.get_text_length(text, fontname=font, fontsize=size)


def line_height(style: BlockStyle) -> float:
    return style.size * style.leading


def wrap_runs(runs: list[StyledRun], style: BlockStyle, width: float) -> list[Line]:
    """
    Lays out runs into lines no wider than `width` (minus the style indents).

    Returns an empty list when the runs contain no visible text.
    """
    builder = _LineBuilder(style, width)
    for run in runs:
        font = style.family.font_for(style.base, run.style)
        underline = run.style is RunStyle.UNDERLINE
        for piece in _PIECE_RE.findall(run.text):
            if piece.isspace():
                builder.add_space(font, underline)
            else:
                builder.add_word(piece, font, underline)
    return builder.finish()


# ---------------------------------------------------------------------------
# Internal implementation
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class _Segment:
    text: str
    font: str
    underline: bool
    width: float


class _LineBuilder:
    """Accumulates segments for the current line and emits finished lines."""

    def __init__(self, style: BlockStyle, width: float) -> None:
        self.style = style
        self.width = width
        self.lines: list[Line] = []
        self.segments: list[_Segment] = []
        self.used = 0.0
        self.pending_space: _Segment | None = None

    @property
    def available(self) -> float:
        indent = self.style.left_indent
        if not self.lines:
            indent += self.style.first_indent
        return max(self.width - indent, self.style.size)

    def add_space(self, font: str, underline: bool) -> None:
        if self.segments:
            self.pending_space = _Segment(" ", font, underline, measure(" ", font, self.style.size))

    def add_word(self, word: str, font: str, underline: bool) -> None:
        width = measure(word, font, self.style.size)
        space = self.pending_space
        extra = space.width if space is not None else 0.0
        if self.segments and self.used + extra + width > self.available:
            self._break_line()
            space, extra = None, 0.0
        if not self.segments and width > self.available:
            self._place_broken_word(word, font, underline)
            return
        if space is not None:
            self._push(space)
        self._push(_Segment(word, font, underline, width))
        self.pending_space = None

    def finish(self) -> list[Line]:
        if self.segments:
            self._break_line()
        return self.lines

    def _push(self, segment: _Segment) -> None:
        last = self.segments[-1] if self.segments else None
        if last is not None and last.font == segment.font and last.underline == segment.underline:
            last.text += segment.text
            last.width += segment.width
        else:
            self.segments.append(_Segment(segment.text, segment.font, segment.underline, segment.width))
        self.used += segment.width

    def _place_broken_word(self, word: str, font: str, underline: bool) -> None:
        chunk = ""
        for char in word:
            candidate = chunk + char
            if chunk and measure(candidate, font, self.style.size) > self.available:
                self._push(_Segment(chunk, font, underline, measure(chunk, font, self.style.size)))
                self._break_line()
                chunk = char
            else:
                chunk = candidate
        if chunk:
            self._push(_Segment(chunk, font, underline, measure(chunk, font, self.style.size)))
        self.pending_space = None

    def _break_line(self) -> None:
        style = self.style
        start = style.left_indent + (style.first_indent if not self.lines else 0.0)
        if style.align is Align.CENTER:
            start += max(self.available - self.used, 0.0) / 2

        placed: list[PlacedRun] = []
        x = start
        for seg in self.segments:
            placed.append(PlacedRun(seg.text, seg.font, style.size, x, seg.width, seg.underline))
            x += seg.width

        height = line_height(style)
        baseline = (height - style.size) / 2 + style.size * _ASCENT
        self.lines.append(Line(tuple(placed), self.used, height, baseline))
        self.segments = []
        self.used = 0.0
        self.pending_space = None
