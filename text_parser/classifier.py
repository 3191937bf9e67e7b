"""
text_parser/classifier.py — heuristic line classification of plain text.

Architecture:
  normalized text → lines → single forward scan (one paragraph buffer)
  → RawFragment list in document order

Each non-blank line is tested against the rules in text_parser.patterns;
structural lines (heading, figure caption, chapter title, term) are emitted
immediately, after flushing the paragraph buffer. Paragraph lines are
buffered and joined as word-wrapped text when a blank line or a structural
line ends the paragraph.

Classification is line-local and never backtracks: a short proper-noun
sentence such as "Alice Smith" is a heading, and stays one.

Public API:
  classify_text(text) -> list[RawFragment]
  join_wrapped_lines(lines) -> str
"""

from __future__ import annotations

import logging

from data_model.fragments import FragmentKind, FragmentList, RawFragment
from text_parser.patterns import (
    CAPITALISED_RE,
    CHAPTER_TITLE_RE,
    FIGURE_CAPTION_RE,
    HEADING_MAX_LEN,
    SENTENCE_TERMINATORS,
    SINGLE_WORD_RE,
    SPLIT_WORD_RE,
    TERM_MAX_LEN,
    TITLE_CASE_RE,
)

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def classify_text(text: str) -> FragmentList:
    """
    Splits normalized text into classified fragments.

    Args:
        text: Text already normalized (see text_parser.normalizer).

    Returns:
        Fragments in document order. Empty input gives an empty list.
    """
    lines = [line.strip() for line in text.split("\n")]
    fragments: FragmentList = []
    buffer: list[str] = []

    for index, line in enumerate(lines):
        if not line:
            _flush_paragraph(fragments, buffer)
            continue

        kind = _classify_line(lines, index)
        if kind is FragmentKind.PARAGRAPH:
            buffer.append(line)
            continue

        _flush_paragraph(fragments, buffer)
        fragments.append(RawFragment(kind, line))

    _flush_paragraph(fragments, buffer)
    log.debug("classified %d lines into %d fragments", len(lines), len(fragments))
    return fragments


def join_wrapped_lines(lines: list[str]) -> str:
    """
    Joins word-wrapped lines of one paragraph.

    "trans-" followed by "mission" becomes "transmission"; every other
    line break becomes a single space.
    """
    joined = ""
    for line in lines:
        if not joined:
            joined = line
        elif SPLIT_WORD_RE.search(joined) and line[:1].islower():
            joined = joined[:-1] + line
        else:
            joined = f"{joined} {line}"
    return joined


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def _flush_paragraph(fragments: FragmentList, buffer: list[str]) -> None:
    if buffer:
        fragments.append(RawFragment(FragmentKind.PARAGRAPH, join_wrapped_lines(buffer)))
        buffer.clear()


def _classify_line(lines: list[str], index: int) -> FragmentKind:
    line = lines[index]
    if _is_heading(lines, index):
        return FragmentKind.HEADING
    if FIGURE_CAPTION_RE.match(line):
        return FragmentKind.FIGURE_CAPTION
    if CHAPTER_TITLE_RE.match(line):
        return FragmentKind.CHAPTER_TITLE
    if _is_term_candidate(lines, index):
        return FragmentKind.TERM_CANDIDATE
    return FragmentKind.PARAGRAPH


def _is_heading(lines: list[str], index: int) -> bool:
    line = lines[index]
    if len(line) >= HEADING_MAX_LEN:
        return False
    if TITLE_CASE_RE.match(line) or SINGLE_WORD_RE.match(line):
        return True
    return _is_isolated_label(lines, index)


def _is_isolated_label(lines: list[str], index: int) -> bool:
    """
    A capitalised line standing alone between blank lines.

    Sentences (terminated lines) and figure / chapter labels are left to
    their own rules.
    """
    line = lines[index]
    if not CAPITALISED_RE.match(line):
        return False
    if line.endswith(SENTENCE_TERMINATORS):
        return False
    if FIGURE_CAPTION_RE.match(line) or CHAPTER_TITLE_RE.match(line):
        return False
    blank_before = index > 0 and not lines[index - 1]
    blank_after = index == len(lines) - 1 or not lines[index + 1]
    return blank_before and blank_after


def _is_term_candidate(lines: list[str], index: int) -> bool:
    line = lines[index]
    if len(line) >= TERM_MAX_LEN or line.endswith(SENTENCE_TERMINATORS):
        return False
    if index + 1 >= len(lines):
        return False
    return len(lines[index + 1]) > len(line)
