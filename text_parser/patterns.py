"""
text_parser/patterns.py — regex table and thresholds for line classification.

Rules are evaluated per non-blank line in this order; the first match wins:
  1. HEADING         short line, title-cased words / single word / isolated line
  2. FIGURE_CAPTION  "Figure 3", "Figure 2-1", "Figure 2.1" at line start
  3. CHAPTER_TITLE   "Chapter 4" at line start (case-insensitive)
  4. TERM_CANDIDATE  short unterminated line followed by a longer line
  5. PARAGRAPH       everything else (accumulated until a blank line)

Process-wide constants; nothing here is mutated at runtime.
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

HEADING_MAX_LEN = 70
TERM_MAX_LEN = 50

# A line ending with one of these reads as a sentence, not a label.
SENTENCE_TERMINATORS = (".", "!", "?")

# ---------------------------------------------------------------------------
# Heading shapes
# ---------------------------------------------------------------------------

# "Basic Network Terminology": 2-4 words, each capitalised.
TITLE_CASE_RE = re.compile(r"^[A-Z][a-z]+(\s+[A-Z][a-z]+){1,3}$")

# "Network" alone on its line.
SINGLE_WORD_RE = re.compile(r"^[A-Z][a-z]+$")

# Any line starting with a capital (used only for blank-isolated lines).
CAPITALISED_RE = re.compile(r"^[A-Z]")

# ---------------------------------------------------------------------------
# Figure / chapter labels
# ---------------------------------------------------------------------------

FIGURE_CAPTION_RE = re.compile(r"^Figure\s+\d+(?:[.-]\d+)?")

CHAPTER_TITLE_RE = re.compile(r"^Chapter\s+\d+", re.IGNORECASE)

# ---------------------------------------------------------------------------
# Paragraph joining
# ---------------------------------------------------------------------------

# Word split at a line end: "trans-" + "mission".
SPLIT_WORD_RE = re.compile(r"(?<=\w)-$")
