"""
text_parser/normalizer.py — cleanup of extracted text before classification.

What gets removed or canonicalised:
  - U+FFFD replacement characters and pilcrow artifacts
  - Windows / old Mac line endings → "\\n", tabs → 4 spaces
  - curly quotes and apostrophes → straight ASCII
  - en / em dashes and minus variants → ASCII hyphen
  - bullet glyph variants → "•"
  - runs of spaces inside a line, trailing whitespace
  - more than one consecutive blank line

What is kept:
  - single "\\n" line breaks (the classifier works line by line)
  - one blank line between blocks
  - leading indentation of list markers is dropped with the line strip,
    the marker itself stays

Output is NFC-normalised.
"""

from __future__ import annotations

import re
import unicodedata

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_DROP_CHARS = {
    "�": "",   # replacement character
    "¶": "",   # pilcrow
    "\u00ad": "",   # soft hyphen
    "\ufeff": "",   # BOM
}

_QUOTE_CHARS = {
    "‘": "'", "’": "'", "‚": "'", "‛": "'", "′": "'",
    "“": '"', "”": '"', "„": '"', "‟": '"', "″": '"',
    "«": '"', "»": '"',
}

_DASH_CHARS = {
    "‐": "-", "‑": "-", "‒": "-", "–": "-",
    "—": "-", "―": "-", "−": "-",
}

_BULLET_CHARS = {
    "∙": "•", "●": "•", "▪": "•",
    "‣": "•", "⁃": "•",
}

_TRANSLATION = str.maketrans({**_DROP_CHARS, **_QUOTE_CHARS, **_DASH_CHARS, **_BULLET_CHARS})

_LINE_ENDING_RE = re.compile(r"\r\n?")
_MULTI_SPACE_RE = re.compile(r"[ \u00a0\u2000-\u200a\u202f]{2,}")
_BLANK_RUN_RE = re.compile(r"\n{3,}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize_text(raw: str) -> str:
    """
    Returns text satisfying the classifier's input contract.

    Lines are stripped; whitespace-only lines become empty lines and at
    most one empty line separates two blocks.
    """
    text = unicodedata.normalize("NFC", raw)
    text = text.translate(_TRANSLATION)
    text = _LINE_ENDING_RE.sub("\n", text)
    text = text.replace("\t", "    ")

    lines = [_MULTI_SPACE_RE.sub(" ", line).strip() for line in text.split("\n")]
    text = "\n".join(lines)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    return text.strip("\n")
