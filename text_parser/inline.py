"""
text_parser/inline.py — emphasis markers → styled runs.

  **bold**   → BOLD
  *italic*   → ITALIC      (only where the asterisks are not part of "**")
  __under__  → UNDERLINE

Markers do not nest. A marker that is never closed stays in the text
as literal characters. Runs are returned in reading order; adjacent runs
never share a style.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum


class RunStyle(StrEnum):
    PLAIN     = "plain"
    BOLD      = "bold"
    ITALIC    = "italic"
    UNDERLINE = "underline"


@dataclass(slots=True, frozen=True)
class StyledRun:
    text: str
    style: RunStyle = RunStyle.PLAIN


# Alternation order matters: "**" must be tried before "*".
_MARKUP_RE = re.compile(
    r"\*\*(?P<bold>.+?)\*\*"
    r"|__(?P<underline>.+?)__"
    r"|(?<!\*)\*(?!\*)(?P<italic>[^*]+?)(?<!\*)\*(?!\*)"
)

_GROUP_STYLES = {
    "bold": RunStyle.BOLD,
    "underline": RunStyle.UNDERLINE,
    "italic": RunStyle.ITALIC,
}


def tokenize_inline(text: str) -> list[StyledRun]:
    """
    Splits `text` into styled runs.

    Text without a closed marker pair comes back as exactly one PLAIN run,
    including the empty string.
    """
    runs: list[StyledRun] = []
    pos = 0
    for m in _MARKUP_RE.finditer(text):
        if m.start() > pos:
            _append(runs, text[pos:m.start()], RunStyle.PLAIN)
        group = m.lastgroup or "bold"
        _append(runs, m.group(group), _GROUP_STYLES[group])
        pos = m.end()
    if pos < len(text) or not runs:
        _append(runs, text[pos:], RunStyle.PLAIN)
    return runs


def plain_text(runs: list[StyledRun]) -> str:
    """Concatenated run text, i.e. the input with consumed markers removed."""
    return "".join(run.text for run in runs)


def _append(runs: list[StyledRun], text: str, style: RunStyle) -> None:
    if runs and runs[-1].style == style:
        runs[-1] = StyledRun(runs[-1].text + text, style)
    else:
        runs.append(StyledRun(text, style))
