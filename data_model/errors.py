"""
data_model/errors.py — error kinds and exceptions.

Only input validation at the boundaries and the final PDF write can fail.
Classification and figure binding never raise; they degrade to a best
guess or placeholder text instead.

  MalformedInput         empty or undecodable input text / JSON
  UnresolvableStructure  node without a recognised kind (logged, not raised
                         by the renderer, which substitutes a placeholder)
  RenderingFailure       the PDF writer reported an error
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    MALFORMED_INPUT        = "E_MALFORMED_INPUT"
    UNRESOLVABLE_STRUCTURE = "E_UNRESOLVABLE_STRUCTURE"
    RENDERING_FAILURE      = "E_RENDERING_FAILURE"


class EbookError(Exception):
    """Base class; callers treat any subclass as "unable to produce a document"."""

    kind: ErrorKind


class MalformedInput(EbookError, ValueError):
    kind = ErrorKind.MALFORMED_INPUT


class UnresolvableStructure(EbookError):
    kind = ErrorKind.UNRESOLVABLE_STRUCTURE


class RenderingFailure(EbookError, RuntimeError):
    kind = ErrorKind.RENDERING_FAILURE
