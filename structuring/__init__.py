"""
structuring — language-model structuring of text into a Document.

Public API:
  structure_text(text, title, model)        -> Document
  parse_structure(payload)                  -> Document
  build_structure_prompt(text, title)       -> str
  call_gemini(prompt, model, api_key, ...)  -> str
"""

from __future__ import annotations

import logging

from data_model.content import Document
from data_model.errors import MalformedInput
from text_parser.normalizer import normalize_text

from .parser import parse_structure, strip_code_fence, decode_image, DEFAULT_TITLE
from .prompt import build_structure_prompt, SYSTEM_INSTRUCTION, TEMPLATE_PATH
from .gemini import call_gemini, DEFAULT_MODEL

log = logging.getLogger(__name__)


def structure_text(text: str, title: str = DEFAULT_TITLE, model: str = DEFAULT_MODEL) -> Document:
    """
    Normalizes text, asks the model for a structure and parses the answer.

    Errors from the model call propagate unchanged.

    Raises:
        MalformedInput: Empty text, or the model answered with invalid JSON.
    """
    cleaned = normalize_text(text)
    if not cleaned:
        raise MalformedInput("No text provided")

    prompt = build_structure_prompt(cleaned, title)
    log.info("requesting structure from %s (%d chars)", model, len(cleaned))
    raw = call_gemini(prompt, model=model, system_instruction=SYSTEM_INSTRUCTION)
    return parse_structure(raw)


__all__ = [
    "structure_text",
    "parse_structure",
    "strip_code_fence",
    "decode_image",
    "DEFAULT_TITLE",
    "build_structure_prompt",
    "SYSTEM_INSTRUCTION",
    "TEMPLATE_PATH",
    "call_gemini",
    "DEFAULT_MODEL",
]
