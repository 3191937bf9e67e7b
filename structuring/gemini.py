"""
structuring/gemini.py — Gemini request for the document structure.

The structure request asks for JSON only: the system instruction travels
in GenerateContentConfig and the response MIME type is application/json,
so the answer can go straight to structuring.parser.parse_structure().

Environment variables (also read from a .env file):
  GEMINI_API_KEY     API key (required)
  EBF_GEMINI_MODEL   model override (optional)

Public API:
  call_gemini(prompt, model, api_key, max_retries, system_instruction) -> str
  structure_config(system_instruction)                                -> GenerateContentConfig
"""

from __future__ import annotations

import functools
import logging
import os
import re
import time

from dotenv import load_dotenv
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from .prompt import SYSTEM_INSTRUCTION

load_dotenv()

log = logging.getLogger(__name__)

DEFAULT_MODEL   = os.getenv("EBF_GEMINI_MODEL", "gemini-2.5-flash")
DEFAULT_RETRIES = 3
JSON_MIME_TYPE  = "application/json"
_ENV_KEY        = "GEMINI_API_KEY"

# Wait suggested by the API, e.g. "Please retry in 18.8s".
_RETRY_DELAY_RE = re.compile(r"retry[^\d]*(\d+(?:\.\d+)?)\s*s", re.IGNORECASE)


@functools.lru_cache(maxsize=4)
def _get_client(api_key: str) -> genai.Client:
    return genai.Client(api_key=api_key)


def structure_config(system_instruction: str = SYSTEM_INSTRUCTION) -> genai_types.GenerateContentConfig:
    """Request settings for a structuring call: JSON output under the given instruction."""
    return genai_types.GenerateContentConfig(
        system_instruction=system_instruction,
        response_mime_type=JSON_MIME_TYPE,
    )


def call_gemini(
    prompt: str,
    model: str = DEFAULT_MODEL,
    api_key: str | None = None,
    max_retries: int = DEFAULT_RETRIES,
    system_instruction: str = SYSTEM_INSTRUCTION,
) -> str:
    """
    Sends the structuring prompt and returns the JSON text of the answer.

    Rate-limited requests (429) are retried after the delay the API
    suggests; an exhausted daily quota is reported at once.

    Raises:
        ValueError:                   No API key.
        RuntimeError:                 Empty answer, quota exhausted, or still
                                      rate-limited after max_retries.
        google.genai.errors.APIError: Any other API error.
    """
    key = api_key or os.getenv(_ENV_KEY)
    if not key:
        raise ValueError(
            f"Missing Gemini API key. Set {_ENV_KEY} in the environment or in .env."
        )

    client = _get_client(key)
    config = structure_config(system_instruction)

    for attempt in range(max_retries + 1):
        try:
            response = client.models.generate_content(model=model, contents=prompt, config=config)
        except genai_errors.ClientError as exc:
            if exc.code != 429:
                raise
            delay = _rate_limit_delay(exc, model, attempt, max_retries)
            log.warning("rate limited by %s, retrying in %.1fs (%d/%d)",
                        model, delay, attempt + 1, max_retries)
            time.sleep(delay)
            continue

        if not response.text:
            raise RuntimeError(f"{model} returned an empty structure response.")
        log.debug("structure response: %d chars", len(response.text))
        return response.text

    raise AssertionError("unreachable")  # the last attempt returns or raises


def _rate_limit_delay(exc: genai_errors.ClientError, model: str, attempt: int, max_retries: int) -> float:
    """Seconds to wait before the next attempt; raises when retrying cannot help."""
    message = str(exc)
    if "PerDay" in message:
        raise RuntimeError(
            f"Daily request quota for {model} is exhausted (https://ai.dev/rate-limit)."
        ) from exc
    if attempt >= max_retries:
        raise RuntimeError(
            f"{model} still rate-limited after {max_retries} retries; try again later."
        ) from exc
    m = _RETRY_DELAY_RE.search(message)
    return float(m.group(1)) if m else float(5 * 2 ** (attempt + 1))
