"""
structuring/prompt.py — prompt for the document-structuring model.

Public functions:
  build_structure_prompt(text, title, template_path) -> str
"""

from __future__ import annotations

import pathlib

TEMPLATE_PATH = pathlib.Path(__file__).resolve().parent / "templates" / "structure.md"

SYSTEM_INSTRUCTION = (
    "You are a document structuring expert that organizes documents "
    "into well-structured e-books."
)


def _load_template(template_path: pathlib.Path) -> str:
    body = template_path.read_text(encoding="utf-8").strip()
    if body.startswith("```text"):
        body = body[len("```text"):].lstrip("\n")
    if body.endswith("```"):
        body = body[: body.rfind("```")].rstrip()
    return body


def build_structure_prompt(
    text: str,
    title: str,
    template_path: pathlib.Path = TEMPLATE_PATH,
) -> str:
    """
    Fills the structuring template.

    Args:
        text:          Normalized document text.
        title:         Title suggested by the user (the model may refine it).
        template_path: Path to the template with {{TITLE}} / {{CONTENT}}.

    Returns:
        Prompt ready to send. The system instruction is sent separately
        in the request config (see structuring.gemini).
    """
    if not template_path.exists():
        raise FileNotFoundError(f"Prompt template not found: {template_path}")

    body = _load_template(template_path)
    return (
        body
        .replace("{{TITLE}}",   title)
        .replace("{{CONTENT}}", text)
    )
