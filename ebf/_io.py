"""
ebf/_io.py — file helpers shared by the subcommands.

Input files are read as UTF-8. Image files given on the command line
become FigureReferences: the file stem is the caption, and a stem such
as "figure_3" or "Figure-3" also yields the id "Figure 3", so that files
written by `ebf extract --figures` bind back to their captions.
"""

from __future__ import annotations

import re
from pathlib import Path

from rich.console import Console

from data_model.content import FigureReference

console = Console()

_FIGURE_STEM_RE = re.compile(r"^figure[\s_-]*(\d+(?:[.-]\d+)?)$", re.IGNORECASE)


def require_file(path: Path, suffixes: tuple[str, ...] | None = None) -> Path:
    """Exits with status 1 when the file is missing or has the wrong suffix."""
    if not path.is_file():
        console.print(f"[red]File does not exist:[/red] {path}")
        raise SystemExit(1)
    if suffixes is not None and path.suffix.lower() not in suffixes:
        expected = ", ".join(suffixes)
        console.print(f"[red]Expected a {expected} file, got:[/red] {path.suffix or '(no suffix)'}")
        raise SystemExit(1)
    return path


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def image_reference(path: Path) -> FigureReference:
    match = _FIGURE_STEM_RE.match(path.stem)
    ref_id = f"Figure {match.group(1)}" if match else None
    return FigureReference(caption=path.stem, image=path.read_bytes(), id=ref_id)


def image_references(paths: list[str] | None) -> list[FigureReference]:
    refs: list[FigureReference] = []
    for raw in paths or []:
        refs.append(image_reference(require_file(Path(raw))))
    return refs


def figure_filename(ref: FigureReference, index: int) -> str:
    if ref.id:
        return ref.id.lower().replace(" ", "_") + ".png"
    return f"image_{index:02d}.png"
