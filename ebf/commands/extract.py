"""Command: ebf extract — text layer and figure images from a PDF."""

from __future__ import annotations

import argparse
from pathlib import Path

import fitz  # PyMuPDF
from rich.table import Table
from rich import box

from data_model.content import FigureReference
from ebf._io import console, figure_filename, require_file
from pdf.reader import extract_figures, extract_text


# ---------------------------------------------------------------------------
# Figure export
# ---------------------------------------------------------------------------

def _save_png(ref: FigureReference, path: Path) -> None:
    pix = fitz.Pixmap(ref.image)
    if pix.n - pix.alpha > 3:
        pix = fitz.Pixmap(fitz.csRGB, pix)
    pix.save(str(path))


def _write_figures(refs: list[FigureReference], out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)

    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", expand=False)
    table.add_column("#",       justify="right", no_wrap=True, style="dim")
    table.add_column("FILE",    no_wrap=True, style="bold cyan")
    table.add_column("ID",      no_wrap=True)
    table.add_column("CAPTION", no_wrap=False, max_width=60)

    for index, ref in enumerate(refs, start=1):
        path = out_dir / figure_filename(ref, index)
        _save_png(ref, path)
        table.add_row(str(index), path.name, ref.id or "-", ref.caption or "-")

    console.print(table)
    console.print(f"[green]Figures:[/green] {out_dir}  ({len(refs)} images)")


# ---------------------------------------------------------------------------
# Command logic
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    pdf_path = require_file(Path(args.pdf_file), (".pdf",))

    text = extract_text(pdf_path)
    if args.text:
        out_path = Path(args.text)
        out_path.write_text(text + "\n", encoding="utf-8")
        console.print(f"[green]Text:[/green] {out_path}  ({len(text)} chars)")
    else:
        print(text)

    if args.figures:
        refs = extract_figures(pdf_path)
        if not refs:
            console.print("[yellow]No figure images found.[/yellow]")
            return
        _write_figures(refs, Path(args.figures))


# ---------------------------------------------------------------------------
# Parser registration
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "extract",
        help="Extracts the text layer (and figure images) of a PDF.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Extracts the text layer of a PDF. Scanned documents without a text
layer are rejected.

With --figures, embedded images are saved as PNG files; images paired
with a "Figure N" caption are named figure_N.png so that
`ebf build --images` binds them back to their captions.

Examples:
  ebf extract paper.pdf
  ebf extract paper.pdf --text paper.txt
  ebf extract paper.pdf --text paper.txt --figures figures/
        """,
    )
    p.add_argument(
        "pdf_file",
        metavar="FILE.pdf",
        help="Path to the PDF file.",
    )
    p.add_argument(
        "--text", "-t",
        metavar="OUT.txt",
        help="Write the text to a file (default: stdout).",
    )
    p.add_argument(
        "--figures", "-f",
        metavar="DIR",
        help="Save embedded figure images into this directory.",
    )
    p.set_defaults(func=run)
