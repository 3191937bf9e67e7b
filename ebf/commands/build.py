"""Command: ebf build — renders a text, JSON or PDF input as an e-book PDF."""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path

from rich.table import Table
from rich import box

from data_model.content import FigureReference
from ebf._io import console, image_references, read_text, require_file
from pdf.reader import extract_figures, extract_text
from render.paginator import Book
from render.pipeline import layout_document, layout_text
from render.writer import write_pdf
from structuring.parser import parse_structure

_INPUT_SUFFIXES = (".txt", ".json", ".pdf")


# ---------------------------------------------------------------------------
# Terminal output
# ---------------------------------------------------------------------------

def _show_pages(book: Book) -> None:
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("PAGE",   justify="right", no_wrap=True, style="bold cyan")
    table.add_column("FOOTER", justify="center", no_wrap=True)
    table.add_column("BLOCKS", justify="right", no_wrap=True)
    table.add_column("FIRST",  no_wrap=False, max_width=60)

    for page in book.all_pages:
        first = next((b.text for b in page.blocks if b.lines), "")
        table.add_row(
            "cover" if page.is_cover else str(page.number),
            page.footer or "-",
            str(len(page.blocks)),
            first.split("\n", 1)[0][:80],
        )

    console.print()
    console.print(table)


# ---------------------------------------------------------------------------
# Command logic
# ---------------------------------------------------------------------------

def _layout(args: argparse.Namespace, path: Path, refs: list[FigureReference]) -> tuple[Book, str]:
    suffix = path.suffix.lower()
    if suffix == ".json":
        document = parse_structure(read_text(path))
        if args.title:
            document = replace(document, title=args.title)
        return layout_document(document, args.author, refs), document.title

    title = args.title or path.stem
    if suffix == ".pdf":
        text = extract_text(path)
        if args.pdf_figures:
            refs = [*refs, *extract_figures(path)]
    else:
        text = read_text(path)
    return layout_text(text, title, args.author, refs), title


def run(args: argparse.Namespace) -> None:
    in_path = require_file(Path(args.input_file), _INPUT_SUFFIXES)
    out_path = Path(args.out) if args.out else in_path.with_suffix("").with_suffix(".ebook.pdf")

    refs = image_references(args.images)
    console.print(f"Rendering [bold]{in_path}[/bold] …")

    book, title = _layout(args, in_path, refs)
    data = write_pdf(book, title=title, author=args.author)
    out_path.write_bytes(data)

    console.print(
        f"[green]PDF:[/green] {out_path}  "
        f"(cover + {book.total} pages, {len(data) // 1024} KiB)"
    )

    if args.show:
        _show_pages(book)


# ---------------------------------------------------------------------------
# Parser registration
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "build",
        help="Renders a .txt, .json or .pdf input as a paginated e-book PDF.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Renders an e-book PDF with a cover page and "n / N" page footers.

Inputs:
  .txt   raw extracted text, structured by the heuristic classifier
  .pdf   text layer of an existing PDF, same heuristic path
  .json  document tree (output of `ebf structure`)

Figure images come from --images files (matched by caption or by a
figure_N file name) and, for PDF input, from --pdf-figures.

Examples:
  ebf build paper.txt --title "Cell Biology" --author "A. Writer"
  ebf build paper.json --images figures/*.png --out book.pdf --show
  ebf build paper.pdf --pdf-figures
        """,
    )
    p.add_argument(
        "input_file",
        metavar="INPUT",
        help="Path to a .txt, .json or .pdf file.",
    )
    p.add_argument(
        "--title",
        metavar="TITLE",
        help="Cover title (default: file name, or the title in the JSON).",
    )
    p.add_argument(
        "--author",
        metavar="NAME",
        help="Author shown on the cover.",
    )
    p.add_argument(
        "--images",
        nargs="+",
        metavar="IMAGE",
        help="Image files bound to figures by caption / figure number.",
    )
    p.add_argument(
        "--pdf-figures",
        action="store_true",
        help="For PDF input: bind the images embedded in the source PDF.",
    )
    p.add_argument(
        "--out", "-o",
        metavar="OUT.pdf",
        help="Output file (default: INPUT.ebook.pdf).",
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Print the page table.",
    )
    p.set_defaults(func=run)
