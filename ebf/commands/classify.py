"""Command: ebf classify — heuristic line classification of a text file."""

from __future__ import annotations

import argparse
import json
from collections import Counter
from pathlib import Path

from rich.table import Table
from rich import box

from data_model.fragments import FragmentKind, FragmentList
from ebf._io import console, read_text, require_file
from text_parser.builder import build_document
from text_parser.classifier import classify_text
from text_parser.normalizer import normalize_text

_KIND_STYLES = {
    FragmentKind.HEADING:        "bold cyan",
    FragmentKind.CHAPTER_TITLE:  "bold magenta",
    FragmentKind.FIGURE_CAPTION: "green",
    FragmentKind.TERM_CANDIDATE: "yellow",
    FragmentKind.PARAGRAPH:      "",
}


def _show_table(fragments: FragmentList) -> None:
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("#",    justify="right", no_wrap=True, style="dim")
    table.add_column("KIND", no_wrap=True)
    table.add_column("LEN",  justify="right", no_wrap=True)
    table.add_column("TEXT", no_wrap=False, max_width=70)

    for index, fragment in enumerate(fragments, start=1):
        style = _KIND_STYLES.get(fragment.kind, "")
        kind = f"[{style}]{fragment.kind}[/{style}]" if style else str(fragment.kind)
        table.add_row(str(index), kind, str(len(fragment.text)), fragment.text[:120])

    console.print()
    console.print(table)


def _summary(fragments: FragmentList) -> str:
    counts = Counter(f.kind for f in fragments)
    return ", ".join(f"{kind}={counts[kind]}" for kind in FragmentKind if counts[kind])


def run(args: argparse.Namespace) -> None:
    txt_path = require_file(Path(args.txt_file))
    fragments = classify_text(normalize_text(read_text(txt_path)))

    if args.json:
        out_path = Path(args.json)
        document = build_document(fragments, args.title or txt_path.stem)
        payload = json.dumps(document.to_dict(), ensure_ascii=False, indent=2)
        out_path.write_text(payload, encoding="utf-8")
        console.print(f"[green]JSON:[/green] {out_path}  ({len(document.content)} sections)")

    if args.show:
        _show_table(fragments)

    console.print(f"  [dim]{len(fragments)} fragments[/dim] {_summary(fragments)}")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "classify",
        help="Classifies the lines of a text file into structural fragments.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Normalizes a plain-text file and classifies it line by line into
headings, chapter titles, figure captions, term candidates and
paragraphs. With --json the fragments are grouped into a document
(one section per heading or chapter title) that `ebf build` accepts.

Examples:
  ebf classify paper.txt --show
  ebf classify paper.txt --json paper.json && ebf build paper.json
        """,
    )
    p.add_argument(
        "txt_file",
        metavar="FILE.txt",
        help="Path to the text file.",
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Print the fragment table.",
    )
    p.add_argument(
        "--json",
        metavar="OUT",
        help="Write the document built from the fragments as JSON.",
    )
    p.add_argument(
        "--title",
        help="Document title for --json (default: file name).",
    )
    p.set_defaults(func=run)
