"""Command: ebf structure — structures a text file with Gemini."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from data_model.content import iter_nodes
from data_model.errors import EbookError
from ebf._io import console, read_text, require_file
from structuring import DEFAULT_MODEL, structure_text


def run(args: argparse.Namespace) -> None:
    txt_path = require_file(Path(args.txt_file))
    title = args.title or txt_path.stem

    console.print(f"Sending [bold]{txt_path}[/bold] to Gemini ([cyan]{args.model}[/cyan]) …")

    try:
        document = structure_text(read_text(txt_path), title=title, model=args.model)
    except EbookError:
        raise
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise SystemExit(1)
    except Exception as e:
        console.print(f"[red]Gemini API error:[/red] {e}")
        raise SystemExit(1)

    payload = json.dumps(document.to_dict(), ensure_ascii=False, indent=2)
    if args.out:
        out_path = Path(args.out)
        out_path.write_text(payload, encoding="utf-8")
        nodes = sum(1 for _ in iter_nodes(document.content))
        console.print(
            f"[green]JSON:[/green] {out_path}  "
            f"({len(document.content)} sections, {nodes} nodes)"
        )
    else:
        print(payload)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "structure",
        help="Structures a text file into a document tree with Gemini (JSON).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Normalizes the text, sends it to Gemini with the structuring prompt and
writes the resolved document tree as JSON. The JSON can be rendered
with `ebf build FILE.json`.

Requires GEMINI_API_KEY in the environment (or a .env file).

Examples:
  ebf structure paper.txt --out paper.json
  ebf structure paper.txt --title "Cell Biology" --model gemini-2.5-pro
        """,
    )
    p.add_argument(
        "txt_file",
        metavar="FILE.txt",
        help="Path to the text file.",
    )
    p.add_argument(
        "--title",
        metavar="TITLE",
        help="Document title (default: file name without suffix).",
    )
    p.add_argument(
        "--model", "-m",
        default=DEFAULT_MODEL,
        metavar="MODEL",
        help=f"Gemini model (default: {DEFAULT_MODEL}).",
    )
    p.add_argument(
        "--out", "-o",
        metavar="OUT.json",
        help="Write the JSON to a file (default: stdout).",
    )
    p.set_defaults(func=run)
