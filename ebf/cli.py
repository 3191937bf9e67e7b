"""
ebf — command-line tool of ebookforge.

Usage:
  ebf [-v] <command> [options]

Commands:
  extract    Extracts the text layer (and figure images) of a PDF.
  classify   Classifies the lines of a text file into structural fragments.
  structure  Structures a text file into a document tree with Gemini (JSON).
  build      Renders a .txt, .json or .pdf input as a paginated e-book PDF.
"""

from __future__ import annotations

import argparse
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from data_model.errors import EbookError
from ebf import __version__
from ebf.commands import build as cmd_build
from ebf.commands import classify as cmd_classify
from ebf.commands import extract as cmd_extract
from ebf.commands import structure as cmd_structure

err_console = Console(stderr=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ebf",
        description="ebookforge — noisy extracted text to formatted e-book PDFs.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"ebf {__version__}"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging.",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        metavar="<command>",
        dest="command",
    )
    subparsers.required = True

    cmd_extract.add_parser(subparsers)
    cmd_classify.add_parser(subparsers)
    cmd_structure.add_parser(subparsers)
    cmd_build.add_parser(subparsers)

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        args.func(args)
    except EbookError as e:
        err_console.print(f"[red]{e.kind}:[/red] {escape(str(e))}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
