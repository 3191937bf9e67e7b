"""ebf — command-line interface of ebookforge."""

__version__ = "0.1.0"
