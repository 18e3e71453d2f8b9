"""
Rendering functions for multigit output.

This module handles all printing of reports to the terminal.
Services return data, this module makes it visible.
"""

from typing import List, Optional

from rich.console import Console
from rich.text import Text

from .services.report_service import Report, INDENT

console = Console(highlight=False, soft_wrap=True)


def print_report(report: Report, out: Optional[Console] = None) -> None:
    """
    Print a report one block at a time.

    Output lines bypass rich rendering, which would expand tabs and
    drop control characters.

    Args:
        report: Report to print
        out: Console to print to (defaults to stdout)
    """
    out = out or console
    for block in report.blocks:
        out.print(block.header, end="")
        out.file.write("".join(block.lines) + "\n")
        out.file.flush()


def print_notice(message: str, out: Optional[Console] = None) -> None:
    """Print a plain one-line message."""
    (out or console).print(Text(message))


def print_name_list(heading: str, names: List[str], out: Optional[Console] = None) -> None:
    """Print a heading followed by one indented name per line."""
    out = out or console
    text = Text()
    text.append(f"{heading}\n", style="bold")
    for name in names:
        text.append(f"{INDENT}{name}\n")
    out.print(text, end="")
