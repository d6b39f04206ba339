"""What the publisher prints for people, as opposed to log records."""

from __future__ import annotations

import os
import sys
from typing import TextIO

from .errors import ErrorInfo
from .models import PublishResult

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
CYAN = "\033[36m"

RULE_WIDTH = 60
CLOSING_REMINDER = "Publication process complete. Remember to commit and push the changes."


def use_color(stream: TextIO) -> bool:
    """Colour only interactive terminals, and never when NO_COLOR is set."""
    if os.environ.get("NO_COLOR") or os.environ.get("TERM") == "dumb":
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _paint(text: str, code: str, stream: TextIO) -> str:
    return f"{code}{text}{RESET}" if use_color(stream) else text


def _line(mark: str, code: str, message: str, stream: TextIO) -> None:
    print(_paint(mark, BOLD + code, stream) + " " + message, file=stream)


def show_diagnostic(info: ErrorInfo, stream: TextIO | None = None) -> None:
    """Print a classified failure and its hint, if any."""
    stream = stream or sys.stderr
    _line("✗", RED, f"Error: {info.message}", stream)
    if info.hint:
        print(_paint(f"  {info.hint}", DIM, stream), file=stream)


def summary_rows(result: PublishResult) -> list[tuple[str, str]]:
    record = result.record
    return [
        ("version", record.version),
        ("sha256", record.checksum),
        ("dependencies", ", ".join(record.dependencies) or "none"),
        ("formula", str(result.formula_path) if result.formula_path else "-"),
        ("deb", str(result.deb_path) if result.deb_path else "skipped"),
    ]


def show_publish_result(result: PublishResult, stream: TextIO | None = None) -> None:
    """Print warnings collected during the run, the artifact table and the reminder."""
    stream = stream or sys.stdout
    for warning in result.warnings:
        _line("⚠", YELLOW, str(warning), stream)

    rows = summary_rows(result)
    width = max(len(key) for key, _ in rows)
    print(_paint(f"\nPublished {result.record.package_name}", BOLD + CYAN, stream), file=stream)
    print(_paint("─" * RULE_WIDTH, DIM, stream), file=stream)
    for key, value in rows:
        # placeholders for things that were not produced are dimmed
        shown = _paint(value, DIM, stream) if value in ("-", "none", "skipped") else value
        print(f"  {key.ljust(width)}  {shown}", file=stream)
    print(_paint("─" * RULE_WIDTH, DIM, stream), file=stream)

    if result.deb_failed:
        _line("⚠", YELLOW, CLOSING_REMINDER, stream)
    else:
        _line("✓", GREEN, CLOSING_REMINDER, stream)


__all__ = ["show_diagnostic", "show_publish_result", "summary_rows", "use_color"]
