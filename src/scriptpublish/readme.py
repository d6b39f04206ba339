"""README scanning for script descriptions and dependency lists.

A scripts README documents each script under a level-3 heading, followed by
a one-line description and, optionally, a ``#### Dependencies`` list::

    ### `unlock-pdf.sh`

    Unlocks a password-protected PDF.

    #### Dependencies
    - `install-dependency` (installs qpdf)

Both scans are small state machines over the document lines so that their
termination points (first non-blank line, first non-list line) are explicit.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from enum import Enum
from pathlib import Path

from .errors import MissingDescription, MissingReadme
from .models import ScriptMetadata

DEPENDENCIES_HEADING = '#### Dependencies'
LIST_MARKER = '-'

_heading_re = re.compile(r'^(#{1,6})\s')
_inline_code_re = re.compile(r'`([^`]+)`')


class _State(Enum):
    SEARCHING = 'searching'
    COLLECTING = 'collecting'


def heading_pattern(package_name: str) -> re.Pattern[str]:
    """Match ``### <name>`` with optional emphasis and a trailing extension or words."""
    return re.compile(
        r'^###\s+[`*_]*'
        + re.escape(package_name)
        + r'(?:\.[A-Za-z0-9]+)*(?![A-Za-z0-9-])'
    )


def _heading_level(line: str) -> int | None:
    m = _heading_re.match(line)
    return len(m.group(1)) if m else None


def extract_description(lines: Sequence[str], package_name: str) -> str:
    pattern = heading_pattern(package_name)
    state = _State.SEARCHING
    for line in lines:
        if state is _State.SEARCHING:
            if pattern.match(line):
                state = _State.COLLECTING
            continue
        text = line.strip()
        if text:
            return text
    raise MissingDescription(
        f"Could not find description for '{package_name}' in README.md.",
        hint=(
            f"Please ensure there is a markdown heading '### {package_name}' "
            'followed by a description.'
        ),
    )


def section_for(lines: Sequence[str], package_name: str) -> list[str]:
    """Return the lines under the package's heading, up to the next heading of level <= 3."""
    pattern = heading_pattern(package_name)
    out: list[str] = []
    inside = False
    for line in lines:
        if not inside:
            inside = bool(pattern.match(line))
            continue
        level = _heading_level(line)
        if level is not None and level <= 3:
            break
        out.append(line)
    return out


def extract_dependencies(
    lines: Sequence[str], package_name: str | None = None
) -> list[str]:
    """Collect backtick-quoted names from ``#### Dependencies`` list items.

    A list ends at the first line that is not a list item, blank lines
    included; entries after such a gap are not collected.
    """
    scope = section_for(lines, package_name) if package_name else lines
    deps: list[str] = []
    state = _State.SEARCHING
    for line in scope:
        if state is _State.SEARCHING:
            if line.startswith(DEPENDENCIES_HEADING):
                state = _State.COLLECTING
            continue
        if not line.startswith(LIST_MARKER):
            state = _State.SEARCHING
            if line.startswith(DEPENDENCIES_HEADING):
                state = _State.COLLECTING
            continue
        m = _inline_code_re.search(line)
        if m and m.group(1):
            deps.append(m.group(1))
    return deps


def _read_text(path: Path) -> str:
    return path.read_text(encoding='utf-8')


def parse_readme(
    readme_path: Path,
    package_name: str,
    *,
    reader: Callable[[Path], str] = _read_text,
) -> ScriptMetadata:
    try:
        text = reader(readme_path)
    except FileNotFoundError as exc:
        raise MissingReadme(f"README.md not found at '{readme_path}'") from exc
    except OSError as exc:
        raise MissingReadme(f"README.md at '{readme_path}' is not readable: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise MissingReadme(f"README.md at '{readme_path}' is not valid UTF-8: {exc}") from exc
    lines = text.splitlines()
    description = extract_description(lines, package_name)
    dependencies = extract_dependencies(lines, package_name)
    return ScriptMetadata(description=description, dependencies=dependencies)


__all__ = [
    'DEPENDENCIES_HEADING',
    'extract_dependencies',
    'extract_description',
    'heading_pattern',
    'parse_readme',
    'section_for',
]
