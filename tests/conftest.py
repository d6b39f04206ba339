"""Pytest configuration for script-publisher tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install (`pip install -e .`).
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from scriptpublish import logging as sp_logging  # noqa: E402

SAMPLE_README = """\
# Utility scripts

### `unlock-pdf.sh`

Unlocks a password-protected PDF

#### Dependencies
- `install-dependency` (installs qpdf)
- `qpdf`

### `unlock-pdf-batch.sh` - bulk variant

Unlocks every PDF in a directory

#### Dependencies
- `parallel`
"""


@pytest.fixture(autouse=True)
def _fresh_logger(monkeypatch: pytest.MonkeyPatch) -> None:
    # The logger binds sys.stdout when created; build it lazily inside each test
    monkeypatch.setattr(sp_logging, "_GLOBAL", None)


@pytest.fixture(autouse=True)
def _no_github_token(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so teardown also removes values loaded from .env files
    for var in ("GITHUB_TOKEN", "GH_TOKEN", "GITHUB_PAT"):
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A parent directory holding a scripts repo and an empty tap repo."""
    scripts = tmp_path / "scripts" / "utility"
    scripts.mkdir(parents=True)
    (scripts / "README.md").write_text(SAMPLE_README, encoding="utf-8")
    (scripts / "unlock-pdf.sh").write_text("#!/bin/sh\necho unlock\n", encoding="utf-8")
    (tmp_path / "homebrew-scripts").mkdir()
    return tmp_path


@pytest.fixture
def sample_readme() -> str:
    return SAMPLE_README
