from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .errors import PublishError


@dataclass
class ScriptLocation:
    """Where a script and its README live inside the scripts repository."""

    script_path: str  # relative to the repository root, as given on the command line
    package_name: str
    script_file: Path
    readme_path: Path


@dataclass
class Release:
    tag_name: str
    tarball_url: str


@dataclass
class ScriptMetadata:
    description: str
    dependencies: list[str] = field(default_factory=list)


@dataclass
class PublishRecord:
    """Accumulated pipeline state; each stage fills in its own fields."""

    script_path: str
    package_name: str = ""
    script_file: Path | None = None
    readme_path: Path | None = None
    version: str = ""
    archive_url: str = ""
    checksum: str = ""
    description: str = ""
    dependencies: list[str] = field(default_factory=list)


@dataclass
class PublishResult:
    record: PublishRecord
    formula_path: Path | None = None
    formula_text: str = ""
    deb_path: Path | None = None
    warnings: list[PublishError] = field(default_factory=list)

    @property
    def deb_failed(self) -> bool:
        return any(w.category == "packaging.build" for w in self.warnings)


__all__ = ["PublishRecord", "PublishResult", "Release", "ScriptLocation", "ScriptMetadata"]
