"""Derive the package name and README location from a script path."""

from __future__ import annotations

from pathlib import PurePosixPath

from .config import PublishConfig
from .errors import InvalidArgument
from .models import ScriptLocation

README_NAME = "README.md"


def package_name_for(script_path: str) -> str:
    """Return the file name of ``script_path`` without its final extension."""
    if not script_path or not script_path.strip():
        raise InvalidArgument(
            "No script path provided.",
            hint="Usage: script-publisher <path-to-script-in-repo> (e.g. utility/unlock-pdf.sh)",
        )
    name = PurePosixPath(script_path.strip()).stem
    if not name:
        raise InvalidArgument(f"Cannot derive a package name from '{script_path}'")
    return name


def resolve_script(script_path: str | None, config: PublishConfig) -> ScriptLocation:
    package_name = package_name_for(script_path or "")
    relative = PurePosixPath((script_path or "").strip())
    source_root = config.source_root
    return ScriptLocation(
        script_path=str(relative),
        package_name=package_name,
        script_file=source_root.joinpath(*relative.parts),
        readme_path=source_root.joinpath(*relative.parent.parts, README_NAME),
    )


__all__ = ["README_NAME", "package_name_for", "resolve_script"]
