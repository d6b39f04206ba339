"""Debian binary package generation via ``dpkg-deb``."""

from __future__ import annotations

import shutil
import subprocess  # nosec B404 - dpkg-deb is invoked with a fixed argument list
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .config import PublishConfig
from .errors import PackageBuildError, PackagingToolUnavailable
from .logging import get_logger
from .models import PublishRecord

ARCHITECTURE = "all"
INSTALL_PREFIX = Path("usr/local/bin")
SCRIPT_MODE = 0o755


class PackageBuilder(Protocol):
    def is_available(self) -> bool: ...

    def build(self, staging_dir: Path, output: Path) -> None: ...


@dataclass
class DpkgDebBuilder:
    tool: str = "dpkg-deb"

    def is_available(self) -> bool:
        return shutil.which(self.tool) is not None

    def build(self, staging_dir: Path, output: Path) -> None:
        tool_path = shutil.which(self.tool) or self.tool
        result = subprocess.run(  # nosec B603
            [tool_path, "--build", str(staging_dir), str(output)],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            get_logger().warning(
                f"{self.tool} exited with {result.returncode}",
                stderr=result.stderr.strip(),
            )


def strip_version_prefix(version: str) -> str:
    """Drop a single leading ``v`` so the version is Debian-compliant."""
    return version[1:] if version.startswith("v") else version


def deb_filename(package_name: str, version: str) -> str:
    return f"{package_name}_{strip_version_prefix(version)}_{ARCHITECTURE}.deb"


def render_control(
    *,
    package_name: str,
    version: str,
    description: str,
    dependencies: list[str],
    maintainer: str,
) -> str:
    lines = [
        f"Package: {package_name}",
        f"Version: {strip_version_prefix(version)}",
        "Section: utils",
        "Priority: optional",
        f"Architecture: {ARCHITECTURE}",
    ]
    # dpkg-deb rejects an empty Depends field
    if dependencies:
        lines.append(f"Depends: {', '.join(dependencies)}")
    lines.extend(
        [
            f"Maintainer: {maintainer}",
            f"Description: {description}",
            f" This package installs the '{package_name}' script.",
        ]
    )
    return "\n".join(lines) + "\n"


def _stage(record: PublishRecord, config: PublishConfig, staging_dir: Path) -> None:
    if record.script_file is None:
        raise PackageBuildError(f"No script file resolved for '{record.package_name}'")
    control_dir = staging_dir / "DEBIAN"
    bin_dir = staging_dir / INSTALL_PREFIX
    target = bin_dir / record.package_name
    try:
        if staging_dir.exists():
            shutil.rmtree(staging_dir)
        control_dir.mkdir(parents=True)
        bin_dir.mkdir(parents=True)
        (control_dir / "control").write_text(
            render_control(
                package_name=record.package_name,
                version=record.version,
                description=record.description,
                dependencies=record.dependencies,
                maintainer=config.maintainer,
            ),
            encoding="utf-8",
        )
        shutil.copyfile(record.script_file, target)
        target.chmod(SCRIPT_MODE)
    except OSError as exc:
        raise PackageBuildError(
            f"Could not stage '{record.package_name}' in {staging_dir}: {exc}"
        ) from exc


def build_deb_package(
    record: PublishRecord,
    config: PublishConfig,
    builder: PackageBuilder | None = None,
) -> Path:
    """Build ``<name>_<version>_all.deb`` in the scripts repository root.

    Raises ``PackagingToolUnavailable`` when the builder cannot run on this
    host and ``PackageBuildError`` when no artifact is produced. The staging
    tree is always removed.
    """
    logger = get_logger()
    builder = builder or DpkgDebBuilder(config.packaging_tool)
    if not builder.is_available():
        raise PackagingToolUnavailable(
            f"'{config.packaging_tool}' could not be found. Skipping .deb package generation."
        )

    source_root = config.source_root
    staging_dir = source_root / f"{record.package_name}-{record.version}"
    output = source_root / deb_filename(record.package_name, record.version)

    try:
        _stage(record, config, staging_dir)
        logger.info("Building the .deb package...", package=record.package_name)
        try:
            builder.build(staging_dir, output)
        except OSError as exc:
            raise PackageBuildError(f"Could not run {config.packaging_tool}: {exc}") from exc
    finally:
        logger.debug("Cleaning up temporary build directory", staging=str(staging_dir))
        shutil.rmtree(staging_dir, ignore_errors=True)

    if not output.is_file():
        raise PackageBuildError(f"Failed to create the Debian package '{output.name}'.")
    return output


__all__ = [
    "DpkgDebBuilder",
    "PackageBuilder",
    "build_deb_package",
    "deb_filename",
    "render_control",
    "strip_version_prefix",
]
