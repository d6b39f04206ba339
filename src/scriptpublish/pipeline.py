"""Publishing pipeline: resolve -> fetch release -> parse README -> generate.

Collaborators (release source, package builder, README reader) are injected
so the pipeline can run against fixtures.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from .config import PublishConfig
from .debian import PackageBuilder, build_deb_package
from .errors import MissingDependencies, PackageBuildError, PublishError
from .formula import render_formula, write_formula
from .github_rest import GitHubReleaseClient
from .logging import get_logger
from .models import PublishRecord, PublishResult, Release
from .paths import resolve_script
from .readme import parse_readme


class ReleaseSource(Protocol):
    def latest_release(self) -> Release: ...

    def download_checksum(self, url: str) -> str: ...


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def default_release_source(config: PublishConfig) -> GitHubReleaseClient:
    return GitHubReleaseClient(
        owner=config.github_user,
        repo=config.scripts_repo,
        token=config.github_token,
        base_url=config.api_url,
        timeout=config.request_timeout,
    )


def publish(
    script_path: str | None,
    config: PublishConfig,
    *,
    releases: ReleaseSource | None = None,
    builder: PackageBuilder | None = None,
    reader: Callable[[Path], str] = _read_text,
    build_deb: bool | None = None,
    dry_run: bool = False,
) -> PublishResult:
    """Run every stage for one script and return what was produced.

    Fatal ``PublishError``s propagate. Non-fatal ones are logged and
    collected in ``PublishResult.warnings``.
    """
    logger = get_logger()
    location = resolve_script(script_path, config)
    record = PublishRecord(
        script_path=location.script_path,
        package_name=location.package_name,
        script_file=location.script_file,
        readme_path=location.readme_path,
    )
    result = PublishResult(record=record)

    source = releases or default_release_source(config)
    with logger.timed_operation("fetch_release", repo=config.repo_slug):
        logger.info("Fetching latest release information from GitHub...")
        release = source.latest_release()
        record.version = release.tag_name
        record.archive_url = release.tarball_url
        logger.info(f"Found latest release: {record.version}")
        logger.info("Downloading tarball to calculate SHA256 checksum...")
        record.checksum = source.download_checksum(record.archive_url)
        logger.info(f"Checksum calculated: {record.checksum}")

    logger.info("Parsing README.md for description and dependencies...")
    metadata = parse_readme(location.readme_path, record.package_name, reader=reader)
    record.description = metadata.description
    record.dependencies = list(metadata.dependencies)
    if not record.dependencies:
        _warn(
            result,
            MissingDependencies(
                "Could not find any dependencies. Please ensure the format is correct."
            ),
        )

    result.formula_text = render_formula(
        package_name=record.package_name,
        description=record.description,
        homepage=config.homepage,
        url=record.archive_url,
        sha256=record.checksum,
        script_path=record.script_path,
        dependencies=record.dependencies,
    )
    if dry_run:
        logger.info("Dry run: formula rendered, nothing written")
        return result

    result.formula_path = write_formula(
        config.formula_dir, record.package_name, result.formula_text
    )
    logger.log_artifact("formula", result.formula_path, package=record.package_name)

    wants_deb = config.build_deb if build_deb is None else build_deb
    if wants_deb:
        try:
            result.deb_path = build_deb_package(record, config, builder)
        except PublishError as exc:
            if exc.fatal:
                raise
            _warn(result, exc)
        else:
            logger.log_artifact("deb", result.deb_path, package=record.package_name)
    return result


def _warn(result: PublishResult, exc: PublishError) -> None:
    result.warnings.append(exc)
    if isinstance(exc, PackageBuildError):
        get_logger().log_error(str(exc), category=exc.category)
    else:
        get_logger().warning(str(exc), category=exc.category)


__all__ = ["ReleaseSource", "default_release_source", "publish"]
