"""script-publisher CLI.

Publishes one script from the scripts repository:

  script-publisher utility/unlock-pdf.sh

Fetches the latest release, parses the README next to the script, writes
``Formula/<name>.rb`` into the tap repository and builds a ``.deb`` when
``dpkg-deb`` is available.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

from scriptpublish.config import CONFIG_DEFAULT, ConfigError, PublishConfig
from scriptpublish.logging import configure_logging
from scriptpublish.pipeline import publish
from scriptpublish.runtime import (
    EXIT_CONFIG,
    EXIT_OK,
    EXIT_PACKAGE_FAILED,
    execute_command,
    prepare_config,
    report_failure,
)
from scriptpublish.ux import show_publish_result

_MAX_HELP_WIDTH = 100

EPILOG = "Example: script-publisher utility/unlock-pdf.sh"


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="script-publisher",
        description="Create or update a Homebrew formula and Debian package for a script",
        epilog=EPILOG,
        formatter_class=_HelpFormatter,
    )
    p.add_argument(
        "script_path",
        metavar="SCRIPT_PATH",
        help="Path of the script relative to the scripts repository root",
    )
    p.add_argument(
        "--config",
        default=None,
        help=f"YAML configuration file (default: {CONFIG_DEFAULT} when present)",
    )
    p.add_argument("--skip-deb", action="store_true", help="Do not build a .deb package")
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the rendered formula instead of writing any files",
    )
    p.add_argument("--json-logs", action="store_true", help="Emit JSON log records")
    p.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    return p


def _cmd_publish(cfg: PublishConfig, args: argparse.Namespace) -> int:
    result = publish(args.script_path, cfg, dry_run=args.dry_run)
    if args.dry_run:
        sys.stdout.write(result.formula_text)
        return EXIT_OK
    show_publish_result(result)
    return EXIT_PACKAGE_FAILED if result.deb_failed else EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        cfg = prepare_config(args)
    except ConfigError as exc:
        report_failure(exc)
        return EXIT_CONFIG
    configure_logging(json_logging=cfg.logging_json_enabled, level=cfg.logging_level)
    handler: Any = lambda: _cmd_publish(cfg, args)  # noqa: E731
    return execute_command(handler, "publish")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
