"""Runtime helpers for CLI orchestration."""

from __future__ import annotations

import sys
import time
from collections.abc import Callable
from typing import Any, Protocol

from scriptpublish.config import PublishConfig, load_config
from scriptpublish.errors import PublishError, classify_error
from scriptpublish.logging import get_logger
from scriptpublish.ux import show_diagnostic

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_CONFIG = 2
EXIT_PACKAGE_FAILED = 3


class _HandlerCallable(Protocol):
    def __call__(self) -> Any: ...


def prepare_config(
    args: Any, *, loader: Callable[[str | None], PublishConfig] = load_config
) -> PublishConfig:
    """Load the config and apply command line overrides."""
    cfg = loader(getattr(args, "config", None))
    if getattr(args, "skip_deb", False):
        cfg.build_deb = False
    if getattr(args, "json_logs", False):
        cfg.logging_json_enabled = True
    level = getattr(args, "log_level", None)
    if level:
        cfg.logging_level = level
    if getattr(args, "quiet", False):
        cfg.logging_level = "WARNING"
    return cfg


def report_failure(exc: BaseException) -> None:
    """Print a human-readable diagnostic for ``exc`` to stderr."""
    show_diagnostic(classify_error(exc), stream=sys.stderr)


def execute_command(handler: _HandlerCallable, command: str) -> int:
    """Run ``handler`` and translate pipeline failures into exit codes."""
    logger = get_logger()
    start = time.monotonic()
    try:
        result = handler()
        exit_code = int(result) if result is not None else EXIT_OK
    except PublishError as exc:
        report_failure(exc)
        logger.log_error(
            f"{command} failed", error=classify_error(exc).message, category=exc.category
        )
        exit_code = EXIT_FATAL if exc.fatal else EXIT_PACKAGE_FAILED
    except OSError as exc:
        report_failure(exc)
        info = classify_error(exc)
        logger.log_error(f"{command} failed", error=info.message, category=info.category)
        exit_code = EXIT_FATAL
    logger.debug(
        f"{command} finished",
        exit_code=exit_code,
        duration_ms=round((time.monotonic() - start) * 1000, 2),
    )
    return exit_code


__all__ = [
    "EXIT_CONFIG",
    "EXIT_FATAL",
    "EXIT_OK",
    "EXIT_PACKAGE_FAILED",
    "execute_command",
    "prepare_config",
    "report_failure",
]
