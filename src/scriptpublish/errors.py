"""Error taxonomy & redaction for the publishing pipeline.

Every failure the pipeline can report is a ``PublishError`` subclass carrying
a stable ``category`` and a ``fatal`` flag. Fatal errors abort the run; the
non-fatal ones (missing dependency list, unavailable packaging tool, failed
package build) are collected as warnings by the pipeline.

Public API:
- PublishError and its subclasses
- classify_error(exc) -> ErrorInfo
- redact(text) -> str
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"ghp_[A-Za-z0-9]{20,40}"),  # GitHub classic tokens
    re.compile(r"github_pat_\w{20,}"),  # GitHub fine-grained tokens
    re.compile(r"gh[osu]_[A-Za-z0-9]{20,40}"),  # OAuth / app tokens
]

_REDACTION_PLACEHOLDER = "<redacted>"


class PublishError(RuntimeError):
    """Base class for pipeline failures."""

    category = "generic"
    fatal = True

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class InvalidArgument(PublishError):
    category = "argument"


class NetworkError(PublishError):
    category = "network"

    def __init__(
        self, message: str, *, status: int | None = None, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.status = status


class NoReleaseFound(PublishError):
    category = "release"


class ChecksumError(PublishError):
    category = "checksum"


class MissingReadme(PublishError):
    category = "readme"


class MissingDescription(PublishError):
    category = "readme.description"


class MissingDependencies(PublishError):
    category = "readme.dependencies"
    fatal = False


class PackagingToolUnavailable(PublishError):
    category = "packaging.unavailable"
    fatal = False


class PackageBuildError(PublishError):
    category = "packaging.build"
    fatal = False


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    fatal: bool = True
    hint: str | None = None
    details: dict[str, Any] | None = None


def redact(text: str) -> str:
    """Redact sensitive tokens in arbitrary text."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def classify_error(exc: BaseException) -> ErrorInfo:
    """Best-effort classification of an exception.

    ``PublishError`` instances report their own category; anything else is
    treated as an unexpected fatal failure.
    """
    msg = redact(str(exc) if exc else "")
    if isinstance(exc, PublishError):
        details: dict[str, Any] | None = None
        status = getattr(exc, "status", None)
        if status is not None:
            details = {"status": status}
        return ErrorInfo(
            exc.category,
            msg,
            exc.__class__.__name__,
            fatal=exc.fatal,
            hint=redact(exc.hint) if exc.hint else None,
            details=details,
        )
    if isinstance(exc, OSError):
        return ErrorInfo("filesystem", msg, exc.__class__.__name__)
    return ErrorInfo("generic", msg, exc.__class__.__name__)


__all__ = [
    "ChecksumError",
    "ErrorInfo",
    "InvalidArgument",
    "MissingDependencies",
    "MissingDescription",
    "MissingReadme",
    "NetworkError",
    "NoReleaseFound",
    "PackageBuildError",
    "PackagingToolUnavailable",
    "PublishError",
    "classify_error",
    "redact",
]
