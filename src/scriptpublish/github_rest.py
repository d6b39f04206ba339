from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any

import requests

from .errors import ChecksumError, NetworkError, NoReleaseFound
from .models import Release

DEFAULT_API_URL = "https://api.github.com"
USER_AGENT = "script-publisher/0.1.0"
HTTP_ERROR_STATUS = 400
HTTP_NOT_FOUND = 404
CHUNK_SIZE = 1024 * 1024

_NO_RELEASE_HINT = "Please create a release on GitHub first."


@dataclass
class GitHubReleaseClient:
    """Read-only client for the latest release of one GitHub repository."""

    owner: str
    repo: str
    token: str | None = None
    base_url: str = DEFAULT_API_URL
    timeout: float | None = None
    session: requests.Session | None = None
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:  # pragma: no cover - simple wiring
        self._session = self.session or requests.Session()
        self._session.headers.setdefault("Accept", "application/vnd.github+json")
        self._session.headers.setdefault("User-Agent", USER_AGENT)
        if self.token:
            self._session.headers.setdefault("Authorization", f"Bearer {self.token}")

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    def _get(self, url: str, *, stream: bool = False) -> Any:
        return self._session.request(
            "GET",
            url,
            headers=self._session.headers,
            timeout=self.timeout,
            stream=stream,
        )

    def latest_release(self) -> Release:
        url = f"{self.base_url.rstrip('/')}/repos/{self.slug}/releases/latest"
        try:
            response = self._get(url)
        except requests.RequestException as exc:
            raise NetworkError(
                f"Failed to fetch release information for {self.slug}: {exc}",
                hint="Check your internet connection.",
            ) from exc
        if response.status_code == HTTP_NOT_FOUND:
            raise NoReleaseFound(
                f"Could not find a release for {self.slug}.", hint=_NO_RELEASE_HINT
            )
        if response.status_code >= HTTP_ERROR_STATUS:
            raise NetworkError(
                f"GitHub API GET {url} failed with {response.status_code}",
                status=response.status_code,
            )
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise NoReleaseFound(
                f"Unexpected release payload for {self.slug}.", hint=_NO_RELEASE_HINT
            )
        tarball_url = data.get("tarball_url")
        tag_name = data.get("tag_name")
        if not isinstance(tarball_url, str) or not tarball_url:
            raise NoReleaseFound(
                f"Latest release of {self.slug} has no tarball URL.", hint=_NO_RELEASE_HINT
            )
        if not isinstance(tag_name, str) or not tag_name:
            raise NoReleaseFound(
                f"Latest release of {self.slug} has no tag name.", hint=_NO_RELEASE_HINT
            )
        return Release(tag_name=tag_name, tarball_url=tarball_url)

    def download_checksum(self, url: str) -> str:
        """Stream ``url`` and return the hex SHA-256 of its bytes."""
        digest = hashlib.sha256()
        size = 0
        try:
            with self._get(url, stream=True) as response:
                if response.status_code >= HTTP_ERROR_STATUS:
                    raise ChecksumError(
                        f"Downloading {url} failed with {response.status_code}",
                        hint="Check if the tarball URL is valid.",
                    )
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        digest.update(chunk)
                        size += len(chunk)
        except requests.RequestException as exc:
            raise ChecksumError(
                f"Failed to download {url}: {exc}",
                hint="Check if the tarball URL is valid.",
            ) from exc
        if size == 0:
            raise ChecksumError(
                f"Downloaded archive from {url} is empty",
                hint="Check if the tarball URL is valid.",
            )
        return digest.hexdigest()


__all__ = ["GitHubReleaseClient"]
