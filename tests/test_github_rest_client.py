import hashlib
import json
from dataclasses import dataclass, field
from typing import Any

import pytest
import requests

from scriptpublish.errors import ChecksumError, NetworkError, NoReleaseFound
from scriptpublish.github_rest import GitHubReleaseClient

TARBALL = "https://api.github.com/repos/acme/scripts/tarball/v1.0"


@dataclass
class _DummyResponse:
    status_code: int
    payload: Any = None
    chunks: list[bytes] = field(default_factory=list)
    closed: bool = False

    def __enter__(self) -> "_DummyResponse":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.closed = True

    def json(self) -> Any:
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    @property
    def text(self) -> str:
        if isinstance(self.payload, (dict, list)):
            return json.dumps(self.payload)
        return str(self.payload)

    def iter_content(self, chunk_size: int = 1) -> Any:
        for chunk in self.chunks:
            if isinstance(chunk, Exception):
                raise chunk
            yield chunk


class _DummySession:
    def __init__(self, responses: list[Any]):
        self._responses = responses
        self.request_log: list[tuple[str, str, dict[str, Any]]] = []
        self.headers: dict[str, str] = {}

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        timeout: float | None = None,
        stream: bool = False,
    ) -> _DummyResponse:
        self.request_log.append((method, url, {"headers": headers, "timeout": timeout, "stream": stream}))
        if not self._responses:
            raise AssertionError("No response queued for request")
        nxt = self._responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


def _client(responses: list[Any], **kw: Any) -> tuple[GitHubReleaseClient, _DummySession]:
    session = _DummySession(responses)
    client = GitHubReleaseClient(owner="acme", repo="scripts", session=session, **kw)  # type: ignore[arg-type]
    return client, session


def test_latest_release_reads_tag_and_tarball():
    client, session = _client(
        [_DummyResponse(200, {"tag_name": "v1.0", "tarball_url": TARBALL, "name": "First"})]
    )

    release = client.latest_release()

    assert release.tag_name == "v1.0"
    assert release.tarball_url == TARBALL
    method, url, meta = session.request_log[0]
    assert method == "GET"
    assert url == "https://api.github.com/repos/acme/scripts/releases/latest"
    assert meta["timeout"] is None
    assert session.headers["Accept"] == "application/vnd.github+json"
    assert "Authorization" not in session.headers


def test_token_and_timeout_are_forwarded():
    client, session = _client(
        [_DummyResponse(200, {"tag_name": "v1", "tarball_url": TARBALL})],
        token="ghp_example",
        timeout=12.5,
    )

    client.latest_release()

    assert session.headers["Authorization"] == "Bearer ghp_example"
    assert session.request_log[0][2]["timeout"] == 12.5


def test_transport_failure_is_network_error():
    client, _ = _client([requests.ConnectionError("no route to host")])

    with pytest.raises(NetworkError) as excinfo:
        client.latest_release()
    assert excinfo.value.fatal is True


def test_server_error_is_network_error_with_status():
    client, _ = _client([_DummyResponse(502, {"message": "bad gateway"})])

    with pytest.raises(NetworkError) as excinfo:
        client.latest_release()
    assert excinfo.value.status == 502


def test_missing_release_is_reported():
    client, _ = _client([_DummyResponse(404, {"message": "Not Found"})])

    with pytest.raises(NoReleaseFound) as excinfo:
        client.latest_release()
    assert "create a release" in (excinfo.value.hint or "")


@pytest.mark.parametrize(
    "payload",
    [
        {"tag_name": "v1.0"},
        {"tarball_url": TARBALL},
        {"tag_name": "", "tarball_url": TARBALL},
        {"tag_name": "v1.0", "tarball_url": ""},
        ["not", "a", "mapping"],
        ValueError("not json"),
    ],
)
def test_incomplete_payload_is_no_release(payload: Any):
    client, _ = _client([_DummyResponse(200, payload)])

    with pytest.raises(NoReleaseFound):
        client.latest_release()


def test_download_checksum_hashes_streamed_bytes():
    chunks = [b"abc", b"", b"def"]
    response = _DummyResponse(200, chunks=chunks)
    client, session = _client([response])

    digest = client.download_checksum(TARBALL)

    assert digest == hashlib.sha256(b"abcdef").hexdigest()
    assert session.request_log[0][1] == TARBALL
    assert session.request_log[0][2]["stream"] is True
    assert response.closed is True


def test_download_checksum_empty_archive():
    client, _ = _client([_DummyResponse(200, chunks=[])])

    with pytest.raises(ChecksumError):
        client.download_checksum(TARBALL)


def test_download_checksum_http_error():
    response = _DummyResponse(404, "missing")
    client, _ = _client([response])

    with pytest.raises(ChecksumError):
        client.download_checksum(TARBALL)
    assert response.closed is True


def test_download_checksum_transport_error():
    client, _ = _client([requests.Timeout("read timed out")])

    with pytest.raises(ChecksumError):
        client.download_checksum(TARBALL)


def test_download_checksum_interrupted_stream():
    response = _DummyResponse(
        200, chunks=[b"abc", requests.exceptions.ChunkedEncodingError("cut")]
    )
    client, _ = _client([response])

    with pytest.raises(ChecksumError):
        client.download_checksum(TARBALL)
    assert response.closed is True
