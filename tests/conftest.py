"""Shared fixtures: agent archives and a fake download endpoint."""

from __future__ import annotations

import io
import logging
import socket
import tarfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union
from unittest.mock import patch
from urllib.error import HTTPError, URLError

import pytest

BASE_URL = "https://download.sourceclear.com"

AGENT_SCRIPT = b"#!/bin/sh\necho srcclr \"$@\"\n"


def build_agent_archive(
    dest: Path,
    version: str,
    top_dir: Optional[str] = None,
    extra_files: Optional[Dict[str, bytes]] = None,
) -> Path:
    """Write a gzipped agent tarball with a single top-level directory."""
    top = top_dir or f"srcclr-{version}"
    files = {
        "VERSION": f"{version}\n".encode(),
        "bin/srcclr": AGENT_SCRIPT,
        "lib/agent.jar": b"jar",
    }
    files.update(extra_files or {})

    dest.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(dest, "w:gz") as tar:
        root = tarfile.TarInfo(top)
        root.type = tarfile.DIRTYPE
        root.mode = 0o755
        tar.addfile(root)
        for name, data in files.items():
            info = tarfile.TarInfo(f"{top}/{name}")
            info.size = len(data)
            info.mode = 0o755 if name.startswith("bin/") else 0o644
            tar.addfile(info, io.BytesIO(data))
    return dest


Response = Union[bytes, BaseException]


class FakeResponse(io.BytesIO):
    """In-memory HTTP body that advertises a Content-Length header."""

    def __init__(self, body: bytes, content_length: Optional[int] = None) -> None:
        super().__init__(body)
        length = len(body) if content_length is None else content_length
        self.headers = {"Content-Length": str(length)}

    def getheader(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name, default)


class FakeRemote:
    """Stand-in for the download endpoint, keyed by URL."""

    def __init__(self) -> None:
        self.responses: Dict[str, Response] = {}
        self.requests: List[str] = []
        self.lengths: Dict[str, int] = {}

    def serve(self, path: str, response: Response, content_length: Optional[int] = None) -> None:
        """Register a body or an exception for a path.

        ``content_length`` overrides the advertised length, for bodies that end
        early.
        """
        url = f"{BASE_URL}/{path}"
        self.responses[url] = response
        if content_length is not None:
            self.lengths[url] = content_length

    def urlopen(self, url: str, timeout: Optional[float] = None) -> FakeResponse:
        self.requests.append(url)
        response = self.responses.get(url)
        if response is None:
            raise HTTPError(url, 404, "Not Found", hdrs=None, fp=None)  # type: ignore[arg-type]
        if isinstance(response, BaseException):
            raise response
        return FakeResponse(response, self.lengths.get(url))


@pytest.fixture
def fake_remote() -> FakeRemote:
    """Patch network access with a FakeRemote for the duration of a test."""
    remote = FakeRemote()
    with patch("srcclr_ci.bootstrap.download.secure_urlopen", side_effect=remote.urlopen):
        yield remote


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    def _make(dest: Path, version: str, **kwargs) -> Path:
        return build_agent_archive(dest, version, **kwargs)

    return _make


@pytest.fixture
def archive_payload(tmp_path: Path) -> Callable[[str], bytes]:
    """Return the bytes of an agent archive for a version."""

    def _payload(version: str) -> bytes:
        return build_agent_archive(tmp_path / "build" / f"{version}.tgz", version).read_bytes()

    return _payload


@pytest.fixture
def timeout_error() -> URLError:
    return URLError(socket.timeout("timed out"))


@pytest.fixture(autouse=True)
def _restore_root_log_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
