"""Secure download utilities with SSL certificate handling.

Downloads verify certificates against certifi's CA bundle so that they work
on hosts (and standalone macOS builds) without a usable system store.
"""

from __future__ import annotations

import shutil
import socket
import ssl
from http.client import HTTPException
from pathlib import Path
from typing import Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

import certifi

from srcclr_ci import __version__

USER_AGENT = f"srcclr-ci/{__version__}"


class FetchError(Exception):
    """A download failed; ``detail`` holds the raw diagnostic text."""

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"{url}: {detail}")


def get_ssl_context() -> ssl.SSLContext:
    """Get an SSL context that uses certifi's CA bundle."""
    return ssl.create_default_context(cafile=certifi.where())


def secure_urlopen(url: str, timeout: Optional[float] = 30.0):
    """Open a URL with proper SSL certificate verification.

    Raises:
        URLError: If the URL cannot be opened.
        ValueError: If the URL is not HTTPS.
    """
    if not url.startswith("https://"):
        raise ValueError(f"Only HTTPS URLs are supported: {url}")

    request = Request(url, headers={"User-Agent": USER_AGENT})
    return urlopen(request, timeout=timeout, context=get_ssl_context())  # nosec B310


def describe_failure(error: BaseException) -> str:
    """Render a download failure as a diagnostic line for the operator."""
    if isinstance(error, HTTPError):
        return f"HTTP {error.code} - {error.reason}"
    if isinstance(error, URLError):
        return f"{error.reason}"
    if isinstance(error, (socket.timeout, TimeoutError)):
        return f"timed out: {error}" if str(error) else "timed out"
    return f"{type(error).__name__}: {error}"


def download_file(url: str, dest_path: Path, timeout: Optional[float] = 60.0) -> Path:
    """Download a file from a URL with proper SSL certificate verification.

    A partially written file is removed on failure, including a transfer
    that ends before the advertised Content-Length.

    Returns:
        ``dest_path``.

    Raises:
        FetchError: If the URL cannot be fetched or the file cannot be written.
    """
    try:
        with secure_urlopen(url, timeout=timeout) as response:
            expected = response.getheader("Content-Length")
            with open(dest_path, "wb") as f:
                shutil.copyfileobj(response, f)
                received = f.tell()
    except (URLError, OSError, ValueError, HTTPException) as e:
        dest_path.unlink(missing_ok=True)
        raise FetchError(url, describe_failure(e)) from e

    if expected is not None and expected.strip().isdigit() and received != int(expected):
        dest_path.unlink(missing_ok=True)
        raise FetchError(
            url,
            f"transfer closed with {int(expected) - received} bytes remaining to read",
        )
    return dest_path
