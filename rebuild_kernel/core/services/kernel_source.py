"""
Kernel source — determine the release URL and download the tarball.

The download happens on the host because networking inside the build
container is unreliable on some CI runners.
"""

from __future__ import annotations

import http.client
import logging
import posixpath
import re
import shutil
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path

from rebuild_kernel.core.errors import DownloadError, KernelSourceError

logger = logging.getLogger(__name__)

# The builder pins its kernel release as a string literal.
KERNEL_URL_RE = re.compile(r'var latest = "([^"]+)"')


def extract_kernel_url(source: str) -> str:
    """Pull the pinned kernel URL out of the builder's source text.

    Raises:
        KernelSourceError: If the pattern does not match.
    """
    match = KERNEL_URL_RE.search(source)
    if match is None:
        raise KernelSourceError(f"regexp {KERNEL_URL_RE.pattern} resulted in no matches")
    return match.group(1)


def resolve_kernel_url(configured: str | None, builder_source: Path | None) -> str:
    """Use the configured URL if there is one, else scrape the builder source."""
    if configured:
        logger.debug("Using configured kernel URL %s", configured)
        return configured

    if builder_source is None:
        raise KernelSourceError("No kernel URL configured and no builder source to read it from")

    try:
        text = builder_source.read_text(encoding="utf-8")
    except OSError as e:
        raise KernelSourceError(f"Cannot read {builder_source}: {e}") from e
    return extract_kernel_url(text)


def archive_name(url: str) -> str:
    """File name of the archive: the last path segment of ``url``."""
    name = posixpath.basename(urllib.parse.urlsplit(url).path)
    if not name:
        raise KernelSourceError(f"Cannot derive a file name from {url}")
    return name


def download_kernel(destdir: Path, url: str) -> Path:
    """Stream ``url`` into ``destdir``, named after its last path segment.

    The body goes to a ``.part`` file first and is renamed only after a
    complete 200 response, so the final name never holds a partial or
    error body.

    Returns:
        Path of the downloaded archive.

    Raises:
        DownloadError: On a non-200 status or any transfer/I/O error.
    """
    dest = destdir / archive_name(url)
    partial = dest.with_name(dest.name + ".part")

    try:
        with urllib.request.urlopen(url) as resp:
            if resp.status != 200:
                raise DownloadError(
                    f"unexpected HTTP status code for {url}: got {resp.status}, want 200"
                )
            expected = _content_length(resp)
            with open(partial, "wb") as out:
                shutil.copyfileobj(resp, out)
                written = out.tell()
    except urllib.error.HTTPError as e:
        raise DownloadError(
            f"unexpected HTTP status code for {url}: got {e.code}, want 200"
        ) from e
    except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
        raise DownloadError(f"downloading {url}: {e}") from e

    # A connection closed early is a short read, not an error, to http.client.
    if expected is not None and written != expected:
        raise DownloadError(f"downloading {url}: got {written} of {expected} bytes")

    try:
        partial.replace(dest)
    except OSError as e:
        raise DownloadError(f"moving {partial} to {dest}: {e}") from e

    logger.debug("Downloaded %s (%d bytes)", dest.name, dest.stat().st_size)
    return dest


def _content_length(resp) -> int | None:
    """Declared body size, or None when absent (e.g. chunked) or malformed."""
    value = resp.headers.get("Content-Length")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
