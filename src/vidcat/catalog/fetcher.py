"""Catalog source fetcher: remote CSV over HTTP(S) or a local file.

Remote fetch rules:
- Allowed URL schemes: https:// and http:// only.
- Content-Type allow-list: CSV / plain text / generic binary.
- Max response body: configurable, 20 MB by default.
- Timeout: configurable, 30 seconds by default (connect + read).
- Max redirects: 3.

Any failure is fatal to the build and surfaces as SourceFetchError; no
partial text is ever returned.
"""

from __future__ import annotations

import logging
import socket
import urllib.error
import urllib.parse
import urllib.request
from http.client import HTTPResponse
from pathlib import Path

logger = logging.getLogger(__name__)

_USER_AGENT = "vidcat/1.0 (compatible; VideoAssetsCatalog/1.0)"
DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_MAX_BYTES = 20 * 1024 * 1024  # 20 MB
_MAX_REDIRECTS = 3
_ALLOWED_SCHEMES = {"https", "http"}
_ALLOWED_CONTENT_TYPES = {
    "text/csv",
    "text/plain",
    "application/csv",
    "application/octet-stream",
    "application/vnd.ms-excel",
}


class SourceFetchError(RuntimeError):
    """Raised when the catalog source cannot be obtained."""


def is_remote(source: str) -> bool:
    return "://" in source


def fetch_source(
    source: str | Path,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> str:
    """Return the raw CSV text behind *source* (URL or local path).

    Raises:
        SourceFetchError: On network errors, non-2xx responses, timeouts,
            unsupported schemes or content types, oversized or empty bodies,
            and unreadable local files.
    """
    source = str(source)
    if is_remote(source):
        _validate_scheme(source)
        body = _fetch(source, timeout=timeout, max_bytes=max_bytes)
        text = body.decode("utf-8-sig", errors="replace")
    else:
        text = _read_local(Path(source), max_bytes=max_bytes)

    if not text.strip():
        raise SourceFetchError(f"Catalog source is empty: '{source}'")

    logger.info("Fetched %d characters from %s", len(text), source)
    return text


# ------------------------------------------------------------------
# Fetch pipeline
# ------------------------------------------------------------------


def _validate_scheme(url: str) -> None:
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise SourceFetchError(
            f"Unsupported URL scheme '{parsed.scheme}'. Only https:// and http:// are allowed."
        )


def _fetch(url: str, *, timeout: float, max_bytes: int) -> bytes:
    """Fetch *url* with timeout, redirect limit, size cap, and Content-Type check."""
    request = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    opener = urllib.request.build_opener(_LimitedRedirectHandler(_MAX_REDIRECTS))

    try:
        response: HTTPResponse = opener.open(request, timeout=timeout)
    except urllib.error.HTTPError as exc:
        raise SourceFetchError(
            f"Failed to fetch CSV '{url}': {exc.code} {exc.reason}"
        ) from exc
    except urllib.error.URLError as exc:
        raise SourceFetchError(f"Failed to fetch CSV '{url}': {exc.reason}") from exc
    except (socket.timeout, TimeoutError) as exc:
        raise SourceFetchError(f"Timed out after {timeout:g}s fetching '{url}'") from exc

    with response:
        raw_ct = response.headers.get("Content-Type", "text/csv")
        ct = raw_ct.split(";")[0].strip().lower()
        if ct not in _ALLOWED_CONTENT_TYPES:
            raise SourceFetchError(
                f"Unsupported Content-Type '{ct}' for URL '{url}'. "
                f"Accepted: {', '.join(sorted(_ALLOWED_CONTENT_TYPES))}"
            )

        try:
            body = response.read(max_bytes + 1)
        except (socket.timeout, TimeoutError) as exc:
            raise SourceFetchError(f"Timed out after {timeout:g}s reading '{url}'") from exc

    if len(body) > max_bytes:
        raise SourceFetchError(
            f"Response body exceeds {max_bytes // (1024 * 1024)} MB limit for URL '{url}'."
        )
    return body


def _read_local(path: Path, *, max_bytes: int) -> str:
    try:
        if path.stat().st_size > max_bytes:
            raise SourceFetchError(
                f"File exceeds {max_bytes // (1024 * 1024)} MB limit: '{path}'."
            )
        return path.read_text(encoding="utf-8-sig", errors="replace")
    except OSError as exc:
        raise SourceFetchError(f"Cannot read catalog source '{path}': {exc}") from exc


class _LimitedRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Raise an error after more than *max_redirects* redirects."""

    def __init__(self, max_redirects: int) -> None:
        self._max_redirects = max_redirects
        self._count = 0

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        self._count += 1
        if self._count > self._max_redirects:
            raise SourceFetchError(
                f"Too many redirects (>{self._max_redirects}) for URL '{req.full_url}'."
            )
        return super().redirect_request(req, fp, code, msg, headers, newurl)
