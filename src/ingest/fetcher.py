"""
Plain HTTP fetching for listing pages, detail pages and lead images.

Every helper here returns a `(payload, error)` pair and never raises: network
errors, timeouts and non-2xx responses collapse into `(None, reason)` so one
broken site cannot stop the run.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

import requests

LOGGER = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)

HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7",
}

IMAGE_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "image/avif,image/webp,image/apng,image/*,*/*;q=0.8",
}

DEFAULT_TIMEOUT = 15.0


def _describe_error(exc: requests.RequestException) -> str:
    if isinstance(exc, requests.Timeout):
        return "timeout"
    return f"request_error:{type(exc).__name__}"


def _decode(response: requests.Response) -> str:
    # Korean government boards still serve EUC-KR without a charset header.
    if not response.encoding or response.encoding.lower() == "iso-8859-1":
        response.encoding = response.apparent_encoding or "utf-8"
    return response.text


def fetch_html(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> tuple[Optional[str], Optional[str]]:
    """GET `url` and return `(text, None)` on 2xx or `(None, reason)` otherwise."""
    merged = dict(HEADERS)
    if headers:
        merged.update(headers)
    try:
        response = requests.get(url, headers=merged, timeout=timeout, allow_redirects=True)
    except requests.RequestException as exc:
        reason = _describe_error(exc)
        LOGGER.warning("GET %s failed: %s", url, reason)
        return None, reason
    if not 200 <= response.status_code < 300:
        LOGGER.warning("GET %s returned HTTP %s", url, response.status_code)
        return None, f"http:{response.status_code}"
    return _decode(response), None


def fetch_bytes(
    url: str,
    referer: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> tuple[Optional[bytes], Optional[str]]:
    """Download a binary asset with a browser-like user agent and optional referer."""
    headers = dict(IMAGE_HEADERS)
    if referer:
        headers["Referer"] = referer
    try:
        response = requests.get(url, headers=headers, timeout=timeout, allow_redirects=True)
    except requests.RequestException as exc:
        reason = _describe_error(exc)
        LOGGER.warning("Image download %s failed: %s", url, reason)
        return None, reason
    if not 200 <= response.status_code < 300:
        LOGGER.warning("Image download %s returned HTTP %s", url, response.status_code)
        return None, f"http:{response.status_code}"
    return response.content, None
