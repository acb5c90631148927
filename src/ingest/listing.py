"""
Turn a listing page into a short list of article stubs.

Selectors are tried in order and the first one that matches anything wins.
Rows without a usable title or link are dropped quietly; an empty result is a
normal outcome when a board is empty or its markup changed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from src.ingest.config import MIN_TITLE_LENGTH
from src.ingest.models import (
    ArticleStub,
    AttributeLink,
    CustomExtractor,
    InlineHandlerLink,
    SourceConfig,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_ROWS = 5

# First quoted token that looks like a path or absolute URL, e.g. location.href='/board/view.do?id=3'.
INLINE_TARGET_PATTERN = re.compile(r"""['"]((?:https?://|/|\./|\.\./)[^'"\s]+|[\w\-]+\.(?:do|jsp|php|aspx?|html?)(?:\?[^'"\s]*)?)['"]""")
NON_NAVIGABLE_PREFIXES = ("javascript:", "mailto:", "tel:", "#", "data:")


@dataclass
class RenderedRow:
    """A listing row read out of a live browser page."""

    title: str
    href: Optional[str]
    onclick: Optional[str]


def normalize_whitespace(value: str | None) -> str:
    if not value:
        return ""
    return re.sub(r"\s+", " ", value).strip()


def resolve_url(href: str | None, base_url: str) -> str | None:
    """Resolve `href` against `base_url`, rejecting script and fragment pseudo-links."""
    if not href:
        return None
    href = href.strip()
    if not href or href.lower().startswith(NON_NAVIGABLE_PREFIXES):
        return None
    try:
        absolute = urljoin(base_url, href)
        scheme = urlparse(absolute).scheme
    except ValueError:
        LOGGER.debug("Unparseable link %r on %s", href, base_url)
        return None
    if scheme not in {"http", "https"}:
        return None
    return absolute


def recover_inline_target(handler: str | None) -> str | None:
    """Pull a quoted path-like token out of an inline event handler."""
    if not handler:
        return None
    match = INLINE_TARGET_PATTERN.search(handler)
    if not match:
        return None
    return match.group(1)


def first_match(node: Tag, selectors: Iterable[str]) -> List[Tag]:
    for selector in selectors:
        matches = node.select(selector)
        if matches:
            return matches
    return []


def resolve_link(href: str | None, handler: str | None, source: SourceConfig) -> str | None:
    """Dispatch on the source's link-extraction variant."""
    strategy = source.link_extraction
    if isinstance(strategy, InlineHandlerLink):
        match = re.search(strategy.pattern, handler or "") if handler else None
        if match:
            return resolve_url(strategy.url_template.format(*match.groups()), source.base_url)
        # Some boards mix plain links with handler rows.
        return resolve_url(href, source.base_url)
    if isinstance(strategy, AttributeLink):
        resolved = resolve_url(href, source.base_url)
        if resolved:
            return resolved
        return resolve_url(recover_inline_target(handler), source.base_url)
    return None


def _title_text(element: Tag) -> str:
    text = normalize_whitespace(element.get_text(" ", strip=True))
    attr_title = normalize_whitespace(element.get("title"))
    # Boards often clip long titles to "..." and keep the full one in the attribute.
    if attr_title and (text.endswith("...") or text.endswith("…")) and len(attr_title) > len(text):
        return attr_title
    return text or attr_title


def _link_attributes(element: Tag, row: Tag, source: SourceConfig) -> tuple[str | None, str | None]:
    strategy = source.link_extraction
    attribute = strategy.attribute if isinstance(strategy, (AttributeLink, InlineHandlerLink)) else "href"
    anchor = element if element.name == "a" else element.find("a")
    carriers = [node for node in (element, anchor, row) if node is not None]
    href = None
    handler = None
    for node in carriers:
        if href is None and node.get("href"):
            href = node.get("href")
        if handler is None and node.get("onclick"):
            handler = node.get("onclick")
    if attribute not in {"href", "onclick"}:
        for node in carriers:
            if node.get(attribute):
                if isinstance(strategy, InlineHandlerLink):
                    handler = node.get(attribute)
                else:
                    href = node.get(attribute)
                break
    return href, handler


def _dedupe(stubs: Iterable[ArticleStub]) -> List[ArticleStub]:
    seen: set[str] = set()
    unique: List[ArticleStub] = []
    for stub in stubs:
        if stub.url in seen:
            continue
        seen.add(stub.url)
        unique.append(stub)
    return unique


def extract_stubs(html: str, source: SourceConfig, max_rows: int = DEFAULT_MAX_ROWS) -> List[ArticleStub]:
    """Extract at most `max_rows` stubs from static listing HTML."""
    if isinstance(source.link_extraction, CustomExtractor):
        try:
            stubs = source.link_extraction.routine(html, source)
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("Custom extractor for %s failed: %s", source.name, exc)
            return []
        return _dedupe(stub for stub in stubs if len(stub.title) >= MIN_TITLE_LENGTH)[:max_rows]

    soup = BeautifulSoup(html, "html.parser")
    rows = first_match(soup, source.row_selectors)
    if not rows:
        LOGGER.debug("No listing rows matched for %s (selectors=%s)", source.name, list(source.row_selectors))
        return []

    stubs: List[ArticleStub] = []
    for row in rows[:max_rows]:
        title_matches = first_match(row, source.title_selectors)
        if not title_matches:
            continue
        element = title_matches[0]
        title = _title_text(element)
        if len(title) < MIN_TITLE_LENGTH:
            LOGGER.debug("Dropping short row title %r from %s", title, source.name)
            continue
        href, handler = _link_attributes(element, row, source)
        url = resolve_link(href, handler, source)
        if not url:
            LOGGER.debug("No resolvable link for %r on %s", title, source.name)
            continue
        date_text = None
        if source.date_selector:
            date_node = row.select_one(source.date_selector)
            if date_node is not None:
                date_text = normalize_whitespace(date_node.get_text(" ", strip=True)) or None
        stubs.append(ArticleStub(title=title, url=url, published_date_text=date_text))
    return _dedupe(stubs)


def stubs_from_rendered_rows(
    rows: Sequence[RenderedRow],
    source: SourceConfig,
    max_rows: int = DEFAULT_MAX_ROWS,
) -> List[ArticleStub]:
    stubs: List[ArticleStub] = []
    for row in rows[:max_rows]:
        title = normalize_whitespace(row.title)
        if len(title) < MIN_TITLE_LENGTH:
            continue
        url = resolve_link(row.href, row.onclick, source)
        if not url:
            continue
        stubs.append(ArticleStub(title=title, url=url))
    return _dedupe(stubs)
