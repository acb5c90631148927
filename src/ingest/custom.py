"""
Custom listing routines for sources whose listings are not table rows.

Each routine takes the raw listing payload plus the source config and returns
stubs directly; the generic row/selector logic is bypassed.
"""

from __future__ import annotations

import logging
from typing import List

import feedparser
from bs4 import BeautifulSoup

from src.ingest.listing import first_match, normalize_whitespace, resolve_url
from src.ingest.models import ArticleStub, SourceConfig

LOGGER = logging.getLogger(__name__)

CARD_SELECTORS = (
    "ul.gallery_list > li",
    "ul.photo_list > li",
    "div.card",
    "li.thumb-item",
    "div.news_list li",
    "div.item",
)
CARD_TITLE_SELECTORS = (".tit", ".title", "strong", "h3", "h4", "p.subject")
CARD_DATE_SELECTORS = (".date", "span.day", "time")


def strip_markup(value: str | None) -> str:
    if not value:
        return ""
    # No separator: search titles wrap fragments of words in <b> tags.
    text = BeautifulSoup(value, "html.parser").get_text()
    return normalize_whitespace(text)


def extract_feed_entries(content: str, source: SourceConfig) -> List[ArticleStub]:
    """Read an RSS/Atom press-release feed."""
    parsed = feedparser.parse(content)
    if parsed.bozo:
        LOGGER.debug("Feed parse issue for %s: %s", source.name, parsed.bozo_exception)
    stubs: List[ArticleStub] = []
    for entry in parsed.entries:
        title = strip_markup(getattr(entry, "title", ""))
        url = resolve_url(getattr(entry, "link", ""), source.base_url)
        if not title or not url:
            continue
        published = getattr(entry, "published", None) or getattr(entry, "updated", None)
        description = strip_markup(getattr(entry, "summary", "")) or None
        stubs.append(
            ArticleStub(
                title=title,
                url=url,
                published_date_text=normalize_whitespace(published) or None,
                description=description,
            )
        )
    LOGGER.debug("Feed %s yielded %s entries", source.name, len(stubs))
    return stubs


def extract_card_grid(content: str, source: SourceConfig) -> List[ArticleStub]:
    """Read a card/gallery layout where each card wraps one linked article."""
    soup = BeautifulSoup(content, "html.parser")
    selectors = list(source.row_selectors) + [sel for sel in CARD_SELECTORS if sel not in source.row_selectors]
    cards = first_match(soup, selectors)
    stubs: List[ArticleStub] = []
    for card in cards:
        anchor = card if card.name == "a" else card.find("a", href=True)
        if anchor is None:
            continue
        title_node = None
        for selector in (*source.title_selectors, *CARD_TITLE_SELECTORS):
            title_node = card.select_one(selector)
            if title_node is not None and normalize_whitespace(title_node.get_text(" ", strip=True)):
                break
            title_node = None
        title = normalize_whitespace(
            title_node.get_text(" ", strip=True) if title_node is not None else anchor.get("title") or anchor.get_text(" ", strip=True)
        )
        url = resolve_url(anchor.get("href"), source.base_url)
        if not title or not url:
            continue
        date_node = None
        for selector in ((source.date_selector,) if source.date_selector else CARD_DATE_SELECTORS):
            date_node = card.select_one(selector)
            if date_node is not None:
                break
        date_text = normalize_whitespace(date_node.get_text(" ", strip=True)) if date_node is not None else ""
        stubs.append(ArticleStub(title=title, url=url, published_date_text=date_text or None))
    return stubs
