"""
Title-prefix duplicate check against stored articles.

The match is a loose "contains" on the first characters of the title so edited
reposts of the same press release are caught. A store error counts as "not a
duplicate": an outage should delay nothing that is genuinely new.
"""

from __future__ import annotations

import logging
import re

from src.ingest.config import DEDUP_PREFIX_LENGTH
from src.ingest.store import ARTICLES, PocketBaseClient, StoreError, quote_filter_value

LOGGER = logging.getLogger(__name__)

QUOTE_PATTERN = re.compile(r"[\"'`‘’“”「」『』]")


def title_prefix(title: str | None, length: int = DEDUP_PREFIX_LENGTH) -> str:
    if not title:
        return ""
    return QUOTE_PATTERN.sub("", title).strip()[:length]


def is_duplicate(store: PocketBaseClient, title: str, length: int = DEDUP_PREFIX_LENGTH) -> bool:
    prefix = title_prefix(title, length)
    if not prefix:
        return False
    try:
        matches = store.count(ARTICLES, filter=f"title ~ {quote_filter_value(prefix)}")
    except StoreError as exc:
        LOGGER.warning("Duplicate check failed for %r (%s); treating as new", prefix, exc)
        return False
    return matches > 0
