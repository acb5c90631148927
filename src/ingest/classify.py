"""Keyword category rules and region tags for ingested articles."""

from __future__ import annotations

import re
from typing import Iterable, List, Pattern, Sequence

from src.ingest.config import CATEGORIES, DEFAULT_CATEGORY, MAX_TAGS, REGIONS

# Checked in order; the first rule that fires decides the category.
CATEGORY_RULES: list[tuple[str, Pattern[str]]] = [
    ("politics", re.compile(r"선거|의회|정당|국회|정치|의원")),
    ("economy", re.compile(r"기업|일자리|경제|투자|창업|산업|소상공인|고용")),
    ("culture", re.compile(r"축제|문화|예술|공연|전시|관광|박물관|도서관")),
    # 경기 ("match") is left out: it is also the province name in every 경기도 release.
    ("sports", re.compile(r"체육|스포츠|대회|경기장|선수|체전|마라톤")),
    ("it", re.compile(r"(?<![a-z])(?:ai|it)(?![a-z])|스마트|과학|기술|디지털|인공지능|데이터")),
]


def category_key(text: str | None) -> str:
    lowered = (text or "").lower()
    for key, pattern in CATEGORY_RULES:
        if pattern.search(lowered):
            return key
    return DEFAULT_CATEGORY


def classify(text: str | None) -> str:
    """Return the store's category id for `text`; never fails."""
    return CATEGORIES[category_key(text)]


def _unique(values: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    ordered: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


def derive_tags(
    short_tag: str,
    title: str,
    regions: Sequence[str] = REGIONS,
    limit: int = MAX_TAGS,
) -> List[str]:
    """Source tag first, then region names that appear literally in the title."""
    found = [region for region in regions if region in (title or "")]
    return _unique([short_tag, *found])[:limit]
