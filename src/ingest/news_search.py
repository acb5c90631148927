"""
Naver news search API as a listing source.

Each region query becomes a `SourceConfig` whose listing URL is the search
endpoint; the JSON response is parsed by a custom extractor so search results
flow through the same dedup/detail/persist steps as scraped boards.
"""

from __future__ import annotations

import json
import logging
import re
from typing import List, Sequence
from urllib.parse import urlencode

from src.ingest.custom import strip_markup
from src.ingest.listing import resolve_url
from src.ingest.models import ArticleStub, CustomExtractor, SourceConfig

LOGGER = logging.getLogger(__name__)

SEARCH_ENDPOINT = "https://openapi.naver.com/v1/search/news.json"
DEFAULT_QUERIES = ["경기도", "인천시", "수원시", "성남시", "용인시"]
QUERY_SUFFIX = "보도자료"


def region_tag(query: str) -> str:
    """'수원시' -> '수원'; administrative suffixes are dropped for tagging."""
    return re.sub(r"(시|도|군)$", "", query.strip())


def parse_search_payload(content: str, source: SourceConfig) -> List[ArticleStub]:
    try:
        payload = json.loads(content)
    except ValueError:
        LOGGER.warning("News search for %s returned non-JSON payload: %s", source.name, content[:200])
        return []
    items = payload.get("items") if isinstance(payload, dict) else None
    stubs: List[ArticleStub] = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        title = strip_markup(item.get("title"))
        url = resolve_url(item.get("originallink") or item.get("link"), source.base_url)
        if not title or not url:
            continue
        stubs.append(
            ArticleStub(
                title=title,
                url=url,
                published_date_text=item.get("pubDate") or None,
                description=strip_markup(item.get("description")) or None,
            )
        )
    return stubs


def build_search_sources(
    client_id: str | None,
    client_secret: str | None,
    queries: Sequence[str] = DEFAULT_QUERIES,
    display: int = 10,
) -> List[SourceConfig]:
    """Return one source per query, or nothing when credentials are missing."""
    if not client_id or not client_secret:
        LOGGER.info("Naver search credentials not configured; search sources disabled.")
        return []
    headers = {
        "X-Naver-Client-Id": client_id,
        "X-Naver-Client-Secret": client_secret,
        "Accept": "application/json",
    }
    sources: List[SourceConfig] = []
    for query in queries:
        params = urlencode({"query": f"{query} {QUERY_SUFFIX}", "display": display, "sort": "date"})
        sources.append(
            SourceConfig(
                name=f"네이버뉴스:{query}",
                short_tag=region_tag(query),
                listing_url=f"{SEARCH_ENDPOINT}?{params}",
                base_url="https://news.naver.com",
                link_extraction=CustomExtractor(parse_search_payload),
                request_headers=headers,
            )
        )
    return sources
