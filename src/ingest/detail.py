"""
Best-effort extraction of body, lead image and summary from an article page.

Content and image selectors run from site-typical to generic. When no content
block qualifies, the page's meta description becomes the body; when that is
missing too the result is `None` and the caller builds a synthetic body.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Optional, Sequence
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from src.ingest.config import MIN_CONTENT_LENGTH, SUMMARY_LENGTH
from src.ingest.listing import normalize_whitespace
from src.ingest.models import ArticleDetail, ArticleStub

LOGGER = logging.getLogger(__name__)

# Board view bodies used by provincial and municipal CMSs, then generic fallbacks.
CONTENT_SELECTORS = (
    "div.view_cont",
    "div.view_content",
    "div.bbs_view .view_con",
    "div.board_view .view_content",
    "div.board-view-content",
    "div.view-content",
    "div.view_txt",
    "div.cont_view",
    "div.bbs_content",
    "td.content",
    "div#article_body",
    "div#articleBody",
    "div.article_view",
    "div.article-body",
    "div.news_view",
    "article",
)

IMAGE_SELECTORS = (
    "div.view_cont img",
    "div.view_content img",
    "div.bbs_view img",
    "div.board_view img",
    "div.board-view-content img",
    "div.view-content img",
    "div.view_txt img",
    "div.cont_view img",
    "td.content img",
    "div#article_body img",
    "div#articleBody img",
    "div.article_view img",
    "div.article-body img",
    "div.news_view img",
    "article img",
    "figure img",
)

EXCLUDED_IMAGE_PATTERN = re.compile(
    r"icon|ico_|bullet|btn|button|logo|/bg/|bg_|_bg\.|background|blank|spacer|arrow|loading|sns_|share",
    re.IGNORECASE,
)

STRIPPED_TAGS = ["script", "style", "noscript", "iframe", "form", "button"]
URL_ATTRIBUTES = ("src", "href")


def _meta_content(soup: BeautifulSoup, *selectors: str) -> str:
    for selector in selectors:
        node = soup.select_one(selector)
        if node is not None and node.get("content"):
            value = normalize_whitespace(node.get("content"))
            if value:
                return value
    return ""


def html_to_text(fragment: str | None) -> str:
    if not fragment:
        return ""
    soup = BeautifulSoup(fragment, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return normalize_whitespace(soup.get_text(" ", strip=True))


def truncate(text: str, limit: int = SUMMARY_LENGTH) -> str:
    return text[:limit]


def is_content_image(url: str | None) -> bool:
    if not url or url.startswith("data:"):
        return False
    parsed = urlparse(url)
    return not EXCLUDED_IMAGE_PATTERN.search(f"{parsed.path}?{parsed.query}")


def _image_source(img: Tag) -> str | None:
    for attribute in ("src", "data-src", "data-original", "data-lazy-src"):
        value = img.get(attribute)
        if value and not value.startswith("data:"):
            return value.strip()
    return None


def find_content_block(soup: BeautifulSoup, selectors: Sequence[str]) -> Tag | None:
    """First candidate whose text is long enough to be an article body."""
    for selector in selectors:
        for node in soup.select(selector):
            if len(normalize_whitespace(node.get_text(" ", strip=True))) >= MIN_CONTENT_LENGTH:
                return node
        LOGGER.debug("Content selector %r yielded nothing usable", selector)
    return None


def find_lead_image(soup: BeautifulSoup, page_url: str, selectors: Sequence[str] = IMAGE_SELECTORS) -> str | None:
    for selector in selectors:
        for img in soup.select(selector):
            candidate = _image_source(img)
            if not candidate:
                continue
            absolute = urljoin(page_url, candidate)
            if is_content_image(absolute):
                return absolute
    og_image = _meta_content(soup, 'meta[property="og:image"]', 'meta[name="og:image"]')
    if og_image:
        absolute = urljoin(page_url, og_image)
        if is_content_image(absolute):
            return absolute
    return None


def clean_content_block(block: Tag, page_url: str) -> str:
    """Strip scripts and inline handlers, absolutize links, return inner HTML."""
    for tag in block(STRIPPED_TAGS):
        tag.decompose()
    for node in [block, *block.find_all(True)]:
        for attribute in list(node.attrs):
            if attribute.lower().startswith("on"):
                del node.attrs[attribute]
        for attribute in URL_ATTRIBUTES:
            value = node.get(attribute)
            if isinstance(value, str) and value and not value.lower().startswith(("javascript:", "data:", "#", "mailto:")):
                node[attribute] = urljoin(page_url, value.strip())
        if node.name == "img" and not node.get("src"):
            lazy = _image_source(node)
            if lazy:
                node["src"] = urljoin(page_url, lazy)
    return block.decode_contents().strip()


def extract_detail(
    page_html: str,
    page_url: str,
    extra_selectors: Sequence[str] = (),
) -> Optional[ArticleDetail]:
    soup = BeautifulSoup(page_html, "html.parser")
    meta_summary = _meta_content(
        soup,
        'meta[name="description"]',
        'meta[property="og:description"]',
        'meta[name="twitter:description"]',
    )
    lead_image = find_lead_image(
        soup,
        page_url,
        tuple(f"{sel} img" for sel in extra_selectors) + IMAGE_SELECTORS,
    )

    block = find_content_block(soup, tuple(extra_selectors) + CONTENT_SELECTORS)
    if block is not None:
        body_html = clean_content_block(block, page_url)
        body_text = html_to_text(body_html)
        summary = truncate(meta_summary or body_text)
        return ArticleDetail(body_html=body_html, lead_image_url=lead_image, summary=summary)

    if meta_summary:
        LOGGER.debug("No content block on %s; using meta description as body", page_url)
        return ArticleDetail(
            body_html=f"<p>{html.escape(meta_summary)}</p>",
            lead_image_url=lead_image,
            summary=truncate(meta_summary),
        )
    LOGGER.info("Detail extraction found nothing usable on %s", page_url)
    return None


def source_footer(source_name: str, url: str) -> str:
    return (
        f'<p class="article-source">출처: {html.escape(source_name)} · '
        f'<a href="{html.escape(url, quote=True)}" target="_blank" rel="noopener noreferrer">원문 보기</a></p>'
    )


def fallback_body(stub: ArticleStub, source_name: str) -> str:
    """Synthetic body for stubs whose detail page could not be read."""
    parts = [f"<p>{html.escape(stub.title)}</p>"]
    if stub.description:
        parts.append(f"<p>{html.escape(stub.description)}</p>")
    parts.append(source_footer(source_name, stub.url))
    return "\n".join(parts)


def fallback_summary(stub: ArticleStub) -> str:
    return truncate(stub.description or stub.title)
