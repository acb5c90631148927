"""
Source configuration and the short-lived records passed between pipeline stages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Sequence, Union


@dataclass
class ArticleStub:
    title: str
    url: str
    published_date_text: Optional[str] = None
    description: Optional[str] = None


@dataclass
class ArticleDetail:
    body_html: str
    lead_image_url: Optional[str]
    summary: str


@dataclass(frozen=True)
class AttributeLink:
    """Read the link straight from an attribute of the title element."""

    attribute: str = "href"


@dataclass(frozen=True)
class InlineHandlerLink:
    """Rebuild the detail URL from an inline handler such as `onclick="view('12')"`.

    `pattern` is searched in the handler text and its groups are substituted
    positionally into `url_template`.
    """

    pattern: str
    url_template: str
    attribute: str = "onclick"


@dataclass(frozen=True)
class CustomExtractor:
    """Bypass row/selector handling; `routine(content, source)` returns stubs directly."""

    routine: Callable[[str, "SourceConfig"], List[ArticleStub]]


LinkExtraction = Union[AttributeLink, InlineHandlerLink, CustomExtractor]


@dataclass(frozen=True)
class SourceConfig:
    name: str
    short_tag: str
    listing_url: str
    base_url: str
    link_extraction: LinkExtraction = AttributeLink()
    row_selectors: Sequence[str] = ("table tbody tr", "table tr", "tr")
    title_selectors: Sequence[str] = ("td.subject a", "td.title a", "td.tit a", "a")
    date_selector: Optional[str] = None
    rendering_required: bool = False
    content_selectors: Sequence[str] = ()
    request_headers: Optional[Mapping[str, str]] = None
