"""
Headless browser access for boards that build their listings client-side.

One Chromium process lives for the rendering phase of a run. Every navigation
gets its own browser context, which is closed on every exit path.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence

from playwright.sync_api import sync_playwright

from src.ingest.fetcher import HEADERS, USER_AGENT
from src.ingest.listing import RenderedRow, normalize_whitespace

LOGGER = logging.getLogger(__name__)

GENERIC_ROW_SELECTORS = (
    "table tbody tr",
    "table tr",
    "ul.board-list > li",
    "div.board_list li",
    "ul.list > li",
    "article",
    "div.list-item",
)
LAUNCH_ARGS = ["--no-sandbox", "--disable-dev-shm-usage", "--disable-gpu"]


class BrowserRenderer:
    def __init__(
        self,
        timeout_ms: int = 30000,
        settle_ms: int = 2000,
        browser=None,
    ) -> None:
        self.timeout_ms = timeout_ms
        self.settle_ms = settle_ms
        self._playwright = None
        self._browser = browser

    def start(self) -> "BrowserRenderer":
        """Launch Chromium. Launch failures propagate to the caller."""
        if self._browser is None:
            self._playwright = sync_playwright().start()
            try:
                self._browser = self._playwright.chromium.launch(headless=True, args=LAUNCH_ARGS)
            except Exception:
                self.close()
                raise
            LOGGER.info("Launched headless browser for rendering-required sources")
        return self

    def close(self) -> None:
        try:
            if self._browser is not None:
                self._browser.close()
            if self._playwright is not None:
                self._playwright.stop()
        except Exception:  # noqa: BLE001
            LOGGER.debug("Failed to close Playwright browser cleanly", exc_info=True)
        finally:
            self._browser = None
            self._playwright = None

    def __enter__(self) -> "BrowserRenderer":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.close()

    @contextmanager
    def _page(self) -> Iterator:
        if self._browser is None:
            raise RuntimeError("BrowserRenderer used before start()")
        context = self._browser.new_context(
            user_agent=USER_AGENT,
            locale="ko-KR",
            extra_http_headers={"Accept-Language": HEADERS["Accept-Language"]},
        )
        try:
            page = context.new_page()
            yield page
        finally:
            context.close()

    def _load(self, page, url: str) -> None:
        page.goto(url, wait_until="networkidle", timeout=self.timeout_ms)
        # Lazy widgets keep mutating the DOM after the network goes quiet.
        page.wait_for_timeout(self.settle_ms)

    def render_rows(
        self,
        url: str,
        row_selectors: Sequence[str] = (),
        title_selectors: Sequence[str] = (),
        max_rows: int = 5,
    ) -> List[RenderedRow]:
        """Load `url` and read title/href/onclick from the first `max_rows` rows."""
        selectors = list(row_selectors) + [sel for sel in GENERIC_ROW_SELECTORS if sel not in row_selectors]
        anchors = [sel for sel in title_selectors if sel != "a"] + ["a"]
        try:
            with self._page() as page:
                self._load(page, url)
                handles = []
                for selector in selectors:
                    handles = page.query_selector_all(selector)
                    if handles:
                        LOGGER.debug("Rendered rows for %s matched %r (%s)", url, selector, len(handles))
                        break
                rows: List[RenderedRow] = []
                for handle in handles[:max_rows]:
                    anchor = None
                    for selector in anchors:
                        anchor = handle.query_selector(selector)
                        if anchor is not None:
                            break
                    if anchor is None:
                        continue
                    rows.append(
                        RenderedRow(
                            title=normalize_whitespace(anchor.inner_text()),
                            href=anchor.get_attribute("href"),
                            onclick=anchor.get_attribute("onclick") or handle.get_attribute("onclick"),
                        )
                    )
                return rows
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("Rendering listing %s failed: %s", url, exc)
            return []

    def fetch_html(self, url: str) -> tuple[Optional[str], Optional[str]]:
        """Render a detail page and return its serialized DOM."""
        try:
            with self._page() as page:
                self._load(page, url)
                return page.content(), None
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("Rendering detail page %s failed: %s", url, exc)
            return None, f"render_error:{type(exc).__name__}"
