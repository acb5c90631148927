"""
Daily article update: scrape configured press-release boards and publish new
items to the PocketBase `articles` collection.

Sources and items are processed one at a time with fixed pauses in between;
that pacing is a politeness bound toward the scraped sites. A failure inside
one source or item is logged and counted, never allowed to stop the run.
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from src.ingest.classify import classify, derive_tags
from src.ingest.config import IngestSettings
from src.ingest.dedup import is_duplicate
from src.ingest.detail import (
    extract_detail,
    fallback_body,
    fallback_summary,
    html_to_text,
    source_footer,
)
from src.ingest.fetcher import fetch_html
from src.ingest.listing import extract_stubs, stubs_from_rendered_rows
from src.ingest.models import ArticleDetail, ArticleStub, CustomExtractor, SourceConfig
from src.ingest.news_search import build_search_sources
from src.ingest.persist import ArticlePublisher, build_article_record
from src.ingest.rendering import BrowserRenderer
from src.ingest.sources import SOURCES
from src.ingest.store import PocketBaseClient

LOGGER = logging.getLogger(__name__)


@dataclass
class RunSummary:
    sources_attempted: int = 0
    sources_with_candidates: int = 0
    added: int = 0
    added_with_image: int = 0
    duplicates: int = 0
    failed: int = 0
    image_failures: int = 0
    fallback_bodies: int = 0
    would_add: int = 0

    def merge(self, other: "RunSummary") -> "RunSummary":
        return RunSummary(**{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)})


class DailyUpdate:
    """Runs every source through listing -> dedup -> detail -> classify -> persist."""

    def __init__(
        self,
        sources: Sequence[SourceConfig],
        store: PocketBaseClient,
        settings: IngestSettings,
        publisher: ArticlePublisher | None = None,
        renderer_factory: Callable[[IngestSettings], BrowserRenderer] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.sources = list(sources)
        self.store = store
        self.settings = settings
        self.publisher = publisher or ArticlePublisher(
            store,
            image_min_bytes=settings.image_min_bytes,
            image_timeout=settings.image_timeout,
            dry_run=settings.dry_run,
        )
        self._renderer_factory = renderer_factory or (
            lambda cfg: BrowserRenderer(timeout_ms=cfg.render_timeout_ms, settle_ms=cfg.render_settle_ms)
        )
        self._renderer: Optional[BrowserRenderer] = None
        self._sleep = sleep

    def run(self) -> RunSummary:
        LOGGER.info("Running daily update over %s sources (dry_run=%s)", len(self.sources), self.settings.dry_run)
        summary = RunSummary()
        try:
            for index, source in enumerate(self.sources):
                summary = summary.merge(self.process_source(source))
                if index < len(self.sources) - 1:
                    self._sleep(self.settings.source_delay)
        finally:
            self._close_renderer()
        self._log_summary(summary)
        return summary

    def process_source(self, source: SourceConfig) -> RunSummary:
        outcome = RunSummary(sources_attempted=1)
        LOGGER.info("[%s] Fetching listing %s", source.name, source.listing_url)
        if source.rendering_required:
            # Browser launch failures are fatal, so start it outside the source guard.
            self._get_renderer()
        try:
            stubs = self.collect_stubs(source)
        except Exception:  # noqa: BLE001
            LOGGER.warning("[%s] Listing extraction failed; moving on", source.name, exc_info=True)
            return outcome
        if stubs is None:
            return outcome
        if not stubs:
            LOGGER.info("[%s] No candidates extracted", source.name)
            return outcome
        outcome.sources_with_candidates = 1
        LOGGER.info("[%s] %s candidates; processing up to %s", source.name, len(stubs), self.settings.max_items)
        for stub in stubs[: self.settings.max_items]:
            try:
                outcome = outcome.merge(self.process_item(source, stub))
            except Exception:  # noqa: BLE001
                LOGGER.warning("[%s] Unexpected error on %s", source.name, stub.url, exc_info=True)
                outcome.failed += 1
            self._sleep(self.settings.item_delay)
        return outcome

    def collect_stubs(self, source: SourceConfig) -> Optional[List[ArticleStub]]:
        """Listing stubs for `source`, or None when the listing is unavailable."""
        if source.rendering_required and not isinstance(source.link_extraction, CustomExtractor):
            rows = self._get_renderer().render_rows(
                source.listing_url,
                row_selectors=source.row_selectors,
                title_selectors=source.title_selectors,
                max_rows=self.settings.max_rows,
            )
            return stubs_from_rendered_rows(rows, source, max_rows=self.settings.max_rows)
        html, error = fetch_html(source.listing_url, headers=source.request_headers, timeout=self.settings.fetch_timeout)
        if html is None:
            LOGGER.warning("[%s] Source unavailable (%s); moving on", source.name, error)
            return None
        return extract_stubs(html, source, max_rows=self.settings.max_rows)

    def process_item(self, source: SourceConfig, stub: ArticleStub) -> RunSummary:
        if is_duplicate(self.store, stub.title):
            LOGGER.info("  - Duplicate, skipping: %s", stub.title[:40])
            return RunSummary(duplicates=1)

        detail = self.fetch_detail(source, stub.url)
        outcome = RunSummary()
        if detail is None:
            outcome.fallback_bodies = 1
            body = fallback_body(stub, source.name)
            body_text = stub.description or ""
            summary = fallback_summary(stub)
            image_url = None
        else:
            body = f"{detail.body_html}\n{source_footer(source.name, stub.url)}"
            body_text = html_to_text(detail.body_html)
            summary = detail.summary
            image_url = detail.lead_image_url

        category = classify(f"{stub.title} {body_text}")
        tags = derive_tags(source.short_tag, stub.title)
        record = build_article_record(
            title=stub.title,
            summary=summary,
            content=body,
            category=category,
            tags=tags,
            now=datetime.now(timezone.utc),
        )
        result = self.publisher.publish(record, image_url, referer=stub.url)
        if result.dry_run:
            outcome.would_add = 1
        elif not result.created:
            outcome.failed = 1
        else:
            outcome.added = 1
            if result.image_attached:
                outcome.added_with_image = 1
                LOGGER.info("  + Added (with image): %s", stub.title[:40])
            else:
                if result.image_error:
                    outcome.image_failures = 1
                LOGGER.info("  + Added (no image): %s", stub.title[:40])
        return outcome

    def fetch_detail(self, source: SourceConfig, url: str) -> Optional[ArticleDetail]:
        if source.rendering_required:
            html, error = self._get_renderer().fetch_html(url)
        else:
            html, error = fetch_html(url, timeout=self.settings.fetch_timeout)
        if html is None:
            LOGGER.info("  - Detail page unreachable (%s); using fallback body for %s", error, url)
            return None
        try:
            return extract_detail(html, url, extra_selectors=source.content_selectors)
        except Exception:  # noqa: BLE001
            LOGGER.warning("  - Detail extraction crashed for %s", url, exc_info=True)
            return None

    def _get_renderer(self) -> BrowserRenderer:
        if self._renderer is None:
            renderer = self._renderer_factory(self.settings)
            renderer.start()
            self._renderer = renderer
        return self._renderer

    def _close_renderer(self) -> None:
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    def _log_summary(self, summary: RunSummary) -> None:
        LOGGER.info("===== Daily update finished =====")
        LOGGER.info(
            "Sources attempted=%s with_candidates=%s",
            summary.sources_attempted,
            summary.sources_with_candidates,
        )
        LOGGER.info(
            "Articles added=%s (with_image=%s, no_image=%s) duplicates_skipped=%s failed=%s",
            summary.added,
            summary.added_with_image,
            summary.added - summary.added_with_image,
            summary.duplicates,
            summary.failed,
        )
        LOGGER.info(
            "Image failures=%s fallback_bodies=%s would_add=%s",
            summary.image_failures,
            summary.fallback_bodies,
            summary.would_add,
        )


def build_sources(settings: IngestSettings) -> List[SourceConfig]:
    sources = list(SOURCES)
    sources.extend(build_search_sources(settings.naver_client_id, settings.naver_client_secret))
    return sources


def main() -> int:
    settings = IngestSettings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        force=True,
    )
    LOGGER.info("===== Daily update started at %s =====", datetime.now(timezone.utc).isoformat())
    try:
        store = PocketBaseClient(settings.pocketbase_url, timeout=settings.fetch_timeout)
        DailyUpdate(build_sources(settings), store, settings).run()
    except Exception:  # noqa: BLE001
        LOGGER.exception("Daily update failed.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
