"""
Create article records and attach their lead images.

The record is written first; the image is downloaded and PATCHed onto it
afterwards. An image problem never undoes the record: an article without a
thumbnail is an accepted end state.
"""

from __future__ import annotations

import logging
import mimetypes
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse
from uuid import uuid4

from src.ingest.config import MAX_TITLE_LENGTH, SUMMARY_LENGTH
from src.ingest.fetcher import fetch_bytes
from src.ingest.store import ARTICLES, PocketBaseClient, StoreError

LOGGER = logging.getLogger(__name__)

IMAGE_FIELD = "thumbnail"
DEFAULT_IMAGE_MIN_BYTES = 5000
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"}

MAGIC_EXTENSIONS = (
    (b"\xff\xd8\xff", ".jpg"),
    (b"\x89PNG\r\n\x1a\n", ".png"),
    (b"GIF87a", ".gif"),
    (b"GIF89a", ".gif"),
)


@dataclass
class PersistOutcome:
    created: bool
    record_id: Optional[str] = None
    image_attached: bool = False
    image_error: Optional[str] = None
    dry_run: bool = False


def generate_slug(now: datetime | None = None) -> str:
    """Timestamp plus random suffix; unique without a central sequence."""
    now = now or datetime.now(timezone.utc)
    return f"news-{now:%Y%m%d-%H%M%S}-{uuid4().hex[:8]}"


def build_article_record(
    title: str,
    summary: str,
    content: str,
    category: str,
    tags: List[str],
    now: datetime | None = None,
) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    return {
        "title": title[:MAX_TITLE_LENGTH],
        "slug": generate_slug(now),
        "summary": summary[:SUMMARY_LENGTH],
        "content": content,
        "category": category,
        "status": "published",
        "is_headline": False,
        "is_breaking": False,
        "views": 0,
        "tags": list(dict.fromkeys(tags)),
        "published_at": now.isoformat(),
    }


def sniff_extension(data: bytes) -> str | None:
    for magic, extension in MAGIC_EXTENSIONS:
        if data.startswith(magic):
            return extension
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return ".webp"
    return None


def image_file_name(url: str, data: bytes) -> tuple[str, str]:
    """Pick a safe file name and content type for an uploaded image."""
    path = PurePosixPath(urlparse(url).path)
    suffix = path.suffix.lower()
    if suffix not in IMAGE_EXTENSIONS:
        suffix = ".jpg"
    base = re.sub(r"[^A-Za-z0-9_-]", "", path.stem) or "image"
    extension = sniff_extension(data) or suffix
    file_name = f"{base[:60]}{extension}"
    content_type = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
    return file_name, content_type


class ArticlePublisher:
    def __init__(
        self,
        store: PocketBaseClient,
        image_min_bytes: int = DEFAULT_IMAGE_MIN_BYTES,
        image_timeout: float = 20.0,
        dry_run: bool = False,
    ) -> None:
        self.store = store
        self.image_min_bytes = image_min_bytes
        self.image_timeout = image_timeout
        self.dry_run = dry_run

    def publish(self, record: Dict[str, Any], image_url: str | None, referer: str | None = None) -> PersistOutcome:
        if self.dry_run:
            LOGGER.info("[dry-run] Would create %r (image=%s)", record.get("title"), image_url or "none")
            return PersistOutcome(created=False, dry_run=True)
        try:
            created = self.store.create_record(ARTICLES, record)
        except StoreError as exc:
            LOGGER.warning("Article creation failed for %r: %s %s", record.get("title"), exc, exc.body or "")
            return PersistOutcome(created=False)
        record_id = created.get("id")
        outcome = PersistOutcome(created=True, record_id=record_id)
        if not image_url:
            return outcome
        if not record_id:
            outcome.image_error = "missing_record_id"
            return outcome
        outcome.image_error = self._attach_image(record_id, image_url, referer)
        outcome.image_attached = outcome.image_error is None
        return outcome

    def _attach_image(self, record_id: str, image_url: str, referer: str | None) -> str | None:
        data, error = fetch_bytes(image_url, referer=referer, timeout=self.image_timeout)
        if data is None:
            return error or "download_failed"
        if len(data) < self.image_min_bytes:
            LOGGER.info("Skipping image %s: %s bytes looks like an icon", image_url, len(data))
            return "too_small"
        file_name, content_type = image_file_name(image_url, data)
        try:
            self.store.attach_file(ARTICLES, record_id, IMAGE_FIELD, file_name, data, content_type)
        except StoreError as exc:
            LOGGER.warning("Attaching image %s to %s failed: %s", image_url, record_id, exc)
            return "attach_failed"
        return None
