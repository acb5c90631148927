"""
Environment-driven settings for the daily article update.

Values are read from the process environment, optionally seeded from a `.env`
file at the repository root. Malformed numbers fall back to their defaults so a
typo in a cron environment never stops the run.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

LOGGER = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_POCKETBASE_URL = "http://158.247.210.200:8090"

# Category record ids in the store's `categories` collection.
CATEGORIES = {
    "politics": "mq8899s58bf0699",
    "economy": "k9r3229a8774k70",
    "society": "05q79x0comk524d",
    "culture": "150tdl8949xydgm",
    "sports": "2se1eh4n9pdfsc5",
    "it": "575wm01lh7c29c6",
}
DEFAULT_CATEGORY = "society"

# Region names that become tags when they appear verbatim in a title.
REGIONS = [
    "경기",
    "인천",
    "수원",
    "성남",
    "용인",
    "고양",
    "화성",
    "부천",
    "안산",
    "안양",
    "남양주",
    "평택",
    "의정부",
    "시흥",
    "파주",
    "광명",
    "김포",
    "군포",
    "광주",
    "이천",
    "양주",
    "오산",
    "구리",
    "안성",
    "포천",
    "의왕",
    "하남",
    "여주",
    "동두천",
    "과천",
    "양평",
    "가평",
    "연천",
]

MAX_TAGS = 5
MAX_TITLE_LENGTH = 200
SUMMARY_LENGTH = 150
DEDUP_PREFIX_LENGTH = 30
MIN_TITLE_LENGTH = 5
MIN_CONTENT_LENGTH = 50


def get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        LOGGER.warning("Ignoring non-integer %s=%r; using %s", name, raw, default)
        return default


def get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        LOGGER.warning("Ignoring non-numeric %s=%r; using %s", name, raw, default)
        return default


def get_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass
class IngestSettings:
    pocketbase_url: str = DEFAULT_POCKETBASE_URL
    max_rows: int = 5
    max_items: int = 3
    item_delay: float = 1.0
    source_delay: float = 1.5
    fetch_timeout: float = 15.0
    image_timeout: float = 20.0
    render_timeout_ms: int = 30000
    render_settle_ms: int = 2000
    image_min_bytes: int = 5000
    naver_client_id: str | None = None
    naver_client_secret: str | None = None
    log_level: str = "INFO"
    dry_run: bool = False

    @classmethod
    def from_env(cls, dotenv_path: Path | None = None) -> "IngestSettings":
        if load_dotenv(dotenv_path=dotenv_path or REPO_ROOT / ".env"):
            LOGGER.debug("Loaded environment variables from .env file.")
        return cls(
            pocketbase_url=(os.getenv("POCKETBASE_URL") or DEFAULT_POCKETBASE_URL).rstrip("/"),
            max_rows=get_int("INGEST_MAX_ROWS", cls.max_rows),
            max_items=get_int("INGEST_MAX_ITEMS", cls.max_items),
            item_delay=get_float("INGEST_ITEM_DELAY_SEC", cls.item_delay),
            source_delay=get_float("INGEST_SOURCE_DELAY_SEC", cls.source_delay),
            fetch_timeout=get_float("FETCH_TIMEOUT_SEC", cls.fetch_timeout),
            image_timeout=get_float("IMAGE_TIMEOUT_SEC", cls.image_timeout),
            render_timeout_ms=get_int("RENDER_TIMEOUT_MS", cls.render_timeout_ms),
            render_settle_ms=get_int("RENDER_SETTLE_MS", cls.render_settle_ms),
            image_min_bytes=get_int("IMAGE_MIN_BYTES", cls.image_min_bytes),
            naver_client_id=os.getenv("NAVER_CLIENT_ID") or None,
            naver_client_secret=os.getenv("NAVER_CLIENT_SECRET") or None,
            log_level=os.getenv("LOG_LEVEL") or cls.log_level,
            dry_run=get_bool("INGEST_DRY_RUN"),
        )

    @property
    def news_search_enabled(self) -> bool:
        return bool(self.naver_client_id and self.naver_client_secret)
