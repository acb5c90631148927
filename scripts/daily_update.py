#!/usr/bin/env python3
"""
Entry point used by the scheduled job to pull new press releases into the store.

Usage:
    python3 scripts/daily_update.py
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.ingest.pipeline import main  # noqa: E402


if __name__ == "__main__":
    raise SystemExit(main())
