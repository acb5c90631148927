from __future__ import annotations

from typing import Any, Dict, List

import pytest

from src.ingest.store import StoreError


class FakeStore:
    """In-memory stand-in for PocketBaseClient."""

    def __init__(self, fail_count: bool = False, fail_create: Exception | None = None) -> None:
        self.records: List[Dict[str, Any]] = []
        self.attachments: List[Dict[str, Any]] = []
        self.filters: List[str] = []
        self.fail_count = fail_count
        self.fail_create = fail_create

    def count(self, collection: str, filter: str | None = None) -> int:
        self.filters.append(filter or "")
        if self.fail_count:
            raise StoreError("store unreachable")
        prefix = (filter or "").split("~", 1)[1].strip()[1:-1].replace("\\'", "'").replace("\\\\", "\\")
        return sum(1 for record in self.records if prefix in record["title"])

    def create_record(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        if self.fail_create is not None:
            raise self.fail_create
        record = {"id": f"rec{len(self.records) + 1}", **data}
        self.records.append(record)
        return record

    def attach_file(
        self,
        collection: str,
        record_id: str,
        field: str,
        file_name: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> Dict[str, Any]:
        self.attachments.append(
            {
                "collection": collection,
                "record_id": record_id,
                "field": field,
                "file_name": file_name,
                "size": len(content),
                "content_type": content_type,
            }
        )
        return {"id": record_id, field: file_name}


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def make_store():
    return FakeStore


# 6 KB of JPEG-looking bytes, above the icon threshold.
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 6000


@pytest.fixture
def jpeg_bytes() -> bytes:
    return JPEG_BYTES
