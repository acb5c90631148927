"""
Minimal PocketBase REST client used by the ingestion run.

Only the calls the pipeline needs are covered: filtered listing, record
creation, multipart file attachment and the public file URL scheme.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

LOGGER = logging.getLogger(__name__)

ARTICLES = "articles"


class StoreError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def quote_filter_value(value: str) -> str:
    """Quote a literal for a PocketBase filter expression."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class PocketBaseClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise StoreError(f"{method} {path} failed: {type(exc).__name__}: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise StoreError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text[:500],
            )
        try:
            return response.json()
        except ValueError as exc:
            raise StoreError(f"{method} {path} returned non-JSON body", response.status_code, response.text[:500]) from exc

    def list_records(
        self,
        collection: str,
        filter: str | None = None,
        page: int = 1,
        per_page: int = 30,
        sort: str | None = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": page, "perPage": per_page}
        if filter:
            params["filter"] = filter
        if sort:
            params["sort"] = sort
        return self._request("GET", f"/api/collections/{collection}/records", params=params)

    def count(self, collection: str, filter: str | None = None) -> int:
        payload = self.list_records(collection, filter=filter, per_page=1)
        total = payload.get("totalItems")
        if total is None:
            return len(payload.get("items") or [])
        return int(total)

    def create_record(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", f"/api/collections/{collection}/records", json=data)

    def attach_file(
        self,
        collection: str,
        record_id: str,
        field: str,
        file_name: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> Dict[str, Any]:
        files = {field: (file_name, content, content_type)}
        return self._request("PATCH", f"/api/collections/{collection}/records/{record_id}", files=files)

    def file_url(self, collection: str, record_id: str, file_name: str) -> str:
        return f"{self.base_url}/api/files/{collection}/{record_id}/{file_name}"
