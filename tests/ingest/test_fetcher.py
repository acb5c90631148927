from __future__ import annotations

import requests

from src.ingest import fetcher


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", content: bytes = b"", encoding: str | None = "utf-8") -> None:
        self.status_code = status_code
        self.text = text
        self.content = content
        self.encoding = encoding
        self.apparent_encoding = "EUC-KR"


def test_fetch_html_returns_text(monkeypatch) -> None:
    seen = {}

    def fake_get(url, headers=None, timeout=None, allow_redirects=True):
        seen.update(url=url, headers=headers, timeout=timeout)
        return FakeResponse(text="<html>ok</html>")

    monkeypatch.setattr(fetcher.requests, "get", fake_get)

    assert fetcher.fetch_html("https://x.go.kr/list", headers={"X-Test": "1"}, timeout=3) == ("<html>ok</html>", None)
    assert seen["headers"]["X-Test"] == "1"
    assert seen["headers"]["Accept-Language"].startswith("ko-KR")
    assert seen["timeout"] == 3


def test_fetch_html_reports_http_errors(monkeypatch) -> None:
    monkeypatch.setattr(fetcher.requests, "get", lambda url, **kwargs: FakeResponse(status_code=500))

    assert fetcher.fetch_html("https://x.go.kr/view") == (None, "http:500")


def test_fetch_html_reports_timeouts(monkeypatch) -> None:
    def fake_get(url, **kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr(fetcher.requests, "get", fake_get)

    assert fetcher.fetch_html("https://x.go.kr/view") == (None, "timeout")


def test_fetch_html_reports_connection_errors(monkeypatch) -> None:
    def fake_get(url, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(fetcher.requests, "get", fake_get)

    assert fetcher.fetch_html("https://x.go.kr/view") == (None, "request_error:ConnectionError")


def test_fetch_html_guesses_missing_charset(monkeypatch) -> None:
    response = FakeResponse(text="본문", encoding="ISO-8859-1")
    monkeypatch.setattr(fetcher.requests, "get", lambda url, **kwargs: response)

    fetcher.fetch_html("https://x.go.kr/view")

    assert response.encoding == "EUC-KR"


def test_fetch_bytes_sends_referer(monkeypatch) -> None:
    seen = {}

    def fake_get(url, headers=None, timeout=None, allow_redirects=True):
        seen.update(headers=headers)
        return FakeResponse(content=b"\xff\xd8\xff")

    monkeypatch.setattr(fetcher.requests, "get", fake_get)

    assert fetcher.fetch_bytes("https://x.go.kr/a.jpg", referer="https://x.go.kr/view") == (b"\xff\xd8\xff", None)
    assert seen["headers"]["Referer"] == "https://x.go.kr/view"
