from __future__ import annotations

import pytest

from src.ingest import rendering
from src.ingest.rendering import BrowserRenderer


class FakeElement:
    def __init__(self, text: str = "", attrs: dict | None = None, children: dict | None = None) -> None:
        self.text = text
        self.attrs = attrs or {}
        self.children = children or {}

    def inner_text(self) -> str:
        return self.text

    def get_attribute(self, name: str):
        return self.attrs.get(name)

    def query_selector(self, selector: str):
        return self.children.get(selector)


class FakePage:
    def __init__(self, rows: dict, html: str = "", goto_error: Exception | None = None) -> None:
        self.rows = rows
        self.html = html
        self.goto_error = goto_error
        self.visited: list[tuple[str, str]] = []
        self.waited: list[int] = []

    def goto(self, url, wait_until=None, timeout=None):
        self.visited.append((url, wait_until))
        if self.goto_error is not None:
            raise self.goto_error

    def wait_for_timeout(self, ms):
        self.waited.append(ms)

    def query_selector_all(self, selector):
        return self.rows.get(selector, [])

    def content(self):
        return self.html


class FakeContext:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.closed = False

    def new_page(self):
        return self.page

    def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.contexts: list[FakeContext] = []
        self.context_options: list[dict] = []
        self.closed = False

    def new_context(self, **options):
        self.context_options.append(options)
        context = FakeContext(self.page)
        self.contexts.append(context)
        return context

    def close(self):
        self.closed = True


def row(title: str, href: str | None = None, onclick: str | None = None) -> FakeElement:
    anchor = FakeElement(text=title, attrs={"href": href, "onclick": onclick})
    return FakeElement(children={"td.subject a": anchor, "a": anchor})


def test_render_rows_reads_first_matching_selector() -> None:
    page = FakePage(
        {
            "table tbody tr": [
                row(" 화성시 축제 안내 ", href="/view?id=1"),
                row("화성시 공연 일정", onclick="fnView('2')"),
                FakeElement(),
            ]
        }
    )
    browser = FakeBrowser(page)
    renderer = BrowserRenderer(settle_ms=500, browser=browser).start()

    rows = renderer.render_rows(
        "https://hscity.go.kr/list",
        row_selectors=("div.bbs_list tbody tr", "table tbody tr"),
        title_selectors=("td.subject a",),
        max_rows=5,
    )

    assert [(r.title, r.href, r.onclick) for r in rows] == [
        ("화성시 축제 안내", "/view?id=1", None),
        ("화성시 공연 일정", None, "fnView('2')"),
    ]
    assert page.visited == [("https://hscity.go.kr/list", "networkidle")]
    assert page.waited == [500]
    assert browser.context_options[0]["locale"] == "ko-KR"
    assert all(context.closed for context in browser.contexts)


def test_render_rows_respects_max_rows() -> None:
    page = FakePage({"table tbody tr": [row(f"제목 번호 {i}", href=f"/v?{i}") for i in range(8)]})
    renderer = BrowserRenderer(browser=FakeBrowser(page)).start()

    assert len(renderer.render_rows("https://x.go.kr/list", max_rows=3)) == 3


def test_render_failure_is_contained_and_context_closed() -> None:
    page = FakePage({}, goto_error=TimeoutError("slow"))
    browser = FakeBrowser(page)
    renderer = BrowserRenderer(browser=browser).start()

    assert renderer.render_rows("https://x.go.kr/list") == []
    assert renderer.fetch_html("https://x.go.kr/view") == (None, "render_error:TimeoutError")
    assert len(browser.contexts) == 2
    assert all(context.closed for context in browser.contexts)


def test_fetch_html_returns_rendered_dom() -> None:
    page = FakePage({}, html="<html><body>ok</body></html>")
    renderer = BrowserRenderer(browser=FakeBrowser(page)).start()

    assert renderer.fetch_html("https://x.go.kr/view") == ("<html><body>ok</body></html>", None)


def test_unstarted_renderer_reports_error() -> None:
    renderer = BrowserRenderer()

    assert renderer.fetch_html("https://x.go.kr/view") == (None, "render_error:RuntimeError")


def test_close_shuts_the_browser() -> None:
    browser = FakeBrowser(FakePage({}))
    with BrowserRenderer(browser=browser) as renderer:
        renderer.fetch_html("https://x.go.kr/view")

    assert browser.closed


def test_failed_launch_stops_the_driver(monkeypatch) -> None:
    class FakeChromium:
        def launch(self, headless=True, args=None):
            raise RuntimeError("chromium missing")

    class FakeDriver:
        def __init__(self) -> None:
            self.chromium = FakeChromium()
            self.stopped = False

        def stop(self):
            self.stopped = True

    driver = FakeDriver()

    class FakeManager:
        def start(self):
            return driver

    monkeypatch.setattr(rendering, "sync_playwright", lambda: FakeManager())
    renderer = BrowserRenderer()

    with pytest.raises(RuntimeError):
        renderer.start()

    assert driver.stopped
    assert renderer._playwright is None
