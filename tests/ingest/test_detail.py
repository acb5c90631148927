from __future__ import annotations

from src.ingest import detail
from src.ingest.models import ArticleStub

PAGE_URL = "https://city.go.kr/board/view.do?id=7"
BODY_TEXT = (
    "수원시는 오는 5월 화성행궁 일원에서 봄꽃 축제를 개최한다고 밝혔다. "
    "이번 축제는 시민 참여 공연과 전시, 먹거리 장터 등으로 구성된다."
)


def test_extract_detail_reads_body_image_and_summary() -> None:
    page = f"""
    <html><head><title>view</title></head><body>
      <div class="view_cont">
        <img src="/images/icon_print.gif">
        <p onclick="track()">{BODY_TEXT}</p>
        <img src="/upload/photo1.jpg">
        <script>alert(1)</script>
        <a href="/files/doc.hwp">첨부</a>
      </div>
    </body></html>
    """

    result = detail.extract_detail(page, PAGE_URL)

    assert result is not None
    assert result.lead_image_url == "https://city.go.kr/upload/photo1.jpg"
    assert result.summary.startswith(BODY_TEXT)
    assert "alert" not in result.summary
    assert "<script" not in result.body_html
    assert "onclick" not in result.body_html
    assert 'href="https://city.go.kr/files/doc.hwp"' in result.body_html
    assert 'src="https://city.go.kr/upload/photo1.jpg"' in result.body_html


def test_extract_detail_prefers_meta_description_for_summary() -> None:
    page = f"""
    <html><head><meta name="description" content="  봄꽃 축제 개최 안내  "></head>
    <body><article><p>{BODY_TEXT}</p></article></body></html>
    """

    result = detail.extract_detail(page, PAGE_URL)

    assert result is not None
    assert result.summary == "봄꽃 축제 개최 안내"
    assert BODY_TEXT in result.body_html


def test_extract_detail_tries_source_selectors_first() -> None:
    page = f"""
    <html><body>
      <div class="site_body"><p>{BODY_TEXT}</p><img src="/upload/lead.png"></div>
      <article><p>{BODY_TEXT} 관련 기사 목록과 기타 안내 문구가 길게 이어진다.</p></article>
    </body></html>
    """

    result = detail.extract_detail(page, PAGE_URL, extra_selectors=("div.site_body",))

    assert result is not None
    assert "관련 기사" not in result.body_html
    assert result.lead_image_url == "https://city.go.kr/upload/lead.png"


def test_extract_detail_skips_too_short_blocks() -> None:
    page = f"""
    <html><body>
      <div class="view_cont"><p>짧은 본문</p></div>
      <div class="view_content"><p>{BODY_TEXT}</p></div>
    </body></html>
    """

    result = detail.extract_detail(page, PAGE_URL)

    assert result is not None
    assert "짧은 본문" not in result.body_html


def test_extract_detail_falls_back_to_meta_description() -> None:
    page = """
    <html><head>
      <meta property="og:description" content="인천시 &lt;청년&gt; 일자리 지원 사업 안내">
      <meta property="og:image" content="/upload/og.jpg">
    </head><body><div id="wrap">메뉴</div></body></html>
    """

    result = detail.extract_detail(page, PAGE_URL)

    assert result is not None
    assert result.body_html == "<p>인천시 &lt;청년&gt; 일자리 지원 사업 안내</p>"
    assert result.lead_image_url == "https://city.go.kr/upload/og.jpg"


def test_extract_detail_returns_none_when_nothing_usable() -> None:
    assert detail.extract_detail("<html><body><p>점검 중</p></body></html>", PAGE_URL) is None


def test_is_content_image_rejects_decorations() -> None:
    assert not detail.is_content_image("https://city.go.kr/images/logo.png")
    assert not detail.is_content_image("https://city.go.kr/img/btn_print.gif")
    assert not detail.is_content_image("https://city.go.kr/common/bg_top.jpg")
    assert not detail.is_content_image("data:image/gif;base64,R0lGOD")
    assert not detail.is_content_image(None)
    assert detail.is_content_image("https://city.go.kr/upload/2025/photo.jpg")


def test_fallback_body_carries_title_description_and_link() -> None:
    stub = ArticleStub(
        title="경기도 <청년> 지원 사업",
        url="https://gg.go.kr/view?id=1&page=2",
        description="도내 청년 대상 지원 확대",
    )

    body = detail.fallback_body(stub, "경기도청")

    assert "경기도 &lt;청년&gt; 지원 사업" in body
    assert "도내 청년 대상 지원 확대" in body
    assert 'href="https://gg.go.kr/view?id=1&amp;page=2"' in body
    assert "출처: 경기도청" in body
    assert detail.fallback_summary(stub) == "도내 청년 대상 지원 확대"


def test_fallback_summary_uses_title_without_description() -> None:
    stub = ArticleStub(title="제목" * 100, url="https://gg.go.kr/view?id=2")

    assert detail.fallback_summary(stub) == ("제목" * 100)[:150]


def test_html_to_text_normalizes_whitespace() -> None:
    assert detail.html_to_text("<p>첫 줄</p>\n\n<p>둘째   줄</p><script>x()</script>") == "첫 줄 둘째 줄"
    assert detail.html_to_text(None) == ""


def test_extract_detail_falls_back_to_generic_article_tag() -> None:
    page = f"<html><body><article><p>{BODY_TEXT}</p></article></body></html>"

    result = detail.extract_detail(page, PAGE_URL)

    assert result is not None
    assert BODY_TEXT in result.body_html
    assert result.summary.startswith(BODY_TEXT[:50])
