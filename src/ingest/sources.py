"""
Press-release boards scraped by the daily update, in processing order.

Onboarding a site is a data-entry job: pick the listing URL, the row and title
selectors, and one of the link strategies from `src.ingest.models`.
"""

from __future__ import annotations

from typing import List

from src.ingest.custom import extract_card_grid, extract_feed_entries
from src.ingest.models import AttributeLink, CustomExtractor, InlineHandlerLink, SourceConfig

BOARD_ROWS = ("table.board_list tbody tr", "table.bbs_list tbody tr", "table tbody tr", "table tr", "tr")
BOARD_TITLES = ("td.subject a", "td.title a", "td.tit a", "td.left a", "a")

SOURCES: List[SourceConfig] = [
    # Provincial and metropolitan governments
    SourceConfig(
        name="경기도청",
        short_tag="경기",
        listing_url="https://www.gg.go.kr/bbs/rssManager.do?bbsId=BBSMSTR_000000000125",
        base_url="https://www.gg.go.kr",
        link_extraction=CustomExtractor(extract_feed_entries),
        content_selectors=("div.bbs-view-content", "div.view-cont"),
    ),
    SourceConfig(
        name="인천시청",
        short_tag="인천",
        listing_url="https://www.incheon.go.kr/rss/IC010000.xml",
        base_url="https://www.incheon.go.kr",
        link_extraction=CustomExtractor(extract_feed_entries),
        content_selectors=("div.board-view-contents",),
    ),
    SourceConfig(
        name="경기도 뉴스포털",
        short_tag="경기",
        listing_url="https://gnews.gg.go.kr/briefing/brief_gongbo.do",
        base_url="https://gnews.gg.go.kr",
        link_extraction=CustomExtractor(extract_card_grid),
        row_selectors=("ul.gallery_list > li", "div.list_type li"),
        title_selectors=("p.subject", "strong.tit"),
        date_selector="span.date",
        content_selectors=("div#article_txt", "div.article_txt"),
    ),
    # Municipal boards
    SourceConfig(
        name="수원시청",
        short_tag="수원",
        listing_url="https://www.suwon.go.kr/web/board/BD_board.list.do?bbsCd=1043",
        base_url="https://www.suwon.go.kr",
        link_extraction=InlineHandlerLink(
            pattern=r"jsView\(\s*'(\d+)'\s*,\s*'(\d+)'\s*\)",
            url_template="/web/board/BD_board.view.do?bbsCd={0}&seq={1}",
        ),
        row_selectors=BOARD_ROWS,
        title_selectors=BOARD_TITLES,
        date_selector="td.date",
    ),
    SourceConfig(
        name="성남시청",
        short_tag="성남",
        listing_url="https://www.seongnam.go.kr/city/1000060/30003/bbsList.do",
        base_url="https://www.seongnam.go.kr",
        row_selectors=BOARD_ROWS,
        title_selectors=BOARD_TITLES,
        date_selector="td.date",
    ),
    SourceConfig(
        name="용인시청",
        short_tag="용인",
        listing_url="https://www.yongin.go.kr/user/bbs/BD_selectBbsList.do?q_bbsCode=1020",
        base_url="https://www.yongin.go.kr",
        link_extraction=InlineHandlerLink(
            pattern=r"fnView\(\s*'(\d+)'\s*,\s*'(\d+)'\s*\)",
            url_template="/user/bbs/BD_selectBbs.do?q_bbsCode={0}&q_bbscttSn={1}",
        ),
        row_selectors=BOARD_ROWS,
        title_selectors=BOARD_TITLES,
        date_selector="td:nth-of-type(4)",
    ),
    SourceConfig(
        name="고양시청",
        short_tag="고양",
        listing_url="https://www.goyang.go.kr/www/user/bbs/BD_selectBbsList.do?q_bbsCode=1090",
        base_url="https://www.goyang.go.kr",
        row_selectors=BOARD_ROWS,
        title_selectors=BOARD_TITLES,
        date_selector="td.date",
    ),
    SourceConfig(
        name="화성시청",
        short_tag="화성",
        listing_url="https://www.hscity.go.kr/www/selectBbsNttList.do?bbsNo=96&key=4098",
        base_url="https://www.hscity.go.kr/www/",
        rendering_required=True,
        row_selectors=("div.bbs_list tbody tr", "table tbody tr"),
        title_selectors=("td.subject a", "td.p-subject a"),
    ),
    SourceConfig(
        name="부천시청",
        short_tag="부천",
        listing_url="https://www.bucheon.go.kr/site/program/board/basicboard/list?boardtypeid=26669&menuid=148002001001",
        base_url="https://www.bucheon.go.kr",
        link_extraction=AttributeLink(),
        row_selectors=BOARD_ROWS,
        title_selectors=BOARD_TITLES,
        date_selector="td.date",
    ),
    SourceConfig(
        name="안산시청",
        short_tag="안산",
        listing_url="https://www.iansan.net/ansan/selectBbsNttList.do?bbsNo=117&key=1116",
        base_url="https://www.iansan.net/ansan/",
        rendering_required=True,
        row_selectors=("div.bbs__list tbody tr", "table tbody tr"),
        title_selectors=("td.p-subject a", "td.subject a"),
    ),
    SourceConfig(
        name="평택시청",
        short_tag="평택",
        listing_url="https://www.pyeongtaek.go.kr/pyeongtaek/bbs/list.do?ptIdx=50&mId=0401010000",
        base_url="https://www.pyeongtaek.go.kr",
        link_extraction=InlineHandlerLink(
            pattern=r"goView\(\s*'(\d+)'\s*\)",
            url_template="/pyeongtaek/bbs/view.do?ptIdx=50&mId=0401010000&bIdx={0}",
        ),
        row_selectors=BOARD_ROWS,
        title_selectors=BOARD_TITLES,
    ),
    SourceConfig(
        name="의정부시청",
        short_tag="의정부",
        listing_url="https://www.ui4u.go.kr/portal/bbs/list.do?ptIdx=87&mId=0301010000",
        base_url="https://www.ui4u.go.kr",
        row_selectors=("ul.board_list > li",) + BOARD_ROWS,
        title_selectors=("p.tit a", "a"),
        date_selector="span.date",
    ),
]
