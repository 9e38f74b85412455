"""Tests for the per-site listing extractors."""

from __future__ import annotations

import re
from unittest.mock import MagicMock

import pytest
from bs4 import BeautifulSoup
from selenium.common.exceptions import WebDriverException

from joshi_news.crawler.browser import AutomationSession
from joshi_news.crawler.errors import ExtractionError
from joshi_news.crawler.extractors import (
    EXTRACTORS,
    GENERIC_EXTRACTOR,
    MAX_CANDIDATES,
    ExtractionContext,
    SiteExtractor,
    get_extractor,
)
from joshi_news.crawler.extractors.base import TextPattern, first_match
from joshi_news.crawler.extractors.interactive import SeadlinnngExtractor, block_fingerprint
from joshi_news.organizations import ORGANIZATIONS, get_organization


def run(name: str, html: str, automation=None):
    soup = BeautifulSoup(html, "html.parser")
    context = ExtractionContext(organization=get_organization(name), automation=automation)
    return get_extractor(name).run(soup, context)


def test_every_organization_has_a_dedicated_extractor():
    assert {org.name for org in ORGANIZATIONS} == set(EXTRACTORS)


def test_unknown_organization_uses_generic_extractor():
    assert get_extractor("unknown") is GENERIC_EXTRACTOR


def test_first_match_tries_lower_priority_first():
    patterns = [
        TextPattern(re.compile(r"(\d{1,2}/\d{1,2})"), priority=1),
        TextPattern(re.compile(r"(\d{4}/\d{1,2}/\d{1,2})"), priority=0),
    ]

    assert first_match(patterns, "更新 2025/01/10").group(1) == "2025/01/10"
    assert first_match(patterns, "1/10 大会").group(1) == "1/10"
    assert first_match(patterns, "日付なし") is None


class TestGenericExtractor:
    def _listing(self, *items: str) -> BeautifulSoup:
        return BeautifulSoup("<div>" + "".join(items) + "</div>", "html.parser")

    def _item(self, title, href, date="2025/01/10", summary="", img=""):
        return (
            f'<div class="news-item"><a href="{href}"><span class="title">{title}</span></a>'
            f'<span class="date">{date}</span><p class="summary">{summary}</p>'
            f'{img}</div>'
        )

    def test_reads_each_field_with_selectors(self, organization):
        soup = self._listing(
            self._item("新春大会のお知らせ", "/news/1", summary="詳細", img='<img src="/a.jpg">')
        )

        [candidate] = GENERIC_EXTRACTOR.run(soup, ExtractionContext(organization))

        assert candidate.title == "新春大会のお知らせ"
        assert candidate.summary == "詳細"
        assert candidate.thumbnail == "/a.jpg"
        assert candidate.published_text == "2025/01/10"
        assert candidate.detail_url == "/news/1"

    def test_rejects_fragment_script_links_and_menu_labels(self, organization):
        soup = self._listing(
            self._item("アンカーのみ", "#top"),
            self._item("スクリプト", "javascript:void(0)"),
            self._item("HOME", "/"),
            self._item("2", "/news?page=2"),
            self._item("本物の記事", "/news/1"),
        )

        candidates = GENERIC_EXTRACTOR.run(soup, ExtractionContext(organization))

        assert [c.title for c in candidates] == ["本物の記事"]

    def test_drops_exact_duplicates_and_caps_results(self, organization):
        items = [self._item("同じ記事", "/news/dup")] * 2
        items += [self._item(f"記事 {i}", f"/news/{i}") for i in range(15)]

        candidates = GENERIC_EXTRACTOR.run(self._listing(*items), ExtractionContext(organization))

        assert len(candidates) == MAX_CANDIDATES
        assert [c.title for c in candidates].count("同じ記事") == 1

    def test_same_title_with_different_link_is_kept(self, organization):
        soup = self._listing(self._item("大会情報", "/news/1"), self._item("大会情報", "/news/2"))

        assert len(GENERIC_EXTRACTOR.run(soup, ExtractionContext(organization))) == 2

    def test_parse_errors_become_extraction_errors(self, organization):
        class Broken(SiteExtractor):
            name = "broken"

            def extract(self, soup, context):
                raise AttributeError("'NoneType' object has no attribute 'text'")

        with pytest.raises(ExtractionError, match="broken extractor failed"):
            Broken().run(BeautifulSoup("", "html.parser"), ExtractionContext(organization))


def test_stardom_strips_date_and_category_prefix():
    html = """
    <ul>
      <li><a href="/news/1">2025/01/10 INFO 新春大興行の開催が決定</a></li>
      <li><a href="/news/2">2025/01/09 試合結果 後楽園ホール大会の結果</a></li>
      <li><a href="/">HOME</a></li>
      <li><a href="#">2025/01/08 INFO アンカーだけの記事です</a></li>
    </ul>
    """

    candidates = run("stardom", html)

    assert [(c.title, c.published_text, c.detail_url) for c in candidates] == [
        ("新春大興行の開催が決定", "2025/01/10", "/news/1"),
        ("後楽園ホール大会の結果", "2025/01/09", "/news/2"),
    ]


def test_tjpw_reads_kanji_month_day():
    html = '<ul><li><a href="/news/1">東京女子 新年会大会</a><span>1月5日</span></li></ul>'

    [candidate] = run("tjpw", html)

    assert candidate.title == "東京女子 新年会大会"
    assert candidate.published_text == "1月5日"


class TestIceRibbon:
    def test_table_rows(self):
        html = """
        <table>
          <tr><td>2025/01/10</td><td><a href="news_detail.php?id=1">新春興行のお知らせ</a></td></tr>
          <tr><td>日付</td><td><a href="info.php">その他</a></td></tr>
        </table>
        """

        [candidate] = run("ice_ribbon", html)

        assert candidate.title == "新春興行のお知らせ"
        assert candidate.published_text == "2025/01/10"
        assert candidate.detail_url == "news_detail.php?id=1"

    def test_anchor_scan_when_no_row_matches(self):
        html = """
        <div>
          <p>2025-01-10 <a href="news_detail.php?id=5">アイスリボン大会情報</a></p>
          <a href="/index.php">TOP</a>
        </div>
        """

        [candidate] = run("ice_ribbon", html)

        assert candidate.title == "アイスリボン大会情報"
        assert candidate.detail_url == "news_detail.php?id=5"
        assert candidate.published_text == ""


def test_wave_requires_a_date():
    html = """
    <div class="blog_list">
      <div>
        <p class="blog_date">2025.01.10</p>
        <div class="blog_photo"><img src="/img/1.jpg"></div>
        <h3><a href="/news/1"><span>WAVE 新春大会</span></a></h3>
      </div>
      <div><h3><a href="/news/2"><span>日付なしの記事</span></a></h3></div>
    </div>
    """

    [candidate] = run("wave", html)

    assert candidate.title == "WAVE 新春大会"
    assert candidate.thumbnail == "/img/1.jpg"


class TestChocopro:
    def test_article_card_title_cleanup(self):
        html = """
        <article class="post">
          <a href="https://chocoprowrestling.com/news/1">
            2025.01.10 新春大会のお知らせ 大会情報/イベント 詳細はこちら
          </a>
          <div class="excerpt">当日券あり</div>
        </article>
        """

        [candidate] = run("chocopro", html)

        assert candidate.title == "新春大会のお知らせ 詳細はこちら"
        assert candidate.published_text == "2025.01.10"
        assert candidate.summary == "当日券あり"

    def test_list_items_when_no_article_cards(self):
        html = '<ul><li><a href="/news/2">チョコプロ 新シリーズ開幕</a> 2025/02/01</li></ul>'

        [candidate] = run("chocopro", html)

        assert candidate.title == "チョコプロ 新シリーズ開幕"
        assert candidate.published_text == "2025/02/01"


def test_sendaigirls():
    html = """
    <ul>
      <li><img src="/a.jpg"><span>2025.1.10</span>
          <h3><a href="/news/1">仙女 新春大会</a></h3><p>概要テキスト</p></li>
      <li><a href="/">HOME</a></li>
    </ul>
    """

    [candidate] = run("sendaigirls", html)

    assert candidate.title == "仙女 新春大会"
    assert candidate.summary == "概要テキスト"
    assert candidate.published_text == "2025.1.10"


def test_diana():
    html = """
    <div id="rt-tpg-container-42">
      <div class="rt-detail">
        <h3 class="entry-title"><a href="https://www-diana.com/news/1">ディアナ 新春大会</a></h3>
        <div class="date-meta">2025.01.10</div>
        <div class="entry-content">本文</div>
      </div>
    </div>
    """

    [candidate] = run("diana", html)

    assert candidate.detail_url == "https://www-diana.com/news/1"
    assert candidate.published_text == "2025.01.10"


def test_oz_academy_prefers_lazy_image_source():
    html = """
    <article class="p-news__post">
      <a class="p-news__post--link" href="/news/1">
        <div class="p-news__post--image"><img src="/placeholder.gif" data-src="/img/real.jpg"></div>
        <p class="p-news__post--date">2025.01.10</p>
        <h2 class="p-news__post--title">OZ 新春大会</h2>
        <p class="p-news__post--text">詳細</p>
      </a>
    </article>
    """

    [candidate] = run("oz_academy", html)

    assert candidate.thumbnail == "/img/real.jpg"
    assert candidate.title == "OZ 新春大会"


def test_marigold_strips_post_type_from_date():
    html = """
    <div class="c-post1 c-post1--diff">
      <a class="c-post1__title" href="/blogs/1">マリーゴールド 新春大会</a>
      <div class="c-post1__box">2025.01.10 NEWS</div>
      <p class="c-post1__text">概要</p>
    </div>
    """

    [candidate] = run("marigold", html)

    assert candidate.published_text == "2025.01.10"
    assert candidate.detail_url == "/blogs/1"


def test_marvelous_strips_update_stamp_and_label():
    html = """
    <article class="media">
      <h1 class="media-heading entry-title">
        <a href="http://www.marvelcompany.co.jp/marvelous/1">マーベラス 新春大会</a>
      </h1>
      <div class="entry-meta">2025年1月10日 / 最終更新日時 : 2025年1月11日 marvelous NEWS</div>
      <div class="entry-summary">大会のお知らせ</div>
    </article>
    """

    [candidate] = run("marvelous", html)

    assert candidate.published_text == "2025年1月10日"
    assert candidate.summary == "大会のお知らせ"


def test_purej_reads_section_link_json_with_positional_fallback():
    html = """
    <div id="news">
      <section data-ha-element-link='{"url":"https://pure-j.jp/news/abc","is_external":""}'>
        <div class="elementor-widget-wrap">
          <time>2025.01.10</time>
          <h3 class="elementor-heading-title">PURE-J 新春興行</h3>
        </div>
      </section>
      <section data-ha-element-link='not json'>
        <div class="elementor-widget-wrap">
          <h3 class="elementor-heading-title">PURE-J 二月大会</h3>
        </div>
      </section>
    </div>
    """

    first, second = run("purej", html)

    assert first.detail_url == "https://pure-j.jp/news/abc"
    assert first.published_text == "2025.01.10"
    assert second.detail_url == "https://pure-j.jp/news/2"
    assert second.published_text == ""


def test_gokigenpro_link_is_on_the_wrapping_anchor():
    html = """
    <a class="entry-card-wrap" href="https://gokigenpro.com/news/1">
      <article>
        <h2 class="entry-card-title">ゴキゲン 大会決定</h2>
        <span class="entry-date">2025.01.10</span>
      </article>
    </a>
    """

    [candidate] = run("gokigenpro", html)

    assert candidate.detail_url == "https://gokigenpro.com/news/1"
    assert candidate.published_text == "2025.01.10"


def test_jto_skips_ticket_posts_and_replaces_placeholder_thumbnail():
    html = """
    <div class="swiper-slide">
      <img src="https://prowrestlingjto.com/wp-content/uploads/real.jpg">
      <div class="p-postList__item">
        <a href="/news/1">
          <div class="c-postThumb__figure"><img src="data:image/gif;base64,R0lGOD"></div>
          <span class="c-postThumb__cat icon-folder">ニュース</span>
          <h2 class="p-postList__title">JTO 新大会決定</h2>
          <time class="c-postTimes__posted icon-posted">2025.01.10</time>
        </a>
      </div>
    </div>
    <div class="p-postList__item">
      <a href="/news/2">
        <div class="c-postThumb__figure"><img src="data:image/gif;base64,R0lGOD"></div>
        <span class="c-postThumb__cat icon-folder">スケジュール/チケット</span>
        <h2 class="p-postList__title">チケット発売情報</h2>
      </a>
    </div>
    """

    [candidate] = run("jto", html)

    assert candidate.title == "JTO 新大会決定"
    assert candidate.thumbnail == "https://prowrestlingjto.com/wp-content/uploads/real.jpg"


def test_jto_placeholder_without_real_image_is_dropped():
    html = """
    <div class="p-postList__item">
      <a href="/news/3">
        <div class="c-postThumb__figure"><img src="data:image/gif;base64,R0lGOD"></div>
        <h2 class="p-postList__title">JTO 追加情報</h2>
      </a>
    </div>
    """

    [candidate] = run("jto", html)

    assert candidate.thumbnail == ""


def test_evolution_skips_members_only_posts():
    html = """
    <ul class="news__list">
      <li class="news-li"><a href="/news/1">
        <p class="news-li__item__infom">2025.01.10</p>
        <p class="news-li__item__subject">Evolution 大会決定</p></a></li>
      <li class="news-li"><a href="/news/2">
        <p class="news-li__item__infom">2025.01.09</p>
        <p class="news-li__item__subject">【ファンクラブ会員限定】特典映像</p></a></li>
    </ul>
    """

    [candidate] = run("evolution", html)

    assert candidate.title == "Evolution 大会決定"
    assert candidate.summary == candidate.title


class TestSeadlinnng:
    HTML = """
    <article class="item-acvinfo">2025.01.10 OTHERS 【新春大会】開催のお知らせ</article>
    <article class="item-acvinfo">2025.01.09 EVENT サイン会のお知らせ</article>
    <article class="item-acvinfo">日付のないブロック</article>
    """

    def test_titles_paired_with_clicked_urls(self):
        automation = MagicMock(spec=AutomationSession)
        automation.click_through.return_value = {"新春大会": "https://seadlinnng.com/news/a"}

        first, second = run("seadlinnng", self.HTML, automation=automation)

        assert first.title == "【新春大会】開催のお知らせ"
        assert first.published_text == "2025.01.10"
        assert first.detail_url == "https://seadlinnng.com/news/a"
        assert second.title == "サイン会のお知らせ"
        assert second.detail_url == "https://seadlinnng.com/news"

    def test_without_automation_every_item_links_to_listing(self):
        candidates = run("seadlinnng", self.HTML)

        assert {c.detail_url for c in candidates} == {"https://seadlinnng.com/news"}

    def test_click_through_failure_degrades_to_listing_links(self):
        automation = MagicMock(spec=AutomationSession)
        automation.click_through.side_effect = WebDriverException("session deleted")

        candidates = run("seadlinnng", self.HTML, automation=automation)

        assert len(candidates) == 2

    def test_match_detail_url_prefix_match(self):
        urls = {"新春大会 開催のお知らせと当日の": "https://seadlinnng.com/news/a"}

        assert (
            SeadlinnngExtractor.match_detail_url("新春大会 開催のお知らせ", urls, "fallback")
            == "https://seadlinnng.com/news/a"
        )

    def test_match_detail_url_ignores_empty_fingerprints(self):
        urls = {
            "": "https://seadlinnng.com/news/hidden",
            "新春大会": "https://seadlinnng.com/news/a",
        }

        assert (
            SeadlinnngExtractor.match_detail_url("【新春大会】開催決定", urls, "fallback")
            == "https://seadlinnng.com/news/a"
        )
        assert SeadlinnngExtractor.match_detail_url("別の記事", {"": "x"}, "fallback") == "fallback"

    def test_block_fingerprint_falls_back_to_leading_text(self):
        assert block_fingerprint("x" * 80) == "x" * 50
