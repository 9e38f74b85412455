"""Extractors for promotions whose listings need site-specific parsing.

Each class reads one site's listing markup. Selectors and text patterns
track the live sites and are expected to drift; the generic extractor
remains the fallback for anything not listed here.
"""

from __future__ import annotations

import json
import logging
import re

from ...models import Candidate
from ...utils.normalize import truncate_title
from .base import (
    SiteExtractor,
    TextPattern,
    apply_cleanups,
    attr_of,
    closest,
    first_match,
    select_attr,
    select_text,
    text_of,
)

logger = logging.getLogger(__name__)

YMD_SLASH = re.compile(r"(\d{4}/\d{1,2}/\d{1,2})")
YMD_SLASH_OR_DASH = re.compile(r"(\d{4}[-/]\d{1,2}[-/]\d{1,2})")
YMD_ANY_SEPARATOR = re.compile(r"(\d{4}[-./]\d{1,2}[-./]\d{1,2})")


class StardomExtractor(SiteExtractor):
    """Rows read ``<date> <category> <title>`` with the link on the row."""

    name = "stardom"
    min_title_length = 6

    item_selector = "ul li, .news-list li, article"
    date_patterns = (TextPattern(YMD_SLASH),)
    title_cleanups = (
        (
            re.compile(
                r"^(?:5star|INFO|イベント|グッズ|チケット|メディア出演|"
                r"大会情報|対戦カード|試合結果|未分類)\s+"
            ),
            "",
        ),
    )

    def extract(self, soup, context):
        candidates = []
        for item in soup.select(self.item_selector):
            link = item.find("a")
            text = text_of(item, " ")
            if link is None or not text:
                continue

            match = first_match(self.date_patterns, text)
            if not match:
                continue

            title = apply_cleanups(text[match.end():].strip(), self.title_cleanups)
            candidates.append(
                Candidate(
                    title=title,
                    thumbnail=select_attr(item, "img", "src"),
                    published_text=match.group(1),
                    detail_url=attr_of(link, "href"),
                )
            )
        return candidates


class TjpwExtractor(SiteExtractor):
    name = "tjpw"

    item_selector = "article, .news-item, li"
    date_patterns = (
        TextPattern(YMD_SLASH, priority=0),
        TextPattern(re.compile(r"(\d{1,2}月\d{1,2}日)"), priority=1),
        TextPattern(re.compile(r"(\d{4}-\d{1,2}-\d{1,2})"), priority=2),
        TextPattern(re.compile(r"(\d{1,2}/\d{1,2})"), priority=3),
    )

    def extract(self, soup, context):
        candidates = []
        for item in soup.select(self.item_selector):
            link = item.find("a")
            if link is None:
                continue

            title = text_of(link) or select_text(item, "h1, h2, h3, .title")
            match = first_match(self.date_patterns, text_of(item, " "))
            candidates.append(
                Candidate(
                    title=title,
                    thumbnail=select_attr(item, "img", "src"),
                    published_text=match.group(1) if match else "",
                    detail_url=attr_of(link, "href"),
                )
            )
        return candidates


class IceRibbonExtractor(SiteExtractor):
    """Table-based listing served as Shift_JIS.

    Rows are read first. When no row qualifies (e.g. the table markup was
    mangled by a bad decode) every ``.php`` anchor on the page is tried.
    """

    name = "ice_ribbon"
    min_title_length = 4

    row_selector = "tr, .news-item, li"
    detail_marker = "news_detail.php"

    def _rows(self, soup):
        candidates = []
        for item in soup.select(self.row_selector):
            link = item.find("a")
            if link is None:
                continue

            detail_url = attr_of(link, "href")
            title = text_of(link)
            cells = item.find_all("td")
            if len(title) < 3 and cells:
                title = text_of(cells[-1])

            published = text_of(cells[0]) if cells else ""
            if not published:
                match = YMD_SLASH_OR_DASH.search(text_of(item, " "))
                published = match.group(1) if match else ""

            has_date = bool(YMD_SLASH_OR_DASH.search(published))
            if not title or not detail_url:
                continue
            if not has_date and self.detail_marker not in detail_url:
                continue

            candidates.append(
                Candidate(
                    title=title,
                    thumbnail=select_attr(item, "img", "src"),
                    published_text=published,
                    detail_url=detail_url,
                )
            )
        return self.filter(candidates)

    def _anchors(self, soup):
        candidates = []
        for link in soup.find_all("a"):
            detail_url = attr_of(link, "href")
            title = text_of(link)
            if ".php" not in detail_url or len(title) < self.min_title_length:
                continue

            parent = closest(link, "tr, li, .news-item")
            match = YMD_SLASH_OR_DASH.search(text_of(parent, " ")) if parent else None
            candidates.append(
                Candidate(
                    title=title,
                    published_text=match.group(1) if match else "",
                    detail_url=detail_url,
                )
            )
        return candidates

    def extract(self, soup, context):
        candidates = self._rows(soup)
        if candidates:
            return candidates
        logger.info("ice_ribbon: no rows matched; falling back to anchor scan")
        return self._anchors(soup)


class WaveExtractor(SiteExtractor):
    name = "wave"
    min_title_length = 4

    def extract(self, soup, context):
        candidates = []
        for item in soup.select(".blog_list > div"):
            published = select_text(item, ".blog_date")
            if not published:
                continue
            candidates.append(
                Candidate(
                    title=select_text(item, "h3 a span"),
                    thumbnail=select_attr(item, ".blog_photo img", "src"),
                    published_text=published,
                    detail_url=select_attr(item, "h3 a", "href"),
                )
            )
        return candidates


class ChocoproExtractor(SiteExtractor):
    """Article cards whose link text carries date, category and title.

    Falls back to plain list items when no article card qualifies.
    """

    name = "chocopro"
    min_title_length = 6

    article_selector = "article, .post, .news-item, .entry"
    list_selector = "li, .news-list-item, .post-list-item"
    title_cleanups = (
        (re.compile(r"^\d{4}\.\d{2}\.\d{2}\s+"), ""),
        (
            re.compile(
                r"\s+(?:大会情報|試合結果|ニュース|インタビュー|メディア情報|"
                r"物販情報|イベント情報)/\S+\s+"
            ),
            " ",
        ),
        (re.compile(r"\s+gtmv\s+"), " "),
    )
    summary_limit = 200

    def _title(self, item, link):
        title = text_of(link, " ")
        if len(title) < 5:
            title = select_text(item, "h1, h2, h3, .title", " ")
        return truncate_title(apply_cleanups(title, self.title_cleanups))

    def _date(self, item):
        date_element = item.select_one(".date, time, .published, .entry-date")
        if date_element is not None:
            published = text_of(date_element) or attr_of(date_element, "datetime")
            if published:
                return published
        match = YMD_ANY_SEPARATOR.search(text_of(item, " "))
        return match.group(1) if match else ""

    def _articles(self, soup):
        candidates = []
        for item in soup.select(self.article_selector):
            link = item.find("a")
            if link is None:
                continue
            summary = select_text(item, ".excerpt, .summary, .content, .entry-content")
            candidates.append(
                Candidate(
                    title=self._title(item, link),
                    summary=summary[: self.summary_limit],
                    thumbnail=select_attr(item, "img", "src"),
                    published_text=self._date(item),
                    detail_url=attr_of(link, "href"),
                )
            )
        return [c for c in self.filter(candidates) if c.title and c.detail_url]

    def _list_items(self, soup):
        candidates = []
        for item in soup.select(self.list_selector):
            link = item.find("a")
            if link is None:
                continue
            match = YMD_ANY_SEPARATOR.search(text_of(item, " "))
            candidates.append(
                Candidate(
                    title=text_of(link),
                    thumbnail=select_attr(item, "img", "src"),
                    published_text=match.group(1) if match else "",
                    detail_url=attr_of(link, "href"),
                )
            )
        return candidates

    def extract(self, soup, context):
        candidates = self._articles(soup)
        if candidates:
            return candidates
        logger.info("chocopro: no article cards; checking list items")
        return self._list_items(soup)


class SendaigirlsExtractor(SiteExtractor):
    name = "sendaigirls"
    min_title_length = 4

    date_patterns = (TextPattern(re.compile(r"(\d{4}\.\d{1,2}\.\d{1,2})")),)

    def extract(self, soup, context):
        candidates = []
        for item in soup.select("li"):
            match = first_match(self.date_patterns, text_of(item, " "))
            if not match:
                continue
            candidates.append(
                Candidate(
                    title=select_text(item, "h3 a"),
                    summary=select_text(item, "p"),
                    thumbnail=select_attr(item, "img", "src"),
                    published_text=match.group(1),
                    detail_url=select_attr(item, "h3 a", "href"),
                )
            )
        return candidates


class DianaExtractor(SiteExtractor):
    name = "diana"
    min_title_length = 4

    def extract(self, soup, context):
        return [
            Candidate(
                title=select_text(item, ".entry-title a"),
                summary=select_text(item, ".entry-content"),
                thumbnail=select_attr(item, ".rt-img-holder img", "src"),
                published_text=select_text(item, ".date-meta"),
                detail_url=select_attr(item, ".entry-title a", "href"),
            )
            for item in soup.select('[id^="rt-tpg-container-"] .rt-detail')
        ]


class OzAcademyExtractor(SiteExtractor):
    name = "oz_academy"
    min_title_length = 4

    def extract(self, soup, context):
        return [
            Candidate(
                title=select_text(item, ".p-news__post--title"),
                summary=select_text(item, ".p-news__post--text"),
                # Lazy-loaded images keep the real URL in data-src
                thumbnail=select_attr(item, ".p-news__post--image img", "data-src", "src"),
                published_text=select_text(item, ".p-news__post--date"),
                detail_url=select_attr(item, "a.p-news__post--link", "href"),
            )
            for item in soup.select("article.p-news__post")
        ]


class MarigoldExtractor(SiteExtractor):
    name = "marigold"
    min_title_length = 4

    date_cleanups = ((re.compile(r"\s*(?:NEWS|EVENT)\s*$", re.IGNORECASE), ""),)

    def extract(self, soup, context):
        candidates = []
        for item in soup.select(".c-post1.c-post1--diff"):
            title_element = item.select_one(".c-post1__title")
            published = apply_cleanups(select_text(item, ".c-post1__box", " "), self.date_cleanups)
            candidates.append(
                Candidate(
                    title=text_of(title_element),
                    summary=select_text(item, ".c-post1__text"),
                    thumbnail=select_attr(item, "img", "src"),
                    published_text=published,
                    detail_url=attr_of(title_element, "href"),
                )
            )
        return candidates


class MarvelousExtractor(SiteExtractor):
    name = "marvelous"
    min_title_length = 4

    title_selector = "h1.media-heading.entry-title a"
    date_cleanups = (
        (re.compile(r"/\s*最終更新日時\s*:\s*\d{4}年\d{1,2}月\d{1,2}日\s*"), ""),
        (re.compile(r"\s*marvelous\s*NEWS\s*"), ""),
    )

    def extract(self, soup, context):
        candidates = []
        for item in soup.select("article.media"):
            published = apply_cleanups(select_text(item, ".entry-meta", " "), self.date_cleanups)
            candidates.append(
                Candidate(
                    title=select_text(item, self.title_selector),
                    summary=select_text(item, ".entry-summary, p"),
                    published_text=published,
                    detail_url=select_attr(item, self.title_selector, "href"),
                )
            )
        return candidates


class PurejExtractor(SiteExtractor):
    """Elementor landing page; each heading sits in a clickable section.

    The detail URL is stored as JSON in the section's
    ``data-ha-element-link`` attribute. Headings without a readable link
    get a positional placeholder URL.
    """

    name = "purej"
    min_title_length = 4

    def _detail_url(self, heading, index, base_url):
        section = closest(heading, "section")
        raw = attr_of(section, "data-ha-element-link")
        if raw:
            try:
                link = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning(f"purej: unreadable link data {raw!r}")
            else:
                if isinstance(link, dict) and link.get("url"):
                    return str(link["url"])
        return f"{base_url.rstrip('/')}/news/{index + 1}"

    def _date(self, heading, index, news_times):
        wrap = closest(heading, ".elementor-widget-wrap")
        published = select_text(wrap, "time") if wrap is not None else ""
        if not published and len(news_times) > index:
            published = text_of(news_times[index])
        return published

    def extract(self, soup, context):
        base_url = context.organization.base_url
        news_times = soup.select("#news time")
        candidates = []
        for index, heading in enumerate(soup.select("#news h3.elementor-heading-title")):
            candidates.append(
                Candidate(
                    title=text_of(heading),
                    published_text=self._date(heading, index, news_times),
                    detail_url=self._detail_url(heading, index, base_url),
                )
            )
        return candidates


class GokigenproExtractor(SiteExtractor):
    """Cards are wrapped by the anchor, so the link is an ancestor."""

    name = "gokigenpro"
    min_title_length = 4

    def extract(self, soup, context):
        candidates = []
        for item in soup.select("article"):
            wrapper = closest(item, "a.entry-card-wrap")
            candidates.append(
                Candidate(
                    title=select_text(item, "h2.entry-card-title"),
                    summary=select_text(item, ".entry-card-snippet"),
                    thumbnail=select_attr(item, ".entry-card-thumb-image", "src"),
                    published_text=select_text(item, ".entry-date", " "),
                    detail_url=attr_of(wrapper, "href"),
                )
            )
        return candidates


class JtoExtractor(SiteExtractor):
    name = "jto"
    min_title_length = 4

    skipped_categories = frozenset({"スケジュール/チケット"})
    placeholder_prefix = "data:image"

    def _thumbnail(self, item):
        thumbnail = select_attr(item, ".c-postThumb__figure img", "data-src", "src")
        if not thumbnail.startswith(self.placeholder_prefix):
            return thumbnail

        # Carousel slides keep the real image on a sibling element
        slide = closest(item, ".swiper-slide")
        if slide is not None:
            actual = select_attr(slide, 'img[src*="wp-content"]', "src")
            if actual and not actual.startswith(self.placeholder_prefix):
                return actual
        return ""

    def extract(self, soup, context):
        candidates = []
        for item in soup.select(".p-postList__item"):
            category = select_text(item, ".c-postThumb__cat.icon-folder")
            if category in self.skipped_categories:
                logger.debug(f"jto: skipping {category} post")
                continue
            candidates.append(
                Candidate(
                    title=select_text(item, ".p-postList__title"),
                    summary=select_text(item, ".p-postList__excerpt"),
                    thumbnail=self._thumbnail(item),
                    published_text=select_text(item, ".c-postTimes__posted.icon-posted", " "),
                    detail_url=select_attr(item, "a", "href"),
                )
            )
        return candidates


class EvolutionExtractor(SiteExtractor):
    """Client-rendered listing; members-only posts are skipped."""

    name = "evolution"
    min_title_length = 4

    members_only_marker = "ファンクラブ会員限定"

    def extract(self, soup, context):
        candidates = []
        for item in soup.select(".news__list .news-li"):
            title = select_text(item, ".news-li__item__subject")
            if self.members_only_marker in title:
                logger.debug(f"evolution: skipping members-only post {title!r}")
                continue
            candidates.append(
                Candidate(
                    title=title,
                    summary=title,
                    published_text=select_text(item, ".news-li__item__infom", " "),
                    detail_url=select_attr(item, "a", "href"),
                )
            )
        return candidates
