"""Registry of scraped promotions, in collection order."""

from __future__ import annotations

from typing import Optional

from .models import OrganizationConfig, SelectorSet

ORGANIZATIONS: tuple[OrganizationConfig, ...] = (
    OrganizationConfig(
        name="stardom",
        display_name="スターダム",
        base_url="https://wwr-stardom.com",
        news_list_url="https://wwr-stardom.com/news/",
        selectors=SelectorSet(
            news_items="ul li",
            title="a",
            thumbnail="img",
            published_at="li",
            detail_url="a",
        ),
    ),
    OrganizationConfig(
        name="tjpw",
        display_name="東京女子プロレス",
        base_url="https://www.tjpw.jp",
        news_list_url="https://www.tjpw.jp/news",
        selectors=SelectorSet(
            news_items="article, .news-item, li",
            title="a, h3, .title",
            summary=".summary, .excerpt",
            thumbnail="img",
            published_at=".date, time",
            detail_url="a",
        ),
    ),
    OrganizationConfig(
        name="ice_ribbon",
        display_name="アイスリボン",
        base_url="https://iceribbon.com",
        news_list_url="https://iceribbon.com/news_list.php",
        selectors=SelectorSet(
            news_items="tr, .news-item, li",
            title="a, .title, td",
            summary=".summary, .content",
            thumbnail="img",
            published_at=".date, time, td:first-child",
            detail_url="a",
        ),
        encoding="shift_jis",
        flaky=True,
    ),
    OrganizationConfig(
        name="wave",
        display_name="プロレスリングWAVE",
        base_url="https://pro-w-wave.com",
        news_list_url="https://pro-w-wave.com/",
        selectors=SelectorSet(
            news_items=".blog_list > div",
            title="h3 a span",
            summary=".detail",
            thumbnail=".blog_photo img",
            published_at=".blog_date",
            detail_url="h3 a",
        ),
    ),
    OrganizationConfig(
        name="chocopro",
        display_name="チョコプロ",
        base_url="https://chocoprowrestling.com",
        news_list_url="https://chocoprowrestling.com/",
        selectors=SelectorSet(
            news_items="article, .post, .news-item, li",
            title="a, h1, h2, h3, .title",
            summary=".excerpt, .summary, .content",
            thumbnail="img",
            published_at=".date, time, .published",
            detail_url="a",
        ),
    ),
    OrganizationConfig(
        name="sendaigirls",
        display_name="仙女",
        base_url="https://sendaigirls.jp",
        news_list_url="https://sendaigirls.jp/news/",
        selectors=SelectorSet(
            news_items="li",
            title="h3 a",
            summary="p",
            thumbnail="img",
            published_at="li",
            detail_url="h3 a",
        ),
    ),
    OrganizationConfig(
        name="diana",
        display_name="ディアナ",
        base_url="https://www-diana.com",
        news_list_url="https://www-diana.com/news/",
        selectors=SelectorSet(
            news_items='[id^="rt-tpg-container-"] .rt-detail',
            title=".entry-title a",
            summary=".entry-content",
            thumbnail=".rt-img-holder img",
            published_at=".date-meta",
            detail_url=".entry-title a",
        ),
    ),
    OrganizationConfig(
        name="oz_academy",
        display_name="OZアカデミー",
        base_url="https://oz-academy.com",
        news_list_url="https://oz-academy.com/all",
        selectors=SelectorSet(
            news_items="article.p-news__post",
            title=".p-news__post--title",
            summary=".p-news__post--text",
            thumbnail=".p-news__post--image img",
            published_at=".p-news__post--date",
            detail_url="a.p-news__post--link",
        ),
    ),
    OrganizationConfig(
        name="seadlinnng",
        display_name="SEAdLINNNG",
        base_url="https://seadlinnng.com",
        news_list_url="https://seadlinnng.com/news",
        selectors=SelectorSet(
            news_items="article.item-acvinfo",
            title="article.item-acvinfo",
            summary="article.item-acvinfo",
            thumbnail="img",
            published_at="article.item-acvinfo",
            detail_url="article.item-acvinfo",
        ),
        use_selenium=True,
    ),
    OrganizationConfig(
        name="marigold",
        display_name="マリーゴールド",
        base_url="https://dsf-marigold.com",
        news_list_url="https://dsf-marigold.com/blogs/",
        selectors=SelectorSet(
            news_items=".c-post1.c-post1--diff",
            title=".c-post1__title",
            summary=".c-post1__text",
            thumbnail="img",
            published_at=".c-post1__box",
            detail_url=".c-post1__title",
        ),
    ),
    OrganizationConfig(
        name="marvelous",
        display_name="マーベラス",
        base_url="http://www.marvelcompany.co.jp",
        news_list_url="http://www.marvelcompany.co.jp/marvelous/",
        selectors=SelectorSet(
            news_items="article.media",
            title="h1.media-heading.entry-title a",
            summary=".entry-summary, p",
            thumbnail="img",
            published_at=".entry-meta",
            detail_url="h1.media-heading.entry-title a",
        ),
    ),
    OrganizationConfig(
        name="purej",
        display_name="PURE-J",
        base_url="https://pure-j.jp",
        news_list_url="https://pure-j.jp/#news",
        selectors=SelectorSet(
            news_items="#news h3.elementor-heading-title",
            title="h3.elementor-heading-title",
            summary=".excerpt, .summary, p",
            thumbnail="img",
            published_at="time",
            detail_url="section[data-ha-element-link]",
        ),
    ),
    OrganizationConfig(
        name="gokigenpro",
        display_name="ゴキゲンプロレス",
        base_url="https://gokigenpro.com",
        news_list_url="https://gokigenpro.com/category/news/",
        selectors=SelectorSet(
            news_items="article",
            title="h2.entry-card-title",
            summary=".entry-card-snippet",
            thumbnail=".entry-card-thumb-image",
            published_at=".entry-date",
            detail_url="article",
        ),
    ),
    OrganizationConfig(
        name="jto",
        display_name="JUST TAP OUT",
        base_url="https://prowrestlingjto.com",
        news_list_url="https://prowrestlingjto.com/",
        selectors=SelectorSet(
            news_items=".p-postList__item",
            title=".p-postList__title",
            summary=".p-postList__excerpt",
            thumbnail=".c-postThumb__figure img",
            published_at=".c-postTimes__posted.icon-posted",
            detail_url="a",
        ),
    ),
    OrganizationConfig(
        name="evolution",
        display_name="Evolution女子",
        base_url="https://evolutionofficialfc.com",
        news_list_url="https://evolutionofficialfc.com/news",
        selectors=SelectorSet(
            news_items=".news__list .news-li",
            title=".news-li__item__subject",
            published_at=".news-li__item__infom",
            detail_url="a",
        ),
        use_selenium=True,
    ),
)

_BY_NAME = {organization.name: organization for organization in ORGANIZATIONS}


def get_organization(name: str) -> Optional[OrganizationConfig]:
    return _BY_NAME.get(name)
