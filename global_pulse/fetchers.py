##########################################################################################
#
# Script name: fetchers.py
#
# Description: Fetches raw candidate articles from NewsAPI or RSS, plus offline samples.
#
##########################################################################################

import logging
import os
from datetime import datetime, timezone
from pathlib import Path

import feedparser
import requests
import yaml
from dateutil import parser as date_parser

from .config import USER_AGENT, SourceSettings
from .models import RawArticle, SourceUnavailable
from .utils import canonicalize_url, normalize_whitespace, strip_html


# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************

log = logging.getLogger(__name__)
NEWSAPI_URL = 'https://newsapi.org/v2'
DEFAULT_CONFIG_FILE = 'config/pulse.yaml'


# ****************************************************************************************
# Functions
# ****************************************************************************************


def load_run_config(path: str = DEFAULT_CONFIG_FILE) -> SourceSettings:
    config_path = Path(path)
    if not config_path.exists():
        log.debug('No run config at %s; using defaults.', path)
        return SourceSettings()
    with config_path.open('r', encoding='utf-8') as handle:
        payload = yaml.safe_load(handle) or {}
    source = payload.get('source', {})
    if not isinstance(source, dict):
        raise ValueError('config.source must be a mapping')
    defaults = SourceSettings()
    feeds = source.get('feeds') or []
    if not isinstance(feeds, list):
        raise ValueError('config.source.feeds must be a list')
    return SourceSettings(
        type=str(source.get('type', defaults.type)).lower(),
        mode=str(source.get('mode', defaults.mode)).lower(),
        query=str(source.get('query', defaults.query)),
        category=str(source.get('category', defaults.category)),
        country=str(source.get('country', defaults.country)),
        language=str(source.get('language', defaults.language)),
        sort_by=str(source.get('sort_by', defaults.sort_by)),
        page_size=int(source.get('page_size', defaults.page_size)),
        feeds=tuple(str(feed) for feed in feeds),
    )


def parse_published(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = date_parser.parse(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _article_from_newsapi(item: dict) -> RawArticle:
    source = item.get('source') or {}
    return RawArticle(
        title=normalize_whitespace(item.get('title') or ''),
        description=strip_html(item.get('description') or ''),
        content=strip_html(item.get('content') or ''),
        source_name=source.get('name') or '',
        url=canonicalize_url(item.get('url') or ''),
        image_url=item.get('urlToImage') or '',
        published_at=parse_published(item.get('publishedAt')),
    )


def fetch_newsapi_articles(settings: SourceSettings, api_key: str | None = None) -> list[RawArticle]:
    api_key = api_key or os.getenv('NEWS_API_KEY')
    if not api_key:
        raise SourceUnavailable('NEWS_API_KEY is not set.')
    if settings.mode == 'top-headlines':
        endpoint = f'{NEWSAPI_URL}/top-headlines'
        params = {
            'category': settings.category,
            'country': settings.country,
            'pageSize': settings.page_size,
        }
    else:
        endpoint = f'{NEWSAPI_URL}/everything'
        params = {
            'q': settings.query,
            'language': settings.language,
            'sortBy': settings.sort_by,
            'pageSize': settings.page_size,
        }
    headers = {'X-Api-Key': api_key, 'User-Agent': USER_AGENT}
    try:
        response = requests.get(endpoint, params=params, headers=headers, timeout=30)
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        raise SourceUnavailable(f'NewsAPI request failed: {exc}') from exc

    if not isinstance(payload, dict) or payload.get('status') != 'ok':
        message = payload.get('message') if isinstance(payload, dict) else None
        raise SourceUnavailable(f'NewsAPI returned an error status: {message or response.status_code}')
    items = payload.get('articles') or []
    if not items:
        raise SourceUnavailable('NewsAPI returned no articles.')
    log.info('NewsAPI returned %d article(s) (%s).', len(items), settings.mode)
    return [_article_from_newsapi(item) for item in items]


def fetch_rss_articles(settings: SourceSettings) -> list[RawArticle]:
    articles: list[RawArticle] = []
    for url in settings.feeds:
        parsed = feedparser.parse(url, agent=USER_AGENT)
        if getattr(parsed, 'bozo', False):
            log.warning('RSS parse warning for %s', url)
        feed_name = parsed.feed.get('title') or url
        for entry in parsed.entries[: settings.page_size]:
            title = normalize_whitespace(entry.get('title', ''))
            if not title:
                continue
            image_url = ''
            for media in entry.get('media_content') or []:
                if media.get('url'):
                    image_url = media['url']
                    break
            articles.append(
                RawArticle(
                    title=title,
                    description=strip_html(entry.get('summary') or entry.get('description') or ''),
                    source_name=feed_name,
                    url=canonicalize_url(entry.get('link', '')),
                    image_url=image_url,
                    published_at=parse_published(entry.get('published') or entry.get('updated')),
                )
            )
    if not articles:
        raise SourceUnavailable('No RSS entries retrieved.')
    log.info('RSS feeds returned %d article(s).', len(articles))
    return articles


def fetch_articles(settings: SourceSettings) -> list[RawArticle]:
    if settings.type == 'newsapi':
        return fetch_newsapi_articles(settings)
    if settings.type == 'rss':
        return fetch_rss_articles(settings)
    raise ValueError(f'Unsupported source type: {settings.type}')


def build_sample_articles() -> list[RawArticle]:
    now = datetime.now(timezone.utc)
    templates = [
        (
            'Eastern European conflict escalates as diplomatic talks stall in Ukraine - Wire',
            'Shelling intensified overnight as negotiators left the table without agreement on a ceasefire.',
        ),
        (
            'World Economic Forum addresses global financial instability - Wire',
            'Leaders gathered in Davos to weigh slowing growth, debt burdens and fragile markets worldwide.',
        ),
        (
            'Political crisis deepens in Venezuela after disputed vote count - Wire',
            'Opposition groups called for new protests as regional governments questioned the results.',
        ),
        (
            'Best laptop deals of the week for students and professionals',
            'Our picks for the cheapest machines this season.',
        ),
        (
            'France passes sweeping pension reform despite nationwide strikes - Wire',
            'The measure raises the retirement age and cleared parliament after a contentious final vote.',
        ),
        (
            'Paris climate envoy warns France is behind on its emission targets - Wire',
            'A new report says the country must double the pace of cuts to meet its 2030 commitments.',
        ),
        (
            'China unveils stimulus package to revive slowing property sector - Wire',
            'Beijing will expand lending to developers and cut mortgage rates for first-time buyers.',
        ),
    ]
    return [
        RawArticle(
            title=title,
            description=description,
            source_name='Sample Source',
            url=f'https://example.com/post-{idx}',
            published_at=now,
        )
        for idx, (title, description) in enumerate(templates)
    ]
