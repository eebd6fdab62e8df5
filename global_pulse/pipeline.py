##########################################################################################
#
# Script name: pipeline.py
#
# Description: Filters, enriches, and deduplicates raw articles into the daily story set.
#
##########################################################################################

import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date

from .config import (
    COUNTRY_CAP,
    DENYLIST_PATTERNS,
    DESCRIPTION_BUDGET,
    DESCRIPTION_MAX_CHARS,
    HEADLINE_BUDGET,
    HEADLINE_MAX_CHARS,
    MAX_STORIES,
    MIN_TITLE_CHARS,
    PALETTE,
    SKIP_MARKERS,
    TITLE_SEPARATOR,
)
from .location import SKIP, LocationResolver
from .models import DailyRecord, Place, RawArticle, SourceUnavailable, Story
from .mood import MoodExtractor
from .scoring import ImportanceScorer
from .summarizer import DESCRIPTION, HEADLINE, TextSummarizer
from .utils import clean_title, display_date


# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************

log = logging.getLogger(__name__)

DENYLIST = [re.compile(pattern, re.IGNORECASE) for pattern in DENYLIST_PATTERNS] + [
    re.compile(rf'\b{re.escape(marker)}\b', re.IGNORECASE) for marker in SKIP_MARKERS
]


# ****************************************************************************************
# Classes
# ****************************************************************************************


@dataclass
class RunState:
    '''Run-scoped accumulator: accepted stories and per-country acceptance counts.'''

    stories: list[Story] = field(default_factory=list)
    country_counts: defaultdict[str, int] = field(default_factory=lambda: defaultdict(int))
    country_cap: int = COUNTRY_CAP
    max_stories: int = MAX_STORIES

    @property
    def full(self) -> bool:
        return len(self.stories) >= self.max_stories

    def admit_country(self, place: Place) -> bool:
        country = place.country
        if self.country_counts[country] >= self.country_cap:
            return False
        self.country_counts[country] += 1
        return True


class StoryPipeline:
    def __init__(
        self,
        summarizer: TextSummarizer,
        resolver: LocationResolver,
        scorer: ImportanceScorer,
        mood: MoodExtractor,
        palette: list[str] | None = None,
    ) -> None:
        self.summarizer = summarizer
        self.resolver = resolver
        self.scorer = scorer
        self.mood = mood
        self.palette = palette or PALETTE

    def prefilter(self, articles: list[RawArticle]) -> list[RawArticle]:
        kept = [article for article in articles if is_candidate(article.title)]
        log.debug('Prefilter kept %d of %d article(s).', len(kept), len(articles))
        return kept

    def enrich(self, article: RawArticle, state: RunState) -> Story | None:
        '''
        Turn one article into a Story, or None when it is classified as skip or
        its country is already represented. Accepted stories are appended to state.
        '''
        title = clean_title(article.title, TITLE_SEPARATOR)
        content = article.body()

        headline = title
        if len(title) > HEADLINE_BUDGET:
            headline = self.summarizer.shorten(HEADLINE, title, HEADLINE_MAX_CHARS)
        description = content
        if len(content) > DESCRIPTION_BUDGET:
            description = self.summarizer.shorten(DESCRIPTION, content, DESCRIPTION_MAX_CHARS)

        verdict = self.resolver.classify(headline, content)
        if verdict.kind == SKIP:
            log.info('Skipped as irrelevant: %s', title)
            return None

        place = None
        if verdict.location:
            place = self.resolver.resolve(verdict.location)
        if place is None:
            place = self.resolver.fallback(f'{title} {content}')

        if place is not None and not state.admit_country(place):
            log.info('Dropped %r: %s already covered.', title, place.country)
            return None

        importance = self.scorer.score(title, content)
        index = len(state.stories)
        story = Story(
            id=index + 1,
            headline=title,
            description=description,
            location=place,
            importance=importance,
            color=self.palette[index % len(self.palette)],
            url=article.url,
            image_url=article.image_url,
        )
        state.stories.append(story)
        return story

    def select(self, articles: list[RawArticle], state: RunState | None = None) -> RunState:
        state = state or RunState()
        for article in self.prefilter(articles):
            if state.full:
                break
            self.enrich(article, state)
        log.info('Accepted %d story(ies).', len(state.stories))
        return state

    def produce(self, articles: list[RawArticle], history: set[str], run_date: date) -> DailyRecord:
        if not articles:
            raise SourceUnavailable('No articles to process.')
        state = self.select(articles)
        mood_word = self.mood.extract(state.stories, history)
        log.info('Mood of the day: %s', mood_word)
        return DailyRecord(
            date=run_date.isoformat(),
            display_date=display_date(run_date),
            mood_word=mood_word,
            stories=list(state.stories),
        )


# ****************************************************************************************
# Functions
# ****************************************************************************************


def is_candidate(title: str) -> bool:
    if not title or len(title) < MIN_TITLE_CHARS:
        return False
    return not any(pattern.search(title) for pattern in DENYLIST)
