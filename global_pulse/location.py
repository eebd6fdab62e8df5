##########################################################################################
#
# Script name: location.py
#
# Description: Story location classification, keyword fallback, and geocoding.
#
##########################################################################################

import logging
import os
import re
import time
from dataclasses import dataclass
from typing import Callable

import requests

from .config import (
    GAZETTEER,
    GEOCODE_MIN_INTERVAL,
    LOCATION_KEYWORDS,
    NOMINATIM_URL,
    SKIP_MARKERS,
    USER_AGENT,
)
from .models import OracleError, Place
from .oracle import TextOracle
from .utils import matches_word, normalize_whitespace


# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************

log = logging.getLogger(__name__)

SKIP = 'skip'
LOCATION = 'location'
INDETERMINATE = 'indeterminate'

CLASSIFY_PROMPT = (
    'You place news stories on a world map for a daily poster.\n'
    'Prioritize political, economic, diplomatic, environmental and regulatory news.\n'
    'Answer SKIP if the story is entertainment, sports, local crime, a product launch or review, '
    'a social media trend, or mentions any of: {markers}.\n'
    'Answer Global if no specific place applies.\n'
    'Otherwise answer with the single most relevant place as "City, Country".\n'
    'Answer with one line only.\n\n'
    'Headline: {headline}\n'
    'Text: {body}'
)


# ****************************************************************************************
# Classes
# ****************************************************************************************


@dataclass(frozen=True)
class Classification:
    kind: str
    location: str = ''

    @classmethod
    def skip(cls) -> 'Classification':
        return cls(SKIP)

    @classmethod
    def indeterminate(cls) -> 'Classification':
        return cls(INDETERMINATE)

    @classmethod
    def at(cls, location: str) -> 'Classification':
        return cls(LOCATION, location)


def parse_classification(answer: str) -> Classification:
    line = normalize_whitespace((answer or '').splitlines()[0] if answer else '')
    line = line.strip('"\'.` ')
    if line.lower().startswith('location:'):
        line = line.split(':', 1)[1].strip()
    if not line:
        return Classification.indeterminate()
    if re.match(r'skip\b', line, re.IGNORECASE):
        return Classification.skip()
    if line.lower() in {'global', 'none', 'unknown', 'n/a', 'worldwide'}:
        return Classification.indeterminate()
    return Classification.at(line)


class Geocoder:
    def lookup(self, query: str) -> tuple[float, float] | None:
        raise NotImplementedError


class NominatimGeocoder(Geocoder):
    def __init__(self, url: str = NOMINATIM_URL, timeout: float = 15.0, session: requests.Session | None = None) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers['User-Agent'] = USER_AGENT
        self.session.headers['Accept-Language'] = 'en-US,en;q=0.9'

    def lookup(self, query: str) -> tuple[float, float] | None:
        params = {'q': query, 'format': 'json', 'limit': 1}
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            results = response.json()
        except (requests.RequestException, ValueError) as exc:
            log.warning('Geocoder lookup failed for %r: %s', query, exc)
            return None
        if not isinstance(results, list) or not results:
            log.debug('Geocoder found no match for %r', query)
            return None
        first = results[0]
        try:
            return float(first['lat']), float(first['lon'])
        except (KeyError, TypeError, ValueError):
            log.warning('Geocoder returned malformed coordinates for %r', query)
            return None


class StaticGeocoder(Geocoder):
    '''Offline lookup against a fixed name -> (lat, lng) table.'''

    def __init__(self, table: dict[str, tuple[float, float]] | None = None) -> None:
        self.table = {key.lower(): value for key, value in (table or GAZETTEER).items()}

    def lookup(self, query: str) -> tuple[float, float] | None:
        return self.table.get(normalize_whitespace(query).lower())


class LocationResolver:
    def __init__(
        self,
        oracle: TextOracle | None,
        geocoder: Geocoder,
        keywords: list[tuple[str, str]] | None = None,
        min_interval: float = GEOCODE_MIN_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.oracle = oracle
        self.geocoder = geocoder
        self.keywords = list(LOCATION_KEYWORDS if keywords is None else keywords)
        self.min_interval = min_interval
        self._sleep = sleep
        self._clock = clock
        self._last_lookup: float | None = None

    def classify(self, headline: str, body: str) -> Classification:
        if self.oracle is None:
            return Classification.indeterminate()
        prompt = CLASSIFY_PROMPT.format(
            markers=', '.join(SKIP_MARKERS),
            headline=normalize_whitespace(headline),
            body=normalize_whitespace(body),
        )
        try:
            answer = self.oracle.complete(prompt)
        except OracleError as exc:
            log.warning('Location classification degraded: %s', exc)
            return Classification.indeterminate()
        return parse_classification(answer)

    def _throttle(self) -> None:
        if self._last_lookup is not None:
            elapsed = self._clock() - self._last_lookup
            if elapsed < self.min_interval:
                self._sleep(self.min_interval - elapsed)
        self._last_lookup = self._clock()

    def resolve(self, location_text: str) -> Place | None:
        name = normalize_whitespace(location_text).strip(' ,')
        if not name:
            return None
        self._throttle()
        coords = self.geocoder.lookup(name)
        if coords is None:
            log.info('No coordinates for %r', name)
            return None
        place = Place(name=name.upper(), lat=coords[0], lng=coords[1])
        if not place.is_valid():
            log.warning('Discarding invalid place %r', place)
            return None
        return place

    def keyword_location(self, text: str) -> str | None:
        for keyword, location in self.keywords:
            if matches_word(keyword, text):
                return location
        return None

    def fallback(self, text: str) -> Place | None:
        location = self.keyword_location(text)
        if location is None:
            return None
        log.debug('Keyword fallback matched %r', location)
        return self.resolve(location)


# ****************************************************************************************
# Functions
# ****************************************************************************************


def build_geocoder(offline: bool = False) -> Geocoder:
    if offline:
        return StaticGeocoder()
    return NominatimGeocoder(url=os.getenv('NOMINATIM_URL') or NOMINATIM_URL)
