##########################################################################################
#
# Script name: config.py
#
# Description: Static configuration for the daily Global Pulse story pipeline.
#
##########################################################################################

from dataclasses import dataclass, field


# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************


@dataclass(frozen=True)
class SourceSettings:
    type: str = 'newsapi'
    mode: str = 'everything'
    query: str = 'war OR election OR economy OR crisis OR "breaking news" OR politics'
    category: str = 'general'
    country: str = 'us'
    language: str = 'en'
    sort_by: str = 'relevancy'
    page_size: int = 15
    feeds: tuple[str, ...] = field(default_factory=tuple)


MAX_STORIES = 5
MIN_TITLE_CHARS = 30
TITLE_SEPARATOR = ' - '

HEADLINE_BUDGET = 50
HEADLINE_MAX_CHARS = 60
DESCRIPTION_BUDGET = 120
DESCRIPTION_MAX_CHARS = 100

IMPORTANCE_MIN = 40
IMPORTANCE_MAX = 100
IMPORTANCE_DEFAULT = 60

COUNTRY_CAP = 1
MOOD_HISTORY_DAYS = 7
MOOD_FALLBACK = 'GLOBAL'

DEFAULT_TEMPERATURE = 0.2
MOOD_TEMPERATURE = 1.2

GEOCODE_MIN_INTERVAL = 1.0
NOMINATIM_URL = 'https://nominatim.openstreetmap.org/search'
USER_AGENT = 'global-pulse-bot/1.0 (+https://github.com/)'

PALETTE = ['#ff2d55', '#ff6b35', '#ffb800', '#34c759', '#5ac8fa']

# Low-value title patterns dropped before any enrichment.
DENYLIST_PATTERNS = [
    r'^reviews?:',
    r'\b(hands-on|first-look) review\b',
    r'\bbest .* deals\b',
    r'\bdeals? (of|on|for) (the )?(week|day|weekend)\b',
    r'\b(discount|promo) codes?\b',
    r'\bbest .* to buy\b',
    r'\bhow to\b',
]

# Entertainment/irrelevant markers. Shared with the classifier prompt.
SKIP_MARKERS = [
    'box office',
    'celebrity',
    'red carpet',
    'oscars',
    'grammys',
    'trailer',
    'horoscope',
    'recipe',
    'fantasy football',
    'viral tiktok',
]

# Keyword fallback, first match wins. Order matters.
LOCATION_KEYWORDS = [
    ('ukraine', 'Kyiv, Ukraine'),
    ('kyiv', 'Kyiv, Ukraine'),
    ('kremlin', 'Moscow, Russia'),
    ('russia', 'Moscow, Russia'),
    ('putin', 'Moscow, Russia'),
    ('gaza', 'Gaza City, Palestine'),
    ('israel', 'Tel Aviv, Israel'),
    ('iran', 'Tehran, Iran'),
    ('china', 'Beijing, China'),
    ('beijing', 'Beijing, China'),
    ('taiwan', 'Taipei, Taiwan'),
    ('japan', 'Tokyo, Japan'),
    ('india', 'New Delhi, India'),
    ('germany', 'Berlin, Germany'),
    ('france', 'Paris, France'),
    ('brussels', 'Brussels, Belgium'),
    ('britain', 'London, United Kingdom'),
    ('uk', 'London, United Kingdom'),
    ('london', 'London, United Kingdom'),
    ('canada', 'Ottawa, Canada'),
    ('mexico', 'Mexico City, Mexico'),
    ('brazil', 'Brasilia, Brazil'),
    ('venezuela', 'Caracas, Venezuela'),
    ('white house', 'Washington, USA'),
    ('congress', 'Washington, USA'),
    ('trump', 'Washington, USA'),
    ('usa', 'Washington, USA'),
    ('wall street', 'New York, USA'),
]

# Offline coordinates for the keyword table and a few hub cities.
GAZETTEER = {
    'kyiv, ukraine': (50.4501, 30.5234),
    'moscow, russia': (55.7558, 37.6173),
    'gaza city, palestine': (31.5017, 34.4668),
    'tel aviv, israel': (32.0853, 34.7818),
    'tehran, iran': (35.6892, 51.3890),
    'beijing, china': (39.9042, 116.4074),
    'taipei, taiwan': (25.0330, 121.5654),
    'tokyo, japan': (35.6762, 139.6503),
    'new delhi, india': (28.6139, 77.2090),
    'berlin, germany': (52.5200, 13.4050),
    'paris, france': (48.8566, 2.3522),
    'brussels, belgium': (50.8503, 4.3517),
    'london, united kingdom': (51.5074, -0.1278),
    'ottawa, canada': (45.4215, -75.6972),
    'mexico city, mexico': (19.4326, -99.1332),
    'brasilia, brazil': (-15.7975, -47.8919),
    'caracas, venezuela': (10.4806, -66.9036),
    'washington, usa': (38.9072, -77.0369),
    'new york, usa': (40.7128, -74.0060),
    'singapore, singapore': (1.3521, 103.8198),
    'dubai, united arab emirates': (25.2048, 55.2708),
    'davos, switzerland': (46.8027, 9.8360),
    'geneva, switzerland': (46.2044, 6.1432),
}
