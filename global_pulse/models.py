from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime


class PulseError(Exception):
    """Base class for exceptions in this package."""


class SourceUnavailable(PulseError):
    """No usable articles could be retrieved for the run."""


class OracleError(PulseError):
    """The text-generation backend failed or returned nothing."""


@dataclass(frozen=True)
class RawArticle:
    title: str
    description: str = ""
    content: str = ""
    source_name: str = ""
    url: str = ""
    image_url: str = ""
    published_at: datetime | None = None

    def body(self) -> str:
        return self.description or self.content or ""


@dataclass(frozen=True)
class Place:
    name: str
    lat: float
    lng: float

    @property
    def country(self) -> str:
        return self.name.rsplit(",", 1)[-1].strip()

    def is_valid(self) -> bool:
        return bool(self.name.strip()) and math.isfinite(self.lat) and math.isfinite(self.lng)

    def to_dict(self) -> dict:
        return {"name": self.name, "lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class Story:
    id: int
    headline: str
    description: str
    location: Place | None
    importance: int
    color: str
    url: str = ""
    image_url: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "headline": self.headline,
            "description": self.description,
            "mainLocation": self.location.to_dict() if self.location else None,
            "intensity": self.importance,
            "color": self.color,
            "url": self.url,
            "imageUrl": self.image_url,
        }


@dataclass
class DailyRecord:
    date: str
    display_date: str
    mood_word: str
    stories: list[Story] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "displayDate": self.display_date,
            "moodWord": self.mood_word,
            "stories": [story.to_dict() for story in self.stories],
        }
