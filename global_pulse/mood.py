from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from .config import MOOD_FALLBACK, MOOD_TEMPERATURE
from .models import OracleError, Story
from .oracle import TextOracle


log = logging.getLogger(__name__)

MOOD_PROMPT = (
    "Here are today's top world news stories:\n{digest}\n\n"
    "Pick ONE distinctive English word that captures the specific mood of THIS day, "
    "not a generic word that would fit any day.\n"
    "{exclusion}"
    "Reply with the single word only."
)


def normalize_mood(answer: str) -> str:
    return re.sub(r"[^A-Z]", "", (answer or "").strip().upper())


def _digest(stories: list[Story]) -> str:
    return "\n".join(f"- {story.headline}: {story.description}" for story in stories)


class MoodExtractor:
    def __init__(self, oracle: TextOracle | None, temperature: float = MOOD_TEMPERATURE) -> None:
        self.oracle = oracle
        self.temperature = temperature

    def extract(self, stories: list[Story], recent_words: Iterable[str] = ()) -> str:
        recent = {word.upper() for word in recent_words if word}
        if self.oracle is None or not stories:
            return MOOD_FALLBACK
        exclusion = ""
        if recent:
            exclusion = f"Do NOT use any of these recently used words: {', '.join(sorted(recent))}.\n"
        prompt = MOOD_PROMPT.format(digest=_digest(stories), exclusion=exclusion)
        try:
            answer = self.oracle.complete(prompt, temperature=self.temperature)
        except OracleError as exc:
            log.warning("Mood extraction degraded to %s: %s", MOOD_FALLBACK, exc)
            return MOOD_FALLBACK
        word = normalize_mood(answer)
        if not word:
            log.warning("Mood answer %r normalized to nothing; using %s.", answer[:40], MOOD_FALLBACK)
            return MOOD_FALLBACK
        if word in recent:
            log.warning("Mood word %s was used in the last week.", word)
        return word
