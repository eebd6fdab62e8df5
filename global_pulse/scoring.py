from __future__ import annotations

import logging
import re

from .config import IMPORTANCE_DEFAULT, IMPORTANCE_MAX, IMPORTANCE_MIN
from .models import OracleError
from .oracle import TextOracle
from .utils import normalize_whitespace


log = logging.getLogger(__name__)

SCORE_PROMPT = (
    "Rate the global significance of this news story from {low} to {high}, where {high} "
    "means it affects millions of people across borders. Reply with the number only.\n\n"
    "Headline: {headline}\nText: {body}"
)


def clamp_score(value: int, low: int = IMPORTANCE_MIN, high: int = IMPORTANCE_MAX) -> int:
    return max(low, min(high, value))


def parse_score(answer: str) -> int | None:
    match = re.search(r"\d+", answer or "")
    if match is None:
        return None
    return clamp_score(int(match.group(0)))


class ImportanceScorer:
    def __init__(self, oracle: TextOracle | None) -> None:
        self.oracle = oracle

    def score(self, headline: str, body: str) -> int:
        if self.oracle is None:
            return IMPORTANCE_DEFAULT
        prompt = SCORE_PROMPT.format(
            low=IMPORTANCE_MIN,
            high=IMPORTANCE_MAX,
            headline=normalize_whitespace(headline),
            body=normalize_whitespace(body),
        )
        try:
            answer = self.oracle.complete(prompt)
        except OracleError as exc:
            log.warning("Importance scoring degraded to default: %s", exc)
            return IMPORTANCE_DEFAULT
        score = parse_score(answer)
        if score is None:
            log.warning("Importance answer had no number (%r); using default.", answer[:40])
            return IMPORTANCE_DEFAULT
        return score
