##########################################################################################
#
# Script name: test_enrichment.py
#
# Description: Summarizer, importance scorer, and mood word fallbacks and normalization.
#
##########################################################################################

import pytest

from global_pulse.config import MOOD_TEMPERATURE
from global_pulse.models import Story
from global_pulse.mood import MoodExtractor, normalize_mood
from global_pulse.scoring import ImportanceScorer, parse_score
from global_pulse.summarizer import DESCRIPTION, HEADLINE, TextSummarizer


def _story(n: int) -> Story:
    return Story(
        id=n,
        headline=f'Headline number {n}',
        description=f'Description number {n}.',
        location=None,
        importance=60,
        color='#ff2d55',
    )


def test_headline_fallback_is_deterministic(failing_oracle) -> None:
    summarizer = TextSummarizer(failing_oracle)
    first = summarizer.shorten(HEADLINE, 'x' * 80, 60)
    second = summarizer.shorten(HEADLINE, 'x' * 80, 60)
    assert first == second == 'X' * 60
    assert failing_oracle.calls == 2


def test_description_fallback_truncates_without_uppercasing() -> None:
    text = 'Officials said the agreement would take effect next month. ' * 3
    assert TextSummarizer(None).shorten(DESCRIPTION, text, 100) == text[:100]


def test_backend_answers_are_held_to_the_budget(scripted_oracle) -> None:
    oracle = scripted_oracle(lambda prompt: '"Leaders strike a deal on border tariffs after a night of talks in the capital"')
    summarizer = TextSummarizer(oracle)
    headline = summarizer.shorten(HEADLINE, 'y' * 80, 60)
    assert headline == headline.upper()
    assert len(headline) <= 60
    assert headline.startswith('LEADERS STRIKE A DEAL')
    assert 'Maximum 60 characters' in oracle.calls[0][0]


def test_unknown_mode_is_rejected() -> None:
    with pytest.raises(ValueError):
        TextSummarizer(None).shorten('tweet', 'text', 10)


@pytest.mark.parametrize(
    'answer, expected',
    [
        ('85', 85),
        ('Score: 72/100', 72),
        ('250', 100),
        ('7', 40),
        ('very important', None),
    ],
)
def test_parse_score(answer: str, expected: int | None) -> None:
    assert parse_score(answer) == expected


def test_scorer_defaults(scripted_oracle, failing_oracle) -> None:
    assert ImportanceScorer(None).score('Headline', 'Body') == 60
    assert ImportanceScorer(failing_oracle).score('Headline', 'Body') == 60
    assert ImportanceScorer(scripted_oracle(lambda prompt: 'unclear')).score('Headline', 'Body') == 60
    assert ImportanceScorer(scripted_oracle(lambda prompt: 'I would say 91.')).score('Headline', 'Body') == 91


def test_normalize_mood() -> None:
    assert normalize_mood('  defiant! ') == 'DEFIANT'
    assert normalize_mood('Word: "Uneasy".') == 'WORDUNEASY'
    assert normalize_mood('123') == ''


def test_mood_prompt_excludes_recent_words_and_runs_hot(scripted_oracle) -> None:
    oracle = scripted_oracle(lambda prompt: 'Restless')
    word = MoodExtractor(oracle).extract([_story(1), _story(2)], {'tense', 'GRIM'})
    assert word == 'RESTLESS'
    prompt, temperature = oracle.calls[0]
    assert temperature == MOOD_TEMPERATURE
    assert 'GRIM, TENSE' in prompt
    assert 'Headline number 2: Description number 2.' in prompt


def test_mood_fallbacks(scripted_oracle, failing_oracle) -> None:
    assert MoodExtractor(failing_oracle).extract([_story(1)], set()) == 'GLOBAL'
    assert MoodExtractor(scripted_oracle(lambda prompt: '...')).extract([_story(1)], set()) == 'GLOBAL'
    assert MoodExtractor(None).extract([_story(1)], set()) == 'GLOBAL'
    silent = scripted_oracle(lambda prompt: 'Calm')
    assert MoodExtractor(silent).extract([], set()) == 'GLOBAL'
    assert silent.calls == []
