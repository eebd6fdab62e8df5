##########################################################################################
#
# Script name: summarizer.py
#
# Description: Headline and description shortening with a deterministic truncation fallback.
#
##########################################################################################

import logging

from .models import OracleError
from .oracle import TextOracle
from .utils import hard_truncate, normalize_whitespace


# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************

log = logging.getLogger(__name__)

HEADLINE = 'headline'
DESCRIPTION = 'description'

MODE_INSTRUCTIONS = {
    HEADLINE: (
        'Rewrite this news headline as a short, impactful poster headline in ALL CAPS. '
        'Keep the key actor and action. Maximum {max_len} characters.'
    ),
    DESCRIPTION: (
        'Summarize this news text as one complete, factual sentence. '
        'Maximum {max_len} characters. Do not end mid-sentence.'
    ),
}


# ****************************************************************************************
# Classes
# ****************************************************************************************


class TextSummarizer:
    def __init__(self, oracle: TextOracle | None) -> None:
        self.oracle = oracle

    def shorten(self, mode: str, text: str, max_len: int) -> str:
        '''
        Shorten text to at most max_len characters.

        A single backend attempt is made; on failure the text is hard-truncated
        (and uppercased in headline mode). Backend answers are clipped the same
        way so the length budget always holds.
        '''
        if mode not in MODE_INSTRUCTIONS:
            raise ValueError(f'Unknown summarizer mode: {mode}')
        upper = mode == HEADLINE
        if self.oracle is None:
            return hard_truncate(text, max_len, upper=upper)

        prompt = (
            MODE_INSTRUCTIONS[mode].format(max_len=max_len)
            + '\n\nText:\n'
            + normalize_whitespace(text)
        )
        try:
            answer = self.oracle.complete(prompt)
        except OracleError as exc:
            log.warning('Summarizer (%s) degraded to truncation: %s', mode, exc)
            return hard_truncate(text, max_len, upper=upper)

        answer = normalize_whitespace(answer).strip('"\'')
        if not answer:
            return hard_truncate(text, max_len, upper=upper)
        return hard_truncate(answer, max_len, upper=upper)
