##########################################################################################
#
# Script name: oracle.py
#
# Description: Free-text completion backend shared by every enrichment step.
#
##########################################################################################

import logging
import os

from openai import OpenAI

from .config import DEFAULT_TEMPERATURE
from .models import OracleError


# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************

log = logging.getLogger(__name__)

DEFAULT_MODEL = 'gpt-4o-mini'
SYSTEM_PROMPT = 'You are a terse news desk editor. Answer with the requested text only, no markdown.'


# ****************************************************************************************
# Classes
# ****************************************************************************************


class TextOracle:
    '''
    Prompt in, completion out. Implementations raise OracleError on any failure;
    callers own the fallback.
    '''

    def complete(self, prompt: str, temperature: float = DEFAULT_TEMPERATURE) -> str:
        raise NotImplementedError


class OpenAIOracle(TextOracle):
    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, max_tokens: int = 200) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self._client = OpenAI(api_key=api_key)

    def complete(self, prompt: str, temperature: float = DEFAULT_TEMPERATURE) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                temperature=temperature,
                max_tokens=self.max_tokens,
                messages=[
                    {'role': 'system', 'content': SYSTEM_PROMPT},
                    {'role': 'user', 'content': prompt},
                ],
            )
            content = response.choices[0].message.content
        except Exception as exc:  # noqa: BLE001
            raise OracleError(f'{self.model} completion failed: {exc}') from exc
        if not content or not content.strip():
            raise OracleError(f'{self.model} returned an empty completion')
        return content.strip()


# ****************************************************************************************
# Functions
# ****************************************************************************************


def build_oracle_from_env() -> TextOracle | None:
    api_key = os.getenv('OPENAI_API_KEY')
    if not api_key:
        log.warning('OPENAI_API_KEY is not set; AI enrichment disabled, using fallbacks.')
        return None
    model = os.getenv('OPENAI_MODEL') or DEFAULT_MODEL
    log.debug('Using OpenAI model %s for enrichment.', model)
    return OpenAIOracle(api_key=api_key, model=model)
