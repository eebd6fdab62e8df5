##########################################################################################
#
# Script name: conftest.py
#
# Description: Deterministic stand-ins for the text oracle and geocoder.
#
##########################################################################################

from typing import Callable

import pytest

from global_pulse.location import Geocoder
from global_pulse.models import OracleError
from global_pulse.oracle import TextOracle


class ScriptedOracle(TextOracle):
    '''Answers every prompt through `handler` and records (prompt, temperature).'''

    def __init__(self, handler: Callable[[str], str]) -> None:
        self.handler = handler
        self.calls: list[tuple[str, float]] = []

    def complete(self, prompt: str, temperature: float = 0.2) -> str:
        self.calls.append((prompt, temperature))
        return self.handler(prompt)


class FailingOracle(TextOracle):
    def __init__(self) -> None:
        self.calls = 0

    def complete(self, prompt: str, temperature: float = 0.2) -> str:
        self.calls += 1
        raise OracleError('backend down')


class RecordingGeocoder(Geocoder):
    def __init__(self, table: dict[str, tuple[float, float]]) -> None:
        self.table = {key.lower(): value for key, value in table.items()}
        self.queries: list[str] = []

    def lookup(self, query: str) -> tuple[float, float] | None:
        self.queries.append(query)
        return self.table.get(query.lower())


@pytest.fixture
def failing_oracle() -> FailingOracle:
    return FailingOracle()


@pytest.fixture
def scripted_oracle() -> Callable[[Callable[[str], str]], ScriptedOracle]:
    return ScriptedOracle


@pytest.fixture
def geocoder() -> RecordingGeocoder:
    return RecordingGeocoder(
        {
            'Berlin, Germany': (52.52, 13.405),
            'Paris, France': (48.8566, 2.3522),
            'Lyon, France': (45.764, 4.8357),
            'Tokyo, Japan': (35.6762, 139.6503),
            'Kyiv, Ukraine': (50.4501, 30.5234),
            'Beijing, China': (39.9042, 116.4074),
            'Moscow, Russia': (55.7558, 37.6173),
            'Washington, USA': (38.9072, -77.0369),
        }
    )
