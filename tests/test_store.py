##########################################################################################
#
# Script name: test_store.py
#
# Description: Dated archive, latest pointer, index, and mood history window.
#
##########################################################################################

import json
from pathlib import Path

from global_pulse.models import DailyRecord, Place, Story
from global_pulse.store import RecencyStore


def _record(day: str, mood: str, headline: str = 'Leaders meet in Geneva') -> DailyRecord:
    story = Story(
        id=1,
        headline=headline,
        description='Talks continue.',
        location=Place('GENEVA, SWITZERLAND', 46.2044, 6.1432),
        importance=80,
        color='#ff2d55',
        url='https://example.com/1',
        image_url='https://example.com/1.jpg',
    )
    return DailyRecord(date=day, display_date=day, mood_word=mood, stories=[story])


def test_save_writes_dated_record_latest_and_index(tmp_path: Path) -> None:
    store = RecencyStore(str(tmp_path))
    store.save(_record('2026-03-01', 'TENSE'))
    store.save(_record('2026-03-02', 'HOPEFUL', headline='Ceasefire holds'))

    dated = json.loads((tmp_path / 'archive' / 'poster-2026-03-01.json').read_text(encoding='utf-8'))
    assert dated['moodWord'] == 'TENSE'
    assert dated['stories'][0] == {
        'id': 1,
        'headline': 'Leaders meet in Geneva',
        'description': 'Talks continue.',
        'mainLocation': {'name': 'GENEVA, SWITZERLAND', 'lat': 46.2044, 'lng': 6.1432},
        'intensity': 80,
        'color': '#ff2d55',
        'url': 'https://example.com/1',
        'imageUrl': 'https://example.com/1.jpg',
    }
    assert store.load_latest()['date'] == '2026-03-02'

    index = json.loads((tmp_path / 'archive' / 'index.json').read_text(encoding='utf-8'))
    assert [entry['date'] for entry in index] == ['2026-03-02', '2026-03-01']
    assert index[0]['leadStory'] == 'Ceasefire holds'


def test_resaving_a_day_replaces_its_index_entry(tmp_path: Path) -> None:
    store = RecencyStore(str(tmp_path))
    store.save(_record('2026-03-01', 'TENSE'))
    store.save(_record('2026-03-01', 'CALM'))

    index = json.loads(store.index_path.read_text(encoding='utf-8'))
    assert len(index) == 1
    assert index[0]['moodWord'] == 'CALM'


def test_corrupt_index_is_rebuilt_on_save(tmp_path: Path) -> None:
    store = RecencyStore(str(tmp_path))
    store.archive_dir.mkdir(parents=True)
    store.index_path.write_text('{not json', encoding='utf-8')

    path = store.save(_record('2026-03-02', 'STEADY'))

    assert path.exists()
    index = json.loads(store.index_path.read_text(encoding='utf-8'))
    assert [entry['date'] for entry in index] == ['2026-03-02']
    assert index[0]['moodWord'] == 'STEADY'


def test_recent_mood_words_covers_last_seven_records(tmp_path: Path) -> None:
    store = RecencyStore(str(tmp_path), archive_dir=str(tmp_path / 'posters'))
    moods = ['ALPHA', 'BRAVO', 'CHARLIE', 'DELTA', 'ECHO', 'FOXTROT', 'GOLF', 'HOTEL', 'INDIA']
    for day, mood in enumerate(moods, start=1):
        store.save(_record(f'2026-03-{day:02d}', mood))

    assert store.recent_mood_words() == {'CHARLIE', 'DELTA', 'ECHO', 'FOXTROT', 'GOLF', 'HOTEL', 'INDIA'}
    assert store.recent_mood_words(before='2026-03-09') == {
        'BRAVO',
        'CHARLIE',
        'DELTA',
        'ECHO',
        'FOXTROT',
        'GOLF',
        'HOTEL',
    }


def test_recent_mood_words_skips_unreadable_records(tmp_path: Path) -> None:
    store = RecencyStore(str(tmp_path))
    store.save(_record('2026-03-01', 'TENSE'))
    (store.archive_dir / 'poster-2026-03-02.json').write_text('{not json', encoding='utf-8')
    (store.archive_dir / 'notes.json').write_text('{"moodWord": "IGNORED"}', encoding='utf-8')

    assert store.recent_mood_words() == {'TENSE'}


def test_empty_store_has_no_history(tmp_path: Path) -> None:
    store = RecencyStore(str(tmp_path / 'missing'))
    assert store.recent_mood_words() == set()
    assert store.load_latest() is None
