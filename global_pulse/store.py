##########################################################################################
#
# Script name: store.py
#
# Description: Dated record archive, latest pointer, and mood-word history.
#
##########################################################################################

import json
import logging
import re
from pathlib import Path

from .config import MOOD_HISTORY_DAYS
from .models import DailyRecord


# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************

log = logging.getLogger(__name__)

RECORD_PATTERN = re.compile(r'^poster-(\d{4}-\d{2}-\d{2})\.json$')


# ****************************************************************************************
# Classes
# ****************************************************************************************


class RecencyStore:
    def __init__(self, output_dir: str, archive_dir: str | None = None) -> None:
        self.root = Path(output_dir)
        self.archive_dir = Path(archive_dir) if archive_dir else self.root / 'archive'
        self.latest_path = self.root / 'latest.json'
        self.index_path = self.archive_dir / 'index.json'

    def record_path(self, record_date: str) -> Path:
        return self.archive_dir / f'poster-{record_date}.json'

    def _dated_paths(self) -> list[tuple[str, Path]]:
        if not self.archive_dir.exists():
            return []
        dated = []
        for path in self.archive_dir.iterdir():
            match = RECORD_PATTERN.match(path.name)
            if match:
                dated.append((match.group(1), path))
        dated.sort(reverse=True)
        return dated

    def recent_mood_words(self, before: str | None = None, days: int = MOOD_HISTORY_DAYS) -> set[str]:
        '''
        Mood words from the most recent `days` records, optionally only those
        dated strictly before `before` (ISO date).
        '''
        words: set[str] = set()
        dated = [(day, path) for day, path in self._dated_paths() if before is None or day < before]
        for day, path in dated[:days]:
            try:
                payload = json.loads(path.read_text(encoding='utf-8'))
            except (OSError, ValueError) as exc:
                log.warning('Unreadable archive record %s: %s', path, exc)
                continue
            word = payload.get('moodWord') if isinstance(payload, dict) else None
            if word:
                words.add(str(word).upper())
        log.debug('Recent mood words: %s', sorted(words))
        return words

    def load_latest(self) -> dict | None:
        if not self.latest_path.exists():
            return None
        with self.latest_path.open('r', encoding='utf-8') as handle:
            return json.load(handle)

    def _read_index(self) -> list[dict]:
        if not self.index_path.exists():
            return []
        try:
            payload = json.loads(self.index_path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as exc:
            log.warning('Unreadable archive index %s, rebuilding: %s', self.index_path, exc)
            return []
        if isinstance(payload, list):
            return payload
        return []

    def _update_index(self, existing: list[dict], record: DailyRecord) -> list[dict]:
        entries = [entry for entry in existing if entry.get('date') != record.date]
        entries.append(
            {
                'date': record.date,
                'displayDate': record.display_date,
                'moodWord': record.mood_word,
                'leadStory': record.stories[0].headline if record.stories else '',
            }
        )
        entries.sort(key=lambda item: item.get('date', ''), reverse=True)
        return entries

    def save(self, record: DailyRecord) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        self.archive_dir.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(record.to_dict(), ensure_ascii=False, indent=2)

        path = self.record_path(record.date)
        path.write_text(payload, encoding='utf-8')
        self.latest_path.write_text(payload, encoding='utf-8')

        index = self._update_index(self._read_index(), record)
        self.index_path.write_text(json.dumps(index, ensure_ascii=False, indent=2), encoding='utf-8')
        log.info('Saved %s and refreshed %s', path, self.latest_path)
        return path
