##########################################################################################
#
# Script name: main.py
#
# Description: CLI entrypoint for generating and archiving the daily Global Pulse record.
#
##########################################################################################

import argparse
import logging
import os
import sys
from datetime import date, datetime
from zoneinfo import ZoneInfo

from .config import GEOCODE_MIN_INTERVAL
from .fetchers import DEFAULT_CONFIG_FILE, build_sample_articles, fetch_articles, load_run_config
from .location import LocationResolver, build_geocoder
from .models import DailyRecord, SourceUnavailable
from .mood import MoodExtractor
from .oracle import TextOracle, build_oracle_from_env
from .pipeline import StoryPipeline
from .scoring import ImportanceScorer
from .store import RecencyStore
from .summarizer import TextSummarizer


# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************

log = logging.getLogger(os.path.basename(sys.argv[0]))
log.setLevel(logging.DEBUG)
log.propagate = False
formatter = logging.Formatter(
    '%(asctime)-15s [%(funcName)25s:%(lineno)-5s] %(levelname)-8s %(message)s'
)

# File handler for logging
fh = logging.FileHandler('global_pulse.log', mode='w')
fh.setLevel(logging.DEBUG)
fh.setFormatter(formatter)
if not any(isinstance(handler, logging.FileHandler) for handler in log.handlers):
    log.addHandler(fh)

root_log = logging.getLogger()
root_log.setLevel(logging.DEBUG)
if not any(isinstance(handler, logging.FileHandler) for handler in root_log.handlers):
    root_log.addHandler(fh)


# ****************************************************************************************
# Functions
# ****************************************************************************************


def _resolve_run_date(explicit_date: str | None) -> date:
    if explicit_date:
        return date.fromisoformat(explicit_date)
    tz_name = os.getenv('PULSE_TIMEZONE') or 'UTC'
    try:
        now = datetime.now(ZoneInfo(tz_name))
    except Exception:  # noqa: BLE001
        now = datetime.now(ZoneInfo('UTC'))
    return now.date()


def build_pipeline(oracle: TextOracle | None, offline: bool = False) -> StoryPipeline:
    # Offline gazetteer lookups need no spacing.
    resolver = LocationResolver(
        oracle,
        build_geocoder(offline=offline),
        min_interval=0.0 if offline else GEOCODE_MIN_INTERVAL,
    )
    return StoryPipeline(
        summarizer=TextSummarizer(oracle),
        resolver=resolver,
        scorer=ImportanceScorer(oracle),
        mood=MoodExtractor(oracle),
    )


def build_daily_record(
    run_date: date,
    config_path: str,
    output_dir: str,
    archive_dir: str | None = None,
    use_sample_data: bool = False,
    use_ai: bool = True,
) -> DailyRecord:
    if use_sample_data:
        articles = build_sample_articles()
        log.debug('Using sample data for record generation.')
    else:
        settings = load_run_config(config_path)
        articles = fetch_articles(settings)
        log.debug('Fetched %d raw articles from %s.', len(articles), settings.type)

    oracle = build_oracle_from_env() if use_ai else None
    pipeline = build_pipeline(oracle, offline=use_sample_data)
    store = RecencyStore(output_dir, archive_dir)
    history = store.recent_mood_words(before=run_date.isoformat())

    record = pipeline.produce(articles, history, run_date)
    store.save(record)
    return record


# ****************************************************************************************
# Handle the arguments
# ****************************************************************************************


def handle_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Generate the daily Global Pulse poster record.')
    parser.add_argument('--date', help='Date string in YYYY-MM-DD format.', default=None)
    parser.add_argument('--config', default=DEFAULT_CONFIG_FILE, help='Path to run config YAML.')
    parser.add_argument('--output-dir', default='.', help='Directory where latest.json is written.')
    parser.add_argument(
        '--archive-dir',
        default=None,
        help='Directory for dated records (defaults to <output-dir>/archive).',
    )
    parser.add_argument(
        '--sample',
        action='store_true',
        help='Use local sample data and an offline gazetteer; skips article and geocoder requests.',
    )
    parser.add_argument('--no-ai', action='store_true', help='Skip text-generation enrichment.')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output to stdout.')
    parser.add_argument('-q', '--quiet', action='store_true', help='Minimal stdout.')
    args = parser.parse_args()

    # Configure stdout logging based on arguments
    ch = logging.StreamHandler(sys.stdout)
    if args.verbose:
        ch.setLevel(logging.DEBUG)
    elif args.quiet:
        ch.setLevel(logging.ERROR)
    else:
        ch.setLevel(logging.INFO)
    ch.setFormatter(formatter)
    log.addHandler(ch)
    root_log.addHandler(ch)

    log.debug('Checking script requirements...')
    if not args.verbose and not args.quiet:
        log.debug('No output level specified. Defaulting to INFO.')

    log.info('++++++++++++++++++++++++++++++++++++++++++++++')
    log.info('+  %s', os.path.basename(sys.argv[0]))
    log.info('+  Python Version: %s', sys.version.split()[0])
    log.info('+  Today is: %s', date.today())
    log.info('++++++++++++++++++++++++++++++++++++++++++++++')
    return args


# ****************************************************************************************
# Main
# ****************************************************************************************


def main() -> None:
    args = handle_args()
    run_date = _resolve_run_date(args.date)
    try:
        record = build_daily_record(
            run_date=run_date,
            config_path=args.config,
            output_dir=args.output_dir,
            archive_dir=args.archive_dir,
            use_sample_data=args.sample,
            use_ai=not args.no_ai,
        )
    except SourceUnavailable as exc:
        log.error('No record generated for %s: %s', run_date, exc)
        sys.exit(1)
    log.info('Generated %d story(ies) for %s, mood %s', len(record.stories), record.date, record.mood_word)


if __name__ == '__main__':
    main()
