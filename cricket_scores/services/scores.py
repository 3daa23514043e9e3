import logging
from enum import Enum
from typing import Optional, Tuple

from cricket_scores.core.config import settings
from cricket_scores.fetch.base import ScoreSource
from cricket_scores.fetch.controller import FetchController
from cricket_scores.fetch.fixture_source import FixtureScoreSource
from cricket_scores.fetch.http_source import HttpScoreSource
from cricket_scores.schemas import ChartData, FetchConfig, FetchFailure, FetchOutcome, FetchSuccess
from cricket_scores.services import aggregator

logger = logging.getLogger(__name__)

class DataMode(str, Enum):
    TEST = "test"
    SERVER = "server"

class ScoresUnavailable(Exception):
    """Acquisition ended in a FetchFailure."""

    def __init__(self, failure: FetchFailure):
        super().__init__(failure.summary)
        self.failure = failure

def default_mode() -> DataMode:
    try:
        return DataMode(settings.DATA_MODE)
    except ValueError:
        logger.warning("Unknown DATA_MODE %r, falling back to test data", settings.DATA_MODE)
        return DataMode.TEST

def fetch_config_from_settings() -> FetchConfig:
    return FetchConfig(
        max_retries=settings.FETCH_MAX_RETRIES,
        base_timeout_ms=settings.FETCH_BASE_TIMEOUT_MS,
        backoff_base_ms=settings.FETCH_BACKOFF_BASE_MS,
        backoff_cap_ms=settings.FETCH_BACKOFF_CAP_MS,
    )

def build_source(mode: DataMode) -> ScoreSource:
    if mode is DataMode.SERVER:
        return HttpScoreSource()
    return FixtureScoreSource()

async def load_scores(
    mode: DataMode,
    config: Optional[FetchConfig] = None,
    source: Optional[ScoreSource] = None,
) -> FetchOutcome:
    """
    Acquire score records for a data mode.

    Both modes go through the same controller so callers always get a
    FetchOutcome, whether the records come from the bundled dataset or the server.
    """
    source = source or build_source(mode)
    config = config or fetch_config_from_settings()
    logger.info("LOADING SCORES: mode=%s, max_attempts=%d", mode.value, config.max_attempts)
    return await FetchController(source).acquire(config)

async def require_scores(mode: DataMode, source: Optional[ScoreSource] = None) -> FetchSuccess:
    outcome = await load_scores(mode, source=source)
    if isinstance(outcome, FetchFailure):
        raise ScoresUnavailable(outcome)
    return outcome

async def country_average(
    mode: DataMode, country: str, source: Optional[ScoreSource] = None
) -> Tuple[Optional[float], str]:
    outcome = await require_scores(mode, source=source)
    average = aggregator.average_for(outcome.records, country)
    return average, aggregator.format_average(average)

async def chart(mode: DataMode, source: Optional[ScoreSource] = None) -> ChartData:
    outcome = await require_scores(mode, source=source)
    return aggregator.chart_data(outcome.records)
