import httpx
import pytest
from cricket_scores.core import config
from cricket_scores.fetch.http_source import HttpScoreSource

TEST_URL = "https://scores.test/api/cric-scores/"

@pytest.fixture(autouse=True)
def setup_test_environment():
    """Setup test environment with fast fetch settings"""
    # Store original values
    original = {
        name: getattr(config.settings, name)
        for name in (
            "SCORES_API_URL",
            "DATA_MODE",
            "FETCH_MAX_RETRIES",
            "FETCH_BASE_TIMEOUT_MS",
            "FETCH_BACKOFF_BASE_MS",
            "FETCH_BACKOFF_CAP_MS",
        )
    }

    # Keep real backoff out of the suite; timeouts stay generous
    config.settings.SCORES_API_URL = TEST_URL
    config.settings.DATA_MODE = "test"
    config.settings.FETCH_MAX_RETRIES = 2
    config.settings.FETCH_BASE_TIMEOUT_MS = 2000
    config.settings.FETCH_BACKOFF_BASE_MS = 1
    config.settings.FETCH_BACKOFF_CAP_MS = 2

    yield

    # Restore original values
    for name, value in original.items():
        setattr(config.settings, name, value)

class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays in milliseconds."""

    def __init__(self):
        self.delays_ms = []

    async def __call__(self, seconds: float) -> None:
        self.delays_ms.append(round(seconds * 1000))

@pytest.fixture
def recording_sleep():
    return RecordingSleep()

@pytest.fixture
def mock_http_source():
    """Build an HttpScoreSource whose client answers through the given handler."""

    def factory(handler) -> HttpScoreSource:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return HttpScoreSource(url=TEST_URL, user_agent="pytest", client=client)

    return factory
