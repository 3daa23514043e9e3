import os

class Settings:
    # Data source
    SCORES_API_URL: str = os.getenv("SCORES_API_URL", "https://assessments.reliscore.com/api/cric-scores/")
    DATA_MODE: str = os.getenv("DATA_MODE", "test").lower()
    USER_AGENT: str = os.getenv("USER_AGENT", "Mozilla/5.0 (compatible; cricket-scores/1.0)")

    # Fetch retries, timeouts and backoff (milliseconds)
    FETCH_MAX_RETRIES: int = int(os.getenv("FETCH_MAX_RETRIES", "3"))
    FETCH_BASE_TIMEOUT_MS: int = int(os.getenv("FETCH_BASE_TIMEOUT_MS", "1000"))
    FETCH_BACKOFF_BASE_MS: int = int(os.getenv("FETCH_BACKOFF_BASE_MS", "500"))
    FETCH_BACKOFF_CAP_MS: int = int(os.getenv("FETCH_BACKOFF_CAP_MS", "5000"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
