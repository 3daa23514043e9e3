from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

class ScoreRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    country: str
    score: int

class FetchConfig(BaseModel):
    """Retry, timeout and backoff settings for one acquisition run (milliseconds)."""
    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(3, ge=0, description="Retries after the first attempt")
    base_timeout_ms: int = Field(1000, gt=0, description="Deadline of attempt 0; attempt n gets (n+1)x")
    backoff_base_ms: int = Field(500, gt=0, description="Backoff before attempt n is base * 2**n")
    backoff_cap_ms: int = Field(5000, gt=0, description="Upper bound for any backoff delay")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    HTTP_ERROR = "http_error"
    PARSE_ERROR = "parse_error"
    CANCELLED = "cancelled"

class FetchSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: Literal["success"] = "success"
    records: Tuple[ScoreRecord, ...]
    attempts: int = Field(ge=1)

class FetchFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: Literal["failure"] = "failure"
    reason: ErrorKind
    status_code: Optional[int] = Field(None, description="HTTP status for http_error failures")
    attempts: int = Field(ge=0)
    last_message: str

    @property
    def summary(self) -> str:
        return f"Failed to load data after {self.attempts} attempts: {self.last_message}"

FetchOutcome = Annotated[Union[FetchSuccess, FetchFailure], Field(discriminator="outcome")]

class ChartData(BaseModel):
    labels: List[str]
    values: List[float]

class ScoresResponse(BaseModel):
    mode: str
    attempts: int
    records: List[ScoreRecord]

class AverageResponse(BaseModel):
    country: str
    average: Optional[float] = Field(None, description="Mean score, null when no records match")
    display: str = Field(description="Average to two decimals or 'No data available'")

class FailureDetail(BaseModel):
    reason: ErrorKind
    status_code: Optional[int] = None
    attempts: int
    message: str
