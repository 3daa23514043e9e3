from dataclasses import dataclass
from typing import List, Optional

from cricket_scores.schemas import ErrorKind, ScoreRecord

class ScorePayloadError(ValueError):
    """Response body is not JSON or not a list of [country, score] pairs."""

@dataclass
class AttemptRecord:
    index: int
    started_at: float  # monotonic seconds
    timeout_ms: int
    delay_ms: int = 0
    timed_out: bool = False
    error_kind: Optional[ErrorKind] = None
    status_code: Optional[int] = None
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.error_kind is None

class ScoreSource:
    name: str = "source"

    async def fetch(self) -> List[ScoreRecord]:
        raise NotImplementedError
