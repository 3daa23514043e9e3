from typing import List, Optional, Sequence, Tuple

from cricket_scores.fetch.base import ScoreSource
from cricket_scores.fetch.parsing import parse_score_payload
from cricket_scores.schemas import ScoreRecord

# Bundled dataset served in "test" mode
SAMPLE_SCORES: Tuple[Tuple[str, int], ...] = (
    ("England", 23),
    ("England", 127),
    ("Sri Lanka", 99),
    ("Sri Lanka", 99),
    ("New Zealand", 31),
    ("Sri Lanka", 101),
    ("New Zealand", 81),
    ("Pakistan", 23),
    ("Pakistan", 127),
    ("India", 3),
    ("India", 71),
    ("Australia", 31),
    ("India", 22),
    ("Pakistan", 81),
)

class FixtureScoreSource(ScoreSource):
    name = "test"

    def __init__(self, rows: Optional[Sequence[Sequence]] = None):
        self.rows = SAMPLE_SCORES if rows is None else rows

    async def fetch(self) -> List[ScoreRecord]:
        return parse_score_payload(list(self.rows))
