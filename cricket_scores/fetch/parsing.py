import json
from typing import Any, List

from cricket_scores.fetch.base import ScorePayloadError
from cricket_scores.schemas import ScoreRecord

def decode_json(body: str) -> Any:
    """Decode a response body, reporting malformed JSON as a payload error."""
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise ScorePayloadError(f"Malformed JSON at line {e.lineno} column {e.colno}: {e.msg}") from e

def parse_score_payload(payload: Any) -> List[ScoreRecord]:
    """
    Convert a decoded payload into score records.
    Expected shape: [["England", 23], ["India", 71], ...]
    """
    if not isinstance(payload, list):
        raise ScorePayloadError(f"Expected a JSON array, got {type(payload).__name__}")

    records = []
    for idx, row in enumerate(payload):
        if not isinstance(row, (list, tuple)) or len(row) != 2:
            raise ScorePayloadError(f"Row {idx}: expected [country, score] pair, got {row!r}")

        country, score = row
        if not isinstance(country, str):
            raise ScorePayloadError(f"Row {idx}: country must be a string, got {country!r}")
        # bool is an int subclass; True is not a score
        if isinstance(score, bool) or not isinstance(score, int):
            raise ScorePayloadError(f"Row {idx}: score must be an integer, got {score!r}")

        records.append(ScoreRecord(country=country, score=score))

    return records
