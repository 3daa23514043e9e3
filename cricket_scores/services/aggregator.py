from typing import Dict, Iterable, List, NamedTuple, Optional

from cricket_scores.schemas import ChartData, ScoreRecord

class CountryAverage(NamedTuple):
    country: str
    average: float

def _mean(scores: List[int]) -> float:
    return sum(scores) / len(scores)

def average_for(records: Iterable[ScoreRecord], country: str) -> Optional[float]:
    """
    Mean score for one country, matched case-insensitively on the full name.
    Returns None when nothing matches (or the query is blank), never 0.0.
    """
    query = (country or "").strip().lower()
    if not query:
        return None

    scores = [r.score for r in records if r.country.lower() == query]
    if not scores:
        return None
    return _mean(scores)

def grouped_averages(records: Iterable[ScoreRecord]) -> List[CountryAverage]:
    """
    Mean score per country, keyed on the exact stored name.
    Countries appear in the order they are first seen.
    """
    groups: Dict[str, List[int]] = {}
    for r in records:
        groups.setdefault(r.country, []).append(r.score)
    return [CountryAverage(country, _mean(scores)) for country, scores in groups.items()]

def chart_data(records: Iterable[ScoreRecord]) -> ChartData:
    averages = grouped_averages(records)
    return ChartData(
        labels=[a.country for a in averages],
        values=[a.average for a in averages],
    )

def format_average(average: Optional[float]) -> str:
    return f"{average:.2f}" if average is not None else "No data available"
