"""Timeframe filtering and exact-duplicate removal."""

from typing import List

from ..schemas import Series
from .constants import TIMEFRAME_LABEL
from .signature import canonical_labels


def filter_by_timeframe(series: List[Series], timeframe: str) -> List[Series]:
    """Keep series whose timeframe label equals ``timeframe``; "" keeps everything."""
    if not timeframe:
        return list(series)
    return [s for s in series if s.metric.get(TIMEFRAME_LABEL) == timeframe]


def dedupe_series(series: List[Series]) -> List[Series]:
    """Drop series whose full label-map was already seen, keeping first occurrences."""
    seen = set()
    result = []
    for s in series:
        key = canonical_labels(s.metric)
        if key in seen:
            continue
        seen.add(key)
        result.append(s)
    return result
