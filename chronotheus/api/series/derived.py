"""
Derived-series builders.

Average relabeling, absolute compare and percent compare. Unparseable
sample values count as 0.0; numeric problems are never raised.
"""

from typing import Callable, List

from ..schemas import Point, Series
from .constants import AVERAGE_TIMEFRAME, COMPARE_COMMAND, PERCENT_COMMAND, TIMEFRAME_LABEL
from .signature import SignatureTable


def parse_value(raw: str) -> float:
    """Parse a sample value; anything unparseable is 0.0."""
    try:
        return float(raw)
    except (TypeError, ValueError):
        return 0.0


def format_value(number: float) -> str:
    return f"{number:.3f}"


def relabel(series: Series, timeframe: str) -> dict:
    """Copy of the series labels with the timeframe label overwritten."""
    metric = dict(series.metric)
    metric[TIMEFRAME_LABEL] = timeframe
    return metric


def build_last_month_average(series: List[Series]) -> List[Series]:
    """
    One average-tagged series per input series.

    This is a relabel-and-reformat of each series, not a mean across
    windows: the output has exactly as many series as the input.
    """
    averages = []
    for s in series:
        points = [(ts, format_value(parse_value(val))) for ts, val in s.points()]
        averages.append(s.derive(relabel(s, AVERAGE_TIMEFRAME), points))
    return averages


def append_with_command(result: List[Series], averages: List[Series], command: str) -> List[Series]:
    """Averages are part of the result only when no command was given."""
    if command:
        return list(result)
    return list(result) + list(averages)


def _percent_change(current: float, average: float) -> float:
    if average == 0.0:
        return 0.0
    return (current - average) / average * 100.0


def _join(
    result: List[Series],
    current_table: SignatureTable,
    average_table: SignatureTable,
    timeframe: str,
    combine: Callable[[float, float], float],
) -> List[Series]:
    """
    Append one combined series per signature present in both tables.

    Range series pair up by position; the shorter sequence bounds the output.
    """
    joined = list(result)
    for sig, current in current_table.items():
        average = average_table.get(sig)
        if average is None:
            continue

        points: List[Point] = [
            (ts, format_value(combine(parse_value(cur_val), parse_value(avg_val))))
            for (ts, cur_val), (_, avg_val) in zip(current.points(), average.points())
        ]
        joined.append(current.derive(relabel(current, timeframe), points))
    return joined


def append_compare(
    result: List[Series],
    current_table: SignatureTable,
    average_table: SignatureTable,
    command: str,
) -> List[Series]:
    """Append current - average series when the compare command is active."""
    if command != COMPARE_COMMAND:
        return list(result)
    return _join(result, current_table, average_table, COMPARE_COMMAND, lambda cur, avg: cur - avg)


def append_percent(
    result: List[Series],
    current_table: SignatureTable,
    average_table: SignatureTable,
    command: str,
) -> List[Series]:
    """Append percent-change series when the percent command is active."""
    if command != PERCENT_COMMAND:
        return list(result)
    return _join(result, current_table, average_table, PERCENT_COMMAND, _percent_change)
