"""
Selector extraction and label-matcher stripping.

Both work on the raw query text with patterns, not a PromQL parser.
"""

import re
from typing import Tuple

from .constants import COMMAND_LABEL, TIMEFRAME_LABEL


def _matcher_pattern(label: str) -> re.Pattern:
    # Label must not be the tail of a longer label name
    return re.compile(r'(?<![A-Za-z0-9_])' + re.escape(label) + r'="([^"]+)"')


_TIMEFRAME_RE = _matcher_pattern(TIMEFRAME_LABEL)
_COMMAND_RE = _matcher_pattern(COMMAND_LABEL)


def extract_selectors(query: str) -> Tuple[str, str]:
    """
    Pull the timeframe and command directives out of a query.

    Args:
        query: Raw client query text, e.g. 'up{job="a",chrono_timeframe="7days"}'

    Returns:
        Tuple of (timeframe, command); each is "" when absent or malformed
    """
    timeframe_match = _TIMEFRAME_RE.search(query or "")
    command_match = _COMMAND_RE.search(query or "")
    timeframe = timeframe_match.group(1) if timeframe_match else ""
    command = command_match.group(1) if command_match else ""
    return timeframe, command


def _strip_pattern(label: str) -> re.Pattern:
    # Separators and braces are captured only when they touch the matcher
    return re.compile(
        r'(?P<open>\{\s*)?(?P<lead>,\s*)?(?<![A-Za-z0-9_])' + re.escape(label)
        + r'="[^"]*"(?P<trail>\s*,)?(?P<close>\s*\})?'
    )


def _rejoin(match: re.Match) -> str:
    opened, closed = match.group("open"), match.group("close")
    if opened and closed:
        return ""
    if opened:
        return "{"
    if closed:
        return "}"
    if match.group("lead") and match.group("trail"):
        return ","
    return ""


def strip_label_matcher(query: str, label: str) -> str:
    """
    Remove every ``label="..."`` matcher from a query.

    Only the separators touching a removed matcher are tidied:
    '{a="1",x="y",b="2"}' becomes '{a="1",b="2"}' and a selector emptied
    by the removal ('{x="y"}') is dropped. Text elsewhere is left alone.
    """
    return _strip_pattern(label).sub(_rejoin, query)


def strip_directives(query: str) -> str:
    """Strip both proxy directives so they never reach upstream."""
    return strip_label_matcher(strip_label_matcher(query, TIMEFRAME_LABEL), COMMAND_LABEL)
