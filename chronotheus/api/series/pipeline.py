"""
Request pipeline: fan-out, derived series, filtering, envelope.

    selectors -> fetch windows -> averages -> signature tables
              -> compare / percent -> timeframe filter -> dedupe
"""

import logging
from typing import Dict, List

from ...core.config import ProxyConfig
from ...core.errors import InvalidTimeframeError
from ..schemas import QueryData, QueryResponse, Series
from ..upstream_client import UpstreamClient
from .constants import INSTANT_RESULT_TYPE, RANGE_RESULT_TYPE, SYNTHETIC_TIMEFRAMES
from .derived import append_compare, append_percent, append_with_command, build_last_month_average
from .fanout import fetch_windows_instant, fetch_windows_range
from .filters import dedupe_series, filter_by_timeframe
from .selectors import extract_selectors
from .signature import index_by_signature

logger = logging.getLogger("chronotheus.server")


def assemble_result(current: List[Series], timeframe: str, command: str) -> List[Series]:
    """
    Merge fetched series with their derived series.

    No command: raw series plus average series. Compare or percent command:
    raw series plus that builder's joined series. Any other command: raw
    series only.
    """
    averages = build_last_month_average(current)
    current_table, average_table = index_by_signature(current, averages)

    result = append_with_command(current, averages, command)
    result = append_compare(result, current_table, average_table, command)
    result = append_percent(result, current_table, average_table, command)

    result = filter_by_timeframe(result, timeframe)
    return dedupe_series(result)


def check_timeframe(config: ProxyConfig, timeframe: str) -> None:
    """In strict mode, reject selectors naming no configured or synthetic window."""
    if not config.strict_timeframes or not timeframe:
        return
    if timeframe not in config.timeframes and timeframe not in SYNTHETIC_TIMEFRAMES:
        raise InvalidTimeframeError(f"unknown timeframe: {timeframe}")


async def execute_query(
    upstream: UpstreamClient,
    config: ProxyConfig,
    params: Dict[str, str],
    range_query: bool,
) -> QueryResponse:
    """Run one instant or range query across all windows."""
    timeframe, command = extract_selectors(params.get("query", ""))
    logger.debug(f"Selectors: timeframe='{timeframe}', command='{command}'")
    check_timeframe(config, timeframe)

    fetch = fetch_windows_range if range_query else fetch_windows_instant
    current = await fetch(upstream, params, config.windows(), config.request_timeout)

    result = assemble_result(current, timeframe, command)
    logger.debug(f"Fetched {len(current)} series, returning {len(result)}")

    result_type = RANGE_RESULT_TYPE if range_query else INSTANT_RESULT_TYPE
    return QueryResponse(data=QueryData(resultType=result_type, result=result))
