"""
Window fan-out fetching.

One upstream call per configured window: time parameters shifted by the
window offset, the window's timeframe matcher appended to the query. Calls
run concurrently; the first failure cancels the rest and aborts the request.
"""

import asyncio
import logging
import re
from typing import Dict, Iterable, List, Sequence, Tuple
from urllib.parse import quote

from ...core.config import Window
from ...core.errors import UpstreamError
from ..schemas import Series
from ..upstream_client import QUERY_PATH, QUERY_RANGE_PATH, UpstreamClient
from .constants import TIMEFRAME_LABEL
from .selectors import strip_directives

logger = logging.getLogger("chronotheus.server")

INSTANT_TIME_PARAMS = ("time",)
RANGE_TIME_PARAMS = ("start", "end")

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def build_query_string(pairs: Iterable[Tuple[str, str]]) -> str:
    """Percent-encode every key and value and join with '&'."""
    return "&".join(f"{quote(str(k), safe='')}={quote(str(v), safe='')}" for k, v in pairs)


def shift_timestamp(raw: str, offset: int) -> str:
    """Shift integer-second timestamps by ``offset``; anything else is left as is."""
    if not isinstance(raw, str) or not _INTEGER_RE.fullmatch(raw):
        return raw
    return str(int(raw) + offset)


def window_params(params: Dict[str, str], window: Window, time_params: Sequence[str]) -> Dict[str, str]:
    """Rewrite client parameters for one window."""
    rewritten = dict(params)
    for key in time_params:
        if key in rewritten:
            rewritten[key] = shift_timestamp(rewritten[key], window.offset)
    if "query" in rewritten:
        query = strip_directives(rewritten["query"])
        rewritten["query"] = f'{query}{{{TIMEFRAME_LABEL}="{window.timeframe}"}}'
    return rewritten


async def _gather_fail_fast(coros) -> list:
    """Gather in submission order; on the first error cancel whatever is still running."""
    tasks = [asyncio.ensure_future(c) for c in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def fetch_windows(
    upstream: UpstreamClient,
    path: str,
    params: Dict[str, str],
    windows: List[Window],
    time_params: Sequence[str],
    deadline: float,
) -> List[Series]:
    """
    Fetch every window concurrently and concatenate in window order.

    Args:
        upstream: Upstream client
        path: Upstream endpoint path (instant or range query)
        params: Client parameters (query, time / start, end, step, ...)
        windows: Configured windows, in order
        time_params: Names of the parameters to shift by each offset
        deadline: Seconds allowed for the whole fan-out

    Raises:
        UpstreamError: On the first failing window or when the deadline expires
    """
    async def fetch_one(window: Window) -> List[Series]:
        query_string = build_query_string(window_params(params, window, time_params).items())
        series = await upstream.fetch_series(path, query_string)
        logger.debug(f"Window {window.timeframe} (+{window.offset}s): {len(series)} series")
        return series

    try:
        per_window = await asyncio.wait_for(
            _gather_fail_fast(fetch_one(window) for window in windows),
            timeout=deadline,
        )
    except asyncio.TimeoutError as e:
        raise UpstreamError(f"upstream fan-out exceeded deadline of {deadline}s") from e

    return [series for window_series in per_window for series in window_series]


async def fetch_windows_instant(
    upstream: UpstreamClient, params: Dict[str, str], windows: List[Window], deadline: float
) -> List[Series]:
    return await fetch_windows(upstream, QUERY_PATH, params, windows, INSTANT_TIME_PARAMS, deadline)


async def fetch_windows_range(
    upstream: UpstreamClient, params: Dict[str, str], windows: List[Window], deadline: float
) -> List[Series]:
    return await fetch_windows(upstream, QUERY_RANGE_PATH, params, windows, RANGE_TIME_PARAMS, deadline)
