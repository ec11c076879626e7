"""
Series signatures and signature indexing.

A signature is the canonical label-map with the timeframe label removed:
two series share a signature when they are the same underlying series
observed in different windows.
"""

import json
from typing import Dict, List, Mapping, Tuple

from ..schemas import Series
from .constants import TIMEFRAME_LABEL

SignatureTable = Dict[str, Series]


def canonical_labels(metric: Mapping[str, str]) -> str:
    """Order-independent serialization of a label-map."""
    return json.dumps(dict(metric), sort_keys=True, separators=(",", ":"))


def signature(metric: Mapping[str, str]) -> str:
    """Canonical label-map without the timeframe label."""
    return canonical_labels({k: v for k, v in metric.items() if k != TIMEFRAME_LABEL})


def index_by_signature(current: List[Series], average: List[Series]) -> Tuple[SignatureTable, SignatureTable]:
    """
    Build signature -> Series tables for the current and average lists.

    Lossy by construction: when several series in one list share a
    signature, the last one inserted is the only one kept.
    """
    current_table: SignatureTable = {}
    average_table: SignatureTable = {}

    for series in current:
        current_table[signature(series.metric)] = series
    for series in average:
        average_table[signature(series.metric)] = series

    return current_table, average_table
