"""
Series Processing Modules

Organized by pipeline stage:
- selectors.py: Timeframe/command directive extraction and matcher stripping
- fanout.py: Per-window query rewriting and concurrent upstream fetch
- signature.py: Signatures and signature tables
- derived.py: Average, compare and percent series builders
- filters.py: Timeframe filter and deduplication
- pipeline.py: Request assembly and envelope
"""

from .constants import (
    AVERAGE_TIMEFRAME,
    COMMAND_LABEL,
    COMMANDS,
    COMPARE_COMMAND,
    PERCENT_COMMAND,
    SYNTHETIC_TIMEFRAMES,
    TIMEFRAME_LABEL,
)
from .selectors import extract_selectors, strip_directives, strip_label_matcher
from .fanout import build_query_string, fetch_windows, fetch_windows_instant, fetch_windows_range
from .signature import canonical_labels, index_by_signature, signature
from .derived import append_compare, append_percent, append_with_command, build_last_month_average
from .filters import dedupe_series, filter_by_timeframe
from .pipeline import assemble_result, execute_query

__all__ = [
    # Label names
    'TIMEFRAME_LABEL',
    'COMMAND_LABEL',
    'AVERAGE_TIMEFRAME',
    'COMPARE_COMMAND',
    'PERCENT_COMMAND',
    'COMMANDS',
    'SYNTHETIC_TIMEFRAMES',

    # Selectors
    'extract_selectors',
    'strip_label_matcher',
    'strip_directives',

    # Fan-out
    'build_query_string',
    'fetch_windows',
    'fetch_windows_instant',
    'fetch_windows_range',

    # Signatures
    'canonical_labels',
    'signature',
    'index_by_signature',

    # Derived series
    'build_last_month_average',
    'append_with_command',
    'append_compare',
    'append_percent',

    # Filtering
    'filter_by_timeframe',
    'dedupe_series',

    # Pipeline
    'assemble_result',
    'execute_query',
]
