"""
Label names and synthetic timeframe names.

Centralized so the selector, builders and label routes agree on spelling.
"""

TIMEFRAME_LABEL = "chrono_timeframe"
COMMAND_LABEL = "_command"

AVERAGE_TIMEFRAME = "lastMonthAverage"
COMPARE_COMMAND = "compareAgainstLast28"
PERCENT_COMMAND = "percentCompareAgainstLast28"

COMMANDS = [COMPARE_COMMAND, PERCENT_COMMAND]
SYNTHETIC_TIMEFRAMES = [AVERAGE_TIMEFRAME, COMPARE_COMMAND, PERCENT_COMMAND]

INSTANT_RESULT_TYPE = "vector"
RANGE_RESULT_TYPE = "matrix"
