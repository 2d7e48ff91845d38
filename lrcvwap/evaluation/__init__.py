"""
Signal evaluation module.

Measures what price did after each signal: max favorable / adverse
excursions, entry-to-entry moves and first-touch win rates.
"""
from .excursion import (
    ExcursionAnalyzer,
    EXCURSION_COLUMNS,
    win_rate_exclusive,
    win_rate_cumulative,
    summarize_by_reason,
)

__all__ = [
    'ExcursionAnalyzer',
    'EXCURSION_COLUMNS',
    'win_rate_exclusive',
    'win_rate_cumulative',
    'summarize_by_reason',
]
