"""
Per-entity spike detection.
"""

from .aggregator import SpikeAggregator
from .daily_collapse import collapse_daily_totals
from .window_scan import LOOKBACK_DAYS, find_largest_spike

__all__ = [
    "SpikeAggregator",
    "collapse_daily_totals",
    "find_largest_spike",
    "LOOKBACK_DAYS",
]
