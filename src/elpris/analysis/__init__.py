"""Price analysis: hourly statistics, charging windows, listing helpers."""

from elpris.analysis.selection import drop_elapsed, sort_by_price, sort_chronologically
from elpris.analysis.statistics import StatisticsEngine
from elpris.analysis.window import WindowOptimizer

__all__ = [
    "StatisticsEngine",
    "WindowOptimizer",
    "drop_elapsed",
    "sort_by_price",
    "sort_chronologically",
]
