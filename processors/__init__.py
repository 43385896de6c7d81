"""
Processors package: time series tables, gap filling, aggregation and summary statistics.
"""

from .timeseries_table import StationType, TimeSeriesTable, TimeSeriesTableError
from .gap_filler import FillMode, GapFiller
from .aggregator import AGGREGATION_RULES, StationAggregator
from .year_range_selector import resolve_year_range, select_years
from .summary_calculator import SummaryCalculator, SummaryResult

__all__ = [
    'StationType',
    'TimeSeriesTable',
    'TimeSeriesTableError',
    'FillMode',
    'GapFiller',
    'AGGREGATION_RULES',
    'StationAggregator',
    'resolve_year_range',
    'select_years',
    'SummaryCalculator',
    'SummaryResult'
]
