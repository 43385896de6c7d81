"""
Gap filling for monthly summaries.

Missing observations of a single parameter can be left alone, replaced with
the long-term average for the same calendar month, or linearly interpolated
in time. Both filling policies first make sure every (year, month) bucket in
the table's year span has at least one row, adding a row dated the 1st of
the month where a bucket has no data at all.

The monthly average works well for long gaps but ignores any long-term trend
in the series. Interpolation is preferred for short gaps.
"""

from enum import Enum
from typing import Optional
import logging

import numpy as np
import pandas as pd

from infrastructure.fail_fast_validator import InvalidFillModeError, InvalidParameterError
from processors.timeseries_table import TIMESTAMP_COLUMN, TimeSeriesTable

logger = logging.getLogger(__name__)

# Interpolated runs longer than this many rows are reported as low confidence
LONG_GAP_ROWS = 31


class FillMode(Enum):
    NONE = "none"
    CLIMATOLOGY = "climatology"
    INTERPOLATE = "interpolate"

    @classmethod
    def parse(cls, value) -> 'FillMode':
        if isinstance(value, cls):
            return value
        aliases = {'monoclim': cls.CLIMATOLOGY, 'interp': cls.INTERPOLATE}
        text = str(value).strip().lower()
        if text in aliases:
            return aliases[text]
        for member in cls:
            if text == member.value:
                return member
        raise InvalidFillModeError(
            value, f"fill must be one of {[m.value for m in cls]}, got {value!r}"
        )


def expand_month_buckets(frame: pd.DataFrame) -> pd.DataFrame:
    """
    Add an empty row on the 1st of every month that has no rows.

    Months are completed for every year from the first to the last year of
    the frame. The result is sorted by timestamp.
    """
    if frame.empty:
        return frame.copy()

    stamps = frame[TIMESTAMP_COLUMN]
    first_year, last_year = stamps.iloc[0].year, stamps.iloc[-1].year
    month_starts = pd.date_range(f"{first_year}-01-01", f"{last_year}-12-01", freq='MS')

    present = set(stamps.dt.to_period('M'))
    absent = [m for m in month_starts if m.to_period('M') not in present]
    if not absent:
        return frame.copy()

    filler_rows = pd.DataFrame({TIMESTAMP_COLUMN: pd.DatetimeIndex(absent).astype(stamps.dtype)})
    expanded = pd.concat([frame, filler_rows], ignore_index=True, sort=False)
    expanded = expanded.sort_values(TIMESTAMP_COLUMN, kind='mergesort').reset_index(drop=True)
    logger.info(f"Added {len(absent)} empty month buckets between {first_year} and {last_year}")
    return expanded


def _missing_runs(missing: pd.Series) -> pd.Series:
    """Length of the run of consecutive missing values each row belongs to (0 if present)"""
    run_id = (missing != missing.shift()).cumsum()
    lengths = missing.groupby(run_id).transform('size')
    return lengths.where(missing, 0)


class GapFiller:
    """
    Fill missing values of one parameter in a TimeSeriesTable.

    ``max_gap`` bounds interpolation: runs of more than ``max_gap``
    consecutive missing rows are left missing. ``None`` interpolates any gap.
    """

    def __init__(self, max_gap: Optional[int] = None):
        if max_gap is not None and max_gap < 1:
            raise ValueError("max_gap must be a positive integer or None")
        self.max_gap = max_gap

    def fill(self, table: TimeSeriesTable, parameter: str, mode=FillMode.NONE) -> TimeSeriesTable:
        mode = FillMode.parse(mode)
        if parameter not in table.parameters:
            raise InvalidParameterError(parameter, table.parameters)

        if mode is FillMode.NONE:
            return table.with_data(table.data.copy())

        expanded = expand_month_buckets(table.data)
        missing_before = int(expanded[parameter].isna().sum())

        if mode is FillMode.CLIMATOLOGY:
            filled = self._fill_climatology(expanded, parameter)
        else:
            filled = self._fill_interpolate(expanded, parameter)

        missing_after = int(filled[parameter].isna().sum())
        logger.info(f"{mode.value} fill of '{parameter}': filled {missing_before - missing_after} "
                    f"of {missing_before} missing values")
        return table.with_data(filled)

    def _fill_climatology(self, frame: pd.DataFrame, parameter: str) -> pd.DataFrame:
        out = frame.copy()
        months = out[TIMESTAMP_COLUMN].dt.month
        climatology = out.groupby(months)[parameter].transform('mean')
        out[parameter] = out[parameter].fillna(climatology)
        return out

    def _fill_interpolate(self, frame: pd.DataFrame, parameter: str) -> pd.DataFrame:
        out = frame.copy()
        series = pd.Series(out[parameter].to_numpy(dtype=float),
                           index=pd.DatetimeIndex(out[TIMESTAMP_COLUMN]))
        if series.notna().sum() < 2:
            return out

        interpolated = series.interpolate(method='time', limit_area='inside')

        missing = series.isna()
        run_lengths = _missing_runs(missing)
        if self.max_gap is not None:
            interpolated[run_lengths > self.max_gap] = np.nan
        else:
            filled_runs = run_lengths[missing & interpolated.notna()]
            if not filled_runs.empty and filled_runs.max() > LONG_GAP_ROWS:
                logger.warning(f"Interpolated a run of {int(filled_runs.max())} missing '{parameter}' "
                               f"values; set max_gap to leave long gaps unfilled")

        out[parameter] = interpolated.to_numpy()
        return out
