"""
Year range resolution and month-bucket labelling for summary requests.
"""

from numbers import Number
from typing import Optional, Sequence, Tuple, Union
import logging

import pandas as pd

from infrastructure.fail_fast_validator import InvalidYearRangeError
from processors.timeseries_table import TIMESTAMP_COLUMN

logger = logging.getLogger(__name__)

MONTH_LEVELS = ['01', '02', '03', '04', '05', '06', '07', '08', '09', '10', '11', '12']
MONTH_LABELS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']

YearsArg = Optional[Union[int, Sequence[int]]]


def _as_year(value) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidYearRangeError(value, f"year values must be integers, got {value!r}")
    if isinstance(value, bool) or not number.is_integer():
        raise InvalidYearRangeError(value, f"year values must be integers, got {value!r}")
    return int(number)


def resolve_year_range(years: YearsArg, date_range) -> Tuple[int, int]:
    """
    Turn zero, one or two year values into an inclusive ``(start, end)`` range.

    With no years the range of the data is used. A single year is both start
    and end. More than two values, or a start after the end, is an error.
    """
    if years is None or isinstance(years, (Number, str)):
        values = [] if years is None else [years]
    else:
        values = list(years)

    if len(values) > 2:
        raise InvalidYearRangeError(years, 'One or two element year vector is required.')

    if not values:
        start, end = date_range
        if pd.isna(start) or pd.isna(end):
            raise InvalidYearRangeError(years, 'cannot default the year range of an empty series')
        return int(start.year), int(end.year)

    resolved = [_as_year(v) for v in values]
    if len(resolved) == 1:
        resolved = resolved * 2

    start, end = resolved
    if start > end:
        raise InvalidYearRangeError(years, f"start year {start} is after end year {end}")
    return start, end


def add_month_buckets(frame: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``frame`` with integer ``year`` and categorical ``month`` columns"""
    out = frame.copy()
    stamps = out[TIMESTAMP_COLUMN]
    out['year'] = stamps.dt.year.astype(int)
    out['month'] = pd.Categorical(stamps.dt.strftime('%m'), categories=MONTH_LEVELS, ordered=True)
    return out


def select_years(frame: pd.DataFrame, year_range: Tuple[int, int]) -> pd.DataFrame:
    """Keep rows inside the inclusive year range, labelled with their month bucket"""
    start, end = year_range
    labelled = add_month_buckets(frame)
    selected = labelled[labelled['year'].between(start, end)].reset_index(drop=True)
    logger.info(f"Selected {len(selected)} of {len(labelled)} rows for years {start}-{end}")
    return selected
