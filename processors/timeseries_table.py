"""
TimeSeriesTable - the in-memory unit passed between every summary stage.

A table wraps a pandas DataFrame with a ``datetimestamp`` column plus one
numeric column per monitoring parameter, tagged with the type of station the
data came from. Station type decides how the aggregator buckets the series.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional, Tuple
import logging

import pandas as pd

logger = logging.getLogger(__name__)

TIMESTAMP_COLUMN = 'datetimestamp'


class TimeSeriesTableError(ValueError):
    """Raised when a frame cannot be used as a monitoring time series"""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid time series table: {reason}")


class StationType(Enum):
    NUTRIENT = "nutrient"
    WATER_QUALITY = "waterQuality"
    WEATHER = "weather"

    @classmethod
    def parse(cls, value) -> 'StationType':
        """Accept an enum member, its value, or its name (case-insensitive)"""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        raise TimeSeriesTableError(
            f"unknown station type '{value}', expected one of "
            f"{[m.value for m in cls]}"
        )

    @classmethod
    def from_station_code(cls, station: str) -> 'StationType':
        """
        Resolve the station type from a SWMP station code.

        Station codes end in ``nut``, ``wq`` or ``met`` (e.g. ``apacpnut``,
        ``apaebwq``, ``apaebmet``).
        """
        code = station.strip().lower()
        suffixes = {'nut': cls.NUTRIENT, 'wq': cls.WATER_QUALITY, 'met': cls.WEATHER}
        for suffix, station_type in suffixes.items():
            if code.endswith(suffix):
                return station_type
        raise TimeSeriesTableError(f"cannot infer station type from station code '{station}'")


@dataclass(frozen=True, eq=False)
class TimeSeriesTable:
    """Quality-controlled monitoring series for a single station"""
    data: pd.DataFrame
    station_type: StationType
    parameters: Tuple[str, ...] = ()
    station: str = ''
    date_range: Tuple[pd.Timestamp, pd.Timestamp] = field(init=False)

    def __post_init__(self):
        if TIMESTAMP_COLUMN not in self.data.columns:
            raise TimeSeriesTableError(f"missing '{TIMESTAMP_COLUMN}' column")

        stamps = self.data[TIMESTAMP_COLUMN]
        if not pd.api.types.is_datetime64_any_dtype(stamps):
            raise TimeSeriesTableError(f"'{TIMESTAMP_COLUMN}' must hold datetimes")
        if stamps.dt.tz is not None:
            raise TimeSeriesTableError(
                f"'{TIMESTAMP_COLUMN}' must hold naive local times, got timezone {stamps.dt.tz}"
            )
        if stamps.isna().any():
            raise TimeSeriesTableError(f"'{TIMESTAMP_COLUMN}' contains missing values")
        if not stamps.is_monotonic_increasing:
            raise TimeSeriesTableError(f"'{TIMESTAMP_COLUMN}' must be sorted ascending")
        if stamps.duplicated().any():
            raise TimeSeriesTableError(f"'{TIMESTAMP_COLUMN}' contains duplicate timestamps")

        parameters = tuple(self.parameters) or tuple(
            col for col in self.data.columns if col != TIMESTAMP_COLUMN
        )
        missing = [p for p in parameters if p not in self.data.columns]
        if missing:
            raise TimeSeriesTableError(f"declared parameters without columns: {missing}")

        object.__setattr__(self, 'station_type', StationType.parse(self.station_type))
        object.__setattr__(self, 'parameters', parameters)
        if len(stamps):
            object.__setattr__(self, 'date_range', (stamps.iloc[0], stamps.iloc[-1]))
        else:
            object.__setattr__(self, 'date_range', (pd.NaT, pd.NaT))

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, station_type=None,
                       parameters: Optional[Iterable[str]] = None,
                       station: str = '') -> 'TimeSeriesTable':
        """
        Build a table from an arbitrary frame.

        The frame is copied, timestamps are parsed and rows sorted. Either
        ``station_type`` or a SWMP ``station`` code must be given.
        """
        if station_type is None:
            if not station:
                raise TimeSeriesTableError("station_type or station code is required")
            station_type = StationType.from_station_code(station)

        data = df.copy()
        if TIMESTAMP_COLUMN not in data.columns:
            raise TimeSeriesTableError(f"missing '{TIMESTAMP_COLUMN}' column")
        data[TIMESTAMP_COLUMN] = pd.to_datetime(data[TIMESTAMP_COLUMN])
        data = data.sort_values(TIMESTAMP_COLUMN, kind='mergesort').reset_index(drop=True)

        params = tuple(parameters) if parameters is not None else ()
        for param in params or [c for c in data.columns if c != TIMESTAMP_COLUMN]:
            if param in data.columns:
                data[param] = pd.to_numeric(data[param], errors='coerce')

        table = cls(data=data, station_type=station_type, parameters=params, station=station)
        logger.info(f"Loaded {len(data)} rows for {table.station_type.value} station "
                    f"'{station or 'unnamed'}' with parameters {list(table.parameters)}")
        return table

    def with_data(self, data: pd.DataFrame) -> 'TimeSeriesTable':
        """Return a new table carrying ``data`` and the same metadata"""
        return replace(self, data=data)

    @property
    def years(self) -> Tuple[int, int]:
        """First and last calendar year covered by the series"""
        start, end = self.date_range
        return int(start.year), int(end.year)

    def __len__(self) -> int:
        return len(self.data)
