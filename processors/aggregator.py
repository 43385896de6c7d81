"""
Station-aware aggregation of monitoring series.

Nutrient samples are collapsed to monthly means, water quality and weather
records to daily means. Cumulative precipitation on weather stations resets
and climbs within a day, so its daily value is the maximum reading.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Optional, Tuple
import logging

import pandas as pd

from infrastructure.fail_fast_validator import InvalidParameterError
from processors.timeseries_table import TIMESTAMP_COLUMN, StationType, TimeSeriesTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregationRule:
    by: str  # 'days' or 'months'
    max_fields: Tuple[str, ...] = ()


AGGREGATION_RULES = MappingProxyType({
    StationType.NUTRIENT: AggregationRule(by='months'),
    StationType.WATER_QUALITY: AggregationRule(by='days'),
    StationType.WEATHER: AggregationRule(by='days', max_fields=('cumprcp',)),
})


def bucket_starts(stamps: pd.Series, by: str) -> pd.Series:
    """Floor timestamps to the start of their day or month"""
    if by == 'days':
        return stamps.dt.floor('D')
    if by == 'months':
        return stamps.dt.to_period('M').dt.to_timestamp()
    raise ValueError(f"unknown aggregation period '{by}'")


class StationAggregator:
    """Collapse a TimeSeriesTable to one row per day or month"""

    def __init__(self, rules=AGGREGATION_RULES):
        self.rules = rules

    def rule_for(self, table: TimeSeriesTable) -> AggregationRule:
        return self.rules[table.station_type]

    def aggregate(self, table: TimeSeriesTable, params: Optional[Iterable[str]] = None) -> TimeSeriesTable:
        """
        Aggregate ``params`` (all declared parameters by default).

        Buckets are formed from the rows present in the table. A bucket whose
        values are all missing yields NaN.
        """
        params = list(params) if params is not None else list(table.parameters)
        for param in params:
            if param not in table.parameters:
                raise InvalidParameterError(param, table.parameters)

        rule = self.rule_for(table)
        max_params = [p for p in params if p in rule.max_fields]
        mean_params = [p for p in params if p not in rule.max_fields]

        data = table.data
        buckets = bucket_starts(data[TIMESTAMP_COLUMN], rule.by).rename(TIMESTAMP_COLUMN)
        values = data[params].apply(pd.to_numeric, errors='coerce')
        grouped = values.groupby(buckets, sort=True)

        parts = []
        if mean_params:
            parts.append(grouped[mean_params].mean())
        if max_params:
            parts.append(grouped[max_params].max())

        if parts:
            aggregated = pd.concat(parts, axis=1)[params]
        else:
            aggregated = pd.DataFrame(index=pd.DatetimeIndex(buckets.unique(), name=TIMESTAMP_COLUMN))
        aggregated = aggregated.reset_index()

        logger.info(f"Aggregated {len(data)} rows to {len(aggregated)} {rule.by} buckets "
                    f"for {table.station_type.value} station"
                    + (f" (daily maximum for {max_params})" if max_params else ""))
        return TimeSeriesTable(data=aggregated, station_type=table.station_type,
                               parameters=tuple(params), station=table.station)
