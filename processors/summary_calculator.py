"""
Seasonal and annual summaries of an aggregated monitoring series.

Monthly anomalies are relative to the mean of the same calendar month across
the selected years; annual anomalies are relative to the grand mean of the
annual means. Missing values never raise: an empty bucket propagates as NaN.
"""

from dataclasses import dataclass
from typing import Dict, Tuple
import logging

import pandas as pd

from processors.year_range_selector import MONTH_LABELS, MONTH_LEVELS

logger = logging.getLogger(__name__)

MONTH_NAMES = dict(zip(MONTH_LEVELS, MONTH_LABELS))

DISTRIBUTION_COLUMNS = ['min', 'firstq', 'med', 'mean', 'thirdq', 'max', 'na_count', 'var']


def month_label_categorical(months: pd.Series) -> pd.Categorical:
    """Map two-digit month levels to ordered Jan..Dec labels"""
    return pd.Categorical(months.astype(str).map(MONTH_NAMES), categories=MONTH_LABELS, ordered=True)


@dataclass(frozen=True, eq=False)
class SummaryResult:
    """Summary tables for one parameter over one year range"""
    parameter: str
    year_range: Tuple[int, int]
    monthly_distribution: pd.DataFrame
    monthly_means: pd.DataFrame
    annual_means: pd.DataFrame
    trend: pd.Series
    grand_mean: float

    def as_dict(self) -> Dict[str, pd.DataFrame]:
        return {
            'monthly_distribution': self.monthly_distribution,
            'monthly_means': self.monthly_means,
            'annual_means': self.annual_means,
        }


class SummaryCalculator:
    """Compute monthly distributions, monthly/annual means and their anomalies"""

    def __init__(self, parameter: str):
        self.parameter = parameter

    def calculate(self, observations: pd.DataFrame, year_range: Tuple[int, int]) -> SummaryResult:
        """
        Summarize ``observations`` (one row per aggregation bucket, with
        ``year`` and ``month`` columns) over the inclusive ``year_range``.
        """
        start, end = year_range
        grid = pd.MultiIndex.from_product([range(start, end + 1), MONTH_LEVELS], names=['year', 'month'])

        frame = pd.DataFrame({
            'year': observations['year'].astype(int).to_numpy(),
            'month': observations['month'].astype(str).to_numpy(),
            'value': pd.to_numeric(observations[self.parameter], errors='coerce').to_numpy(dtype=float),
        })
        grouped = frame.groupby(['year', 'month'])['value']

        distribution = self._distribution(grouped).reindex(grid)
        distribution['na_count'] = distribution['na_count'].fillna(0).astype(int)

        means = grouped.mean().reindex(grid)
        trend = means.groupby(level='month').mean().reindex(MONTH_LEVELS)
        trend_by_row = pd.Series(means.index.get_level_values('month').map(trend), index=means.index)

        monthly = pd.DataFrame({'mean': means, 'trend': trend_by_row})
        monthly['anomaly'] = monthly['mean'] - monthly['trend']

        annual = means.groupby(level='year').mean().to_frame('mean')
        grand_mean = annual['mean'].mean()
        annual['anomaly'] = annual['mean'] - grand_mean

        result = SummaryResult(
            parameter=self.parameter,
            year_range=(start, end),
            monthly_distribution=self._finish(distribution),
            monthly_means=self._finish(monthly),
            annual_means=annual.reset_index(),
            trend=pd.Series(trend.to_numpy(), index=pd.Index(MONTH_LABELS, name='month'), name='trend'),
            grand_mean=float(grand_mean),
        )
        logger.info(f"Summarized '{self.parameter}' for {start}-{end}: "
                    f"{int(means.notna().sum())} of {len(means)} monthly buckets with data, "
                    f"grand mean {grand_mean:.4g}")
        return result

    @staticmethod
    def _distribution(grouped) -> pd.DataFrame:
        stats = pd.DataFrame({
            'min': grouped.min(),
            'firstq': grouped.quantile(0.25),
            'med': grouped.median(),
            'mean': grouped.mean(),
            'thirdq': grouped.quantile(0.75),
            'max': grouped.max(),
            'na_count': grouped.size() - grouped.count(),
            'var': grouped.var(),
        })
        return stats[DISTRIBUTION_COLUMNS]

    @staticmethod
    def _finish(table: pd.DataFrame) -> pd.DataFrame:
        out = table.reset_index()
        out['month'] = month_label_categorical(out['month'])
        return out
