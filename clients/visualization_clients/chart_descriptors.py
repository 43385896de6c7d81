"""
Chart descriptors for the six seasonal/annual summary views.

A descriptor holds the data bound to a chart and how it maps onto the axes
and colour scale. The PlottingClient turns descriptors into matplotlib
figures, but descriptors can be handed to any other plotting backend.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from matplotlib.colors import LinearSegmentedColormap, to_hex

from infrastructure.configuration_manager import ColorSpec
from infrastructure.parameter_labels import get_parameter_label
from processors.summary_calculator import SummaryResult, month_label_categorical
from processors.year_range_selector import MONTH_LABELS

CHART_KINDS = ('jitter_means', 'box', 'histograms', 'heatmap', 'bar_trend')


@dataclass(frozen=True)
class ColorScale:
    """Diverging colour scale with low/mid/high anchors"""
    low: str
    mid: str
    high: str
    midpoint: float = 0.0
    limits: Optional[Tuple[float, float]] = None


@dataclass(eq=False)
class ChartDescriptor:
    kind: str
    data: pd.DataFrame
    x: Optional[str] = None
    y: Optional[str] = None
    fill: Optional[str] = None
    color_scale: Optional[ColorScale] = None
    xlabel: str = ''
    ylabel: str = ''
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.kind not in CHART_KINDS:
            raise ValueError(f"Unknown chart kind: {self.kind}")


def ramp_colors(anchors: Sequence[str], values: pd.Series) -> List[str]:
    """
    Colours interpolated between ``anchors``, assigned by the rank of each value.

    Ties keep their input order and missing values rank last.
    """
    n = len(values)
    if n == 0:
        return []
    cmap = LinearSegmentedColormap.from_list('ramp', list(anchors))
    palette = [to_hex(cmap(i / (n - 1) if n > 1 else 0.0)) for i in range(n)]
    ranks = values.rank(method='first', na_option='bottom').astype(int) - 1
    return [palette[r] for r in ranks]


def linear_fit(x: pd.Series, y: pd.Series) -> pd.Series:
    """Least-squares line through the non-missing points, evaluated at every ``x``"""
    valid = x.notna() & y.notna()
    if valid.sum() < 2:
        return pd.Series(np.nan, index=x.index)
    slope, intercept = np.polyfit(x[valid].astype(float), y[valid].astype(float), 1)
    return intercept + slope * x.astype(float)


def _month_stat(observations: pd.DataFrame, parameter: str, how: str, anchors) -> pd.DataFrame:
    values = observations.groupby('month', observed=False)[parameter].agg(how).reindex(MONTH_LABELS)
    return pd.DataFrame({
        'month': pd.Categorical(MONTH_LABELS, categories=MONTH_LABELS, ordered=True),
        'value': values.to_numpy(),
        'color': ramp_colors(anchors, values.reset_index(drop=True)),
    })


def _symmetric_limits(values: pd.Series) -> Optional[Tuple[float, float]]:
    extent = values.abs().max()
    if pd.isna(extent):
        return None
    return (-float(extent), float(extent))


def build_chart_descriptors(observations: pd.DataFrame, summary: SummaryResult,
                            colors: ColorSpec = ColorSpec()) -> List[ChartDescriptor]:
    """
    Descriptors for the six summary views, top left to bottom right of the
    combined figure:

    1. observations by month with monthly mean markers
    2. monthly box plots filled by median
    3. monthly histograms
    4. heatmap of monthly means by year
    5. heatmap of monthly anomalies by year
    6. annual anomalies with a linear trend
    """
    parameter = summary.parameter
    label = get_parameter_label(parameter)
    low, mid, high = colors.right

    obs = pd.DataFrame({
        'year': observations['year'].to_numpy(),
        'month': month_label_categorical(observations['month']),
        parameter: observations[parameter].to_numpy(),
    })

    means = ChartDescriptor(
        kind='jitter_means', data=obs, x='month', y=parameter,
        xlabel='Monthly distributions and means', ylabel=label,
        extras={'means': _month_stat(obs, parameter, 'mean', colors.left)},
    )

    boxes = ChartDescriptor(
        kind='box', data=obs, x='month', y=parameter,
        xlabel='Monthly distributions and medians', ylabel=label,
        extras={'medians': _month_stat(obs, parameter, 'median', colors.left)},
    )

    spread = obs[parameter].max() - obs[parameter].min()
    histograms = ChartDescriptor(
        kind='histograms', data=obs, x=parameter, xlabel=label,
        extras={
            'binwidth': float(spread) / 30 if pd.notna(spread) and spread > 0 else None,
            'facet_order': list(reversed(MONTH_LABELS)),
            'color': colors.mid,
        },
    )

    monthly = summary.monthly_means
    mean_heatmap = ChartDescriptor(
        kind='heatmap', data=monthly[['year', 'month', 'mean']].copy(),
        x='year', y='month', fill='mean',
        color_scale=ColorScale(low, mid, high, midpoint=float(monthly['mean'].mean())),
        ylabel='Monthly means', extras={'legend_label': label},
    )

    anomaly_heatmap = ChartDescriptor(
        kind='heatmap', data=monthly[['year', 'month', 'anomaly']].copy(),
        x='year', y='month', fill='anomaly',
        color_scale=ColorScale(low, mid, high, midpoint=0.0,
                               limits=_symmetric_limits(monthly['anomaly'])),
        ylabel='Monthly anomalies', extras={'legend_label': label},
    )

    annual = summary.annual_means[['year', 'anomaly']].copy()
    annual_bars = ChartDescriptor(
        kind='bar_trend', data=annual, x='year', y='anomaly', fill='anomaly',
        color_scale=ColorScale(low, mid, high, midpoint=0.0),
        ylabel='Annual anomalies',
        extras={'fitted': linear_fit(annual['year'], annual['anomaly'])},
    )

    return [means, boxes, histograms, mean_heatmap, anomaly_heatmap, annual_bars]
