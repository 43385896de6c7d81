"""
Shared fixtures for the summary toolkit tests
"""

import sys
from pathlib import Path

import matplotlib
matplotlib.use('Agg')

import numpy as np
import pandas as pd
import pytest

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

from processors.timeseries_table import TimeSeriesTable


def daily_frame(start, end, freq='D', **columns):
    """Frame with a datetimestamp column and constant or callable parameter columns"""
    stamps = pd.date_range(start, end, freq=freq)
    data = {'datetimestamp': stamps}
    for name, value in columns.items():
        data[name] = value(stamps) if callable(value) else np.full(len(stamps), value, dtype=float)
    return pd.DataFrame(data)


@pytest.fixture
def salinity_table():
    """Daily water quality series, salinity 30 in 2012 and 32 in 2013"""
    df = daily_frame('2012-01-01', '2013-12-31',
                     sal=lambda s: np.where(s.year == 2012, 30.0, 32.0),
                     temp=lambda s: 10 + s.month.to_numpy(dtype=float))
    return TimeSeriesTable.from_dataframe(df, station_type='waterQuality', station='apacpwq')


@pytest.fixture
def no_february_table():
    """Daily water quality series for 2010-2012 with every February missing"""
    df = daily_frame('2010-01-01', '2012-12-31', freq='D',
                     sal=lambda s: s.month.to_numpy(dtype=float) + (s.year.to_numpy() - 2010) * 0.5)
    df.loc[df['datetimestamp'].dt.month == 2, 'sal'] = np.nan
    return TimeSeriesTable.from_dataframe(df, station_type='waterQuality')


@pytest.fixture
def weather_table():
    """Fifteen-minute weather series over two days with cumulative precipitation"""
    stamps = pd.date_range('2013-06-01', periods=2 * 96, freq='15min')
    step = np.arange(len(stamps)) % 96
    df = pd.DataFrame({
        'datetimestamp': stamps,
        'atemp': np.where(stamps.day == 1, 20.0, 24.0) + (step % 2),
        'cumprcp': np.where(stamps.day == 1, 0.1 * step, 0.2 * step),
    })
    return TimeSeriesTable.from_dataframe(df, station='apaebmet')
