"""
Unit tests for the time series table model
"""

import numpy as np
import pandas as pd
import pytest

from processors.timeseries_table import StationType, TimeSeriesTable, TimeSeriesTableError


class TestStationType:

    @pytest.mark.parametrize("code, expected", [
        ('apacpnut', StationType.NUTRIENT),
        ('apaebwq', StationType.WATER_QUALITY),
        ('APAEBMET', StationType.WEATHER),
    ])
    def test_from_station_code(self, code, expected):
        assert StationType.from_station_code(code) is expected

    def test_unknown_station_code(self):
        with pytest.raises(TimeSeriesTableError):
            StationType.from_station_code('apaeb')

    def test_parse_value_and_name(self):
        assert StationType.parse('waterQuality') is StationType.WATER_QUALITY
        assert StationType.parse('weather') is StationType.WEATHER
        assert StationType.parse('nutrient') is StationType.NUTRIENT
        assert StationType.parse('WATER_QUALITY') is StationType.WATER_QUALITY

    def test_parse_rejects_unknown(self):
        with pytest.raises(TimeSeriesTableError):
            StationType.parse('river')


class TestTimeSeriesTable:

    def test_from_dataframe_sorts_and_defaults_parameters(self):
        df = pd.DataFrame({
            'datetimestamp': ['2012-01-02', '2012-01-01'],
            'sal': [2.0, 1.0],
            'temp': ['5', 'bad'],
        })
        table = TimeSeriesTable.from_dataframe(df, station='apacpwq')

        assert table.station_type is StationType.WATER_QUALITY
        assert table.parameters == ('sal', 'temp')
        assert list(table.data['sal']) == [1.0, 2.0]
        assert np.isnan(table.data['temp'].iloc[0])
        assert table.date_range == (pd.Timestamp('2012-01-01'), pd.Timestamp('2012-01-02'))
        assert table.years == (2012, 2012)
        assert len(table) == 2

    def test_from_dataframe_does_not_modify_input(self):
        df = pd.DataFrame({'datetimestamp': ['2012-01-02', '2012-01-01'], 'sal': [2.0, 1.0]})
        TimeSeriesTable.from_dataframe(df, station_type='waterQuality')
        assert list(df['sal']) == [2.0, 1.0]

    def test_explicit_parameters(self):
        df = pd.DataFrame({'datetimestamp': pd.to_datetime(['2012-01-01']), 'sal': [1.0], 'f_sal': ['<0>']})
        table = TimeSeriesTable.from_dataframe(df, station_type='waterQuality', parameters=['sal'])
        assert table.parameters == ('sal',)

    def test_requires_station_type_or_code(self):
        df = pd.DataFrame({'datetimestamp': pd.to_datetime(['2012-01-01']), 'sal': [1.0]})
        with pytest.raises(TimeSeriesTableError):
            TimeSeriesTable.from_dataframe(df)

    def test_missing_timestamp_column(self):
        df = pd.DataFrame({'date': pd.to_datetime(['2012-01-01']), 'sal': [1.0]})
        with pytest.raises(TimeSeriesTableError):
            TimeSeriesTable.from_dataframe(df, station_type='waterQuality')

    def test_rejects_duplicate_timestamps(self):
        df = pd.DataFrame({'datetimestamp': pd.to_datetime(['2012-01-01', '2012-01-01']), 'sal': [1.0, 2.0]})
        with pytest.raises(TimeSeriesTableError):
            TimeSeriesTable(data=df, station_type=StationType.WATER_QUALITY)

    def test_rejects_unsorted_timestamps(self):
        df = pd.DataFrame({'datetimestamp': pd.to_datetime(['2012-01-02', '2012-01-01']), 'sal': [1.0, 2.0]})
        with pytest.raises(TimeSeriesTableError):
            TimeSeriesTable(data=df, station_type=StationType.WATER_QUALITY)

    def test_rejects_timezone_aware_timestamps(self):
        df = pd.DataFrame({
            'datetimestamp': pd.date_range('2012-01-01', '2013-12-31', freq='D', tz='Etc/GMT+5'),
            'sal': 30.0,
        })
        df = df[df['datetimestamp'].dt.month != 3]
        with pytest.raises(TimeSeriesTableError, match='timezone'):
            TimeSeriesTable.from_dataframe(df, station_type='waterQuality')

    def test_rejects_undeclared_columns(self):
        df = pd.DataFrame({'datetimestamp': pd.to_datetime(['2012-01-01']), 'sal': [1.0]})
        with pytest.raises(TimeSeriesTableError):
            TimeSeriesTable(data=df, station_type=StationType.WATER_QUALITY, parameters=('do_mgl',))

    def test_with_data_keeps_metadata(self, salinity_table):
        subset = salinity_table.data.iloc[:10].copy()
        new_table = salinity_table.with_data(subset)

        assert new_table is not salinity_table
        assert new_table.station == 'apacpwq'
        assert new_table.parameters == salinity_table.parameters
        assert new_table.date_range[1] == pd.Timestamp('2012-01-10')
