"""
Unit tests for year range resolution
"""

import numpy as np
import pandas as pd
import pytest

from infrastructure.fail_fast_validator import InvalidYearRangeError
from processors.year_range_selector import MONTH_LEVELS, resolve_year_range, select_years

DATE_RANGE = (pd.Timestamp('2007-03-01 00:15'), pd.Timestamp('2013-10-31 23:45'))


class TestResolveYearRange:

    def test_defaults_to_data_range(self):
        assert resolve_year_range(None, DATE_RANGE) == (2007, 2013)
        assert resolve_year_range([], DATE_RANGE) == (2007, 2013)

    def test_single_year(self):
        assert resolve_year_range(2010, DATE_RANGE) == (2010, 2010)
        assert resolve_year_range([2010], DATE_RANGE) == (2010, 2010)

    def test_two_years(self):
        assert resolve_year_range((2008, 2011), DATE_RANGE) == (2008, 2011)
        assert resolve_year_range(np.array([2008, 2011]), DATE_RANGE) == (2008, 2011)

    def test_more_than_two_years(self):
        with pytest.raises(InvalidYearRangeError, match='One or two element'):
            resolve_year_range([2008, 2009, 2010], DATE_RANGE)

    def test_reversed_range(self):
        with pytest.raises(InvalidYearRangeError, match='after end year'):
            resolve_year_range([2011, 2008], DATE_RANGE)

    def test_non_integer_year(self):
        with pytest.raises(InvalidYearRangeError):
            resolve_year_range([2008.5], DATE_RANGE)
        with pytest.raises(InvalidYearRangeError):
            resolve_year_range(['last year'], DATE_RANGE)

    def test_empty_series_needs_years(self):
        with pytest.raises(InvalidYearRangeError):
            resolve_year_range(None, (pd.NaT, pd.NaT))


class TestSelectYears:

    def test_filters_and_labels(self):
        frame = pd.DataFrame({
            'datetimestamp': pd.to_datetime(['2009-12-31', '2010-01-01', '2011-07-04', '2012-01-01']),
            'sal': [1.0, 2.0, 3.0, 4.0],
        })
        selected = select_years(frame, (2010, 2011))

        assert selected['sal'].tolist() == [2.0, 3.0]
        assert selected['year'].tolist() == [2010, 2011]
        assert selected['month'].astype(str).tolist() == ['01', '07']
        assert list(selected['month'].cat.categories) == MONTH_LEVELS
        assert 'year' not in frame.columns
