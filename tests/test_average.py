"""Tests for multi-year averaging on a within-year period axis."""

import numpy as np
import pandas as pd
import pytest

from emonmirror import average, utils


def test_axis_length_is_that_of_a_non_leap_year():
    assert average.axis_length("1MS") == 12
    assert average.axis_length("1D") == 365
    assert len(average.year_axis(2020, "1D")) == 365
    assert not ((average.year_axis(2020, "1D").month == 2) & (average.year_axis(2020, "1D").day == 29)).any()


def test_leap_day_is_ignored(hourly_two_years):
    values, counts = average.average_years(hourly_two_years, "1D", [2020, 2021])
    assert len(values) == 365
    assert (counts == 2).all()
    # the Feb 29 spike never shows up, and Feb 28 / Mar 1 stay whole days
    assert values.to_numpy() == pytest.approx(np.full(365, 24.0))


def test_leap_year_axis_matches_non_leap_year(hourly_two_years):
    leap, _ = average.average_years(hourly_two_years, "1D", [2020])
    plain, _ = average.average_years(hourly_two_years, "1D", [2021])
    assert leap.index.equals(plain.index)
    assert leap.to_numpy() == pytest.approx(plain.to_numpy())


def test_monthly_average_over_years(hourly_two_years):
    s = hourly_two_years.copy()
    stamps = utils.epoch_to_datetime(s.index)
    s[np.asarray(stamps.year == 2021)] = 2000.0
    values, counts = average.average_years(s, "1MS", [2020, 2021])
    assert list(values.index) == list(range(1, 13))
    assert (counts == 2).all()
    # mean of 1 kW and 2 kW over a 31-day January
    assert values.loc[1] == pytest.approx(1.5 * 31 * 24)
    # February is 28 days in both years once Feb 29 is dropped
    assert values.loc[2] == pytest.approx(1.5 * 28 * 24)


def test_periods_without_data_are_missing():
    idx = pd.date_range("2021-01-01", "2021-03-31 23:00", freq="1h", tz="UTC")
    s = utils.build_series([utils.to_epoch(t) for t in idx], np.full(len(idx), 1000.0))
    values, counts = average.average_years(s, "1MS", [2020, 2021])
    assert counts.tolist() == [1, 1, 1] + [0] * 9
    assert values.iloc[:3].notna().all()
    assert values.iloc[3:].isna().all()


def test_missing_periods_do_not_count(hourly_two_years):
    s = hourly_two_years.copy()
    stamps = utils.epoch_to_datetime(s.index)
    s[np.asarray((stamps.year == 2021) & (stamps.month == 6))] = np.nan
    values, counts = average.average_years(s, "1MS", [2020, 2021])
    assert counts.loc[6] == 1
    assert values.loc[6] == pytest.approx(30 * 24.0)
