from __future__ import annotations
import numpy as np
import pandas as pd
from typing import Iterable
from pandas.tseries.offsets import BaseOffset

from . import canon, integrate, utils


def year_axis(year: int, period: str | BaseOffset) -> pd.DatetimeIndex:
    """Period starts covering one calendar year, without any starting on Feb 29."""
    offset = utils.period_offset(period)
    starts = utils.period_starts(
        pd.Timestamp(year=year, month=1, day=1, tz="UTC"),
        pd.Timestamp(year=year, month=12, day=31, hour=23, minute=59, second=59, tz="UTC"),
        offset,
    )
    return starts[~utils.is_leap_day(starts)]


def axis_length(period: str | BaseOffset) -> int:
    return len(year_axis(canon.REFERENCE_YEAR, period))


def average_years(
    series: pd.Series,
    period: str | BaseOffset,
    years: Iterable[int],
    unit: str = canon.DEFAULT_ENERGY_UNIT,
    allowed_missing: float = 0.0,
) -> tuple[pd.Series, pd.Series]:
    """
    Mean energy per within-year period across `years`.

    Feb 29 is dropped from every year so all years share one period axis,
    whose length is that of a non-leap year. Periods past the axis end are
    ignored.

    Returns (values, counts) indexed 1..N; `counts` is how many years had a
    value for the period and `values` is NaN where no year did.
    """
    offset = utils.period_offset(period)
    n = axis_length(offset)
    sums = np.zeros(n)
    counts = np.zeros(n, dtype="int64")

    stamps = utils.epoch_to_datetime(series.index)
    for year in years:
        mask = np.asarray(stamps.year == year) & ~utils.is_leap_day(stamps)
        if not mask.any():
            continue
        sub = series[mask]
        sub.attrs = dict(series.attrs)

        energy = integrate.energy_per_period(sub, offset, unit, allowed_missing)
        energy = energy[~utils.is_leap_day(pd.DatetimeIndex(energy.index))]

        pos = year_axis(year, offset).get_indexer(energy.index)
        vals = energy.to_numpy()
        ok = (pos >= 0) & (pos < n) & ~np.isnan(vals)
        np.add.at(sums, pos[ok], vals[ok])
        np.add.at(counts, pos[ok], 1)

    idx = pd.RangeIndex(1, n + 1, name=canon.PERIOD_NAME)
    count_s = pd.Series(counts, index=idx, name="count")
    # zero-count periods divide by NaN and come out missing
    values = (pd.Series(sums, index=idx) / count_s.where(count_s > 0)).rename("energy")
    return values, count_s
