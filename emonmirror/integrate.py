from __future__ import annotations
import numpy as np
import pandas as pd
from pandas.tseries.offsets import BaseOffset

from . import canon, utils


def _empty_energy() -> pd.Series:
    idx = pd.DatetimeIndex([], tz="UTC", name=canon.PERIOD_NAME)
    return pd.Series([], index=idx, dtype="float64", name="energy")


def _period_energy(
    times: np.ndarray,
    values: np.ndarray,
    interval: int,
    allowed_missing: float,
    real: int,
) -> float:
    """
    Trapezoidal energy in joules for one bracketed slice, or NaN.

    Only the first `real` entries are stored samples; a trailing held tick
    after them is used for the area but never counted as a sample.
    """
    if real < 2:
        return np.nan
    missing = np.isnan(values)
    if missing.any():
        if missing[:real].mean() > allowed_missing:
            return np.nan
        values = np.where(missing, 0.0, values)
    steps = np.diff(times)
    if (steps > interval).any():
        # a tick followed by absent ticks is held for one interval only
        areas = np.where(
            steps > interval,
            values[:-1] * interval,
            (values[1:] + values[:-1]) / 2.0 * steps,
        )
        return float(areas.sum())
    return float(np.trapezoid(values, times))


def energy_per_period(
    series: pd.Series,
    period: str | pd.Timedelta | BaseOffset,
    unit: str = canon.DEFAULT_ENERGY_UNIT,
    allowed_missing: float = 0.0,
) -> pd.Series:
    """
    Integrate a power series to energy per period.

    - Periods start at the floor of the first sample and run contiguously
      to the period holding the last sample. Both fixed (e.g. '100s') and
      calendar periods ('1D', 'W-MON', '1MS') are supported.
    - Each period takes the samples between the last tick at or before its
      start and the first tick at or after its end.
    - Missing samples are zero-filled when their share of the slice does not
      exceed `allowed_missing`; otherwise the period is NaN.
    - The final tick is held for one sampling interval so the last period
      is closed like the others. A period needs at least two stored
      samples; with fewer it is NaN.
    - Across absent ticks (such as an excluded leap day) the sample before
      the hole is likewise held for one interval and nothing more.

    Returns a Series indexed by period start (UTC) in `unit`.
    """
    if series.empty:
        return _empty_energy()

    offset = utils.period_offset(period)
    to_unit = utils.power_factor(series.attrs.get("unit", canon.DEFAULT_UNIT)) / utils.energy_factor(unit)

    times = np.asarray(series.index, dtype="int64")
    values = series.to_numpy(dtype="float64", na_value=np.nan)

    bounds = utils.epoch_to_datetime(times[[0, -1]])
    periods = utils.period_starts(bounds[0], bounds[1], offset)

    interval = utils.infer_interval_seconds(series.index)
    if interval is None:
        return pd.Series(np.nan, index=periods, name="energy")
    n_real = len(times)
    times = np.append(times, times[-1] + interval)
    values = np.append(values, values[-1])

    n = len(times)
    energy = np.full(len(periods), np.nan)
    for i, p in enumerate(periods):
        period_start = int(p.timestamp())
        period_end = int((p + offset).timestamp())
        first = max(int(np.searchsorted(times, period_start, side="right")) - 1, 0)
        last = min(int(np.searchsorted(times, period_end, side="left")), n - 1)
        energy[i] = _period_energy(
            times[first : last + 1],
            values[first : last + 1],
            interval,
            allowed_missing,
            real=min(last, n_real - 1) - first + 1,
        )

    return pd.Series(energy * to_unit, index=periods, name="energy")
