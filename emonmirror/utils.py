# emonmirror/utils.py
from __future__ import annotations
import numpy as np
import pandas as pd
from datetime import datetime
from numpy.typing import ArrayLike

from pandas.tseries.frequencies import to_offset
from pandas.tseries.offsets import BaseOffset, Tick

from . import canon


def empty_series() -> pd.Series:
    idx = pd.Index([], dtype="int64", name=canon.INDEX_NAME)
    return pd.Series([], index=idx, dtype="float64", name=canon.VALUE_NAME)


def build_series(times: ArrayLike, values: ArrayLike) -> pd.Series:
    """Feed series from epoch seconds and values; None becomes NaN."""
    idx = pd.Index(np.asarray(times, dtype="int64"), name=canon.INDEX_NAME)
    vals = np.asarray(values, dtype="float64")
    return pd.Series(vals, index=idx, name=canon.VALUE_NAME)


def merge_series(left: pd.Series, right: pd.Series) -> pd.Series:
    """
    Key-preserving union of two feed series.

    Keys present in both keep the value from `right`. When `right` starts
    after `left` ends this is a plain append.
    """
    if left.empty:
        return right.rename(canon.VALUE_NAME)
    if right.empty:
        return left
    out = pd.concat([left, right])
    if right.index[0] <= left.index[-1]:
        out = out[~out.index.duplicated(keep="last")].sort_index()
    out.index.name = canon.INDEX_NAME
    out.name = canon.VALUE_NAME
    return out


def to_seconds(millis: int | float) -> int:
    return int(millis) // 1000


def to_epoch(ts: datetime | pd.Timestamp | str) -> int:
    """Epoch seconds for a timestamp; naive values are taken as UTC."""
    t = pd.Timestamp(ts)
    if t.tz is None:
        t = t.tz_localize("UTC")
    return int(t.timestamp())


def infer_interval_seconds(idx: pd.Index, default: int | None = None) -> int | None:
    """
    Infer the sampling interval in seconds as the most common positive step.
    """
    ts = np.unique(np.asarray(idx, dtype="int64"))
    if len(ts) < 2:
        return default

    diffs = np.diff(ts)
    diffs = diffs[diffs > 0]
    if len(diffs) == 0:
        return default

    vals, counts = np.unique(diffs, return_counts=True)
    return int(vals[np.argmax(counts)])


def period_offset(period: str | pd.Timedelta | BaseOffset) -> BaseOffset:
    if isinstance(period, BaseOffset):
        return period
    return to_offset(period)


def floor_to_period(ts: pd.Timestamp, offset: BaseOffset) -> pd.Timestamp:
    """Start of the period containing ts (calendar aware for non-fixed offsets)."""
    if isinstance(offset, Tick):
        return ts.floor(offset)
    return offset.rollback(ts.normalize())


def period_starts(
    first: pd.Timestamp, last: pd.Timestamp, offset: BaseOffset
) -> pd.DatetimeIndex:
    """Contiguous period starts covering [first, last]."""
    start = floor_to_period(first, offset)
    end = floor_to_period(last, offset)
    out = pd.date_range(start=start, end=end, freq=offset)
    out.name = canon.PERIOD_NAME
    return out


def epoch_to_datetime(times: np.ndarray | pd.Index) -> pd.DatetimeIndex:
    return pd.DatetimeIndex(pd.to_datetime(np.asarray(times, dtype="int64"), unit="s", utc=True))


def is_leap_day(idx: pd.DatetimeIndex) -> np.ndarray:
    return np.asarray((idx.month == 2) & (idx.day == 29))


def energy_factor(unit: str) -> float:
    """Joules per `unit`."""
    try:
        return canon.ENERGY_UNITS[unit]
    except KeyError:
        raise ValueError(
            f"Unknown energy unit {unit!r}. Expected one of: {', '.join(canon.ENERGY_UNITS)}"
        ) from None


def power_factor(unit: str) -> float:
    """Watts per `unit`."""
    try:
        return canon.POWER_UNITS[unit]
    except KeyError:
        raise ValueError(
            f"Unknown power unit {unit!r}. Expected one of: {', '.join(canon.POWER_UNITS)}"
        ) from None
