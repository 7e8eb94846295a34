from __future__ import annotations
import numpy as np
import pandas as pd
from typing import Optional

from . import canon, exceptions


def assert_feed_series(series: pd.Series, interval: Optional[int] = None) -> None:
    """Check a feed series is a dense, strictly increasing grid of epoch seconds."""
    if series.index.name != canon.INDEX_NAME:
        raise exceptions.EmonError(f"Index must be '{canon.INDEX_NAME}'.")
    if series.empty:
        return
    if not pd.api.types.is_integer_dtype(series.index.dtype):
        raise exceptions.EmonError("Index must hold integer epoch seconds.")
    steps = np.diff(np.asarray(series.index, dtype="int64"))
    if (steps <= 0).any():
        raise exceptions.EmonError("Index must be strictly increasing.")
    if interval is not None and (steps != interval).any():
        raise exceptions.TimingError(
            f"Series is not a gap-free grid with interval {interval}s."
        )


def validate_block_timing(
    series: pd.Series, block_first: int, block_last: int, interval: int
) -> None:
    """A block must span a whole number of intervals and continue the stored grid."""
    if (block_last - block_first) % interval != 0:
        raise exceptions.TimingError(
            f"Block with start time {block_first} and end time {block_last} "
            f"does not match interval {interval}"
        )
    if not series.empty and (block_first - int(series.index[-1])) % interval != 0:
        raise exceptions.TimingError(
            f"Block start {block_first} is not aligned with stored feed ending at "
            f"{int(series.index[-1])} (interval {interval})"
        )
