from __future__ import annotations
import numpy as np
import pandas as pd
from typing import Sequence

from . import exceptions, utils, validate

Block = Sequence[Sequence[float | None]]


def append_block(
    series: pd.Series,
    block: Block,
    interval: int,
    block_start: int,
    block_end: int,
) -> pd.Series:
    """
    Fold one fetched block of (timestamp_ms, value) pairs onto a feed series.

    - The new ticks run from one interval after the stored tail (or the
      block's first timestamp) up to the block's last timestamp.
    - Every tick is created; ticks without a sample in
      [block_start, block_end] are NaN.
    - Raises TimingError before touching anything if the block does not
      fit the interval grid.
    """
    if len(block) == 0:
        return series

    first = utils.to_seconds(block[0][0])
    last = utils.to_seconds(block[-1][0])
    validate.validate_block_timing(series, first, last, interval)

    start = first if series.empty else int(series.index[-1]) + interval
    times = np.arange(start, last + 1, interval, dtype="int64")
    values = np.full(len(times), np.nan)

    for t_ms, v in block:
        t = utils.to_seconds(t_ms)
        if t < block_start or t > block_end or t < start:
            continue
        offset = t - start
        exceptions.require(
            offset % interval == 0,
            f"Sample at {t} is off the grid starting at {start}",
            exceptions.TimingError,
        )
        values[offset // interval] = np.nan if v is None else float(v)

    return utils.merge_series(series, utils.build_series(times, values))
