from __future__ import annotations

import logging
import math
from typing import Callable, Iterator

import pandas as pd

from . import canon, merge
from .exceptions import SourceError
from .types import UpdateResult

logger = logging.getLogger(__name__)

Fetcher = Callable[[int, int, int, int], merge.Block]


def resume_point(series: pd.Series, range_start: int, interval: int) -> int:
    return range_start if series.empty else int(series.index[-1]) + interval


def block_bounds(
    start: int,
    end: int,
    interval: int,
    max_samples: int = canon.MAX_BLOCK_SAMPLES,
) -> Iterator[tuple[int, int]]:
    """
    Yield inclusive (block_start, block_end) tick bounds covering [start, end).

    Each block holds at most `max_samples` ticks.
    """
    nsteps = math.ceil((end - start) / interval) if end > start else 0
    nblocks = math.ceil(nsteps / max_samples)
    last_tick = start + (nsteps - 1) * interval
    for i in range(nblocks):
        block_start = start + i * max_samples * interval
        block_end = min(block_start + (max_samples - 1) * interval, last_tick)
        yield block_start, block_end


def update_feed_series(
    fetch: Fetcher,
    series: pd.Series,
    feed_id: int,
    range_start: int,
    range_end: int,
    interval: int,
    *,
    name: str = "",
    max_samples: int = canon.MAX_BLOCK_SAMPLES,
) -> UpdateResult:
    """
    Extend a feed series with remote samples for ticks before `range_end`.

    Blocks are fetched in time order. A SourceError stops the run: the
    blocks merged so far are kept and the error is carried on the result.
    TimingError is not caught.
    """
    label = name or str(feed_id)
    start = resume_point(series, range_start, interval)
    bounds = list(block_bounds(start, range_end, interval, max_samples))
    logger.info("Appending %d blocks to feed %s", len(bounds), label)

    before = len(series)
    done = 0
    error: SourceError | None = None
    for block_start, block_end in bounds:
        try:
            block = fetch(feed_id, block_start, block_end, interval)
        except SourceError as e:
            logger.warning("Aborting update of feed %s with error: %s", label, e)
            error = e
            break
        series = merge.append_block(series, block, interval, block_start, block_end)
        done += 1
        logger.debug(
            "Feed %s: merged block %d/%d [%d, %d]",
            label, done, len(bounds), block_start, block_end,
        )

    logger.info("Appended %d entries to feed %s", len(series) - before, label)
    return UpdateResult(series=series, blocks_done=done, blocks_total=len(bounds), error=error)
