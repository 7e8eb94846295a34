"""Tests for the block-wise incremental feed updater."""

import numpy as np
import pandas.testing as pdt
import pytest

from emonmirror import update, utils, validate
from emonmirror.exceptions import RemoteError, TimingError, TransportError

INTERVAL = 10


def _run(source, series, end, max_samples=30, start=0):
    return update.update_feed_series(
        source.fetch_range, series, 1, start, end, INTERVAL, name="test", max_samples=max_samples
    )


def test_block_bounds_cover_range_in_order():
    assert list(update.block_bounds(0, 100, 10, max_samples=4)) == [
        (0, 30),
        (40, 70),
        (80, 90),
    ]


def test_block_bounds_empty_when_caught_up():
    assert list(update.block_bounds(100, 100, 10)) == []
    assert list(update.block_bounds(110, 100, 10)) == []


def test_resume_point_follows_tail():
    s = utils.build_series([0, 10, 20], [1.0, 1.0, 1.0])
    assert update.resume_point(s, 0, 10) == 30
    assert update.resume_point(utils.empty_series(), 5000, 10) == 5000


def test_full_update_builds_dense_grid(fake_source, gappy_samples):
    src = fake_source({1: gappy_samples})
    res = _run(src, utils.empty_series(), 1000)
    assert res.complete and res.error is None
    s = res.series
    validate.assert_feed_series(s, INTERVAL)
    assert s.index[0] == 0 and s.index[-1] == 990
    assert len(s) == 100
    # absent ticks and the null sample are both missing
    assert s.isna().sum() == 6 + 1
    assert s.loc[990] == 990.0


def test_rerun_without_new_data_is_unchanged(fake_source, gappy_samples):
    src = fake_source({1: gappy_samples})
    first = _run(src, utils.empty_series(), 1000).series
    again = _run(src, first, 1000)
    assert again.blocks_total == 0
    pdt.assert_series_equal(again.series, first)


def test_rerun_past_remote_end_does_not_grow(fake_source, gappy_samples):
    src = fake_source({1: gappy_samples})
    first = _run(src, utils.empty_series(), 1000).series
    again = _run(src, first, 2000)
    pdt.assert_series_equal(again.series, first)


@pytest.mark.parametrize("split", [120, 260, 500, 710])
def test_resuming_matches_single_pass(fake_source, gappy_samples, split):
    direct = _run(fake_source({1: gappy_samples}), utils.empty_series(), 1000).series

    src = fake_source({1: gappy_samples})
    partial = _run(src, utils.empty_series(), split, max_samples=7).series
    resumed = _run(src, partial, 1000, max_samples=7).series

    pdt.assert_series_equal(resumed, direct)


def test_failed_block_keeps_earlier_blocks_and_stops(fake_source, samples):
    times = np.arange(0, 90, INTERVAL)
    src = fake_source({1: samples(times, np.ones(len(times)))}, fail_on={2})
    res = _run(src, utils.empty_series(), 90, max_samples=3)

    assert res.blocks_total == 3
    assert res.blocks_done == 1
    assert list(res.series.index) == [0, 10, 20]
    assert len(src.calls) == 2  # block 3 never requested
    assert isinstance(res.error, TransportError)
    assert res.retryable and not res.complete


def test_remote_failure_is_not_retryable(fake_source, samples):
    times = np.arange(0, 60, INTERVAL)
    src = fake_source({1: samples(times, np.ones(len(times)))}, fail_on={1}, error=RemoteError)
    res = _run(src, utils.empty_series(), 60, max_samples=3)
    assert res.series.empty
    assert isinstance(res.error, RemoteError)
    assert not res.retryable


def test_timing_error_propagates(fake_source, samples):
    src = fake_source({1: samples([15, 25], [1.0, 1.0])})
    stored = utils.build_series([0], [1.0])
    with pytest.raises(TimingError):
        _run(src, stored, 30)
