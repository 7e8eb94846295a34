import pandas as pd

from emonmirror import utils


def test_floor_to_calendar_month():
    off = utils.period_offset("1MS")
    ts = pd.Timestamp("2021-05-17 13:45", tz="UTC")
    assert utils.floor_to_period(ts, off) == pd.Timestamp("2021-05-01", tz="UTC")


def test_floor_to_fixed_duration():
    off = utils.period_offset("15min")
    ts = pd.Timestamp("2021-05-17 13:47:12", tz="UTC")
    assert utils.floor_to_period(ts, off) == pd.Timestamp("2021-05-17 13:45", tz="UTC")


def test_floor_to_week_anchor():
    off = utils.period_offset("W-MON")
    ts = pd.Timestamp("2021-05-20 08:00", tz="UTC")  # Thursday
    assert utils.floor_to_period(ts, off) == pd.Timestamp("2021-05-17", tz="UTC")


def test_period_starts_are_contiguous():
    starts = utils.period_starts(
        pd.Timestamp("2021-01-15", tz="UTC"), pd.Timestamp("2021-04-02", tz="UTC"), utils.period_offset("1MS")
    )
    assert list(starts.month) == [1, 2, 3, 4]
    assert starts.name == "period"


def test_infer_interval_uses_most_common_step():
    idx = pd.Index([0, 10, 20, 30, 100, 110])
    assert utils.infer_interval_seconds(idx) == 10
    assert utils.infer_interval_seconds(pd.Index([5])) is None


def test_merge_series_prefers_newer_values_on_overlap():
    a = utils.build_series([0, 10, 20], [1.0, 1.0, 1.0])
    b = utils.build_series([20, 30], [2.0, 2.0])
    out = utils.merge_series(a, b)
    assert list(out.index) == [0, 10, 20, 30]
    assert out.tolist() == [1.0, 1.0, 2.0, 2.0]


def test_to_epoch_treats_naive_as_utc():
    assert utils.to_epoch("1970-01-01 01:00") == 3600
    assert utils.to_epoch(pd.Timestamp("1970-01-01 01:00", tz="Europe/Berlin")) == 0
