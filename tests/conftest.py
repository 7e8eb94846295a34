import numpy as np
import pandas as pd
import pytest

from emonmirror import utils
from emonmirror.exceptions import TransportError
from emonmirror.types import FeedInfo, FeedMeta

INTERVAL = 10


def make_samples(times, values):
    """Remote-style [timestamp_ms, value] pairs."""
    return [[int(t) * 1000, v] for t, v in zip(times, values)]


class FakeSource:
    """In-memory feed source; `fail_on` lists 1-based fetch calls that raise."""

    def __init__(self, feeds, names=None, interval=INTERVAL, fail_on=(), error=TransportError):
        self.feeds = feeds
        self.names = names or {fid: f"feed{fid}" for fid in feeds}
        self.interval = interval
        self.fail_on = set(fail_on)
        self.error = error
        self.calls = []

    def list_feeds(self):
        return [{"id": fid, "name": self.names[fid]} for fid in self.feeds]

    def feed_info(self, feed_id):
        return FeedInfo(name=self.names[feed_id], time=self.feeds[feed_id][-1][0] // 1000)

    def feed_meta(self, feed_id):
        return FeedMeta(start_time=self.feeds[feed_id][0][0] // 1000, interval=self.interval)

    def fetch_range(self, feed_id, start, end, interval):
        self.calls.append((feed_id, start, end))
        if len(self.calls) in self.fail_on:
            raise self.error(f"fetch {len(self.calls)} failed")
        return [p for p in self.feeds[feed_id] if start * 1000 <= p[0] <= end * 1000]


@pytest.fixture
def gappy_samples():
    # 0..990s at 10s, with 200..250 absent from the remote and 400 reported as null
    times = [t for t in range(0, 1000, INTERVAL) if not 200 <= t <= 250]
    values = [None if t == 400 else float(t) for t in times]
    return make_samples(times, values)


@pytest.fixture
def constant_series():
    # 100 W from t=0 to t=490
    return utils.build_series(np.arange(0, 500, INTERVAL), np.full(50, 100.0))


@pytest.fixture
def hourly_two_years():
    # 1 kW every hour through 2020 (leap) and 2021; Feb 29 carries a spike
    idx = pd.date_range("2020-01-01", "2021-12-31 23:00", freq="1h", tz="UTC")
    values = np.full(len(idx), 1000.0)
    values[(idx.month == 2) & (idx.day == 29)] = 1e6
    seconds = (idx - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(seconds=1)
    return utils.build_series(seconds, values)


@pytest.fixture
def fake_source():
    return FakeSource


@pytest.fixture
def samples():
    return make_samples
