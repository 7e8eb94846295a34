from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from . import average, canon, exceptions, summary, update as updater, utils
from .config import MirrorConfig, default_config
from .io import formats
from .io.store import FeedStore
from .source import EmonClient, FeedSource
from .types import Connection, EnergySummary, Feed, UpdateResult

logger = logging.getLogger(__name__)


@dataclass
class EmonDataSet:
    path: Path
    connection: Connection

    @property
    def store(self) -> FeedStore:
        return FeedStore(self.path)

    @property
    def connection_file(self) -> Path:
        return self.path / canon.CONNECTION_FILE


def create_dataset(path: str | Path, server_address: str, apikey: str) -> EmonDataSet:
    """Dataset handle for an existing directory; nothing is written until `update`."""
    p = Path(path)
    if not p.is_dir():
        raise exceptions.ConfigError(f"'{p}' is not a directory, please create it first.")
    return EmonDataSet(p, Connection(server_address=server_address, apikey=apikey))


def open_dataset(path: str | Path) -> EmonDataSet:
    p = Path(path)
    conn_file = p / canon.CONNECTION_FILE
    if not conn_file.is_file():
        raise exceptions.ConfigError(
            f"No existing database at '{p}'. Create one with create_dataset(path, server_address, apikey)."
        )
    return EmonDataSet(p, Connection.model_validate_json(conn_file.read_text()))


def write_connection(ds: EmonDataSet) -> None:
    logger.info("Creating new database at '%s'", ds.path)
    ds.connection_file.write_text(ds.connection.model_dump_json(indent=2) + "\n")


def _register_feeds(
    source: FeedSource, feed_ids: Sequence[int], unit: str
) -> List[Feed]:
    logger.info("Creating new feeds list")
    feeds = []
    for feed_id in feed_ids:
        info = source.feed_info(feed_id)
        meta = source.feed_meta(feed_id)
        feeds.append(
            Feed(
                id=feed_id,
                name=info.name,
                unit=unit,
                starttime=meta.start_time,
                interval=meta.interval,
            )
        )
    return feeds


def update(
    ds: EmonDataSet,
    *,
    end_time: Optional[datetime | pd.Timestamp | str] = None,
    feeds: Optional[Iterable[int]] = None,
    source: Optional[FeedSource] = None,
    config: Optional[MirrorConfig] = None,
) -> Dict[str, UpdateResult]:
    """
    Bring every registered feed up to date and persist it.

    - The first run needs `feeds` (remote ids) to build the registry; later
      runs must not pass any.
    - Each feed is fetched up to and including its latest remote sample,
      or up to `end_time` when given.
    - A feed whose run stopped on a source error is saved with the progress
      made. A feed hitting a timing error is logged and left untouched.
    """
    cfg = config or default_config()
    src = source or EmonClient(ds.connection, timeout=cfg.source.timeout_s)
    store = ds.store
    feed_ids = list(feeds or [])

    if not ds.connection_file.is_file():
        write_connection(ds)

    if not store.has_registry():
        if not feed_ids:
            raise exceptions.ConfigError(
                "No existing feeds list found, and no feeds given. Call update with feeds=[id1, id2, ...]"
            )
        registry = _register_feeds(src, feed_ids, cfg.source.default_unit)
        store.save_registry(registry)
    else:
        if feed_ids:
            raise exceptions.ConfigError(
                "Feeds table exists, can't add new feeds. Call update without a feed list or create a new database"
            )
        registry = store.load_registry()

    end_limit = utils.to_epoch(end_time) if end_time is not None else None
    results: Dict[str, UpdateResult] = {}
    for feed in registry:
        if end_limit is not None:
            range_end = end_limit
        else:
            try:
                range_end = src.feed_info(feed.id).time + feed.interval
            except exceptions.SourceError as e:
                logger.warning("Skipping feed %s: %s", feed.name, e)
                continue
        try:
            result = updater.update_feed_series(
                src.fetch_range,
                store.load(feed.name),
                feed.id,
                feed.starttime,
                range_end,
                feed.interval,
                name=feed.name,
                max_samples=cfg.source.max_block_samples,
            )
        except exceptions.TimingError as e:
            logger.error("Feed %s not updated: %s", feed.name, e)
            continue
        store.save(feed.name, result.series)
        results[feed.name] = result
    return results


def feed_list(ds: EmonDataSet) -> List[Feed]:
    return ds.store.load_registry()


def get_feed(ds: EmonDataSet, name: str) -> pd.Series:
    """Stored series for `name`, with its unit in `attrs['unit']`."""
    matches = [f for f in feed_list(ds) if f.name == name]
    if not matches:
        raise exceptions.ConfigError(f"No feed named '{name}' in the registry.")
    series = ds.store.load(name)
    series.attrs["unit"] = matches[0].unit
    return series


def energy_summary(
    ds: EmonDataSet,
    *,
    years: Iterable[int],
    period: str = "1MS",
    total_power_feeds: Sequence[str],
    unit: Optional[str] = None,
    allowed_missing: Optional[float] = None,
    config: Optional[MirrorConfig] = None,
) -> EnergySummary:
    """Multi-year averaged energy for every registered feed, with the Unknown residual."""
    cfg = config or default_config()
    unit = unit or cfg.integration.energy_unit
    allowed = cfg.integration.allowed_missing if allowed_missing is None else allowed_missing
    years = list(years)

    names = [f.name for f in feed_list(ds)]
    averaged = {
        name: average.average_years(get_feed(ds, name), period, years, unit, allowed)
        for name in dict.fromkeys([*names, *total_power_feeds])
    }
    return summary.summarise(names, averaged, total_power_feeds)


def export_csv(ds: EmonDataSet, directory: str | Path) -> List[Path]:
    return formats.export_csv(ds.store, feed_list(ds), directory)
