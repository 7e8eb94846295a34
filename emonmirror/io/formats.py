from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from .. import canon, exceptions, utils
from ..types import Feed
from .store import FeedStore, feeds_from_frame, registry_frame

logger = logging.getLogger(__name__)


def _refuse_existing(path: Path) -> None:
    if path.exists():
        raise exceptions.ExportError(f"Refusing to overwrite existing file '{path}'.")


def export_csv(store: FeedStore, feeds: Iterable[Feed], directory: str | Path) -> List[Path]:
    """
    Write feedlist.csv and one <name>.csv per feed into `directory`.

    Missing values are written as empty cells. Nothing is written if any
    destination file already exists.
    """
    out_dir = Path(directory)
    if not out_dir.is_dir():
        raise exceptions.ConfigError(f"'{out_dir}' is not a directory.")

    feeds = list(feeds)
    targets = [out_dir / canon.EXPORT_REGISTRY_FILE] + [out_dir / f"{f.name}.csv" for f in feeds]
    for path in targets:
        _refuse_existing(path)

    registry_frame(feeds).to_csv(targets[0], index=False)
    for feed, path in zip(feeds, targets[1:]):
        store.load(feed.name).to_frame().to_csv(path)
        logger.info("Exported feed %s to %s", feed.name, path)
    return targets


def import_feed(path: str | Path) -> pd.Series:
    df = pd.read_csv(path, dtype={canon.VALUE_NAME: "float64"})
    return utils.build_series(df[canon.INDEX_NAME], df[canon.VALUE_NAME])


def import_feed_list(path: str | Path) -> List[Feed]:
    return feeds_from_frame(pd.read_csv(path))
