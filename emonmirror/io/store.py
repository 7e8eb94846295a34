from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from .. import canon, exceptions, utils, validate
from ..types import Feed

logger = logging.getLogger(__name__)


def registry_frame(feeds: Iterable[Feed]) -> pd.DataFrame:
    """Registry table: one row per feed, unique on (id, name)."""
    df = pd.DataFrame([f.model_dump() for f in feeds], columns=canon.REGISTRY_COLS)
    if df.duplicated(subset=["id"]).any() or df.duplicated(subset=["name"]).any():
        raise exceptions.ConfigError("Feed ids and names must be unique in the registry.")
    return df.astype({"id": "int64", "starttime": "int64", "interval": "int64"})


def feeds_from_frame(df: pd.DataFrame) -> List[Feed]:
    return [Feed.model_validate(rec) for rec in df[canon.REGISTRY_COLS].to_dict(orient="records")]


class FeedStore:
    """
    Directory of parquet tables: the registry plus one series per feed name.

    NaN is kept as a null value, so missing never reads back as zero.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def feed_path(self, name: str) -> Path:
        return self.path / f"{name}{canon.FEED_EXTENSION}"

    @property
    def registry_path(self) -> Path:
        return self.path / canon.REGISTRY_FILE

    def exists(self, name: str) -> bool:
        return self.feed_path(name).is_file()

    def load(self, name: str) -> pd.Series:
        path = self.feed_path(name)
        if not path.is_file():
            return utils.empty_series()
        df = pd.read_parquet(path)
        return utils.build_series(df.index, df[canon.VALUE_NAME].to_numpy(dtype="float64"))

    def save(self, name: str, series: pd.Series) -> None:
        validate.assert_feed_series(series)
        frame = series.rename(canon.VALUE_NAME).to_frame()
        frame.index.name = canon.INDEX_NAME
        frame.to_parquet(self.feed_path(name))
        logger.debug("Saved %d entries to %s", len(series), self.feed_path(name))

    def has_registry(self) -> bool:
        return self.registry_path.is_file()

    def load_registry(self) -> List[Feed]:
        if not self.has_registry():
            raise exceptions.ConfigError(f"No feed registry at '{self.registry_path}'.")
        return feeds_from_frame(pd.read_parquet(self.registry_path))

    def save_registry(self, feeds: Iterable[Feed]) -> None:
        registry_frame(feeds).to_parquet(self.registry_path, index=False)
