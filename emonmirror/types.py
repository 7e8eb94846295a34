from __future__ import annotations
from typing import List, Optional
from dataclasses import dataclass

import pandas as pd
from pydantic import BaseModel

from .exceptions import SourceError


class Feed(BaseModel):
    """A single uniformly-sampled remote feed.

    Attributes:
        id: Source-side identifier
        name: Unique name, also the local storage key
        unit: Physical unit of the samples (e.g. 'W')
        starttime: Epoch seconds of the first remote sample
        interval: Sampling period in seconds
    """

    id: int
    name: str
    unit: str = "W"
    starttime: int
    interval: int
    model_config = {"frozen": True}


class Connection(BaseModel):
    server_address: str
    apikey: str


class FeedInfo(BaseModel):
    name: str
    time: int  # epoch seconds of the latest remote sample


class FeedMeta(BaseModel):
    start_time: int
    interval: int


@dataclass
class UpdateResult:
    """Outcome of one feed update: the merged series and why it stopped early, if it did."""

    series: pd.Series
    blocks_done: int
    blocks_total: int
    error: Optional[SourceError] = None

    @property
    def complete(self) -> bool:
        return self.error is None and self.blocks_done == self.blocks_total

    @property
    def retryable(self) -> bool:
        return self.error is not None and self.error.retryable


@dataclass
class EnergySummary:
    names: List[str]
    energy: pd.DataFrame  # rows: within-year period 1..N, columns: names
    counts: pd.DataFrame
