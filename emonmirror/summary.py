from __future__ import annotations
import pandas as pd
from typing import Mapping, Sequence

from . import canon, exceptions
from .types import EnergySummary

Averaged = Mapping[str, tuple[pd.Series, pd.Series]]


def total_energy(averaged: Averaged, total_power_feeds: Sequence[str]) -> pd.Series:
    """
    Element-wise sum of the total-power feeds.

    Missing entries contribute nothing; a period where every feed is missing
    stays missing.
    """
    cols = [averaged[name][0].rename(i) for i, name in enumerate(total_power_feeds)]
    return pd.concat(cols, axis=1).sum(axis=1, min_count=1).rename("total")


def summarise(
    feeds: Sequence[str],
    averaged: Averaged,
    total_power_feeds: Sequence[str],
) -> EnergySummary:
    """
    Combine per-feed averaged energy into one matrix.

    Columns are 'Unknown' followed by every feed not listed in
    `total_power_feeds`. 'Unknown' is the total minus the known feeds, so
    each row sums to the total. Its counts are those of the first total
    feed.
    """
    exceptions.require(
        len(total_power_feeds) > 0, "At least one total power feed is required."
    )
    needed = [*feeds, *total_power_feeds]
    absent = [name for name in dict.fromkeys(needed) if name not in averaged]
    exceptions.require(
        not absent, f"No averaged energy for feeds: {', '.join(absent)}"
    )

    total = total_energy(averaged, total_power_feeds)
    known = [name for name in feeds if name not in set(total_power_feeds)]

    known_energy = pd.DataFrame({name: averaged[name][0] for name in known}, index=total.index)
    known_counts = pd.DataFrame({name: averaged[name][1] for name in known}, index=total.index)

    unknown = total - known_energy.sum(axis=1)
    energy = pd.concat([unknown.rename(canon.UNKNOWN_FEED), known_energy], axis=1)
    counts = pd.concat(
        [averaged[total_power_feeds[0]][1].rename(canon.UNKNOWN_FEED), known_counts], axis=1
    )
    counts = counts.astype("int64")

    names = [canon.UNKNOWN_FEED, *known]
    return EnergySummary(names=names, energy=energy[names], counts=counts[names])
