"""Local persistence: parquet feed store and CSV export."""

from . import formats, store

__all__ = ["formats", "store"]
