from __future__ import annotations
from typing import Final, Dict

INDEX_NAME: Final[str] = "time"
VALUE_NAME: Final[str] = "value"
PERIOD_NAME: Final[str] = "period"
DEFAULT_UNIT: Final[str] = "W"
DEFAULT_ENERGY_UNIT: Final[str] = "kWh"
UNKNOWN_FEED: Final[str] = "Unknown"

# Largest number of entries the remote returns for a single data request
MAX_BLOCK_SAMPLES: Final[int] = 8928

# Any non-leap year gives the within-year period axis
REFERENCE_YEAR: Final[int] = 2001

CONNECTION_FILE: Final[str] = "connection.json"
REGISTRY_FILE: Final[str] = "feeds.parquet"
FEED_EXTENSION: Final[str] = ".parquet"
EXPORT_REGISTRY_FILE: Final[str] = "feedlist.csv"

REGISTRY_COLS: Final[list[str]] = ["id", "unit", "name", "starttime", "interval"]

# Joules per unit
ENERGY_UNITS: Dict[str, float] = {
    "J": 1.0,
    "Wh": 3600.0,
    "kWh": 3.6e6,
    "MWh": 3.6e9,
}

# Watts per unit
POWER_UNITS: Dict[str, float] = {
    "W": 1.0,
    "kW": 1e3,
    "MW": 1e6,
}
