from __future__ import annotations

from dataclasses import dataclass, field

from . import canon


@dataclass
class SourceConfig:
    timeout_s: float = 30.0
    max_block_samples: int = canon.MAX_BLOCK_SAMPLES
    default_unit: str = canon.DEFAULT_UNIT  # feeds are registered with this unit


@dataclass
class IntegrationConfig:
    energy_unit: str = canon.DEFAULT_ENERGY_UNIT
    # share of missing samples per period that is zero-filled rather than
    # turning the period into a missing value
    allowed_missing: float = 0.0


@dataclass
class MirrorConfig:
    source: SourceConfig = field(default_factory=SourceConfig)
    integration: IntegrationConfig = field(default_factory=IntegrationConfig)


def default_config() -> MirrorConfig:
    return MirrorConfig()
