from . import (
    canon,
    exceptions,
    config,
    types,
    utils,
    validate,
    merge,
    update,
    integrate,
    average,
    summary,
    source,
    io,
    dataset,
)

__all__ = [
    "canon",
    "exceptions",
    "config",
    "types",
    "utils",
    "validate",
    "merge",
    "update",
    "integrate",
    "average",
    "summary",
    "source",
    "io",
    "dataset",
]
