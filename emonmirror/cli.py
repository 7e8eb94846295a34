"""
Command line entry point.

Usage:
  emonmirror init DATA_DIR https://emoncms.org/feed APIKEY --feeds 1 2 3
  emonmirror update DATA_DIR [--end 2024-01-01T00:00]
  emonmirror export DATA_DIR OUT_DIR
  emonmirror summary DATA_DIR --years 2021 2022 --total House --period 1MS
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from . import dataset, exceptions

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="emonmirror", description="Mirror and summarise energy feeds")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init", help="create a dataset and fetch the given feeds")
    p.add_argument("path")
    p.add_argument("server")
    p.add_argument("apikey")
    p.add_argument("--feeds", type=int, nargs="+", required=True, metavar="ID")

    p = sub.add_parser("update", help="fetch new samples for every registered feed")
    p.add_argument("path")
    p.add_argument("--end", default=None, help="ISO timestamp (UTC) to stop at")

    p = sub.add_parser("export", help="write all feeds as CSV")
    p.add_argument("path")
    p.add_argument("directory")

    p = sub.add_parser("summary", help="print multi-year averaged energy per period")
    p.add_argument("path")
    p.add_argument("--years", type=int, nargs="+", required=True)
    p.add_argument("--total", nargs="+", required=True, metavar="FEED")
    p.add_argument("--period", default="1MS")
    p.add_argument("--unit", default=None)
    p.add_argument("--allowed-missing", type=float, default=None)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s · %(levelname)s · %(message)s",
    )

    try:
        if args.command == "init":
            ds = dataset.create_dataset(args.path, args.server, args.apikey)
            results = dataset.update(ds, feeds=args.feeds)
        elif args.command == "update":
            results = dataset.update(dataset.open_dataset(args.path), end_time=args.end)
        elif args.command == "export":
            for path in dataset.export_csv(dataset.open_dataset(args.path), args.directory):
                print(path)
            return 0
        else:
            out = dataset.energy_summary(
                dataset.open_dataset(args.path),
                years=args.years,
                period=args.period,
                total_power_feeds=args.total,
                unit=args.unit,
                allowed_missing=args.allowed_missing,
            )
            print(out.energy.to_string())
            return 0
    except exceptions.EmonError as e:
        logger.error("%s", e)
        return 1

    incomplete = [name for name, r in results.items() if not r.complete]
    for name, r in results.items():
        print(f"{name}: {r.blocks_done}/{r.blocks_total} blocks, {len(r.series)} entries")
    return 2 if incomplete else 0


if __name__ == "__main__":
    sys.exit(main())
