#!/usr/bin/env python3
"""Analyse one stored race snapshot and print the top alerts.

Usage:
    python scripts/analyse_race.py 2025-03-02 5 --list          # Show snapshot timestamps
    python scripts/analyse_race.py 2025-03-02 5 20250302-1215    # Analyse one snapshot
    python scripts/analyse_race.py 2025-03-02 5 20250302-1215 --export out/ --threshold 150
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from oddswatch.analysis.engine import run_analysis
from oddswatch.analysis.export import build_export, export_filename
from oddswatch.config import settings
from oddswatch.errors import RaceDataNotFound
from oddswatch.loader import list_snapshots, load_race_data

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Analyse a stored race odds snapshot")
    parser.add_argument("date", help="Race date as used in snapshot file names (e.g. 2025-03-02)")
    parser.add_argument("race", help="Race number")
    parser.add_argument("timestamp", nargs="?", help="Snapshot timestamp (default: latest)")
    parser.add_argument("--data-dir", type=Path, default=None, help="Snapshot directory (default: settings)")
    parser.add_argument("--list", action="store_true", help="List snapshot timestamps and exit")
    parser.add_argument("--top", type=int, default=20, help="Number of alerts to print")
    parser.add_argument("--threshold", type=int, default=settings.priority_threshold,
                        help="Minimum priority for exported findings")
    parser.add_argument("--export", type=Path, default=None, help="Write the export JSON into this directory")
    args = parser.parse_args()

    timestamps = list_snapshots(args.date, args.race, args.data_dir)
    if args.list:
        for ts in timestamps:
            print(ts)
        return 0

    timestamp = args.timestamp or (timestamps[-1] if timestamps else None)
    if timestamp is None:
        logger.error(f"No snapshots for {args.date} race {args.race}")
        return 1

    try:
        race_data = load_race_data(args.date, args.race, timestamp, args.data_dir)
    except RaceDataNotFound as e:
        logger.error(str(e))
        return 1

    result = run_analysis(race_data)

    print(f"\n{'=' * 70}")
    print(f"  {args.date} Race {args.race} @ {timestamp}: {len(result.alerts)} alerts")
    print(f"{'=' * 70}")
    for alert in result.alerts[:args.top]:
        print(f"  [{alert.priority:>3}] {alert.horse_number:<6} {alert.purpose.value:<9} "
              f"{alert.target.value:<7} {alert.message}")

    print("\n  Highlights:")
    for market, cells in result.highlights.items():
        print(f"    {market:<14} {', '.join(cells) or '-'}")

    print("\n  Horse scores:")
    for s in sorted(result.summaries, key=lambda s: -s.total_score):
        print(f"    #{s.horse_number:<3} {s.horse_name:<20} win {s.win_score:>6.1f}  place {s.place_score:>6.1f}")

    if args.export:
        args.export.mkdir(parents=True, exist_ok=True)
        out_path = args.export / export_filename(race_data, args.threshold)
        with out_path.open("w", encoding="utf-8") as f:
            json.dump(build_export(race_data, result.alerts, args.threshold), f, ensure_ascii=False, indent=2)
        logger.info(f"Export written to {out_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
