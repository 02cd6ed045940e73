# scripts/replay_match.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from volleyscout.config import MATCHES_DIR
from volleyscout.exceptions import PersistenceError
from volleyscout.export import ACTION_LABELS, ACTION_LABELS_ZH_TW, write_csv
from volleyscout.models import TeamSide
from volleyscout.stats import compare_teams, rank_players
from volleyscout.storage import list_saves, load_match

logger = logging.getLogger(__name__)


def print_summary(config, snapshot):
    print("\n==========================")
    print(f"{config.match_name or 'match'}: SET {snapshot.set_number}")
    print("==========================")
    print(f"{config.my_name} {snapshot.my_score} - {snapshot.op_score} {config.op_name}")
    print(f"Sets: {snapshot.my_set_wins} - {snapshot.op_set_wins}")
    print(f"Serving: {config.name_for(snapshot.serving_team)}")
    print(f"Events: {len(snapshot.events)}")

    teams = compare_teams(snapshot.events, config)
    for side in TeamSide:
        s = teams[side]
        print(f"\n[{config.name_for(side)}]")
        print(f"  Attack      {s.attack_kills}/{s.attack_total} ({s.attack_efficiency:.0%})")
        print(f"  Blocks      {s.blocks}")
        print(f"  Aces        {s.serve_aces}")
        print(f"  Serve err   {s.serve_errors}")
        print(f"  Digs        {s.digs}")
        for r in rank_players(snapshot.events, side, config):
            print(f"  #{r.player:<3} {r.total_points} pts")

    print("==========================\n")


def main():
    ap = argparse.ArgumentParser(description="Summarize or export a saved match")
    ap.add_argument("name", nargs="?", default="", help="Save slot name (omit to list slots)")
    ap.add_argument("--dir", type=str, default=str(MATCHES_DIR))
    ap.add_argument("--csv", type=str, default="", help="Write the event log as CSV to this path")
    ap.add_argument("--zh", action="store_true", help="Use zh-TW action labels in the CSV")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    directory = Path(args.dir)

    if not args.name:
        for name in list_saves(directory):
            print(name)
        return

    try:
        config, snapshot = load_match(args.name, directory)
    except PersistenceError as e:
        raise SystemExit(f"ERROR: {e}")

    print_summary(config, snapshot)

    if args.csv:
        labels = ACTION_LABELS_ZH_TW if args.zh else ACTION_LABELS
        try:
            out = write_csv(Path(args.csv), snapshot.events, config, labels)
        except PersistenceError as e:
            raise SystemExit(f"ERROR: {e}")
        print(f"Saved CSV: {out}")


if __name__ == "__main__":
    main()
