#!/usr/bin/env python3
"""League round-robin schedule builder.

Generate mode (default):
    courtleague-schedule [config.yaml] [-o DIR] [--preserve-courts PREV.csv]

    Generates a schedule from the YAML config and writes:
      {DIR}/schedule.txt  - Human-readable schedule by date + per-team
      {DIR}/schedule.csv  - One match per row, re-readable by --verify

    --preserve-courts keeps each pairing on the court it had in a
    previously written schedule.csv wherever that court is still free.

Verify mode:
    courtleague-schedule --verify <schedule.csv> [config.yaml]

Examples:
    courtleague-schedule                         # default config.yaml
    courtleague-schedule spring.yaml -o spring   # custom config and output
    courtleague-schedule --verify output/schedule.csv
"""

import argparse
import sys
from pathlib import Path

from courtleague.config import active_courts, active_teams, load_config
from courtleague.constraints import format_validation_report, validate_schedule
from courtleague.errors import CapacityError, LeagueError
from courtleague.logging_config import setup_logging
from courtleague.output import write_schedule
from courtleague.scheduler import (
    apply_preferred_courts, build_preferred_court_map, generate_round_robin_schedule,
)
from courtleague.verify import parse_schedule_csv


def main():
    parser = argparse.ArgumentParser(
        description="League round-robin schedule builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Output files (generate mode):
  {dir}/schedule.txt   Human-readable schedule (by date + per-team)
  {dir}/schedule.csv   Schedule CSV

Exit codes:
  0  Schedule generated (or verified) with no violations
  1  Invalid league settings, not enough slots, or violations found
""",
    )
    parser.add_argument(
        "config", nargs="?", default="config.yaml",
        help="Path to league config YAML (default: config.yaml)"
    )
    parser.add_argument(
        "--output-prefix", "-o", default="output",
        help="Output directory for generated files (default: output/)"
    )
    parser.add_argument(
        "--preserve-courts", metavar="CSV",
        help="Previous schedule CSV whose court assignments should be kept"
    )
    parser.add_argument(
        "--verify", metavar="CSV",
        help="Verify an existing schedule CSV instead of generating"
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: config file {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    try:
        config = load_config(config_path)
    except LeagueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    league = config["league"]
    teams = active_teams(config["teams"])
    courts = active_courts(config["courts"])

    if args.verify:
        print(f"Verifying schedule from {args.verify}...")
        matches = parse_schedule_csv(args.verify, config["teams"], config["courts"],
                                     tz=league["timezone"])
        print(f"Loaded {len(matches)} matches")
        result = validate_schedule(matches, teams)
        print(format_validation_report(result))
        sys.exit(0 if result["valid"] else 1)

    print(f"Generating schedule for {len(teams)} teams on {len(courts)} courts...")
    try:
        matches = generate_round_robin_schedule(
            league["id"], teams, league["start_date"], league["end_date"],
            courts, config["operating_hours"], league["match_duration"],
            tz=league["timezone"],
        )
    except CapacityError as e:
        print(f"Error: {e}")
        print("Extend the date range, add courts, or shorten matches.")
        sys.exit(1)
    except LeagueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.preserve_courts:
        previous = parse_schedule_csv(args.preserve_courts, config["teams"],
                                      config["courts"], tz=league["timezone"])
        preferred = build_preferred_court_map(previous)
        if preferred:
            matches = apply_preferred_courts(matches, preferred, courts)
            print(f"Kept court assignments from {args.preserve_courts}")

    result = validate_schedule(matches, teams)
    print("\n" + format_validation_report(result))

    print("\nWriting output files...")
    for path in write_schedule(matches, output_prefix=args.output_prefix):
        print(f"Written: {path}")

    if result["valid"]:
        print(f"\nScheduled {len(matches)} matches.")
    else:
        print(f"\nSchedule has {len(result['errors'])} constraint violations.")
        sys.exit(1)


if __name__ == "__main__":
    main()
