"""Read a schedule CSV back in and check it.

Usage: courtleague-verify <schedule.csv> [config.yaml]
"""

import argparse
import csv
import sys
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Optional, Sequence

from courtleague.config import active_teams, load_config
from courtleague.constraints import format_validation_report, validate_schedule
from courtleague.errors import LeagueError
from courtleague.logging_config import setup_logging
from courtleague.models import Court, ScheduledMatch, Team


def _parse_datetime(day: str, hhmm: str, tz: Optional[tzinfo]) -> datetime:
    return datetime.strptime(f"{day.strip()} {hhmm.strip()}", "%Y-%m-%d %H:%M").replace(tzinfo=tz)


def parse_schedule_csv(csv_path: str | Path, teams: Sequence[Team] = (),
                       courts: Sequence[Court] = (),
                       tz: Optional[tzinfo] = None) -> list[ScheduledMatch]:
    """Parse a CSV written by format_schedule_csv into ScheduledMatch objects.

    Teams and courts are looked up by id so their status carries over; ids
    missing from the lookups are rebuilt from the names in the file.
    """
    team_by_id = {t.id: t for t in teams}
    court_by_id = {c.id: c for c in courts}

    matches = []
    with open(csv_path, newline="") as f:
        rows = list(csv.DictReader(f))
    for row in rows:
        if not row.get("Home ID") or not row.get("Away ID"):
            continue
        home_id = int(row["Home ID"])
        away_id = int(row["Away ID"])
        court_id = int(row["Court ID"])
        matches.append(ScheduledMatch(
            league_id=int(row["League"]),
            round=int(row["Round"]),
            home_team=team_by_id.get(home_id, Team(home_id, row["Home"])),
            away_team=team_by_id.get(away_id, Team(away_id, row["Away"])),
            court=court_by_id.get(court_id, Court(court_id, row["Court"])),
            start_time=_parse_datetime(row["Date"], row["Start"], tz),
            end_time=_parse_datetime(row["Date"], row["End"], tz),
        ))
    return matches


def main():
    parser = argparse.ArgumentParser(
        description="Validate a league schedule CSV",
    )
    parser.add_argument("schedule", help="Schedule CSV (as written by courtleague-schedule)")
    parser.add_argument(
        "config", nargs="?", default="config.yaml",
        help="Path to league config YAML (default: config.yaml)"
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    for p in (args.schedule, args.config):
        if not Path(p).exists():
            print(f"Error: {p} not found")
            sys.exit(1)

    try:
        config = load_config(args.config)
    except LeagueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Parsing schedule from {args.schedule}...")
    matches = parse_schedule_csv(args.schedule, config["teams"], config["courts"],
                                 tz=config["league"]["timezone"])
    print(f"Loaded {len(matches)} matches")
    if not matches:
        print("No matches found in CSV. Check the format.")
        sys.exit(1)

    result = validate_schedule(matches, active_teams(config["teams"]))
    print(format_validation_report(result))
    sys.exit(0 if result["valid"] else 1)


if __name__ == "__main__":
    main()
