"""Match results from CSV, and the standings command.

Usage: courtleague-standings <config.yaml> <results.csv> [-o standings.csv] [--json]

The results CSV has one line per match:

    Match ID,Home ID,Away ID,Home Score,Away Score
    1,1,2,11,7
    2,3,4,,

Blank scores mean the match has not been played yet.
"""

import argparse
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from courtleague.config import active_teams, load_config
from courtleague.errors import DataConsistencyError, LeagueError
from courtleague.logging_config import setup_logging
from courtleague.models import MatchResultRow, Team
from courtleague.output import format_standings, format_standings_csv
from courtleague.standings import calculate_league_standings, rank_table

logger = logging.getLogger(__name__)


def _optional_int(raw: Optional[str], column: str, line: int,
                  match_id: Optional[int] = None) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise DataConsistencyError(
            f"results line {line}: {column} {raw!r} is not a whole number",
            match_id=match_id,
        ) from None


class CsvResultsSource:
    """StandingsSource backed by a per-match results CSV.

    Every team gets a bare row, so teams without a completed match still
    show up in the standings. Each completed match then yields one row for
    each of its teams that belongs to the league.
    """

    def __init__(self, teams: Sequence[Team], results_path: str | Path, league_id: int):
        self.teams = list(teams)
        self.results_path = Path(results_path)
        self.league_id = league_id

    def _read(self) -> list[dict]:
        with open(self.results_path, newline="") as f:
            return list(csv.DictReader(f))

    def get_league_standings_data(self, league_id: int) -> list[MatchResultRow]:
        if league_id != self.league_id:
            return []

        rows = [MatchResultRow(team_id=t.id, team_name=t.name) for t in self.teams]
        names = {t.id: t.name for t in self.teams}

        # Line 1 is the header
        for line, raw in enumerate(self._read(), 2):
            match_id = _optional_int(raw.get("Match ID"), "Match ID", line)
            if match_id is None:
                continue
            home_id = _optional_int(raw.get("Home ID"), "Home ID", line, match_id)
            away_id = _optional_int(raw.get("Away ID"), "Away ID", line, match_id)
            home_score = _optional_int(raw.get("Home Score"), "Home Score", line, match_id)
            away_score = _optional_int(raw.get("Away Score"), "Away Score", line, match_id)
            if home_score is None and away_score is None:
                logger.debug("Match %d not played yet", match_id)
                continue
            if home_id is None or away_id is None:
                raise DataConsistencyError(f"match {match_id} is missing scores",
                                           match_id=match_id)

            for team_id in (home_id, away_id):
                if team_id not in names:
                    continue
                rows.append(MatchResultRow(
                    team_id=team_id,
                    team_name=names[team_id],
                    match_id=match_id,
                    home_team_id=home_id,
                    away_team_id=away_id,
                    home_score=home_score,
                    away_score=away_score,
                ))
        return rows


def main():
    parser = argparse.ArgumentParser(
        description="League standings from match results",
    )
    parser.add_argument("config", help="Path to league config YAML")
    parser.add_argument("results", help="Per-match results CSV")
    parser.add_argument("-o", "--output", metavar="CSV",
                        help="Also write the standings table to this CSV file")
    parser.add_argument("--json", action="store_true",
                        help="Print standings as JSON instead of a table")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    for p in (args.config, args.results):
        if not Path(p).exists():
            print(f"Error: {p} not found")
            sys.exit(1)

    try:
        config = load_config(args.config)
        league_id = config["league"]["id"]
        source = CsvResultsSource(active_teams(config["teams"]), args.results, league_id)
        standings = calculate_league_standings(source, league_id)
    except LeagueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps({"standings": rank_table(standings)}, indent=2))
    else:
        print(format_standings(standings))

    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(format_standings_csv(standings))
        if not args.json:
            print(f"Written: {out}")


if __name__ == "__main__":
    main()
