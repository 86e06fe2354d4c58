"""League standings with head-to-head tiebreakers.

Standings are rebuilt from match results every time they are viewed:

1. Tally: one TeamStats per team, with head-to-head wins and point
   differential kept per opponent.
2. Order: wins descending, then each block of teams on equal wins is
   re-sorted by:
     a. wins against the other teams in the block
     b. overall point differential
     c. point differential against the other teams in the block
     d. team name
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence

from courtleague.errors import DataConsistencyError, InvalidArgumentError, TiedMatchError
from courtleague.models import MatchResultRow, TeamStanding

logger = logging.getLogger(__name__)


class StandingsSource(Protocol):
    """Anything that can list every team's match rows for a league."""

    def get_league_standings_data(self, league_id: int) -> Iterable[MatchResultRow]:
        ...


@dataclass
class TeamStats:
    standing: TeamStanding
    head_to_head_wins: dict[int, int] = field(default_factory=dict)
    head_to_head_point_diff: dict[int, int] = field(default_factory=dict)

    @property
    def team_id(self) -> int:
        return self.standing.team_id

    @property
    def team_name(self) -> str:
        return self.standing.team_name

    @property
    def wins(self) -> int:
        return self.standing.wins


def calculate_league_standings(source: StandingsSource,
                               league_id: int) -> list[TeamStanding]:
    """Fetch a league's match rows from ``source`` and rank the teams."""
    if source is None:
        raise InvalidArgumentError("standings source is required")
    if league_id <= 0:
        raise InvalidArgumentError("league ID is required")

    rows = list(source.get_league_standings_data(league_id))
    logger.debug("League %d: %d standings rows", league_id, len(rows))
    return calculate_standings(rows)


def calculate_standings(rows: Iterable[MatchResultRow]) -> list[TeamStanding]:
    """Rank teams from one-row-per-team-per-match results."""
    ordered = tally_results(rows)
    ordered.sort(key=lambda t: (-t.wins, t.team_name))
    sort_standings_by_tiebreakers(ordered)
    return [t.standing for t in ordered]


def _resolve_match_score(row: MatchResultRow) -> tuple[int, int, int]:
    """Return (team score, opponent score, opponent id) from the row's team's side."""
    if row.team_id == row.home_team_id:
        return row.home_score, row.away_score, row.away_team_id
    if row.team_id == row.away_team_id:
        return row.away_score, row.home_score, row.home_team_id
    raise DataConsistencyError(
        f"match {row.match_id} does not include team {row.team_id}",
        match_id=row.match_id, team_id=row.team_id,
    )


def tally_results(rows: Iterable[MatchResultRow]) -> list[TeamStats]:
    """Accumulate per-team totals, in the order teams first appear.

    Rows without a match id only register the team. A completed match must
    carry both team ids and both scores, must include the row's team, and
    must not be tied.
    """
    teams: dict[int, TeamStats] = {}
    for row in rows:
        entry = teams.get(row.team_id)
        if entry is None:
            entry = TeamStats(TeamStanding(team_id=row.team_id, team_name=row.team_name))
            teams[row.team_id] = entry

        if row.match_id is None:
            continue
        if (row.home_team_id is None or row.away_team_id is None
                or row.home_score is None or row.away_score is None):
            raise DataConsistencyError(f"match {row.match_id} is missing scores",
                                       match_id=row.match_id)

        team_score, opponent_score, opponent_id = _resolve_match_score(row)

        s = entry.standing
        s.matches_played += 1
        s.points_for += team_score
        s.points_against += opponent_score
        s.point_differential = s.points_for - s.points_against

        if team_score > opponent_score:
            s.wins += 1
            entry.head_to_head_wins[opponent_id] = entry.head_to_head_wins.get(opponent_id, 0) + 1
        elif team_score < opponent_score:
            s.losses += 1
        else:
            raise TiedMatchError(
                f"match {row.match_id} is tied; ties are not supported",
                match_id=row.match_id,
            )
        entry.head_to_head_point_diff[opponent_id] = (
            entry.head_to_head_point_diff.get(opponent_id, 0) + team_score - opponent_score
        )

    return list(teams.values())


def _head_to_head_wins(team: TeamStats, group: set[int]) -> int:
    return sum(w for opp, w in team.head_to_head_wins.items() if opp in group)


def _head_to_head_point_diff(team: TeamStats, group: set[int]) -> int:
    return sum(d for opp, d in team.head_to_head_point_diff.items() if opp in group)


def sort_standings_by_tiebreakers(ordered: list[TeamStats]) -> None:
    """Re-sort, in place, each run of teams tied on wins.

    ``ordered`` must already be sorted by wins descending. Teams are never
    compared across runs with different win counts.
    """
    start = 0
    while start < len(ordered):
        end = start + 1
        while end < len(ordered) and ordered[end].wins == ordered[start].wins:
            end += 1

        if end - start > 1:
            group = ordered[start:end]
            group_ids = {t.team_id for t in group}
            group.sort(key=lambda t: (
                -_head_to_head_wins(t, group_ids),
                -t.standing.point_differential,
                -_head_to_head_point_diff(t, group_ids),
                t.team_name,
            ))
            ordered[start:end] = group

        start = end


def rank_table(standings: Sequence[TeamStanding]) -> list[dict]:
    """Standings as JSON-ready dicts with a 1-based rank."""
    table = []
    for rank, s in enumerate(standings, 1):
        row = {"rank": rank}
        row.update(s.to_dict())
        table.append(row)
    return table
