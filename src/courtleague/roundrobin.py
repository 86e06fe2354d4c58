"""Round-robin pairing generation for league scheduling."""

import logging
from typing import Optional, Sequence

from courtleague.errors import InvalidArgumentError
from courtleague.models import Pairing, Team

logger = logging.getLogger(__name__)


def _seats(teams: Sequence[Team]) -> list[Optional[Team]]:
    """Working seat list for the circle method; odd counts get a None bye seat."""
    seats: list[Optional[Team]] = list(teams)
    if len(seats) % 2 == 1:
        seats.append(None)
    return seats


def _rotate(seats: list[Optional[Team]]) -> list[Optional[Team]]:
    # Keep position 0 fixed, move the last seat into position 1
    if len(seats) <= 2:
        return seats
    return [seats[0]] + [seats[-1]] + seats[1:-1]


def build_round_robin_pairs(teams: Sequence[Team]) -> list[Pairing]:
    """Generate every pairing once using the circle method.

    For N teams: N-1 rounds if even, N rounds if odd (each team sits out
    once). Pairs that land on the bye seat are skipped. The anchored pairing
    at seat 0 swaps home/away every other round so the fixed team does not
    host every week; every other pairing keeps the first-listed team home.

    Returns pairings in round order, rounds numbered from 1.
    """
    if len(teams) < 2:
        raise InvalidArgumentError("at least two teams are required")

    seats = _seats(teams)
    n = len(seats)

    pairs: list[Pairing] = []
    for r in range(n - 1):
        for i in range(n // 2):
            left = seats[i]
            right = seats[n - 1 - i]
            if left is None or right is None:
                continue
            home, away = left, right
            if i == 0 and r % 2 == 1:
                home, away = away, home
            pairs.append(Pairing(round=r + 1, home_team=home, away_team=away))

        seats = _rotate(seats)

    logger.debug("Built %d pairings over %d rounds for %d teams",
                 len(pairs), n - 1, len(teams))
    return pairs


def bye_teams_by_round(teams: Sequence[Team]) -> dict[int, list[Team]]:
    """Return the team sitting out each round, keyed by round number.

    Empty for an even number of teams. Follows the same rotation as
    build_round_robin_pairs, so round numbers line up with its output.
    """
    if len(teams) < 2:
        raise InvalidArgumentError("at least two teams are required")

    seats = _seats(teams)
    n = len(seats)
    byes: dict[int, list[Team]] = {}
    if n == len(teams):
        return byes

    for r in range(n - 1):
        for i in range(n // 2):
            left = seats[i]
            right = seats[n - 1 - i]
            if left is None and right is not None:
                byes.setdefault(r + 1, []).append(right)
            elif right is None and left is not None:
                byes.setdefault(r + 1, []).append(left)
        seats = _rotate(seats)
    return byes


def verify_round_robin(pairs: Sequence[Pairing], teams: Sequence[Team]) -> dict:
    """Verify a set of pairings is a valid and complete round robin.

    Returns dict with:
    - valid: bool
    - errors: list of error strings
    - matchup_counts: dict of (team_id, team_id) -> count
    - games_per_team: dict of team_id -> game count
    """
    errors = []
    matchup_counts: dict[tuple[int, int], int] = {}
    games_per_team: dict[int, int] = {t.id: 0 for t in teams}
    teams_by_round: dict[int, set[int]] = {}

    for p in pairs:
        seen = teams_by_round.setdefault(p.round, set())
        for team in (p.home_team, p.away_team):
            if team.id in seen:
                errors.append(f"Round {p.round}: {team.name} appears twice")
            seen.add(team.id)
            games_per_team[team.id] = games_per_team.get(team.id, 0) + 1

        key = tuple(sorted([p.home_team.id, p.away_team.id]))
        matchup_counts[key] = matchup_counts.get(key, 0) + 1

    # Check every pair plays exactly once
    for i, t1 in enumerate(teams):
        for t2 in teams[i + 1:]:
            key = tuple(sorted([t1.id, t2.id]))
            count = matchup_counts.get(key, 0)
            if count != 1:
                errors.append(
                    f"{t1.name} vs {t2.name}: played {count} times (expected 1)"
                )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "matchup_counts": matchup_counts,
        "games_per_team": games_per_team,
    }
