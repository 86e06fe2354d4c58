"""Round-robin league schedule generation.

Three steps:
1. Pairings: circle-method round robin (roundrobin.py)
2. Slots: date range x operating hours x courts (slots.py)
3. Assembly: the i-th pairing takes the i-th slot

Slots are taken in order, so courts fill first, then time of day, then
date. When a schedule is regenerated, apply_preferred_courts can put
pairings back on the courts they had before.
"""

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Sequence, Union

from courtleague.errors import CapacityError, InvalidArgumentError
from courtleague.models import Court, OperatingHours, ScheduledMatch, Team
from courtleague.roundrobin import build_round_robin_pairs
from courtleague.slots import as_instant, build_match_slots, truncate_date_range

logger = logging.getLogger(__name__)

DEFAULT_MATCH_DURATION = timedelta(hours=1)


def generate_round_robin_schedule(league_id: int,
                                  teams: Sequence[Team],
                                  start_date: Union[date, datetime],
                                  end_date: Union[date, datetime],
                                  courts: Sequence[Court],
                                  operating_hours: Sequence[OperatingHours],
                                  match_duration: Union[timedelta, int],
                                  tz: Optional[tzinfo] = None,
                                  ) -> list[ScheduledMatch]:
    """Build a full round-robin schedule for a league.

    ``match_duration`` is a timedelta, or an int number of minutes.
    ``tz`` is the facility's zone, used when the dates carry none.

    Raises InvalidArgumentError for bad arguments, CapacityError when the
    range cannot fit every pairing, TimeFormatError for unreadable hours.
    """
    if isinstance(match_duration, int):
        match_duration = timedelta(minutes=match_duration)

    if league_id <= 0:
        raise InvalidArgumentError("league ID is required")
    if len(teams) < 2:
        raise InvalidArgumentError("at least two teams are required")
    if not courts:
        raise InvalidArgumentError("at least one court is required")
    if match_duration <= timedelta(0):
        raise InvalidArgumentError("match duration must be positive")
    start, end = truncate_date_range(start_date, end_date, tz)

    pairs = build_round_robin_pairs(teams)
    slots = build_match_slots(start, end, courts, operating_hours, match_duration)
    if len(slots) < len(pairs):
        raise CapacityError(
            f"insufficient slots: need {len(pairs)} matches but only "
            f"{len(slots)} available",
            needed=len(pairs), available=len(slots),
        )

    schedule = [
        ScheduledMatch(
            league_id=league_id,
            round=pairing.round,
            home_team=pairing.home_team,
            away_team=pairing.away_team,
            court=slot.court,
            start_time=slot.start,
            end_time=slot.end,
        )
        for pairing, slot in zip(pairs, slots)
    ]

    logger.info("League %d: scheduled %d matches (%d slots available)",
                league_id, len(schedule), len(slots))
    return schedule


def match_key(team_a: int, team_b: int) -> tuple[int, int]:
    """Order-independent key for a pair of team ids."""
    if team_a > team_b:
        team_a, team_b = team_b, team_a
    return (team_a, team_b)


def build_preferred_court_map(matches: Sequence[ScheduledMatch]
                              ) -> dict[tuple[int, int], int]:
    """Map each pairing in an existing schedule to the court id it used."""
    preferred: dict[tuple[int, int], int] = {}
    for m in matches:
        preferred[match_key(m.home_team.id, m.away_team.id)] = m.court.id
    return preferred


def apply_preferred_courts(schedule: Sequence[ScheduledMatch],
                           preferred: dict[tuple[int, int], int],
                           courts: Sequence[Court]) -> list[ScheduledMatch]:
    """Reassign courts so pairings keep their previous court where possible.

    Matches sharing a start time compete for courts. Within each start time,
    matches whose preferred court is free get it first; the rest take the
    remaining courts in court-list order. Returns a new list.
    """
    court_lookup = {c.id: c for c in courts}
    result = list(schedule)

    groups: dict[datetime, list[int]] = {}
    for idx, m in enumerate(result):
        groups.setdefault(as_instant(m.start_time), []).append(idx)

    for start_time in sorted(groups):
        indices = groups[start_time]
        available = [c.id for c in courts]

        assigned = set()
        for idx in indices:
            m = result[idx]
            court_id = preferred.get(match_key(m.home_team.id, m.away_team.id))
            if court_id is not None and court_id in available:
                result[idx] = replace(m, court=court_lookup[court_id])
                available.remove(court_id)
                assigned.add(idx)

        for idx in indices:
            if idx in assigned or not available:
                continue
            result[idx] = replace(result[idx], court=court_lookup[available.pop(0)])

    return result
