"""Constraint validation for league schedules.

Works on an in-memory schedule or one re-imported from CSV.
"""

from collections import defaultdict
from typing import Sequence

from courtleague.models import ScheduledMatch, Team
from courtleague.slots import as_instant


def _overlaps(a: ScheduledMatch, b: ScheduledMatch) -> bool:
    return (as_instant(a.start_time) < as_instant(b.end_time)
            and as_instant(b.start_time) < as_instant(a.end_time))


def validate_schedule(matches: Sequence[ScheduledMatch],
                      teams: Sequence[Team]) -> dict:
    """Validate a schedule against all constraints.

    Returns dict with:
    - valid: bool (True if no hard constraint violations)
    - errors: list of hard constraint violations
    - warnings: list of soft constraint issues
    """
    errors = []
    warnings = []

    team_ids = {t.id for t in teams}
    home_counts: dict[int, int] = defaultdict(int)
    away_counts: dict[int, int] = defaultdict(int)
    matchup_counts: dict[tuple[int, int], int] = defaultdict(int)
    team_rounds: dict[int, dict[int, int]] = defaultdict(lambda: defaultdict(int))
    by_court: dict[int, list[ScheduledMatch]] = defaultdict(list)
    by_team: dict[int, list[ScheduledMatch]] = defaultdict(list)

    for m in matches:
        h = m.home_team
        a = m.away_team

        if as_instant(m.end_time) <= as_instant(m.start_time):
            errors.append(
                f"{h.name} vs {a.name} ends at or before it starts ({m.start_time})"
            )
        if h.id == a.id:
            errors.append(f"{h.name} is drawn against itself")
            continue
        for team in (h, a):
            if team.id not in team_ids:
                errors.append(f"Unknown team: {team.name} ({team.id})")

        home_counts[h.id] += 1
        away_counts[a.id] += 1
        team_rounds[h.id][m.round] += 1
        team_rounds[a.id][m.round] += 1
        key = (h.id, a.id) if h.id < a.id else (a.id, h.id)
        matchup_counts[key] += 1
        by_court[m.court.id].append(m)
        by_team[h.id].append(m)
        by_team[a.id].append(m)

    # Check: no team plays twice in the same round
    for team_id, rounds in team_rounds.items():
        for rnd, count in rounds.items():
            if count > 1:
                errors.append(f"Team {team_id} plays {count} times in round {rnd}")

    # Check: no court or team is double-booked
    for court_id, court_matches in by_court.items():
        ordered = sorted(court_matches, key=lambda x: as_instant(x.start_time))
        for prev, cur in zip(ordered, ordered[1:]):
            if _overlaps(prev, cur):
                errors.append(
                    f"{cur.court.name} double-booked at {cur.start_time}"
                )
    for team_id, tm in by_team.items():
        ordered = sorted(tm, key=lambda x: as_instant(x.start_time))
        for prev, cur in zip(ordered, ordered[1:]):
            if _overlaps(prev, cur):
                errors.append(
                    f"Team {team_id} has overlapping matches at {cur.start_time}"
                )

    # Check: every pair meets exactly once
    ordered_teams = list(teams)
    for i, t1 in enumerate(ordered_teams):
        for t2 in ordered_teams[i + 1:]:
            key = (t1.id, t2.id) if t1.id < t2.id else (t2.id, t1.id)
            count = matchup_counts.get(key, 0)
            if count != 1:
                errors.append(
                    f"{t1.name} vs {t2.name}: played {count} times (expected 1)"
                )

    # Soft: home/away balance
    for t in ordered_teams:
        diff = home_counts.get(t.id, 0) - away_counts.get(t.id, 0)
        if abs(diff) > 1:
            warnings.append(
                f"{t.name} home/away imbalance: {home_counts.get(t.id, 0)} home, "
                f"{away_counts.get(t.id, 0)} away"
            )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def format_validation_report(result: dict) -> str:
    """Format validation results as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("SCHEDULE VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("\nRESULT: VALID (no hard constraint violations)")
    else:
        lines.append(f"\nRESULT: INVALID ({len(result['errors'])} violations)")

    if result["errors"]:
        lines.append(f"\n--- ERRORS ({len(result['errors'])}) ---")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")

    if result["warnings"]:
        lines.append(f"\n--- WARNINGS ({len(result['warnings'])}) ---")
        for w in result["warnings"]:
            lines.append(f"  WARN: {w}")

    return "\n".join(lines)
