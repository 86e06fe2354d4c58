"""Output formatters for league schedules and standings."""

import csv
from datetime import date
from io import StringIO
from pathlib import Path
from typing import Sequence

from courtleague.models import ScheduledMatch, TeamStanding

SCHEDULE_CSV_HEADER = [
    "League", "Round", "Date", "Start", "End",
    "Court ID", "Court", "Home ID", "Home", "Away ID", "Away",
]

STANDINGS_CSV_HEADER = [
    "Rank", "Team", "Matches Played", "Wins", "Losses",
    "Points For", "Points Against", "Point Differential",
]


def _fmt_time_12h(dt) -> str:
    """Format as 12-hour with am/pm (e.g., '5:00pm', '10:30am')."""
    h = dt.hour
    suffix = "am" if h < 12 else "pm"
    if h == 0:
        h = 12
    elif h > 12:
        h -= 12
    return f"{h}:{dt.minute:02d}{suffix}"


def format_schedule(matches: Sequence[ScheduledMatch]) -> str:
    """Format schedule as human-readable text, organized by date."""
    lines = []
    lines.append("=" * 72)
    lines.append("LEAGUE SCHEDULE")
    lines.append("=" * 72)

    by_date: dict[date, list[ScheduledMatch]] = {}
    for m in matches:
        by_date.setdefault(m.start_time.date(), []).append(m)

    for d in sorted(by_date):
        lines.append(f"\n  {d.strftime('%A')} {d.strftime('%m/%d/%Y')}")
        for m in sorted(by_date[d], key=lambda x: x.start_time):
            start = _fmt_time_12h(m.start_time)
            lines.append(
                f"    R{m.round:<3} {start:>7}  {m.home_team.name:<20} vs "
                f"{m.away_team.name:<20} @ {m.court.name}"
            )

    lines.append("\n" + "=" * 72)
    lines.append("PER-TEAM SCHEDULES")
    lines.append("=" * 72)

    by_team: dict[int, list[ScheduledMatch]] = {}
    names: dict[int, str] = {}
    for m in matches:
        for team in (m.home_team, m.away_team):
            by_team.setdefault(team.id, []).append(m)
            names[team.id] = team.name

    for team_id in sorted(by_team, key=lambda t: names[t]):
        lines.append(f"\n{names[team_id]}:")
        for i, m in enumerate(sorted(by_team[team_id], key=lambda x: x.start_time), 1):
            is_home = m.home_team.id == team_id
            opponent = m.away_team if is_home else m.home_team
            h_a = "H" if is_home else "A"
            day = m.start_time.strftime("%a %m/%d")
            start = _fmt_time_12h(m.start_time)
            lines.append(
                f"  {i:>2}. {day} {start:>7} {h_a} vs {opponent.name:<20} @ {m.court.name}"
            )

    return "\n".join(lines)


def format_schedule_csv(matches: Sequence[ScheduledMatch]) -> str:
    """Format schedule as CSV, one match per row in schedule order."""
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(SCHEDULE_CSV_HEADER)
    for m in matches:
        writer.writerow([
            m.league_id, m.round,
            m.start_time.date().isoformat(),
            m.start_time.strftime("%H:%M"),
            m.end_time.strftime("%H:%M"),
            m.court.id, m.court.name,
            m.home_team.id, m.home_team.name,
            m.away_team.id, m.away_team.name,
        ])
    return output.getvalue()


def format_standings(standings: Sequence[TeamStanding]) -> str:
    """Format standings as a fixed-width table."""
    lines = []
    lines.append(f"{'#':>3} {'Team':<24} {'MP':>4} {'W':>4} {'L':>4} "
                 f"{'PF':>6} {'PA':>6} {'Diff':>6}")
    lines.append("-" * 62)
    for rank, s in enumerate(standings, 1):
        lines.append(
            f"{rank:>3} {s.team_name:<24} {s.matches_played:>4} {s.wins:>4} "
            f"{s.losses:>4} {s.points_for:>6} {s.points_against:>6} "
            f"{s.point_differential:>+6}"
        )
    return "\n".join(lines)


def format_standings_csv(standings: Sequence[TeamStanding]) -> str:
    """Format standings as CSV with a 1-based rank column."""
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(STANDINGS_CSV_HEADER)
    for rank, s in enumerate(standings, 1):
        writer.writerow([
            rank, s.team_name, s.matches_played, s.wins, s.losses,
            s.points_for, s.points_against, s.point_differential,
        ])
    return output.getvalue()


def write_schedule(matches: Sequence[ScheduledMatch],
                   output_prefix: str = "output") -> list[Path]:
    """Write schedule.txt and schedule.csv into {output_prefix}/."""
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)

    schedule_path = out_dir / "schedule.txt"
    schedule_path.write_text(format_schedule(matches))

    csv_path = out_dir / "schedule.csv"
    csv_path.write_text(format_schedule_csv(matches))

    return [schedule_path, csv_path]
