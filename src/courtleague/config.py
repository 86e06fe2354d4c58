"""League config loading for courtleague."""

from datetime import date, timedelta
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from courtleague.errors import ConfigError
from courtleague.models import Court, DayOfWeek, OperatingHours, Team
from courtleague.scheduler import DEFAULT_MATCH_DURATION


def parse_date(s: str) -> date:
    """Parse date string YYYY-MM-DD."""
    parts = s.strip().split("-")
    if len(parts) != 3:
        raise ConfigError(f"invalid date {s!r}, expected YYYY-MM-DD")
    try:
        return date(int(parts[0]), int(parts[1]), int(parts[2]))
    except ValueError as e:
        raise ConfigError(f"invalid date {s!r}: {e}") from e


def match_duration(minutes: Optional[int]) -> timedelta:
    """Match length from a minutes setting; unset or 0 means the default."""
    if not minutes:
        return DEFAULT_MATCH_DURATION
    return timedelta(minutes=int(minutes))


def active_teams(teams: list[Team]) -> list[Team]:
    return [t for t in teams if t.is_active]


def active_courts(courts: list[Court]) -> list[Court]:
    return [c for c in courts if c.is_active]


def _require(mapping: dict, key: str, where: str):
    if not isinstance(mapping, dict) or key not in mapping:
        raise ConfigError(f"missing '{key}' in {where}")
    return mapping[key]


def _parse_team(raw: dict) -> Team:
    return Team(
        id=int(_require(raw, "id", "team")),
        name=str(_require(raw, "name", "team")),
        status=str(raw.get("status", "active")),
    )


def _parse_court(raw: dict) -> Court:
    return Court(
        id=int(_require(raw, "id", "court")),
        name=str(_require(raw, "name", "court")),
        status=str(raw.get("status", "active")),
    )


def _hour_value(v):
    # YAML 1.1 reads unquoted 17:00 as the base-60 integer 1020
    if isinstance(v, int) and not isinstance(v, bool):
        return f"{v // 60}:{v % 60:02d}"
    return v


def _parse_operating_hours(raw: dict) -> list[OperatingHours]:
    """Weekday name -> {opens, closes}. A null entry means closed."""
    hours = []
    for day_name, entry in (raw or {}).items():
        try:
            day = DayOfWeek.from_str(str(day_name))
        except KeyError:
            raise ConfigError(f"unknown weekday {day_name!r} in operating_hours")
        if entry is None:
            continue
        if not isinstance(entry, dict):
            raise ConfigError(f"operating_hours.{day_name}: expected opens/closes")
        hours.append(OperatingHours(
            day_of_week=day.value,
            opens_at=_hour_value(entry.get("opens")),
            closes_at=_hour_value(entry.get("closes")),
        ))
    return hours


def load_config(path: str | Path) -> dict:
    """Load a league config YAML, returning structured data.

    Returns dict with:
    - league: {id, name, start_date, end_date, match_duration, timezone}
    - teams: list[Team] (all statuses; see active_teams)
    - courts: list[Court] (all statuses; see active_courts)
    - operating_hours: list[OperatingHours]
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f)
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    lraw = _require(raw, "league", str(path))
    tz_name = lraw.get("timezone")
    tz = None
    if tz_name:
        try:
            tz = ZoneInfo(str(tz_name))
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"unknown timezone {tz_name!r}") from e

    league = {
        "id": int(_require(lraw, "id", "league")),
        "name": lraw.get("name", ""),
        "start_date": parse_date(str(_require(lraw, "start_date", "league"))),
        "end_date": parse_date(str(_require(lraw, "end_date", "league"))),
        "match_duration": match_duration(lraw.get("match_duration_minutes")),
        "timezone": tz,
    }

    teams = [_parse_team(t) for t in raw.get("teams") or []]
    courts = [_parse_court(c) for c in raw.get("courts") or []]

    errors = []
    seen_ids: set[int] = set()
    for t in teams:
        if t.id in seen_ids:
            errors.append(f"duplicate team id {t.id}")
        seen_ids.add(t.id)
    court_ids = [c.id for c in courts]
    if len(set(court_ids)) != len(court_ids):
        errors.append("duplicate court ids")
    if errors:
        raise ConfigError(f"{path}: " + "; ".join(errors))

    return {
        "league": league,
        "teams": teams,
        "courts": courts,
        "operating_hours": _parse_operating_hours(raw.get("operating_hours")),
    }
