"""Data models for league scheduling and standings."""

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Optional, Union


class DayOfWeek(Enum):
    Sun = 0
    Mon = 1
    Tue = 2
    Wed = 3
    Thu = 4
    Fri = 5
    Sat = 6

    @classmethod
    def from_str(cls, s: str) -> "DayOfWeek":
        return cls[s.strip()[:3].capitalize()]

    @classmethod
    def from_date(cls, d: date) -> "DayOfWeek":
        # date.weekday() counts from Monday
        return cls((d.weekday() + 1) % 7)


@dataclass(frozen=True)
class Team:
    """A team entered in a league."""
    id: int
    name: str
    status: str = "active"

    @property
    def is_active(self) -> bool:
        return self.status.strip().lower() == "active"


@dataclass(frozen=True)
class Court:
    """One physical playable surface at a facility."""
    id: int
    name: str
    status: str = "active"

    @property
    def is_active(self) -> bool:
        return self.status.strip().lower() == "active"


HourValue = Union[time, str, bytes, None]


@dataclass(frozen=True)
class OperatingHours:
    """Facility hours for one weekday, as the storage layer holds them."""
    day_of_week: int  # 0=Sunday .. 6=Saturday
    opens_at: HourValue
    closes_at: HourValue


@dataclass(frozen=True)
class Pairing:
    """Two teams drawn against each other in a round (home listed first)."""
    round: int
    home_team: Team
    away_team: Team


@dataclass(frozen=True)
class MatchSlot:
    """A bookable window on one court."""
    start: datetime
    end: datetime
    court: Court


@dataclass(frozen=True)
class ScheduledMatch:
    """A pairing placed on a court at a time."""
    league_id: int
    round: int
    home_team: Team
    away_team: Team
    court: Court
    start_time: datetime
    end_time: datetime

    def involves(self, team_id: int) -> bool:
        return team_id in (self.home_team.id, self.away_team.id)


@dataclass(frozen=True)
class MatchResultRow:
    """One team's view of one match. Score fields are unset until played."""
    team_id: int
    team_name: str
    match_id: Optional[int] = None
    home_team_id: Optional[int] = None
    away_team_id: Optional[int] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None


@dataclass
class TeamStanding:
    """A team's line in the standings table."""
    team_id: int
    team_name: str
    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    points_for: int = 0
    points_against: int = 0
    point_differential: int = 0

    def to_dict(self) -> dict:
        return {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "matchesPlayed": self.matches_played,
            "wins": self.wins,
            "losses": self.losses,
            "pointsFor": self.points_for,
            "pointsAgainst": self.points_against,
            "pointDifferential": self.point_differential,
        }
