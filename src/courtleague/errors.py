"""Exceptions raised by schedule generation and standings."""

from typing import Optional


class LeagueError(Exception):
    """Base class for every error raised by courtleague."""


class InvalidArgumentError(LeagueError, ValueError):
    """A caller-supplied argument is out of range or missing."""


class ConfigError(LeagueError, ValueError):
    """A league config file is malformed."""


class CapacityError(LeagueError):
    """Not enough match slots for the pairings.

    ``needed`` is None when the date range produced no slots at all.
    """

    def __init__(self, message: str, needed: Optional[int] = None,
                 available: int = 0):
        super().__init__(message)
        self.needed = needed
        self.available = available


class TimeFormatError(LeagueError, ValueError):
    """An opening or closing time could not be parsed."""

    def __init__(self, message: str, day_of_week: int, field: str):
        super().__init__(message)
        self.day_of_week = day_of_week
        self.field = field


class DataConsistencyError(LeagueError):
    """A match result row contradicts itself or cannot be read.

    ``match_id`` is None when the bad value is the match id itself.
    """

    def __init__(self, message: str, match_id: Optional[int],
                 team_id: Optional[int] = None):
        super().__init__(message)
        self.match_id = match_id
        self.team_id = team_id


class TiedMatchError(LeagueError):
    """A completed match has equal scores; league matches need a winner."""

    def __init__(self, message: str, match_id: int):
        super().__init__(message)
        self.match_id = match_id
