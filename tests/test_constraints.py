"""Tests for constraints.py: schedule validation."""

from dataclasses import replace
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from courtleague.constraints import format_validation_report, validate_schedule
from courtleague.models import Court, DayOfWeek, OperatingHours, ScheduledMatch, Team
from courtleague.scheduler import generate_round_robin_schedule

C1 = Court(10, "Court 1")
C2 = Court(11, "Court 2")


def _teams(n):
    return [Team(i, f"T{i}") for i in range(1, n + 1)]


def _make_match(home, away, start, court=C1, rnd=1, minutes=60):
    return ScheduledMatch(
        league_id=1, round=rnd, home_team=home, away_team=away, court=court,
        start_time=start, end_time=start + timedelta(minutes=minutes),
    )


def _schedule(teams, courts=(C1, C2)):
    return generate_round_robin_schedule(
        1, teams, date(2026, 3, 2), date(2026, 3, 2), list(courts),
        [OperatingHours(DayOfWeek.Mon.value, "09:00", "17:00")],
        timedelta(hours=1),
    )


class TestValidateSchedule:
    def test_generated_schedule_is_valid(self):
        # One round per start time when there is a court for every pairing
        for n, courts in ((2, [C1]), (4, [C1, C2]), (5, [C1, C2]),
                          (6, [C1, C2, Court(12, "Court 3")])):
            teams = _teams(n)
            result = validate_schedule(_schedule(teams, courts), teams)
            assert result["valid"], result["errors"]

    def test_greedy_fill_can_overlap_rounds(self):
        # 3 teams, 2 courts: round 1 (T2-T3) and round 2 (T3-T1) share 09:00
        teams = _teams(3)
        matches = _schedule(teams)
        assert matches[0].start_time == matches[1].start_time
        result = validate_schedule(matches, teams)
        assert result["errors"] == ["Team 3 has overlapping matches at 2026-03-02 09:00:00"]

    def test_fall_back_night_is_valid(self):
        # 01:00 EDT to 01:00 EST is a full hour on the clock-change night
        teams = _teams(3)
        day = date(2026, 11, 1)
        matches = generate_round_robin_schedule(
            1, teams, day, day, [C1],
            [OperatingHours(DayOfWeek.Sun.value, "00:00", "03:00")],
            timedelta(hours=1), tz=ZoneInfo("America/New_York"),
        )
        assert matches[1].start_time.strftime("%H:%M") == matches[1].end_time.strftime("%H:%M")
        result = validate_schedule(matches, teams)
        assert result["valid"], result["errors"]

    def test_missing_pairing(self):
        teams = _teams(4)
        matches = _schedule(teams)[:-1]
        result = validate_schedule(matches, teams)
        assert not result["valid"]
        assert any("played 0 times" in e for e in result["errors"])

    def test_court_double_booked(self):
        a, b, c, d = _teams(4)
        nine = datetime(2026, 3, 2, 9)
        matches = [
            _make_match(a, b, nine),
            _make_match(c, d, nine + timedelta(minutes=30)),
        ]
        result = validate_schedule(matches, [a, b, c, d])
        assert any("Court 1 double-booked" in e for e in result["errors"])

    def test_back_to_back_is_fine(self):
        a, b, c, d = _teams(4)
        nine = datetime(2026, 3, 2, 9)
        matches = [
            _make_match(a, b, nine),
            _make_match(c, d, nine + timedelta(hours=1)),
        ]
        result = validate_schedule(matches, [a, b, c, d])
        assert not any("double-booked" in e for e in result["errors"])

    def test_team_overlapping(self):
        a, b, c = _teams(3)
        nine = datetime(2026, 3, 2, 9)
        matches = [
            _make_match(a, b, nine, court=C1, rnd=1),
            _make_match(c, a, nine, court=C2, rnd=2),
        ]
        result = validate_schedule(matches, [a, b, c])
        assert any("Team 1 has overlapping" in e for e in result["errors"])

    def test_team_twice_in_round(self):
        a, b, c = _teams(3)
        matches = [
            _make_match(a, b, datetime(2026, 3, 2, 9)),
            _make_match(a, c, datetime(2026, 3, 2, 11)),
        ]
        result = validate_schedule(matches, [a, b, c])
        assert any("plays 2 times in round 1" in e for e in result["errors"])

    def test_end_before_start(self):
        a, b = _teams(2)
        m = _make_match(a, b, datetime(2026, 3, 2, 9), minutes=0)
        result = validate_schedule([m], [a, b])
        assert not result["valid"]

    def test_unknown_team(self):
        a, b = _teams(2)
        stranger = Team(99, "Stranger")
        matches = [
            _make_match(a, b, datetime(2026, 3, 2, 9)),
            _make_match(a, stranger, datetime(2026, 3, 2, 10), rnd=2),
        ]
        result = validate_schedule(matches, [a, b])
        assert any("Unknown team: Stranger" in e for e in result["errors"])

    def test_home_away_imbalance_warning(self):
        teams = _teams(4)
        a = teams[0]
        flipped = []
        for m in _schedule(teams):
            if m.away_team == a:
                m = replace(m, home_team=a, away_team=m.home_team)
            flipped.append(m)
        result = validate_schedule(flipped, teams)
        assert result["valid"]
        assert any("T1 home/away imbalance" in w for w in result["warnings"])


class TestFormatValidationReport:
    def test_valid(self):
        report = format_validation_report({"valid": True, "errors": [], "warnings": []})
        assert "RESULT: VALID" in report

    def test_invalid(self):
        report = format_validation_report(
            {"valid": False, "errors": ["boom"], "warnings": ["meh"]}
        )
        assert "INVALID (1 violations)" in report
        assert "ERROR: boom" in report
        assert "WARN: meh" in report
