"""Tests for roundrobin.py: circle-method pairing and verification."""

import pytest

from courtleague.errors import InvalidArgumentError
from courtleague.models import Pairing, Team
from courtleague.roundrobin import (
    build_round_robin_pairs,
    bye_teams_by_round,
    verify_round_robin,
)


def _teams(n):
    return [Team(i, f"T{i}") for i in range(1, n + 1)]


def _by_round(pairs):
    rounds = {}
    for p in pairs:
        rounds.setdefault(p.round, []).append(p)
    return rounds


class TestBuildRoundRobinPairs:
    def test_even_teams(self):
        pairs = build_round_robin_pairs(_teams(4))
        rounds = _by_round(pairs)
        # 4 teams => 3 rounds, 2 games each
        assert sorted(rounds) == [1, 2, 3]
        for r in rounds.values():
            assert len(r) == 2

    def test_odd_teams(self):
        pairs = build_round_robin_pairs(_teams(5))
        rounds = _by_round(pairs)
        # 5 teams + bye seat = 6, so 5 rounds of 2 games
        assert sorted(rounds) == [1, 2, 3, 4, 5]
        for r in rounds.values():
            assert len(r) == 2

    @pytest.mark.parametrize("n", [2, 3, 4, 5, 6, 7, 12, 13])
    def test_every_pair_plays_once(self, n):
        teams = _teams(n)
        pairs = build_round_robin_pairs(teams)
        assert len(pairs) == n * (n - 1) // 2
        result = verify_round_robin(pairs, teams)
        assert result["valid"], result["errors"]
        for t in teams:
            assert result["games_per_team"][t.id] == n - 1

    def test_no_team_plays_twice_in_round(self):
        for r in _by_round(build_round_robin_pairs(_teams(10))).values():
            seen = set()
            for p in r:
                assert p.home_team.id not in seen
                assert p.away_team.id not in seen
                seen.add(p.home_team.id)
                seen.add(p.away_team.id)

    def test_first_rounds_four_teams(self):
        a, b, c, d = _teams(4)
        pairs = build_round_robin_pairs([a, b, c, d])
        assert pairs == [
            Pairing(1, a, d), Pairing(1, b, c),
            Pairing(2, c, a), Pairing(2, d, b),
            Pairing(3, a, b), Pairing(3, c, d),
        ]

    def test_anchor_seat_alternates_home(self):
        teams = _teams(6)
        anchor = teams[0]
        rounds = _by_round(build_round_robin_pairs(teams))
        # Round 1: not swapped, round 2: swapped, and so on
        assert rounds[1][0].home_team == anchor
        assert rounds[2][0].away_team == anchor
        assert rounds[3][0].home_team == anchor
        assert rounds[4][0].away_team == anchor

    def test_non_anchor_pairings_keep_first_listed_home(self):
        a, b, c, d = _teams(4)
        rounds = _by_round(build_round_robin_pairs([a, b, c, d]))
        # Round 2 working order is [a, d, b, c]: d sits before b
        assert rounds[2][1].home_team == d
        assert rounds[2][1].away_team == b

    def test_three_teams_skip_bye(self):
        a, b, c = _teams(3)
        pairs = build_round_robin_pairs([a, b, c])
        assert pairs == [Pairing(1, b, c), Pairing(2, c, a), Pairing(3, a, b)]

    def test_does_not_mutate_input(self):
        teams = _teams(5)
        before = list(teams)
        build_round_robin_pairs(teams)
        assert teams == before

    def test_two_teams(self):
        a, b = _teams(2)
        assert build_round_robin_pairs([a, b]) == [Pairing(1, a, b)]

    def test_one_team(self):
        with pytest.raises(InvalidArgumentError):
            build_round_robin_pairs(_teams(1))

    def test_empty(self):
        with pytest.raises(InvalidArgumentError):
            build_round_robin_pairs([])


class TestByeTeamsByRound:
    def test_even_has_no_byes(self):
        assert bye_teams_by_round(_teams(4)) == {}

    def test_three_teams(self):
        a, b, c = _teams(3)
        assert bye_teams_by_round([a, b, c]) == {1: [a], 2: [b], 3: [c]}

    def test_each_team_sits_out_once(self):
        teams = _teams(7)
        byes = bye_teams_by_round(teams)
        assert len(byes) == 7
        sat_out = [t for r in byes.values() for t in r]
        assert sorted(t.id for t in sat_out) == [t.id for t in teams]

    def test_bye_team_not_in_round(self):
        teams = _teams(5)
        rounds = _by_round(build_round_robin_pairs(teams))
        for rnd, (bye,) in bye_teams_by_round(teams).items():
            playing = {p.home_team.id for p in rounds[rnd]} | {p.away_team.id for p in rounds[rnd]}
            assert bye.id not in playing


class TestVerifyRoundRobin:
    def test_detects_missing_matchup(self):
        a, b, c = _teams(3)
        pairs = [Pairing(1, a, b), Pairing(2, a, c)]
        result = verify_round_robin(pairs, [a, b, c])
        assert not result["valid"]
        assert any("T2 vs T3" in e for e in result["errors"])

    def test_detects_duplicate_matchup(self):
        a, b, c = _teams(3)
        pairs = [Pairing(1, a, b), Pairing(2, a, c), Pairing(3, b, c), Pairing(4, b, a)]
        result = verify_round_robin(pairs, [a, b, c])
        assert not result["valid"]

    def test_detects_team_playing_twice_in_round(self):
        a, b, c = _teams(3)
        result = verify_round_robin([Pairing(1, a, b), Pairing(1, a, c)], [a, b, c])
        assert not result["valid"]
        assert any("T1" in e and "twice" in e for e in result["errors"])
