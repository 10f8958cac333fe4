"""Tests for summaries, tally ordering and the player ranking."""

import pytest

from quakelog.core.game import Game
from quakelog.core.parser import LogParser, parse_line
from quakelog.report import (
    PlayerRank,
    ordinal,
    player_ranking,
    sorted_tally,
    summarize,
    summarize_game,
)


class TestSortedTally:
    """Tests for sorted_tally()."""

    def test_orders_by_count_descending(self):
        tally = {"MOD_SHOTGUN": 1, "MOD_RAILGUN": 5, "MOD_ROCKET": 3}
        assert sorted_tally(tally) == [("MOD_RAILGUN", 5), ("MOD_ROCKET", 3), ("MOD_SHOTGUN", 1)]

    def test_ties_broken_by_name(self):
        tally = {"Zeh": 2, "Alice": 2, "Mal": 3}
        assert sorted_tally(tally) == [("Mal", 3), ("Alice", 2), ("Zeh", 2)]

    def test_limit(self):
        tally = {"a": 3, "b": 2, "c": 1}
        assert sorted_tally(tally, limit=2) == [("a", 3), ("b", 2)]

    def test_limit_larger_than_tally(self):
        assert sorted_tally({"a": 1}, limit=10) == [("a", 1)]

    def test_empty(self):
        assert sorted_tally({}) == []


class TestOrdinal:
    """Tests for ordinal() rank labels."""

    @pytest.mark.parametrize(
        "position,label",
        [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (10, "10th"), (11, "11th"), (21, "21th")],
    )
    def test_labels(self, position, label):
        assert ordinal(position) == label


class TestPlayerRanking:
    """Tests for player_ranking()."""

    def test_ranking(self):
        ranking = player_ranking({"Isgalamido": 5, "Zeh": 2, "Mocinha": 3})
        assert ranking == [
            PlayerRank(position=1, label="1st", player="Isgalamido", kills=5),
            PlayerRank(position=2, label="2nd", player="Mocinha", kills=3),
            PlayerRank(position=3, label="3rd", player="Zeh", kills=2),
        ]

    def test_ties_get_consecutive_positions(self):
        ranking = player_ranking({"b": 1, "a": 1})
        assert [(r.position, r.player) for r in ranking] == [(1, "a"), (2, "b")]

    def test_limit(self):
        ranking = player_ranking({"a": 3, "b": 2, "c": 1}, limit=1)
        assert len(ranking) == 1
        assert ranking[0].player == "a"

    def test_empty(self):
        assert player_ranking({}) == []


class TestSummaries:
    """Tests for summarize_game() and summarize()."""

    def test_summarize_game(self):
        game = Game(id=7)
        for line in [
            "0:00 InitGame: \\sv_hostname\\Test",
            "0:01 ClientUserinfoChanged: 3 n\\Zeh\\t\\0",
            "0:02 ClientUserinfoChanged: 1 n\\Alice\\t\\0",
            "0:03 Kill: 1 1 3: Alice killed Zeh by MOD_RAILGUN",
            "0:04 Kill: 1022 3 22: <world> killed Zeh by MOD_FALLING",
            "0:05 ShutdownGame:",
        ]:
            game.add_event(parse_line(line))

        summary = summarize_game(game)

        assert summary.id == 7
        assert summary.status == "completed"
        assert summary.event_count == 6
        assert summary.init_details == "\\sv_hostname\\Test"
        assert list(summary.players.items()) == [(1, "Alice"), (3, "Zeh")]
        assert summary.kill_count == 2
        assert summary.kills_by_means == [("MOD_FALLING", 1), ("MOD_RAILGUN", 1)]
        assert summary.killers == [("Alice", 1)]

    def test_summarize_sample(self, parsed_sample):
        summary = summarize(parsed_sample)

        assert summary.total_games == 3
        assert summary.completed_games == 1
        assert summary.total_kills == 6
        assert summary.killers == [("Isgalamido", 2), ("Assasinu Credi", 1), ("Zeh", 1)]
        assert [r.label for r in summary.ranking] == ["1st", "2nd", "3rd"]
        assert [r.player for r in summary.ranking] == ["Isgalamido", "Assasinu Credi", "Zeh"]
        assert [g.status for g in summary.games] == ["completed", "incomplete", "incomplete"]

    def test_summarize_limit(self, parsed_sample):
        summary = summarize(parsed_sample, limit=1)
        assert summary.killers == [("Isgalamido", 2)]
        assert len(summary.ranking) == 1
        # Means are never capped
        assert summary.total_kills == 6

    def test_get_game(self, parsed_sample):
        summary = summarize(parsed_sample)
        assert summary.get_game(2).event_count == 14
        assert summary.get_game(99) is None

    def test_summarize_empty_parser(self):
        summary = summarize(LogParser())
        assert summary.total_games == 0
        assert summary.total_kills == 0
        assert summary.ranking == []
