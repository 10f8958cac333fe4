"""
Summaries and Rankings

Turns parsed games into ordered, display-ready structures. The parser
core leaves tallies unordered; this module decides the presentation
order (count descending, then name ascending) and the rank labels.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from quakelog.core.game import Game
from quakelog.core.parser import LogParser


def sorted_tally(tally: dict[str, int], limit: Optional[int] = None) -> list[tuple[str, int]]:
    """
    Order a tally by count descending, ties by key ascending.

    Args:
        tally: key -> count
        limit: Keep only the first ``limit`` rows

    Returns:
        List of (key, count) tuples
    """
    rows = sorted(tally.items(), key=lambda x: (-x[1], x[0]))
    if limit is not None:
        rows = rows[:limit]
    return rows


def ordinal(position: int) -> str:
    """Rank label: 1st, 2nd, 3rd, then 4th, 5th, ... 11th, 21th, ..."""
    if position == 1:
        return "1st"
    if position == 2:
        return "2nd"
    if position == 3:
        return "3rd"
    return f"{position}th"


@dataclass
class PlayerRank:
    """One row of the player ranking report."""

    position: int
    label: str  # "1st", "2nd", ...
    player: str
    kills: int


def player_ranking(killers: dict[str, int], limit: Optional[int] = None) -> list[PlayerRank]:
    """Rank players by kills. Tied players get consecutive positions."""
    return [
        PlayerRank(position=position, label=ordinal(position), player=player, kills=kills)
        for position, (player, kills) in enumerate(sorted_tally(killers, limit), start=1)
    ]


@dataclass
class GameSummary:
    """Display-ready view of one game."""

    id: int
    status: str  # "completed" / "incomplete"
    event_count: int
    init_details: Optional[str]
    players: dict[int, str]
    kill_count: int
    kills_by_means: list[tuple[str, int]]
    killers: list[tuple[str, int]]


@dataclass
class LogSummary:
    """Display-ready view of a whole log."""

    games: list[GameSummary] = field(default_factory=list)
    kills_by_means: list[tuple[str, int]] = field(default_factory=list)
    killers: list[tuple[str, int]] = field(default_factory=list)
    ranking: list[PlayerRank] = field(default_factory=list)

    @property
    def total_games(self) -> int:
        return len(self.games)

    @property
    def completed_games(self) -> int:
        return sum(1 for g in self.games if g.status == "completed")

    @property
    def total_kills(self) -> int:
        return sum(count for _, count in self.kills_by_means)

    def get_game(self, game_id: int) -> Optional[GameSummary]:
        for game in self.games:
            if game.id == game_id:
                return game
        return None


def summarize_game(game: Game, limit: Optional[int] = None) -> GameSummary:
    """Build the summary of a single game."""
    return GameSummary(
        id=game.id,
        status=str(game.status),
        event_count=len(game.events),
        init_details=game.init_details,
        players=dict(sorted(game.players().items())),
        kill_count=len(game.kills()),
        kills_by_means=sorted_tally(game.kills_by_means),
        killers=sorted_tally(game.killers, limit),
    )


def summarize(parser: LogParser, limit: Optional[int] = None) -> LogSummary:
    """
    Build the summary of every finalized game plus overall totals.

    Args:
        parser: A LogParser that has finished its input
        limit: Cap the killer lists and ranking at this many players

    Returns:
        LogSummary
    """
    return LogSummary(
        games=[summarize_game(game, limit) for game in parser.games],
        kills_by_means=sorted_tally(parser.overall_kills_by_means),
        killers=sorted_tally(parser.overall_killers, limit),
        ranking=player_ranking(parser.overall_killers, limit),
    )
