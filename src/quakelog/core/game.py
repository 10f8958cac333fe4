"""
Game Record

A Game is one session of the server log, from an InitGame line to its
ShutdownGame (or to whatever closed it early). Kill tallies are kept up
to date as events are appended so that nothing needs to re-scan the
event list to report them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from quakelog.core.constants import GameStatus
from quakelog.core.decoder import extract_player_name
from quakelog.core.events import (
    ClientUserinfoChanged,
    GameEvent,
    InitGame,
    Kill,
    ShutdownGame,
)


def increment(tally: dict[str, int], key: str, amount: int = 1) -> None:
    """Insert-or-increment a counter entry."""
    tally[key] = tally.get(key, 0) + amount


def merge_tally(target: dict[str, int], source: dict[str, int]) -> None:
    """Key-wise add ``source`` into ``target``."""
    for key, count in source.items():
        increment(target, key, count)


@dataclass
class Game:
    """A single game session and its running statistics."""

    id: int
    events: list[GameEvent] = field(default_factory=list)
    init_details: Optional[str] = None
    completed: bool = False

    # Running tallies
    kills_by_means: dict[str, int] = field(default_factory=dict)  # method -> kills
    killers: dict[str, int] = field(default_factory=dict)  # player name -> kills, no <world>

    def add_event(self, event: GameEvent) -> None:
        """Append an event and update the tallies it affects."""
        action = event.action
        if isinstance(action, InitGame):
            self.init_details = action.details
        elif isinstance(action, ShutdownGame):
            self.completed = True
        elif isinstance(action, Kill):
            increment(self.kills_by_means, action.method)
            if not action.is_world_kill:
                increment(self.killers, action.player_name)
        self.events.append(event)

    @property
    def status(self) -> GameStatus:
        return GameStatus.COMPLETED if self.completed else GameStatus.INCOMPLETE

    @property
    def total_kills(self) -> int:
        """Every kill in the game, world kills included."""
        return sum(self.kills_by_means.values())

    def players(self) -> dict[int, str]:
        """
        Map player id -> display name from the game's userinfo changes.

        A later rename of the same id replaces the earlier name. Blobs
        without a readable name are ignored.
        """
        players: dict[int, str] = {}
        for event in self.events:
            action = event.action
            if isinstance(action, ClientUserinfoChanged):
                name = extract_player_name(action.info)
                if name is not None:
                    players[action.player_id] = name
        return players

    def kills(self) -> list[GameEvent]:
        """The game's Kill events, in log order."""
        return [event for event in self.events if isinstance(event.action, Kill)]
