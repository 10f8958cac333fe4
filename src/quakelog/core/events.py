"""
Event Model for quakelog

Every line of a server log that carries meaning is decoded into a
GameEvent: the raw clock text plus one Action. Action is a closed set of
frozen dataclasses; consumers dispatch over it with ``isinstance``
and never subclass it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from quakelog.core.constants import WORLD_PLAYER, ActionType


@dataclass(frozen=True)
class InitGame:
    """Session start. ``details`` is the opaque server configuration string."""

    details: str

    action_type = ActionType.INIT_GAME


@dataclass(frozen=True)
class ShutdownGame:
    """Session end marker."""

    action_type = ActionType.SHUTDOWN_GAME


@dataclass(frozen=True)
class ClientConnect:
    player_id: int

    action_type = ActionType.CLIENT_CONNECT


@dataclass(frozen=True)
class ClientUserinfoChanged:
    """A client's userinfo blob changed (name, model, team, ...)."""

    player_id: int
    info: str  # Backslash-delimited key/value pairs

    action_type = ActionType.CLIENT_USERINFO_CHANGED


@dataclass(frozen=True)
class ClientBegin:
    player_id: int

    action_type = ActionType.CLIENT_BEGIN


@dataclass(frozen=True)
class Item:
    """An item pickup."""

    item_id: int
    description: str  # e.g. "weapon_rocketlauncher"

    action_type = ActionType.ITEM


@dataclass(frozen=True)
class Kill:
    """A frag, including environmental deaths (player_name == "<world>")."""

    kill_id: int
    player_id: int
    victim_id: int
    player_name: str
    victim_name: str
    method: str  # Means of death, e.g. "MOD_ROCKET_SPLASH"

    action_type = ActionType.KILL

    @property
    def is_world_kill(self) -> bool:
        """True when the killer is the environment, not a player."""
        return self.player_name == WORLD_PLAYER


@dataclass(frozen=True)
class ClientDisconnect:
    player_id: int

    action_type = ActionType.CLIENT_DISCONNECT


@dataclass(frozen=True)
class Other:
    """Any ``Keyword: details`` line whose keyword is not recognized."""

    action_name: str
    details: str

    action_type = ActionType.OTHER


Action = Union[
    InitGame,
    ShutdownGame,
    ClientConnect,
    ClientUserinfoChanged,
    ClientBegin,
    Item,
    Kill,
    ClientDisconnect,
    Other,
]


@dataclass(frozen=True)
class GameEvent:
    """A decoded log line."""

    timestamp: str  # Raw "M:SS" / "MM:SS" text, never parsed
    action: Action

    @property
    def action_type(self) -> ActionType:
        return self.action.action_type
