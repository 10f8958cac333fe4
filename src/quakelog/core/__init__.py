"""
quakelog Core - log parsing and game segmentation.

This module contains the fundamental components:
- constants: Log keywords and sentinel values
- events: The GameEvent / Action data model
- tokenizer: Clock/content split of a raw line
- decoder: Content -> Action decoding
- game: Game records and their running tallies
- parser: The game segmentation state machine
- config: Application configuration management
"""

from quakelog.core.constants import WORLD_PLAYER, ActionType, GameStatus
from quakelog.core.decoder import decode_action, extract_player_name, parse_kill
from quakelog.core.events import (
    Action,
    ClientBegin,
    ClientConnect,
    ClientDisconnect,
    ClientUserinfoChanged,
    GameEvent,
    InitGame,
    Item,
    Kill,
    Other,
    ShutdownGame,
)
from quakelog.core.game import Game
from quakelog.core.parser import LogParser, parse_line, parse_log
from quakelog.core.tokenizer import tokenize_line

__all__ = [
    # Enums / constants
    "ActionType",
    "GameStatus",
    "WORLD_PLAYER",
    # Event model
    "Action",
    "ClientBegin",
    "ClientConnect",
    "ClientDisconnect",
    "ClientUserinfoChanged",
    "GameEvent",
    "InitGame",
    "Item",
    "Kill",
    "Other",
    "ShutdownGame",
    # Parsing
    "Game",
    "LogParser",
    "decode_action",
    "extract_player_name",
    "parse_kill",
    "parse_line",
    "parse_log",
    "tokenize_line",
]
