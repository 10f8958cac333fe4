"""
quakelog - Constants

Log keywords, sentinel names and numeric limits for Quake III Arena
server logs (games.log).
"""

from enum import StrEnum


class ActionType(StrEnum):
    """
    Action keywords recognized in a log line.

    The value is the keyword exactly as it appears before the colon.
    """

    INIT_GAME = "InitGame"
    SHUTDOWN_GAME = "ShutdownGame"
    CLIENT_CONNECT = "ClientConnect"
    CLIENT_USERINFO_CHANGED = "ClientUserinfoChanged"
    CLIENT_BEGIN = "ClientBegin"
    CLIENT_DISCONNECT = "ClientDisconnect"
    ITEM = "Item"
    KILL = "Kill"
    OTHER = "Other"  # Catch-all, never matched as a prefix

    @property
    def prefix(self) -> str:
        """Keyword with its trailing colon, e.g. ``"Kill:"``."""
        return f"{self.value}:"


class GameStatus(StrEnum):
    """Display status of a finalized game."""

    COMPLETED = "completed"
    INCOMPLETE = "incomplete"


# Killer name used by the server for environmental deaths (falling, lava, ...)
WORLD_PLAYER = "<world>"

# Marker introducing the display name inside a userinfo blob
PLAYER_NAME_MARKER = "n\\"

# Numeric fields are unsigned 32-bit on the server side
U32_MAX = 2**32 - 1
