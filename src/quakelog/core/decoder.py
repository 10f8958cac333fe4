"""
Action Decoder

Maps the content of a log line (everything after the clock) onto one of
the Action types in ``quakelog.core.events``.

Dispatch is by keyword prefix, first match wins:

    InitGame:               -> InitGame(details)
    ShutdownGame:           -> ShutdownGame (exact, no payload)
    ClientConnect:          -> ClientConnect(player_id)
    ClientUserinfoChanged:  -> ClientUserinfoChanged(player_id, info)
    ClientBegin:            -> ClientBegin(player_id)
    ClientDisconnect:       -> ClientDisconnect(player_id)
    Item:                   -> Item(item_id, description)
    Kill:                   -> Kill(...) via parse_kill()
    <anything>:             -> Other(action_name, details)

A recognized keyword with a malformed payload decodes to None; the line
is dropped rather than reported as Other.
"""

import re
from typing import Optional

from quakelog.core.constants import PLAYER_NAME_MARKER, U32_MAX, ActionType
from quakelog.core.events import (
    Action,
    ClientBegin,
    ClientConnect,
    ClientDisconnect,
    ClientUserinfoChanged,
    InitGame,
    Item,
    Kill,
    Other,
    ShutdownGame,
)

# "<player> killed <victim> by <method>", shortest names win
KILL_DESCRIPTION_PATTERN = re.compile(r"^(.+?)\s+killed\s+(.+?)\s+by\s+(.+)$")

# Display name inside a userinfo blob: n\<name>\...
PLAYER_NAME_PATTERN = re.compile(re.escape(PLAYER_NAME_MARKER) + r"([^\\]+)")


def parse_u32(value: str) -> Optional[int]:
    """
    Parse an unsigned 32-bit integer.

    Only ASCII digits are accepted; signs, whitespace, other numerals and
    values above 2**32 - 1 all fail.
    """
    if not value or not value.isascii() or not value.isdigit():
        return None
    number = int(value)
    if number > U32_MAX:
        return None
    return number


def _split_id_and_rest(details: str) -> Optional[tuple[int, str]]:
    """Split ``"<id> <rest>"`` on the first space."""
    parts = details.split(" ", 1)
    if len(parts) < 2:
        return None
    number = parse_u32(parts[0])
    if number is None:
        return None
    return number, parts[1]


def _payload(content: str, action_type: ActionType) -> str:
    """Content after the keyword prefix, trimmed."""
    return content[len(action_type.prefix):].strip()


def parse_kill(details: str) -> Optional[Kill]:
    """
    Decode the payload of a Kill line.

    Args:
        details: Text after ``Kill:``, e.g.
            ``"2 3 7: Isgalamido killed Mocinha by MOD_ROCKET_SPLASH"``

    Returns:
        Kill, or None if the ids or the description are malformed
    """
    ids_part, sep, description_part = details.partition(":")
    if not sep:
        return None

    id_tokens = ids_part.split()
    if len(id_tokens) != 3:
        return None

    ids = [parse_u32(token) for token in id_tokens]
    if any(number is None for number in ids):
        return None
    kill_id, player_id, victim_id = ids

    match = KILL_DESCRIPTION_PATTERN.match(description_part.strip())
    if match is None:
        return None

    return Kill(
        kill_id=kill_id,
        player_id=player_id,
        victim_id=victim_id,
        player_name=match.group(1),
        victim_name=match.group(2),
        method=match.group(3),
    )


def decode_action(content: str) -> Optional[Action]:
    """
    Decode the content of a log line into an Action.

    Args:
        content: Line text after the clock

    Returns:
        The decoded Action, or None if the line carries no event
    """
    if content.startswith(ActionType.INIT_GAME.prefix):
        return InitGame(details=_payload(content, ActionType.INIT_GAME))

    if content == ActionType.SHUTDOWN_GAME.prefix:
        return ShutdownGame()

    if content.startswith(ActionType.CLIENT_CONNECT.prefix):
        player_id = parse_u32(_payload(content, ActionType.CLIENT_CONNECT))
        return ClientConnect(player_id=player_id) if player_id is not None else None

    if content.startswith(ActionType.CLIENT_USERINFO_CHANGED.prefix):
        parsed = _split_id_and_rest(_payload(content, ActionType.CLIENT_USERINFO_CHANGED))
        if parsed is None:
            return None
        player_id, info = parsed
        return ClientUserinfoChanged(player_id=player_id, info=info)

    if content.startswith(ActionType.CLIENT_BEGIN.prefix):
        player_id = parse_u32(_payload(content, ActionType.CLIENT_BEGIN))
        return ClientBegin(player_id=player_id) if player_id is not None else None

    if content.startswith(ActionType.CLIENT_DISCONNECT.prefix):
        player_id = parse_u32(_payload(content, ActionType.CLIENT_DISCONNECT))
        return ClientDisconnect(player_id=player_id) if player_id is not None else None

    if content.startswith(ActionType.ITEM.prefix):
        parsed = _split_id_and_rest(_payload(content, ActionType.ITEM))
        if parsed is None:
            return None
        item_id, description = parsed
        return Item(item_id=item_id, description=description)

    if content.startswith(ActionType.KILL.prefix):
        return parse_kill(_payload(content, ActionType.KILL))

    action_name, sep, details = content.partition(":")
    if sep:
        return Other(action_name=action_name, details=details.strip())

    return None


def extract_player_name(info: str) -> Optional[str]:
    """
    Pull the display name out of a userinfo blob.

    >>> extract_player_name("n\\\\Isgalamido\\\\t\\\\0\\\\model\\\\xian/default")
    'Isgalamido'

    Returns None if the blob has no ``n\\`` marker or the name is empty.
    """
    match = PLAYER_NAME_PATTERN.search(info)
    if match is None:
        return None
    return match.group(1)
