"""
Log Parser for Quake III Arena Server Logs

Turns the lines of a games.log into Game records:

    raw line -> tokenize_line() -> decode_action() -> GameEvent
             -> LogParser.handle_event() -> Game

LogParser is the segmentation state machine. It holds at most one open
game at a time:

- InitGame always starts a new game. A game that is still open is
  closed first (servers restart without writing ShutdownGame).
- ShutdownGame completes and closes the open game.
- Anything else is appended to the open game, or dropped when no game
  is open.
- finish() closes a game left open at end of input.

Each closed game is folded into the overall tallies exactly once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from quakelog.core.config import ParserConfig
from quakelog.core.decoder import decode_action
from quakelog.core.events import GameEvent, InitGame, ShutdownGame
from quakelog.core.game import Game, merge_tally
from quakelog.core.tokenizer import tokenize_line
from quakelog.core.utils import timed

logger = logging.getLogger(__name__)


def parse_line(line: str) -> Optional[GameEvent]:
    """
    Decode a single log line.

    Returns:
        GameEvent, or None for lines that carry no event
    """
    tokens = tokenize_line(line)
    if tokens is None:
        return None

    timestamp, content = tokens
    action = decode_action(content)
    if action is None:
        return None

    return GameEvent(timestamp=timestamp, action=action)


class LogParser:
    """
    Segments a server log into games and keeps overall kill tallies.

    Usage:
        parser = LogParser()
        parser.parse_file("games.log")
        for game in parser.games:
            print(game.id, game.killers)
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()

        self.games: list[Game] = []
        self.current_game: Optional[Game] = None
        self.game_counter = 0

        self.overall_kills_by_means: dict[str, int] = {}
        self.overall_killers: dict[str, int] = {}

        # Bookkeeping for logs and summaries
        self.lines_read = 0
        self.skipped_lines = 0
        self.dropped_events = 0

    @property
    def has_open_game(self) -> bool:
        return self.current_game is not None

    @property
    def total_events(self) -> int:
        """Events held by finalized games."""
        return sum(len(game.events) for game in self.games)

    def handle_line(self, line: str) -> Optional[GameEvent]:
        """Decode a line and feed the resulting event, if any."""
        self.lines_read += 1
        event = parse_line(line)
        if event is None:
            self.skipped_lines += 1
            if line.strip():
                logger.debug(f"Skipping non-event line {self.lines_read}: {line.rstrip()!r}")
            return None

        self.handle_event(event)
        return event

    def handle_event(self, event: GameEvent) -> None:
        """Advance the state machine by one event."""
        action = event.action

        if isinstance(action, InitGame):
            if self.has_open_game:
                logger.warning(
                    f"Game {self.current_game.id} closed without ShutdownGame "
                    f"(new InitGame at {event.timestamp})"
                )
                self._finalize_current()

            self.game_counter += 1
            game = Game(id=self.game_counter)
            game.add_event(event)
            self.current_game = game
            return

        if self.current_game is None:
            self.dropped_events += 1
            logger.debug(f"Dropping {action.action_type} at {event.timestamp}: no open game")
            return

        self.current_game.add_event(event)
        if isinstance(action, ShutdownGame):
            self._finalize_current()

    def finish(self) -> list[Game]:
        """
        Close out the input. A game still open is finalized as incomplete.

        Returns:
            All finalized games
        """
        if self.has_open_game:
            logger.warning(f"Game {self.current_game.id} still open at end of input")
            self._finalize_current()
        return self.games

    def parse_lines(self, lines: Iterable[str]) -> list[Game]:
        """
        Parse a complete sequence of lines, then finish().

        Args:
            lines: Log lines in file order

        Returns:
            All finalized games
        """
        for line in lines:
            self.handle_line(line)
        return self.finish()

    @timed
    def parse_file(self, file_path: str | Path) -> list[Game]:
        """
        Parse a log file from disk.

        Lines end at ``\\n`` only, so a stray ``\\r`` inside a line stays part
        of it (a trailing ``\\r`` is dropped by the tokenizer) and the file
        parses exactly like ``parse_lines(content.split("\\n"))``.

        I/O errors (missing file, directory, permissions) propagate to the
        caller. Invalid bytes do not: with the default ``errors="replace"``
        they become U+FFFD and the run continues. Set
        ``ParserConfig.errors = "strict"`` to fail with UnicodeDecodeError
        instead.

        Args:
            file_path: Path to the games.log file

        Returns:
            All finalized games
        """
        path = Path(file_path)
        logger.info(f"Parsing log: {path}")

        with open(
            path,
            encoding=self.config.encoding,
            errors=self.config.errors,
            newline="\n",
        ) as f:
            games = self.parse_lines(f)

        logger.info(
            f"Parsed {len(games)} games ({self.total_events} events, "
            f"{self.skipped_lines} skipped lines) from {path}"
        )
        return games

    def _finalize_current(self) -> None:
        """Move the open game into ``games`` and fold its tallies."""
        game = self.current_game
        self.current_game = None
        if game is None:
            return

        merge_tally(self.overall_kills_by_means, game.kills_by_means)
        merge_tally(self.overall_killers, game.killers)
        self.games.append(game)


def parse_log(file_path: str | Path, config: Optional[ParserConfig] = None) -> LogParser:
    """
    Convenience function to parse a log file.

    Args:
        file_path: Path to the games.log file
        config: Optional parser settings

    Returns:
        The LogParser holding games and overall tallies
    """
    parser = LogParser(config)
    parser.parse_file(file_path)
    return parser
