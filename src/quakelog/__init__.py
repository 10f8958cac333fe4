"""
quakelog - Quake III Arena Server Log Analyzer

Splits a games.log into individual games and reports kill statistics
per game and across the whole file: kills by means of death and a
player ranking by kills.

Usage:
    from quakelog import parse_log

    parser = parse_log("games.log")

    for game in parser.games:
        print(f"Game {game.id}: {game.total_kills} kills")
"""

__version__ = "0.1.0"
__author__ = "quakelog Contributors"


def __getattr__(name):
    """Lazy import so `python -m quakelog --version` stays cheap."""
    if name == "LogParser":
        from quakelog.core.parser import LogParser
        return LogParser
    elif name == "parse_log":
        from quakelog.core.parser import parse_log
        return parse_log
    elif name == "Game":
        from quakelog.core.game import Game
        return Game
    elif name == "summarize":
        from quakelog.report import summarize
        return summarize
    elif name == "export_summary":
        from quakelog.export import export_summary
        return export_summary
    raise AttributeError(f"module 'quakelog' has no attribute '{name}'")
