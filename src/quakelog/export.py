"""
Export Functionality for quakelog

Provides multiple export formats for parse results:
- JSON (default)
- CSV
- Excel (XLSX)

Each format has its own advantages:
- JSON: Complete data, programmatic access
- CSV: One row per game, widely compatible
- Excel: Multi-sheet workbook with games, tallies and ranking
"""

import csv
import json
import logging
from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from io import StringIO
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from quakelog import __version__
from quakelog.core.game import Game
from quakelog.core.parser import LogParser
from quakelog.report import LogSummary, sorted_tally, summarize

logger = logging.getLogger(__name__)

GAME_COLUMNS = ["game", "status", "events", "players", "kills", "init_details"]


# ============================================================================
# Data Conversion Utilities
# ============================================================================

def dataclass_to_dict(obj: Any) -> Any:
    """Convert a dataclass (or nested dataclasses) to a dictionary."""
    if is_dataclass(obj) and not isinstance(obj, type):
        result = {}
        for key, value in asdict(obj).items():
            result[key] = dataclass_to_dict(value)
        return result
    elif isinstance(obj, dict):
        return {k: dataclass_to_dict(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [dataclass_to_dict(item) for item in obj]
    elif isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, Path):
        return str(obj)
    else:
        return obj


def event_to_dict(event) -> dict[str, Any]:
    """Serialize a GameEvent as ``{"timestamp", "action", **fields}``."""
    return {
        "timestamp": event.timestamp,
        "action": event.action_type.value,
        **asdict(event.action),
    }


def game_to_dict(game: Game, include_events: bool = False) -> dict[str, Any]:
    """Serialize a Game with sorted tallies."""
    data: dict[str, Any] = {
        "id": game.id,
        "status": game.status.value,
        "completed": game.completed,
        "init_details": game.init_details,
        "event_count": len(game.events),
        "players": {str(pid): name for pid, name in sorted(game.players().items())},
        "total_kills": game.total_kills,
        "kills_by_means": dict(sorted_tally(game.kills_by_means)),
        "killers": dict(sorted_tally(game.killers)),
    }
    if include_events:
        data["events"] = [event_to_dict(e) for e in game.events]
    return data


# ============================================================================
# DataFrames
# ============================================================================

def games_to_dataframe(games: list[Game]) -> pd.DataFrame:
    """One row per game."""
    records = [
        {
            "game": game.id,
            "status": game.status.value,
            "events": len(game.events),
            "players": len(game.players()),
            "kills": game.total_kills,
            "init_details": game.init_details or "",
        }
        for game in games
    ]
    return pd.DataFrame(records, columns=GAME_COLUMNS)


def tally_to_dataframe(tally: dict[str, int], key_name: str) -> pd.DataFrame:
    """Two-column frame ``[key_name, "kills"]`` in presentation order."""
    return pd.DataFrame(sorted_tally(tally), columns=[key_name, "kills"])


# ============================================================================
# JSON Export
# ============================================================================

def export_to_json(
    data: dict[str, Any],
    output_path: Optional[Path] = None,
    indent: int = 2,
    include_metadata: bool = True,
) -> str:
    """
    Export results to JSON format.

    Args:
        data: Results dictionary
        output_path: Optional path to write the file
        indent: JSON indentation level
        include_metadata: Whether to include export metadata

    Returns:
        JSON string
    """
    export_data = dataclass_to_dict(data)

    if include_metadata:
        export_data = {
            "_metadata": {
                "exported_at": datetime.now().isoformat(),
                "format": "quakelog_json",
                "version": __version__,
            },
            **export_data,
        }

    json_str = json.dumps(export_data, indent=indent, default=str)

    if output_path:
        output_path.write_text(json_str)
        logger.info(f"Exported JSON to: {output_path}")

    return json_str


def parser_to_dict(parser: LogParser, include_events: bool = False) -> dict[str, Any]:
    """Full JSON document for a parsed log."""
    summary = summarize(parser)
    return {
        "games": [game_to_dict(g, include_events) for g in parser.games],
        "overall": {
            "total_games": summary.total_games,
            "completed_games": summary.completed_games,
            "total_kills": summary.total_kills,
            "kills_by_means": dict(summary.kills_by_means),
            "killers": dict(summary.killers),
            "ranking": summary.ranking,
        },
    }


# ============================================================================
# CSV Export
# ============================================================================

def export_games_csv(
    games: list[Game],
    output_path: Optional[Path] = None,
    delimiter: str = ",",
    include_header: bool = True,
) -> str:
    """
    Export the per-game table to CSV format.

    Args:
        games: Finalized games
        output_path: Optional path to write the file
        delimiter: CSV delimiter character
        include_header: Whether to include column headers

    Returns:
        CSV string
    """
    output = StringIO()
    writer = csv.DictWriter(output, fieldnames=GAME_COLUMNS, delimiter=delimiter)

    if include_header:
        writer.writeheader()

    for row in games_to_dataframe(games).to_dict("records"):
        writer.writerow(row)

    csv_str = output.getvalue()

    if output_path:
        output_path.write_text(csv_str)
        logger.info(f"Exported CSV to: {output_path}")

    return csv_str


# ============================================================================
# Excel Export
# ============================================================================

def export_to_excel(parser: LogParser, output_path: Path) -> None:
    """
    Export results to Excel format.

    Creates a multi-sheet workbook with:
    - Games: one row per game
    - Kills by Means / Killers: overall tallies
    - Ranking: the player ranking report

    Args:
        parser: A LogParser that has finished its input
        output_path: Path to write the Excel file
    """
    summary: LogSummary = summarize(parser)

    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        games_to_dataframe(parser.games).to_excel(writer, sheet_name="Games", index=False)
        tally_to_dataframe(parser.overall_kills_by_means, "means").to_excel(
            writer, sheet_name="Kills by Means", index=False
        )
        tally_to_dataframe(parser.overall_killers, "player").to_excel(
            writer, sheet_name="Killers", index=False
        )
        ranking_df = pd.DataFrame(
            [dataclass_to_dict(rank) for rank in summary.ranking],
            columns=["position", "label", "player", "kills"],
        )
        ranking_df.to_excel(writer, sheet_name="Ranking", index=False)

    logger.info(f"Exported Excel to: {output_path}")


# ============================================================================
# Unified Export Function
# ============================================================================

def export_summary(
    parser: LogParser,
    output_path: Path,
    format: Optional[str] = None,
    include_events: bool = False,
    indent: int = 2,
    delimiter: str = ",",
) -> None:
    """
    Export parse results to the specified format.

    Format is detected from file extension if not specified.

    Args:
        parser: A LogParser that has finished its input
        output_path: Path to write the export
        format: Optional format override (json, csv, xlsx)
        include_events: Include every event in JSON output
        indent: JSON indentation level
        delimiter: CSV delimiter character
    """
    if format is None:
        format = output_path.suffix.lstrip(".").lower()

    if format == "json":
        export_to_json(parser_to_dict(parser, include_events), output_path, indent=indent)

    elif format == "csv":
        export_games_csv(parser.games, output_path, delimiter=delimiter)

    elif format in ("xlsx", "excel"):
        export_to_excel(parser, output_path)

    else:
        raise ValueError(f"Unsupported export format: {format}")
