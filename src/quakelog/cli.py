"""
quakelog CLI - Command Line Interface for Quake III Arena log analysis

Provides commands for:
- Parsing a games.log and printing per-game and overall statistics
- Printing the player ranking report
- Listing the games found in a log
- Generating a default configuration file
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from quakelog import __version__
from quakelog.core.config import (
    EXPORT_FORMATS,
    QuakeLogConfig,
    generate_default_config,
    load_config,
    setup_logging,
)
from quakelog.core.parser import LogParser
from quakelog.export import export_summary
from quakelog.report import GameSummary, LogSummary, PlayerRank, summarize

app = typer.Typer(
    name="quakelog",
    help="Quake III Arena server log analyzer - games, kills by means and player rankings",
    add_completion=False,
)
console = Console()

logger = logging.getLogger(__name__)

_state = {"verbose": False}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]quakelog[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output"
    )
) -> None:
    """quakelog - Quake III Arena Server Log Analyzer"""
    _state["verbose"] = verbose


def _load_settings(config_file: Optional[Path]) -> QuakeLogConfig:
    """Load config and set up logging, exiting on invalid settings."""
    try:
        config = load_config(config_file)
    except (ValueError, OSError) as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(1)

    setup_logging(config.logging, verbose=_state["verbose"])
    return config


def _parse(log_file: Path, config: QuakeLogConfig) -> LogParser:
    """Parse the log, turning I/O errors into a clean exit."""
    parser = LogParser(config.parser)
    try:
        parser.parse_file(log_file)
    except OSError as e:
        console.print(f"[red]Error reading log:[/red] {e}")
        raise typer.Exit(1)
    return parser


LOG_FILE_ARGUMENT = typer.Argument(
    ...,
    help="Path to the games.log file",
    exists=True,
    dir_okay=False,
    resolve_path=True,
)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Configuration file (.yaml, .toml or .json)",
    exists=True,
    dir_okay=False,
)


@app.command()
def parse(
    log_file: Path = LOG_FILE_ARGUMENT,
    game: Optional[int] = typer.Option(
        None,
        "--game",
        "-g",
        help="Only show this game (1-based id)"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file for results (format detected from extension: .json, .csv, .xlsx)"
    ),
    format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Export format override: json, csv, xlsx"
    ),
    top: Optional[int] = typer.Option(
        None,
        "--top",
        "-t",
        min=1,
        help="Only list the best N players"
    ),
    config_file: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    Parse a server log and display per-game and overall statistics.

    For every game: event count, completion status, players, kills,
    kills by means and killers. Then the overall kills by means,
    killers and the player ranking report.
    """
    config = _load_settings(config_file)
    limit = top if top is not None else config.report.top_n

    if format is not None and format.lower() not in EXPORT_FORMATS:
        console.print(f"[red]Unsupported export format:[/red] {format}")
        raise typer.Exit(1)

    parser = _parse(log_file, config)
    summary = summarize(parser, limit)

    if game is not None:
        game_summary = summary.get_game(game)
        if game_summary is None:
            console.print(
                f"[yellow]Warning:[/yellow] Game {game} not found "
                f"({summary.total_games} games in log)"
            )
            raise typer.Exit(1)
        _display_game(game_summary, config)
    else:
        console.print(f"\n[bold blue]Parsed {summary.total_games} games[/bold blue]\n")
        for game_summary in summary.games:
            _display_game(game_summary, config)
        _display_overall(summary, config)

    if output:
        export_format = format.lower() if format else None
        if export_format is None and not output.suffix:
            export_format = config.export.default_format
        try:
            export_summary(
                parser,
                output,
                format=export_format,
                include_events=config.export.include_events,
                indent=config.export.json_indent,
                delimiter=config.export.csv_delimiter,
            )
        except ValueError as e:
            console.print(f"[red]Export failed:[/red] {e}")
            raise typer.Exit(1)
        console.print(f"\n[green]Results exported to:[/green] {output}")


@app.command()
def ranking(
    log_file: Path = LOG_FILE_ARGUMENT,
    top: Optional[int] = typer.Option(
        None,
        "--top",
        "-t",
        min=1,
        help="Only list the best N players"
    ),
    config_file: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    Display the overall player ranking by kills.

    Kills by <world> (falls, lava, crushers) are not credited to anyone.
    """
    config = _load_settings(config_file)
    limit = top if top is not None else config.report.top_n

    parser = _parse(log_file, config)
    summary = summarize(parser, limit)

    if not summary.ranking:
        console.print("[yellow]No player kills found[/yellow]")
        return

    _display_ranking(summary.ranking)


@app.command()
def games(
    log_file: Path = LOG_FILE_ARGUMENT,
    config_file: Optional[Path] = CONFIG_OPTION,
) -> None:
    """
    List the games found in a server log, one line each.
    """
    config = _load_settings(config_file)
    parser = _parse(log_file, config)
    summary = summarize(parser)

    if not summary.games:
        console.print("[yellow]No games found[/yellow]")
        return

    table = Table(title=f"Games ({summary.completed_games}/{summary.total_games} completed)")
    table.add_column("Game", justify="right", style="cyan")
    table.add_column("Status")
    table.add_column("Events", justify="right")
    table.add_column("Players", justify="right")
    table.add_column("Kills", justify="right")

    for g in summary.games:
        status_style = "green" if g.status == "completed" else "yellow"
        table.add_row(
            str(g.id),
            f"[{status_style}]{g.status}[/{status_style}]",
            str(g.event_count),
            str(len(g.players)),
            str(g.kill_count),
        )

    console.print(table)


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(
        Path("quakelog.yaml"),
        help="Where to write the configuration (.yaml or .json)",
        dir_okay=False,
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing file"
    ),
) -> None:
    """
    Write a configuration file with the default settings.
    """
    if path.exists() and not force:
        console.print(f"[yellow]{path} already exists[/yellow] (use --force to overwrite)")
        raise typer.Exit(1)

    try:
        generate_default_config(path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Wrote default configuration to:[/green] {path}")


@app.command()
def info() -> None:
    """
    Display information about quakelog and the environment.
    """
    import platform as plat

    import pandas
    import rich

    console.print(f"\n[bold blue]quakelog[/bold blue] v{__version__}\n")

    table = Table(show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Python", plat.python_version())
    table.add_row("Platform", plat.system())
    table.add_row("pandas", pandas.__version__)
    table.add_row("typer", getattr(typer, "__version__", "installed"))
    table.add_row("rich", getattr(rich, "__version__", "installed"))

    console.print(table)


def _display_game(game: GameSummary, config: QuakeLogConfig) -> None:
    """Display one game's panel and tables."""
    status_style = "green" if game.status == "completed" else "yellow"
    console.print(Panel(
        f"[cyan]Events:[/cyan] {game.event_count}\n"
        f"[cyan]Status:[/cyan] [{status_style}]{game.status}[/{status_style}]\n"
        f"[cyan]Players:[/cyan] {len(game.players)}\n"
        f"[cyan]Kills:[/cyan] {game.kill_count}",
        title=f"[bold blue]Game {game.id}[/bold blue]",
        expand=False,
    ))

    if config.report.show_players and game.players:
        table = Table(title="Players")
        table.add_column("ID", justify="right", style="cyan")
        table.add_column("Name")
        for player_id, name in game.players.items():
            table.add_row(str(player_id), escape(name))
        console.print(table)

    if config.report.show_means and game.kills_by_means:
        _display_tally("Kills by Means", "Means", game.kills_by_means)

    if game.killers:
        _display_tally("Killers", "Player", game.killers)

    console.print()


def _display_overall(summary: LogSummary, config: QuakeLogConfig) -> None:
    """Display the overall statistics section."""
    console.print("[bold blue]=== Overall Statistics ===[/bold blue]\n")

    if not summary.kills_by_means and not summary.killers:
        console.print("[yellow]No kills found[/yellow]")
        return

    if config.report.show_means and summary.kills_by_means:
        _display_tally("Overall Kills by Means", "Means", summary.kills_by_means)

    if summary.killers:
        _display_tally("Overall Killers", "Player", summary.killers)

    if summary.ranking:
        _display_ranking(summary.ranking)


def _display_tally(title: str, key_label: str, rows: list[tuple[str, int]]) -> None:
    """Display a sorted key/kills table."""
    table = Table(title=title)
    table.add_column(key_label, style="cyan")
    table.add_column("Kills", justify="right")
    for key, count in rows:
        table.add_row(escape(key), str(count))
    console.print(table)


def _display_ranking(ranking: list[PlayerRank]) -> None:
    """Display the player ranking report."""
    table = Table(title="Player Ranking Report")
    table.add_column("Place", justify="right", style="cyan")
    table.add_column("Player")
    table.add_column("Kills", justify="right")
    for rank in ranking:
        table.add_row(rank.label, escape(rank.player), str(rank.kills))
    console.print(table)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
