"""CLI entrypoint using Typer.

This module defines the command-line interface for the fantasy valuation
library: ranking season averages with category punts, ranking game logs by
fantasy points, and building a head-to-head matchup matrix.

Example:
    $ fantasy-value --help
    $ fantasy-value rank season_averages.csv --punt turnovers --punt free_throw_percentage
    $ fantasy-value games game_logs.json --exclude field_goals
    $ fantasy-value matchup scoreboard.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import pandas as pd
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fantasy_value import __version__
from fantasy_value.config import get_settings
from fantasy_value.logging import get_logger, setup_logging

# Initialize console for rich output
console = Console()
logger = get_logger(__name__)

app = typer.Typer(
    name="fantasy-value",
    help="Fantasy basketball valuation CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]fantasy-value[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-V",
            help="Enable verbose output",
        ),
    ] = False,
) -> None:
    """Fantasy basketball valuation CLI.

    Z-score rankings with category punts, fantasy point rankings, and
    head-to-head matchup matrices from exported stat rows.
    """
    settings = get_settings()
    log_level = "DEBUG" if verbose else settings.log_level
    setup_logging(level=log_level, log_dir=settings.log_dir_obj)


# =============================================================================
# Helpers
# =============================================================================


def _load_rows(path: Path) -> list[dict[str, Any]]:
    """Read CSV or JSON rows into plain dicts (NaN becomes None)."""
    if not path.exists():
        console.print(f"[red]Error: File not found: {path}[/red]")
        raise typer.Exit(1)

    try:
        if path.suffix.lower() == ".csv":
            frame = pd.read_csv(path)
        else:
            frame = pd.read_json(path, orient="records")
    except ValueError as e:
        console.print(f"[red]Error: Could not read {path}: {e}[/red]")
        raise typer.Exit(1) from e

    frame = frame.astype(object).where(pd.notna(frame), None)
    rows = frame.to_dict(orient="records")
    logger.debug("Loaded {} rows from {}", len(rows), path)
    return rows


def _check_keys(keys: list[str], allowed: set[str], option: str) -> None:
    unknown = sorted(set(keys) - allowed)
    if unknown:
        console.print(
            f"[red]Error: Unknown {option} key(s): {', '.join(unknown)}[/red]\n"
            f"Valid keys: {', '.join(sorted(allowed))}"
        )
        raise typer.Exit(1)


def _delta(change: int) -> str:
    if change > 0:
        return f"[green]+{change}[/green]"
    if change < 0:
        return f"[red]{change}[/red]"
    return "0"


# =============================================================================
# Commands
# =============================================================================


@app.command("rank")
def rank(
    path: Annotated[Path, typer.Argument(help="CSV or JSON file of stat rows")],
    punt: Annotated[
        list[str] | None,
        typer.Option("--punt", "-p", help="Category key to punt (repeatable)"),
    ] = None,
    game_logs: Annotated[
        bool,
        typer.Option("--game-logs", "-g", help="Rows are game logs; average them first"),
    ] = False,
    min_games: Annotated[
        int | None,
        typer.Option("--min-games", help="Games required to join the reference cohort"),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Rows to show"),
    ] = 25,
    export: Annotated[
        Path | None,
        typer.Option("--export", "-o", help="Write values and z-scores to this CSV"),
    ] = None,
) -> None:
    """Rank players by z-score total value, optionally punting categories."""
    from fantasy_value.stats import (
        SEASON_CATEGORIES,
        SourceShape,
        compute_z_scores,
        normalize_many,
        qualifying,
        rank_by_total_value,
        season_averages,
        to_frame,
    )
    from fantasy_value.valuation import apply_punt

    settings = get_settings()
    punted = punt or []
    _check_keys(punted, set(SEASON_CATEGORIES.keys), "punt")

    rows = _load_rows(path)
    if game_logs:
        records = season_averages(normalize_many(rows, SourceShape.GAME_LOG))
    else:
        records = normalize_many(rows, SourceShape.SEASON_AVERAGE)

    threshold = settings.min_games_played if min_games is None else min_games
    reference = qualifying(records, threshold)
    if not reference:
        logger.warning(
            "No players with {}+ games; using all {} players as reference",
            threshold,
            len(records),
        )
        reference = records

    scored = compute_z_scores(
        records,
        SEASON_CATEGORIES,
        reference=reference,
        weight_by_volume=settings.weight_percentages_by_volume,
    )
    ranked = apply_punt(rank_by_total_value(scored), punted, SEASON_CATEGORIES)

    if export is not None:
        to_frame([row.item for row in ranked], SEASON_CATEGORIES).to_csv(export, index=False)
        logger.info("Wrote {} rows to {}", len(ranked), export)

    precision = settings.display_precision
    console.print(
        Panel(
            f"[bold]Players:[/bold] {len(records)}  "
            f"[bold]Reference cohort:[/bold] {len(reference)}\n"
            f"[bold]Punted:[/bold] {', '.join(punted) if punted else 'none'}",
            title="Z-Score Rankings",
        )
    )

    table = Table(title="Total Value")
    table.add_column("Rank", justify="right")
    table.add_column("Δ", justify="right")
    table.add_column("Player", style="cyan")
    table.add_column("Team")
    for category in SEASON_CATEGORIES:
        style = "dim" if category.key in punted else ""
        table.add_column(category.label, justify="right", style=style)
    table.add_column("Total", justify="right", style="bold")
    if punted:
        table.add_column("Adjusted", justify="right", style="bold green")

    for row in ranked[:limit]:
        scored_record = row.item
        cells = [
            str(row.adjusted_rank),
            _delta(row.rank_change),
            scored_record.player_name,
            scored_record.record.team or "",
        ]
        cells.extend(
            f"{scored_record.signed_z(key):.{precision}f}" for key in SEASON_CATEGORIES.keys
        )
        cells.append(f"{row.original_value:.{precision}f}")
        if punted:
            cells.append(f"{row.adjusted_value:.{precision}f}")
        table.add_row(*cells)

    console.print(table)


@app.command("games")
def games(
    path: Annotated[Path, typer.Argument(help="CSV or JSON file of game-log rows")],
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", "-x", help="Stat or group key to exclude (repeatable)"),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Rows to show"),
    ] = 25,
) -> None:
    """Rank single games by fantasy points."""
    from fantasy_value.stats import GAME_CATEGORIES, SourceShape, normalize_many
    from fantasy_value.valuation import rank_by_fantasy_points

    settings = get_settings()
    excluded = exclude or []
    allowed = set(GAME_CATEGORIES.keys) | {g.key for g in GAME_CATEGORIES.groups}
    _check_keys(excluded, allowed, "exclude")

    records = normalize_many(_load_rows(path), SourceShape.GAME_LOG, GAME_CATEGORIES)
    ranked = rank_by_fantasy_points(records, excluded)

    precision = min(settings.display_precision, 1)
    table = Table(title="Fantasy Points")
    table.add_column("Rank", justify="right")
    table.add_column("Δ", justify="right")
    table.add_column("Player", style="cyan")
    table.add_column("Date", style="green")
    table.add_column("FPts", justify="right", style="bold")
    if excluded:
        table.add_column("Adjusted", justify="right", style="bold green")

    for row in ranked[:limit]:
        cells = [
            str(row.adjusted_rank),
            _delta(row.rank_change),
            row.item.player_name,
            row.item.game_date or "",
            f"{row.original_value:.{precision}f}",
        ]
        if excluded:
            cells.append(f"{row.adjusted_value:.{precision}f}")
        table.add_row(*cells)

    console.print(table)


@app.command("matchup")
def matchup(
    path: Annotated[
        Path,
        typer.Argument(help="JSON object of team name -> Yahoo stat payload"),
    ],
) -> None:
    """Compare every team against every other team, category by category."""
    from fantasy_value.stats import SEASON_CATEGORIES, SourceShape, normalize
    from fantasy_value.valuation import MatchupMatrix

    if not path.exists():
        console.print(f"[red]Error: File not found: {path}[/red]")
        raise typer.Exit(1)

    try:
        payload = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: Invalid JSON in {path}: {e}[/red]")
        raise typer.Exit(1) from e

    if not isinstance(payload, dict) or not payload:
        console.print("[red]Error: Expected a JSON object of teams[/red]")
        raise typer.Exit(1)

    teams = {}
    for name, stats in payload.items():
        row = stats if isinstance(stats, dict) and "stats" in stats else {"stats": stats}
        teams[name] = normalize(row, SourceShape.YAHOO, SEASON_CATEGORIES).values

    matrix = MatchupMatrix.build(teams, SEASON_CATEGORIES)

    table = Table(title="Matchup Matrix")
    table.add_column("Team", style="cyan")
    for opponent in matrix.teams:
        table.add_column(opponent, justify="center")
    table.add_column("Record", justify="right", style="bold")

    for team in matrix.teams:
        standing = matrix.standing(team)
        badge = " 👑" if standing.is_undefeated else " 🤡" if standing.is_winless else ""
        cells = [f"{team}{badge}"]
        for opponent in matrix.teams:
            result = matrix.result(team, opponent)
            if result is None:
                cells.append("-")
                continue
            color = "green" if result.is_win else "red" if result.is_loss else "white"
            cells.append(f"[{color}]{result.wins}-{result.losses}-{result.ties}[/{color}]")
        cells.append(
            f"{standing.matchup_wins}-{standing.matchup_losses}-{standing.matchup_ties}"
        )
        table.add_row(*cells)

    console.print(table)


if __name__ == "__main__":
    app()
