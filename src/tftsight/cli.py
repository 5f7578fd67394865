"""
TFTSight CLI - Command Line Interface for tracker snapshots

Provides commands for:
- Analyzing a locally stored tracker snapshot
- Fetching and analyzing a tracked match from MetaTFT
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from tftsight import __version__
from tftsight.core.config import get_config
from tftsight.core.constants import OutputMode
from tftsight.core.errors import TrackerError
from tftsight.core.utils import setup_logging
from tftsight.integrations.metatft import MetaTFTClient
from tftsight.integrations.names import NameResolver, load_cdragon_resolver
from tftsight.pipeline.orchestrator import TrackerOrchestrator, TrackerRequest, render_json

app = typer.Typer(
    name="tftsight",
    help="Round-by-round analytics for Teamfight Tactics tracker snapshots",
    add_completion=False,
)
console = Console()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]TFTSight[/bold blue] v{__version__}")
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
    """TFTSight - Teamfight Tactics tracker analytics"""
    logging_config = get_config().logging
    if logging_config.file:
        setup_logging(logging_config)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _build_resolver(offline: bool) -> NameResolver:
    if offline:
        return NameResolver()
    config = get_config()
    return load_cdragon_resolver(
        config.integrations.cdragon_url, timeout=config.integrations.timeout_seconds
    )


def _emit(result: dict, output: Optional[Path]) -> None:
    """Write the result to a file, or print the overview tables."""
    if "error" in result:
        console.print(f"[red]Error:[/red] {result['error']}")
        for match in result.get("availableMatches", []):
            console.print(f"  tracked: {match['matchId']} ({match['date']})")
        raise typer.Exit(1)

    if output is not None:
        output.write_text(render_json(result, get_config().export.json_indent), encoding="utf-8")
        console.print(f"[green]Result written to[/green] {output}")
        return

    display_result(result)


def display_result(result: dict) -> None:
    """Print a rich overview of a tracker result."""
    info_table = Table(title="Tracker Snapshot", show_header=False)
    info_table.add_column("Property", style="cyan")
    info_table.add_column("Value", style="green")
    info_table.add_row("Match", result["matchId"])
    info_table.add_row("Player", result["summonerName"])
    info_table.add_row("Set", result.get("set") or "-")
    info_table.add_row("Rank", result.get("rank") or "-")
    info_table.add_row("Rounds", str(result["totalRounds"]))
    summary = result["summary"]
    info_table.add_row("Health", f"{summary['startingHealth']} -> {summary['finalHealth']}")
    info_table.add_row("Rerolls", str(summary["totalRerolls"]))
    info_table.add_row("Income", str(summary["totalIncome"]))
    console.print(info_table)
    console.print()

    carry_table = Table(title="Top Carries")
    carry_table.add_column("Champion", style="cyan")
    carry_table.add_column("Total", justify="right")
    carry_table.add_column("Avg", justify="right")
    carry_table.add_column("Rounds", justify="right")
    carry_table.add_column("Stars", justify="right")
    for carry in result["topCarries"]:
        carry_table.add_row(
            carry["champion"],
            str(carry["totalDamage"]),
            str(carry["avgDamage"]),
            str(carry["roundsPlayed"]),
            "*" * carry["maxStars"],
        )
    console.print(carry_table)
    console.print()

    board_table = Table(title="Final Board")
    board_table.add_column("Champion", style="cyan")
    board_table.add_column("Stars", justify="right")
    board_table.add_column("Items")
    for unit in result["finalBoard"]:
        board_table.add_row(unit["champion"], "*" * unit["stars"], ", ".join(unit["items"]))
    console.print(board_table)

    rounds = result.get("roundProgression")
    if rounds:
        console.print()
        round_table = Table(title="Round Progression")
        for column in ("Round", "Stage", "Type", "HP", "Gold", "Lvl", "Board", "Outcome"):
            round_table.add_column(column)
        for entry in rounds:
            round_table.add_row(
                str(entry["round"]),
                entry["stage"],
                entry["type"],
                str(entry["hp"]),
                str(entry["gold"]),
                str(entry["level"]),
                str(entry["boardSize"]),
                entry.get("outcome", ""),
            )
        console.print(round_table)


@app.command()
def analyze(
    snapshot_path: Path = typer.Argument(
        ...,
        help="Path to a stored tracker snapshot (.json or .json.gz)",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    mode: str = typer.Option(
        OutputMode.SUMMARY.value,
        "--mode",
        "-m",
        help="summary (key stages only) or complete (every stage)"
    ),
    player: Optional[str] = typer.Option(
        None,
        "--player",
        "-p",
        help="Game name used to pick round outcomes"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the JSON result to this file instead of printing tables"
    ),
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Skip the CommunityDragon download and use fallback names"
    ),
) -> None:
    """
    Analyze a tracker snapshot stored on disk.
    """
    raw = snapshot_path.read_bytes()
    orchestrator = TrackerOrchestrator(names=_build_resolver(offline))
    request = TrackerRequest(mode=mode, player_name=player)
    _emit(orchestrator.run(raw, request), output)


@app.command()
def fetch(
    match_id: str = typer.Argument(..., help="Riot match id, e.g. EUW1_7412345678"),
    game_name: Optional[str] = typer.Option(
        None, "--game-name", "-g", help="Riot game name (default: tracker.game_name)"
    ),
    tag_line: Optional[str] = typer.Option(
        None, "--tag-line", "-t", help="Riot tag line (default: integrations.tag_line)"
    ),
    platform: Optional[str] = typer.Option(None, "--platform", help="Platform, e.g. euw1"),
    mode: str = typer.Option(OutputMode.SUMMARY.value, "--mode", "-m", help="summary or complete"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the JSON result to this file instead of printing tables"
    ),
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Skip the CommunityDragon download and use fallback names"
    ),
) -> None:
    """
    Download the tracker snapshot of a match from MetaTFT and analyze it.
    """
    config = get_config()
    if platform:
        config.integrations.platform = platform
    game_name = game_name or str(config.tracker.game_name or "")
    tag_line = tag_line or str(config.integrations.tag_line or "")
    if not game_name or not tag_line:
        console.print("[red]Error:[/red] a Riot game name and tag line are required (options or config)")
        raise typer.Exit(2)

    client = MetaTFTClient(
        game_name=game_name,
        tag_line=tag_line,
        config=config.integrations,
        max_available_matches=config.tracker.max_available_matches,
    )

    with console.status("Fetching tracker snapshot..."):
        try:
            _, raw = client.fetch_tracker_bytes(match_id)
        except TrackerError as e:
            _emit(e.to_dict(), None)
            return

    orchestrator = TrackerOrchestrator(names=_build_resolver(offline), config=config)
    request = TrackerRequest(match_identifier=match_id, mode=mode, player_name=game_name)
    _emit(orchestrator.run(raw, request), output)


if __name__ == "__main__":
    app()
