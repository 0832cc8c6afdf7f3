"""
ScrimStats CLI - Command Line Interface for scrim career stats

Provides commands for:
- Showing the career leaderboard
- Player profiles with playstyle scores
- Head-to-head duel history
- Match list, scoreboards and per-match duels
- Building balanced teams from a lobby
- Dashboard summary and leaderboard export

Every command reads a match backup file: a JSON list of stored matches
({"id", "filename", "timestamp", "data": [player exports]}).
"""

import json
import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from scrimstats import __version__
from scrimstats.analysis.aggregation import aggregate_player_stats, find_player, player_match_history
from scrimstats.analysis.balancer import TeamBalance, player_rating
from scrimstats.analysis.derived import build_player_profile, calculate_rates, classify_role
from scrimstats.analysis.duels import reconcile_duel
from scrimstats.analysis.leaderboard import (
    leaderboard_dataframe,
    match_activity,
    search_players,
    sort_players,
    summarize,
)
from scrimstats.analysis.lobby import Lobby
from scrimstats.analysis.matches import find_match, match_scoreboard, player_match_duels, search_matches
from scrimstats.analysis.models import AggregatedPlayerStats, MatchRecord
from scrimstats.core.config import (
    ScrimStatsConfig,
    configure_logging,
    get_config,
    load_config,
    save_config,
    set_config,
)
from scrimstats.core.constants import RosterSlot
from scrimstats.core.errors import ScrimStatsError

app = typer.Typer(
    name="scrimstats",
    help="Career stats, head-to-heads and team balancing for CS2 scrims",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)

MatchesArg = typer.Argument(
    ...,
    help="Match backup file (JSON list of stored matches)",
    exists=True,
    dir_okay=False,
    resolve_path=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]ScrimStats[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose output"),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file (.yaml, .toml, .json)", dir_okay=False
    ),
) -> None:
    """ScrimStats - career stats for CS2 scrims"""
    config = load_config(config_file) if config_file else get_config()
    set_config(config)
    logging_config = config.logging
    if verbose:
        logging_config = replace(logging_config, level="DEBUG")
    configure_logging(logging_config)


# =============================================================================
# Helpers
# =============================================================================


def load_matches(path: Path) -> list[MatchRecord]:
    """Read a match backup file."""
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error reading {path.name}:[/red] {e}")
        raise typer.Exit(1)

    if not isinstance(raw, list):
        console.print(f"[red]Invalid backup:[/red] expected a list of matches in {path.name}")
        raise typer.Exit(1)

    try:
        matches = [MatchRecord.from_dict(m) for m in raw]
    except ScrimStatsError as e:
        console.print(f"[red]Invalid match record:[/red] {e}")
        raise typer.Exit(1)

    logger.info(f"Loaded {len(matches)} matches from {path}")
    return matches


def resolve_player(players: list[AggregatedPlayerStats], query: str) -> AggregatedPlayerStats:
    """Find a player by steam id, then by exact name, then by unique name substring."""
    player = find_player(players, query)
    if player:
        return player
    exact = [p for p in players if p.name.lower() == query.lower()]
    if len(exact) == 1:
        return exact[0]
    partial = search_players(players, query)
    if len(partial) == 1:
        return partial[0]
    if partial:
        names = ", ".join(p.name for p in partial[:5])
        console.print(f"[yellow]'{query}' is ambiguous:[/yellow] {names}")
    else:
        console.print(f"[yellow]Player '{query}' not found[/yellow]")
    raise typer.Exit(1)


def _format_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d")


def _team_table(title: str, team: list[AggregatedPlayerStats], style: str) -> Table:
    table = Table(title=title, title_style=style)
    table.add_column("Player", style="cyan")
    table.add_column("Rating", justify="right")
    for p in team:
        table.add_row(p.name, f"{player_rating(p):.2f}")
    return table


def _print_balance(result: TeamBalance) -> None:
    console.print(_team_table(f"Team Alpha (avg {result.team1_average:.2f})", result.team1, "bold cyan"))
    console.print(_team_table(f"Team Bravo (avg {result.team2_average:.2f})", result.team2, "bold magenta"))
    if result.bench:
        console.print(f"[dim]Bench:[/dim] {', '.join(p.name for p in result.bench)}")
    console.print(f"\nRating gap: [bold]{result.rating_gap:.2f}[/bold] ({result.strategy})")


# =============================================================================
# Commands
# =============================================================================


@app.command()
def leaderboard(
    matches_file: Path = MatchesArg,
    sort_by: str = typer.Option("rating", "--sort", "-s", help="rating, adr, kd, kpr or a stat field"),
    ascending: bool = typer.Option(False, "--asc", help="Sort ascending"),
    search: Optional[str] = typer.Option(None, "--search", help="Filter by name"),
    limit: int = typer.Option(0, "--limit", "-n", help="Show only the first N players"),
) -> None:
    """Show the career leaderboard."""
    players = aggregate_player_stats(load_matches(matches_file))
    try:
        ordered = sort_players(players, sort_by, descending=not ascending)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    if search:
        ordered = search_players(ordered, search)
    if limit > 0:
        ordered = ordered[:limit]

    if not ordered:
        console.print("[yellow]No players found[/yellow]")
        return

    table = Table(title="Leaderboard")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Player", style="cyan")
    table.add_column("Role")
    table.add_column("Maps", justify="right")
    table.add_column("Rating", justify="right", style="bold")
    table.add_column("K/D", justify="right")
    table.add_column("ADR", justify="right")
    table.add_column("KPR", justify="right")
    for i, p in enumerate(ordered, 1):
        rates = calculate_rates(p)
        table.add_row(
            str(i),
            p.name,
            str(classify_role(p)),
            str(p.matches),
            f"{rates.average_rating:.2f}",
            f"{rates.kd:.2f}",
            f"{rates.adr:.1f}",
            f"{rates.kpr:.2f}",
        )
    console.print(table)


@app.command()
def profile(
    matches_file: Path = MatchesArg,
    player: str = typer.Argument(..., help="Steam ID or name"),
    history: int = typer.Option(10, "--history", help="Recent matches to list"),
) -> None:
    """Show a player's career profile and playstyle scores."""
    matches = load_matches(matches_file)
    players = aggregate_player_stats(matches)
    target = resolve_player(players, player)
    config = get_config()
    prof = build_player_profile(
        target, target.steam_id, target.name, config.playstyle, config.rating
    )

    rates = prof.rates
    console.print(
        Panel(
            f"[bold]{prof.name}[/bold]  [dim]{prof.steam_id}[/dim]\n"
            f"{prof.role} | {prof.matches} maps | Rating {rates.average_rating:.2f} | "
            f"Impact {prof.impact_rating:.2f}\n"
            f"K/D {rates.kd:.2f} | ADR {rates.adr:.1f} | KPR {rates.kpr:.2f} | "
            f"DPR {rates.dpr:.2f} | APR {rates.apr:.2f} | "
            f"Util/round {prof.utility_damage_per_round:.1f}",
            title="Player Profile",
        )
    )

    scores = Table(title="Playstyle")
    scores.add_column("Trait", style="cyan")
    scores.add_column("Score", justify="right")
    for trait, score in prof.playstyle.to_dict().items():
        scores.add_row(trait.capitalize(), str(score))
    console.print(scores)

    if history > 0:
        table = Table(title="Recent Matches")
        table.add_column("Date")
        table.add_column("Match")
        table.add_column("K-D-A", justify="right")
        table.add_column("Rating", justify="right")
        for match, record in player_match_history(matches, target.steam_id)[:history]:
            table.add_row(
                _format_date(match.timestamp),
                match.filename,
                f"{record.kills}-{record.deaths}-{record.assists}",
                f"{record.rating_score:.2f}",
            )
        console.print(table)


@app.command()
def duel(
    matches_file: Path = MatchesArg,
    player_a: str = typer.Argument(..., help="Steam ID or name of player A"),
    player_b: str = typer.Argument(..., help="Steam ID or name of player B"),
) -> None:
    """Show the head-to-head record between two players."""
    matches = load_matches(matches_file)
    players = aggregate_player_stats(matches)
    a = resolve_player(players, player_a)
    b = resolve_player(players, player_b)

    ledger = reconcile_duel(matches, a.steam_id, b.steam_id, players)
    if ledger is None:
        console.print("[yellow]Not enough data for this matchup[/yellow]")
        return

    console.print(
        Panel(
            f"[bold cyan]{a.name}[/bold cyan] {ledger.a_kills} : {ledger.b_kills} "
            f"[bold magenta]{b.name}[/bold magenta]",
            title="Head-to-Head",
        )
    )
    table = Table(title="Match History")
    table.add_column("Date")
    table.add_column("Teams")
    table.add_column("Score", justify="center")
    table.add_column("Roles", justify="center")
    for entry in ledger.history:
        table.add_row(
            _format_date(entry.timestamp),
            f"{entry.a_team} / {entry.b_team}",
            f"{entry.a_kills}:{entry.b_kills}",
            f"{entry.a_role} vs {entry.b_role}",
        )
    console.print(table)


@app.command("match")
def match_detail(
    matches_file: Path = MatchesArg,
    match_ref: Optional[str] = typer.Argument(
        None, metavar="MATCH", help="Match id or filename (omit to list matches)"
    ),
    search: str = typer.Option("", "--search", help="Filter the match list by filename"),
    player: Optional[str] = typer.Option(None, "--player", "-p", help="Show this player's duels"),
) -> None:
    """List matches, or show one match's scoreboard and duels."""
    matches = load_matches(matches_file)

    if match_ref is None:
        found = search_matches(matches, search)
        if not found:
            console.print("[yellow]No matches found[/yellow]")
            return
        table = Table(title="Matches")
        table.add_column("Date")
        table.add_column("ID", style="dim")
        table.add_column("File", style="cyan")
        table.add_column("Players", justify="right")
        for m in found:
            table.add_row(_format_date(m.timestamp), m.id, m.filename, str(len(m.players)))
        console.print(table)
        return

    selected = find_match(matches, match_ref)
    if selected is None:
        console.print(f"[yellow]Match '{match_ref}' not found[/yellow]")
        raise typer.Exit(1)
    rating_config = get_config().rating

    table = Table(title=f"{selected.filename} ({_format_date(selected.timestamp)})")
    table.add_column("Player", style="cyan")
    table.add_column("Team")
    table.add_column("Role")
    table.add_column("K", justify="right")
    table.add_column("D", justify="right")
    table.add_column("A", justify="right")
    table.add_column("ADR", justify="right")
    table.add_column("Rating", justify="right", style="bold")
    for row in match_scoreboard(selected, rating_config):
        table.add_row(
            row.name,
            row.team_name,
            str(row.role),
            str(row.kills),
            str(row.deaths),
            str(row.assists),
            f"{row.adr:.1f}",
            f"{row.rating:.2f}",
        )
    console.print(table)

    if player:
        target = resolve_player(aggregate_player_stats([selected]), player)
        duels = Table(title=f"Duels: {target.name}")
        duels.add_column("Opponent", style="cyan")
        duels.add_column("Role")
        duels.add_column("K", justify="right")
        duels.add_column("D", justify="right")
        duels.add_column("+/-", justify="right")
        for row in player_match_duels(selected, target.steam_id, rating_config):
            duels.add_row(
                row.opponent_name,
                str(row.opponent_role) if row.opponent_role else "-",
                str(row.kills),
                str(row.deaths),
                f"{row.diff:+d}" if row.diff else "0",
            )
        console.print(duels)


@app.command()
def balance(
    matches_file: Path = MatchesArg,
    lobby_players: Optional[list[str]] = typer.Argument(
        None, metavar="PLAYERS", help="Unpinned lobby players (steam id or name)"
    ),
    team1: list[str] = typer.Option([], "--team1", help="Pin a player to team 1"),
    team2: list[str] = typer.Option([], "--team2", help="Pin a player to team 2"),
    bench: list[str] = typer.Option([], "--bench", "-b", help="Bench a player"),
    strategy: Optional[str] = typer.Option(None, "--strategy", help="greedy or exhaustive"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Split a lobby into two balanced teams."""
    config = get_config()
    players = aggregate_player_stats(load_matches(matches_file))
    lobby = Lobby(max_size=config.balancer.max_lobby_size)

    for query in [*(lobby_players or []), *team1, *team2, *bench]:
        steam_id = resolve_player(players, query).steam_id
        if steam_id not in lobby and not lobby.add(steam_id):
            console.print(f"[yellow]Lobby is full ({lobby.max_size}), skipping {query}[/yellow]")
    for slot, queries in ((RosterSlot.TEAM1, team1), (RosterSlot.TEAM2, team2), (RosterSlot.BENCH, bench)):
        for query in queries:
            steam_id = resolve_player(players, query).steam_id
            if steam_id in lobby:
                lobby.assign(steam_id, slot)

    try:
        result = lobby.balance(players, strategy, config.balancer)
    except ScrimStatsError as e:
        console.print(f"[red]Cannot build teams:[/red] {e}")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(data=result.to_dict())
    else:
        _print_balance(result)


@app.command()
def summary(
    matches_file: Path = MatchesArg,
    days: int = typer.Option(30, "--days", help="Activity window in days"),
) -> None:
    """Show dashboard numbers and recent activity."""
    matches = load_matches(matches_file)
    players = aggregate_player_stats(matches)
    dash = summarize(matches, players)

    top = dash.top_player
    top_line = f"{top.name} ({top.average_rating:.2f})" if top else "-"
    console.print(
        Panel(
            f"Matches: [bold]{dash.total_matches}[/bold]  Rounds: [bold]{dash.total_rounds}[/bold]  "
            f"Kills: [bold]{dash.total_kills}[/bold]\n"
            f"Top player: {top_line}\n"
            f"League avg rating {dash.league.rating:.2f} | KPR {dash.league.kpr:.2f} | "
            f"ADR {dash.league.adr:.1f} | K/D {dash.league.kd:.2f}",
            title="Dashboard",
        )
    )

    if dash.recent_matches:
        table = Table(title="Recent Matches")
        table.add_column("Date")
        table.add_column("Match")
        table.add_column("Players", justify="right")
        for m in dash.recent_matches:
            table.add_row(_format_date(m.timestamp), m.filename, str(len(m.players)))
        console.print(table)

    activity = match_activity(matches, days=days)
    active_days = [(day, count) for day, count in activity if count]
    console.print(
        f"\n[bold]Activity ({days} days):[/bold] {sum(c for _, c in activity)} matches "
        f"on {len(active_days)} days"
    )
    for day, count in active_days:
        console.print(f"  {day.isoformat()}  {'#' * count} {count}")


@app.command()
def export(
    matches_file: Path = MatchesArg,
    output: Path = typer.Argument(..., help="Output file (.csv or .json)", dir_okay=False),
    sort_by: str = typer.Option("rating", "--sort", "-s", help="Sort key"),
) -> None:
    """Export the leaderboard with derived stats."""
    config = get_config().export
    df = leaderboard_dataframe(aggregate_player_stats(load_matches(matches_file)), sort_by)
    suffix = output.suffix.lower() or f".{config.default_format}"

    if suffix == ".csv":
        df.to_csv(output, index=False, sep=config.csv_delimiter, float_format=f"%.{config.float_precision}f")
    elif suffix == ".json":
        df.round(config.float_precision).to_json(output, orient="records", indent=config.json_indent)
    else:
        console.print(f"[red]Unsupported export format:[/red] {suffix}")
        raise typer.Exit(1)

    console.print(f"[green]Exported {len(df)} players to:[/green] {output}")


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(Path("scrimstats.yaml"), help="Where to write the config", dir_okay=False),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a default configuration file."""
    if path.exists() and not force:
        console.print(f"[yellow]{path} already exists[/yellow] (use --force to overwrite)")
        raise typer.Exit(1)
    try:
        save_config(ScrimStatsConfig(), path)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Wrote default config to:[/green] {path}")


if __name__ == "__main__":
    app()
