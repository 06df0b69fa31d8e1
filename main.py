#!/usr/bin/env python3
"""Main entry point for FF Draft Engine"""
import asyncio
import sys
from datetime import datetime
from typing import Dict, List, Optional

import click
from rich.console import Console
from rich.table import Table

# Set up production logging first
from draft_engine.utils.logging import setup_logging, get_logger

from draft_engine.core import (
    AutoDraftConfig, DraftAnalyticsCalculator, DraftSession, HttpTieBreakAdvisor,
    KeeperCostModel, KeeperLeagueConfig, PickValueTable, Position, Recommendation,
    RosterNeedAdvisor, TeamContext
)
from draft_engine.core.tiers import Tier
from draft_engine.data import load_candidates, load_roster, load_keepers, load_draft_picks
from draft_engine.exporters import ReportExporter
from draft_engine.utils.validation import InputValidator, ValidationError
from draft_engine.utils.monitoring import monitor
from config import DEFAULT_SETTINGS, AUTO_DRAFT_PRESETS, ADVISOR_TIMEOUT_SECONDS, DATA_DIR

# Rich console for pretty output
console = Console()

ADVISORS = {
    'roster-need': lambda timeout: RosterNeedAdvisor(),
    'http': lambda timeout: HttpTieBreakAdvisor(request_timeout=timeout)
}


def fail(message) -> None:
    console.print(f"[red]Error: {message}[/red]")
    sys.exit(1)


def league_settings(teams: int, rounds: int) -> Dict:
    return {
        'teams': InputValidator.validate_team_count(teams),
        'draft_rounds': InputValidator.validate_round(rounds),
        'roster': DEFAULT_SETTINGS['roster']
    }


@click.group()
@click.version_option(version='0.3.0')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, debug):
    """Fantasy Football Draft Engine - tiers, pick values and draft recommendations

    Commands:
      tiers        - Tier a candidate pool by ADP gaps
      pick-values  - Show the draft pick value chart
      snake        - Analyze a snake draft turn
      recommend    - Recommend (or automatically make) a pick
      keepers      - Choose keepers within keeper and cap limits
      grade        - Grade a completed draft
      presets      - List auto-draft presets

    Quick Start:
      python main.py recommend --candidates data/candidates.csv --pick 1
    """
    log_file = None
    if debug:
        log_file = DATA_DIR / 'logs' / f'debug_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'

    setup_logging(debug=debug, log_file=log_file)

    # Metrics accumulate across runs
    monitor.load_history()
    ctx.call_on_close(monitor.save_history)

    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug


@cli.command()
@click.option('--candidates', 'candidates_path', required=True, type=click.Path(), help='Candidate pool (CSV or JSON)')
@click.option('--position', type=click.Choice([p.value for p in Position]), help='Only show one position')
@click.option('--export', is_flag=True, help='Export the tier sheet to CSV')
def tiers(candidates_path: str, position: Optional[str], export: bool):
    """Tier a candidate pool by ADP gaps"""
    try:
        session = DraftSession(load_candidates(candidates_path))
    except ValidationError as e:
        fail(e)

    position_tiers = session.tiers()
    positions = [Position(position)] if position else list(Position)

    for pos in positions:
        display_tiers(pos, position_tiers.get(pos, []))

    if export:
        filepath = ReportExporter().export_tiers(position_tiers)
        console.print(f"\n[green]✓[/green] Tier sheet exported to: [cyan]{filepath}[/cyan]")


@cli.command()
@click.option('--start', type=int, default=1, help='First overall pick')
@click.option('--end', type=int, default=50, help='Last overall pick')
def pick_values(start: int, end: int):
    """Show the draft pick value chart"""
    chart = PickValueTable()
    if start < 1 or end < start:
        fail(f"Invalid pick range: {start}-{end}")

    table = Table(title="\n[bold]Draft Pick Values[/bold]")
    table.add_column("Pick", style="cyan", justify="right")
    table.add_column("Value", style="green", justify="right")

    for pick in range(start, end + 1):
        value = chart.get(pick)
        table.add_row(str(pick), str(value) if value is not None else "-")

    console.print(table)
    if end > chart.max_pick:
        console.print(f"[dim]Picks past {chart.max_pick} are off the chart[/dim]")


@cli.command()
@click.option('--slot', type=int, required=True, help='Your draft slot (1 = first pick)')
@click.option('--round', 'round_number', type=int, default=1, help='Round to analyze')
@click.option('--teams', type=int, default=DEFAULT_SETTINGS['teams'], help='Number of teams in your league')
@click.option('--rounds', type=int, default=DEFAULT_SETTINGS['draft_rounds'], help='Rounds in the draft')
@click.option('--candidates', 'candidates_path', type=click.Path(), help='Candidate pool for tier dropoffs')
@click.option('--export', is_flag=True, help='Export the analysis to JSON')
def snake(slot: int, round_number: int, teams: int, rounds: int, candidates_path: Optional[str], export: bool):
    """Analyze a snake draft turn"""
    try:
        pool = load_candidates(candidates_path) if candidates_path else []
        session = DraftSession(pool, league_settings(teams, rounds))
        analysis = session.snake_analysis(slot, round_number)
    except ValidationError as e:
        fail(e)

    turn = analysis.turn_analysis
    console.print(f"\n[bold]Round {turn.round}, slot {slot} of {teams}[/bold]")
    console.print(f"  Overall pick: [cyan]{turn.pick_number}[/cyan] ({turn.position.value.lower()} slot)")
    console.print(f"  Next pick in: {turn.next_pick_in} picks")
    console.print(f"  Strategic value: {turn.strategic_value:.1f}")
    console.print(f"  Optimal draft slot for {teams} teams: {analysis.optimal_draft_position}")
    for tip in turn.recommendations:
        console.print(f"  • {tip}")

    if pool:
        table = Table(title="\n[bold]Tier Dropoffs[/bold]")
        table.add_column("Pos", style="green")
        table.add_column("Left In Tier", justify="right")
        table.add_column("Drop To Next", justify="right")
        table.add_column("Reach?", style="yellow")
        for dropoff in analysis.value_dropoffs:
            table.add_row(
                dropoff.position.value,
                str(dropoff.players_until_drop),
                f"{dropoff.next_tier_drop:g}",
                "yes" if dropoff.should_reach else ""
            )
        console.print(table)

    if analysis.suggested_trades:
        table = Table(title="\n[bold]Pick Trade Ideas[/bold]")
        table.add_column("Dir", style="cyan")
        table.add_column("Give", style="red")
        table.add_column("Get", style="green")
        table.add_column("Value", justify="right")
        for trade in analysis.suggested_trades:
            table.add_row(
                trade.direction.value,
                ', '.join(str(p) for p in trade.gives_picks),
                ', '.join(str(p) for p in trade.receives_picks),
                f"{trade.value_gained:+.0f}"
            )
        console.print(table)

    if export:
        filepath = ReportExporter().export_report('snake_analysis', analysis.to_dict())
        console.print(f"\n[green]✓[/green] Analysis exported to: [cyan]{filepath}[/cyan]")


@cli.command()
@click.option('--candidates', 'candidates_path', required=True, type=click.Path(), help='Candidate pool (CSV or JSON)')
@click.option('--picks', 'picks_path', type=click.Path(), help='Picks made so far (removed from the pool)')
@click.option('--roster', 'roster_path', type=click.Path(), help='Your roster, by candidate id')
@click.option('--team-id', default='me', help='Your team id in the picks file')
@click.option('--pick', 'current_pick', type=int, help='Overall pick being made (default: next pick)')
@click.option('--teams', type=int, default=DEFAULT_SETTINGS['teams'], help='Number of teams in your league')
@click.option('--rounds', type=int, default=DEFAULT_SETTINGS['draft_rounds'], help='Rounds in the draft')
@click.option('--preset', type=click.Choice(list(AUTO_DRAFT_PRESETS.keys()), case_sensitive=False),
              default='BPA', help='Auto-draft preset')
@click.option('--strategy', help='Override the preset strategy')
@click.option('--auto', is_flag=True, help='Make the pick automatically, consulting the advisor')
@click.option('--advisor', type=click.Choice(list(ADVISORS.keys())), default='roster-need',
              help='Tie-break advisor used with --auto')
@click.option('--timeout', type=float, default=ADVISOR_TIMEOUT_SECONDS, help='Advisor timeout in seconds')
@click.option('--export', is_flag=True, help='Export recommendations to CSV')
def recommend(candidates_path: str, picks_path: Optional[str], roster_path: Optional[str], team_id: str,
              current_pick: Optional[int], teams: int, rounds: int, preset: str, strategy: Optional[str],
              auto: bool, advisor: str, timeout: float, export: bool):
    """Recommend (or automatically make) a pick"""
    logger = get_logger(__name__)

    try:
        config = AutoDraftConfig.from_preset(preset)
        if strategy:
            config.strategy = InputValidator.validate_strategy(strategy)
        if timeout <= 0:
            raise ValidationError("Advisor timeout must be positive")

        session = DraftSession(load_candidates(candidates_path), league_settings(teams, rounds))
        if picks_path:
            session.record_picks(load_draft_picks(picks_path))

        roster = load_roster(roster_path, session.pool) if roster_path else session.roster(team_id)
        pick = session.resolve_pick(current_pick)
    except ValidationError as e:
        fail(e)

    console.print(f"\n[bold]Pick {pick}[/bold] ({config.strategy.value} strategy, "
                  f"{len(session.available)} candidates left, {len(roster)} on roster)")

    recommendations = session.recommend(team_id, config, roster=roster, current_pick=pick)
    if not recommendations:
        console.print("[yellow]No candidates left to recommend[/yellow]")
        return

    display_recommendations(recommendations)

    if auto:
        team = TeamContext(team_id=team_id, name=team_id, roster=tuple(roster))
        with console.status(f"[yellow]• Consulting {advisor} advisor...[/yellow]"):
            chosen = asyncio.run(session.select_pick(
                team, config, ADVISORS[advisor](timeout), timeout=timeout, current_pick=pick
            ))

        if chosen is None:
            console.print(f"\n[yellow]○[/yellow] {team_id} skips this pick")
        else:
            logger.info(f"Auto pick {pick}: {chosen.candidate}")
            console.print(f"\n[green]✓[/green] Auto pick: [bold]{chosen.candidate}[/bold] ({chosen.type.value})")

    if export:
        filepath = ReportExporter().export_recommendations(recommendations, pick)
        console.print(f"\n[green]✓[/green] Recommendations exported to: [cyan]{filepath}[/cyan]")


@cli.command()
@click.option('--file', 'keepers_path', required=True, type=click.Path(), help='Keeper candidates (CSV or JSON)')
@click.option('--candidates', 'candidates_path', required=True, type=click.Path(), help='Candidate pool (CSV or JSON)')
@click.option('--max-keepers', type=int, default=3, help='Most players a team may keep')
@click.option('--cap', type=float, help='Salary cap (enables the cap)')
@click.option('--cost-model', type=click.Choice([m.value for m in KeeperCostModel], case_sensitive=False),
              default=KeeperCostModel.AUCTION_VALUE.value, help='How keepers are priced')
@click.option('--cost-increase', type=float, default=0.0,
              help='Auction: percent raise; draft round: rounds earlier; flat: keeper cost')
@click.option('--inflation', type=float, default=0.0, help='Cost added per year already kept')
@click.option('--export', is_flag=True, help='Export the selection to JSON')
def keepers(keepers_path: str, candidates_path: str, max_keepers: int, cap: Optional[float],
            cost_model: str, cost_increase: float, inflation: float, export: bool):
    """Choose keepers within keeper and cap limits"""
    try:
        config = KeeperLeagueConfig(
            max_keepers=max_keepers,
            salary_cap_enabled=cap is not None,
            salary_cap=cap,
            cost_model=KeeperCostModel(cost_model.upper()),
            keeper_cost_increase=cost_increase,
            keeper_inflation=inflation
        )
        pool = load_candidates(candidates_path)
        selection = DraftSession.select_keepers(load_keepers(keepers_path, pool, config), config)
    except ValidationError as e:
        fail(e)

    table = Table(title="\n[bold]Keeper Decisions[/bold]")
    table.add_column("Player", style="magenta")
    table.add_column("Pos", style="green")
    table.add_column("Cost", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("Decision")

    for keeper in selection.recommended:
        table.add_row(keeper.name, keeper.candidate.position.value, f"{keeper.keeper_cost:g}",
                      f"{keeper.keeper_value:g}", "[green]keep[/green]")
    for keeper in selection.dropped:
        table.add_row(keeper.name, keeper.candidate.position.value, f"{keeper.keeper_cost:g}",
                      f"{keeper.keeper_value:g}", "[red]drop[/red]")

    console.print(table)
    console.print(f"\nTotal keeper cost: {selection.total_cost:g}")
    console.print(f"[dim]{selection.analysis}[/dim]")

    if export:
        filepath = ReportExporter().export_report('keepers', selection.to_dict())
        console.print(f"\n[green]✓[/green] Keeper selection exported to: [cyan]{filepath}[/cyan]")


@cli.command()
@click.option('--candidates', 'candidates_path', required=True, type=click.Path(), help='Candidate pool (CSV or JSON)')
@click.option('--picks', 'picks_path', required=True, type=click.Path(), help='Completed draft picks (CSV or JSON)')
@click.option('--team-id', required=True, help='Team to grade')
@click.option('--export', is_flag=True, help='Export the grades to JSON')
def grade(candidates_path: str, picks_path: str, team_id: str, export: bool):
    """Grade a completed draft"""
    try:
        pool = load_candidates(candidates_path)
        picks = load_draft_picks(picks_path)
        analytics = DraftAnalyticsCalculator().calculate(team_id, picks, pool)
    except ValidationError as e:
        fail(e)

    console.print(f"\n[bold]Draft Grade: {team_id}[/bold]")
    console.print("=" * 60)
    console.print(f"  Efficiency: [cyan]{analytics.efficiency_score:.1f}[/cyan]")
    console.print(f"  Average ADP: {analytics.average_adp:.1f}")
    console.print(f"  Roster balance: {analytics.roster_balance:.2f}")
    console.print(f"  Upside: {analytics.upside:.2f}   Floor: {analytics.floor:.2f}")
    console.print(f"  Championship probability: [bold]{analytics.championship_probability:.1f}%[/bold]")
    console.print(f"  Value picks: {len(analytics.value_picks)}   "
                  f"[green]Steals: {len(analytics.steals)}[/green]   "
                  f"[red]Reaches: {len(analytics.reaches)}[/red]")

    drafted = ', '.join(f"{pos.value} {count}" for pos, count in analytics.position_drafted.items() if count)
    if drafted:
        console.print(f"  Drafted: {drafted}")

    if export:
        filepath = ReportExporter().export_report(f'grade_{team_id}', analytics.to_dict())
        console.print(f"\n[green]✓[/green] Grades exported to: [cyan]{filepath}[/cyan]")


@cli.command()
def presets():
    """List auto-draft presets"""
    table = Table(title="\n[bold]Auto-Draft Presets[/bold]")
    table.add_column("Preset", style="cyan")
    table.add_column("Risk", style="yellow")
    table.add_column("Target Roster")
    table.add_column("Avoid Injury", justify="center")
    table.add_column("Veterans", justify="center")

    for name, preset in AUTO_DRAFT_PRESETS.items():
        roster = ' '.join(f"{pos}{count}" for pos, count in preset['target_roster'].items())
        table.add_row(
            name,
            preset['risk_tolerance'],
            roster,
            "✓" if preset['avoid_injury_prone'] else "",
            "✓" if preset['prefer_veterans'] else ""
        )

    console.print(table)
    console.print("\n[dim]Use with: python main.py recommend --preset CONSERVATIVE ...[/dim]")


@cli.command()
@click.option('--export', is_flag=True, help='Export metrics to JSON file')
@click.option('--clear', is_flag=True, help='Clear all metrics data')
def metrics(export: bool, clear: bool):
    """View performance metrics recorded by earlier commands"""
    if clear:
        monitor.clear_metrics()
        console.print("[green]✓[/green] Metrics cleared")
        return

    summary = monitor.get_performance_summary()

    if summary.get("message") == "No metrics recorded":
        console.print("[dim]No metrics recorded yet. Run some commands first![/dim]")
        return

    table = Table(title="Operation Performance")
    table.add_column("Operation", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Success", justify="right", style="green")
    table.add_column("Errors", justify="right", style="red")
    table.add_column("Avg Time", justify="right")
    table.add_column("Max Time", justify="right")
    table.add_column("Max Memory", justify="right")

    for name, stats in sorted(summary.items()):
        table.add_row(
            name,
            str(stats['count']),
            str(stats['success_count']),
            str(stats['error_count']),
            f"{stats['avg_duration']:.3f}s",
            f"{stats['max_duration']:.3f}s",
            f"{stats['max_memory_mb']:.1f}MB"
        )

    console.print(table)

    if export:
        filepath = monitor.export_metrics()
        console.print(f"\n[green]✓[/green] Metrics exported to: {filepath}")


def display_tiers(position: Position, position_tiers: List[Tier]):
    """Display one position's tiers in a table"""
    if not position_tiers:
        return

    table = Table(title=f"\n[bold]{position.value} Tiers[/bold]")
    table.add_column("Tier", style="blue", no_wrap=True)
    table.add_column("ADP", style="cyan")
    table.add_column("Players", style="magenta")

    for number, tier in enumerate(position_tiers, 1):
        table.add_row(
            str(number),
            f"{tier[0].adp:g}-{tier[-1].adp:g}",
            ', '.join(c.name for c in tier)
        )

    console.print(table)


def display_recommendations(recommendations: List[Recommendation]):
    """Display recommendations in a table"""
    table = Table(title="\n[bold]Recommendations[/bold]")

    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("Player", style="magenta")
    table.add_column("Pos", style="green")
    table.add_column("Team", style="yellow")
    table.add_column("ADP", justify="right")
    table.add_column("Type", style="blue")
    table.add_column("Conf", justify="right")
    table.add_column("Tier", justify="right")
    table.add_column("Why", style="dim")

    for i, rec in enumerate(recommendations, 1):
        candidate = rec.candidate
        table.add_row(
            str(i),
            candidate.name,
            f"{candidate.position.value}{rec.position_rank}",
            candidate.team,
            f"{candidate.adp:g}" if candidate.is_ranked else "-",
            rec.type.value,
            f"{rec.confidence:.2f}",
            str(rec.tier_info.tier),
            rec.reasoning
        )

    console.print(table)


if __name__ == '__main__':
    cli()
