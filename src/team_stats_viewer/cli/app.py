import logging
from collections.abc import Callable
from contextlib import closing
from dataclasses import dataclass
from typing import Annotated

import typer
from config import ConfigurationSet

from team_stats_viewer.cli._logging import configure_logging
from team_stats_viewer.cli._output import (
    print_error,
    print_roster,
    print_schedule,
    print_season_groups,
    print_stats_table,
    print_team_header,
)
from team_stats_viewer.config import (
    ApiSettings,
    ConfigError,
    create_config,
    load_api_settings,
    load_display_settings,
    parse_month_order,
    parse_timezone,
)
from team_stats_viewer.domain.errors import StatsApiError
from team_stats_viewer.domain.result import Err, Ok, Result
from team_stats_viewer.domain.stat_table import StatCategory, StatView
from team_stats_viewer.ingest.stats_api_source import StatsApiSource
from team_stats_viewer.services.schedule_correlator import correlate_schedule
from team_stats_viewer.services.season_grouping import group_teams
from team_stats_viewer.services.stat_derivation import derive_stats_table
from team_stats_viewer.services.team_snapshot import TeamDataSource, TeamSnapshot, load_team_snapshot, load_teams

logger = logging.getLogger(__name__)

type SourceFactory = Callable[[ApiSettings], TeamDataSource]

app = typer.Typer(help="Browse teams, schedules and season stats from the team statistics service.")


def _default_source(settings: ApiSettings) -> TeamDataSource:
    return StatsApiSource(
        base_url=settings.base_url,
        timeout=settings.timeout,
        connect_timeout=settings.connect_timeout,
    )


@dataclass(frozen=True)
class CliState:
    config: ConfigurationSet
    source_factory: SourceFactory


def _state(ctx: typer.Context) -> CliState:
    state = ctx.find_root().obj
    assert isinstance(state, CliState)
    return state


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only log errors.")] = False,
    config_path: Annotated[str, typer.Option("--config", help="Path to a YAML config file.")] = "config.yaml",
) -> None:
    if verbose and quiet:
        raise typer.BadParameter("--verbose and --quiet cannot be combined")
    configure_logging(verbose=verbose, quiet=quiet)
    # A callable passed as ``obj`` replaces the HTTP source (used by tests).
    factory = ctx.obj if callable(ctx.obj) else _default_source
    ctx.obj = CliState(config=create_config(yaml_path=config_path), source_factory=factory)


def _unwrap[T](result: Result[T, StatsApiError]) -> T:
    match result:
        case Ok(value):
            return value
        case Err(error):
            print_error(error.describe())
            raise typer.Exit(code=1)


def _open_source(ctx: typer.Context) -> TeamDataSource:
    state = _state(ctx)
    try:
        settings = load_api_settings(state.config)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    logger.debug("Using stats service at %s", settings.base_url)
    return state.source_factory(settings)


def _load_snapshot(ctx: typer.Context, team_id: str, **slices: bool) -> TeamSnapshot:
    with closing(_open_source(ctx)) as source:
        return _unwrap(load_team_snapshot(source, team_id, **slices))


@app.command()
def teams(ctx: typer.Context) -> None:
    """List all teams grouped by season, most recent first."""
    with closing(_open_source(ctx)) as source:
        all_teams = _unwrap(load_teams(source))
    print_season_groups(group_teams(all_teams))


@app.command()
def schedule(
    ctx: typer.Context,
    team_id: Annotated[str, typer.Argument(help="Team ID.")],
    order: Annotated[
        str | None, typer.Option("--order", help="ascending or descending (default from config).")
    ] = None,
    tz: Annotated[str | None, typer.Option("--tz", help="IANA time zone for game times.")] = None,
) -> None:
    """Show a team's schedule with results, grouped by month and day."""
    state = _state(ctx)
    try:
        display = load_display_settings(state.config)
        zone = parse_timezone(tz) if tz is not None else display.timezone
        month_order = parse_month_order(order) if order is not None else display.schedule_order
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    snapshot = _load_snapshot(ctx, team_id, schedule=True)
    print_team_header(snapshot.team)
    print_schedule(correlate_schedule(snapshot.team, snapshot.schedule, snapshot.results, order=month_order, tz=zone))


@app.command()
def roster(
    ctx: typer.Context,
    team_id: Annotated[str, typer.Argument(help="Team ID.")],
) -> None:
    """Show a team's roster."""
    snapshot = _load_snapshot(ctx, team_id, roster=True)
    print_team_header(snapshot.team)
    print_roster(list(snapshot.roster))


@app.command()
def stats(
    ctx: typer.Context,
    team_id: Annotated[str, typer.Argument(help="Team ID.")],
    category: Annotated[
        str, typer.Option("--category", "-c", help="batting, pitching or fielding.")
    ] = StatCategory.BATTING.value,
    view: Annotated[str, typer.Option("--view", "-t", help="standard, advanced or catching.")] = StatView.STANDARD.value,
    legend: Annotated[bool, typer.Option("--legend/--no-legend", help="Print the abbreviation legend.")] = True,
) -> None:
    """Show derived season stats for every player with stats this season."""
    snapshot = _load_snapshot(ctx, team_id, roster=True, season_stats=True)
    print_team_header(snapshot.team)
    table = derive_stats_table(category, view, snapshot.roster, snapshot.season_stats)
    print_stats_table(table, show_legend=legend)
