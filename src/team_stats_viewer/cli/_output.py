from rich.console import Console
from rich.markup import escape
from rich.table import Table

from team_stats_viewer.domain.roster import RosterPlayer, handedness_label, player_display_name, player_initials
from team_stats_viewer.domain.schedule import GameOutcome, ScheduleMonth
from team_stats_viewer.domain.stat_table import StatsTable
from team_stats_viewer.domain.team import Team, format_record, format_season_name, team_initials, team_location
from team_stats_viewer.services.season_grouping import SeasonYearGrouping

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

_OUTCOME_STYLE: dict[GameOutcome, str] = {
    GameOutcome.WIN: "bold green",
    GameOutcome.LOSS: "bold",
    GameOutcome.TIE: "bold",
    GameOutcome.SCHEDULED: "dim",
}


def print_error(message: str) -> None:
    err_console.print(f"[red bold]Error:[/red bold] {escape(message)}")


def print_team_header(team: Team) -> None:
    console.print(f"[bold]{escape(team.name)}[/bold]")
    details = [format_record(team.record)]
    if team.season_name and team.season_year:
        details.append(f"{format_season_name(team.season_name)} {team.season_year}")
    location = team_location(team)
    if location:
        details.append(location)
    console.print(f"  {escape(' | '.join(details))}")
    if team.staff:
        console.print(f"  [dim]Staff:[/dim] {escape(', '.join(team.staff))}")


def print_season_groups(grouping: SeasonYearGrouping) -> None:
    if not grouping.ordering:
        console.print("No teams found.")
        return
    total = 0
    for label in grouping.ordering:
        teams = grouping.groups[label]
        total += len(teams)
        table = Table(title=f"{label} ({len(teams)} teams)", title_justify="left", show_edge=False, pad_edge=False)
        table.add_column("ID", style="dim")
        table.add_column("", style="bold cyan")
        table.add_column("Team")
        table.add_column("Details")
        table.add_column("Record", justify="right")
        for team in teams:
            details = " • ".join(part for part in (team.sport.capitalize(), team.age_group, team_location(team)) if part)
            record = format_record(team.record) if team.record is not None else ""
            table.add_row(team.id, escape(team_initials(team.name)), escape(team.name), escape(details), record)
        console.print(table)
    console.print(f"Showing {total} teams across {len(grouping.ordering)} season periods")


def print_schedule(months: list[ScheduleMonth]) -> None:
    if not months:
        console.print("No schedule available.")
        return
    for month in months:
        table = Table(title=month.label, title_justify="left", show_edge=False, pad_edge=False)
        table.add_column("Day")
        table.add_column("Opponent")
        table.add_column("Location", style="dim")
        table.add_column("Result", justify="right")
        for day in month.days:
            for game in day.games:
                style = _OUTCOME_STYLE[game.outcome]
                table.add_row(
                    f"{game.weekday} {game.day_of_month}".strip(),
                    escape(game.opponent_label),
                    escape(game.venue_label),
                    f"[{style}]{escape(game.label)}[/{style}]",
                )
        console.print(table)


def print_roster(players: list[RosterPlayer]) -> None:
    console.print(f"[bold]Roster ({len(players)})[/bold]")
    if not players:
        console.print("No players on this roster.")
        return
    table = Table(show_edge=False, pad_edge=False)
    table.add_column("#", justify="right")
    table.add_column("Player")
    table.add_column("Handedness", style="dim")
    for player in players:
        table.add_row(
            f"#{player.number}" if player.number else f"[dim]{escape(player_initials(player))}[/dim]",
            escape(player_display_name(player)),
            handedness_label(player) or "",
        )
    console.print(table)


def print_stats_table(table_data: StatsTable, *, show_legend: bool = True) -> None:
    if not table_data.rows:
        console.print("No season stats available.")
    else:
        table = Table(show_edge=False, pad_edge=False)
        table.add_column("Player")
        for header in table_data.headers:
            table.add_column(header, justify="right")
        for row in table_data.rows:
            table.add_row(escape(row.player_label), *row.cells)
        console.print(table)

    if show_legend:
        console.print(f"\n[bold]{escape(table_data.title)}[/bold]")
        for entry in table_data.legend:
            console.print(f"  [bold]{escape(entry.abbrev)}[/bold]: {escape(entry.meaning)}")
