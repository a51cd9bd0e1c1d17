"""Assemble the records one team view needs.

Only the team itself is required. Roster, schedule, game results and
season stats are fetched concurrently and each falls back to empty on its
own when the service fails, so the derivation layer always receives a
complete snapshot.
"""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from team_stats_viewer.domain.errors import StatsApiError
from team_stats_viewer.domain.result import Err, Ok, Result, unwrap_or
from team_stats_viewer.domain.roster import RosterPlayer
from team_stats_viewer.domain.schedule import GameResult, ScheduleEntry
from team_stats_viewer.domain.season_stats import SeasonStats
from team_stats_viewer.domain.team import Team

logger = logging.getLogger(__name__)

_FETCH_ERRORS = (httpx.HTTPError, ValueError, KeyError)
_MAX_WORKERS = 4


class TeamDataSource(Protocol):
    def get_teams(self) -> list[Team]: ...

    def get_team(self, team_id: str) -> Team: ...

    def get_schedule(self, team_id: str) -> list[ScheduleEntry]: ...

    def get_game_results(self, team_id: str) -> list[GameResult]: ...

    def get_players(self, team_id: str) -> list[RosterPlayer]: ...

    def get_season_stats(self, team_id: str) -> SeasonStats: ...

    def close(self) -> None: ...


@dataclass(frozen=True)
class TeamSnapshot:
    team: Team
    roster: tuple[RosterPlayer, ...] = ()
    schedule: tuple[ScheduleEntry, ...] = ()
    results: tuple[GameResult, ...] = ()
    season_stats: SeasonStats = field(default_factory=SeasonStats)


def _to_api_error(exc: Exception, endpoint: str) -> StatsApiError:
    status = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
    return StatsApiError(message=str(exc) or type(exc).__name__, endpoint=endpoint, status_code=status)


def _fetch[T](fetch: Callable[[], T], endpoint: str) -> Result[T, StatsApiError]:
    try:
        return Ok(fetch())
    except _FETCH_ERRORS as e:
        return Err(_to_api_error(e, endpoint))


def _or_empty[T](fetch: Callable[[], T], empty: T, endpoint: str) -> T:
    result = _fetch(fetch, endpoint)
    if isinstance(result, Err):
        logger.warning("Could not load %s, showing none: %s", endpoint, result.error.message)
    return unwrap_or(result, empty)


def load_teams(source: TeamDataSource) -> Result[list[Team], StatsApiError]:
    result = _fetch(source.get_teams, "teams")
    if isinstance(result, Ok):
        logger.info("Loaded %d teams", len(result.value))
    return result


def _submit_slice[T](
    pool: ThreadPoolExecutor, wanted: bool, fetch: Callable[[], T], empty: T, endpoint: str
) -> Callable[[], T]:
    if not wanted:
        return lambda: empty
    future = pool.submit(_or_empty, fetch, empty, endpoint)
    return future.result


def load_team_snapshot(
    source: TeamDataSource,
    team_id: str,
    *,
    roster: bool = False,
    schedule: bool = False,
    season_stats: bool = False,
) -> Result[TeamSnapshot, StatsApiError]:
    """Fetch a team and the optional slices a view asks for.

    The optional slices are fetched concurrently once the team itself has
    loaded; each one falls back to empty on its own.
    """
    base = f"teams/{team_id}"
    team_result = _fetch(lambda: source.get_team(team_id), base)
    if isinstance(team_result, Err):
        return team_result

    with ThreadPoolExecutor(max_workers=_MAX_WORKERS) as pool:
        players = _submit_slice(pool, roster, lambda: source.get_players(team_id), [], f"{base}/players")
        entries = _submit_slice(pool, schedule, lambda: source.get_schedule(team_id), [], f"{base}/schedule")
        results = _submit_slice(
            pool, schedule, lambda: source.get_game_results(team_id), [], f"{base}/game-summaries"
        )
        stats = _submit_slice(
            pool, season_stats, lambda: source.get_season_stats(team_id), SeasonStats(), f"{base}/season-stats"
        )

    snapshot = TeamSnapshot(
        team=team_result.value,
        roster=tuple(players()),
        schedule=tuple(entries()),
        results=tuple(results()),
        season_stats=stats(),
    )
    logger.debug(
        "Snapshot for team %s: %d players, %d games, %d results, %d stat lines",
        team_id,
        len(snapshot.roster),
        len(snapshot.schedule),
        len(snapshot.results),
        len(snapshot.season_stats.players),
    )
    return Ok(snapshot)
