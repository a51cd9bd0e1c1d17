from __future__ import annotations

import logging
from collections.abc import Callable
from types import TracebackType
from typing import Any

import httpx

from team_stats_viewer.domain.roster import RosterPlayer
from team_stats_viewer.domain.schedule import GameResult, ScheduleEntry
from team_stats_viewer.domain.season_stats import SeasonStats
from team_stats_viewer.domain.team import Team
from team_stats_viewer.ingest._retry import default_http_retry
from team_stats_viewer.ingest.column_maps import (
    game_result_from_json,
    roster_player_from_json,
    schedule_entry_from_json,
    season_stats_from_json,
    team_from_json,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://stats-api.36technology.com"
_DEFAULT_RETRY = default_http_retry("stats_api")


def _map_records[T](data: Any, mapper: Callable[[dict[str, Any]], T], label: str) -> list[T]:
    if not isinstance(data, list):
        logger.warning("Expected a list of %s records, got %s", label, type(data).__name__)
        return []
    records: list[T] = []
    for raw in data:
        if not isinstance(raw, dict) or "id" not in raw:
            logger.debug("Skipping malformed %s record: %r", label, raw)
            continue
        records.append(mapper(raw))
    return records


class StatsApiSource:
    """Read-only access to the team statistics service."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.Client | None = None,
        retry: Callable[..., Callable[..., Any]] = _DEFAULT_RETRY,
        timeout: float = 30.0,
        connect_timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout, connect=connect_timeout))
        self._get_with_retry = retry(self._do_get)

    def __enter__(self) -> StatsApiSource:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def get_teams(self) -> list[Team]:
        return _map_records(self._get_with_retry("/api/Teams"), team_from_json, "team")

    def get_team(self, team_id: str) -> Team:
        data = self._get_with_retry(f"/api/Teams/{team_id}")
        return team_from_json(data)

    def get_schedule(self, team_id: str) -> list[ScheduleEntry]:
        data = self._get_with_retry(f"/api/Teams/{team_id}/schedule")
        return _map_records(data, schedule_entry_from_json, "schedule")

    def get_game_results(self, team_id: str) -> list[GameResult]:
        data = self._get_with_retry(f"/api/Teams/{team_id}/game-summaries")
        if not isinstance(data, list):
            logger.warning("Expected a list of game summaries, got %s", type(data).__name__)
            return []
        # Newer summaries identify their game only through event_id.
        return [game_result_from_json(raw) for raw in data if isinstance(raw, dict)]

    def get_players(self, team_id: str) -> list[RosterPlayer]:
        data = self._get_with_retry(f"/api/Teams/{team_id}/players")
        return _map_records(data, roster_player_from_json, "player")

    def get_season_stats(self, team_id: str) -> SeasonStats:
        data = self._get_with_retry(f"/api/Teams/{team_id}/season-stats")
        return season_stats_from_json(data)

    def _do_get(self, path: str) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug("GET %s", url)
        response = self._client.get(url, headers={"Content-Type": "application/json"})
        response.raise_for_status()
        logger.debug("Stats API responded %d", response.status_code)
        return response.json()
