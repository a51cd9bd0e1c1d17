import math
from collections.abc import Mapping
from typing import Any

from team_stats_viewer.domain.roster import Handedness, RosterPlayer
from team_stats_viewer.domain.schedule import GameResult, Opponent, ScheduleEntry, Venue
from team_stats_viewer.domain.season_stats import PlayerSeasonStats, SeasonStats
from team_stats_viewer.domain.team import SeasonName, Team, TeamRecord


def _to_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    s = str(value)
    if s == "":
        return None
    return s


def _to_optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_optional_score(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _to_season_name(value: Any) -> SeasonName | None:
    if not isinstance(value, str):
        return None
    try:
        return SeasonName(value.strip().lower())
    except ValueError:
        return None


def team_record_from_json(raw: Any) -> TeamRecord | None:
    if not isinstance(raw, dict):
        return None
    return TeamRecord(
        wins=_to_optional_int(raw.get("wins")) or 0,
        losses=_to_optional_int(raw.get("losses")) or 0,
        ties=_to_optional_int(raw.get("ties")) or 0,
    )


def team_from_json(raw: dict[str, Any]) -> Team:
    staff = raw.get("staff")
    return Team(
        id=str(raw["id"]),
        name=_to_optional_str(raw.get("name")) or "",
        sport=_to_optional_str(raw.get("sport")) or "",
        city=_to_optional_str(raw.get("city")),
        state=_to_optional_str(raw.get("state")),
        country=_to_optional_str(raw.get("country")),
        age_group=_to_optional_str(raw.get("age_group")),
        season_name=_to_season_name(raw.get("season_name")),
        season_year=_to_optional_int(raw.get("season_year")),
        record=team_record_from_json(raw.get("record")),
        staff=tuple(str(s) for s in staff) if isinstance(staff, list) else (),
    )


def roster_player_from_json(raw: dict[str, Any]) -> RosterPlayer:
    bats = raw.get("bats")
    handedness = None
    if isinstance(bats, dict):
        handedness = Handedness(
            batting_side=_to_optional_str(bats.get("batting_side")),
            throwing_hand=_to_optional_str(bats.get("throwing_hand")),
        )
    return RosterPlayer(
        id=str(raw["id"]),
        first_name=_to_optional_str(raw.get("first_name")) or "",
        last_name=_to_optional_str(raw.get("last_name")) or "",
        number=_to_optional_str(raw.get("number")),
        status=_to_optional_str(raw.get("status")),
        bats=handedness,
    )


def _venue_from_json(raw: Any) -> Venue | None:
    if not isinstance(raw, dict):
        return None
    address = raw.get("address")
    return Venue(
        name=_to_optional_str(raw.get("name")),
        address=tuple(str(part) for part in address if part) if isinstance(address, list) else (),
    )


def schedule_entry_from_json(raw: dict[str, Any]) -> ScheduleEntry:
    event = _as_dict(raw.get("event"))
    pregame = raw.get("pregame_data")
    opponent = None
    if isinstance(pregame, dict):
        opponent = Opponent(
            id=_to_optional_str(pregame.get("opponent_id")),
            name=_to_optional_str(pregame.get("opponent_name")),
        )
    return ScheduleEntry(
        id=str(raw["id"]),
        start=_to_optional_str(_as_dict(event.get("start")).get("datetime")),
        end=_to_optional_str(_as_dict(event.get("end")).get("datetime")),
        venue=_venue_from_json(event.get("location")),
        opponent=opponent,
    )


def game_result_from_json(raw: dict[str, Any]) -> GameResult:
    return GameResult(
        id=_to_optional_str(raw.get("id")),
        event_id=_to_optional_str(raw.get("event_id")),
        home_team_score=_to_optional_score(raw.get("home_team_score")),
        away_team_score=_to_optional_score(raw.get("away_team_score")),
        owning_team_score=_to_optional_score(raw.get("owning_team_score")),
        opponent_team_score=_to_optional_score(raw.get("opponent_team_score")),
        home_away=_to_optional_str(raw.get("home_away")),
        game_status=_to_optional_str(raw.get("game_status")),
    )


def _stat_group(raw: Any) -> Mapping[str, object] | None:
    if not isinstance(raw, dict):
        return None
    return dict(raw)


def player_season_stats_from_json(raw: Any) -> PlayerSeasonStats:
    stats = _as_dict(_as_dict(raw).get("stats"))
    return PlayerSeasonStats(
        offense=_stat_group(stats.get("offense")),
        defense=_stat_group(stats.get("defense")),
        general=_stat_group(stats.get("general")),
        pitching=_stat_group(stats.get("pitching")),
    )


def season_stats_from_json(raw: Any) -> SeasonStats:
    envelope = _as_dict(raw)
    players = _as_dict(_as_dict(envelope.get("stats_data")).get("players"))
    return SeasonStats(
        team_id=_to_optional_str(envelope.get("team_id")),
        players={str(player_id): player_season_stats_from_json(entry) for player_id, entry in players.items()},
    )
