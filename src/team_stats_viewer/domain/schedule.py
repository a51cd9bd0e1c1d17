from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


@dataclass(frozen=True)
class Venue:
    name: str | None = None
    address: tuple[str, ...] = ()


@dataclass(frozen=True)
class Opponent:
    id: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class ScheduleEntry:
    id: str
    start: str | None = None
    end: str | None = None
    venue: Venue | None = None
    opponent: Opponent | None = None


@dataclass(frozen=True)
class GameResult:
    """Final or partial score for a scheduled game.

    The service has returned two shapes over time: a home/away score pair
    keyed by the schedule id, and an owning-team/opponent pair carrying an
    ``event_id`` back-reference. Either half may be missing.
    """

    id: str | None = None
    event_id: str | None = None
    home_team_score: float | None = None
    away_team_score: float | None = None
    owning_team_score: float | None = None
    opponent_team_score: float | None = None
    home_away: str | None = None
    game_status: str | None = None


class GameOutcome(StrEnum):
    WIN = "win"
    LOSS = "loss"
    TIE = "tie"
    SCHEDULED = "scheduled"


class MonthOrder(StrEnum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass(frozen=True)
class GameRow:
    schedule_id: str
    start: datetime | None
    month_label: str
    day_key: str
    weekday: str
    day_of_month: str
    is_home: bool
    opponent_label: str
    venue_label: str
    outcome: GameOutcome
    label: str


@dataclass(frozen=True)
class ScheduleDay:
    day_key: str
    games: tuple[GameRow, ...]


@dataclass(frozen=True)
class ScheduleMonth:
    label: str
    days: tuple[ScheduleDay, ...]

    @property
    def games(self) -> tuple[GameRow, ...]:
        return tuple(game for day in self.days for game in day.games)
