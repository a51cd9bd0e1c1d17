from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from team_stats_viewer.domain.season_stats import PlayerStatLine, StatSource


class StatCategory(StrEnum):
    BATTING = "batting"
    PITCHING = "pitching"
    FIELDING = "fielding"


class StatView(StrEnum):
    STANDARD = "standard"
    ADVANCED = "advanced"
    CATCHING = "catching"


class ValueFormat(StrEnum):
    INTEGER = "integer"
    DECIMAL = "decimal"
    PERCENT = "percent"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class StatColumn:
    label: str
    source: StatSource
    extract: Callable[[PlayerStatLine], float]
    value_format: ValueFormat = ValueFormat.INTEGER
    decimals: int = 3
    sort: SortDirection | None = None


@dataclass(frozen=True)
class LegendEntry:
    abbrev: str
    meaning: str


@dataclass(frozen=True)
class StatsRow:
    player_id: str
    player_label: str
    values: tuple[float, ...]
    cells: tuple[str, ...]


@dataclass(frozen=True)
class StatsTable:
    category: str
    view: str
    title: str
    headers: tuple[str, ...]
    rows: tuple[StatsRow, ...]
    legend: tuple[LegendEntry, ...]
