from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum

from team_stats_viewer.domain.roster import RosterPlayer

type StatGroup = Mapping[str, object]


class StatSource(StrEnum):
    OFFENSE = "offense"
    DEFENSE = "defense"
    GENERAL = "general"
    PITCHING = "pitching"


@dataclass(frozen=True)
class PlayerSeasonStats:
    """Counting stats for one player, partitioned the way the service sends them.

    A group is ``None`` when the service omitted it entirely.
    """

    offense: StatGroup | None = None
    defense: StatGroup | None = None
    general: StatGroup | None = None
    pitching: StatGroup | None = None

    def group(self, source: StatSource) -> StatGroup:
        found = getattr(self, source.value)
        return found if found is not None else {}

    def has_playing_stats(self) -> bool:
        return any(bool(g) for g in (self.offense, self.defense, self.pitching))


@dataclass(frozen=True)
class SeasonStats:
    team_id: str | None = None
    players: Mapping[str, PlayerSeasonStats] = field(default_factory=dict)


@dataclass(frozen=True)
class PlayerStatLine:
    player: RosterPlayer
    stats: PlayerSeasonStats
