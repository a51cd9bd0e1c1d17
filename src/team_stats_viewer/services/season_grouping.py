import logging
import unicodedata
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from team_stats_viewer.domain.team import SEASON_ORDER, SeasonName, Team, format_season_name

logger = logging.getLogger(__name__)

_DEFAULT_SEASON = SeasonName.FALL


@dataclass(frozen=True)
class SeasonYearGrouping:
    groups: dict[str, list[Team]]
    ordering: list[str]


def _label(season: SeasonName, year: int) -> str:
    return f"{format_season_name(season)} {year}"


def season_year_label(team: Team, today: date | None = None) -> str:
    """Bucket label such as ``"Fall 2025"``.

    A missing (or zero) year falls back to the current calendar year and a
    missing season to fall.
    """
    year = team.season_year or (today or date.today()).year
    season = team.season_name or _DEFAULT_SEASON
    return _label(season, year)


def name_sort_key(name: str) -> tuple[str, str, str]:
    """Collation key approximating a locale comparison of display names.

    Letters compare ignoring case and accents first, then accented after
    plain, then lowercase before uppercase.
    """
    decomposed = unicodedata.normalize("NFD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), decomposed.casefold(), name.swapcase()


def group_teams_by_season_year(teams: Iterable[Team], today: date | None = None) -> dict[str, list[Team]]:
    today = today or date.today()
    grouped: dict[str, list[Team]] = defaultdict(list)
    for team in teams:
        grouped[season_year_label(team, today)].append(team)
    return {label: sorted(members, key=lambda t: name_sort_key(t.name)) for label, members in grouped.items()}


def season_year_combinations(start_year: int, end_year: int) -> list[str]:
    """Every season label from ``start_year`` down to ``end_year``, most recent first."""
    return [_label(season, year) for year in range(start_year, end_year - 1, -1) for season in SEASON_ORDER]


def _label_year(label: str) -> int:
    return int(label.rsplit(" ", 1)[-1])


def sorted_season_year_groups(grouped: dict[str, list[Team]]) -> list[str]:
    if not grouped:
        return []
    years = [_label_year(label) for label in grouped]
    combinations = season_year_combinations(max(years), min(years))
    return [label for label in combinations if grouped.get(label)]


def group_teams(teams: Iterable[Team], today: date | None = None) -> SeasonYearGrouping:
    grouped = group_teams_by_season_year(teams, today)
    ordering = sorted_season_year_groups(grouped)
    logger.debug("Grouped %d teams into %d season buckets", sum(len(v) for v in grouped.values()), len(ordering))
    return SeasonYearGrouping(groups=grouped, ordering=ordering)
