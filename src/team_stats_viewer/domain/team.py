from dataclasses import dataclass
from enum import StrEnum


class SeasonName(StrEnum):
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"


# Most recent first within a calendar year.
SEASON_ORDER: tuple[SeasonName, ...] = (
    SeasonName.FALL,
    SeasonName.SUMMER,
    SeasonName.SPRING,
    SeasonName.WINTER,
)


@dataclass(frozen=True)
class TeamRecord:
    wins: int = 0
    losses: int = 0
    ties: int = 0


@dataclass(frozen=True)
class Team:
    id: str
    name: str
    sport: str = ""
    city: str | None = None
    state: str | None = None
    country: str | None = None
    age_group: str | None = None
    season_name: SeasonName | None = None
    season_year: int | None = None
    record: TeamRecord | None = None
    staff: tuple[str, ...] = ()


def format_season_name(season: SeasonName) -> str:
    return season.value.capitalize()


def format_record(record: TeamRecord | None) -> str:
    if record is None:
        return "No record"
    text = f"{record.wins}-{record.losses}"
    if record.ties > 0:
        text += f"-{record.ties}"
    return text


def team_location(team: Team) -> str:
    return ", ".join(part for part in (team.city, team.state) if part)


def team_initials(name: str) -> str:
    """Up to two upper-cased initials from the leading words of a team name."""
    return "".join(word[0] for word in name.split(" ") if word).upper()[:2]
