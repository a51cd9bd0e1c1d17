"""Correlate a team's schedule with game results for display.

Every schedule entry becomes exactly one ``GameRow``. A row carries a
``W``/``L``/``T`` score label only when a matching result with usable
scores exists; otherwise it falls back to the scheduled start time, or
``"TBD"`` when the start time cannot be parsed.
"""

import logging
import math
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, tzinfo

from team_stats_viewer.domain.schedule import (
    GameOutcome,
    GameResult,
    GameRow,
    MonthOrder,
    ScheduleDay,
    ScheduleEntry,
    ScheduleMonth,
)
from team_stats_viewer.domain.team import Team

logger = logging.getLogger(__name__)

TBD = "TBD"
UNDATED_MONTH = "Date TBD"

type ResultKey = Callable[[GameResult], str | None]


def match_by_id(result: GameResult) -> str | None:
    return result.id


def match_by_event_id(result: GameResult) -> str | None:
    return result.event_id


# Tried in order; the first matcher that finds a result wins.
RESULT_MATCHERS: tuple[ResultKey, ...] = (match_by_id, match_by_event_id)


class ResultLookup:
    """Index of game results under each matcher strategy."""

    def __init__(self, results: Iterable[GameResult], matchers: Sequence[ResultKey] = RESULT_MATCHERS) -> None:
        self._indexes: list[dict[str, GameResult]] = [{} for _ in matchers]
        for result in results:
            for index, key in zip(self._indexes, matchers, strict=True):
                value = key(result)
                if value is not None:
                    index.setdefault(value, result)

    def find(self, schedule_id: str) -> GameResult | None:
        for index in self._indexes:
            found = index.get(schedule_id)
            if found is not None:
                return found
        return None


def parse_event_time(raw: str | None, tz: tzinfo | None = None) -> datetime | None:
    """Parse an ISO-8601 timestamp, returning ``None`` when it is unusable.

    Aware timestamps are converted to ``tz`` when one is given; naive ones
    are kept as wall-clock time.
    """
    if not isinstance(raw, str) or not raw.strip():
        return None
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if tz is not None and parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed


def format_game_time(start: datetime | None) -> str:
    if start is None:
        return TBD
    hour = start.hour % 12 or 12
    meridiem = "AM" if start.hour < 12 else "PM"
    return f"{hour}:{start.minute:02d} {meridiem}"


def is_home_game(entry: ScheduleEntry, team: Team | None) -> bool:
    """Best-effort home/away guess.

    The schedule carries no authoritative home/away field, so a game counts
    as home unless a venue name is known and does not mention the team's
    city. Unreliable for venues named after something other than the town.
    """
    if team is None or entry.venue is None or not entry.venue.name:
        return True
    return (team.city or "") in entry.venue.name


def _is_score(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value) and not math.isinf(value)


def _owning_score(result: GameResult) -> float | None:
    if _is_score(result.owning_team_score):
        return result.owning_team_score
    side = (result.home_away or "").strip().lower()
    if side == "home" and _is_score(result.home_team_score):
        return result.home_team_score
    if side == "away" and _is_score(result.away_team_score):
        return result.away_team_score
    return None


def resolve_scores(result: GameResult, is_home: bool) -> tuple[float, float] | None:
    """Return ``(team_score, opponent_score)`` or ``None`` when the result is unusable."""
    if _is_score(result.opponent_team_score):
        team_score = _owning_score(result)
        if team_score is not None:
            return team_score, result.opponent_team_score  # type: ignore[return-value]

    home, away = result.home_team_score, result.away_team_score
    if _is_score(home) and _is_score(away):
        if is_home:
            return home, away  # type: ignore[return-value]
        return away, home  # type: ignore[return-value]
    return None


def _format_score(score: float) -> str:
    if float(score).is_integer():
        return str(int(score))
    return str(score)


def classify_result(team_score: float, opponent_score: float) -> GameOutcome:
    if team_score > opponent_score:
        return GameOutcome.WIN
    if team_score < opponent_score:
        return GameOutcome.LOSS
    return GameOutcome.TIE


_OUTCOME_PREFIX: dict[GameOutcome, str] = {
    GameOutcome.WIN: "W",
    GameOutcome.LOSS: "L",
    GameOutcome.TIE: "T",
}


def result_label(team_score: float, opponent_score: float) -> str:
    prefix = _OUTCOME_PREFIX[classify_result(team_score, opponent_score)]
    return f"{prefix} {_format_score(team_score)}-{_format_score(opponent_score)}"


def _opponent_label(entry: ScheduleEntry, is_home: bool) -> str:
    name = entry.opponent.name if entry.opponent is not None else None
    return f"{'vs.' if is_home else '@'} {name or TBD}"


def _venue_label(entry: ScheduleEntry) -> str:
    if entry.venue is None:
        return "Location TBD"
    if entry.venue.name:
        return entry.venue.name
    if entry.venue.address:
        return ", ".join(entry.venue.address)
    return "Location TBD"


def build_game_row(
    entry: ScheduleEntry,
    team: Team | None,
    lookup: ResultLookup,
    tz: tzinfo | None = None,
) -> GameRow:
    start = parse_event_time(entry.start, tz)
    is_home = is_home_game(entry, team)

    result = lookup.find(entry.id)
    scores = resolve_scores(result, is_home) if result is not None else None
    if scores is not None:
        outcome = classify_result(*scores)
        label = result_label(*scores)
    else:
        outcome = GameOutcome.SCHEDULED
        label = format_game_time(start)

    return GameRow(
        schedule_id=entry.id,
        start=start,
        month_label=f"{start:%B} {start.year}" if start is not None else UNDATED_MONTH,
        day_key=start.date().isoformat() if start is not None else "",
        weekday=f"{start:%a}" if start is not None else "",
        day_of_month=str(start.day) if start is not None else "",
        is_home=is_home,
        opponent_label=_opponent_label(entry, is_home),
        venue_label=_venue_label(entry),
        outcome=outcome,
        label=label,
    )


def _wall_clock(row: GameRow) -> datetime:
    # Rows may mix aware and naive timestamps; compare on wall-clock time only.
    assert row.start is not None
    return row.start.replace(tzinfo=None)


def group_by_month(rows: Iterable[GameRow], order: MonthOrder = MonthOrder.ASCENDING) -> list[ScheduleMonth]:
    """Group rows by month, then by calendar day.

    Months and the days inside them follow ``order``; games on one day stay
    together in start-time order so double-headers read naturally. Rows
    without a usable date are collected into a trailing ``"Date TBD"`` month.
    """
    descending = order is MonthOrder.DESCENDING
    by_month: dict[tuple[int, int], list[GameRow]] = defaultdict(list)
    undated: list[GameRow] = []
    for row in rows:
        if row.start is None:
            undated.append(row)
        else:
            by_month[(row.start.year, row.start.month)].append(row)

    months: list[ScheduleMonth] = []
    for key in sorted(by_month, reverse=descending):
        by_day: dict[str, list[GameRow]] = defaultdict(list)
        for row in by_month[key]:
            by_day[row.day_key].append(row)
        days = tuple(
            ScheduleDay(day_key=day_key, games=tuple(sorted(by_day[day_key], key=_wall_clock)))
            for day_key in sorted(by_day, reverse=descending)
        )
        months.append(ScheduleMonth(label=by_month[key][0].month_label, days=days))

    if undated:
        months.append(ScheduleMonth(label=UNDATED_MONTH, days=(ScheduleDay(day_key="", games=tuple(undated)),)))
    return months


def correlate_schedule(
    team: Team | None,
    entries: Iterable[ScheduleEntry],
    results: Iterable[GameResult],
    order: MonthOrder = MonthOrder.ASCENDING,
    tz: tzinfo | None = None,
) -> list[ScheduleMonth]:
    lookup = ResultLookup(results)
    rows = [build_game_row(entry, team, lookup, tz) for entry in entries]
    months = group_by_month(rows, order)
    logger.debug(
        "Correlated %d schedule entries (%d with results) into %d months",
        len(rows),
        sum(1 for r in rows if r.outcome is not GameOutcome.SCHEDULED),
        len(months),
    )
    return months
