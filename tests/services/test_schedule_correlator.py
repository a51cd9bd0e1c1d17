import math
from datetime import timedelta, timezone

import pytest

from team_stats_viewer.domain.schedule import (
    GameOutcome,
    GameResult,
    MonthOrder,
    Opponent,
    ScheduleEntry,
    Venue,
)
from team_stats_viewer.domain.team import Team
from team_stats_viewer.services.schedule_correlator import (
    ResultLookup,
    correlate_schedule,
    format_game_time,
    is_home_game,
    parse_event_time,
    resolve_scores,
    result_label,
)

_TEAM = Team(id="t1", name="Sharks", city="Austin")


def _entry(
    entry_id: str = "e1",
    start: str | None = "2025-10-04T19:30:00-05:00",
    venue: Venue | None = None,
    opponent: str | None = "Rays",
) -> ScheduleEntry:
    return ScheduleEntry(
        id=entry_id,
        start=start,
        venue=venue,
        opponent=Opponent(id="o1", name=opponent) if opponent is not None else None,
    )


def _single_row(entries: list[ScheduleEntry], results: list[GameResult]):  # type: ignore[no-untyped-def]
    months = correlate_schedule(_TEAM, entries, results)
    rows = [game for month in months for game in month.games]
    assert len(rows) == 1
    return rows[0]


class TestParseEventTime:
    def test_offset_timestamp(self) -> None:
        parsed = parse_event_time("2025-10-04T19:30:00-05:00")
        assert parsed is not None
        assert (parsed.hour, parsed.minute) == (19, 30)

    def test_trailing_z(self) -> None:
        parsed = parse_event_time("2025-10-05T00:30:00.000Z")
        assert parsed is not None
        assert parsed.utcoffset() == timedelta(0)

    def test_converts_to_target_zone(self) -> None:
        parsed = parse_event_time("2025-10-05T00:30:00Z", tz=timezone(timedelta(hours=-5)))
        assert parsed is not None
        assert parsed.day == 4
        assert format_game_time(parsed) == "7:30 PM"

    @pytest.mark.parametrize("raw", ["not-a-date", "", "   ", None])
    def test_invalid(self, raw: str | None) -> None:
        assert parse_event_time(raw) is None


class TestFormatGameTime:
    def test_evening(self) -> None:
        assert format_game_time(parse_event_time("2025-10-04T19:30:00")) == "7:30 PM"

    def test_midnight_and_noon(self) -> None:
        assert format_game_time(parse_event_time("2025-10-04T00:05:00")) == "12:05 AM"
        assert format_game_time(parse_event_time("2025-10-04T12:00:00")) == "12:00 PM"

    def test_missing(self) -> None:
        assert format_game_time(None) == "TBD"


class TestIsHomeGame:
    def test_no_venue_defaults_home(self) -> None:
        assert is_home_game(_entry(), _TEAM) is True

    def test_venue_in_team_city_is_home(self) -> None:
        assert is_home_game(_entry(venue=Venue(name="Austin Youth Field")), _TEAM) is True

    def test_venue_elsewhere_is_away(self) -> None:
        assert is_home_game(_entry(venue=Venue(name="Round Rock Park")), _TEAM) is False

    def test_venue_without_name_defaults_home(self) -> None:
        assert is_home_game(_entry(venue=Venue(address=("1 Main St",))), _TEAM) is True

    def test_missing_team_defaults_home(self) -> None:
        assert is_home_game(_entry(venue=Venue(name="Round Rock Park")), None) is True


class TestResultLabel:
    def test_win_loss_tie(self) -> None:
        assert result_label(5, 3) == "W 5-3"
        assert result_label(3, 5) == "L 3-5"
        assert result_label(3, 3) == "T 3-3"

    def test_integral_floats_drop_decimal(self) -> None:
        assert result_label(5.0, 3.0) == "W 5-3"


class TestResolveScores:
    def test_owning_team_score(self) -> None:
        result = GameResult(event_id="e1", owning_team_score=5, opponent_team_score=3)
        assert resolve_scores(result, is_home=False) == (5, 3)

    def test_home_away_indicator_selects_score(self) -> None:
        result = GameResult(event_id="e1", home_team_score=1, away_team_score=6, opponent_team_score=1, home_away="away")
        assert resolve_scores(result, is_home=True) == (6, 1)

    def test_legacy_pair_uses_inferred_side(self) -> None:
        result = GameResult(id="e1", home_team_score=4, away_team_score=2)
        assert resolve_scores(result, is_home=True) == (4, 2)
        assert resolve_scores(result, is_home=False) == (2, 4)

    def test_unresolvable_owning_pair_falls_through_to_legacy(self) -> None:
        result = GameResult(id="e1", opponent_team_score=2, home_team_score=4, away_team_score=2)
        assert resolve_scores(result, is_home=True) == (4, 2)

    def test_nan_opponent_score_uses_legacy_pair(self) -> None:
        result = GameResult(
            id="e1", owning_team_score=9, opponent_team_score=math.nan, home_team_score=4, away_team_score=2
        )
        assert resolve_scores(result, is_home=False) == (2, 4)

    def test_nothing_usable(self) -> None:
        assert resolve_scores(GameResult(id="e1", home_team_score=math.nan, away_team_score=2), True) is None
        assert resolve_scores(GameResult(id="e1", game_status="1st Half"), True) is None


class TestResultLookup:
    def test_id_match_preferred_over_event_id(self) -> None:
        by_id = GameResult(id="e1", home_team_score=1, away_team_score=0)
        by_event = GameResult(id="r9", event_id="e1", owning_team_score=0, opponent_team_score=1)
        assert ResultLookup([by_event, by_id]).find("e1") is by_id

    def test_event_id_match(self) -> None:
        result = GameResult(id="r9", event_id="e1")
        assert ResultLookup([result]).find("e1") is result

    def test_first_duplicate_wins(self) -> None:
        first = GameResult(id="e1", home_team_score=1, away_team_score=0)
        second = GameResult(id="e1", home_team_score=0, away_team_score=1)
        assert ResultLookup([first, second]).find("e1") is first

    def test_no_match(self) -> None:
        assert ResultLookup([GameResult(id="x")]).find("e1") is None


class TestCorrelateSchedule:
    def test_no_result_shows_start_time(self) -> None:
        row = _single_row([_entry()], [])
        assert row.label == "7:30 PM"
        assert row.outcome is GameOutcome.SCHEDULED

    def test_owning_team_result_via_event_id(self) -> None:
        row = _single_row([_entry()], [GameResult(id="r1", event_id="e1", owning_team_score=5, opponent_team_score=3)])
        assert row.label == "W 5-3"
        assert row.outcome is GameOutcome.WIN

    def test_reversed_and_equal_scores(self) -> None:
        loss = _single_row([_entry()], [GameResult(event_id="e1", owning_team_score=3, opponent_team_score=5)])
        tie = _single_row([_entry()], [GameResult(event_id="e1", owning_team_score=3, opponent_team_score=3)])
        assert (loss.label, loss.outcome) == ("L 3-5", GameOutcome.LOSS)
        assert (tie.label, tie.outcome) == ("T 3-3", GameOutcome.TIE)

    def test_legacy_result_for_away_game(self) -> None:
        entry = _entry(venue=Venue(name="Round Rock Park"))
        row = _single_row([entry], [GameResult(id="e1", home_team_score=4, away_team_score=2)])
        assert row.is_home is False
        assert row.label == "L 2-4"
        assert row.opponent_label == "@ Rays"

    def test_unusable_result_falls_back_to_time(self) -> None:
        row = _single_row([_entry()], [GameResult(id="e1", home_team_score=math.nan, away_team_score=1)])
        assert row.label == "7:30 PM"

    def test_invalid_timestamp_shows_tbd(self) -> None:
        row = _single_row([_entry(start="not-a-date")], [])
        assert row.label == "TBD"
        assert row.month_label == "Date TBD"

    def test_invalid_timestamp_still_shows_result(self) -> None:
        row = _single_row([_entry(start=None)], [GameResult(event_id="e1", owning_team_score=2, opponent_team_score=1)])
        assert row.label == "W 2-1"

    def test_row_display_fields(self) -> None:
        row = _single_row([_entry(venue=Venue(address=("1 Main St", "Austin")))], [])
        assert row.month_label == "October 2025"
        assert row.day_key == "2025-10-04"
        assert row.weekday == "Sat"
        assert row.day_of_month == "4"
        assert row.opponent_label == "vs. Rays"
        assert row.venue_label == "1 Main St, Austin"

    def test_missing_opponent_and_venue(self) -> None:
        row = _single_row([_entry(opponent=None)], [])
        assert row.opponent_label == "vs. TBD"
        assert row.venue_label == "Location TBD"

    def test_groups_by_month_and_day_ascending(self) -> None:
        entries = [
            _entry("late", "2025-10-04T13:00:00"),
            _entry("nov", "2025-11-01T10:00:00"),
            _entry("early", "2025-10-04T10:00:00"),
            _entry("sep", "2025-09-20T10:00:00"),
            _entry("oct12", "2025-10-12T10:00:00"),
        ]
        months = correlate_schedule(_TEAM, entries, [])
        assert [m.label for m in months] == ["September 2025", "October 2025", "November 2025"]
        october = months[1]
        assert [d.day_key for d in october.days] == ["2025-10-04", "2025-10-12"]
        assert [g.schedule_id for g in october.days[0].games] == ["early", "late"]

    def test_descending_order(self) -> None:
        entries = [
            _entry("a", "2025-09-20T10:00:00"),
            _entry("b", "2025-10-04T10:00:00"),
            _entry("c", "2025-10-12T10:00:00"),
        ]
        months = correlate_schedule(_TEAM, entries, [], order=MonthOrder.DESCENDING)
        assert [m.label for m in months] == ["October 2025", "September 2025"]
        assert [d.day_key for d in months[0].days] == ["2025-10-12", "2025-10-04"]

    def test_undated_games_come_last(self) -> None:
        entries = [_entry("x", None), _entry("y", "2025-10-04T10:00:00")]
        for order in MonthOrder:
            months = correlate_schedule(_TEAM, entries, [], order=order)
            assert months[-1].label == "Date TBD"
            assert [g.schedule_id for g in months[-1].games] == ["x"]

    def test_mixed_aware_and_naive_timestamps_on_one_day(self) -> None:
        entries = [_entry("aware", "2025-10-04T15:00:00-05:00"), _entry("naive", "2025-10-04T09:00:00")]
        months = correlate_schedule(_TEAM, entries, [])
        assert [g.schedule_id for g in months[0].games] == ["naive", "aware"]

    def test_one_row_per_entry(self) -> None:
        entries = [_entry("a"), _entry("b", "2025-10-05T10:00:00")]
        results = [
            GameResult(id="a", home_team_score=1, away_team_score=0),
            GameResult(event_id="a", owning_team_score=0, opponent_team_score=1),
        ]
        months = correlate_schedule(_TEAM, entries, results)
        assert sorted(g.schedule_id for m in months for g in m.games) == ["a", "b"]

    def test_empty_inputs(self) -> None:
        assert correlate_schedule(_TEAM, [], []) == []
        assert correlate_schedule(None, [], [GameResult(id="e1")]) == []
