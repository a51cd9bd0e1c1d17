from datetime import date

from team_stats_viewer.domain.team import SeasonName, Team
from team_stats_viewer.services.season_grouping import (
    group_teams,
    group_teams_by_season_year,
    name_sort_key,
    season_year_combinations,
    season_year_label,
    sorted_season_year_groups,
)

_TODAY = date(2026, 10, 19)


def _team(name: str, season: SeasonName | None = None, year: int | None = None) -> Team:
    return Team(id=name, name=name, season_name=season, season_year=year)


class TestSeasonYearLabel:
    def test_explicit_season_and_year(self) -> None:
        assert season_year_label(_team("A", SeasonName.SPRING, 2024), _TODAY) == "Spring 2024"

    def test_missing_year_uses_current_year(self) -> None:
        assert season_year_label(_team("A", SeasonName.SUMMER), _TODAY) == "Summer 2026"

    def test_missing_season_defaults_to_fall(self) -> None:
        assert season_year_label(_team("A", year=2023), _TODAY) == "Fall 2023"


class TestSeasonYearCombinations:
    def test_three_years_give_twelve_labels(self) -> None:
        labels = season_year_combinations(2025, 2023)
        assert len(labels) == 12
        assert labels[:4] == ["Fall 2025", "Summer 2025", "Spring 2025", "Winter 2025"]
        assert labels[-1] == "Winter 2023"

    def test_single_year(self) -> None:
        assert season_year_combinations(2024, 2024) == ["Fall 2024", "Summer 2024", "Spring 2024", "Winter 2024"]


class TestGroupTeams:
    def test_years_without_explicit_season(self) -> None:
        grouping = group_teams([_team("Old", year=2023), _team("New", year=2025)], _TODAY)
        assert grouping.ordering == ["Fall 2025", "Fall 2023"]
        assert [t.name for t in grouping.groups["Fall 2023"]] == ["Old"]

    def test_orders_seasons_most_recent_first(self) -> None:
        teams = [
            _team("a", SeasonName.SPRING, 2025),
            _team("b", SeasonName.FALL, 2024),
            _team("c", SeasonName.WINTER, 2025),
            _team("d", SeasonName.SUMMER, 2025),
        ]
        grouping = group_teams(teams, _TODAY)
        assert grouping.ordering == ["Summer 2025", "Spring 2025", "Winter 2025", "Fall 2024"]

    def test_teams_sorted_by_name_within_bucket(self) -> None:
        teams = [_team("b", year=2025), _team("B", year=2025), _team("a", year=2025)]
        grouped = group_teams_by_season_year(teams, _TODAY)
        assert [t.name for t in grouped["Fall 2025"]] == ["a", "b", "B"]

    def test_names_compare_ignoring_case(self) -> None:
        teams = [_team("Zebras", year=2025), _team("apple", year=2025), _team("Bears", year=2025)]
        grouped = group_teams_by_season_year(teams, _TODAY)
        assert [t.name for t in grouped["Fall 2025"]] == ["apple", "Bears", "Zebras"]

    def test_empty_input(self) -> None:
        grouping = group_teams([], _TODAY)
        assert grouping.groups == {}
        assert grouping.ordering == []

    def test_sorted_groups_skip_empty_buckets(self) -> None:
        grouped = {"Fall 2025": [_team("a")], "Spring 2025": [], "Winter 2024": [_team("b")]}
        assert sorted_season_year_groups(grouped) == ["Fall 2025", "Winter 2024"]

    def test_input_not_mutated(self) -> None:
        teams = [_team("b", year=2025), _team("a", year=2025)]
        group_teams(teams, _TODAY)
        assert [t.name for t in teams] == ["b", "a"]


class TestNameSortKey:
    def test_accented_letter_sorts_with_its_base(self) -> None:
        names = ["Eagles", "\u00c9toiles", "Dolphins", "Falcons"]
        assert sorted(names, key=name_sort_key) == ["Dolphins", "Eagles", "\u00c9toiles", "Falcons"]

    def test_plain_before_accented_when_otherwise_equal(self) -> None:
        assert sorted(["\u00e9lan", "elan"], key=name_sort_key) == ["elan", "\u00e9lan"]

    def test_lowercase_before_uppercase_when_otherwise_equal(self) -> None:
        assert sorted(["Cubs", "cubs"], key=name_sort_key) == ["cubs", "Cubs"]
