"""Derived season-stat tables for batting, pitching and fielding views.

Column sets are a closed lookup keyed by ``(category, view)``. Every raw
stat that is missing, non-numeric, NaN or infinite counts as zero, and
every ratio with a zero denominator is zero (fielding percentage with no
chances is 1.000), so a table can always be rendered.
"""

import logging
import math
from collections.abc import Callable, Iterable, Mapping

from team_stats_viewer.domain.roster import RosterPlayer, player_table_label
from team_stats_viewer.domain.season_stats import (
    PlayerSeasonStats,
    PlayerStatLine,
    SeasonStats,
    StatGroup,
    StatSource,
)
from team_stats_viewer.domain.stat_table import (
    LegendEntry,
    SortDirection,
    StatCategory,
    StatColumn,
    StatsRow,
    StatsTable,
    StatView,
    ValueFormat,
)

logger = logging.getLogger(__name__)

type Extractor = Callable[[PlayerStatLine], float]

OFFENSE = StatSource.OFFENSE
DEFENSE = StatSource.DEFENSE
GENERAL = StatSource.GENERAL
PITCHING = StatSource.PITCHING


# -- Raw value access ---------------------------------------------------------


def _maybe_num(group: StatGroup, key: str) -> float | None:
    value = group.get(key)
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def raw_stat(stats: PlayerSeasonStats, source: StatSource, key: str) -> float:
    return _maybe_num(stats.group(source), key) or 0.0


def _stat(source: StatSource, key: str) -> Extractor:
    return lambda line: raw_stat(line.stats, source, key)


def _first_nonzero(*extractors: Extractor) -> Extractor:
    def extract(line: PlayerStatLine) -> float:
        for extractor in extractors:
            value = extractor(line)
            if value:
                return value
        return 0.0

    return extract


def _ratio(numerator: Extractor, denominator: Extractor, empty: float = 0.0) -> Extractor:
    def extract(line: PlayerStatLine) -> float:
        den = denominator(line)
        if den == 0:
            return empty
        return numerator(line) / den

    return extract


def _sum(*extractors: Extractor) -> Extractor:
    return lambda line: sum(extractor(line) for extractor in extractors)


# -- Batting ------------------------------------------------------------------

_h = _stat(OFFENSE, "h")
_ab = _stat(OFFENSE, "ab")
_pa = _stat(OFFENSE, "pa")
_bb = _stat(OFFENSE, "bb")
_so = _stat(OFFENSE, "so")
_hbp = _stat(OFFENSE, "hbp")
_sf = _stat(OFFENSE, "shf")
_doubles = _stat(OFFENSE, "2B")
_triples = _stat(OFFENSE, "3B")
_hr = _stat(OFFENSE, "hr")
_sb = _stat(OFFENSE, "sb")
_cs = _stat(OFFENSE, "cs")


def singles(line: PlayerStatLine) -> float:
    """Singles as reported, else hits minus extra-base hits."""
    reported = _maybe_num(line.stats.group(OFFENSE), "1B")
    if reported is not None:
        return reported
    return max(_h(line) - _doubles(line) - _triples(line) - _hr(line), 0.0)


def total_bases(line: PlayerStatLine) -> float:
    return singles(line) + 2 * _doubles(line) + 3 * _triples(line) + 4 * _hr(line)


extra_base_hits = _sum(_doubles, _triples, _hr)
batting_average = _ratio(_h, _ab)
on_base_percentage = _ratio(_sum(_h, _bb, _hbp), _sum(_ab, _bb, _hbp, _sf))
slugging_percentage = _ratio(total_bases, _ab)
on_base_plus_slugging = _sum(on_base_percentage, slugging_percentage)
stolen_base_percentage = _ratio(_sb, _sum(_sb, _cs))
contact_percentage = _ratio(lambda line: _ab(line) - _so(line), _ab)

_games = _first_nonzero(_stat(GENERAL, "gp"), _stat(OFFENSE, "gp"))

# -- Pitching -----------------------------------------------------------------

_pitches = _stat(PITCHING, "pitches")
_ip = _stat(PITCHING, "ip")
_bf = _stat(PITCHING, "bf")

# -- Fielding -----------------------------------------------------------------

_assists = _stat(DEFENSE, "a")
_putouts = _stat(DEFENSE, "po")
_errors = _stat(DEFENSE, "e")
_sb_allowed = _stat(DEFENSE, "sb_allowed")
_cs_by_catcher = _stat(DEFENSE, "cs_by_catcher")

total_chances = _sum(_assists, _putouts, _errors)
fielding_percentage = _ratio(_sum(_assists, _putouts), total_chances, empty=1.0)
catcher_caught_stealing_percentage = _ratio(_cs_by_catcher, _sum(_sb_allowed, _cs_by_catcher))


# -- Column helpers -----------------------------------------------------------


def _count(label: str, source: StatSource, key: str) -> StatColumn:
    return StatColumn(label, source, _stat(source, key))


def _decimal(label: str, source: StatSource, key: str, decimals: int = 3) -> StatColumn:
    return StatColumn(label, source, _stat(source, key), ValueFormat.DECIMAL, decimals)


def _percent(label: str, source: StatSource, key: str) -> StatColumn:
    return StatColumn(label, source, _stat(source, key), ValueFormat.PERCENT, 1)


_GAMES_COLUMN = StatColumn("G", GENERAL, _games)

_BATTING_STANDARD: tuple[StatColumn, ...] = (
    _GAMES_COLUMN,
    _count("PA", OFFENSE, "pa"),
    _count("AB", OFFENSE, "ab"),
    StatColumn("AVG", OFFENSE, batting_average, ValueFormat.DECIMAL, sort=SortDirection.DESC),
    StatColumn("OBP", OFFENSE, on_base_percentage, ValueFormat.DECIMAL),
    StatColumn("SLG", OFFENSE, slugging_percentage, ValueFormat.DECIMAL),
    StatColumn("OPS", OFFENSE, on_base_plus_slugging, ValueFormat.DECIMAL),
    _count("H", OFFENSE, "h"),
    StatColumn("1B", OFFENSE, singles),
    _count("2B", OFFENSE, "2B"),
    _count("3B", OFFENSE, "3B"),
    _count("HR", OFFENSE, "hr"),
    _count("RBI", OFFENSE, "rbi"),
    _count("R", OFFENSE, "r"),
    _count("BB", OFFENSE, "bb"),
    _count("SO", OFFENSE, "so"),
    _count("K-L", OFFENSE, "K-L"),
    _count("HBP", OFFENSE, "hbp"),
    _count("SAC", OFFENSE, "shb"),
    _count("SF", OFFENSE, "shf"),
    _count("ROE", OFFENSE, "roe"),
    _count("FC", OFFENSE, "fc"),
    _count("SB", OFFENSE, "sb"),
    StatColumn("SB%", OFFENSE, stolen_base_percentage, ValueFormat.PERCENT, 1),
    _count("CS", OFFENSE, "cs"),
    StatColumn("PIK", OFFENSE, _first_nonzero(_stat(OFFENSE, "pik"), _stat(OFFENSE, "picked_off"))),
)

_BATTING_ADVANCED: tuple[StatColumn, ...] = (
    _count("QAB", OFFENSE, "qab"),
    StatColumn("QAB%", OFFENSE, _ratio(_stat(OFFENSE, "qab"), _pa), ValueFormat.DECIMAL),
    StatColumn("PA/BB", OFFENSE, _ratio(_pa, _bb), ValueFormat.DECIMAL),
    StatColumn("BB/K", OFFENSE, _ratio(_bb, _so), ValueFormat.DECIMAL),
    StatColumn("C%", OFFENSE, contact_percentage, ValueFormat.PERCENT, 1),
    _count("HHB", OFFENSE, "hhb"),
    _percent("LD%", OFFENSE, "ld_pct"),
    _percent("FB%", OFFENSE, "fb_pct"),
    _percent("GB%", OFFENSE, "gb_pct"),
    _decimal("BABIP", OFFENSE, "babip"),
    _decimal("BA/RISP", OFFENSE, "ba_risp"),
    _count("LOB", OFFENSE, "lob"),
    _count("2OUTRBI", OFFENSE, "two_out_rbi"),
    StatColumn("XBH", OFFENSE, extra_base_hits),
    StatColumn("TB", OFFENSE, total_bases),
    _count("PS", OFFENSE, "ps"),
    StatColumn("PS/PA", OFFENSE, _ratio(_stat(OFFENSE, "ps"), _pa), ValueFormat.DECIMAL),
)

_PITCHING_STANDARD: tuple[StatColumn, ...] = (
    _decimal("IP", PITCHING, "ip", decimals=1),
    StatColumn("GP", PITCHING, _first_nonzero(_stat(PITCHING, "gp"), _stat(GENERAL, "gp"))),
    _count("GS", PITCHING, "gs"),
    _count("BF", PITCHING, "bf"),
    _count("#P", PITCHING, "pitches"),
    _count("W", PITCHING, "w"),
    _count("L", PITCHING, "l"),
    _count("SV", PITCHING, "sv"),
    StatColumn("ERA", PITCHING, _stat(PITCHING, "era"), ValueFormat.DECIMAL, sort=SortDirection.ASC),
    _decimal("WHIP", PITCHING, "whip"),
    _count("H", PITCHING, "h"),
    _count("R", PITCHING, "r"),
    _count("ER", PITCHING, "er"),
    _count("BB", PITCHING, "bb"),
    _count("SO", PITCHING, "so"),
    _decimal("BAA", PITCHING, "baa"),
)

_PITCHING_ADVANCED: tuple[StatColumn, ...] = (
    StatColumn("P/IP", PITCHING, _ratio(_pitches, _ip), ValueFormat.DECIMAL),
    StatColumn("P/BF", PITCHING, _ratio(_pitches, _bf), ValueFormat.DECIMAL),
    _decimal("FIP", PITCHING, "fip"),
    _percent("S%", PITCHING, "strike_pct"),
    StatColumn("K/BB", PITCHING, _ratio(_stat(PITCHING, "so"), _stat(PITCHING, "bb")), ValueFormat.DECIMAL),
    _decimal("BABIP", PITCHING, "babip"),
)

_FIELDING_STANDARD: tuple[StatColumn, ...] = (
    StatColumn("TC", DEFENSE, total_chances),
    _count("A", DEFENSE, "a"),
    _count("PO", DEFENSE, "po"),
    StatColumn("FPCT", DEFENSE, fielding_percentage, ValueFormat.DECIMAL),
    _count("E", DEFENSE, "e"),
    _count("DP", DEFENSE, "dp"),
    _count("TP", DEFENSE, "tp"),
)

_FIELDING_CATCHING: tuple[StatColumn, ...] = (
    _decimal("INN", DEFENSE, "inn_caught", decimals=1),
    _count("PB", DEFENSE, "pb"),
    _count("SB", DEFENSE, "sb_allowed"),
    StatColumn("SB-ATT", DEFENSE, _sum(_sb_allowed, _cs_by_catcher)),
    _count("CS", DEFENSE, "cs_by_catcher"),
    StatColumn("CS%", DEFENSE, catcher_caught_stealing_percentage, ValueFormat.PERCENT, 1),
    _count("PIK", DEFENSE, "pik_catcher"),
    _count("CI", DEFENSE, "ci"),
)

_DEFAULT_COLUMNS: tuple[StatColumn, ...] = (_GAMES_COLUMN,)

COLUMN_SETS: dict[tuple[str, str], tuple[StatColumn, ...]] = {
    (StatCategory.BATTING, StatView.STANDARD): _BATTING_STANDARD,
    (StatCategory.BATTING, StatView.ADVANCED): _BATTING_ADVANCED,
    (StatCategory.PITCHING, StatView.STANDARD): _PITCHING_STANDARD,
    (StatCategory.PITCHING, StatView.ADVANCED): _PITCHING_ADVANCED,
    (StatCategory.FIELDING, StatView.STANDARD): _FIELDING_STANDARD,
    (StatCategory.FIELDING, StatView.CATCHING): _FIELDING_CATCHING,
}


# -- Legend -------------------------------------------------------------------


def _legend(*pairs: tuple[str, str]) -> tuple[LegendEntry, ...]:
    return tuple(LegendEntry(abbrev, meaning) for abbrev, meaning in pairs)


_DEFAULT_LEGEND = _legend(
    ("G", "Games played"),
    ("PA", "Plate appearances"),
    ("AB", "At bats"),
)

LEGENDS: dict[tuple[str, str], tuple[LegendEntry, ...]] = {
    (StatCategory.BATTING, StatView.STANDARD): _legend(
        ("G", "Games played"),
        ("PA", "Plate appearances"),
        ("AB", "At bats"),
        ("AVG", "Batting average"),
        ("OBP", "On-base percentage"),
        ("SLG", "Slugging percentage"),
        ("OPS", "On-base percentage plus slugging percentage"),
        ("H", "Hits"),
        ("1B", "Singles"),
        ("2B", "Doubles"),
        ("3B", "Triples"),
        ("HR", "Home runs"),
        ("RBI", "Runs batted in"),
        ("R", "Runs scored"),
        ("BB", "Base on balls (walks)"),
        ("SO", "Strikeouts"),
        ("K-L", "Strikeouts looking"),
        ("HBP", "Hit by pitch"),
        ("SAC", "Sacrifice hits & bunts"),
        ("SF", "Sacrifice flies"),
        ("ROE", "Reached on error"),
        ("FC", "Hit into fielder's choice"),
        ("SB", "Stolen bases"),
        ("SB%", "Stolen base percentage"),
        ("CS", "Caught stealing"),
        ("PIK", "Picked off"),
    ),
    (StatCategory.BATTING, StatView.ADVANCED): _legend(
        (
            "QAB",
            "Quality at bats (Any one of: 3 pitches after 2 strikes, 6+ pitch ABs, "
            "extra-base hit, hard-hit ball, walk, sac bunt, or sac fly)",
        ),
        ("QAB%", "Quality at bats per plate appearance"),
        ("PA/BB", "Plate appearances per walk"),
        ("BB/K", "Walks per strikeout"),
        ("C%", "Contact percentage/Contact rate: (AB - K) / AB"),
        ("HHB", "Hard hit balls (Total line drives and hard ground balls)"),
        ("LD%", "Line drive percentage"),
        ("FB%", "Fly ball percentage"),
        ("GB%", "Ground ball percentage"),
        ("BABIP", "Batting average on balls in play"),
        ("BA/RISP", "Batting average with runners in scoring position"),
        ("LOB", "Runners left on base"),
        ("2OUTRBI", "2-out RBI"),
        ("XBH", "Extra-base hits"),
        ("TB", "Total bases"),
        ("PS", "Pitches seen"),
        ("PS/PA", "Pitches seen per plate appearance"),
    ),
    (StatCategory.PITCHING, StatView.STANDARD): _legend(
        ("IP", "Innings pitched"),
        ("GP", "Games pitched"),
        ("GS", "Games started"),
        ("BF", "Total batters faced"),
        ("#P", "Total pitches"),
        ("W", "Wins"),
        ("L", "Losses"),
        ("SV", "Saves"),
        ("ERA", "Earned run average"),
        ("WHIP", "Walks plus hits per innings pitched"),
        ("H", "Hits allowed"),
        ("R", "Runs allowed"),
        ("ER", "Earned runs allowed"),
        ("BB", "Base on balls (walks)"),
        ("SO", "Strikeouts"),
        ("BAA", "Opponent batting average"),
    ),
    (StatCategory.PITCHING, StatView.ADVANCED): _legend(
        ("P/IP", "Pitches per inning"),
        ("P/BF", "Pitches per batter faced"),
        ("FIP", "Fielding Independent Pitching"),
        ("S%", "Strike percentage"),
        ("K/BB", "Strikeouts per walk"),
        ("BABIP", "Opponent batting average on balls in play"),
    ),
    (StatCategory.FIELDING, StatView.STANDARD): _legend(
        ("TC", "Total Chances"),
        ("A", "Assists"),
        ("PO", "Putouts"),
        ("FPCT", "Fielding Percentage"),
        ("E", "Errors"),
        ("DP", "Double Plays"),
        ("TP", "Triple Plays"),
    ),
    (StatCategory.FIELDING, StatView.CATCHING): _legend(
        ("INN", "Innings played as catcher"),
        ("PB", "Passed balls allowed"),
        ("SB", "Stolen bases allowed"),
        ("SB-ATT", "Stolen bases - Stealing attempts"),
        ("CS", "Runners caught stealing"),
        ("CS%", "Runners caught stealing percentage"),
        ("PIK", "Runners picked off"),
        ("CI", "Batter advances on catcher's interference"),
    ),
}


# -- Public API ---------------------------------------------------------------


def _key(category: str, view: str) -> tuple[str, str]:
    return str(category).lower(), str(view).lower()


def column_set(category: str, view: str) -> tuple[StatColumn, ...]:
    return COLUMN_SETS.get(_key(category, view), _DEFAULT_COLUMNS)


def stats_legend(category: str, view: str) -> tuple[LegendEntry, ...]:
    return LEGENDS.get(_key(category, view), _DEFAULT_LEGEND)


def legend_title(category: str, view: str) -> str:
    cat, vw = _key(category, view)
    return f"{cat.capitalize()} - {vw.capitalize()} Statistics Abbreviations"


def format_value(value: float | None, value_format: ValueFormat, decimals: int = 3) -> str:
    if value is None or isinstance(value, bool) or not math.isfinite(value):
        value = 0.0
    if value_format is ValueFormat.PERCENT:
        return f"{value * 100:.{decimals}f}%"
    if value_format is ValueFormat.DECIMAL:
        return f"{value:.{decimals}f}"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def players_with_stats(
    roster: Iterable[RosterPlayer],
    season_stats: SeasonStats | Mapping[str, PlayerSeasonStats],
) -> list[PlayerStatLine]:
    """Join roster players to their season stats.

    Players with no offense, defense or pitching numbers this season are
    left out rather than shown as all-zero rows.
    """
    by_player = season_stats.players if isinstance(season_stats, SeasonStats) else season_stats
    lines: list[PlayerStatLine] = []
    for player in roster:
        stats = by_player.get(player.id)
        if stats is None or not stats.has_playing_stats():
            continue
        lines.append(PlayerStatLine(player=player, stats=stats))
    return lines


def derive_row(line: PlayerStatLine, columns: tuple[StatColumn, ...]) -> StatsRow:
    values = tuple(column.extract(line) for column in columns)
    cells = tuple(
        format_value(value, column.value_format, column.decimals) for value, column in zip(values, columns, strict=True)
    )
    return StatsRow(
        player_id=line.player.id,
        player_label=player_table_label(line.player),
        values=values,
        cells=cells,
    )


def _sort_rows(rows: list[StatsRow], columns: tuple[StatColumn, ...]) -> list[StatsRow]:
    for index, column in enumerate(columns):
        if column.sort is not None:
            return sorted(rows, key=lambda row: row.values[index], reverse=column.sort is SortDirection.DESC)
    return rows


def derive_stats_table(
    category: str,
    view: str,
    roster: Iterable[RosterPlayer],
    season_stats: SeasonStats | Mapping[str, PlayerSeasonStats],
) -> StatsTable:
    columns = column_set(category, view)
    lines = players_with_stats(roster, season_stats)
    rows = _sort_rows([derive_row(line, columns) for line in lines], columns)
    cat, vw = _key(category, view)
    logger.debug("Derived %s/%s table: %d players x %d columns", cat, vw, len(rows), len(columns))
    return StatsTable(
        category=cat,
        view=vw,
        title=legend_title(category, view),
        headers=tuple(column.label for column in columns),
        rows=tuple(rows),
        legend=stats_legend(category, view),
    )
