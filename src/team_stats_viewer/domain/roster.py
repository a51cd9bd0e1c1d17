from dataclasses import dataclass


@dataclass(frozen=True)
class Handedness:
    batting_side: str | None = None
    throwing_hand: str | None = None


@dataclass(frozen=True)
class RosterPlayer:
    id: str
    first_name: str = ""
    last_name: str = ""
    number: str | None = None
    status: str | None = None
    bats: Handedness | None = None


def player_display_name(player: RosterPlayer) -> str:
    name = f"{player.first_name} {player.last_name}".strip()
    return name or "Unknown Player"


def player_table_label(player: RosterPlayer) -> str:
    name = player_display_name(player)
    if player.number:
        return f"{name}, #{player.number}"
    return name


def player_initials(player: RosterPlayer) -> str:
    initials = (player.first_name[:1] + player.last_name[:1]).upper()
    return initials or "?"


def handedness_label(player: RosterPlayer) -> str | None:
    if player.bats is None or not player.bats.batting_side:
        return None
    return f"Bats: {player.bats.batting_side}, Throws: {player.bats.throwing_hand or '-'}"
