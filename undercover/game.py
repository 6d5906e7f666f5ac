"""Roster creation and read-only game queries."""

import random
from dataclasses import dataclass

from .exceptions import InvalidConfigError
from .models import GameWords, Phase, Player, SessionState
from .models.player import NO_CARD
from .roles import Role

MIN_PLAYERS = 3
MIN_CIVILIANS = 2


@dataclass(frozen=True)
class ConfigValidation:
    """Result of checking a role configuration."""

    is_valid: bool
    reason: str | None = None


@dataclass(frozen=True)
class RoleCounts:
    """How many players of each role are still in the game."""

    civilians: int = 0
    undercover: int = 0
    mr_white: int = 0

    @property
    def total(self) -> int:
        return self.civilians + self.undercover + self.mr_white


def civilians_count(total_players: int, undercover: int, mr_white: int) -> int:
    """Number of civilians left once the special roles are dealt."""
    return total_players - undercover - mr_white


def validate_config(total_players: int, undercover: int, mr_white: int) -> ConfigValidation:
    """Check role counts against the distribution rules.

    This is the single gate for role distribution; once a configuration
    passes, roster generation cannot fail.
    """
    if undercover < 0 or mr_white < 0:
        return ConfigValidation(False, "Role counts cannot be negative")

    if total_players < MIN_PLAYERS:
        return ConfigValidation(False, f"At least {MIN_PLAYERS} players are required")

    civilians = civilians_count(total_players, undercover, mr_white)
    if civilians < MIN_CIVILIANS:
        return ConfigValidation(False, f"At least {MIN_CIVILIANS} civilians are required")

    if undercover + mr_white == 0:
        return ConfigValidation(False, "At least one undercover agent or Mr. White is required")

    if civilians <= undercover + mr_white:
        return ConfigValidation(
            False,
            "Civilians must outnumber undercover agents and Mr. White combined",
        )

    return ConfigValidation(True)


def generate_roster(
    total_players: int,
    undercover: int,
    mr_white: int,
    words: GameWords,
    rng: random.Random | None = None,
) -> tuple[Player, ...]:
    """Deal roles and words to players 1..N.

    Args:
    ----
        total_players: Number of seats at the table
        undercover: Number of Undercover players
        mr_white: Number of Mr. White players
        words: The pair bound to this round
        rng: Random source for the shuffle (module random by default)

    Returns:
    -------
        Players ordered by id, each holding the word for their role

    Raises:
    ------
        InvalidConfigError: If the role counts break the distribution rules

    """
    validation = validate_config(total_players, undercover, mr_white)
    if not validation.is_valid:
        raise InvalidConfigError(validation.reason)

    rng = rng or random.Random()
    roles = (
        [Role.UNDERCOVER] * undercover
        + [Role.MR_WHITE] * mr_white
        + [Role.CIVILIAN] * civilians_count(total_players, undercover, mr_white)
    )
    rng.shuffle(roles)

    return tuple(
        Player(id=i + 1, role=role, word=words.word_for(role))
        for i, role in enumerate(roles)
    )


def reset_state() -> SessionState:
    """The canonical empty setup state."""
    return SessionState()


def new_game_state(
    total_players: int,
    undercover: int,
    mr_white: int,
    words: GameWords,
    rng: random.Random | None = None,
) -> SessionState:
    """State for the first card pick of a brand new game."""
    players = generate_roster(total_players, undercover, mr_white, words, rng)
    return SessionState(
        phase=Phase.CARD_SELECTION,
        round=1,
        players=players,
        game_words=words,
        undercover_count=undercover,
        mr_white_count=mr_white,
    )


def redeal_roster(
    state: SessionState,
    words: GameWords,
    rng: random.Random | None = None,
) -> tuple[Player, ...]:
    """Deal new roles and words to the same seats, keeping ids and names."""
    fresh = generate_roster(
        len(state.players),
        state.undercover_count,
        state.mr_white_count,
        words,
        rng,
    )
    names = {p.id: p.name for p in state.players}
    return tuple(p.model_copy(update={"name": names.get(p.id, "")}) for p in fresh)


def get_active_players(players: tuple[Player, ...] | list[Player]) -> list[Player]:
    """Get all players who have not been eliminated."""
    return [p for p in players if not p.is_eliminated]


def get_remaining_counts(players: tuple[Player, ...] | list[Player]) -> RoleCounts:
    """Count active players by role."""
    active = get_active_players(players)
    return RoleCounts(
        civilians=sum(1 for p in active if p.role == Role.CIVILIAN),
        undercover=sum(1 for p in active if p.role == Role.UNDERCOVER),
        mr_white=sum(1 for p in active if p.role == Role.MR_WHITE),
    )


def get_winner_players(state: SessionState) -> list[Player]:
    """Get every player on the winning side, eliminated or not."""
    if state.winner is None:
        return []
    return [p for p in state.players if p.role == state.winner]


def is_card_available(players: tuple[Player, ...] | list[Player], card_index: int) -> bool:
    """Check if no player currently holds a card."""
    return not any(p.card_index == card_index for p in players)


def get_player_by_card_index(
    players: tuple[Player, ...] | list[Player],
    card_index: int,
) -> Player | None:
    """Find the player holding a card."""
    return next((p for p in players if p.card_index == card_index), None)


def get_ordered_players(players: tuple[Player, ...] | list[Player]) -> list[Player]:
    """Order players by card position, players without a card last (by id)."""
    return sorted(
        players,
        key=lambda p: (p.card_index == NO_CARD, p.card_index, p.id),
    )


def can_player_be_eliminated(state: SessionState, player_id: int) -> bool:
    """Check if a player exists and is still in the game."""
    player = state.get_player(player_id)
    return player is not None and not player.is_eliminated


def get_game_statistics(state: SessionState) -> dict:
    """Summarise the session for status displays."""
    active = get_active_players(state.players)
    current = state.current_player
    return {
        "total_players": len(state.players),
        "active_players": len(active),
        "eliminated_players": len(state.players) - len(active),
        "remaining_counts": get_remaining_counts(state.players),
        "phase": state.phase.value,
        "round": state.round,
        "current_player": current.display_name() if current else "Unknown",
    }
