"""Win conditions."""

from .models import Player
from .roles import Role


def check_win_conditions(players: tuple[Player, ...] | list[Player]) -> Role | None:
    """Decide the winner from the active roster.

    Returns None while the game should continue.
    """
    active = [p for p in players if not p.is_eliminated]
    civilians = sum(1 for p in active if p.role == Role.CIVILIAN)
    undercover = sum(1 for p in active if p.role == Role.UNDERCOVER)
    mr_white = sum(1 for p in active if p.role == Role.MR_WHITE)

    if len(active) == 1 and mr_white == 1:
        return Role.MR_WHITE

    if undercover == 0:
        # Mr. White still has to be caught
        if mr_white > 0:
            return None
        return Role.CIVILIAN

    if undercover >= civilians and mr_white == 0:
        return Role.UNDERCOVER

    return None


def normalize_word(word: str) -> str:
    return word.strip().lower()


def is_correct_guess(guess: str, civilian_word: str) -> bool:
    """Check Mr. White's guess against the civilian word."""
    return normalize_word(guess) == normalize_word(civilian_word)


def resolve_mr_white_guess(
    players: tuple[Player, ...],
    guesser_id: int,
    guess: str,
    civilian_word: str,
) -> tuple[Role | None, tuple[Player, ...]]:
    """Resolve a Mr. White guess.

    A correct guess wins outright. Otherwise the guesser is out and the
    regular win conditions are evaluated on what is left.

    Returns:
    -------
        Tuple of (winner or None, roster after resolution)

    """
    if is_correct_guess(guess, civilian_word):
        return Role.MR_WHITE, players

    remaining = tuple(
        p.model_copy(update={"is_eliminated": True}) if p.id == guesser_id else p
        for p in players
    )
    return check_win_conditions(remaining), remaining
