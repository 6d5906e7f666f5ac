"""Speaking and voting order for a round.

Both orders derive from one random decision per round (a start player and a
direction) which lives in the session state as an ``OrderingContext``.
"""

import random

from .models import OrderingContext, Player, SessionState
from .roles import Role


def choose_ordering(
    players: tuple[Player, ...] | list[Player],
    rng: random.Random | None = None,
) -> OrderingContext | None:
    """Pick the start player and direction for a round.

    The start player is drawn from players who are not Mr. White, or from
    everyone when the table is all Mr. White.
    """
    if not players:
        return None

    rng = rng or random.Random()
    candidates = [p for p in players if p.role != Role.MR_WHITE] or list(players)
    start = rng.choice(candidates)
    return OrderingContext(start_player_id=start.id, is_forward=rng.random() < 0.5)


def description_order(
    players: tuple[Player, ...] | list[Player],
    ordering: OrderingContext | None,
) -> list[Player]:
    """Order in which players describe their word.

    Args:
    ----
        players: The full roster, eliminated players included
        ordering: The round's start player and direction

    Returns:
    -------
        A permutation of the roster. Mr. White never speaks first while
        anyone else is at the table.

    """
    if not players:
        return []

    by_id = sorted(players, key=lambda p: p.id)
    if ordering is None:
        return by_id

    start = next((i for i, p in enumerate(by_id) if p.id == ordering.start_player_id), None)
    if start is None:
        return by_id

    step = 1 if ordering.is_forward else -1
    count = len(by_id)
    result = [by_id[(start + step * i) % count] for i in range(count)]

    if result[0].role == Role.MR_WHITE:
        swap = next((i for i, p in enumerate(result) if p.role != Role.MR_WHITE), None)
        if swap is not None:
            result[0], result[swap] = result[swap], result[0]

    return result


def voting_order(
    players: tuple[Player, ...] | list[Player],
    ordering: OrderingContext | None,
) -> list[Player]:
    """Description order with eliminated players moved to the end."""
    order = description_order(players, ordering)
    active = [p for p in order if not p.is_eliminated]
    eliminated = [p for p in order if p.is_eliminated]
    return active + eliminated


def ensure_ordering(state: SessionState, rng: random.Random | None = None) -> SessionState:
    """Return the state with a round ordering, choosing one if none is set yet."""
    if state.ordering is not None:
        return state
    return state.model_copy(update={"ordering": choose_ordering(state.players, rng)})
