"""Session persistence: serialize, deserialize and validate states."""

import json
import time
from collections import Counter

from pydantic import ValidationError

from ..exceptions import StateValidationError
from ..game import validate_config
from ..models import Phase, SessionState
from ..models.player import NO_CARD
from ..roles import Role


def serialize(state: SessionState) -> str:
    """Serialize a state into a JSON envelope."""
    return json.dumps({"state": state.model_dump(mode="json"), "timestamp": time.time()})


def deserialize(text: str) -> SessionState:
    """Parse and validate a serialized state.

    Raises
    ------
        StateValidationError: If the text is malformed or the state breaks
            any session invariant. Nothing is partially recovered.

    """
    try:
        envelope = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise StateValidationError([f"Not valid JSON: {e}"]) from e

    if not isinstance(envelope, dict) or "state" not in envelope:
        raise StateValidationError(["Missing 'state' in saved session"])

    try:
        state = SessionState.model_validate(envelope["state"])
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        raise StateValidationError(errors) from e

    errors = validate_state(state)
    if errors:
        raise StateValidationError(errors)
    return state


def validate_state(state: SessionState) -> list[str]:
    """Check a state against the session invariants.

    Returns
    -------
        A list of problems, empty when the state is valid

    """
    errors: list[str] = []
    players = state.players
    count = len(players)

    if state.phase != Phase.SETUP and count == 0:
        errors.append(f"No players in phase {state.phase.value}")

    ids = [p.id for p in players]
    if len(set(ids)) != len(ids):
        errors.append("Player ids must be unique")
    if ids != sorted(ids):
        errors.append("Players must be ordered by id")

    cards = [p.card_index for p in players if p.card_index != NO_CARD]
    taken_twice = [card for card, n in Counter(cards).items() if n > 1]
    if taken_twice:
        errors.append(f"Cards held by more than one player: {sorted(taken_twice)}")
    if any(card >= count for card in cards):
        errors.append("Card index outside the pick grid")

    if count:
        roles = Counter(p.role for p in players)
        if roles[Role.UNDERCOVER] != state.undercover_count:
            errors.append("Undercover count does not match the roster")
        if roles[Role.MR_WHITE] != state.mr_white_count:
            errors.append("Mr. White count does not match the roster")
        validation = validate_config(count, roles[Role.UNDERCOVER], roles[Role.MR_WHITE])
        if not validation.is_valid:
            errors.append(validation.reason)

        for player in players:
            if player.word != state.game_words.word_for(player.role):
                errors.append(f"Player {player.id} holds the wrong word for their role")

    if state.winner is not None and state.phase != Phase.GAME_OVER:
        errors.append("A winner is set outside game_over")

    if state.phase == Phase.CARD_SELECTION and not 0 <= state.current_player_index < count:
        errors.append("Current player index out of range")

    if state.selected_card is not None and not 0 <= state.selected_card < count:
        errors.append("Selected card outside the pick grid")

    if state.selected_player_to_eliminate is not None:
        target = state.get_player(state.selected_player_to_eliminate)
        if target is None or target.is_eliminated:
            errors.append("Selected player cannot be eliminated")

    if state.phase == Phase.MR_WHITE_GUESS and state.guessing_player_id is None:
        errors.append("No Mr. White is waiting to guess")
    if state.guessing_player_id is not None:
        guesser = state.get_player(state.guessing_player_id)
        if guesser is None or guesser.role != Role.MR_WHITE:
            errors.append("Guessing player must be Mr. White")

    if state.ordering is not None and state.get_player(state.ordering.start_player_id) is None:
        errors.append("Turn order starts from an unknown player")

    return errors
