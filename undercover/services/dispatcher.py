"""Action dispatcher: validates player actions and produces the next state."""

import logging
import random

from ..game import (
    can_player_be_eliminated,
    is_card_available,
    new_game_state,
    redeal_roster,
    reset_state,
    validate_config,
)
from ..models import (
    Action,
    ActionResult,
    BeginVoting,
    CancelCard,
    ConfirmElimination,
    EliminatePlayer,
    ErrorKind,
    GameWords,
    Phase,
    ProcessMrWhiteGuess,
    Prompt,
    RefreshWords,
    ResetGame,
    RevealWordNext,
    SelectCard,
    SelectPlayerForElimination,
    SessionState,
    SideEffects,
    StartGame,
    StartNewRound,
    SubmitPlayerName,
    WordPair,
    action_name,
)
from ..models.player import NO_CARD
from ..ordering import ensure_ordering
from ..protocols import WordProvider
from ..roles import Role
from ..rules import check_win_conditions, resolve_mr_white_guess

logger = logging.getLogger(__name__)

# Pause before the next prompt so the next player can't glimpse a word
REVEAL_DELAY_MS = 200

ALLOWED_PHASES: dict[type, frozenset[Phase]] = {
    StartGame: frozenset({Phase.SETUP}),
    SelectCard: frozenset({Phase.CARD_SELECTION}),
    CancelCard: frozenset({Phase.CARD_SELECTION}),
    SubmitPlayerName: frozenset({Phase.CARD_SELECTION}),
    RevealWordNext: frozenset({Phase.CARD_SELECTION}),
    RefreshWords: frozenset({Phase.CARD_SELECTION}),
    BeginVoting: frozenset({Phase.DESCRIPTION}),
    SelectPlayerForElimination: frozenset({Phase.VOTING}),
    EliminatePlayer: frozenset({Phase.VOTING}),
    ConfirmElimination: frozenset({Phase.VOTING, Phase.GAME_OVER}),
    ProcessMrWhiteGuess: frozenset({Phase.MR_WHITE_GUESS}),
    StartNewRound: frozenset({Phase.GAME_OVER}),
    ResetGame: frozenset(Phase),
}


class ActionDispatcher:
    """Applies actions to session states.

    The dispatcher never mutates a state. Every call returns an
    ``ActionResult`` carrying either a complete new state or a typed error;
    expected failures never raise. The word provider is only touched once an
    action is certain to succeed.
    """

    def __init__(
        self,
        word_provider: WordProvider | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
        ----
            word_provider: Source of word pairs for new games and rounds
            rng: Random source for role shuffles and turn order

        """
        self.word_provider = word_provider
        self.rng = rng or random.Random()

    def dispatch(self, state: SessionState, action: Action) -> ActionResult:
        """Validate an action against the current phase and apply it."""
        allowed = ALLOWED_PHASES.get(type(action))
        if allowed is None:
            raise TypeError(f"Unknown action: {action!r}")

        if state.phase not in allowed:
            result = ActionResult.fail(
                ErrorKind.INVALID_TRANSITION,
                f"Cannot {action_name(action)} during {state.phase.value}",
            )
        else:
            result = self._apply(state, action)

        if not result.success:
            logger.debug("Rejected %s: %s", action_name(action), result.error)
        return result

    def _apply(self, state: SessionState, action: Action) -> ActionResult:
        if isinstance(action, StartGame):
            return self._start_game(action)
        elif isinstance(action, SelectCard):
            return self._select_card(state, action)
        elif isinstance(action, CancelCard):
            return self._cancel_card(state)
        elif isinstance(action, SubmitPlayerName):
            return self._submit_player_name(state, action)
        elif isinstance(action, RevealWordNext):
            return self._reveal_word_next(state)
        elif isinstance(action, RefreshWords):
            return self._refresh_words(state)
        elif isinstance(action, BeginVoting):
            return self._begin_voting(state)
        elif isinstance(action, SelectPlayerForElimination):
            return self._select_player_for_elimination(state, action)
        elif isinstance(action, EliminatePlayer):
            return self._eliminate_player(state)
        elif isinstance(action, ConfirmElimination):
            return self._confirm_elimination(state)
        elif isinstance(action, ProcessMrWhiteGuess):
            return self._process_mr_white_guess(state, action)
        elif isinstance(action, StartNewRound):
            return self._start_new_round(state)
        elif isinstance(action, ResetGame):
            return ActionResult.ok(reset_state())
        else:
            raise TypeError(f"Unknown action: {action!r}")

    # ------------------------------------------------------------------
    # Word pairs
    # ------------------------------------------------------------------

    def _draw_words(self) -> WordPair | None:
        if self.word_provider is None:
            return None
        return self.word_provider.get_random_unplayed()

    def _mark_played(self, pair: WordPair) -> None:
        if self.word_provider is not None:
            self.word_provider.mark_played(pair)

    @staticmethod
    def _no_words() -> ActionResult:
        return ActionResult.fail(ErrorKind.NO_WORDS_AVAILABLE, "No available word pairs")

    # ------------------------------------------------------------------
    # Setup and card selection
    # ------------------------------------------------------------------

    def _start_game(self, action: StartGame) -> ActionResult:
        validation = validate_config(action.total_players, action.undercover, action.mr_white)
        if not validation.is_valid:
            return ActionResult.fail(ErrorKind.INVALID_CONFIG, validation.reason)

        pair = self._draw_words()
        if pair is None:
            return self._no_words()

        new_state = new_game_state(
            action.total_players,
            action.undercover,
            action.mr_white,
            GameWords.from_pair(pair),
            self.rng,
        )
        self._mark_played(pair)
        return ActionResult.ok(new_state)

    def _select_card(self, state: SessionState, action: SelectCard) -> ActionResult:
        player = state.players[state.current_player_index]

        if not 0 <= action.index < len(state.players):
            return ActionResult.fail(ErrorKind.INVALID_CARD, f"There is no card {action.index}")

        if not is_card_available(state.players, action.index):
            return ActionResult.fail(ErrorKind.CARD_TAKEN, "Card is already taken")

        if state.selected_card is not None:
            return ActionResult.fail(
                ErrorKind.INVALID_TRANSITION,
                f"Card {state.selected_card} is already picked; put it back first",
            )

        updates: dict = {"card_index": action.index}
        if state.round == 1 and action.name and action.name.strip():
            updates["name"] = action.name.strip()
        updated = player.model_copy(update=updates)

        prompt = Prompt.NAME_ENTRY if state.round == 1 and not updated.name else Prompt.WORD_REVEAL
        new_state = state.model_copy(
            update={"players": state.with_player(updated), "selected_card": action.index}
        )
        return ActionResult.ok(new_state, SideEffects(open_prompt=prompt))

    def _cancel_card(self, state: SessionState) -> ActionResult:
        if state.selected_card is None:
            return ActionResult.fail(ErrorKind.NO_CARD_STAGED, "No card selected")

        player = state.players[state.current_player_index]
        updated = player.model_copy(update={"card_index": NO_CARD})
        new_state = state.model_copy(
            update={"players": state.with_player(updated), "selected_card": None}
        )
        prompt = Prompt.NAME_ENTRY if state.round == 1 and not player.name else Prompt.WORD_REVEAL
        return ActionResult.ok(new_state, SideEffects(close_prompt=prompt))

    def _submit_player_name(self, state: SessionState, action: SubmitPlayerName) -> ActionResult:
        name = action.name.strip()
        if not name:
            return ActionResult.fail(ErrorKind.EMPTY_NAME, "Player name cannot be empty")
        if state.selected_card is None:
            return ActionResult.fail(ErrorKind.EMPTY_NAME, "Pick a card before entering a name")

        player = state.players[state.current_player_index]
        updated = player.model_copy(update={"name": name, "card_index": state.selected_card})
        new_state = state.model_copy(update={"players": state.with_player(updated)})
        return ActionResult.ok(
            new_state,
            SideEffects(open_prompt=Prompt.WORD_REVEAL, close_prompt=Prompt.NAME_ENTRY),
        )

    def _reveal_word_next(self, state: SessionState) -> ActionResult:
        if state.selected_card is None:
            return ActionResult.fail(ErrorKind.NO_CARD_STAGED, "No card selected")

        player = state.players[state.current_player_index]
        if state.round == 1 and not player.name.strip():
            return ActionResult.fail(
                ErrorKind.EMPTY_NAME, "Enter a name before looking at the word"
            )

        updated = player.model_copy(
            update={"has_revealed": True, "card_index": state.selected_card}
        )
        players = state.with_player(updated)

        if state.current_player_index < len(state.players) - 1:
            new_state = state.model_copy(
                update={
                    "players": players,
                    "current_player_index": state.current_player_index + 1,
                    "selected_card": None,
                }
            )
            # Later rounds skip the name prompt, so announce whose turn it is
            next_prompt = Prompt.TURN if state.round > 1 else None
            return ActionResult.ok(
                new_state,
                SideEffects(
                    open_prompt=next_prompt,
                    close_prompt=Prompt.WORD_REVEAL,
                    delay_ms=REVEAL_DELAY_MS,
                ),
            )

        new_state = state.model_copy(
            update={
                "players": players,
                "phase": Phase.DESCRIPTION,
                "current_player_index": 0,
                "selected_card": None,
            }
        )
        return ActionResult.ok(
            ensure_ordering(new_state, self.rng),
            SideEffects(close_prompt=Prompt.WORD_REVEAL, delay_ms=REVEAL_DELAY_MS),
        )

    def _refresh_words(self, state: SessionState) -> ActionResult:
        if any(p.has_revealed for p in state.players):
            return ActionResult.fail(
                ErrorKind.INVALID_TRANSITION,
                "Words can only be changed before anyone has seen theirs",
            )

        pair = self._draw_words()
        if pair is None:
            return self._no_words()

        words = GameWords.from_pair(pair)
        players = tuple(p.model_copy(update={"word": words.word_for(p.role)}) for p in state.players)
        self._mark_played(pair)
        return ActionResult.ok(state.model_copy(update={"players": players, "game_words": words}))

    # ------------------------------------------------------------------
    # Description and voting
    # ------------------------------------------------------------------

    def _begin_voting(self, state: SessionState) -> ActionResult:
        new_state = state.model_copy(
            update={
                "phase": Phase.VOTING,
                "selected_player_to_eliminate": None,
                "eliminated_player": None,
            }
        )
        return ActionResult.ok(ensure_ordering(new_state, self.rng))

    def _select_player_for_elimination(
        self,
        state: SessionState,
        action: SelectPlayerForElimination,
    ) -> ActionResult:
        if state.eliminated_player is not None:
            return ActionResult.fail(
                ErrorKind.INVALID_TRANSITION, "Confirm the last elimination first"
            )
        if not can_player_be_eliminated(state, action.player_id):
            return ActionResult.fail(ErrorKind.CANNOT_ELIMINATE, "Player cannot be eliminated")

        return ActionResult.ok(
            state.model_copy(update={"selected_player_to_eliminate": action.player_id})
        )

    def _eliminate_player(self, state: SessionState) -> ActionResult:
        if state.selected_player_to_eliminate is None:
            return ActionResult.fail(ErrorKind.NO_SELECTION, "No player selected for elimination")

        target = state.get_player(state.selected_player_to_eliminate)
        if target is None or target.is_eliminated:
            return ActionResult.fail(ErrorKind.CANNOT_ELIMINATE, "Player cannot be eliminated")

        eliminated = target.model_copy(update={"is_eliminated": True})
        players = state.with_player(eliminated)
        updates: dict = {
            "players": players,
            "eliminated_player": eliminated,
            "selected_player_to_eliminate": None,
        }
        prompt = Prompt.ELIMINATION_REVEAL

        if eliminated.role == Role.MR_WHITE:
            # The verdict waits for the guess
            updates["guessing_player_id"] = eliminated.id
        else:
            winner = check_win_conditions(players)
            if winner is not None:
                updates["winner"] = winner
                updates["phase"] = Phase.GAME_OVER
            elif eliminated.role == Role.UNDERCOVER:
                guesser = next(
                    (p for p in players if p.role == Role.MR_WHITE and not p.is_eliminated),
                    None,
                )
                if guesser is not None:
                    updates["guessing_player_id"] = guesser.id
                    prompt = Prompt.MR_WHITE_GUESS

        return ActionResult.ok(state.model_copy(update=updates), SideEffects(open_prompt=prompt))

    def _confirm_elimination(self, state: SessionState) -> ActionResult:
        if state.eliminated_player is None:
            return ActionResult.fail(
                ErrorKind.INVALID_TRANSITION, "There is no elimination to confirm"
            )

        if state.phase == Phase.GAME_OVER:
            return ActionResult.ok(
                state,
                SideEffects(open_prompt=Prompt.GAME_OVER, close_prompt=Prompt.ELIMINATION_REVEAL),
            )

        if state.guessing_player_id is not None:
            new_state = state.model_copy(
                update={"phase": Phase.MR_WHITE_GUESS, "mr_white_guess": ""}
            )
            return ActionResult.ok(
                new_state,
                SideEffects(
                    open_prompt=Prompt.MR_WHITE_GUESS,
                    close_prompt=Prompt.ELIMINATION_REVEAL,
                ),
            )

        new_state = state.model_copy(
            update={
                "phase": Phase.DESCRIPTION,
                "round": state.round + 1,
                "eliminated_player": None,
            }
        )
        return ActionResult.ok(new_state, SideEffects(close_prompt=Prompt.ELIMINATION_REVEAL))

    def _process_mr_white_guess(
        self,
        state: SessionState,
        action: ProcessMrWhiteGuess,
    ) -> ActionResult:
        if not action.guess.strip():
            return ActionResult.fail(ErrorKind.EMPTY_GUESS, "Guess cannot be empty")
        if state.guessing_player_id is None:
            return ActionResult.fail(
                ErrorKind.INVALID_TRANSITION, "No Mr. White is waiting to guess"
            )

        winner, players = resolve_mr_white_guess(
            state.players,
            state.guessing_player_id,
            action.guess,
            state.game_words.civilian,
        )

        if winner is not None:
            new_state = state.model_copy(
                update={
                    "players": players,
                    "phase": Phase.GAME_OVER,
                    "winner": winner,
                    "mr_white_guess": action.guess.strip(),
                    "guessing_player_id": None,
                }
            )
            return ActionResult.ok(
                new_state,
                SideEffects(open_prompt=Prompt.GAME_OVER, close_prompt=Prompt.MR_WHITE_GUESS),
            )

        new_state = state.model_copy(
            update={
                "players": players,
                "phase": Phase.DESCRIPTION,
                "round": state.round + 1,
                "mr_white_guess": "",
                "guessing_player_id": None,
                "eliminated_player": None,
            }
        )
        return ActionResult.ok(new_state, SideEffects(close_prompt=Prompt.MR_WHITE_GUESS))

    # ------------------------------------------------------------------
    # Between games
    # ------------------------------------------------------------------

    def _start_new_round(self, state: SessionState) -> ActionResult:
        validation = validate_config(
            len(state.players), state.undercover_count, state.mr_white_count
        )
        if not validation.is_valid:
            return ActionResult.fail(ErrorKind.INVALID_CONFIG, validation.reason)

        pair = self._draw_words()
        if pair is None:
            return self._no_words()

        words = GameWords.from_pair(pair)
        new_state = SessionState(
            phase=Phase.CARD_SELECTION,
            round=state.round + 1,
            players=redeal_roster(state, words, self.rng),
            game_words=words,
            undercover_count=state.undercover_count,
            mr_white_count=state.mr_white_count,
        )
        self._mark_played(pair)
        return ActionResult.ok(
            new_state,
            SideEffects(open_prompt=Prompt.TURN, close_prompt=Prompt.GAME_OVER),
        )
