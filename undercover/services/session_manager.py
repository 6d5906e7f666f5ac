"""Session manager: owns the authoritative state, history and subscribers."""

import logging
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..exceptions import ReentrantDispatchError, StateValidationError
from ..game import (
    RoleCounts,
    can_player_be_eliminated,
    get_active_players,
    get_game_statistics,
    get_ordered_players,
    get_player_by_card_index,
    get_remaining_counts,
    get_winner_players,
    is_card_available,
    reset_state,
)
from ..models import (
    Action,
    ActionResult,
    BeginVoting,
    CancelCard,
    ConfirmElimination,
    EliminatePlayer,
    Player,
    ProcessMrWhiteGuess,
    RefreshWords,
    ResetGame,
    RevealWordNext,
    SelectCard,
    SelectPlayerForElimination,
    SessionState,
    StartGame,
    StartNewRound,
    SubmitPlayerName,
    action_name,
)
from ..ordering import description_order, voting_order
from ..settings import DEFAULT_HISTORY_SIZE
from ..types import EventType
from .dispatcher import ActionDispatcher
from .persistence import deserialize, serialize, validate_state

logger = logging.getLogger(__name__)

StateSubscriber = Callable[[SessionState, SessionState], None]


@dataclass
class GameEvent:
    """Something that happened to the session."""

    type: EventType
    payload: dict[str, Any] | None = None
    timestamp: float = field(default_factory=time.time)

    def __repr__(self) -> str:
        return f"GameEvent({self.type}, {self.payload})"


EventSubscriber = Callable[[GameEvent], None]


class SessionManager:
    """The only mutator of session state.

    Commits successful dispatcher results, keeps a bounded undo history of
    state snapshots, notifies state subscribers and emits an event for every
    action, undo and import.
    """

    def __init__(
        self,
        dispatcher: ActionDispatcher | None = None,
        initial_state: SessionState | None = None,
        max_history: int = DEFAULT_HISTORY_SIZE,
    ) -> None:
        if max_history < 1:
            raise ValueError("max_history must be at least 1")

        self.dispatcher = dispatcher or ActionDispatcher()
        self._state = initial_state or reset_state()
        self._history: deque[SessionState] = deque([self._state], maxlen=max_history)
        self._subscribers: list[StateSubscriber] = []
        self._event_subscribers: list[EventSubscriber] = []
        self._busy = False

    @property
    def state(self) -> SessionState:
        return self._state

    def get_state(self) -> SessionState:
        """Get the current state (immutable, safe to keep)."""
        return self._state

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, action: Action) -> ActionResult:
        """Run an action through the dispatcher and commit the result.

        Raises
        ------
            ReentrantDispatchError: If called while another dispatch is still
                notifying subscribers

        """
        if self._busy:
            raise ReentrantDispatchError(
                f"Cannot dispatch {action_name(action)} while another action is in flight"
            )

        self._busy = True
        try:
            result = self.dispatcher.dispatch(self._state, action)
            name = action_name(action)
            reentry = None
            if result.success and result.new_state is not None:
                reentry = self._commit(result.new_state)
                self._emit(
                    GameEvent(
                        type="action_executed",
                        payload={
                            "action": name,
                            "args": vars(action).copy(),
                            "side_effects": (
                                result.side_effects.as_dict() if result.side_effects else None
                            ),
                        },
                    )
                )
            else:
                self._emit(
                    GameEvent(
                        type="action_failed",
                        payload={
                            "action": name,
                            "error": result.error.kind.value if result.error else None,
                            "message": result.error.message if result.error else None,
                        },
                    )
                )
            if reentry is not None:
                raise reentry
            return result
        finally:
            self._busy = False

    def _commit(self, new_state: SessionState) -> ReentrantDispatchError | None:
        previous = self._state
        self._state = new_state
        self._history.append(new_state)
        return self._notify(new_state, previous)

    # Convenience wrappers, one per action

    def start_game(self, total_players: int, undercover: int, mr_white: int = 0) -> ActionResult:
        return self.dispatch(StartGame(total_players, undercover, mr_white))

    def select_card(self, index: int, name: str | None = None) -> ActionResult:
        return self.dispatch(SelectCard(index, name))

    def cancel_card(self) -> ActionResult:
        return self.dispatch(CancelCard())

    def submit_player_name(self, name: str) -> ActionResult:
        return self.dispatch(SubmitPlayerName(name))

    def reveal_word_next(self) -> ActionResult:
        return self.dispatch(RevealWordNext())

    def refresh_words(self) -> ActionResult:
        return self.dispatch(RefreshWords())

    def begin_voting(self) -> ActionResult:
        return self.dispatch(BeginVoting())

    def select_player_for_elimination(self, player_id: int) -> ActionResult:
        return self.dispatch(SelectPlayerForElimination(player_id))

    def eliminate_player(self, player_id: int | None = None) -> ActionResult:
        """Eliminate the staged player, staging ``player_id`` first if given."""
        if player_id is not None:
            selected = self.select_player_for_elimination(player_id)
            if not selected.success:
                return selected
        return self.dispatch(EliminatePlayer())

    def confirm_elimination(self) -> ActionResult:
        return self.dispatch(ConfirmElimination())

    def process_mr_white_guess(self, guess: str) -> ActionResult:
        return self.dispatch(ProcessMrWhiteGuess(guess))

    def start_new_round(self) -> ActionResult:
        return self.dispatch(StartNewRound())

    def continue_with_same_players(self) -> ActionResult:
        """Play again with the same names: new words and roles."""
        return self.start_new_round()

    def reset_game(self) -> ActionResult:
        return self.dispatch(ResetGame())

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def get_history(self) -> list[SessionState]:
        return list(self._history)

    def can_undo(self) -> bool:
        return len(self._history) > 1

    def undo(self) -> bool:
        """Restore the previous committed state.

        Returns False when there is nothing to undo.
        """
        if self._busy:
            raise ReentrantDispatchError("Cannot undo while an action is in flight")
        if not self.can_undo():
            return False

        self._busy = True
        try:
            self._history.pop()
            previous = self._state
            self._state = self._history[-1]
            reentry = self._notify(self._state, previous)
            self._emit(GameEvent(type="state_undone"))
            if reentry is not None:
                raise reentry
            return True
        finally:
            self._busy = False

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, subscriber: StateSubscriber) -> Callable[[], None]:
        """Call ``subscriber(new_state, previous_state)`` on every change.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(subscriber)
        return lambda: self._remove(self._subscribers, subscriber)

    def subscribe_to_events(self, subscriber: EventSubscriber) -> Callable[[], None]:
        """Call ``subscriber(event)`` for every emitted event."""
        self._event_subscribers.append(subscriber)
        return lambda: self._remove(self._event_subscribers, subscriber)

    @staticmethod
    def _remove(subscribers: list, subscriber: Callable) -> None:
        if subscriber in subscribers:
            subscribers.remove(subscriber)

    def _notify(
        self, new_state: SessionState, previous: SessionState
    ) -> ReentrantDispatchError | None:
        """Call every state subscriber.

        A reentrant call is returned instead of raised so the remaining
        subscribers and the event still run; the caller raises it afterwards.
        """
        reentry = None
        for subscriber in list(self._subscribers):
            try:
                subscriber(new_state, previous)
            except ReentrantDispatchError as e:
                reentry = reentry or e
            except Exception:
                logger.exception("Error in state subscriber %r", subscriber)
        return reentry

    def _emit(self, event: GameEvent) -> None:
        reentry = None
        for subscriber in list(self._event_subscribers):
            try:
                subscriber(event)
            except ReentrantDispatchError as e:
                reentry = reentry or e
            except Exception:
                logger.exception("Error in event subscriber %r", subscriber)
        if reentry is not None:
            raise reentry

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def export_state(self) -> str:
        return serialize(self._state)

    def import_state(self, text: str) -> bool:
        """Replace the current state with a saved one.

        Invalid input is rejected whole and the current state is kept.
        """
        if self._busy:
            raise ReentrantDispatchError("Cannot import while an action is in flight")

        try:
            state = deserialize(text)
        except StateValidationError as e:
            logger.warning("Rejected saved session: %s", e)
            return False

        self._busy = True
        try:
            reentry = self._commit(state)
            self._emit(GameEvent(type="state_imported"))
            if reentry is not None:
                raise reentry
        finally:
            self._busy = False
        return True

    def validate_current_state(self) -> list[str]:
        return validate_state(self._state)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_current_player(self) -> Player | None:
        return self._state.current_player

    def get_active_players(self) -> list[Player]:
        return get_active_players(self._state.players)

    def get_ordered_players(self) -> list[Player]:
        return get_ordered_players(self._state.players)

    def get_description_order(self) -> list[Player]:
        return description_order(self._state.players, self._state.ordering)

    def get_voting_order(self) -> list[Player]:
        return voting_order(self._state.players, self._state.ordering)

    def get_winner_players(self) -> list[Player]:
        return get_winner_players(self._state)

    def get_remaining_counts(self) -> RoleCounts:
        return get_remaining_counts(self._state.players)

    def get_game_statistics(self) -> dict:
        return get_game_statistics(self._state)

    def is_card_available(self, card_index: int) -> bool:
        return is_card_available(self._state.players, card_index)

    def get_player_by_card_index(self, card_index: int) -> Player | None:
        return get_player_by_card_index(self._state.players, card_index)

    def can_player_be_eliminated(self, player_id: int) -> bool:
        return can_player_be_eliminated(self._state, player_id)

    def destroy(self) -> None:
        """Drop all subscribers and history."""
        self._subscribers.clear()
        self._event_subscribers.clear()
        self._history = deque([self._state], maxlen=self._history.maxlen)
