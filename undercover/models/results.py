"""Action result models."""

from dataclasses import dataclass
from enum import Enum

from .state import SessionState


class ErrorKind(str, Enum):
    """Expected, recoverable failure kinds."""

    INVALID_CONFIG = "InvalidConfig"
    NO_WORDS_AVAILABLE = "NoWordsAvailable"
    INVALID_TRANSITION = "InvalidTransition"
    NO_CARD_STAGED = "NoCardStaged"
    NO_SELECTION = "NoSelection"
    CARD_TAKEN = "CardTaken"
    INVALID_CARD = "InvalidCard"
    CANNOT_ELIMINATE = "CannotEliminate"
    EMPTY_NAME = "EmptyName"
    EMPTY_GUESS = "EmptyGuess"


class Prompt(str, Enum):
    """Prompts the presentation layer may open or close."""

    NAME_ENTRY = "name_entry"
    WORD_REVEAL = "word_reveal"
    TURN = "turn"
    ELIMINATION_REVEAL = "elimination_reveal"
    MR_WHITE_GUESS = "mr_white_guess"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class SideEffects:
    """Declarative hint for the presentation layer."""

    open_prompt: Prompt | None = None
    close_prompt: Prompt | None = None
    delay_ms: int = 0  # Pause before opening the next prompt

    def as_dict(self) -> dict:
        return {
            "open_prompt": self.open_prompt.value if self.open_prompt else None,
            "close_prompt": self.close_prompt.value if self.close_prompt else None,
            "delay_ms": self.delay_ms,
        }


@dataclass(frozen=True)
class ActionError:
    """Why an action was rejected."""

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class ActionResult:
    """Outcome of dispatching one action."""

    success: bool
    new_state: SessionState | None = None
    error: ActionError | None = None
    side_effects: SideEffects | None = None

    @classmethod
    def ok(cls, new_state: SessionState, side_effects: SideEffects | None = None) -> "ActionResult":
        return cls(success=True, new_state=new_state, side_effects=side_effects)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "ActionResult":
        return cls(success=False, error=ActionError(kind, message))

    @property
    def error_kind(self) -> ErrorKind | None:
        return self.error.kind if self.error else None
