"""Service layer: dispatch, session management, persistence and words."""

from .dispatcher import ActionDispatcher
from .persistence import deserialize, serialize, validate_state
from .session_manager import GameEvent, SessionManager
from .word_service import DEFAULT_WORDS, WordService

__all__ = [
    "ActionDispatcher",
    "SessionManager",
    "GameEvent",
    "WordService",
    "DEFAULT_WORDS",
    "serialize",
    "deserialize",
    "validate_state",
]
