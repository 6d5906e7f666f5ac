"""Type definitions for game configuration and data structures."""

from typing import Literal, NotRequired, TypedDict


class WordPairDict(TypedDict):
    """A word pair as stored in the word bank file."""

    civilian: str
    undercover: str
    played: NotRequired[bool]


class GameConfig(TypedDict):
    """Role counts chosen at setup."""

    total_players: int
    undercover: int
    mr_white: int


EventType = Literal["action_executed", "action_failed", "state_undone", "state_imported"]
"""Event types emitted by the session manager."""
