"""Data models for players, session state and action results."""

from .actions import (
    Action,
    BeginVoting,
    CancelCard,
    ConfirmElimination,
    EliminatePlayer,
    ProcessMrWhiteGuess,
    RefreshWords,
    ResetGame,
    RevealWordNext,
    SelectCard,
    SelectPlayerForElimination,
    StartGame,
    StartNewRound,
    SubmitPlayerName,
    action_name,
)
from .player import Player
from .results import ActionError, ActionResult, ErrorKind, Prompt, SideEffects
from .state import GameWords, OrderingContext, Phase, SessionState, WordPair

__all__ = [
    "Player",
    "Phase",
    "GameWords",
    "WordPair",
    "OrderingContext",
    "SessionState",
    "ErrorKind",
    "Prompt",
    "SideEffects",
    "ActionError",
    "ActionResult",
    "Action",
    "StartGame",
    "SelectCard",
    "CancelCard",
    "SubmitPlayerName",
    "RevealWordNext",
    "RefreshWords",
    "BeginVoting",
    "SelectPlayerForElimination",
    "EliminatePlayer",
    "ConfirmElimination",
    "ProcessMrWhiteGuess",
    "StartNewRound",
    "ResetGame",
    "action_name",
]
