"""Player-facing actions accepted by the dispatcher."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StartGame:
    """Build a fresh roster from the setup screen."""

    total_players: int
    undercover: int
    mr_white: int = 0


@dataclass(frozen=True)
class SelectCard:
    """Pick a card from the grid for the active player."""

    index: int
    name: str | None = None


@dataclass(frozen=True)
class CancelCard:
    """Put back the card the active player picked."""


@dataclass(frozen=True)
class SubmitPlayerName:
    name: str


@dataclass(frozen=True)
class RevealWordNext:
    """The active player has seen their word; hand the device on."""


@dataclass(frozen=True)
class RefreshWords:
    """Swap the round's word pair before anyone has seen it."""


@dataclass(frozen=True)
class BeginVoting:
    pass


@dataclass(frozen=True)
class SelectPlayerForElimination:
    player_id: int


@dataclass(frozen=True)
class EliminatePlayer:
    pass


@dataclass(frozen=True)
class ConfirmElimination:
    pass


@dataclass(frozen=True)
class ProcessMrWhiteGuess:
    guess: str


@dataclass(frozen=True)
class StartNewRound:
    """Continue with the same players: new words, new roles, same names."""


@dataclass(frozen=True)
class ResetGame:
    pass


Action = (
    StartGame
    | SelectCard
    | CancelCard
    | SubmitPlayerName
    | RevealWordNext
    | RefreshWords
    | BeginVoting
    | SelectPlayerForElimination
    | EliminatePlayer
    | ConfirmElimination
    | ProcessMrWhiteGuess
    | StartNewRound
    | ResetGame
)


def action_name(action: Action) -> str:
    """Get the name used for an action in events and logs."""
    return type(action).__name__
