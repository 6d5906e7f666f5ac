"""Session state models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..roles import Role
from .player import Player


class Phase(str, Enum):
    """Stages of the session state machine."""

    SETUP = "setup"
    CARD_SELECTION = "card_selection"
    DESCRIPTION = "description"
    VOTING = "voting"
    MR_WHITE_GUESS = "mr_white_guess"
    GAME_OVER = "game_over"


class WordPair(BaseModel):
    """A civilian/undercover word pair known to the word bank."""

    civilian: str = Field(min_length=1)
    undercover: str = Field(min_length=1)
    played: bool = False

    def same_words(self, other: "WordPair | GameWords") -> bool:
        """Check if both pairs carry the same words, ignoring the played flag."""
        return self.civilian == other.civilian and self.undercover == other.undercover


class GameWords(BaseModel):
    """The word pair bound to the current round."""

    model_config = ConfigDict(frozen=True)

    civilian: str = ""
    undercover: str = ""

    @classmethod
    def from_pair(cls, pair: WordPair) -> "GameWords":
        return cls(civilian=pair.civilian, undercover=pair.undercover)

    def word_for(self, role: Role) -> str:
        """Get the secret word handed to a role."""
        if role == Role.CIVILIAN:
            return self.civilian
        if role == Role.UNDERCOVER:
            return self.undercover
        return ""


class OrderingContext(BaseModel):
    """The per-round random decision both turn orders derive from."""

    model_config = ConfigDict(frozen=True)

    start_player_id: int
    is_forward: bool = True


class SessionState(BaseModel):
    """Complete, immutable state of a game session."""

    model_config = ConfigDict(frozen=True)

    phase: Phase = Phase.SETUP
    round: int = Field(default=1, ge=1)
    players: tuple[Player, ...] = ()
    current_player_index: int = Field(default=0, ge=0)
    selected_card: int | None = None
    game_words: GameWords = Field(default_factory=GameWords)
    undercover_count: int = Field(default=0, ge=0)
    mr_white_count: int = Field(default=0, ge=0)
    selected_player_to_eliminate: int | None = None
    eliminated_player: Player | None = None
    winner: Role | None = None
    mr_white_guess: str = ""
    guessing_player_id: int | None = None  # Mr. White owed a guess
    ordering: OrderingContext | None = None

    @property
    def current_player(self) -> Player | None:
        """The player whose turn it is during card selection."""
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    def get_player(self, player_id: int) -> Player | None:
        """Find a player by id."""
        return next((p for p in self.players if p.id == player_id), None)

    def active_players(self) -> list[Player]:
        """Get all players who are still in the game."""
        return [p for p in self.players if not p.is_eliminated]

    def with_player(self, player: Player) -> tuple[Player, ...]:
        """Return the roster with one player replaced (matched by id)."""
        return tuple(player if p.id == player.id else p for p in self.players)
