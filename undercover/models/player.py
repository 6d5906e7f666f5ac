"""Player roster model."""

from pydantic import BaseModel, ConfigDict, Field

from ..roles import Role, get_role_info

NO_CARD = -1


class Player(BaseModel):
    """A seat at the table for the life of a session."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(gt=0)
    name: str = ""
    role: Role
    word: str = ""  # Empty for Mr. White
    card_index: int = Field(default=NO_CARD, ge=NO_CARD)
    has_revealed: bool = False
    is_eliminated: bool = False

    @property
    def team(self) -> str:
        """Team this player wins with."""
        return get_role_info(self.role)["team"]

    @property
    def has_card(self) -> bool:
        """Check if this player holds a card in the pick grid."""
        return self.card_index != NO_CARD

    @property
    def is_active(self) -> bool:
        """Check if this player is still in the game."""
        return not self.is_eliminated

    def display_name(self) -> str:
        """Name to show on screen, falling back to the seat number."""
        return self.name or f"Player {self.id}"

    def __str__(self) -> str:
        status = "eliminated" if self.is_eliminated else "active"
        return f"{self.display_name()} ({self.role.value}, {status})"
