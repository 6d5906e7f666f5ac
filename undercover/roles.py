"""Game roles and their descriptions."""

from enum import Enum
from typing import TypedDict


class Role(str, Enum):
    """Available roles in the game."""

    CIVILIAN = "civilian"
    UNDERCOVER = "undercover"
    MR_WHITE = "mr_white"

    def display_name(self) -> str:
        """Get the display name for this role."""
        return get_role_info(self)["name"]


class RoleInfo(TypedDict):
    """Information about a role."""

    name: str
    team: str
    description: str
    has_word: bool


ROLE_DESCRIPTIONS: dict[Role, RoleInfo] = {
    Role.CIVILIAN: {
        "name": "Civilian",
        "team": "civilians",
        "description": "You share the secret word with most of the table. Describe it without saying it, and vote out anyone whose description does not fit.",
        "has_word": True,
    },
    Role.UNDERCOVER: {
        "name": "Undercover",
        "team": "undercover",
        "description": "Your word is close to everyone else's, but not the same. You don't know you're Undercover until the descriptions stop matching. Survive until you equal the Civilians.",
        "has_word": True,
    },
    Role.MR_WHITE: {
        "name": "Mr. White",
        "team": "mr_white",
        "description": "You have no word at all. Bluff through the descriptions. If you are caught, guess the Civilians' word to steal the win.",
        "has_word": False,
    },
}


def get_role_info(role: Role) -> RoleInfo:
    """Get information about a role."""
    return ROLE_DESCRIPTIONS[role]
