"""Formatting utilities for terminal output."""

from .roles import Role


def separator(width: int = 60) -> str:
    """Create a visual separator line."""
    return f"{'=' * width}"


def round_header(round_number: int) -> str:
    """Format a round header."""
    return f"{separator()}\n🗣️  Round {round_number}\n{separator()}"


def card_label(index: int) -> str:
    """Cards are shown 1-based to players."""
    return f"Card {index + 1}"


WINNER_BANNERS = {
    Role.CIVILIAN: "🎉 The Civilians have won!",
    Role.UNDERCOVER: "🕵️  The Undercover agents have won!",
    Role.MR_WHITE: "👻 Mr. White has won!",
}


def winner_banner(winner: Role | None) -> str:
    """Format the game over headline."""
    if winner is None:
        return "No winner yet"
    return WINNER_BANNERS[winner]
