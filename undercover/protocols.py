"""Protocol definitions for type checking."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import WordPair


class WordProvider(Protocol):
    """Source of civilian/undercover word pairs."""

    def get_random_unplayed(self) -> "WordPair | None":
        """Pick a random pair that has not been played yet.

        Returns
        -------
            A word pair, or None when every pair has been played

        """
        ...

    def mark_played(self, pair: "WordPair") -> None:
        """Mark a pair as played so it is not drawn again."""
        ...

    def all_played(self) -> bool:
        """Check whether every known pair has been played."""
        ...

    def fetch_more(self, count: int) -> list["WordPair"]:
        """Fetch new pairs from a remote source.

        Args:
        ----
            count: Number of pairs to request

        Returns:
        -------
            The fetched pairs (not yet added to the provider)

        """
        ...
