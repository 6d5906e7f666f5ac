"""Exceptions raised outside the typed action results."""


class UndercoverError(Exception):
    """Base class for all game engine errors."""


class InvalidConfigError(UndercoverError, ValueError):
    """Role counts violate the distribution rules."""


class StateValidationError(UndercoverError, ValueError):
    """A persisted session state is malformed or breaks an invariant."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid session state: " + "; ".join(errors))


class WordFetchError(UndercoverError):
    """Fetching new word pairs from the remote generator failed."""


class ReentrantDispatchError(UndercoverError, RuntimeError):
    """An action was dispatched while another dispatch was still running."""
