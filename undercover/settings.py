"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_HISTORY_SIZE = 10


@dataclass
class Settings:
    """Settings for the CLI and the word generator."""

    anthropic_api_key: str | None = None
    model: str = DEFAULT_MODEL
    words_file: str | None = None
    history_size: int = DEFAULT_HISTORY_SIZE

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from the environment (and a .env file, if present).

        Raises
        ------
            ValueError: If UNDERCOVER_HISTORY_SIZE is not a positive integer

        """
        load_dotenv()

        history_size = DEFAULT_HISTORY_SIZE
        raw_history = os.getenv("UNDERCOVER_HISTORY_SIZE")
        if raw_history:
            try:
                history_size = int(raw_history)
            except ValueError:
                raise ValueError(
                    f"UNDERCOVER_HISTORY_SIZE must be an integer, got {raw_history!r}"
                ) from None
            if history_size < 1:
                raise ValueError("UNDERCOVER_HISTORY_SIZE must be at least 1")

        return cls(
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            model=os.getenv("UNDERCOVER_MODEL") or DEFAULT_MODEL,
            words_file=os.getenv("UNDERCOVER_WORDS_FILE") or None,
            history_size=history_size,
        )
