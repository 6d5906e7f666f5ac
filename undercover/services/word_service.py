"""Word bank: the civilian/undercover pairs the game draws from."""

import json
import logging
import random
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from ..exceptions import WordFetchError
from ..models import GameWords, WordPair
from ..types import WordPairDict

if TYPE_CHECKING:
    from .word_generator import WordPairGenerator

logger = logging.getLogger(__name__)

DEFAULT_WORDS: list[WordPairDict] = [
    {"civilian": "Apel", "undercover": "Jeruk"},
    {"civilian": "Kucing", "undercover": "Anjing"},
    {"civilian": "Mobil", "undercover": "Motor"},
    {"civilian": "Kopi", "undercover": "Teh"},
    {"civilian": "Buku", "undercover": "Majalah"},
]

_word_list = TypeAdapter(list[WordPair])


class WordService:
    """Tracks word pairs and which of them have been played.

    Pairs live in memory, and are also written to a JSON file when a path is
    given so the played flags survive between sessions.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        generator: "WordPairGenerator | None" = None,
        rng: random.Random | None = None,
    ) -> None:
        self.path = Path(path) if path else None
        self.generator = generator
        self.rng = rng or random.Random()
        self._words: list[WordPair] = self._load()

    def _load(self) -> list[WordPair]:
        if self.path is None or not self.path.exists():
            words = _word_list.validate_python(DEFAULT_WORDS)
            self._words = words
            self._save()
            return words

        try:
            return _word_list.validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning("Could not read word bank %s, using defaults: %s", self.path, e)
            return _word_list.validate_python(DEFAULT_WORDS)

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = [w.model_dump() for w in self._words]
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def get_all_words(self) -> list[WordPair]:
        return [w.model_copy() for w in self._words]

    def get_unplayed_words(self) -> list[WordPair]:
        return [w.model_copy() for w in self._words if not w.played]

    def get_random_unplayed(self) -> WordPair | None:
        """Pick a random pair that has not been played yet."""
        unplayed = self.get_unplayed_words()
        if not unplayed:
            return None
        return self.rng.choice(unplayed)

    def mark_played(self, pair: WordPair | GameWords) -> None:
        """Mark every stored copy of a pair as played."""
        self._words = [
            w.model_copy(update={"played": True}) if w.same_words(pair) else w
            for w in self._words
        ]
        self._save()

    def reset_all(self) -> None:
        """Make every pair playable again."""
        self._words = [w.model_copy(update={"played": False}) for w in self._words]
        self._save()

    def all_played(self) -> bool:
        return all(w.played for w in self._words)

    def add_words(self, pairs: list[WordPair]) -> int:
        """Add new pairs, skipping ones already in the bank.

        Returns the number of pairs actually added.
        """
        added = 0
        for pair in pairs:
            if any(w.same_words(pair) for w in self._words):
                continue
            self._words.append(pair.model_copy(update={"played": False}))
            added += 1
        if added:
            self._save()
        return added

    def fetch_more(self, count: int) -> list[WordPair]:
        """Ask the word generator for new pairs (not added to the bank).

        Raises
        ------
            WordFetchError: If no generator is configured or the request fails

        """
        if self.generator is None:
            raise WordFetchError("No word generator configured")
        logger.info("Fetching %d new word pairs", count)
        return self.generator.generate(count, existing=self.get_all_words())

    def total_count(self) -> int:
        return len(self._words)

    def played_count(self) -> int:
        return sum(1 for w in self._words if w.played)
