"""LLM-backed generation of new word pairs."""

import logging
import os

from anthropic import Anthropic, APIError
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from ..exceptions import WordFetchError
from ..models import WordPair
from ..settings import DEFAULT_MODEL

logger = logging.getLogger(__name__)

TOOL_NAME = "submit_word_pairs"


class GeneratedPair(BaseModel):
    """Schema for one generated pair."""
    civilian: str = Field(min_length=1, description="The word most players receive")
    undercover: str = Field(min_length=1, description="A related but different word")


class GeneratedPairs(BaseModel):
    """Schema for the generator's tool output."""
    pairs: list[GeneratedPair]


class WordPairGenerator:
    """Asks an Anthropic model for fresh civilian/undercover pairs."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        language: str = "Indonesian",
        client: Anthropic | None = None,
    ) -> None:
        """Initialize the generator.

        Raises
        ------
            ValueError: If no client is given and no API key can be found

        """
        if client is None:
            load_dotenv()
            api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
            if not api_key:
                raise ValueError("ANTHROPIC_API_KEY not found in environment variables")
            client = Anthropic(api_key=api_key)

        self.client = client
        self.model = model
        self.language = language

    def generate(self, count: int, existing: list[WordPair] | None = None) -> list[WordPair]:
        """Generate up to ``count`` pairs not already in ``existing``.

        Raises
        ------
            WordFetchError: If the request fails or the reply is malformed

        """
        if count < 1:
            raise ValueError("count must be at least 1")

        existing = existing or []
        known = "\n".join(f"- {w.civilian} / {w.undercover}" for w in existing) or "(none)"

        tool_schema = {
            "name": TOOL_NAME,
            "description": "Submit new word pairs for the Undercover party game",
            "input_schema": {
                "type": "object",
                "properties": {
                    "pairs": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "civilian": {
                                    "type": "string",
                                    "description": "The word most players receive",
                                },
                                "undercover": {
                                    "type": "string",
                                    "description": "A related but clearly different word",
                                },
                            },
                            "required": ["civilian", "undercover"],
                        },
                    }
                },
                "required": ["pairs"],
            },
        }

        user_message = f"""Create {count} new word pairs in {self.language}.

Each pair is two everyday nouns that are similar enough to describe in the same way
for a while, but different enough that careful descriptions give the difference away.

Do not repeat any of these existing pairs:
{known}"""

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=1024,
                temperature=0.9,
                system="You design word pairs for a social deduction party game.",
                tools=[tool_schema],
                tool_choice={"type": "tool", "name": TOOL_NAME},
                messages=[{"role": "user", "content": user_message}],
            )
        except APIError as e:
            raise WordFetchError(f"Word generator request failed: {e}") from e

        batch = None
        for block in response.content:
            if block.type == "tool_use" and block.name == TOOL_NAME:
                try:
                    batch = GeneratedPairs.model_validate(block.input)
                except ValidationError as e:
                    raise WordFetchError("Invalid word generator response") from e
                break

        if batch is None:
            raise WordFetchError("Word generator did not return any pairs")

        seen = {(w.civilian.lower(), w.undercover.lower()) for w in existing}
        pairs: list[WordPair] = []
        for generated in batch.pairs:
            civilian = generated.civilian.strip()
            undercover = generated.undercover.strip()
            key = (civilian.lower(), undercover.lower())
            if not civilian or not undercover or civilian.lower() == undercover.lower():
                continue
            if key in seen:
                continue
            seen.add(key)
            pairs.append(WordPair(civilian=civilian, undercover=undercover))

        if len(pairs) < len(batch.pairs):
            logger.info("Dropped %d duplicate or unusable pairs", len(batch.pairs) - len(pairs))
        return pairs[:count]
