"""Tests for LLM word pair generation."""

from types import SimpleNamespace

import httpx
import pytest
from anthropic import APIConnectionError
from undercover.exceptions import WordFetchError
from undercover.models import WordPair
from undercover.services.word_generator import TOOL_NAME, WordPairGenerator


class FakeMessages:
    """Stands in for ``client.messages``."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return self.response


def tool_response(pairs, name=TOOL_NAME):
    block = SimpleNamespace(type="tool_use", name=name, input={"pairs": pairs})
    return SimpleNamespace(content=[SimpleNamespace(type="text", text="Here you go"), block])


def make_generator(response=None, error=None):
    messages = FakeMessages(response, error)
    client = SimpleNamespace(messages=messages)
    return WordPairGenerator(client=client, model="test-model"), messages


class TestWordPairGenerator:
    """Test WordPairGenerator."""

    def test_requires_api_key(self, monkeypatch):
        monkeypatch.setattr("undercover.services.word_generator.load_dotenv", lambda: None)
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
            WordPairGenerator()

    def test_generate(self):
        generator, messages = make_generator(
            tool_response(
                [
                    {"civilian": "Gitar", "undercover": "Biola"},
                    {"civilian": "Pantai", "undercover": "Danau"},
                ]
            )
        )

        pairs = generator.generate(2)

        assert pairs == [
            WordPair(civilian="Gitar", undercover="Biola"),
            WordPair(civilian="Pantai", undercover="Danau"),
        ]
        call = messages.calls[0]
        assert call["model"] == "test-model"
        assert call["tool_choice"] == {"type": "tool", "name": TOOL_NAME}
        assert "2 new word pairs in Indonesian" in call["messages"][0]["content"]

    def test_drops_known_and_unusable_pairs(self):
        generator, messages = make_generator(
            tool_response(
                [
                    {"civilian": "kopi", "undercover": "TEH"},
                    {"civilian": "Hujan", "undercover": "hujan"},
                    {"civilian": " Gitar ", "undercover": "Biola"},
                    {"civilian": "Gitar", "undercover": "Biola"},
                ]
            )
        )

        pairs = generator.generate(5, existing=[WordPair(civilian="Kopi", undercover="Teh")])

        assert pairs == [WordPair(civilian="Gitar", undercover="Biola")]
        assert "Kopi / Teh" in messages.calls[0]["messages"][0]["content"]

    def test_trims_to_count(self):
        generator, _ = make_generator(
            tool_response(
                [
                    {"civilian": "Gitar", "undercover": "Biola"},
                    {"civilian": "Pantai", "undercover": "Danau"},
                ]
            )
        )
        assert len(generator.generate(1)) == 1

    def test_invalid_count(self):
        generator, _ = make_generator()
        with pytest.raises(ValueError):
            generator.generate(0)

    def test_missing_tool_block(self):
        response = SimpleNamespace(content=[SimpleNamespace(type="text", text="no")])
        generator, _ = make_generator(response)
        with pytest.raises(WordFetchError, match="did not return"):
            generator.generate(1)

    def test_malformed_tool_input(self):
        generator, _ = make_generator(tool_response([{"civilian": "Gitar"}]))
        with pytest.raises(WordFetchError, match="Invalid"):
            generator.generate(1)

    def test_api_error(self):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        generator, _ = make_generator(error=APIConnectionError(request=request))
        with pytest.raises(WordFetchError, match="request failed"):
            generator.generate(1)
