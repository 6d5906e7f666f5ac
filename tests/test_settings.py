"""Tests for settings and terminal formatting."""

import pytest
from undercover.formatting import card_label, round_header, separator, winner_banner
from undercover.roles import Role
from undercover.settings import DEFAULT_HISTORY_SIZE, DEFAULT_MODEL, Settings


@pytest.fixture
def clean_env(monkeypatch):
    """Environment without a .env file or any game variables."""
    monkeypatch.setattr("undercover.settings.load_dotenv", lambda: None)
    for name in (
        "ANTHROPIC_API_KEY",
        "UNDERCOVER_MODEL",
        "UNDERCOVER_WORDS_FILE",
        "UNDERCOVER_HISTORY_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Test Settings.from_env."""

    def test_defaults(self, clean_env):
        settings = Settings.from_env()
        assert settings.anthropic_api_key is None
        assert settings.model == DEFAULT_MODEL
        assert settings.words_file is None
        assert settings.history_size == DEFAULT_HISTORY_SIZE

    def test_from_environment(self, clean_env):
        clean_env.setenv("ANTHROPIC_API_KEY", "sk-test")
        clean_env.setenv("UNDERCOVER_MODEL", "other-model")
        clean_env.setenv("UNDERCOVER_WORDS_FILE", "/tmp/words.json")
        clean_env.setenv("UNDERCOVER_HISTORY_SIZE", "25")

        settings = Settings.from_env()

        assert settings.anthropic_api_key == "sk-test"
        assert settings.model == "other-model"
        assert settings.words_file == "/tmp/words.json"
        assert settings.history_size == 25

    @pytest.mark.parametrize("value", ["ten", "0", "-3"])
    def test_bad_history_size(self, clean_env, value):
        clean_env.setenv("UNDERCOVER_HISTORY_SIZE", value)
        with pytest.raises(ValueError, match="UNDERCOVER_HISTORY_SIZE"):
            Settings.from_env()


class TestFormatting:
    """Test formatting helpers."""

    def test_separator(self):
        assert separator(5) == "====="

    def test_round_header(self):
        assert "Round 3" in round_header(3)

    def test_card_label_is_one_based(self):
        assert card_label(0) == "Card 1"

    def test_winner_banner(self):
        assert "Mr. White" in winner_banner(Role.MR_WHITE)
        assert "Civilians" in winner_banner(Role.CIVILIAN)
        assert winner_banner(None) == "No winner yet"
