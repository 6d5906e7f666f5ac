"""Tests for role distribution and game queries."""

import random
from collections import Counter

import pytest
from undercover.exceptions import InvalidConfigError
from undercover.game import (
    civilians_count,
    generate_roster,
    get_game_statistics,
    get_ordered_players,
    get_player_by_card_index,
    get_remaining_counts,
    get_winner_players,
    is_card_available,
    new_game_state,
    redeal_roster,
    validate_config,
)
from undercover.models import GameWords, Phase
from undercover.roles import Role

from helpers import WORDS, build_players, build_state


class TestValidateConfig:
    """Test role configuration rules."""

    @pytest.mark.parametrize(
        "total,undercover,mr_white",
        [(3, 1, 0), (3, 0, 1), (5, 1, 0), (5, 1, 1), (7, 2, 1), (20, 5, 4)],
    )
    def test_valid_configs(self, total, undercover, mr_white):
        assert validate_config(total, undercover, mr_white).is_valid

    def test_too_few_players(self):
        result = validate_config(2, 1, 0)
        assert not result.is_valid
        assert result.reason == "At least 3 players are required"

    def test_needs_two_civilians(self):
        result = validate_config(4, 2, 1)
        assert not result.is_valid
        assert result.reason == "At least 2 civilians are required"

    def test_needs_a_special_role(self):
        result = validate_config(5, 0, 0)
        assert not result.is_valid
        assert "At least one" in result.reason

    def test_civilians_must_outnumber(self):
        result = validate_config(4, 2, 0)
        assert not result.is_valid
        assert result.reason == "Civilians must outnumber undercover agents and Mr. White combined"

    def test_negative_counts(self):
        assert not validate_config(5, -1, 2).is_valid

    def test_civilians_count(self):
        assert civilians_count(7, 2, 1) == 4


class TestGenerateRoster:
    """Test roster generation."""

    def test_five_players_one_undercover(self):
        players = generate_roster(5, 1, 0, WORDS, random.Random(1))

        assert [p.id for p in players] == [1, 2, 3, 4, 5]
        roles = Counter(p.role for p in players)
        assert roles[Role.CIVILIAN] == 4
        assert roles[Role.UNDERCOVER] == 1
        for player in players:
            assert player.word == WORDS.word_for(player.role)
            assert player.name == ""
            assert not player.has_card

    def test_mr_white_gets_no_word(self):
        players = generate_roster(5, 1, 1, WORDS, random.Random(3))
        mr_white = [p for p in players if p.role == Role.MR_WHITE]
        assert len(mr_white) == 1
        assert mr_white[0].word == ""

    def test_invalid_config_raises(self):
        with pytest.raises(InvalidConfigError, match="At least 3 players"):
            generate_roster(2, 1, 0, WORDS)

    def test_same_seed_same_roster(self):
        first = generate_roster(8, 2, 1, WORDS, random.Random(7))
        second = generate_roster(8, 2, 1, WORDS, random.Random(7))
        assert first == second

    def test_roles_are_shuffled(self):
        """Over many deals the undercover does not always sit in the same seat."""
        rng = random.Random(0)
        seats = {
            next(p.id for p in generate_roster(5, 1, 0, WORDS, rng) if p.role == Role.UNDERCOVER)
            for _ in range(50)
        }
        assert len(seats) > 1


class TestGameStates:
    """Test new game and redeal states."""

    def test_new_game_state(self, rng):
        state = new_game_state(5, 1, 1, WORDS, rng)
        assert state.phase == Phase.CARD_SELECTION
        assert state.round == 1
        assert state.current_player_index == 0
        assert state.undercover_count == 1
        assert state.mr_white_count == 1
        assert state.game_words == WORDS

    def test_redeal_keeps_names(self, rng):
        state = build_state([Role.CIVILIAN, Role.CIVILIAN, Role.UNDERCOVER, Role.CIVILIAN])
        words = GameWords(civilian="Kopi", undercover="Teh")

        players = redeal_roster(state, words, rng)

        assert [p.name for p in players] == ["P1", "P2", "P3", "P4"]
        assert Counter(p.role for p in players)[Role.UNDERCOVER] == 1
        assert {p.word for p in players} == {"Kopi", "Teh"}
        assert all(not p.is_eliminated and not p.has_revealed for p in players)


class TestQueries:
    """Test read-only queries."""

    def test_remaining_counts(self):
        players = build_players([Role.CIVILIAN, Role.CIVILIAN, Role.UNDERCOVER, Role.MR_WHITE])
        players = (players[0].model_copy(update={"is_eliminated": True}),) + players[1:]

        counts = get_remaining_counts(players)
        assert counts.civilians == 1
        assert counts.undercover == 1
        assert counts.mr_white == 1
        assert counts.total == 3

    def test_cards(self):
        players = build_players([Role.CIVILIAN, Role.CIVILIAN, Role.UNDERCOVER])
        players = (players[0], players[1].model_copy(update={"card_index": 0}), players[2])

        assert not is_card_available(players, 0)
        assert is_card_available(players, 1)
        assert get_player_by_card_index(players, 0).id == 2
        assert get_player_by_card_index(players, 2) is None

    def test_ordered_players(self):
        players = build_players([Role.CIVILIAN] * 4)
        players = (
            players[0].model_copy(update={"card_index": 2}),
            players[1],
            players[2].model_copy(update={"card_index": 0}),
            players[3],
        )
        assert [p.id for p in get_ordered_players(players)] == [3, 1, 2, 4]

    def test_winner_players_include_eliminated(self):
        state = build_state(
            [Role.CIVILIAN, Role.CIVILIAN, Role.UNDERCOVER, Role.CIVILIAN],
            phase=Phase.GAME_OVER,
            winner=Role.CIVILIAN,
        )
        eliminated = state.players[0].model_copy(update={"is_eliminated": True})
        state = state.model_copy(update={"players": state.with_player(eliminated)})

        assert [p.id for p in get_winner_players(state)] == [1, 2, 4]

    def test_no_winner_players_while_playing(self):
        state = build_state([Role.CIVILIAN, Role.CIVILIAN, Role.UNDERCOVER])
        assert get_winner_players(state) == []

    def test_statistics(self):
        state = build_state(
            [Role.CIVILIAN, Role.CIVILIAN, Role.UNDERCOVER],
            phase=Phase.CARD_SELECTION,
        )
        stats = get_game_statistics(state)
        assert stats["total_players"] == 3
        assert stats["active_players"] == 3
        assert stats["phase"] == "card_selection"
        assert stats["current_player"] == "P1"
