"""Shared builders for tests."""

from undercover.models import GameWords, Phase, Player, SessionState, WordPair
from undercover.roles import Role

WORDS = GameWords(civilian="Apel", undercover="Jeruk")


class StubWordProvider:
    """In-memory word provider that hands out pairs in order."""

    def __init__(self, pairs=None):
        self.pairs = [
            WordPair(civilian=c, undercover=u)
            for c, u in (pairs or [("Apel", "Jeruk"), ("Kopi", "Teh"), ("Buku", "Majalah")])
        ]
        self.marked = []

    def get_random_unplayed(self):
        return next((p.model_copy() for p in self.pairs if not p.played), None)

    def mark_played(self, pair):
        self.marked.append((pair.civilian, pair.undercover))
        for p in self.pairs:
            if p.same_words(pair):
                p.played = True

    def all_played(self):
        return all(p.played for p in self.pairs)

    def fetch_more(self, count):
        return []


def build_players(roles, words=WORDS, named=True):
    """Seat one player per role, ids starting at 1."""
    return tuple(
        Player(
            id=i + 1,
            name=f"P{i + 1}" if named else "",
            role=role,
            word=words.word_for(role),
        )
        for i, role in enumerate(roles)
    )


def build_state(roles, phase=Phase.VOTING, words=WORDS, **updates):
    """A mid-game state with the given roster, e.g. for voting scenarios."""
    players = build_players(roles, words)
    fields = {
        "phase": phase,
        "round": 1,
        "players": players,
        "game_words": words,
        "undercover_count": sum(1 for r in roles if r == Role.UNDERCOVER),
        "mr_white_count": sum(1 for r in roles if r == Role.MR_WHITE),
    }
    fields.update(updates)
    return SessionState(**fields)


def play_card_selection(manager, names=None):
    """Every player takes the first free card, names themselves and looks."""
    state = manager.state
    assert state.phase == Phase.CARD_SELECTION
    for turn in range(len(state.players)):
        card = next(i for i in range(len(state.players)) if manager.is_card_available(i))
        result = manager.select_card(card)
        assert result.success, result.error
        if manager.state.round == 1:
            name = names[turn] if names else f"Player{turn + 1}"
            assert manager.submit_player_name(name).success
        assert manager.reveal_word_next().success
    return manager.state
