"""
Tests for StudyService - the deck and review operations.

Tests cover:
- Deck creation and listing
- Adding cards and batch validation
- Next due card selection and tie-breaks
- Review scheduling and not-found handling
"""

from datetime import timedelta

import pytest

from studydeck.core.exceptions import (
    InvalidDeckNameError,
    InvalidFlashcardError,
    InvalidRatingError,
)
from studydeck.flashcards.models import Deck, Flashcard
from studydeck.flashcards.schemas import CardContent
from studydeck.flashcards.srs import Rating


class TestDecks:
    """Test deck creation and listing."""

    def test_create_deck_persists(self, service, store):
        assert service.create_deck("Spanish") == "Deck ready: Spanish"
        assert store.list_deck_names() == {"Spanish"}

    def test_create_deck_is_idempotent(self, service, store, fixed_now):
        service.create_deck("Spanish")
        service.add_flashcards("Spanish", [{"front": "hola", "back": "hello"}], now=fixed_now)

        assert service.create_deck("Spanish") == "Deck ready: Spanish"
        assert len(store.load("Spanish").cards) == 1

    def test_list_decks_sorted(self, service):
        for name in ["spanish", "French", "german"]:
            service.create_deck(name)
        assert service.list_decks() == ["French", "german", "spanish"]

    def test_list_decks_empty(self, service):
        assert service.list_decks() == []

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name_rejected(self, service, name):
        with pytest.raises(InvalidDeckNameError):
            service.create_deck(name)

    def test_illegal_characters_are_not_rejected(self, service):
        assert service.create_deck("Verbs/Irregular") == "Deck ready: Verbs/Irregular"
        assert service.list_decks() == ["Verbs_Irregular"]

    def test_long_name_round_trip(self, service, fixed_now):
        name = "ñ" * 200
        assert service.create_deck(name) == f"Deck ready: {name}"
        service.add_flashcards(name, [{"front": "hola", "back": "hello"}], now=fixed_now)

        (key,) = service.list_decks()
        assert service.get_next_due_card(name, now=fixed_now).front == "hola"
        assert service.get_next_due_card(key, now=fixed_now).front == "hola"

    def test_long_unknown_deck_has_no_due_card(self, service):
        assert service.get_next_due_card("x" * 300) is None

    def test_deck_summary(self, service, fixed_now):
        service.add_flashcards("Spanish", [{"front": "a", "back": "b"}, {"front": "c", "back": "d"}], now=fixed_now)
        card = service.get_next_due_card("Spanish", now=fixed_now)
        service.review_card("Spanish", card.id, Rating.GOOD, reviewed_at=fixed_now)

        summary = service.get_deck_summary("Spanish", now=fixed_now)
        assert summary.name == "Spanish"
        assert summary.card_count == 2
        assert summary.due_count == 1


class TestAddFlashcards:
    """Test adding cards."""

    def test_new_cards_are_due_now_with_interval_one(self, service, store, fixed_now):
        added = service.add_flashcards("Spanish", [CardContent(front="hola", back="hello")], now=fixed_now)

        assert added == 1
        card = store.load("Spanish").cards[0]
        assert card.interval_days == 1
        assert card.due_at == fixed_now
        assert service.get_next_due_card("Spanish", now=fixed_now).id == card.id

    def test_new_card_due_by_wall_clock(self, service):
        service.add_flashcards("Spanish", [{"front": "hola", "back": "hello"}])
        card = service.get_next_due_card("Spanish")
        assert card is not None
        assert card.interval_days == 1

    def test_preserves_input_order(self, service, store, fixed_now):
        cards = [{"front": f"q{i}", "back": f"a{i}"} for i in range(4)]
        assert service.add_flashcards("Spanish", cards, now=fixed_now) == 4
        assert [c.front for c in store.load("Spanish").cards] == ["q0", "q1", "q2", "q3"]

    def test_appends_without_deduplicating(self, service, store, fixed_now):
        service.add_flashcards("Spanish", [{"front": "hola", "back": "hello"}], now=fixed_now)
        service.add_flashcards("Spanish", [{"front": "hola", "back": "hello"}], now=fixed_now)

        cards = store.load("Spanish").cards
        assert len(cards) == 2
        assert cards[0].id != cards[1].id

    def test_ids_unique_across_batches(self, service, store, fixed_now):
        for _ in range(3):
            service.add_flashcards("Spanish", [{"front": "a", "back": "b"}] * 5, now=fixed_now)
        ids = [c.id for c in store.load("Spanish").cards]
        assert len(ids) == len(set(ids)) == 15

    def test_strips_whitespace(self, service, store, fixed_now):
        service.add_flashcards("Spanish", [{"front": "  hola ", "back": "\thello\n"}], now=fixed_now)
        card = store.load("Spanish").cards[0]
        assert (card.front, card.back) == ("hola", "hello")

    @pytest.mark.parametrize(
        "cards",
        [
            [],
            [{"front": "", "back": "hello"}],
            [{"front": "hola", "back": "   "}],
            [{"front": "hola"}],
            [{"front": "hola", "back": "hello"}, {"front": None, "back": "x"}],
            ["not a card"],
        ],
    )
    def test_invalid_batch_rejected_and_nothing_saved(self, service, store, cards):
        with pytest.raises(InvalidFlashcardError):
            service.add_flashcards("Spanish", cards)
        assert store.list_deck_names() == set()

    def test_add_creates_missing_deck(self, service, fixed_now):
        service.add_flashcards("French", [{"front": "bonjour", "back": "hello"}], now=fixed_now)
        assert service.list_decks() == ["French"]


class TestGetNextDueCard:
    """Test due card selection."""

    def test_unknown_deck_has_no_due_card(self, service):
        assert service.get_next_due_card("Nothing") is None

    def test_spanish_tie_goes_to_first_added(self, service, fixed_now):
        service.add_flashcards(
            "Spanish",
            [{"front": "hola", "back": "hello"}, {"front": "hola", "back": "hello"}],
            now=fixed_now,
        )
        deck_cards = service.store.load("Spanish").cards

        assert "Spanish" in service.list_decks()
        assert deck_cards[0].id != deck_cards[1].id
        assert service.get_next_due_card("Spanish", now=fixed_now).id == deck_cards[0].id

    def test_earliest_due_wins(self, service, store, fixed_now):
        deck = Deck(
            name="Spanish",
            cards=[
                Flashcard(id="late", front="a", back="b", due_at=fixed_now - timedelta(hours=1)),
                Flashcard(id="early", front="c", back="d", due_at=fixed_now - timedelta(days=2)),
                Flashcard(id="future", front="e", back="f", due_at=fixed_now - timedelta(days=5) + timedelta(days=10)),
            ],
        )
        store.save(deck)
        assert service.get_next_due_card("Spanish", now=fixed_now).id == "early"

    def test_tie_break_by_insertion_order_not_id(self, service, store, fixed_now):
        due = fixed_now - timedelta(days=1)
        store.save(Deck(
            name="Spanish",
            cards=[
                Flashcard(id="zzz", front="a", back="b", due_at=due),
                Flashcard(id="aaa", front="c", back="d", due_at=due),
            ],
        ))
        assert service.get_next_due_card("Spanish", now=fixed_now).id == "zzz"

    def test_future_cards_never_returned(self, service, store, fixed_now):
        store.save(Deck(
            name="Spanish",
            cards=[Flashcard(id="soon", front="a", back="b", due_at=fixed_now + timedelta(seconds=1))],
        ))
        assert service.get_next_due_card("Spanish", now=fixed_now) is None

    def test_card_due_exactly_now_qualifies(self, service, store, fixed_now):
        store.save(Deck(name="Spanish", cards=[Flashcard(id="now", front="a", back="b", due_at=fixed_now)]))
        assert service.get_next_due_card("Spanish", now=fixed_now).id == "now"

    def test_does_not_mutate(self, service, store, fixed_now):
        service.add_flashcards("Spanish", [{"front": "a", "back": "b"}], now=fixed_now)
        before = store.deck_path("Spanish").read_bytes()
        service.get_next_due_card("Spanish", now=fixed_now)
        assert store.deck_path("Spanish").read_bytes() == before


class TestReviewCard:
    """Test recording reviews."""

    def test_unknown_card_not_found_and_unchanged(self, service, store, fixed_now):
        service.add_flashcards("Spanish", [{"front": "hola", "back": "hello"}], now=fixed_now)
        before = store.load("Spanish")

        result = service.review_card("Spanish", "unknown-id", 3, reviewed_at=fixed_now)

        assert result.found is False
        assert "not found" in result.message.lower()
        assert store.load("Spanish") == before

    def test_unknown_deck_not_saved(self, service, store, fixed_now):
        result = service.review_card("Nothing", "unknown-id", Rating.GOOD, reviewed_at=fixed_now)
        assert result.found is False
        assert store.list_deck_names() == set()

    def test_review_updates_and_persists(self, service, store, fixed_now):
        service.add_flashcards("Spanish", [{"front": "hola", "back": "hello"}], now=fixed_now)
        card = service.get_next_due_card("Spanish", now=fixed_now)

        result = service.review_card("Spanish", card.id, Rating.GOOD, reviewed_at=fixed_now)

        assert result.found is True
        assert result.interval_days == 2
        assert result.due_at == fixed_now + timedelta(days=2)
        assert result.message == "Saved. Next due: 2026-03-03 09:30:00Z (in 2 days)"

        stored = store.load("Spanish").find_card(card.id)
        assert stored.interval_days == 2
        assert stored.due_at == fixed_now + timedelta(days=2)

    def test_easy_four_times(self, service, store, fixed_now):
        service.add_flashcards("Spanish", [{"front": "hola", "back": "hello"}], now=fixed_now)
        card_id = store.load("Spanish").cards[0].id

        seen = []
        reviewed_at = fixed_now
        for _ in range(4):
            result = service.review_card("Spanish", card_id, Rating.EASY, reviewed_at=reviewed_at)
            seen.append(result.interval_days)
            reviewed_at = result.due_at
        assert seen == [3, 9, 27, 60]

    def test_wrong_resets(self, service, store, fixed_now):
        service.add_flashcards("Spanish", [{"front": "hola", "back": "hello"}], now=fixed_now)
        card_id = store.load("Spanish").cards[0].id
        service.review_card("Spanish", card_id, Rating.EASY, reviewed_at=fixed_now)

        result = service.review_card("Spanish", card_id, Rating.WRONG, reviewed_at=fixed_now)
        assert result.interval_days == 1
        assert result.due_at == fixed_now + timedelta(days=1)

    def test_reviewed_card_leaves_due_queue(self, service, fixed_now):
        service.add_flashcards("Spanish", [{"front": "a", "back": "b"}, {"front": "c", "back": "d"}], now=fixed_now)
        first = service.get_next_due_card("Spanish", now=fixed_now)
        service.review_card("Spanish", first.id, Rating.HARD, reviewed_at=fixed_now)

        second = service.get_next_due_card("Spanish", now=fixed_now)
        assert second.front == "c"

    def test_only_reviewed_card_changes(self, service, store, fixed_now):
        service.add_flashcards("Spanish", [{"front": "a", "back": "b"}, {"front": "c", "back": "d"}], now=fixed_now)
        first, second = store.load("Spanish").cards
        service.review_card("Spanish", first.id, Rating.EASY, reviewed_at=fixed_now)
        assert store.load("Spanish").cards[1] == second

    @pytest.mark.parametrize("rating", [0, 5, -1])
    def test_invalid_rating_rejected(self, service, store, rating, fixed_now):
        service.add_flashcards("Spanish", [{"front": "a", "back": "b"}], now=fixed_now)
        card_id = store.load("Spanish").cards[0].id
        before = store.load("Spanish")

        with pytest.raises(InvalidRatingError):
            service.review_card("Spanish", card_id, rating)
        assert store.load("Spanish") == before
