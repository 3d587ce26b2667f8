"""
Flashcards service - Business logic for deck and flashcard management.
Every mutating operation loads the deck, mutates it and saves it back in
full. Nothing is cached between calls.

There is no locking: two concurrent writers on the same deck race and the
last save wins. Serialize calls per deck name if that matters.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from studydeck.core.exceptions import (
    InvalidDeckNameError,
    InvalidFlashcardError,
    InvalidRatingError,
)
from studydeck.flashcards.models import Flashcard, new_card_id
from studydeck.flashcards.schemas import CardContent, DeckSummary, ReviewResult
from studydeck.flashcards.srs import (
    Rating,
    calculate_next_review,
    get_initial_srs_state,
    get_interval_display,
)
from studydeck.flashcards.store import DeckStore

logger = logging.getLogger(__name__)

NewCard = Union[CardContent, Mapping[str, Any]]


def _resolve_now(now: Optional[datetime] = None) -> datetime:
    """``now`` as an aware UTC datetime; naive values are taken as UTC."""
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def format_due(due_at: datetime) -> str:
    """Format a due time as ``YYYY-MM-DD HH:MM:SSZ``."""
    return due_at.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%SZ")


class StudyService:
    """Operation surface over the deck store and the SRS scheduler."""

    def __init__(self, store: DeckStore):
        self.store = store

    # ═══════════════════════════════════════════════════════════════════════
    # DECK OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════

    def list_decks(self) -> List[str]:
        """List all persisted deck names, sorted case-insensitively."""
        names = sorted(self.store.list_deck_names(), key=lambda n: (n.casefold(), n))
        logger.info(f"[StudyService] Listing decks: {len(names)} found")
        return names

    def create_deck(self, name: str) -> str:
        """Create an empty deck if it doesn't exist. Idempotent."""
        self._require_name(name)
        logger.info(f"[StudyService] Creating deck: {name}")

        deck = self.store.load(name)
        deck.name = name
        self.store.save(deck)
        return f"Deck ready: {name}"

    def get_deck_summary(self, deck_name: str, now: Optional[datetime] = None) -> DeckSummary:
        """Card and due counts for a deck."""
        self._require_name(deck_name)
        now = _resolve_now(now)

        deck = self.store.load(deck_name)
        return DeckSummary(
            name=deck.name,
            card_count=len(deck.cards),
            due_count=sum(1 for c in deck.cards if c.is_due(now)),
        )

    # ═══════════════════════════════════════════════════════════════════════
    # FLASHCARD OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════

    def add_flashcards(
        self,
        deck_name: str,
        cards: Iterable[NewCard],
        now: Optional[datetime] = None,
    ) -> int:
        """
        Append new cards to a deck, due immediately with a 1-day interval.

        The whole batch is rejected if it is empty or any entry has a blank
        front or back; nothing is saved in that case.

        Returns:
            Number of cards appended
        """
        self._require_name(deck_name)
        contents = self._validate_cards(cards)

        deck = self.store.load(deck_name)
        deck.name = deck_name

        interval_days, due_at = get_initial_srs_state(_resolve_now(now))
        taken = deck.card_ids()
        for content in contents:
            card_id = new_card_id()
            while card_id in taken:
                card_id = new_card_id()
            taken.add(card_id)

            deck.cards.append(
                Flashcard(
                    id=card_id,
                    front=content.front,
                    back=content.back,
                    due_at=due_at,
                    interval_days=interval_days,
                )
            )

        self.store.save(deck)
        logger.info(f"[StudyService] Added {len(contents)} cards to deck: {deck_name}")
        return len(contents)

    def get_next_due_card(self, deck_name: str, now: Optional[datetime] = None) -> Optional[Flashcard]:
        """
        Pick the next card to study.

        Among cards due at ``now``, the earliest ``due_at`` wins; ties go to
        the card added first. Does not modify the deck.
        """
        self._require_name(deck_name)
        now = _resolve_now(now)

        deck = self.store.load(deck_name)
        due = [(card.due_at, index, card) for index, card in enumerate(deck.cards) if card.is_due(now)]
        if not due:
            logger.info(f"[StudyService] No cards due in deck: {deck_name}")
            return None

        _, _, card = min(due, key=lambda entry: (entry[0], entry[1]))
        return card

    def review_card(
        self,
        deck_name: str,
        card_id: str,
        rating: Union[Rating, int],
        reviewed_at: Optional[datetime] = None,
    ) -> ReviewResult:
        """
        Record a review result and reschedule the card.

        An unknown card id is reported in the result; the deck is not saved.
        """
        self._require_name(deck_name)
        try:
            rating = Rating(rating)
        except ValueError:
            raise InvalidRatingError(f"Rating must be 1-4, got: {rating}")

        logger.info(f"[StudyService] Reviewing card: {card_id} in deck: {deck_name}, rating: {rating.name}")

        deck = self.store.load(deck_name)
        card = deck.find_card(card_id)
        if card is None:
            logger.warning(f"[StudyService] Card not found: {card_id} in deck: {deck_name}")
            return ReviewResult(
                found=False,
                message=f"Card not found: {card_id}",
                card_id=card_id,
            )

        srs_update = calculate_next_review(
            current_interval_days=card.interval_days,
            rating=rating,
            reviewed_at=_resolve_now(reviewed_at),
        )
        card.interval_days = srs_update.interval_days
        card.due_at = srs_update.due_at
        self.store.save(deck)

        return ReviewResult(
            found=True,
            message=f"Saved. Next due: {format_due(card.due_at)} (in {card.interval_days} days)",
            card_id=card.id,
            interval_days=card.interval_days,
            due_at=card.due_at,
            interval_display=get_interval_display(card.interval_days),
        )

    # ═══════════════════════════════════════════════════════════════════════
    # VALIDATION
    # ═══════════════════════════════════════════════════════════════════════

    @staticmethod
    def _require_name(name: str) -> None:
        if not name or not name.strip():
            raise InvalidDeckNameError("Deck name must not be empty")

    @staticmethod
    def _validate_cards(cards: Iterable[NewCard]) -> List[CardContent]:
        contents: List[CardContent] = []
        for position, entry in enumerate(cards):
            if isinstance(entry, CardContent):
                front, back = entry.front, entry.back
            elif isinstance(entry, Mapping):
                front, back = entry.get("front"), entry.get("back")
            else:
                raise InvalidFlashcardError(f"Card {position} is not a front/back pair")

            try:
                content = CardContent(
                    front=(front or "").strip(),
                    back=(back or "").strip(),
                )
            except (ValidationError, AttributeError):
                raise InvalidFlashcardError(f"Card {position} has an empty or invalid front/back")
            contents.append(content)

        if not contents:
            raise InvalidFlashcardError("No cards to add")
        return contents
