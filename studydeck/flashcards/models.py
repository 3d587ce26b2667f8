"""
Pydantic models for the flashcards module.
Defines the Deck and Flashcard records persisted by the deck store.

Python attributes are snake_case; the persisted JSON uses the camelCase
aliases (``dueAt``, ``intervalDays``).
"""

from datetime import datetime, timezone
from typing import List, Optional, Set
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def new_card_id() -> str:
    """Generate an opaque card id."""
    return uuid4().hex


class Flashcard(BaseModel):
    """
    Flashcard record with its scheduling state.
    A card is due once ``due_at`` is at or before the current time.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: str = Field(default_factory=new_card_id, min_length=1, frozen=True)
    front: str = ""
    back: str = ""
    due_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="dueAt",
    )
    interval_days: int = Field(1, ge=1, alias="intervalDays")

    @field_validator("due_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def is_due(self, now: datetime) -> bool:
        return self.due_at <= now

    def __repr__(self) -> str:
        return f"<Flashcard(id={self.id}, interval_days={self.interval_days}, due_at={self.due_at.isoformat()})>"


class Deck(BaseModel):
    """
    Deck record: a named, ordered collection of flashcards.
    Card order is insertion order.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    cards: List[Flashcard] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_card_ids(self) -> "Deck":
        seen = set()
        for card in self.cards:
            if card.id in seen:
                raise ValueError(f"Duplicate card id in deck {self.name}: {card.id}")
            seen.add(card.id)
        return self

    def card_ids(self) -> Set[str]:
        return {card.id for card in self.cards}

    def find_card(self, card_id: str) -> Optional[Flashcard]:
        """Return the card with ``card_id``, or None."""
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def __repr__(self) -> str:
        return f"<Deck(name={self.name}, cards={len(self.cards)})>"
