"""
Pydantic schemas for flashcards module.
DTOs for API input/output validation and operation arguments.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from studydeck.flashcards.srs import Rating


# ═══════════════════════════════════════════════════════════════════════════
# DECK SCHEMAS
# ═══════════════════════════════════════════════════════════════════════════


class DeckCreate(BaseModel):
    """DTO for creating a new deck."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Deck name",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Spanish",
            }
        }
    }


class DeckCreated(BaseModel):
    """Response after creating (or re-creating) a deck."""

    name: str = Field(..., description="Deck name")
    message: str = Field(..., description="Confirmation message")


class DeckSummary(BaseModel):
    """DTO for reading a deck (without cards)."""

    name: str = Field(..., description="Deck name")
    card_count: int = Field(0, description="Total number of cards")
    due_count: int = Field(0, description="Number of cards due for review")


class DeckList(BaseModel):
    """DTO for listing decks."""

    decks: List[DeckSummary] = Field(..., description="List of decks")
    total: int = Field(..., description="Total number of decks")


# ═══════════════════════════════════════════════════════════════════════════
# FLASHCARD SCHEMAS
# ═══════════════════════════════════════════════════════════════════════════


class CardContent(BaseModel):
    """Simple card content for bulk operations."""

    front: str = Field(..., min_length=1, max_length=5000)
    back: str = Field(..., min_length=1, max_length=5000)


class FlashcardBulkCreate(BaseModel):
    """DTO for adding flashcards to a deck."""

    cards: List[CardContent] = Field(
        ...,
        min_length=1,
        description="List of cards to add",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "cards": [
                    {"front": "hola", "back": "hello"},
                    {"front": "adiós", "back": "goodbye"},
                ],
            }
        }
    }


class BulkCreateResponse(BaseModel):
    """Response for bulk card creation."""

    deck_name: str = Field(..., description="Deck the cards were added to")
    created: int = Field(..., description="Number of cards created")


# ═══════════════════════════════════════════════════════════════════════════
# REVIEW SCHEMAS
# ═══════════════════════════════════════════════════════════════════════════


class ReviewRequest(BaseModel):
    """DTO for submitting a flashcard review."""

    rating: Rating = Field(
        ...,
        description="Review rating: 1=wrong, 2=hard, 3=good, 4=easy",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "rating": 3,
            }
        }
    }


class ReviewResult(BaseModel):
    """Outcome of a review. ``found`` is False when the card id is unknown."""

    found: bool = Field(..., description="Whether the card was found")
    message: str = Field(..., description="Human-readable status")
    card_id: str = Field(..., description="Reviewed flashcard ID")
    interval_days: Optional[int] = Field(None, description="New interval in days")
    due_at: Optional[datetime] = Field(None, description="Next scheduled review time")
    interval_display: Optional[str] = Field(None, description="Human-readable interval")


# ═══════════════════════════════════════════════════════════════════════════
# AI GENERATION SCHEMAS
# ═══════════════════════════════════════════════════════════════════════════


class GenerateRequest(BaseModel):
    """DTO for generating flashcards from notes."""

    notes: str = Field(
        ...,
        min_length=1,
        max_length=20000,
        description="Notes to turn into flashcards",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "notes": "Ser is used for permanent traits; estar for states and locations.",
            }
        }
    }


class GenerateResponse(BaseModel):
    """Response with the generated cards that were added."""

    deck_name: str = Field(..., description="Deck the cards were added to")
    created: int = Field(..., description="Number of cards added")
    cards: List[CardContent] = Field(..., description="Generated cards")


# ═══════════════════════════════════════════════════════════════════════════
# OPERATION (TOOL) SCHEMAS
# ═══════════════════════════════════════════════════════════════════════════


class NoArguments(BaseModel):
    """Arguments for operations that take none."""

    model_config = ConfigDict(extra="forbid")


class DeckNameArguments(BaseModel):
    """Arguments naming a single deck."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    deck_name: str = Field(..., min_length=1, alias="deckName", description="Deck name")


class AddFlashcardsArguments(DeckNameArguments):
    """Arguments for adding cards to a deck."""

    cards: List[CardContent] = Field(
        ...,
        min_length=1,
        description="Cards to add, each with a front (question) and back (answer)",
    )


class ReviewCardArguments(DeckNameArguments):
    """Arguments for recording a review."""

    card_id: str = Field(..., min_length=1, alias="cardId", description="Flashcard ID")
    rating: StrictInt = Field(
        ...,
        ge=1,
        le=4,
        description="1=wrong, 2=hard, 3=good, 4=easy",
    )


class OperationInfo(BaseModel):
    """Description of a registered operation."""

    name: str = Field(..., description="Stable operation name")
    description: str = Field(..., description="Short description used for selection")
    parameters: Dict[str, Any] = Field(..., description="JSON Schema of the arguments")


class OperationResult(BaseModel):
    """Result of invoking an operation by name."""

    name: str = Field(..., description="Operation name")
    result: Any = Field(None, description="Operation return value")


# ═══════════════════════════════════════════════════════════════════════════
# ERROR SCHEMAS
# ═══════════════════════════════════════════════════════════════════════════


class FlashcardError(BaseModel):
    """Error response for flashcard operations."""

    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")

    model_config = {
        "json_schema_extra": {
            "example": {
                "error": "Card not found: 0f3c...",
                "code": "FLASHCARD_NOT_FOUND",
            }
        }
    }
