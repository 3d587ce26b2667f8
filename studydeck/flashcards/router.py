"""
Flashcards router - API endpoints for decks, study and the operation registry.
Store-backed endpoints are plain functions so FastAPI runs the blocking
file I/O in its threadpool.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from studydeck.core.dependencies import Generator, Registry, StudyServiceDep
from studydeck.core.exceptions import (
    ExternalAPIError,
    InvalidDeckNameError,
    InvalidFlashcardError,
    OperationArgumentsError,
    OperationNotFoundError,
    StudyDeckException,
)
from studydeck.flashcards.models import Flashcard
from studydeck.flashcards.schemas import (
    BulkCreateResponse,
    DeckCreate,
    DeckCreated,
    DeckList,
    DeckSummary,
    FlashcardBulkCreate,
    FlashcardError,
    GenerateRequest,
    GenerateResponse,
    OperationInfo,
    OperationResult,
    ReviewRequest,
    ReviewResult,
)

logger = logging.getLogger(__name__)


def _error(status_code: int, exc: StudyDeckException, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message, "code": code},
    )


# ═══════════════════════════════════════════════════════════════════════════
# DECK ROUTER
# ═══════════════════════════════════════════════════════════════════════════

decks_router = APIRouter(prefix="/decks", tags=["Decks"])


@decks_router.get(
    "",
    response_model=DeckList,
    status_code=status.HTTP_200_OK,
    summary="List all decks",
    description="List every persisted deck with card and due counts.",
)
def list_decks(service: StudyServiceDep) -> DeckList:
    """List all decks."""
    logger.info("[DecksRouter] Listing decks")

    summaries = [service.get_deck_summary(name) for name in service.list_decks()]
    return DeckList(decks=summaries, total=len(summaries))


@decks_router.post(
    "",
    response_model=DeckCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create a deck",
    description="Create an empty deck if it doesn't exist. Creating an existing deck is not an error.",
    responses={
        201: {"model": DeckCreated, "description": "Deck ready"},
        400: {"model": FlashcardError, "description": "Invalid deck name"},
    },
)
def create_deck(deck_data: DeckCreate, service: StudyServiceDep) -> DeckCreated:
    """Create a deck."""
    logger.info(f"[DecksRouter] Creating deck: {deck_data.name}")

    try:
        message = service.create_deck(deck_data.name)
    except InvalidDeckNameError as e:
        return _error(status.HTTP_400_BAD_REQUEST, e, "INVALID_DECK_NAME")
    return DeckCreated(name=deck_data.name, message=message)


@decks_router.get(
    "/{deck_name}",
    response_model=DeckSummary,
    status_code=status.HTTP_200_OK,
    summary="Get deck summary",
    description="Card and due counts for a deck. Unknown decks are reported as empty.",
    responses={
        200: {"model": DeckSummary, "description": "Deck summary"},
        400: {"model": FlashcardError, "description": "Invalid deck name"},
    },
)
def get_deck(deck_name: str, service: StudyServiceDep) -> DeckSummary:
    """Get a deck summary."""
    logger.info(f"[DecksRouter] Getting deck: {deck_name}")

    try:
        return service.get_deck_summary(deck_name)
    except InvalidDeckNameError as e:
        return _error(status.HTTP_400_BAD_REQUEST, e, "INVALID_DECK_NAME")


@decks_router.post(
    "/{deck_name}/cards",
    response_model=BulkCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add flashcards",
    description="Append cards to a deck. New cards are due immediately.",
    responses={
        201: {"model": BulkCreateResponse, "description": "Cards added"},
        400: {"model": FlashcardError, "description": "Invalid deck name or cards"},
    },
)
def add_flashcards(
    deck_name: str,
    bulk_data: FlashcardBulkCreate,
    service: StudyServiceDep,
) -> BulkCreateResponse:
    """Add flashcards to a deck."""
    logger.info(f"[DecksRouter] Adding {len(bulk_data.cards)} cards to deck: {deck_name}")

    try:
        created = service.add_flashcards(deck_name, bulk_data.cards)
    except InvalidDeckNameError as e:
        return _error(status.HTTP_400_BAD_REQUEST, e, "INVALID_DECK_NAME")
    except InvalidFlashcardError as e:
        return _error(status.HTTP_400_BAD_REQUEST, e, "INVALID_FLASHCARDS")
    return BulkCreateResponse(deck_name=deck_name, created=created)


@decks_router.get(
    "/{deck_name}/next",
    response_model=Flashcard,
    status_code=status.HTTP_200_OK,
    summary="Get next due card",
    description="The due card with the earliest due time; ties go to the card added first.",
    responses={
        200: {"model": Flashcard, "description": "Next card to study"},
        204: {"description": "No cards due"},
        400: {"model": FlashcardError, "description": "Invalid deck name"},
    },
)
def get_next_due_card(deck_name: str, service: StudyServiceDep):
    """Get the next due flashcard."""
    logger.info(f"[DecksRouter] Getting next due card: {deck_name}")

    try:
        card = service.get_next_due_card(deck_name)
    except InvalidDeckNameError as e:
        return _error(status.HTTP_400_BAD_REQUEST, e, "INVALID_DECK_NAME")

    if card is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return card


@decks_router.post(
    "/{deck_name}/cards/{card_id}/review",
    response_model=ReviewResult,
    status_code=status.HTTP_200_OK,
    summary="Submit flashcard review",
    description="Record a review rating (1=wrong, 2=hard, 3=good, 4=easy) and reschedule the card.",
    responses={
        200: {"model": ReviewResult, "description": "Review processed"},
        400: {"model": FlashcardError, "description": "Invalid deck name"},
        404: {"model": FlashcardError, "description": "Flashcard not found"},
    },
)
def review_card(
    deck_name: str,
    card_id: str,
    review_data: ReviewRequest,
    service: StudyServiceDep,
) -> ReviewResult:
    """Submit a flashcard review."""
    logger.info(f"[DecksRouter] Reviewing card: {card_id} in deck: {deck_name}, rating: {review_data.rating}")

    try:
        result = service.review_card(deck_name, card_id, review_data.rating)
    except InvalidDeckNameError as e:
        return _error(status.HTTP_400_BAD_REQUEST, e, "INVALID_DECK_NAME")

    if not result.found:
        logger.warning(f"[DecksRouter] Flashcard not found: {card_id}")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": result.message, "code": "FLASHCARD_NOT_FOUND"},
        )
    return result


@decks_router.post(
    "/{deck_name}/generate",
    response_model=GenerateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate flashcards from notes",
    description="Generate cards from notes with AI and add them to the deck (created if missing).",
    responses={
        201: {"model": GenerateResponse, "description": "Cards generated and added"},
        400: {"model": FlashcardError, "description": "Invalid deck name"},
        502: {"model": FlashcardError, "description": "AI service error"},
    },
)
async def generate_flashcards(
    deck_name: str,
    request: GenerateRequest,
    service: StudyServiceDep,
    generator: Generator,
) -> GenerateResponse:
    """Generate flashcards with AI and add them to a deck."""
    logger.info(f"[DecksRouter] Generating flashcards for deck: {deck_name}")

    try:
        await run_in_threadpool(service.create_deck, deck_name)
        cards = await generator.generate(request.notes)
        created = await run_in_threadpool(service.add_flashcards, deck_name, cards)
    except InvalidDeckNameError as e:
        return _error(status.HTTP_400_BAD_REQUEST, e, "INVALID_DECK_NAME")
    except ExternalAPIError as e:
        logger.error(f"[DecksRouter] Generation failed: {e.message}")
        return _error(status.HTTP_502_BAD_GATEWAY, e, "AI_SERVICE_ERROR")

    return GenerateResponse(deck_name=deck_name, created=created, cards=cards)


# ═══════════════════════════════════════════════════════════════════════════
# TOOLS ROUTER
# ═══════════════════════════════════════════════════════════════════════════

tools_router = APIRouter(prefix="/tools", tags=["Tools"])


@tools_router.get(
    "",
    response_model=List[OperationInfo],
    status_code=status.HTTP_200_OK,
    summary="List operations",
    description="Registered study operations with their argument schemas.",
)
def list_operations(registry: Registry) -> List[OperationInfo]:
    """List registered operations."""
    return registry.describe()


@tools_router.post(
    "/{name}",
    response_model=OperationResult,
    status_code=status.HTTP_200_OK,
    summary="Invoke an operation",
    description="Invoke a registered study operation by name with JSON arguments.",
    responses={
        200: {"model": OperationResult, "description": "Operation result"},
        400: {"model": FlashcardError, "description": "Invalid arguments"},
        404: {"model": FlashcardError, "description": "Unknown operation"},
    },
)
def invoke_operation(
    name: str,
    registry: Registry,
    arguments: Optional[Dict[str, Any]] = Body(None),
) -> OperationResult:
    """Invoke an operation by name."""
    logger.info(f"[ToolsRouter] Invoking operation: {name}")

    try:
        result = registry.invoke(name, arguments)
    except OperationNotFoundError as e:
        return _error(status.HTTP_404_NOT_FOUND, e, "OPERATION_NOT_FOUND")
    except (OperationArgumentsError, InvalidDeckNameError, InvalidFlashcardError) as e:
        return _error(status.HTTP_400_BAD_REQUEST, e, "INVALID_ARGUMENTS")
    return OperationResult(name=name, result=result)
