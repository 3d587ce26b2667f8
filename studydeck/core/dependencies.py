"""
FastAPI dependencies for dependency injection.
"""

from typing import Annotated

from fastapi import Depends

from studydeck.config import Settings, get_settings
from studydeck.flashcards.generation import FlashcardGenerator
from studydeck.flashcards.plugin import OperationRegistry, build_study_registry
from studydeck.flashcards.service import StudyService
from studydeck.flashcards.store import DeckStore

AppSettings = Annotated[Settings, Depends(get_settings)]


def get_deck_store(settings: AppSettings) -> DeckStore:
    """
    Provides the deck store rooted at the configured data directory.
    The root is passed explicitly; there is no module-level default.
    """
    return DeckStore(settings.data_dir)


Store = Annotated[DeckStore, Depends(get_deck_store)]


def get_study_service(store: Store) -> StudyService:
    return StudyService(store)


StudyServiceDep = Annotated[StudyService, Depends(get_study_service)]


def get_operation_registry(service: StudyServiceDep) -> OperationRegistry:
    return build_study_registry(service)


Registry = Annotated[OperationRegistry, Depends(get_operation_registry)]


def get_generator(settings: AppSettings) -> FlashcardGenerator:
    """
    Provides a flashcard generator.
    The OpenAI client is created lazily on first use.
    """
    return FlashcardGenerator(settings)


Generator = Annotated[FlashcardGenerator, Depends(get_generator)]
