"""
Shared test fixtures for the study deck tests.

Provides:
- A deck store rooted in a temporary directory
- A StudyService and operation registry over that store
- A fixed "now" so scheduling assertions are exact
"""

from datetime import datetime, timezone

import pytest

from studydeck.flashcards.plugin import build_study_registry
from studydeck.flashcards.service import StudyService
from studydeck.flashcards.store import DeckStore


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed review instant."""
    return datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def store(tmp_path) -> DeckStore:
    """Deck store writing into a per-test directory."""
    return DeckStore(tmp_path / "decks")


@pytest.fixture
def service(store: DeckStore) -> StudyService:
    return StudyService(store)


@pytest.fixture
def registry(service: StudyService):
    return build_study_registry(service)
