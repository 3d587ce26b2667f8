"""
Flashcards module - Deck storage, SRS scheduling and the study operations.
"""

from studydeck.flashcards.router import decks_router, tools_router

__all__ = ["decks_router", "tools_router"]
