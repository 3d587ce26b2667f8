"""
StudyDeck Application.

Personal study decks of question/answer cards with a simple
spaced-repetition scheduler, exposed as a FastAPI service and as a
registry of named operations for tool-calling agents.
"""

__version__ = "0.1.0"
