"""
Custom exceptions for the application.
"""


class StudyDeckException(Exception):
    """Base exception for StudyDeck application."""

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


# ═══════════════════════════════════════════════════════════════════════════
# DECK & FLASHCARD EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════


class InvalidDeckNameError(StudyDeckException):
    """Raised when a deck name is empty or blank."""
    pass


class InvalidFlashcardError(StudyDeckException):
    """Raised when a batch of new cards is empty or has blank sides."""
    pass


class InvalidRatingError(StudyDeckException):
    """Raised when a review rating is outside 1-4."""
    pass


# ═══════════════════════════════════════════════════════════════════════════
# OPERATION REGISTRY EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════


class OperationNotFoundError(StudyDeckException):
    """Raised when an operation name is not registered."""
    pass


class DuplicateOperationError(StudyDeckException):
    """Raised when an operation name is registered twice."""
    pass


class OperationArgumentsError(StudyDeckException):
    """Raised when operation arguments fail validation."""
    pass


# ═══════════════════════════════════════════════════════════════════════════
# EXTERNAL API EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════


class ExternalAPIError(StudyDeckException):
    """Raised when an external API call fails."""
    pass
