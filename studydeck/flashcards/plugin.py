"""
Study plugin - explicit operation registry over StudyService.

Operations are registered by hand with a stable name, a short description
and a pydantic model for their arguments. An agent selects operations by
name and description alone, so both must stay stable.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError

from studydeck.core.exceptions import (
    DuplicateOperationError,
    OperationArgumentsError,
    OperationNotFoundError,
)
from studydeck.flashcards.schemas import (
    AddFlashcardsArguments,
    DeckNameArguments,
    NoArguments,
    OperationInfo,
    ReviewCardArguments,
)
from studydeck.flashcards.service import StudyService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Operation:
    """A callable operation: name, description, argument model and handler."""

    name: str
    description: str
    parameters: Type[BaseModel]
    handler: Callable[[BaseModel], Any]

    def parameter_schema(self) -> Dict[str, Any]:
        """JSON Schema of the arguments, using their wire (alias) names."""
        return self.parameters.model_json_schema(by_alias=True)

    def info(self) -> OperationInfo:
        return OperationInfo(
            name=self.name,
            description=self.description,
            parameters=self.parameter_schema(),
        )


class OperationRegistry:
    """Name → Operation mapping, in registration order."""

    def __init__(self):
        self._operations: Dict[str, Operation] = {}

    def register(self, operation: Operation) -> Operation:
        if operation.name in self._operations:
            raise DuplicateOperationError(f"Operation already registered: {operation.name}")
        self._operations[operation.name] = operation
        return operation

    def get(self, name: str) -> Operation:
        try:
            return self._operations[name]
        except KeyError:
            raise OperationNotFoundError(f"Unknown operation: {name}")

    def names(self) -> List[str]:
        return list(self._operations)

    def __contains__(self, name: str) -> bool:
        return name in self._operations

    def __len__(self) -> int:
        return len(self._operations)

    def describe(self) -> List[OperationInfo]:
        return [op.info() for op in self._operations.values()]

    def to_openai_tools(self) -> List[Dict[str, Any]]:
        """Operations as OpenAI chat-completions function tools."""
        return [
            {
                "type": "function",
                "function": {
                    "name": op.name,
                    "description": op.description,
                    "parameters": op.parameter_schema(),
                },
            }
            for op in self._operations.values()
        ]

    def invoke(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Validate ``arguments`` against the operation's model and run it.

        Raises:
            OperationNotFoundError: If ``name`` is not registered
            OperationArgumentsError: If the arguments fail validation
        """
        operation = self.get(name)
        try:
            params = operation.parameters.model_validate(dict(arguments or {}))
        except ValidationError as e:
            raise OperationArgumentsError(f"Invalid arguments for {name}: {e.errors(include_url=False)}")

        logger.info(f"[OperationRegistry] Invoking: {name}")
        return operation.handler(params)


def build_study_registry(service: StudyService) -> OperationRegistry:
    """Register the study operations against ``service``."""
    registry = OperationRegistry()

    registry.register(Operation(
        name="ListDecks",
        description="List available study decks.",
        parameters=NoArguments,
        handler=lambda _: service.list_decks(),
    ))
    registry.register(Operation(
        name="CreateDeck",
        description="Create an empty deck if it doesn't exist.",
        parameters=DeckNameArguments,
        handler=lambda args: service.create_deck(args.deck_name),
    ))
    registry.register(Operation(
        name="AddFlashcards",
        description="Add flashcards to a deck.",
        parameters=AddFlashcardsArguments,
        handler=lambda args: service.add_flashcards(args.deck_name, args.cards),
    ))
    registry.register(Operation(
        name="GetNextDueCard",
        description="Get the next due flashcard to study.",
        parameters=DeckNameArguments,
        handler=lambda args: _card_payload(service.get_next_due_card(args.deck_name)),
    ))
    registry.register(Operation(
        name="ReviewCard",
        description="Record a review result: 1=wrong, 2=hard, 3=good, 4=easy.",
        parameters=ReviewCardArguments,
        handler=lambda args: service.review_card(args.deck_name, args.card_id, args.rating).message,
    ))

    logger.info(f"[StudyPlugin] Registered {len(registry)} operations")
    return registry


def _card_payload(card) -> Optional[Dict[str, Any]]:
    if card is None:
        return None
    return card.model_dump(mode="json", by_alias=True)
