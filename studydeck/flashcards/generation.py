"""
Flashcard generation - turns free-form notes into front/back pairs
using the OpenAI chat completions API.

The generator only produces cards; adding them to a deck is the
caller's job (see StudyService.add_flashcards).
"""

import json
import logging
import re
from typing import Any, List, Optional

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from studydeck.config import Settings, get_settings
from studydeck.core.exceptions import ExternalAPIError
from studydeck.flashcards.schemas import CardContent

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You generate study flashcards and output ONLY JSON."

# AI Generation prompt template
GENERATION_PROMPT = """Turn the notes into flashcards.
Return ONLY valid JSON (no markdown, no extra text).
JSON shape:
[
  {{"front": "question", "back": "answer"}},
  ...
]

Rules:
- 8 to 15 cards
- Keep each front/back short and clear
- Use the notes only (no extra facts)

NOTES:
{notes}"""

GENERATION_TEMPERATURE = 0.2

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


def _field(entry: dict, name: str) -> str:
    """Case-insensitive lookup of a string field."""
    for key, value in entry.items():
        if isinstance(key, str) and key.lower() == name and isinstance(value, str):
            return value.strip()
    return ""


def parse_generated_cards(content: str) -> List[CardContent]:
    """
    Parse a model reply into cards.

    Accepts a JSON array of ``{front, back}`` objects or an object with a
    ``cards`` array, optionally wrapped in a markdown code fence. Entries
    with a blank or over-long front or back are dropped.

    Raises:
        ExternalAPIError: If the reply is empty, not JSON, or has no usable cards
    """
    text = _CODE_FENCE.sub("", (content or "").strip())
    if not text:
        raise ExternalAPIError("Empty response from AI")

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"[FlashcardGenerator] Failed to parse AI response: {e}")
        raise ExternalAPIError("Failed to parse AI-generated cards")

    if isinstance(data, dict):
        data = next((v for k, v in data.items() if str(k).lower() == "cards"), None)
    if not isinstance(data, list):
        raise ExternalAPIError("AI response is not a list of cards")

    cards = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        front, back = _field(entry, "front"), _field(entry, "back")
        if not (front and back):
            continue
        try:
            cards.append(CardContent(front=front, back=back))
        except ValidationError:
            logger.warning(
                f"[FlashcardGenerator] Dropping generated card that does not fit "
                f"(front {len(front)} chars, back {len(back)} chars)"
            )

    if not cards:
        raise ExternalAPIError("No cards were produced from the notes")
    return cards


class FlashcardGenerator:
    """Client for the external content generator."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[AsyncOpenAI] = None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def openai_client(self) -> AsyncOpenAI:
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            if not self.settings.openai_api_key:
                raise ExternalAPIError("OpenAI API key is not configured")
            self._client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.openai_timeout,
            )
        return self._client

    async def generate(self, notes: str) -> List[CardContent]:
        """
        Generate flashcards from notes.

        Raises:
            ExternalAPIError: If the API call fails or the reply is unusable
        """
        logger.info(f"[FlashcardGenerator] Generating flashcards from {len(notes)} chars of notes")

        try:
            response = await self.openai_client.chat.completions.create(
                model=self.settings.openai_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": GENERATION_PROMPT.format(notes=notes)},
                ],
                temperature=GENERATION_TEMPERATURE,
            )
        except OpenAIError as e:
            logger.error(f"[FlashcardGenerator] AI generation failed: {e}")
            raise ExternalAPIError(f"AI service error: {str(e)}")

        if not response.choices:
            raise ExternalAPIError("Empty response from AI")

        cards = parse_generated_cards(response.choices[0].message.content or "")
        logger.info(f"[FlashcardGenerator] Generated {len(cards)} flashcards")
        return cards
