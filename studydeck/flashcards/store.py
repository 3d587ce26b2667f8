"""
Deck store - Data Access Layer for decks.
Persists one JSON record per deck under an explicit root directory.
The file name is the sanitized deck name.
"""

import hashlib
import logging
import re
from pathlib import Path
from typing import Set, Union

from pydantic import ValidationError

from studydeck.flashcards.models import Deck

logger = logging.getLogger(__name__)

RECORD_SUFFIX = ".json"
PLACEHOLDER = "_"

# File names are limited to 255 bytes; leave room for the suffix
MAX_KEY_BYTES = 200
DIGEST_LENGTH = 16

# Characters that cannot appear in a file name on common platforms
_ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def _cap_length(key: str) -> str:
    """Truncate an over-long key on a character boundary and append a digest of the full key."""
    encoded = key.encode("utf-8")
    if len(encoded) <= MAX_KEY_BYTES:
        return key

    digest = hashlib.sha256(encoded).hexdigest()[:DIGEST_LENGTH]
    budget = MAX_KEY_BYTES - len(PLACEHOLDER) - DIGEST_LENGTH
    head = encoded[:budget].decode("utf-8", errors="ignore")
    return f"{head}{PLACEHOLDER}{digest}"


def sanitize(name: str) -> str:
    """
    Map a deck name to a safe storage key.

    Illegal characters become ``_``. A key that is empty or made only of
    dots is replaced with underscores so it can never address the root or
    its parent. Keys longer than MAX_KEY_BYTES of UTF-8 are truncated and
    suffixed with a digest of the full key, so distinct long names keep
    distinct records. Idempotent: ``sanitize(sanitize(x)) == sanitize(x)``.
    """
    key = _ILLEGAL_CHARS.sub(PLACEHOLDER, name)
    if not key.strip("."):
        key = PLACEHOLDER * max(1, len(key))
    return _cap_length(key)


class DeckStore:
    """
    File-backed store mapping deck names to Deck records.

    Not safe against concurrent writers: the last save wins.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def deck_path(self, name: str) -> Path:
        """Path of the record for ``name``."""
        return self.root / f"{sanitize(name)}{RECORD_SUFFIX}"

    def list_deck_names(self) -> Set[str]:
        """
        Enumerate all persisted decks.

        Returns:
            Set of storage keys (sanitized names), unordered
        """
        return {path.stem for path in self.root.glob(f"*{RECORD_SUFFIX}") if path.is_file()}

    def load(self, name: str) -> Deck:
        """
        Load the deck for ``name``.

        A missing record yields a new empty deck. A record that fails to
        parse also yields a new empty deck; the next save overwrites it.

        Raises:
            OSError: If the record exists but cannot be read
        """
        path = self.deck_path(name)
        if not path.is_file():
            return Deck(name=name)

        raw = path.read_bytes()
        try:
            return Deck.model_validate_json(raw)
        except (ValidationError, UnicodeDecodeError) as e:
            logger.warning(
                f"[DeckStore] Corrupt record for deck '{name}' at {path}, "
                f"falling back to empty deck: {e}"
            )
            return Deck(name=name)

    def save(self, deck: Deck) -> None:
        """
        Write the full deck record, overwriting any prior one.

        Raises:
            OSError: If the record cannot be written
        """
        path = self.deck_path(deck.name)
        path.write_text(
            deck.model_dump_json(by_alias=True, indent=2),
            encoding="utf-8",
        )
        logger.info(f"[DeckStore] Saved deck: {deck.name} ({len(deck.cards)} cards) to {path.name}")
