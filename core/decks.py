import logging
import uuid
from typing import Any

import database.database as db
from core.cards import CardStore
from utils.constants import (
    DECKS, DEFAULT_DECK_ID, DEFAULT_DECK_NAME, DEFAULT_DECK_DESCRIPTION, DECK_NAME_MAX,
)
from utils.errors import ValidationError, ProtectedEntityError
from utils.utils import clean_text, today

logger = logging.getLogger(__name__)


class DeckStore:
    """
    All decks, in insertion order.

    The deck with id 'default' is always present and cannot be deleted.
    Deleting any other deck deletes its cards through the card store.
    """

    def __init__(self, cards: CardStore) -> None:
        self.cards = cards
        self._decks: list[dict[str, Any]] = []

    def load(self) -> None:
        self._decks = [d for d in db.load(DECKS) if d.get('id')]
        self.ensure_default_deck()

    def save(self) -> bool:
        return db.save(DECKS, self._decks)

    def list(self) -> list[dict[str, Any]]:
        return list(self._decks)

    def ids(self) -> set[str]:
        return {d['id'] for d in self._decks}

    def get(self, deck_id: str) -> dict[str, Any] | None:
        for deck in self._decks:
            if deck['id'] == deck_id:
                return deck
        return None

    def exists(self, deck_id: str) -> bool:
        return self.get(deck_id) is not None

    def ensure_default_deck(self) -> None:
        if self.exists(DEFAULT_DECK_ID):
            return

        self._decks.insert(0, {
            'id': DEFAULT_DECK_ID,
            'name': DEFAULT_DECK_NAME,
            'created': today(),
            'description': DEFAULT_DECK_DESCRIPTION,
        })
        logger.info("Created the default deck")
        self.save()

    def create_deck(self, name: str, description: str = '') -> str:
        name = clean_text(name)
        if not name:
            raise ValidationError("Deck name can't be empty.")
        if len(name) > DECK_NAME_MAX:
            raise ValidationError(f"Deck name is too long: {DECK_NAME_MAX} characters max.")

        deck_id = self._new_id()
        self._decks.append({
            'id': deck_id,
            'name': name,
            'created': today(),
            'description': clean_text(description),
        })
        logger.info(f"Created deck {deck_id}: {name}")

        self.save()
        return deck_id

    def delete_deck(self, deck_id: str) -> bool:
        if deck_id == DEFAULT_DECK_ID:
            raise ProtectedEntityError('The default deck cannot be deleted.')

        deck = self.get(deck_id)
        if deck is None:
            return False

        self._decks.remove(deck)
        self.cards.delete_by_deck(deck_id)
        logger.info(f"Deleted deck {deck_id}: {deck['name']}")

        self.save()
        return True

    def _new_id(self) -> str:
        existing = self.ids()
        while True:
            deck_id = f"deck_{uuid.uuid4().hex[:12]}"
            if deck_id not in existing:
                return deck_id
