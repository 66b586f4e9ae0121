import logging
from typing import Any, Callable

import database.database as db
from utils.constants import CARDS, DEFAULT_DECK_ID
from utils.errors import ValidationError
from utils.utils import clean_text, today

logger = logging.getLogger(__name__)


class CardStore:
    """
    All cards, in insertion order. Each card names its deck by `deckId`.

    `can_delete` is asked before a single card is removed; the app uses it to
    refuse deletions while a study session is running.
    """

    def __init__(self, can_delete: Callable[[], bool] | None = None) -> None:
        self.can_delete = can_delete or (lambda: True)
        self._cards: list[dict[str, Any]] = []
        self._next_id = 1

    def load(self) -> None:
        self._cards = db.load(CARDS)
        self._next_id = max((c['id'] for c in self._cards if isinstance(c.get('id'), int)), default=0) + 1
        for card in self._cards:
            if card.get('id') is None:
                card['id'] = self._next_id
                self._next_id += 1

    def save(self) -> bool:
        return db.save(CARDS, self._cards)

    def all(self) -> list[dict[str, Any]]:
        return list(self._cards)

    def get(self, card_id: int) -> dict[str, Any] | None:
        for card in self._cards:
            if card['id'] == card_id:
                return card
        return None

    def cards_of(self, deck_id: str) -> list[dict[str, Any]]:
        return [c for c in self._cards if c['deckId'] == deck_id]

    def add_card(self, question: str, answer: str, deck_id: str) -> int:
        question = clean_text(question)
        answer = clean_text(answer)
        if not question or not answer:
            raise ValidationError('Please fill in both question and answer!')

        card = {
            'id': self._next_id,
            'question': question,
            'answer': answer,
            'deckId': deck_id,
            'created': today(),
            'timesReviewed': 0,
        }
        self._next_id += 1
        self._cards.append(card)
        logger.info(f"Added card {card['id']} to deck {deck_id}: {question[:30]}")

        self.save()
        return card['id']

    def delete_card(self, card_id: int) -> bool:
        if not self.can_delete():
            logger.info(f"Refused to delete card {card_id}: deletion is disabled")
            return False

        card = self.get(card_id)
        if card is None:
            return False

        self._cards.remove(card)
        logger.info(f"Deleted card {card_id}, remaining cards: {len(self._cards)}")
        self.save()
        return True

    def delete_by_deck(self, deck_id: str) -> int:
        kept = [c for c in self._cards if c['deckId'] != deck_id]
        removed = len(self._cards) - len(kept)
        self._cards = kept
        logger.info(f"Deleted {removed} card(s) of deck {deck_id}")
        self.save()
        return removed

    def record_review(self, card_id: int) -> None:
        card = self.get(card_id)
        if card is None:
            return
        card['timesReviewed'] += 1
        self.save()

    def reassign_orphans(self, deck_ids) -> int:
        """Move cards whose deck no longer exists into the default deck."""
        moved = 0
        for card in self._cards:
            if card['deckId'] not in deck_ids:
                card['deckId'] = DEFAULT_DECK_ID
                moved += 1
        if moved:
            logger.warning(f"Moved {moved} orphaned card(s) to the default deck")
            self.save()
        return moved
