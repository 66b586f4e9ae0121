from typing import Any

from core.cards import CardStore
from core.decks import DeckStore
from utils.constants import DEFAULT_DECK_ID


class SessionCursor:
    """
    Which deck is active, which card of that deck is shown and which face.

    `index` always points into cards_of(deck_id), the per-deck view, and is
    0 when that view is empty. Every bounds check goes through the view.
    """

    def __init__(self, cards: CardStore, decks: DeckStore) -> None:
        self.cards = cards
        self.decks = decks
        self.deck_id = DEFAULT_DECK_ID
        self.index = 0
        self.showing_question = True

    def view(self) -> list[dict[str, Any]]:
        return self.cards.cards_of(self.deck_id)

    def current_card(self) -> dict[str, Any] | None:
        view = self.view()
        if not view:
            return None
        return view[self.index]

    def reset(self) -> None:
        self.index = 0
        self.showing_question = True

    def select_deck(self, deck_id: str) -> bool:
        if not self.decks.exists(deck_id):
            return False
        self.deck_id = deck_id
        self.reset()
        return True

    def jump_to(self, index: int) -> None:
        self.index = index
        self.showing_question = True
        self.clamp()

    def next(self) -> bool:
        if self.index < len(self.view()) - 1:
            self.index += 1
            self.showing_question = True
            return True
        return False

    def previous(self) -> bool:
        if self.index > 0:
            self.index -= 1
            self.showing_question = True
            return True
        return False

    def flip(self) -> bool:
        """Toggle the face. Records a review when the answer comes up."""
        card = self.current_card()
        if card is None:
            return False

        self.showing_question = not self.showing_question
        if not self.showing_question:
            self.cards.record_review(card['id'])
        return True

    def clamp(self) -> None:
        size = len(self.view())
        if self.index >= size:
            self.index = max(0, size - 1)
        if self.index < 0:
            self.index = 0

    def is_last(self) -> bool:
        return self.index == len(self.view()) - 1

    def controls(self) -> dict[str, bool]:
        size = len(self.view())
        has_cards = size > 0
        return {
            'previous': has_cards and self.index > 0,
            'next': has_cards and self.index < size - 1,
            'flip': has_cards,
            'delete': has_cards,
        }
