"""
FlashcardApp owns the whole study state: cards, decks, the cursor and the
study session. A UI calls the entry points below and then re-renders from
get_visible_state().

Confirmation prompts (deleting, restarting a finished session) go through the
`confirm` callback handed in by the UI, so the decisions can be driven from
tests without a screen. A finished study session is only flagged in the
visible state; the UI renders the last answer first and then calls
finish_study() to ask whether to go again.
"""

import logging
import threading
from functools import wraps
from typing import Any, Callable

from apscheduler.schedulers.background import BackgroundScheduler

import config
import database.database as db
from core.cards import CardStore
from core.cursor import SessionCursor
from core.decks import DeckStore
from core.study import StudySession
from utils.constants import (
    DEFAULT_DECK_ID, QUESTION_LABEL, ANSWER_LABEL, EMPTY_DECK_TEXT, NO_CARDS_LABEL,
    DELETE_CARD_PROMPT, DELETE_DECK_PROMPT, STUDY_COMPLETE_PROMPT, PROMPT_QUESTION_MAX,
    AUTOSAVE_JOB_ID,
)
from utils.errors import ValidationError
from utils.utils import truncate

logger = logging.getLogger(__name__)


def _always_confirm(message: str) -> bool:
    return True


def _locked(method):
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class FlashcardApp:
    def __init__(
        self,
        confirm: Callable[[str], bool] | None = None,
        autosave_interval: float | None = None,
    ) -> None:
        self.confirm = confirm or _always_confirm
        self.cards = CardStore(can_delete=lambda: not self.study.active)
        self.decks = DeckStore(self.cards)
        self.cursor = SessionCursor(self.cards, self.decks)
        self.study = StudySession(self.cursor)

        self._lock = threading.RLock()
        self.autosave_interval = config.AUTOSAVE_INTERVAL if autosave_interval is None else autosave_interval
        self.scheduler = BackgroundScheduler(daemon=True)

    # ── Lifecycle ─────────────────────────────────────────────

    @_locked
    def init(self, autosave: bool = True) -> None:
        db.init_db()
        self.cards.load()
        self.decks.load()
        self.cards.reassign_orphans(self.decks.ids())

        self.cursor.select_deck(DEFAULT_DECK_ID)
        logger.info(
            f"FlashLearn initialised with {len(self.cards.all())} card(s) "
            f"in {len(self.decks.list())} deck(s)"
        )
        if autosave:
            self.scheduler.add_job(
                id=AUTOSAVE_JOB_ID,
                func=self.save_all,
                trigger='interval',
                seconds=self.autosave_interval,
                replace_existing=True,
            )
            if not self.scheduler.running:
                self.scheduler.start()
            logger.info(f"Autosave every {self.autosave_interval}s")

    def teardown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self.save_all()

    @_locked
    def save_all(self) -> None:
        self.cards.save()
        self.decks.save()

    # ── Cards ─────────────────────────────────────────────────

    @_locked
    def add_card(self, question: str, answer: str, deck_id: str | None = None) -> int:
        deck_id = deck_id or self.cursor.deck_id
        if not self.decks.exists(deck_id):
            raise ValidationError(f"Unknown deck: {deck_id}")

        card_id = self.cards.add_card(question, answer, deck_id)

        if deck_id == self.cursor.deck_id and not self.study.active:
            self.cursor.jump_to(len(self.cursor.view()) - 1)
        return card_id

    @_locked
    def delete_card(self, card_id: int | None = None) -> bool:
        """Delete a card (the current one by default) after confirmation."""
        if self.study.active:
            logger.info("Card deletion is disabled during study mode")
            return False

        card = self.cursor.current_card() if card_id is None else self.cards.get(card_id)
        if card is None:
            return False

        question = truncate(card['question'], PROMPT_QUESTION_MAX)
        if not self.confirm(DELETE_CARD_PROMPT.format(question=question)):
            return False

        view = self.cursor.view()
        position = view.index(card) if card in view else None
        self.cards.delete_card(card['id'])

        if position is not None:
            if position < self.cursor.index:
                self.cursor.index -= 1
            self.cursor.showing_question = True
        self.cursor.clamp()
        return True

    # ── Navigation ────────────────────────────────────────────

    @_locked
    def next(self) -> bool:
        return self.cursor.next()

    @_locked
    def previous(self) -> bool:
        return self.cursor.previous()

    @_locked
    def flip(self) -> bool:
        flipped = self.cursor.flip()
        if self.study.is_complete():
            logger.info(f"Study session complete for deck {self.cursor.deck_id}")
        return flipped

    # ── Decks ─────────────────────────────────────────────────

    @_locked
    def select_deck(self, deck_id: str) -> bool:
        if not self.decks.exists(deck_id):
            return False
        self.study.exit()
        return self.cursor.select_deck(deck_id)

    @_locked
    def create_deck(self, name: str, description: str = '') -> str:
        return self.decks.create_deck(name, description)

    @_locked
    def delete_deck(self, deck_id: str) -> bool:
        """Delete a deck and its cards, then fall back to the default deck."""
        if deck_id == DEFAULT_DECK_ID:
            return self.decks.delete_deck(deck_id)

        deck = self.decks.get(deck_id)
        if deck is None:
            return False

        prompt = DELETE_DECK_PROMPT.format(name=deck['name'], count=len(self.cards.cards_of(deck_id)))
        if not self.confirm(prompt):
            return False

        self.decks.delete_deck(deck_id)
        self.select_deck(DEFAULT_DECK_ID)
        return True

    # ── Study mode ────────────────────────────────────────────

    @_locked
    def enter_study(self) -> bool:
        return self.study.enter()

    @_locked
    def exit_study(self) -> bool:
        return self.study.exit()

    @_locked
    def restart_study(self) -> bool:
        return self.study.restart()

    @_locked
    def finish_study(self) -> bool:
        """
        Ask whether to go through a finished deck again.

        Called by the UI once the last answer has been shown. Yes restarts the
        session from the first card, no leaves study mode. Returns False when
        the session is not complete.
        """
        if not self.study.is_complete():
            return False

        deck = self.decks.get(self.cursor.deck_id)
        if self.confirm(STUDY_COMPLETE_PROMPT.format(name=deck['name'])):
            self.study.restart()
        else:
            self.study.exit()
        return True

    # ── Observable state ──────────────────────────────────────

    @_locked
    def get_visible_state(self) -> dict[str, Any]:
        view = self.cursor.view()
        card = self.cursor.current_card()
        buttons = self.cursor.controls()
        if self.study.active:
            buttons['delete'] = False

        deck_list = [
            {'id': d['id'], 'name': d['name'], 'card_count': len(self.cards.cards_of(d['id']))}
            for d in self.decks.list()
        ]

        progress = self.study.progress()
        progress_label = f"Studying: {progress[0]} / {progress[1]}" if progress else None
        study_complete = self.study.is_complete()

        if card is None:
            return {
                'card_text': EMPTY_DECK_TEXT,
                'face_label': None,
                'position_label': NO_CARDS_LABEL,
                'deck_list': deck_list,
                'active_deck_id': self.cursor.deck_id,
                'is_study_active': self.study.active,
                'study_complete': study_complete,
                'progress_label': progress_label,
                'buttons': buttons,
            }

        face = QUESTION_LABEL if self.cursor.showing_question else ANSWER_LABEL
        return {
            'card_text': card['question'] if self.cursor.showing_question else card['answer'],
            'face_label': face,
            'position_label': f"Card {self.cursor.index + 1} of {len(view)} ({face})",
            'deck_list': deck_list,
            'active_deck_id': self.cursor.deck_id,
            'is_study_active': self.study.active,
            'study_complete': study_complete,
            'progress_label': progress_label,
            'buttons': buttons,
        }
