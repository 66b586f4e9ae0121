"""
Study mode: a guided pass through the active deck from first card to last.

States: INACTIVE -> ACTIVE (enter) -> INACTIVE (exit)
                    ACTIVE -> ACTIVE (restart, back to the first card)

The session is complete once the last card's answer is showing. What
happens next (restart or exit) is decided by whoever receives the signal.
"""

import logging

from core.cursor import SessionCursor
from utils.constants import StudyState

logger = logging.getLogger(__name__)


class StudySession:
    def __init__(self, cursor: SessionCursor) -> None:
        self.cursor = cursor
        self.state = StudyState.INACTIVE

    @property
    def active(self) -> bool:
        return self.state == StudyState.ACTIVE

    def enter(self) -> bool:
        if not self.cursor.view():
            logger.info("Not starting study mode: the deck is empty")
            return False
        self.state = StudyState.ACTIVE
        self.cursor.reset()
        logger.info(f"Study mode started for deck {self.cursor.deck_id}")
        return True

    def restart(self) -> bool:
        if not self.active:
            return False
        self.cursor.reset()
        logger.info(f"Study mode restarted for deck {self.cursor.deck_id}")
        return True

    def exit(self) -> bool:
        if not self.active:
            return False
        self.state = StudyState.INACTIVE
        logger.info("Study mode ended")
        return True

    def is_complete(self) -> bool:
        return (
            self.active
            and bool(self.cursor.view())
            and self.cursor.is_last()
            and not self.cursor.showing_question
        )

    def progress(self) -> tuple[int, int] | None:
        if not self.active:
            return None
        return self.cursor.index + 1, len(self.cursor.view())
