from enum import auto, IntEnum

STORAGE_VERSION = '1.0'
CARDS = 'cards'
DECKS = 'decks'

DEFAULT_DECK_ID = 'default'
DEFAULT_DECK_NAME = 'Default Deck'
DEFAULT_DECK_DESCRIPTION = 'Cards that are not filed under any other deck'
DECK_NAME_MAX = 50

QUESTION_LABEL = 'Question'
ANSWER_LABEL = 'Answer'
EMPTY_DECK_TEXT = 'Create your first flashcard to get started!'
NO_CARDS_LABEL = 'No cards available'

DELETE_CARD_PROMPT = 'Are you sure you want to delete this card?\n\n"{question}"'
DELETE_DECK_PROMPT = 'Delete deck "{name}" and its {count} card(s)?'
STUDY_COMPLETE_PROMPT = 'You reached the end of "{name}". Study it again?'
PROMPT_QUESTION_MAX = 50

AUTOSAVE_JOB_ID = 'flashlearn_autosave'


class StudyState(IntEnum):
    INACTIVE = auto()
    ACTIVE = auto()
