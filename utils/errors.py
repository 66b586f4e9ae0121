class FlashcardError(Exception):
    """Base class for errors raised by the flashcard core."""


class ValidationError(FlashcardError):
    """Required text is missing or malformed. Nothing was changed."""


class ProtectedEntityError(FlashcardError):
    """Attempt to delete something that must always exist (the default deck)."""


class PersistenceError(FlashcardError):
    """The durable store could not be read or written."""
