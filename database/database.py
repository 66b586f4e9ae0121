import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Any

from database.schema import kv_schema
from config import DB_PATH, STORAGE_PREFIX
from utils.constants import STORAGE_VERSION, CARDS, DECKS, DEFAULT_DECK_ID
from utils.errors import PersistenceError
from utils.utils import today, now


# RAW STORE ==================================================

def store_get(key):
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT value FROM kv_store WHERE key = ?', (key,))
            row = cursor.fetchone()
            if row:
                return row['value']
            return None
    except sqlite3.Error as e:
        raise PersistenceError(f"Could not read {key!r}: {e}") from e


def store_set(key, value):
    try:
        with get_db() as conn:
            conn.execute(
                """INSERT INTO kv_store (key, value, updated_at)
                   VALUES (?, ?, datetime('now'))
                   ON CONFLICT(key) DO UPDATE
                   SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value)
            )
    except sqlite3.Error as e:
        raise PersistenceError(f"Could not write {key!r}: {e}") from e


def store_delete(key):
    try:
        with get_db() as conn:
            conn.execute('DELETE FROM kv_store WHERE key = ?', (key,))
    except sqlite3.Error as e:
        raise PersistenceError(f"Could not delete {key!r}: {e}") from e


def storage_key(collection):
    return f"{STORAGE_PREFIX}-{collection}"


# COLLECTIONS ================================================

def save(collection: str, items: list[dict[str, Any]]) -> bool:
    """
    Write a collection inside a versioned envelope.

    Never raises: on failure the error is logged and the in-memory copy stays
    the source of truth until the next successful save.
    """
    envelope = {
        'version': STORAGE_VERSION,
        collection: items,
        'lastModified': now(),
    }
    try:
        store_set(storage_key(collection), json.dumps(envelope, ensure_ascii=False))
    except PersistenceError as e:
        logging.error(f"Failed to save {collection}: {e}")
        return False
    except (TypeError, ValueError) as e:
        logging.error(f"Failed to serialize {collection}: {e}")
        return False

    logging.info(f"Saved {len(items)} {collection}")
    return True


def load(collection: str) -> list[dict[str, Any]]:
    """
    Read a collection, returning [] when it is missing or unreadable.

    Accepts {'version': ..., '<collection>': [...]} for every collection and,
    for cards only, the legacy bare list written before envelopes existed.
    """
    try:
        raw = store_get(storage_key(collection))
    except PersistenceError as e:
        logging.error(f"Failed to load {collection}: {e}")
        return []

    if raw is None:
        logging.info(f"No saved {collection} found, starting fresh")
        return []

    try:
        data = json.loads(raw)
    except ValueError as e:
        logging.error(f"Stored {collection} are corrupt, starting fresh: {e}")
        return []

    if isinstance(data, list) and collection == CARDS:
        logging.info("Migrating cards from the legacy list format")
        items = data
    elif isinstance(data, dict) and data.get('version') and isinstance(data.get(collection), list):
        items = data[collection]
    else:
        logging.warning(f"Unrecognised format for stored {collection}, ignoring it")
        return []

    items = [item for item in items if isinstance(item, dict)]
    if collection == CARDS:
        items = [upgrade_card(card) for card in items]
    elif collection == DECKS:
        items = [upgrade_deck(deck) for deck in items]

    logging.info(f"Loaded {len(items)} {collection}")
    return items


def upgrade_card(card: dict[str, Any]) -> dict[str, Any]:
    """Fill in fields that older saves did not have."""
    upgraded = dict(card)
    upgraded['question'] = card.get('question') or ''
    upgraded['answer'] = card.get('answer') or ''
    upgraded['timesReviewed'] = _review_count(card.get('timesReviewed'))
    upgraded['created'] = card.get('created') or today()
    upgraded['deckId'] = card.get('deckId') or DEFAULT_DECK_ID
    return upgraded


def upgrade_deck(deck: dict[str, Any]) -> dict[str, Any]:
    upgraded = dict(deck)
    upgraded['name'] = str(deck.get('name') or deck.get('id') or '')
    upgraded['description'] = deck.get('description') or ''
    upgraded['created'] = deck.get('created') or today()
    return upgraded


def _review_count(value):
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


# DB CONNECTION ==============================================

@contextmanager
def get_db():
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row

    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db():
    try:
        with get_db() as conn:
            conn.execute(kv_schema)
    except sqlite3.Error as e:
        logging.error(f"Could not initialise store at {DB_PATH}: {e}")
