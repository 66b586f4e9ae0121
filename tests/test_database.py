"""
Tests for database/database.py.

Uses a real SQLite file in a pytest tmp_path (the `tdb` fixture in conftest.py)
so every test gets an isolated store.
"""
import json
import sqlite3

import database.database as db


# ── Helpers ───────────────────────────────────────────────────

def _raw(db_path: str, key: str):
    """Read a stored value straight from the test DB."""
    conn = sqlite3.connect(db_path)
    row = conn.execute('SELECT value FROM kv_store WHERE key = ?', (key,)).fetchone()
    conn.close()
    return row[0] if row else None


def _card(card_id=1, question='Q', answer='A', deck_id='default'):
    return {
        'id': card_id,
        'question': question,
        'answer': answer,
        'deckId': deck_id,
        'created': '2024-01-01',
        'timesReviewed': 0,
    }


# ── Raw store ─────────────────────────────────────────────────

class TestRawStore:
    def test_get_missing_returns_none(self, tdb):
        assert db.store_get('nope') is None

    def test_set_then_get(self, tdb):
        db.store_set('k', 'v')
        assert db.store_get('k') == 'v'

    def test_set_overwrites(self, tdb):
        db.store_set('k', 'v1')
        db.store_set('k', 'v2')
        assert db.store_get('k') == 'v2'

    def test_delete(self, tdb):
        db.store_set('k', 'v')
        db.store_delete('k')
        assert db.store_get('k') is None

    def test_storage_key_uses_prefix(self):
        assert db.storage_key('cards') == 'flashlearn-cards'


# ── Save ──────────────────────────────────────────────────────

class TestSave:
    def test_writes_versioned_envelope(self, tdb):
        assert db.save('cards', [_card()]) is True
        data = json.loads(_raw(tdb, 'flashlearn-cards'))
        assert data['version'] == '1.0'
        assert data['cards'] == [_card()]
        assert 'lastModified' in data

    def test_decks_envelope_uses_decks_field(self, tdb):
        db.save('decks', [{'id': 'default', 'name': 'D', 'created': 'x', 'description': ''}])
        data = json.loads(_raw(tdb, 'flashlearn-decks'))
        assert data['decks'][0]['id'] == 'default'

    def test_unserializable_items_are_swallowed(self, tdb):
        assert db.save('cards', [{'id': 1, 'bad': object()}]) is False

    def test_store_failure_is_swallowed(self, tmp_path, monkeypatch):
        monkeypatch.setattr(db, 'DB_PATH', str(tmp_path / 'missing' / 'test.db'))
        assert db.save('cards', [_card()]) is False

    def test_failed_save_keeps_previous_record(self, tdb):
        db.save('cards', [_card()])
        db.save('cards', [{'id': 2, 'bad': object()}])
        assert db.load('cards') == [_card()]


# ── Load ──────────────────────────────────────────────────────

class TestLoad:
    def test_missing_record_is_empty(self, tdb):
        assert db.load('cards') == []

    def test_empty_round_trip(self, tdb):
        db.save('cards', [])
        assert db.load('cards') == []

    def test_populated_round_trip(self, tdb):
        cards = [_card(1, 'Q1', 'A1'), _card(2, 'Q2', 'A2', 'deck_x')]
        cards[1]['timesReviewed'] = 4
        db.save('cards', cards)
        assert db.load('cards') == cards

    def test_decks_round_trip(self, tdb):
        decks = [
            {'id': 'default', 'name': 'Default', 'created': '2024-01-01', 'description': ''},
            {'id': 'deck_1', 'name': 'French', 'created': '2024-01-02', 'description': 'verbs'},
        ]
        db.save('decks', decks)
        assert db.load('decks') == decks

    def test_corrupt_json_is_empty(self, tdb):
        db.store_set('flashlearn-cards', '{not json')
        assert db.load('cards') == []

    def test_unknown_shape_is_empty(self, tdb):
        db.store_set('flashlearn-cards', json.dumps({'foo': 'bar'}))
        assert db.load('cards') == []

    def test_store_failure_is_empty(self, tmp_path, monkeypatch):
        monkeypatch.setattr(db, 'DB_PATH', str(tmp_path / 'missing' / 'test.db'))
        assert db.load('cards') == []


# ── Legacy migration ──────────────────────────────────────────

class TestLegacyCards:
    def test_bare_list_is_upgraded(self, tdb):
        db.store_set('flashlearn-cards', json.dumps([{'id': 1, 'question': 'Q', 'answer': 'A'}]))
        cards = db.load('cards')
        assert len(cards) == 1
        assert cards[0]['timesReviewed'] == 0
        assert cards[0]['created']
        assert cards[0]['deckId'] == 'default'

    def test_existing_fields_are_kept(self, tdb):
        legacy = [{'id': 1, 'question': 'Q', 'answer': 'A', 'timesReviewed': 3, 'created': '1/2/2023'}]
        db.store_set('flashlearn-cards', json.dumps(legacy))
        card = db.load('cards')[0]
        assert card['timesReviewed'] == 3
        assert card['created'] == '1/2/2023'

    def test_envelope_cards_without_deck_go_to_default(self, tdb):
        envelope = {'version': '1.0', 'cards': [{'id': 5, 'question': 'Q', 'answer': 'A'}]}
        db.store_set('flashlearn-cards', json.dumps(envelope))
        assert db.load('cards')[0]['deckId'] == 'default'

    def test_bare_list_not_accepted_for_decks(self, tdb):
        db.store_set('flashlearn-decks', json.dumps([{'id': 'default', 'name': 'D'}]))
        assert db.load('decks') == []

    def test_bad_review_counts_become_non_negative_ints(self, tdb):
        envelope = {'version': '1.0', 'cards': [
            {'id': 1, 'question': 'Q', 'answer': 'A', 'timesReviewed': '4'},
            {'id': 2, 'question': 'Q', 'answer': 'A', 'timesReviewed': 'lots'},
            {'id': 3, 'question': 'Q', 'answer': 'A', 'timesReviewed': -2},
        ]}
        db.store_set('flashlearn-cards', json.dumps(envelope))
        assert [c['timesReviewed'] for c in db.load('cards')] == [4, 0, 0]


# ── Deck records ──────────────────────────────────────────────

class TestDeckRecords:
    def test_missing_fields_are_filled(self, tdb):
        db.store_set('flashlearn-decks', json.dumps({'version': '1.0', 'decks': [{'id': 'x'}]}))
        deck = db.load('decks')[0]
        assert deck['name'] == 'x'
        assert deck['description'] == ''
        assert deck['created']

    def test_last_modified_is_utc(self, tdb):
        db.save('decks', [])
        data = json.loads(_raw(tdb, 'flashlearn-decks'))
        assert data['lastModified'].endswith('+00:00')
