"""Tests for catch storage."""

import json
from unittest.mock import MagicMock

from models import CatchRecord, FishDefinition
from persistence import JsonCatchStore, SupabaseCatchStore, record_from_dict


def make_record(player_id='p1', timestamp=1000.0, rarity='common'):
    stats = FishDefinition(key='salmon', rarity=rarity, base_catch_rate=10, feed_hours=('day',),
                           min_weight=1, max_weight=2, min_length=10, max_length=20,
                           event_variations={'blood': 2})
    return CatchRecord(player_id=player_id, cast=[0, -1, -1], depth='shoals', fish_type='salmon',
                       fish_stats=stats, event='blood', phase='day', weight=1.5, length=12.25,
                       timestamp=timestamp)


class TestJsonCatchStore:
    """Tests for the JSON file store."""

    def test_history_appends(self, tmp_path):
        store = JsonCatchStore(str(tmp_path / 'history.json'), str(tmp_path / 'unclaimed.json'))
        store.persist_history(make_record('a'))
        store.persist_history(make_record('b'))

        rows = json.loads((tmp_path / 'history.json').read_text())
        assert [r['player_id'] for r in rows] == ['a', 'b']
        assert rows[0]['catch']['type'] == 'salmon'
        assert rows[0]['catch']['stats']['event-variations'] == [{'event': 'blood', 'multiplier': 2}]

    def test_unclaimed_round_trip(self, tmp_path):
        store = JsonCatchStore(str(tmp_path / 'history.json'), str(tmp_path / 'unclaimed.json'))
        first, second = make_record('a', 1.0), make_record('b', 2.0)
        store.persist_unclaimed(first)
        store.persist_unclaimed(second)

        store.remove_unclaimed(first)

        rows = store.load_unclaimed()
        assert [r['player_id'] for r in rows] == ['b']
        assert not (tmp_path / 'history.json').exists()

    def test_missing_file_loads_empty(self, tmp_path):
        store = JsonCatchStore(str(tmp_path / 'h.json'), str(tmp_path / 'u.json'))
        assert store.load_unclaimed() == []


class TestSupabaseCatchStore:
    """Tests for the Supabase store against a mocked client."""

    def test_inserts_rows(self):
        client = MagicMock()
        store = SupabaseCatchStore(client)

        store.persist_history(make_record())

        client.table.assert_called_with('catch_history')
        row = client.table.return_value.insert.call_args[0][0]
        assert row['player_id'] == 'p1'
        assert row['fish_type'] == 'salmon'
        assert row['data']['weight'] == 1.5

    def test_load_unclaimed(self):
        client = MagicMock()
        stored = make_record().to_dict()
        client.table.return_value.select.return_value.order.return_value.execute.return_value.data = [
            {'data': stored},
        ]

        assert SupabaseCatchStore(client).load_unclaimed() == [stored]
        client.table.assert_called_with('unclaimed_catches')


def test_record_from_dict_rebuilds_record():
    record = make_record()
    rebuilt = record_from_dict(json.loads(json.dumps(record.to_dict())))

    assert rebuilt.player_id == record.player_id
    assert rebuilt.fish_stats.event_variations == {'blood': 2}
    assert rebuilt.fish_stats.feed_hours == ('day',)
    assert rebuilt.weight == 1.5
    assert rebuilt.summary() == record.summary()
