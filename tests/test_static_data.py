"""Tests for static fish and card data loading."""

import json
from unittest.mock import MagicMock

from static_data import (
    CardTable,
    JsonStaticData,
    SupabaseStaticData,
    parse_card_table,
    parse_fish_table,
)
from models import CardDefinition


def write_json(path, document):
    path.write_text(json.dumps(document))
    return str(path)


class TestParsing:
    """Tests for the JSON shape parsers."""

    def test_fish_fields(self):
        table = parse_fish_table({
            'eel': {
                'rarity': 'rare',
                'base-catch-rate': '2.5',
                'depths': ['canyon'],
                'feed-hours': ['night'],
                'only-active-events': ['toxic'],
                'event-variations': [{'event': 'toxic', 'multiplier': 4}, {'event': 'blood'}],
                'min-weight': 1, 'max-weight': 3, 'min-length': 20, 'max-length': 40,
            },
        })

        eel = table['eel']
        assert eel.base_catch_rate == 2.5
        assert eel.feed_hours == ('night',)
        assert eel.only_active_events == ('toxic',)
        assert eel.event_variations == {'toxic': 4}
        assert eel.event_multiplier('toxic') == 4
        assert eel.event_multiplier('blood') == 1
        assert eel.event_multiplier(None) == 1

    def test_malformed_fish_skipped(self):
        table = parse_fish_table({
            'good': {'rarity': 'common', 'base-catch-rate': 1},
            'bad': {'rarity': 'common', 'base-catch-rate': 'lots'},
            'worse': 'not a dict',
        })
        assert list(table) == ['good']

    def test_card_fields(self):
        cards = parse_card_table({
            'Lure': {'index': 4, 'attract-type': 'eel', 'attract-weight': 2, 'base-fish-catch-rate': 3},
            'Unindexed': {'index': 'seven', 'force-event': ['blood']},
        })

        lure = cards.get('Lure')
        assert lure.attract_types == ('eel',)
        assert lure.attract_weight == 2
        assert lure.base_fish_catch_rate == 3
        assert cards.get('Unindexed').index is None
        assert cards.indices() == [4]


class TestCardTable:
    """Tests for the index map."""

    def test_first_card_keeps_index(self):
        table = CardTable({
            'A': CardDefinition(name='A', index=1),
            'B': CardDefinition(name='B', index=1),
            'C': CardDefinition(name='C', index=2),
        })

        assert table.name_for_index(1) == 'A'
        assert table.by_index(2).name == 'C'
        assert table.by_index(9) is None
        assert len(table) == 3
        assert table.get('B').index == 1


class TestJsonStaticData:
    """Tests for the JSON file store."""

    def test_reads_files(self, tmp_path):
        fish_file = write_json(tmp_path / 'fish.json', {'fish': {'carp': {'rarity': 'common', 'base-catch-rate': 3}}})
        cards_file = write_json(tmp_path / 'cards.json', {'cards': {'Lure': {'index': 0}}})
        store = JsonStaticData(fish_file, cards_file)

        assert store.read_fish()['carp'].base_catch_rate == 3
        assert store.read_cards().name_for_index(0) == 'Lure'

    def test_reads_fresh_each_time(self, tmp_path):
        fish_path = tmp_path / 'fish.json'
        write_json(fish_path, {'fish': {'carp': {'base-catch-rate': 3}}})
        store = JsonStaticData(str(fish_path), str(tmp_path / 'cards.json'))
        assert store.read_fish()['carp'].base_catch_rate == 3

        write_json(fish_path, {'fish': {'carp': {'base-catch-rate': 9}}})
        assert store.read_fish()['carp'].base_catch_rate == 9

    def test_missing_files_read_empty(self, tmp_path):
        store = JsonStaticData(str(tmp_path / 'nope.json'), str(tmp_path / 'nada.json'))
        assert store.read_fish() == {}
        assert len(store.read_cards()) == 0


class TestSupabaseStaticData:
    """Tests for the Supabase-backed store."""

    def test_reads_rows(self):
        client = MagicMock()
        client.table.return_value.select.return_value.execute.return_value.data = [
            {'name': 'carp', 'data': {'rarity': 'common', 'base-catch-rate': 2, 'feed-hours': ['dawn']}},
        ]

        fish = SupabaseStaticData(client).read_fish()

        client.table.assert_called_with('fish_species')
        assert fish['carp'].feed_hours == ('dawn',)
