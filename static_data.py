"""
Static fish and card data, read from JSON files or Supabase tables
"""
import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from models import CardDefinition, FishDefinition

logger = logging.getLogger(__name__)


class CardTable:
    """Cards by name, plus the index -> name map used to decode casts"""

    def __init__(self, cards: Dict[str, CardDefinition]):
        self._cards = dict(cards)
        self._index_to_name: Dict[int, str] = {}
        for name, card in self._cards.items():
            if card.index is None:
                continue
            # First card declared with an index keeps it
            self._index_to_name.setdefault(card.index, name)

    def __len__(self) -> int:
        return len(self._cards)

    def get(self, name: str) -> Optional[CardDefinition]:
        return self._cards.get(name)

    def name_for_index(self, index: int) -> Optional[str]:
        return self._index_to_name.get(index)

    def by_index(self, index: int) -> Optional[CardDefinition]:
        name = self._index_to_name.get(index)
        return self._cards.get(name) if name is not None else None

    def indices(self) -> List[int]:
        return list(self._index_to_name)


def parse_fish_table(raw: Dict[str, Any]) -> Dict[str, FishDefinition]:
    """Parse {species: {...}}, skipping entries that do not parse"""
    fish: Dict[str, FishDefinition] = {}
    for key, data in (raw or {}).items():
        try:
            fish[key] = FishDefinition.from_dict(key, data)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping malformed fish entry %r: %s", key, e)
    return fish


def parse_card_table(raw: Dict[str, Any]) -> CardTable:
    """Parse {name: {...}}, skipping entries that do not parse"""
    cards: Dict[str, CardDefinition] = {}
    for name, data in (raw or {}).items():
        try:
            cards[name] = CardDefinition.from_dict(name, data)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping malformed card entry %r: %s", name, e)
    table = CardTable(cards)
    logger.debug("Parsed %d cards, %d with an index", len(table), len(table.indices()))
    return table


class JsonStaticData:
    """Reads fish.json / cards.json fresh on every call so balance edits apply without a restart"""

    def __init__(self, fish_file: str, cards_file: str):
        self.fish_file = fish_file
        self.cards_file = cards_file

    def _read(self, path: str, root_key: str) -> Dict[str, Any]:
        # A missing file reads as empty
        if not os.path.exists(path):
            logger.warning("Static data file %s not found", path)
            return {}
        with open(path, 'r', encoding='utf-8') as f:
            document = json.load(f)
        return document.get(root_key) or {}

    def read_fish(self) -> Dict[str, FishDefinition]:
        return parse_fish_table(self._read(self.fish_file, 'fish'))

    def read_cards(self) -> CardTable:
        return parse_card_table(self._read(self.cards_file, 'cards'))


class SupabaseStaticData:
    """Reads fish and card rows (name + data JSON) from Supabase"""

    def __init__(self, supabase_client, fish_table: str = 'fish_species', cards_table: str = 'cards'):
        self.supabase = supabase_client
        self.fish_table = fish_table
        self.cards_table = cards_table

    def _rows(self, table: str) -> List[Tuple[str, Dict[str, Any]]]:
        response = self.supabase.table(table).select('name, data').execute()
        rows = []
        for row in response.data or []:
            rows.append((row['name'], row.get('data') or {}))
        return rows

    def read_fish(self) -> Dict[str, FishDefinition]:
        return parse_fish_table(dict(self._rows(self.fish_table)))

    def read_cards(self) -> CardTable:
        return parse_card_table(dict(self._rows(self.cards_table)))
