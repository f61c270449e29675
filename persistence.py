"""
Catch history and unclaimed catch storage
"""
import json
import os
import threading
from typing import Any, Dict, List

from models import CatchRecord, FishDefinition


class JsonCatchStore:
    """Keeps catchHistory.json and unclaimedCatches.json in step with the game loop"""

    def __init__(self, history_file: str, unclaimed_file: str):
        self.history_file = history_file
        self.unclaimed_file = unclaimed_file
        self._lock = threading.Lock()

    def _load(self, path: str) -> List[Dict[str, Any]]:
        if not os.path.exists(path):
            return []
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return data if isinstance(data, list) else []

    def _dump(self, path: str, rows: List[Dict[str, Any]]):
        tmp_path = f"{path}.tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(rows, f, indent=2)
        os.replace(tmp_path, path)

    def persist_history(self, record: CatchRecord):
        with self._lock:
            rows = self._load(self.history_file)
            rows.append(record.to_dict())
            self._dump(self.history_file, rows)

    def persist_unclaimed(self, record: CatchRecord):
        with self._lock:
            rows = self._load(self.unclaimed_file)
            rows.append(record.to_dict())
            self._dump(self.unclaimed_file, rows)

    def remove_unclaimed(self, record: CatchRecord):
        """Drop the first stored row matching this player and timestamp"""
        with self._lock:
            rows = self._load(self.unclaimed_file)
            for i, row in enumerate(rows):
                if row.get('player_id') == record.player_id and row.get('timestamp') == record.timestamp:
                    del rows[i]
                    break
            self._dump(self.unclaimed_file, rows)

    def load_unclaimed(self) -> List[Dict[str, Any]]:
        with self._lock:
            return self._load(self.unclaimed_file)


class SupabaseCatchStore:
    """Writes catch rows to Supabase tables"""

    def __init__(self, supabase_client, history_table: str = 'catch_history',
                 unclaimed_table: str = 'unclaimed_catches'):
        self.supabase = supabase_client
        self.history_table = history_table
        self.unclaimed_table = unclaimed_table

    @staticmethod
    def _row(record: CatchRecord) -> Dict[str, Any]:
        row = record.to_dict()
        return {
            'player_id': row['player_id'],
            'fish_type': row['catch']['type'],
            'data': row,
            'timestamp': row['timestamp'],
        }

    def persist_history(self, record: CatchRecord):
        self.supabase.table(self.history_table).insert(self._row(record)).execute()

    def persist_unclaimed(self, record: CatchRecord):
        self.supabase.table(self.unclaimed_table).insert(self._row(record)).execute()

    def remove_unclaimed(self, record: CatchRecord):
        self.supabase.table(self.unclaimed_table)\
            .delete()\
            .eq('player_id', record.player_id)\
            .eq('timestamp', record.timestamp)\
            .execute()

    def load_unclaimed(self) -> List[Dict[str, Any]]:
        response = self.supabase.table(self.unclaimed_table)\
            .select('data')\
            .order('timestamp')\
            .execute()
        return [row['data'] for row in response.data or []]


class MemoryCatchStore:
    """Keeps rows in lists; used when nothing should touch disk"""

    def __init__(self):
        self.history: List[Dict[str, Any]] = []
        self.unclaimed: List[Dict[str, Any]] = []

    def persist_history(self, record: CatchRecord):
        self.history.append(record.to_dict())

    def persist_unclaimed(self, record: CatchRecord):
        self.unclaimed.append(record.to_dict())

    def remove_unclaimed(self, record: CatchRecord):
        for i, row in enumerate(self.unclaimed):
            if row['player_id'] == record.player_id and row['timestamp'] == record.timestamp:
                del self.unclaimed[i]
                break

    def load_unclaimed(self) -> List[Dict[str, Any]]:
        return list(self.unclaimed)


def record_from_dict(row: Dict[str, Any]) -> CatchRecord:
    """Rebuild a CatchRecord from its stored dict"""
    catch = row['catch']
    return CatchRecord(
        player_id=row['player_id'],
        cast=list(row.get('cast') or []),
        depth=row.get('depth'),
        fish_type=catch['type'],
        fish_stats=FishDefinition.from_dict(catch['type'], catch.get('stats') or {}),
        event=row.get('event'),
        phase=row.get('phase'),
        weight=row.get('weight'),
        length=row.get('length'),
        timestamp=row.get('timestamp'),
    )
