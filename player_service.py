"""
Player state: hands, decks and the catch waiting for each player
"""
import logging
import random
import threading
import time
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

from config import Config

logger = logging.getLogger(__name__)

# Player `state` values
STATE_IDLE = 1
STATE_CASTING = 2
STATE_CATCH_READY = 3


def hand_contains(hand: Sequence[int], card_indices: Sequence[int]) -> bool:
    """Whether every played card (ignoring empty slots) is in the hand, counting duplicates"""
    needed = Counter(i for i in card_indices if i != Config.EMPTY_SLOT)
    available = Counter(hand or [])
    return all(available[index] >= count for index, count in needed.items())


def random_deck(card_indices: Sequence[int], size: int, rng: Optional[random.Random] = None) -> List[int]:
    """`size` card indices drawn with replacement"""
    if not card_indices:
        return []
    rng = rng or random.Random()
    return [rng.choice(list(card_indices)) for _ in range(size)]


def default_player_state(card_indices: Sequence[int], rng: Optional[random.Random] = None) -> Dict[str, Any]:
    return {
        'active_hand': [Config.EMPTY_SLOT] * Config.HAND_SIZE,
        'hand': random_deck(card_indices, Config.HAND_SIZE, rng),
        'deck_count': Config.DECK_SIZE,
        'deck': random_deck(card_indices, Config.DECK_SIZE, rng),
        'reset_deck': True,
        'madness': 0,
        'state': STATE_IDLE,
        'casts': 0,
        'catch': None,
        'utc_timestamp': int(time.time() * 1000),
    }


class PlayerService:
    """Player rows in the Supabase `players` table, keyed by google_sub"""

    def __init__(self, supabase_client, rng: Optional[random.Random] = None):
        self.supabase = supabase_client
        self.rng = rng or random.Random()

    def get_player(self, player_id: str) -> Optional[Dict]:
        response = self.supabase.table('players')\
            .select('*')\
            .eq('google_sub', player_id)\
            .limit(1)\
            .execute()

        return response.data[0] if response.data else None

    def create_player(self, player_id: str, player_data: Dict) -> Dict:
        logger.info("Creating player %s", player_id)
        response = self.supabase.table('players')\
            .insert({'google_sub': player_id, **player_data})\
            .execute()

        return response.data[0] if response.data else {'google_sub': player_id, **player_data}

    def update_player(self, player_id: str, updates: Dict) -> Optional[Dict]:
        response = self.supabase.table('players')\
            .update(updates)\
            .eq('google_sub', player_id)\
            .execute()

        return response.data[0] if response.data else None

    def get_all_players(self) -> List[Dict]:
        response = self.supabase.table('players').select('*').execute()
        return response.data if response.data else []

    def ensure_player(self, player_id: str, card_indices: Sequence[int]) -> Dict:
        """Fetch the player, creating one with a fresh hand and deck if missing"""
        player = self.get_player(player_id)
        if not player:
            player = self.create_player(player_id, default_player_state(card_indices, self.rng))
        return player

    def mark_cast_pending(self, player_id: str, cast: Sequence[int]):
        player = self.get_player(player_id) or {}
        self.update_player(player_id, {
            'active_hand': list(cast),
            'state': STATE_CASTING,
            'casts': int(player.get('casts') or 0) + 1,
            'utc_timestamp': int(time.time() * 1000),
        })

    def notify_player_has_catch(self, player_id: str, catch_summary: Dict):
        self.update_player(player_id, {
            'catch': catch_summary,
            'state': STATE_CATCH_READY,
            'utc_timestamp': int(time.time() * 1000),
        })

    def clear_catch(self, player_id: str):
        self.update_player(player_id, {
            'catch': None,
            'active_hand': [Config.EMPTY_SLOT] * Config.HAND_SIZE,
            'state': STATE_IDLE,
        })

    def reset_all_decks(self, card_indices: Sequence[int]) -> int:
        """Daily reset: every player gets a fresh deck"""
        players = self.get_all_players()
        for player in players:
            self.update_player(player['google_sub'], {
                'deck': random_deck(card_indices, Config.DECK_SIZE, self.rng),
                'deck_count': Config.DECK_SIZE,
                'reset_deck': True,
            })
        return len(players)


class MemoryPlayerService(PlayerService):
    """Same operations over a dict; used in JSON mode and tests"""

    def __init__(self, rng: Optional[random.Random] = None):
        super().__init__(supabase_client=None, rng=rng)
        self.players: Dict[str, Dict] = {}
        self._lock = threading.Lock()

    def get_player(self, player_id: str) -> Optional[Dict]:
        with self._lock:
            player = self.players.get(player_id)
            return dict(player) if player else None

    def create_player(self, player_id: str, player_data: Dict) -> Dict:
        logger.info("Creating player %s", player_id)
        with self._lock:
            self.players[player_id] = {'google_sub': player_id, **player_data}
            return dict(self.players[player_id])

    def update_player(self, player_id: str, updates: Dict) -> Optional[Dict]:
        with self._lock:
            if player_id not in self.players:
                return None
            self.players[player_id].update(updates)
            return dict(self.players[player_id])

    def get_all_players(self) -> List[Dict]:
        with self._lock:
            return [dict(p) for p in self.players.values()]
