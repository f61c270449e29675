"""Pytest fixtures for the fishing game tests."""

import random

import pytest

from persistence import MemoryCatchStore
from player_service import MemoryPlayerService
from static_data import CardTable, parse_card_table, parse_fish_table

FISH = {
    'salmon': {
        'rarity': 'common',
        'base-catch-rate': 10,
        'depths': ['shoals'],
        'feed-hours': ['day'],
        'min-weight': 1,
        'max-weight': 2,
        'min-length': 10,
        'max-length': 20,
    },
    'boot': {
        'rarity': 'junk',
        'base-catch-rate': 5,
        'depths': ['shoals'],
        'feed-hours': ['day'],
    },
}

CARDS = {
    'Salmon Lure': {'index': 0, 'attract-type': ['salmon'], 'attract-weight': 5},
    'Blood Moon': {'index': 1, 'force-event': ['blood']},
    'Deep Line': {'index': 2, 'depth-force': 'abyss', 'fish-weight': 2},
    'Golden Bait': {'index': 3, 'base-fish-catch-rate': 4},
    'Toxic Spill': {'index': 4, 'force-event': ['toxic']},
}


class FakeStaticData:
    """Static data held in memory"""

    def __init__(self, fish=None, cards=None):
        self.fish = FISH if fish is None else fish
        self.cards = CARDS if cards is None else cards
        self.fish_reads = 0

    def read_fish(self):
        self.fish_reads += 1
        return parse_fish_table(self.fish)

    def read_cards(self) -> CardTable:
        return parse_card_table(self.cards)


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def fish_table():
    return parse_fish_table(FISH)


@pytest.fixture
def card_table():
    return parse_card_table(CARDS)


@pytest.fixture
def static_data():
    return FakeStaticData()


@pytest.fixture
def catch_store():
    return MemoryCatchStore()


@pytest.fixture
def players(seeded_rng):
    return MemoryPlayerService(rng=seeded_rng)


@pytest.fixture
def make_static_data():
    """Build static data from custom fish/card dicts"""
    return FakeStaticData
