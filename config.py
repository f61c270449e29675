"""
Server configuration loaded from environment variables
"""
import os


def _env_int(name, default):
    return int(os.getenv(name, str(default)))


def _env_float(name, default):
    return float(os.getenv(name, str(default)))


class Config:
    """Runtime settings and fixed game constants"""

    # Supabase
    SUPABASE_URL = os.getenv('SUPABASE_URL', '')
    SUPABASE_KEY = os.getenv('SUPABASE_KEY', '')
    SUPABASE_JWT_SECRET = os.getenv('SUPABASE_JWT_SECRET', '')

    # Where static data and catch records live: "json" or "supabase"
    DATA_BACKEND = os.getenv('DATA_BACKEND', 'json').strip().lower()
    FISH_DATA_FILE = os.getenv('FISH_DATA_FILE', 'fish.json')
    CARDS_DATA_FILE = os.getenv('CARDS_DATA_FILE', 'cards.json')
    HISTORY_FILE = os.getenv('HISTORY_FILE', 'catchHistory.json')
    UNCLAIMED_FILE = os.getenv('UNCLAIMED_FILE', 'unclaimedCatches.json')

    # Game loop
    TICK_INTERVAL_SECONDS = _env_float('TICK_INTERVAL_SECONDS', 30)
    POOL_SAMPLE_SIZE = _env_int('POOL_SAMPLE_SIZE', 900)
    HAND_SIZE = _env_int('HAND_SIZE', 3)
    DECK_SIZE = _env_int('DECK_SIZE', 20)

    # HTTP
    RATE_LIMIT_MAX_REQUESTS = _env_int('RATE_LIMIT_MAX_REQUESTS', 30)
    RATE_LIMIT_WINDOW_SECONDS = _env_int('RATE_LIMIT_WINDOW_SECONDS', 60)
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    PORT = _env_int('PORT', 3000)

    # Fixed game constants
    PHASES = ('dawn', 'day', 'dusk', 'night')
    HOURS_PER_PHASE = 6
    HOURS_PER_DAY = 24
    # Declaration order matters: the depth draw walks this list cumulatively
    DEPTH_WEIGHTS = (
        ('shoals', 80),
        ('shelf', 50),
        ('dropoff', 20),
        ('canyon', 5),
        ('abyss', 0.1),
    )
    EMPTY_SLOT = -1
