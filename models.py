"""
Data models for the Fishing Game
"""
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

JUNK = 'junk'


class CastRejected(Exception):
    """Raised when a cast request is refused before it reaches the queue"""

    def __init__(self, reason: str, message: str = ''):
        super().__init__(message or reason)
        self.reason = reason
        self.message = message or reason


class NoUnclaimedCatch(Exception):
    """Raised when a player claims with nothing waiting"""


def _number(value, default=0.0) -> float:
    if value is None or value == '':
        return default
    return float(value)


def _string_list(value) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class FishDefinition:
    """Static fish species entry"""
    key: str
    rarity: str
    base_catch_rate: float
    depths: Tuple[str, ...] = ()
    feed_hours: Tuple[str, ...] = ()
    only_active_events: Tuple[str, ...] = ()
    event_variations: Dict[str, float] = field(default_factory=dict)
    min_weight: float = 0.0
    max_weight: float = 0.0
    min_length: float = 0.0
    max_length: float = 0.0
    image: Optional[str] = None

    @property
    def is_junk(self) -> bool:
        return self.rarity == JUNK

    def event_multiplier(self, event: Optional[str]) -> float:
        if event is None:
            return 1.0
        return self.event_variations.get(event, 1.0)

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> 'FishDefinition':
        """Build from the hyphenated JSON shape used by fish.json"""
        variations = {}
        for entry in data.get('event-variations') or []:
            event = entry.get('event')
            multiplier = entry.get('multiplier')
            # A zero or missing multiplier leaves the base rate alone
            if event and multiplier:
                variations[event] = float(multiplier)

        return cls(
            key=key,
            rarity=str(data.get('rarity', 'common')),
            base_catch_rate=_number(data.get('base-catch-rate')),
            depths=_string_list(data.get('depths')),
            feed_hours=_string_list(data.get('feed-hours')),
            only_active_events=_string_list(data.get('only-active-events')),
            event_variations=variations,
            min_weight=_number(data.get('min-weight')),
            max_weight=_number(data.get('max-weight')),
            min_length=_number(data.get('min-length')),
            max_length=_number(data.get('max-length')),
            image=data.get('image'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rarity': self.rarity,
            'base-catch-rate': self.base_catch_rate,
            'depths': list(self.depths),
            'feed-hours': list(self.feed_hours),
            'only-active-events': list(self.only_active_events),
            'event-variations': [
                {'event': event, 'multiplier': multiplier}
                for event, multiplier in self.event_variations.items()
            ],
            'min-weight': self.min_weight,
            'max-weight': self.max_weight,
            'min-length': self.min_length,
            'max-length': self.max_length,
            'image': self.image,
        }


@dataclass(frozen=True)
class CardDefinition:
    """Static card entry"""
    name: str
    index: Optional[int]
    depth_force: Optional[str] = None
    fish_weight: Optional[float] = None
    attract_types: Tuple[str, ...] = ()
    attract_rarities: Tuple[str, ...] = ()
    attract_weight: Optional[float] = None
    force_events: Tuple[str, ...] = ()
    base_fish_catch_rate: Optional[float] = None

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> 'CardDefinition':
        index = data.get('index')
        base_rate = data.get('base-fish-catch-rate')
        fish_weight = data.get('fish-weight')
        attract_weight = data.get('attract-weight')
        return cls(
            name=name,
            index=index if isinstance(index, int) and not isinstance(index, bool) else None,
            depth_force=data.get('depth-force') or None,
            fish_weight=float(fish_weight) if fish_weight else None,
            attract_types=_string_list(data.get('attract-type')),
            attract_rarities=_string_list(data.get('attract-rarity')),
            attract_weight=float(attract_weight) if attract_weight else None,
            force_events=_string_list(data.get('force-event')),
            base_fish_catch_rate=float(base_rate) if isinstance(base_rate, (int, float)) else None,
        )


# Bonus variants. Produced fresh per cast, never persisted.

@dataclass(frozen=True)
class ForceDepth:
    depth: str
    kind = 'forceDepth'


@dataclass(frozen=True)
class GlobalFishWeight:
    multiplier: float
    kind = 'globalFishWeight'


@dataclass(frozen=True)
class FishWeight:
    fish_type: str
    multiplier: float
    kind = 'fishWeight'


@dataclass(frozen=True)
class RarityWeight:
    rarity: str
    multiplier: float
    kind = 'rarityWeight'


@dataclass(frozen=True)
class EventVote:
    event: str
    votes: int = 1
    kind = 'eventVote'


@dataclass(frozen=True)
class BaseFishRate:
    amount: float
    kind = 'baseFishRate'


Bonus = Union[ForceDepth, GlobalFishWeight, FishWeight, RarityWeight, EventVote, BaseFishRate]


def bonus_to_dict(bonus: Bonus) -> Dict[str, Any]:
    """JSON shape of a bonus, for API responses and logs"""
    if isinstance(bonus, ForceDepth):
        return {'type': bonus.kind, 'depth': bonus.depth}
    if isinstance(bonus, GlobalFishWeight):
        return {'type': bonus.kind, 'multiplier': bonus.multiplier}
    if isinstance(bonus, FishWeight):
        return {'type': bonus.kind, 'fishType': bonus.fish_type, 'multiplier': bonus.multiplier}
    if isinstance(bonus, RarityWeight):
        return {'type': bonus.kind, 'rarity': bonus.rarity, 'multiplier': bonus.multiplier}
    if isinstance(bonus, EventVote):
        return {'type': bonus.kind, 'event': bonus.event, 'votes': bonus.votes}
    if isinstance(bonus, BaseFishRate):
        return {'type': bonus.kind, 'amount': bonus.amount}
    raise TypeError(f"Unknown bonus type: {type(bonus).__name__}")


@dataclass
class PendingCast:
    """A cast waiting for the next tick"""
    player_id: str
    cast: List[int]
    depth: str
    bonuses: List[Bonus] = field(default_factory=list)
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class PoolEntry:
    """One materialized fish instance in the shared catch pool"""
    fish_type: str
    stats: FishDefinition
    rate: float = 1.0


@dataclass(frozen=True)
class DrawResult:
    """A successful personal draw"""
    fish_type: str
    stats: FishDefinition
    weight: Optional[float]
    length: Optional[float]


@dataclass(frozen=True)
class NoCatch:
    """A draw that produced nothing"""
    reason: str


@dataclass
class CatchRecord:
    """A resolved catch, waiting to be claimed"""
    player_id: str
    cast: List[int]
    depth: str
    fish_type: str
    fish_stats: FishDefinition
    event: Optional[str]
    phase: str
    weight: Optional[float]
    length: Optional[float]
    timestamp: float = field(default_factory=time.time)

    def summary(self) -> Dict[str, Any]:
        """Short form handed to the player record"""
        return {
            'type': self.fish_type,
            'rarity': self.fish_stats.rarity,
            'weight': self.weight,
            'length': self.length,
            'event': self.event,
            'phase': self.phase,
            'depth': self.depth,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_id': self.player_id,
            'cast': list(self.cast),
            'depth': self.depth,
            'catch': {'type': self.fish_type, 'stats': self.fish_stats.to_dict()},
            'event': self.event,
            'phase': self.phase,
            'weight': self.weight,
            'length': self.length,
            'timestamp': self.timestamp,
        }


@dataclass
class GameClockState:
    """Hour counter plus the event in effect"""
    current_hour: int = 0
    last_event: Optional[str] = None
    next_event: Optional[str] = None


@dataclass(frozen=True)
class ClockTick:
    """Result of advancing the clock one hour"""
    hour: int
    phase: str
    phase_changed: bool
    wrapped: bool


@dataclass(frozen=True)
class TickReport:
    """What one game loop tick did"""
    hour: int
    phase: str
    event: Optional[str]
    next_event: Optional[str]
    casts: int
    catches: List[CatchRecord]
    dropped: int
    clock: ClockTick
