"""
Game logic for fish generation and catch mechanics
"""
import logging
import random
from collections import Counter
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

from bonuses import tally_event_votes
from models import (
    BaseFishRate,
    Bonus,
    DrawResult,
    FishDefinition,
    FishWeight,
    GlobalFishWeight,
    NoCatch,
    PendingCast,
    PoolEntry,
    RarityWeight,
)
from sampling import MetricsRoller, WeightedSampler

logger = logging.getLogger(__name__)


def is_fish_active(fish: FishDefinition, phase: str, event: Optional[str]) -> bool:
    """
    Whether a fish can be caught in this phase under this event.
    Fish tied to specific events only show up while one of them is active.
    """
    if phase not in fish.feed_hours:
        return False
    if fish.only_active_events:
        return event is not None and event in fish.only_active_events
    return True


class EventArbiter:
    """Picks the next event from the votes cast this tick"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def tally(self, casts: Iterable[PendingCast],
              bonuses_of: Callable[[PendingCast], List[Bonus]] = lambda cast: cast.bonuses) -> Dict[str, int]:
        vote_counts: Dict[str, int] = {}
        for cast in casts:
            tally_event_votes(bonuses_of(cast), vote_counts)
        return vote_counts

    def choose_next_event(self, casts: Iterable[PendingCast],
                          bonuses_of: Callable[[PendingCast], List[Bonus]] = lambda cast: cast.bonuses) -> Optional[str]:
        """Most voted event, ties broken uniformly at random; None without votes"""
        return self.choose_from_votes(self.tally(casts, bonuses_of))

    def choose_from_votes(self, vote_counts: Dict[str, int]) -> Optional[str]:
        if not vote_counts:
            return None
        top = max(vote_counts.values())
        leaders = [event for event, votes in vote_counts.items() if votes == top]
        return self.rng.choice(leaders)


class CatchPoolBuilder:
    """Builds the shared pool of fish instances for one tick"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.sampler = WeightedSampler(rng)

    def effective_rates(self, all_fish: Dict[str, FishDefinition], phase: str,
                        event: Optional[str]) -> List[tuple]:
        """(fish_type, rate) for every fish active now, event multipliers applied"""
        rates = []
        for fish_type, stats in all_fish.items():
            if not is_fish_active(stats, phase, event):
                continue
            rates.append((fish_type, stats.base_catch_rate * stats.event_multiplier(event)))
        return rates

    def build_pool(self, all_fish: Dict[str, FishDefinition], phase: str,
                   event: Optional[str], sample_size: int) -> List[PoolEntry]:
        """
        Sample `sample_size` fish (with replacement) from the active fish,
        weighted by their effective rate. Each instance starts at unit rate,
        so the multiset itself carries the base distribution.
        """
        rates = self.effective_rates(all_fish, phase, event)
        picks = self.sampler.sample(rates, sample_size)

        pool = [PoolEntry(fish_type=fish_type, stats=all_fish[fish_type]) for fish_type, _ in picks]

        if not pool:
            logger.warning("No fish eligible for phase=%s event=%s", phase, event)
        else:
            logger.debug("Built pool of %d for phase=%s event=%s: %s",
                         len(pool), phase, event, dict(Counter(e.fish_type for e in pool)))
        return pool


class PersonalDrawEngine:
    """Applies a cast's bonuses to the shared pool and draws one fish"""

    def __init__(self, rng: Optional[random.Random] = None):
        rng = rng or random.Random()
        self.sampler = WeightedSampler(rng)
        self.metrics = MetricsRoller(rng)

    def personalize(self, pool: Sequence[PoolEntry], bonuses: Sequence[Bonus]) -> List[PoolEntry]:
        """
        Re-weight the pool for one cast. Order is fixed:
        global multiplier, per-type, per-rarity, then the flat rate for non-junk.
        """
        global_mult = 1.0
        type_mults: Dict[str, float] = {}
        rarity_mults: Dict[str, float] = {}
        base_bonus: Optional[BaseFishRate] = None

        for bonus in bonuses:
            if isinstance(bonus, GlobalFishWeight):
                global_mult *= bonus.multiplier
            elif isinstance(bonus, FishWeight):
                type_mults[bonus.fish_type] = type_mults.get(bonus.fish_type, 1.0) * bonus.multiplier
            elif isinstance(bonus, RarityWeight):
                rarity_mults[bonus.rarity] = rarity_mults.get(bonus.rarity, 1.0) * bonus.multiplier
            elif isinstance(bonus, BaseFishRate):
                if base_bonus is None:
                    base_bonus = bonus

        personal = []
        for entry in pool:
            rate = entry.rate * global_mult
            rate *= type_mults.get(entry.fish_type, 1.0)
            rate *= rarity_mults.get(entry.stats.rarity, 1.0)
            # The flat add is in pool-instance units: every instance starts at rate 1.0
            if base_bonus is not None and not entry.stats.is_junk:
                rate += base_bonus.amount
            personal.append(PoolEntry(fish_type=entry.fish_type, stats=entry.stats, rate=rate))
        return personal

    def draw(self, pool: Sequence[PoolEntry], bonuses: Sequence[Bonus]) -> Union[DrawResult, NoCatch]:
        if not pool:
            return NoCatch(reason='empty pool')

        personal = self.personalize(pool, bonuses)
        picked = self.sampler.pick((entry, entry.rate) for entry in personal)
        if picked is None:
            return NoCatch(reason='zero weight pool')

        winner, _ = picked
        metrics = self.metrics.roll(winner.stats)
        return DrawResult(
            fish_type=winner.fish_type,
            stats=winner.stats,
            weight=metrics['weight'],
            length=metrics['length'],
        )
