"""
Random selection primitives: weighted picks, depth tiers, catch metrics
"""
import math
import random
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from config import Config
from models import FishDefinition


class WeightedSampler:
    """Cumulative-weight selection over (key, weight) pairs"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def pick(self, entries: Iterable[Tuple[Any, float]]) -> Optional[Tuple[Any, float]]:
        """
        Pick one entry with probability weight / total.
        Entries with weight <= 0 are never selected. Returns None
        when nothing has positive weight.
        """
        total = 0.0
        cumulative: List[Tuple[float, Tuple[Any, float]]] = []

        for key, weight in entries:
            if weight is None or weight <= 0:
                continue
            total += weight
            cumulative.append((total, (key, weight)))

        if total <= 0:
            return None

        roll = self.rng.random() * total
        for threshold, entry in cumulative:
            if roll < threshold:
                return entry

        # Float rounding can leave roll == total
        return cumulative[-1][1]

    def sample(self, entries: Sequence[Tuple[Any, float]], count: int) -> List[Tuple[Any, float]]:
        """Draw `count` independent picks with replacement"""
        positive = [(key, weight) for key, weight in entries if weight is not None and weight > 0]
        if not positive or count <= 0:
            return []

        picks = []
        for _ in range(count):
            picks.append(self.pick(positive))
        return picks


class DepthSelector:
    """Draws a depth tier from the fixed depth table"""

    def __init__(self, rng: Optional[random.Random] = None,
                 weights: Sequence[Tuple[str, float]] = Config.DEPTH_WEIGHTS):
        self.weights = tuple(weights)
        self.sampler = WeightedSampler(rng)

    def pick(self) -> str:
        depth, _ = self.sampler.pick(self.weights)
        return depth

    @property
    def tiers(self) -> Tuple[str, ...]:
        return tuple(depth for depth, _ in self.weights)


class MetricsRoller:
    """Rolls weight and length for a caught fish"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def roll(self, stats: FishDefinition) -> Dict[str, Optional[float]]:
        """Junk has no measurements; everything else is uniform within its range"""
        if stats.is_junk:
            return {'weight': None, 'length': None}

        weight = self._uniform(stats.min_weight, stats.max_weight)
        length = self._uniform(stats.min_length, stats.max_length)
        return {'weight': weight, 'length': length}

    def _uniform(self, low: float, high: float) -> float:
        if high < low:
            low, high = high, low
        # Clamp to the two-decimal values inside the range so rounding cannot leave it
        inner_low = math.ceil(round(low * 100, 6)) / 100
        inner_high = math.floor(round(high * 100, 6)) / 100
        if inner_low > inner_high:
            # No two-decimal value fits, e.g. 1.001 to 1.009
            return low
        value = round(self.rng.uniform(inner_low, inner_high), 2)
        return min(max(value, inner_low), inner_high)
