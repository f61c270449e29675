"""
Card-based cast modifiers
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from models import (
    BaseFishRate,
    Bonus,
    EventVote,
    FishWeight,
    ForceDepth,
    GlobalFishWeight,
    RarityWeight,
)
from static_data import CardTable

logger = logging.getLogger(__name__)


class BonusResolver:
    """Turns the card indices of a cast into a flat list of bonuses"""

    def __init__(self, cards: CardTable):
        self.cards = cards

    def card_names(self, card_indices: Sequence[int]) -> List[str]:
        """Names of the cards referenced by a cast, each at most once, in cast order"""
        names: List[str] = []
        for index in card_indices:
            name = self.cards.name_for_index(index)
            if name is None:
                if index is not None and index >= 0:
                    logger.warning("Cast references unknown card index %s", index)
                continue
            if name not in names:
                names.append(name)
        return names

    def bonuses_from_cards(self, card_names: Iterable[str]) -> List[Bonus]:
        bonuses: List[Bonus] = []

        for name in card_names:
            card = self.cards.get(name)
            if card is None:
                continue

            if card.depth_force:
                bonuses.append(ForceDepth(depth=card.depth_force))

            if card.fish_weight and card.fish_weight != 1:
                bonuses.append(GlobalFishWeight(multiplier=card.fish_weight))

            if card.attract_weight:
                for fish_type in card.attract_types:
                    bonuses.append(FishWeight(fish_type=fish_type, multiplier=card.attract_weight))

            if card.attract_weight and card.attract_weight > 1:
                for rarity in card.attract_rarities:
                    bonuses.append(RarityWeight(rarity=rarity, multiplier=card.attract_weight))

            for event in card.force_events:
                bonuses.append(EventVote(event=event, votes=1))

        return bonuses

    def resolve(self, card_indices: Sequence[int]) -> List[Bonus]:
        """
        Collect every bonus for a cast.

        Unknown and empty (-1) slots are skipped. A card is only counted
        once even if two indices point at the same name. The flat
        base-rate bonus is taken from the card at each cast index.
        """
        bonuses = self.bonuses_from_cards(self.card_names(card_indices))

        for index in card_indices:
            card = self.cards.by_index(index)
            if card is not None and card.base_fish_catch_rate is not None:
                bonuses.append(BaseFishRate(amount=card.base_fish_catch_rate))

        return bonuses


def apply_depth_bonuses(original_depth: str, bonuses: Iterable[Bonus]) -> str:
    """The first forced depth wins over the rolled one"""
    for bonus in bonuses:
        if isinstance(bonus, ForceDepth):
            return bonus.depth
    return original_depth


def tally_event_votes(bonuses: Iterable[Bonus], vote_counts: Optional[Dict[str, int]] = None) -> Dict[str, int]:
    """Add the event votes in `bonuses` to `vote_counts`"""
    if vote_counts is None:
        vote_counts = {}
    for bonus in bonuses:
        if isinstance(bonus, EventVote):
            vote_counts[bonus.event] = vote_counts.get(bonus.event, 0) + bonus.votes
    return vote_counts
