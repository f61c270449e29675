#!/usr/bin/env python3
"""
Catch simulation: run synthetic casts through the real engine and print
phase, depth, event and fish distributions.

    python simulate.py --casts 1000 --hand 3 --seed 7
"""
import argparse
import logging
import random
from collections import Counter
from typing import Dict

from bonuses import BonusResolver, apply_depth_bonuses
from config import Config
from game_logic import CatchPoolBuilder, EventArbiter, PersonalDrawEngine
from models import NoCatch, PendingCast
from sampling import DepthSelector
from static_data import JsonStaticData


def simulate(static_data, casts: int, hand_size: int, sample_size: int, rng: random.Random) -> Dict[str, Counter]:
    """Each cast gets a random phase, a random hand and its own event vote"""
    fish = static_data.read_fish()
    cards = static_data.read_cards()
    card_indices = cards.indices()

    resolver = BonusResolver(cards)
    depth_selector = DepthSelector(rng)
    arbiter = EventArbiter(rng)
    pool_builder = CatchPoolBuilder(rng)
    draw_engine = PersonalDrawEngine(rng)

    counts = {name: Counter() for name in ('phase', 'depth', 'event', 'fish')}

    for _ in range(casts):
        phase = rng.choice(Config.PHASES)
        counts['phase'][phase] += 1

        hand = [rng.choice(card_indices) for _ in range(hand_size)] if card_indices else []
        bonuses = resolver.resolve(hand)

        depth = apply_depth_bonuses(depth_selector.pick(), bonuses)
        counts['depth'][depth] += 1

        pending = PendingCast(player_id='sim', cast=hand, depth=depth, bonuses=bonuses)
        event = arbiter.choose_next_event([pending])
        if event is not None:
            counts['event'][event] += 1

        pool = pool_builder.build_pool(fish, phase, event, sample_size)
        result = draw_engine.draw(pool, bonuses)
        if isinstance(result, NoCatch):
            counts['fish']['(none)'] += 1
        else:
            counts['fish'][result.fish_type] += 1

    return counts


def print_report(counts: Dict[str, Counter], casts: int):
    print(f"\nSimulated {casts} casts\n")
    print("Phase distribution:", dict(counts['phase']))
    print("Depth distribution:", dict(counts['depth']))
    print("Event distribution:", dict(counts['event']))
    print("\nFish catch distribution:")
    for fish, count in counts['fish'].most_common():
        print(f"  {fish:<20}: {count:>5} ({count / casts * 100:.2f}%)")


def main():
    parser = argparse.ArgumentParser(description="Simulate casts against the current fish and card data")
    parser.add_argument('--casts', type=int, default=1000)
    parser.add_argument('--hand', type=int, default=Config.HAND_SIZE, help="cards per cast")
    parser.add_argument('--sample-size', type=int, default=Config.POOL_SAMPLE_SIZE)
    parser.add_argument('--fish', default=Config.FISH_DATA_FILE)
    parser.add_argument('--cards', default=Config.CARDS_DATA_FILE)
    parser.add_argument('--seed', type=int, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.ERROR)
    rng = random.Random(args.seed)
    counts = simulate(JsonStaticData(args.fish, args.cards), args.casts, args.hand, args.sample_size, rng)
    print_report(counts, args.casts)


if __name__ == '__main__':
    main()
