"""
Hand Tables — Enumeration and deduplication of the full outcome space.

Every ordered roll of the dice pool is generated once, then collapsed twice:
    1. by unique prefix — rolls that differ only in unused trailing dice
       are the same roll for the configuration
    2. by isomorphic key — rolls that differ only in the order of dice
       within a partition behave identically; the group size is the
       multiplicity used as a probability weight

No randomness involved; group order follows first appearance, so it is stable.
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass

from hand import DIE_FACES, Hand, RollConfiguration

# Dice rolled per outcome by the shipped calculator: 2 communal, 3 normal, up to 2 extra
DICE_POOL = 7

# 6 ** 7 ordered rolls is the largest outcome space generated in memory
MAX_DICE_POOL = DICE_POOL


@dataclass(frozen=True)
class HandGroup:
    """One equivalence class of hands: a representative and how many rolls it stands for."""
    hand: Hand
    multiplicity: int

    @property
    def isomorphic_key(self):
        return self.hand.isomorphic_key


def generate_rolls(dice_count):
    """Every ordered roll of dice_count dice, 6^dice_count tuples, each exactly once.

    Args:
        dice_count: Number of dice in the pool

    Returns:
        List of tuples of face values (1-6); empty for dice_count < 1
    """
    if dice_count < 1:
        return []
    return list(itertools.product(DIE_FACES, repeat=dice_count))


def unique_rolls(rolls, config: RollConfiguration):
    """Collapse rolls sharing the same relevant prefix, keeping the first of each."""
    prefix_length = config.relevant_dice
    seen = {}
    for roll in rolls:
        prefix = tuple(roll[:prefix_length])
        if prefix not in seen:
            seen[prefix] = roll
    return list(seen.values())


def group_hands(rolls, config: RollConfiguration):
    """Group the unique rolls into isomorphism classes.

    Args:
        rolls: Sequence of rolls (sequences of face values)
        config: Partitioning of each roll

    Returns:
        List of HandGroup in order of first appearance; multiplicities sum to
        the number of unique rolls
    """
    representatives = {}
    multiplicities = {}
    for roll in unique_rolls(rolls, config):
        hand = Hand(roll, config)
        key = hand.isomorphic_key
        if key in representatives:
            multiplicities[key] += 1
        else:
            representatives[key] = hand
            multiplicities[key] = 1
    return [HandGroup(hand, multiplicities[key]) for key, hand in representatives.items()]
