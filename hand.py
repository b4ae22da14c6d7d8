"""
Hand — Roll domain model without any analysis state.

A Hand is one concrete dice outcome read through a RollConfiguration, which
splits the rolled dice by position into communal, normal and extra dice.
Only the normal dice may be rerolled. Trailing dice beyond the three
partitions are carried in the outcome but never read.

All keys are order-normalized tuples so that equivalent rolls compare equal:
    communal_key / normal_key / extra_key — sorted dice of each partition
    rerollable_key   — communal + extra keys (the dice a reroll cannot change)
    isomorphic_key   — all three partition keys (full equivalence)
    effective_key    — all relevant dice sorted together (category cache key)
    unique_prefix_key — raw relevant dice, unsorted (positional identity)
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from functools import cached_property

from hand_category import ALL_CATEGORIES, HandCategory

DIE_FACES = (1, 2, 3, 4, 5, 6)


class ConfigurationError(ValueError):
    """Partition sizes or reroll budget do not fit the dice being analyzed."""


@dataclass(frozen=True)
class RollConfiguration:
    """How the dice of one outcome are partitioned, and how many may be rerolled."""
    communal_rolls: int = 2
    normal_rolls: int = 3
    extra_rolls: int = 0
    rerolls: int = 0

    def __post_init__(self):
        for field_name in ("communal_rolls", "normal_rolls", "extra_rolls", "rerolls"):
            if getattr(self, field_name) < 0:
                raise ConfigurationError(f"{field_name} must not be negative")
        if self.rerolls > self.normal_rolls:
            raise ConfigurationError(
                f"rerolls ({self.rerolls}) exceed normal rolls ({self.normal_rolls})"
            )

    @property
    def relevant_dice(self) -> int:
        """Number of leading dice that belong to some partition."""
        return self.communal_rolls + self.normal_rolls + self.extra_rolls


class Hand:
    """One dice outcome partitioned by a RollConfiguration.

    Derived values are cached on first access; a Hand is never mutated.
    """

    def __init__(self, rolls, config: RollConfiguration):
        self.rolls = tuple(rolls)
        self.config = config

    def __repr__(self):
        return f"Hand({''.join(map(str, self.effective))})"

    # ── Partitions ───────────────────────────────────────────────────────

    @cached_property
    def communal(self) -> tuple[int, ...]:
        return self.rolls[:self.config.communal_rolls]

    @cached_property
    def normal(self) -> tuple[int, ...]:
        start = self.config.communal_rolls
        return self.rolls[start:start + self.config.normal_rolls]

    @cached_property
    def extra(self) -> tuple[int, ...]:
        start = self.config.communal_rolls + self.config.normal_rolls
        return self.rolls[start:start + self.config.extra_rolls]

    @cached_property
    def effective(self) -> tuple[int, ...]:
        return self.rolls[:self.config.relevant_dice]

    # ── Keys ─────────────────────────────────────────────────────────────

    @cached_property
    def communal_key(self) -> tuple[int, ...]:
        return tuple(sorted(self.communal))

    @cached_property
    def normal_key(self) -> tuple[int, ...]:
        return tuple(sorted(self.normal))

    @cached_property
    def extra_key(self) -> tuple[int, ...]:
        return tuple(sorted(self.extra))

    @cached_property
    def rerollable_key(self) -> tuple[int, ...]:
        """Hands sharing this key differ only in their normal dice."""
        return self.communal_key + self.extra_key

    @cached_property
    def isomorphic_key(self) -> tuple[int, ...]:
        return self.communal_key + self.normal_key + self.extra_key

    @cached_property
    def effective_key(self) -> tuple[int, ...]:
        return tuple(sorted(self.effective))

    @property
    def unique_prefix_key(self) -> tuple[int, ...]:
        return self.effective

    # ── Shape measurements ───────────────────────────────────────────────

    @cached_property
    def _counts(self):
        return Counter(self.effective)

    @cached_property
    def duplicate_count(self) -> int:
        """Every repeat of a face beyond its first appearance counts once."""
        return sum(count - 1 for count in self._counts.values())

    @cached_property
    def max_multiple(self) -> int:
        return max(self._counts.values(), default=0)

    @cached_property
    def longest_run(self) -> int:
        """Length of the longest run of consecutive distinct faces."""
        faces = sorted(self._counts)
        if not faces:
            return 0
        longest = current = 1
        for previous, face in zip(faces, faces[1:]):
            current = current + 1 if face == previous + 1 else 1
            longest = max(longest, current)
        return longest

    # ── Category predicates ──────────────────────────────────────────────

    @property
    def is_pair(self):
        return self.duplicate_count >= 1

    @property
    def is_two_pair(self):
        return self.duplicate_count >= 2

    @property
    def is_triple(self):
        return self.max_multiple >= 3

    @property
    def is_small_straight(self):
        return self.longest_run >= 4

    @property
    def is_flush(self):
        evens = sum(1 for roll in self.effective if roll % 2 == 0)
        odds = len(self.effective) - evens
        return evens >= 5 or odds >= 5

    @property
    def is_full_house(self):
        return self.duplicate_count >= 2 and self.max_multiple >= 3

    @property
    def is_big_straight(self):
        return self.longest_run >= 5

    @property
    def is_quad(self):
        return self.max_multiple >= 4

    @property
    def is_jackpot(self):
        return self.max_multiple >= 5

    def satisfies(self, category: HandCategory) -> bool:
        """Whether the hand meets the category's predicate. High Roll always does."""
        if category is HandCategory.HIGH_ROLL:
            return True
        return getattr(self, _PREDICATES[category])

    @cached_property
    def categories(self) -> tuple[HandCategory, ...]:
        """Satisfied categories in rank order; High Roll only when nothing else is."""
        found = tuple(
            category for category in ALL_CATEGORIES
            if category is not HandCategory.HIGH_ROLL and self.satisfies(category)
        )
        return found or (HandCategory.HIGH_ROLL,)

    # ── Rerolls ──────────────────────────────────────────────────────────

    def reroll_distance(self, other) -> int:
        """Normal dice that must change to turn these normal dice into other's.

        Each normal die, in position order, claims the first unused die of the
        same face in the other hand. Unclaimed dice are the ones to reroll.

        Args:
            other: A Hand, or a sequence of normal dice values

        Returns:
            Number of normal dice left unmatched
        """
        other_normal = other.normal if isinstance(other, Hand) else tuple(other)
        used = set()
        for roll in self.normal:
            for index, other_roll in enumerate(other_normal):
                if index not in used and other_roll == roll:
                    used.add(index)
                    break
        return len(self.normal) - len(used)


_PREDICATES = {
    HandCategory.PAIR: "is_pair",
    HandCategory.TWO_PAIR: "is_two_pair",
    HandCategory.TRIPLE: "is_triple",
    HandCategory.SMALL_STRAIGHT: "is_small_straight",
    HandCategory.FLUSH: "is_flush",
    HandCategory.FULL_HOUSE: "is_full_house",
    HandCategory.BIG_STRAIGHT: "is_big_straight",
    HandCategory.QUAD: "is_quad",
    HandCategory.JACKPOT: "is_jackpot",
}
