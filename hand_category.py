"""
Hand Categories — the fixed, ranked catalog of outcome classes.

The catalog is built once at import time and never mutated. Categories are
looked up explicitly by display name or by rank; there is no implicit
conversion between a category and either of those values.
"""
from enum import Enum
from functools import total_ordering


@total_ordering
class HandCategory(Enum):
    """Outcome classes, lowest to highest rank."""
    HIGH_ROLL = ("High Roll", 0)
    PAIR = ("Pair", 1)
    TWO_PAIR = ("Two Pair", 2)
    TRIPLE = ("Triple", 3)
    SMALL_STRAIGHT = ("Small Straight", 4)
    FLUSH = ("Flush", 5)
    FULL_HOUSE = ("Full House", 6)
    BIG_STRAIGHT = ("Big Straight", 7)
    QUAD = ("Quad", 8)
    JACKPOT = ("Jackpot", 9)

    @property
    def display_name(self) -> str:
        return self.value[0]

    @property
    def rank(self) -> int:
        return self.value[1]

    @property
    def display_name_rank(self) -> str:
        """Menu label, e.g. "Pair - 1"."""
        return f"{self.display_name} - {self.rank}"

    def __lt__(self, other):
        if not isinstance(other, HandCategory):
            return NotImplemented
        return self.rank < other.rank

    def __str__(self):
        return self.display_name


ALL_CATEGORIES = tuple(sorted(HandCategory, key=lambda c: c.rank))

_BY_NAME = {category.display_name: category for category in ALL_CATEGORIES}
_BY_RANK = {category.rank: category for category in ALL_CATEGORIES}


def category_by_name(name):
    """Return the category with this display name. Raises KeyError if unknown."""
    return _BY_NAME[name]


def category_by_rank(rank):
    """Return the category with this rank. Raises KeyError if unknown."""
    return _BY_RANK[rank]
