"""
Hand Analyzer — Exact category probabilities, with and without rerolls.

Pipeline for one analysis run:
    group_hands()        — isomorphism classes with multiplicities
    classify_groups()    — base counts per category + filtered total
    compute_rerolls()    — reroll credit for hands outside each category
    analyze()            — wraps all of it into an AnalysisReport

Every run owns a fresh AnalysisState. All arithmetic is exact (Fraction);
reported probabilities are clamped to [0, 1].
"""
from __future__ import annotations

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field
from fractions import Fraction

from hand import ConfigurationError, RollConfiguration
from hand_category import ALL_CATEGORIES, HandCategory
from hand_tables import group_hands

logger = logging.getLogger(__name__)

# Odds of landing one specific result with exactly n rerolled dice
REROLL_ODDS_BASE = {
    1: Fraction(1, 6),
    2: Fraction(1, 36),
    3: Fraction(1, 216),
}
MAX_REROLL_DISTANCE = 3


class EmptyDomainError(ValueError):
    """No outcomes were supplied, so no probability is defined."""


@dataclass
class AnalysisState:
    """Mutable accumulators for a single analysis run."""
    computed_isomorphic_keys: set = field(default_factory=set)
    categories_by_effective_key: dict = field(default_factory=dict)
    groups_by_category: dict = field(
        default_factory=lambda: {category: [] for category in ALL_CATEGORIES})
    count_by_category: dict = field(
        default_factory=lambda: {category: 0 for category in ALL_CATEGORIES})
    reroll_odds_by_category: dict = field(
        default_factory=lambda: {category: Fraction(0) for category in ALL_CATEGORIES})
    membership: dict = field(default_factory=dict)
    filtered_total: Fraction = Fraction(0)


@dataclass(frozen=True)
class CategoryOdds:
    """Aggregated result for one category."""
    category: HandCategory
    base_count: int
    reroll_odds: Fraction
    probability: Fraction

    @property
    def count(self) -> Fraction:
        """Base hands plus reroll credit, in units of hands."""
        return self.base_count + self.reroll_odds


@dataclass(frozen=True)
class AnalysisReport:
    """Per-category odds for one configuration and filter."""
    config: RollConfiguration
    excluded: frozenset
    included: frozenset
    total_outcomes: int
    odds: dict
    filtered_total: Fraction
    elapsed_seconds: float = 0.0

    @property
    def filter_active(self) -> bool:
        return bool(self.excluded or self.included)

    @property
    def filtered_probability(self) -> Fraction:
        return _clamp(self.filtered_total / self.total_outcomes)

    def __getitem__(self, category):
        return self.odds[category]


def _clamp(value):
    return min(max(value, Fraction(0)), Fraction(1))


# ── Filter ───────────────────────────────────────────────────────────────────

def passes_filter(hand, excluded, included):
    """True if the hand has no excluded category and, when any are included, has one of them."""
    categories = hand.categories
    if any(category in excluded for category in categories):
        return False
    return not included or any(category in included for category in categories)


# ── Classification ───────────────────────────────────────────────────────────

def check_hand(hand):
    """All categories the hand satisfies, highest rank first. High Roll is always present."""
    return [category for category in reversed(ALL_CATEGORIES) if hand.satisfies(category)]


def hand_categories(hand, state: AnalysisState):
    """Category membership, cached per effective key."""
    key = hand.effective_key
    categories = state.categories_by_effective_key.get(key)
    if categories is None:
        categories = check_hand(hand)
        state.categories_by_effective_key[key] = categories
    return categories


def classify_groups(groups, state: AnalysisState, excluded=frozenset(), included=frozenset()):
    """Accumulate base counts and the filtered total for every unseen group."""
    for group in groups:
        key = group.isomorphic_key
        if key in state.computed_isomorphic_keys:
            continue
        state.computed_isomorphic_keys.add(key)

        categories = hand_categories(group.hand, state)
        state.membership[key] = frozenset(categories)
        for category in categories:
            state.groups_by_category[category].append(group)
            state.count_by_category[category] += group.multiplicity

        if passes_filter(group.hand, excluded, included):
            state.filtered_total += group.multiplicity


# ── Rerolls ──────────────────────────────────────────────────────────────────

def reroll_odds(distance, rerolls):
    """Odds credited for a hand that is `distance` normal dice away from a target.

    Sums the single-result odds for every reroll count from `distance` up to
    the budget (capped at MAX_REROLL_DISTANCE).

    Returns:
        Fraction, or None when the target is out of reach
    """
    if distance < 1 or distance > rerolls or distance > MAX_REROLL_DISTANCE:
        return None
    top = min(rerolls, MAX_REROLL_DISTANCE)
    return sum((REROLL_ODDS_BASE[n] for n in range(distance, top + 1)), Fraction(0))


def compute_rerolls_for_category(category, groups, state: AnalysisState, config: RollConfiguration,
                                 total_outcomes, excluded=frozenset(), included=frozenset()):
    """Credit every group outside `category` for each in-category group it can reroll into."""
    if category is HandCategory.HIGH_ROLL:
        return

    targets_by_rerollable_key = defaultdict(list)
    for group in state.groups_by_category[category]:
        targets_by_rerollable_key[group.hand.rerollable_key].append(group)

    outside = [group for group in groups if category not in state.membership[group.isomorphic_key]]
    filter_active = bool(excluded or included)
    # Excluded hands count as already better; nobody rerolls away from them.
    credit_filter = filter_active and category not in excluded and category not in included

    for source in outside:
        for target in targets_by_rerollable_key.get(source.hand.rerollable_key, ()):
            distance = source.hand.reroll_distance(target.hand)
            odds = reroll_odds(distance, config.rerolls)
            if odds is None:
                continue

            state.reroll_odds_by_category[category] += odds

            if credit_filter and passes_filter(target.hand, excluded, included):
                state.filtered_total += odds * len(outside) / total_outcomes


def compute_rerolls(groups, state: AnalysisState, config: RollConfiguration,
                    total_outcomes, excluded=frozenset(), included=frozenset()):
    """Run the reroll pass for every category. Nothing to do without a reroll budget."""
    if config.rerolls <= 0:
        return
    for category in ALL_CATEGORIES:
        compute_rerolls_for_category(category, groups, state, config, total_outcomes, excluded, included)


# ── Entry point ──────────────────────────────────────────────────────────────

def analyze(rolls, config: RollConfiguration, excluded=(), included=()):
    """Exact odds of every hand category for the given rolls and configuration.

    Args:
        rolls: The full outcome domain, one sequence of face values per roll
        config: Dice partitioning and reroll budget
        excluded: Categories a passing hand must not have
        included: Categories a passing hand must have one of (empty = any)

    Returns:
        AnalysisReport covering all categories

    Raises:
        EmptyDomainError: if no rolls are supplied
        ConfigurationError: if a roll has fewer dice than the configuration reads
    """
    if not rolls:
        raise EmptyDomainError("No data.")
    shortest = min(len(roll) for roll in rolls)
    if config.relevant_dice > shortest:
        raise ConfigurationError(
            f"configuration reads {config.relevant_dice} dice but rolls have {shortest}"
        )

    excluded = frozenset(excluded)
    included = frozenset(included)
    started = time.perf_counter()

    state = AnalysisState()
    groups = group_hands(rolls, config)
    total_outcomes = sum(group.multiplicity for group in groups)
    logger.debug("%d isomorphic groups covering %d outcomes", len(groups), total_outcomes)

    classify_groups(groups, state, excluded, included)
    compute_rerolls(groups, state, config, total_outcomes, excluded, included)

    odds = {}
    for category in ALL_CATEGORIES:
        base_count = state.count_by_category[category]
        rerolled = state.reroll_odds_by_category[category]
        odds[category] = CategoryOdds(
            category=category,
            base_count=base_count,
            reroll_odds=rerolled,
            probability=_clamp((base_count + rerolled) / total_outcomes),
        )

    elapsed = time.perf_counter() - started
    logger.debug("Analysis finished in %.3fs", elapsed)
    return AnalysisReport(
        config=config,
        excluded=excluded,
        included=included,
        total_outcomes=total_outcomes,
        odds=odds,
        filtered_total=state.filtered_total,
        elapsed_seconds=elapsed,
    )
