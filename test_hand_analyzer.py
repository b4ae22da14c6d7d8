"""
Hand Analyzer Test Suite

Sections:
    1. Base odds — known counts for five dice without rerolls
    2. Filter — exclusion / inclusion semantics and filtered totals
    3. Reroll odds — formula and reroll credit
    4. Properties — bounds, idempotence, order independence, monotonicity
    5. Errors — empty domain, configuration larger than the rolls
"""
from dataclasses import replace
from fractions import Fraction

import pytest

from hand import ConfigurationError, Hand, RollConfiguration
from hand_analyzer import (
    AnalysisState,
    EmptyDomainError,
    analyze,
    check_hand,
    classify_groups,
    hand_categories,
    passes_filter,
    reroll_odds,
)
from hand_category import ALL_CATEGORIES, HandCategory
from hand_tables import generate_rolls, group_hands

FIVE_NORMAL = RollConfiguration(communal_rolls=0, normal_rolls=5, extra_rolls=0)
SHIPPED = RollConfiguration(communal_rolls=2, normal_rolls=3, extra_rolls=0)
TOTAL = 6 ** 5


@pytest.fixture(scope="module")
def five_dice():
    return generate_rolls(5)


@pytest.fixture(scope="module")
def five_normal_report(five_dice):
    return analyze(five_dice, FIVE_NORMAL)


@pytest.fixture(scope="module")
def shipped_reports(five_dice):
    """Shipped partitioning at every reroll budget, keyed by budget."""
    return {rerolls: analyze(five_dice, replace(SHIPPED, rerolls=rerolls)) for rerolls in range(4)}


# ═══════════════════════════════════════════════════════════════════════════════
# 1. BASE ODDS
# ═══════════════════════════════════════════════════════════════════════════════


class TestBaseOdds:

    def test_total_outcomes(self, five_normal_report):
        assert five_normal_report.total_outcomes == TOTAL

    def test_jackpot(self, five_normal_report):
        odds = five_normal_report[HandCategory.JACKPOT]
        assert odds.base_count == 6
        assert odds.probability == Fraction(6, TOTAL)

    def test_big_straight(self, five_normal_report):
        odds = five_normal_report[HandCategory.BIG_STRAIGHT]
        assert odds.base_count == 240
        assert float(odds.probability) == pytest.approx(0.030864, abs=1e-6)

    def test_pair(self, five_normal_report):
        """Everything except the 720 all-distinct rolls."""
        assert five_normal_report[HandCategory.PAIR].base_count == TOTAL - 720

    def test_two_pair(self, five_normal_report):
        """Excludes all-distinct (720) and exactly-one-pair (3600) rolls."""
        assert five_normal_report[HandCategory.TWO_PAIR].base_count == TOTAL - 720 - 3600

    def test_triple(self, five_normal_report):
        assert five_normal_report[HandCategory.TRIPLE].base_count == 1500 + 150 + 6

    def test_full_house_follows_triple(self, five_normal_report):
        """A triple already has two excess repeats."""
        assert (five_normal_report[HandCategory.FULL_HOUSE].base_count
                == five_normal_report[HandCategory.TRIPLE].base_count)

    def test_flush(self, five_normal_report):
        assert five_normal_report[HandCategory.FLUSH].base_count == 2 * 3 ** 5

    def test_quad(self, five_normal_report):
        assert five_normal_report[HandCategory.QUAD].base_count == 150 + 6

    def test_high_roll_counts_every_outcome(self, five_normal_report):
        odds = five_normal_report[HandCategory.HIGH_ROLL]
        assert odds.base_count == TOTAL
        assert odds.probability == 1

    def test_no_reroll_credit_without_rerolls(self, five_normal_report):
        assert all(odds.reroll_odds == 0 for odds in five_normal_report.odds.values())

    def test_report_covers_every_category(self, five_normal_report):
        assert list(five_normal_report.odds) == list(ALL_CATEGORIES)

    def test_partition_does_not_change_base_counts(self, five_normal_report, shipped_reports):
        """Without rerolls, only the multiset of relevant dice matters."""
        for category in ALL_CATEGORIES:
            assert shipped_reports[0][category].base_count == five_normal_report[category].base_count

    def test_high_roll_only_is_complement_of_union(self, five_dice):
        """Rolls with no other category are exactly those outside the union of the rest."""
        groups = group_hands(five_dice, SHIPPED)
        high_only = sum(g.multiplicity for g in groups if g.hand.categories == (HandCategory.HIGH_ROLL,))
        union = sum(
            g.multiplicity for g in groups
            if any(g.hand.satisfies(c) for c in ALL_CATEGORIES if c is not HandCategory.HIGH_ROLL)
        )
        assert Fraction(high_only, TOTAL) == 1 - Fraction(union, TOTAL)
        # Only {1,2,4,5,6} and {1,2,3,5,6} in any order escape every category
        assert high_only == 240


class TestClassification:

    def test_check_hand_lists_high_roll_last(self):
        categories = check_hand(Hand((6, 6, 6, 6, 6), FIVE_NORMAL))
        assert categories[0] is HandCategory.JACKPOT
        assert categories[-1] is HandCategory.HIGH_ROLL

    def test_effective_key_cache(self):
        state = AnalysisState()
        config = RollConfiguration(2, 3, 0)
        first = hand_categories(Hand((1, 1, 2, 3, 4), config), state)
        second = hand_categories(Hand((3, 4, 1, 1, 2), config), state)
        assert second is first
        assert len(state.categories_by_effective_key) == 1

    def test_group_classified_once(self, five_dice):
        groups = group_hands(five_dice, FIVE_NORMAL)
        state = AnalysisState()
        classify_groups(groups, state)
        classify_groups(groups, state)
        assert state.count_by_category[HandCategory.HIGH_ROLL] == TOTAL
        assert state.filtered_total == TOTAL


# ═══════════════════════════════════════════════════════════════════════════════
# 2. FILTER
# ═══════════════════════════════════════════════════════════════════════════════


class TestFilter:

    def test_no_filter_passes_everything(self):
        assert passes_filter(Hand((1, 1, 1, 1, 1), FIVE_NORMAL), frozenset(), frozenset())

    def test_excluded_category_fails(self):
        hand = Hand((1, 1, 2, 3, 6), FIVE_NORMAL)
        assert not passes_filter(hand, {HandCategory.PAIR}, set())

    def test_included_requires_overlap(self):
        hand = Hand((1, 1, 2, 3, 6), FIVE_NORMAL)
        assert passes_filter(hand, set(), {HandCategory.PAIR, HandCategory.FLUSH})
        assert not passes_filter(hand, set(), {HandCategory.FLUSH})

    def test_high_roll_filter_only_matches_plain_hands(self):
        assert passes_filter(Hand((1, 3, 5, 2, 6), FIVE_NORMAL), set(), {HandCategory.HIGH_ROLL})
        assert not passes_filter(Hand((1, 1, 5, 2, 6), FIVE_NORMAL), set(), {HandCategory.HIGH_ROLL})

    def test_excluding_pair_without_rerolls(self, five_dice):
        report = analyze(five_dice, SHIPPED, excluded={HandCategory.PAIR})
        assert report.filter_active
        assert report.filtered_total == TOTAL - report[HandCategory.PAIR].base_count

    def test_including_pair_without_rerolls(self, five_dice):
        report = analyze(five_dice, SHIPPED, included={HandCategory.PAIR})
        assert report.filtered_total == report[HandCategory.PAIR].base_count

    def test_including_high_roll(self, five_dice):
        report = analyze(five_dice, FIVE_NORMAL, included={HandCategory.HIGH_ROLL})
        assert report.filtered_total == 240

    def test_filter_does_not_change_category_odds(self, five_dice, five_normal_report):
        report = analyze(five_dice, FIVE_NORMAL, excluded={HandCategory.QUAD})
        for category in ALL_CATEGORIES:
            assert report[category] == five_normal_report[category]

    def test_inactive_filter_gets_no_reroll_credit(self, shipped_reports):
        report = shipped_reports[2]
        assert not report.filter_active
        assert report.filtered_total == TOTAL
        assert report.filtered_probability == 1

    def test_active_filter_gains_reroll_credit(self, five_dice):
        config = RollConfiguration(2, 3, 0, rerolls=1)
        report = analyze(five_dice, config, excluded={HandCategory.PAIR})
        base = analyze(five_dice, SHIPPED, excluded={HandCategory.PAIR})
        assert report.filtered_total >= base.filtered_total
        assert 0 <= report.filtered_probability <= 1


# ═══════════════════════════════════════════════════════════════════════════════
# 3. REROLL ODDS
# ═══════════════════════════════════════════════════════════════════════════════


class TestRerollOdds:

    def test_exact_budget(self):
        assert reroll_odds(1, 1) == Fraction(1, 6)
        assert reroll_odds(2, 2) == Fraction(1, 36)
        assert reroll_odds(3, 3) == Fraction(1, 216)

    def test_spare_rerolls_add_up(self):
        assert reroll_odds(1, 2) == Fraction(1, 6) + Fraction(1, 36)
        assert reroll_odds(1, 3) == Fraction(1, 6) + Fraction(1, 36) + Fraction(1, 216)
        assert reroll_odds(2, 3) == Fraction(1, 36) + Fraction(1, 216)

    def test_out_of_reach(self):
        assert reroll_odds(2, 1) is None
        assert reroll_odds(4, 4) is None
        assert reroll_odds(0, 3) is None

    def test_odds_grow_with_budget(self):
        for distance in (1, 2, 3):
            values = [reroll_odds(distance, budget) or 0 for budget in range(4)]
            assert values == sorted(values)

    def test_jackpot_credit_with_one_reroll(self, five_dice):
        """Each of the 30 four-of-a-kind classes is one die away from one jackpot."""
        report = analyze(five_dice, RollConfiguration(0, 5, 0, rerolls=1))
        jackpot = report[HandCategory.JACKPOT]
        assert jackpot.base_count == 6
        assert jackpot.reroll_odds == 5
        assert jackpot.count == 11
        assert jackpot.probability == Fraction(11, TOTAL)

    def test_high_roll_gets_no_credit(self, shipped_reports):
        assert shipped_reports[3][HandCategory.HIGH_ROLL].reroll_odds == 0

    def test_fixed_dice_limit_reach(self, five_dice):
        """Communal dice cannot be rerolled: 2 communal + 3 normal never reach a jackpot
        unless both communal dice already match."""
        report = analyze(five_dice, RollConfiguration(2, 3, 0, rerolls=1))
        # Sources: communal (k,k) with normal holding two k's and one other: 6 faces × 5 others
        assert report[HandCategory.JACKPOT].reroll_odds == Fraction(30, 6)


# ═══════════════════════════════════════════════════════════════════════════════
# 4. PROPERTIES
# ═══════════════════════════════════════════════════════════════════════════════


class TestProperties:

    def test_probabilities_within_bounds(self, shipped_reports, five_dice):
        reports = list(shipped_reports.values())
        reports.append(analyze(five_dice, RollConfiguration(0, 5, 0, rerolls=3)))
        for report in reports:
            for odds in report.odds.values():
                assert 0 <= odds.probability <= 1

    def test_idempotent(self, five_dice):
        config = RollConfiguration(2, 3, 0, rerolls=2)
        first = analyze(five_dice, config, excluded={HandCategory.FLUSH})
        second = analyze(five_dice, config, excluded={HandCategory.FLUSH})
        assert first.odds == second.odds
        assert first.filtered_total == second.filtered_total

    def test_order_independent(self, five_dice):
        config = RollConfiguration(0, 5, 0, rerolls=1)
        forward = analyze(five_dice, config)
        backward = analyze(list(reversed(five_dice)), config)
        assert forward.odds == backward.odds

    def test_more_rerolls_never_lower_odds(self, shipped_reports):
        for category in ALL_CATEGORIES:
            probabilities = [shipped_reports[r][category].probability for r in range(4)]
            assert probabilities == sorted(probabilities)

    def test_counts_never_decrease_with_rerolls(self, shipped_reports):
        for category in ALL_CATEGORIES:
            counts = [shipped_reports[r][category].count for r in range(4)]
            assert counts == sorted(counts)


# ═══════════════════════════════════════════════════════════════════════════════
# 5. ERRORS
# ═══════════════════════════════════════════════════════════════════════════════


class TestErrors:

    def test_empty_domain(self):
        with pytest.raises(EmptyDomainError):
            analyze([], SHIPPED)

    def test_rolls_shorter_than_configuration(self):
        with pytest.raises(ConfigurationError):
            analyze(generate_rolls(3), SHIPPED)

    def test_zero_matches_is_not_an_error(self):
        report = analyze(generate_rolls(3), RollConfiguration(0, 3, 0))
        assert report[HandCategory.FLUSH].probability == 0
        assert report[HandCategory.BIG_STRAIGHT].probability == 0
