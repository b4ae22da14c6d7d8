"""
Report Test Suite

Sections:
    1. Number formatting — counts and percentages
    2. Full report — header, category lines, filter summary, timing
    3. Category lists — menu bullets
"""
from fractions import Fraction

import pytest

from hand import RollConfiguration
from hand_analyzer import analyze
from hand_category import HandCategory
from hand_tables import generate_rolls
from report import (
    NO_DATA,
    format_category_list,
    format_count,
    format_percent,
    format_report,
)


@pytest.fixture(scope="module")
def five_dice():
    return generate_rolls(5)


@pytest.fixture(scope="module")
def report(five_dice):
    return analyze(five_dice, RollConfiguration(0, 5, 0))


# ── 1. Number formatting ─────────────────────────────────────────────────────


def test_whole_count_prints_bare():
    assert format_count(6) == "6"
    assert format_count(Fraction(12, 2)) == "6"


def test_fractional_count_prints_four_places():
    assert format_count(Fraction(5, 2)) == "2.5000"
    assert format_count(Fraction(1, 6)) == "0.1667"


def test_percent_four_places():
    assert format_percent(Fraction(6, 7776)) == "0.0772%"
    assert format_percent(1) == "100.0000%"


# ── 2. Full report ───────────────────────────────────────────────────────────


def test_header(report):
    text = format_report(report, include_timing=False)
    assert text.startswith("Analyzing Possible Hands (0 rerolls and 0 extra rolls)")


def test_category_lines(report):
    lines = format_report(report, include_timing=False).splitlines()
    assert "Jackpot - 6 / 7776 (0.0772%)" in lines
    assert "Big Straight - 240 / 7776 (3.0864%)" in lines
    assert "High Roll - 7776 / 7776 (100.0000%)" in lines


def test_categories_in_rank_order(report):
    lines = format_report(report, include_timing=False).splitlines()
    category_lines = [line for line in lines if " / 7776 " in line]
    assert [line.split(" - ")[0] for line in category_lines] == [
        "High Roll", "Pair", "Two Pair", "Triple", "Small Straight",
        "Flush", "Full House", "Big Straight", "Quad", "Jackpot",
    ]


def test_no_filter_summary_without_filter(report):
    assert "after exclusions" not in format_report(report, include_timing=False)


def test_filter_summary(five_dice):
    filtered = analyze(five_dice, RollConfiguration(0, 5, 0), excluded={HandCategory.PAIR})
    text = format_report(filtered, include_timing=False)
    assert "720 of 7776 hands (9.2593%) after exclusions / inclusions" in text


def test_timing_line(report):
    assert format_report(report).splitlines()[-1].startswith("That took me about")
    assert "That took me about" not in format_report(report, include_timing=False)


def test_formatting_leaves_report_untouched(report):
    before = dict(report.odds)
    format_report(report)
    assert report.odds == before


def test_no_data_text():
    assert NO_DATA == "No data."


# ── 3. Category lists ────────────────────────────────────────────────────────


def test_category_list_sorted_by_rank():
    text = format_category_list([HandCategory.QUAD, HandCategory.PAIR], "none")
    assert text == "* Pair - 1\n* Quad - 8"


def test_empty_category_list():
    assert format_category_list([], "No hands excluded.") == "No hands excluded."
