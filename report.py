"""
Report — Text rendering of analysis results for the menu and the CLI.

Pure formatting: nothing here changes an AnalysisReport.
"""
from __future__ import annotations

from datetime import timedelta

from hand_category import ALL_CATEGORIES

NO_DATA = "No data."


def format_count(value):
    """Whole counts print bare; fractional counts to 4 decimal places."""
    if value == int(value):
        return str(int(value))
    return f"{float(value):.4f}"


def format_percent(value):
    return f"{float(value):.4%}"


def format_header(config):
    return (f"Analyzing Possible Hands ({config.rerolls} rerolls and "
            f"{config.extra_rolls} extra rolls)\n===")


def format_filter_summary(report):
    """One line summarizing hands that survive the exclusions / inclusions."""
    return (f"{format_count(report.filtered_total)} of {report.total_outcomes} hands "
            f"({format_percent(report.filtered_probability)}) after exclusions / inclusions")


def format_category_line(odds, total_outcomes):
    return (f"{odds.category.display_name} - {format_count(odds.count)} / {total_outcomes} "
            f"({format_percent(odds.probability)})")


def format_report(report, include_timing=True):
    """Render a full analysis report.

    Args:
        report: AnalysisReport from hand_analyzer.analyze()
        include_timing: Append the run's elapsed wall-clock time

    Returns:
        Multi-line string
    """
    sections = [format_header(report.config)]
    if report.filter_active:
        sections.append(format_filter_summary(report))
    sections.append("\n".join(
        format_category_line(report.odds[category], report.total_outcomes)
        for category in ALL_CATEGORIES
    ))
    if include_timing:
        sections.append(f"That took me about {timedelta(seconds=report.elapsed_seconds)}.")
    return "\n\n".join(sections)


def format_category_list(categories, empty_text):
    """Bulleted "Name - rank" list in rank order, or empty_text if there is nothing to list."""
    categories = sorted(categories)
    if not categories:
        return empty_text
    return "\n".join(f"* {category.display_name_rank}" for category in categories)
