"""
CalculatorCoordinator — All menu state and actions, without any UI.

Owns the roll configuration, the excluded / included category lists and the
generated dice pool. The TUI and CLI call coordinator methods and render what
comes back.
"""
from __future__ import annotations

import argparse
import logging
from dataclasses import replace

from hand import ConfigurationError, RollConfiguration
from hand_analyzer import EmptyDomainError, analyze
from hand_category import ALL_CATEGORIES, HandCategory, category_by_name, category_by_rank
from hand_tables import DICE_POOL, MAX_DICE_POOL, generate_rolls
from report import NO_DATA, format_category_list, format_report
from settings import LOG_LEVELS, load_settings, roll_configuration

logger = logging.getLogger(__name__)

MENU_COMMANDS = [
    ("P", "Possible Hands"),
    ("R", "Set Rerolls"),
    ("O", "Set Extra Rolls"),
    ("E", "Set Excluded Hands"),
    ("I", "Set Included Hands"),
    ("X", "Exit"),
]


class CalculatorCoordinator:
    """Holds what the user has configured and runs analyses on demand."""

    def __init__(self, config: RollConfiguration | None = None, dice_pool: int = DICE_POOL,
                 excluded=(), included=()) -> None:
        """Initialize the coordinator.

        Args:
            config: Partitioning and reroll budget. None uses the shipped default.
            dice_pool: Number of dice generated per roll.
            excluded: Initially excluded categories.
            included: Initially included categories.
        """
        self.config = config if config is not None else RollConfiguration()
        if dice_pool > MAX_DICE_POOL:
            raise ConfigurationError(f"dice pool of {dice_pool} exceeds the maximum of {MAX_DICE_POOL}")
        if self.config.relevant_dice > dice_pool:
            raise ConfigurationError(
                f"configuration reads {self.config.relevant_dice} dice but the pool has {dice_pool}"
            )
        self.dice_pool = dice_pool
        self.excluded: list[HandCategory] = list(excluded)
        self.included: list[HandCategory] = list(included)
        self._rolls = None
        self.last_report = None

    @property
    def rolls(self):
        """Every ordered roll of the dice pool, generated on first use."""
        if self._rolls is None:
            logger.info("Generating %d-dice pool", self.dice_pool)
            self._rolls = generate_rolls(self.dice_pool)
        return self._rolls

    @property
    def max_extra_rolls(self) -> int:
        return self.dice_pool - self.config.communal_rolls - self.config.normal_rolls

    # ── Configuration ────────────────────────────────────────────────────

    def set_rerolls(self, rerolls: int) -> int:
        """Set the reroll budget, clamped to [0, normal rolls]. Returns the value applied."""
        rerolls = max(0, min(rerolls, self.config.normal_rolls))
        self.config = replace(self.config, rerolls=rerolls)
        logger.info("Rerolls set to %d", rerolls)
        return rerolls

    def set_extra_rolls(self, extra_rolls: int) -> int:
        """Set the extra dice count, clamped to what the pool allows. Returns the value applied."""
        extra_rolls = max(0, min(extra_rolls, self.max_extra_rolls))
        self.config = replace(self.config, extra_rolls=extra_rolls)
        logger.info("Extra rolls set to %d", extra_rolls)
        return extra_rolls

    def toggle_excluded(self, rank: int) -> bool:
        """Toggle exclusion of the category with this rank. False if no such category."""
        return self._toggle(self.excluded, rank)

    def toggle_included(self, rank: int) -> bool:
        """Toggle inclusion of the category with this rank. False if no such category."""
        return self._toggle(self.included, rank)

    def _toggle(self, selection, rank):
        try:
            category = category_by_rank(rank)
        except KeyError:
            return False
        if category in selection:
            selection.remove(category)
        else:
            selection.append(category)
        return True

    # ── Analysis ─────────────────────────────────────────────────────────

    def run_analysis(self):
        """Analyze the current configuration and filters.

        Raises:
            EmptyDomainError: if the dice pool is empty
        """
        report = analyze(self.rolls, self.config, self.excluded, self.included)
        logger.info("Analyzed %d outcomes (%d rerolls, %d extra rolls) in %.3fs",
                    report.total_outcomes, self.config.rerolls, self.config.extra_rolls,
                    report.elapsed_seconds)
        self.last_report = report
        return report

    def analysis_text(self, include_timing=True) -> str:
        """Run an analysis and render it; "No data." when there is nothing to analyze."""
        try:
            report = self.run_analysis()
        except EmptyDomainError:
            return NO_DATA
        return format_report(report, include_timing=include_timing)

    # ── Menu text ────────────────────────────────────────────────────────

    def menu_text(self) -> str:
        return "Enter Command:\n" + "\n".join(f"{key} - {label}" for key, label in MENU_COMMANDS)

    def selected_text(self, selection, empty_text) -> str:
        """Categories currently in a selection, or empty_text."""
        return format_category_list(selection, empty_text)

    def available_text(self, selection, all_selected_text) -> str:
        """Categories not yet in a selection, or all_selected_text once every one is."""
        remaining = [category for category in ALL_CATEGORIES if category not in selection]
        return format_category_list(remaining, all_selected_text)


def parse_category_names(names):
    """Map display names (case-insensitive) or ranks to categories.

    Raises:
        argparse.ArgumentTypeError: on an unknown name
    """
    display_names = {category.display_name.lower(): category.display_name for category in ALL_CATEGORIES}
    categories = []
    for name in names or ():
        try:
            if name.isdigit():
                categories.append(category_by_rank(int(name)))
            else:
                categories.append(category_by_name(display_names[name.lower()]))
        except KeyError:
            raise argparse.ArgumentTypeError(f"unknown hand category: {name}") from None
    return categories


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Optional list of args (for testing). None uses sys.argv.

    Returns:
        Parsed argparse.Namespace. Unset configuration flags are None so that
        settings-file values can fill them.
    """
    parser = argparse.ArgumentParser(description="Hand Calculator")
    parser.add_argument("--communal", type=int, help="Communal dice (default: 2)")
    parser.add_argument("--normal", type=int, help="Normal dice (default: 3)")
    parser.add_argument("--extra", type=int, help="Extra dice (default: 0)")
    parser.add_argument("--rerolls", type=int, help="Normal dice that may be rerolled (default: 0)")
    parser.add_argument("--dice", type=int, help="Dice rolled per outcome (default: 7)")
    parser.add_argument("--exclude", nargs="+", metavar="HAND", default=[],
                        help="Hand categories (name or rank) a counted hand must not have")
    parser.add_argument("--include", nargs="+", metavar="HAND", default=[],
                        help="Hand categories (name or rank) a counted hand must have one of")
    parser.add_argument("--settings", metavar="PATH", help="Settings file (JSON)")
    parser.add_argument("--log-level", choices=LOG_LEVELS,
                        help="Logging level (default: WARNING)")
    return parser.parse_args(argv)


def coordinator_from_args(args: argparse.Namespace) -> CalculatorCoordinator:
    """Build a coordinator from parsed arguments layered over the settings file.

    Raises:
        ConfigurationError: if the resulting configuration is invalid
        argparse.ArgumentTypeError: on an unknown category name
    """
    settings = load_settings(args.settings)
    overrides = {
        "communal_rolls": args.communal,
        "normal_rolls": args.normal,
        "extra_rolls": args.extra,
        "rerolls": args.rerolls,
        "dice_pool": args.dice,
    }
    for key, value in overrides.items():
        if value is not None:
            settings[key] = value

    return CalculatorCoordinator(
        config=roll_configuration(settings),
        dice_pool=settings["dice_pool"],
        excluded=parse_category_names(args.exclude),
        included=parse_category_names(args.include),
    )


def configure_logging(args: argparse.Namespace) -> None:
    level = args.log_level or load_settings(args.settings)["log_level"]
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
