#!/usr/bin/env python3
"""
Hand Calculator CLI — print one analysis report and exit.

Usage:
    python cli.py                                   # 2 communal, 3 normal dice
    python cli.py --rerolls 2 --extra 1
    python cli.py --communal 0 --normal 5 --exclude pair
"""
import argparse
import sys

from calculator_coordinator import configure_logging, coordinator_from_args, parse_args
from hand import ConfigurationError


def main(argv=None):
    """Entry point for the one-shot report. Returns the process exit status."""
    args = parse_args(argv)
    configure_logging(args)
    try:
        coordinator = coordinator_from_args(args)
    except (ConfigurationError, argparse.ArgumentTypeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    print(coordinator.analysis_text())
    return 0


if __name__ == "__main__":
    sys.exit(main())
