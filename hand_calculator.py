#!/usr/bin/env python3
"""
Unified entry point for the hand calculator.

Usage:
    python hand_calculator.py                         # Default: interactive menu
    python hand_calculator.py --ui cli                # Print one report
    python hand_calculator.py --ui cli --rerolls 2    # Report with 2 rerolls
    python hand_calculator.py --ui tui --extra 1      # Menu starting with 1 extra roll

Individual entry points (tui.py, cli.py) still work independently.
"""
import argparse
import sys


def main():
    # Pre-parse just the --ui flag, pass everything else through
    parser = argparse.ArgumentParser(
        description="Hand Calculator — exact dice hand odds in the terminal",
        add_help=False,
    )
    parser.add_argument("--ui", choices=["tui", "cli"], default="tui",
                        help="Interface: tui (interactive menu, default), cli (one report)")
    args, remaining = parser.parse_known_args()

    if args.ui == "tui":
        from tui import main as run_tui
        run_tui(remaining)

    elif args.ui == "cli":
        from cli import main as run_cli
        sys.exit(run_cli(remaining))


if __name__ == "__main__":
    main()
