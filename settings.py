"""Startup settings for the hand calculator.

Reads optional defaults from ~/.hand_calculator_settings.json. The file is
only ever read; the calculator keeps nothing between runs.
"""

import json
import logging
from pathlib import Path

from hand import RollConfiguration

logger = logging.getLogger(__name__)

DEFAULTS = {
    "communal_rolls": 2,
    "normal_rolls": 3,
    "extra_rolls": 0,
    "rerolls": 0,
    "dice_pool": 7,
    "log_level": "WARNING",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _default_path():
    """Return the default path for the settings file."""
    return Path.home() / ".hand_calculator_settings.json"


def _valid_value(key, value):
    if key == "log_level":
        return value in LOG_LEVELS
    # bool is an int subclass; true/false are not dice counts
    return isinstance(value, int) and not isinstance(value, bool)


def load_settings(path=None):
    """Read the settings file over DEFAULTS.

    A missing, unreadable or non-object file yields DEFAULTS. Within a good
    file, unknown keys are dropped and a value of the wrong type (or an
    unknown log level) keeps its default.
    """
    path = Path(path) if path is not None else _default_path()
    settings = dict(DEFAULTS)
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring settings file %s: %s", path, exc)
        return settings
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: not a JSON object", path)
        return settings

    for key in DEFAULTS.keys() & data.keys():
        if _valid_value(key, data[key]):
            settings[key] = data[key]
        else:
            logger.warning("Ignoring bad %s in %s: %r", key, path, data[key])
    return settings


def roll_configuration(settings):
    """Build a RollConfiguration from a settings dict.

    Raises:
        ConfigurationError: if the values do not form a valid configuration
    """
    return RollConfiguration(
        communal_rolls=settings["communal_rolls"],
        normal_rolls=settings["normal_rolls"],
        extra_rolls=settings["extra_rolls"],
        rerolls=settings["rerolls"],
    )
