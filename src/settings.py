"""
Settings Module for the Color Sort Engine

Provides persistent storage for solver budgets and generator tuning using
JSON. Settings are stored in engine_config.json in the project root unless
another path is given.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from src.generator.difficulty import DEFAULT_STAR_MULTIPLIERS, DEFAULT_TIERS
from src.solver import DEFAULT_MAX_DEPTH, DEFAULT_MAX_STATES, get_default_strategy_name

logger = logging.getLogger(__name__)

# Settings file location (project root)
SETTINGS_FILE = Path("engine_config.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "debug_enabled": False,
    "strategy_name": get_default_strategy_name(),
    "solver": {
        "max_states": DEFAULT_MAX_STATES,
        "max_depth": DEFAULT_MAX_DEPTH,
    },
    "generator": {
        "capacity": 4,
        "star_multipliers": list(DEFAULT_STAR_MULTIPLIERS),
        "max_transfer": 2,
        "max_attempts": 100,
        "tiers": {difficulty.value: tier.to_dict() for difficulty, tier in DEFAULT_TIERS.items()},
    },
}

PathLike = Union[str, Path]


def _merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base; nested dicts merge key by key."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def load_settings(path: Optional[PathLike] = None) -> Dict[str, Any]:
    """
    Load settings from engine_config.json.

    Args:
        path: Settings file to read (defaults to SETTINGS_FILE)

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE
    if not settings_file.exists():
        logger.debug(f"[Settings] {settings_file} not found, using defaults")
        return copy.deepcopy(DEFAULT_SETTINGS)

    try:
        with open(settings_file, 'r', encoding='utf-8') as f:
            settings = json.load(f)

        if not isinstance(settings, dict):
            logger.warning(f"[Settings] {settings_file} does not hold an object, using defaults")
            return copy.deepcopy(DEFAULT_SETTINGS)

        # Merge with defaults to handle missing keys
        result = _merge(DEFAULT_SETTINGS, settings)
        logger.debug(f"[Settings] Loaded: {result}")
        return result

    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"[Settings] Failed to load settings: {e}, using defaults")
        return copy.deepcopy(DEFAULT_SETTINGS)


def save_settings(settings: Dict[str, Any], path: Optional[PathLike] = None) -> None:
    """
    Save settings to engine_config.json.

    Args:
        settings: Settings dictionary to save
        path: Settings file to write (defaults to SETTINGS_FILE)
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE
    try:
        with open(settings_file, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"[Settings] Saved to {settings_file}")
    except IOError as e:
        logger.error(f"[Settings] Failed to save settings: {e}")


def solver_budgets(settings: Mapping[str, Any]) -> Tuple[int, int]:
    """
    Solver budgets from settings.

    Returns:
        Tuple of (max_states, max_depth)
    """
    solver = settings.get("solver", {})
    return (int(solver.get("max_states", DEFAULT_MAX_STATES)),
            int(solver.get("max_depth", DEFAULT_MAX_DEPTH)))
