"""
Strategy Factory Module - Registry of solver strategies by name.

Hints are only meaningful from a strategy whose solutions are shortest, so
lookups can insist on an optimal strategy.
"""

import logging
from typing import Any, Dict, List, Type

from .base import SolverStrategy

logger = logging.getLogger(__name__)

# Registered strategy classes, keyed by lowercase name
_STRATEGIES: Dict[str, Type[SolverStrategy]] = {}

DEFAULT_STRATEGY = "bfs"


def register_strategy(cls: Type[SolverStrategy]) -> Type[SolverStrategy]:
    """
    Class decorator adding a strategy to the registry.

    Usage:
        @register_strategy
        class IterativeDeepening(SolverStrategy):
            name = "iddfs"
            optimal = True
            ...

    Raises:
        ValueError: If the class keeps the base name or the name is taken
            by a different class
    """
    key = cls.name.lower()
    if key == SolverStrategy.name:
        raise ValueError(f"{cls.__name__} must define its own strategy name")
    existing = _STRATEGIES.get(key)
    if existing is not None and existing is not cls:
        raise ValueError(f"Strategy name '{key}' already registered by {existing.__name__}")
    _STRATEGIES[key] = cls
    return cls


def create_strategy(name: str = DEFAULT_STRATEGY, require_optimal: bool = False,
                    **kwargs: Any) -> SolverStrategy:
    """
    Instantiate a registered strategy.

    Args:
        name: Strategy name, case-insensitive (e.g., "bfs")
        require_optimal: Reject strategies that do not guarantee shortest solutions
        **kwargs: Passed to the strategy constructor

    Returns:
        Strategy instance

    Raises:
        ValueError: If the name is unknown, or the strategy is not optimal
            when require_optimal is set
    """
    cls = _STRATEGIES.get(name.lower())
    if cls is None:
        available = ", ".join(_STRATEGIES) or "none"
        raise ValueError(f"Unknown strategy: {name}. Available: {available}")
    if require_optimal and not cls.optimal:
        raise ValueError(f"Strategy '{cls.name}' does not guarantee optimal solutions")
    logger.debug(f"[Factory] Created strategy {cls.name}")
    return cls(**kwargs)


def get_strategy_names(optimal_only: bool = False) -> List[str]:
    """Registered strategy names, optionally only the optimal ones."""
    return [name for name, cls in _STRATEGIES.items() if cls.optimal or not optimal_only]


def get_strategy_info() -> List[Dict[str, Any]]:
    """
    Metadata for every registered strategy.

    Returns:
        List of dicts with 'name', 'description' and 'optimal' keys
    """
    return [
        {"name": cls.name, "description": cls.description, "optimal": cls.optimal}
        for cls in _STRATEGIES.values()
    ]


def get_default_strategy_name() -> str:
    """DEFAULT_STRATEGY when registered, else the first optimal strategy, else ""."""
    if DEFAULT_STRATEGY in _STRATEGIES:
        return DEFAULT_STRATEGY
    optimal = get_strategy_names(optimal_only=True)
    return optimal[0] if optimal else ""
