"""
Solver Package - Optimal search framework for the color sort puzzle.

This package provides a pluggable strategy framework for finding the
shortest solution of a puzzle and single-step hints from any state.

Public API:
    - SolutionContext: Containers and search budgets
    - SolutionResult / SolutionMetrics: Result of a full search
    - HintResult: First move of an optimal solution
    - FailureReason: Typed reason for a failed search
    - CachedSolution: Serve repeated hints from one search
    - SolverStrategy: Abstract base for strategies
    - find_optimal_solution(), get_next_move(), quick_check()
    - create_strategy(): Factory function
    - get_strategy_names(): List available strategies
    - get_strategy_info(): Get strategy metadata

Usage:
    from src.solver import find_optimal_solution, get_next_move

    solution = find_optimal_solution(state, max_states=20000)
    if solution.found:
        for move in solution.moves:
            print(f"Pour {move.count} x {move.color.display_name}: {move.from_id} -> {move.to_id}")

    hint = get_next_move(state)
"""

# Core data structures
from .context import SolutionContext, DEFAULT_MAX_STATES, DEFAULT_MAX_DEPTH
from .solution import (
    CachedSolution,
    FailureReason,
    HintResult,
    SolutionMetrics,
    SolutionResult,
)

# Strategy framework
from .base import SolverStrategy
from .factory import (
    create_strategy,
    get_strategy_names,
    get_strategy_info,
    get_default_strategy_name,
    register_strategy,
)

# Import strategies to register them
from . import strategies

from .search import find_optimal_solution, get_next_move, quick_check, containers_of

__all__ = [
    # Data structures
    "SolutionContext",
    "SolutionResult",
    "SolutionMetrics",
    "HintResult",
    "FailureReason",
    "CachedSolution",
    "DEFAULT_MAX_STATES",
    "DEFAULT_MAX_DEPTH",
    # Strategy framework
    "SolverStrategy",
    "create_strategy",
    "get_strategy_names",
    "get_strategy_info",
    "get_default_strategy_name",
    "register_strategy",
    # Entry points
    "find_optimal_solution",
    "get_next_move",
    "quick_check",
    "containers_of",
]
