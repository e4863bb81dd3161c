"""
Search Module - Entry points for solving and hinting.

These functions accept whatever form of puzzle the caller holds (a
PuzzleState, a PuzzleDefinition or a plain sequence of containers) and run
a registered strategy under the given budgets.
"""

import logging
from typing import Sequence, Tuple, Union

from src.engine import Container, PuzzleDefinition, PuzzleState, has_any_legal_move, is_won

from .base import SolverStrategy
from .context import DEFAULT_MAX_DEPTH, DEFAULT_MAX_STATES, SolutionContext
from .factory import DEFAULT_STRATEGY, create_strategy
from .solution import HintResult, SolutionResult

logger = logging.getLogger(__name__)

Puzzle = Union[PuzzleState, PuzzleDefinition, Sequence[Container]]

# Above this many containers the quick check refuses to vouch for a puzzle.
QUICK_CHECK_MAX_CONTAINERS = 12


def containers_of(puzzle: Puzzle) -> Tuple[Container, ...]:
    """Extract the current containers from any supported puzzle form."""
    if isinstance(puzzle, (PuzzleState, PuzzleDefinition)):
        return puzzle.containers
    return tuple(puzzle)


def find_optimal_solution(
    puzzle: Puzzle,
    max_states: int = DEFAULT_MAX_STATES,
    max_depth: int = DEFAULT_MAX_DEPTH,
    strategy: str = DEFAULT_STRATEGY,
) -> SolutionResult:
    """
    Find the shortest move sequence that wins the puzzle.

    Args:
        puzzle: PuzzleState, PuzzleDefinition or container sequence
        max_states: Maximum states to explore before giving up
        max_depth: Maximum solution length to consider
        strategy: Registered strategy name

    Returns:
        SolutionResult; a solved puzzle yields found=True with no moves
    """
    return _run(create_strategy(strategy), puzzle, max_states, max_depth)


def _run(solver: SolverStrategy, puzzle: Puzzle, max_states: int,
         max_depth: int) -> SolutionResult:
    context = SolutionContext(containers=containers_of(puzzle),
                              max_states=max_states, max_depth=max_depth)
    result = solver.solve(context)
    logger.debug(f"[Search] {result}")
    return result


def get_next_move(
    puzzle: Puzzle,
    max_states: int = DEFAULT_MAX_STATES,
    max_depth: int = DEFAULT_MAX_DEPTH,
    strategy: str = DEFAULT_STRATEGY,
) -> HintResult:
    """
    Get the first move of an optimal solution.

    Runs the same full search as find_optimal_solution(); the first step is
    only known to be optimal once its level of the search is complete.

    Returns:
        HintResult; found is False with ALREADY_SOLVED for a won puzzle

    Raises:
        ValueError: If the strategy does not guarantee optimal solutions
    """
    solver = create_strategy(strategy, require_optimal=True)
    return HintResult.from_solution(_run(solver, puzzle, max_states, max_depth))


def quick_check(puzzle: Puzzle) -> bool:
    """
    Cheap plausibility check run before a full search.

    Rejects puzzles with no containers, puzzles with neither an empty
    container nor any legal move, and very large puzzles. May reject a
    solvable puzzle, so it is only used when a caller opts in.

    Returns:
        False if the puzzle looks unsolvable or too large to search
    """
    containers = containers_of(puzzle)
    if not containers:
        return False
    if is_won(containers):
        return True

    has_empty = any(container.is_empty for container in containers)
    if not has_empty and not has_any_legal_move(containers):
        return False

    if len(containers) > QUICK_CHECK_MAX_CONTAINERS:
        return False

    return True
