"""
Validator Module - Solvability and quality checks for a puzzle configuration.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from src.engine import Container, is_won
from src.solver import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_STATES,
    FailureReason,
    find_optimal_solution,
    quick_check,
)

logger = logging.getLogger(__name__)

# Share of full containers that may already be solved before a warning is raised.
SOLVED_RATIO_WARNING = 0.5


@dataclass
class ValidationResult:
    """
    Outcome of validate_puzzle().

    Attributes:
        is_solvable: True if a solution was found (or the puzzle is already won)
        optimal_move_count: Shortest solution length, when solvable
        states_explored: States popped by the solver
        error_message: Why the puzzle was rejected
        warning_message: Quality concerns for a solvable puzzle, joined with "; "
        reason: Solver failure reason, when the search failed
    """
    is_solvable: bool
    optimal_move_count: Optional[int] = None
    states_explored: int = 0
    error_message: Optional[str] = None
    warning_message: Optional[str] = None
    reason: Optional[FailureReason] = None

    def __str__(self) -> str:
        if not self.is_solvable:
            return f"Unsolvable: {self.error_message}"
        parts = [f"Solvable in {self.optimal_move_count} moves",
                 f"({self.states_explored} states explored)"]
        if self.warning_message:
            parts.append(f"Warning: {self.warning_message}")
        return " ".join(parts)


def validate_puzzle(
    containers: Sequence[Container],
    max_states: int = DEFAULT_MAX_STATES,
    max_depth: int = DEFAULT_MAX_DEPTH,
    quick: bool = False,
) -> ValidationResult:
    """
    Check that a configuration can be won and report its optimal length.

    Args:
        containers: Initial configuration
        max_states: Solver state budget
        max_depth: Solver depth budget
        quick: Run quick_check() first and reject without searching if it fails

    Returns:
        ValidationResult. A budget failure is reported with is_solvable False
        and reason STATE_LIMIT or DEPTH_LIMIT; it is not a proof.
    """
    containers = tuple(containers)
    if not containers:
        return ValidationResult(is_solvable=False, error_message="Puzzle has no containers",
                                reason=FailureReason.INVALID_PUZZLE)

    if is_won(containers):
        return ValidationResult(is_solvable=True, optimal_move_count=0,
                                warning_message="Puzzle is already solved")

    if not any(container.available_space for container in containers):
        return ValidationResult(is_solvable=False,
                                error_message="Puzzle needs free space in at least one container",
                                reason=FailureReason.UNSOLVABLE)

    if quick and not quick_check(containers):
        return ValidationResult(is_solvable=False,
                                error_message="Puzzle failed the quick check",
                                reason=FailureReason.INVALID_PUZZLE)

    solution = find_optimal_solution(containers, max_states=max_states, max_depth=max_depth)
    if not solution.found:
        logger.debug(f"[Validator] Rejected: {solution.error_message}")
        return ValidationResult(is_solvable=False, states_explored=solution.states_explored,
                                error_message=solution.error_message or "No solution found",
                                reason=solution.reason)

    warnings = _distribution_warnings(containers)
    return ValidationResult(
        is_solvable=True,
        optimal_move_count=solution.move_count,
        states_explored=solution.states_explored,
        warning_message="; ".join(warnings) if warnings else None,
    )


def _distribution_warnings(containers: Sequence[Container]) -> List[str]:
    warnings = []

    full = [container for container in containers if container.is_full]
    solved = [container for container in full if container.is_solved]
    if full and len(solved) / len(full) > SOLVED_RATIO_WARNING:
        warnings.append("More than 50% of full containers are already solved")

    colors = {color for container in containers for color in container.colors}
    if len(colors) < 2:
        warnings.append("Puzzle has fewer than 2 different colors")

    return warnings


def estimate_difficulty(containers: Sequence[Container]) -> float:
    """
    Heuristic difficulty score without solving.

    More containers, more colors and more mixed containers raise the score;
    a larger share of empty containers lowers it.

    Returns:
        Score clamped to [0, 100]
    """
    containers = tuple(containers)
    if not containers:
        return 0.0

    colors = {color for container in containers for color in container.colors}
    empty_ratio = sum(1 for container in containers if container.is_empty) / len(containers)
    mixed = sum(1 for container in containers
                if not container.is_empty and not container.is_solved)

    score = len(containers) * 2 + len(colors) * 3 - empty_ratio * 10 + mixed * 2
    return float(min(100.0, max(0.0, score)))
