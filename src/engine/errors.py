"""
Errors Module - Exception hierarchy for the puzzle engine.

Every failure the engine can report is an ordinary exception derived from
PuzzleError. Search failures are normally returned as result values; the
exceptions below are raised by state transitions, by constructors, and on
request via SolutionResult.raise_for_failure().
"""

from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from .rules import MoveRejection


class PuzzleError(Exception):
    """Base class for all puzzle engine errors."""


class InvalidPuzzle(PuzzleError):
    """Raised when a puzzle definition or state is structurally inconsistent."""


class CapacityExceeded(PuzzleError):
    """Raised when a container is built with more colors than it can hold."""

    def __init__(self, container_id: str, size: int, capacity: int):
        self.container_id = container_id
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"Container {container_id}: {size} colors exceed capacity {capacity}"
        )


class InsufficientColors(PuzzleError):
    """Raised when removing more colors than a container holds."""

    def __init__(self, container_id: str, requested: int, available: int):
        self.container_id = container_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Cannot remove {requested} colors from container {container_id}, "
            f"only have {available}"
        )


class InvalidMove(PuzzleError):
    """
    Raised when a move is rejected by the legality rules.

    Attributes:
        reason: MoveRejection naming the rule that failed
        from_id: Requested source container id
        to_id: Requested target container id
    """

    def __init__(self, reason: "MoveRejection", from_id: str, to_id: str):
        self.reason = reason
        self.from_id = from_id
        self.to_id = to_id
        super().__init__(f"Invalid move {from_id} -> {to_id}: {reason.message}")


class NoHistory(PuzzleError):
    """Raised by undo() when no moves have been made."""

    def __init__(self):
        super().__init__("No moves to undo")


class SearchBudgetExceeded(PuzzleError):
    """
    The solver gave up before proving solvability either way.

    This is not a proof of unsolvability: the state or depth budget ran out.
    """

    def __init__(self, message: str, states_explored: int = 0):
        self.states_explored = states_explored
        super().__init__(message)


class UnsolvablePuzzle(PuzzleError):
    """The solver exhausted the whole reachable state space without a win."""

    def __init__(self, message: str, states_explored: int = 0):
        self.states_explored = states_explored
        super().__init__(message)


class GenerationFailure(PuzzleError):
    """
    Raised when the generator exhausts its attempt budget.

    Attributes:
        attempts: Number of attempts made
        rejections: Count of attempts per rejection reason name
    """

    def __init__(self, attempts: int, rejections: Optional[Dict[str, int]] = None,
                 difficulty: str = ""):
        self.attempts = attempts
        self.rejections = dict(rejections or {})
        self.difficulty = difficulty
        detail = ", ".join(f"{name}={count}" for name, count in sorted(self.rejections.items()))
        super().__init__(
            f"Failed to generate a valid {difficulty or 'puzzle'} after {attempts} attempts"
            + (f" ({detail})" if detail else "")
        )
