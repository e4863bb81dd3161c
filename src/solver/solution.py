"""
Solution Module - Result types for searches and cached hint playback.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple

from src.engine import (
    Container,
    Move,
    PuzzleState,
    SearchBudgetExceeded,
    UnsolvablePuzzle,
    apply_pour,
    state_key,
)


class FailureReason(Enum):
    """
    Why a search or hint request produced no move.

    STATE_LIMIT and DEPTH_LIMIT mean "no solution found within budget" and are
    not proofs of unsolvability; only UNSOLVABLE is.
    """
    UNSOLVABLE = "No solution exists"
    STATE_LIMIT = "Search exceeded maximum states"
    DEPTH_LIMIT = "No solution found within maximum depth"
    ALREADY_SOLVED = "Puzzle already solved"
    INVALID_PUZZLE = "Puzzle is invalid"

    @property
    def is_budget(self) -> bool:
        return self in (FailureReason.STATE_LIMIT, FailureReason.DEPTH_LIMIT)


@dataclass
class SolutionMetrics:
    """
    Performance metrics for a search.

    Attributes:
        computation_time_ms: Time taken in milliseconds
        states_explored: Number of states popped from the frontier
        max_depth_reached: Deepest level popped
        strategy_name: Name of strategy that computed this result
    """
    computation_time_ms: float = 0.0
    states_explored: int = 0
    max_depth_reached: int = 0
    strategy_name: str = ""


@dataclass
class SolutionResult:
    """
    Result of a full-solution search.

    Attributes:
        found: True if a winning move sequence was found
        moves: Optimal move sequence (empty for an already solved puzzle)
        metrics: Performance statistics
        reason: Failure reason when found is False
        error_message: Human readable failure description
    """
    found: bool
    moves: Tuple[Move, ...] = ()
    metrics: SolutionMetrics = field(default_factory=SolutionMetrics)
    reason: Optional[FailureReason] = None
    error_message: Optional[str] = None

    @property
    def move_count(self) -> int:
        """Number of moves in solution (the optimal move count when found)."""
        return len(self.moves)

    @property
    def states_explored(self) -> int:
        return self.metrics.states_explored

    @property
    def search_time_ms(self) -> int:
        return int(self.metrics.computation_time_ms)

    @property
    def budget_exceeded(self) -> bool:
        return self.reason is not None and self.reason.is_budget

    def raise_for_failure(self) -> 'SolutionResult':
        """
        Convert a failed result into the matching exception.

        Returns:
            self, when a solution was found

        Raises:
            SearchBudgetExceeded: If the state or depth budget ran out
            UnsolvablePuzzle: If the search proved there is no solution
        """
        if self.found:
            return self
        if self.budget_exceeded:
            raise SearchBudgetExceeded(self.error_message or self.reason.value,
                                       self.states_explored)
        raise UnsolvablePuzzle(self.error_message or "No solution found",
                               self.states_explored)

    def __str__(self) -> str:
        if not self.found:
            return (f"No solution: {self.error_message} "
                    f"({self.states_explored} states, {self.search_time_ms}ms)")
        return (f"Solution found: {self.move_count} moves "
                f"({self.states_explored} states, {self.search_time_ms}ms)")


@dataclass
class HintResult:
    """
    Result of a single-step hint request.

    Attributes:
        found: True if a next move is available
        move: First move of an optimal solution
        moves_remaining_to_solution: Optimal move count from the current state
        states_explored: States popped during the search
        search_time_ms: Time taken in milliseconds
        reason: Failure reason when found is False
        error_message: Human readable failure description
    """
    found: bool
    move: Optional[Move] = None
    moves_remaining_to_solution: Optional[int] = None
    states_explored: int = 0
    search_time_ms: int = 0
    reason: Optional[FailureReason] = None
    error_message: Optional[str] = None

    @classmethod
    def from_solution(cls, solution: SolutionResult) -> 'HintResult':
        """Reduce a full solution to its first step."""
        if not solution.found:
            return cls(found=False, states_explored=solution.states_explored,
                       search_time_ms=solution.search_time_ms, reason=solution.reason,
                       error_message=solution.error_message or "No hint available")
        if not solution.moves:
            return cls(found=False, states_explored=solution.states_explored,
                       search_time_ms=solution.search_time_ms,
                       reason=FailureReason.ALREADY_SOLVED,
                       error_message=FailureReason.ALREADY_SOLVED.value)
        return cls(found=True, move=solution.moves[0],
                   moves_remaining_to_solution=solution.move_count,
                   states_explored=solution.states_explored,
                   search_time_ms=solution.search_time_ms)

    def __str__(self) -> str:
        if not self.found:
            return (f"No hint: {self.error_message} "
                    f"({self.states_explored} states, {self.search_time_ms}ms)")
        return (f"Hint: {self.move.from_id} -> {self.move.to_id} "
                f"({self.moves_remaining_to_solution} moves to solution, {self.search_time_ms}ms)")


@dataclass
class CachedSolution:
    """
    Full solution with expected state keys for hint playback.

    Wraps a SolutionResult and remembers the state key before each move, so
    repeated hint requests can be answered from the cache for as long as the
    player follows the solution path.

    Attributes:
        solution: The complete solution from the search
        expected_keys: State key before each move (index i precedes moves[i])
        created_at: Timestamp for cache staleness detection
    """
    solution: SolutionResult
    expected_keys: Tuple[str, ...] = ()
    created_at: float = field(default_factory=time.perf_counter)

    @classmethod
    def build(cls, containers: Sequence[Container], solution: SolutionResult) -> 'CachedSolution':
        """
        Replay a solution from its starting containers to record state keys.

        Args:
            containers: Containers the solution starts from
            solution: Result of find_optimal_solution for those containers

        Returns:
            CachedSolution ready for hint_for()
        """
        current = tuple(containers)
        index_of = {container.id: i for i, container in enumerate(current)}
        keys = []
        for move in solution.moves:
            keys.append(state_key(current))
            current, _ = apply_pour(current, index_of[move.from_id], index_of[move.to_id])
        return cls(solution=solution, expected_keys=tuple(keys))

    @property
    def total_moves(self) -> int:
        return len(self.solution.moves)

    @property
    def age_seconds(self) -> float:
        """Time since cache was created."""
        return time.perf_counter() - self.created_at

    def position_of(self, state: PuzzleState) -> Optional[int]:
        """Index of the next solution move for this state, or None if off-path."""
        key = state.state_key
        for index, expected in enumerate(self.expected_keys):
            if expected == key:
                return index
        return None

    def hint_for(self, state: PuzzleState) -> Optional[HintResult]:
        """
        Answer a hint request from the cache.

        Args:
            state: Current puzzle state

        Returns:
            HintResult for the next cached move, or None if the state is not
            on the cached path (the caller should search again)
        """
        index = self.position_of(state)
        if index is None:
            return None
        return HintResult(
            found=True,
            move=self.solution.moves[index],
            moves_remaining_to_solution=self.total_moves - index,
            states_explored=0,
            search_time_ms=0,
        )
