"""
Base Strategy Module - Abstract base class for solving strategies.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from src.engine import Container, Move, apply_pour, legal_moves

from .context import SolutionContext
from .solution import FailureReason, SolutionMetrics, SolutionResult


class SolverStrategy(ABC):
    """
    Abstract base class for all solving strategies.

    Subclasses must implement the solve() method and define
    name and description class attributes. Strategies hold no per-search
    state, so one instance can serve any number of searches.

    Attributes:
        name: Short identifier for the strategy
        description: Human-readable description
        optimal: True if solutions are guaranteed shortest (required for hints)
    """
    name: str = "base"
    description: str = "Base strategy"
    optimal: bool = False

    @abstractmethod
    def solve(self, context: SolutionContext) -> SolutionResult:
        """
        Search for a shortest move sequence that wins the puzzle.

        Must respect context.max_states and context.max_depth.

        Args:
            context: Solution context with containers and budgets

        Returns:
            SolutionResult with moves and metrics
        """
        pass

    def expand(self, containers: Tuple[Container, ...]) -> List[Tuple[Tuple[Container, ...], Move]]:
        """
        Apply every legal move to a configuration.

        Args:
            containers: Current containers

        Returns:
            List of (resulting containers, move) pairs in index order
        """
        return [apply_pour(containers, i, j) for i, j in legal_moves(containers)]

    def _build_result(
        self,
        context: SolutionContext,
        states_explored: int,
        max_depth_reached: int,
        moves: Sequence[Move] = (),
        reason: FailureReason = None,
        error_message: str = None,
    ) -> SolutionResult:
        """Build SolutionResult object from computation results."""
        return SolutionResult(
            found=reason is None,
            moves=tuple(moves),
            reason=reason,
            error_message=error_message,
            metrics=SolutionMetrics(
                computation_time_ms=context.elapsed_ms(),
                states_explored=states_explored,
                max_depth_reached=max_depth_reached,
                strategy_name=self.name,
            ),
        )
