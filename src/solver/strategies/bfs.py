"""
Breadth-First Strategy - Optimal solver with state-key deduplication.

Explores the move graph level by level, so the first winning state popped
from the frontier is reached by a shortest move sequence.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Set, Tuple

from src.engine import Container, Move, is_won, state_key

from ..base import SolverStrategy
from ..context import SolutionContext
from ..factory import register_strategy
from ..solution import FailureReason, SolutionResult

logger = logging.getLogger(__name__)


@dataclass
class SearchNode:
    """
    Node in the BFS frontier.

    Attributes:
        containers: Configuration reached
        depth: Number of moves from the start
        path: Moves taken to reach this configuration
    """
    containers: Tuple[Container, ...]
    depth: int
    path: Tuple[Move, ...]


@register_strategy
class BreadthFirstStrategy(SolverStrategy):
    """
    Breadth-first search over legal pours.

    Algorithm:
        1. Return an empty solution if the start is already won
        2. Seed a FIFO frontier and a visited set of state keys with the start
        3. Pop the head; a won configuration ends the search with its path
        4. Otherwise enqueue every unseen configuration one legal pour away
        5. Fail when the frontier empties or the state budget is spent

    Nodes at max_depth are not expanded. If the frontier empties after any
    node was cut off that way the result is DEPTH_LIMIT, not UNSOLVABLE.
    """
    name = "bfs"
    description = "Breadth-first search (optimal) - Shortest solution with state deduplication"
    optimal = True

    def solve(self, context: SolutionContext) -> SolutionResult:
        """
        Compute an optimal solution.

        Args:
            context: Solution context with containers and budgets

        Returns:
            SolutionResult with the shortest move sequence, or a failure reason
        """
        start = context.containers

        if is_won(start):
            return self._build_result(context, states_explored=0, max_depth_reached=0)

        frontier: Deque[SearchNode] = deque([SearchNode(start, 0, ())])
        visited: Set[str] = {state_key(start)}
        states_explored = 0
        max_depth_reached = 0
        depth_pruned = False

        while frontier:
            if states_explored >= context.max_states:
                logger.info(
                    f"[BFS] State budget exhausted: {states_explored} states, "
                    f"depth {max_depth_reached}, {len(visited)} seen"
                )
                return self._build_result(
                    context, states_explored, max_depth_reached,
                    reason=FailureReason.STATE_LIMIT,
                    error_message=f"Search exceeded maximum states ({context.max_states})",
                )

            node = frontier.popleft()
            states_explored += 1
            max_depth_reached = max(max_depth_reached, node.depth)

            if is_won(node.containers):
                logger.debug(
                    f"[BFS] Solved in {node.depth} moves, {states_explored} states explored"
                )
                return self._build_result(context, states_explored, max_depth_reached,
                                          moves=node.path)

            if node.depth >= context.max_depth:
                depth_pruned = True
                continue

            for containers, move in self.expand(node.containers):
                key = state_key(containers)
                if key in visited:
                    continue
                visited.add(key)
                frontier.append(SearchNode(containers, node.depth + 1, node.path + (move,)))

        if depth_pruned:
            return self._build_result(
                context, states_explored, max_depth_reached,
                reason=FailureReason.DEPTH_LIMIT,
                error_message=f"No solution within maximum depth ({context.max_depth})",
            )

        logger.debug(f"[BFS] State space exhausted after {states_explored} states")
        return self._build_result(
            context, states_explored, max_depth_reached,
            reason=FailureReason.UNSOLVABLE,
            error_message="Puzzle is unsolvable",
        )
