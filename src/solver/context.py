"""
Solution Context Module - Input and budgets for a single search.
"""

import time
from dataclasses import dataclass, field
from typing import Tuple

from src.engine import Container

DEFAULT_MAX_STATES = 5000
DEFAULT_MAX_DEPTH = 50


@dataclass
class SolutionContext:
    """
    Context passed to strategies containing the containers to solve and
    the search budgets.

    There is no cancellation flag: the state and depth budgets are the only
    bound on a search. Callers that need to abandon a search run it in their
    own worker and discard the result.

    Attributes:
        containers: Containers to solve, in state order
        max_states: Maximum states popped from the frontier
        max_depth: Maximum solution length explored
        start_time: When computation started (perf_counter seconds)
    """
    containers: Tuple[Container, ...]
    max_states: int = DEFAULT_MAX_STATES
    max_depth: int = DEFAULT_MAX_DEPTH
    start_time: float = field(default_factory=time.perf_counter)

    def __post_init__(self):
        self.containers = tuple(self.containers)

    def elapsed_ms(self) -> float:
        """
        Get milliseconds elapsed since computation started.

        Returns:
            Elapsed time in milliseconds
        """
        return (time.perf_counter() - self.start_time) * 1000
