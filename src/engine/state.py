"""
Puzzle State Module - Immutable game state and its transitions.

State transitions never copy untouched containers: a move builds two new
Container values and a new tuple that references every other container
unchanged. The solver relies on the same apply_pour() helper.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

from .colors import GameColor
from .container import Container
from .errors import InvalidMove, InvalidPuzzle, NoHistory
from .move import Move
from .puzzle import PuzzleDefinition
from .rules import MoveRejection, is_won, rejection_reason, transfer_amount

logger = logging.getLogger(__name__)

# Separates containers in a state key; never a color symbol.
KEY_DELIMITER = "|"


def state_key(containers: Sequence[Container]) -> str:
    """
    Canonical key for deduplication during search.

    Each container is rendered as its color symbols bottom to top, containers
    are joined in order with KEY_DELIMITER and an empty container is an empty
    segment. Two states with equal keys are interchangeable for search.
    """
    return KEY_DELIMITER.join(
        "".join(color.value for color in container.colors) for container in containers
    )


def _transfer(containers: Tuple[Container, ...], from_index: int, to_index: int,
              count: int) -> Tuple[Container, ...]:
    """Move the top `count` units between two indices, sharing all other containers."""
    source = containers[from_index]
    target = containers[to_index]

    new_source = source.remove_top_colors(count)
    new_target = target.add_colors(source.colors[len(source.colors) - count:])

    return tuple(
        new_source if i == from_index else new_target if i == to_index else container
        for i, container in enumerate(containers)
    )


def apply_pour(containers: Tuple[Container, ...], from_index: int,
               to_index: int) -> Tuple[Tuple[Container, ...], Move]:
    """
    Pour the top run of one container into another.

    The pair must already be legal (see rules.can_move); the amount moved is
    rules.transfer_amount().

    Args:
        containers: Current containers
        from_index: Index of the source container
        to_index: Index of the target container

    Returns:
        Tuple of (new containers, Move record)
    """
    source = containers[from_index]
    count = transfer_amount(source, containers[to_index])
    move = Move(from_id=source.id, to_id=containers[to_index].id,
                color=source.top_color, count=count)
    return _transfer(containers, from_index, to_index, count), move


@dataclass(frozen=True)
class PuzzleState:
    """
    Immutable puzzle state.

    Attributes:
        containers: Current containers, in the definition's order
        definition: The puzzle being played (initial configuration, limits)
        history: Moves applied since the initial configuration
    """
    containers: Tuple[Container, ...]
    definition: PuzzleDefinition
    history: Tuple[Move, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "containers", tuple(self.containers))
        object.__setattr__(self, "history", tuple(self.history))
        ids = [container.id for container in self.containers]
        if len(ids) != len(set(ids)):
            raise InvalidPuzzle(f"Container ids must be unique, got {ids}")

    @classmethod
    def from_definition(cls, definition: PuzzleDefinition) -> 'PuzzleState':
        """Create the initial state of a puzzle."""
        return cls(containers=definition.containers, definition=definition)

    @classmethod
    def from_containers(cls, containers: Iterable[Container],
                        move_limit: Optional[int] = None) -> 'PuzzleState':
        """Create a state from bare containers with an ad-hoc definition."""
        definition = PuzzleDefinition.from_containers(containers, move_limit=move_limit)
        return cls.from_definition(definition)

    # ==================== DERIVED PROPERTIES ====================

    @property
    def move_count(self) -> int:
        return len(self.history)

    @property
    def moves_remaining(self) -> Optional[int]:
        """Moves left under the move limit, or None when unlimited."""
        if self.definition.move_limit is None:
            return None
        return self.definition.move_limit - self.move_count

    @property
    def is_won(self) -> bool:
        return is_won(self.containers)

    @property
    def is_lost(self) -> bool:
        """True iff a move limit exists and was reached without winning."""
        limit = self.definition.move_limit
        if limit is None:
            return False
        return self.move_count >= limit and not self.is_won

    @property
    def is_game_over(self) -> bool:
        return self.is_won or self.is_lost

    @property
    def can_undo(self) -> bool:
        return bool(self.history)

    @property
    def current_stars(self) -> int:
        if not self.is_won:
            return 0
        return self.definition.calculate_stars(self.move_count)

    @property
    def state_key(self) -> str:
        return state_key(self.containers)

    def get_container(self, container_id: str) -> Optional[Container]:
        index = self._index_of(container_id)
        return None if index is None else self.containers[index]

    def color_counts(self) -> Dict[GameColor, int]:
        """Multiset of colors across all containers."""
        return Counter(color for container in self.containers for color in container.colors)

    def _index_of(self, container_id: str) -> Optional[int]:
        for i, container in enumerate(self.containers):
            if container.id == container_id:
                return i
        return None

    # ==================== STATE TRANSITIONS ====================

    def apply_move(self, from_id: str, to_id: str) -> 'PuzzleState':
        """
        Pour from one container into another.

        Args:
            from_id: Source container id
            to_id: Target container id

        Returns:
            New PuzzleState with the move appended to history

        Raises:
            InvalidMove: If a container is missing or the rules reject the pair
        """
        from_index = self._index_of(from_id)
        to_index = self._index_of(to_id)
        if from_index is None or to_index is None:
            raise InvalidMove(MoveRejection.UNKNOWN_CONTAINER, from_id, to_id)

        reason = rejection_reason(self.containers[from_index], self.containers[to_index])
        if reason is not None:
            raise InvalidMove(reason, from_id, to_id)

        containers, move = apply_pour(self.containers, from_index, to_index)
        logger.debug(f"[State] Applied {move}")
        return PuzzleState(containers=containers, definition=self.definition,
                           history=self.history + (move,))

    def undo(self) -> 'PuzzleState':
        """
        Revert the last move by replaying its inverse.

        Raises:
            NoHistory: If no moves have been made
        """
        if not self.history:
            raise NoHistory()

        inverse = self.history[-1].inverse()
        from_index = self._index_of(inverse.from_id)
        to_index = self._index_of(inverse.to_id)
        if from_index is None or to_index is None:
            raise InvalidPuzzle(f"History refers to unknown container in {inverse}")

        containers = _transfer(self.containers, from_index, to_index, inverse.count)
        return PuzzleState(containers=containers, definition=self.definition,
                           history=self.history[:-1])

    def reset(self) -> 'PuzzleState':
        """Discard history and return to the initial configuration."""
        return PuzzleState.from_definition(self.definition)

    def to_debug_string(self) -> str:
        limit = self.definition.move_limit
        status = "WON" if self.is_won else "LOST" if self.is_lost else "IN PROGRESS"
        lines = [
            f"PuzzleState {self.definition.name} ({self.definition.id})",
            f"  Moves: {self.move_count} / {limit if limit is not None else 'unlimited'}",
            f"  Status: {status}",
        ]
        lines.extend(f"  {container.to_debug_string()}" for container in self.containers)
        return "\n".join(lines)
