"""
Rules Module - Move legality predicates shared by the game, solver and generator.

All functions are pure: they inspect containers and never build new state.
"""

from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .container import Container


class MoveRejection(Enum):
    """
    Why a pour between two containers is not allowed.

    The value is a human-readable message suitable for UI feedback.
    """
    SOURCE_EMPTY = "Source container is empty"
    TARGET_FULL = "Target container is full"
    SAME_CONTAINER = "Cannot pour into the same container"
    COLOR_MISMATCH = "Colors do not match"
    UNKNOWN_CONTAINER = "Container not found"

    @property
    def message(self) -> str:
        return self.value


def rejection_reason(source: Container, target: Container) -> Optional[MoveRejection]:
    """
    Check the pour rules in order and report the first one that fails.

    Args:
        source: Container to pour from
        target: Container to pour into

    Returns:
        MoveRejection for the failing rule, or None if the move is legal
    """
    if source.is_empty:
        return MoveRejection.SOURCE_EMPTY
    if target.is_full:
        return MoveRejection.TARGET_FULL
    if source.id == target.id:
        return MoveRejection.SAME_CONTAINER
    if not target.is_empty and target.top_color != source.top_color:
        return MoveRejection.COLOR_MISMATCH
    return None


def can_move(source: Container, target: Container) -> bool:
    """True if the top run of source may be poured into target."""
    return rejection_reason(source, target) is None


def transfer_amount(source: Container, target: Container) -> int:
    """
    Number of units a legal pour transfers.

    Returns:
        0 if the move is illegal, otherwise min(top run, free space)
    """
    if not can_move(source, target):
        return 0
    return min(source.top_run_length, target.available_space)


def legal_moves(containers: Sequence[Container]) -> List[Tuple[int, int]]:
    """
    Enumerate every legal ordered pair of container indices.

    Args:
        containers: Containers in state order

    Returns:
        List of (from_index, to_index) tuples in index order
    """
    pairs = []
    for i, source in enumerate(containers):
        if source.is_empty:
            continue
        for j, target in enumerate(containers):
            if i != j and can_move(source, target):
                pairs.append((i, j))
    return pairs


def has_any_legal_move(containers: Sequence[Container]) -> bool:
    """True iff some ordered pair of containers allows a pour."""
    for i, source in enumerate(containers):
        for j, target in enumerate(containers):
            if i != j and can_move(source, target):
                return True
    return False


def is_won(containers: Sequence[Container]) -> bool:
    """True iff every container is solved."""
    return all(container.is_solved for container in containers)
