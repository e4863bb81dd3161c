"""
Engine Package - Immutable state model and move rules for the color sort puzzle.

Public API:
    - GameColor: Color palette
    - Container: Immutable fixed-capacity stack of colors
    - Move: Record of a single pour
    - PuzzleDefinition: Initial configuration, move limit and star thresholds
    - PuzzleState: Immutable game state with apply_move / undo / reset
    - MoveRejection and the rule functions (can_move, transfer_amount, ...)
    - Error types (PuzzleError and subclasses)

Usage:
    from src.engine import Container, GameColor, PuzzleState

    state = PuzzleState.from_containers([
        Container.from_colors("A", [GameColor.RED, GameColor.BLUE]),
        Container.empty("B"),
    ])
    state = state.apply_move("A", "B")
"""

from .colors import GameColor
from .container import Container, DEFAULT_CAPACITY
from .move import Move
from .puzzle import PuzzleDefinition
from .state import PuzzleState, apply_pour, state_key, KEY_DELIMITER
from .rules import (
    MoveRejection,
    rejection_reason,
    can_move,
    transfer_amount,
    legal_moves,
    has_any_legal_move,
    is_won,
)
from .errors import (
    PuzzleError,
    InvalidPuzzle,
    CapacityExceeded,
    InsufficientColors,
    InvalidMove,
    NoHistory,
    SearchBudgetExceeded,
    UnsolvablePuzzle,
    GenerationFailure,
)

__all__ = [
    # Data structures
    "GameColor",
    "Container",
    "DEFAULT_CAPACITY",
    "Move",
    "PuzzleDefinition",
    "PuzzleState",
    "apply_pour",
    "state_key",
    "KEY_DELIMITER",
    # Rules
    "MoveRejection",
    "rejection_reason",
    "can_move",
    "transfer_amount",
    "legal_moves",
    "has_any_legal_move",
    "is_won",
    # Errors
    "PuzzleError",
    "InvalidPuzzle",
    "CapacityExceeded",
    "InsufficientColors",
    "InvalidMove",
    "NoHistory",
    "SearchBudgetExceeded",
    "UnsolvablePuzzle",
    "GenerationFailure",
]
