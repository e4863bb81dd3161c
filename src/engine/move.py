"""
Move Module - Record of a single pour between two containers.
"""

from dataclasses import dataclass

from .colors import GameColor


@dataclass(frozen=True)
class Move:
    """
    A single application of "pour the top run from one container into another".

    Value type: equality and hashing are structural, so moves can be
    compared and collected in sets.

    Attributes:
        from_id: Source container id
        to_id: Target container id
        color: Color of the poured units
        count: Number of units transferred
    """
    from_id: str
    to_id: str
    color: GameColor
    count: int

    def inverse(self) -> 'Move':
        """
        Logical inverse used for undo.

        Swaps source and target; color and count stay the same.
        """
        return Move(from_id=self.to_id, to_id=self.from_id,
                    color=self.color, count=self.count)

    def __str__(self) -> str:
        return f"Move({self.count} x {self.color.display_name}: {self.from_id} -> {self.to_id})"
