"""
Colors Module - The finite palette of colored units used in puzzles.
"""

from enum import Enum
from typing import Dict


class GameColor(Enum):
    """
    Color of a single unit stacked inside a container.

    The enum value is the one-character symbol used when a puzzle state is
    rendered as a state key, so every symbol must be a single letter and
    never the container delimiter.
    """
    RED = "R"
    BLUE = "B"
    GREEN = "G"
    YELLOW = "Y"
    PURPLE = "P"
    ORANGE = "O"
    PINK = "K"
    CYAN = "C"
    BROWN = "N"
    LIME = "L"
    MAGENTA = "M"
    TEAL = "T"

    @property
    def symbol(self) -> str:
        """One-character symbol used in state keys."""
        return self.value

    @property
    def display_name(self) -> str:
        """Capitalized name for UI text and debug output."""
        return self.name.capitalize()

    @classmethod
    def from_name(cls, name: str) -> "GameColor":
        """
        Look up a color by its name (case-insensitive) or by its symbol.

        Args:
            name: Color name such as "red" or symbol such as "R"

        Returns:
            Matching GameColor

        Raises:
            ValueError: If no color matches
        """
        key = name.strip()
        if key.upper() in cls.__members__:
            return cls[key.upper()]
        if key in _BY_SYMBOL:
            return _BY_SYMBOL[key]
        raise ValueError(f"Unknown color: {name}")


_BY_SYMBOL: Dict[str, GameColor] = {color.value: color for color in GameColor}
