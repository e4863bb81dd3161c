"""
Container Module - Immutable fixed-capacity stack of colors (the "tube").
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .colors import GameColor
from .errors import CapacityExceeded, InsufficientColors

DEFAULT_CAPACITY = 4


@dataclass(frozen=True)
class Container:
    """
    Immutable container representation.

    Colors are stored bottom to top as a tuple, so a container is hashable
    and can never be mutated in place. Every transformation returns a new
    Container.

    Attributes:
        id: Stable identifier used for addressing moves
        colors: Tuple of GameColor values, bottom to top
        capacity: Maximum number of colors the container holds
    """
    id: str
    colors: Tuple[GameColor, ...]
    capacity: int = DEFAULT_CAPACITY

    @classmethod
    def empty(cls, id: str, capacity: int = DEFAULT_CAPACITY) -> 'Container':
        """
        Create an empty container.

        Args:
            id: Container identifier
            capacity: Maximum number of colors

        Returns:
            Container with no colors

        Raises:
            CapacityExceeded: If capacity is not positive
        """
        return cls.from_colors(id, (), capacity)

    @classmethod
    def from_colors(cls, id: str, colors: Iterable[GameColor],
                    capacity: int = DEFAULT_CAPACITY) -> 'Container':
        """
        Create a container holding the given colors.

        Args:
            id: Container identifier
            colors: Colors bottom to top
            capacity: Maximum number of colors

        Returns:
            Container instance

        Raises:
            CapacityExceeded: If there are more colors than capacity
        """
        colors = tuple(colors)
        if capacity < 1 or len(colors) > capacity:
            raise CapacityExceeded(str(id), len(colors), capacity)
        return cls(id=str(id), colors=colors, capacity=capacity)

    @property
    def size(self) -> int:
        """Number of colors currently in the container."""
        return len(self.colors)

    @property
    def is_empty(self) -> bool:
        return not self.colors

    @property
    def is_full(self) -> bool:
        return len(self.colors) >= self.capacity

    @property
    def is_solved(self) -> bool:
        """True if empty, or full with every color identical."""
        if not self.colors:
            return True
        if not self.is_full:
            return False
        first = self.colors[0]
        return all(color == first for color in self.colors)

    @property
    def top_color(self) -> Optional[GameColor]:
        """Color on top of the stack, or None when empty."""
        return self.colors[-1] if self.colors else None

    @property
    def top_run_length(self) -> int:
        """Count of contiguous equal colors from the top down."""
        if not self.colors:
            return 0

        top = self.colors[-1]
        count = 0
        for color in reversed(self.colors):
            if color != top:
                break
            count += 1
        return count

    @property
    def available_space(self) -> int:
        return self.capacity - len(self.colors)

    def top_colors(self, count: int) -> Tuple[GameColor, ...]:
        """
        Get the top colors without removing them.

        Args:
            count: Number of colors to read

        Returns:
            Top `count` colors in bottom-to-top order

        Raises:
            InsufficientColors: If count exceeds the container size
        """
        if count > len(self.colors):
            raise InsufficientColors(self.id, count, len(self.colors))
        if count <= 0:
            return ()
        return self.colors[-count:]

    def add_colors(self, colors: Iterable[GameColor]) -> 'Container':
        """
        Return a new container with colors appended on top.

        Capacity is not checked here; callers validate the fit with
        available_space first.
        """
        return Container(id=self.id, colors=self.colors + tuple(colors),
                         capacity=self.capacity)

    def remove_top_colors(self, count: int) -> 'Container':
        """
        Return a new container with the top `count` colors removed.

        Raises:
            InsufficientColors: If count exceeds the container size
        """
        if count > len(self.colors):
            raise InsufficientColors(self.id, count, len(self.colors))
        return Container(id=self.id, colors=self.colors[:len(self.colors) - count],
                         capacity=self.capacity)

    def to_debug_string(self) -> str:
        if self.is_empty:
            return f"Container {self.id}: [empty]"
        names = ", ".join(color.display_name for color in self.colors)
        return f"Container {self.id}: [{names}] ({self.size}/{self.capacity})"
