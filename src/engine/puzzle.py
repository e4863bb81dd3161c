"""
Puzzle Definition Module - Initial configuration plus scoring parameters.

A PuzzleDefinition is what a caller loads from storage or receives from the
generator. It is converted to a PuzzleState to be played or solved.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from .colors import GameColor
from .container import DEFAULT_CAPACITY, Container
from .errors import InvalidPuzzle


@dataclass(frozen=True)
class PuzzleDefinition:
    """
    Immutable puzzle definition.

    Attributes:
        id: Puzzle identifier (e.g. "ocean_007")
        name: Display name
        containers: Initial containers, in display order
        move_limit: Maximum moves allowed, or None for unlimited
        star_thresholds: Move counts for 1, 2 and 3 stars (loosest to tightest)
        difficulty: Difficulty tier name, if generated
        description: Optional free text
    """
    id: str
    name: str
    containers: Tuple[Container, ...]
    move_limit: Optional[int] = None
    star_thresholds: Optional[Tuple[int, int, int]] = None
    difficulty: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "containers", tuple(self.containers))
        ids = [container.id for container in self.containers]
        if len(ids) != len(set(ids)):
            raise InvalidPuzzle(f"Puzzle {self.id}: container ids must be unique, got {ids}")
        if self.star_thresholds is not None and len(self.star_thresholds) != 3:
            raise InvalidPuzzle(f"Puzzle {self.id}: expected 3 star thresholds")

    @classmethod
    def from_containers(cls, containers: Iterable[Container], id: str = "custom",
                        name: str = "Custom", **kwargs: Any) -> 'PuzzleDefinition':
        """Create a definition from an iterable of containers."""
        return cls(id=id, name=name, containers=tuple(containers), **kwargs)

    @property
    def container_count(self) -> int:
        return len(self.containers)

    @property
    def total_units(self) -> int:
        """Total number of colored units across all containers."""
        return sum(container.size for container in self.containers)

    def calculate_stars(self, move_count: int) -> int:
        """
        Grade a finished puzzle.

        Args:
            move_count: Moves the player used

        Returns:
            3, 2, 1 or 0 stars (0 when no thresholds are defined)
        """
        if self.star_thresholds is None:
            return 0
        one_star, two_stars, three_stars = self.star_thresholds
        if move_count <= three_stars:
            return 3
        if move_count <= two_stars:
            return 2
        if move_count <= one_star:
            return 1
        return 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict. Colors are stored by name."""
        return {
            "id": self.id,
            "name": self.name,
            "difficulty": self.difficulty,
            "description": self.description,
            "moveLimit": self.move_limit,
            "starThresholds": list(self.star_thresholds) if self.star_thresholds else None,
            "containers": [
                {
                    "id": container.id,
                    "capacity": container.capacity,
                    "colors": [color.name.lower() for color in container.colors],
                }
                for container in self.containers
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PuzzleDefinition':
        """
        Build a definition from the dict produced by to_dict().

        Raises:
            InvalidPuzzle: If the data is not shaped like to_dict() output,
                required keys are missing or a color is unknown
            CapacityExceeded: If a container holds more colors than its capacity
        """
        if not isinstance(data, dict):
            raise InvalidPuzzle(f"Puzzle definition must be an object, got {type(data).__name__}")
        if "containers" not in data:
            raise InvalidPuzzle("Puzzle definition has no 'containers'")
        raw_containers = data["containers"]
        if not isinstance(raw_containers, list):
            raise InvalidPuzzle("'containers' must be a list")

        containers = []
        for index, raw in enumerate(raw_containers):
            if not isinstance(raw, dict):
                raise InvalidPuzzle(f"Container {index} must be an object")
            names = raw.get("colors", [])
            if not isinstance(names, list) or not all(isinstance(name, str) for name in names):
                raise InvalidPuzzle(f"Container {index}: 'colors' must be a list of color names")
            capacity = raw.get("capacity", DEFAULT_CAPACITY)
            if not _is_int(capacity):
                raise InvalidPuzzle(f"Container {index}: 'capacity' must be an integer")
            try:
                colors = [GameColor.from_name(name) for name in names]
            except ValueError as e:
                raise InvalidPuzzle(str(e)) from e
            containers.append(Container.from_colors(raw.get("id", str(index)), colors, capacity))

        move_limit = data.get("moveLimit")
        if move_limit is not None and not _is_int(move_limit):
            raise InvalidPuzzle("'moveLimit' must be an integer")
        thresholds = data.get("starThresholds")
        if thresholds and (not isinstance(thresholds, list)
                           or not all(_is_int(value) for value in thresholds)):
            raise InvalidPuzzle("'starThresholds' must be a list of integers")

        return cls(
            id=data.get("id", "custom"),
            name=data.get("name", data.get("id", "Custom")),
            containers=tuple(containers),
            move_limit=move_limit,
            star_thresholds=tuple(thresholds) if thresholds else None,
            difficulty=data.get("difficulty"),
            description=data.get("description"),
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
