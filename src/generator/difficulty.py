"""
Difficulty Module - Difficulty tiers and generator tuning.

Multipliers are tuning constants. GeneratorConfig.validate() requires only
that move budgets tighten as the tier rises.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from src.engine import DEFAULT_CAPACITY

logger = logging.getLogger(__name__)


class Difficulty(Enum):
    """Difficulty tier, in increasing order."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def index(self) -> int:
        return list(Difficulty).index(self)

    @classmethod
    def parse(cls, value: Any) -> "Difficulty":
        """Accept a Difficulty or its name in any case."""
        if isinstance(value, Difficulty):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty: {value}. Available: {names}") from None


_DESCRIPTIONS = {
    Difficulty.EASY: "Perfect for beginners",
    Difficulty.MEDIUM: "Requires some planning",
    Difficulty.HARD: "Challenging puzzles",
    Difficulty.EXPERT: "For puzzle masters",
}


@dataclass(frozen=True)
class TierConfig:
    """
    Generation parameters for one difficulty tier.

    Ranges are inclusive (low, high) pairs sampled per attempt.

    Attributes:
        color_range: Number of distinct colors
        container_range: Total containers; raised to colors + 1 when smaller
        shuffle_range: Scramble moves applied to the solved configuration
        min_optimal_moves: Complexity floor; easier puzzles are rejected
        move_limit_multiplier: move_limit = ceil(optimal * multiplier)
        max_states: Solver state budget used to validate candidates
        max_depth: Solver depth budget used to validate candidates
    """
    color_range: Tuple[int, int]
    container_range: Tuple[int, int]
    shuffle_range: Tuple[int, int]
    min_optimal_moves: int
    move_limit_multiplier: float
    max_states: int
    max_depth: int = 50

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TierConfig":
        return cls(
            color_range=tuple(data["color_range"]),
            container_range=tuple(data["container_range"]),
            shuffle_range=tuple(data["shuffle_range"]),
            min_optimal_moves=int(data["min_optimal_moves"]),
            move_limit_multiplier=float(data["move_limit_multiplier"]),
            max_states=int(data["max_states"]),
            max_depth=int(data.get("max_depth", 50)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "color_range": list(self.color_range),
            "container_range": list(self.container_range),
            "shuffle_range": list(self.shuffle_range),
            "min_optimal_moves": self.min_optimal_moves,
            "move_limit_multiplier": self.move_limit_multiplier,
            "max_states": self.max_states,
            "max_depth": self.max_depth,
        }


DEFAULT_TIERS: Dict[Difficulty, TierConfig] = {
    Difficulty.EASY: TierConfig(
        color_range=(3, 3), container_range=(3, 4), shuffle_range=(6, 10),
        min_optimal_moves=2, move_limit_multiplier=2.0, max_states=20000,
    ),
    Difficulty.MEDIUM: TierConfig(
        color_range=(4, 4), container_range=(4, 5), shuffle_range=(10, 15),
        min_optimal_moves=3, move_limit_multiplier=1.5, max_states=50000,
    ),
    Difficulty.HARD: TierConfig(
        color_range=(5, 5), container_range=(5, 6), shuffle_range=(15, 20),
        min_optimal_moves=4, move_limit_multiplier=1.3, max_states=100000,
    ),
    Difficulty.EXPERT: TierConfig(
        color_range=(6, 8), container_range=(6, 8), shuffle_range=(20, 30),
        min_optimal_moves=5, move_limit_multiplier=1.2, max_states=200000,
    ),
}

# 1 star, 2 stars, 3 stars: slack over the optimal count, loosest to tightest
DEFAULT_STAR_MULTIPLIERS: Tuple[float, float, float] = (1.4, 1.2, 1.05)


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Read-only generator configuration.

    Attributes:
        tiers: TierConfig per difficulty
        capacity: Capacity of every generated container
        star_multipliers: Star threshold slack, loosest to tightest
        max_transfer: Largest partial transfer per scramble move
        max_attempts: Attempts per puzzle before GenerationFailure
    """
    tiers: Dict[Difficulty, TierConfig] = field(default_factory=lambda: dict(DEFAULT_TIERS))
    capacity: int = DEFAULT_CAPACITY
    star_multipliers: Tuple[float, float, float] = DEFAULT_STAR_MULTIPLIERS
    max_transfer: int = 2
    max_attempts: int = 100

    def tier(self, difficulty: Difficulty) -> TierConfig:
        return self.tiers[Difficulty.parse(difficulty)]

    def validate(self) -> "GeneratorConfig":
        """
        Check the configuration is usable.

        Returns:
            self

        Raises:
            ValueError: If ranges are inverted or budgets do not tighten with difficulty
        """
        missing = [d.value for d in Difficulty if d not in self.tiers]
        if missing:
            raise ValueError(f"Missing tier configuration: {', '.join(missing)}")
        if self.capacity < 2:
            raise ValueError("capacity must be at least 2")
        if self.max_attempts < 1 or self.max_transfer < 1:
            raise ValueError("max_attempts and max_transfer must be positive")

        loosest, middle, tightest = self.star_multipliers
        if not loosest > middle > tightest >= 1.0:
            raise ValueError(
                f"star_multipliers must be strictly decreasing and >= 1.0, got {self.star_multipliers}"
            )

        previous = None
        for difficulty in Difficulty:
            tier = self.tiers[difficulty]
            for name in ("color_range", "container_range", "shuffle_range"):
                low, high = getattr(tier, name)
                if low > high or low < 0:
                    raise ValueError(f"{difficulty.value}.{name} is not a valid range: {(low, high)}")
            if tier.color_range[0] < 1:
                raise ValueError(f"{difficulty.value}.color_range must be positive")
            if tier.move_limit_multiplier < 1.0:
                raise ValueError(f"{difficulty.value}.move_limit_multiplier must be >= 1.0")
            if previous is not None and tier.move_limit_multiplier > previous.move_limit_multiplier:
                raise ValueError(
                    f"move_limit_multiplier must not loosen as difficulty rises ({difficulty.value})"
                )
            previous = tier
        return self

    def with_tier(self, difficulty: Difficulty, **changes: Any) -> "GeneratorConfig":
        """Copy of this config with some fields of one tier replaced."""
        difficulty = Difficulty.parse(difficulty)
        tiers = dict(self.tiers)
        tiers[difficulty] = replace(tiers[difficulty], **changes)
        return replace(self, tiers=tiers)

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "GeneratorConfig":
        """
        Build a config from the "generator" section of the engine settings.

        Tier sections missing from settings keep their defaults.
        """
        section = settings.get("generator", {})
        tiers = dict(DEFAULT_TIERS)
        for name, data in section.get("tiers", {}).items():
            difficulty = Difficulty.parse(name)
            merged = tiers[difficulty].to_dict()
            merged.update(data)
            tiers[difficulty] = TierConfig.from_dict(merged)

        config = cls(
            tiers=tiers,
            capacity=int(section.get("capacity", DEFAULT_CAPACITY)),
            star_multipliers=tuple(section.get("star_multipliers", DEFAULT_STAR_MULTIPLIERS)),
            max_transfer=int(section.get("max_transfer", 2)),
            max_attempts=int(section.get("max_attempts", 100)),
        )
        logger.debug(f"[Generator] Config loaded from settings: {config}")
        return config.validate()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "capacity": self.capacity,
            "star_multipliers": list(self.star_multipliers),
            "max_transfer": self.max_transfer,
            "max_attempts": self.max_attempts,
            "tiers": {d.value: tier.to_dict() for d, tier in self.tiers.items()},
        }
