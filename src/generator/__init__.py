"""
Generator Package - Solvable puzzle generation, validation and batch testing.

Public API:
    - Difficulty, TierConfig, GeneratorConfig: Tier parameters
    - LevelGenerator: Reverse-solving generator with a bounded retry loop
    - GeneratedPuzzle / AttemptResult / RejectionReason: Generator outputs
    - generate_puzzle(), derive_seed(): Convenience functions
    - validate_puzzle(), estimate_difficulty(): Single puzzle checks
    - level_tester: Batch quality checks and statistics

Usage:
    from src.generator import Difficulty, LevelGenerator

    generator = LevelGenerator()
    puzzle = generator.generate(Difficulty.MEDIUM, seed=42)
    print(puzzle.optimal_move_count, puzzle.move_limit, puzzle.star_thresholds)
"""

from .difficulty import (
    Difficulty,
    TierConfig,
    GeneratorConfig,
    DEFAULT_TIERS,
    DEFAULT_STAR_MULTIPLIERS,
)
from .validator import ValidationResult, validate_puzzle, estimate_difficulty
from .level_generator import (
    AttemptResult,
    GeneratedPuzzle,
    LevelGenerator,
    RejectionReason,
    derive_seed,
    generate_puzzle,
    pack_distribution,
)
from . import level_tester

__all__ = [
    # Configuration
    "Difficulty",
    "TierConfig",
    "GeneratorConfig",
    "DEFAULT_TIERS",
    "DEFAULT_STAR_MULTIPLIERS",
    # Validation
    "ValidationResult",
    "validate_puzzle",
    "estimate_difficulty",
    # Generation
    "AttemptResult",
    "GeneratedPuzzle",
    "LevelGenerator",
    "RejectionReason",
    "derive_seed",
    "generate_puzzle",
    "pack_distribution",
    # Batch testing
    "level_tester",
]
