"""
Level Tester Module - Batch quality checks and statistics for level sets.

Works on PuzzleDefinition objects (as loaded from an exported pack) or on
GeneratedPuzzle objects straight from the generator.
"""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Union

import numpy as np

from src.engine import PuzzleDefinition
from src.solver import DEFAULT_MAX_DEPTH

from .difficulty import Difficulty
from .level_generator import GeneratedPuzzle
from .validator import ValidationResult, validate_puzzle

logger = logging.getLogger(__name__)

Level = Union[PuzzleDefinition, GeneratedPuzzle]

# Quality bounds
MIN_OPTIMAL_MOVES = 2
MIN_MOVE_LIMIT_RATIO = 1.1
MAX_MOVE_LIMIT_RATIO = 3.0
MIN_STATES_EXPLORED = 3

# Test budget; large enough for every generated tier
DEFAULT_TEST_MAX_STATES = 200000


def _definition_of(level: Level) -> PuzzleDefinition:
    if isinstance(level, GeneratedPuzzle):
        return level.definition
    return level


@dataclass
class LevelTestResult:
    """Result of testing a single level."""
    level: PuzzleDefinition
    is_solvable: bool
    optimal_moves: Optional[int] = None
    states_explored: int = 0
    passes_quality_checks: bool = False
    quality_issues: List[str] = field(default_factory=list)
    error_message: Optional[str] = None
    warning_message: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.is_solvable and self.passes_quality_checks

    def __str__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return (f"LevelTestResult({self.level.id}: {status}, "
                f"optimal={self.optimal_moves}, states={self.states_explored})")


@dataclass
class BatchTestResult:
    """Aggregate of test_levels()."""
    total_levels: int
    passed: int
    failed: int
    warnings: int
    results: List[LevelTestResult] = field(default_factory=list)

    @property
    def pass_rate(self) -> float:
        return self.passed / self.total_levels if self.total_levels else 0.0

    @property
    def failures(self) -> List[LevelTestResult]:
        return [result for result in self.results if not result.passed]

    def __str__(self) -> str:
        return (f"BatchTestResult(total={self.total_levels}, passed={self.passed} "
                f"({self.pass_rate * 100:.1f}%), failed={self.failed}, warnings={self.warnings})")


@dataclass
class LevelStatistics:
    """Summary statistics for a set of levels."""
    total_levels: int
    difficulty_distribution: Dict[str, int]
    container_distribution: Dict[int, int]
    average_optimal_moves: float
    median_optimal_moves: float
    min_optimal_moves: int
    max_optimal_moves: int
    average_states_explored: float
    solvable_count: int
    quality_pass_count: int

    def to_dict(self) -> Dict:
        return {
            "totalLevels": self.total_levels,
            "difficultyDistribution": self.difficulty_distribution,
            "containerDistribution": {str(k): v for k, v in self.container_distribution.items()},
            "averageOptimalMoves": round(self.average_optimal_moves, 2),
            "medianOptimalMoves": self.median_optimal_moves,
            "minOptimalMoves": self.min_optimal_moves,
            "maxOptimalMoves": self.max_optimal_moves,
            "averageStatesExplored": round(self.average_states_explored, 1),
            "solvableCount": self.solvable_count,
            "qualityPassCount": self.quality_pass_count,
        }


@dataclass
class DuplicateGroup:
    """Levels sharing the same initial configuration."""
    signature: str
    level_ids: List[str]

    def __str__(self) -> str:
        return f"Duplicate: [{', '.join(self.level_ids)}]"


@dataclass
class DifficultyProgressionResult:
    """Average optimal moves per tier and whether they never decrease."""
    averages_by_difficulty: Dict[str, float]
    is_monotonic: bool


def check_quality(level: PuzzleDefinition, validation: ValidationResult) -> List[str]:
    """
    Quality issues of a validated level.

    Returns:
        List of issue descriptions; empty when the level passes
    """
    if not validation.is_solvable:
        return ["not solvable"]
    optimal = validation.optimal_move_count
    if optimal is None:
        return ["no optimal move count"]

    issues = []
    if optimal < MIN_OPTIMAL_MOVES:
        issues.append(f"optimal moves {optimal} < {MIN_OPTIMAL_MOVES}")
    if level.move_limit is not None and optimal > 0:
        ratio = level.move_limit / optimal
        if ratio < MIN_MOVE_LIMIT_RATIO or ratio > MAX_MOVE_LIMIT_RATIO:
            issues.append(f"move limit ratio {ratio:.2f} outside "
                          f"[{MIN_MOVE_LIMIT_RATIO}, {MAX_MOVE_LIMIT_RATIO}]")
    if validation.states_explored < MIN_STATES_EXPLORED:
        issues.append(f"only {validation.states_explored} states explored")
    return issues


def test_level(level: Level, max_states: int = DEFAULT_TEST_MAX_STATES,
               max_depth: int = DEFAULT_MAX_DEPTH) -> LevelTestResult:
    """
    Validate one level and run the quality checks.

    Args:
        level: PuzzleDefinition or GeneratedPuzzle
        max_states: Solver state budget
        max_depth: Solver depth budget

    Returns:
        LevelTestResult
    """
    definition = _definition_of(level)
    validation = validate_puzzle(definition.containers, max_states=max_states,
                                 max_depth=max_depth)
    issues = check_quality(definition, validation)
    return LevelTestResult(
        level=definition,
        is_solvable=validation.is_solvable,
        optimal_moves=validation.optimal_move_count,
        states_explored=validation.states_explored,
        passes_quality_checks=not issues,
        quality_issues=issues,
        error_message=validation.error_message,
        warning_message=validation.warning_message,
    )


def iter_test_levels(levels: Iterable[Level], **kwargs) -> Iterable[LevelTestResult]:
    """Lazily test levels one at a time."""
    for level in levels:
        yield test_level(level, **kwargs)


def summarize(results: Sequence[LevelTestResult]) -> BatchTestResult:
    passed = sum(1 for result in results if result.passed)
    return BatchTestResult(
        total_levels=len(results),
        passed=passed,
        failed=len(results) - passed,
        warnings=sum(1 for result in results if result.warning_message),
        results=list(results),
    )


def test_levels(levels: Iterable[Level], **kwargs) -> BatchTestResult:
    """
    Test a batch of levels.

    Args:
        levels: Levels to test
        **kwargs: Solver budgets passed to test_level()

    Returns:
        BatchTestResult with pass_rate
    """
    batch = summarize(list(iter_test_levels(levels, **kwargs)))
    logger.info(f"[Tester] {batch}")
    return batch


def generate_statistics(levels: Sequence[Level],
                        results: Optional[Sequence[LevelTestResult]] = None) -> LevelStatistics:
    """
    Summary statistics for a set of levels.

    Args:
        levels: Levels to describe
        results: Test results for the same levels; computed when omitted

    Returns:
        LevelStatistics
    """
    definitions = [_definition_of(level) for level in levels]
    if results is None:
        results = test_levels(definitions).results

    difficulty_counts = Counter(d.difficulty or "unknown" for d in definitions)
    container_counts = Counter(d.container_count for d in definitions)

    optimal = np.array([r.optimal_moves for r in results if r.optimal_moves is not None],
                       dtype=float)
    explored = np.array([r.states_explored for r in results if r.is_solvable], dtype=float)

    return LevelStatistics(
        total_levels=len(definitions),
        difficulty_distribution=dict(difficulty_counts),
        container_distribution=dict(sorted(container_counts.items())),
        average_optimal_moves=float(optimal.mean()) if optimal.size else 0.0,
        median_optimal_moves=float(np.median(optimal)) if optimal.size else 0.0,
        min_optimal_moves=int(optimal.min()) if optimal.size else 0,
        max_optimal_moves=int(optimal.max()) if optimal.size else 0,
        average_states_explored=float(explored.mean()) if explored.size else 0.0,
        solvable_count=sum(1 for r in results if r.is_solvable),
        quality_pass_count=sum(1 for r in results if r.passes_quality_checks),
    )


def level_signature(level: Level) -> str:
    """Order-independent signature of a level's initial containers ("E" for empty)."""
    parts = sorted(
        "".join(color.value for color in container.colors) if not container.is_empty else "E"
        for container in _definition_of(level).containers
    )
    return "|".join(parts)


def find_duplicates(levels: Iterable[Level]) -> List[DuplicateGroup]:
    """Groups of levels with the same initial configuration, in first-seen order."""
    groups: Dict[str, List[str]] = defaultdict(list)
    for level in levels:
        groups[level_signature(level)].append(_definition_of(level).id)
    return [DuplicateGroup(signature, ids) for signature, ids in groups.items() if len(ids) > 1]


def verify_difficulty_progression(
    levels: Sequence[Level],
    results: Optional[Sequence[LevelTestResult]] = None,
) -> DifficultyProgressionResult:
    """
    Check that harder tiers need more moves on average.

    Tiers without levels are skipped rather than counted as zero.
    """
    definitions = [_definition_of(level) for level in levels]
    if results is None:
        results = test_levels(definitions).results

    moves_by_tier: Dict[str, List[int]] = defaultdict(list)
    for definition, result in zip(definitions, results):
        if definition.difficulty and result.optimal_moves is not None:
            moves_by_tier[definition.difficulty].append(result.optimal_moves)

    averages = {
        difficulty.value: float(np.mean(moves_by_tier[difficulty.value]))
        for difficulty in Difficulty
        if moves_by_tier.get(difficulty.value)
    }
    ordered = [averages[d.value] for d in Difficulty if d.value in averages]
    is_monotonic = bool(np.all(np.diff(ordered) >= 0)) if len(ordered) > 1 else True

    return DifficultyProgressionResult(averages_by_difficulty=averages, is_monotonic=is_monotonic)
