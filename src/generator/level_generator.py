"""
Level Generator Module - Solvable puzzles by reverse-solving.

A puzzle is produced by starting from a solved configuration and applying
random reverse pours: take 1..max_transfer units of the top color from one
container and place them on another, but only when the forward pour that
puts them back is legal and moves exactly that many units. Every scramble
step can therefore be undone by a legal move, so the result is solvable.
The solver then confirms this, measures the optimal move count and the
attempt is accepted or rejected with a tagged reason.
"""

import hashlib
import logging
import math
import random
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from src.engine import (
    Container,
    GameColor,
    GenerationFailure,
    PuzzleDefinition,
    PuzzleState,
    can_move,
    is_won,
    transfer_amount,
)
from src.solver import FailureReason, SolutionResult, find_optimal_solution

from .difficulty import Difficulty, GeneratorConfig, TierConfig

logger = logging.getLogger(__name__)

# Share of a level pack given to each tier, easiest first.
PACK_DISTRIBUTION: Tuple[Tuple[Difficulty, float], ...] = (
    (Difficulty.EASY, 0.20),
    (Difficulty.MEDIUM, 0.30),
    (Difficulty.HARD, 0.30),
    (Difficulty.EXPERT, 0.20),
)


class RejectionReason(Enum):
    """Why a single generation attempt was discarded."""
    ALREADY_SOLVED = "Scramble left the puzzle solved"
    NO_SOLUTION_WITHIN_BUDGET = "Solver budget exhausted"
    UNSOLVABLE = "Solver proved the puzzle unsolvable"
    TOO_TRIVIAL = "Optimal solution below the complexity floor"


@dataclass(frozen=True)
class ScrambleStep:
    """One reverse pour applied while scrambling."""
    from_index: int
    to_index: int
    count: int


@dataclass
class AttemptResult:
    """
    Tagged outcome of one generation attempt.

    Attributes:
        seed: Seed that reproduces this attempt
        difficulty: Tier the attempt was made for
        containers: Scrambled configuration
        color_count: Distinct colors used
        shuffle_count: Reverse pours requested
        shuffles_applied: Reverse pours actually applied
        solution: Solver result for the scrambled configuration
        rejection: Why the attempt was discarded, or None if accepted
    """
    seed: int
    difficulty: Difficulty
    containers: Tuple[Container, ...]
    color_count: int
    shuffle_count: int
    shuffles_applied: int
    solution: Optional[SolutionResult] = None
    rejection: Optional[RejectionReason] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None

    @property
    def optimal_move_count(self) -> Optional[int]:
        if self.solution is None or not self.solution.found:
            return None
        return self.solution.move_count


@dataclass
class GeneratedPuzzle:
    """
    A validated puzzle ready to be played.

    Attributes:
        definition: Puzzle definition with move limit and star thresholds
        state: Initial PuzzleState of the definition
        optimal_move_count: Length of the shortest solution
        move_limit: ceil(optimal * tier multiplier)
        star_thresholds: Move counts for 1, 2 and 3 stars, loosest to tightest
        solution: Optimal solution found during validation
        seed: Seed passed to generate(); regenerates this puzzle exactly
        attempts: Attempts used, including the accepted one
        rejections: Count of rejected attempts per reason name
    """
    definition: PuzzleDefinition
    state: PuzzleState
    optimal_move_count: int
    move_limit: int
    star_thresholds: Tuple[int, int, int]
    solution: SolutionResult
    seed: int
    attempts: int
    rejections: Dict[str, int] = field(default_factory=dict)

    @property
    def difficulty(self) -> Difficulty:
        return Difficulty.parse(self.definition.difficulty)

    def to_dict(self) -> Dict:
        """Definition dict plus generation metadata."""
        data = self.definition.to_dict()
        data["optimalMoves"] = self.optimal_move_count
        data["seed"] = self.seed
        return data


def derive_seed(difficulty: Difficulty, level_number: int, theme: Optional[str] = None) -> int:
    """
    Deterministic seed for a level.

    Stable across processes and platforms, so a level pack can be regenerated
    exactly from its theme names and level numbers.

    Args:
        difficulty: Difficulty tier
        level_number: 1-based level number within the theme
        theme: Optional theme name

    Returns:
        Non-negative integer seed
    """
    difficulty = Difficulty.parse(difficulty)
    theme_hash = 0
    if theme:
        digest = hashlib.sha256(theme.encode("utf-8")).digest()
        theme_hash = int.from_bytes(digest[:4], "big")
    return theme_hash * 1_000_000 + difficulty.index * 10_000 + level_number


def level_id(level_number: int, theme: Optional[str] = None) -> str:
    prefix = theme.lower().replace(" ", "_") if theme else "level"
    return f"{prefix}_{level_number:03d}"


def level_name(level_number: int, theme: Optional[str] = None) -> str:
    return f"{theme} #{level_number}" if theme else f"#{level_number}"


def calculate_move_limit(optimal_moves: int, multiplier: float) -> int:
    return math.ceil(optimal_moves * multiplier)


def calculate_star_thresholds(optimal_moves: int,
                              multipliers: Sequence[float]) -> Tuple[int, int, int]:
    """Star thresholds, loosest to tightest, never below the optimal count."""
    one, two, three = (max(optimal_moves, math.ceil(optimal_moves * m)) for m in multipliers)
    return one, two, three


def pack_distribution(total_levels: int) -> List[Tuple[Difficulty, int]]:
    """
    Split a pack across tiers by PACK_DISTRIBUTION.

    Rounding leftovers go to the hardest tier so the counts always sum to
    total_levels.
    """
    counts = [(difficulty, int(round(total_levels * share)))
              for difficulty, share in PACK_DISTRIBUTION[:-1]]
    assigned = sum(count for _, count in counts)
    counts.append((PACK_DISTRIBUTION[-1][0], max(0, total_levels - assigned)))
    return counts


class LevelGenerator:
    """
    Generates solvable puzzles at a requested difficulty.

    All randomness flows from the seed given to generate(); the generator
    itself holds only read-only configuration and can be shared freely.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = (config or GeneratorConfig()).validate()

    # ==================== SINGLE ATTEMPT ====================

    def solved_configuration(self, color_count: int, container_count: int,
                             rng: random.Random) -> Tuple[Container, ...]:
        """
        Solved starting point: one full container per color plus empties.

        Args:
            color_count: Distinct colors
            container_count: Total containers (at least color_count + 1)
            rng: Source of randomness for the color choice

        Returns:
            Tuple of containers with ids "c0", "c1", ...
        """
        palette = list(GameColor)
        if color_count > len(palette):
            raise ValueError(f"Only {len(palette)} colors available, {color_count} requested")
        colors = rng.sample(palette, color_count)
        capacity = self.config.capacity

        containers = [Container.from_colors(f"c{i}", [color] * capacity, capacity)
                      for i, color in enumerate(colors)]
        containers.extend(Container.empty(f"c{i}", capacity)
                          for i in range(color_count, container_count))
        return tuple(containers)

    def reverse_steps(self, containers: Sequence[Container]) -> List[ScrambleStep]:
        """
        All reverse pours available from a configuration.

        A step moves `count` top units from one container onto another such
        that the forward pour back is legal and transfers exactly `count`.
        """
        steps = []
        for i, source in enumerate(containers):
            if source.is_empty:
                continue
            for j, target in enumerate(containers):
                if i == j:
                    continue
                limit = min(self.config.max_transfer, source.top_run_length,
                            target.available_space)
                for count in range(1, limit + 1):
                    new_source = source.remove_top_colors(count)
                    new_target = target.add_colors(source.top_colors(count))
                    if (can_move(new_target, new_source)
                            and transfer_amount(new_target, new_source) == count):
                        steps.append(ScrambleStep(i, j, count))
        return steps

    def scramble(self, containers: Tuple[Container, ...], shuffle_count: int,
                 rng: random.Random) -> Tuple[Tuple[Container, ...], int]:
        """
        Apply up to shuffle_count random reverse pours.

        The step that would exactly undo the previous one is skipped unless
        it is the only option.

        Returns:
            Tuple of (scrambled containers, steps applied)
        """
        current = list(containers)
        previous: Optional[ScrambleStep] = None
        applied = 0

        for _ in range(shuffle_count):
            steps = self.reverse_steps(current)
            if previous is not None:
                undo = ScrambleStep(previous.to_index, previous.from_index, previous.count)
                fresh = [step for step in steps if step != undo]
                steps = fresh or steps
            if not steps:
                break

            step = rng.choice(steps)
            source = current[step.from_index]
            target = current[step.to_index]
            current[step.to_index] = target.add_colors(source.top_colors(step.count))
            current[step.from_index] = source.remove_top_colors(step.count)
            previous = step
            applied += 1

        return tuple(current), applied

    def attempt(self, difficulty: Difficulty, seed: int) -> AttemptResult:
        """
        Make one generation attempt.

        Args:
            difficulty: Difficulty tier
            seed: Seed for this attempt alone

        Returns:
            AttemptResult, accepted or tagged with a RejectionReason
        """
        difficulty = Difficulty.parse(difficulty)
        tier = self.config.tier(difficulty)
        rng = random.Random(seed)

        color_count = rng.randint(*tier.color_range)
        container_count = max(rng.randint(*tier.container_range), color_count + 1)
        shuffle_count = rng.randint(*tier.shuffle_range)

        solved = self.solved_configuration(color_count, container_count, rng)
        containers, applied = self.scramble(solved, shuffle_count, rng)
        result = AttemptResult(seed=seed, difficulty=difficulty, containers=containers,
                               color_count=color_count, shuffle_count=shuffle_count,
                               shuffles_applied=applied)

        if is_won(containers):
            result.rejection = RejectionReason.ALREADY_SOLVED
            return result

        result.solution = find_optimal_solution(containers, max_states=tier.max_states,
                                                max_depth=tier.max_depth)
        result.rejection = self._classify(result.solution, tier)
        return result

    @staticmethod
    def _classify(solution: SolutionResult, tier: TierConfig) -> Optional[RejectionReason]:
        if not solution.found:
            if solution.reason == FailureReason.UNSOLVABLE:
                return RejectionReason.UNSOLVABLE
            return RejectionReason.NO_SOLUTION_WITHIN_BUDGET
        if solution.move_count == 0:
            return RejectionReason.ALREADY_SOLVED
        if solution.move_count < tier.min_optimal_moves:
            return RejectionReason.TOO_TRIVIAL
        return None

    # ==================== RETRY LOOP ====================

    def generate(self, difficulty: Difficulty, seed: Optional[int] = None,
                 level_number: int = 1, theme: Optional[str] = None) -> GeneratedPuzzle:
        """
        Generate a puzzle, retrying until an attempt is accepted.

        Args:
            difficulty: Difficulty tier (Difficulty or its name)
            seed: Master seed; a random one is chosen and recorded when None
            level_number: Used for the id and name of the puzzle
            theme: Optional theme name used for the id and name

        Returns:
            GeneratedPuzzle

        Raises:
            GenerationFailure: If max_attempts attempts are all rejected
        """
        difficulty = Difficulty.parse(difficulty)
        if seed is None:
            seed = random.getrandbits(32)
        master = random.Random(seed)
        rejections: Counter = Counter()

        for attempt_number in range(1, self.config.max_attempts + 1):
            result = self.attempt(difficulty, master.getrandbits(32))
            if result.accepted:
                puzzle = self._build(result, seed, attempt_number, dict(rejections),
                                     level_number, theme)
                logger.debug(
                    f"[Generator] {puzzle.definition.id}: {difficulty.value}, "
                    f"optimal {puzzle.optimal_move_count}, attempt {attempt_number}"
                )
                return puzzle

            rejections[result.rejection.name] += 1
            logger.debug(
                f"[Generator] Attempt {attempt_number} rejected: {result.rejection.value} "
                f"(seed {result.seed})"
            )

        logger.warning(
            f"[Generator] Gave up on {difficulty.value} seed {seed} after "
            f"{self.config.max_attempts} attempts: {dict(rejections)}"
        )
        raise GenerationFailure(self.config.max_attempts, dict(rejections), difficulty.value)

    def _build(self, result: AttemptResult, seed: int, attempts: int,
               rejections: Dict[str, int], level_number: int,
               theme: Optional[str]) -> GeneratedPuzzle:
        tier = self.config.tier(result.difficulty)
        optimal = result.solution.move_count
        move_limit = calculate_move_limit(optimal, tier.move_limit_multiplier)
        thresholds = calculate_star_thresholds(optimal, self.config.star_multipliers)

        definition = PuzzleDefinition(
            id=level_id(level_number, theme),
            name=level_name(level_number, theme),
            containers=result.containers,
            move_limit=move_limit,
            star_thresholds=thresholds,
            difficulty=result.difficulty.value,
            description=(f"Sort {result.color_count} colors into "
                         f"{len(result.containers)} containers"),
        )
        return GeneratedPuzzle(
            definition=definition,
            state=PuzzleState.from_definition(definition),
            optimal_move_count=optimal,
            move_limit=move_limit,
            star_thresholds=thresholds,
            solution=result.solution,
            seed=seed,
            attempts=attempts,
            rejections=rejections,
        )

    # ==================== BATCHES ====================

    def iter_levels(self, difficulty: Difficulty, count: int, start_number: int = 1,
                    theme: Optional[str] = None) -> Iterator[GeneratedPuzzle]:
        """
        Lazily generate consecutive levels with derived seeds.

        Callers report progress by consuming the iterator.
        """
        difficulty = Difficulty.parse(difficulty)
        for level_number in range(start_number, start_number + count):
            yield self.generate(difficulty, seed=derive_seed(difficulty, level_number, theme),
                                level_number=level_number, theme=theme)

    def generate_levels(self, difficulty: Difficulty, count: int, start_number: int = 1,
                        theme: Optional[str] = None) -> List[GeneratedPuzzle]:
        return list(self.iter_levels(difficulty, count, start_number, theme))

    def iter_level_pack(self, themes: Sequence[str],
                        levels_per_theme: int = 50) -> Iterator[Tuple[str, GeneratedPuzzle]]:
        """Lazily generate a level pack as (theme, puzzle) pairs, easiest levels first."""
        for theme in themes:
            level_number = 1
            for difficulty, count in pack_distribution(levels_per_theme):
                for puzzle in self.iter_levels(difficulty, count, level_number, theme):
                    yield theme, puzzle
                level_number += count

    def generate_level_pack(self, themes: Sequence[str],
                            levels_per_theme: int = 50) -> Dict[str, List[GeneratedPuzzle]]:
        """
        Generate levels_per_theme levels for each theme.

        Levels are numbered from 1 per theme and split across tiers 20/30/30/20.

        Returns:
            Dict of theme -> levels in order
        """
        pack: Dict[str, List[GeneratedPuzzle]] = {theme: [] for theme in themes}
        for theme, puzzle in self.iter_level_pack(themes, levels_per_theme):
            pack[theme].append(puzzle)
        logger.info(
            f"[Generator] Level pack ready: {len(pack)} themes x {levels_per_theme} levels"
        )
        return pack


def generate_puzzle(difficulty: Difficulty, seed: Optional[int] = None,
                    config: Optional[GeneratorConfig] = None) -> GeneratedPuzzle:
    """Generate a single puzzle with a one-off LevelGenerator."""
    return LevelGenerator(config).generate(difficulty, seed=seed)
