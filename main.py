"""
Color Sort Engine - Entry Point

Solves, hints, validates and generates color sort puzzles stored as JSON
puzzle definitions.

Example:
    python main.py solve puzzle.json
    python main.py hint puzzle.json --max-states 20000
    python main.py validate puzzle.json --quick
    python main.py generate --difficulty hard --seed 42 --output level.json
"""

import sys
import json
import logging
import argparse
from pathlib import Path

from src.engine import PuzzleDefinition, PuzzleError
from src.generator import (
    Difficulty,
    GeneratorConfig,
    LevelGenerator,
    estimate_difficulty,
    validate_puzzle,
)
from src.settings import load_settings, solver_budgets
from src.solver import find_optimal_solution, get_next_move, get_strategy_names


logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    """Console logging in the same format for every entry point."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def debug_enabled(args, settings) -> bool:
    """Effective debug mode: the --debug flag overrides the saved setting."""
    if args.debug:
        return True
    return bool(settings.get("debug_enabled", False))


def load_puzzle(path: str) -> PuzzleDefinition:
    """
    Load a puzzle definition from a JSON file.

    Raises:
        PuzzleError: If the file does not describe a valid puzzle
        OSError / json.JSONDecodeError: If the file cannot be read
    """
    with open(path, 'r', encoding='utf-8') as f:
        return PuzzleDefinition.from_dict(json.load(f))


def _budgets(args, settings):
    max_states, max_depth = solver_budgets(settings)
    if args.max_states is not None:
        max_states = args.max_states
    if args.max_depth is not None:
        max_depth = args.max_depth
    return max_states, max_depth


def cmd_solve(args, settings) -> int:
    puzzle = load_puzzle(args.puzzle)
    max_states, max_depth = _budgets(args, settings)
    solution = find_optimal_solution(puzzle, max_states=max_states, max_depth=max_depth,
                                     strategy=args.strategy or settings["strategy_name"])
    print(solution)
    for i, move in enumerate(solution.moves, 1):
        print(f"  {i:3d}. {move}")
    return 0 if solution.found else 1


def cmd_hint(args, settings) -> int:
    puzzle = load_puzzle(args.puzzle)
    max_states, max_depth = _budgets(args, settings)
    hint = get_next_move(puzzle, max_states=max_states, max_depth=max_depth,
                         strategy=args.strategy or settings["strategy_name"])
    print(hint)
    return 0 if hint.found else 1


def cmd_validate(args, settings) -> int:
    puzzle = load_puzzle(args.puzzle)
    max_states, max_depth = _budgets(args, settings)
    result = validate_puzzle(puzzle.containers, max_states=max_states,
                             max_depth=max_depth, quick=args.quick)
    print(result)
    print(f"Estimated difficulty: {estimate_difficulty(puzzle.containers):.1f} / 100")
    return 0 if result.is_solvable else 1


def cmd_generate(args, settings) -> int:
    generator = LevelGenerator(GeneratorConfig.from_settings(settings))
    puzzle = generator.generate(args.difficulty, seed=args.seed,
                                level_number=args.level, theme=args.theme)
    logger.info(
        f"Generated {puzzle.definition.id}: optimal {puzzle.optimal_move_count}, "
        f"limit {puzzle.move_limit}, stars {puzzle.star_thresholds}, seed {puzzle.seed}"
    )

    text = json.dumps(puzzle.to_dict(), indent=2)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding='utf-8')
        logger.info(f"Puzzle written to {args.output}")
    else:
        print(text)
    return 0


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Color Sort Engine - Solve, hint, validate and generate puzzles"
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Settings file (default: engine_config.json)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("solve", "Print the shortest solution"),
                            ("hint", "Print the next move of a shortest solution"),
                            ("validate", "Check solvability and quality")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("puzzle", help="Puzzle definition JSON file")
        sub.add_argument("--max-states", type=int, default=None,
                         help="Solver state budget (default: from settings)")
        sub.add_argument("--max-depth", type=int, default=None,
                         help="Solver depth budget (default: from settings)")
        if name == "validate":
            sub.add_argument("--quick", action="store_true",
                             help="Reject obviously bad puzzles before searching")
        else:
            sub.add_argument("--strategy", choices=get_strategy_names(), default=None,
                             help="Solver strategy (default: from settings)")

    gen = subparsers.add_parser("generate", help="Generate a new puzzle")
    gen.add_argument("--difficulty", type=Difficulty.parse, default=Difficulty.EASY,
                     help="easy, medium, hard or expert (default: easy)")
    gen.add_argument("--seed", type=int, default=None,
                     help="Seed for reproducible generation (default: random)")
    gen.add_argument("--level", type=int, default=1, help="Level number (default: 1)")
    gen.add_argument("--theme", default=None, help="Theme name used in the level id")
    gen.add_argument("--output", "-o", default=None, help="Write JSON here instead of stdout")

    return parser.parse_args(argv)


COMMANDS = {
    "solve": cmd_solve,
    "hint": cmd_hint,
    "validate": cmd_validate,
    "generate": cmd_generate,
}


def main(argv=None) -> int:
    """Run one command and return its exit code."""
    args = parse_args(argv)
    settings = load_settings(args.config)
    configure_logging(debug_enabled(args, settings))

    try:
        return COMMANDS[args.command](args, settings)
    except (PuzzleError, ValueError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
