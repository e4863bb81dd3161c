"""
Batch level pack generation.

Generates levels_per_theme levels for each theme (20% easy, 30% medium,
30% hard, 20% expert), shows progress and process memory, and exports the
pack as JSON for tools/test_levels.py or a game client.

Usage:
    python tools/generate_levels.py
    python tools/generate_levels.py --themes Ocean Forest --levels 20 -o pack.json
"""

import sys
import json
import time
import logging
import argparse
from datetime import datetime
from pathlib import Path

import psutil

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.engine import GenerationFailure
from src.generator import GeneratorConfig, LevelGenerator, level_tester
from src.settings import load_settings

logger = logging.getLogger(__name__)

DEFAULT_THEMES = ["Ocean", "Forest", "Desert", "Space"]
BAR_WIDTH = 40


def memory_mb() -> float:
    """Resident memory of this process in MB."""
    return psutil.Process().memory_info().rss / (1024 * 1024)


def show_progress(theme: str, current: int, total: int) -> None:
    filled = round(current / total * BAR_WIDTH) if total else BAR_WIDTH
    percentage = round(current / total * 100) if total else 100
    bar = "#" * filled + "-" * (BAR_WIDTH - filled)
    sys.stdout.write(f"\r  {theme:<10} [{bar}] {percentage:3d}% "
                     f"Level {current:3d}/{total}  {memory_mb():6.1f} MB")
    sys.stdout.flush()


def generate_pack(generator: LevelGenerator, themes, levels_per_theme: int):
    """
    Generate every theme, reporting progress as levels arrive.

    A theme whose generation fails is logged and left out of the pack.

    Returns:
        Tuple of (dict theme -> list of GeneratedPuzzle, failed theme names)
    """
    pack = {}
    failed = []
    for theme in themes:
        levels = []
        try:
            for _, puzzle in generator.iter_level_pack([theme], levels_per_theme):
                levels.append(puzzle)
                show_progress(theme, len(levels), levels_per_theme)
        except GenerationFailure as e:
            print()
            logger.error(f"Theme {theme} failed: {e}")
            failed.append(theme)
            continue
        print()
        pack[theme] = levels
    return pack, failed


def export_pack(pack, path: Path) -> int:
    """Write the pack as JSON and return its size in bytes."""
    data = {
        "generated": datetime.now().isoformat(timespec="seconds"),
        "totalLevels": sum(len(levels) for levels in pack.values()),
        "themes": {theme: [puzzle.to_dict() for puzzle in levels]
                   for theme, levels in pack.items()},
    }
    text = json.dumps(data, indent=2)
    path.write_text(text + "\n", encoding="utf-8")
    return len(text.encode("utf-8"))


def main():
    parser = argparse.ArgumentParser(description="Generate a level pack")
    parser.add_argument("--themes", nargs="+", default=DEFAULT_THEMES,
                        help=f"Theme names (default: {' '.join(DEFAULT_THEMES)})")
    parser.add_argument("--levels", type=int, default=50,
                        help="Levels per theme (default: 50)")
    parser.add_argument("--output", "-o", default="generated_levels.json",
                        help="Output JSON file (default: generated_levels.json)")
    parser.add_argument("--config", "-c", default=None,
                        help="Settings file (default: engine_config.json)")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    print("=" * 60)
    print("Level Pack Generator")
    print("=" * 60)
    print(f"Themes: {', '.join(args.themes)} - {args.levels} levels each")
    print()

    generator = LevelGenerator(GeneratorConfig.from_settings(load_settings(args.config)))
    start = time.perf_counter()
    pack, failed = generate_pack(generator, args.themes, args.levels)
    elapsed = time.perf_counter() - start

    all_levels = [puzzle for levels in pack.values() for puzzle in levels]
    print()
    print("=" * 60)
    print("Generation Summary")
    print("=" * 60)
    print(f"  Levels generated: {len(all_levels)}")
    print(f"  Failed themes:    {', '.join(failed) if failed else 'none'}")
    print(f"  Time elapsed:     {elapsed:.1f}s")
    print(f"  Peak memory:      {memory_mb():.1f} MB")

    if all_levels:
        attempts = [puzzle.attempts for puzzle in all_levels]
        print(f"  Attempts/level:   avg {sum(attempts) / len(attempts):.2f}, max {max(attempts)}")
        duplicates = level_tester.find_duplicates(all_levels)
        print(f"  Duplicates:       {len(duplicates)}")
        for group in duplicates:
            print(f"    {group}")

        size = export_pack(pack, Path(args.output))
        print(f"\nExported to {args.output} ({size / 1024:.2f} KB)")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
