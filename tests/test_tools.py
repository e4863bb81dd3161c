"""
Test script for the batch level tools

Tests:
1. Pack generation, export and reload
2. Malformed pack files are reported as puzzle errors

Usage:
    python tests/test_tools.py
    pytest tests/test_tools.py
"""

import sys
import json
import tempfile
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.engine import InvalidPuzzle, PuzzleDefinition
from src.generator import Difficulty, GeneratorConfig, LevelGenerator, level_tester
from tools import generate_levels
from tools import test_levels as level_report


def banner(title: str) -> None:
    print("\n" + "="*60)
    print(f"TEST: {title}")
    print("="*60)


def quick_config(**changes) -> GeneratorConfig:
    config = GeneratorConfig(**changes)
    for difficulty in Difficulty:
        config = config.with_tier(difficulty, shuffle_range=(3, 5), min_optimal_moves=2,
                                  max_states=50000)
    return config


def test_export_and_reload():
    """An exported pack reads back as the same definitions."""
    banner("Export / Reload")

    generator = LevelGenerator(quick_config())
    pack, failed = generate_levels.generate_pack(generator, ["Ocean", "Forest"], 5)
    assert failed == []
    assert [len(levels) for levels in pack.values()] == [5, 5]

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "pack.json"
        size = generate_levels.export_pack(pack, path)
        assert size > 0
        data = json.loads(path.read_text(encoding="utf-8"))

    assert data["totalLevels"] == 10
    assert list(data["themes"]) == ["Ocean", "Forest"]
    assert data["themes"]["Ocean"][0]["id"] == "ocean_001"

    levels = level_report.read_levels(data)
    expected = [puzzle.definition for levels in pack.values() for puzzle in levels]
    assert levels == expected

    # A bare list and a single puzzle are accepted too
    assert level_report.read_levels(data["themes"]["Forest"]) == expected[5:]
    assert level_report.read_levels(data["themes"]["Ocean"][0]) == expected[:1]

    batch = level_tester.test_levels(levels)
    print(f"  {batch}")
    assert batch.total_levels == 10 and batch.failed == 0

    print("  [PASS] Export / reload tests")


def test_failed_theme_left_out():
    """A theme that cannot be generated is reported and skipped."""
    banner("Failed Theme")

    config = quick_config(max_attempts=1).with_tier(Difficulty.EASY, min_optimal_moves=40)
    pack, failed = generate_levels.generate_pack(LevelGenerator(config), ["Ocean"], 5)
    assert pack == {}
    assert failed == ["Ocean"]

    print("  [PASS] Failed theme tests")


def test_malformed_pack():
    """Malformed packs raise InvalidPuzzle rather than crashing."""
    banner("Malformed Pack")

    for data in ({"themes": []}, {"themes": {"Ocean": 5}}, {"themes": {"Ocean": ["x"]}}, [5]):
        with pytest.raises(InvalidPuzzle):
            level_report.read_levels(data)

    assert level_report.read_levels([]) == []
    assert isinstance(level_report.read_levels({"containers": []}), list)
    assert level_report.read_levels({"containers": []})[0] == PuzzleDefinition.from_dict(
        {"containers": []})

    print("  [PASS] Malformed pack tests")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# TOOL TESTS")
    print("#"*60)

    tests = [
        ("Export / Reload", test_export_and_reload),
        ("Failed Theme", test_failed_theme_left_out),
        ("Malformed Pack", test_malformed_pack),
    ]

    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except AssertionError as e:
            print(f"  [FAIL] {e}")
            results.append((name, False))

    print("\n" + "="*60)
    print("SUMMARY")
    print("="*60)
    for name, passed in results:
        print(f"  {name}: [{'PASS' if passed else 'FAIL'}]")

    if all(passed for _, passed in results):
        print("\nAll tests PASSED!")
        return 0
    print("\nSome tests FAILED!")
    return 1


if __name__ == "__main__":
    sys.exit(main())
