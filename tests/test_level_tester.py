"""
Test script for batch level testing

Tests:
1. Quality checks on single levels
2. Batch pass rate
3. Duplicate detection
4. Difficulty progression
5. Statistics

Usage:
    python tests/test_level_tester.py
    pytest tests/test_level_tester.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.engine import Container, GameColor, PuzzleDefinition
from src.generator import Difficulty, LevelGenerator, level_tester

R, B = GameColor.RED, GameColor.BLUE


def banner(title: str) -> None:
    print("\n" + "="*60)
    print(f"TEST: {title}")
    print("="*60)


def one_move(id="one", difficulty="easy", move_limit=None) -> PuzzleDefinition:
    return PuzzleDefinition.from_containers([
        Container.from_colors("A", [R, R, R]),
        Container.from_colors("B", [R]),
        Container.empty("C"),
    ], id=id, difficulty=difficulty, move_limit=move_limit)


def two_moves(id="two", difficulty="medium", move_limit=None) -> PuzzleDefinition:
    return PuzzleDefinition.from_containers([
        Container.from_colors("A", [R, B, B, B]),
        Container.from_colors("B", [B]),
        Container.from_colors("C", [R, R, R]),
        Container.empty("D"),
    ], id=id, difficulty=difficulty, move_limit=move_limit)


def three_moves(id="three", difficulty="hard", move_limit=None) -> PuzzleDefinition:
    return PuzzleDefinition.from_containers([
        Container.from_colors("A", [R, B], capacity=2),
        Container.from_colors("B", [B, R], capacity=2),
        Container.empty("C", capacity=2),
        Container.empty("D", capacity=2),
    ], id=id, difficulty=difficulty, move_limit=move_limit)


def unsolvable(id="stuck") -> PuzzleDefinition:
    return PuzzleDefinition.from_containers([
        Container.from_colors("A", [R, B], capacity=2),
        Container.from_colors("B", [B, R], capacity=2),
        Container.from_colors("C", [R], capacity=2),
    ], id=id, difficulty="easy")


def test_quality_checks():
    """Levels fail for being trivial, unsolvable or badly limited."""
    banner("Quality Checks")

    good = level_tester.test_level(two_moves(move_limit=4))
    print(f"  {good}")
    assert good.passed
    assert good.optimal_moves == 2
    assert good.states_explored >= 3
    assert good.quality_issues == []

    trivial = level_tester.test_level(one_move())
    assert trivial.is_solvable and not trivial.passes_quality_checks
    assert any("optimal moves" in issue for issue in trivial.quality_issues)

    tight = level_tester.test_level(two_moves(move_limit=2))
    assert not tight.passed
    assert any("ratio" in issue for issue in tight.quality_issues)

    loose = level_tester.test_level(two_moves(move_limit=10))
    assert not loose.passed

    stuck = level_tester.test_level(unsolvable())
    assert not stuck.is_solvable and not stuck.passed
    assert stuck.error_message

    print("  [PASS] Quality check tests")


def test_batch():
    """Batch results count passes, failures and warnings."""
    banner("Batch")

    batch = level_tester.test_levels([two_moves(), three_moves(), one_move(), unsolvable()])
    print(f"  {batch}")
    assert batch.total_levels == 4
    assert batch.passed == 2 and batch.failed == 2
    assert batch.pass_rate == 0.5
    assert [r.level.id for r in batch.failures] == ["one", "stuck"]

    # One color only: solvable but warned
    assert batch.warnings == 1

    assert level_tester.test_levels([]).pass_rate == 0.0

    generated = LevelGenerator().generate_levels(Difficulty.EASY, 3, theme="Ocean")
    assert level_tester.test_levels(generated).pass_rate == 1.0

    print("  [PASS] Batch tests")


def test_duplicates():
    """Container order and ids do not hide a duplicate."""
    banner("Duplicates")

    original = two_moves(id="a")
    reordered = PuzzleDefinition.from_containers(
        [Container.empty("x"), Container.from_colors("y", [R, R, R]),
         Container.from_colors("z", [B]), Container.from_colors("w", [R, B, B, B])],
        id="b",
    )
    assert level_tester.level_signature(original) == level_tester.level_signature(reordered)
    assert "E" in level_tester.level_signature(original).split("|")

    groups = level_tester.find_duplicates([original, three_moves(id="c"), reordered])
    assert len(groups) == 1
    assert groups[0].level_ids == ["a", "b"]
    assert str(groups[0]) == "Duplicate: [a, b]"

    assert level_tester.find_duplicates([original, three_moves()]) == []

    print("  [PASS] Duplicate tests")


def test_difficulty_progression():
    """Average optimal moves must not fall as difficulty rises."""
    banner("Difficulty Progression")

    rising = [one_move(difficulty="easy"), two_moves(difficulty="medium"),
              three_moves(difficulty="hard")]
    result = level_tester.verify_difficulty_progression(rising)
    print(f"  {result.averages_by_difficulty}")
    assert result.is_monotonic
    assert result.averages_by_difficulty == {"easy": 1.0, "medium": 2.0, "hard": 3.0}

    falling = [three_moves(difficulty="easy"), one_move(difficulty="expert")]
    assert not level_tester.verify_difficulty_progression(falling).is_monotonic

    print("  [PASS] Difficulty progression tests")


def test_statistics():
    """numpy-backed summary statistics."""
    banner("Statistics")

    levels = [one_move(), two_moves(), three_moves()]
    stats = level_tester.generate_statistics(levels)
    print(f"  {stats.to_dict()}")
    assert stats.total_levels == 3
    assert stats.average_optimal_moves == 2.0
    assert stats.median_optimal_moves == 2.0
    assert stats.min_optimal_moves == 1
    assert stats.max_optimal_moves == 3
    assert stats.container_distribution == {3: 1, 4: 2}
    assert stats.difficulty_distribution == {"easy": 1, "medium": 1, "hard": 1}
    assert stats.solvable_count == 3
    assert stats.quality_pass_count == 2
    assert stats.average_states_explored > 0

    empty = level_tester.generate_statistics([])
    assert empty.total_levels == 0
    assert empty.average_optimal_moves == 0.0

    print("  [PASS] Statistics tests")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# LEVEL TESTER TESTS")
    print("#"*60)

    tests = [
        ("Quality Checks", test_quality_checks),
        ("Batch", test_batch),
        ("Duplicates", test_duplicates),
        ("Difficulty Progression", test_difficulty_progression),
        ("Statistics", test_statistics),
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
