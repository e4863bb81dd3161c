"""
Test script for the puzzle state model and move rules

Tests:
1. Container construction and derived properties
2. Move legality rules and transfer amounts
3. PuzzleState transitions (apply_move / undo / reset)
4. Color conservation over random play
5. Win / loss detection and star rating
6. State keys and JSON serialization

Usage:
    python tests/test_engine.py
    pytest tests/test_engine.py
"""

import sys
import random
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.engine import (
    CapacityExceeded,
    Container,
    GameColor,
    InsufficientColors,
    InvalidMove,
    InvalidPuzzle,
    Move,
    MoveRejection,
    NoHistory,
    PuzzleDefinition,
    PuzzleState,
    can_move,
    has_any_legal_move,
    is_won,
    legal_moves,
    rejection_reason,
    state_key,
    transfer_amount,
)

R, B, G, Y = GameColor.RED, GameColor.BLUE, GameColor.GREEN, GameColor.YELLOW


def banner(title: str) -> None:
    print("\n" + "="*60)
    print(f"TEST: {title}")
    print("="*60)


def test_container_properties():
    """Test Container construction and derived properties."""
    banner("Container")

    container = Container.from_colors("A", [R, B, B, B])
    print(f"  {container.to_debug_string()}")
    assert container.size == 4
    assert container.is_full
    assert not container.is_empty
    assert not container.is_solved
    assert container.top_color == B
    assert container.top_run_length == 3
    assert container.available_space == 0
    assert container.top_colors(2) == (B, B)

    empty = Container.empty("B")
    assert empty.is_empty and empty.is_solved
    assert empty.top_color is None
    assert empty.top_run_length == 0
    assert empty.available_space == 4

    assert Container.from_colors("C", [G] * 4).is_solved
    assert not Container.from_colors("D", [G] * 3).is_solved

    # Value equality covers id, capacity and colors
    assert Container.from_colors("A", [R]) == Container.from_colors("A", [R])
    assert Container.from_colors("A", [R]) != Container.from_colors("B", [R])
    assert Container.from_colors("A", [R], capacity=4) != Container.from_colors("A", [R], capacity=5)

    print("  [PASS] Container tests")


def test_container_errors():
    """Test construction and removal failures."""
    banner("Container Errors")

    with pytest.raises(CapacityExceeded):
        Container.from_colors("A", [R] * 5, capacity=4)

    container = Container.from_colors("A", [R, B])
    with pytest.raises(InsufficientColors):
        container.remove_top_colors(3)
    with pytest.raises(InsufficientColors):
        container.top_colors(3)

    # Containers are never modified in place
    smaller = container.remove_top_colors(1)
    assert container.colors == (R, B)
    assert smaller.colors == (R,)
    assert container.add_colors([B]).colors == (R, B, B)

    print("  [PASS] Container error tests")


def test_move_rules():
    """Test legality checks in their documented order."""
    banner("Move Rules")

    mixed = Container.from_colors("A", [R, B, B, B])
    empty = Container.empty("B")
    red_partial = Container.from_colors("C", [R, R])
    blue_partial = Container.from_colors("D", [B])

    assert rejection_reason(empty, red_partial) == MoveRejection.SOURCE_EMPTY
    assert rejection_reason(red_partial, mixed) == MoveRejection.TARGET_FULL
    assert rejection_reason(red_partial, red_partial) == MoveRejection.SAME_CONTAINER
    assert rejection_reason(blue_partial, red_partial) == MoveRejection.COLOR_MISMATCH
    assert rejection_reason(mixed, empty) is None
    assert rejection_reason(mixed, blue_partial) is None

    # transfer = min(top run, free space)
    assert transfer_amount(mixed, empty) == 3
    assert transfer_amount(mixed, blue_partial) == 3
    assert transfer_amount(red_partial, Container.from_colors("E", [R, R, R])) == 1
    assert transfer_amount(blue_partial, red_partial) == 0
    assert not can_move(blue_partial, red_partial)

    pairs = legal_moves([mixed, empty, red_partial])
    print(f"  Legal pairs: {pairs}")
    assert pairs == [(0, 1), (2, 1)]

    print("  [PASS] Move rule tests")


def test_apply_move_scenario():
    """Pouring a run of three blues into an empty container."""
    banner("Apply Move")

    state = PuzzleState.from_containers([
        Container.from_colors("A", [R, B, B, B]),
        Container.empty("B"),
    ])
    after = state.apply_move("A", "B")

    assert after.get_container("A").colors == (R,)
    assert after.get_container("B").colors == (B, B, B)
    assert after.history == (Move("A", "B", B, 3),)
    assert after.move_count == 1

    # The original state is untouched
    assert state.get_container("A").colors == (R, B, B, B)
    assert state.move_count == 0

    print(f"  {after.history[0]}")
    print("  [PASS] Apply move tests")


def test_structural_sharing():
    """Untouched containers are reused, not copied."""
    banner("Structural Sharing")

    state = PuzzleState.from_containers([
        Container.from_colors("A", [R, B]),
        Container.empty("B"),
        Container.from_colors("C", [G, G, G, G]),
    ])
    after = state.apply_move("A", "B")
    assert after.containers[2] is state.containers[2]
    assert after.definition is state.definition

    print("  [PASS] Structural sharing tests")


def test_invalid_moves():
    """Test InvalidMove reasons from apply_move."""
    banner("Invalid Moves")

    state = PuzzleState.from_containers([
        Container.from_colors("A", [R, B]),
        Container.from_colors("B", [R]),
        Container.empty("C"),
    ])

    with pytest.raises(InvalidMove) as excinfo:
        state.apply_move("A", "B")
    assert excinfo.value.reason == MoveRejection.COLOR_MISMATCH

    with pytest.raises(InvalidMove) as excinfo:
        state.apply_move("C", "A")
    assert excinfo.value.reason == MoveRejection.SOURCE_EMPTY

    with pytest.raises(InvalidMove) as excinfo:
        state.apply_move("A", "A")
    assert excinfo.value.reason == MoveRejection.SAME_CONTAINER

    with pytest.raises(InvalidMove) as excinfo:
        state.apply_move("A", "Z")
    assert excinfo.value.reason == MoveRejection.UNKNOWN_CONTAINER

    with pytest.raises(InvalidPuzzle):
        PuzzleState.from_containers([Container.empty("A"), Container.empty("A")])

    print("  [PASS] Invalid move tests")


def test_undo_and_reset():
    """apply_move followed by undo restores an equal state."""
    banner("Undo / Reset")

    state = PuzzleState.from_containers([
        Container.from_colors("A", [R, B, B]),
        Container.from_colors("B", [B]),
        Container.from_colors("C", [R, R, R]),
        Container.empty("D"),
    ])

    with pytest.raises(NoHistory):
        state.undo()
    assert not state.can_undo

    for from_index, to_index in legal_moves(state.containers):
        from_id = state.containers[from_index].id
        to_id = state.containers[to_index].id
        moved = state.apply_move(from_id, to_id)
        assert moved.can_undo
        assert moved.undo() == state, f"undo of {from_id}->{to_id} did not round-trip"

    played = state.apply_move("A", "B").apply_move("A", "C")
    assert played.move_count == 2
    assert played.reset() == state

    # Lists are stored as tuples, so a round trip compares equal
    listed = PuzzleState(containers=list(state.containers), definition=state.definition)
    assert isinstance(listed.containers, tuple)
    assert listed.apply_move("A", "B").undo() == listed
    definition = PuzzleDefinition(id="l", name="L", containers=list(state.containers))
    assert definition.containers == state.containers
    assert PuzzleState.from_definition(definition).apply_move("A", "B").undo().containers \
        == definition.containers

    print("  [PASS] Undo / reset tests")


def test_color_conservation():
    """Random play never creates or destroys units."""
    banner("Color Conservation")

    state = PuzzleState.from_containers([
        Container.from_colors("A", [R, B, G, Y]),
        Container.from_colors("B", [Y, G, B, R]),
        Container.from_colors("C", [B, R, Y, G]),
        Container.from_colors("D", [G, Y, R, B]),
        Container.empty("E"),
        Container.empty("F"),
    ])
    start_counts = state.color_counts()
    rng = random.Random(7)

    for step in range(300):
        pairs = legal_moves(state.containers)
        if not pairs:
            break
        from_index, to_index = rng.choice(pairs)
        state = state.apply_move(state.containers[from_index].id,
                                 state.containers[to_index].id)
        assert state.color_counts() == start_counts, f"colors changed at step {step}"
        assert all(c.size <= c.capacity for c in state.containers)

    print(f"  {state.move_count} random moves, counts {dict(start_counts)}")
    print("  [PASS] Color conservation tests")


def test_win_detection():
    """Solid full containers win; any mixed container does not."""
    banner("Win Detection")

    containers = [Container.from_colors("A", [R] * 4), Container.from_colors("B", [B] * 4)]
    assert is_won(containers)
    assert not has_any_legal_move(containers)

    with_empty = containers + [Container.empty("C")]
    assert is_won(with_empty)
    assert has_any_legal_move(with_empty)

    mixed = containers + [Container.from_colors("C", [G, Y])]
    assert not is_won(mixed)

    assert PuzzleState.from_containers(containers).is_won

    print("  [PASS] Win detection tests")


def test_move_limit_and_stars():
    """Loss when the limit is reached without winning; stars by thresholds."""
    banner("Move Limit / Stars")

    containers = [
        Container.from_colors("A", [R, B, B, B]),
        Container.from_colors("B", [B]),
        Container.from_colors("C", [R, R, R]),
        Container.empty("D"),
    ]

    limited = PuzzleState.from_containers(containers, move_limit=1)
    assert limited.moves_remaining == 1
    after = limited.apply_move("A", "B")
    assert after.is_lost and after.is_game_over
    assert after.moves_remaining == 0

    unlimited = PuzzleState.from_containers(containers)
    assert unlimited.moves_remaining is None
    assert not unlimited.apply_move("A", "D").is_lost

    definition = PuzzleDefinition.from_containers(containers, move_limit=10,
                                                  star_thresholds=(4, 3, 2))
    assert [definition.calculate_stars(n) for n in (2, 3, 4, 5)] == [3, 2, 1, 0]

    won = PuzzleState.from_definition(definition).apply_move("A", "B").apply_move("A", "C")
    assert won.is_won and not won.is_lost
    assert won.current_stars == 3

    with pytest.raises(InvalidPuzzle):
        PuzzleDefinition.from_containers(containers, star_thresholds=(3, 2))

    print("  [PASS] Move limit / star tests")


def test_state_key():
    """Equal states share a key; different layouts do not collide."""
    banner("State Key")

    a = [Container.from_colors("A", [R, B]), Container.empty("B")]
    b = [Container.from_colors("A", [R, B]), Container.empty("B")]
    assert state_key(a) == state_key(b) == "RB|"

    split = [Container.from_colors("A", [R]), Container.from_colors("B", [B])]
    assert state_key(split) == "R|B"
    assert state_key(split) != state_key(a)

    # Every one- and two-unit layout over two containers has a distinct key
    layouts = set()
    for first in ([], [R], [B], [R, B], [B, R], [R, R], [B, B]):
        for second in ([], [R], [B], [R, B], [B, R], [R, R], [B, B]):
            key = state_key([Container.from_colors("A", first), Container.from_colors("B", second)])
            layouts.add(key)
    assert len(layouts) == 49

    print("  [PASS] State key tests")


def test_definition_serialization():
    """to_dict / from_dict round-trip and error reporting."""
    banner("Serialization")

    definition = PuzzleDefinition(
        id="ocean_001",
        name="Ocean #1",
        containers=(Container.from_colors("c0", [R, B]), Container.empty("c1")),
        move_limit=8,
        star_thresholds=(6, 5, 4),
        difficulty="easy",
        description="Sort 2 colors into 2 containers",
    )
    data = definition.to_dict()
    assert data["moveLimit"] == 8
    assert data["containers"][0]["colors"] == ["red", "blue"]
    assert PuzzleDefinition.from_dict(data) == definition

    with pytest.raises(InvalidPuzzle):
        PuzzleDefinition.from_dict({"id": "broken"})
    with pytest.raises(InvalidPuzzle):
        PuzzleDefinition.from_dict({"containers": [{"id": "A", "colors": ["chartreuse"]}]})

    malformed = [
        [],
        "puzzle",
        {"containers": 5},
        {"containers": [["red"]]},
        {"containers": [{"id": "A", "colors": [1]}]},
        {"containers": [{"id": "A", "colors": "red"}]},
        {"containers": [{"id": "A", "colors": ["red"], "capacity": "4"}]},
        {"containers": [{"id": "A", "colors": ["red"], "capacity": True}]},
        {"containers": [], "moveLimit": "8"},
        {"containers": [], "starThresholds": "654"},
    ]
    for data in malformed:
        with pytest.raises(InvalidPuzzle):
            PuzzleDefinition.from_dict(data)

    assert GameColor.from_name("Red") == R
    assert GameColor.from_name("B") == B

    print("  [PASS] Serialization tests")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# ENGINE TESTS")
    print("#"*60)

    tests = [
        ("Container", test_container_properties),
        ("Container Errors", test_container_errors),
        ("Move Rules", test_move_rules),
        ("Apply Move", test_apply_move_scenario),
        ("Structural Sharing", test_structural_sharing),
        ("Invalid Moves", test_invalid_moves),
        ("Undo / Reset", test_undo_and_reset),
        ("Color Conservation", test_color_conservation),
        ("Win Detection", test_win_detection),
        ("Move Limit / Stars", test_move_limit_and_stars),
        ("State Key", test_state_key),
        ("Serialization", test_definition_serialization),
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
