import random

import pytest

from dailysweeper.board import MAX_DIMENSION, count_neighbor_mines, generate, neighbors, validate_config
from dailysweeper.prng import SeededRandom
from dailysweeper.types import MINE, InvalidConfiguration

# Reference board for 10x10 with 15 mines and seed 42.
GOLDEN_10x10_SEED_42 = [
    [1, 1, 1, 0, 1, -1, -1, 2, 0, 0],
    [1, -1, 1, 0, 1, 3, -1, 2, 0, 0],
    [3, 3, 2, 0, 0, 1, 1, 1, 0, 0],
    [-1, -1, 1, 0, 0, 0, 0, 0, 0, 0],
    [-1, 4, 2, 1, 0, 0, 0, 0, 0, 0],
    [2, 3, -1, 1, 0, 0, 0, 0, 0, 0],
    [1, -1, 3, 3, 2, 1, 0, 0, 0, 0],
    [1, 1, 2, -1, -1, 2, 0, 0, 0, 0],
    [0, 0, 2, 5, -1, 4, 1, 0, 0, 0],
    [0, 0, 1, -1, -1, -1, 1, 0, 0, 0],
]


def count_mines(values):
    return sum(row.count(MINE) for row in values)


def test_golden_board_for_seed_42():
    grid = generate(10, 10, 15, SeededRandom(42))
    assert grid.values == GOLDEN_10x10_SEED_42
    assert grid.values[8][3] == 5
    assert grid.values[0][5] == MINE


def test_same_seed_same_board():
    a = generate(16, 30, 99, SeededRandom(2024))
    b = generate(16, 30, 99, SeededRandom(2024))
    assert a.values == b.values


def test_different_seeds_differ():
    a = generate(16, 16, 40, SeededRandom(1))
    b = generate(16, 16, 40, SeededRandom(2))
    assert a.values != b.values


@pytest.mark.parametrize("rows,cols,mines", [
    (1, 2, 1),
    (2, 2, 3),
    (5, 5, 24),
    (8, 8, 10),
    (30, 30, 50),
    (50, 50, 150),
    (3, 7, 20),
])
def test_exact_mine_count(rows, cols, mines):
    for seed in range(5):
        grid = generate(rows, cols, mines, SeededRandom(seed))
        assert count_mines(grid.values) == mines
        assert grid.mine_count == mines


def test_unseeded_generation_places_every_mine():
    grid = generate(12, 12, 30, random.Random())
    assert count_mines(grid.values) == 30


def test_adjacency_counts_are_correct():
    grid = generate(20, 20, 80, SeededRandom(77))
    for r in range(grid.rows):
        for c in range(grid.cols):
            if grid.values[r][c] == MINE:
                continue
            expected = sum(
                1 for nr, nc in neighbors(r, c, grid.rows, grid.cols)
                if grid.values[nr][nc] == MINE
            )
            assert grid.values[r][c] == expected


def test_new_grid_is_hidden_and_unflagged():
    grid = generate(6, 9, 10, SeededRandom(5))
    assert len(grid.values) == 6 and all(len(row) == 9 for row in grid.values)
    assert not any(any(row) for row in grid.revealed)
    assert not any(any(row) for row in grid.flagged)


def test_neighbors_are_clipped_at_edges():
    assert sorted(neighbors(0, 0, 3, 3)) == [(0, 1), (1, 0), (1, 1)]
    assert len(list(neighbors(1, 1, 3, 3))) == 8
    assert len(list(neighbors(0, 1, 3, 3))) == 5


def test_count_neighbor_mines():
    values = [
        [MINE, 0, 0],
        [0, 0, MINE],
        [0, 0, 0],
    ]
    assert count_neighbor_mines(values, 1, 1) == 2
    assert count_neighbor_mines(values, 2, 0) == 0


@pytest.mark.parametrize("rows,cols,mines", [
    (1, 1, 1),
    (0, 5, 1),
    (5, 0, 1),
    (-3, 5, 2),
    (5, 5, 0),
    (5, 5, 25),
    (5, 5, 30),
    (5, 5, -1),
    (51, 10, 5),
    (10, 51, 5),
    (100000, 100000, 1),
])
def test_invalid_configurations_are_rejected(rows, cols, mines):
    with pytest.raises(InvalidConfiguration):
        validate_config(rows, cols, mines)
    with pytest.raises(InvalidConfiguration):
        generate(rows, cols, mines, SeededRandom(1))


@pytest.mark.parametrize("rows,cols,mines", [
    ("10", 10, 5),
    (10, 10.5, 5),
    (10, 10, None),
    (True, 10, 5),
])
def test_non_integer_configurations_are_rejected(rows, cols, mines):
    with pytest.raises(InvalidConfiguration):
        validate_config(rows, cols, mines)


def test_largest_board_is_accepted():
    validate_config(MAX_DIMENSION, MAX_DIMENSION, MAX_DIMENSION * MAX_DIMENSION - 1)


def test_grid_is_mine_matches_values():
    grid = generate(10, 10, 15, SeededRandom(42))
    assert grid.is_mine(0, 5) is True
    assert grid.is_mine(8, 3) is False


def test_invalid_configuration_is_a_value_error():
    assert issubclass(InvalidConfiguration, ValueError)
