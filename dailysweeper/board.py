"""Board generation with clustered mine placement."""
import logging
import math
from typing import Iterator, List, Tuple

from dailysweeper.prng import Rng, random_below
from dailysweeper.types import MINE, Grid, InvalidConfiguration

logger = logging.getLogger(__name__)

CLUSTER_SIZE = 3
CLUSTER_OFFSETS: List[Tuple[int, int]] = [
    (0, 0), (-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1)
]
# A gap-fill candidate is accepted outright when it touches this many mines.
MIN_ADJACENT_FOR_CLUE = 1
MAX_ADJACENT_FOR_CLUE = 4
VARIETY_CHANCE = 0.3
MAX_DIMENSION = 50


def validate_config(rows: int, cols: int, mine_count: int) -> None:
    """Raise InvalidConfiguration unless both sides are in [1, MAX_DIMENSION]
    and 0 < mine_count < rows * cols.
    """
    for name, value in (('rows', rows), ('cols', cols), ('mine_count', mine_count)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if rows <= 0 or cols <= 0:
        raise InvalidConfiguration(f"Board dimensions must be positive, got {rows}x{cols}")
    if rows > MAX_DIMENSION or cols > MAX_DIMENSION:
        raise InvalidConfiguration(
            f"Board dimensions must be at most {MAX_DIMENSION}x{MAX_DIMENSION}, got {rows}x{cols}"
        )
    if mine_count <= 0:
        raise InvalidConfiguration(f"Mine count must be positive, got {mine_count}")
    if mine_count >= rows * cols:
        raise InvalidConfiguration(
            f"Too many mines for the board size: {mine_count} mines on {rows}x{cols}"
        )


def neighbors(row: int, col: int, rows: int, cols: int) -> Iterator[Tuple[int, int]]:
    """Yield the in-bounds 8-neighborhood of a cell."""
    for dr in [-1, 0, 1]:
        for dc in [-1, 0, 1]:
            if dr == 0 and dc == 0:
                continue
            new_row = row + dr
            new_col = col + dc
            if 0 <= new_row < rows and 0 <= new_col < cols:
                yield new_row, new_col


def count_neighbor_mines(values: List[List[int]], row: int, col: int) -> int:
    """Count the number of mines in neighboring cells."""
    rows, cols = len(values), len(values[0])
    return sum(1 for r, c in neighbors(row, col, rows, cols) if values[r][c] == MINE)


def _shuffle(items: list, rng: Rng) -> None:
    """Fisher-Yates shuffle in place, drawing one float per swap."""
    for i in range(len(items) - 1, 0, -1):
        j = random_below(rng, i + 1)
        items[i], items[j] = items[j], items[i]


def _place_clusters(values: List[List[int]], mine_count: int, rng: Rng) -> int:
    rows, cols = len(values), len(values[0])
    placed = 0
    num_clusters = math.ceil(mine_count / CLUSTER_SIZE)

    for _ in range(num_clusters):
        if placed >= mine_count:
            break
        center_row = random_below(rng, rows)
        center_col = random_below(rng, cols)

        offsets = list(CLUSTER_OFFSETS)
        _shuffle(offsets, rng)

        in_cluster = 0
        for dr, dc in offsets:
            if placed >= mine_count or in_cluster >= CLUSTER_SIZE:
                break
            row, col = center_row + dr, center_col + dc
            if 0 <= row < rows and 0 <= col < cols and values[row][col] != MINE:
                values[row][col] = MINE
                placed += 1
                in_cluster += 1

    return placed


def _fill_gaps(values: List[List[int]], mine_count: int, placed: int, rng: Rng) -> int:
    rows, cols = len(values), len(values[0])
    attempts = 0
    max_attempts = rows * cols * 2

    while placed < mine_count and attempts < max_attempts:
        attempts += 1
        row = random_below(rng, rows)
        col = random_below(rng, cols)
        if values[row][col] == MINE:
            continue

        adjacent = count_neighbor_mines(values, row, col)
        if MIN_ADJACENT_FOR_CLUE <= adjacent <= MAX_ADJACENT_FOR_CLUE:
            values[row][col] = MINE
            placed += 1
        elif rng.random() < VARIETY_CHANCE:
            values[row][col] = MINE
            placed += 1

    return placed


def _complete(values: List[List[int]], mine_count: int, placed: int, rng: Rng) -> int:
    # Terminates because mine_count < rows * cols leaves free cells.
    rows, cols = len(values), len(values[0])
    while placed < mine_count:
        row = random_below(rng, rows)
        col = random_below(rng, cols)
        if values[row][col] != MINE:
            values[row][col] = MINE
            placed += 1
    return placed


def generate(rows: int, cols: int, mine_count: int, rng: Rng) -> Grid:
    """Create a new board with clustered mines and adjacency counts.

    Mines are placed in three phases: clusters of up to three around random
    centers, a gap fill that favors cells already touching one to four mines,
    and an unconditional completion pass. Clustering pushes the numbers up,
    which leaves more boards solvable by deduction, but no board is
    guaranteed guess-free.

    The order of draws from ``rng`` is fixed, so a seeded generator always
    produces the same board.
    """
    validate_config(rows, cols, mine_count)

    values = [[0] * cols for _ in range(rows)]

    placed = _place_clusters(values, mine_count, rng)
    clustered = placed
    placed = _fill_gaps(values, mine_count, placed, rng)
    filled = placed - clustered
    placed = _complete(values, mine_count, placed, rng)

    for row in range(rows):
        for col in range(cols):
            if values[row][col] != MINE:
                values[row][col] = count_neighbor_mines(values, row, col)

    logger.debug(
        f"Generated {rows}x{cols} board with {placed} mines "
        f"({clustered} clustered, {filled} gap-filled, {placed - clustered - filled} completed)"
    )

    return Grid(
        rows=rows,
        cols=cols,
        mine_count=mine_count,
        values=values,
        revealed=[[False] * cols for _ in range(rows)],
        flagged=[[False] * cols for _ in range(rows)],
    )
