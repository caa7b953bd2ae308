"""Game state machine for a single Minesweeper session."""
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from dailysweeper.board import generate, neighbors
from dailysweeper.prng import make_rng
from dailysweeper.types import GameSnapshot, GameStatus, Grid, MoveResult

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _whole_seconds(start: datetime, end: datetime) -> int:
    return max(0, int((end - start).total_seconds()))


class MinesweeperGame:
    """One playthrough: owns a grid and applies reveal/flag moves to it.

    Moves that are not allowed (out of bounds, already revealed, flagged,
    game over) are rejected through ``MoveResult.accepted`` and leave the
    state untouched. The game is not thread-safe; callers serialize access.
    """

    def __init__(self, grid: Grid, seed: Optional[int] = None,
                 is_daily_puzzle: bool = False, clock: Optional[Clock] = None):
        self.grid = grid
        self.seed = seed
        self.is_daily_puzzle = is_daily_puzzle
        self.clock: Clock = clock or utc_now
        self.game_over = False
        self.won = False
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.hit_mine_row: Optional[int] = None
        self.hit_mine_col: Optional[int] = None

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols

    @property
    def mine_count(self) -> int:
        return self.grid.mine_count

    @property
    def status(self) -> GameStatus:
        if not self.game_over:
            return GameStatus.PLAYING
        return GameStatus.WON if self.won else GameStatus.LOST

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.grid.rows and 0 <= col < self.grid.cols

    def reveal(self, row: int, col: int) -> MoveResult:
        """Reveal a cell and cascade through empty regions."""
        grid = self.grid
        if (self.game_over or not self.in_bounds(row, col)
                or grid.revealed[row][col] or grid.flagged[row][col]):
            return MoveResult(accepted=False)

        if self.start_time is None:
            self.start_time = self.clock()

        grid.revealed[row][col] = True

        if grid.is_mine(row, col):
            self._finish(won=False)
            self.hit_mine_row = row
            self.hit_mine_col = col
            self._reveal_all_mines()
            return MoveResult(accepted=True, game_over=True, won=False)

        if grid.values[row][col] == 0:
            self._flood_fill(row, col)

        if self._all_safe_cells_revealed():
            self._finish(won=True)
            return MoveResult(accepted=True, game_over=True, won=True)

        return MoveResult(accepted=True)

    def toggle_flag(self, row: int, col: int) -> MoveResult:
        """Toggle flag on a cell."""
        if self.game_over or not self.in_bounds(row, col) or self.grid.revealed[row][col]:
            return MoveResult(accepted=False)

        self.grid.flagged[row][col] = not self.grid.flagged[row][col]
        return MoveResult(accepted=True)

    def _flood_fill(self, row: int, col: int) -> None:
        grid = self.grid
        stack: List[Tuple[int, int]] = [(row, col)]
        while stack:
            r, c = stack.pop()
            for nr, nc in neighbors(r, c, grid.rows, grid.cols):
                if grid.revealed[nr][nc] or grid.flagged[nr][nc]:
                    continue
                grid.revealed[nr][nc] = True
                if grid.values[nr][nc] == 0:
                    stack.append((nr, nc))

    def _reveal_all_mines(self) -> None:
        grid = self.grid
        for r in range(grid.rows):
            for c in range(grid.cols):
                if grid.is_mine(r, c):
                    grid.revealed[r][c] = True

    def _all_safe_cells_revealed(self) -> bool:
        grid = self.grid
        for r in range(grid.rows):
            for c in range(grid.cols):
                if not grid.is_mine(r, c) and not grid.revealed[r][c]:
                    return False
        return True

    def _finish(self, won: bool) -> None:
        self.game_over = True
        self.won = won
        self.end_time = self.clock()
        logger.debug(
            f"Game {'won' if won else 'lost'} on {self.rows}x{self.cols} board "
            f"after {self.final_elapsed()}s"
        )

    def elapsed_seconds(self) -> int:
        """Seconds since the first reveal, frozen once the game is over."""
        if self.start_time is None:
            return 0
        return _whole_seconds(self.start_time, self.end_time or self.clock())

    def final_elapsed(self) -> int:
        """Duration of a finished game in whole seconds, 0 otherwise."""
        if self.start_time is None or self.end_time is None:
            return 0
        return _whole_seconds(self.start_time, self.end_time)

    def snapshot(self) -> GameSnapshot:
        """Current state with the values of unrevealed cells masked."""
        grid = self.grid
        return GameSnapshot(
            rows=grid.rows,
            cols=grid.cols,
            revealed=[list(row) for row in grid.revealed],
            flags=[list(row) for row in grid.flagged],
            values=[
                [value if is_revealed else None for value, is_revealed in zip(values, revealed)]
                for values, revealed in zip(grid.values, grid.revealed)
            ],
            game_over=self.game_over,
            won=self.won,
            mine_count=grid.mine_count,
            elapsed_time=self.elapsed_seconds(),
            start_time=int(self.start_time.timestamp() * 1000) if self.start_time else None,
            hit_mine_row=self.hit_mine_row,
            hit_mine_col=self.hit_mine_col,
        )


def create_game(rows: int, cols: int, mines: int, seed: Optional[int] = None,
                is_daily_puzzle: bool = False, clock: Optional[Clock] = None) -> MinesweeperGame:
    """Generate a board and wrap it in a new session.

    Raises InvalidConfiguration for impossible dimensions or mine counts.
    """
    grid = generate(rows, cols, mines, make_rng(seed))
    return MinesweeperGame(grid, seed=seed, is_daily_puzzle=is_daily_puzzle, clock=clock)
