"""Type definitions for Daily Minesweeper."""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from enum import Enum


MINE = -1


class InvalidConfiguration(ValueError):
    """Raised when a board cannot be built from the requested dimensions."""


@dataclass
class Grid:
    """Represents the generated board and its per-cell player state."""
    rows: int
    cols: int
    mine_count: int
    values: List[List[int]]
    revealed: List[List[bool]]
    flagged: List[List[bool]]

    def is_mine(self, row: int, col: int) -> bool:
        return self.values[row][col] == MINE


class GameStatus(str, Enum):
    """Possible game states."""
    PLAYING = 'PLAYING'
    WON = 'WON'
    LOST = 'LOST'


@dataclass
class GameConfig:
    """Configuration for creating a new game."""
    rows: int
    cols: int
    mine_count: int
    seed: Optional[int] = None
    is_daily_puzzle: bool = False


@dataclass
class MoveRequest:
    """Request to make a move."""
    row: int
    col: int
    action: str  # 'reveal', 'flag'


@dataclass
class MoveResult:
    """Outcome of a reveal or flag toggle."""
    accepted: bool
    game_over: bool = False
    won: bool = False


@dataclass
class GameSnapshot:
    """Client-facing view of a game; unrevealed values are masked as None."""
    rows: int
    cols: int
    revealed: List[List[bool]]
    flags: List[List[bool]]
    values: List[List[Optional[int]]]
    game_over: bool
    won: bool
    mine_count: int
    elapsed_time: int
    start_time: Optional[int] = None  # epoch milliseconds
    hit_mine_row: Optional[int] = None
    hit_mine_col: Optional[int] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            'rows': self.rows,
            'cols': self.cols,
            'revealed': self.revealed,
            'flags': self.flags,
            'values': self.values,
            'gameOver': self.game_over,
            'won': self.won,
            'mineCount': self.mine_count,
            'elapsedTime': self.elapsed_time,
            'startTime': self.start_time,
            'hitMineRow': self.hit_mine_row,
            'hitMineCol': self.hit_mine_col,
        }


@dataclass
class MoveResponse:
    """Response to a move: the result plus the state after it."""
    result: MoveResult
    state: GameSnapshot


@dataclass
class BoardView:
    """Full board including mine positions, for developer mode."""
    rows: int
    cols: int
    board: List[List[int]]
