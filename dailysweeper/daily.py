"""Daily puzzle seeds and presets.

Every player gets the same board for a given (day, difficulty). The day rolls
over at midnight UTC+8. Seeds are derived by hashing the date key, the
difficulty label and a server-side salt, so nobody without the salt can
predict tomorrow's board.
"""
import hashlib
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Optional, Union

from dailysweeper.types import GameConfig

DAILY_TIMEZONE = timezone(timedelta(hours=8))
DEFAULT_SEED_SALT = 'minesweeper-daily-puzzle-salt-2025'
DEFAULT_DIFFICULTY = 'medium'

DAILY_CONFIGS: Dict[str, GameConfig] = {
    'easy': GameConfig(rows=10, cols=10, mine_count=10),
    'medium': GameConfig(rows=15, cols=15, mine_count=25),
    'hard': GameConfig(rows=20, cols=20, mine_count=40),
    'pro': GameConfig(rows=30, cols=30, mine_count=50),
    'expert': GameConfig(rows=40, cols=40, mine_count=100),
    'extreme': GameConfig(rows=50, cols=50, mine_count=150),
}

# Keyed by "rows-cols-mines", the grouping used for score submissions.
DIFFICULTY_NAMES: Dict[str, str] = {
    '10-10-10': 'Easy',
    '15-15-25': 'Medium',
    '20-20-40': 'Hard',
    '30-30-50': 'Pro',
    '40-40-100': 'Expert',
    '50-50-150': 'Extreme',
}

DateLike = Union[str, date, datetime, None]


def daily_date_key(now: Optional[datetime] = None) -> str:
    """Return today's date in UTC+8 as YYYY-MM-DD."""
    if now is None:
        now = datetime.now(timezone.utc)
    return now.astimezone(DAILY_TIMEZONE).strftime('%Y-%m-%d')


def _date_key(value: DateLike) -> str:
    if value is None or isinstance(value, datetime):
        return daily_date_key(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def daily_seed(difficulty: str, salt: str, puzzle_date: DateLike = None) -> int:
    """Derive the 32-bit seed for a difficulty on a given day.

    ``puzzle_date`` may be a YYYY-MM-DD string, a date, a datetime (converted
    to UTC+8) or None for today.
    """
    seed_string = f"{_date_key(puzzle_date)}|{difficulty}|{salt}"
    digest = hashlib.sha256(seed_string.encode('utf-8')).digest()
    return int.from_bytes(digest[:4], 'big')


def daily_config(difficulty: str) -> GameConfig:
    """Board preset for a daily difficulty, falling back to medium."""
    preset = DAILY_CONFIGS.get(difficulty, DAILY_CONFIGS[DEFAULT_DIFFICULTY])
    return GameConfig(rows=preset.rows, cols=preset.cols, mine_count=preset.mine_count)


def difficulty_name(rows: int, cols: int, mines: int) -> Optional[str]:
    return DIFFICULTY_NAMES.get(f"{rows}-{cols}-{mines}")


def daily_game_id(difficulty: str, seed: int) -> str:
    return f"daily-{difficulty}-{seed}"
