"""Temporal activities for board generation."""
from temporalio import activity
from temporalio.exceptions import ApplicationError

from dailysweeper.board import generate
from dailysweeper.prng import make_rng
from dailysweeper.types import GameConfig, Grid, InvalidConfiguration


@activity.defn
async def create_game_board(config: GameConfig) -> Grid:
    """Create a new game board, seeded when the config carries a seed.

    Generation draws from OS entropy for unseeded games, so it runs here
    rather than in workflow code.
    """
    try:
        grid = generate(config.rows, config.cols, config.mine_count, make_rng(config.seed))
    except InvalidConfiguration as error:
        raise ApplicationError(
            str(error), type="InvalidConfiguration", non_retryable=True
        ) from error

    activity.logger.info(
        f"Created {config.rows}x{config.cols} board with {config.mine_count} mines"
        + (f" (seed {config.seed})" if config.seed is not None else "")
    )
    return grid
