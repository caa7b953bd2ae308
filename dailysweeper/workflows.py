"""Temporal workflows for Minesweeper game sessions."""
import asyncio
from datetime import timedelta
from typing import Optional

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ApplicationError

with workflow.unsafe.imports_passed_through():
    from dailysweeper.activities import create_game_board
    from dailysweeper.game import MinesweeperGame
    from dailysweeper.types import BoardView, GameConfig, GameSnapshot, MoveRequest, MoveResponse, MoveResult


INACTIVITY_TIMEOUT = timedelta(hours=24)
BOARD_RETRY_POLICY = RetryPolicy(maximum_attempts=3)


@workflow.defn
class MinesweeperWorkflow:
    """Workflow that owns a single game session.

    Updates are handled one at a time, so the game is never mutated
    concurrently. The session closes on request or after 24 hours without
    moves.
    """

    def __init__(self):
        self.game_id: str = ""
        self.game: Optional[MinesweeperGame] = None
        self.last_activity_time: float = 0
        self.should_close: bool = False

    @workflow.run
    async def run(self, game_id: str, config: GameConfig) -> None:
        """Main workflow entry point."""
        # Store game_id immediately so queries can access it during initialization
        self.game_id = game_id
        self.last_activity_time = workflow.time()

        grid = await workflow.execute_activity(
            create_game_board,
            config,
            start_to_close_timeout=timedelta(seconds=60),
            retry_policy=BOARD_RETRY_POLICY,
        )
        self.game = MinesweeperGame(
            grid,
            seed=config.seed,
            is_daily_puzzle=config.is_daily_puzzle,
            clock=workflow.now,
        )

        while not self.should_close:
            remaining = INACTIVITY_TIMEOUT.total_seconds() - self._idle_for()
            if remaining <= 0:
                workflow.logger.info(f"Game {game_id} auto-closing due to 24 hours of inactivity")
                break
            try:
                await workflow.wait_condition(lambda: self.should_close, timeout=remaining)
            except asyncio.TimeoutError:
                continue

        self.should_close = True
        workflow.logger.info(f"Minesweeper workflow {game_id} completed")

    def _idle_for(self) -> float:
        return workflow.time() - self.last_activity_time

    @workflow.update
    async def make_move_update(self, move_request: MoveRequest) -> MoveResponse:
        """Update to make a move and return the result with the updated state."""
        await workflow.wait_condition(lambda: self.game is not None)
        if self.game is None:
            raise ValueError("Game state not initialized")

        if self.should_close:
            return MoveResponse(result=MoveResult(accepted=False), state=self.game.snapshot())

        self.last_activity_time = workflow.time()

        row, col, action = move_request.row, move_request.col, move_request.action
        if action == 'reveal':
            result = self.game.reveal(row, col)
        else:
            result = self.game.toggle_flag(row, col)

        if result.game_over:
            workflow.logger.info(
                f"Game {self.game_id} finished as {self.game.status.value} in {self.game.final_elapsed()}s"
            )
        return MoveResponse(result=result, state=self.game.snapshot())

    @make_move_update.validator
    def validate_move(self, move_request: MoveRequest) -> None:
        if move_request.action not in ('reveal', 'flag'):
            raise ValueError(f"Unknown action: {move_request.action}")

    @workflow.signal
    def close_game_signal(self) -> None:
        """Signal to close the game."""
        self.should_close = True

    @workflow.query
    def get_game_state_query(self) -> GameSnapshot:
        """Query to get the current game state."""
        if self.game is None:
            raise ApplicationError(f"Game {self.game_id} is still being created")
        return self.game.snapshot()

    @workflow.query
    def get_board_query(self) -> BoardView:
        """Query to get the full board, mines included."""
        if self.game is None:
            raise ApplicationError(f"Game {self.game_id} is still being created")
        grid = self.game.grid
        return BoardView(rows=grid.rows, cols=grid.cols, board=[list(row) for row in grid.values])
