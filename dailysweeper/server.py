"""Flask server for Minesweeper game."""
import asyncio
import os
import logging
import uuid
from datetime import datetime
from flask import Flask, request, jsonify
from flask_cors import CORS
from temporalio.client import Client, WorkflowHandle, WorkflowQueryFailedError
from temporalio.common import WorkflowIDConflictPolicy
from temporalio.service import RPCError, RPCStatusCode

from dailysweeper.board import validate_config
from dailysweeper.client_provider import TASK_QUEUE, get_temporal_client
from dailysweeper.daily import (
    DEFAULT_DIFFICULTY,
    DEFAULT_SEED_SALT,
    daily_config,
    daily_date_key,
    daily_game_id,
    daily_seed,
)
from dailysweeper.types import GameConfig, InvalidConfiguration, MoveRequest
from dailysweeper.workflows import MinesweeperWorkflow

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

# Global client reference
temporal_client: Client | None = None


def get_seed_salt() -> str:
    return os.getenv("DAILY_SEED_SALT", DEFAULT_SEED_SALT)


def dev_mode_enabled() -> bool:
    return os.getenv("MINESWEEPER_DEV_MODE", "").lower() in ("1", "true", "yes")


def is_not_found(error: Exception) -> bool:
    return isinstance(error, RPCError) and error.status == RPCStatusCode.NOT_FOUND


async def query_with_retry(handle: WorkflowHandle, query, max_retries=5):
    """Query with retry logic for workflow initialization."""
    for i in range(max_retries):
        try:
            return await handle.query(query)
        except WorkflowQueryFailedError as error:
            if i < max_retries - 1:
                logger.info(f"Query not ready yet, retrying in {(i + 1) * 100}ms...")
                await asyncio.sleep((i + 1) * 0.1)
                continue
            raise error


async def start_game(game_id: str, config: GameConfig, reuse_running: bool = False):
    """Start the session workflow and return its first snapshot."""
    handle = await temporal_client.start_workflow(
        MinesweeperWorkflow.run,
        args=[game_id, config],
        id=game_id,
        task_queue=TASK_QUEUE,
        id_conflict_policy=(
            WorkflowIDConflictPolicy.USE_EXISTING if reuse_running else WorkflowIDConflictPolicy.FAIL
        ),
    )
    return await query_with_retry(handle, MinesweeperWorkflow.get_game_state_query)


def parse_move():
    """Return a MoveRequest-ready (row, col) pair, or None when malformed."""
    data = request.get_json(silent=True) or {}
    row, col = data.get('row'), data.get('col')
    if isinstance(row, bool) or isinstance(col, bool):
        return None
    if not isinstance(row, int) or not isinstance(col, int):
        return None
    return row, col


def make_move(game_id: str, action: str):
    coordinates = parse_move()
    if coordinates is None:
        return jsonify({'error': 'Invalid move request'}), 400
    row, col = coordinates

    try:
        async def execute_move():
            handle = temporal_client.get_workflow_handle(game_id)
            return await handle.execute_update(
                MinesweeperWorkflow.make_move_update,
                MoveRequest(row=row, col=col, action=action),
            )

        response = asyncio.run(execute_move())
        return jsonify({
            'success': response.result.accepted,
            'gameOver': response.result.game_over,
            'won': response.result.won,
            'state': response.state.to_json(),
        })

    except Exception as error:
        if is_not_found(error):
            return jsonify({'error': 'Game not found'}), 404
        logger.error(f"Error making move ({action}) in game {game_id}: {error}")
        return jsonify({'error': 'Failed to make move'}), 500


@app.route('/api/game/new', methods=['POST'])
def create_game():
    """Create a new game."""
    data = request.get_json(silent=True) or {}
    config = GameConfig(
        rows=data.get('rows', 10),
        cols=data.get('cols', 10),
        mine_count=data.get('mines', 15),
    )

    try:
        validate_config(config.rows, config.cols, config.mine_count)
    except InvalidConfiguration as error:
        return jsonify({'error': str(error)}), 400

    game_id = str(uuid.uuid4())
    try:
        state = asyncio.run(start_game(game_id, config))
        return jsonify({'gameId': game_id, 'state': state.to_json()})

    except Exception as error:
        logger.error(f"Error creating game: {error}")
        return jsonify({'error': 'Failed to create game'}), 500


@app.route('/api/game/daily', methods=['POST'])
def create_daily_game():
    """Join today's shared puzzle for a difficulty, creating it if needed."""
    data = request.get_json(silent=True) or {}
    difficulty = data.get('difficulty') or DEFAULT_DIFFICULTY
    if not isinstance(difficulty, str):
        return jsonify({'error': 'Invalid difficulty'}), 400

    puzzle_date = daily_date_key()
    seed = daily_seed(difficulty, get_seed_salt(), puzzle_date)
    config = daily_config(difficulty)
    config.seed = seed
    config.is_daily_puzzle = True
    game_id = daily_game_id(difficulty, seed)

    try:
        state = asyncio.run(start_game(game_id, config, reuse_running=True))
        logger.info(f"Serving daily puzzle {game_id} for {puzzle_date}")
        return jsonify({
            'gameId': game_id,
            'state': state.to_json(),
            'seed': seed,
            'date': puzzle_date,
            'isDailyPuzzle': True,
        })

    except Exception as error:
        logger.error(f"Error creating daily game: {error}")
        return jsonify({'error': 'Failed to create daily game'}), 500


@app.route('/api/game/<game_id>', methods=['GET'])
def get_game_state(game_id):
    """Get game state."""
    try:
        handle = temporal_client.get_workflow_handle(game_id)
        state = asyncio.run(query_with_retry(handle, MinesweeperWorkflow.get_game_state_query))
        return jsonify({'state': state.to_json()})

    except Exception as error:
        logger.error(f"Error getting game state: {error}")
        return jsonify({'error': 'Game not found'}), 404


@app.route('/api/game/<game_id>/reveal', methods=['POST'])
def reveal(game_id):
    """Reveal a cell."""
    return make_move(game_id, 'reveal')


@app.route('/api/game/<game_id>/flag', methods=['POST'])
def flag(game_id):
    """Toggle a flag."""
    return make_move(game_id, 'flag')


@app.route('/api/game/<game_id>', methods=['DELETE'])
def close_game(game_id):
    """Close a game session."""
    try:
        handle = temporal_client.get_workflow_handle(game_id)
        asyncio.run(handle.signal(MinesweeperWorkflow.close_game_signal))
        return jsonify({'success': True})

    except Exception as error:
        if is_not_found(error):
            return jsonify({'error': 'Game not found'}), 404
        logger.error(f"Error closing game {game_id}: {error}")
        return jsonify({'error': 'Failed to close game'}), 500


@app.route('/api/game/<game_id>/dev', methods=['GET'])
def get_full_board(game_id):
    """Full board including mine positions (developer mode only)."""
    if not dev_mode_enabled():
        return jsonify({'error': 'Not found'}), 404

    try:
        handle = temporal_client.get_workflow_handle(game_id)
        view = asyncio.run(query_with_retry(handle, MinesweeperWorkflow.get_board_query))
        return jsonify({'board': view.board, 'rows': view.rows, 'cols': view.cols})

    except Exception as error:
        logger.error(f"Error getting board for {game_id}: {error}")
        return jsonify({'error': 'Game not found'}), 404


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'OK',
        'timestamp': datetime.now().isoformat()
    })


async def initialize_client():
    """Initialize Temporal client."""
    global temporal_client
    temporal_client = await get_temporal_client()
    logger.info("Connected to Temporal server")


def main():
    """Start the Flask server."""
    try:
        asyncio.run(initialize_client())

        port = int(os.getenv("PORT", 3030))
        logger.info(f"Minesweeper server running on http://localhost:{port}")
        logger.info("Make sure to start the Temporal worker in another terminal: python -m dailysweeper.worker")

        app.run(host='0.0.0.0', port=port, debug=False)

    except Exception as error:
        logger.error(f"Failed to start server: {error}")
        exit(1)


if __name__ == "__main__":
    main()
