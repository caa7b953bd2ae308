"""Temporal worker hosting Minesweeper game sessions."""
import asyncio
import logging
from temporalio.worker import Worker
from dailysweeper.workflows import MinesweeperWorkflow
from dailysweeper import activities
from dailysweeper.client_provider import TASK_QUEUE, get_temporal_client

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_worker(client) -> Worker:
    """Create a worker that runs session workflows and board generation."""
    return Worker(
        client,
        task_queue=TASK_QUEUE,
        workflows=[MinesweeperWorkflow],
        activities=[activities.create_game_board],
    )


async def main():
    """Start the Temporal worker."""
    client = await get_temporal_client()
    worker = build_worker(client)

    logger.info("Worker started, connected to Temporal")
    logger.info(f"Listening on task queue: {TASK_QUEUE}")

    await worker.run()


if __name__ == "__main__":
    asyncio.run(main())
