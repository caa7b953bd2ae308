from datetime import datetime, timedelta, timezone

import pytest

from dailysweeper.types import MINE, Grid


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2025, 6, 1, 4, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


def grid_from_values(values):
    rows, cols = len(values), len(values[0])
    return Grid(
        rows=rows,
        cols=cols,
        mine_count=sum(row.count(MINE) for row in values),
        values=[list(row) for row in values],
        revealed=[[False] * cols for _ in range(rows)],
        flagged=[[False] * cols for _ in range(rows)],
    )


@pytest.fixture
def clock():
    return FakeClock()
