import random

from dailysweeper.prng import SeededRandom, make_rng, random_below


def test_seeded_stream_matches_reference_values():
    rng = SeededRandom(42)
    assert rng.random() == 0.2523451747838408
    assert rng.random() == 0.08812504541128874
    assert rng.random() == 0.5772811982315034


def test_zero_seed_is_valid():
    rng = SeededRandom(0)
    assert rng.random() == 0.23606797284446657
    assert rng.random() == 0.278566908556968


def test_large_state_wraps_at_32_bits():
    rng = SeededRandom(0xFFFFFFFF)
    for _ in range(1000):
        value = rng.random()
        assert 0.0 <= value < 1.0
    assert 0 <= rng._state <= 0xFFFFFFFF


def test_reset_restarts_the_stream():
    rng = SeededRandom(1234)
    first = [rng.random() for _ in range(5)]
    rng.reset()
    assert [rng.random() for _ in range(5)] == first


def test_make_rng_with_seed_is_deterministic():
    a, b = make_rng(99), make_rng(99)
    assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]


def test_make_rng_without_seed_uses_random_module():
    assert isinstance(make_rng(None), random.Random)


def test_random_below_stays_in_range():
    rng = SeededRandom(7)
    draws = [random_below(rng, 10) for _ in range(500)]
    assert min(draws) >= 0
    assert max(draws) <= 9
    assert len(set(draws)) == 10
