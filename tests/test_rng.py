"""Tests for the seeded random source."""

from qpath.utils.rng import SeededRNG


def test_same_seed_gives_same_draws():
    a = SeededRNG(11)
    b = SeededRNG(11)
    assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]
    assert [a.randrange(9) for _ in range(5)] == [b.randrange(9) for _ in range(5)]


def test_draws_stay_in_range():
    rng = SeededRNG(3)
    assert rng.seed == 3
    for _ in range(200):
        assert 0.0 <= rng.random() < 1.0
        assert 0 <= rng.randrange(4) < 4


def test_exposes_only_the_draws_the_domain_uses():
    public = {name for name in dir(SeededRNG) if not name.startswith("_")}
    assert public == {"seed", "random", "randrange"}
