import numpy as np
import pytest

from constants import STUDENT_T_DEGREES_OF_FREEDOM
from studentt import StudentTDistribution


@pytest.mark.parametrize("dof", [0, -1, -0.5])
def test_non_positive_degrees_of_freedom_fail_construction(dof):
    with pytest.raises(ValueError):
        StudentTDistribution(dof)


def test_single_sample_is_a_finite_float(rng):
    value = StudentTDistribution(1.25, rng=rng).sample()
    assert isinstance(value, float)
    assert np.isfinite(value)


def test_sample_many_shape(rng):
    dist = StudentTDistribution(3, rng=rng)
    assert dist.sample_many(10).shape == (10,)
    assert dist.sample_many(0).shape == (0,)


def test_fractional_degrees_of_freedom_round_up_chi_square_terms():
    assert StudentTDistribution(1.25).chi_square_terms == 2
    assert StudentTDistribution(5).chi_square_terms == 5


def test_tails_heavier_than_normal(rng):
    samples = StudentTDistribution(5, rng=rng).sample_many(200_000)
    centered = samples - samples.mean()
    kurtosis = np.mean(centered ** 4) / np.var(samples) ** 2
    assert kurtosis > 3.5
    assert abs(np.median(samples)) < 0.02


def test_samples_are_not_cached(rng):
    dist = StudentTDistribution(1.25, rng=rng)
    assert len(set(dist.sample_many(100).tolist())) == 100


class ZeroFirstGenerator:
    """Yields exact zeros on the first draw, then mid-range values."""
    def __init__(self):
        self.calls = 0

    def random(self, shape):
        self.calls += 1
        if self.calls == 1:
            return np.zeros(shape)
        return np.full(shape, 0.25)


def test_zero_uniform_draws_are_redrawn():
    dist = StudentTDistribution(1, rng=ZeroFirstGenerator())
    u = dist._open_uniform((4,))
    assert np.all(u == 0.25)


def test_engine_degrees_of_freedom_have_heavy_tails(rng):
    samples = StudentTDistribution(STUDENT_T_DEGREES_OF_FREEDOM, rng=rng).sample_many(100_000)
    normal = rng.standard_normal(100_000)
    # A standard normal leaves |x| > 4 about 6 times in 100k draws.
    assert np.mean(np.abs(samples) > 4.0) > 0.01
    assert np.mean(np.abs(normal) > 4.0) < 0.001
    assert np.quantile(np.abs(samples), 0.999) > 3 * np.quantile(np.abs(normal), 0.999)
