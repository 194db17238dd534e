# studentt.py
"""
Heavy-tailed random scalars for the "studentt" motion rule.

Draws come from the classical construction of a Student-t variate,
Z / sqrt(V / df), where Z is standard normal (Box-Muller) and V is a
chi-square variate built as a sum of squared standard normals.
"""
import logging
import math
from typing import Optional

import numpy as np

# --- Data Contracts ---
#
# class StudentTDistribution:
#   - __init__(self, degrees_of_freedom: float, rng: Optional[np.random.Generator] = None):
#     - Inputs:
#       - degrees_of_freedom: float, must be > 0.
#       - rng: optional NumPy generator. Unseeded by default, so every run
#         produces independent draws.
#     - Side Effects: Raises ValueError when degrees_of_freedom <= 0.
#
#   - sample(self) -> float
#   - sample_many(self, count: int) -> np.ndarray of shape (count,)
#   - sample_array(self, shape) -> np.ndarray of the given shape
#     - Invariants: No caching. Every call performs fresh draws.


class StudentTDistribution:
    """
    Samples Student's t-distribution via a normal over chi-square ratio.
    """
    def __init__(self, degrees_of_freedom: float, rng: Optional[np.random.Generator] = None):
        if degrees_of_freedom <= 0:
            msg = f"Degrees of freedom must be positive, got {degrees_of_freedom}."
            logging.critical(msg)
            raise ValueError(msg)
        self.degrees_of_freedom = float(degrees_of_freedom)
        # The chi-square term sums one squared normal per started unit of
        # freedom, so 1.25 degrees of freedom uses two terms.
        self.chi_square_terms = math.ceil(self.degrees_of_freedom)
        self.rng = rng if rng is not None else np.random.default_rng()

    def _open_uniform(self, shape) -> np.ndarray:
        """Uniform draws on (0, 1): exact zeros are redrawn to keep log() finite."""
        u = self.rng.random(shape)
        zeros = u == 0.0
        while np.any(zeros):
            u[zeros] = self.rng.random(int(np.count_nonzero(zeros)))
            zeros = u == 0.0
        return u

    def _standard_normal(self, shape) -> np.ndarray:
        """Box-Muller transform of two independent open-interval uniforms."""
        u = self._open_uniform(shape)
        v = self._open_uniform(shape)
        return np.sqrt(-2.0 * np.log(u)) * np.cos(2.0 * np.pi * v)

    def _chi_square(self, shape) -> np.ndarray:
        result = np.zeros(shape, dtype=np.float64)
        for _ in range(self.chi_square_terms):
            normal = self._standard_normal(shape)
            result += normal * normal
        return result

    def sample_array(self, shape) -> np.ndarray:
        normal = self._standard_normal(shape)
        chi_square = self._chi_square(shape)
        return normal / np.sqrt(chi_square / self.degrees_of_freedom)

    def sample(self) -> float:
        return float(self.sample_array((1,))[0])

    def sample_many(self, count: int) -> np.ndarray:
        return self.sample_array((count,))
