# motion.py
"""
Motion rules: the per-tick displacement applied to every particle of a region.

A rule is a closed set of variants (MotionRule). `Motion` pairs a variant with
the only piece of per-region state a rule can carry, the direction vector, and
dispatches on the variant in a single `apply`. Positions may be a single point
(any length-2 sequence) or a NumPy array of shape (N, 2); the result is always
a new NumPy array of the same shape.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Union

import numpy as np

from constants import (
    COS_PERIOD_DIVISOR, SIMPLE_STEP, STUDENT_T_DEGREES_OF_FREEDOM,
    STUDENT_T_SCALE
)
from studentt import StudentTDistribution
from vector import Vec2

# --- Data Contracts ---
#
# resolve(rule: Union[MotionRule, str], direction: Vec2) -> Motion
#   - Inputs:
#     - rule: a MotionRule or its configuration identifier ("still",
#       "simple", "studentt", "cosY", "cosX", "cosXY", "direction").
#     - direction: velocity used by the "direction" rule, ignored otherwise.
#   - Outputs: a callable Motion, `Motion(position) -> next position`.
#   - Invariants: Total. Unknown identifiers resolve to STILL.
#
# Motion.apply(positions) -> np.ndarray
#   - Side Effects: None besides drawing random numbers for the stochastic rules.

rng = np.random.default_rng()
# Shared by every region using the "studentt" rule.
student_t = StudentTDistribution(STUDENT_T_DEGREES_OF_FREEDOM, rng=rng)


class MotionRule(enum.Enum):
    STILL = "still"
    SIMPLE = "simple"
    STUDENT_T = "studentt"
    COS_Y = "cosY"
    COS_X = "cosX"
    COS_XY = "cosXY"
    DIRECTION = "direction"

    @classmethod
    def parse(cls, value: Union["MotionRule", str]) -> "MotionRule":
        """Looks up a rule by identifier, case-insensitively, falling back to STILL."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for rule in cls:
            if rule.value.lower() == key or rule.name.lower() == key:
                return rule
        logging.warning(f"Unknown motion rule '{value}'. Falling back to '{cls.STILL.value}'.")
        return cls.STILL


@dataclass(frozen=True)
class Motion:
    rule: MotionRule
    direction: Vec2 = Vec2(0.0, 0.0)

    def __call__(self, positions) -> np.ndarray:
        return self.apply(positions)

    def apply(self, positions) -> np.ndarray:
        if isinstance(positions, Vec2):
            positions = positions.as_tuple()
        p = np.asarray(positions, dtype=np.float64)
        rule = self.rule

        if rule is MotionRule.STILL:
            return p.copy()

        if rule is MotionRule.SIMPLE:
            # Isotropic random walk, each axis in [-1.5, 1.5].
            return p + SIMPLE_STEP * (0.5 - rng.random(p.shape))

        if rule is MotionRule.STUDENT_T:
            return p + STUDENT_T_SCALE * student_t.sample_array(p.shape)

        if rule is MotionRule.DIRECTION:
            return p + np.array([self.direction.x, self.direction.y])

        step = np.empty_like(p)
        if rule is MotionRule.COS_Y:
            step[..., 0] = 1.0
            step[..., 1] = np.cos(p[..., 0] / COS_PERIOD_DIVISOR)
        elif rule is MotionRule.COS_X:
            step[..., 0] = np.cos(p[..., 1] / COS_PERIOD_DIVISOR)
            step[..., 1] = 1.0
        else: # COS_XY
            step[..., 0] = np.cos(p[..., 1] / COS_PERIOD_DIVISOR)
            step[..., 1] = np.cos(p[..., 0] / COS_PERIOD_DIVISOR)
        return p + step


def resolve(rule: Union[MotionRule, str], direction: Vec2 = Vec2(0.0, 0.0)) -> Motion:
    """Binds a motion rule identifier (and direction) to a callable Motion."""
    return Motion(MotionRule.parse(rule), direction)
