# particle.py
"""
Manages the state of the particles of one region.

This module defines the Region class, which owns the positions of a swarm
of particles in a NumPy array, advances them with the region's motion rule
and wraps them toroidally at the edges of its wrap rectangle. It also holds
the builder that turns a RegionSettings snapshot into a fresh Region.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Tuple

import numpy as np
from numba import jit

from motion import Motion, MotionRule, resolve
from settings import Domain, RegionSettings
from vector import Vec2

# --- Data Contracts ---
#
# class Region:
#   - __init__(self, radius, color, spawn: Rect, wrap: Rect, count, motion, rng=None):
#     - Inputs:
#       - radius: float >= 0, particle radius and wrap inset.
#       - color: anything the drawing surface accepts, e.g. "#FFFFFFFF".
#       - spawn: rectangle the initial positions are drawn from.
#       - wrap: rectangle whose radius-inset edges wrap particles around.
#       - count: int >= 0.
#       - motion: callable Motion applied every tick.
#     - Side Effects: Raises ValueError for negative radius or count.
#     - Invariants:
#       - self.positions is a NumPy array of shape (count, 2) of dtype float64,
#         mutated in place by update() and never replaced.
#
#   - update(self) -> None
#     - Invariants: when the wrap rectangle is wider and taller than
#       2 * radius, every position lies inside the radius-inset wrap
#       rectangle after the call.
#
#   - draw(self, surface: Surface) -> None
#
# build_region(settings: RegionSettings, canvas_size: Vec2, rng=None) -> Region
#   - Invariants: an invisible region is returned empty (count 0).


class Surface(Protocol):
    """The drawing capability the simulation needs from its host."""
    @property
    def size(self) -> Tuple[int, int]: ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color) -> None: ...

    def fill_circle(self, cx: float, cy: float, r: float, color) -> None: ...

    def stroke_rect(self, x: float, y: float, w: float, h: float, color) -> None: ...


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in screen space, where "bottom" has the larger y."""
    bottom_left: Vec2
    top_right: Vec2

    @property
    def left(self) -> float:
        return self.bottom_left.x

    @property
    def right(self) -> float:
        return self.top_right.x

    @property
    def top(self) -> float:
        return self.top_right.y

    @property
    def bottom(self) -> float:
        return self.bottom_left.y

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom)"""
        return (self.left, self.top, self.right, self.bottom)

    def inset(self, amount: float) -> Optional["Rect"]:
        """The rectangle shrunk by `amount` on every side, or None if nothing is left."""
        if self.width <= 2 * amount or self.height <= 2 * amount:
            return None
        return Rect(
            Vec2(self.left + amount, self.bottom - amount),
            Vec2(self.right - amount, self.top + amount),
        )


EMPTY_RECT = Rect(Vec2(0.0, 0.0), Vec2(0.0, 0.0))


@jit(nopython=True)
def _wrap_positions_numba(positions, left, right, top, bottom, radius):
    """
    Numba-jitted toroidal wrap against the radius-inset wrap rectangle.

    Every test runs unconditionally and in order, so a particle leaving on
    both axes is corrected on each of them. For rectangles narrower than
    2 * radius the branches fight and the particle flickers between edges.
    """
    min_x = left + radius
    max_x = right - radius
    min_y = top + radius
    max_y = bottom - radius
    for i in range(positions.shape[0]):
        if positions[i, 0] < min_x:
            positions[i, 0] = max_x
        if positions[i, 0] > max_x:
            positions[i, 0] = min_x
        if positions[i, 1] > max_y:
            positions[i, 1] = min_y
        if positions[i, 1] < min_y:
            positions[i, 1] = max_y


class Region:
    """
    A swarm of particles sharing a spawn rectangle, wrap rectangle,
    motion rule, radius and color.
    """
    def __init__(
        self,
        radius: float,
        color,
        spawn: Rect,
        wrap: Rect,
        count: int,
        motion: Motion,
        rng: Optional[np.random.Generator] = None,
    ):
        if radius < 0 or count < 0:
            msg = f"Region requires radius >= 0 and count >= 0, got radius={radius}, count={count}."
            logging.error(msg)
            raise ValueError(msg)

        self.radius = float(radius)
        self.color = color
        self.spawn = spawn
        self.wrap = wrap
        self.motion = motion

        rng = rng if rng is not None else np.random.default_rng()
        # Spawn inside the wrap band when the rectangle leaves room for it, so
        # a particle is never relocated by the wrap on its very first tick.
        source = spawn.inset(self.radius) or spawn
        self.positions = rng.uniform(
            low=[source.left, source.top],
            high=[source.right, source.bottom],
            size=(count, 2),
        )

    @property
    def count(self) -> int:
        return self.positions.shape[0]

    def update(self):
        if self.count == 0:
            return
        self.positions[:] = self.motion(self.positions)
        _wrap_positions_numba(
            self.positions,
            self.wrap.left, self.wrap.right, self.wrap.top, self.wrap.bottom,
            self.radius,
        )

    def draw(self, surface: Surface):
        r = self.radius
        color = self.color
        for x, y in self.positions:
            surface.fill_circle(x, y, r, color)

    def outline(self, surface: Surface, color):
        """Strokes the spawn rectangle. Used by the debug overlay."""
        if self.count == 0:
            return
        surface.stroke_rect(self.spawn.left, self.spawn.top, self.spawn.width, self.spawn.height, color)


def build_region(
    settings: RegionSettings, canvas_size: Vec2, rng: Optional[np.random.Generator] = None
) -> Region:
    """
    Builds a fresh Region from a settings snapshot.

    Nothing is carried over from a previous build: every call re-samples the
    particle positions from the spawn rectangle.
    """
    if not settings.visible:
        return Region(0.0, settings.color, EMPTY_RECT, EMPTY_RECT, 0, resolve(MotionRule.STILL), rng)

    spawn = Rect(settings.bottom_left, settings.top_right)
    if settings.domain is Domain.FREE:
        wrap = Rect(Vec2(0.0, canvas_size.y), Vec2(canvas_size.x, 0.0))
    else:
        wrap = spawn

    motion = resolve(settings.motion, settings.direction)
    return Region(settings.radius, settings.color, spawn, wrap, settings.count, motion, rng)


def build_regions(
    settings: Iterable[RegionSettings], canvas_size: Vec2, rng: Optional[np.random.Generator] = None
) -> List[Region]:
    regions = [build_region(s, canvas_size, rng) for s in settings]
    for index, region in enumerate(regions):
        if region.count:
            logging.debug(
                f"Region {index}: {region.count} particles, motion '{region.motion.rule.value}', "
                f"spawn {region.spawn.bounds}, wrap {region.wrap.bounds}."
            )
    total = sum(region.count for region in regions)
    logging.info(f"Built {len(regions)} regions with {total} particles in total.")
    return regions
