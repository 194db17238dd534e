# settings.py
"""
Region settings: the flat, editable record describing one region.

Settings are snapshotted into frozen `RegionSettings` values before they reach
the simulation. Whatever edits a settings source (the config file, keyboard
shortcuts) it produces a new list of snapshots and hands it over in one go,
so the simulation never observes a half-edited record mid-tick.
"""
import enum
import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence

from constants import (
    BACKGROUND_REGION_RADIUS, DEFAULT_REGION, GRID_COLUMNS, GRID_MOTIONS,
    GRID_ROWS
)
from motion import MotionRule
from vector import Vec2

# --- Data Contracts ---
#
# RegionSettings.from_dict(data: Dict[str, Any]) -> RegionSettings
#   - Inputs: a record with any of the keys "visible", "bottom_left" [x, y],
#     "size" [w, h], "domain", "radius", "count", "motion", "direction" [x, y],
#     "color". Missing keys take DEFAULT_REGION values.
#   - Invariants: never raises on degenerate values. Negative size, radius
#     or count are clamped to 0, unknown domain/motion identifiers fall back
#     to CONSTRAINED/STILL, and numbers that are missing, unparseable or
#     not finite (or vectors without exactly two of them) take the default.
#     Every fallback is logged as a warning.
#
# default_region_settings(canvas_size: Vec2, overrides=None) -> List[RegionSettings]
#   - Outputs: one full-canvas "Background" region followed by a
#     GRID_COLUMNS x GRID_ROWS grid of regions.
#
# load_region_settings(config: Dict[str, Any], canvas_size: Vec2) -> List[RegionSettings]


class Domain(enum.Enum):
    CONSTRAINED = "constrained"
    FREE = "free"

    @classmethod
    def parse(cls, value) -> "Domain":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for domain in cls:
            if domain.value == key:
                return domain
        logging.warning(f"Unknown domain '{value}'. Falling back to '{cls.CONSTRAINED.value}'.")
        return cls.CONSTRAINED


def _finite(value) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _number(record: Dict[str, Any], key: str) -> float:
    """Reads a finite number, replacing anything else with the DEFAULT_REGION value."""
    number = _finite(record.get(key))
    if number is None:
        number = float(DEFAULT_REGION[key])
        logging.warning(f"Invalid region {key} {record.get(key)!r} replaced by default {number}.")
    return number


def _vector(record: Dict[str, Any], key: str, default: Vec2) -> Vec2:
    """Reads a pair of finite numbers, replacing anything else with `default`."""
    if key not in record:
        return default
    value = record[key]
    try:
        components = [] if isinstance(value, str) else [_finite(v) for v in value]
    except TypeError:
        components = []
    if len(components) != 2 or None in components:
        logging.warning(f"Invalid region {key} {value!r} replaced by default ({default.x}, {default.y}).")
        return default
    return Vec2(components[0], components[1])


@dataclass(frozen=True)
class RegionSettings:
    visible: bool = False
    bottom_left: Vec2 = Vec2(0.0, 0.0)
    size: Vec2 = Vec2(0.0, 0.0)
    domain: Domain = Domain.CONSTRAINED
    radius: float = 1.0
    count: int = 0
    motion: MotionRule = MotionRule.STILL
    direction: Vec2 = Vec2(0.0, 0.0)
    color: str = "#FFFFFFFF"

    @property
    def top_right(self) -> Vec2:
        # Screen y grows downward, so the top edge has the smaller y.
        return Vec2(self.bottom_left.x + self.size.x, self.bottom_left.y - self.size.y)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RegionSettings":
        merged = dict(DEFAULT_REGION)
        merged.update(data)

        width, height = _vector(merged, "size", Vec2(0.0, 0.0))
        if width < 0 or height < 0:
            logging.warning(f"Negative region size ({width}, {height}) clamped to zero.")
            width, height = max(width, 0.0), max(height, 0.0)

        radius = _number(merged, "radius")
        if radius < 0:
            logging.warning(f"Negative region radius {radius} clamped to zero.")
            radius = 0.0

        count = int(_number(merged, "count"))
        if count < 0:
            logging.warning(f"Negative particle count {count} clamped to zero.")
            count = 0

        return cls(
            visible=bool(merged["visible"]),
            bottom_left=_vector(merged, "bottom_left", Vec2(0.0, 0.0)),
            size=Vec2(width, height),
            domain=Domain.parse(merged["domain"]),
            radius=radius,
            count=count,
            motion=MotionRule.parse(merged["motion"]),
            direction=_vector(merged, "direction", Vec2.from_sequence(DEFAULT_REGION["direction"])),
            color=str(merged["color"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "visible": self.visible,
            "bottom_left": list(self.bottom_left.as_tuple()),
            "size": list(self.size.as_tuple()),
            "domain": self.domain.value,
            "radius": self.radius,
            "count": self.count,
            "motion": self.motion.value,
            "direction": list(self.direction.as_tuple()),
            "color": self.color,
        }


def default_region_settings(
    canvas_size: Vec2, overrides: Optional[Dict[str, Any]] = None
) -> List[RegionSettings]:
    """
    Builds the default layout: a background region covering the whole canvas,
    then a grid of equally sized regions cycling through GRID_MOTIONS.
    """
    base = dict(overrides or {})
    cell_w = canvas_size.x / GRID_COLUMNS
    cell_h = canvas_size.y / GRID_ROWS

    background = dict(base)
    background.update({
        "bottom_left": [0.0, canvas_size.y],
        "size": [canvas_size.x, canvas_size.y],
        "motion": "still",
        "radius": BACKGROUND_REGION_RADIUS,
    })
    layout = [RegionSettings.from_dict(background)]

    for index in range(GRID_COLUMNS * GRID_ROWS):
        cell = dict(base)
        cell.update({
            "bottom_left": [cell_w * (index % GRID_COLUMNS), cell_h * math.floor(1 + index / GRID_COLUMNS)],
            "size": [cell_w, cell_h],
            "motion": GRID_MOTIONS[index % len(GRID_MOTIONS)],
            "direction": [1.0, 0.0],
        })
        layout.append(RegionSettings.from_dict(cell))

    logging.debug(f"Default layout generated with {len(layout)} regions for canvas {canvas_size.x:.0f}x{canvas_size.y:.0f}.")
    return layout


def load_region_settings(config: Dict[str, Any], canvas_size: Vec2) -> List[RegionSettings]:
    """
    Reads region settings from the loaded configuration.

    An explicit "regions" list wins. Otherwise the default layout is used,
    with the "region_defaults" section applied to every region in it.
    """
    explicit = config.get("regions")
    if explicit:
        settings = [RegionSettings.from_dict(entry) for entry in explicit]
        logging.info(f"Loaded {len(settings)} regions from configuration.")
        return settings

    settings = default_region_settings(canvas_size, config.get("region_defaults"))
    logging.info(f"No regions in configuration. Using default layout of {len(settings)} regions.")
    return settings


def with_all_visible(settings: Sequence[RegionSettings], visible: bool) -> List[RegionSettings]:
    return [replace(s, visible=visible) for s in settings]
