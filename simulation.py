# simulation.py
"""
Drives the per-frame update/render loop of every region.

This module defines the FrameScheduler, a stand-in for a display's
animation-frame facility, the FrameDriver state machine that paints the
trail overlay and updates and draws each region once per tick, and the
Simulation class, which is the surface the host application talks to.
"""
import enum
import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from constants import BACKGROUND_COLOR, DEBUG_OUTLINE_COLOR, TRAIL_COLOR
from particle import Region, Surface, build_regions
from settings import RegionSettings, with_all_visible
from vector import Vec2

# --- Data Contracts ---
#
# class FrameScheduler:
#   - request(self, callback) -> int: schedules `callback` for the next frame.
#   - cancel(self, handle) -> None: drops a scheduled callback. Unknown or
#     already-run handles are ignored.
#   - run_pending(self) -> int: runs the callbacks scheduled before this call.
#     Callbacks requested while running are deferred to the following frame.
#
# class FrameDriver:
#   - start(self, regions: Sequence[Region]) -> None
#     - Side Effects: cancels any scheduled tick, paints an opaque clear over
#       the whole surface and schedules the first tick.
#   - cancel(self) -> None
#   - Invariants: at most one tick is scheduled at any time. Within a tick
#     each region is updated before it is drawn, in declaration order.
#
# class Simulation:
#   - setup(self, surface, settings) / on_settings_changed(self, settings) /
#     on_resize(self, new_size) / stop(self) / frame(self) -> int
#   - Invariants: settings and size changes are applied by frame(), never
#     in the middle of a tick.


class FrameScheduler:
    """
    Queue of callbacks to run on the next display frame.
    """
    def __init__(self):
        self._callbacks: Dict[int, Callable[[], None]] = {}
        self._next_handle = 1

    def request(self, callback: Callable[[], None]) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._callbacks[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._callbacks.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def run_pending(self) -> int:
        callbacks, self._callbacks = self._callbacks, {}
        for handle in sorted(callbacks):
            callbacks[handle]()
        return len(callbacks)


class DriverState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


class FrameDriver:
    """
    Owns the animation loop and the drawing surface for the lifetime of a run.
    """
    def __init__(self, surface: Surface, scheduler: FrameScheduler, debug: bool = False):
        self.surface = surface
        self.scheduler = scheduler
        self.debug = debug
        self.regions: List[Region] = []
        self.tick_count = 0
        self._handle: Optional[int] = None
        self._state = DriverState.IDLE

    @property
    def state(self) -> DriverState:
        return self._state

    def start(self, regions: Sequence[Region]):
        self.cancel()
        width, height = self.surface.size
        self.surface.fill_rect(0, 0, width, height, BACKGROUND_COLOR)
        self.regions = list(regions)
        self.tick_count = 0
        self._state = DriverState.RUNNING
        self._handle = self.scheduler.request(self._tick)
        logging.info(f"Frame driver started with {len(self.regions)} regions.")

    def cancel(self):
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None
        if self._state is DriverState.RUNNING:
            logging.info(f"Frame driver stopped after {self.tick_count} ticks.")
        self._state = DriverState.IDLE

    def _tick(self):
        self._handle = None
        width, height = self.surface.size
        # Fade the previous frames instead of clearing them to leave trails.
        self.surface.fill_rect(0, 0, width, height, TRAIL_COLOR)

        for region in self.regions:
            if self.debug:
                region.outline(self.surface, DEBUG_OUTLINE_COLOR)
            region.update()
            region.draw(self.surface)

        self.tick_count += 1
        self._handle = self.scheduler.request(self._tick)


class Simulation:
    """
    Host-facing entry point: rebuilds regions from settings snapshots and
    (re)starts the frame driver.
    """
    def __init__(
        self,
        scheduler: Optional[FrameScheduler] = None,
        debug: bool = False,
        rng: Optional[np.random.Generator] = None,
    ):
        self.scheduler = scheduler if scheduler is not None else FrameScheduler()
        self.debug = debug
        self.rng = rng
        self.driver: Optional[FrameDriver] = None
        self.settings: Tuple[RegionSettings, ...] = ()
        self.canvas_size = Vec2(0.0, 0.0)
        self._rebuild_pending = False

    @property
    def regions(self) -> List[Region]:
        return self.driver.regions if self.driver is not None else []

    @property
    def rebuild_pending(self) -> bool:
        return self._rebuild_pending

    def setup(self, surface: Surface, settings: Sequence[RegionSettings]):
        if self.driver is not None:
            self.driver.cancel()
        self.driver = FrameDriver(surface, self.scheduler, debug=self.debug)
        self.settings = tuple(settings)
        self.canvas_size = Vec2(*(float(v) for v in surface.size))
        logging.info(
            f"Simulation set up on a {self.canvas_size.x:.0f}x{self.canvas_size.y:.0f} canvas "
            f"with {len(self.settings)} regions."
        )
        self._restart()

    def on_settings_changed(self, settings: Sequence[RegionSettings]):
        self.settings = tuple(settings)
        self._rebuild_pending = True
        logging.debug("Settings committed. Rebuild deferred to the next frame.")
        for index, snapshot in enumerate(self.settings):
            logging.debug(f"Region {index} settings: {snapshot.to_dict()}")

    def on_resize(self, new_size: Vec2):
        self.canvas_size = new_size
        self._rebuild_pending = True
        logging.info(f"Canvas resized to {new_size.x:.0f}x{new_size.y:.0f}. Rebuild deferred to the next frame.")

    def reset(self):
        """Re-samples every region from the current settings."""
        self.on_settings_changed(self.settings)

    def toggle_all_visible(self):
        all_visible = all(s.visible for s in self.settings)
        self.on_settings_changed(with_all_visible(self.settings, not all_visible))
        logging.info(f"All regions set {'hidden' if all_visible else 'visible'}.")

    def toggle_debug(self):
        self.debug = not self.debug
        if self.driver is not None:
            self.driver.debug = self.debug
        self._rebuild_pending = True
        logging.info(f"Debug outlines {'enabled' if self.debug else 'disabled'}.")

    def stop(self):
        self._rebuild_pending = False
        if self.driver is not None:
            self.driver.cancel()

    def frame(self) -> int:
        """
        Runs one display frame: applies a pending rebuild, then the scheduled tick.

        Returns the number of ticks that ran.
        """
        if self._rebuild_pending and self.driver is not None:
            self._restart()
        return self.scheduler.run_pending()

    def _restart(self):
        self._rebuild_pending = False
        regions = build_regions(self.settings, self.canvas_size, self.rng)
        self.driver.start(regions)
