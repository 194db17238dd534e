# visualization.py
"""
Handles the window, input and drawing surface using Pygame.
"""
import logging
import pygame
from typing import Dict, Optional, Tuple

from constants import (
    BACKGROUND_COLOR, DEBUG_TEXT_COLOR, FPS, FULLSCREEN, WINDOW_SIZE
)
from vector import Vec2

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import Simulation


# --- Data Contracts ---
#
# class PygameSurface:
#   - __init__(self, surface: pygame.Surface)
#   - size -> Tuple[int, int]
#   - fill_rect / fill_circle / stroke_rect(..., color)
#     - Inputs: color is anything pygame.Color accepts, e.g. "#FFFFFFFF"
#       or an (r, g, b[, a]) tuple.
#     - Side Effects: fill_rect blends translucent colors over the existing
#       pixels, opaque colors overwrite them.
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[dict] = None)
#     - Side Effects: Initializes Pygame and creates the display window.
#   - process_events(self, simulation: "Simulation") -> bool
#     - Outputs: False if the user has quit, True otherwise.
#   - present(self, simulation: "Simulation") -> None
#     - Side Effects: copies the canvas to the display and waits for the
#       next frame at the configured FPS.


class PygameSurface:
    """
    Adapts a pygame.Surface to the drawing capability the simulation uses.
    """
    def __init__(self, surface: pygame.Surface):
        self.surface = surface
        self._colors: Dict[object, pygame.Color] = {}
        self._overlay: Optional[pygame.Surface] = None
        self._overlay_key = None

    @property
    def size(self) -> Tuple[int, int]:
        return self.surface.get_size()

    def _color(self, color) -> pygame.Color:
        key = color if isinstance(color, (str, tuple)) else tuple(color)
        parsed = self._colors.get(key)
        if parsed is None:
            parsed = pygame.Color(color)
            self._colors[key] = parsed
        return parsed

    def fill_rect(self, x, y, w, h, color):
        c = self._color(color)
        rect = pygame.Rect(int(x), int(y), int(w), int(h))
        if c.a == 255:
            self.surface.fill(c, rect)
            return

        # Translucent fills are blitted from a cached SRCALPHA surface so the
        # previous frame shows through. This is what produces the trails.
        key = (rect.size, tuple(c))
        if self._overlay_key != key:
            self._overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
            self._overlay.fill(c)
            self._overlay_key = key
        self.surface.blit(self._overlay, rect.topleft)

    def fill_circle(self, cx, cy, r, color):
        pygame.draw.circle(self.surface, self._color(color), (cx, cy), r)

    def stroke_rect(self, x, y, w, h, color):
        pygame.draw.rect(self.surface, self._color(color), pygame.Rect(int(x), int(y), int(w), int(h)), 1)


class Visualizer:
    """
    Owns the Pygame window and translates input events into simulation calls.
    """
    def __init__(self, vis_params: Optional[dict] = None):
        """
        Initializes Pygame and the display window.
        """
        params = vis_params if vis_params is not None else {}
        pygame.init()
        pygame.font.init()

        self.fullscreen = params.get('fullscreen', FULLSCREEN)
        self.fps = params.get('fps', FPS)
        if self.fullscreen:
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width, height = params.get('window_size', WINDOW_SIZE)
            self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        # The simulation paints into its own surface. Trails depend on the
        # previous frame surviving, so nothing else may draw into it.
        self.canvas = PygameSurface(pygame.Surface((width, height)))
        self.canvas.surface.fill(BACKGROUND_COLOR)

        pygame.display.set_caption("Particle Regions")
        self.clock = pygame.time.Clock()

        try:
            self.font_main = pygame.font.SysFont("Segoe UI", 14)
        except pygame.error:
            logging.warning("Segoe UI font not found, falling back to default sans-serif.")
            self.font_main = pygame.font.SysFont(None, 18)

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    @property
    def canvas_size(self) -> Vec2:
        width, height = self.canvas.size
        return Vec2(float(width), float(height))

    def _resize(self, width: int, height: int, simulation: "Simulation"):
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.canvas.surface = pygame.Surface((width, height))
        self.canvas.surface.fill(BACKGROUND_COLOR)
        simulation.on_resize(Vec2(float(width), float(height)))

    def process_events(self, simulation: "Simulation") -> bool:
        """
        Handles Pygame events.

        Returns:
            bool: False if the application should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.VIDEORESIZE and not self.fullscreen:
                self._resize(event.w, event.h, simulation)

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False
                elif event.key == pygame.K_v:
                    simulation.toggle_all_visible()
                elif event.key == pygame.K_d:
                    simulation.toggle_debug()
                elif event.key == pygame.K_r:
                    logging.info("Reset requested by user.")
                    simulation.reset()
        return True

    def _draw_status(self, simulation: "Simulation"):
        """Renders tick count, particle count and frame rate in the top-left corner."""
        driver = simulation.driver
        ticks = driver.tick_count if driver is not None else 0
        particles = sum(region.count for region in simulation.regions)
        text = f"tick {ticks}  |  {particles} particles  |  {self.clock.get_fps():.0f} fps"
        text_surf = self.font_main.render(text, True, DEBUG_TEXT_COLOR)
        self.screen.blit(text_surf, (10, 10))

    def present(self, simulation: "Simulation"):
        self.screen.blit(self.canvas.surface, (0, 0))
        if simulation.debug:
            self._draw_status(simulation)
        pygame.display.flip()
        self.clock.tick(self.fps)

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
