# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as rendering
properties, default window sizes, or the default region layout, and are
not part of the experimental configuration in `config.json`.
"""

# Visualization settings
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a resizable window of WINDOW_SIZE.
FULLSCREEN = False
WINDOW_SIZE = (1280, 720)
FPS = 60
BACKGROUND_COLOR = (0, 0, 0) # Black

# --- Motion Trails ---
# Alpha value (0-255) of the dark overlay painted over the whole canvas
# every tick. Lower is a longer trail.
TRAIL_ALPHA = 9
TRAIL_COLOR = (0, 0, 0, TRAIL_ALPHA)

# Debug overlay
DEBUG_OUTLINE_COLOR = (255, 0, 0)
DEBUG_TEXT_COLOR = (200, 200, 200)

# --- Motion Rules ---
# Degrees of freedom of the shared Student-t sampler.
STUDENT_T_DEGREES_OF_FREEDOM = 1.25
STUDENT_T_SCALE = 0.75
# Per-axis step of the "simple" random walk is SIMPLE_STEP * (0.5 - U).
SIMPLE_STEP = 3.0
# Wavelength divisor for the cosine rules.
COS_PERIOD_DIVISOR = 100.0

# --- Default Region Layout ---
GRID_COLUMNS = 4
GRID_ROWS = 4
GRID_MOTIONS = ["simple", "cosY", "studentt", "cosX", "direction", "cosXY"]
DEFAULT_REGION = {
    "visible": False,
    "domain": "constrained",
    "radius": 1.0,
    "count": 1000,
    "motion": "simple",
    "direction": [1.0, 0.0],
    "color": "#FFFFFFFF",
}
BACKGROUND_REGION_RADIUS = 1.5
