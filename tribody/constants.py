"""Tunable constants for the three-body sandbox.

The values are arbitrary simulation units picked for visually interesting
orbits, not SI quantities.
"""

# --- Physics ---
G_DEFAULT = 0.3
TIME_STEP_BASE = 0.05  # simulation time advanced per physics step at speed 1
SPEED_FACTOR = 1.0
MIN_SPEED_FACTOR = 0.0
MAX_SPEED_FACTOR = 10.0

# Force scale-down for heavy pairs: above this mass product the magnitude is
# divided by log10(mass_product / STABILITY_DIVISOR).
STABILITY_MASS_PRODUCT = 100.0
STABILITY_DIVISOR = 10.0

# --- Body size law (mass -> collision radius) ---
LIGHT_RADIUS_FLOOR = 0.5
LIGHT_RADIUS_SCALE = 0.45
HEAVY_RADIUS_BASE = 0.45
HEAVY_RADIUS_LOG_SCALE = 0.35

# --- Arena ---
BOUNDARY_RADIUS = 60.0
FREE_PLAY = False
VERTICAL_AXIS = 1
GROUND_PLANE_AXES = (0, 2)

# --- Fixed-step clock ---
SUBSTEP_INTERVAL = 1.0 / 120.0  # real seconds per physics sub-step
MAX_SUBSTEPS_PER_TICK = 8

# --- Trails ---
DEFAULT_TRAIL_LENGTH = 500
MIN_TRAIL_LENGTH = 1
MAX_TRAIL_LENGTH = 5000

# --- Viewer ---
WIDTH, HEIGHT = 900, 900
FPS = 60
ZOOM_BASE = 7.0  # pixels per simulation unit
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
DARK_GRAY = (60, 60, 60)
RED = (230, 70, 70)
BODY_COLORS = [
    (255, 196, 84),
    (96, 170, 255),
    (255, 110, 140),
]
