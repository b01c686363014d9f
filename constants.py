# constants.py
"""
Application-level constants.

These values are the defaults for every tunable of the particle field.
Any of them can be overridden from `config.json`; the values here are
what the backdrop looks like when the config is silent.
"""

# --- Window / Host ---
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a resizable window (WINDOW_WIDTH x WINDOW_HEIGHT).
FULLSCREEN = False
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
FPS = 60
BACKDROP_COLOR = (5, 5, 5) # #050505
# Opacity of the whole particle layer over the backdrop (0.0-1.0).
FIELD_OPACITY = 0.6

# --- Density ---
# One particle per this many square pixels of viewport.
DENSITY_AREA = 15000

# --- Particle Seeding ---
# Velocity components are drawn from [-DRIFT_SPEED, DRIFT_SPEED].
DRIFT_SPEED = 0.25
PARTICLE_RADIUS_MIN = 1.0
PARTICLE_RADIUS_MAX = 3.0

# --- Pointer Repulsion ---
INFLUENCE_RADIUS = 150.0
# Maximum displacement (px per frame) applied right at the pointer.
REPULSION_STRENGTH = 3.0

# --- Connection Graph ---
# Link threshold is (width / LINK_DIVISOR) * (height / LINK_DIVISOR), squared px.
LINK_DIVISOR = 7.0
# Squared distance at which a link fades out completely.
LINK_FALLOFF = 20000.0
# Opacity of a link between two coincident particles.
LINK_ALPHA = 0.1
LINK_COLOR = (255, 255, 255)
LINK_WIDTH = 1

# The two-value palette particles are tagged with, used if the
# config file does not provide a color list.
NEON_PALETTE = [
    "#39ff14",  # Neon Green
    "#00f3ff",  # Neon Blue
]

# --- Logging ---
LOG_THROTTLE_FRAMES = 300
