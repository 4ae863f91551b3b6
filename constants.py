# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They hold the tuned physics settings of the particle core and the fixed
host conversions, as opposed to the run configuration in config.json.
"""

# --- Physics settings ---
# The sensor acceleration is divided by this factor and its sign is flipped,
# so the field tilts opposite to the device motion.
ACCELERATION_DAMPING = 5.0
# Upper bound on collision relaxation passes per update.
MAX_RELAXATION_PASSES = 10
# Width of the uniform noise added to a colliding separation vector.
# Each axis receives a value in [-COLLISION_JITTER / 2, COLLISION_JITTER / 2).
COLLISION_JITTER = 0.0001
# Timestamps are divided by this before integration. The tuning of the
# damping and spring behavior depends on it, so it stays as is.
TIMESTAMP_DIVISOR = 1000.0

# --- Defaults ---
NUM_PARTICLES = 5
BALL_DIAMETER = 0.006  # Meters, about half a centimeter on screen

# --- Host conversions ---
METERS_PER_INCH = 0.0254

# Screen rotations, in degrees, relative to the device's natural orientation.
ROTATION_0 = 0
ROTATION_90 = 90
ROTATION_180 = 180
ROTATION_270 = 270
ROTATIONS = (ROTATION_0, ROTATION_90, ROTATION_180, ROTATION_270)
