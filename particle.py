# particle.py
"""
Kinematic state and per-particle physics.

This module defines the Particle class, one point mass on the tilted
field, together with the Numba-jitted kernels that clamp and integrate rows
of a position/velocity arena. A particle either owns a single-row arena or
is a row of a ParticleSystem's arena, so both paths share the same kernels.
"""
import logging
import math
from typing import Generic, Optional, Sequence, Tuple, TypeVar

import numpy as np
from numba import jit

from bounds import FieldBounds, get_field_bounds
from constants import ACCELERATION_DAMPING, COLLISION_JITTER

T = TypeVar("T")

# --- Data Contracts ---
#
# class Particle(Generic[T]):
#   - __init__(self, payload, bounds=None, rng=None, position=None,
#              *, positions=None, velocities=None, index=0):
#     - Inputs:
#       - payload: Opaque caller data, kept for the particle's lifetime.
#       - bounds: FieldBounds, defaults to the process-wide bounds.
#       - rng: numpy Generator for placement and collision jitter.
#       - position: Optional (x, y) overriding the random placement.
#       - positions / velocities / index: Arena row to live in. When omitted
#         the particle allocates a (1, 2) arena of its own.
#     - Side Effects: Writes the initial state into the arena row and clamps it.
#     - Invariants: |x| <= x_bound and |y| <= y_bound after every mutation.
#
#   - compute_physics(self, sx, sy, dt) -> None
#   - collision_check(self, other, rng=None) -> bool
#     - Side Effects: On collision, moves both particles apart.
#   - set_position_clamped(self, x, y) -> None
#   - offset_position(self, dx, dy) -> None
#   - get_pos(self) -> Tuple[float, float]


@jit(nopython=True)
def _clamp_rows_numba(positions, velocities, start, stop, x_bound, y_bound):
    """
    Numba-jitted inelastic wall. Any coordinate at or past a bound is set
    exactly to the bound and the velocity along that axis is zeroed.
    """
    for i in range(start, stop):
        if positions[i, 0] >= x_bound:
            positions[i, 0] = x_bound
            velocities[i, 0] = 0.0
        elif positions[i, 0] <= -x_bound:
            positions[i, 0] = -x_bound
            velocities[i, 0] = 0.0

        if positions[i, 1] >= y_bound:
            positions[i, 1] = y_bound
            velocities[i, 1] = 0.0
        elif positions[i, 1] <= -y_bound:
            positions[i, 1] = -y_bound
            velocities[i, 1] = 0.0


@jit(nopython=True)
def _integrate_rows_numba(positions, velocities, start, stop, sx, sy, dt, damping, x_bound, y_bound):
    """
    Numba-jitted constant-acceleration step for arena rows [start, stop).

    The acceleration opposes the sensor reading. Position moves first and is
    clamped, then the velocity picks up a * dt.
    """
    ax = -sx / damping
    ay = -sy / damping
    half_dt_sq = dt * dt / 2.0
    for i in range(start, stop):
        positions[i, 0] += velocities[i, 0] * dt + ax * half_dt_sq
        positions[i, 1] += velocities[i, 1] * dt + ay * half_dt_sq
        _clamp_rows_numba(positions, velocities, i, i + 1, x_bound, y_bound)
        velocities[i, 0] += ax * dt
        velocities[i, 1] += ay * dt


class Particle(Generic[T]):
    """
    A ball on the field, stored as one row of a position/velocity arena.
    """
    def __init__(
        self,
        payload: T,
        bounds: Optional[FieldBounds] = None,
        rng: Optional[np.random.Generator] = None,
        position: Optional[Sequence[float]] = None,
        *,
        positions: Optional[np.ndarray] = None,
        velocities: Optional[np.ndarray] = None,
        index: int = 0,
    ):
        self._payload = payload
        self._bounds = bounds if bounds is not None else get_field_bounds()
        self._rng = rng if rng is not None else np.random.default_rng()

        if positions is None or velocities is None:
            positions = np.zeros((1, 2), dtype=np.float64)
            velocities = np.zeros((1, 2), dtype=np.float64)
            index = 0
        self._positions = positions
        self._velocities = velocities
        self._index = index

        if position is None:
            # Draw x then y so a seeded generator gives a stable layout.
            x = self._rng.random()
            y = self._rng.random()
        else:
            x, y = position
        self._velocities[index, 0] = 0.0
        self._velocities[index, 1] = 0.0
        self.set_position_clamped(x, y)

    @property
    def payload(self) -> T:
        return self._payload

    @property
    def bounds(self) -> FieldBounds:
        return self._bounds

    @property
    def index(self) -> int:
        return self._index

    @property
    def x(self) -> float:
        return float(self._positions[self._index, 0])

    @property
    def y(self) -> float:
        return float(self._positions[self._index, 1])

    @property
    def position(self) -> np.ndarray:
        """A copy of the position as a (2,) array."""
        return self._positions[self._index].copy()

    @property
    def velocity(self) -> np.ndarray:
        """A copy of the velocity as a (2,) array."""
        return self._velocities[self._index].copy()

    def get_pos(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def _clamp(self):
        i = self._index
        _clamp_rows_numba(
            self._positions, self._velocities, i, i + 1,
            self._bounds.x_bound, self._bounds.y_bound
        )

    def set_position_clamped(self, x: float, y: float) -> None:
        """Moves the particle to (x, y), then applies the wall constraint."""
        self._positions[self._index, 0] = x
        self._positions[self._index, 1] = y
        self._clamp()

    def offset_position(self, dx: float, dy: float) -> None:
        """Moves the particle by (dx, dy), then applies the wall constraint."""
        self._positions[self._index, 0] += dx
        self._positions[self._index, 1] += dy
        self._clamp()

    def compute_physics(self, sx: float, sy: float, dt: float) -> None:
        """
        Advances the particle by dt under the sensor acceleration (sx, sy).

        Args:
            sx (float): Sensor acceleration along x.
            sy (float): Sensor acceleration along y.
            dt (float): Time step, in the integrator's time unit.
        """
        i = self._index
        _integrate_rows_numba(
            self._positions, self._velocities, i, i + 1,
            float(sx), float(sy), float(dt), ACCELERATION_DAMPING,
            self._bounds.x_bound, self._bounds.y_bound
        )

    def collision_check(self, other: "Particle[T]", rng: Optional[np.random.Generator] = None) -> bool:
        """
        Tests this particle against another and pushes them apart on contact.

        The pair behaves as if joined by a spring of infinite stiffness: each
        particle absorbs half of the overlap along the separation vector. A
        small random jitter is added to the separation first so that two
        particles at the same spot still get a direction to separate along.

        Args:
            other (Particle): The other particle. Moved by -effect.
            rng (np.random.Generator): Jitter source, defaults to this
                particle's generator.

        Returns:
            bool: True if the particles were within one ball diameter
                before the correction.
        """
        rng = rng if rng is not None else self._rng
        diameter = self._bounds.ball_diameter

        dx = self.x - other.x
        dy = self.y - other.y
        collided = math.hypot(dx, dy) <= diameter

        if collided:
            dx += (rng.random() - 0.5) * COLLISION_JITTER
            dy += (rng.random() - 0.5) * COLLISION_JITTER
            d = math.hypot(dx, dy)

            if d == 0.0 or not math.isfinite(d):
                logging.debug(
                    f"Skipping degenerate collision correction between particles "
                    f"{self._index} and {other._index} (distance {d})."
                )
                return collided

            c = 0.5 * (diameter - d) / d
            effect_x = dx * c
            effect_y = dy * c

            other.offset_position(-effect_x, -effect_y)
            self.offset_position(effect_x, effect_y)

        return collided

    def __repr__(self) -> str:
        return f"Particle(index={self._index}, pos=({self.x:.6f}, {self.y:.6f}), payload={self._payload!r})"
