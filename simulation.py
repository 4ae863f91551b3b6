# simulation.py
"""
Handles the per-frame simulation of the particle collection.

This module defines the ParticleSystem class, which owns a fixed number of
particles stored in a single position/velocity arena. Each update integrates
every particle under the host's acceleration reading and then relaxes
pairwise collisions for a bounded number of passes.
"""
import logging
from typing import Callable, Generic, Iterator, Optional, Sequence, Tuple, TypeVar

import numpy as np

from bounds import FieldBounds, get_field_bounds
from constants import (
    ACCELERATION_DAMPING, MAX_RELAXATION_PASSES, TIMESTAMP_DIVISOR
)
from particle import Particle, _integrate_rows_numba

T = TypeVar("T")

# --- Data Contracts ---
#
# class ParticleSystem(Generic[T]):
#   - __init__(self, count, payload_factory, bounds=None, rng=None, seed=None,
#              initial_positions=None):
#     - Inputs:
#       - count: int, number of particles, fixed for the system's lifetime.
#       - payload_factory: Callable[[int], T], called once per index in order.
#       - bounds: FieldBounds, defaults to the process-wide bounds.
#       - rng: numpy Generator. Built from `seed` when omitted.
#       - initial_positions: Optional sequence of (x, y), one per particle,
#         replacing the random placement.
#     - Side Effects: Allocates the (count, 2) position and velocity arenas.
#
#   - update(self, sx, sy, timestamp) -> None:
#     - Inputs: Sensor acceleration and an integer millisecond timestamp.
#     - Side Effects: Integrates (skipped on the first call) and relaxes
#       collisions for at most MAX_RELAXATION_PASSES passes.
#     - Invariants: Particle count and order never change. All positions
#       stay within the field bounds.
#
#   - update_particles(self, visit) -> None:
#     - Inputs: visit(position: Tuple[float, float], payload: T).
#     - Side Effects: None on the system.


class ParticleSystem(Generic[T]):
    """
    A fixed-size collection of particles sharing one field and one RNG.
    """
    def __init__(
        self,
        count: int,
        payload_factory: Callable[[int], T],
        bounds: Optional[FieldBounds] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        initial_positions: Optional[Sequence[Sequence[float]]] = None,
    ):
        """
        Initializes the particle system.

        Args:
            count (int): Number of particles.
            payload_factory (Callable[[int], T]): Maps an index to its payload.
            bounds (FieldBounds): Field to simulate in.
            rng (np.random.Generator): Source of all randomness.
            seed (int): Seed for the default generator, ignored if rng is given.
            initial_positions (Sequence): Optional fixed starting positions.
        """
        if isinstance(count, bool) or not isinstance(count, (int, np.integer)) or count < 0:
            msg = f"Configuration error: particle count must be a non-negative integer, got {count!r}."
            logging.critical(msg)
            raise ValueError(msg)
        if initial_positions is not None and len(initial_positions) != count:
            msg = (
                f"Configuration error: {len(initial_positions)} initial positions "
                f"given for {count} particles."
            )
            logging.critical(msg)
            raise ValueError(msg)

        self.bounds = bounds if bounds is not None else get_field_bounds()
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        count = int(count)
        self.positions = np.zeros((count, 2), dtype=np.float64)
        self.velocities = np.zeros((count, 2), dtype=np.float64)

        particles = []
        for i in range(count):
            position = initial_positions[i] if initial_positions is not None else None
            particles.append(Particle(
                payload_factory(i), self.bounds, self.rng, position,
                positions=self.positions, velocities=self.velocities, index=i
            ))
        self._particles: Tuple[Particle[T], ...] = tuple(particles)

        self.last_timestamp: Optional[int] = None
        self.last_relaxation_passes = 0

        logging.info(f"ParticleSystem initialized with {count} particles.")
        logging.debug(
            f"Arena created. Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}"
        )

    @property
    def particles(self) -> Tuple[Particle[T], ...]:
        return self._particles

    def __len__(self) -> int:
        return len(self._particles)

    def __iter__(self) -> Iterator[Particle[T]]:
        return iter(self._particles)

    def _update_positions(self, sx: float, sy: float, timestamp: int) -> None:
        last_t = self.last_timestamp
        self.last_timestamp = timestamp

        if last_t is not None:
            dt = (timestamp - last_t) / TIMESTAMP_DIVISOR
            # Rows are independent, so one pass over the arena matches
            # calling compute_physics on each particle in order.
            _integrate_rows_numba(
                self.positions, self.velocities, 0, len(self._particles),
                float(sx), float(sy), float(dt), ACCELERATION_DAMPING,
                self.bounds.x_bound, self.bounds.y_bound
            )

    def _relax_collisions(self) -> int:
        """
        Resolves collisions by repeated pairwise passes.

        Returns:
            int: The number of passes run.
        """
        particles = self._particles
        count = len(particles)
        passes = 0
        more = True
        while passes < MAX_RELAXATION_PASSES and more:
            more = False
            for i in range(count):
                curr = particles[i]
                for j in range(i + 1, count):
                    ball = particles[j]
                    more |= ball.collision_check(curr, self.rng)
            passes += 1

        if more:
            logging.debug(
                f"Collision relaxation hit the cap of {MAX_RELAXATION_PASSES} "
                f"passes with overlaps remaining."
            )
        return passes

    def update(self, sx: float, sy: float, timestamp: int) -> None:
        """
        Executes one frame: integration, then collision relaxation.

        Args:
            sx (float): Sensor acceleration along x.
            sy (float): Sensor acceleration along y.
            timestamp (int): Frame time in milliseconds.
        """
        self._update_positions(sx, sy, timestamp)
        self.last_relaxation_passes = self._relax_collisions()

    def update_particles(self, visit: Callable[[Tuple[float, float], T], None]) -> None:
        """Hands each particle's position and payload to `visit`, in order."""
        for ball in self._particles:
            visit(ball.get_pos(), ball.payload)

    def snapshot(self) -> np.ndarray:
        """Returns a copy of all positions as an (N, 2) array."""
        return self.positions.copy()
