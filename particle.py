# particle.py
"""
Holds the state of the particle field.

This module defines the plain data records the engine owns: the
ParticleSystem (particle state in NumPy arrays), the SurfaceExtents of
the drawing surface and the PointerState used for repulsion. It also
provides the seeding function that regenerates the particle set for a
given viewport size.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from constants import (
    DENSITY_AREA, DRIFT_SPEED, PARTICLE_RADIUS_MIN, PARTICLE_RADIUS_MAX,
    INFLUENCE_RADIUS
)

# --- Data Contracts ---
#
# class ParticleSystem:
#   - positions: NumPy array of shape (N, 2), dtype float64.
#   - velocities: NumPy array of shape (N, 2), dtype float64.
#   - radii: NumPy array of shape (N,), dtype float64.
#   - color_tags: NumPy array of shape (N,), dtype int32, values in
#     [0, palette_size).
#   - Invariants: all four arrays share the same leading dimension N.
#
# particle_count_for(extents: SurfaceExtents, density_area: float) -> int:
#   - Outputs: floor(width * height / density_area), never negative.
#
# seed_particles(extents, rng, ...) -> ParticleSystem:
#   - Inputs:
#     - extents: SurfaceExtents of the drawing surface.
#     - rng: np.random.Generator, the single source of randomness.
#   - Outputs: a brand new ParticleSystem. No state is carried over.


@dataclass
class SurfaceExtents:
    """Pixel dimensions of the drawing surface."""
    width: int = 0
    height: int = 0


@dataclass
class PointerState:
    """Last known pointer position and the extent of its repulsion field."""
    influence_radius: float = INFLUENCE_RADIUS
    position: Optional[Tuple[float, float]] = None


@dataclass
class ParticleSystem:
    """
    A container for all particles, storing their state in NumPy arrays.
    """
    positions: np.ndarray
    velocities: np.ndarray
    radii: np.ndarray
    color_tags: np.ndarray

    @classmethod
    def empty(cls) -> "ParticleSystem":
        return cls(
            positions=np.zeros((0, 2), dtype=np.float64),
            velocities=np.zeros((0, 2), dtype=np.float64),
            radii=np.zeros(0, dtype=np.float64),
            color_tags=np.zeros(0, dtype=np.int32),
        )

    @property
    def particle_count(self) -> int:
        return self.positions.shape[0]

    def __len__(self) -> int:
        return self.particle_count


def particle_count_for(extents: SurfaceExtents, density_area: float = DENSITY_AREA) -> int:
    """Number of particles for a surface, one per `density_area` square pixels."""
    area = max(extents.width, 0) * max(extents.height, 0)
    return int(area // density_area)


def seed_particles(
    extents: SurfaceExtents,
    rng: np.random.Generator,
    density_area: float = DENSITY_AREA,
    drift_speed: float = DRIFT_SPEED,
    radius_min: float = PARTICLE_RADIUS_MIN,
    radius_max: float = PARTICLE_RADIUS_MAX,
    palette_size: int = 2,
) -> ParticleSystem:
    """
    Generates a fresh particle set sized for the given extents.

    Args:
        extents (SurfaceExtents): The surface the particles live on.
        rng (np.random.Generator): Random generator used for every draw.
        density_area (float): Square pixels of surface per particle.
        drift_speed (float): Bound of each velocity component.
        radius_min (float): Smallest disc radius.
        radius_max (float): Largest disc radius.
        palette_size (int): Number of color tags to choose from uniformly.

    Returns:
        ParticleSystem: The new particle set.
    """
    count = particle_count_for(extents, density_area)

    positions = rng.uniform(
        low=[0, 0],
        high=[extents.width, extents.height],
        size=(count, 2)
    )
    velocities = rng.uniform(-drift_speed, drift_speed, size=(count, 2))
    radii = rng.uniform(radius_min, radius_max, size=count)
    color_tags = rng.integers(
        low=0,
        high=palette_size,
        size=count,
        dtype=np.int32
    )

    logging.debug(
        f"Seeded {count} particles for a {extents.width}x{extents.height} surface."
    )
    return ParticleSystem(
        positions=positions,
        velocities=velocities,
        radii=radii,
        color_tags=color_tags,
    )
