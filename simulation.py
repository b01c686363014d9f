# simulation.py
"""
Handles the per-frame physics of the particle field.

This module provides the free functions that advance the particle set by
one frame (drift, edge bounce, pointer repulsion) and that compute the
proximity connection graph drawn between nearby particles. The hot loops
are compiled with Numba and operate only on NumPy arrays and scalars.
"""
from typing import Tuple

import numpy as np
from numba import jit

from particle import ParticleSystem, SurfaceExtents, PointerState
from constants import (
    REPULSION_STRENGTH, LINK_DIVISOR, LINK_FALLOFF, LINK_ALPHA
)

# --- Data Contracts ---
#
# update(particles, extents, pointer, repulsion_strength) -> None:
#   - Side Effects: Modifies particles.positions and particles.velocities
#     in place. Each particle is processed independently.
#   - Invariants: Particle count is unchanged. Positions are never
#     clamped; a particle outside the extents has its velocity component
#     negated instead, so it may sit outside by one frame's displacement.
#
# link_threshold_sq(extents, link_divisor) -> float:
#   - Outputs: (width / link_divisor) * (height / link_divisor).
#
# find_links(particles, threshold_sq, link_falloff, link_alpha)
#     -> Tuple[np.ndarray, np.ndarray]:
#   - Outputs:
#     - pairs: int64 array of shape (L, 2), each row (a, b) with a < b.
#     - alphas: float64 array of shape (L,), values in [0, link_alpha].
#   - Invariants: a pair is present iff its squared distance is strictly
#     below threshold_sq. Self-pairs are never present.


@jit(nopython=True)
def _update_numba(
    positions, velocities, width, height,
    pointer_x, pointer_y, has_pointer, influence_radius, repulsion_strength
):
    """
    Numba-jitted Euler step, edge bounce and pointer repulsion.
    """
    particle_count = positions.shape[0]
    for i in range(particle_count):
        positions[i, 0] += velocities[i, 0]
        positions[i, 1] += velocities[i, 1]

        # Bounce by flipping the velocity sign only. The position is left
        # where the step put it.
        if positions[i, 0] < 0.0 or positions[i, 0] > width:
            velocities[i, 0] = -velocities[i, 0]
        if positions[i, 1] < 0.0 or positions[i, 1] > height:
            velocities[i, 1] = -velocities[i, 1]

        if has_pointer:
            dx = pointer_x - positions[i, 0]
            dy = pointer_y - positions[i, 1]
            distance = np.sqrt(dx * dx + dy * dy)

            if distance > 0.0 and distance < influence_radius:
                # Linear falloff: 1 at the pointer, 0 at the radius edge.
                force = (influence_radius - distance) / influence_radius
                positions[i, 0] -= dx / distance * force * repulsion_strength
                positions[i, 1] -= dy / distance * force * repulsion_strength


@jit(nopython=True)
def _find_links_numba(positions, threshold_sq, link_falloff, link_alpha):
    """
    Numba-jitted all-pairs proximity search.

    Output arrays are sized for the worst case (every pair linked) and
    trimmed to the number of links actually found.
    """
    particle_count = positions.shape[0]
    max_links = particle_count * (particle_count - 1) // 2
    pairs = np.empty((max_links, 2), dtype=np.int64)
    alphas = np.empty(max_links, dtype=np.float64)
    link_count = 0

    for a in range(particle_count):
        for b in range(a + 1, particle_count):
            dx = positions[a, 0] - positions[b, 0]
            dy = positions[a, 1] - positions[b, 1]
            # Squared distance only, no sqrt in the quadratic loop.
            distance_sq = dx * dx + dy * dy

            if distance_sq < threshold_sq:
                opacity = 1.0 - distance_sq / link_falloff
                if opacity < 0.0:
                    opacity = 0.0
                elif opacity > 1.0:
                    opacity = 1.0
                pairs[link_count, 0] = a
                pairs[link_count, 1] = b
                alphas[link_count] = opacity * link_alpha
                link_count += 1

    return pairs[:link_count], alphas[:link_count]


def update(
    particles: ParticleSystem,
    extents: SurfaceExtents,
    pointer: PointerState,
    repulsion_strength: float = REPULSION_STRENGTH,
) -> None:
    """
    Advances every particle by one frame.
    """
    if pointer.position is None:
        pointer_x, pointer_y, has_pointer = 0.0, 0.0, False
    else:
        pointer_x, pointer_y = pointer.position
        has_pointer = True

    _update_numba(
        particles.positions, particles.velocities,
        float(extents.width), float(extents.height),
        float(pointer_x), float(pointer_y), has_pointer,
        float(pointer.influence_radius), float(repulsion_strength)
    )


def link_threshold_sq(extents: SurfaceExtents, link_divisor: float = LINK_DIVISOR) -> float:
    """Squared distance below which two particles are connected."""
    return (extents.width / link_divisor) * (extents.height / link_divisor)


def find_links(
    particles: ParticleSystem,
    threshold_sq: float,
    link_falloff: float = LINK_FALLOFF,
    link_alpha: float = LINK_ALPHA,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Finds every pair of particles close enough to be connected.

    Returns:
        Tuple[np.ndarray, np.ndarray]: Index pairs (a < b) and the line
        opacity of each pair.
    """
    return _find_links_numba(
        particles.positions, float(threshold_sq),
        float(link_falloff), float(link_alpha)
    )
