# field.py
"""
The particle field engine.

This module defines the ParticleField class, which owns the particle
set, the pointer state and the frame loop. It is driven by three
external triggers: a viewport resize, a pointer move and a frame tick.
The host environment is injected through the Viewport and FrameScheduler
interfaces, so the engine can be driven deterministically without a
live window.
"""
import logging
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

import numpy as np

from particle import (
    ParticleSystem, SurfaceExtents, PointerState, seed_particles
)
from simulation import update, link_threshold_sq, find_links
from visualization import CanvasRef, load_palette, draw_particles, draw_links
from constants import (
    DENSITY_AREA, DRIFT_SPEED, PARTICLE_RADIUS_MIN, PARTICLE_RADIUS_MAX,
    INFLUENCE_RADIUS, REPULSION_STRENGTH, LINK_DIVISOR, LINK_FALLOFF,
    LINK_ALPHA
)

RESIZE = "resize"
POINTER_MOVE = "pointermove"

# --- Data Contracts ---
#
# class Viewport (protocol):
#   - size(self) -> Tuple[int, int]: current viewport pixel size.
#   - add_listener(self, event: str, listener: Callable) -> None
#   - remove_listener(self, event: str, listener: Callable) -> None
#     - RESIZE listeners are called with (width, height).
#     - POINTER_MOVE listeners are called with (x, y).
#
# class FrameScheduler (protocol):
#   - request_frame(self, callback: Callable[[], None]) -> int
#   - cancel_frame(self, handle: int) -> None
#
# class ParticleField:
#   - __init__(self, canvas_ref, viewport, scheduler, params=None, palette_colors=None, rng=None):
#     - Inputs:
#       - params: the "field" section of config.json.
#         - "density_area", "drift_speed", "radius_min", "radius_max",
#           "influence_radius", "repulsion_strength", "link_divisor",
#           "link_falloff", "link_alpha": float
#         - "seed": Optional[int]
#     - Side Effects: Validates params. Raises ValueError on invalid values.
#
#   - start(self) -> bool:
#     - Outputs: False (silent no-op) if the canvas is not mounted yet.
#     - Side Effects: Registers listeners, seeds particles, requests the
#       first frame.
#
#   - tick(self) -> None:
#     - Side Effects: Clears the canvas, advances and draws all particles,
#       draws links, requests the next frame. Does nothing once stopped.
#
#   - stop(self) -> None:
#     - Side Effects: Removes listeners, cancels the pending frame and
#       forgets the pointer. Idempotent.


class Viewport(Protocol):
    def size(self) -> Tuple[int, int]: ...
    def add_listener(self, event: str, listener: Callable[..., None]) -> None: ...
    def remove_listener(self, event: str, listener: Callable[..., None]) -> None: ...


class FrameScheduler(Protocol):
    def request_frame(self, callback: Callable[[], None]) -> int: ...
    def cancel_frame(self, handle: int) -> None: ...


class ParticleField:
    """
    A self-animating particle swarm with pointer repulsion and proximity links.
    """
    def __init__(
        self,
        canvas_ref: CanvasRef,
        viewport: "Viewport",
        scheduler: "FrameScheduler",
        params: Optional[Dict[str, Any]] = None,
        palette_colors: Optional[list] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initializes the engine. Nothing is drawn until `start` is called.

        Args:
            canvas_ref (CanvasRef): Holder of the canvas lent by the host.
            viewport (Viewport): Source of size and input events.
            scheduler (FrameScheduler): Next-frame callback primitive.
            params (Optional[Dict[str, Any]]): Field parameters from config.
            palette_colors (Optional[list]): Particle colors from config.
            rng (Optional[np.random.Generator]): Overrides the seeded RNG.
        """
        params = params if params is not None else {}
        self.canvas_ref = canvas_ref
        self.viewport = viewport
        self.scheduler = scheduler

        self.density_area = float(params.get('density_area', DENSITY_AREA))
        self.drift_speed = float(params.get('drift_speed', DRIFT_SPEED))
        self.radius_min = float(params.get('radius_min', PARTICLE_RADIUS_MIN))
        self.radius_max = float(params.get('radius_max', PARTICLE_RADIUS_MAX))
        self.repulsion_strength = float(params.get('repulsion_strength', REPULSION_STRENGTH))
        self.link_divisor = float(params.get('link_divisor', LINK_DIVISOR))
        self.link_falloff = float(params.get('link_falloff', LINK_FALLOFF))
        self.link_alpha = float(params.get('link_alpha', LINK_ALPHA))
        influence_radius = float(params.get('influence_radius', INFLUENCE_RADIUS))

        self._validate(influence_radius)

        # All randomness goes through a single generator, seeded from config.
        self.rng = rng if rng is not None else np.random.default_rng(params.get('seed'))
        self.palette = load_palette(palette_colors)

        self.particles = ParticleSystem.empty()
        self.extents = SurfaceExtents()
        self.pointer = PointerState(influence_radius=influence_radius)
        self.link_count = 0
        self.frame_count = 0

        self._canvas = None
        self._frame_handle: Optional[int] = None
        self._running = False

        logging.info("Particle field initialized and configuration validated.")

    def _validate(self, influence_radius: float) -> None:
        problems = []
        for name, value in (
            ('density_area', self.density_area),
            ('influence_radius', influence_radius),
            ('link_divisor', self.link_divisor),
            ('link_falloff', self.link_falloff),
        ):
            if value <= 0:
                problems.append(f"{name} must be positive, got {value}")
        if self.drift_speed < 0:
            problems.append(f"drift_speed must not be negative, got {self.drift_speed}")
        if not 0 < self.radius_min <= self.radius_max:
            problems.append(
                f"radius range must satisfy 0 < radius_min <= radius_max, "
                f"got [{self.radius_min}, {self.radius_max}]"
            )
        if problems:
            msg = "Configuration error: " + "; ".join(problems) + "."
            logging.critical(msg)
            raise ValueError(msg)

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> bool:
        """
        Mounts the field on the host's canvas and starts the frame loop.

        Returns:
            bool: False if the canvas is not available yet, True otherwise.
        """
        if self._running:
            return True

        canvas = self.canvas_ref.current
        if canvas is None:
            logging.debug("Canvas not mounted yet. Particle field not started.")
            return False

        self._canvas = canvas
        self._running = True
        self.viewport.add_listener(RESIZE, self.resize)
        self.viewport.add_listener(POINTER_MOVE, self.move_pointer)

        width, height = self.viewport.size()
        self.resize(width, height)
        self._frame_handle = self.scheduler.request_frame(self.tick)

        logging.info("Particle field started.")
        return True

    def stop(self) -> None:
        """Detaches listeners and cancels the pending frame."""
        if not self._running:
            return
        self._running = False

        self.viewport.remove_listener(RESIZE, self.resize)
        self.viewport.remove_listener(POINTER_MOVE, self.move_pointer)
        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None
        self.pointer.position = None
        self._canvas = None

        logging.info(f"Particle field stopped after {self.frame_count} frames.")

    def __enter__(self) -> "ParticleField":
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.stop()

    def resize(self, width: int, height: int) -> None:
        """Adopts a new viewport size, resizes the canvas and reseeds."""
        if not self._running:
            return
        self.extents = SurfaceExtents(int(width), int(height))
        self._canvas.resize(self.extents.width, self.extents.height)
        self.reseed()
        logging.info(
            f"Viewport resized to {self.extents.width}x{self.extents.height}; "
            f"reseeded {self.particles.particle_count} particles."
        )

    def reseed(self) -> None:
        """Discards the particle set and generates a new one for the current extents."""
        self.particles = seed_particles(
            self.extents,
            self.rng,
            density_area=self.density_area,
            drift_speed=self.drift_speed,
            radius_min=self.radius_min,
            radius_max=self.radius_max,
            palette_size=len(self.palette),
        )

    def move_pointer(self, x: float, y: float) -> None:
        if not self._running:
            return
        self.pointer.position = (float(x), float(y))

    def tick(self) -> None:
        """
        Renders one frame and schedules the next one.
        """
        self._frame_handle = None
        if not self._running:
            return

        canvas = self._canvas
        canvas.clear()

        update(self.particles, self.extents, self.pointer, self.repulsion_strength)
        draw_particles(canvas, self.particles, self.palette)

        threshold_sq = link_threshold_sq(self.extents, self.link_divisor)
        pairs, alphas = find_links(
            self.particles, threshold_sq, self.link_falloff, self.link_alpha
        )
        self.link_count = pairs.shape[0]
        draw_links(canvas, self.particles, pairs, alphas)

        self.frame_count += 1
        self._frame_handle = self.scheduler.request_frame(self.tick)
