# visualization.py
"""
Handles drawing the particle field using Pygame.

The Canvas is the drawing surface the engine borrows from its host. It
is a transparent layer; the host decides what it is composited over and
at which opacity.
"""
import logging
from typing import List, Optional

import numpy as np
import pygame

from particle import ParticleSystem
from constants import NEON_PALETTE, LINK_COLOR, LINK_WIDTH

# --- Data Contracts ---
#
# class Canvas:
#   - __init__(self, width: int, height: int):
#     - Side Effects: Creates two per-pixel-alpha surfaces of the given
#       size: `surface` (discs and the final image) and `link_layer`.
#   - resize(self, width: int, height: int) -> None:
#     - Side Effects: Replaces both surfaces. Previous content is lost.
#   - clear(self) -> None: Makes both surfaces fully transparent.
#   - compose(self) -> None: Blends `link_layer` over `surface`.
#
# class CanvasRef:
#   - current: Optional[Canvas]. None until the host has mounted a canvas.
#
# load_palette(config_colors: Optional[list], size: int = 2) -> List[pygame.Color]:
#   - Outputs: exactly `size` colors. Falls back to NEON_PALETTE.
#
# draw_particles(canvas, particles, palette) -> None
# draw_links(canvas, particles, pairs, alphas) -> None


class Canvas:
    """
    A transparent drawing surface with a separate layer for links.

    Links are drawn translucent. Pygame's draw functions write the alpha
    channel instead of blending, so links go to their own layer which is
    then blended over the discs in `compose`.
    """
    def __init__(self, width: int, height: int):
        self.surface = pygame.Surface((max(width, 0), max(height, 0)), pygame.SRCALPHA)
        self.link_layer = pygame.Surface((max(width, 0), max(height, 0)), pygame.SRCALPHA)

    @property
    def size(self):
        return self.surface.get_size()

    def resize(self, width: int, height: int) -> None:
        self.surface = pygame.Surface((max(width, 0), max(height, 0)), pygame.SRCALPHA)
        self.link_layer = pygame.Surface((max(width, 0), max(height, 0)), pygame.SRCALPHA)
        logging.debug(f"Canvas resized to {width}x{height}.")

    def clear(self) -> None:
        self.surface.fill((0, 0, 0, 0))
        self.link_layer.fill((0, 0, 0, 0))

    def compose(self) -> None:
        self.surface.blit(self.link_layer, (0, 0))


class CanvasRef:
    """Holder through which a host lends its canvas to the engine."""
    def __init__(self, current: Optional[Canvas] = None):
        self.current = current


def load_palette(config_colors: Optional[list], size: int = 2) -> List[pygame.Color]:
    """Loads particle colors from config, falling back to the neon default palette."""
    def get_default_colors(n_colors):
        return [pygame.Color(NEON_PALETTE[i % len(NEON_PALETTE)]) for i in range(n_colors)]

    if not config_colors:
        logging.info("No colors found in config. Using neon default palette.")
        return get_default_colors(size)

    final_colors = []
    try:
        for color in config_colors:
            # Accept both "#rrggbb" strings and [r, g, b] lists.
            if isinstance(color, (list, tuple)):
                final_colors.append(pygame.Color(*color))
            else:
                final_colors.append(pygame.Color(color))
    except (ValueError, TypeError) as e:
        logging.error(f"Could not parse colors from config due to invalid format: {e}. Falling back to neon default palette.")
        return get_default_colors(size)

    num_loaded = len(final_colors)
    if num_loaded < size:
        logging.warning(
            f"Config provides {num_loaded} colors, but {size} are needed. "
            f"Filling the remaining {size - num_loaded} from the default palette."
        )
        final_colors.extend(get_default_colors(size)[num_loaded:])
    elif num_loaded > size:
        logging.warning(
            f"Config provides {num_loaded} colors, but only {size} are used. "
            "Ignoring excess colors."
        )
        final_colors = final_colors[:size]
    else:
        logging.info(f"Successfully loaded {num_loaded} particle colors from configuration.")

    return final_colors


def draw_particles(canvas: Canvas, particles: ParticleSystem, palette: List[pygame.Color]) -> None:
    """Draws every particle as a filled disc of its radius and palette color."""
    surface = canvas.surface
    positions = particles.positions
    radii = particles.radii
    tags = particles.color_tags
    for i in range(particles.particle_count):
        pygame.draw.circle(
            surface,
            palette[tags[i] % len(palette)],
            (float(positions[i, 0]), float(positions[i, 1])),
            float(radii[i])
        )


def draw_links(canvas: Canvas, particles: ParticleSystem, pairs: np.ndarray, alphas: np.ndarray) -> None:
    """
    Draws a faint white segment for each linked pair and blends the
    link layer onto the canvas.
    """
    layer = canvas.link_layer
    positions = particles.positions
    # Convert opacities to 8-bit alpha once, outside the loop.
    alpha_bytes = np.clip(np.rint(alphas * 255), 0, 255).astype(np.int32)
    for k in range(pairs.shape[0]):
        alpha = int(alpha_bytes[k])
        if alpha == 0:
            continue
        a, b = pairs[k]
        pygame.draw.line(
            layer,
            (LINK_COLOR[0], LINK_COLOR[1], LINK_COLOR[2], alpha),
            (float(positions[a, 0]), float(positions[a, 1])),
            (float(positions[b, 0]), float(positions[b, 1])),
            LINK_WIDTH
        )
    canvas.compose()
