import numpy as np
import pygame

from conftest import make_particles
from visualization import Canvas, CanvasRef, load_palette, draw_particles, draw_links

NEON_GREEN = (57, 255, 20, 255)
NEON_BLUE = (0, 243, 255, 255)


def test_default_palette_is_neon_pair():
    palette = load_palette(None)
    assert [tuple(color) for color in palette] == [NEON_GREEN, NEON_BLUE]


def test_palette_from_config_accepts_hex_and_rgb_lists():
    palette = load_palette(["#ff0000", [0, 0, 255]])
    assert [tuple(color) for color in palette] == [(255, 0, 0, 255), (0, 0, 255, 255)]


def test_invalid_palette_falls_back_to_default(caplog):
    palette = load_palette(["not-a-color", "#00ff00"])
    assert [tuple(color) for color in palette] == [NEON_GREEN, NEON_BLUE]
    assert "invalid format" in caplog.text


def test_short_palette_is_padded_and_long_palette_truncated():
    short = load_palette(["#ffffff"])
    assert [tuple(color) for color in short] == [(255, 255, 255, 255), NEON_BLUE]

    long = load_palette(["#ffffff", "#000000", "#ff0000"])
    assert len(long) == 2
    assert tuple(long[1]) == (0, 0, 0, 255)


def test_canvas_resize_replaces_surfaces():
    canvas = Canvas(10, 10)
    canvas.resize(40, 30)
    assert canvas.size == (40, 30)
    assert canvas.link_layer.get_size() == (40, 30)


def test_canvas_ref_starts_empty():
    assert CanvasRef().current is None


def test_clear_makes_canvas_transparent():
    canvas = Canvas(20, 20)
    canvas.surface.fill((255, 0, 0, 255))
    canvas.clear()
    assert canvas.surface.get_at((5, 5)).a == 0
    assert canvas.surface.get_bounding_rect().width == 0


def test_particles_draw_as_discs_in_palette_color():
    canvas = Canvas(50, 50)
    particles = make_particles(
        [[10.0, 10.0], [40.0, 40.0]], radii=[3.0, 3.0], color_tags=[0, 1]
    )

    draw_particles(canvas, particles, load_palette(None))

    assert tuple(canvas.surface.get_at((10, 10))) == NEON_GREEN
    assert tuple(canvas.surface.get_at((40, 40))) == NEON_BLUE
    assert canvas.surface.get_at((25, 25)).a == 0


def test_links_draw_faint_white_segments():
    canvas = Canvas(50, 50)
    particles = make_particles([[10.0, 10.0], [30.0, 10.0]])
    pairs = np.array([[0, 1]], dtype=np.int64)
    alphas = np.array([(1 - 400 / 20000) * 0.1])

    draw_links(canvas, particles, pairs, alphas)

    midpoint = canvas.surface.get_at((20, 10))
    assert 0 < midpoint.a < 64
    assert canvas.surface.get_at((20, 40)).a == 0


def test_zero_alpha_links_draw_nothing():
    canvas = Canvas(50, 50)
    particles = make_particles([[10.0, 10.0], [30.0, 10.0]])
    pairs = np.array([[0, 1]], dtype=np.int64)

    draw_links(canvas, particles, pairs, np.array([0.0]))

    assert canvas.surface.get_bounding_rect().width == 0


def test_draw_on_empty_system_is_a_no_op():
    canvas = Canvas(10, 10)
    particles = make_particles(np.zeros((0, 2)))
    draw_particles(canvas, particles, [pygame.Color("#ffffff")] * 2)
    draw_links(canvas, particles, np.zeros((0, 2), dtype=np.int64), np.zeros(0))
    assert canvas.surface.get_bounding_rect().width == 0
