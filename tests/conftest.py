import os

# Headless Pygame: must be set before pygame is imported anywhere.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import logging
from collections import defaultdict

import numpy as np
import pygame
import pytest

from particle import ParticleSystem
from visualization import Canvas, CanvasRef


class ManualScheduler:
    """Frame scheduler that only advances when told to."""
    def __init__(self):
        self.pending = {}
        self.cancelled = []
        self._next_handle = 1

    def request_frame(self, callback):
        handle = self._next_handle
        self._next_handle += 1
        self.pending[handle] = callback
        return handle

    def cancel_frame(self, handle):
        self.pending.pop(handle, None)
        self.cancelled.append(handle)

    def run(self, frames=1):
        for _ in range(frames):
            pending, self.pending = self.pending, {}
            for callback in pending.values():
                callback()


class FakeViewport:
    def __init__(self, width=700, height=700):
        self.width = width
        self.height = height
        self.listeners = defaultdict(list)

    def size(self):
        return self.width, self.height

    def add_listener(self, event, listener):
        self.listeners[event].append(listener)

    def remove_listener(self, event, listener):
        if listener in self.listeners[event]:
            self.listeners[event].remove(listener)

    def emit(self, event, *args):
        for listener in list(self.listeners[event]):
            listener(*args)


def make_particles(positions, velocities=None, radii=None, color_tags=None):
    positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
    count = positions.shape[0]
    if velocities is None:
        velocities = np.zeros((count, 2))
    if radii is None:
        radii = np.full(count, 2.0)
    if color_tags is None:
        color_tags = np.zeros(count, dtype=np.int32)
    return ParticleSystem(
        positions=positions,
        velocities=np.array(velocities, dtype=np.float64).reshape(-1, 2),
        radii=np.array(radii, dtype=np.float64),
        color_tags=np.array(color_tags, dtype=np.int32),
    )


@pytest.fixture(autouse=True)
def pygame_initialized():
    pygame.init()
    yield


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def viewport():
    return FakeViewport(700, 700)


@pytest.fixture
def canvas_ref():
    return CanvasRef(Canvas(1, 1))


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
