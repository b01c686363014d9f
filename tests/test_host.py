import pygame
import pytest

from field import ParticleField, RESIZE, POINTER_MOVE
from host import PygameHost


@pytest.fixture
def host():
    host = PygameHost({'window_width': 320, 'window_height': 240, 'fps': 1000})
    pygame.event.clear()
    yield host
    host.close()


def test_mount_publishes_canvas_of_window_size(host):
    assert host.canvas_ref.current is None
    canvas = host.mount()
    assert host.canvas_ref.current is canvas
    assert canvas.size == host.size() == (320, 240)


def test_pending_frames_run_once_and_rerequests_wait(host):
    calls = []

    def callback():
        calls.append(len(calls))
        host.request_frame(callback)

    host.request_frame(callback)
    assert host.run_pending_frames() == 1
    assert host.run_pending_frames() == 1
    assert calls == [0, 1]


def test_cancelled_frame_never_runs(host):
    calls = []
    handle = host.request_frame(lambda: calls.append(1))
    host.cancel_frame(handle)
    assert host.run_pending_frames() == 0
    assert calls == []


def test_pump_dispatches_pointer_and_resize(host):
    moves, resizes = [], []
    host.add_listener(POINTER_MOVE, lambda x, y: moves.append((x, y)))
    host.add_listener(RESIZE, lambda w, h: resizes.append((w, h)))

    pygame.event.post(pygame.event.Event(pygame.MOUSEMOTION, pos=(12, 34), rel=(0, 0), buttons=(0, 0, 0)))
    pygame.event.post(pygame.event.Event(pygame.VIDEORESIZE, w=400, h=300, size=(400, 300)))

    assert host.pump() is True
    assert moves == [(12, 34)]
    assert resizes == [(400, 300)]


def test_removed_listener_is_not_called(host):
    moves = []
    listener = lambda x, y: moves.append((x, y))
    host.add_listener(POINTER_MOVE, listener)
    host.remove_listener(POINTER_MOVE, listener)

    pygame.event.post(pygame.event.Event(pygame.MOUSEMOTION, pos=(1, 2), rel=(0, 0), buttons=(0, 0, 0)))
    host.pump()
    assert moves == []


def test_quit_event_ends_pump(host):
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    assert host.pump() is False


def test_field_runs_inside_host(host):
    host.mount()
    field = ParticleField(host.canvas_ref, host, host, params={'seed': 3})

    with field:
        for _ in range(3):
            host.run_pending_frames()
            host.present()

    assert field.frame_count == 3
    assert field.particles.particle_count == 5
    assert host.run_pending_frames() == 0
