# host.py
"""
Hosts the particle field in a Pygame window.

The host owns the display. It lends a transparent Canvas to the engine,
translates window events into resize and pointer-move notifications,
runs requested frame callbacks once per display refresh and composites
the canvas over a dark backdrop at reduced opacity.
"""
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple

import pygame

from field import RESIZE, POINTER_MOVE
from visualization import Canvas, CanvasRef
from constants import (
    FULLSCREEN, WINDOW_WIDTH, WINDOW_HEIGHT, FPS, BACKDROP_COLOR,
    FIELD_OPACITY
)

# --- Data Contracts ---
#
# class PygameHost:
#   - __init__(self, vis_params: Optional[Dict[str, Any]] = None):
#     - Inputs:
#       - vis_params: the "visualization" section of config.json.
#         - "fullscreen": bool
#         - "window_width", "window_height": int
#         - "backdrop_color": [r, g, b] or "#rrggbb"
#         - "opacity": float in [0, 1]
#         - "fps": int
#     - Side Effects: Initializes Pygame and opens the display.
#
#   - mount(self) -> Canvas: Creates the canvas and publishes it through
#     `canvas_ref`.
#   - pump(self) -> bool: Dispatches pending window events. False on quit.
#   - run_pending_frames(self) -> int: Runs the frame callbacks requested
#     before this call. Returns how many ran.
#   - present(self) -> None: Composites and flips, then waits for the
#     next frame slot.


class PygameHost:
    """
    A resizable Pygame window that the particle field is mounted in.
    """
    def __init__(self, vis_params: Optional[Dict[str, Any]] = None):
        vis_params = vis_params if vis_params is not None else {}
        pygame.init()

        fullscreen = vis_params.get('fullscreen', FULLSCREEN)
        if fullscreen:
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width = vis_params.get('window_width', WINDOW_WIDTH)
            height = vis_params.get('window_height', WINDOW_HEIGHT)
            self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        pygame.display.set_caption("Neural Backdrop")
        self.clock = pygame.time.Clock()
        self.fps = vis_params.get('fps', FPS)
        self.backdrop_color = pygame.Color(vis_params.get('backdrop_color', BACKDROP_COLOR))
        opacity = min(max(float(vis_params.get('opacity', FIELD_OPACITY)), 0.0), 1.0)
        self.field_alpha = int(round(opacity * 255))

        self.canvas_ref = CanvasRef()
        self._listeners: Dict[str, List[Callable[..., None]]] = defaultdict(list)
        self._pending_frames: Dict[int, Callable[[], None]] = {}
        self._next_handle = 1

        logging.info(f"Host initialized with Pygame display ({width}x{height}).")

    # --- Viewport ---

    def size(self) -> Tuple[int, int]:
        return self.screen.get_size()

    def add_listener(self, event: str, listener: Callable[..., None]) -> None:
        self._listeners[event].append(listener)

    def remove_listener(self, event: str, listener: Callable[..., None]) -> None:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def _dispatch(self, event: str, *args) -> None:
        # Copy so listeners may detach themselves while being notified.
        for listener in list(self._listeners.get(event, [])):
            listener(*args)

    # --- Frame Scheduler ---

    def request_frame(self, callback: Callable[[], None]) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending_frames[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending_frames.pop(handle, None)

    def run_pending_frames(self) -> int:
        """
        Runs the callbacks requested so far. Callbacks requested while
        these run are deferred to the next call.
        """
        pending = self._pending_frames
        self._pending_frames = {}
        for callback in pending.values():
            callback()
        return len(pending)

    # --- Window ---

    def mount(self) -> Canvas:
        width, height = self.size()
        canvas = Canvas(width, height)
        self.canvas_ref.current = canvas
        logging.debug(f"Canvas mounted at {width}x{height}.")
        return canvas

    def pump(self) -> bool:
        """
        Handles Pygame events.

        Returns:
            bool: False if the host should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down host.")
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down host.")
                    return False

            if event.type == pygame.VIDEORESIZE:
                self._dispatch(RESIZE, event.w, event.h)

            if event.type == pygame.MOUSEMOTION:
                x, y = event.pos
                self._dispatch(POINTER_MOVE, x, y)
        return True

    def present(self) -> None:
        """Composites the canvas over the backdrop and flips the display."""
        self.screen.fill(self.backdrop_color)
        canvas = self.canvas_ref.current
        if canvas is not None:
            canvas.surface.set_alpha(self.field_alpha)
            self.screen.blit(canvas.surface, (0, 0))
        pygame.display.flip()
        self.clock.tick(self.fps)

    def close(self) -> None:
        """Releases the canvas and shuts down Pygame."""
        self.canvas_ref.current = None
        pygame.quit()
