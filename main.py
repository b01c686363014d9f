# main.py
"""
Main entry point for the Neural Backdrop.

This script orchestrates the entire lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the host window and mounts the particle field on it.
4. Runs the frame loop until the window is closed.
5. Handles clean shutdown.
"""
import cProfile
import io
import logging
import pstats

import numpy as np

from utils import setup_logging, load_config
from constants import LOG_THROTTLE_FRAMES


def main():
    """
    The main function to run the backdrop.
    """
    # Load configuration from the JSON file first.
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Neural Backdrop Starting ---")

    field_params = config.get('field', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from field import ParticleField
    from host import PygameHost

    # --- Component Initialization ---
    # 1. The host opens the window and mounts the canvas the field draws on.
    host = PygameHost(vis_params)
    host.mount()

    # 2. The field borrows the canvas, listens to the host and is scheduled by it.
    field = ParticleField(
        canvas_ref=host.canvas_ref,
        viewport=host,
        scheduler=host,
        params=field_params,
        palette_colors=vis_params.get('particle_colors'),
    )

    log_throttle = run_params.get('log_throttle_frames', LOG_THROTTLE_FRAMES)
    max_frames = run_params.get('max_frames', 0) # 0 runs until the window is closed
    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    frame_num = 0
    running = True

    if profiler is not None:
        profiler.enable()
    try:
        with field:
            while running:
                if not host.pump():
                    break
                host.run_pending_frames()
                host.present()
                frame_num += 1

                # Hot loop: throttle logs
                if frame_num % log_throttle == 0:
                    logging.info(f"Frame {frame_num}")
                    if field.particles.particle_count:
                        avg_speed = np.mean(np.linalg.norm(field.particles.velocities, axis=1))
                    else:
                        avg_speed = 0.0
                    logging.debug(
                        f"Frame {frame_num} | Particles: {field.particles.particle_count} | "
                        f"Links: {field.link_count} | Average Speed: {avg_speed:.4f}"
                    )

                if max_frames and frame_num >= max_frames:
                    logging.info(f"Reached max_frames ({max_frames}). Stopping.")
                    running = False
    finally:
        if profiler is not None:
            profiler.disable()
        host.close()

    logging.info("Frame loop finished.")

    if profiler is not None:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20) # Print top 20 slowest functions
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Neural Backdrop Shutting Down ---")


if __name__ == "__main__":
    main()
