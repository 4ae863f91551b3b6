# main.py
"""
Headless driver for the tilt particle simulation.

This script plays the role of the host:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Derives the field bounds from the configured display.
4. Feeds a synthetic, slowly rotating tilt into the particle system at a
   fixed frame cadence and maps the results to screen pixels.
5. Reports a performance profile on shutdown.
"""
import cProfile
import io
import logging
import math
import pstats
import sys
from typing import List, Tuple

import numpy as np

from utils import setup_logging, load_config


def synthetic_tilt(step_num: int, fps: float, magnitude: float, period_s: float) -> Tuple[float, float, float]:
    """Sensor reading for a device tilted by `magnitude` and turning once per period."""
    t = step_num / fps
    angle = 2.0 * math.pi * t / period_s
    return (magnitude * math.cos(angle), magnitude * math.sin(angle), 0.0)


def main(config_path: str = 'config.json') -> int:
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1

    setup_logging(config)

    logging.info("--- Tilt Particles Simulation Starting ---")

    sim_params = config['simulation_parameters']
    display_params = config['display']
    run_params = config['run_control']

    from bounds import set_field_bounds
    from display import DisplayMapping, remap_sensor
    from simulation import ParticleSystem

    # --- Component Initialization ---
    # 1. The display decides the size of the field.
    mapping = DisplayMapping(
        display_params['width_px'], display_params['height_px'],
        display_params['xdpi'], display_params['ydpi'],
        sim_params['ball_diameter']
    )
    bounds = set_field_bounds(mapping.bounds())

    # 2. Payloads are the sprite labels a renderer would own.
    system = ParticleSystem(
        sim_params['particle_count'],
        lambda i: f"ball-{i}",
        bounds=bounds,
        seed=sim_params.get('seed'),
    )

    profiler = cProfile.Profile()

    fps = run_params['fps']
    max_steps = run_params['max_steps']
    log_throttle = run_params['log_throttle_steps']
    rotation = display_params['rotation']

    screen_positions: List[Tuple[str, Tuple[float, float]]] = []

    def place(pos, label):
        screen_positions.append((label, mapping.to_screen(pos)))

    profiler.enable()
    for step_num in range(max_steps):
        values = synthetic_tilt(step_num, fps, run_params['tilt_magnitude'], run_params['tilt_period_s'])
        sx, sy = remap_sensor(values, rotation)
        now_ms = int(round(step_num * 1000 / fps))

        system.update(sx, sy, now_ms)

        screen_positions.clear()
        system.update_particles(place)

        if (step_num + 1) % log_throttle == 0:
            logging.info(f"Simulation step {step_num + 1}/{max_steps}")
            avg_speed = np.mean(np.linalg.norm(system.velocities, axis=1)) if len(system) else 0.0
            logging.debug(
                f"Step {step_num + 1} | Relaxation passes: {system.last_relaxation_passes} "
                f"| Average speed: {avg_speed:.6f}"
            )
            for label, (px, py) in screen_positions:
                logging.debug(f"  {label}: ({px:.1f}, {py:.1f})px")
    profiler.disable()

    logging.info("Simulation loop finished.")

    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Tilt Particles Simulation Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
