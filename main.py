# main.py
"""
Main entry point for the Particle Regions animation.

This script orchestrates the application lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the window and builds the region settings for its canvas.
4. Runs the frame loop until the user quits or max_steps is reached.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config
import cProfile
import pstats
import io

CONFIG_DEFAULTS = {
    'visualization': {'debug': False},
    'run_control': {'max_steps': 0, 'log_throttle_steps': 600, 'profile': False},
}


def main():
    """
    The main function to run the animation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json', CONFIG_DEFAULTS)
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Particle Regions Starting ---")

    run_params = config['run_control']
    vis_params = config['visualization']

    from settings import load_region_settings
    from simulation import Simulation
    from visualization import Visualizer

    # --- Component Initialization ---
    # 1. The visualizer decides the canvas size.
    visualizer = Visualizer(vis_params)

    # 2. Default region layouts are laid out relative to that canvas.
    settings = load_region_settings(config, visualizer.canvas_size)

    # 3. The simulation owns the canvas from here on.
    simulation = Simulation(debug=vis_params['debug'])
    simulation.setup(visualizer.canvas, settings)

    log_throttle = max(1, run_params['log_throttle_steps'])
    max_steps = run_params['max_steps']
    profiler = cProfile.Profile() if run_params['profile'] else None

    running = True
    frame_num = 0

    if profiler is not None:
        profiler.enable()
    while running:
        # Input first, so that settings committed by a key press are applied
        # by frame() before the tick runs.
        if not visualizer.process_events(simulation):
            running = False
            break

        simulation.frame()
        visualizer.present(simulation)
        frame_num += 1

        # Hot loops must throttle logs
        if frame_num % log_throttle == 0:
            logging.info(f"Frame {frame_num} | {visualizer.clock.get_fps():.1f} fps")
            particles = sum(region.count for region in simulation.regions)
            logging.debug(f"Frame {frame_num} | {len(simulation.regions)} regions, {particles} particles")

        if max_steps and frame_num >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping.")
            running = False
    if profiler is not None:
        profiler.disable()

    simulation.stop()
    visualizer.close()
    logging.info("Frame loop finished.")

    if profiler is not None:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Regions Shutting Down ---")


if __name__ == "__main__":
    main()
