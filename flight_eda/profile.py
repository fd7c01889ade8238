import time
import logging
import tracemalloc

from .config import DEFAULT_CONFIG_PATH, load_config
from .phases import parse_phase, run_phase


def run_profile(phase_name: str = "all", config_path: str = DEFAULT_CONFIG_PATH,
                logger: logging.Logger = None) -> dict:
    """
    Runs one phase and reports its wall time and peak traced memory.
    """
    phase = parse_phase(phase_name)
    config = load_config(config_path)

    print(f"Profiling phase: {phase.value}")

    tracemalloc.start()
    start = time.perf_counter()
    try:
        run_phase(phase, config, logger=logger)
    finally:
        elapsed = time.perf_counter() - start
        _, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

    print("\n--- Profiling Summary ---")
    print(f"Phase: {phase.value}")
    print(f"Time: {elapsed:.2f} seconds")
    print(f"Peak memory traced: {peak / 1024 ** 2:.1f} MiB")
    print("-----------------------\n")
    return {'phase': phase, 'seconds': elapsed, 'peak_bytes': peak}
