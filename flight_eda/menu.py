import os
import sys
import subprocess

from .cli import CONFIG_ENV_VAR, FATAL_ERRORS
from .config import DEFAULT_CONFIG_PATH, Config, load_config, setup_logging
from .features import ensure_date_column, enrich_features
from .kpis import format_quick_stats, quick_stats
from .load import read_table
from .phases import run_phase

MENU_TEXT = """
=== FlightEDA menu ===
 1) Phase 1 - load/describe
 2) Phase 2 - clean/features
 3) Phase 3 - plots
 all) Run all phases
 smoke) Smoke test
 stats) Quick stats from cleaned data
 plots) List plot files
 open) Open a plot file
 config) Reload config
 q) Quit"""


def prompt(msg: str, default: str = None) -> str:
    inp = input(f"{msg}: " if default is None else f"{msg} [{default}]: ").strip()
    if not inp and default is not None:
        return default
    return inp


def load_cfg():
    """Asks for a config path, loads it and configures logging."""
    cfg_path = prompt("Config path", default=os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))
    config = load_config(cfg_path)
    return config, setup_logging(config.log_level)


def list_plot_files(plot_dir: str) -> list:
    if not os.path.isdir(plot_dir):
        return []
    return sorted(f for f in os.listdir(plot_dir) if f.endswith(".html"))


def show_plot_list(plot_dir: str):
    if not os.path.isdir(plot_dir):
        print(f"No plots directory found at {plot_dir}. Run phase 3 first.")
        return
    files = list_plot_files(plot_dir)
    if not files:
        print(f"No plot files found in {plot_dir}")
    for f in files:
        print(f" - {os.path.join(plot_dir, f)}")


def open_command(path: str) -> list:
    """The platform's command for opening a file with its default viewer."""
    if sys.platform == "darwin":
        return ["open", path]
    elif sys.platform.startswith("win"):
        return ["cmd", "/c", "start", "", path]
    return ["xdg-open", path]


def open_plot(plot_dir: str):
    files = list_plot_files(plot_dir)
    if not files:
        print(f"No plot files found in {plot_dir}. Run phase 3 first.")
        return

    print("Select a plot to open:")
    for i, f in enumerate(files, start=1):
        print(f" {i}) {f}")
    choice = prompt("Enter number (or blank to cancel)", default="")
    if not choice:
        return
    if not choice.isdigit() or not 1 <= int(choice) <= len(files):
        print("Invalid selection.")
        return

    plot_path = os.path.abspath(os.path.join(plot_dir, files[int(choice) - 1]))
    print(f"Opening {plot_path} ...")
    try:
        subprocess.run(open_command(plot_path), check=True)
    except (FileNotFoundError, subprocess.CalledProcessError) as e:
        print(f"Failed to open plot: {e}")


def show_quick_stats(config: Config, logger=None):
    clean_path = config.data.cleaned_file
    if not os.path.isfile(clean_path):
        print(f"Cleaned file not found at {clean_path}. Run phase 2 first.")
        return
    df = enrich_features(ensure_date_column(read_table(clean_path, logger=logger)), logger=logger)
    print(format_quick_stats(quick_stats(df)))


def run_option(config: Config, logger, choice: str):
    """
    Executes one menu choice. Returns the (possibly reloaded) config and
    logger, or None when the user quits.
    """
    actions = {
        "1": lambda: run_phase("1", config, logger=logger),
        "2": lambda: run_phase("2", config, logger=logger),
        "3": lambda: run_phase("3", config, logger=logger),
        "all": lambda: run_phase("all", config, logger=logger),
        "smoke": lambda: run_phase("smoke", config, logger=logger),
        "plots": lambda: show_plot_list(config.plots.dir),
        "open": lambda: open_plot(config.plots.dir),
        "stats": lambda: show_quick_stats(config, logger=logger),
    }

    if choice in actions:
        try:
            actions[choice]()
        except FATAL_ERRORS as e:
            logger.error("%s", e)
    elif choice == "config":
        try:
            return load_cfg()
        except FileNotFoundError as e:
            print(e)
    elif choice == "q":
        print("Bye.")
        return None
    else:
        print("Unknown choice.")
    return config, logger


def menu():
    try:
        config, logger = load_cfg()
    except FileNotFoundError as e:
        print(e)
        return 1

    state = (config, logger)
    while state is not None:
        print(MENU_TEXT)
        state = run_option(*state, prompt("Select option", default=""))
    return 0


if __name__ == "__main__":
    sys.exit(menu())
