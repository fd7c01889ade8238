# cli.py
import os
import sys
import argparse

from .config import DEFAULT_CONFIG_PATH, load_config, log_level_from_string, setup_logging
from .phases import UnknownPhaseError, parse_phase, run_phase
from .profile import run_profile
from .schema import SchemaError
from .smoke import SmokeAssertionFailure

CONFIG_ENV_VAR = "EDA_CONFIG"

FATAL_ERRORS = (FileNotFoundError, SchemaError, SmokeAssertionFailure, UnknownPhaseError)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Load, clean and plot airline on-time performance data."
    )
    parser.add_argument(
        "--phase",
        default="all",
        help="Which phase to run (1|2|3|all|smoke).",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to config TOML (default: {DEFAULT_CONFIG_PATH}). {CONFIG_ENV_VAR} takes precedence.",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warn", "warning", "error"],
        default=None,
        help="Override the log level from the config file.",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Profile the runtime and memory of the selected phase.",
    )
    return parser


def parse_cli_args(argv=None):
    """Returns the (phase, config path) pair requested on the command line."""
    args = build_parser().parse_args(argv)
    return parse_phase(args.phase), args.config


def resolve_config_path(cli_path: str) -> str:
    return os.environ.get(CONFIG_ENV_VAR) or cli_path


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config_path = resolve_config_path(args.config)

    try:
        phase = parse_phase(args.phase)
        config = load_config(config_path)
    except FATAL_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.log_level is not None:
        config.log_level = log_level_from_string(args.log_level)
    logger = setup_logging(config.log_level)

    try:
        if args.profile:
            run_profile(phase.value, config_path, logger=logger)
        else:
            run_phase(phase, config, logger=logger)
    except FATAL_ERRORS as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
