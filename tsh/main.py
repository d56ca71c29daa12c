#!/usr/bin/env python3
"""
tsh - A minimal UNIX teaching shell

This is the main entry point for tsh.

Usage:
    tsh                      interactive shell
    tsh -c "ls | wc -l"      run one command line and exit
    tsh --config tsh.json    load settings from a JSON file

Author: YSNRFD
Version: 1.0.0
"""

import argparse
import os
import sys
from typing import List, Optional

from tsh import __version__
from tsh.core.config_loader import Config, ConfigLoader
from tsh.exceptions import ConfigError
from tsh.logger import Logger, LogLevel, get_logger
from tsh.shell.shell import create_shell


CONFIG_ENV_VAR = "TSH_CONFIG"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tsh",
        description="A minimal shell with | pipes and ; sequencing."
    )
    parser.add_argument(
        "-c", dest="command", metavar="COMMAND",
        help="run COMMAND (newline-separated lines allowed) and exit"
    )
    parser.add_argument(
        "--config", metavar="PATH",
        help=f"JSON configuration file (default: ${CONFIG_ENV_VAR})"
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="log at DEBUG level to stderr"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def load_config(path: Optional[str]) -> Config:
    """
    Load configuration from ``path`` or ``$TSH_CONFIG``.

    Falls back to defaults when neither is given.

    Raises:
        ConfigError: If the file cannot be used
    """
    loader = ConfigLoader()
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if path:
        return loader.load(path)
    return loader.config


def setup_logging(config: Config, debug: bool = False) -> None:
    """
    Initialize logging from the ``logging`` config section.

    Raises:
        ConfigError: If the log file cannot be opened
    """
    log_config = config.logging
    level = LogLevel.DEBUG if debug else LogLevel.from_name(log_config.level)
    try:
        Logger.initialize(
            level=level,
            log_file=log_config.log_file,
            use_colors=log_config.use_colors,
            console_output=log_config.console_output,
        )
    except OSError as e:
        raise ConfigError(
            f"Cannot open log file: {e}",
            key="logging.log_file",
            context={'log_file': log_config.log_file}
        ) from e


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for tsh.

    Startup sequence:
    1. Parse arguments
    2. Load configuration
    3. Initialize logging
    4. Run the command or the interactive loop
    """
    args = build_arg_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        setup_logging(config, debug=args.debug)
    except ConfigError as e:
        print(f"tsh: {e}", file=sys.stderr)
        return 1

    logger = get_logger('main')
    logger.debug("Starting", context={'version': __version__})

    interactive = args.command is None
    shell = create_shell(config=config.shell, interactive=interactive)

    try:
        if interactive:
            shell.run()
        else:
            shell.run_script(args.command)
    finally:
        logger.debug("Exiting")
        Logger.shutdown()

    return 0


if __name__ == '__main__':
    sys.exit(main())
