"""
command-line interface for python-env.

a child process cannot change its parent shell's environment, so
`activate` prints shell assignments meant to be evaluated:

    eval "$(python-env activate)"
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import os
import shlex
import sys
from collections.abc import Sequence
from pathlib import Path

from .config import Config, ConfigError
from .core import NOTIFY_PREFIX, PythonEnv
from .health import check_health
from .models import EnvironmentInfo


def create_parser() -> argparse.ArgumentParser:
    """
    create the argument parser for the cli.

    returns: `argparse.ArgumentParser`
        configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="python-env",
        description="detect and activate the virtual environment of a uv or poetry project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  eval "$(python-env activate)"          # activate in the current shell
  python-env activate --json src/        # resolve from a subdirectory, as json
  python-env info                        # show the environment that would be used
  python-env health                      # check installed tools and project state
        """,
    )
    _ = parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )
    _ = parser.add_argument(
        "--config",
        type=str,
        help="configuration file (default: $XDG_CONFIG_HOME/python-env/config.toml)",
    )
    _ = parser.add_argument(
        "--debug",
        action="store_true",
        dest="global_debug",
        help="enable debug logging for troubleshooting",
    )

    subparsers = parser.add_subparsers(dest="command", help="available commands")

    common = argparse.ArgumentParser(add_help=False)
    _ = common.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="directory to search from (default: current directory)",
    )
    _ = common.add_argument(
        "--debug",
        action="store_true",
        help="enable debug logging for troubleshooting",
    )

    activate_parser = subparsers.add_parser(
        "activate",
        parents=[common],
        help="print shell exports for the project's environment",
    )
    _ = activate_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="output in json format (default: shell exports)",
    )
    _ = activate_parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="do not print notifications to stderr",
    )

    info_parser = subparsers.add_parser(
        "info",
        parents=[common],
        help="show the environment resolved for the project",
    )
    _ = info_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="output in json format (default: text)",
    )

    _ = subparsers.add_parser(
        "health",
        parents=[common],
        help="check installed tools and project state",
    )

    return parser


def print_notification(message: str) -> None:
    """notification sink writing to stderr, keeping stdout evaluable."""
    print(f"{NOTIFY_PREFIX} {message}", file=sys.stderr)


def format_exports(info: EnvironmentInfo) -> str:
    """
    format an environment as shell export statements.

    arguments:
        `info: EnvironmentInfo`
            environment to export

    returns: `str`
        one `export NAME=value` line per variable, values shell-quoted
    """
    variables = {
        "VIRTUAL_ENV": str(info.virtual_env),
        "PATH": info.path,
        "PYTHON": str(info.python),
    }
    return "\n".join(f"export {name}={shlex.quote(value)}" for name, value in variables.items())


def _resolve(config: Config, directory: Path, quiet: bool) -> EnvironmentInfo | None:
    """run the pipeline against a scratch copy of this process's environment."""
    if quiet:
        config = dataclasses.replace(config, notify=False)
    env = PythonEnv(config, environ=dict(os.environ), notify=print_notification)
    if not env.setup_for_current_directory(directory):
        return None
    return env.get_info()


def handle_activate(args: argparse.Namespace, config: Config) -> int:
    """
    handle the activate command.

    returns: `int`
        exit code (0 = activated, 1 = no environment found)
    """
    directory = Path(str(getattr(args, "directory", ".")))
    json_output = bool(getattr(args, "json_output", False))
    quiet = bool(getattr(args, "quiet", False))

    info = _resolve(config, directory, quiet)
    if info is None:
        if json_output:
            print("null")
        return 1

    if json_output:
        print(json.dumps(info.as_dict(), indent=2))
    else:
        print(format_exports(info))
    return 0


def handle_info(args: argparse.Namespace, config: Config) -> int:
    """
    handle the info command.

    returns: `int`
        exit code
    """
    directory = Path(str(getattr(args, "directory", ".")))
    json_output = bool(getattr(args, "json_output", False))

    info = _resolve(config, directory, quiet=True)

    if json_output:
        print(json.dumps(info.as_dict() if info else None, indent=2))
        return 0

    if info is None:
        print("no python environment active")
        return 0

    print("python environment:")
    print(f"  virtual env: {info.virtual_env}")
    print(f"  python: {info.python}")
    print(f"  tool: {info.tool.value}")
    return 0


def handle_health(args: argparse.Namespace, config: Config) -> int:
    """
    handle the health command.

    returns: `int`
        exit code (0 = healthy, 1 = errors reported)
    """
    directory = Path(str(getattr(args, "directory", ".")))

    env = PythonEnv(dataclasses.replace(config, notify=False), environ=dict(os.environ))
    _ = env.setup_for_current_directory(directory)

    items = check_health(env, directory)
    for item in items:
        print(item)

    if any(item.level == "error" for item in items):
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """
    run the cli main entry point.

    arguments:
        `argv: Sequence[str] | None`
            command-line arguments (default: sys.argv[1:])

    returns: `int`
        exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    cmd_raw = getattr(args, "command", None)
    command = str(cmd_raw) if cmd_raw is not None else None  # pyright: ignore[reportAny]

    if not command:
        parser.print_help()
        return 2

    directory = Path(str(getattr(args, "directory", ".")))
    if not directory.is_dir():
        print(f"error: directory not found: {directory}", file=sys.stderr)
        return 1

    config_raw = getattr(args, "config", None)
    try:
        config = Config.load(str(config_raw) if config_raw is not None else None)  # pyright: ignore[reportAny]
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    # enable debug logging if requested
    debug = bool(getattr(args, "debug", False)) or bool(getattr(args, "global_debug", False))
    if debug or config.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="[%(name)s] %(message)s",
        )

    # dispatch to handler
    if command == "activate":
        return handle_activate(args, config)
    elif command == "info":
        return handle_info(args, config)
    elif command == "health":
        return handle_health(args, config)
    else:
        parser.print_help()
        return 2


if __name__ == "__main__":
    sys.exit(main())
