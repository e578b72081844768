"""
mpdox - Entry point

Parses arguments, then either prints the default configuration or starts the
interactive client.
"""

import argparse
import sys
from pathlib import Path

from mpdox import __version__
from mpdox.core.config import LOG_LEVELS, create_default_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mpdox",
        description="mpdox - terminal client for MPD",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config.toml (default: $XDG_CONFIG_HOME/mpdox/config.toml)",
    )
    parser.add_argument(
        "-l",
        "--log",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level, overrides [logging] level from the config",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")
    subparsers.add_parser("config", help="Print the default configuration and exit")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the mpdox command."""
    args = build_parser().parse_args(argv)

    if args.subcommand == "config":
        sys.stdout.write(create_default_config())
        sys.exit(0)

    # Delegate to main interactive mode
    from .main import interactive_mode

    sys.exit(interactive_mode(config_path=args.config, log_level=args.log))


if __name__ == "__main__":
    main()
