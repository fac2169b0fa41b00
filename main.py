"""
Entry point for HATETRIS.

Supports three modes:
  - play:  Play in a pygame window.
  - watch: Watch a replay play back in a pygame window.
  - check: Play a replay to its end without a window and print the result.

Usage:
    python main.py --mode play
    python main.py --mode play --config config/hatetris.yaml
    python main.py --mode watch --replay "AAAA AAAA AAAA A2"
    python main.py --mode check --moves DDDDDDDDDDDDDDDDDD
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys

from hatetris.config import GameConfig, load_config
from hatetris.errors import ConfigError

DEFAULT_CONFIG_PATH = pathlib.Path("config/hatetris.yaml")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Namespace with mode, config, replay, moves, legacy and verbose attributes.
    """
    parser = argparse.ArgumentParser(
        description="HATETRIS: the piece you get is the worst one available.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--mode",
        type=str,
        choices=["play", "watch", "check"],
        default="play",
        help="Run mode: 'play' (manual play), 'watch' (replay in a window), "
        "'check' (replay without a window).",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Path to the YAML configuration file (default: {DEFAULT_CONFIG_PATH} if present).",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--replay",
        type=str,
        default=None,
        help="Hex replay string (for 'watch' and 'check' modes).",
    )
    source.add_argument(
        "--moves",
        type=str,
        default=None,
        help="Moves as L/R/D/U letters (for 'watch' and 'check' modes).",
    )
    parser.add_argument(
        "--legacy",
        action="store_true",
        help="Decode --replay the way the published HATETRIS records were saved.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log ignored inputs and other diagnostics to stderr.",
    )
    return parser.parse_args()


def resolve_config(config_path: str | None) -> GameConfig:
    """Load the requested config, the default file if it exists, or the defaults."""
    if config_path is not None:
        return load_config(config_path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return GameConfig()


def main() -> None:
    """Main entry point: parse args, load config, and dispatch to the selected mode."""
    args = parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = resolve_config(args.config)
        if args.legacy:
            config.legacy_replays = True

        moves = None
        if args.moves is not None:
            from hatetris.replay_codec import parse_moves
            moves = parse_moves(args.moves)

        if args.mode == "play":
            from hatetris.play import play_manual
            play_manual(config)

        elif args.mode in ("watch", "check"):
            if args.replay is None and moves is None:
                print(f"Error: --replay or --moves is required for '{args.mode}' mode.", file=sys.stderr)
                sys.exit(1)
            if args.mode == "watch":
                from hatetris.play import watch_replay
                watch_replay(config, replay=args.replay, moves=moves)
            else:
                from hatetris.play import check_replay
                check_replay(config, replay=args.replay, moves=moves)

        else:
            print(f"Unknown mode: {args.mode}", file=sys.stderr)
            sys.exit(1)
    except (ConfigError, FileNotFoundError, ImportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
