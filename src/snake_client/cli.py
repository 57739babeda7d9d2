"""CLI launcher for the Snake Arena client."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-arena",
        description="Multiplayer snake client with local movement prediction.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- run ---
    run_p = sub.add_parser("run", help="Connect to a server and play.")
    run_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override its values).",
    )
    run_p.add_argument("--url", type=str, default=None, help="Server websocket URL.")
    run_p.add_argument("--tick-ms", type=int, default=None)
    run_p.add_argument("--tile-size", type=int, default=None)
    run_p.add_argument("--width", type=int, default=None, help="Canvas width.")
    run_p.add_argument("--height", type=int, default=None, help="Canvas height.")
    run_p.add_argument("--seed", type=int, default=None)
    run_p.add_argument("--crash-sound", type=str, default=None)
    run_p.add_argument("--food-sound", type=str, default=None)

    # --- dump-config ---
    dump_p = sub.add_parser(
        "dump-config", help="Write the default config as JSON.",
    )
    dump_p.add_argument(
        "path", nargs="?", default="snake-arena.json",
        help="Destination file.",
    )

    return parser


def _resolve_config(args: argparse.Namespace):
    from snake_client.config import ClientConfig

    config = ClientConfig.load(args.config) if args.config else ClientConfig()

    flag_map = {
        "url": "server_url",
        "tick_ms": "tick_interval_ms",
        "tile_size": "tile_size",
        "width": "canvas_width",
        "height": "canvas_height",
        "seed": "seed",
        "crash_sound": "crash_sound",
        "food_sound": "food_eaten_sound",
    }
    overrides = {
        cfg_name: getattr(args, cli_name)
        for cli_name, cfg_name in flag_map.items()
        if getattr(args, cli_name, None) is not None
    }
    if overrides:
        d = config.to_dict()
        d.update(overrides)
        config = ClientConfig(**d)
    return config


def _run(args: argparse.Namespace) -> int:
    from snake_client.client import run_client

    try:
        config = _resolve_config(args)
    except (ValueError, TypeError, OSError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    try:
        asyncio.run(run_client(config))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    return 0


def _dump_config(args: argparse.Namespace) -> int:
    from snake_client.config import ClientConfig

    ClientConfig().save(args.path)
    print(f"Wrote default config to {args.path}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-arena`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "run": _run,
        "dump-config": _dump_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
