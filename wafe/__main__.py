"""Serve a local arena session for a browser renderer."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace

import uvicorn

from . import config
from .runner import SimulationRunner
from .scores import HighScoreBoard, JsonFileStore, MemoryStore
from .server import create_app
from .session import GameSession
from .spawn import POLICIES, SCATTER


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the elemental arena simulation server.")
    parser.add_argument("--host", type=str, default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument(
        "--seed",
        type=int,
        default=config.SEED if config.SEED >= 0 else None,
        help="Seed for a reproducible session",
    )
    parser.add_argument("--bots", type=int, default=None, help="Override the number of bots")
    parser.add_argument(
        "--spawn",
        type=str,
        default=SCATTER.name,
        choices=sorted(POLICIES),
        help="Bot placement strategy",
    )
    parser.add_argument(
        "--scores",
        type=str,
        default=config.SCORES_PATH,
        help="JSON file holding the high score list (empty string keeps scores in memory)",
    )
    parser.add_argument(
        "--static-dir",
        type=str,
        default=config.STATIC_DIR,
        help="Directory with the browser renderer's index.html",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=config.LOG_LEVEL.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    world = config.WorldConfig.from_env()
    if args.bots is not None:
        world = replace(world, bot_count=max(0, args.bots))

    store = JsonFileStore(args.scores) if args.scores else MemoryStore()
    session = GameSession(
        world,
        seed=args.seed,
        scores=HighScoreBoard(store),
        spawn_policy=POLICIES[args.spawn],
    )
    app = create_app(SimulationRunner(session), static_dir=args.static_dir)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
