"""Entry-point for launching the CLI application."""
from __future__ import annotations

import argparse
import logging
from typing import Sequence

from .presentation.cli.app import main as cli_main


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wasteland", description="Barter your way across the wasteland.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a new game (random if omitted).")
    parser.add_argument("--balance", default=None, help="Balance profile id from balance.json.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Run the CLI presentation layer."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cli_main(seed=args.seed, balance_id=args.balance)


if __name__ == "__main__":
    main()
