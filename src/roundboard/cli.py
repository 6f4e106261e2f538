# src/roundboard/cli.py

"""Command line entry point for closing a round from cron.

Usage:
    roundboard-close-round            # snapshot winners, then reset
    roundboard-close-round --reset-only   # redo the reset after a partial close
"""

import argparse
import asyncio
import logging
import os
import sys

from .db.session import engine, session_scope
from .exceptions import RoundboardError
from .services import round_service

logger = logging.getLogger("roundboard.cli")


async def _run(reset_only: bool) -> None:
    try:
        async with session_scope() as db:
            if reset_only:
                count = await round_service.reset_scores(db)
                logger.info("Reset %d users", count)
                return

            winner = await round_service.close_round(db)
            logger.info(
                "Closed round %d at %s",
                winner.round_number,
                winner.round_end.isoformat(),
            )
            for entry in winner.top_scores:
                logger.info("  score  %-20s %s", entry["username"], entry["score"])
            for entry in winner.top_coins:
                logger.info("  coins  %-20s %s", entry["username"], entry["coinsTotal"])
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="roundboard-close-round",
        description="Save the current round's winners and reset all scores.",
    )
    parser.add_argument(
        "--reset-only",
        action="store_true",
        help="only reset scores and coins, without saving winners",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(_run(args.reset_only))
    except RoundboardError as e:
        logger.error("Round close failed: %s", e.message, extra=e.details)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
