"""socktest CLI entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

from .commands import build_registry
from .config import BLOCK_THRESHOLD_S, HarnessConfig
from .context import HarnessContext
from .history import HistoryStore
from .interrupts import InterruptHandlers
from .repl import HarnessREPL

LOG = logging.getLogger("socktest.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive socket API test harness")
    parser.add_argument("-v", "--verbose", action="store_true", help="Report progress of every call")
    parser.add_argument("--json", action="store_true", help="Emit JSON output when supported")
    parser.add_argument(
        "--block-threshold",
        type=float,
        default=BLOCK_THRESHOLD_S,
        help=f"Seconds after which a call counts as blocked (default {BLOCK_THRESHOLD_S})",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("SOCKTEST_LOG", "WARNING"),
        help="Logging level (default WARNING)",
    )
    parser.add_argument(
        "-c",
        "--command",
        action="append",
        help="Execute a command non-interactively; may be repeated",
    )
    parser.add_argument(
        "--history",
        type=Path,
        default=Path.home() / ".socktest_history",
        help="Path to command history file (prompt_toolkit mode)",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    try:
        config = HarnessConfig(verbose=args.verbose, json_output=args.json, block_threshold=args.block_threshold)
    except ValueError as exc:
        parser.error(str(exc))
    ctx = HarnessContext(config=config)
    registry = build_registry()
    handlers = InterruptHandlers(ctx.interrupt)
    handlers.install()
    ctx.install_default_sigio()
    try:
        if args.command:
            repl = HarnessREPL(ctx, registry)
            return repl.run_script(args.command)
        repl = HarnessREPL(ctx, registry, history_store=HistoryStore(str(args.history)))
        return repl.run()
    finally:
        ctx.shutdown()
        handlers.restore()
        LOG.debug("socktest exiting")


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
