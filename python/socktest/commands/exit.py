"""Quit command."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import HarnessContext


class QuitCommand(Command):
    def __init__(self) -> None:
        super().__init__("quit", "Close all sockets and exit", aliases=("exit", "q"), usage="quit")

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        ctx.shutdown()
        raise SystemExit(0)
