"""Command base classes for socktest."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import List, Sequence

from ..context import HarnessContext
from ..engine import RawResult


@dataclass
class Command:
    """Abstract command description."""

    name: str
    description: str
    aliases: Sequence[str] = field(default_factory=tuple)
    usage: str = ""

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        raise NotImplementedError("Command must implement run()")

    def format_help(self) -> str:
        return f"  {self.usage or self.name:<44} {self.description}"

    def new_parser(self) -> argparse.ArgumentParser:
        return argparse.ArgumentParser(prog=self.name, usage=self.usage or None, add_help=False)


def report_failure(ctx: HarnessContext, result: RawResult) -> int:
    """Report a failed socket call the way every command does."""
    ctx.error(result.describe_error(), data={"value": result.value, "errno": result.error_code})
    return 2
