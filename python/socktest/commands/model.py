"""Model selection command."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import HarnessContext
from ..errors import UnknownModel
from ..models import IOModel


class ModelCommand(Command):
    def __init__(self) -> None:
        names = " | ".join(model.value for model in IOModel)
        super().__init__("model", "Select the I/O model (default blocking)", usage=f"model [{names}]")

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        if len(argv) > 1:
            ctx.error(f"Usage:  {self.usage}.")
            return 1
        try:
            model = ctx.set_model(argv[0] if argv else None)
        except UnknownModel as exc:
            ctx.error(str(exc))
            return 1
        ctx.verbose(f"Model is now {model.value}.")
        if ctx.json_output:
            ctx.result(f"model {model.value}", data={"model": model.value})
        return 0
