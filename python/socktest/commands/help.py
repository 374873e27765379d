"""Help command."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .base import Command
from ..context import HarnessContext

if TYPE_CHECKING:  # pragma: no cover
    from . import CommandRegistry


class HelpCommand(Command):
    def __init__(self) -> None:
        super().__init__("help", "Show available commands", aliases=("?",), usage="help")
        self._registry: CommandRegistry | None = None

    def bind(self, registry: "CommandRegistry") -> None:
        self._registry = registry

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        registry = self._registry
        if not registry:
            return 1
        if ctx.json_output:
            usage = {command.name: command.usage or command.name for command in registry.list_commands()}
            ctx.result("help", data={"commands": usage})
            return 0
        print("socktest understands these commands:")
        for command in registry.list_commands():
            print(command.format_help())
        return 0
