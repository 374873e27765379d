"""Interactive prompt for socktest."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from .commands import CommandRegistry
from .completion import HarnessCompleter
from .context import HarnessContext
from .errors import HarnessError
from .history import HistoryStore
from .parser import split_command

LOGGER = logging.getLogger("socktest.repl")


def execute_argv(ctx: HarnessContext, registry: CommandRegistry, argv: List[str]) -> int:
    """Dispatch one tokenised command; configuration errors never escape."""
    if not argv:
        return 0
    cmd_name, *cmd_args = argv
    if cmd_args and cmd_args[-1].startswith("#parse-error"):
        ctx.error(f"Parse error: {cmd_args[-1].split(':', 1)[-1]}")
        return 1
    command = registry.get(cmd_name)
    if not command:
        ctx.error("Unrecognized command.")
        return 1
    ctx.interrupt.clear()
    try:
        return command.run(ctx, cmd_args)
    except SystemExit:
        raise
    except HarnessError as exc:
        ctx.error(str(exc))
        return 1
    except Exception as exc:
        LOGGER.exception("command failed")
        ctx.error(f"Command '{cmd_name}' failed: {exc}")
        return 1


def execute_line(ctx: HarnessContext, registry: CommandRegistry, line: str) -> int:
    return execute_argv(ctx, registry, split_command(line.strip()))


class HarnessREPL:
    """prompt_toolkit read-eval loop; the prompt shows the model and current slot."""

    def __init__(
        self,
        ctx: HarnessContext,
        registry: CommandRegistry,
        *,
        history_store: Optional[HistoryStore] = None,
        session: Optional[PromptSession] = None,
    ) -> None:
        self.ctx = ctx
        self.registry = registry
        self.history_store = history_store
        self._session = session

    def _build_session(self) -> PromptSession:
        history = InMemoryHistory()
        if self.history_store:
            for entry in self.history_store.snapshot():
                history.append_string(entry)
        completer = HarnessCompleter(self.ctx, self.registry)
        return PromptSession(history=history, completer=completer, complete_while_typing=False)

    def run(self) -> int:
        session = self._session or self._build_session()
        while True:
            try:
                with patch_stdout():
                    line = session.prompt(self.ctx.prompt())
            except KeyboardInterrupt:
                continue
            except EOFError:
                print()
                return 0
            if not line.strip():
                continue
            self._record_history(line)
            try:
                execute_line(self.ctx, self.registry, line)
            except SystemExit as exc:
                return int(exc.code or 0)

    def run_script(self, lines: Iterable[str]) -> int:
        """Execute commands without prompting; stops at ``quit``."""
        status = 0
        for line in lines:
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            try:
                status = execute_line(self.ctx, self.registry, line)
            except SystemExit as exc:
                return int(exc.code or 0)
        return status

    def _record_history(self, entry: str) -> None:
        if self.history_store:
            self.history_store.append(entry)
