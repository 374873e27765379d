"""prompt_toolkit completer for socktest."""

from __future__ import annotations

import shlex
from typing import Dict, Iterable, List, Mapping, Optional

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .commands import CommandRegistry
from .commands.connection import SHUTDOWN_NAMES
from .commands.options import LEVEL_NAMES, OPTION_NAMES
from .commands.slots import DOMAIN_NAMES, TYPE_NAMES
from .commands.transfer import FLAG_NAMES
from .context import HarnessContext
from .models import IOModel

MODEL_NAMES = [model.value for model in IOModel]

# values offered after a flag, keyed by command then flag
FLAG_VALUES: Dict[str, Dict[str, Iterable[str]]] = {
    "socket": {"-d": DOMAIN_NAMES, "-t": TYPE_NAMES},
    "recvmsg": {"-f": FLAG_NAMES},
    "sendmsg": {"-f": FLAG_NAMES},
}

# values offered by argument position
POSITIONAL_VALUES: Dict[str, List[Iterable[str]]] = {
    "model": [MODEL_NAMES],
    "shutdown": [SHUTDOWN_NAMES],
    "setsockopt": [LEVEL_NAMES, OPTION_NAMES],
    "getsockopt": [LEVEL_NAMES, OPTION_NAMES],
}


def _normalise_tokens(text: str) -> List[str]:
    if not text:
        return []
    try:
        tokens = shlex.split(text, posix=True)
        trailing = text[-1].isspace()
    except ValueError:
        tokens = text.strip().split()
        trailing = text.endswith((" ", "\t"))
    if trailing:
        tokens.append("")
    return tokens


class HarnessCompleter(Completer):
    """Completes command names and the named values each command accepts."""

    def __init__(self, ctx: HarnessContext, registry: CommandRegistry) -> None:
        self.ctx = ctx
        self.registry = registry

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        tokens = _normalise_tokens(document.text_before_cursor)
        if len(tokens) <= 1:
            prefix = tokens[0] if tokens else ""
            candidates: Iterable[str] = self._command_names()
        else:
            prefix = tokens[-1]
            candidates = self._value_candidates(tokens) or []
        for entry in self._format_candidates(candidates, prefix):
            yield Completion(entry, start_position=-len(prefix))

    def _command_names(self) -> List[str]:
        names: List[str] = []
        for command in self.registry.list_commands():
            names.append(command.name)
            names.extend(command.aliases)
        return names

    def _value_candidates(self, tokens: List[str]) -> Optional[Iterable[str]]:
        command = self.registry.get(tokens[0].lower())
        if command is None:
            return None
        if command.name == "use" and len(tokens) == 2:
            return [str(slot.index) for slot in self.ctx.registry.open_slots()]
        previous = tokens[-2].lower()
        by_flag: Mapping[str, Iterable[str]] = FLAG_VALUES.get(command.name, {})
        if previous in by_flag:
            return by_flag[previous]
        positional = POSITIONAL_VALUES.get(command.name)
        if not positional:
            return None
        position = len([token for token in tokens[1:-1] if not token.startswith("-")])
        if position < len(positional):
            return positional[position]
        return None

    @staticmethod
    def _format_candidates(candidates: Iterable[str], prefix: str = "") -> List[str]:
        needle = prefix.lower()
        ordered = [c for c in candidates if c.lower().startswith(needle)]
        return sorted(dict.fromkeys(ordered))
