"""Persistent command history for the socktest prompt."""

from __future__ import annotations

import logging
from collections import deque
from pathlib import Path
from typing import Deque, Iterable, List, Optional

LOGGER = logging.getLogger("socktest.history")


class HistoryStore:
    """Prompt history kept in a plain text file, newest entry last.

    New entries are appended to the file; once the limit is reached the file
    is rewritten so it never holds more than ``limit`` lines.
    """

    def __init__(self, path: Optional[str], *, limit: int = 1000) -> None:
        self.path = Path(path).expanduser() if path else None
        self.entries: Deque[str] = deque(maxlen=max(1, int(limit or 1)))
        if self.path:
            self.entries.extend(self._read())

    @property
    def limit(self) -> int:
        return self.entries.maxlen or 1

    def _read(self) -> List[str]:
        assert self.path is not None
        try:
            with self.path.open(encoding="utf-8") as handle:
                return [line.strip() for line in handle if line.strip()]
        except FileNotFoundError:
            return []
        except OSError as exc:
            LOGGER.debug("history %s unreadable: %s", self.path, exc)
            return []

    def append(self, line: str) -> None:
        text = line.strip()
        if not text or (self.entries and self.entries[-1] == text):
            return
        overflow = len(self.entries) == self.limit
        self.entries.append(text)
        self._write(rewrite=overflow, latest=text)

    def extend(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.append(line)

    def _write(self, *, rewrite: bool, latest: str) -> None:
        if not self.path:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if rewrite:
                self.path.write_text("".join(f"{entry}\n" for entry in self.entries), encoding="utf-8")
            else:
                with self.path.open("a", encoding="utf-8") as handle:
                    handle.write(f"{latest}\n")
        except OSError as exc:
            LOGGER.warning("could not write history %s: %s", self.path, exc)

    def snapshot(self) -> List[str]:
        return list(self.entries)
