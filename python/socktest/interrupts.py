"""Operator cancellation flag and the signal handlers that raise it."""

from __future__ import annotations

import logging
import signal
from typing import Callable, Dict, Optional

LOGGER = logging.getLogger("socktest.interrupts")

Notice = Callable[[str], None]


class InterruptFlag:
    """Set asynchronously by a signal handler, polled by the wait loops."""

    def __init__(self) -> None:
        self._set = False
        self.reason: Optional[str] = None

    def set(self, reason: str = "interrupt") -> None:
        self._set = True
        self.reason = reason

    def clear(self) -> None:
        self._set = False
        self.reason = None

    def is_set(self) -> bool:
        return self._set

    def __bool__(self) -> bool:
        return self._set


class InterruptHandlers:
    """Install SIGINT/SIGTSTP/SIGPIPE handlers that raise an :class:`InterruptFlag`."""

    def __init__(self, flag: InterruptFlag, *, notice: Optional[Notice] = None) -> None:
        self.flag = flag
        self._notice = notice or (lambda message: print(message))
        self._original: Dict[int, object] = {}

    def install(self) -> None:
        self._hook(signal.SIGINT, self._on_user_interrupt)
        if hasattr(signal, "SIGTSTP"):
            self._hook(signal.SIGTSTP, self._on_user_interrupt)
        if hasattr(signal, "SIGPIPE"):
            self._hook(signal.SIGPIPE, self._on_broken_pipe)

    def restore(self) -> None:
        for signum, handler in self._original.items():
            signal.signal(signum, handler)
        self._original.clear()

    def _hook(self, signum: int, handler) -> None:
        self._original[signum] = signal.signal(signum, handler)

    def _on_user_interrupt(self, signum, frame) -> None:
        LOGGER.debug("received %s", signal.Signals(signum).name)
        self._notice("User interrupt received.")
        self.flag.set("user")

    def _on_broken_pipe(self, signum, frame) -> None:
        LOGGER.debug("received %s", signal.Signals(signum).name)
        self._notice("Broken pipe signal received.")
        self.flag.set("pipe")

    def __enter__(self) -> "InterruptHandlers":
        self.install()
        return self

    def __exit__(self, *exc_info) -> None:
        self.restore()
