"""POSIX readiness primitives used by the I/O models.

Everything that touches descriptor flags, ``select`` or the SIGIO handler
goes through :class:`PosixIO` so the models can be driven against a
recording stand-in in tests.
"""

from __future__ import annotations

import fcntl
import logging
import os
import select
import signal
import struct
import sys
import time
from enum import Enum
from typing import Callable, List, Optional, Tuple

LOGGER = logging.getLogger("socktest.osio")

# ioctl request numbers are not exported by the socket module.
SIOCATMARK = 0x40047307 if sys.platform == "darwin" else 0x8905

O_NONBLOCK = os.O_NONBLOCK
O_ASYNC = getattr(os, "O_ASYNC", getattr(os, "FASYNC", 0o20000))

Notice = Callable[[str], None]


class ReadyCondition(Enum):
    """Readiness a descriptor needs before a call is expected not to block."""

    READ = "read"
    WRITE = "write"
    EXCEPT = "except"


class SigioChannel:
    """One-shot flag raised by the SIGIO handler and drained by the wait loop."""

    def __init__(
        self,
        *,
        notice: Optional[Notice] = None,
        on_unexpected: Optional[Notice] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._received = False
        self._notice = notice
        self._on_unexpected = on_unexpected
        self._sleep = sleep

    def clear(self) -> None:
        self._received = False

    def post(self) -> None:
        self._received = True

    def is_set(self) -> bool:
        return self._received

    def wait(self, timeout: float) -> bool:
        if self._received:
            return True
        self._sleep(timeout)
        return self._received

    def active_handler(self, signum, frame) -> None:
        self.post()
        if self._notice:
            self._notice("SIGIO handler called.")

    def default_handler(self, signum, frame) -> None:
        LOGGER.warning("unexpected SIGIO")
        if self._on_unexpected:
            self._on_unexpected("Unexpected SIGIO signal.")


class PosixIO:
    """Thin wrapper over ``fcntl``/``select``/``signal`` for one process."""

    def __init__(self, *, pid: Optional[int] = None) -> None:
        self._pid = pid

    def get_flags(self, fd: int) -> int:
        return fcntl.fcntl(fd, fcntl.F_GETFL)

    def set_flag(self, fd: int, flag: int) -> None:
        flags = self.get_flags(fd)
        fcntl.fcntl(fd, fcntl.F_SETFL, flags | flag)

    def clear_flag(self, fd: int, flag: int) -> None:
        flags = self.get_flags(fd)
        fcntl.fcntl(fd, fcntl.F_SETFL, flags & ~flag)

    def claim_ownership(self, fd: int) -> None:
        """Direct SIGIO for ``fd`` at this process (``F_SETOWN``)."""
        fcntl.fcntl(fd, fcntl.F_SETOWN, self._pid if self._pid is not None else os.getpid())

    def wait_ready(self, fd: int, condition: ReadyCondition, timeout: float) -> Tuple[List[int], List[int], List[int]]:
        """Run one ``select`` with ``fd`` in the set matching ``condition``."""
        rlist: List[int] = [fd] if condition is ReadyCondition.READ else []
        wlist: List[int] = [fd] if condition is ReadyCondition.WRITE else []
        xlist: List[int] = [fd] if condition is ReadyCondition.EXCEPT else []
        readable, writable, exceptional = select.select(rlist, wlist, xlist, timeout)
        return list(readable), list(writable), list(exceptional)

    def install_sigio_handler(self, handler) -> None:
        signal.signal(signal.SIGIO, handler)

    def at_mark(self, fd: int) -> bool:
        raw = fcntl.ioctl(fd, SIOCATMARK, struct.pack("i", 0))
        return struct.unpack("i", raw)[0] != 0


__all__ = ["ReadyCondition", "SigioChannel", "PosixIO", "O_NONBLOCK", "O_ASYNC", "SIOCATMARK"]
