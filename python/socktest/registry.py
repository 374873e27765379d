"""Fixed-capacity table of open test sockets."""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .config import MAX_SOCKETS
from .errors import AllSlotsBusy, SlotNotOpen

LOGGER = logging.getLogger("socktest.registry")


@dataclass
class SocketSlot:
    """One entry of the socket table; ``handle`` is ``None`` while unused."""

    index: int
    handle: Optional[socket.socket] = None
    domain: int = socket.AF_INET6
    sock_type: int = socket.SOCK_STREAM
    protocol: int = 0

    @property
    def in_use(self) -> bool:
        return self.handle is not None

    def open_socket(self) -> socket.socket:
        """The open socket, or :class:`SlotNotOpen` when the slot is unused."""
        if self.handle is None:
            raise SlotNotOpen(self.index)
        return self.handle

    def fileno(self) -> int:
        return self.open_socket().fileno()


class SocketRegistry:
    """Ordered slots plus the index of the slot commands operate on."""

    def __init__(self, capacity: int = MAX_SOCKETS) -> None:
        self.capacity = capacity
        self._slots: List[SocketSlot] = [SocketSlot(index) for index in range(capacity)]
        self._current = 0

    @property
    def current(self) -> int:
        return self._current

    def allocate(self) -> int:
        """Return the first unused slot index without reserving it."""
        for slot in self._slots:
            if not slot.in_use:
                return slot.index
        raise AllSlotsBusy(self.capacity)

    def bind(
        self,
        index: int,
        handle: socket.socket,
        domain: Optional[int] = None,
        sock_type: Optional[int] = None,
        protocol: Optional[int] = None,
    ) -> SocketSlot:
        slot = self._slots[index]
        slot.handle = handle
        slot.domain = handle.family if domain is None else domain
        slot.sock_type = handle.type if sock_type is None else sock_type
        slot.protocol = handle.proto if protocol is None else protocol
        LOGGER.debug("slot %d bound to fd %d", index, handle.fileno())
        return slot

    def release(self, index: int) -> Optional[socket.socket]:
        slot = self.get(index)
        handle = slot.handle
        slot.handle = None
        LOGGER.debug("slot %d released", index)
        return handle

    def select(self, index: int) -> SocketSlot:
        slot = self.get(index)
        self._current = index
        return slot

    def get(self, index: int) -> SocketSlot:
        """Return the open slot at ``index`` or raise :class:`SlotNotOpen`."""
        if not 0 <= index < self.capacity:
            raise SlotNotOpen(index)
        slot = self._slots[index]
        if not slot.in_use:
            raise SlotNotOpen(index)
        return slot

    def current_slot(self) -> SocketSlot:
        return self.get(self._current)

    def open_slots(self) -> Iterator[SocketSlot]:
        return (slot for slot in self._slots if slot.in_use)

    def close_all(self) -> List[Tuple[int, OSError]]:
        failures: List[Tuple[int, OSError]] = []
        for slot in self._slots:
            handle = slot.handle
            if handle is None:
                continue
            slot.handle = None
            try:
                handle.close()
            except OSError as exc:
                failures.append((slot.index, exc))
        return failures

    def __len__(self) -> int:
        return sum(1 for _ in self.open_slots())
