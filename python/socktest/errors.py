"""Exception types raised by the socktest harness."""

from __future__ import annotations


class HarnessError(RuntimeError):
    """Operator-facing configuration error; aborts only the current command."""


class AllSlotsBusy(HarnessError):
    def __init__(self, capacity: int) -> None:
        super().__init__(f"All {capacity} sockets are in use.")
        self.capacity = capacity


class SlotNotOpen(HarnessError):
    def __init__(self, index: int) -> None:
        super().__init__(f"Socket number {index} not open.")
        self.index = index


class UnknownModel(HarnessError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unrecognized model {name}")
        self.name = name


class AddressError(HarnessError):
    """Raised when a host address cannot be resolved."""


__all__ = ["HarnessError", "AllSlotsBusy", "SlotNotOpen", "UnknownModel", "AddressError"]
