"""Execution engine: the retry protocol shared by every model-sensitive command."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from .models import Attempt, ReadyCondition

if TYPE_CHECKING:  # pragma: no cover
    from .context import HarnessContext

LOGGER = logging.getLogger("socktest.engine")


@dataclass
class RawResult:
    """Syscall-style outcome of one socket call.

    ``value`` follows the C convention (byte count, descriptor, 0 or -1) and
    ``error_code`` carries errno on failure.  ``payload`` keeps whatever the
    Python call returned so commands can render it.
    """

    value: int
    error_code: Optional[int] = None
    payload: Any = None

    @property
    def ok(self) -> bool:
        return self.error_code is None and self.value >= 0

    def describe_error(self) -> str:
        code = self.error_code if self.error_code is not None else 0
        return f"API returned {self.value}.  Error {code} passed in errno - {os.strerror(code)}."


Operation = Callable[[], RawResult]


def capture(call: Callable[[], Any], *, value: Union[int, Callable[[Any], int], None] = None) -> RawResult:
    """Run ``call`` and fold its return value or ``OSError`` into a :class:`RawResult`."""
    try:
        payload = call()
    except OSError as exc:
        return RawResult(-1, exc.errno if exc.errno is not None else 0)
    if callable(value):
        number = value(payload)
    elif value is not None:
        number = value
    elif isinstance(payload, int):
        number = payload
    else:
        number = 0
    return RawResult(int(number), None, payload)


class ExecutionEngine:
    """Drives pre-call / operation / post-call until the active model is satisfied."""

    def __init__(self, ctx: "HarnessContext") -> None:
        self.ctx = ctx
        self.last_attempts = 0

    def perform(self, condition: ReadyCondition, operation: Operation) -> Optional[RawResult]:
        """Run ``operation`` under the active model.

        Returns ``None`` when the operator cancelled before the call could be
        made; the underlying socket call is then never issued.
        """
        ctx = self.ctx
        fd = ctx.registry.current_slot().fileno()
        model = ctx.model
        attempt = Attempt(condition=condition, fd=fd)
        self.last_attempts = 0
        while True:
            model.pre_call(ctx, attempt)
            if ctx.interrupted:
                model.abandon(ctx, attempt)
                LOGGER.debug("%s operation on fd %d abandoned", model.value, fd)
                return None
            self.last_attempts += 1
            result = operation()
            if model.post_call(ctx, attempt, result):
                LOGGER.debug(
                    "%s operation on fd %d finished after %d attempt(s): value=%d errno=%s",
                    model.value,
                    fd,
                    self.last_attempts,
                    result.value,
                    result.error_code,
                )
                return result
            LOGGER.debug("%s operation on fd %d not complete; retrying", model.value, fd)


__all__ = ["RawResult", "ExecutionEngine", "capture", "Operation"]
