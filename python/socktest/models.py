"""The four I/O disciplines the harness can exercise socket calls under.

Each model contributes a pre-call step (wait for readiness, flip descriptor
flags, start the blocking window) and a post-call step (check the blocking
window, undo flags, decide whether the call has to be retried).  The models
are plain enum members; the hooks are dispatched through the tables at the
bottom of this module.
"""

from __future__ import annotations

import errno
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional

from .errors import UnknownModel
from .osio import O_ASYNC, O_NONBLOCK, ReadyCondition

if TYPE_CHECKING:  # pragma: no cover
    from .context import HarnessContext
    from .engine import RawResult

LOGGER = logging.getLogger("socktest.models")

# errno values the non-blocking model treats as "try again later".
RETRY_ERRNOS = frozenset({errno.EWOULDBLOCK, errno.EAGAIN, errno.EINPROGRESS, errno.EALREADY})


@dataclass
class Attempt:
    """Per-operation state shared between a model's pre and post steps."""

    condition: ReadyCondition
    fd: int
    should_block: bool = False
    async_armed: bool = False


class IOModel(Enum):
    BLOCKING = "blocking"
    NONBLOCKING = "nonblocking"
    SELECT = "select"
    SIGNAL = "signal"

    @classmethod
    def parse(cls, name: Optional[str]) -> "IOModel":
        if not name:
            return cls.BLOCKING
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise UnknownModel(name) from None

    def pre_call(self, ctx: "HarnessContext", attempt: Attempt) -> None:
        _PRE_CALL[self](ctx, attempt)

    def post_call(self, ctx: "HarnessContext", attempt: Attempt, result: "RawResult") -> bool:
        return _POST_CALL[self](ctx, attempt, result)

    def abandon(self, ctx: "HarnessContext", attempt: Attempt) -> None:
        undo = _ABANDON.get(self)
        if undo:
            undo(ctx, attempt)


def _set_flag(ctx: "HarnessContext", fd: int, flag: int) -> None:
    try:
        ctx.io.set_flag(fd, flag)
    except OSError as exc:
        ctx.error(f"Error on F_SETFL - {exc.strerror or exc}.")


def _clear_flag(ctx: "HarnessContext", fd: int, flag: int) -> None:
    try:
        ctx.io.clear_flag(fd, flag)
    except OSError as exc:
        ctx.error(f"Error on F_SETFL - {exc.strerror or exc}.")


#
# Blocking
#
def _blocking_pre(ctx: "HarnessContext", attempt: Attempt) -> None:
    # Writes are assumed to find buffer space, so only they are not expected to block.
    attempt.should_block = attempt.condition is not ReadyCondition.WRITE
    ctx.verifier.mark_start()


def _blocking_post(ctx: "HarnessContext", attempt: Attempt, result: "RawResult") -> bool:
    ctx.verifier.check_against(attempt.should_block and result.ok)
    return True


#
# Non-blocking
#
def _nonblocking_pre(ctx: "HarnessContext", attempt: Attempt) -> None:
    ctx.verifier.mark_start()
    _set_flag(ctx, attempt.fd, O_NONBLOCK)
    ctx.verbose("Tick.")


def _nonblocking_post(ctx: "HarnessContext", attempt: Attempt, result: "RawResult") -> bool:
    ctx.verifier.check_against(False)
    _clear_flag(ctx, attempt.fd, O_NONBLOCK)
    done = result.ok or result.error_code not in RETRY_ERRNOS
    if result.value != 0 or result.error_code is not None:
        reason = os.strerror(result.error_code) if result.error_code is not None else "Success"
        ctx.verbose(f"API result is {result.value}, errno is '{reason}'.")
    else:
        ctx.verbose("API result is zero.")
    if not done:
        LOGGER.debug("fd %d not ready (errno %s); retrying", attempt.fd, result.error_code)
        ctx.sleep(ctx.config.retry_delay)
    return done


def _nonblocking_abandon(ctx: "HarnessContext", attempt: Attempt) -> None:
    _clear_flag(ctx, attempt.fd, O_NONBLOCK)


#
# Select
#
def _select_pre(ctx: "HarnessContext", attempt: Attempt) -> None:
    fd = attempt.fd
    while True:
        try:
            readable, writable, exceptional = ctx.io.wait_ready(fd, attempt.condition, ctx.config.poll_interval)
        except OSError as exc:
            ctx.error(f"select() failed - {exc.strerror or exc}.")
            # Stop waiting and let the call itself surface the error.
            break
        if not (readable or writable or exceptional):
            ctx.verbose("Tick.")
        else:
            watched = {
                ReadyCondition.READ: readable,
                ReadyCondition.WRITE: writable,
                ReadyCondition.EXCEPT: exceptional,
            }[attempt.condition]
            if fd not in watched:
                ctx.error("Expected fd bit not set after select() returned.")
            else:
                ctx.verbose("select() exited as expected.")
            break
        if ctx.interrupted:
            break
    ctx.verifier.mark_start()


def _select_post(ctx: "HarnessContext", attempt: Attempt, result: "RawResult") -> bool:
    ctx.verifier.check_against(False)
    return True


#
# Signal driven
#
def _signal_pre(ctx: "HarnessContext", attempt: Attempt) -> None:
    # Sockets are treated as always writable under signal-driven I/O.
    if attempt.condition is ReadyCondition.WRITE:
        ctx.verifier.mark_start()
        return
    fd = attempt.fd
    try:
        ctx.io.install_sigio_handler(ctx.sigio.active_handler)
    except (OSError, ValueError) as exc:
        ctx.error(f"signal() failed - {exc}.")
        ctx.verifier.mark_start()
        return
    attempt.async_armed = True
    try:
        ctx.io.claim_ownership(fd)
    except OSError as exc:
        ctx.error(f"Error on F_SETOWN - {exc.strerror or exc}.")
        ctx.verifier.mark_start()
        return
    ctx.sigio.clear()
    _set_flag(ctx, fd, O_ASYNC)
    while not ctx.sigio.is_set() and not ctx.interrupted:
        if not ctx.sigio.wait(ctx.config.poll_interval):
            ctx.verbose("Tick.")
    ctx.verifier.mark_start()


def _disarm(ctx: "HarnessContext", attempt: Attempt) -> None:
    try:
        ctx.io.install_sigio_handler(ctx.sigio.default_handler)
    except (OSError, ValueError) as exc:
        ctx.error(f"signal() failed - {exc}.")
    _clear_flag(ctx, attempt.fd, O_ASYNC)
    attempt.async_armed = False


def _signal_post(ctx: "HarnessContext", attempt: Attempt, result: "RawResult") -> bool:
    ctx.verifier.check_against(False)
    _disarm(ctx, attempt)
    return True


def _signal_abandon(ctx: "HarnessContext", attempt: Attempt) -> None:
    if attempt.async_armed:
        _disarm(ctx, attempt)


_PRE_CALL: Dict[IOModel, Callable[..., None]] = {
    IOModel.BLOCKING: _blocking_pre,
    IOModel.NONBLOCKING: _nonblocking_pre,
    IOModel.SELECT: _select_pre,
    IOModel.SIGNAL: _signal_pre,
}

_POST_CALL: Dict[IOModel, Callable[..., bool]] = {
    IOModel.BLOCKING: _blocking_post,
    IOModel.NONBLOCKING: _nonblocking_post,
    IOModel.SELECT: _select_post,
    IOModel.SIGNAL: _signal_post,
}

_ABANDON: Dict[IOModel, Callable[..., None]] = {
    IOModel.NONBLOCKING: _nonblocking_abandon,
    IOModel.SIGNAL: _signal_abandon,
}

__all__ = ["IOModel", "Attempt", "ReadyCondition", "RETRY_ERRNOS"]
