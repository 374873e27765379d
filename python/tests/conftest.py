"""Shared fixtures for the socktest tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
PYTHON_SRC = REPO_ROOT / "python"
if str(PYTHON_SRC) not in sys.path:
    sys.path.append(str(PYTHON_SRC))

from socktest.config import HarnessConfig
from socktest.context import HarnessContext
from socktest.models import IOModel


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSleep:
    """Records requested sleeps and runs an optional hook on each one."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.calls: List[float] = []
        self.hook: Optional[Callable[[int], None]] = None

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.clock.advance(seconds)
        if self.hook:
            self.hook(len(self.calls))


class RecordingIO:
    """Stand-in for PosixIO that logs every call and replays scripted select results."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []
        self.ready: List[Any] = []
        self.on_wait: Optional[Callable[[int], None]] = None
        self.mark = False
        self._waits = 0

    def get_flags(self, fd: int) -> int:
        return 0

    def set_flag(self, fd: int, flag: int) -> None:
        self.calls.append(("set_flag", fd, flag))

    def clear_flag(self, fd: int, flag: int) -> None:
        self.calls.append(("clear_flag", fd, flag))

    def claim_ownership(self, fd: int) -> None:
        self.calls.append(("claim_ownership", fd))

    def wait_ready(self, fd: int, condition, timeout: float):
        self._waits += 1
        self.calls.append(("wait_ready", fd, condition, timeout))
        if self.on_wait:
            self.on_wait(self._waits)
        outcome = self.ready.pop(0) if self.ready else ([], [], [])
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def install_sigio_handler(self, handler) -> None:
        self.calls.append(("install_sigio_handler", handler))

    def at_mark(self, fd: int) -> bool:
        self.calls.append(("at_mark", fd))
        return self.mark

    def names(self) -> List[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeper(clock: FakeClock) -> FakeSleep:
    return FakeSleep(clock)


@pytest.fixture
def recording_io() -> RecordingIO:
    return RecordingIO()


@pytest.fixture
def make_ctx(clock, sleeper, recording_io):
    """Build a context wired to the fakes; pass ``real_io=True`` for real fcntl/select."""
    created: List[HarnessContext] = []

    def factory(
        model: IOModel = IOModel.BLOCKING,
        *,
        verbose: bool = True,
        json_output: bool = False,
        real_io: bool = False,
        real_time: bool = False,
    ) -> HarnessContext:
        config = HarnessConfig(verbose=verbose, json_output=json_output)
        kwargs = {}
        if not real_io:
            kwargs["io"] = recording_io
        if not real_time:
            kwargs["clock"] = clock
            kwargs["sleep"] = sleeper
        ctx = HarnessContext(config=config, model=model, **kwargs)
        created.append(ctx)
        return ctx

    yield factory
    for ctx in created:
        ctx.shutdown()
