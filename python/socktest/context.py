"""Shared harness state handed to every command."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from .config import HarnessConfig
from .engine import ExecutionEngine
from .interrupts import InterruptFlag
from .models import IOModel
from .osio import PosixIO, SigioChannel
from .output import emit_error, emit_result, emit_verbose, emit_warning
from .registry import SocketRegistry
from .verifier import BlockingVerifier

LOGGER = logging.getLogger("socktest.context")


@dataclass
class HarnessContext:
    """Holds the process-wide harness state: active model, sockets and flags."""

    config: HarnessConfig = field(default_factory=HarnessConfig)
    model: IOModel = IOModel.BLOCKING
    io: PosixIO = field(default_factory=PosixIO)
    interrupt: InterruptFlag = field(default_factory=InterruptFlag)
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], None] = time.sleep
    registry: SocketRegistry = field(init=False, repr=False)
    verifier: BlockingVerifier = field(init=False, repr=False)
    sigio: SigioChannel = field(init=False, repr=False)
    engine: ExecutionEngine = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.registry = SocketRegistry(self.config.max_sockets)
        self.verifier = BlockingVerifier(
            threshold=self.config.block_threshold,
            clock=self.clock,
            on_mismatch=self.warning,
            on_agreement=self.verbose,
        )
        self.sigio = SigioChannel(notice=self.verbose, on_unexpected=self.error, sleep=self.sleep)
        self.engine = ExecutionEngine(self)

    @property
    def json_output(self) -> bool:
        return self.config.json_output

    @property
    def interrupted(self) -> bool:
        return self.interrupt.is_set()

    def set_model(self, name: Optional[str]) -> IOModel:
        self.model = IOModel.parse(name)
        LOGGER.debug("model set to %s", self.model.value)
        return self.model

    def prompt(self) -> str:
        return f"{self.model.value} {self.registry.current}:  "

    def install_default_sigio(self) -> None:
        """Route stray SIGIO to the error reporter instead of the default action."""
        try:
            self.io.install_sigio_handler(self.sigio.default_handler)
        except (OSError, ValueError) as exc:
            LOGGER.debug("default SIGIO handler not installed: %s", exc)

    def shutdown(self) -> None:
        for index, exc in self.registry.close_all():
            LOGGER.warning("closing socket %d failed: %s", index, exc)

    def result(self, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
        emit_result(self, message=message, data=data)

    def error(self, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
        emit_error(self, message=message, data=data)

    def warning(self, message: str) -> None:
        emit_warning(self, message=message)

    def verbose(self, message: str) -> None:
        emit_verbose(self, message)
