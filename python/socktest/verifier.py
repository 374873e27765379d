"""Timing heuristic that infers whether a socket call blocked.

The verifier records a timestamp immediately before a call and compares it
with one taken immediately after.  Anything slower than the threshold is
treated as a block.  This is a heuristic: a slow completion of a call that
never blocked (a loaded host, a paging storm) is reported as a block.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .config import BLOCK_THRESHOLD_S

LOGGER = logging.getLogger("socktest.verifier")

Reporter = Callable[[str], None]


@dataclass(frozen=True)
class BlockingVerdict:
    blocked: bool
    expected: bool
    elapsed: float

    @property
    def mismatch(self) -> bool:
        return self.blocked != self.expected

    def describe(self) -> str:
        return f"API {'did' if self.blocked else 'did not'} block."


class BlockingVerifier:
    def __init__(
        self,
        *,
        threshold: float = BLOCK_THRESHOLD_S,
        clock: Callable[[], float] = time.monotonic,
        on_mismatch: Optional[Reporter] = None,
        on_agreement: Optional[Reporter] = None,
    ) -> None:
        self.threshold = threshold
        self._clock = clock
        self._on_mismatch = on_mismatch
        self._on_agreement = on_agreement
        self._start: Optional[float] = None
        self.last_verdict: Optional[BlockingVerdict] = None

    def mark_start(self) -> None:
        self._start = self._clock()

    def check_against(self, expected_to_block: bool) -> BlockingVerdict:
        now = self._clock()
        start = now if self._start is None else self._start
        elapsed = now - start
        verdict = BlockingVerdict(elapsed > self.threshold, bool(expected_to_block), elapsed)
        self._start = None
        self.last_verdict = verdict
        if verdict.mismatch:
            LOGGER.warning("blocking mismatch: %s (elapsed %.6fs, expected block=%s)", verdict.describe(), elapsed, verdict.expected)
            if self._on_mismatch:
                self._on_mismatch(verdict.describe())
        elif self._on_agreement:
            self._on_agreement(verdict.describe())
        return verdict
