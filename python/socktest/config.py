"""Harness configuration."""

from __future__ import annotations

from dataclasses import dataclass

MAX_SOCKETS = 10
BLOCK_THRESHOLD_S = 1.0
BUFFER_SIZE = 100
MAX_DATA_DISPLAY = 64


@dataclass
class HarnessConfig:
    verbose: bool = False
    json_output: bool = False
    # Elapsed time above which a call is classified as having blocked.
    block_threshold: float = BLOCK_THRESHOLD_S
    retry_delay: float = 1.0
    poll_interval: float = 1.0
    max_sockets: int = MAX_SOCKETS
    buffer_size: int = BUFFER_SIZE
    max_data_display: int = MAX_DATA_DISPLAY

    def __post_init__(self) -> None:
        if self.block_threshold <= 0:
            raise ValueError("block_threshold must be positive")
        if self.max_sockets < 1:
            raise ValueError("max_sockets must be at least 1")
