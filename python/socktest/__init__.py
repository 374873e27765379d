"""
socktest package.

An interactive harness for exercising raw socket calls under the blocking,
non-blocking, select() and SIGIO I/O models.  Use ``python -m socktest`` or
the ``socktest`` console script to start the prompt.
"""

from __future__ import annotations

from .cli import main

__all__ = ["main"]
__version__ = "0.1.0"
