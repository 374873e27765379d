"""Output helpers for socktest."""

from __future__ import annotations

import json
import socket
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Optional

from tabulate import tabulate

if TYPE_CHECKING:  # pragma: no cover
    from .context import HarnessContext
    from .registry import SocketSlot

_FAMILY_NAMES = {socket.AF_INET: "inet", socket.AF_INET6: "inet6"}
_TYPE_NAMES = {socket.SOCK_STREAM: "stream", socket.SOCK_DGRAM: "datagram", socket.SOCK_RAW: "raw"}


def _json_dump(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, indent=2, sort_keys=True, default=str)


def emit_result(ctx: "HarnessContext", *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit a successful command result."""
    if ctx.json_output:
        payload: Dict[str, Any] = {"status": "ok"}
        if data is not None:
            payload["result"] = data
        else:
            payload["message"] = message
        print(_json_dump(payload))
    else:
        print(message)


def emit_error(ctx: "HarnessContext", *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit an error message respecting JSON mode."""
    payload: Dict[str, Any] = {"status": "error", "error": message}
    if data:
        payload["details"] = dict(data)
    if ctx.json_output:
        print(_json_dump(payload))
    else:
        print(f"error: {message}")


def emit_warning(ctx: "HarnessContext", *, message: str) -> None:
    if ctx.json_output:
        print(_json_dump({"status": "warning", "warning": message}))
    else:
        print(f"warning: {message}")


def emit_verbose(ctx: "HarnessContext", message: str) -> None:
    """Trace output shown only with ``--verbose``."""
    if not ctx.config.verbose:
        return
    if ctx.json_output:
        print(_json_dump({"status": "trace", "message": message}))
    else:
        print(message)


def format_hex_bytes(data: bytes, limit: int) -> str:
    return " ".join(f"{byte:02x}" for byte in data[:limit])


def family_name(family: int) -> str:
    return _FAMILY_NAMES.get(family, str(int(family)))


def type_name(sock_type: int) -> str:
    return _TYPE_NAMES.get(sock_type, str(int(sock_type)))


def describe_address(address: Any) -> tuple[str, int]:
    """Split a socket-module address tuple into (host, port)."""
    if isinstance(address, tuple) and len(address) >= 2:
        return str(address[0]), int(address[1])
    if address in (None, b"", ""):
        return "-", 0
    return str(address), 0


def render_slot_table(slots: Iterable["SocketSlot"], *, current: Optional[int] = None) -> str:
    rows = []
    for slot in slots:
        marker = "*" if slot.index == current else ""
        rows.append(
            [
                marker,
                slot.index,
                slot.fileno(),
                family_name(slot.domain),
                type_name(slot.sock_type),
                slot.protocol,
            ]
        )
    if not rows:
        return "  sockets: (none)"
    return tabulate(rows, headers=["", "slot", "fd", "domain", "type", "protocol"], tablefmt="github")


__all__ = [
    "emit_result",
    "emit_error",
    "emit_warning",
    "emit_verbose",
    "format_hex_bytes",
    "family_name",
    "type_name",
    "describe_address",
    "render_slot_table",
]
