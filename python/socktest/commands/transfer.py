"""Data transfer commands: read, write, recvmsg, sendmsg."""

from __future__ import annotations

import os
import socket
from typing import List, Optional

from .base import Command, report_failure
from ..addresses import resolve
from ..context import HarnessContext
from ..engine import RawResult, capture
from ..models import ReadyCondition
from ..output import describe_address, format_hex_bytes
from ..parser import named_value, parse_int

FLAG_NAMES = {"oob": socket.MSG_OOB}
FILL_BYTE = b"*"


def _flags(text: str) -> int:
    return named_value(text, FLAG_NAMES)


def _show_received(ctx: HarnessContext, data: bytes, *, source: Optional[str] = None) -> None:
    if not data:
        ctx.verbose("End of file returned.")
    else:
        ctx.verbose(f"{len(data)} bytes read.")
    if source is not None:
        ctx.verbose(f"Source address = {source}.")
    shown = data[: ctx.config.max_data_display]
    ctx.verbose(f"First {len(shown)} bytes received are: {format_hex_bytes(shown, ctx.config.max_data_display)}")


def _show_sent(ctx: HarnessContext, result: RawResult) -> None:
    if result.value == 0:
        ctx.verbose("Zero count returned.")
    else:
        ctx.verbose(f"{result.value} bytes written.")
    if ctx.json_output:
        ctx.result("written", data={"bytes": result.value})


class ReadCommand(Command):
    def __init__(self) -> None:
        super().__init__("read", "read() up to one buffer from the current socket", usage="read")

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        fd = ctx.registry.current_slot().fileno()
        size = ctx.config.buffer_size
        result = ctx.engine.perform(ReadyCondition.READ, lambda: capture(lambda: os.read(fd, size), value=len))
        if result is None:
            ctx.verbose("read abandoned.")
            return 1
        if not result.ok:
            return report_failure(ctx, result)
        _show_received(ctx, result.payload)
        if ctx.json_output:
            ctx.result("read", data={"bytes": result.value, "data": format_hex_bytes(result.payload, ctx.config.max_data_display)})
        return 0


class WriteCommand(Command):
    def __init__(self) -> None:
        super().__init__("write", "write() one buffer of '*' to the current socket", usage="write")

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        fd = ctx.registry.current_slot().fileno()
        buffer = FILL_BYTE * ctx.config.buffer_size
        result = ctx.engine.perform(ReadyCondition.WRITE, lambda: capture(lambda: os.write(fd, buffer)))
        if result is None:
            ctx.verbose("write abandoned.")
            return 1
        if not result.ok:
            return report_failure(ctx, result)
        _show_sent(ctx, result)
        return 0


class RecvmsgCommand(Command):
    def __init__(self) -> None:
        super().__init__("recvmsg", "recvmsg() from the current socket", usage="recvmsg [-f OOB]")
        parser = self.new_parser()
        parser.add_argument("-f", dest="flags", type=_flags, default=0, help="oob | number")
        self._parser = parser

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        slot = ctx.registry.current_slot()
        handle = slot.open_socket()
        size = ctx.config.buffer_size
        result = ctx.engine.perform(
            ReadyCondition.READ,
            lambda: capture(lambda: handle.recvmsg(size, 0, args.flags), value=lambda msg: len(msg[0])),
        )
        if result is None:
            ctx.verbose("recvmsg abandoned.")
            return 1
        if not result.ok:
            return report_failure(ctx, result)
        data, _ancdata, msg_flags, source = result.payload
        source_host = None
        if slot.sock_type != socket.SOCK_STREAM:
            source_host, _port = describe_address(source)
        _show_received(ctx, data, source=source_host)
        if ctx.json_output:
            host, port = describe_address(source)
            ctx.result(
                "recvmsg",
                data={"bytes": result.value, "flags": msg_flags, "source": host, "port": port},
            )
        if slot.sock_type == socket.SOCK_STREAM:
            try:
                at_mark = ctx.io.at_mark(slot.fileno())
            except OSError as exc:
                ctx.error(f"Error in ioctl(SIOCATMARK) call - {exc.strerror or exc}.")
                return 2
            if at_mark:
                ctx.result("SIOCATMARK returned true.")
        return 0


class SendmsgCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "sendmsg",
            "sendmsg() one buffer of '*' from the current socket",
            usage="sendmsg [-a hostaddress port] [-f OOB]",
        )
        parser = self.new_parser()
        parser.add_argument("-a", dest="address", nargs=2, metavar=("HOST", "PORT"), help="destination")
        parser.add_argument("-f", dest="flags", type=_flags, default=0, help="oob | number")
        self._parser = parser

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        slot = ctx.registry.current_slot()
        handle = slot.open_socket()
        destination = None
        if args.address:
            host, port_text = args.address
            try:
                port = parse_int(port_text)
            except ValueError:
                ctx.error("Invalid port number.")
                return 1
            destination = resolve(host, port, slot)
        buffers = [FILL_BYTE * ctx.config.buffer_size]

        def send() -> int:
            if destination is None:
                return handle.sendmsg(buffers, [], args.flags)
            return handle.sendmsg(buffers, [], args.flags, destination)

        result = ctx.engine.perform(ReadyCondition.WRITE, lambda: capture(send))
        if result is None:
            ctx.verbose("sendmsg abandoned.")
            return 1
        if not result.ok:
            return report_failure(ctx, result)
        _show_sent(ctx, result)
        return 0
