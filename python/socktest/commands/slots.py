"""Socket table commands: socket, use, close, status."""

from __future__ import annotations

import socket
from typing import List

from .base import Command, report_failure
from ..context import HarnessContext
from ..engine import capture
from ..output import family_name, render_slot_table, type_name
from ..parser import named_value, parse_int

DOMAIN_NAMES = {"inet": socket.AF_INET, "inet6": socket.AF_INET6}
TYPE_NAMES = {"stream": socket.SOCK_STREAM, "datagram": socket.SOCK_DGRAM, "raw": socket.SOCK_RAW}


def _domain(text: str) -> int:
    return named_value(text, DOMAIN_NAMES)


def _sock_type(text: str) -> int:
    return named_value(text, TYPE_NAMES)


def _protocol(text: str) -> int:
    return named_value(text, {})


class SocketCreateCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "socket",
            "Create a socket in the first free slot",
            usage="socket [-d domain] [-t type] [-p protocol]",
        )
        parser = self.new_parser()
        parser.add_argument("-d", dest="domain", type=_domain, default=socket.AF_INET6, help="inet | inet6 | number")
        parser.add_argument("-t", dest="sock_type", type=_sock_type, default=socket.SOCK_STREAM, help="stream | datagram | raw | number")
        parser.add_argument("-p", dest="protocol", type=_protocol, default=0, help="protocol number")
        self._parser = parser

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        index = ctx.registry.allocate()
        result = capture(lambda: socket.socket(args.domain, args.sock_type, args.protocol), value=lambda sock: sock.fileno())
        if not result.ok:
            return report_failure(ctx, result)
        slot = ctx.registry.bind(index, result.payload, args.domain, args.sock_type, args.protocol)
        ctx.registry.select(index)
        data = {
            "slot": index,
            "fd": result.value,
            "domain": family_name(slot.domain),
            "type": type_name(slot.sock_type),
            "protocol": slot.protocol,
        }
        ctx.verbose(f"Socket {index} created (fd {result.value}).")
        if ctx.json_output:
            ctx.result(f"socket {index}", data=data)
        return 0


class UseCommand(Command):
    def __init__(self) -> None:
        super().__init__("use", "Make another open socket current", usage="use number")

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        if len(argv) != 1:
            ctx.error(f"Usage:  {self.usage}.")
            return 1
        try:
            index = parse_int(argv[0])
        except ValueError:
            ctx.error("Invalid socket number.")
            return 1
        ctx.registry.select(index)
        if ctx.json_output:
            ctx.result(f"use {index}", data={"current": index})
        return 0


class CloseCommand(Command):
    def __init__(self) -> None:
        super().__init__("close", "Close the current socket", usage="close")

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        index = ctx.registry.current
        slot = ctx.registry.current_slot()
        handle = slot.open_socket()
        result = capture(handle.close)
        if not result.ok:
            return report_failure(ctx, result)
        ctx.registry.release(index)
        if ctx.json_output:
            ctx.result(f"closed {index}", data={"closed": index})
        return 0


class StatusCommand(Command):
    def __init__(self) -> None:
        super().__init__("status", "Show the model and the open sockets", aliases=("sockets",), usage="status")

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        registry = ctx.registry
        slots = list(registry.open_slots())
        data = {
            "model": ctx.model.value,
            "current": registry.current,
            "verbose": ctx.config.verbose,
            "sockets": [
                {
                    "slot": slot.index,
                    "fd": slot.fileno(),
                    "domain": family_name(slot.domain),
                    "type": type_name(slot.sock_type),
                    "protocol": slot.protocol,
                }
                for slot in slots
            ],
        }
        if ctx.json_output:
            ctx.result("status", data=data)
            return 0
        print(f"Model: {ctx.model.value}  current: {registry.current}  open: {len(slots)}/{registry.capacity}")
        print(render_slot_table(slots, current=registry.current))
        return 0
