"""Connection setup commands: bind, listen, connect, accept, shutdown."""

from __future__ import annotations

import socket
from typing import List

from .base import Command, report_failure
from ..addresses import resolve, wildcard
from ..context import HarnessContext
from ..engine import capture
from ..models import ReadyCondition
from ..output import describe_address
from ..parser import named_value, parse_int

SHUTDOWN_NAMES = {"shut_rd": socket.SHUT_RD, "shut_wr": socket.SHUT_WR, "shut_rdwr": socket.SHUT_RDWR}


class BindCommand(Command):
    def __init__(self) -> None:
        super().__init__("bind", "Bind the current socket to a local address", usage="bind portnumber [ hostaddress ]")

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        if not 1 <= len(argv) <= 2:
            ctx.error(f"Usage:  {self.usage}.")
            return 1
        try:
            port = parse_int(argv[0])
        except ValueError:
            ctx.error("Invalid port number.")
            return 1
        slot = ctx.registry.current_slot()
        address = resolve(argv[1], port, slot) if len(argv) == 2 else wildcard(port, slot)
        handle = slot.open_socket()
        result = capture(lambda: handle.bind(address))
        if not result.ok:
            return report_failure(ctx, result)
        if ctx.json_output:
            ctx.result("bound", data={"address": address[0], "port": port})
        return 0


class ConnectCommand(Command):
    def __init__(self) -> None:
        super().__init__("connect", "Connect the current socket", usage="connect portnumber hostaddress")

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        if len(argv) != 2:
            ctx.error(f"Usage:  {self.usage}.")
            return 1
        try:
            port = parse_int(argv[0])
        except ValueError:
            ctx.error("Invalid port number.")
            return 1
        slot = ctx.registry.current_slot()
        address = resolve(argv[1], port, slot)
        handle = slot.open_socket()
        result = ctx.engine.perform(ReadyCondition.READ, lambda: capture(lambda: handle.connect(address)))
        if result is None:
            ctx.verbose("connect abandoned.")
            return 1
        if not result.ok:
            return report_failure(ctx, result)
        if ctx.json_output:
            ctx.result("connected", data={"address": address[0], "port": port})
        return 0


class ListenCommand(Command):
    def __init__(self) -> None:
        super().__init__("listen", "Listen on the current socket (backlog 1)", usage="listen [backlogCount]")

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        if len(argv) > 1:
            ctx.error(f"Usage:  {self.usage}.")
            return 1
        backlog = 1
        if argv:
            try:
                backlog = parse_int(argv[0])
            except ValueError:
                ctx.error("Invalid backlog count.")
                return 1
        handle = ctx.registry.current_slot().open_socket()
        result = capture(lambda: handle.listen(backlog))
        if not result.ok:
            return report_failure(ctx, result)
        if ctx.json_output:
            ctx.result("listening", data={"backlog": backlog})
        return 0


class AcceptCommand(Command):
    def __init__(self) -> None:
        super().__init__("accept", "Accept a connection into a new slot", usage="accept")

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        registry = ctx.registry
        listener = registry.current_slot()
        new_index = registry.allocate()
        handle = listener.open_socket()
        result = ctx.engine.perform(
            ReadyCondition.READ,
            lambda: capture(handle.accept, value=lambda pair: pair[0].fileno()),
        )
        if result is None:
            ctx.verbose("accept abandoned.")
            return 1
        if not result.ok:
            return report_failure(ctx, result)
        conn, peer = result.payload
        registry.bind(new_index, conn, listener.domain, listener.sock_type, listener.protocol)
        registry.select(new_index)
        host, port = describe_address(peer)
        ctx.verbose(f"Connection from {host} port {port} accepted into socket {new_index}.")
        if ctx.json_output:
            ctx.result("accepted", data={"slot": new_index, "fd": result.value, "peer": host, "port": port})
        return 0


class ShutdownCommand(Command):
    def __init__(self) -> None:
        super().__init__("shutdown", "Shut down one or both directions", usage="shutdown [SHUT_RD | SHUT_WR | SHUT_RDWR]")

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        if len(argv) != 1:
            ctx.error(f"Usage:  {self.usage}.")
            return 1
        try:
            how = named_value(argv[0], SHUTDOWN_NAMES)
        except ValueError:
            ctx.error("Invalid shutdown option value.")
            return 1
        handle = ctx.registry.current_slot().open_socket()
        result = capture(lambda: handle.shutdown(how))
        if not result.ok:
            return report_failure(ctx, result)
        if ctx.json_output:
            ctx.result("shutdown", data={"how": how})
        return 0
