"""getsockname / getpeername commands."""

from __future__ import annotations

import socket
from typing import List

from .base import Command, report_failure
from ..context import HarnessContext
from ..engine import capture
from ..output import describe_address

SOCKADDR_LENGTHS = {socket.AF_INET: 16, socket.AF_INET6: 28}


class _NameCommand(Command):
    def __init__(self, name: str, description: str) -> None:
        super().__init__(name, description, usage=name)

    def lookup(self, handle: socket.socket):
        raise NotImplementedError

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        handle = ctx.registry.current_slot().open_socket()
        result = capture(lambda: self.lookup(handle))
        if not result.ok:
            return report_failure(ctx, result)
        host, port = describe_address(result.payload)
        length = SOCKADDR_LENGTHS.get(handle.family, 0)
        ctx.result(
            f"Address = {host}, port = {port}, sockaddr length = {length}.",
            data={"address": host, "port": port, "length": length},
        )
        return 0


class GetsocknameCommand(_NameCommand):
    def __init__(self) -> None:
        super().__init__("getsockname", "Show the local address of the current socket")

    def lookup(self, handle: socket.socket):
        return handle.getsockname()


class GetpeernameCommand(_NameCommand):
    def __init__(self) -> None:
        super().__init__("getpeername", "Show the peer address of the current socket")

    def lookup(self, handle: socket.socket):
        return handle.getpeername()
