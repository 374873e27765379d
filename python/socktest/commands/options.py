"""Socket option commands: setsockopt, getsockopt, multijoin, multileave."""

from __future__ import annotations

import socket
from typing import Dict, List

from .base import Command, report_failure
from ..addresses import membership_request
from ..context import HarnessContext
from ..engine import capture
from ..parser import named_value, parse_int

LEVEL_NAMES: Dict[str, int] = {
    "sol_socket": socket.SOL_SOCKET,
    "ipproto_ip": socket.IPPROTO_IP,
    "ipproto_ipv6": socket.IPPROTO_IPV6,
    "ipproto_tcp": socket.IPPROTO_TCP,
    "ipproto_udp": socket.IPPROTO_UDP,
}

OPTION_NAMES: Dict[str, int] = {
    name.lower(): getattr(socket, name)
    for name in (
        "SO_REUSEADDR",
        "SO_KEEPALIVE",
        "SO_BROADCAST",
        "SO_OOBINLINE",
        "SO_RCVBUF",
        "SO_SNDBUF",
        "SO_RCVLOWAT",
        "SO_SNDLOWAT",
        "SO_ERROR",
        "SO_TYPE",
        "TCP_NODELAY",
        "IPV6_V6ONLY",
        "IPV6_UNICAST_HOPS",
        "IPV6_MULTICAST_HOPS",
        "IPV6_MULTICAST_LOOP",
        "IP_TTL",
    )
    if hasattr(socket, name)
}

INT_SIZE = 4


def _level(text: str) -> int:
    return named_value(text, LEVEL_NAMES)


def _option(text: str) -> int:
    return named_value(text, OPTION_NAMES)


class SetsockoptCommand(Command):
    def __init__(self) -> None:
        super().__init__("setsockopt", "Set an integer socket option", usage="setsockopt level opt -i value")
        parser = self.new_parser()
        parser.add_argument("level", type=_level)
        parser.add_argument("opt", type=_option)
        parser.add_argument("-i", dest="value", type=parse_int, required=True)
        self._parser = parser

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        handle = ctx.registry.current_slot().open_socket()
        result = capture(lambda: handle.setsockopt(args.level, args.opt, args.value))
        if not result.ok:
            return report_failure(ctx, result)
        if ctx.json_output:
            ctx.result("setsockopt", data={"level": args.level, "opt": args.opt, "value": args.value})
        return 0


class GetsockoptCommand(Command):
    def __init__(self) -> None:
        super().__init__("getsockopt", "Read an integer socket option", usage="getsockopt level opt [-i]")
        parser = self.new_parser()
        parser.add_argument("level", type=_level)
        parser.add_argument("opt", type=_option)
        parser.add_argument("-i", dest="integer", action="store_true")
        self._parser = parser

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        handle = ctx.registry.current_slot().open_socket()
        result = capture(lambda: handle.getsockopt(args.level, args.opt))
        if not result.ok:
            return report_failure(ctx, result)
        ctx.result(
            f"Option value = {result.payload}, option length = {INT_SIZE}.",
            data={"level": args.level, "opt": args.opt, "value": result.payload, "length": INT_SIZE},
        )
        return 0


class _MembershipCommand(Command):
    option = 0

    def __init__(self, name: str, description: str) -> None:
        super().__init__(name, description, usage=f"{name} interfaceIndex hostaddress")

    def run(self, ctx: HarnessContext, argv: List[str]) -> int:
        if len(argv) != 2:
            ctx.error(f"Usage:  {self.usage}.")
            return 1
        try:
            interface = parse_int(argv[0])
        except ValueError:
            ctx.error("Invalid interfaceIndex value.")
            return 1
        slot = ctx.registry.current_slot()
        request = membership_request(interface, argv[1], slot)
        handle = slot.open_socket()
        result = capture(lambda: handle.setsockopt(socket.IPPROTO_IPV6, self.option, request))
        if not result.ok:
            return report_failure(ctx, result)
        if ctx.json_output:
            ctx.result(self.name, data={"interface": interface, "group": argv[1]})
        return 0


class MultijoinCommand(_MembershipCommand):
    option = socket.IPV6_JOIN_GROUP

    def __init__(self) -> None:
        super().__init__("multijoin", "Join an IPv6 multicast group")


class MultileaveCommand(_MembershipCommand):
    option = socket.IPV6_LEAVE_GROUP

    def __init__(self) -> None:
        super().__init__("multileave", "Leave an IPv6 multicast group")
