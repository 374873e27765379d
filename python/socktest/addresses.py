"""Host address resolution for commands that take ``port [host]`` arguments."""

from __future__ import annotations

import socket
import struct
from typing import Any, Tuple

from .errors import AddressError
from .registry import SocketSlot


def resolve(host: str, port: int, slot: SocketSlot) -> Tuple[Any, ...]:
    """Resolve ``host`` with the slot's domain/type/protocol and plug in ``port``."""
    try:
        infos = socket.getaddrinfo(host, None, slot.domain, slot.sock_type, slot.protocol)
    except socket.gaierror as exc:
        raise AddressError(f"{host} is not a valid address:  {exc.strerror or exc}.") from exc
    if not infos:
        raise AddressError(f"{host} is not a valid address:  no addresses returned.")
    sockaddr = infos[0][4]
    return (sockaddr[0], port) + tuple(sockaddr[2:])


def wildcard(port: int, slot: SocketSlot) -> Tuple[Any, ...]:
    """The any-address for the slot's domain."""
    if slot.domain == socket.AF_INET6:
        return ("::", port, 0, 0)
    return ("0.0.0.0", port)


def membership_request(interface_index: int, group: str, slot: SocketSlot) -> bytes:
    """Pack an ``ipv6_mreq`` for ``IPV6_JOIN_GROUP`` / ``IPV6_LEAVE_GROUP``."""
    try:
        infos = socket.getaddrinfo(group, None, socket.AF_INET6, slot.sock_type, slot.protocol)
    except socket.gaierror as exc:
        raise AddressError(f"{group} is not a valid address:  {exc.strerror or exc}.") from exc
    packed = socket.inet_pton(socket.AF_INET6, infos[0][4][0].split("%", 1)[0])
    return packed + struct.pack("@I", interface_index)
