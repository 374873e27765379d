"""Tests for the socket slot table."""

from __future__ import annotations

import socket

import pytest

from socktest.errors import AllSlotsBusy, SlotNotOpen
from socktest.registry import SocketRegistry, SocketSlot


@pytest.fixture
def registry():
    table = SocketRegistry(10)
    yield table
    table.close_all()


def _open(table: SocketRegistry) -> int:
    index = table.allocate()
    table.bind(index, socket.socket(socket.AF_INET, socket.SOCK_DGRAM))
    return index


def test_allocate_returns_first_free_slot_without_reserving(registry):
    assert registry.allocate() == 0
    assert registry.allocate() == 0
    assert len(registry) == 0


def test_eleventh_socket_reports_all_busy(registry):
    indices = [_open(registry) for _ in range(10)]
    assert indices == list(range(10))
    with pytest.raises(AllSlotsBusy) as excinfo:
        registry.allocate()
    assert str(excinfo.value) == "All 10 sockets are in use."


def test_released_slot_is_reused_first(registry):
    for _ in range(4):
        _open(registry)
    handle = registry.release(2)
    assert handle is not None
    handle.close()
    assert registry.allocate() == 2
    assert [slot.index for slot in registry.open_slots()] == [0, 1, 3]


def test_bind_records_socket_parameters(registry):
    index = registry.allocate()
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    slot = registry.bind(index, sock)
    assert slot.domain == socket.AF_INET
    assert slot.sock_type == socket.SOCK_DGRAM
    assert slot.fileno() == sock.fileno()


def test_select_rejects_unused_and_out_of_range(registry):
    _open(registry)
    registry.select(0)
    with pytest.raises(SlotNotOpen) as excinfo:
        registry.select(3)
    assert str(excinfo.value) == "Socket number 3 not open."
    with pytest.raises(SlotNotOpen):
        registry.select(10)
    with pytest.raises(SlotNotOpen):
        registry.select(-1)
    assert registry.current == 0


def test_current_slot_requires_open_socket(registry):
    with pytest.raises(SlotNotOpen):
        registry.current_slot()


def test_close_all_empties_table(registry):
    for _ in range(3):
        _open(registry)
    assert registry.close_all() == []
    assert len(registry) == 0


def test_unused_slot_has_no_socket():
    slot = SocketSlot(1)
    with pytest.raises(SlotNotOpen) as excinfo:
        slot.open_socket()
    assert str(excinfo.value) == "Socket number 1 not open."
    with pytest.raises(SlotNotOpen):
        slot.fileno()
