"""Completion tests for socktest."""

from __future__ import annotations

import socket

from prompt_toolkit.document import Document

from socktest.commands import build_registry
from socktest.completion import HarnessCompleter


def _complete(ctx, text: str):
    completer = HarnessCompleter(ctx, build_registry())
    doc = Document(text, cursor_position=len(text))
    return [c.text for c in completer.get_completions(doc, None)]


def test_command_names_and_aliases(make_ctx):
    ctx = make_ctx()
    assert "getsockname" in _complete(ctx, "get")
    assert "getsockopt" in _complete(ctx, "get")
    assert _complete(ctx, "ex") == ["exit"]


def test_model_names(make_ctx):
    ctx = make_ctx()
    assert _complete(ctx, "model s") == ["select", "signal"]
    assert _complete(ctx, "model ") == ["blocking", "nonblocking", "select", "signal"]


def test_flag_values_for_socket(make_ctx):
    ctx = make_ctx()
    assert _complete(ctx, "socket -d ") == ["inet", "inet6"]
    assert _complete(ctx, "socket -d inet -t d") == ["datagram"]


def test_positional_values_for_socket_options(make_ctx):
    ctx = make_ctx()
    assert "sol_socket" in _complete(ctx, "setsockopt s")
    assert "so_reuseaddr" in _complete(ctx, "getsockopt sol_socket so_re")
    assert _complete(ctx, "shutdown shut_r") == ["shut_rd", "shut_rdwr"]


def test_use_offers_open_slots(make_ctx):
    ctx = make_ctx()
    for _ in range(2):
        ctx.registry.bind(ctx.registry.allocate(), socket.socket(socket.AF_INET, socket.SOCK_DGRAM))
    assert _complete(ctx, "use ") == ["0", "1"]


def test_unknown_command_has_no_value_completions(make_ctx):
    ctx = make_ctx()
    assert _complete(ctx, "frobnicate x") == []
