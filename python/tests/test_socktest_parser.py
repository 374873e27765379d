"""Tests for socktest command-line parsing helpers."""

from __future__ import annotations

import pytest

from socktest.parser import named_value, parse_int, split_command


def test_split_command_lowercases_and_accepts_extra_separators():
    assert split_command("SetSockOpt SOL_SOCKET, SO_REUSEADDR -i=1") == [
        "setsockopt",
        "sol_socket",
        "so_reuseaddr",
        "-i",
        "1",
    ]


def test_split_command_handles_quotes_and_blank_lines():
    assert split_command('bind 80 "::1"') == ["bind", "80", "::1"]
    assert split_command("") == []


def test_split_command_reports_unbalanced_quotes():
    tokens = split_command('connect 80 "host')
    assert tokens[-1].startswith("#parse-error")


@pytest.mark.parametrize(
    "text, expected",
    [("10", 10), ("0x1f", 31), ("010", 8), ("-5", -5), ("0", 0), ("+7", 7)],
)
def test_parse_int_follows_c_integer_rules(text, expected):
    assert parse_int(text) == expected


def test_parse_int_rejects_garbage():
    with pytest.raises(ValueError):
        parse_int("twelve")


def test_named_value_prefers_names_then_numbers():
    names = {"oob": 1}
    assert named_value("OOB", names) == 1
    assert named_value("0x4", names) == 4
    with pytest.raises(ValueError) as excinfo:
        named_value("peek", names)
    assert "not a recognized option value" in str(excinfo.value)
