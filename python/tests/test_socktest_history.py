"""Tests for socktest history helpers."""

from __future__ import annotations

from socktest.history import HistoryStore


def test_history_store_loads_existing_file(tmp_path):
    path = tmp_path / "history.txt"
    path.write_text("socket\nbind 0\n", encoding="utf-8")
    store = HistoryStore(str(path), limit=5)
    assert store.snapshot() == ["socket", "bind 0"]
    store.append("listen")
    assert store.snapshot()[-1] == "listen"
    assert "listen" in path.read_text(encoding="utf-8")


def test_history_store_limits_entries(tmp_path):
    path = tmp_path / "history.txt"
    store = HistoryStore(str(path), limit=3)
    for idx in range(5):
        store.append(f"use {idx}")
    assert store.snapshot() == ["use 2", "use 3", "use 4"]
    assert path.read_text(encoding="utf-8").strip().splitlines() == ["use 2", "use 3", "use 4"]


def test_history_store_ignores_duplicate_adjacent_and_blank(tmp_path):
    store = HistoryStore(str(tmp_path / "history.txt"), limit=10)
    store.append("read")
    store.append("read")
    store.append("   ")
    assert store.snapshot() == ["read"]


def test_history_store_without_path_stays_in_memory():
    store = HistoryStore(None)
    store.extend(["write", "read"])
    assert store.snapshot() == ["write", "read"]
